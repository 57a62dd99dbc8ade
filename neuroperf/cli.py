"""Command line of the benchmark.

    neuroperf --n-samples 20 --total-time 500 -N 5 --models ktz_tanh rulkov
    python -m neuroperf --config bench.yaml -w --output-dir data

Options given on the command line override the YAML configuration file,
which overrides the defaults of BenchConfig.
"""

import argparse
import sys

import pandas as pd

from neuroperf import __version__
from neuroperf.bench.experiment import run_experiment
from neuroperf.config import BenchConfig, load_config
from neuroperf.utils import LEVELS, get_logger, set_log_level

LOG = get_logger("cli")


def build_parser():
    parser = argparse.ArgumentParser(
        prog="neuroperf",
        description="Measure the computational cost of neuron models "
                    "and gap-junction networks")

    parser.add_argument("-c", "--config", default=None,
                        help="YAML file with BenchConfig fields.")
    parser.add_argument("--n-samples", dest="n_samples", type=int, default=None,
                        help="Repetitions of every measurement (default 100).")
    parser.add_argument("--total-time", dest="total_time", type=float, default=None,
                        help="Model time in ms simulated per sample (default 1000).")
    parser.add_argument("--max-time", dest="max_time", type=float, default=None,
                        help="Budget of a fixed-point search, in model time "
                             "units (default 100000).")
    parser.add_argument("--tolerance", type=float, default=None,
                        help="Convergence threshold on the change of potential "
                             "per step (default 1e-8).")
    parser.add_argument("-N", "--n-neurons", dest="n_neurons", type=int, default=None,
                        help="Number of neurons in each network (default 3).")
    parser.add_argument("-w", "--write-potentials", dest="write_potentials",
                        action="store_true", default=None,
                        help="Write the membrane potentials of every model "
                             "to <name>_<bst|exc>.dat files.")
    parser.add_argument("-o", "--output-dir", dest="output_dir", default=None,
                        help="Directory of the potential files (default .).")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed of the random source.")
    parser.add_argument("-m", "--models", nargs="+", default=None,
                        help="Restrict the run to these variants, e.g. "
                             "ktz_tanh rulkov hodgkin_huxley.")
    parser.add_argument("--results", default=None,
                        help="Also save the result table to this CSV file.")
    parser.add_argument("--log-level", dest="log_level", default="INFO",
                        choices=list(LEVELS),
                        help="Minimum level of log messages.")
    parser.add_argument("--version", action="version",
                        version=f"%(prog)s {__version__}")
    return parser


def config_from_args(args):
    """BenchConfig from parsed arguments layered over the optional file."""
    config = load_config(args.config) if args.config else BenchConfig()
    return config.updated(
        n_samples=args.n_samples,
        total_time=args.total_time,
        max_time=args.max_time,
        tolerance=args.tolerance,
        n_neurons=args.n_neurons,
        write_potentials=args.write_potentials,
        output_dir=args.output_dir,
        seed=args.seed,
        models=args.models,
    )


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    set_log_level(args.log_level)

    try:
        config = config_from_args(args)
    except (ValueError, OSError) as err:
        parser.error(str(err))

    LOG.info("Configuration: %s", config.to_dict())
    results = run_experiment(config)

    with pd.option_context("display.max_rows", None, "display.width", 120):
        print(results.to_string(index=False))
    if args.results:
        results.to_csv(args.results, index=False)
        LOG.info("Saved results to %s", args.results)
    return 0


if __name__ == "__main__":
    sys.exit(main())
