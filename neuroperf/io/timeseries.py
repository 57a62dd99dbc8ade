"""Tab-separated time-series files of recorded potentials."""

from pathlib import Path

from neuroperf.models.params import Regime
from neuroperf.utils import get_logger

LOG = get_logger("io.timeseries")

FLOAT_FORMAT = "%.8e"

REGIME_SUFFIX = {
    Regime.BURSTING: "bst",
    Regime.EXCITABLE: "exc",
}


def free_path(path):
    """Return path, or the first of stem_1.ext, stem_2.ext, ... not taken."""
    path = Path(path)
    candidate = path
    i = 0
    while candidate.exists():
        i += 1
        candidate = path.with_name(f"{path.stem}_{i}{path.suffix}")
    return candidate


def timeseries_filename(name, regime):
    """File name <name>_<bst|exc>.dat of a model's recording."""
    return f"{name}_{REGIME_SUFFIX[Regime.coerce(regime)]}.dat"


def write_timeseries(result, directory, regime):
    """Write a SimulationResult as a tab-separated table.

    Parameters
    ----------
    result : SimulationResult
        Recorded run.
    directory : str or Path
        Output directory, created if missing.
    regime : Regime or str
        Regime of the run; selects the file suffix.

    Returns
    -------
    Path
        The file written. An existing file is never overwritten.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = free_path(directory / timeseries_filename(result.name, regime))

    frame = result.to_frame()
    with open(path, "w") as f:
        f.write("#" + "\t".join(frame.columns) + "\n")
        frame.to_csv(f, sep="\t", float_format=FLOAT_FORMAT,
                     header=False, index=False)

    LOG.info("Wrote %d samples of %s to %s", result.n_steps, result.name, path)
    return path
