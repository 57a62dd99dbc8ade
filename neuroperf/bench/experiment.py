"""The benchmark experiment: every variant, alone and in networks.

The experiment runs in four phases, each on a freshly built ModelSuite:
  1. cost of one timestep of every single neuron (bursting),
  2. timesteps and CPU time to reach the fixed point (excitable),
  3. cost of one timestep of linear networks (excitable, propagation),
  4. cost of one timestep of mean-field networks (bursting, synchrony).
GLExp and LIF have no convergence measurement: the first fires
stochastically and the second never stops firing.
"""

import pandas as pd

from neuroperf.bench.timing import measure_convergence, measure_timestep_cost
from neuroperf.config import BenchConfig, coupling_for
from neuroperf.io.timeseries import write_timeseries
from neuroperf.models.neurons import create_neuron
from neuroperf.models.params import CONCRETE_KINDS, ModelKind, Regime
from neuroperf.network.network import NetworkModel
from neuroperf.network.topology import Topology
from neuroperf.simulation.analysis import summarize
from neuroperf.simulation.engine import run_transient, simulate
from neuroperf.utils import get_logger

LOG = get_logger("bench.experiment")


# Variants driven in timestep measurements; HODGKIN_HUXLEY follows the regime.
DRIVEN_KINDS = (
    ModelKind.KTZ_TANH,
    ModelKind.KTZ_LOG,
    ModelKind.GLEXP,
    ModelKind.LIF,
    ModelKind.IZHIKEVICH,
    ModelKind.RULKOV,
    ModelKind.HODGKIN_HUXLEY,
)

CONVERGENCE_KINDS = (
    ModelKind.KTZ_TANH,
    ModelKind.KTZ_LOG,
    ModelKind.IZHIKEVICH,
    ModelKind.RULKOV,
    ModelKind.HODGKIN_HUXLEY,
)

SKIPPED_CONVERGENCE = {
    ModelKind.GLEXP: "it fires stochastically",
    ModelKind.LIF: "it fires constantly",
}

RESULT_COLUMNS = ["phase", "model", "metric", "mean", "std", "sem", "n"]

_HH_FAMILY = {ModelKind.HODGKIN_HUXLEY, ModelKind.HH_STD, ModelKind.HH_LEECH}


def _selected(config, kind):
    """Whether config.models asks for kind (HH members select each other)."""
    if config.models is None:
        return True
    if kind in _HH_FAMILY:
        return any(config.selects(k) for k in _HH_FAMILY)
    return config.selects(kind)


class ModelSuite:
    """One instance of every single-neuron variant and one network per variant.

    Parameters
    ----------
    regime : Regime or str
        Regime every model is put into.
    config : BenchConfig
        Run settings (network size, horizon, variant selection).
    topology : Topology or str
        Topology of the networks.
    rng : random source, optional
        Shared by all stochastic members. Defaults to config.rng().
    """

    def __init__(self, regime, config=None, topology=Topology.MEAN_FIELD, rng=None):
        self.regime = Regime.coerce(regime)
        self.config = config if config is not None else BenchConfig()
        self.topology = Topology.coerce(topology)
        self.rng = rng if rng is not None else self.config.rng()
        horizon = self.config.total_time

        self.neurons = {
            kind: create_neuron(kind, self.regime, horizon, rng=self.rng)
            for kind in CONCRETE_KINDS if _selected(self.config, kind)
        }
        self.networks = {
            kind: NetworkModel(kind, self.regime, horizon,
                               topology=self.topology,
                               n_neurons=self.config.n_neurons,
                               conductance=coupling_for(kind, self.regime),
                               rng=self.rng)
            for kind in DRIVEN_KINDS if _selected(self.config, kind)
        }
        self.reset_models()

    def neuron(self, kind):
        """The single neuron standing for kind in this suite's regime."""
        return self.neurons[ModelKind.coerce(kind).resolve(self.regime)]

    def network(self, kind):
        return self.networks[ModelKind.coerce(kind)]

    def driven_neurons(self, kinds=DRIVEN_KINDS):
        """(kind, neuron) pairs for the selected kinds, in order."""
        return [(kind, self.neuron(kind)) for kind in kinds
                if kind.resolve(self.regime) in self.neurons]

    def driven_networks(self, kinds=DRIVEN_KINDS):
        return [(kind, self.networks[kind]) for kind in kinds
                if kind in self.networks]

    def reset_models(self):
        """Reset every model into the regime.

        Bursting single neurons are also run through their transient, so
        that measurements start on the attractor.
        """
        horizon = self.config.total_time
        for neuron in self.neurons.values():
            neuron.reset(self.regime, horizon)
        for network in self.networks.values():
            network.reset(self.regime, horizon)
        if self.regime is Regime.BURSTING:
            for neuron in self.neurons.values():
                run_transient(neuron)

    def write_potentials(self, directory=None):
        """Record every model for total_time ms and write one file each.

        Returns
        -------
        list of Path
        """
        directory = directory if directory is not None else self.config.output_dir
        paths = []
        for model in list(self.neurons.values()) + list(self.networks.values()):
            result = simulate(model, self.config.total_time)
            paths.append(write_timeseries(result, directory, self.regime))
        return paths

    def __repr__(self):
        return (f"ModelSuite({self.regime.value}, {self.topology.value}, "
                f"{len(self.neurons)} neurons, {len(self.networks)} networks)")


def _table(phase, model, stats):
    table = summarize(stats).rename(columns={"label": "metric"})
    table.insert(0, "model", model.name)
    table.insert(0, "phase", phase)
    return table


def run_experiment(config=None):
    """Run the four benchmark phases.

    Parameters
    ----------
    config : BenchConfig, optional
        Defaults to BenchConfig().

    Returns
    -------
    pd.DataFrame
        One row per (phase, model, metric) with mean, std, sem, n.
    """
    config = config if config is not None else BenchConfig()
    rng = config.rng()
    tables = []

    LOG.info("Phase 1: timestep cost of single neurons (bursting)")
    suite = ModelSuite(Regime.BURSTING, config, Topology.MEAN_FIELD, rng=rng)
    if config.write_potentials:
        suite.write_potentials()
        suite.reset_models()
    for _, neuron in suite.driven_neurons():
        stats = measure_timestep_cost(neuron, config.total_time, config.n_samples)
        tables.append(_table("neuron_timestep", neuron, stats))

    LOG.info("Phase 2: convergence to the fixed point (excitable)")
    suite = ModelSuite(Regime.EXCITABLE, config, Topology.LINEAR, rng=rng)
    if config.write_potentials:
        suite.write_potentials()
        suite.reset_models()
    for kind, reason in SKIPPED_CONVERGENCE.items():
        if _selected(config, kind):
            LOG.warning("No fixed-point convergence time for %s, since %s",
                        kind.label, reason)
    for _, neuron in suite.driven_neurons(CONVERGENCE_KINDS):
        stats = measure_convergence(neuron, Regime.EXCITABLE, config.tolerance,
                                    config.max_time, config.n_samples)
        tables.append(_table("convergence", neuron, stats))

    LOG.info("Phase 3: timestep cost of linear networks (N = %d, excitable)",
             config.n_neurons)
    suite = ModelSuite(Regime.EXCITABLE, config, Topology.LINEAR, rng=rng)
    for _, network in suite.driven_networks():
        stats = measure_timestep_cost(network, config.total_time, config.n_samples)
        tables.append(_table("linear_network_timestep", network, stats))

    LOG.info("Phase 4: timestep cost of mean-field networks (N = %d, bursting)",
             config.n_neurons)
    suite = ModelSuite(Regime.BURSTING, config, Topology.MEAN_FIELD, rng=rng)
    for _, network in suite.driven_networks():
        stats = measure_timestep_cost(network, config.total_time, config.n_samples)
        tables.append(_table("mean_field_network_timestep", network, stats))

    if not tables:
        return pd.DataFrame(columns=RESULT_COLUMNS)
    return pd.concat(tables, ignore_index=True)[RESULT_COLUMNS]
