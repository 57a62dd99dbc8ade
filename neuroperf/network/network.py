"""A gap-junction network that steps like a single neuron.

One network timestep has two phases:
  1. every junction recomputes its current from the pre-step potentials,
  2. every neuron advances with the summed current of its inputs.
No neuron moves before all junctions are refreshed, so results do not depend
on the order of neurons or junctions.
"""

import numpy as np

from neuroperf.models.neurons import create_neuron
from neuroperf.models.params import ModelKind, Regime
from neuroperf.network.topology import Topology, build_topology
from neuroperf.utils import get_logger

LOG = get_logger("network")


class NetworkModel:
    """N neurons of one variant coupled by gap junctions.

    Parameters
    ----------
    kind : ModelKind or str
        Neuron variant of every member. HODGKIN_HUXLEY resolves by regime.
    regime : Regime or str
        Bursting or excitable.
    horizon : int, optional
        Time horizon of the run.
    topology : Topology or str
        LINEAR or MEAN_FIELD.
    n_neurons : int
        Number of neurons.
    conductance : float
        Uniform junction conductance.
    rng : random source, optional
        Object with a random() method returning floats in [0, 1), shared
        by stochastic members and the mean-field initial conditions.
        Defaults to an unseeded RandomState.
    """
    is_network = True

    def __init__(self, kind, regime, horizon=None, topology=Topology.LINEAR,
                 n_neurons=3, conductance=0.1, rng=None):
        if int(n_neurons) < 1:
            raise ValueError(f"A network needs at least one neuron, got {n_neurons}")
        self.kind = ModelKind.coerce(kind)
        self.regime = Regime.coerce(regime)
        self.topology = Topology.coerce(topology)
        self.horizon = horizon
        self.n_neurons = int(n_neurons)
        self.conductance = float(conductance)
        self.rng = rng if rng is not None else np.random.RandomState()
        self._build()
        LOG.debug("Built %s", self.summary())

    def _build(self):
        self._neurons = [create_neuron(self.kind, self.regime, self.horizon, rng=self.rng)
                         for _ in range(self.n_neurons)]
        self._junctions = build_topology(self.topology, self._neurons,
                                         self.conductance, self.regime,
                                         self.horizon, rng=self.rng)

    # --- derived scalars, uniform across members ---

    @property
    def dt(self):
        return self._neurons[0].dt

    @property
    def timesteps_per_ms(self):
        return self._neurons[0].timesteps_per_ms

    @property
    def transient_length(self):
        return self._neurons[0].transient_length

    @property
    def neuron_count(self):
        return self.n_neurons

    @property
    def neurons(self):
        return tuple(self._neurons)

    @property
    def junctions(self):
        return tuple(self._junctions)

    @property
    def name(self):
        return f"{self.topology.label}_{self.kind.label}{self.regime.label}"

    # --- capability contract ---

    def time_step(self):
        for junction in self._junctions:
            junction.time_step()
        for neuron in self._neurons:
            neuron.time_step_networked()

    def get_potential(self):
        """Sum of member potentials. Prefer get_network_potentials()."""
        return sum(neuron.get_potential() for neuron in self._neurons)

    def get_network_potentials(self):
        return np.array([neuron.get_potential() for neuron in self._neurons])

    def set_bursting_params(self):
        for neuron in self._neurons:
            neuron.set_bursting_params()

    def set_excitable_params(self):
        for neuron in self._neurons:
            neuron.set_excitable_params()

    def set_initial_condition(self, ic):
        """Set one state row per neuron.

        Parameters
        ----------
        ic : array-like
            Shape (n_neurons, dimension).
        """
        ic = np.asarray(ic, dtype=np.float64)
        if ic.ndim != 2 or ic.shape[0] != self.n_neurons:
            raise ValueError(f"{self.name} takes one initial-condition row per "
                             f"neuron ({self.n_neurons}), got shape {ic.shape}")
        for neuron, row in zip(self._neurons, ic):
            neuron.set_initial_condition(row)

    def reset_to_fixed_point(self):
        return np.array([neuron.reset_to_fixed_point() for neuron in self._neurons])

    def reset(self, regime, horizon=None):
        """Rebuild every neuron and the topology for a new regime."""
        self.regime = Regime.coerce(regime)
        self.horizon = horizon
        self._build()

    def summary(self):
        """Return a summary string."""
        lines = [
            f"Network {self.name}: {self.n_neurons} neurons, "
            f"{len(self._junctions)} junctions",
            f"  member: {self._neurons[0].name}",
            f"  conductance: {self.conductance}",
            f"  dt: {self.dt}, timesteps/ms: {self.timesteps_per_ms}",
        ]
        return "\n".join(lines)

    def __str__(self):
        return self.name
