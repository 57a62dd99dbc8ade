"""Wiring of gap-junction networks.

Two topologies are supported:
  - LINEAR: a chain 0 -> 1 -> ... -> N-1. Every neuron starts at its fixed
    point except neuron 0, which starts from the regime's standard initial
    condition, so that a single excitation travels down the chain.
  - MEAN_FIELD: every ordered pair (i, j), i != j, is coupled. Every neuron
    starts at neuron 0's fixed point scaled component-wise by independent
    uniform [0, 1) factors, to study convergence toward synchrony.
"""

from enum import Enum

import numpy as np

from neuroperf.network.junction import GapJunction
from neuroperf.utils import get_logger

LOG = get_logger("network.topology")


class Topology(Enum):
    LINEAR = "linear"
    MEAN_FIELD = "mean_field"

    @property
    def label(self):
        return "Linear" if self is Topology.LINEAR else "MeanField"

    @classmethod
    def coerce(cls, value):
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("-", "_")
            for topology in cls:
                if key in (topology.value, topology.label.lower()):
                    return topology
        raise ValueError(f"Unrecognized topology '{value}'. "
                         f"Available: {[t.value for t in cls]}")


def expected_junction_count(topology, n_neurons):
    """Number of junctions a topology creates for n_neurons."""
    topology = Topology.coerce(topology)
    if topology is Topology.LINEAR:
        return max(n_neurons - 1, 0)
    return n_neurons * (n_neurons - 1)


def build_linear(neurons, conductance, regime, horizon=None):
    """Chain neurons i-1 -> i and seed a single excitation at neuron 0.

    Returns
    -------
    list of GapJunction
    """
    junctions = []
    for i in range(1, len(neurons)):
        junction = GapJunction(neurons[i - 1], neurons[i], conductance)
        neurons[i].add_input(junction)
        junctions.append(junction)

    for neuron in neurons:
        neuron.reset_to_fixed_point()
    neurons[0].reset(regime, horizon)
    return junctions


def build_mean_field(neurons, conductance, rng=None):
    """Couple every ordered pair and disperse initial conditions.

    Parameters
    ----------
    neurons : list of Neuron
        Network members, all of the same variant.
    conductance : float
        Uniform coupling strength.
    rng : random source, optional
        Object with a random() method returning floats in [0, 1), drawn
        once per state component, neuron by neuron.
        Defaults to an unseeded numpy RandomState.

    Returns
    -------
    list of GapJunction
    """
    if rng is None:
        rng = np.random.RandomState()

    junctions = []
    for i, pre in enumerate(neurons):
        for j, post in enumerate(neurons):
            if i == j:
                continue
            junction = GapJunction(pre, post, conductance)
            post.add_input(junction)
            junctions.append(junction)

    fixed_point = neurons[0].reset_to_fixed_point()
    for neuron in neurons:
        factors = np.array([rng.random() for _ in fixed_point])
        neuron.set_initial_condition(fixed_point * factors)
    return junctions


def build_topology(topology, neurons, conductance, regime, horizon=None, rng=None):
    """Wire neurons according to topology and return the junction list."""
    topology = Topology.coerce(topology)
    if topology is Topology.LINEAR:
        junctions = build_linear(neurons, conductance, regime, horizon)
    else:
        junctions = build_mean_field(neurons, conductance, rng)
    LOG.debug("Wired %s network: %d neurons, %d junctions, g=%g",
              topology.label, len(neurons), len(junctions), conductance)
    return junctions
