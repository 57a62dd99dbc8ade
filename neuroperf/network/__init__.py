"""network — Gap-junction networks of identical neurons.

Linear chains (signal propagation) and fully connected mean-field graphs
(synchronization), stepped synchronously in two phases.
"""

from .junction import GapJunction
from .topology import (
    Topology,
    build_linear,
    build_mean_field,
    build_topology,
    expected_junction_count,
)
from .network import NetworkModel
