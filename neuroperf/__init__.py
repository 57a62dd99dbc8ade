"""neuroperf — Computational cost of neuron models and gap-junction networks.

A zoo of single-neuron models (maps, integrate-and-fire units and
conductance-based ODEs) in bursting and excitable regimes, small
electrically coupled networks built from them, and a benchmark measuring
how much each one costs to simulate.

Subpackages:
    models      Parameter tables, RK4 integrator, the eight neuron variants
    network     Gap junctions, linear and mean-field topologies, NetworkModel
    simulation  Transients, recorded runs, fixed-point search, statistics
    bench       Timestep cost, convergence time, the four-phase experiment
    io          Tab-separated time-series files
"""

__version__ = "0.1.0"
