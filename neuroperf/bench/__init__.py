"""bench — Performance measurements of neuron models and networks.

Per-timestep cost, fixed-point convergence time and the four-phase
experiment that drives the whole model zoo.
"""

from .timing import (
    PerformanceSample,
    time_call,
    measure_timestep_cost,
    measure_convergence,
)
from .experiment import (
    ModelSuite,
    run_experiment,
    DRIVEN_KINDS,
    CONVERGENCE_KINDS,
    RESULT_COLUMNS,
)
