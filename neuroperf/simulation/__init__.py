"""simulation — Running models and summarizing repeated measurements.

Transient removal, recorded runs, fixed-point convergence search and the
statistics used to report them.
"""

from .engine import (
    SimulationResult,
    ConvergenceResult,
    ConvergenceError,
    timesteps_for,
    transient_steps,
    run_transient,
    run_steps,
    simulate,
    find_fixed_point,
)
from .analysis import (
    Statistics,
    summarize,
)
