"""Drive a model through time: transients, recorded runs, fixed-point search.

Works on anything with the model capability contract (a single Neuron or a
NetworkModel): time_step(), get_potential(), get_network_potentials(),
dt, timesteps_per_ms, transient_length, is_network, neuron_count.
"""

import math
from dataclasses import dataclass
from typing import Optional

import numpy as np
import pandas as pd

from neuroperf.utils import get_logger

LOG = get_logger("simulation.engine")


class ConvergenceError(RuntimeError):
    """A model did not settle within its step budget."""


def timesteps_for(model, total_time):
    """Timesteps covering total_time ms of model time (rounded up)."""
    return int(math.ceil(model.timesteps_per_ms * total_time))


def transient_steps(model):
    """Timesteps discarded as transient."""
    return int(model.transient_length / model.dt) + 1


def run_transient(model):
    """Advance a model through its transient."""
    n_steps = transient_steps(model)
    for _ in range(n_steps):
        model.time_step()
    return n_steps


def run_steps(model, n_steps):
    """Advance a model n_steps times without recording."""
    for _ in range(n_steps):
        model.time_step()


@dataclass
class SimulationResult:
    """Recorded potentials of one run.

    Attributes
    ----------
    name : str
        Model label.
    times : np.ndarray
        Time of each sample, step * dt.
    potentials : np.ndarray
        Shape (n_steps, n_neurons); a single neuron has one column.
    dt : float
        Timestep of the model.
    is_network : bool
        Whether the model was a network.
    """
    name: str
    times: np.ndarray
    potentials: np.ndarray
    dt: float
    is_network: bool = False

    @property
    def n_steps(self):
        return len(self.times)

    @property
    def n_neurons(self):
        return self.potentials.shape[1]

    def columns(self):
        if self.is_network:
            return [f"V{i}" for i in range(self.n_neurons)]
        return ["V"]

    def to_frame(self):
        """Time series as a DataFrame with columns t, V (or V0..V{N-1})."""
        frame = pd.DataFrame(self.potentials, columns=self.columns())
        frame.insert(0, "t", self.times)
        return frame


def simulate(model, total_time):
    """Run a model for total_time ms of model time, recording every step.

    Parameters
    ----------
    model : Neuron or NetworkModel
        Model to advance from its current state.
    total_time : float
        Duration in ms, converted with the model's timesteps_per_ms.

    Returns
    -------
    SimulationResult
    """
    n_steps = int(model.timesteps_per_ms * total_time)
    potentials = np.zeros((n_steps, model.neuron_count), dtype=np.float64)

    for step in range(n_steps):
        model.time_step()
        potentials[step] = model.get_network_potentials()

    LOG.debug("Recorded %s: %d steps of %d neuron(s)",
              model.name, n_steps, model.neuron_count)

    return SimulationResult(
        name=model.name,
        times=np.arange(n_steps) * model.dt,
        potentials=potentials,
        dt=model.dt,
        is_network=model.is_network,
    )


@dataclass(frozen=True)
class ConvergenceResult:
    """Outcome of a fixed-point search.

    Attributes
    ----------
    name : str
        Model label.
    converged : bool
        True if the potential settled within tolerance.
    n_steps : int
        Steps taken (the step budget when not converged).
    potential : float
        Potential at the last step.
    tolerance : float
        Largest accepted change of potential between two steps.
    max_steps : int
        Step budget.
    """
    name: str
    converged: bool
    n_steps: int
    potential: float
    tolerance: float
    max_steps: int


def find_fixed_point(model, tolerance=1.0e-8, max_time=100000,
                     raise_on_failure=False):
    """Step a model until its potential stops changing.

    Convergence is declared at the first step whose potential differs from
    the previous step's by less than tolerance.

    Parameters
    ----------
    model : Neuron or NetworkModel
        Model to advance from its current state.
    tolerance : float
        Convergence threshold on |V_t - V_{t-1}|.
    max_time : float
        Budget in model time units; the step budget is ceil(max_time / dt).
    raise_on_failure : bool
        Raise ConvergenceError instead of returning a non-converged result.

    Returns
    -------
    ConvergenceResult
    """
    max_steps = int(math.ceil(max_time / model.dt))
    previous = model.get_potential()
    for step in range(1, max_steps + 1):
        model.time_step()
        potential = model.get_potential()
        if abs(potential - previous) < tolerance:
            return ConvergenceResult(model.name, True, step, potential,
                                     tolerance, max_steps)
        previous = potential

    if raise_on_failure:
        raise ConvergenceError(f"{model.name} did not converge to a fixed point "
                               f"within {max_steps} steps "
                               f"(tolerance {tolerance:.8e})")
    return ConvergenceResult(model.name, False, max_steps, previous,
                             tolerance, max_steps)
