"""Timing of model steps and fixed-point searches.

A measurement reads three clocks around a call: wall time, CPU time of the
calling thread, and the number of garbage collections per generation.
Repeated measurements are reduced to Statistics.
"""

import gc
import time
from dataclasses import dataclass
from typing import Tuple

from neuroperf.simulation.analysis import Statistics
from neuroperf.simulation.engine import (
    find_fixed_point, run_steps, timesteps_for,
)
from neuroperf.utils import get_logger

LOG = get_logger("bench.timing")


@dataclass(frozen=True)
class PerformanceSample:
    """Resources spent by one call.

    Attributes
    ----------
    wall_ns : int
        Elapsed wall-clock time.
    cpu_ns : int
        CPU time of the calling thread.
    gc_collections : tuple of int
        Collections run during the call, one entry per GC generation.
    """
    wall_ns: int
    cpu_ns: int
    gc_collections: Tuple[int, ...]

    @property
    def total_collections(self):
        return sum(self.gc_collections)


def _collections():
    return tuple(generation["collections"] for generation in gc.get_stats())


def time_call(fn, *args, **kwargs):
    """Call fn and measure it.

    Returns
    -------
    (result, PerformanceSample)
    """
    gc_before = _collections()
    cpu_before = time.thread_time_ns()
    wall_before = time.perf_counter_ns()
    result = fn(*args, **kwargs)
    wall_after = time.perf_counter_ns()
    cpu_after = time.thread_time_ns()
    gc_after = _collections()
    sample = PerformanceSample(
        wall_ns=wall_after - wall_before,
        cpu_ns=cpu_after - cpu_before,
        gc_collections=tuple(a - b for a, b in zip(gc_after, gc_before)),
    )
    return result, sample


def measure_timestep_cost(model, total_time, n_samples):
    """Cost of one timestep, averaged over runs of total_time ms.

    Every sample continues from the state the previous one left; the model
    is never reset in between.

    Parameters
    ----------
    model : Neuron or NetworkModel
        Model to advance.
    total_time : float
        Model time per sample, converted with timesteps_for().
    n_samples : int
        Number of runs.

    Returns
    -------
    dict
        cpu_ns_per_step, wall_ns_per_step : Statistics
        gc_collections : Statistics of collections per run (all generations)
    """
    n_steps = max(timesteps_for(model, total_time), 1)
    samples = [time_call(run_steps, model, n_steps)[1] for _ in range(n_samples)]

    stats = {
        "cpu_ns_per_step": Statistics.from_samples(
            [s.cpu_ns / n_steps for s in samples]),
        "wall_ns_per_step": Statistics.from_samples(
            [s.wall_ns / n_steps for s in samples]),
        "gc_collections": Statistics.from_samples(
            [s.total_collections for s in samples]),
    }
    LOG.info("%s: %s CPU ns/timestep over %d samples of %d steps",
             model.name, stats["cpu_ns_per_step"], n_samples, n_steps)
    return stats


def measure_convergence(model, regime, tolerance, max_time, n_samples):
    """Steps and CPU time needed to reach the fixed point.

    The model is reset into regime before every sample. Samples that do
    not converge within the budget are reported and left out.

    Returns
    -------
    dict
        steps, cpu_ns, wall_ns : Statistics over the converged samples
    """
    steps, cpu, wall = [], [], []
    for sample in range(n_samples):
        model.reset(regime)
        result, perf = time_call(find_fixed_point, model, tolerance, max_time)
        if not result.converged:
            LOG.warning("%s did not converge in sample %d "
                        "(%d steps, tolerance %.8e)",
                        model.name, sample, result.max_steps, tolerance)
            continue
        steps.append(result.n_steps)
        cpu.append(perf.cpu_ns)
        wall.append(perf.wall_ns)

    stats = {
        "steps": Statistics.from_samples(steps),
        "cpu_ns": Statistics.from_samples(cpu),
        "wall_ns": Statistics.from_samples(wall),
    }
    LOG.info("%s: converged in %s timesteps, %s CPU ns (%d/%d samples)",
             model.name, stats["steps"], stats["cpu_ns"], len(steps), n_samples)
    return stats
