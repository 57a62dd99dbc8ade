"""Fixed-step integration of the ODE neuron models."""

import numpy as np


def rk4_step(deriv, y, dt, current=0.0):
    """Advance y by one classical 4th-order Runge-Kutta step.

    Parameters
    ----------
    deriv : callable
        deriv(y, current) -> np.ndarray, the autonomous vector field.
    y : np.ndarray
        State at the beginning of the step.
    dt : float
        Step size.
    current : float
        Input current, held fixed across the four stages.

    Returns
    -------
    np.ndarray
        State after one step.
    """
    y = np.asarray(y, dtype=np.float64)
    k1 = deriv(y, current)
    k2 = deriv(y + 0.5 * dt * k1, current)
    k3 = deriv(y + 0.5 * dt * k2, current)
    k4 = deriv(y + dt * k3, current)
    return y + (dt / 6.0) * (k1 + 2.0 * k2 + 2.0 * k3 + k4)
