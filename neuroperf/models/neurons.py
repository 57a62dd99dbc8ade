"""Single-neuron models: discrete maps and RK4-integrated ODE systems.

Every variant shares one capability contract (the Neuron base class):
reset into a regime, overwrite the state, jump to the known fixed point,
advance one step alone or as a network member, and report its potential.

The standalone and networked steps run the same update law. A neuron's
law is written once, in _advance(i_syn), with the synaptic current always
present; time_step() passes zero, time_step_networked() passes the summed
current of the neuron's incoming gap junctions.

Variants:
    LIFModel         leaky integrate-and-fire, hard reset
    GLExpModel       stochastic Galves-Löcherbach, exponential rate
    KTzTanhModel     KTz map with tanh saturation
    KTzLogModel      KTz map with logistic x/(1+|x|) saturation
    IzhikevichModel  Izhikevich model iterated as a map
    RulkovModel      Rulkov piecewise rational map
    HHStdModel       Hodgkin-Huxley squid axon, RK4
    HHLeechModel     reduced leech heart interneuron, RK4
"""

import math

import numpy as np

from neuroperf.models.integrators import rk4_step
from neuroperf.models.params import PARAM_DB, ModelKind, Regime
from neuroperf.utils import get_logger

LOG = get_logger("models.neurons")


class Neuron:
    """Base of all neuron variants.

    Parameters
    ----------
    regime : Regime or str
        Bursting or excitable.
    horizon : int, optional
        Time horizon of the run the neuron is created for. Stored only.
    rng : random source, optional
        Object with a random() method returning floats in [0, 1).
        Only stochastic variants draw from it.
    """
    kind = None
    dimension = None
    is_network = False
    neuron_count = 1

    def __init__(self, regime, horizon=None, rng=None):
        self.rng = rng
        self.i_syn = 0.0
        self._inputs = []
        self.reset(regime, horizon)

    # --- capability contract ---

    def reset(self, regime, horizon=None):
        """(Re)initialize discretization, constants and state for a regime."""
        regime = Regime.coerce(regime)
        timing = PARAM_DB.get(self.kind, regime).timing
        self.horizon = horizon
        self.dt = timing.dt
        self.timesteps_per_ms = timing.timesteps_per_ms
        self.transient_length = timing.transient_length
        if regime is Regime.BURSTING:
            self.set_bursting_params()
        else:
            self.set_excitable_params()

    def set_bursting_params(self):
        self._load(Regime.BURSTING)

    def set_excitable_params(self):
        self._load(Regime.EXCITABLE)

    def set_initial_condition(self, ic):
        """Overwrite the state vector (potential first).

        Raises
        ------
        ValueError
            If ic does not have exactly `dimension` components.
        """
        ic = np.asarray(ic, dtype=np.float64)
        if ic.shape != (self.dimension,):
            raise ValueError(f"{self.name} takes an initial condition of "
                             f"{self.dimension} components, got shape {ic.shape}")
        self._set_state(ic)

    def reset_to_fixed_point(self):
        """Jump to the variant's known fixed point and return the state.

        Variants without a known fixed point keep their current state.
        """
        fixed_point = PARAM_DB.fixed_point(self.kind)
        if fixed_point is None:
            LOG.debug("No known fixed point for %s; keeping current state",
                      self.name)
            return self.state
        self._set_state(np.array(fixed_point, dtype=np.float64))
        return self.state

    def time_step(self):
        self._advance(0.0)

    def time_step_networked(self):
        self.i_syn = sum((junction.current for junction in self._inputs), 0.0)
        self._advance(self.i_syn)

    def get_potential(self):
        raise NotImplementedError

    def get_network_potentials(self):
        return np.array([self.get_potential()])

    # --- network membership ---

    def add_input(self, junction):
        """Register a gap junction whose current flows into this neuron."""
        self._inputs.append(junction)

    @property
    def inputs(self):
        return tuple(self._inputs)

    # --- state ---

    @property
    def name(self):
        return f"{self.kind.label}Model"

    @property
    def state(self):
        raise NotImplementedError

    def _load(self, regime):
        param_set = PARAM_DB.get(self.kind, regime)
        self.regime = regime
        self.params = param_set.params
        self._set_state(np.array(param_set.initial_state, dtype=np.float64))

    def _set_state(self, state):
        raise NotImplementedError

    def _advance(self, i_syn):
        raise NotImplementedError

    def __str__(self):
        return self.name

    def __repr__(self):
        return (f"{self.__class__.__name__}(regime={self.regime.value}, "
                f"state={self.state.tolist()})")


# ---------------------------------------------------------------------------
# Integrate-and-fire
# ---------------------------------------------------------------------------

class LIFModel(Neuron):
    """Leaky integrate-and-fire, Euler step, reset when V > v_threshold."""
    kind = ModelKind.LIF
    dimension = 1

    def _set_state(self, state):
        self.v = float(state[0])

    @property
    def state(self):
        return np.array([self.v])

    def get_potential(self):
        return self.v

    def _advance(self, i_syn):
        p = self.params
        if self.v > p.v_threshold:
            self.v = p.v_reset
        else:
            self.v = self.v + self.dt * (-self.v / p.tau + p.i_ext + i_syn)


class GLExpModel(Neuron):
    """Galves-Löcherbach neuron with exponential firing probability.

    The spike flag decided at the end of a step resets the potential at the
    next step. The flag is not part of the initial condition: setting the
    state always clears it.
    """
    kind = ModelKind.GLEXP
    dimension = 1

    def __init__(self, regime, horizon=None, rng=None):
        if rng is None:
            rng = np.random.RandomState()
        super().__init__(regime, horizon, rng=rng)

    def _set_state(self, state):
        self.v = float(state[0])
        self.fired = False

    @property
    def state(self):
        return np.array([self.v])

    def get_potential(self):
        return self.v

    def firing_probability(self):
        p = self.params
        # saturates at 1 long before the clamp
        return p.a * math.exp(min((self.v - p.v_m) / p.v_s, 50.0))

    def _advance(self, i_syn):
        p = self.params
        if self.fired:
            self.v = p.v_reset
        else:
            self.v = self.v + self.dt * (-self.v / p.tau + p.i_ext + i_syn)
        self.fired = self.rng.random() < self.firing_probability()


# ---------------------------------------------------------------------------
# KTz maps
# ---------------------------------------------------------------------------

class _KTzModel(Neuron):
    """KTz map; subclasses choose the saturating function."""
    dimension = 3

    def _set_state(self, state):
        self.x, self.y, self.z = (float(s) for s in state)

    @property
    def state(self):
        return np.array([self.x, self.y, self.z])

    def get_potential(self):
        return self.x

    @staticmethod
    def saturate(u):
        raise NotImplementedError

    def _advance(self, i_syn):
        p = self.params
        x = self.x
        self.x = self.saturate((x - p.k * self.y + self.z + i_syn + p.i_ext) / p.t)
        self.y = x
        self.z = (1.0 - p.delta) * self.z - p.lam * (x - p.x_r)


class KTzTanhModel(_KTzModel):
    kind = ModelKind.KTZ_TANH

    @staticmethod
    def saturate(u):
        return math.tanh(u)


class KTzLogModel(_KTzModel):
    kind = ModelKind.KTZ_LOG

    @staticmethod
    def saturate(u):
        """Logistic saturation u / (1 + |u|)."""
        if u > 0:
            return u / (1.0 + u)
        return u / (1.0 - u)


# ---------------------------------------------------------------------------
# Izhikevich and Rulkov maps
# ---------------------------------------------------------------------------

class IzhikevichModel(Neuron):
    """Izhikevich quadratic model iterated with unit step.

    Below v_peak:  v' = 0.04 v^2 + 6 v + 140 - u + I,  u' = u + a (b v - u)
    Otherwise:     v' = c,  u' = u + d
    """
    kind = ModelKind.IZHIKEVICH
    dimension = 2

    def _set_state(self, state):
        self.v, self.u = float(state[0]), float(state[1])

    @property
    def state(self):
        return np.array([self.v, self.u])

    def get_potential(self):
        return self.v

    def _advance(self, i_syn):
        p = self.params
        v = self.v
        if v < p.v_peak:
            self.v = 0.04 * v * v + 6.0 * v + 140.0 - self.u + p.i_ext + i_syn
            self.u = self.u + p.a * (p.b * v - self.u)
        else:
            self.v = p.c
            self.u = self.u + p.d


class RulkovModel(Neuron):
    """Rulkov map: fast piecewise rational x, slow y."""
    kind = ModelKind.RULKOV
    dimension = 2

    def _set_state(self, state):
        self.x, self.y = float(state[0]), float(state[1])

    @property
    def state(self):
        return np.array([self.x, self.y])

    def get_potential(self):
        return self.x

    def fast_map(self, x, y):
        """Three-branch fast map, y already carrying the input current."""
        alpha = self.params.alpha
        if x <= 0:
            return y + alpha / (1.0 - x)
        if x < alpha + y:
            return alpha + y
        return -1.0

    def _advance(self, i_syn):
        p = self.params
        x = self.x
        self.x = self.fast_map(x, self.y + i_syn + p.i_ext)
        self.y = self.y - p.mu * (x - p.sigma)


# ---------------------------------------------------------------------------
# Conductance-based ODE models
# ---------------------------------------------------------------------------

class _ODEModel(Neuron):
    """Neuron integrated by RK4; state held as an array, potential first."""

    def _set_state(self, state):
        self._y = np.array(state, dtype=np.float64)

    @property
    def state(self):
        return self._y.copy()

    def get_potential(self):
        return float(self._y[0])

    def derivative(self, y, current):
        raise NotImplementedError

    def _advance(self, i_syn):
        self._y = rk4_step(self.derivative, self._y, self.dt, i_syn)


def _exp_rate(c, theta, s, v):
    return c * np.exp(s * (v - theta))


def _sigmoid_rate(c, theta, s, v):
    return c / (1.0 + np.exp(s * (v - theta)))


def _linexp_rate(c, theta, s, v):
    x = v - theta
    if x == 0.0:
        return -c / s
    return c * x / (1.0 - np.exp(s * x))


class HHStdModel(_ODEModel):
    """Hodgkin-Huxley squid axon. State [V, n, m, h]."""
    kind = ModelKind.HH_STD
    dimension = 4

    def _load(self, regime):
        super()._load(regime)
        self._g_leak = self.params.g_leak
        self._e_leak = self.params.e_leak

    def derivative(self, y, current):
        p = self.params
        v, n, m, h = y
        dh = (_exp_rate(0.07, -65.0, -0.05, v) * (1.0 - h)
              - _sigmoid_rate(1.0, -35.0, -0.1, v) * h)
        dm = (_linexp_rate(0.1, -40.0, -0.1, v) * (1.0 - m)
              - _exp_rate(4.0, -65.0, -0.056, v) * m)
        dn = (_linexp_rate(0.01, -55.0, -0.1, v) * (1.0 - n)
              - _exp_rate(0.125, -65.0, -0.013, v) * n)
        dv = (p.i_ext + current
              - p.g_k * n ** 4 * (v - p.e_k)
              - p.g_na * m ** 3 * h * (v - p.e_na)
              - self._g_leak * (v - self._e_leak)) / p.c
        return np.array([dv, dn, dm, dh])


def _boltzmann(slope, shift, v):
    return 1.0 / (1.0 + np.exp(slope * (v + shift)))


class HHLeechModel(_ODEModel):
    """Reduced leech heart interneuron (Na inactivation + K2 activation).

    State [V, m_K2, h_Na]. Currents enter with the outward sign
    convention of the model: dV = -(I + I_ion) / C. No fixed point is known.
    """
    kind = ModelKind.HH_LEECH
    dimension = 3

    def derivative(self, y, current):
        p = self.params
        v, m_k2, h_na = y
        m_na = _boltzmann(p.m_na_slope, p.m_na_shift, v)
        dh = (_boltzmann(p.h_na_slope, p.h_na_shift, v) - h_na) / p.tau_na
        dm = (_boltzmann(p.m_k2_slope, p.m_k2_shift + p.v_k2_shift, v) - m_k2) / p.tau_k2
        dv = -(p.i_ext + current
               + p.g_k2 * m_k2 * m_k2 * (v - p.e_k)
               + p.g_na * h_na * m_na ** 3 * (v - p.e_na)
               + p.g_leak * (v - p.e_leak)) / p.c
        return np.array([dv, dm, dh])


# ---------------------------------------------------------------------------
# Factory
# ---------------------------------------------------------------------------

NEURON_CLASSES = {
    ModelKind.LIF: LIFModel,
    ModelKind.GLEXP: GLExpModel,
    ModelKind.KTZ_TANH: KTzTanhModel,
    ModelKind.KTZ_LOG: KTzLogModel,
    ModelKind.IZHIKEVICH: IzhikevichModel,
    ModelKind.RULKOV: RulkovModel,
    ModelKind.HH_STD: HHStdModel,
    ModelKind.HH_LEECH: HHLeechModel,
}


def create_neuron(kind, regime, horizon=None, rng=None):
    """Create a neuron of a variant in a regime.

    Parameters
    ----------
    kind : ModelKind or str
        Model variant. HODGKIN_HUXLEY resolves by regime.
    regime : Regime or str
        Bursting or excitable.
    horizon : int, optional
        Time horizon of the run.
    rng : random source, optional
        Uniform [0, 1) source for stochastic variants.

    Returns
    -------
    Neuron

    Raises
    ------
    ValueError
        For an unrecognized kind or regime.
    """
    regime = Regime.coerce(regime)
    kind = ModelKind.coerce(kind).resolve(regime)
    return NEURON_CLASSES[kind](regime, horizon, rng=rng)
