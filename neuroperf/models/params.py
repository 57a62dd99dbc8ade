"""Parameter tables for the neuron model zoo.

Every model variant has two physiological regimes (bursting, excitable).
A ParamSet bundles, for one (variant, regime) pair:
  - the variant's frozen constants dataclass,
  - the discretization (dt, sampling rate, transient length),
  - the canonical initial state,
  - the fixed point, where one is known.

State vectors always put the membrane potential first:
    LIF, GLExp   [V]
    KTz          [x, y, z]
    Izhikevich   [v, u]
    Rulkov       [x, y]
    HHStd        [V, n, m, h]
    HHLeech      [V, m_K2, h_Na]

References:
    Kinouchi & Tragtenberg 1996; Kuva et al. 2001 — KTz maps
    Girardi-Schappo et al. 2013 — KTzLog map
    Izhikevich 2003 — simple model (map form)
    Rulkov 2002 — piecewise rational map
    Galves & Löcherbach 2013 — stochastic GL neuron
    Hodgkin & Huxley 1952
    Hill et al. 2001 — leech heart interneuron
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Tuple


class Regime(Enum):
    """Physiological regime of a neuron model."""
    BURSTING = "bursting"
    EXCITABLE = "excitable"

    @property
    def label(self):
        return self.value.capitalize()

    @classmethod
    def coerce(cls, value):
        """Return the Regime for a Regime, name or value (case-insensitive)."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for regime in cls:
                if key in (regime.value, regime.name.lower()):
                    return regime
        raise ValueError(f"Unrecognized regime '{value}'. "
                         f"Available: {[r.value for r in cls]}")


class ModelKind(Enum):
    """The closed set of neuron model variants."""
    LIF = "lif"
    GLEXP = "glexp"
    KTZ_TANH = "ktz_tanh"
    KTZ_LOG = "ktz_log"
    IZHIKEVICH = "izhikevich"
    RULKOV = "rulkov"
    HH_STD = "hh_std"
    HH_LEECH = "hh_leech"
    HODGKIN_HUXLEY = "hodgkin_huxley"  # regime-dependent alias

    @property
    def label(self):
        return _KIND_LABELS[self]

    @classmethod
    def coerce(cls, value):
        """Return the ModelKind for a ModelKind, name, value or label."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip().lower()
            for kind in cls:
                if key in (kind.value, kind.name.lower(), kind.label.lower()):
                    return kind
        raise ValueError(f"Unrecognized model kind '{value}'. "
                         f"Available: {[k.value for k in cls]}")

    def resolve(self, regime):
        """Concrete variant for this kind in the given regime.

        HODGKIN_HUXLEY stands for the leech model when bursting and the
        standard model when excitable. Every other kind resolves to itself.
        """
        if self is ModelKind.HODGKIN_HUXLEY:
            regime = Regime.coerce(regime)
            return (ModelKind.HH_LEECH if regime is Regime.BURSTING
                    else ModelKind.HH_STD)
        return self


_KIND_LABELS = {
    ModelKind.LIF: "LIF",
    ModelKind.GLEXP: "GLExp",
    ModelKind.KTZ_TANH: "KTzTanh",
    ModelKind.KTZ_LOG: "KTzLog",
    ModelKind.IZHIKEVICH: "Izhikevich",
    ModelKind.RULKOV: "Rulkov",
    ModelKind.HH_STD: "HHStd",
    ModelKind.HH_LEECH: "HHLeech",
    ModelKind.HODGKIN_HUXLEY: "HodgkinHuxley",
}

CONCRETE_KINDS = tuple(k for k in ModelKind if k is not ModelKind.HODGKIN_HUXLEY)


# ---------------------------------------------------------------------------
# Discretization
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Timing:
    """Discretization of a model.

    Parameters
    ----------
    dt : float
        Integration step (ms for ODEs, one iteration for maps).
    timesteps_per_ms : float
        Sampling rate used to convert a horizon in ms to timesteps.
    transient_length : float
        Transient to discard before steady state, in units of dt
        (run for int(transient_length / dt) + 1 steps).
    """
    dt: float
    timesteps_per_ms: float
    transient_length: float


MAP_TIMING = Timing(dt=1.0, timesteps_per_ms=10.0, transient_length=1000)
IF_TIMING = Timing(dt=0.1, timesteps_per_ms=10.0, transient_length=1000)
ODE_TIMING = Timing(dt=0.01, timesteps_per_ms=100.0, transient_length=100)


# ---------------------------------------------------------------------------
# Constants, one dataclass per variant
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LIFParams:
    """Leaky integrate-and-fire with a hard reset and no refractory period."""
    v_reset: float = 10.0
    v_threshold: float = 20.0
    tau: float = 20.0
    i_ext: float = 30.0


@dataclass(frozen=True)
class GLExpParams:
    """Galves-Löcherbach neuron with exponential firing probability.

    Firing probability per step: a * exp((V - v_m) / v_s).
    """
    a: float = 1.0 / 27.07
    v_m: float = 20.0
    v_s: float = 1.2
    v_reset: float = 10.0
    tau: float = 20.0
    i_ext: float = 30.0


@dataclass(frozen=True)
class KTzParams:
    """KTz map constants (shared by the tanh and logistic variants).

    Parameters
    ----------
    k : float
        Coupling of the recovery variable y into x.
    t : float
        Gain ("temperature") of the saturating function.
    delta : float
        Slow-current decay rate.
    lam : float
        Slow-current feedback strength.
    x_r : float
        Reversal value of the slow current.
    i_ext : float
        External current.
    """
    k: float = 0.6
    t: float = 0.35
    delta: float = 0.001
    lam: float = 0.001
    x_r: float = -0.5
    i_ext: float = 0.0


@dataclass(frozen=True)
class IzhikevichParams:
    """Izhikevich model iterated as a map with unit step.

    v_peak is the cutoff: the map integrates while v < v_peak and resets
    otherwise.
    """
    a: float = 0.02
    b: float = 0.25
    c: float = -57.0
    d: float = 0.0
    v_peak: float = 30.0
    i_ext: float = 2.0


@dataclass(frozen=True)
class RulkovParams:
    """Rulkov piecewise rational map."""
    alpha: float = 6.0
    sigma: float = -1.1
    mu: float = 0.001
    i_ext: float = 0.0


@dataclass(frozen=True)
class HHStdParams:
    """Classical Hodgkin-Huxley squid axon (conductances in mS/cm^2, mV).

    The leak is split into Na, K and Cl components; the effective leak
    conductance and reversal are derived from them.
    """
    g_na: float = 120.0
    g_k: float = 36.0
    g_leak_na: float = 0.0265
    g_leak_k: float = 0.07
    g_leak_cl: float = 0.1
    e_na: float = 52.4
    e_k: float = -72.1
    e_cl: float = -57.2
    c: float = 1.0
    i_ext: float = 0.0

    @property
    def g_leak(self):
        return self.g_leak_k + self.g_leak_na + self.g_leak_cl

    @property
    def e_leak(self):
        return (self.g_leak_k * self.e_k + self.g_leak_na * self.e_na
                + self.g_leak_cl * self.e_cl) / self.g_leak


@dataclass(frozen=True)
class HHLeechParams:
    """Reduced leech heart interneuron (SI units: S, V, F, A, s).

    Activation curves are sigmoids 1 / (1 + exp(slope * (V + shift))).
    """
    g_k2: float = 30.0e-9
    g_leak: float = 8.0e-9
    g_na: float = 160.0e-9
    e_k: float = -0.07
    e_na: float = 0.045
    e_leak: float = -0.046
    c: float = 0.5e-9
    v_k2_shift: float = -0.0228
    tau_k2: float = 0.9
    tau_na: float = 0.0405
    h_na_slope: float = 500.0
    h_na_shift: float = 0.0325
    m_k2_slope: float = -83.0
    m_k2_shift: float = 0.018
    m_na_slope: float = -150.0
    m_na_shift: float = 0.0305
    i_ext: float = 0.0062e-9


# ---------------------------------------------------------------------------
# Parameter sets and registry
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ParamSet:
    """Everything needed to put a variant into one regime.

    Parameters
    ----------
    kind : ModelKind
        Concrete model variant.
    regime : Regime
        Bursting or excitable.
    params : dataclass
        Frozen constants of the variant.
    initial_state : tuple of float
        Canonical initial condition, potential first.
    timing : Timing
        Discretization.
    fixed_point : tuple of float, optional
        Known fixed point (same ordering as initial_state).
    source : str
        Key reference(s).
    notes : str
        Caveats or context.
    """
    kind: ModelKind
    regime: Regime
    params: object
    initial_state: Tuple[float, ...]
    timing: Timing
    fixed_point: Optional[Tuple[float, ...]] = None
    source: str = ""
    notes: str = ""

    @property
    def dimension(self):
        return len(self.initial_state)

    def to_dict(self):
        return {
            "kind": self.kind.value,
            "regime": self.regime.value,
            "dt": self.timing.dt,
            "timesteps_per_ms": self.timing.timesteps_per_ms,
            "transient_length": self.timing.transient_length,
            "dimension": self.dimension,
            "initial_state": list(self.initial_state),
            "fixed_point": (list(self.fixed_point)
                            if self.fixed_point is not None else None),
            "params": asdict(self.params),
            "source": self.source,
        }


class ParamDB:
    """Registry of parameter sets keyed by (kind, regime)."""

    def __init__(self):
        self._sets = {}

    def register(self, param_set):
        """Register a parameter set, replacing any previous entry."""
        self._sets[(param_set.kind, param_set.regime)] = param_set

    def get(self, kind, regime):
        """Get the parameter set of a concrete kind in a regime."""
        kind = ModelKind.coerce(kind)
        regime = Regime.coerce(regime)
        key = (kind.resolve(regime), regime)
        if key not in self._sets:
            raise KeyError(f"No parameters for {kind.value} in regime "
                           f"'{regime.value}'. "
                           f"Available: {[(k.value, r.value) for k, r in self._sets]}")
        return self._sets[key]

    def fixed_point(self, kind):
        """The known fixed point of a kind, or None.

        Fixed points are registered on the excitable entry and hold for the
        variant whatever regime it is currently in.
        """
        kind = ModelKind.coerce(kind)
        for regime in (Regime.EXCITABLE, Regime.BURSTING):
            param_set = self._sets.get((kind, regime))
            if param_set is not None and param_set.fixed_point is not None:
                return param_set.fixed_point
        return None

    def list_param_sets(self):
        """List all registered parameter sets."""
        return [p.to_dict() for p in self._sets.values()]

    def __len__(self):
        return len(self._sets)

    def __contains__(self, key):
        kind, regime = key
        return (ModelKind.coerce(kind), Regime.coerce(regime)) in self._sets


# ---------------------------------------------------------------------------
# Build the database
# ---------------------------------------------------------------------------

PARAM_DB = ParamDB()

# --- Integrate-and-fire ---

for _regime in Regime:
    PARAM_DB.register(ParamSet(
        kind=ModelKind.LIF, regime=_regime,
        params=LIFParams(),
        initial_state=(0.0,),
        timing=IF_TIMING,
        fixed_point=(0.0,),
        source="Lapicque 1907",
        notes="Suprathreshold drive: fires periodically in both regimes. "
              "The registered fixed point is the reset state, not a true "
              "fixed point.",
    ))
    PARAM_DB.register(ParamSet(
        kind=ModelKind.GLEXP, regime=_regime,
        params=GLExpParams(),
        initial_state=(0.0,),
        timing=IF_TIMING,
        fixed_point=(0.0,),
        source="Galves & Löcherbach 2013",
        notes="Stochastic firing. The registered fixed point is the reset "
              "state, not a true fixed point.",
    ))

# --- KTz maps ---

PARAM_DB.register(ParamSet(
    kind=ModelKind.KTZ_TANH, regime=Regime.BURSTING,
    params=KTzParams(k=0.6, t=0.35, delta=0.001, lam=0.001, x_r=-0.5, i_ext=0.0),
    initial_state=(0.0, 0.0, 0.0),
    timing=MAP_TIMING,
    source="Kuva et al. 2001",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.KTZ_TANH, regime=Regime.EXCITABLE,
    params=KTzParams(k=0.6, t=0.35, delta=0.007, lam=0.004, x_r=-0.7, i_ext=0.0),
    initial_state=(-0.5, -0.6717116617084296, -0.0161647647380404),
    timing=MAP_TIMING,
    fixed_point=(-0.6717116617084296, -0.6717116617084296, -0.0161647647380404),
    source="Kuva et al. 2001",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.KTZ_LOG, regime=Regime.BURSTING,
    params=KTzParams(k=0.6, t=0.3, delta=0.001, lam=0.003, x_r=-0.3, i_ext=0.2),
    initial_state=(-0.2, -0.2, -0.2),
    timing=MAP_TIMING,
    source="Girardi-Schappo et al. 2013",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.KTZ_LOG, regime=Regime.EXCITABLE,
    params=KTzParams(k=0.6, t=0.32, delta=0.05, lam=0.01, x_r=-0.5, i_ext=0.0),
    initial_state=(-0.1, -0.3458236433584459, -0.0308352713283108),
    timing=MAP_TIMING,
    fixed_point=(-0.3458236433584459, -0.3458236433584459, -0.0308352713283108),
    source="Girardi-Schappo et al. 2013",
))

# --- Izhikevich ---

PARAM_DB.register(ParamSet(
    kind=ModelKind.IZHIKEVICH, regime=Regime.BURSTING,
    params=IzhikevichParams(a=0.02, b=0.25, c=-57.0, d=0.0, v_peak=30.0, i_ext=2.0),
    initial_state=(0.1, 0.1),
    timing=Timing(dt=1.0, timesteps_per_ms=5.0, transient_length=1000),
    source="Izhikevich 2003",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.IZHIKEVICH, regime=Regime.EXCITABLE,
    params=IzhikevichParams(a=0.02, b=0.25, c=-62.0, d=0.0, v_peak=30.0, i_ext=0.6),
    initial_state=(-56.0, -15.649612309889193),
    timing=Timing(dt=1.0, timesteps_per_ms=5.0, transient_length=1000),
    fixed_point=(-62.5984492395571, -15.649612309889193),
    source="Izhikevich 2003",
))

# --- Rulkov ---

PARAM_DB.register(ParamSet(
    kind=ModelKind.RULKOV, regime=Regime.BURSTING,
    params=RulkovParams(alpha=6.0, sigma=-1.1, mu=0.001, i_ext=0.0),
    initial_state=(-0.1, -0.1),
    timing=Timing(dt=1.0, timesteps_per_ms=10.0, transient_length=2000),
    source="Rulkov 2002",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.RULKOV, regime=Regime.EXCITABLE,
    params=RulkovParams(alpha=2.5, sigma=-0.6, mu=0.001, i_ext=0.0),
    initial_state=(-0.4, -2.1625),
    timing=Timing(dt=1.0, timesteps_per_ms=10.0, transient_length=2000),
    fixed_point=(-0.6, -2.1625),
    source="Rulkov 2002",
))

# --- Hodgkin-Huxley ---

_HH_GATES = (0.353721170200369, 0.069236269218388, 0.514071155409594)  # n, m, h

PARAM_DB.register(ParamSet(
    kind=ModelKind.HH_STD, regime=Regime.EXCITABLE,
    params=HHStdParams(),
    initial_state=(-59.0,) + _HH_GATES,
    timing=ODE_TIMING,
    fixed_point=(-62.698490240702419,) + _HH_GATES,
    source="Hodgkin & Huxley 1952",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.HH_STD, regime=Regime.BURSTING,
    params=HHStdParams(i_ext=3.7161),
    initial_state=(-59.0,) + _HH_GATES,
    timing=ODE_TIMING,
    source="Hodgkin & Huxley 1952",
    notes="Excitable constants with a tonic current just above rheobase.",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.HH_LEECH, regime=Regime.BURSTING,
    params=HHLeechParams(),
    initial_state=(-0.05, 0.3, 0.3),
    timing=ODE_TIMING,
    source="Hill et al. 2001; Cymbalyuk et al. 2002",
))

PARAM_DB.register(ParamSet(
    kind=ModelKind.HH_LEECH, regime=Regime.EXCITABLE,
    params=HHLeechParams(v_k2_shift=0.0248),
    initial_state=(-0.05, 0.3, 0.3),
    timing=ODE_TIMING,
    source="Hill et al. 2001; Cymbalyuk et al. 2002",
    notes="No fixed point is known for this model.",
))

del _regime


# ---------------------------------------------------------------------------
# Convenience functions
# ---------------------------------------------------------------------------

def get_param_set(kind, regime):
    """Get the parameter set of a (kind, regime) pair."""
    return PARAM_DB.get(kind, regime)


def list_param_sets():
    """List all registered parameter sets."""
    return PARAM_DB.list_param_sets()
