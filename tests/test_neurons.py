"""Tests for the single-neuron models.

Each variant is checked against its update law on hand-computed steps, and
against the shared contract (reset, initial conditions, fixed points).
"""

import math

import numpy as np
import pytest

from neuroperf.models.neurons import (
    Neuron,
    LIFModel,
    GLExpModel,
    KTzTanhModel,
    KTzLogModel,
    IzhikevichModel,
    RulkovModel,
    HHStdModel,
    HHLeechModel,
    NEURON_CLASSES,
    create_neuron,
)
from neuroperf.models.params import CONCRETE_KINDS, ModelKind, Regime, PARAM_DB
from neuroperf.network.junction import GapJunction


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(params=CONCRETE_KINDS, ids=lambda k: k.value)
def kind(request):
    return request.param


@pytest.fixture
def lif():
    return LIFModel(Regime.EXCITABLE)


# ---------------------------------------------------------------------------
# Shared contract
# ---------------------------------------------------------------------------

class TestContract:
    def test_factory_class(self, kind):
        neuron = create_neuron(kind, Regime.BURSTING)
        assert isinstance(neuron, NEURON_CLASSES[kind])
        assert isinstance(neuron, Neuron)

    def test_initial_state_from_table(self, kind):
        for regime in Regime:
            neuron = create_neuron(kind, regime)
            expected = PARAM_DB.get(kind, regime).initial_state
            np.testing.assert_array_equal(neuron.state, expected)
            assert neuron.get_potential() == expected[0]

    def test_timing_from_table(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        timing = PARAM_DB.get(kind, Regime.EXCITABLE).timing
        assert neuron.dt == timing.dt
        assert neuron.timesteps_per_ms == timing.timesteps_per_ms
        assert neuron.transient_length == timing.transient_length

    def test_name(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        assert neuron.name == f"{kind.label}Model"

    def test_not_a_network(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        assert not neuron.is_network
        assert neuron.neuron_count == 1

    def test_network_potentials_single_entry(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        np.testing.assert_array_equal(neuron.get_network_potentials(),
                                      [neuron.get_potential()])

    def test_initial_condition_wrong_length(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        with pytest.raises(ValueError, match="initial condition"):
            neuron.set_initial_condition(np.zeros(neuron.dimension + 1))

    def test_initial_condition_roundtrip(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        ic = np.linspace(-0.5, 0.5, neuron.dimension)
        neuron.set_initial_condition(ic)
        np.testing.assert_array_equal(neuron.state, ic)

    def test_reset_restores_initial_state(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE, rng=np.random.RandomState(0))
        for _ in range(5):
            neuron.time_step()
        neuron.reset(Regime.EXCITABLE)
        np.testing.assert_array_equal(
            neuron.state, PARAM_DB.get(kind, Regime.EXCITABLE).initial_state)

    def test_reset_switches_regime(self):
        neuron = KTzTanhModel(Regime.BURSTING)
        neuron.reset(Regime.EXCITABLE, horizon=100)
        assert neuron.regime is Regime.EXCITABLE
        assert neuron.params.delta == 0.007
        assert neuron.horizon == 100

    def test_alias_factory(self):
        assert isinstance(create_neuron("hodgkin_huxley", "bursting"), HHLeechModel)
        assert isinstance(create_neuron("hodgkin_huxley", "excitable"), HHStdModel)

    def test_standalone_step_ignores_stale_current(self, lif):
        lif.i_syn = 100.0
        lif.time_step()
        assert lif.v == pytest.approx(3.0)


# ---------------------------------------------------------------------------
# Fixed points
# ---------------------------------------------------------------------------

class TestFixedPoints:
    @pytest.mark.parametrize("kind", [
        ModelKind.KTZ_TANH, ModelKind.KTZ_LOG,
        ModelKind.IZHIKEVICH, ModelKind.RULKOV,
    ], ids=lambda k: k.value)
    def test_map_fixed_point_is_invariant(self, kind):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        fp = neuron.reset_to_fixed_point()
        neuron.time_step()
        np.testing.assert_allclose(neuron.state, fp, atol=1e-6)

    @pytest.mark.parametrize("kind, expected", [
        (ModelKind.LIF, [0.0]),
        (ModelKind.GLEXP, [0.0]),
        (ModelKind.KTZ_TANH,
         [-0.6717116617084296, -0.6717116617084296, -0.0161647647380404]),
        (ModelKind.KTZ_LOG,
         [-0.3458236433584459, -0.3458236433584459, -0.0308352713283108]),
        (ModelKind.IZHIKEVICH, [-62.5984492396, -15.6496123099]),
        (ModelKind.RULKOV, [-0.6, -2.1625]),
        (ModelKind.HH_STD,
         [-62.6984902407, 0.353721170200, 0.069236269218, 0.514071155410]),
    ], ids=lambda v: v.value if isinstance(v, ModelKind) else None)
    def test_fixed_point_constants(self, kind, expected):
        neuron = create_neuron(kind, Regime.EXCITABLE)
        neuron.reset_to_fixed_point()
        assert neuron.get_potential() == pytest.approx(expected[0], abs=1e-10)
        np.testing.assert_allclose(neuron.state, expected, rtol=0, atol=1e-10)

    def test_reset_to_fixed_point_sets_state(self):
        neuron = RulkovModel(Regime.EXCITABLE)
        fp = neuron.reset_to_fixed_point()
        np.testing.assert_array_equal(fp, [-0.6, -2.1625])
        np.testing.assert_array_equal(neuron.state, fp)

    def test_hh_std_fixed_point_is_equilibrium(self):
        neuron = HHStdModel(Regime.EXCITABLE)
        fp = neuron.reset_to_fixed_point()
        np.testing.assert_allclose(neuron.derivative(fp, 0.0), 0.0, atol=1e-4)

    def test_hh_leech_keeps_state(self):
        neuron = HHLeechModel(Regime.BURSTING)
        before = neuron.state
        np.testing.assert_array_equal(neuron.reset_to_fixed_point(), before)
        np.testing.assert_array_equal(neuron.state, before)

    def test_one_dimensional_fixed_point(self, lif):
        assert lif.reset_to_fixed_point().shape == (1,)


# ---------------------------------------------------------------------------
# Update laws
# ---------------------------------------------------------------------------

class TestLIF:
    def test_first_step(self, lif):
        lif.time_step()
        assert lif.v == pytest.approx(3.0)

    def test_reset_above_threshold(self, lif):
        previous = lif.v
        for _ in range(500):
            lif.time_step()
            if previous > lif.params.v_threshold:
                assert lif.v == lif.params.v_reset
            previous = lif.v

    def test_networked_step_adds_current(self):
        pre, post = LIFModel(Regime.EXCITABLE), LIFModel(Regime.EXCITABLE)
        pre.set_initial_condition([-50.0])
        post.set_initial_condition([-60.0])
        junction = GapJunction(pre, post, 0.1)
        post.add_input(junction)
        junction.time_step()
        assert junction.current == pytest.approx(1.0)
        post.time_step_networked()
        assert post.i_syn == pytest.approx(1.0)
        assert post.v == pytest.approx(-60.0 + 0.1 * (3.0 + 30.0 + 1.0))


class TestGLExp:
    def test_seeded_runs_identical(self):
        a = GLExpModel(Regime.BURSTING, rng=np.random.RandomState(3))
        b = GLExpModel(Regime.BURSTING, rng=np.random.RandomState(3))
        va, vb = [], []
        for _ in range(200):
            a.time_step()
            b.time_step()
            va.append(a.v)
            vb.append(b.v)
        assert va == vb

    def test_resets_after_firing(self):
        neuron = GLExpModel(Regime.EXCITABLE, rng=np.random.RandomState(1))
        for _ in range(10000):
            neuron.time_step()
            if neuron.fired:
                break
        assert neuron.fired
        neuron.time_step()
        assert neuron.v == neuron.params.v_reset

    def test_probability_saturates_without_overflow(self):
        neuron = GLExpModel(Regime.EXCITABLE, rng=np.random.RandomState(0))
        neuron.set_initial_condition([1.0e6])
        assert np.isfinite(neuron.firing_probability())
        assert neuron.firing_probability() > 1.0

    def test_initial_condition_clears_flag(self):
        neuron = GLExpModel(Regime.EXCITABLE, rng=np.random.RandomState(0))
        neuron.fired = True
        neuron.set_initial_condition([0.0])
        assert not neuron.fired


class TestKTz:
    def test_tanh_bursting_first_step(self):
        neuron = KTzTanhModel(Regime.BURSTING)
        neuron.time_step()
        assert neuron.x == 0.0
        assert neuron.y == 0.0
        assert neuron.z == pytest.approx(-0.0005)

    def test_y_takes_previous_x(self):
        neuron = KTzLogModel(Regime.BURSTING)
        x0 = neuron.x
        neuron.time_step()
        assert neuron.y == x0

    def test_logistic_saturation(self):
        assert KTzLogModel.saturate(1.0) == 0.5
        assert KTzLogModel.saturate(-1.0) == -0.5
        assert KTzLogModel.saturate(0.0) == 0.0

    def test_tanh_saturation(self):
        assert KTzTanhModel.saturate(0.5) == pytest.approx(np.tanh(0.5))


class TestIzhikevich:
    def test_subthreshold_step(self):
        neuron = IzhikevichModel(Regime.BURSTING)
        neuron.time_step()
        v0, u0 = 0.1, 0.1
        assert neuron.v == pytest.approx(0.04 * v0 * v0 + 6 * v0 + 140 - u0 + 2.0)
        assert neuron.u == pytest.approx(u0 + 0.02 * (0.25 * v0 - u0))

    def test_peak_resets(self):
        neuron = IzhikevichModel(Regime.BURSTING)
        neuron.set_initial_condition([35.0, 1.0])
        neuron.time_step()
        assert neuron.v == neuron.params.c
        assert neuron.u == 1.0 + neuron.params.d


class TestRulkov:
    @pytest.mark.parametrize("x, y, expected", [
        (-1.0, -0.1, 2.9),
        (1.0, -0.1, 5.9),
        (6.0, -0.1, -1.0),
    ])
    def test_fast_map_branches(self, x, y, expected):
        neuron = RulkovModel(Regime.BURSTING)
        assert neuron.fast_map(x, y) == pytest.approx(expected)

    def test_slow_variable(self):
        neuron = RulkovModel(Regime.BURSTING)
        neuron.time_step()
        assert neuron.y == pytest.approx(-0.1 - 0.001 * (-0.1 + 1.1))


class TestHHLeech:
    """Vector field of the leech interneuron against its written-out law."""

    @staticmethod
    def _sigma(a, b, v):
        return 1.0 / (1.0 + math.exp(a * (v + b)))

    def _expected(self, y, current, v_k2_shift):
        v, m_k2, h_na = y
        dh = (self._sigma(500.0, 0.0325, v) - h_na) / 0.0405
        dm = (self._sigma(-83.0, 0.018 + v_k2_shift, v) - m_k2) / 0.9
        dv = -(current + 0.0062e-9
               + 30.0e-9 * m_k2 ** 2 * (v - (-0.07))
               + 160.0e-9 * h_na * self._sigma(-150.0, 0.0305, v) ** 3 * (v - 0.045)
               + 8.0e-9 * (v - (-0.046))) / 0.5e-9
        return [dv, dm, dh]

    @pytest.mark.parametrize("y, current", [
        ([-0.05, 0.3, 0.3], 0.0),
        ([-0.02, 0.7, 0.1], 0.0),
        ([-0.04, 0.2, 0.6], 1.0e-10),
    ])
    def test_bursting_vector_field(self, y, current):
        neuron = HHLeechModel(Regime.BURSTING)
        np.testing.assert_allclose(neuron.derivative(np.array(y), current),
                                   self._expected(y, current, -0.0228),
                                   rtol=1e-9, atol=0)

    def test_excitable_vector_field(self):
        neuron = HHLeechModel(Regime.EXCITABLE)
        y = [-0.03, 0.4, 0.5]
        np.testing.assert_allclose(neuron.derivative(np.array(y), 0.0),
                                   self._expected(y, 0.0, 0.0248),
                                   rtol=1e-9, atol=0)

    def test_k2_shift_moves_activation(self):
        y = np.array([-0.03, 0.4, 0.5])
        bursting = HHLeechModel(Regime.BURSTING).derivative(y, 0.0)
        excitable = HHLeechModel(Regime.EXCITABLE).derivative(y, 0.0)
        assert bursting[1] != pytest.approx(excitable[1])
        assert bursting[0] == excitable[0]
        assert bursting[2] == excitable[2]

    def test_current_enters_with_outward_sign(self):
        neuron = HHLeechModel(Regime.BURSTING)
        y = neuron.state
        assert neuron.derivative(y, 1.0e-10)[0] < neuron.derivative(y, 0.0)[0]


class TestODEModels:
    def test_hh_std_rests_at_fixed_point(self):
        neuron = HHStdModel(Regime.EXCITABLE)
        fp = neuron.reset_to_fixed_point()
        _trace(neuron, 100)
        np.testing.assert_allclose(neuron.state, fp, atol=1e-4)

    def test_hh_leech_step_moves_state(self):
        neuron = HHLeechModel(Regime.BURSTING)
        before = neuron.state
        neuron.time_step()
        assert neuron.state.shape == (3,)
        assert not np.array_equal(neuron.state, before)

    def test_hh_std_derivative_shape(self):
        neuron = HHStdModel(Regime.EXCITABLE)
        assert neuron.derivative(neuron.state, 0.0).shape == (4,)

    def test_hh_std_current_depolarizes(self):
        neuron = HHStdModel(Regime.EXCITABLE)
        fp = neuron.reset_to_fixed_point()
        assert neuron.derivative(fp, 1.0)[0] > neuron.derivative(fp, 0.0)[0]


def _trace(neuron, n_steps):
    out = []
    for _ in range(n_steps):
        neuron.time_step()
        out.append(neuron.get_potential())
    return out
