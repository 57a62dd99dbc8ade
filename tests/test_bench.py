"""Tests for the measurement harness and the experiment driver.

Measurements use tiny horizons and sample counts; only their bookkeeping
is checked, never the timings themselves.
"""

import gc

import numpy as np
import pytest

from neuroperf.bench import (
    ModelSuite,
    PerformanceSample,
    RESULT_COLUMNS,
    measure_convergence,
    measure_timestep_cost,
    run_experiment,
    time_call,
)
from neuroperf.config import BenchConfig, coupling_for
from neuroperf.models.neurons import HHLeechModel, HHStdModel, KTzTanhModel, LIFModel, RulkovModel
from neuroperf.models.params import ModelKind, Regime, PARAM_DB
from neuroperf.network import Topology
from neuroperf.simulation.analysis import summarize


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture
def small_config(tmp_path):
    return BenchConfig(n_samples=2, total_time=1, max_time=2000,
                       tolerance=1e-3, n_neurons=3, seed=1,
                       output_dir=str(tmp_path),
                       models=["ktz_tanh", "rulkov"])


# ---------------------------------------------------------------------------
# Timing
# ---------------------------------------------------------------------------

class TestTimeCall:
    def test_returns_result(self):
        result, sample = time_call(sum, [1, 2, 3])
        assert result == 6
        assert isinstance(sample, PerformanceSample)

    def test_sample_fields(self):
        _, sample = time_call(lambda: [object() for _ in range(1000)])
        assert sample.wall_ns >= 0
        assert sample.cpu_ns >= 0
        assert len(sample.gc_collections) == len(gc.get_stats())
        assert sample.total_collections >= 0


class TestMeasureTimestepCost:
    def test_statistics_per_sample(self):
        neuron = KTzTanhModel(Regime.BURSTING)
        stats = measure_timestep_cost(neuron, total_time=1, n_samples=3)
        assert set(stats) == {"cpu_ns_per_step", "wall_ns_per_step",
                              "gc_collections"}
        assert stats["cpu_ns_per_step"].n == 3

    def test_model_advances(self):
        neuron = KTzTanhModel(Regime.BURSTING)
        reference = KTzTanhModel(Regime.BURSTING)
        measure_timestep_cost(neuron, total_time=1, n_samples=2)
        for _ in range(20):
            reference.time_step()
        np.testing.assert_array_equal(neuron.state, reference.state)


class TestMeasureConvergence:
    def test_converging_model(self):
        neuron = RulkovModel(Regime.EXCITABLE)
        stats = measure_convergence(neuron, Regime.EXCITABLE, tolerance=1e-3,
                                    max_time=100000, n_samples=2)
        assert stats["steps"].n == 2
        assert stats["steps"].mean > 0
        assert stats["steps"].std == 0.0

    def test_non_converging_samples_excluded(self):
        lif = LIFModel(Regime.EXCITABLE)
        stats = measure_convergence(lif, Regime.EXCITABLE, tolerance=1e-8,
                                    max_time=10, n_samples=2)
        assert stats["steps"].n == 0
        assert stats["cpu_ns"].mean == 0.0


# ---------------------------------------------------------------------------
# Model suite
# ---------------------------------------------------------------------------

class TestModelSuite:
    def test_full_suite(self):
        suite = ModelSuite(Regime.EXCITABLE,
                           BenchConfig(total_time=1, seed=0),
                           Topology.LINEAR)
        assert len(suite.neurons) == 8
        assert len(suite.networks) == 7

    def test_alias_lookup(self):
        config = BenchConfig(total_time=1, models=["hodgkin_huxley"])
        bursting = ModelSuite(Regime.BURSTING, config)
        excitable = ModelSuite(Regime.EXCITABLE, config, Topology.LINEAR)
        assert isinstance(bursting.neuron(ModelKind.HODGKIN_HUXLEY), HHLeechModel)
        assert isinstance(excitable.neuron(ModelKind.HODGKIN_HUXLEY), HHStdModel)

    def test_coupling_table(self):
        suite = ModelSuite(Regime.BURSTING, BenchConfig(total_time=1, seed=0))
        for kind, network in suite.networks.items():
            assert network.conductance == coupling_for(kind, Regime.BURSTING)
            assert network.topology is Topology.MEAN_FIELD

    def test_selection(self, small_config):
        suite = ModelSuite(Regime.EXCITABLE, small_config, Topology.LINEAR)
        assert set(suite.neurons) == {ModelKind.KTZ_TANH, ModelKind.RULKOV}
        assert [k for k, _ in suite.driven_networks()] == [
            ModelKind.KTZ_TANH, ModelKind.RULKOV]

    def test_bursting_reset_runs_transient(self, small_config):
        suite = ModelSuite(Regime.BURSTING, small_config)
        neuron = suite.neuron(ModelKind.KTZ_TANH)
        reference = KTzTanhModel(Regime.BURSTING)
        for _ in range(1001):
            reference.time_step()
        np.testing.assert_array_equal(neuron.state, reference.state)

    def test_excitable_reset_keeps_initial_state(self, small_config):
        suite = ModelSuite(Regime.EXCITABLE, small_config, Topology.LINEAR)
        np.testing.assert_array_equal(
            suite.neuron("rulkov").state,
            PARAM_DB.get(ModelKind.RULKOV, Regime.EXCITABLE).initial_state)

    def test_write_potentials(self, small_config, tmp_path):
        suite = ModelSuite(Regime.BURSTING, small_config)
        paths = suite.write_potentials()
        names = sorted(p.name for p in paths)
        assert names == sorted([
            "KTzTanhModel_bst.dat", "RulkovModel_bst.dat",
            "MeanField_KTzTanhBursting_bst.dat",
            "MeanField_RulkovBursting_bst.dat",
        ])
        assert all(p.parent == tmp_path for p in paths)


# ---------------------------------------------------------------------------
# Experiment
# ---------------------------------------------------------------------------

class TestRunExperiment:
    def test_result_table(self, small_config):
        results = run_experiment(small_config)
        assert list(results.columns) == RESULT_COLUMNS
        assert set(results["phase"]) == {
            "neuron_timestep", "convergence",
            "linear_network_timestep", "mean_field_network_timestep",
        }

    def test_phase_models(self, small_config):
        results = run_experiment(small_config)
        by_phase = results.groupby("phase")["model"].apply(set)
        assert by_phase["neuron_timestep"] == {"KTzTanhModel", "RulkovModel"}
        assert by_phase["convergence"] == {"KTzTanhModel", "RulkovModel"}
        assert by_phase["linear_network_timestep"] == {
            "Linear_KTzTanhExcitable", "Linear_RulkovExcitable"}
        assert by_phase["mean_field_network_timestep"] == {
            "MeanField_KTzTanhBursting", "MeanField_RulkovBursting"}

    def test_rows_follow_summarize(self, small_config):
        results = run_experiment(small_config)
        metrics = results.groupby("phase")["metric"].apply(set)
        assert metrics["convergence"] == {"steps", "cpu_ns", "wall_ns"}
        assert metrics["neuron_timestep"] == {
            "cpu_ns_per_step", "wall_ns_per_step", "gc_collections"}

        neuron_rows = results[(results.phase == "neuron_timestep")
                              & (results.model == "RulkovModel")]
        expected = summarize(measure_timestep_cost(
            RulkovModel(Regime.BURSTING), small_config.total_time,
            small_config.n_samples))
        assert list(neuron_rows["metric"]) == list(expected["label"])
        assert list(neuron_rows["n"]) == list(expected["n"])

    def test_lif_has_no_convergence_row(self, small_config):
        config = small_config.updated(models=["lif"])
        results = run_experiment(config)
        assert "convergence" not in set(results["phase"])
        assert "LIFModel" in set(results["model"])

    def test_writes_potentials(self, small_config, tmp_path):
        config = small_config.updated(write_potentials=True)
        run_experiment(config)
        written = {p.name for p in tmp_path.iterdir()}
        assert "KTzTanhModel_bst.dat" in written
        assert "KTzTanhModel_exc.dat" in written
        assert "Linear_RulkovExcitable_exc.dat" in written
