"""Tests for time-series files."""

import numpy as np
import pandas as pd

from neuroperf.io import free_path, timeseries_filename, write_timeseries
from neuroperf.models.neurons import LIFModel
from neuroperf.models.params import Regime
from neuroperf.network import NetworkModel
from neuroperf.simulation import simulate


class TestFreePath:
    def test_unused(self, tmp_path):
        assert free_path(tmp_path / "a.dat") == tmp_path / "a.dat"

    def test_numbered(self, tmp_path):
        (tmp_path / "a.dat").write_text("")
        (tmp_path / "a_1.dat").write_text("")
        assert free_path(tmp_path / "a.dat") == tmp_path / "a_2.dat"


class TestWriteTimeseries:
    def test_filename(self):
        assert timeseries_filename("LIFModel", Regime.BURSTING) == "LIFModel_bst.dat"
        assert timeseries_filename("LIFModel", "excitable") == "LIFModel_exc.dat"

    def test_single_neuron(self, tmp_path):
        result = simulate(LIFModel(Regime.EXCITABLE), 1)
        path = write_timeseries(result, tmp_path, Regime.EXCITABLE)
        assert path.name == "LIFModel_exc.dat"

        lines = path.read_text().splitlines()
        assert lines[0] == "#t\tV"
        assert len(lines) == 11
        t, v = (float(x) for x in lines[1].split("\t"))
        assert t == 0.0
        assert v == 3.0
        assert "e+" in lines[1] or "e-" in lines[1]

    def test_never_overwrites(self, tmp_path):
        result = simulate(LIFModel(Regime.EXCITABLE), 1)
        first = write_timeseries(result, tmp_path, "excitable")
        second = write_timeseries(result, tmp_path, "excitable")
        assert first.name == "LIFModel_exc.dat"
        assert second.name == "LIFModel_exc_1.dat"

    def test_network_columns(self, tmp_path):
        net = NetworkModel("rulkov", "bursting", topology="mean_field",
                           n_neurons=3, rng=np.random.RandomState(2))
        result = simulate(net, 1)
        path = write_timeseries(result, tmp_path / "out", "bursting")
        assert path.name == "MeanField_RulkovBursting_bst.dat"
        frame = pd.read_csv(path, sep="\t")
        assert list(frame.columns) == ["#t", "V0", "V1", "V2"]
        np.testing.assert_allclose(frame.iloc[:, 1:].to_numpy(),
                                   result.potentials, rtol=1e-8)
