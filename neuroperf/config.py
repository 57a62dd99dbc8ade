"""Benchmark configuration.

Defaults live in the BenchConfig dataclass; a YAML file may override any
of them, and the command line overrides the file.

Example YAML:
    n_samples: 20
    total_time: 500
    tolerance: 1.0e-8
    n_neurons: 5
    models: [ktz_tanh, rulkov]
"""

from dataclasses import dataclass, field, fields, asdict
from pathlib import Path
from typing import List, Optional

import numpy as np
import yaml

from neuroperf.models.params import ModelKind, Regime
from neuroperf.utils import get_logger

LOG = get_logger("config")


# Gap-junction conductance used for each variant's networks.
COUPLING = {
    Regime.EXCITABLE: {
        ModelKind.LIF: 0.1,
        ModelKind.GLEXP: 0.1,
        ModelKind.KTZ_LOG: 0.1,
        ModelKind.KTZ_TANH: 0.04,
        ModelKind.RULKOV: 0.08,
        ModelKind.IZHIKEVICH: 0.1,
        ModelKind.HODGKIN_HUXLEY: 0.05,
    },
    Regime.BURSTING: {
        ModelKind.LIF: 0.1,
        ModelKind.GLEXP: 0.1,
        ModelKind.KTZ_LOG: 0.0,
        ModelKind.KTZ_TANH: 0.04,
        ModelKind.RULKOV: 0.08,
        ModelKind.IZHIKEVICH: 0.1,
        ModelKind.HODGKIN_HUXLEY: 1.0e-10,
    },
}


def coupling_for(kind, regime):
    """Network conductance of a variant in a regime."""
    regime = Regime.coerce(regime)
    kind = ModelKind.coerce(kind)
    if kind in (ModelKind.HH_STD, ModelKind.HH_LEECH):
        kind = ModelKind.HODGKIN_HUXLEY
    return COUPLING[regime][kind]


@dataclass
class BenchConfig:
    """Settings of a benchmark run.

    Parameters
    ----------
    n_samples : int
        Repetitions of every measurement.
    total_time : float
        Model time (ms) simulated per timestep-cost sample.
    max_time : float
        Budget (model time units) of a fixed-point search.
    tolerance : float
        Convergence threshold on the change of potential per step.
    n_neurons : int
        Network size.
    write_potentials : bool
        Write time-series files before the measurements.
    output_dir : str
        Directory for time-series files.
    seed : int, optional
        Seed of the shared random source; None for a fresh one.
    models : list of str, optional
        Restrict the run to these variants (ModelKind values).
    """
    n_samples: int = 100
    total_time: float = 1000
    max_time: float = 100000
    tolerance: float = 1.0e-8
    n_neurons: int = 3
    write_potentials: bool = False
    output_dir: str = "."
    seed: Optional[int] = None
    models: Optional[List[str]] = field(default=None)

    def __post_init__(self):
        if self.n_samples < 1:
            raise ValueError(f"n_samples must be positive, got {self.n_samples}")
        if self.n_neurons < 1:
            raise ValueError(f"n_neurons must be positive, got {self.n_neurons}")
        if self.tolerance <= 0:
            raise ValueError(f"tolerance must be positive, got {self.tolerance}")
        if self.models is not None:
            self.models = [ModelKind.coerce(m).value for m in self.models]

    @classmethod
    def from_dict(cls, data):
        """Build a config from a mapping, rejecting unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ValueError(f"Unknown configuration keys {sorted(unknown)}. "
                             f"Available: {sorted(known)}")
        return cls(**data)

    def updated(self, **overrides):
        """Copy with the non-None overrides applied."""
        data = asdict(self)
        data.update({k: v for k, v in overrides.items() if v is not None})
        return self.from_dict(data)

    def rng(self):
        return np.random.RandomState(self.seed)

    def selects(self, kind):
        """True if the variant takes part in the run."""
        if self.models is None:
            return True
        return ModelKind.coerce(kind).value in self.models

    def to_dict(self):
        return asdict(self)


def load_config(path):
    """Read a BenchConfig from a YAML file."""
    path = Path(path)
    with open(path, "r") as f:
        data = yaml.safe_load(f) or {}
    LOG.info("Loaded configuration from %s", path)
    return BenchConfig.from_dict(data)
