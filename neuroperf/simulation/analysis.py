"""Summary statistics of repeated measurements."""

from dataclasses import dataclass

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Statistics:
    """Mean, sample standard deviation and standard error of a sample.

    Attributes
    ----------
    data : np.ndarray
        The observations.
    mean : float
    std : float
        Sample standard deviation (N - 1 denominator).
    sem : float
        Standard error of the mean, std / sqrt(N).
    """
    data: np.ndarray
    mean: float = 0.0
    std: float = 0.0
    sem: float = 0.0

    @classmethod
    def from_samples(cls, data):
        """Compute statistics of a sample.

        An empty sample gives zeros; a single observation has zero spread.
        """
        data = np.asarray(data, dtype=np.float64)
        data.setflags(write=False)
        n = len(data)
        if n == 0:
            return cls(data=data)
        mean = float(np.mean(data))
        if n < 2:
            return cls(data=data, mean=mean)
        std = float(np.std(data, ddof=1))
        return cls(data=data, mean=mean, std=std, sem=std / np.sqrt(n))

    @property
    def n(self):
        return len(self.data)

    def to_dict(self):
        return {"mean": self.mean, "std": self.std, "sem": self.sem, "n": self.n}

    def __str__(self):
        return f"{self.mean:.6g} +/- {self.std:.6g}"


def summarize(stats_by_label):
    """Tabulate a mapping label -> Statistics.

    Returns
    -------
    pd.DataFrame
        One row per label with columns mean, std, sem, n.
    """
    rows = [dict(label=label, **stats.to_dict())
            for label, stats in stats_by_label.items()]
    return pd.DataFrame(rows, columns=["label", "mean", "std", "sem", "n"])
