"""io — Writing recorded potentials to disk."""

from .timeseries import (
    free_path,
    timeseries_filename,
    write_timeseries,
)
