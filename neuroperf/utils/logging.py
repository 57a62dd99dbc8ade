"""A print-based logger for benchmark runs.

Benchmarks are usually launched from a terminal and their output is piped
into a file next to the time-series data, so the logger writes plain text to
stdout with timestamps and level labels. A module-wide threshold keeps the
per-neuron debug chatter out of long measurement runs.

Usage:
    from neuroperf.utils import get_logger
    LOG = get_logger("network")
    LOG.info("Built %d junctions", 6)
"""

import sys
from datetime import datetime


LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}

_threshold = {"level": LEVELS["INFO"]}


def set_log_level(level):
    """Set the minimum level printed by every neuroperf logger.

    Parameters
    ----------
    level : str
        One of DEBUG, INFO, WARNING, ERROR (case-insensitive).
    """
    key = str(level).upper()
    if key not in LEVELS:
        raise ValueError(f"Unknown log level '{level}'. "
                         f"Available: {list(LEVELS)}")
    _threshold["level"] = LEVELS[key]


def get_logger(name, out=None):
    """Create a print-based logger.

    Parameters
    ----------
    name : str
        Logger name, displayed in every message.
    out : file-like, optional
        Additional output stream (e.g., an open log file).

    Returns
    -------
    callable
        A log function with .debug, .info, .warning, .error methods.
    """
    prefix = f"neuroperf:{name}"

    def log(level, msg, args):
        if LEVELS[level] < _threshold["level"]:
            return
        now = datetime.now().strftime("%H:%M:%S")
        try:
            text = msg % args if args else msg
        except TypeError:
            text = msg
        for dest in [sys.stdout] + ([out] if out else []):
            print(f"[{now}] {prefix} {level}: {text}", file=dest)

    log.debug = lambda msg, *args: log("DEBUG", msg, args)
    log.info = lambda msg, *args: log("INFO", msg, args)
    log.warning = lambda msg, *args: log("WARNING", msg, args)
    log.error = lambda msg, *args: log("ERROR", msg, args)

    return log
