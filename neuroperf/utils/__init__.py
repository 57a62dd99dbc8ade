"""
Simple utilities used across neuroperf.
"""
from .logging import get_logger, set_log_level, LEVELS
