# pynemo/logs/__init__.py

"""
Per-run log files for scenario calculations.
"""

from .logger import get_logger, LOG_FORMAT

__all__ = ['get_logger', 'LOG_FORMAT']
