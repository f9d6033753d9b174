#
# src/tcrwatch/telemetry/__init__.py
#
"""
Logging setup for tcrwatch.
"""

from .logger import StructLogger, setup_logging

__all__ = ["StructLogger", "setup_logging"]
