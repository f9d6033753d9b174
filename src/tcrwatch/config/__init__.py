#
# config/__init__.py
#
"""
Configuration handling sub-package for tcrwatch.

Exports the loading function and core configuration model.
"""

from .loader import load_config
from .models import TcrConfig

__all__ = [
    "TcrConfig",
    "load_config",
]

# 🟢🔴
