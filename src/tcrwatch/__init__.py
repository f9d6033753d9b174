#
# src/tcrwatch/__init__.py
#
"""
tcrwatch: Test && Commit || Revert for .NET solutions.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("tcrwatch")
except PackageNotFoundError:
    __version__ = "0.0.0-dev"

__all__ = ["__version__"]
