"""
Git implementation of the version-control command set.
"""

from .base import GitEngine
from .info import GitRepoSummary

__all__ = ["GitEngine", "GitRepoSummary"]
