"""
Maps changed source files onto their test projects.
"""

from .resolver import PathResolver, ResolvedPaths

__all__ = ["PathResolver", "ResolvedPaths"]
