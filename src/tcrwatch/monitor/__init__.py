"""
Filesystem monitoring sub-package for tcrwatch.
"""

from .events import ChangeEvent, ChangeKind
from .handler import TcrEventHandler, is_tracked_path
from .service import MonitoringService

__all__ = [
    "ChangeEvent",
    "ChangeKind",
    "MonitoringService",
    "TcrEventHandler",
    "is_tracked_path",
]
