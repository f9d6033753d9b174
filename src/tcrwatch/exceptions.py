# src/tcrwatch/exceptions.py

"""
Custom exception hierarchy for tcrwatch.
"""


class TcrError(Exception):
    """Base class for all tcrwatch errors."""

    pass


class ConfigurationError(TcrError):
    """Raised when the effective configuration is missing or invalid."""

    def __init__(self, message: str, path: str | None = None):
        self.path = path
        full_message = message
        if path:
            full_message += f" (Config: '{path}')"
        super().__init__(full_message)


class MonitoringSetupError(TcrError):
    """Raised when the filesystem watch subscription cannot be established."""

    pass


class TestRunError(TcrError):
    """Raised when the test subprocess cannot be launched or fails unexpectedly."""

    __test__ = False  # not a pytest test class

    def __init__(self, message: str, command: list[str] | None = None):
        self.command = command or []
        super().__init__(message)

# 🟢🔴
