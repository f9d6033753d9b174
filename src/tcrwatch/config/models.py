#
# config/models.py
#
"""
Attrs-based data models for the tcrwatch configuration.
"""

import logging
from pathlib import Path
from typing import Any

from attrs import define, field


# --- Validators ---
def _validate_log_level(inst: Any, attr: Any, value: str) -> None:
    """Validator for standard logging level names."""
    valid = logging._nameToLevel.keys()
    if value.upper() not in valid:
        raise ValueError(f"Invalid log_level '{value}'. Must be one of {list(valid)}.")


def _validate_positive_number(inst: Any, attr: Any, value: float) -> None:
    """Validator ensures a numeric interval is strictly positive."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
        raise ValueError(f"Field '{attr.name}' must be a positive number, got {value!r}")


def _validate_suffix(inst: Any, attr: Any, value: str) -> None:
    if not value or not value.strip(". "):
        raise ValueError(f"Field '{attr.name}' must be a non-empty suffix such as '.Tests', got {value!r}")


def _validate_pause_key(inst: Any, attr: Any, value: str) -> None:
    if not isinstance(value, str) or len(value) != 1 or value.isspace():
        raise ValueError(f"Field '{attr.name}' must be a single printable character, got {value!r}")


def _to_path(value: Any) -> Path:
    return Path(value).expanduser()


def _to_tuple(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return (value,)
    return tuple(value)


@define(frozen=True, slots=True)
class TcrConfig:
    """
    Every tunable of one TCR session.

    The source root is the directory watched recursively; all other fields
    have defaults matching a conventional .NET solution layout.
    """

    source_root: Path = field(converter=_to_path)
    test_suffix: str = field(default=".Tests", validator=_validate_suffix)
    debounce_seconds: float = field(default=1.0, validator=_validate_positive_number)
    source_patterns: tuple[str, ...] = field(default=("*.cs",), converter=_to_tuple)
    manifest_pattern: str = field(default="*.csproj")
    ignored_dirs: tuple[str, ...] = field(default=("bin", "obj"), converter=_to_tuple)
    poll_interval_seconds: float = field(default=0.1, validator=_validate_positive_number)
    spinner_interval_seconds: float = field(default=0.5, validator=_validate_positive_number)

    # Test command shape
    test_executable: str = field(default="dotnet")
    build_configuration: str = field(default="DEBUG")
    verbosity: str = field(default="n")

    # Operator controls and VCS behaviour
    pause_key: str = field(default="p", validator=_validate_pause_key)
    pull_before_push: bool = field(default=True)
    push_after_commit: bool = field(default=True)
    log_level: str = field(default="WARNING", validator=_validate_log_level)

    @property
    def test_class_suffix(self) -> str:
        """The suffix appended to class names, e.g. 'Tests' for '.Tests'."""
        return self.test_suffix.lstrip(".")

    @property
    def source_extension(self) -> str:
        """The file extension of the primary source pattern, e.g. '.cs'."""
        return Path(self.source_patterns[0]).suffix

    @property
    def manifest_extension(self) -> str:
        return Path(self.manifest_pattern).suffix

    @property
    def tracked_extensions(self) -> frozenset[str]:
        """Extensions whose change events are handed to the debouncer."""
        extensions = {Path(pattern).suffix for pattern in self.source_patterns}
        extensions.add(self.manifest_extension)
        return frozenset(ext for ext in extensions if ext)

    @property
    def tracked_patterns(self) -> tuple[str, ...]:
        """Pathspecs staged on commit and restored on revert."""
        return (*self.source_patterns, self.manifest_pattern)

    @property
    def test_file_pattern(self) -> str:
        """Glob matching test source files, e.g. '*Tests.cs'."""
        return f"*{self.test_class_suffix}{self.source_extension}"

    @property
    def test_subtree_pattern(self) -> str:
        """Clean-exclusion pattern protecting test project directories, e.g. '*.Tests/'."""
        return f"*{self.test_suffix}/"

    @property
    def numeric_log_level(self) -> int:
        return logging.getLevelName(self.log_level.upper())

# 🟢🔴
