# src/tcrwatch/protocols.py

"""
Result types and the version-control protocol used by the action dispatcher.
"""

from collections.abc import Sequence
from pathlib import Path
from typing import Protocol, runtime_checkable

from attrs import define, field


@define(frozen=True, slots=True)
class CommandResult:
    """Exit code and captured output of one version-control command."""

    args: tuple[str, ...]
    exit_code: int
    stdout: str = field(default="")
    stderr: str = field(default="")

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@define(frozen=True, slots=True)
class CommitResult:
    success: bool
    committed: bool = field(default=False)
    cancelled: bool = field(default=False)
    message: str | None = field(default=None)
    steps: tuple[CommandResult, ...] = field(default=())


@define(frozen=True, slots=True)
class RevertResult:
    success: bool
    exit_code: int = field(default=0)
    message: str | None = field(default=None)
    steps: tuple[CommandResult, ...] = field(default=())


@runtime_checkable
class VcsEngine(Protocol):
    """The black-box version-control command set TCR relies on."""

    async def has_changes(self, working_dir: Path, patterns: Sequence[str]) -> bool: ...

    async def stage(self, working_dir: Path, patterns: Sequence[str]) -> CommandResult: ...

    async def commit(self, working_dir: Path, message: str) -> CommandResult: ...

    async def pull_rebase(self, working_dir: Path) -> CommandResult: ...

    async def push(self, working_dir: Path) -> CommandResult: ...

    async def clean(self, working_dir: Path, exclude_pattern: str) -> CommandResult: ...

    async def restore(self, working_dir: Path, patterns: Sequence[str], exclude_pattern: str) -> CommandResult: ...

# 🟢🔴
