# src/tcrwatch/engines/git/base.py

"""
Git implementation of the VcsEngine protocol.

The TCR command set (status, add, commit, pull, push, clean, checkout) runs
through the git CLI so pathspec magic such as ':!*Tests.cs' behaves exactly as
it does at the prompt. Repository discovery and the HEAD summary use pygit2.
"""

import asyncio
from collections.abc import Sequence
from datetime import UTC, datetime
from pathlib import Path

import pygit2
import structlog

from tcrwatch.engines.git.exceptions import GitCommandError, NotAGitRepositoryError
from tcrwatch.engines.git.info import GitRepoSummary
from tcrwatch.protocols import CommandResult, VcsEngine

log = structlog.get_logger("engines.git.base")


class GitEngine(VcsEngine):
    """Implements VcsEngine by shelling out to git."""

    def __init__(self, executable: str = "git") -> None:
        self.executable = executable
        self._log = log.bind(engine_id=id(self))
        self._log.debug("GitEngine initialized")

    async def run_git(self, working_dir: Path, *args: str) -> CommandResult:
        """Runs one git command and captures its exit code and output."""
        cmd_log = self._log.bind(args=" ".join(args), cwd=str(working_dir))
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                cwd=working_dir,
            )
        except OSError as e:
            cmd_log.error("Failed to launch git", error=str(e))
            raise GitCommandError(f"Could not run '{self.executable}'", repo_path=str(working_dir), details=e) from e

        stdout, stderr = await process.communicate()
        result = CommandResult(
            args=tuple(args),
            exit_code=process.returncode if process.returncode is not None else -1,
            stdout=stdout.decode("utf-8", errors="replace"),
            stderr=stderr.decode("utf-8", errors="replace"),
        )
        if result.success:
            cmd_log.debug("git command succeeded")
        else:
            cmd_log.warning("git command failed", exit_code=result.exit_code, stderr=result.stderr.strip())
        return result

    async def has_changes(self, working_dir: Path, patterns: Sequence[str]) -> bool:
        result = await self.run_git(working_dir, "status", "--porcelain", "--", *patterns)
        return bool(result.stdout.strip())

    async def stage(self, working_dir: Path, patterns: Sequence[str]) -> CommandResult:
        return await self.run_git(working_dir, "add", "--", *patterns)

    async def commit(self, working_dir: Path, message: str) -> CommandResult:
        return await self.run_git(working_dir, "commit", "-m", message)

    async def pull_rebase(self, working_dir: Path) -> CommandResult:
        return await self.run_git(working_dir, "pull", "--rebase")

    async def push(self, working_dir: Path) -> CommandResult:
        return await self.run_git(working_dir, "push")

    async def clean(self, working_dir: Path, exclude_pattern: str) -> CommandResult:
        return await self.run_git(working_dir, "clean", "-df", "-e", exclude_pattern)

    async def restore(self, working_dir: Path, patterns: Sequence[str], exclude_pattern: str) -> CommandResult:
        return await self.run_git(working_dir, "checkout", "HEAD", "--", *patterns, f":!{exclude_pattern}")

    # --- pygit2-backed inspection ---
    def discover_workdir(self, path: Path) -> Path:
        """Returns the working tree root containing `path`."""
        repo_path = pygit2.discover_repository(str(path))
        if not repo_path:
            raise NotAGitRepositoryError("Not a Git repository (or any of the parent directories)", repo_path=str(path))
        repo = pygit2.Repository(repo_path)
        if repo.is_bare or not repo.workdir:
            raise NotAGitRepositoryError("Bare repositories have no working tree", repo_path=str(path))
        return Path(repo.workdir)

    async def get_summary(self, working_dir: Path) -> GitRepoSummary:
        """Gets a summary of the repository's HEAD state."""

        def _blocking_get_summary() -> dict:
            repo_path = pygit2.discover_repository(str(working_dir))
            if not repo_path:
                raise pygit2.GitError(f"Not a Git repository (or any of the parent directories): {working_dir}")
            repo = pygit2.Repository(repo_path)
            if repo.is_empty:
                return {"is_empty": True}
            if repo.head_is_unborn:
                return {"head_ref_name": "UNBORN"}

            head_ref = repo.head
            head_commit = head_ref.peel(pygit2.Commit)
            return {
                "head_ref_name": head_ref.shorthand,
                "head_commit_hash": str(head_commit.id),
                "head_commit_message_summary": (head_commit.message or "").split("\n", 1)[0],
                "head_commit_timestamp": datetime.fromtimestamp(head_commit.commit_time, tz=UTC),
            }

        try:
            summary_dict = await asyncio.to_thread(_blocking_get_summary)
            return GitRepoSummary(**summary_dict)
        except pygit2.GitError as e:
            self._log.error("Failed to get Git summary", path=str(working_dir), error=str(e))
            return GitRepoSummary(head_ref_name="ERROR", head_commit_message_summary=str(e))

# 🟢🔴
