# src/tcrwatch/engines/git/exceptions.py

"""
Errors raised by the git engine. A git command that runs and exits non-zero
is not an error here; it comes back as a failed CommandResult.
"""

from tcrwatch.exceptions import TcrError


class GitEngineError(TcrError):
    """Base class for git engine failures."""

    def __init__(self, message: str, repo_path: str | None = None, details: Exception | None = None):
        self.repo_path = repo_path
        self.details = details
        text = f"[git] {message}"
        if repo_path:
            text += f" at '{repo_path}'"
        super().__init__(text)
        if details is not None:
            self.add_note(f"Caused by {type(details).__name__}: {details}")


class GitCommandError(GitEngineError):
    """The git executable could not be started at all."""


class NotAGitRepositoryError(GitEngineError):
    """The watched root has no enclosing working tree (or only a bare repository)."""

# 🟢🔴
