# src/tcrwatch/engines/git/info.py

from datetime import datetime

from attrs import define, field


@define(frozen=True, slots=True)
class GitRepoSummary:
    """Snapshot of the repository HEAD, reported at startup."""

    is_empty: bool = field(default=False)
    head_ref_name: str | None = field(default=None)
    head_commit_hash: str | None = field(default=None)
    head_commit_message_summary: str | None = field(default=None)
    head_commit_timestamp: datetime | None = field(default=None)

    @property
    def short_hash(self) -> str | None:
        return self.head_commit_hash[:7] if self.head_commit_hash else None
