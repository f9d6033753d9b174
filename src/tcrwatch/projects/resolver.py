# src/tcrwatch/projects/resolver.py

"""
Locates the project that owns a changed file and derives its test project and filter.

The namespace of a file is taken from the name of the folder immediately
containing it. This is a naming heuristic, not a C# parser; swap the
`PathResolver` for a project-model-aware implementation when that matters.
"""

from pathlib import Path

import structlog
from attrs import define, field

from tcrwatch.telemetry import StructLogger

log: StructLogger = structlog.get_logger("projects.resolver")


@define(frozen=True, slots=True)
class ResolvedPaths:
    """Outcome of resolving one changed file. Never cached."""

    success: bool
    changed_file_name: str
    test_project_path: Path | None = field(default=None)
    test_class_filter: str | None = field(default=None)
    owner_project_name: str | None = field(default=None)
    message: str | None = field(default=None)

    @classmethod
    def failure(cls, changed_file: Path, message: str) -> "ResolvedPaths":
        return cls(success=False, changed_file_name=changed_file.name, message=message)


class PathResolver:
    """Resolves a changed file path against the directory tree as it is right now."""

    def __init__(self, test_suffix: str = ".Tests", manifest_pattern: str = "*.csproj", root: Path | None = None):
        self.test_suffix = test_suffix
        self.manifest_pattern = manifest_pattern
        self.root = root.resolve() if root is not None else None
        self._manifest_extension = Path(manifest_pattern).suffix

    @property
    def class_suffix(self) -> str:
        return self.test_suffix.lstrip(".")

    def _search_chain(self, start_dir: Path) -> tuple[Path, ...]:
        chain = (start_dir, *start_dir.parents)
        if self.root is None:
            return chain
        resolved = tuple(d.resolve() for d in chain)
        if self.root not in resolved:
            return chain
        return chain[: resolved.index(self.root) + 1]

    def find_manifest(self, start_dir: Path) -> Path | None:
        """
        Walks from `start_dir` up to the watched root and returns the first manifest found.

        Without a root, or for a directory outside it, the walk continues to the
        filesystem root. Each directory is searched non-recursively. A directory
        holding more than one manifest is ambiguous and ends the search with no result.
        """
        for directory in self._search_chain(start_dir):
            if not directory.is_dir():
                continue
            manifests = sorted(p for p in directory.glob(self.manifest_pattern) if p.is_file())
            if len(manifests) == 1:
                return manifests[0]
            if len(manifests) > 1:
                log.warning(
                    "Ambiguous project directory, several manifests found",
                    directory=str(directory),
                    manifests=[m.name for m in manifests],
                    emoji_key="path",
                )
                return None
        return None

    @staticmethod
    def relative_namespace(changed_file: Path) -> str:
        """The folder immediately containing the file, separators mapped to dots."""
        return changed_file.parent.name.replace("/", ".").replace("\\", ".")

    def resolve(self, changed_file_path: Path | str) -> ResolvedPaths:
        changed_file = Path(changed_file_path)
        manifest = self.find_manifest(changed_file.parent)
        if manifest is None:
            log.info("No owning project manifest found", path=str(changed_file), emoji_key="path")
            return ResolvedPaths.failure(changed_file, "No project manifest found in any parent directory")

        owner_name = manifest.stem
        namespace = self.relative_namespace(changed_file)
        base_name = changed_file.stem

        if owner_name.endswith(self.test_suffix):
            # The changed file lives inside the test project itself.
            test_project = manifest
            class_filter = f"{namespace}.{base_name}"
        else:
            test_dir = manifest.parent.with_name(f"{manifest.parent.name}{self.test_suffix}")
            test_project = test_dir / f"{owner_name}{self.test_suffix}{self._manifest_extension}"
            class_filter = f"{namespace}{self.test_suffix}.{base_name}{self.class_suffix}"
            if not test_project.is_file():
                log.info(
                    "Test project for owner not found",
                    owner=owner_name,
                    expected=str(test_project),
                    emoji_key="path",
                )
                return ResolvedPaths.failure(changed_file, f"Test project not found: {test_project}")

        resolved = ResolvedPaths(
            success=True,
            changed_file_name=changed_file.name,
            test_project_path=test_project,
            test_class_filter=class_filter,
            owner_project_name=owner_name,
        )
        log.debug(
            "Resolved test target",
            owner=owner_name,
            test_project=str(test_project),
            filter=class_filter,
        )
        return resolved

# 🟢🔴
