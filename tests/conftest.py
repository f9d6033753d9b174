import shutil
import subprocess
from pathlib import Path

import pytest

from tcrwatch.config import TcrConfig


def _git(repo_path: Path, *args: str) -> None:
    subprocess.run(["git", *args], cwd=repo_path, check=True, capture_output=True)


@pytest.fixture
def dotnet_tree(tmp_path: Path) -> Path:
    """
    A minimal solution layout:

        src/Foo/Foo.csproj, src/Foo/Bar.cs
        src/Foo.Tests/Foo.Tests.csproj, src/Foo.Tests/BarTests.cs
    """
    root = tmp_path / "src"
    (root / "Foo").mkdir(parents=True)
    (root / "Foo.Tests").mkdir()
    (root / "Foo" / "Foo.csproj").write_text("<Project />")
    (root / "Foo" / "Bar.cs").write_text("namespace Foo; public class Bar {}")
    (root / "Foo.Tests" / "Foo.Tests.csproj").write_text("<Project />")
    (root / "Foo.Tests" / "BarTests.cs").write_text("namespace Foo.Tests; public class BarTests {}")
    return root


@pytest.fixture
def config(dotnet_tree: Path) -> TcrConfig:
    return TcrConfig(source_root=dotnet_tree, debounce_seconds=1.0)


@pytest.fixture
def temp_git_repo(tmp_path: Path) -> Path:
    repo_path = tmp_path / "test_repo"
    if repo_path.exists():
        shutil.rmtree(repo_path)
    repo_path.mkdir()

    try:
        subprocess.run(["git", "--version"], check=True, capture_output=True, text=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as e:
        pytest.skip(f"Git is not available or `git --version` failed: {e}")

    _git(repo_path, "init")
    _git(repo_path, "config", "user.name", "Test User")
    _git(repo_path, "config", "user.email", "test@example.com")
    _git(repo_path, "config", "commit.gpgsign", "false")

    (repo_path / "Foo").mkdir()
    (repo_path / "Foo.Tests").mkdir()
    (repo_path / "Foo" / "Foo.csproj").write_text("<Project />")
    (repo_path / "Foo" / "Bar.cs").write_text("class Bar {}\n")
    (repo_path / "Foo.Tests" / "Foo.Tests.csproj").write_text("<Project />")
    (repo_path / "Foo.Tests" / "BarTests.cs").write_text("class BarTests {}\n")
    _git(repo_path, "add", ".")
    _git(repo_path, "commit", "-m", "Initial commit")
    return repo_path
