# tests/unit/test_orchestrator.py

"""Tests for WatchOrchestrator startup, shutdown and operator controls."""

import asyncio
import io
from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock, MagicMock, patch

import attrs
import pytest
from rich.console import Console

from tcrwatch.config import TcrConfig
from tcrwatch.engines.git import GitRepoSummary
from tcrwatch.engines.git.exceptions import NotAGitRepositoryError
from tcrwatch.runtime.orchestrator import WatchOrchestrator
from tcrwatch.state import SPINNER_FRAMES
from tcrwatch.testing import TestRunResult


@pytest.fixture
def output() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def mock_engine(config: TcrConfig) -> MagicMock:
    engine = MagicMock()
    engine.discover_workdir.return_value = config.source_root
    engine.get_summary = AsyncMock(
        return_value=GitRepoSummary(
            head_ref_name="main", head_commit_hash="0123456789abcdef", head_commit_message_summary="start"
        )
    )
    engine.has_changes = AsyncMock(return_value=False)
    return engine


@pytest.fixture
def orchestrator(config: TcrConfig, mock_engine: MagicMock, output: io.StringIO) -> WatchOrchestrator:
    return WatchOrchestrator(
        config=config,
        shutdown_event=asyncio.Event(),
        console=Console(file=output, force_terminal=False, width=300),
        engine=mock_engine,
        runner=AsyncMock(),
        prompt=AsyncMock(return_value=None),
    )


@pytest.fixture(autouse=True)
def no_terminal_keys():
    with patch("tcrwatch.runtime.orchestrator.KeyListener") as mock_listener:
        mock_listener.return_value.start.return_value = False
        yield mock_listener


def test_toggle_pause(orchestrator: WatchOrchestrator, output: io.StringIO):
    orchestrator.toggle_pause()
    assert orchestrator.state.paused
    assert "Paused" in output.getvalue()

    orchestrator.toggle_pause()
    assert not orchestrator.state.paused
    assert "Resumed" in output.getvalue()


def test_request_shutdown_sets_event(orchestrator: WatchOrchestrator):
    orchestrator.request_shutdown("SIGTERM")
    assert orchestrator.shutdown_event.is_set()


@pytest.mark.asyncio
async def test_not_a_repository_exits_with_error(
    orchestrator: WatchOrchestrator, mock_engine: MagicMock, output: io.StringIO
):
    mock_engine.discover_workdir.side_effect = NotAGitRepositoryError("Not a Git repository", repo_path="/x")

    await asyncio.wait_for(orchestrator.run(), timeout=5)

    assert orchestrator.exit_code == 1
    assert "Not a Git repository" in output.getvalue()
    assert "TCR stopped." in output.getvalue()


@pytest.mark.asyncio
async def test_runs_until_shutdown(orchestrator: WatchOrchestrator, output: io.StringIO, config: TcrConfig):
    task = asyncio.create_task(orchestrator.run())
    await asyncio.sleep(0.3)
    assert orchestrator.monitor_service.is_running

    orchestrator.request_shutdown()
    await asyncio.wait_for(task, timeout=5)

    text = output.getvalue()
    assert orchestrator.exit_code == 0
    assert "HEAD at main (0123456)" in text
    assert f"Watching {config.source_root}" in text
    assert "TCR stopped." in text
    assert not orchestrator.monitor_service.is_running


@pytest.mark.asyncio
async def test_warns_about_uncommitted_changes(
    orchestrator: WatchOrchestrator, mock_engine: MagicMock, output: io.StringIO
):
    mock_engine.has_changes.return_value = True
    task = asyncio.create_task(orchestrator.run())
    await asyncio.sleep(0.2)
    orchestrator.request_shutdown()
    await asyncio.wait_for(task, timeout=5)

    assert "uncommitted changes" in output.getvalue()


@pytest.mark.asyncio
async def test_prompt_suspends_key_listener(orchestrator: WatchOrchestrator, no_terminal_keys: MagicMock):
    orchestrator.key_listener = no_terminal_keys.return_value
    assert await orchestrator._prompt_with_terminal("Bar.cs") is None
    orchestrator.key_listener.suspended.assert_called_once()
    orchestrator._prompt.assert_awaited_once_with("Bar.cs")


@pytest.mark.asyncio
async def test_end_to_end_change_triggers_test_run(orchestrator: WatchOrchestrator, config: TcrConfig):
    orchestrator.state.last_accepted_event_time = datetime(2000, 1, 1, tzinfo=UTC)
    orchestrator.runner.run.return_value = TestRunResult(transcript="", elapsed=timedelta(0))
    task = asyncio.create_task(orchestrator.run())
    await asyncio.sleep(0.3)

    (config.source_root / "Foo" / "Bar.cs").write_text("class Bar { int Z; }")
    for _ in range(50):
        if orchestrator.runner.run.await_count:
            break
        await asyncio.sleep(0.1)

    orchestrator.request_shutdown()
    await asyncio.wait_for(task, timeout=5)
    assert orchestrator.runner.run.await_count >= 1


@pytest.mark.asyncio
async def test_spinner_shows_status_emoji(orchestrator: WatchOrchestrator, config: TcrConfig):
    orchestrator.config = attrs.evolve(config, spinner_interval_seconds=0.01)
    with patch.object(orchestrator.console, "show_spinner") as show_spinner:
        task = asyncio.create_task(orchestrator._spin())
        await asyncio.sleep(0.05)
        orchestrator.shutdown_event.set()
        await asyncio.wait_for(task, timeout=1)

    frame, watching, status_emoji = show_spinner.call_args.args
    assert frame in SPINNER_FRAMES
    assert watching == config.source_root.name
    assert status_emoji == "👀"
