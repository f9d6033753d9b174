#
# src/tcrwatch/testing/dotnet_runner.py
#
"""
Runs `dotnet test` for a single filtered test class using asyncio.subprocess.
"""
import asyncio
import contextlib
from datetime import timedelta
from pathlib import Path

import structlog

from tcrwatch.config import TcrConfig
from tcrwatch.exceptions import TestRunError
from tcrwatch.testing.protocols import ProgressCallback, TestRunner, TestRunResult

log = structlog.get_logger("testing.runner")


class DotnetTestRunner(TestRunner):
    """
    Implements the TestRunner protocol on top of the dotnet CLI.

    The subprocess runs as its own task; a separate ticker task reports the
    elapsed time every `poll_interval` seconds until it completes. Cancelling
    the awaiting task kills the subprocess.
    """

    def __init__(
        self,
        executable: str = "dotnet",
        configuration: str = "DEBUG",
        verbosity: str = "n",
        poll_interval: float = 0.1,
    ):
        self.executable = executable
        self.configuration = configuration
        self.verbosity = verbosity
        self.poll_interval = poll_interval

    @classmethod
    def from_config(cls, config: TcrConfig) -> "DotnetTestRunner":
        return cls(
            executable=config.test_executable,
            configuration=config.build_configuration,
            verbosity=config.verbosity,
            poll_interval=config.poll_interval_seconds,
        )

    def build_command(self, test_project_path: Path, test_filter: str) -> list[str]:
        return [
            self.executable,
            "test",
            str(test_project_path),
            "--no-restore",
            "--configuration",
            self.configuration,
            "--filter",
            f"FullyQualifiedName~{test_filter}",
            "-v",
            self.verbosity,
        ]

    async def _execute(self, command: list[str], working_dir: Path) -> tuple[int, str]:
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
                cwd=working_dir,
            )
        except FileNotFoundError as e:
            raise TestRunError(
                f"Test command not found: '{command[0]}'. Is it installed and in the system's PATH?",
                command=command,
            ) from e
        except OSError as e:
            raise TestRunError(f"Failed to launch test command: {e}", command=command) from e

        try:
            stdout_bytes, _ = await process.communicate()
        except asyncio.CancelledError:
            log.warning("Test run cancelled, killing subprocess", pid=process.pid)
            with contextlib.suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            raise

        exit_code = process.returncode if process.returncode is not None else -1
        return exit_code, stdout_bytes.decode("utf-8", errors="replace")

    async def _report_elapsed(self, loop: asyncio.AbstractEventLoop, started: float, on_progress: ProgressCallback) -> None:
        while True:
            await asyncio.sleep(self.poll_interval)
            on_progress(timedelta(seconds=loop.time() - started))

    async def run(
        self,
        test_project_path: Path,
        test_filter: str,
        on_progress: ProgressCallback | None = None,
    ) -> TestRunResult:
        command = self.build_command(test_project_path, test_filter)
        runner_log = log.bind(command=" ".join(command), filter=test_filter)
        runner_log.info("Executing test command", emoji_key="test")

        loop = asyncio.get_running_loop()
        started = loop.time()
        ticker = asyncio.create_task(self._report_elapsed(loop, started, on_progress)) if on_progress else None
        try:
            exit_code, transcript = await self._execute(command, Path(test_project_path).parent)
        except TestRunError as e:
            elapsed = timedelta(seconds=loop.time() - started)
            runner_log.error("Test command could not be run", error=str(e))
            return TestRunResult(transcript="", elapsed=elapsed, command=tuple(command), error=str(e))
        finally:
            if ticker:
                ticker.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await ticker

        elapsed = timedelta(seconds=loop.time() - started)
        runner_log.info(
            "Test command finished",
            exit_code=exit_code,
            elapsed_seconds=round(elapsed.total_seconds(), 2),
            transcript_len=len(transcript),
            emoji_key="time",
        )
        return TestRunResult(transcript=transcript, elapsed=elapsed, exit_code=exit_code, command=tuple(command))

# 🟢🔴
