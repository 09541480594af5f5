"""Shared fixtures and fakes for the relay test-suite."""

from __future__ import annotations

import pathlib
import subprocess
import sys
from collections.abc import Sequence

import pytest

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class FakeRunner:
    """Process runner that records commands instead of spawning them.

    Commands whose program is listed in ``working`` succeed; everything else
    fails as if the executable were missing.
    """

    def __init__(
        self,
        working: Sequence[str] = (),
        exit_failures: Sequence[str] = (),
        timeouts: Sequence[str] = (),
    ) -> None:
        self.working = set(working)
        self.exit_failures = set(exit_failures)
        self.timeouts = set(timeouts)
        self.calls: list[tuple[str, ...]] = []
        self.observed_files: list[bool] = []

    async def run(self, command, *, timeout: float) -> None:
        command = tuple(command)
        self.calls.append(command)
        self.observed_files.append(pathlib.Path(command[-1]).exists())
        program = command[0]
        if program in self.timeouts:
            raise TimeoutError
        if program in self.exit_failures:
            raise subprocess.CalledProcessError(1, list(command))
        if program not in self.working:
            raise FileNotFoundError(2, "No such file or directory", program)


class FakeClient:
    """Realtime client collecting every frame it is sent."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.sent: list[str] = []

    async def send_text(self, data: str) -> None:
        if self.fail:
            raise RuntimeError("connection closed")
        self.sent.append(data)


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()
