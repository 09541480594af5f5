"""Run external programs through an ordered list of fallback candidates."""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence
from typing import Protocol

import anyio

logger = logging.getLogger(__name__)

Command = Sequence[str]


class CandidatesExhaustedError(RuntimeError):
    """Raised when no candidate command finished successfully."""

    def __init__(self, attempted: int, last_error: BaseException | None) -> None:
        if last_error is None:
            message = "No candidate commands were available"
        else:
            message = f"All {attempted} candidate commands failed; last error: {last_error}"
        super().__init__(message)
        self.attempted = attempted
        self.last_error = last_error


class CommandTimeoutError(RuntimeError):
    """Raised when a candidate ran past its timeout and the chain must stop."""

    def __init__(self, command: Command, timeout: float) -> None:
        super().__init__(f"{command[0]} did not finish within {timeout}s")
        self.command = command
        self.timeout = timeout


class ProcessRunner(Protocol):
    """Capability to run a single external command to completion."""

    async def run(self, command: Command, *, timeout: float) -> None:
        """Run ``command`` and raise if it cannot start, fails or times out."""


class AnyioProcessRunner:
    """Run commands with :func:`anyio.run_process`, never through a shell."""

    async def run(self, command: Command, *, timeout: float) -> None:
        with anyio.fail_after(timeout):
            await anyio.run_process(
                list(command),
                check=True,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )


async def run_first_successful(
    runner: ProcessRunner,
    candidates: Sequence[Command],
    *,
    timeout: float,
    stop_on_timeout: bool = False,
) -> Command:
    """Try ``candidates`` in order and return the first one that succeeded.

    With ``stop_on_timeout`` a candidate that started but ran too long ends the
    chain with :class:`CommandTimeoutError` instead of falling through.
    """

    last_error: BaseException | None = None
    for command in candidates:
        try:
            await runner.run(command, timeout=timeout)
        except TimeoutError as exc:
            if stop_on_timeout:
                raise CommandTimeoutError(command, timeout) from exc
            logger.debug("Command %s timed out", command[0])
            last_error = exc
            continue
        except (OSError, subprocess.CalledProcessError) as exc:
            logger.debug("Command %s failed: %s", command[0], exc)
            last_error = exc
            continue
        return command
    raise CandidatesExhaustedError(len(candidates), last_error)


__all__ = [
    "AnyioProcessRunner",
    "CandidatesExhaustedError",
    "Command",
    "CommandTimeoutError",
    "ProcessRunner",
    "run_first_successful",
]
