"""Best-effort playback of synthesized speech on the host."""

from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Sequence

from .processes import (
    AnyioProcessRunner,
    CandidatesExhaustedError,
    Command,
    CommandTimeoutError,
    ProcessRunner,
    run_first_successful,
)

logger = logging.getLogger(__name__)

TEMP_PREFIX = "voice-relay-"
AUDIO_SUFFIX = ".mp3"
AUDIO_FILE_PLACEHOLDER = "{path}"

DEFAULT_PLAYER_COMMANDS: tuple[tuple[str, ...], ...] = (
    ("/usr/bin/mpg123", "-q", AUDIO_FILE_PLACEHOLDER),
    ("mpg123", "-q", AUDIO_FILE_PLACEHOLDER),
    ("/usr/bin/mpv", "--no-video", "--really-quiet", AUDIO_FILE_PLACEHOLDER),
    ("mpv", "--no-video", "--really-quiet", AUDIO_FILE_PLACEHOLDER),
)


class NoPlayerAvailableError(RuntimeError):
    """Raised when every audio player candidate failed."""

    def __init__(self, last_error: BaseException | None) -> None:
        super().__init__(f"No audio player available: {last_error}")
        self.last_error = last_error


class LocalAudioPlayer:
    """Play audio through the first working player in a prioritized list."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        commands: Sequence[Sequence[str]] = DEFAULT_PLAYER_COMMANDS,
        timeout: float = 30.0,
        temp_dir: str | None = None,
    ) -> None:
        self._runner = runner or AnyioProcessRunner()
        self._commands = [tuple(command) for command in commands]
        self._timeout = timeout
        self._temp_dir = temp_dir

    async def play(self, audio: bytes) -> Command:
        """Play ``audio`` and return the command that played it.

        A player that runs past the timeout is stopped and not retried with the
        next candidate. The temporary file is removed on every path.
        """

        fd, path = tempfile.mkstemp(prefix=TEMP_PREFIX, suffix=AUDIO_SUFFIX, dir=self._temp_dir)
        try:
            with os.fdopen(fd, "wb") as handle:
                handle.write(audio)
            candidates = [self._expand(command, path) for command in self._commands]
            try:
                command = await run_first_successful(
                    self._runner, candidates, timeout=self._timeout, stop_on_timeout=True
                )
            except CandidatesExhaustedError as exc:
                raise NoPlayerAvailableError(exc.last_error) from exc
            except CommandTimeoutError as exc:
                logger.warning("Playback with %s was cut off: %s", exc.command[0], exc)
                return exc.command
            logger.debug("Played audio with %s", command[0])
            return command
        finally:
            os.unlink(path)

    @staticmethod
    def _expand(command: Sequence[str], path: str) -> tuple[str, ...]:
        return tuple(path if part == AUDIO_FILE_PLACEHOLDER else part for part in command)


__all__ = ["DEFAULT_PLAYER_COMMANDS", "LocalAudioPlayer", "NoPlayerAvailableError"]
