"""Desktop notifications through the host's ``notify-send`` facility."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .processes import (
    AnyioProcessRunner,
    CandidatesExhaustedError,
    ProcessRunner,
    run_first_successful,
)

logger = logging.getLogger(__name__)

DEFAULT_NOTIFIER_PROGRAMS: tuple[str, ...] = ("/usr/bin/notify-send", "notify-send")
URGENCY = "normal"
EXPIRE_TIME_MS = 5000


class DesktopNotifier:
    """Show a popup on the host desktop when the facility exists."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        programs: Sequence[str] = DEFAULT_NOTIFIER_PROGRAMS,
        timeout: float = 30.0,
    ) -> None:
        self._runner = runner or AnyioProcessRunner()
        self._programs = tuple(programs)
        self._timeout = timeout

    async def notify(self, title: str, message: str) -> bool:
        """Show ``title``/``message`` and report whether any candidate worked.

        Headless hosts usually lack the facility, so failure is only logged.
        Arguments are passed as discrete argv entries.
        """

        candidates = [
            (program, f"--urgency={URGENCY}", f"--expire-time={EXPIRE_TIME_MS}", title, message)
            for program in self._programs
        ]
        try:
            await run_first_successful(self._runner, candidates, timeout=self._timeout)
        except CandidatesExhaustedError as exc:
            logger.info("Desktop notification unavailable: %s", exc)
            return False
        return True


__all__ = ["DEFAULT_NOTIFIER_PROGRAMS", "DesktopNotifier"]
