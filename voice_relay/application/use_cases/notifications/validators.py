"""Validation and sanitization helpers for untrusted notification text."""

from __future__ import annotations

import re
from typing import Any, Final

MAX_TEXT_LENGTH: Final[int] = 500

_FORBIDDEN_PATTERN: Final[re.Pattern[str]] = re.compile(
    r"[;&|><`$(){}\[\]\\]|\.\./|<script", re.IGNORECASE
)
_DISPLAY_DISALLOWED: Final[re.Pattern[str]] = re.compile(r"[^\w\s.,!?\-']")


class InputValidationError(ValueError):
    """Raised when a caller supplied text that cannot be relayed."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(message)
        self.field = field


class InvalidTypeError(InputValidationError):
    """The value is not text."""


class TooLongError(InputValidationError):
    """The value exceeds :data:`MAX_TEXT_LENGTH`."""


class InvalidCharactersError(InputValidationError):
    """The value contains shell metacharacters, traversal or markup."""


class EmptyTextError(InputValidationError):
    """Nothing displayable remains once the value is sanitized."""


def validate_text(value: Any, field: str = "text") -> str:
    """Return ``value`` unchanged or raise an :class:`InputValidationError`."""

    if not isinstance(value, str):
        raise InvalidTypeError(field, f"Invalid {field}: must be a string")
    if len(value) > MAX_TEXT_LENGTH:
        raise TooLongError(
            field, f"Invalid {field}: too long (maximum {MAX_TEXT_LENGTH} characters)"
        )
    if _FORBIDDEN_PATTERN.search(value):
        raise InvalidCharactersError(field, f"Invalid {field}: contains forbidden characters")
    return value


def sanitize_for_display(value: str) -> str:
    """Strip everything outside a conservative whitelist and cap the length.

    Letters and digits from any script are kept. Underscores are dropped even
    though ``\\w`` matches them.
    """

    cleaned = _DISPLAY_DISALLOWED.sub("", value).replace("_", "")
    return cleaned[:MAX_TEXT_LENGTH]


def ensure_displayable(value: Any, field: str) -> str:
    """Validate ``value`` and return its sanitized, non-empty display form."""

    sanitized = sanitize_for_display(validate_text(value, field)).strip()
    if not sanitized:
        raise EmptyTextError(field, f"Invalid {field}: nothing left to display")
    return sanitized


__all__ = [
    "MAX_TEXT_LENGTH",
    "EmptyTextError",
    "InputValidationError",
    "InvalidCharactersError",
    "InvalidTypeError",
    "TooLongError",
    "ensure_displayable",
    "sanitize_for_display",
    "validate_text",
]
