"""Use cases for validating and dispatching notifications."""

from .dispatch import NotificationDispatcher
from .validators import (
    MAX_TEXT_LENGTH,
    EmptyTextError,
    InputValidationError,
    InvalidCharactersError,
    InvalidTypeError,
    TooLongError,
    ensure_displayable,
    sanitize_for_display,
    validate_text,
)

__all__ = [
    "MAX_TEXT_LENGTH",
    "EmptyTextError",
    "InputValidationError",
    "InvalidCharactersError",
    "InvalidTypeError",
    "NotificationDispatcher",
    "TooLongError",
    "ensure_displayable",
    "sanitize_for_display",
    "validate_text",
]
