"""
Domain-specific exception hierarchy for the availability calendar.

Every error carries an untranslated ``message_key``. Rendering the key in
the caller's language happens outside the domain via a translator.
"""

from __future__ import annotations

from typing import Callable, Optional

Translator = Callable[[str, Optional[str]], str]


def identity_translator(message_key: str, language: Optional[str] = None) -> str:
    """Default translator: return the key unchanged."""
    return message_key


class CalendarError(Exception):
    """Base class for all application-level errors."""

    def __init__(self, message_key: str):
        super().__init__(message_key)
        self.message_key = message_key

    def localized(self, translator: Translator = identity_translator, language: Optional[str] = None) -> str:
        """Render the message through ``translator``."""
        return translator(self.message_key, language)


class InvalidRangeError(CalendarError):
    """Raised when a start lies after its end, or a range lies in the past."""


class EventClosedError(CalendarError):
    """Raised when the last open window of an event has already ended."""

    def __init__(self, message_key: str = "Event is closed"):
        super().__init__(message_key)


class OutOfBoundsError(CalendarError):
    """Raised when a requested range falls outside the event's on-boarding window."""

    def __init__(self, edge: str, message_key: str = "User's Date Range is out of Event's on-boarding date range"):
        super().__init__(message_key)
        self.edge = edge


class NoTimestampsError(CalendarError):
    """Raised when an event has no open windows at all."""

    def __init__(self, message_key: str = "This Event haven't timestamps"):
        super().__init__(message_key)


class EventNotFoundError(CalendarError):
    """Raised when the event collaborator does not know the event."""

    def __init__(self, message_key: str = "Event Not found"):
        super().__init__(message_key)


class MissingEventError(CalendarError):
    """Raised when an event-hub query carries no event id."""

    def __init__(self, message_key: str = "Event id (event-id) is must, please provide."):
        super().__init__(message_key)


class CollaboratorError(CalendarError):
    """Raised when an external collaborator fails while being awaited."""
