"""Error definitions for the locdict toolkit."""

from __future__ import annotations

from typing import Optional


class LocdictError(Exception):
    """Base exception for all custom errors."""


class ParseError(LocdictError):
    """Raised when a record or a placeholder marker cannot be parsed.

    `side` names the input a record came from when a command reads more
    than one, such as "source" or "destination".
    """

    def __init__(
        self,
        message: str,
        *,
        record: Optional[int] = None,
        position: Optional[int] = None,
        side: Optional[str] = None,
    ) -> None:
        self.reason = message
        self.record = record
        self.position = position
        self.side = side
        super().__init__(self._describe())

    def _describe(self) -> str:
        if self.record is None:
            return self.reason
        if self.side is None:
            return f"{self.reason} (record {self.record})"
        return f"{self.reason} ({self.side} record {self.record})"

    def at_record(self, record: int, side: Optional[str] = None) -> "ParseError":
        """Return a copy of this error attributed to the given record."""

        return ParseError(
            self.reason,
            record=record,
            position=self.position,
            side=side or self.side,
        )


class RecordIOError(LocdictError):
    """Raised when a record file cannot be read or written."""


class TranslationMismatchError(LocdictError):
    """Raised when runtime text does not fit a translation template."""


class OverwriteRefusedError(LocdictError):
    """Raised when attempting to overwrite a file without consent."""


class ConfigurationError(LocdictError):
    """Raised when the configuration is invalid."""


class UnknownError(LocdictError):
    """Raised for failures that fit no other category."""
