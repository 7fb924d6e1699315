"""Exception hierarchy for item validation.

Rule violations never raise: they are recorded in an ErrorReport. The
exceptions below cover the failures that cannot be expressed as report
entries (malformed payloads, missing catalog entries, unknown items).
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ItemValidationError",
    "PayloadError",
    "MessageNotFoundError",
    "ItemNotFoundError",
    "UnsupportedCandidateError",
]


class ItemValidationError(Exception):
    """Base class for all errors raised by this package."""


class PayloadError(ItemValidationError):
    """A structured payload could not be turned into a candidate.

    Raised before validation runs; the payload never reaches the validator
    and no ErrorReport is created.

    Attributes:
        details: Pydantic error dicts describing what failed to parse.
    """

    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class MessageNotFoundError(ItemValidationError, LookupError):
    """No catalog entry and no default message exist for an error."""

    def __init__(self, codes: tuple[str, ...]) -> None:
        super().__init__(f"No message found under codes {list(codes)!r}")
        self.codes = codes


class ItemNotFoundError(ItemValidationError, KeyError):
    """The repository holds no item with the requested id."""

    def __init__(self, item_id: int) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Item {self.item_id} not found"


class UnsupportedCandidateError(ItemValidationError, TypeError):
    """The validator was handed an object it does not know how to validate."""
