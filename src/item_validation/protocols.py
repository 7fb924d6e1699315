"""Protocols for type checking.

Structural types for the validator and for the message-resolution
collaborator, so callers can plug in their own implementations.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from item_validation.models import ItemCandidate
    from item_validation.results import ErrorReport
    from item_validation.validators import ValidationContext

__all__ = ["ValidatorProtocol", "MessageSource"]


@runtime_checkable
class ValidatorProtocol(Protocol):
    """Protocol for candidate validators.

    Use this for type hints when accepting any validator.
    """

    def validate(
        self,
        candidate: ItemCandidate,
        context: ValidationContext = ...,
        report: ErrorReport | None = None,
    ) -> ErrorReport:
        """Validate a candidate."""
        ...

    def supports(self, cls: type) -> bool:
        """Whether instances of cls can be validated."""
        ...

    @property
    def name(self) -> str:
        """Name of this validator."""
        ...


@runtime_checkable
class MessageSource(Protocol):
    """Protocol for message catalogs keyed by error code.

    Implementations return None for codes they do not know, so that
    callers can fall through to less specific codes.
    """

    def get_message(self, code: str, args: Sequence[Any] = ()) -> str | None:
        """Formatted message for a code, or None."""
        ...
