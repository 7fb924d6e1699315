"""Observer pattern implementation for validation events.

Provides event types, observer protocol, and mixin for adding observer
support to the validator, the form binder and the boundary handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Protocol, runtime_checkable

__all__ = [
    "ValidationEventType",
    "ValidationEvent",
    "ValidationObserver",
    "ObservableMixin",
]


class ValidationEventType(Enum):
    """Types of validation events that can be observed."""

    VALIDATION_STARTED = auto()
    """Emitted when the validator starts a pass over a candidate."""

    ERROR_ADDED = auto()
    """Emitted for every error a validation pass records."""

    VALIDATION_COMPLETED = auto()
    """Emitted when a validation pass finishes."""

    BINDING_FAILED = auto()
    """Emitted when a raw form value cannot be coerced to its field type."""

    PAYLOAD_REJECTED = auto()
    """Emitted when a structured payload fails to parse."""

    ITEM_SAVED = auto()
    """Emitted when an accepted candidate is persisted as a new item."""

    ITEM_UPDATED = auto()
    """Emitted when an accepted candidate updates an existing item."""


@dataclass
class ValidationEvent:
    """A validation event that can be observed.

    Attributes:
        event_type: The type of event that occurred.
        source: The object that emitted the event.
        data: Event-specific data dictionary.

    Example:
        event = ValidationEvent(
            event_type=ValidationEventType.ERROR_ADDED,
            source=validator,
            data={"error": field_error, "context": ValidationContext.SAVE},
        )
    """

    event_type: ValidationEventType
    source: object
    data: dict[str, Any] = field(default_factory=dict)


@runtime_checkable
class ValidationObserver(Protocol):
    """Protocol for validation event observers.

    Implement this protocol to receive validation events. Observers
    can be used for logging, console reporting, metrics collection, etc.

    Example:
        class PrintingObserver:
            def on_event(self, event: ValidationEvent) -> None:
                print(f"{event.event_type.name}: {event.data}")
    """

    def on_event(self, event: ValidationEvent) -> None:
        """Handle a validation event.

        Args:
            event: The validation event to handle.
        """
        ...


class ObservableMixin:
    """Mixin class to add observer support to any class.

    Example:
        validator = ItemValidator()
        validator.add_observer(LoggingObserver())
        validator.validate(form)  # observer sees STARTED / ERROR_ADDED / COMPLETED
    """

    _observers: list[ValidationObserver]

    def _ensure_observers(self) -> None:
        """Ensure the observers list is initialized."""
        if not hasattr(self, "_observers") or self._observers is None:
            self._observers = []

    def add_observer(self, observer: ValidationObserver) -> None:
        """Add an observer to receive validation events.

        Args:
            observer: An object implementing the ValidationObserver protocol.
        """
        self._ensure_observers()
        if observer not in self._observers:
            self._observers.append(observer)

    def remove_observer(self, observer: ValidationObserver) -> None:
        """Remove an observer from receiving validation events.

        Args:
            observer: The observer to remove.
        """
        self._ensure_observers()
        if observer in self._observers:
            self._observers.remove(observer)

    def notify(self, event: ValidationEvent) -> None:
        """Notify all observers of a validation event.

        Args:
            event: The validation event to broadcast to observers.
        """
        self._ensure_observers()
        for observer in self._observers:
            observer.on_event(event)

    @property
    def observers(self) -> list[ValidationObserver]:
        """Get a copy of the current observers list."""
        self._ensure_observers()
        return self._observers.copy()

    def clear_observers(self) -> None:
        """Remove all observers."""
        self._ensure_observers()
        self._observers.clear()
