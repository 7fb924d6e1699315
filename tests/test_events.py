"""Tests for observer pattern and events."""

from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from item_validation import (
    ItemSaveForm,
    ItemValidator,
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
    ValidationObserver,
    ValidationSettings,
)

from .conftest import RecordingObserver

# =============================================================================
# Test Observers
# =============================================================================


class CountingObserver:
    """Observer that counts events by type."""

    def __init__(self) -> None:
        self.counts: dict[ValidationEventType, int] = {}

    def on_event(self, event: ValidationEvent) -> None:
        if event.event_type not in self.counts:
            self.counts[event.event_type] = 0
        self.counts[event.event_type] += 1


class Emitter(ObservableMixin):
    """Bare observable with no __init__ of its own."""

    def fire(self, event_type: ValidationEventType) -> None:
        self.notify(ValidationEvent(event_type=event_type, source=self))


# =============================================================================
# Event Tests
# =============================================================================


class TestValidationEventType:
    """Tests for ValidationEventType enum."""

    def test_event_types_exist(self) -> None:
        """Test that all expected event types exist."""
        assert ValidationEventType.VALIDATION_STARTED
        assert ValidationEventType.ERROR_ADDED
        assert ValidationEventType.VALIDATION_COMPLETED
        assert ValidationEventType.BINDING_FAILED
        assert ValidationEventType.PAYLOAD_REJECTED
        assert ValidationEventType.ITEM_SAVED
        assert ValidationEventType.ITEM_UPDATED

    def test_event_types_are_distinct(self) -> None:
        values = [e.value for e in ValidationEventType]

        assert len(values) == len(set(values))


class TestValidationEvent:
    """Tests for ValidationEvent dataclass."""

    def test_event_creation(self) -> None:
        source = object()
        event = ValidationEvent(
            event_type=ValidationEventType.ITEM_SAVED,
            source=source,
            data={"item_id": 1},
        )

        assert event.event_type == ValidationEventType.ITEM_SAVED
        assert event.source is source
        assert event.data == {"item_id": 1}

    def test_event_default_data(self) -> None:
        """Each event gets its own empty data dict."""
        e1 = ValidationEvent(event_type=ValidationEventType.ITEM_SAVED, source=None)
        e2 = ValidationEvent(event_type=ValidationEventType.ITEM_SAVED, source=None)

        e1.data["x"] = 1

        assert e2.data == {}


class TestValidationObserverProtocol:
    """Tests for ValidationObserver protocol."""

    def test_recording_observer_is_protocol_instance(self) -> None:
        assert isinstance(RecordingObserver(), ValidationObserver)

    def test_counting_observer_is_protocol_instance(self) -> None:
        assert isinstance(CountingObserver(), ValidationObserver)

    def test_plain_object_is_not_observer(self) -> None:
        assert not isinstance(object(), ValidationObserver)


# =============================================================================
# ObservableMixin Tests
# =============================================================================


class TestObservableMixin:
    """Tests for observer registration."""

    def test_add_observer(self) -> None:
        emitter = Emitter()
        observer = RecordingObserver()

        emitter.add_observer(observer)

        assert emitter.observers == [observer]

    def test_add_observer_no_duplicates(self) -> None:
        emitter = Emitter()
        observer = RecordingObserver()

        emitter.add_observer(observer)
        emitter.add_observer(observer)

        assert len(emitter.observers) == 1

    def test_remove_observer(self) -> None:
        emitter = Emitter()
        observer = RecordingObserver()
        emitter.add_observer(observer)

        emitter.remove_observer(observer)

        assert emitter.observers == []

    def test_remove_nonexistent_observer(self) -> None:
        """Removing an unknown observer is a no-op."""
        Emitter().remove_observer(RecordingObserver())

    def test_clear_observers(self) -> None:
        emitter = Emitter()
        emitter.add_observer(RecordingObserver())
        emitter.add_observer(CountingObserver())

        emitter.clear_observers()

        assert emitter.observers == []

    def test_observers_property_returns_copy(self) -> None:
        emitter = Emitter()
        emitter.add_observer(RecordingObserver())

        emitter.observers.clear()

        assert len(emitter.observers) == 1

    def test_no_observers_no_error(self) -> None:
        Emitter().fire(ValidationEventType.ITEM_SAVED)

    def test_multiple_observers_receive_events(self) -> None:
        emitter = Emitter()
        r1, r2 = RecordingObserver(), RecordingObserver()
        emitter.add_observer(r1)
        emitter.add_observer(r2)

        emitter.fire(ValidationEventType.ITEM_UPDATED)

        assert r1.event_types == [ValidationEventType.ITEM_UPDATED]
        assert r2.event_types == [ValidationEventType.ITEM_UPDATED]

    def test_observers_are_per_instance(self) -> None:
        a, b = Emitter(), Emitter()
        a.add_observer(RecordingObserver())

        assert b.observers == []


# =============================================================================
# Property-Based Tests
# =============================================================================


class TestObserverProperties:
    """Property-based tests for event emission."""

    @given(bad_names=st.integers(min_value=0, max_value=10), good=st.integers(min_value=0, max_value=10))
    @settings(max_examples=30)
    def test_event_count_matches_validations(self, bad_names: int, good: int) -> None:
        """Property: one STARTED/COMPLETED pair per pass, one ERROR_ADDED per error."""
        validator = ItemValidator(settings=ValidationSettings(_env_file=None))  # type: ignore[call-arg]
        counter = CountingObserver()
        validator.add_observer(counter)

        for _ in range(bad_names):
            validator.validate(ItemSaveForm(name="", price=1000, quantity=10))
        for _ in range(good):
            validator.validate(ItemSaveForm(name="pen", price=1000, quantity=10))

        passes = bad_names + good
        assert counter.counts.get(ValidationEventType.VALIDATION_STARTED, 0) == passes
        assert counter.counts.get(ValidationEventType.VALIDATION_COMPLETED, 0) == passes
        assert counter.counts.get(ValidationEventType.ERROR_ADDED, 0) == bad_names
