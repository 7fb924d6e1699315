"""Shared fixtures and Hypothesis strategies for tests."""

from __future__ import annotations

import pytest
from hypothesis import strategies as st

from item_validation import (
    ErrorReport,
    ItemValidator,
    MemoryItemRepository,
    StaticMessageSource,
    ValidationEvent,
    ValidationEventType,
    ValidationSettings,
)

# -----------------------------------------------------------------------------
# Hypothesis Strategies
# -----------------------------------------------------------------------------

# Names with at least one non-whitespace character
valid_names = st.text(
    min_size=1,
    max_size=30,
    alphabet=st.characters(whitelist_categories=("L", "N", "Zs")),
).filter(lambda s: s.strip() != "")

# Absent, empty or whitespace-only names
blank_names = st.one_of(st.none(), st.text(alphabet=" \t\n", max_size=10))

in_range_prices = st.integers(min_value=1000, max_value=1000000)

out_of_range_prices = st.one_of(
    st.integers(max_value=999),
    st.integers(min_value=1000001, max_value=10**12),
)

optional_prices = st.one_of(st.none(), st.integers(min_value=-(10**6), max_value=10**7))

valid_quantities = st.integers(min_value=1, max_value=9999)

over_max_quantities = st.integers(min_value=10000, max_value=10**9)

optional_quantities = st.one_of(st.none(), st.integers(min_value=-100, max_value=20000))

# Field names for raw report tests
field_names = st.text(
    min_size=1,
    max_size=20,
    alphabet=st.characters(whitelist_categories=("L", "N")),
)

error_codes = st.sampled_from(["required", "range", "max", "typeMismatch", "totalPriceMin"])


# -----------------------------------------------------------------------------
# Test Observers
# -----------------------------------------------------------------------------


class RecordingObserver:
    """Observer that records all events for testing."""

    def __init__(self) -> None:
        self.events: list[ValidationEvent] = []

    def on_event(self, event: ValidationEvent) -> None:
        self.events.append(event)

    def clear(self) -> None:
        self.events.clear()

    @property
    def event_types(self) -> list[ValidationEventType]:
        return [e.event_type for e in self.events]

    def of_type(self, event_type: ValidationEventType) -> list[ValidationEvent]:
        return [e for e in self.events if e.event_type == event_type]


def codes_of(report: ErrorReport) -> list[tuple[str | None, str]]:
    """(field, code) pairs in report order; field is None for object errors."""
    return [(getattr(e, "field", None), e.code) for e in report.all_errors()]


# -----------------------------------------------------------------------------
# Pytest Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def settings() -> ValidationSettings:
    """Settings with the default thresholds, ignoring any .env file."""
    return ValidationSettings(_env_file=None)  # type: ignore[call-arg]


@pytest.fixture
def validator(settings: ValidationSettings) -> ItemValidator:
    """Create a fresh ItemValidator with the default rule set."""
    return ItemValidator(settings=settings)


@pytest.fixture
def repository() -> MemoryItemRepository:
    """Create an empty in-memory repository."""
    return MemoryItemRepository()


@pytest.fixture
def messages() -> StaticMessageSource:
    """Message source with the built-in English catalog."""
    return StaticMessageSource.default()


@pytest.fixture
def recorder() -> RecordingObserver:
    """Create a RecordingObserver instance."""
    return RecordingObserver()
