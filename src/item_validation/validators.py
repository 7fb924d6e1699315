"""Item rules and the item validator.

Each rule checks one constraint and records failures in an ErrorReport.
ItemValidator runs the rules that apply to a ValidationContext, all of
them, in order, and returns the populated report.
"""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING

from item_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
)
from item_validation.errors import UnsupportedCandidateError
from item_validation.models import Item, ItemCandidate
from item_validation.results import ErrorReport
from item_validation.settings import ValidationSettings, get_settings

if TYPE_CHECKING:
    from collections.abc import Iterable

__all__ = [
    "ValidationContext",
    "ItemRule",
    "IdRequiredRule",
    "NameRequiredRule",
    "PriceRangeRule",
    "QuantityMaxRule",
    "QuantityRequiredRule",
    "TotalPriceMinRule",
    "ItemValidator",
    "default_rules",
]


class ValidationContext(Enum):
    """Which rule subset applies.

    SAVE: a new item; identity is assigned by the repository, so it is not
    checked, and the quantity maximum applies.
    UPDATE: an existing item; identity must be supplied by the caller, and
    quantity only has to be present.
    """

    SAVE = "save"
    UPDATE = "update"


_BOTH = frozenset(ValidationContext)


class ItemRule(ABC):
    """Abstract base class for a single item rule.

    Subclasses set ``field`` (None for cross-field rules) and ``contexts``
    and implement check().

    Example:
        class NoteRequiredRule(ItemRule):
            field = "note"

            @property
            def name(self) -> str:
                return "note_required"

            def check(self, candidate, report) -> None:
                if not candidate.note:
                    report.add_field_error("note", "required", candidate.note)
    """

    field: str | None = None
    contexts: frozenset[ValidationContext] = _BOTH

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this rule for identification."""
        ...

    @abstractmethod
    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        """Check the candidate, recording any failure in the report.

        Args:
            candidate: Object to check.
            report: Report to append errors to.
        """
        ...

    def applies_to(self, context: ValidationContext) -> bool:
        return context in self.contexts

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


class IdRequiredRule(ItemRule):
    """Identity must be present when updating."""

    field = "id"
    contexts = frozenset({ValidationContext.UPDATE})

    @property
    def name(self) -> str:
        return "id_required"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        item_id = getattr(candidate, "id", None)
        if item_id is None:
            report.add_field_error(
                "id", "required", item_id, default_message="Item id is required.", field_type=int
            )


class NameRequiredRule(ItemRule):
    """Name must contain at least one non-whitespace character."""

    field = "name"

    @property
    def name(self) -> str:
        return "name_required"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        value = candidate.name
        if value is None or not value.strip():
            report.add_field_error(
                "name",
                "required",
                value,
                default_message="Item name is required.",
                field_type=str,
            )


class PriceRangeRule(ItemRule):
    """Price must be present and within [minimum, maximum]."""

    field = "price"

    def __init__(self, minimum: int = 1000, maximum: int = 1000000) -> None:
        self.minimum = minimum
        self.maximum = maximum

    @property
    def name(self) -> str:
        return "price_range"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        price = candidate.price
        if price is None or price < self.minimum or price > self.maximum:
            report.add_field_error(
                "price",
                "range",
                price,
                (self.minimum, self.maximum),
                default_message="Price must be between {0} and {1}.",
                field_type=int,
            )


class QuantityMaxRule(ItemRule):
    """Quantity must be present and at most maximum. Save only."""

    field = "quantity"
    contexts = frozenset({ValidationContext.SAVE})

    def __init__(self, maximum: int = 9999) -> None:
        self.maximum = maximum

    @property
    def name(self) -> str:
        return "quantity_max"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        quantity = candidate.quantity
        if quantity is None or quantity > self.maximum:
            report.add_field_error(
                "quantity",
                "max",
                quantity,
                (self.maximum,),
                default_message="Quantity may not exceed {0}.",
                field_type=int,
            )


class QuantityRequiredRule(ItemRule):
    """Quantity must be present. Update only; no upper bound."""

    field = "quantity"
    contexts = frozenset({ValidationContext.UPDATE})

    @property
    def name(self) -> str:
        return "quantity_required"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        if candidate.quantity is None:
            report.add_field_error(
                "quantity",
                "required",
                None,
                default_message="Quantity is required.",
                field_type=int,
            )


class TotalPriceMinRule(ItemRule):
    """price * quantity must reach minimum.

    Skipped, not failed, when either value is absent.
    """

    def __init__(self, minimum: int = 10000) -> None:
        self.minimum = minimum

    @property
    def name(self) -> str:
        return "total_price_min"

    def check(self, candidate: ItemCandidate | Item, report: ErrorReport) -> None:
        price, quantity = candidate.price, candidate.quantity
        if price is None or quantity is None:
            return
        total = price * quantity
        if total < self.minimum:
            report.add_object_error(
                "totalPriceMin",
                (self.minimum, total),
                default_message="Price * quantity must be at least {0}. Current value = {1}",
            )


def default_rules(settings: ValidationSettings | None = None) -> list[ItemRule]:
    """Build the standard item rule set, in evaluation order.

    Args:
        settings: Thresholds to use. Defaults to get_settings().

    Returns:
        Fresh rule instances.
    """
    settings = settings or get_settings()
    return [
        IdRequiredRule(),
        NameRequiredRule(),
        PriceRangeRule(settings.price_min, settings.price_max),
        QuantityMaxRule(settings.quantity_max),
        QuantityRequiredRule(),
        TotalPriceMinRule(settings.total_price_min),
    ]


class ItemValidator(ObservableMixin):
    """Validator for item candidates.

    Runs every rule that applies to the requested context and aggregates
    their failures into one ErrorReport. Rules never short-circuit, so one
    pass surfaces every problem. Holds no per-call state; one instance can
    be shared by all callers.

    Supports the Observer pattern - add observers to receive
    VALIDATION_STARTED, ERROR_ADDED and VALIDATION_COMPLETED events.

    Example:
        validator = ItemValidator()
        report = validator.validate(ItemSaveForm(name="pen", price=100, quantity=1))
        report.has_errors()  # True: price range and totalPriceMin

        report = validator.validate(form, ValidationContext.UPDATE)
    """

    def __init__(
        self,
        rules: Iterable[ItemRule] | None = None,
        *,
        settings: ValidationSettings | None = None,
        name: str = "item_validator",
    ) -> None:
        """Initialize the validator.

        Args:
            rules: Rules to run, in order. Defaults to default_rules().
            settings: Settings for thresholds and object name. Defaults to
                get_settings().
            name: Name for this validator.
        """
        self._settings = settings or get_settings()
        self._rules: list[ItemRule] = (
            list(rules) if rules is not None else default_rules(self._settings)
        )
        self._name = name

    @property
    def name(self) -> str:
        return self._name

    @property
    def object_name(self) -> str:
        return self._settings.object_name

    def supports(self, cls: type) -> bool:
        """Whether instances of cls can be validated."""
        return isinstance(cls, type) and issubclass(cls, (ItemCandidate, Item))

    def rules_for(self, context: ValidationContext) -> list[ItemRule]:
        """Rules that apply to a context, in evaluation order."""
        return [rule for rule in self._rules if rule.applies_to(context)]

    def validate(
        self,
        candidate: ItemCandidate | Item,
        context: ValidationContext = ValidationContext.SAVE,
        report: ErrorReport | None = None,
    ) -> ErrorReport:
        """Validate a candidate.

        Args:
            candidate: The candidate to check.
            context: Which rule subset applies.
            report: Report to populate, e.g. one already holding binding
                failures. A new one is created when omitted.

        Returns:
            The populated report. No errors means the candidate is valid.

        Raises:
            UnsupportedCandidateError: If the candidate is not an item
                candidate or item.

        Note:
            Single-field rules skip a field whose value already failed to
            bind; there is no usable value to check.
        """
        if not self.supports(type(candidate)):
            raise UnsupportedCandidateError(
                f"{self._name} cannot validate {type(candidate).__name__}"
            )

        if report is None:
            report = ErrorReport(object_name=self.object_name, target=candidate)

        start_time = time.perf_counter()
        rules = self.rules_for(context)

        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.VALIDATION_STARTED,
                source=self,
                data={
                    "candidate": candidate,
                    "context": context,
                    "validator_name": self._name,
                    "rule_count": len(rules),
                },
            )
        )

        for rule in rules:
            if rule.field is not None and report.has_binding_failure(rule.field):
                continue

            before = report.error_count
            rule.check(candidate, report)

            for error in report.all_errors()[before:]:
                self.notify(
                    ValidationEvent(
                        event_type=ValidationEventType.ERROR_ADDED,
                        source=self,
                        data={"error": error, "rule": rule.name, "context": context},
                    )
                )

        duration_ms = (time.perf_counter() - start_time) * 1000

        self.notify(
            ValidationEvent(
                event_type=ValidationEventType.VALIDATION_COMPLETED,
                source=self,
                data={
                    "candidate": candidate,
                    "context": context,
                    "validator_name": self._name,
                    "is_valid": not report.has_errors(),
                    "error_count": report.error_count,
                    "duration_ms": duration_ms,
                    "report": report,
                },
            )
        )

        return report

    def add_rule(self, rule: ItemRule) -> None:
        self._rules.append(rule)

    def remove_rule(self, name: str) -> bool:
        """Remove a rule by name.

        Returns:
            True if a rule was removed, False if not found.
        """
        for i, rule in enumerate(self._rules):
            if rule.name == name:
                self._rules.pop(i)
                return True
        return False

    def has_rule(self, name: str) -> bool:
        return any(rule.name == name for rule in self._rules)

    def get_rule(self, name: str) -> ItemRule | None:
        for rule in self._rules:
            if rule.name == name:
                return rule
        return None

    @property
    def rules(self) -> list[ItemRule]:
        """Get copy of rules list."""
        return self._rules.copy()

    @property
    def rule_names(self) -> list[str]:
        """Get list of rule names in order."""
        return [rule.name for rule in self._rules]

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        names = ", ".join(self.rule_names)
        return f"ItemValidator(name={self._name!r}, rules=[{names}])"
