"""Form binding: loosely typed request parameters -> item candidate.

Binding is field by field. A value that cannot be coerced to its field's
type does not abort binding: it is recorded as a binding-failure field
error (keeping the raw input for redisplay) and the field is left absent
on the candidate. The returned report is then handed to the validator,
which skips rules for fields that failed to bind.
"""

from __future__ import annotations

import types
from collections.abc import Mapping
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Generic, TypeVar, Union, get_args, get_origin

from pydantic import TypeAdapter, ValidationError

from item_validation.events import (
    ObservableMixin,
    ValidationEvent,
    ValidationEventType,
)
from item_validation.models import ItemCandidate
from item_validation.results import ErrorReport

__all__ = ["BindingResult", "FormBinder", "bind_form"]

F = TypeVar("F", bound=ItemCandidate)


@dataclass
class BindingResult(Generic[F]):
    """Outcome of binding one form submission.

    Attributes:
        candidate: The bound candidate. Fields that failed to bind are None.
        report: Report holding any binding failures; pass it on to the
            validator so rule errors land in the same report.
    """

    candidate: F
    report: ErrorReport

    @property
    def has_binding_failures(self) -> bool:
        return any(e.binding_failure for e in self.report.field_errors)


@lru_cache(maxsize=None)
def _adapter(annotation: Any) -> TypeAdapter[Any]:
    return TypeAdapter(annotation)


def _value_type(annotation: Any) -> type | None:
    """Strip Optional from an annotation: ``int | None`` -> ``int``."""
    if get_origin(annotation) in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        return args[0] if len(args) == 1 and isinstance(args[0], type) else None
    return annotation if isinstance(annotation, type) else None


class FormBinder(ObservableMixin):
    """Binds request parameters onto a candidate model.

    Emits a BINDING_FAILED event for every value that cannot be coerced.

    Example:
        binder = FormBinder()
        bound = binder.bind({"name": "pen", "price": "abc"}, ItemSaveForm)
        bound.candidate.price  # None
        bound.report.get_field_error("price").rejected_value  # "abc"
    """

    def __init__(self, *, object_name: str = "item") -> None:
        self._object_name = object_name

    def bind(self, params: Mapping[str, Any], form_class: type[F]) -> BindingResult[F]:
        """Bind parameters to a new instance of form_class.

        Args:
            params: Raw request parameters keyed by field name. Keys that
                are not fields of form_class are ignored.
            form_class: Candidate model to build.

        Returns:
            BindingResult with the candidate and a report of binding
            failures.
        """
        report = ErrorReport(object_name=self._object_name)
        values: dict[str, Any] = {}

        for field_name, info in form_class.model_fields.items():
            if field_name not in params:
                continue
            raw = params[field_name]
            value_type = _value_type(info.annotation)

            value = raw
            if isinstance(raw, str) and value_type is not str:
                # Blank input for a non-text field binds as "not provided"
                value = raw.strip() or None

            try:
                values[field_name] = _adapter(info.annotation).validate_python(value)
            except ValidationError as e:
                error = report.add_field_error(
                    field_name,
                    "typeMismatch",
                    raw,
                    (field_name,),
                    default_message="Failed to convert value for field '{0}'",
                    binding_failure=True,
                    field_type=value_type,
                )
                self.notify(
                    ValidationEvent(
                        event_type=ValidationEventType.BINDING_FAILED,
                        source=self,
                        data={
                            "field": field_name,
                            "value": raw,
                            "error": error,
                            "details": e.errors(),
                        },
                    )
                )

        candidate = form_class.model_validate(values)
        report.target = candidate
        return BindingResult(candidate=candidate, report=report)


def bind_form(
    params: Mapping[str, Any],
    form_class: type[F],
    *,
    object_name: str = "item",
) -> BindingResult[F]:
    """Bind parameters with a throwaway FormBinder. See FormBinder.bind()."""
    return FormBinder(object_name=object_name).bind(params, form_class)
