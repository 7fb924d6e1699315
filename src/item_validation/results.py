"""Validation error containers.

ObjectError and FieldError describe single failures by symbolic code and
positional arguments; ErrorReport accumulates them, in order, for one
validation pass.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

from item_validation.messages import MessageCodesResolver

__all__ = ["ObjectError", "FieldError", "ErrorReport"]


@dataclass(frozen=True, kw_only=True)
class ObjectError:
    """A failure attributed to the candidate as a whole.

    Attributes:
        object_name: Name of the validated object (e.g. "item").
        code: Symbolic error code (e.g. "totalPriceMin").
        arguments: Positional arguments for message interpolation.
        codes: Message codes to try, most specific first.
        default_message: Literal fallback used when no code resolves.
    """

    object_name: str
    code: str
    arguments: tuple[Any, ...] = ()
    codes: tuple[str, ...] = ()
    default_message: str | None = None

    @property
    def is_field_error(self) -> bool:
        return False

    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-ready dict."""
        return {
            "object_name": self.object_name,
            "code": self.code,
            "codes": list(self.codes),
            "arguments": list(self.arguments),
            "default_message": self.default_message,
        }


@dataclass(frozen=True, kw_only=True)
class FieldError(ObjectError):
    """A failure attributed to one named field.

    Attributes:
        field: Name of the offending field.
        rejected_value: The value that was rejected, kept for redisplay.
        binding_failure: True when the raw input could not be coerced to
            the field's type, as opposed to a rule violation.
    """

    field: str
    rejected_value: Any = None
    binding_failure: bool = False

    @property
    def is_field_error(self) -> bool:
        return True

    def to_dict(self) -> dict[str, Any]:
        d = super().to_dict()
        d["field"] = self.field
        d["rejected_value"] = self.rejected_value
        d["binding_failure"] = self.binding_failure
        return d


@dataclass
class ErrorReport:
    """Ordered accumulation of errors from one validation pass.

    A report with no errors means the candidate is valid. Errors are kept
    in insertion order, which is also their display order.

    Example:
        report = ErrorReport(object_name="item", target=form)
        report.add_field_error("price", "range", form.price, (1000, 1000000))
        report.add_object_error("totalPriceMin", (10000, 100))
        if report.has_errors():
            return report.to_dicts()
    """

    object_name: str = "item"
    target: Any = None
    codes_resolver: MessageCodesResolver = field(
        default_factory=MessageCodesResolver, repr=False, compare=False
    )
    errors: list[ObjectError] = field(default_factory=list)

    def add_error(self, error: ObjectError) -> ObjectError:
        """Append an already-built error."""
        self.errors.append(error)
        return error

    def add_field_error(
        self,
        field: str,
        code: str,
        rejected_value: Any = None,
        args: tuple[Any, ...] | list[Any] = (),
        default_message: str | None = None,
        *,
        binding_failure: bool = False,
        field_type: type | None = None,
    ) -> FieldError:
        """Append a field error. Duplicates are kept.

        Args:
            field: Name of the offending field.
            code: Symbolic error code.
            rejected_value: The value that failed, for redisplay.
            args: Positional message arguments.
            default_message: Literal fallback message.
            binding_failure: Whether this is a type-coercion failure.
            field_type: Declared type of the field, adds a type-specific
                message code when given.

        Returns:
            The FieldError that was appended.
        """
        error = FieldError(
            object_name=self.object_name,
            code=code,
            arguments=tuple(args),
            codes=self.codes_resolver.resolve_field_codes(
                code, self.object_name, field, field_type
            ),
            default_message=default_message,
            field=field,
            rejected_value=rejected_value,
            binding_failure=binding_failure,
        )
        self.errors.append(error)
        return error

    def add_object_error(
        self,
        code: str,
        args: tuple[Any, ...] | list[Any] = (),
        default_message: str | None = None,
    ) -> ObjectError:
        """Append an object-level (global) error. Duplicates are kept."""
        error = ObjectError(
            object_name=self.object_name,
            code=code,
            arguments=tuple(args),
            codes=self.codes_resolver.resolve_object_codes(code, self.object_name),
            default_message=default_message,
        )
        self.errors.append(error)
        return error

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def all_errors(self) -> list[ObjectError]:
        """Field and object errors in insertion order."""
        return self.errors.copy()

    @property
    def field_errors(self) -> list[FieldError]:
        return [e for e in self.errors if isinstance(e, FieldError)]

    @property
    def global_errors(self) -> list[ObjectError]:
        return [e for e in self.errors if not isinstance(e, FieldError)]

    @property
    def error_count(self) -> int:
        return len(self.errors)

    def has_field_errors(self, field: str | None = None) -> bool:
        """Check for field errors, optionally restricted to one field."""
        if field is None:
            return len(self.field_errors) > 0
        return self.get_field_error(field) is not None

    def has_global_errors(self) -> bool:
        return len(self.global_errors) > 0

    def get_field_errors(self, field: str) -> list[FieldError]:
        return [e for e in self.field_errors if e.field == field]

    def get_field_error(self, field: str) -> FieldError | None:
        """Get the first error recorded for a field, if any."""
        for e in self.field_errors:
            if e.field == field:
                return e
        return None

    def has_binding_failure(self, field: str) -> bool:
        return any(e.binding_failure for e in self.get_field_errors(field))

    def field_value(self, field: str) -> Any:
        """Value to redisplay for a field.

        Returns the rejected value when the field has an error (so raw,
        unbindable input is shown back to the user), otherwise the
        target's current value.
        """
        error = self.get_field_error(field)
        if error is not None:
            return error.rejected_value
        return getattr(self.target, field, None)

    def merge(self, other: ErrorReport) -> ErrorReport:
        """Append another report's errors to this one.

        Args:
            other: Report whose errors are appended, in order.

        Returns:
            Self, for method chaining.
        """
        self.errors.extend(other.errors)
        return self

    def to_dicts(self) -> list[dict[str, Any]]:
        """Serialize all errors, in order, to JSON-ready dicts."""
        return [e.to_dict() for e in self.errors]

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self) -> Iterator[ObjectError]:
        return iter(self.errors)
