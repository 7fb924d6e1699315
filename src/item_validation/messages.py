"""Message codes and message resolution.

Errors carry a symbolic code plus positional arguments rather than a
finished string. MessageCodesResolver expands a code into the list of
catalog keys to try, most specific first; a MessageSource looks those keys
up and interpolates the arguments.

For a field error with code ``required`` on ``item.name`` (a ``str``) the
keys tried are::

    required.item.name
    required.name
    required.str
    required
"""

from __future__ import annotations

import tomllib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import TYPE_CHECKING, Any

from item_validation.errors import MessageNotFoundError

if TYPE_CHECKING:
    from item_validation.protocols import MessageSource
    from item_validation.results import ErrorReport, ObjectError

__all__ = [
    "DEFAULT_MESSAGES",
    "MessageCodesResolver",
    "StaticMessageSource",
    "format_message",
    "resolve_message",
    "render_errors",
]


DEFAULT_MESSAGES: dict[str, str] = {
    # Most specific: object.field
    "required.item.name": "Item name is required.",
    "range.item.price": "Price must be between {0} and {1}.",
    "max.item.quantity": "Quantity may not exceed {0}.",
    # Generic fallbacks
    "required": "This value is required.",
    "range": "Value must be between {0} and {1}.",
    "max": "Value may not exceed {0}.",
    "totalPriceMin": "Price * quantity must be at least {0}. Current value = {1}",
    "typeMismatch.int": "Please enter a number.",
    "typeMismatch": "Invalid value.",
}


class MessageCodesResolver:
    """Builds message codes for errors.

    Args:
        separator: String joining code segments. Defaults to ".".
    """

    def __init__(self, separator: str = ".") -> None:
        self._separator = separator

    def resolve_object_codes(self, code: str, object_name: str) -> tuple[str, ...]:
        """Codes for an object error: ``code.object``, ``code``."""
        return (self._join(code, object_name), code)

    def resolve_field_codes(
        self,
        code: str,
        object_name: str,
        field: str,
        field_type: type | None = None,
    ) -> tuple[str, ...]:
        """Codes for a field error.

        Returns:
            ``code.object.field``, ``code.field``, ``code.type`` (only when
            field_type is known) and ``code``.
        """
        codes = [
            self._join(code, object_name, field),
            self._join(code, field),
        ]
        if field_type is not None:
            codes.append(self._join(code, field_type.__name__))
        codes.append(code)
        return tuple(codes)

    def _join(self, *parts: str) -> str:
        return self._separator.join(parts)

    def __repr__(self) -> str:
        return f"MessageCodesResolver(separator={self._separator!r})"


def _format_argument(value: Any) -> str:
    # Integers render with grouping, like "1,000,000"
    if isinstance(value, int) and not isinstance(value, bool):
        return f"{value:,}"
    return str(value)


def format_message(template: str, args: Sequence[Any] = ()) -> str:
    """Interpolate positional ``{0}``-style placeholders.

    Args:
        template: Message template.
        args: Positional arguments.

    Returns:
        The formatted message. ``{{`` and ``}}`` always render as literal
        braces, with or without arguments.
    """
    return template.format(*(_format_argument(a) for a in args))


class StaticMessageSource:
    """Dictionary-backed message catalog.

    Example:
        source = StaticMessageSource.from_mapping(DEFAULT_MESSAGES)
        source.add_message("required.item.name", "Name, please.")
        source.get_message("range.item.price", (1000, 1000000))
        # 'Price must be between 1,000 and 1,000,000.'
    """

    def __init__(self, messages: Mapping[str, str] | None = None) -> None:
        self._messages: dict[str, str] = dict(messages) if messages is not None else {}

    @classmethod
    def from_mapping(cls, messages: Mapping[str, str]) -> StaticMessageSource:
        return cls(messages)

    @classmethod
    def from_toml(cls, path: str | Path) -> StaticMessageSource:
        """Load a catalog from a TOML file.

        Keys may be written flat and quoted (``"range.item.price" = "..."``)
        or as nested tables; nested tables are flattened with dots.

        Args:
            path: Path to the TOML file.

        Returns:
            A new StaticMessageSource.
        """
        with open(path, "rb") as f:
            data = tomllib.load(f)
        return cls(_flatten(data))

    @classmethod
    def default(cls) -> StaticMessageSource:
        """Source preloaded with DEFAULT_MESSAGES."""
        return cls(DEFAULT_MESSAGES)

    def add_message(self, code: str, template: str) -> None:
        self._messages[code] = template

    def add_messages(self, messages: Mapping[str, str]) -> None:
        self._messages.update(messages)

    def has_message(self, code: str) -> bool:
        return code in self._messages

    def get_message(self, code: str, args: Sequence[Any] = ()) -> str | None:
        """Formatted message for a code, or None if the catalog lacks it."""
        template = self._messages.get(code)
        if template is None:
            return None
        return format_message(template, args)

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"StaticMessageSource(messages={len(self._messages)})"


def _flatten(data: Mapping[str, Any], prefix: str = "") -> dict[str, str]:
    flat: dict[str, str] = {}
    for key, value in data.items():
        full_key = f"{prefix}.{key}" if prefix else key
        if isinstance(value, Mapping):
            flat.update(_flatten(value, full_key))
        else:
            flat[full_key] = str(value)
    return flat


def resolve_message(error: ObjectError, source: MessageSource) -> str:
    """Resolve an error to display text.

    Tries every code on the error, most specific first, then falls back to
    the error's default message.

    Args:
        error: The error to render.
        source: Message catalog to consult.

    Returns:
        The rendered message.

    Raises:
        MessageNotFoundError: If no code resolves and the error has no
            default message.
    """
    codes = error.codes or (error.code,)
    for code in codes:
        message = source.get_message(code, error.arguments)
        if message is not None:
            return message
    if error.default_message is not None:
        return format_message(error.default_message, error.arguments)
    raise MessageNotFoundError(codes)


def render_errors(report: ErrorReport, source: MessageSource) -> dict[str | None, list[str]]:
    """Render every error in a report, grouped for redisplay.

    Args:
        report: The report to render.
        source: Message catalog to consult.

    Returns:
        Dict of field name -> messages, in insertion order. Object-level
        messages are stored under the ``None`` key.
    """
    rendered: dict[str | None, list[str]] = {}
    for error in report.all_errors():
        key = getattr(error, "field", None)
        rendered.setdefault(key, []).append(resolve_message(error, source))
    return rendered
