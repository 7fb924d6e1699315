"""Structured payload parsing: JSON body -> item candidate.

Unlike form binding, parsing is all or nothing. A payload that is not
valid JSON, or whose values do not fit the candidate's types, is a
transport failure: PayloadError is raised and validation never runs.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, TypeVar, cast

from pydantic import ValidationError

from item_validation.errors import PayloadError
from item_validation.models import ItemCandidate

__all__ = ["parse_payload"]

F = TypeVar("F", bound=ItemCandidate)


def parse_payload(body: str | bytes | Mapping[str, Any], form_class: type[F]) -> F:
    """Parse a request body into a candidate.

    Args:
        body: Raw JSON text/bytes, or an already-decoded mapping.
        form_class: Candidate model to build.

    Returns:
        The parsed candidate. Rule validation has not been applied yet.

    Raises:
        PayloadError: If the body is malformed or a value has the wrong
            type. ``details`` holds the pydantic error list.
    """
    try:
        if isinstance(body, (str, bytes, bytearray)):
            return form_class.model_validate_json(body)
        if isinstance(body, Mapping):
            return form_class.model_validate(dict(body))
    except ValidationError as e:
        details = cast(
            "list[dict[str, Any]]", e.errors(include_url=False, include_context=False)
        )
        raise PayloadError(
            f"Malformed {form_class.__name__} payload: {e.error_count()} error(s)",
            details,
        ) from e

    raise PayloadError(f"Unsupported payload type: {type(body).__name__}")
