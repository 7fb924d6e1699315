"""Item candidates and the persisted item entity.

Candidates are the payloads under validation: they carry whatever the
caller supplied (possibly missing or out-of-range values) and are frozen
once constructed. Type coercion happens here; business rules live in
``item_validation.validators``.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

__all__ = ["ItemCandidate", "ItemSaveForm", "ItemUpdateForm", "Item"]


def _reject_bool(value: Any) -> Any:
    # bool is an int subclass; lax mode would turn true into 1
    if isinstance(value, bool):
        raise ValueError("Input should be a valid integer, not a boolean")
    return value


class ItemCandidate(BaseModel):
    """Fields shared by every item candidate.

    Attributes:
        name: Display name of the item. May be absent or blank.
        price: Unit price. May be absent.
        quantity: Stock quantity. May be absent.
    """

    model_config = ConfigDict(
        extra="ignore",
        frozen=True,
    )

    name: str | None = None
    price: int | None = None
    quantity: int | None = None

    @field_validator("price", "quantity", mode="before")
    @classmethod
    def numbers_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class ItemSaveForm(ItemCandidate):
    """Candidate submitted to create an item. Has no identity yet."""


class ItemUpdateForm(ItemCandidate):
    """Candidate submitted to update an existing item.

    Attributes:
        id: Identity of the item being edited, supplied by the caller.
    """

    id: int | None = None

    @field_validator("id", mode="before")
    @classmethod
    def id_not_bool(cls, value: Any) -> Any:
        return _reject_bool(value)


class Item(BaseModel):
    """A stored item."""

    model_config = ConfigDict(frozen=True)

    id: int | None = None
    name: str | None = None
    price: int | None = None
    quantity: int | None = None

    @classmethod
    def from_form(cls, form: ItemCandidate, *, item_id: int | None = None) -> Item:
        """Build an item from an accepted candidate.

        Args:
            form: The validated candidate.
            item_id: Identity to assign. Defaults to the form's own id,
                if it has one.

        Returns:
            A new Item carrying the candidate's values.
        """
        if item_id is None:
            item_id = getattr(form, "id", None)
        return cls(id=item_id, name=form.name, price=form.price, quantity=form.quantity)
