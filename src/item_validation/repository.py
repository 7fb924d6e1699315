"""Item storage.

The validator never touches storage; boundary handlers persist accepted
candidates through an ItemRepository. MemoryItemRepository keeps items in
a dict. A SQLModel-backed implementation lives in
``item_validation.sql_repository`` (requires the ``sql`` extra).
"""

from __future__ import annotations

from itertools import count
from typing import Protocol, runtime_checkable

from item_validation.errors import ItemNotFoundError
from item_validation.models import Item

__all__ = ["ItemRepository", "MemoryItemRepository"]


@runtime_checkable
class ItemRepository(Protocol):
    """Protocol for item stores."""

    def save(self, item: Item) -> Item:
        """Store a new item and return it with its assigned id."""
        ...

    def find_by_id(self, item_id: int) -> Item | None:
        """Get an item, or None if the id is unknown."""
        ...

    def find_all(self) -> list[Item]:
        """All items in id order."""
        ...

    def update(self, item_id: int, item: Item) -> None:
        """Overwrite name, price and quantity of an existing item."""
        ...

    def clear_store(self) -> None:
        """Remove every item."""
        ...


class MemoryItemRepository:
    """Dict-backed item store.

    Ids start at 1 and are never reused, even after clear_store(). No
    locking is done.
    """

    def __init__(self) -> None:
        self._store: dict[int, Item] = {}
        self._sequence = count(1)

    def save(self, item: Item) -> Item:
        saved = item.model_copy(update={"id": next(self._sequence)})
        self._store[saved.id] = saved  # type: ignore[index]
        return saved

    def find_by_id(self, item_id: int) -> Item | None:
        return self._store.get(item_id)

    def find_all(self) -> list[Item]:
        return [self._store[k] for k in sorted(self._store)]

    def update(self, item_id: int, item: Item) -> None:
        """Overwrite an item's values, keeping its id.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        if item_id not in self._store:
            raise ItemNotFoundError(item_id)
        self._store[item_id] = Item(
            id=item_id, name=item.name, price=item.price, quantity=item.quantity
        )

    def clear_store(self) -> None:
        self._store.clear()

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return f"MemoryItemRepository(items={len(self._store)})"
