"""SQLModel-backed item store.

Requires the optional ``sqlmodel`` dependency:
pip install item-validation[sql]

Defaults to a private in-memory SQLite database, which is enough for
demos and tests; pass any SQLAlchemy engine to use a real database.
"""

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from item_validation.errors import ItemNotFoundError
from item_validation.models import Item

__all__ = ["ItemRecord", "SQLItemRepository"]


class ItemRecord(SQLModel, table=True):
    """Database row for an item."""

    __tablename__ = "item"

    id: int | None = Field(default=None, primary_key=True)
    name: str | None = None
    price: int | None = None
    quantity: int | None = None

    def to_item(self) -> Item:
        return Item(id=self.id, name=self.name, price=self.price, quantity=self.quantity)


def _memory_engine() -> Engine:
    return create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )


class SQLItemRepository:
    """Item store on top of SQLModel.

    Example:
        repository = SQLItemRepository()
        saved = repository.save(Item(name="pen", price=1000, quantity=10))
        repository.find_by_id(saved.id)
    """

    def __init__(self, engine: Engine | None = None) -> None:
        """Initialize the repository, creating the item table if needed.

        Args:
            engine: SQLAlchemy engine. Defaults to in-memory SQLite.
        """
        self._engine = engine or _memory_engine()
        SQLModel.metadata.create_all(self._engine, tables=[ItemRecord.__table__])  # type: ignore[attr-defined]

    @property
    def engine(self) -> Engine:
        return self._engine

    def save(self, item: Item) -> Item:
        record = ItemRecord(name=item.name, price=item.price, quantity=item.quantity)
        with Session(self._engine) as session:
            session.add(record)
            session.commit()
            session.refresh(record)
            return record.to_item()

    def find_by_id(self, item_id: int) -> Item | None:
        with Session(self._engine) as session:
            record = session.get(ItemRecord, item_id)
            return record.to_item() if record is not None else None

    def find_all(self) -> list[Item]:
        with Session(self._engine) as session:
            records = session.exec(select(ItemRecord).order_by(ItemRecord.id)).all()  # type: ignore[arg-type]
            return [record.to_item() for record in records]

    def update(self, item_id: int, item: Item) -> None:
        """Overwrite an item's values, keeping its id.

        Raises:
            ItemNotFoundError: If no item has this id.
        """
        with Session(self._engine) as session:
            record = session.get(ItemRecord, item_id)
            if record is None:
                raise ItemNotFoundError(item_id)
            record.name = item.name
            record.price = item.price
            record.quantity = item.quantity
            session.add(record)
            session.commit()

    def clear_store(self) -> None:
        with Session(self._engine) as session:
            for record in session.exec(select(ItemRecord)).all():
                session.delete(record)
            session.commit()

    def __repr__(self) -> str:
        return f"SQLItemRepository(engine={self._engine.url!r})"
