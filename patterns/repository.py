"""Async repository pattern for database access.

Provides a generic base repository with the read/add/delete operations every
entity shares. Domain repositories subclass it to add their own queries.

Repositories never commit: they work inside the session handed to them and
leave commit/rollback to the unit of work that owns it.
"""

from typing import Generic, Iterable, Sequence, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from core.models.base import MAX_ID, Base

# ---------------------------------------------------------------------------
# Type variable for model classes
# ---------------------------------------------------------------------------

ModelT = TypeVar("ModelT", bound=Base)


# ---------------------------------------------------------------------------
# Base repository
# ---------------------------------------------------------------------------

class BaseRepository(Generic[ModelT]):
    """Generic async repository keyed by integer id.

    Subclass and set `model` to your SQLAlchemy model::

        class BookRepository(BaseRepository[Book]):
            model = Book

            async def find_by_name(self, name: str) -> list[Book]:
                stmt = select(self.model).where(self.model.name == name)
                result = await self.session.execute(stmt)
                return list(result.scalars().all())
    """

    model: type[ModelT]

    def __init__(self, session: AsyncSession):
        self.session = session

    # -- List --

    async def find_all(self) -> list[ModelT]:
        """Return every row, ordered by id."""
        stmt = select(self.model).order_by(self.model.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    # -- Get by ID --

    async def get(self, item_id: int) -> ModelT | None:
        """Get a single item by ID, or None if there is no such row."""
        if not 0 < item_id <= MAX_ID:
            return None
        return await self.session.get(self.model, item_id)

    async def get_many(self, item_ids: Iterable[int]) -> dict[int, ModelT]:
        """Get several items at once, keyed by id. Unknown ids are left out."""
        ids: Sequence[int] = sorted(i for i in set(item_ids) if 0 < i <= MAX_ID)
        if not ids:
            return {}
        stmt = select(self.model).where(self.model.id.in_(ids))
        result = await self.session.execute(stmt)
        return {item.id: item for item in result.scalars().all()}

    # -- Add --

    async def add(self, item: ModelT) -> ModelT:
        """Stage a new item and flush so its id is generated."""
        self.session.add(item)
        await self.session.flush()
        return item

    # -- Delete --

    async def delete(self, item: ModelT) -> None:
        await self.session.delete(item)
        await self.session.flush()
