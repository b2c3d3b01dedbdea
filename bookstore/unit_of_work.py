"""Unit of work: one session and one transaction per request.

Handlers receive a UnitOfWork instead of reaching for a global session. The
repositories it exposes share its session, so everything staged through them
commits or rolls back together::

    async with UnitOfWork(async_session_factory) as uow:
        book = await uow.books.get(1)
        await uow.orders.add(Order().add_book(book))
        await uow.commit()

Leaving the block without calling commit() discards the work.
"""

from typing import Any, AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from bookstore.repository import BookRepository, OrderRepository
from core.database import get_session_factory


class UnitOfWork:
    """Async context manager wrapping a single AsyncSession."""

    books: BookRepository
    orders: OrderRepository

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.session: AsyncSession | None = None

    async def __aenter__(self) -> "UnitOfWork":
        self.session = self.session_factory()
        self.books = BookRepository(self.session)
        self.orders = OrderRepository(self.session)
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        # close() rolls back any open transaction without expiring loaded rows
        await self.session.close()

    async def commit(self) -> None:
        await self.session.commit()

    async def rollback(self) -> None:
        await self.session.rollback()


# ---------------------------------------------------------------------------
# FastAPI dependency
# ---------------------------------------------------------------------------

async def get_unit_of_work(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> AsyncGenerator[UnitOfWork, None]:
    """Yield a unit of work scoped to the current request."""
    async with UnitOfWork(session_factory) as uow:
        yield uow
