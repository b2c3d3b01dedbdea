"""Bookstore repositories: async database access for books and orders.

Extends BaseRepository with the bookstore queries: the strict price filter
for books, and reading/writing order membership through ``order_books``.
"""

from typing import Sequence

from sqlalchemy import delete, insert, select

from bookstore.models.db_models import Book, Order, order_books
from patterns.repository import BaseRepository


class OrderDeletionNotSupported(RuntimeError):
    """Orders are kept once created; only books can be deleted."""


# ---------------------------------------------------------------------------
# Book repository
# ---------------------------------------------------------------------------

class BookRepository(BaseRepository[Book]):
    """Repository for book CRUD and search operations."""

    model = Book

    async def find_by_price_greater_than(self, threshold: float) -> list[Book]:
        """Books whose price is strictly greater than ``threshold``."""
        stmt = select(Book).where(Book.price > threshold).order_by(Book.id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete(self, item: Book) -> None:
        """Delete a book and drop it from every order that references it."""
        await self.session.execute(
            delete(order_books).where(order_books.c.book_id == item.id)
        )
        for obj in list(self.session.identity_map.values()):
            if isinstance(obj, Order):
                obj.remove_book(item.id)
        await super().delete(item)


# ---------------------------------------------------------------------------
# Order repository
# ---------------------------------------------------------------------------

class OrderRepository(BaseRepository[Order]):
    """Repository for orders and their book membership."""

    model = Order

    async def find_all(self) -> list[Order]:
        orders = await super().find_all()
        await self._load_memberships(orders)
        return orders

    async def get(self, item_id: int) -> Order | None:
        order = await super().get(item_id)
        if order is not None:
            await self._load_memberships([order])
        return order

    async def add(self, item: Order) -> Order:
        return await self.save(item)

    async def save(self, order: Order) -> Order:
        """Flush the order row and bring its ``order_books`` rows in line.

        Rows for books no longer in the order are deleted and rows for new
        members are inserted. Nothing is committed here.
        """
        self.session.add(order)
        await self.session.flush()

        stmt = select(order_books.c.book_id).where(order_books.c.order_id == order.id)
        stored = set((await self.session.execute(stmt)).scalars().all())
        wanted = order.book_ids

        stale = stored - wanted
        if stale:
            await self.session.execute(
                delete(order_books).where(
                    order_books.c.order_id == order.id,
                    order_books.c.book_id.in_(stale),
                )
            )

        fresh = wanted - stored
        if fresh:
            await self.session.execute(
                insert(order_books),
                [{"order_id": order.id, "book_id": book_id} for book_id in sorted(fresh)],
            )
        return order

    async def delete(self, item: Order) -> None:
        raise OrderDeletionNotSupported(f"Order {item.id} cannot be deleted")

    async def _load_memberships(self, orders: Sequence[Order]) -> None:
        # Orders already in memory keep their unsaved membership changes
        by_id = {order.id: order for order in orders if not order.membership_loaded}
        if not by_id:
            return

        stmt = select(order_books.c.order_id, order_books.c.book_id).where(
            order_books.c.order_id.in_(list(by_id))
        )
        result = await self.session.execute(stmt)

        members: dict[int, set[int]] = {order_id: set() for order_id in by_id}
        for order_id, book_id in result.all():
            members[order_id].add(book_id)
        for order_id, book_ids in members.items():
            by_id[order_id].load_book_ids(book_ids)
