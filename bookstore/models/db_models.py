"""SQLAlchemy models for the bookstore.

Orders do not hold live Book objects. An Order keeps the set of book ids it
references; the rows of ``order_books`` are written and read back by
OrderRepository, and book records are looked up through BookRepository.
"""

from typing import Iterable, Union

from sqlalchemy import Column, Float, ForeignKey, String, Table
from sqlalchemy.orm import Mapped, mapped_column, reconstructor

from core.models.base import Base, IdMixin


class Book(IdMixin, Base):
    """A book in the catalog."""

    __tablename__ = "book"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    price: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return f"<Book id={self.id} name={self.name!r} price={self.price}>"


order_books = Table(
    "order_books",
    Base.metadata,
    Column("order_id", ForeignKey("order.id"), primary_key=True, index=True),
    Column(
        "book_id",
        ForeignKey("book.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
)


BookRef = Union[Book, int]


def _book_id(book: BookRef) -> int:
    if isinstance(book, Book):
        if book.id is None:
            raise ValueError("Book must be persisted before it can be added to an order")
        return book.id
    return int(book)


class Order(IdMixin, Base):
    """A bundle of books.

    Membership is a set: adding a book twice or removing a book that is not
    there leaves the order unchanged. Both operations return the order so
    calls can be chained::

        order = Order().add_book(first).add_book(second)
    """

    __tablename__ = "order"

    def __init__(self, books: Iterable[BookRef] = (), **kwargs):
        super().__init__(**kwargs)
        self._book_ids: set[int] = set()
        self._membership_loaded = True
        for book in books:
            self.add_book(book)

    @reconstructor
    def _init_on_load(self) -> None:
        self._book_ids = set()
        self._membership_loaded = False

    @property
    def membership_loaded(self) -> bool:
        """False for an order fetched from the database whose books are not read yet."""
        return self._membership_loaded

    @property
    def book_ids(self) -> frozenset[int]:
        """Ids of the books in this order, in no particular order."""
        return frozenset(self._book_ids)

    def has_book(self, book: BookRef) -> bool:
        return _book_id(book) in self._book_ids

    def add_book(self, book: BookRef) -> "Order":
        book_id = _book_id(book)
        if book_id not in self._book_ids:
            self._book_ids.add(book_id)
        return self

    def remove_book(self, book: BookRef) -> "Order":
        book_id = _book_id(book)
        if book_id in self._book_ids:
            self._book_ids.discard(book_id)
        return self

    def load_book_ids(self, book_ids: Iterable[int]) -> None:
        self._book_ids = set(book_ids)
        self._membership_loaded = True

    def __repr__(self) -> str:
        return f"<Order id={self.id} books={sorted(self._book_ids)}>"
