"""Shared fixtures: in-memory database, seeded books, HTTP client."""
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.pool import StaticPool

from api.main import create_app
from bookstore.config import BookstoreConfig
from bookstore.models.db_models import Book
from bookstore.unit_of_work import UnitOfWork
from core.database import build_engine, build_session_factory, get_session_factory, init_db


@pytest.fixture
async def engine():
    engine = build_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return build_session_factory(engine)


@pytest.fixture
async def books(session_factory):
    """Three books keyed by name; one of them is free."""
    async with UnitOfWork(session_factory) as uow:
        created = [
            await uow.books.add(Book(name=name, price=price))
            for name, price in [
                ("Free Pamphlet", 0.0),
                ("Dune", 9.99),
                ("SICP", 45.0),
            ]
        ]
        await uow.commit()
    return {book.name: book for book in created}


@pytest.fixture
def app(session_factory):
    app = create_app(BookstoreConfig.default())
    app.dependency_overrides[get_session_factory] = lambda: session_factory
    return app


@pytest.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
