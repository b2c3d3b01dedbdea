"""Bookstore: FastAPI entry point.

Registers middleware, routers, error pages and lifecycle hooks.

Run with::

    uvicorn api.main:app --reload
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import RedirectResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from api.middleware import RequestContextMiddleware
from bookstore.config import BookstoreConfig, config as default_config
from bookstore.router import router as bookstore_router, templates
from core.database import close_db, init_db
from core.observability.logging_setup import configure_logging

VERSION = "0.1.0"


def create_app(config: BookstoreConfig = default_config) -> FastAPI:
    """Build the application for ``config``."""

    # -----------------------------------------------------------------------
    # Lifespan
    # -----------------------------------------------------------------------

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application startup/shutdown hooks."""
        logger = configure_logging(config.server.log_level, config.server.json_logs)
        if config.server.create_schema:
            await init_db()
        logger.info("bookstore.started", version=VERSION)
        yield
        logger.info("bookstore.stopping")
        await close_db()

    app = FastAPI(
        title="Bookstore",
        description="Book catalog and order management",
        version=VERSION,
        lifespan=lifespan,
    )

    # Flash messages live in the signed session cookie
    app.add_middleware(SessionMiddleware, secret_key=config.server.secret_key)
    app.add_middleware(RequestContextMiddleware)

    # -----------------------------------------------------------------------
    # Error pages
    # -----------------------------------------------------------------------

    @app.exception_handler(StarletteHTTPException)
    async def not_found_page(request: Request, exc: StarletteHTTPException):
        if exc.status_code != 404:
            return await http_exception_handler(request, exc)
        detail = exc.detail if exc.detail != "Not Found" else "Page not found"
        return templates.render(
            request,
            "error.html",
            {"status_code": 404, "detail": detail},
            status_code=404,
        )

    # -----------------------------------------------------------------------
    # Routers
    # -----------------------------------------------------------------------

    app.include_router(bookstore_router, tags=["Bookstore"])

    # -----------------------------------------------------------------------
    # Health & root
    # -----------------------------------------------------------------------

    @app.get("/health")
    async def health():
        return {"status": "healthy", "version": VERSION}

    @app.get("/")
    async def root(request: Request):
        return RedirectResponse(url=str(request.url_for("book_list")), status_code=303)

    return app


app = create_app()
