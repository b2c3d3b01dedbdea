"""Bookstore router: server-rendered pages for books and orders.

Every handler is a plain function: it receives the request and a unit of
work, reads or mutates through the unit of work's repositories, commits
explicitly, and returns a rendered page or a redirect.

- Books: list, show, add, edit, delete, price search
- Orders: list, create
"""

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Form, HTTPException, Query, Request
from fastapi.responses import RedirectResponse
from pydantic import ValidationError
from starlette.responses import Response

from bookstore.config import config
from bookstore.models.db_models import Book, Order
from bookstore.models.schemas import BookForm, OrderForm, SearchForm, form_errors
from bookstore.unit_of_work import UnitOfWork, get_unit_of_work
from core.engine.flash import flash
from core.engine.template_engine import TemplateEngine
from core.observability.logging_setup import get_logger

router = APIRouter()
templates = TemplateEngine(
    Path(__file__).parent / "templates",
    currency=config.catalog.currency,
)
logger = get_logger(__name__)


def _redirect(request: Request, route_name: str, **path_params) -> RedirectResponse:
    return RedirectResponse(
        url=str(request.url_for(route_name, **path_params)),
        status_code=303,
    )


async def _get_book_or_404(uow: UnitOfWork, book_id: int) -> Book:
    book = await uow.books.get(book_id)
    if book is None:
        raise HTTPException(status_code=404, detail="Book not found")
    return book


# ============================================================================
# Book Endpoints
# ============================================================================

@router.get("/books", name="book_list")
async def list_books(request: Request, uow: UnitOfWork = Depends(get_unit_of_work)):
    """List every book in the catalog."""
    books = await uow.books.find_all()
    return templates.render(request, "books/index.html", {"books": books})


@router.get("/books/add", name="add_book")
async def add_book_form(request: Request):
    return templates.render(
        request,
        "books/form.html",
        {"title": "Add book", "values": {}, "errors": {}},
    )


@router.post("/books/add")
async def add_book(
    request: Request,
    name: str = Form(""),
    price: str = Form(""),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    """Create a book from the submitted form."""
    values = {"name": name, "price": price}
    try:
        data = BookForm.model_validate(values)
    except ValidationError as exc:
        return templates.render(
            request,
            "books/form.html",
            {"title": "Add book", "values": values, "errors": form_errors(exc)},
            status_code=422,
        )

    book = await uow.books.add(Book(**data.model_dump()))
    await uow.commit()
    logger.info("book.created", book_id=book.id, name=book.name)

    flash(request, "Book added successfully", "success")
    return _redirect(request, "book_list")


@router.get("/books/{book_id:int}", name="show_book")
async def show_book(
    request: Request,
    book_id: int,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Show a single book."""
    book = await _get_book_or_404(uow, book_id)
    return templates.render(request, "books/show.html", {"book": book})


@router.get("/books/{book_id:int}/edit", name="edit_book")
async def edit_book_form(
    request: Request,
    book_id: int,
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    book = await _get_book_or_404(uow, book_id)
    return templates.render(
        request,
        "books/form.html",
        {
            "title": f"Edit {book.name}",
            "book": book,
            "values": {"name": book.name, "price": book.price},
            "errors": {},
        },
    )


@router.post("/books/{book_id:int}/edit")
async def edit_book(
    request: Request,
    book_id: int,
    name: str = Form(""),
    price: str = Form(""),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    """Apply the submitted changes to a book."""
    book = await _get_book_or_404(uow, book_id)
    values = {"name": name, "price": price}
    try:
        data = BookForm.model_validate(values)
    except ValidationError as exc:
        return templates.render(
            request,
            "books/form.html",
            {
                "title": f"Edit {book.name}",
                "book": book,
                "values": values,
                "errors": form_errors(exc),
            },
            status_code=422,
        )

    book.name = data.name
    book.price = data.price
    await uow.commit()
    logger.info("book.updated", book_id=book.id)

    flash(request, "Book updated successfully", "success")
    return _redirect(request, "book_list")


@router.get("/books/{book_id:int}/delete", name="delete_book")
async def delete_book(
    request: Request,
    book_id: int,
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    """Delete a book; orders that contained it no longer list it."""
    book = await _get_book_or_404(uow, book_id)
    await uow.books.delete(book)
    await uow.commit()
    logger.info("book.deleted", book_id=book_id)

    flash(request, "Book deleted", "success")
    return _redirect(request, "book_list")


# ============================================================================
# Search Endpoint
# ============================================================================

@router.get("/search/books", name="search_books")
async def search_books(
    request: Request,
    price: Optional[str] = Query(None),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """Books priced strictly above ``price``; an absent or blank filter means 0."""
    raw = (price or "").strip()
    try:
        search = SearchForm(price=raw) if raw else SearchForm()
    except ValidationError as exc:
        return templates.render(
            request,
            "books/search.html",
            {"books": [], "threshold": None, "value": raw, "errors": form_errors(exc)},
            status_code=422,
        )

    books = await uow.books.find_by_price_greater_than(search.price)
    return templates.render(
        request,
        "books/search.html",
        {"books": books, "threshold": search.price, "value": search.price, "errors": {}},
    )


# ============================================================================
# Order Endpoints
# ============================================================================

@router.get("/orders", name="order_list")
async def list_orders(request: Request, uow: UnitOfWork = Depends(get_unit_of_work)):
    """List every order with the books it contains."""
    orders = await uow.orders.find_all()
    book_ids = set().union(*(order.book_ids for order in orders))
    books = await uow.books.get_many(book_ids)
    return templates.render(
        request,
        "order/index.html",
        {"orders": orders, "books": books},
    )


@router.get("/order/create", name="create_order")
async def create_order_form(request: Request, uow: UnitOfWork = Depends(get_unit_of_work)):
    books = await uow.books.find_all()
    return templates.render(
        request,
        "order/create.html",
        {"books": books, "selected": set(), "errors": {}},
    )


@router.post("/order/create")
async def create_order(
    request: Request,
    books: list[str] = Form(default=[]),
    uow: UnitOfWork = Depends(get_unit_of_work),
) -> Response:
    """Create an order from the selected books."""
    errors: dict[str, str] = {}
    selected: set[int] = set()
    try:
        data = OrderForm.model_validate({"books": books})
    except ValidationError as exc:
        errors = form_errors(exc)
    else:
        selected = data.unique_book_ids()
        found = await uow.books.get_many(selected)
        if len(found) != len(selected):
            errors["books"] = "Please select a valid book."

    if errors:
        return templates.render(
            request,
            "order/create.html",
            {
                "books": await uow.books.find_all(),
                "selected": selected,
                "errors": errors,
            },
            status_code=422,
        )

    order = Order(books=sorted(selected))
    await uow.orders.add(order)
    await uow.commit()
    logger.info("order.created", order_id=order.id, book_ids=sorted(order.book_ids))

    flash(request, "Order created successfully", "success")
    return _redirect(request, "order_list")
