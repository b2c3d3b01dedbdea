"""Test the bookstore pages over HTTP."""
import pytest
from bookstore.unit_of_work import UnitOfWork


# ---------------------------------------------------------------------------
# Books
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_list_books(client, books):
    response = await client.get("/books")
    assert response.status_code == 200
    for name in ("Free Pamphlet", "Dune", "SICP"):
        assert name in response.text
    assert "$45.00" in response.text


@pytest.mark.asyncio
async def test_list_books_empty(client):
    response = await client.get("/books")
    assert response.status_code == 200
    assert "No books found." in response.text


@pytest.mark.asyncio
async def test_show_book(client, books):
    response = await client.get(f"/books/{books['Dune'].id}")
    assert response.status_code == 200
    assert "Dune" in response.text
    assert "$9.99" in response.text


@pytest.mark.asyncio
async def test_show_missing_book_is_404(client, books):
    response = await client.get("/books/9999")
    assert response.status_code == 404
    assert "Book not found" in response.text


@pytest.mark.asyncio
async def test_oversized_book_id_is_404(client, books):
    huge = "9" * 25
    for path in (f"/books/{huge}", f"/books/{huge}/edit", f"/books/{huge}/delete"):
        response = await client.get(path)
        assert response.status_code == 404
        assert "Book not found" in response.text


@pytest.mark.asyncio
async def test_non_numeric_book_id_is_404(client):
    response = await client.get("/books/not-a-number")
    assert response.status_code == 404
    assert "Page not found" in response.text


@pytest.mark.asyncio
async def test_add_book_form(client):
    response = await client.get("/books/add")
    assert response.status_code == 200
    assert 'name="name"' in response.text
    assert 'name="price"' in response.text


@pytest.mark.asyncio
async def test_add_book(client, session_factory):
    response = await client.post("/books/add", data={"name": "  Emma  ", "price": "12.5"})
    assert response.status_code == 303
    assert response.headers["location"].endswith("/books")

    async with UnitOfWork(session_factory) as uow:
        stored = await uow.books.find_all()
    assert [(b.name, b.price) for b in stored] == [("Emma", 12.5)]

    page = await client.get("/books")
    assert "Emma" in page.text
    assert "Book added successfully" in page.text

    # flash messages are shown once
    again = await client.get("/books")
    assert "Book added successfully" not in again.text


@pytest.mark.asyncio
async def test_add_book_invalid(client, session_factory):
    response = await client.post("/books/add", data={"name": "   ", "price": "abc"})
    assert response.status_code == 422
    assert "This value should not be blank." in response.text
    assert "Please enter a number." in response.text

    async with UnitOfWork(session_factory) as uow:
        assert await uow.books.find_all() == []


@pytest.mark.asyncio
async def test_add_book_negative_price(client):
    response = await client.post("/books/add", data={"name": "Emma", "price": "-1"})
    assert response.status_code == 422
    assert 'value="Emma"' in response.text


@pytest.mark.asyncio
async def test_add_book_infinite_price(client, session_factory):
    response = await client.post("/books/add", data={"name": "Emma", "price": "inf"})
    assert response.status_code == 422
    assert "Please enter a finite number." in response.text

    async with UnitOfWork(session_factory) as uow:
        assert await uow.books.find_all() == []


@pytest.mark.asyncio
async def test_edit_book_form_prefilled(client, books):
    response = await client.get(f"/books/{books['SICP'].id}/edit")
    assert response.status_code == 200
    assert 'value="SICP"' in response.text


@pytest.mark.asyncio
async def test_edit_book(client, books, session_factory):
    book_id = books["Dune"].id
    response = await client.post(
        f"/books/{book_id}/edit", data={"name": "Dune Messiah", "price": "11"}
    )
    assert response.status_code == 303

    async with UnitOfWork(session_factory) as uow:
        book = await uow.books.get(book_id)
    assert book.name == "Dune Messiah"
    assert book.price == 11.0


@pytest.mark.asyncio
async def test_edit_book_invalid_keeps_record(client, books, session_factory):
    book_id = books["Dune"].id
    response = await client.post(f"/books/{book_id}/edit", data={"name": "", "price": "11"})
    assert response.status_code == 422

    async with UnitOfWork(session_factory) as uow:
        book = await uow.books.get(book_id)
    assert book.name == "Dune"


@pytest.mark.asyncio
async def test_edit_missing_book_is_404(client):
    response = await client.post("/books/9999/edit", data={"name": "X", "price": "1"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_book(client, books):
    response = await client.get(f"/books/{books['Dune'].id}/delete")
    assert response.status_code == 303
    assert response.headers["location"].endswith("/books")

    page = await client.get("/books")
    assert "Dune" not in page.text
    assert "Book deleted" in page.text


@pytest.mark.asyncio
async def test_delete_missing_book_is_404(client):
    response = await client.get("/books/9999/delete")
    assert response.status_code == 404


# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_search_defaults_to_positive_prices(client, books):
    response = await client.get("/search/books")
    assert response.status_code == 200
    assert "Dune" in response.text
    assert "SICP" in response.text
    assert "Free Pamphlet" not in response.text


@pytest.mark.asyncio
async def test_search_by_price(client, books):
    response = await client.get("/search/books", params={"price": "9.99"})
    assert response.status_code == 200
    assert "SICP" in response.text
    assert "Dune" not in response.text


@pytest.mark.asyncio
async def test_search_blank_price_means_zero(client, books):
    response = await client.get("/search/books", params={"price": ""})
    assert response.status_code == 200
    assert "Dune" in response.text
    assert "Free Pamphlet" not in response.text


@pytest.mark.asyncio
async def test_search_invalid_price_renders_form_error(client, books):
    for value in ("abc", "nan"):
        response = await client.get("/search/books", params={"price": value})
        assert response.status_code == 422
        assert response.headers["content-type"].startswith("text/html")
        assert "class=\"error\"" in response.text
        assert "Dune" not in response.text


# ---------------------------------------------------------------------------
# Orders
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_order_form_lists_books(client, books):
    response = await client.get("/order/create")
    assert response.status_code == 200
    for book in books.values():
        assert f'value="{book.id}"' in response.text
        assert book.name in response.text


@pytest.mark.asyncio
async def test_create_order(client, books, session_factory):
    dune, sicp = books["Dune"], books["SICP"]
    response = await client.post(
        "/order/create", data={"books": [str(sicp.id), str(dune.id), str(sicp.id)]}
    )
    assert response.status_code == 303
    assert response.headers["location"].endswith("/orders")

    async with UnitOfWork(session_factory) as uow:
        orders = await uow.orders.find_all()
    assert len(orders) == 1
    assert orders[0].book_ids == {dune.id, sicp.id}

    page = await client.get("/orders")
    assert "Order created successfully" in page.text
    assert "Dune" in page.text
    assert "SICP" in page.text
    assert "Free Pamphlet" not in page.text


@pytest.mark.asyncio
async def test_create_order_unknown_book(client, books, session_factory):
    response = await client.post("/order/create", data={"books": ["9999"]})
    assert response.status_code == 422
    assert "Please select a valid book." in response.text

    async with UnitOfWork(session_factory) as uow:
        assert await uow.orders.find_all() == []


@pytest.mark.asyncio
async def test_create_order_garbage_book_id(client, books):
    response = await client.post("/order/create", data={"books": ["abc"]})
    assert response.status_code == 422
    assert "Please select a valid book." in response.text


@pytest.mark.asyncio
async def test_create_order_oversized_book_id(client, books, session_factory):
    response = await client.post("/order/create", data={"books": ["9" * 25]})
    assert response.status_code == 422
    assert "Please select a valid book." in response.text

    async with UnitOfWork(session_factory) as uow:
        assert await uow.orders.find_all() == []


@pytest.mark.asyncio
async def test_list_orders_after_book_deleted(client, books):
    dune, sicp = books["Dune"], books["SICP"]
    await client.post("/order/create", data={"books": [str(dune.id), str(sicp.id)]})
    await client.get(f"/books/{dune.id}/delete")

    page = await client.get("/orders")
    assert page.status_code == 200
    assert "SICP" in page.text
    assert "Dune" not in page.text


@pytest.mark.asyncio
async def test_list_orders_empty(client):
    response = await client.get("/orders")
    assert response.status_code == 200
    assert "No orders yet." in response.text


# ---------------------------------------------------------------------------
# Health & root
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


@pytest.mark.asyncio
async def test_root_redirects_to_books(client):
    response = await client.get("/")
    assert response.status_code == 303
    assert response.headers["location"].endswith("/books")


@pytest.mark.asyncio
async def test_request_id_header(client):
    response = await client.get("/health", headers={"X-Request-ID": "abc123"})
    assert response.headers["X-Request-ID"] == "abc123"
