"""Bookstore: book catalog and order management.

- SQLAlchemy models: Book, Order and the order_books association
- Async repositories with the price search and order membership queries
- Unit of work scoping one transaction to one request
- FastAPI router rendering server-side pages
- Dataclass configuration
"""
