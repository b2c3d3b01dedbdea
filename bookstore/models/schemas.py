"""Pydantic schemas for form validation.

Submitted HTML forms arrive as strings; these models coerce and validate
them. form_errors() turns a ValidationError into the per-field messages the
templates show next to each input.
"""

from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from core.models.base import MAX_ID


BookId = Annotated[int, Field(ge=1, le=MAX_ID)]


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------

class BookForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    price: float = Field(..., ge=0, allow_inf_nan=False)


class OrderForm(BaseModel):
    books: list[BookId] = Field(default_factory=list)

    def unique_book_ids(self) -> set[int]:
        return set(self.books)


class SearchForm(BaseModel):
    """Query string of the price search. A missing price means 0."""

    price: float = Field(0, allow_inf_nan=False)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_FRIENDLY_MESSAGES = {
    "missing": "This value should not be blank.",
    "string_too_short": "This value should not be blank.",
    "float_parsing": "Please enter a number.",
    "finite_number": "Please enter a finite number.",
}

# Fields whose every error reads the same, whatever pydantic reports
_FIELD_MESSAGES = {
    "books": "Please select a valid book.",
}


def form_errors(exc: ValidationError) -> dict[str, str]:
    """Map a ValidationError to ``{field: message}``, first error per field."""
    errors: dict[str, str] = {}
    for error in exc.errors():
        field_name: Optional[str] = str(error["loc"][0]) if error["loc"] else None
        if field_name is None or field_name in errors:
            continue
        errors[field_name] = _FIELD_MESSAGES.get(
            field_name, _FRIENDLY_MESSAGES.get(error["type"], error["msg"])
        )
    return errors
