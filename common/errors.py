"""
Catalog error types.

Each error is a werkzeug HTTPException so controllers can raise it directly
and the application error handler renders it with the matching status code.
"""
from werkzeug.exceptions import (
    BadRequest,
    Conflict,
    InternalServerError,
    NotFound,
    UnprocessableEntity,
)


class ValidationFailed(UnprocessableEntity):
    """A required field is missing or malformed, or the data is inconsistent."""

    def __init__(self, description=None, errors=None):
        super().__init__(description or "Validation failed")
        self.errors = errors or {}


class CategoryMismatch(ValidationFailed):
    """Selected subcategories do not all belong to the selected category."""

    def __init__(self, description=None):
        description = description or "All subcategories must belong to the selected category."
        super().__init__(description, errors={"subcategory_id": [description]})


class ProductExists(Conflict):
    def __init__(self, name=None):
        description = f"Product '{name}' already exists." if name else "Product already exists."
        super().__init__(description)


class ProductNotFound(NotFound):
    def __init__(self, product_id=None):
        description = f"Product with ID {product_id} not found." if product_id is not None else "Product not found."
        super().__init__(description)


class InvalidFormat(BadRequest):
    """Attachment payload is not a data URL of the expected media type."""


class StorageFailure(InternalServerError):
    """A stored file could not be written or removed."""
