"""Domain errors raised by the product service.

The service never decides how a failure is rendered; the API layer
translates each error kind into an HTTP status or a GraphQL
classification (see ``app.api.errors``).
"""
from typing import Dict, Iterable, Mapping, Optional, Any


class ProductError(Exception):
    """Base class for product domain errors."""

    default_message = "Product operation failed"

    def __init__(self, message: Optional[str] = None, field_errors: Optional[Mapping[str, str]] = None):
        self.message = message or self.default_message
        self.field_errors: Dict[str, str] = dict(field_errors or {})
        super().__init__(self.message)


class ValidationError(ProductError):
    """One or more request fields failed their declared constraints."""

    default_message = "Validation failed"

    @classmethod
    def from_errors(cls, errors: Iterable[Mapping[str, Any]]) -> "ValidationError":
        """
        Build a validation error from pydantic-style error dicts.

        Each error contributes ``{field: msg}``, where the field is the
        error location without its request section (body, query, path).
        Only the first message per field is kept.
        """
        field_errors: Dict[str, str] = {}
        for error in errors:
            parts = [str(p) for p in error.get("loc", ()) if p not in ("body", "query", "path")]
            field = ".".join(parts) or "request"
            field_errors.setdefault(field, error.get("msg", "Invalid value"))
        return cls(field_errors=field_errors)


class InvalidStatusError(ProductError):
    """A status token did not match any known product status."""

    default_message = "Invalid ProductStatus value"


class DuplicateNameError(ProductError):
    """A product with the requested name already exists."""

    default_message = "Product with same name already exists"


class NotFoundError(ProductError):
    """The targeted product does not exist."""

    default_message = "Product not found"


class MalformedInputError(ProductError):
    """The request body could not be parsed."""

    default_message = "Invalid JSON format"
