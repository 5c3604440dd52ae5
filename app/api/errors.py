"""
Translation of domain errors into transport error shapes.

REST responses carry an ``ErrorResponse`` body with a status code;
GraphQL errors carry a ``classification`` extension. Unexpected
failures are logged with their traceback and reported with a generic
message only.
"""
from typing import Dict, Type
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from graphql import GraphQLError

from app.exceptions import (
    DuplicateNameError,
    InvalidStatusError,
    MalformedInputError,
    NotFoundError,
    ProductError,
    ValidationError,
)
from app.schemas.product import ErrorResponse

logger = logging.getLogger(__name__)

INTERNAL_ERROR_MESSAGE = "Internal server error"

HTTP_STATUS: Dict[Type[ProductError], int] = {
    ValidationError: status.HTTP_400_BAD_REQUEST,
    InvalidStatusError: status.HTTP_400_BAD_REQUEST,
    MalformedInputError: status.HTTP_400_BAD_REQUEST,
    DuplicateNameError: status.HTTP_409_CONFLICT,
    NotFoundError: status.HTTP_404_NOT_FOUND,
}

GRAPHQL_CLASSIFICATION: Dict[Type[ProductError], str] = {
    ValidationError: "BAD_REQUEST",
    InvalidStatusError: "BAD_REQUEST",
    MalformedInputError: "BAD_REQUEST",
    DuplicateNameError: "BAD_REQUEST",
    NotFoundError: "NOT_FOUND",
}


def _lookup(table: dict, exc: Exception, default):
    for error_type in type(exc).__mro__:
        if error_type in table:
            return table[error_type]
    return default


def http_status_for(exc: Exception) -> int:
    """HTTP status code for an error; 500 for anything outside the taxonomy."""
    return _lookup(HTTP_STATUS, exc, status.HTTP_500_INTERNAL_SERVER_ERROR)


def graphql_classification_for(exc: Exception) -> str:
    """GraphQL error classification; INTERNAL_ERROR for anything outside the taxonomy."""
    return _lookup(GRAPHQL_CLASSIFICATION, exc, "INTERNAL_ERROR")


def error_response(exc: Exception) -> ErrorResponse:
    """Error body for an error. Unexpected errors never expose their detail."""
    if isinstance(exc, ProductError):
        return ErrorResponse(message=exc.message, field_errors=exc.field_errors)
    return ErrorResponse(message=INTERNAL_ERROR_MESSAGE)


def to_graphql_error(exc: Exception) -> GraphQLError:
    """Build the GraphQL error reported for an exception raised by a resolver."""
    body = error_response(exc)
    extensions = {"classification": graphql_classification_for(exc)}
    if body.field_errors:
        extensions["fieldErrors"] = body.field_errors
    return GraphQLError(body.message, extensions=extensions)


def _json(exc: Exception) -> JSONResponse:
    return JSONResponse(
        status_code=http_status_for(exc),
        content=error_response(exc).model_dump(by_alias=True),
    )


async def handle_product_error(request: Request, exc: ProductError) -> JSONResponse:
    logger.warning(f"{request.method} {request.url.path} failed: {exc.message}")
    return _json(exc)


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Map FastAPI request validation failures onto the domain taxonomy."""
    errors = exc.errors()
    malformed = [
        e for e in errors
        if e.get("type") == "json_invalid" or tuple(e.get("loc", ())) == ("body",)
    ]
    if malformed:
        error = MalformedInputError(f"Invalid JSON format: {malformed[0].get('msg')}")
    else:
        error = ValidationError.from_errors(errors)
    logger.warning(f"{request.method} {request.url.path} rejected: {error.message} {error.field_errors}")
    return _json(error)


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return _json(exc)


def register_exception_handlers(app: FastAPI) -> None:
    """Install the REST error handlers on the application."""
    app.add_exception_handler(ProductError, handle_product_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
