from typing import Any, List, Mapping, Optional, Union
import logging

from pydantic import ValidationError as PydanticValidationError

from app.exceptions import (
    DuplicateNameError,
    InvalidStatusError,
    NotFoundError,
    ValidationError,
)
from app.models.product import Product, ProductStatus
from app.repositories.product_repository import ProductRepository
from app.schemas.product import ProductRequest, ProductResponse

logger = logging.getLogger(__name__)

RequestData = Union[ProductRequest, Mapping[str, Any]]


def parse_status(value: Any) -> ProductStatus:
    """
    Parse a status token into a ProductStatus.

    Raises:
        InvalidStatusError: If the token is missing or unknown
    """
    if isinstance(value, ProductStatus):
        return value
    try:
        return ProductStatus(value)
    except (ValueError, TypeError):
        raise InvalidStatusError() from None


def to_entity(request: ProductRequest) -> Product:
    """Build a new, unsaved product from a request. New products are always ACTIVE."""
    return Product(
        name=request.name,
        description=request.description,
        price=request.price,
        stock=request.stock,
        status=ProductStatus.ACTIVE,
    )


def to_response(product: Product) -> ProductResponse:
    """Project a product onto its response schema."""
    return ProductResponse(
        id=product.id,
        name=product.name,
        description=product.description,
        price=product.price,
        stock=product.stock,
        status=product.status,
        created_at=product.created_at,
        updated_at=product.updated_at,
    )


class ProductService:
    """
    Service class for Product operations.

    This service handles:
    - Listing products (all, active only, by status)
    - Looking products up by id, exact name or search term
    - Creating products with a unique name
    - Updating products, including their status
    - Soft deleting products (status DELETED, row kept)

    Business rule violations are raised as ``app.exceptions`` errors;
    rendering them is left to the caller.
    """

    def __init__(self, repository: ProductRepository):
        self.repository = repository

    def get_all(self) -> List[ProductResponse]:
        """Get every product, whatever its status."""
        logger.info("Fetching all products")
        products = [to_response(p) for p in self.repository.find_all()]
        logger.info(f"Retrieved {len(products)} products")
        return products

    def get_all_active(self) -> List[ProductResponse]:
        """Get products with status ACTIVE."""
        logger.info("Fetching active products")
        products = [to_response(p) for p in self.repository.find_all_by_status(ProductStatus.ACTIVE)]
        logger.info(f"Retrieved {len(products)} active products")
        return products

    def get_by_status(self, status: ProductStatus) -> List[ProductResponse]:
        """
        Get products with exactly the given status.

        Raises:
            InvalidStatusError: If status is missing or not a known value
        """
        status = parse_status(status)
        logger.info(f"Fetching products with status {status.value}")
        products = [to_response(p) for p in self.repository.find_all_by_status(status)]
        logger.info(f"Retrieved {len(products)} products with status {status.value}")
        return products

    def get_by_id(self, product_id: int) -> Optional[ProductResponse]:
        """
        Get a product by ID.

        Returns:
            The product, or None if it doesn't exist
        """
        product = self.repository.find_by_id(product_id)
        logger.info(f"Lookup of product #{product_id}, found: {product is not None}")
        return to_response(product) if product is not None else None

    def get_by_name(self, name: str) -> List[ProductResponse]:
        """Get products whose name matches exactly."""
        products = [to_response(p) for p in self.repository.find_by_name(name)]
        logger.info(f"Retrieved {len(products)} products named '{name}'")
        return products

    def search_by_term(self, term: str) -> List[ProductResponse]:
        """Get products whose name contains the term, ignoring case."""
        products = [to_response(p) for p in self.repository.find_by_name_containing_ignore_case(term)]
        logger.info(f"Search for '{term}' matched {len(products)} products")
        return products

    def create(self, request: RequestData) -> ProductResponse:
        """
        Create a new product.

        The requested status is ignored: new products are always ACTIVE.
        The name check looks at every stored product, deleted ones included.

        Raises:
            ValidationError: If a field violates its constraints
            DuplicateNameError: If a product with the same name exists
        """
        product_request = self._validate(request, keep_status=False)
        logger.info(f"Creating product '{product_request.name}'")

        if self.repository.find_by_name(product_request.name):
            logger.warning(f"Product with name '{product_request.name}' already exists")
            raise DuplicateNameError()

        product = self.repository.save(to_entity(product_request))
        logger.info(f"Created product #{product.id}")
        return to_response(product)

    def update(self, product_id: int, request: RequestData) -> ProductResponse:
        """
        Update an existing product.

        Name, description, price, stock and status are overwritten with
        the request values. A request without status keeps the current one.

        Raises:
            ValidationError: If a field violates its constraints
            InvalidStatusError: If the status token is unknown (checked before the lookup)
            NotFoundError: If the product doesn't exist
        """
        product_request = self._validate(request)
        status = None
        if product_request.status is not None:
            status = parse_status(product_request.status)

        logger.info(f"Updating product #{product_id}")
        product = self.repository.find_by_id(product_id, for_update=True)
        if product is None:
            logger.error(f"Product #{product_id} not found for update")
            raise NotFoundError()

        product.name = product_request.name
        product.description = product_request.description
        product.price = product_request.price
        product.stock = product_request.stock
        if status is not None:
            product.status = status

        product = self.repository.save(product)
        logger.info(f"Updated product #{product_id}")
        return to_response(product)

    def delete(self, product_id: int) -> None:
        """
        Soft delete a product by setting its status to DELETED.

        Raises:
            NotFoundError: If the product doesn't exist
        """
        logger.info(f"Deleting product #{product_id}")
        product = self.repository.find_by_id(product_id, for_update=True)
        if product is None:
            logger.error(f"Product #{product_id} not found for delete")
            raise NotFoundError()

        product.status = ProductStatus.DELETED
        self.repository.save(product)
        logger.info(f"Deleted product #{product_id}")

    def _validate(self, request: RequestData, keep_status: bool = True) -> ProductRequest:
        """Validate a request model or mapping against ProductRequest."""
        data = request.model_dump() if isinstance(request, ProductRequest) else dict(request)
        if not keep_status:
            data.pop("status", None)
        try:
            return ProductRequest.model_validate(data)
        except PydanticValidationError as e:
            error = ValidationError.from_errors(e.errors())
            logger.warning(f"Invalid product request: {error.field_errors}")
            raise error from None
