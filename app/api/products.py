from fastapi import APIRouter, Depends, Query, status
from typing import List, Optional

from app.api.dependencies import get_product_service
from app.exceptions import NotFoundError
from app.services.product_service import ProductService, parse_status
from app.schemas.product import (
    ErrorResponse,
    ProductRequest,
    ProductResponse,
)

router = APIRouter(prefix="/products", tags=["Products"])

NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse, "description": "Product not found"}}
BAD_REQUEST = {status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse, "description": "Invalid input data"}}


@router.post(
    "",
    response_model=ProductResponse,
    status_code=status.HTTP_200_OK,
    summary="Create a new product",
    description="Create a new product. New products are always ACTIVE.",
    responses={
        **BAD_REQUEST,
        status.HTTP_409_CONFLICT: {"model": ErrorResponse, "description": "Name already in use"},
    },
)
def create_product(
    product_data: ProductRequest,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product.

    - **name**: Product name, 2-100 characters (required)
    - **description**: Up to 500 characters (optional)
    - **price**: Product price, must be non-negative (required)
    - **stock**: Initial stock quantity, must be non-negative (required)
    """
    return service.create(product_data)


@router.get(
    "",
    response_model=List[ProductResponse],
    summary="List products",
    description="List every product, or only those with the given status.",
    responses=BAD_REQUEST,
)
def list_products(
    status_filter: Optional[str] = Query(None, alias="status", description="ACTIVE, BLOCKED or DELETED"),
    service: ProductService = Depends(get_product_service)
):
    """List products, optionally filtered by status."""
    if status_filter is None:
        return service.get_all()
    return service.get_by_status(parse_status(status_filter))


@router.get(
    "/active",
    response_model=List[ProductResponse],
    summary="Get all active products",
    description="Retrieves products with ACTIVE status."
)
def get_active_products(service: ProductService = Depends(get_product_service)):
    return service.get_all_active()


@router.get(
    "/search",
    response_model=List[ProductResponse],
    summary="Search products by term",
    description="Searches products whose name contains the term (case-insensitive).",
    responses=BAD_REQUEST,
)
def search_products(
    term: str = Query(..., description="Text to look for in product names"),
    service: ProductService = Depends(get_product_service)
):
    return service.search_by_term(term)


@router.get(
    "/name/{name}",
    response_model=List[ProductResponse],
    summary="Get products by name",
    description="Retrieves products that match the exact name."
)
def get_products_by_name(
    name: str,
    service: ProductService = Depends(get_product_service)
):
    return service.get_by_name(name)


@router.get(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Get product by ID",
    description="Get a product by its ID, whatever its status.",
    responses=NOT_FOUND,
)
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Get a product by ID."""
    product = service.get_by_id(product_id)

    if product is None:
        raise NotFoundError(f"Product with ID {product_id} not found")

    return product


@router.put(
    "/{product_id}",
    response_model=ProductResponse,
    summary="Update a product",
    description="Replace the product's fields, including its status.",
    responses={**BAD_REQUEST, **NOT_FOUND},
)
def update_product(
    product_id: int,
    product_data: ProductRequest,
    service: ProductService = Depends(get_product_service)
):
    """
    Update a product.

    All fields are replaced. An unknown status is rejected with 400
    before the product is looked up.
    """
    return service.update(product_id, product_data)


@router.delete(
    "/{product_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a product",
    description="Soft deletes a product by setting its status to DELETED.",
    responses=NOT_FOUND,
)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Delete a product. The record stays retrievable with status DELETED."""
    service.delete(product_id)
    return None
