"""
GraphQL API for products.

Resolvers delegate to ``ProductService``; domain errors are reported as
GraphQL errors carrying a ``classification`` extension. Service calls hit
the database, so resolvers run them in the threadpool like FastAPI does
for sync routes.
"""
from contextlib import contextmanager
from datetime import datetime
from decimal import Decimal
from typing import List, Optional
import logging

import strawberry
from fastapi import Depends
from starlette.concurrency import run_in_threadpool
from strawberry.fastapi import GraphQLRouter
from strawberry.types import Info

from app.api.dependencies import get_product_service
from app.api.errors import to_graphql_error
from app.config import get_settings
from app.exceptions import ProductError
from app.models.product import ProductStatus
from app.schemas.product import ProductResponse
from app.services.product_service import ProductService, parse_status

logger = logging.getLogger(__name__)

settings = get_settings()

strawberry.enum(ProductStatus, description="Lifecycle status of a product")


@strawberry.type(name="Product")
class ProductType:
    id: int
    name: str
    description: Optional[str]
    price: Decimal
    stock: int
    status: ProductStatus
    created_at: datetime
    updated_at: Optional[datetime]

    @classmethod
    def from_response(cls, response: ProductResponse) -> "ProductType":
        return cls(
            id=response.id,
            name=response.name,
            description=response.description,
            price=response.price,
            stock=response.stock,
            status=response.status,
            created_at=response.created_at,
            updated_at=response.updated_at,
        )


@strawberry.input(name="ProductInput")
class ProductInput:
    name: str
    price: Decimal
    stock: int
    description: Optional[str] = None
    # Parsed by the service so an unknown token is reported as an invalid status
    status: Optional[str] = None

    def to_request_data(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "stock": self.stock,
            "status": self.status,
        }


@contextmanager
def graphql_errors():
    """Re-raise anything escaping a resolver as a classified GraphQL error."""
    try:
        yield
    except ProductError as e:
        raise to_graphql_error(e) from e
    except Exception as e:
        logger.exception("Unhandled error while resolving GraphQL field")
        raise to_graphql_error(e) from None


def _service(info: Info) -> ProductService:
    return info.context["product_service"]


def _types(responses: List[ProductResponse]) -> List[ProductType]:
    return [ProductType.from_response(r) for r in responses]


@strawberry.type
class Query:
    @strawberry.field(description="Products with the given status (ACTIVE, BLOCKED or DELETED)")
    async def products(self, info: Info, status: str) -> List[ProductType]:
        with graphql_errors():
            product_status = parse_status(status)
            return _types(await run_in_threadpool(_service(info).get_by_status, product_status))

    @strawberry.field(description="Products with status ACTIVE")
    async def active_products(self, info: Info) -> List[ProductType]:
        with graphql_errors():
            return _types(await run_in_threadpool(_service(info).get_all_active))

    @strawberry.field(description="A product by id, or null if it doesn't exist")
    async def product(self, info: Info, id: int) -> Optional[ProductType]:
        with graphql_errors():
            response = await run_in_threadpool(_service(info).get_by_id, id)
            return ProductType.from_response(response) if response is not None else None

    @strawberry.field(description="Products whose name contains the text, ignoring case")
    async def search_products(self, info: Info, name: str) -> List[ProductType]:
        with graphql_errors():
            return _types(await run_in_threadpool(_service(info).search_by_term, name))


@strawberry.type
class Mutation:
    @strawberry.mutation
    async def create_product(self, info: Info, input: ProductInput) -> ProductType:
        with graphql_errors():
            response = await run_in_threadpool(_service(info).create, input.to_request_data())
            return ProductType.from_response(response)

    @strawberry.mutation
    async def update_product(self, info: Info, id: int, input: ProductInput) -> ProductType:
        with graphql_errors():
            response = await run_in_threadpool(_service(info).update, id, input.to_request_data())
            return ProductType.from_response(response)

    @strawberry.mutation
    async def delete_product(self, info: Info, id: int) -> bool:
        with graphql_errors():
            await run_in_threadpool(_service(info).delete, id)
            return True


schema = strawberry.Schema(query=Query, mutation=Mutation)


async def get_context(service: ProductService = Depends(get_product_service)) -> dict:
    return {"product_service": service}


router = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if settings.GRAPHIQL_ENABLED else None,
)
