from fastapi import Depends
from sqlalchemy.orm import Session

from app.database import get_db
from app.repositories.product_repository import SqlAlchemyProductRepository
from app.services.product_service import ProductService


def get_product_service(db: Session = Depends(get_db)) -> ProductService:
    """Dependency providing a product service bound to the request's session."""
    return ProductService(SqlAlchemyProductRepository(db))
