"""Storage port for products and its SQLAlchemy implementation."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.product import Product, ProductStatus

logger = logging.getLogger(__name__)


def stamp_lifecycle(product: Product, now: Optional[datetime] = None) -> Product:
    """
    Apply the entity lifecycle timestamps before a save.

    A product without an id is being inserted and gets ``created_at``;
    any other save is a modification and gets ``updated_at``.
    """
    now = now or datetime.now()
    if product.id is None:
        product.created_at = now
        product.updated_at = None
    else:
        product.updated_at = now
    return product


class ProductRepository(ABC):
    """Persistence operations the product service relies on."""

    @abstractmethod
    def find_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        """Return the product with this id, or None.

        ``for_update`` locks the row until the surrounding transaction ends,
        where the backend supports it.
        """

    @abstractmethod
    def find_by_name(self, name: str) -> List[Product]:
        """Return products whose name matches exactly."""

    @abstractmethod
    def find_by_name_containing_ignore_case(self, term: str) -> List[Product]:
        """Return products whose name contains ``term``, ignoring case."""

    @abstractmethod
    def find_all_by_status(self, status: ProductStatus) -> List[Product]:
        """Return products with the given status."""

    @abstractmethod
    def find_all(self) -> List[Product]:
        """Return every stored product, whatever its status."""

    @abstractmethod
    def save(self, product: Product) -> Product:
        """Insert the product if it has no id, update it otherwise."""


class SqlAlchemyProductRepository(ProductRepository):
    """
    Product repository backed by a SQLAlchemy session.

    Reads run inside the session's open transaction and ``save`` commits
    it, so a check followed by a write (duplicate name, existence) lands
    in a single database transaction.
    """

    def __init__(self, db: Session):
        self.db = db

    def find_by_id(self, product_id: int, for_update: bool = False) -> Optional[Product]:
        query = self.db.query(Product).filter(Product.id == product_id)
        if for_update:
            query = query.with_for_update()
        return query.first()

    def find_by_name(self, name: str) -> List[Product]:
        return self.db.query(Product).filter(Product.name == name).order_by(Product.id).all()

    def find_by_name_containing_ignore_case(self, term: str) -> List[Product]:
        return (
            self.db.query(Product)
            .filter(Product.name.icontains(term, autoescape=True))
            .order_by(Product.id)
            .all()
        )

    def find_all_by_status(self, status: ProductStatus) -> List[Product]:
        return self.db.query(Product).filter(Product.status == status).order_by(Product.id).all()

    def find_all(self) -> List[Product]:
        return self.db.query(Product).order_by(Product.id).all()

    def save(self, product: Product) -> Product:
        stamp_lifecycle(product)
        try:
            self.db.add(product)
            self.db.commit()
            self.db.refresh(product)
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error(f"Error saving product '{product.name}': {e}")
            raise
        return product
