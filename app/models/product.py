from sqlalchemy import Column, Integer, String, Numeric, DateTime, Enum, CheckConstraint
import enum

from app.database import Base


class ProductStatus(str, enum.Enum):
    """Lifecycle status of a product."""
    ACTIVE = "ACTIVE"
    BLOCKED = "BLOCKED"
    DELETED = "DELETED"


class Product(Base):
    """
    Product model representing items in the catalogue.

    Products are never physically removed: deletion sets the status
    to DELETED and keeps the row.

    Attributes:
        id: Unique identifier, assigned on insert and never reused
        name: Product name (2-100 characters)
        description: Optional free text (up to 500 characters)
        price: Product price (must be non-negative)
        stock: Available quantity (must be non-negative)
        status: ACTIVE, BLOCKED or DELETED
        created_at: Timestamp set once when the product is first saved
        updated_at: Timestamp of the last modification, empty until then
    """
    __tablename__ = "products"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, index=True)
    description = Column(String(500), nullable=True)
    price = Column(Numeric(12, 2), nullable=False)
    stock = Column(Integer, nullable=False, default=0)
    status = Column(
        Enum(ProductStatus, name="product_status"),
        nullable=False,
        default=ProductStatus.ACTIVE,
        index=True,
    )
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    # Database-level constraints to ensure data integrity
    __table_args__ = (
        CheckConstraint('price >= 0', name='check_price_non_negative'),
        CheckConstraint('stock >= 0', name='check_stock_non_negative'),
    )

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', status='{self.status}')>"
