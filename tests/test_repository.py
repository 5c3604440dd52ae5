"""Tests for the SQLAlchemy product repository."""
from datetime import datetime
from decimal import Decimal

from app.models.product import Product, ProductStatus
from app.repositories.product_repository import SqlAlchemyProductRepository, stamp_lifecycle


def make(name, status=ProductStatus.ACTIVE):
    return Product(name=name, price=Decimal("2.50"), stock=3, status=status)


def test_save_insert_stamps_created_at(db_session):
    """Test inserting assigns an id and created_at, leaving updated_at empty."""
    repo = SqlAlchemyProductRepository(db_session)

    product = repo.save(make("Lamp"))

    assert product.id is not None
    assert product.created_at is not None
    assert product.updated_at is None


def test_save_update_stamps_updated_at(db_session):
    """Test saving an existing product sets updated_at and keeps created_at."""
    repo = SqlAlchemyProductRepository(db_session)
    product = repo.save(make("Lamp"))
    created_at = product.created_at

    product.stock = 10
    product = repo.save(product)

    assert product.created_at == created_at
    assert product.updated_at >= created_at
    assert repo.find_by_id(product.id).stock == 10


def test_ids_are_not_reused(db_session):
    """Test each insert gets a fresh id."""
    repo = SqlAlchemyProductRepository(db_session)

    ids = [repo.save(make(f"Lamp {i}")).id for i in range(3)]

    assert len(set(ids)) == 3


def test_find_by_id_missing(db_session):
    """Test looking up an unknown id."""
    repo = SqlAlchemyProductRepository(db_session)

    assert repo.find_by_id(123) is None
    assert repo.find_by_id(123, for_update=True) is None


def test_find_by_name_is_exact(db_session):
    """Test exact name matching."""
    repo = SqlAlchemyProductRepository(db_session)
    repo.save(make("Lamp"))
    repo.save(make("Lamp Shade"))

    assert [p.name for p in repo.find_by_name("Lamp")] == ["Lamp"]
    assert repo.find_by_name("lamp") == []


def test_find_by_name_containing_ignore_case(db_session):
    """Test substring matching ignores case."""
    repo = SqlAlchemyProductRepository(db_session)
    repo.save(make("xAbCy"))
    repo.save(make("Other"))

    assert [p.name for p in repo.find_by_name_containing_ignore_case("ABC")] == ["xAbCy"]


def test_find_all_by_status(db_session):
    """Test filtering by status and listing everything."""
    repo = SqlAlchemyProductRepository(db_session)
    repo.save(make("Lamp"))
    repo.save(make("Chair", ProductStatus.BLOCKED))
    repo.save(make("Desk", ProductStatus.DELETED))

    assert [p.name for p in repo.find_all_by_status(ProductStatus.BLOCKED)] == ["Chair"]
    assert [p.name for p in repo.find_all()] == ["Lamp", "Chair", "Desk"]


def test_price_is_exact(db_session):
    """Test prices come back as decimals."""
    repo = SqlAlchemyProductRepository(db_session)
    product = repo.save(make("Lamp"))

    assert repo.find_by_id(product.id).price == Decimal("2.50")


def test_stamp_lifecycle():
    """Test timestamps depend on whether the product has an id."""
    now = datetime(2024, 1, 1, 12, 0)
    new = stamp_lifecycle(make("Lamp"), now)
    assert new.created_at == now
    assert new.updated_at is None

    existing = make("Lamp")
    existing.id = 7
    existing.created_at = datetime(2023, 1, 1)
    stamp_lifecycle(existing, now)
    assert existing.created_at == datetime(2023, 1, 1)
    assert existing.updated_at == now
