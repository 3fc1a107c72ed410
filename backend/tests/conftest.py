"""
Pytest configuration and fixtures for the imports service.

Each test gets its own in-memory SQLite database loaded with the same reference data:
three users (admin, alice, bob), six suppliers and three products.
"""
import os

os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite://")

from datetime import date
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from importhub.config import Settings
from importhub.core.auth import create_access_token
from importhub.database import Database, transaction
from importhub.main import create_app
from importhub.model.product import Product
from importhub.model.supplier import Supplier
from importhub.model.user import User
from importhub.schemas.import_order import ImportCreate, ImportItemCreate
from importhub.schemas.principal import Principal, Role

ADMIN = Principal(id=1, role=Role.ADMIN, username="admin")
ALICE = Principal(id=2, role=Role.USER, username="alice")
BOB = Principal(id=3, role=Role.USER, username="bob")

SUPPLIER_NAMES = [
    ("Tech Supplies China", "China"),
    ("European Electronics", "Germany"),
    ("Global Components", "Taiwan"),
    ("Andes Imports", "Chile"),
    ("Nordic Parts", "Sweden"),
    ("Pacific Trading", "Japan"),
]


async def load_reference_data(database: Database) -> None:
    async with database.session() as session:
        async with transaction(session):
            for principal in (ADMIN, ALICE, BOB):
                session.add(User(
                    id=principal.id,
                    username=principal.username,
                    email=f"{principal.username}@imports.test",
                    password="x",
                    role=principal.role.value,
                ))
            for i, (name, country) in enumerate(SUPPLIER_NAMES, start=1):
                session.add(Supplier(id=i, name=name, country=country))
            await session.flush()
            session.add_all([
                Product(id=1, name="Smartphone XYZ", description="High-end smartphone",
                        price=Decimal("299.99"), category="Electronics", supplier_id=1, stock=50),
                Product(id=2, name="Laptop ABC", description="Professional laptop",
                        price=Decimal("899.99"), category="Electronics", supplier_id=2, stock=25),
                Product(id=3, name="Headphones GHI", description="Wireless headphones",
                        price=Decimal("89.99"), category="Accessories", supplier_id=3, stock=100),
            ])


def make_payload(supplier_id=1, items=None, **extra) -> ImportCreate:
    if items is None:
        items = [(1, 2, "10.00"), (2, 1, "5.00")]
    return ImportCreate(
        supplier_id=supplier_id,
        import_date=extra.pop("import_date", date(2026, 10, 1)),
        items=[ImportItemCreate(product_id=p, quantity=q, unit_price=Decimal(u)) for p, q, u in items],
        **extra,
    )


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def test_settings():
    return Settings(database_url="sqlite+aiosqlite://", jwt_secret="test-secret")


@pytest.fixture
async def database(anyio_backend):
    db = Database("sqlite+aiosqlite://")
    await db.create_all()
    await load_reference_data(db)
    yield db
    await db.dispose()


@pytest.fixture
async def session(database):
    async with database.session() as s:
        yield s


@pytest.fixture
def app(test_settings):
    application = create_app(test_settings)

    async def _load():
        await load_reference_data(application.state.database)

    # runs after the factory's own startup hook has created the tables
    application.router.on_startup.append(_load)
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth_headers(principal: Principal, settings: Settings) -> dict:
    return {"Authorization": f"Bearer {create_access_token(principal.id, settings)}"}


@pytest.fixture
def admin_headers(test_settings):
    return auth_headers(ADMIN, test_settings)


@pytest.fixture
def alice_headers(test_settings):
    return auth_headers(ALICE, test_settings)


@pytest.fixture
def bob_headers(test_settings):
    return auth_headers(BOB, test_settings)
