import os

# Settings are read at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["REDIS_ENABLED"] = "false"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from restaurant_pos import crud  # noqa: E402
from restaurant_pos.api import deps  # noqa: E402
from restaurant_pos.core.security import create_access_token  # noqa: E402
from restaurant_pos.db.base import Base  # noqa: E402
from restaurant_pos.db.models.user import UserRole  # noqa: E402
from restaurant_pos.main import app  # noqa: E402
from restaurant_pos.schemas.menu import MenuItem  # noqa: E402
from restaurant_pos.schemas.table import TableCreate  # noqa: E402
from restaurant_pos.schemas.user import UserCreate  # noqa: E402
from restaurant_pos.services.menu_catalog import MenuCatalog  # noqa: E402
from restaurant_pos.services.notifications import OrderEventBus  # noqa: E402

API = "/api/v1"
PASSWORD = "secret"

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def event_bus():
    return OrderEventBus()


@pytest.fixture()
def received(event_bus):
    """Every event published during the test, in delivery order."""
    events = []
    event_bus.subscribe(events.append)
    return events


@pytest.fixture()
def catalog():
    return MenuCatalog(
        [
            MenuItem(id=1, name="Paneer Tikka", price="180.00", category="starters"),
            MenuItem(id=2, name="Butter Naan", price="45.00", category="breads"),
            MenuItem(id=3, name="Masala Chai", price="40.50", category="beverages"),
        ]
    )


@pytest.fixture()
def client(db, event_bus, catalog):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[deps.get_db] = override_get_db
    previous_bus, previous_catalog = app.state.event_bus, app.state.menu_catalog
    app.state.event_bus = event_bus
    app.state.menu_catalog = catalog
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
    app.state.event_bus, app.state.menu_catalog = previous_bus, previous_catalog


@pytest.fixture()
def tables(db):
    return [crud.table.create(db, obj_in=TableCreate(number=n, capacity=4)) for n in (1, 2, 3)]


def _make_user(db, username, role, is_active=True):
    return crud.user.create(
        db,
        obj_in=UserCreate(username=username, password=PASSWORD, role=role, is_active=is_active),
    )


def _auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.username, user.role.value)}"}


@pytest.fixture()
def owner(db):
    return _make_user(db, "olivia", UserRole.OWNER)


@pytest.fixture()
def waiter(db):
    return _make_user(db, "walter", UserRole.WAITER)


@pytest.fixture()
def kitchen_user(db):
    return _make_user(db, "kate", UserRole.KITCHEN)


@pytest.fixture()
def owner_headers(owner):
    return _auth_headers(owner)


@pytest.fixture()
def waiter_headers(waiter):
    return _auth_headers(waiter)


@pytest.fixture()
def kitchen_headers(kitchen_user):
    return _auth_headers(kitchen_user)


@pytest.fixture()
def make_user(db):
    def factory(username, role, is_active=True):
        return _make_user(db, username, role, is_active=is_active)

    return factory


@pytest.fixture()
def occupied_table(client, tables, waiter_headers):
    resp = client.post(f"{API}/tables/1/occupy", json={"contact": "9876543210"}, headers=waiter_headers)
    assert resp.status_code == 200
    return resp.json()


@pytest.fixture()
def place_order(client, waiter_headers):
    def _place(table_number, items):
        return client.post(
            f"{API}/tables/{table_number}/orders",
            json={"items": [{"menu_item_id": i, "quantity": q} for i, q in items]},
            headers=waiter_headers,
        )

    return _place
