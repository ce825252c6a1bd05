"""Test configuration and fixtures"""

from types import SimpleNamespace
from uuid import uuid4

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from ordercore.main import app
from ordercore.database import Base, get_db
from ordercore.models.store import Store, DeliveryZone
from ordercore.models.user import User, UserRole
from ordercore.models.catalog import Product, ProductVariant, ProductModifier
from ordercore.api.auth import get_password_hash, create_access_token
from ordercore.services.side_effects import get_side_effect_dispatcher


# Test database URL (use in-memory SQLite for tests)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


class FakeDispatcher:
    """Records outbox event ids instead of enqueuing Celery tasks"""

    def __init__(self):
        self.dispatched = []

    def dispatch(self, event_ids):
        self.dispatched.extend(event_ids)


class FakeMessages:
    def __init__(self, fail=False):
        self.fail = fail
        self.sent = []

    def create(self, body, from_, to):
        if self.fail:
            raise RuntimeError("Twilio unavailable")
        self.sent.append({"body": body, "from_": from_, "to": to})
        return SimpleNamespace(sid=f"SM{len(self.sent):04d}")


class FakeTwilioClient:
    def __init__(self, fail=False):
        self.messages = FakeMessages(fail=fail)


@pytest.fixture
async def test_db():
    """Create test database"""
    engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=StaticPool)

    # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def test_store(test_db):
    """Create a test store at (0, 0) with two delivery zones"""
    store = Store(
        id=uuid4(),
        name="Test Store",
        slug="test-store",
        currency="USD",
        store_latitude=0.0,
        store_longitude=0.0,
        delivery_fee_cents=300,
        delivery_radius_km=10.0,
        order_number_format="WO-{number}",
        order_notifications_enabled=True,
        whatsapp_number="+15550001234",
    )
    test_db.add(store)
    await test_db.flush()

    test_db.add_all([
        DeliveryZone(store_id=store.id, name="Near", max_distance_km=5, fee_cents=200, position=0),
        DeliveryZone(store_id=store.id, name="Far", max_distance_km=15, fee_cents=500, position=1),
    ])
    await test_db.commit()

    return store


@pytest.fixture
async def bare_store(test_db):
    """Store at (0, 0) with a 10 km radius and no zones"""
    store = Store(
        id=uuid4(),
        name="Bare Store",
        slug="bare-store",
        store_latitude=0.0,
        store_longitude=0.0,
        delivery_fee_cents=0,
        delivery_radius_km=10.0,
    )
    test_db.add(store)
    await test_db.commit()
    return store


@pytest.fixture
async def test_user(test_db, test_store):
    """Create a test store admin"""
    user = User(
        id=uuid4(),
        store_id=test_store.id,
        email="test@example.com",
        hashed_password=get_password_hash("testpass123"),
        full_name="Test User",
        role=UserRole.STORE_ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_admin_user(test_db):
    """Create a super admin user"""
    user = User(
        id=uuid4(),
        email="admin@example.com",
        hashed_password=get_password_hash("adminpass123"),
        full_name="Admin User",
        role=UserRole.SUPER_ADMIN,
        is_active=True,
    )
    test_db.add(user)
    await test_db.commit()

    return user


@pytest.fixture
async def test_products(test_db, test_store):
    """Create test products: two untracked, one tracked with variants and modifiers"""
    pizza = Product(
        store_id=test_store.id,
        name="Margherita Pizza",
        description="Classic tomato and mozzarella",
        price_cents=1000,
        original_price_cents=1200,
    )
    salad = Product(
        store_id=test_store.id,
        name="Caesar Salad",
        description="Romaine with caesar dressing",
        price_cents=2500,
    )
    burger = Product(
        store_id=test_store.id,
        name="Burger",
        price_cents=900,
        stock=3,
        track_inventory=True,
        variants=[
            ProductVariant(name="Double", price_cents=1400, stock=2),
        ],
        modifiers=[
            ProductModifier(name="Extra cheese", price_cents=150),
            ProductModifier(name="Bacon", price_cents=200),
        ],
    )
    retired = Product(
        store_id=test_store.id,
        name="Retired Special",
        price_cents=800,
        is_active=False,
    )

    test_db.add_all([pizza, salad, burger, retired])
    await test_db.commit()

    return {
        "pizza": pizza,
        "salad": salad,
        "burger": burger,
        "double": burger.variants[0],
        "cheese": burger.modifiers[0],
        "bacon": burger.modifiers[1],
        "retired": retired,
    }


@pytest.fixture
def dispatcher():
    return FakeDispatcher()


@pytest.fixture
async def client(test_db, dispatcher):
    """Create test client with overridden database and side-effect dispatcher"""
    async def override_get_db():
        yield test_db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_side_effect_dispatcher] = lambda: dispatcher

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest.fixture
async def authenticated_client(client, test_user):
    """Create authenticated test client"""
    token = create_access_token(test_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
async def admin_client(client, test_admin_user):
    """Create admin authenticated test client"""
    token = create_access_token(test_admin_user)
    client.headers["Authorization"] = f"Bearer {token}"

    return client


@pytest.fixture
def twilio_client():
    return FakeTwilioClient()


@pytest.fixture
def failing_twilio_client():
    return FakeTwilioClient(fail=True)
