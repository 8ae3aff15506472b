"""
Centralized Test Configuration.
"""

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession
from sqlalchemy.pool import StaticPool

from fleet_tracker.app.main import app
from fleet_tracker.app.db.session import get_db, Base
from fleet_tracker.app.core.jwt import create_admin_token, create_user_token
from fleet_tracker.app.core.security import get_password_hash
from fleet_tracker.app.models.dropdown_option import DropdownOption
from fleet_tracker.app.models.enums import DropdownType
from fleet_tracker.app.models.user import User
from fleet_tracker.app.services.image_storage import LocalImageStorage, get_image_storage
import fleet_tracker.app.core.redis_client as redis_client_module

# Setup In-Memory Test Database
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

# Event handler to enable foreign keys for SQLite
from sqlalchemy import event
from sqlalchemy.pool import Pool

@event.listens_for(Pool, "connect")
def set_sqlite_pragma(dbapi_conn, connection_record):
    """Enable foreign key constraints for SQLite."""
    if 'sqlite' in str(type(dbapi_conn)).lower():
        cursor = dbapi_conn.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

engine = create_async_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Mock Redis for reliability in CI/CD
class MockRedis:
    def __init__(self):
        self.store = {}
        self._closed = False

    async def ping(self):
        if self._closed:
            return False
        return True

    async def get(self, key):
        if self._closed:
            return None
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self._closed:
            return False
        self.store[key] = value
        return True

    async def delete(self, key):
        if self._closed:
            return 0
        if key in self.store:
            del self.store[key]
            return 1
        return 0

    async def exists(self, key):
        if self._closed:
            return 0
        return 1 if key in self.store else 0

    async def flushdb(self):
        if not self._closed:
            self.store = {}

    async def aclose(self):
        self._closed = True
        self.store = {}


@pytest.fixture
def mock_redis():
    return MockRedis()


@pytest.fixture
def image_storage(tmp_path):
    return LocalImageStorage(str(tmp_path / "images"))


@pytest.fixture(autouse=True)
def apply_overrides(mock_redis, image_storage):
    """Point the app at the test database, a fresh MockRedis and a temp image dir."""

    # Patch the global redis client used by token revocation
    original_client = redis_client_module.redis_client
    redis_client_module.redis_client = mock_redis

    async def override_get_db():
        async with TestingSessionLocal() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_storage] = lambda: image_storage
    yield

    # Restore and clear
    app.dependency_overrides = {}
    redis_client_module.redis_client = original_client


@pytest.fixture(autouse=True)
async def setup_database():
    """Create tables before each test function and drop after."""
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture
async def client():
    """Async client for testing."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac


# Shared session for fixture data creation
@pytest.fixture
async def db_session():
    async with TestingSessionLocal() as session:
        yield session


@pytest.fixture
def make_user(db_session):
    """Factory creating users directly in the database."""

    async def _make_user(
        email: str,
        password: str = "secret123",
        name: str = "Test User",
        is_admin: bool = False,
        is_super_admin: bool = False,
        is_active: bool = True,
        role_id=None,
    ) -> User:
        user = User(
            email=email,
            hashed_password=get_password_hash(password),
            name=name,
            is_admin=is_admin,
            is_super_admin=is_super_admin,
            is_active=is_active,
            role_id=role_id,
        )
        db_session.add(user)
        await db_session.commit()
        await db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
async def user(make_user):
    return await make_user("driver@example.com", name="Driver One")


@pytest.fixture
async def other_user(make_user):
    return await make_user("driver2@example.com", name="Driver Two")


@pytest.fixture
async def admin_user(make_user):
    return await make_user("admin@example.com", name="Admin", is_admin=True)


@pytest.fixture
async def super_admin_user(make_user):
    return await make_user("root@example.com", name="Root", is_admin=True, is_super_admin=True)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(user):
    return bearer(create_user_token(user.id, user.email))


@pytest.fixture
def other_auth_headers(other_user):
    return bearer(create_user_token(other_user.id, other_user.email))


@pytest.fixture
def admin_headers(admin_user):
    return bearer(create_admin_token(admin_user.id, admin_user.email))


@pytest.fixture
def super_admin_headers(super_admin_user):
    return bearer(create_admin_token(super_admin_user.id, super_admin_user.email))


@pytest.fixture
async def options(db_session):
    """One active option of every dropdown type, keyed by type value."""
    created = {}
    for index, option_type in enumerate(DropdownType):
        option = DropdownOption(
            type=option_type,
            name=f"{option_type.value.replace('_', ' ').title()} 1",
            code=f"C{index}",
            order=1,
        )
        db_session.add(option)
        created[option_type.value] = option
    await db_session.commit()
    return {key: option.id for key, option in created.items()}


@pytest.fixture
def way_bridge_payload(options):
    """Builder for a valid way bridge submission."""

    def _payload(vehicle_number: str = "MH12AB1234", qr_code: str = "QR-001", **overrides) -> dict:
        payload = {
            "qrCode": qr_code,
            "vehicleNumber": vehicle_number,
            "wayBridgeId": options["way_bridge"],
            "projectId": options["project"],
            "transporterId": options["transporter"],
            "loadingPointId": options["loading_point"],
            "weighBridgeSlipNo": "WB-1",
            "grossWeight": 25000,
            "tareWeight": 10000,
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def loading_point_payload(options):
    def _payload(vehicle_number: str = "MH12AB1234", qr_code: str = "QR-001", **overrides) -> dict:
        payload = {
            "qrCode": qr_code,
            "vehicleNumber": vehicle_number,
            "loadingPointId": options["loading_point"],
            "projectId": options["project"],
            "transporterId": options["transporter"],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def unloading_payload(options):
    def _payload(trip_id: int, vehicle_number: str = "MH12AB1234", **overrides) -> dict:
        payload = {
            "tripId": trip_id,
            "vehicleNumber": vehicle_number,
            "unloadingPointId": options["unloading_point"],
            "projectId": options["project"],
        }
        payload.update(overrides)
        return payload

    return _payload


@pytest.fixture
def trip_start_payload(options):
    def _payload(vehicle_number: str = "MH12AB1234", qr_code: str = "QR-001", **overrides) -> dict:
        payload = {
            "qrCode": qr_code,
            "vehicleNumber": vehicle_number,
            "projectId": options["project"],
            "selectionType": "unloading_point",
            "selectionId": options["unloading_point"],
        }
        payload.update(overrides)
        return payload

    return _payload
