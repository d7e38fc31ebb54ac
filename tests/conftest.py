"""
Pytest configuration and fixtures.

The app runs against an in-memory SQLite database shared through a
StaticPool; access tokens are minted locally with the test JWT secret.
"""
import os
import uuid
from datetime import datetime, timedelta, timezone

# Settings are read at import time, so the environment must be ready first
os.environ["SUPABASE_URL"] = "http://localhost:54321"
os.environ["SUPABASE_KEY"] = "test-anon-key"
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SUPABASE_JWT_SECRET"] = "test-jwt-secret"

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from app.database import get_session
from app.main import app
from app.models.product import Category, Product
from app.models.profile import Profile

JWT_SECRET = os.environ["SUPABASE_JWT_SECRET"]


def make_token(
    user_id: uuid.UUID,
    email: str = "user@example.com",
    metadata: dict | None = None,
    expires_in: int = 3600,
) -> str:
    """Mint a Supabase-shaped access token signed with the test secret."""
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "email": email,
        "aud": "authenticated",
        "role": "authenticated",
        "user_metadata": metadata or {},
        "iat": int(now.timestamp()),
        "exp": int((now + timedelta(seconds=expires_in)).timestamp()),
    }
    return jwt.encode(claims, JWT_SECRET, algorithm="HS256")


def auth_headers(profile_or_id, **kwargs) -> dict[str, str]:
    user_id = getattr(profile_or_id, "id", profile_or_id)
    return {"Authorization": f"Bearer {make_token(user_id, **kwargs)}"}


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(session):
    """TestClient whose requests share the test session."""

    def override_get_session():
        yield session

    app.dependency_overrides[get_session] = override_get_session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def headers():
    """`headers(profile)` -> Authorization header for that profile."""
    return auth_headers


# ----- Seed data -----


def _add(session: Session, obj):
    session.add(obj)
    session.commit()
    session.refresh(obj)
    return obj


@pytest.fixture
def consumer(session) -> Profile:
    return _add(
        session,
        Profile(
            id=uuid.uuid4(),
            email="aisyah@example.com",
            full_name="Aisyah Rahman",
            role="consumer",
            is_approved=True,
        ),
    )


@pytest.fixture
def vendor(session) -> Profile:
    return _add(
        session,
        Profile(
            id=uuid.uuid4(),
            email="farmasi@example.com",
            full_name="Lim Wei Ming",
            role="vendor",
            is_approved=True,
            business_name="Farmasi Sejahtera",
            business_license="PH12345",
            contact_person="Lim Wei Ming",
        ),
    )


@pytest.fixture
def pending_vendor(session) -> Profile:
    return _add(
        session,
        Profile(
            id=uuid.uuid4(),
            email="baru@example.com",
            full_name="Farmasi Baru",
            role="vendor",
            is_approved=False,
        ),
    )


@pytest.fixture
def admin(session) -> Profile:
    return _add(
        session,
        Profile(
            id=uuid.uuid4(),
            email="admin@example.com",
            full_name="Admin",
            role="admin",
            is_approved=True,
        ),
    )


@pytest.fixture
def category(session) -> Category:
    return _add(session, Category(name="Pain Relief", description="Analgesics"))


def _product(vendor: Profile, category: Category, **overrides) -> Product:
    data = dict(
        vendor_id=vendor.id,
        category_id=category.id,
        name="Panadol Extra",
        brand="Panadol",
        price=12.50,
        stock_quantity=10,
        mal_number="MAL19990001",
        pharmacy_name=vendor.business_name,
        pharmacy_license=vendor.business_license,
        is_active=True,
        is_verified=True,
    )
    data.update(overrides)
    return Product(**data)


@pytest.fixture
def panadol(session, vendor, category) -> Product:
    return _add(session, _product(vendor, category))


@pytest.fixture
def vitamin_c(session, vendor, category) -> Product:
    return _add(
        session,
        _product(
            vendor,
            category,
            name="Vitamin C 1000mg",
            brand="Blackmores",
            price=45.50,
            stock_quantity=5,
            mal_number="MAL20010002",
        ),
    )


@pytest.fixture
def unverified_product(session, vendor, category) -> Product:
    return _add(
        session,
        _product(
            vendor,
            category,
            name="Herbal Tonic",
            brand="Herba",
            price=30.00,
            mal_number="MAL20200003",
            is_verified=False,
        ),
    )
