"""Pytest fixtures for backend tests."""

import os

# Settings are read at import time; configure before importing the app
os.environ["JWT_SECRET_KEY"] = "test-secret-key-for-the-marketplace-suite-0123456789"
os.environ["BCRYPT_ROUNDS"] = "10"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SEED_USERS_ON_STARTUP"] = "false"
os.environ["DEBUG"] = "false"

from collections.abc import AsyncGenerator  # noqa: E402

import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.core.config import settings  # noqa: E402
from app.db.session import create_engine, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.user import User  # noqa: E402
from app.models.vehicle import Vehicle  # noqa: E402
from app.schemas.vehicle import VehicleCreate  # noqa: E402
from app.services.auth import issue_token  # noqa: E402
from app.services.seed import seed_users  # noqa: E402
from app.services.stores import Stores, build_stores  # noqa: E402

SEED_PASSWORD = "test123"

# brand, model, year, price, mileage, fuel type
SAMPLE_VEHICLES = [
    ("Toyota", "Corolla", 2018, 15000, 60000, "gasoline"),
    ("Toyota", "Prius", 2020, 22000, 30000, "hybrid"),
    ("Honda", "Civic", 2019, 17000, 45000, "gasoline"),
    ("Honda", "Accord", 2021, 26000, 20000, "hybrid"),
    ("Tesla", "Model 3", 2022, 38000, 15000, "electric"),
    ("Tesla", "Model Y", 2023, 45000, 5000, "electric"),
    ("BMW", "320d", 2017, 19000, 90000, "diesel"),
    ("BMW", "i4", 2022, 52000, 10000, "electric"),
    ("Volkswagen", "Golf", 2016, 11000, 110000, "diesel"),
    ("Volkswagen", "ID.3", 2021, 29000, 25000, "electric"),
    ("Ford", "Focus", 2015, 8000, 130000, "gasoline"),
    ("Ford", "Mustang", 2019, 35000, 40000, "gasoline"),
]


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a fresh in-memory database per test."""
    engine = create_engine("sqlite+aiosqlite:///:memory:")
    await init_db(engine)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def stores(test_engine) -> Stores:
    return build_stores(test_engine, settings)


@pytest_asyncio.fixture(scope="function")
async def seeded_users(stores: Stores) -> dict[str, User]:
    """Create admin@test.com and user@test.com."""
    await seed_users(stores.credentials)
    admin = await stores.credentials.find_by_email("admin@test.com")
    user = await stores.credentials.find_by_email("user@test.com")
    return {"admin": admin, "user": user}


@pytest_asyncio.fixture(scope="function")
async def admin_token(seeded_users) -> str:
    return issue_token(seeded_users["admin"])


@pytest_asyncio.fixture(scope="function")
async def user_token(seeded_users) -> str:
    return issue_token(seeded_users["user"])


@pytest_asyncio.fixture(scope="function")
async def sample_vehicles(stores: Stores) -> list[Vehicle]:
    """Twelve listings covering every fuel type."""
    vehicles = []
    for brand, model, year, price, mileage, fuel_type in SAMPLE_VEHICLES:
        vehicles.append(
            await stores.listings.insert(
                VehicleCreate(
                    brand=brand,
                    model=model,
                    year=year,
                    price=price,
                    mileage=mileage,
                    fuel_type=fuel_type,
                    description=f"Well kept {brand} {model}",
                )
            )
        )
    return vehicles


@pytest_asyncio.fixture(scope="function")
async def client(stores: Stores) -> AsyncGenerator[AsyncClient, None]:
    """Create an unauthenticated test client bound to this test's stores."""
    # ASGITransport does not run the lifespan, so wire the stores directly
    app.state.stores = stores

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def admin_client(stores: Stores, admin_token: str) -> AsyncGenerator[AsyncClient, None]:
    """Create a client authenticated as the seeded admin."""
    app.state.stores = stores

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {admin_token}"},
    ) as ac:
        yield ac


@pytest_asyncio.fixture(scope="function")
async def user_client(stores: Stores, user_token: str) -> AsyncGenerator[AsyncClient, None]:
    """Create a client authenticated as the seeded regular user."""
    app.state.stores = stores

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {user_token}"},
    ) as ac:
        yield ac
