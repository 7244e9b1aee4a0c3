"""Vehicle listing persistence."""

import asyncio

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.db.base import generate_id, utcnow
from app.models.vehicle import Vehicle
from app.schemas.vehicle import VehicleCreate, VehicleUpdate

# Fields a patch may touch; id and created_at are deliberately absent
UPDATABLE_FIELDS = (
    "brand",
    "model",
    "year",
    "price",
    "mileage",
    "fuel_type",
    "description",
    "images",
)


class ListingStore:
    """Keyed store of vehicle listings. Mutations are serialized by a lock."""

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._lock = asyncio.Lock()

    async def insert(self, data: VehicleCreate, vehicle_id: str | None = None) -> Vehicle:
        """Store a new listing, assigning an id if none is given and stamping created_at."""
        values = data.model_dump()
        vehicle = Vehicle(
            id=vehicle_id or generate_id(),
            brand=values["brand"],
            model=values["model"],
            year=values.get("year"),
            price=values.get("price"),
            mileage=values.get("mileage"),
            fuel_type=values.get("fuel_type"),
            description=values.get("description"),
            images=list(values.get("images") or []),
            created_at=utcnow(),
        )
        async with self._lock:
            async with self._session_maker() as session:
                session.add(vehicle)
                await session.commit()
                await session.refresh(vehicle)
                return vehicle

    async def get(self, vehicle_id: str) -> Vehicle | None:
        async with self._session_maker() as session:
            return await session.get(Vehicle, vehicle_id)

    async def exists(self, vehicle_id: str) -> bool:
        async with self._session_maker() as session:
            result = await session.execute(select(Vehicle.id).where(Vehicle.id == vehicle_id))
            return result.scalar_one_or_none() is not None

    async def list_all(self) -> list[Vehicle]:
        """All listings, oldest first; ties broken by id so the order is deterministic."""
        async with self._session_maker() as session:
            result = await session.execute(select(Vehicle).order_by(Vehicle.created_at, Vehicle.id))
            return list(result.scalars().all())

    async def update(self, vehicle_id: str, patch: VehicleUpdate) -> Vehicle | None:
        """
        Apply the fields explicitly set in ``patch`` and stamp updated_at.

        Returns None if the listing does not exist.
        """
        changes = patch.model_dump(exclude_unset=True)
        async with self._lock:
            async with self._session_maker() as session:
                vehicle = await session.get(Vehicle, vehicle_id)
                if vehicle is None:
                    return None

                for field_name in UPDATABLE_FIELDS:
                    if field_name in changes:
                        value = changes[field_name]
                        if field_name == "images":
                            value = list(value)
                        setattr(vehicle, field_name, value)
                vehicle.updated_at = utcnow()

                await session.commit()
                await session.refresh(vehicle)
                return vehicle

    async def delete(self, vehicle_id: str) -> bool:
        """Delete a listing. Returns whether it existed."""
        async with self._lock:
            async with self._session_maker() as session:
                result = await session.execute(delete(Vehicle).where(Vehicle.id == vehicle_id))
                await session.commit()
                return result.rowcount > 0

    async def clear(self) -> None:
        async with self._lock:
            async with self._session_maker() as session:
                await session.execute(delete(Vehicle))
                await session.commit()
