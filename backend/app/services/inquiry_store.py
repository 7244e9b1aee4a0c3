"""Customer inquiries about listings."""

import asyncio
from dataclasses import dataclass
from typing import Any

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import ValidationError
from app.db.base import generate_id, utcnow
from app.models.inquiry import Inquiry, InquiryStatus
from app.models.vehicle import Vehicle
from app.schemas.inquiry import InquiryCreate
from app.services.listing_store import ListingStore
from app.services.query_engine import MAX_PAGE_SIZE, Page, normalize_limit, normalize_page

DEFAULT_PAGE_SIZE = 50


@dataclass
class InquiryRow:
    """An inquiry joined with its listing's brand and model."""

    inquiry: Inquiry
    brand: str | None
    model: str | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.inquiry.id,
            "vehicle_id": self.inquiry.vehicle_id,
            "name": self.inquiry.name,
            "email": self.inquiry.email,
            "phone": self.inquiry.phone,
            "message": self.inquiry.message,
            "status": self.inquiry.status,
            "created_at": self.inquiry.created_at,
            "updated_at": self.inquiry.updated_at,
            "brand": self.brand,
            "model": self.model,
        }


def parse_status(status: InquiryStatus | str) -> InquiryStatus:
    """
    Raises:
        ValidationError: If the status is not one of new, contacted, closed
    """
    try:
        return InquiryStatus(status)
    except ValueError as e:
        allowed = ", ".join(s.value for s in InquiryStatus)
        raise ValidationError(f"Status must be one of {allowed}") from e


class InquiryStore:
    """
    Keyed store of inquiries.

    The listing store is consulted on creation because the underlying table
    has no foreign key to enforce that the vehicle exists.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession], listings: ListingStore):
        self._session_maker = session_maker
        self._listings = listings
        self._lock = asyncio.Lock()

    async def create(self, data: InquiryCreate, inquiry_id: str | None = None) -> Inquiry:
        """
        Store a new inquiry with status ``new``.

        Raises:
            ValidationError: If the referenced vehicle does not exist
        """
        if not await self._listings.exists(data.vehicle_id):
            raise ValidationError("Vehicle not found", details={"vehicleId": data.vehicle_id})

        inquiry = Inquiry(
            id=inquiry_id or generate_id(),
            vehicle_id=data.vehicle_id,
            name=data.name,
            email=data.email,
            phone=data.phone,
            message=data.message,
            status=InquiryStatus.NEW.value,
            created_at=utcnow(),
        )
        async with self._lock:
            async with self._session_maker() as session:
                session.add(inquiry)
                await session.commit()
                await session.refresh(inquiry)
                return inquiry

    async def get(self, inquiry_id: str) -> Inquiry | None:
        async with self._session_maker() as session:
            return await session.get(Inquiry, inquiry_id)

    async def list_page(
        self,
        status: str | None = None,
        page: Any = None,
        limit: Any = None,
        default_limit: int = DEFAULT_PAGE_SIZE,
        max_limit: int = MAX_PAGE_SIZE,
    ) -> Page[InquiryRow]:
        """Newest inquiries first, optionally filtered by status."""
        page_number = normalize_page(page)
        page_size = normalize_limit(limit, default_limit, max_limit)
        status_filter = parse_status(status) if status else None

        stmt = (
            select(Inquiry, Vehicle.brand, Vehicle.model)
            .outerjoin(Vehicle, Vehicle.id == Inquiry.vehicle_id)
            .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
            .limit(page_size)
            .offset((page_number - 1) * page_size)
        )
        count_stmt = select(func.count()).select_from(Inquiry)
        if status_filter is not None:
            stmt = stmt.where(Inquiry.status == status_filter.value)
            count_stmt = count_stmt.where(Inquiry.status == status_filter.value)

        async with self._session_maker() as session:
            rows = (await session.execute(stmt)).all()
            total = (await session.execute(count_stmt)).scalar() or 0

        return Page(
            items=[InquiryRow(inquiry, brand, model) for inquiry, brand, model in rows],
            total=total,
            page=page_number,
            limit=page_size,
        )

    async def list_all(self) -> list[Inquiry]:
        async with self._session_maker() as session:
            result = await session.execute(select(Inquiry).order_by(Inquiry.created_at.desc(), Inquiry.id.desc()))
            return list(result.scalars().all())

    async def list_by_vehicle(self, vehicle_id: str) -> list[Inquiry]:
        async with self._session_maker() as session:
            result = await session.execute(
                select(Inquiry)
                .where(Inquiry.vehicle_id == vehicle_id)
                .order_by(Inquiry.created_at.desc(), Inquiry.id.desc())
            )
            return list(result.scalars().all())

    async def update_status(self, inquiry_id: str, status: InquiryStatus | str) -> Inquiry | None:
        """
        Move an inquiry to another status and stamp updated_at.

        Returns None if the inquiry does not exist.

        Raises:
            ValidationError: If the status is not a valid inquiry status
        """
        new_status = parse_status(status)
        async with self._lock:
            async with self._session_maker() as session:
                inquiry = await session.get(Inquiry, inquiry_id)
                if inquiry is None:
                    return None
                inquiry.status = new_status.value
                inquiry.updated_at = utcnow()
                await session.commit()
                await session.refresh(inquiry)
                return inquiry

    async def delete(self, inquiry_id: str) -> bool:
        """Delete an inquiry. Returns whether it existed."""
        async with self._lock:
            async with self._session_maker() as session:
                result = await session.execute(delete(Inquiry).where(Inquiry.id == inquiry_id))
                await session.commit()
                return result.rowcount > 0

    async def count_by_status(self) -> dict[str, int]:
        counts = {status.value: 0 for status in InquiryStatus}
        async with self._session_maker() as session:
            result = await session.execute(
                select(Inquiry.status, func.count()).group_by(Inquiry.status)
            )
            for status, count in result.all():
                counts[status] = count
        return counts

    async def clear(self) -> None:
        async with self._lock:
            async with self._session_maker() as session:
                await session.execute(delete(Inquiry))
                await session.commit()
