from enum import Enum

from sqlalchemy import String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, IDMixin, TimestampMixin


class InquiryStatus(str, Enum):
    NEW = "new"
    CONTACTED = "contacted"
    CLOSED = "closed"


class Inquiry(Base, IDMixin, TimestampMixin):
    __tablename__ = "inquiries"

    # No foreign key: InquiryStore checks the vehicle exists, and deleting a
    # vehicle leaves its inquiries in place
    vehicle_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), default=InquiryStatus.NEW.value, nullable=False, index=True)

    def __repr__(self) -> str:
        return f"<Inquiry {self.id} vehicle={self.vehicle_id} {self.status}>"
