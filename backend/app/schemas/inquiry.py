"""Inquiry schemas for API requests and responses."""

import re
from datetime import datetime

from pydantic import Field, field_validator

from app.models.inquiry import InquiryStatus
from app.schemas.common import CamelModel

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_MESSAGE_LENGTH = 10


class InquiryCreate(CamelModel):
    vehicle_id: str = Field(min_length=1)
    name: str
    email: str
    phone: str | None = None
    message: str

    @field_validator("vehicle_id")
    @classmethod
    def strip_vehicle_id(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("vehicleId is required")
        return v

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name is required")
        return v

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        v = v.strip().lower()
        if not EMAIL_REGEX.match(v):
            raise ValueError("invalid email address")
        return v

    @field_validator("phone")
    @classmethod
    def normalize_phone(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        v = v.strip()
        if len(v) < MIN_MESSAGE_LENGTH:
            raise ValueError(f"message must be at least {MIN_MESSAGE_LENGTH} characters long")
        return v


class InquiryStatusUpdate(CamelModel):
    status: InquiryStatus


class InquiryResponse(CamelModel):
    id: str
    vehicle_id: str
    name: str
    email: str
    phone: str | None = None
    message: str
    status: str
    created_at: datetime
    updated_at: datetime | None = None


class InquiryListItem(InquiryResponse):
    """Inquiry joined with the brand/model of its listing (null if deleted)."""

    brand: str | None = None
    model: str | None = None


class InquiryListResponse(CamelModel):
    inquiries: list[InquiryListItem]
    total: int
    page: int
    limit: int
    total_pages: int


class InquiryStats(CamelModel):
    new: int = 0
    contacted: int = 0
    closed: int = 0
