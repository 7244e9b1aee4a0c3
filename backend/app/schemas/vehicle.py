"""Vehicle schemas for API requests and responses."""

from datetime import datetime

from pydantic import ConfigDict, Field, field_validator

from app.models.vehicle import FuelType
from app.schemas.common import CamelModel


def _normalize_fuel_type(value):
    if isinstance(value, str):
        return value.strip().lower()
    return value


class VehicleCreate(CamelModel):
    model_config = ConfigDict(use_enum_values=True)

    brand: str = Field(min_length=1, max_length=100)
    model: str = Field(min_length=1, max_length=100)
    year: int | None = Field(None, ge=1886, le=2100)
    price: float | None = Field(None, ge=0)
    mileage: int | None = Field(None, ge=0)
    fuel_type: FuelType | None = None
    description: str | None = None
    images: list[str] = Field(default_factory=list, max_length=20)

    @field_validator("brand", "model")
    @classmethod
    def strip_required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("fuel_type", mode="before")
    @classmethod
    def normalize_fuel_type(cls, v):
        return _normalize_fuel_type(v)


class VehicleUpdate(CamelModel):
    """
    Partial update of a listing.

    Only the fields listed here can change; id and createdAt are immutable.
    Omitted fields keep their value, explicit nulls clear optional fields.
    """

    model_config = ConfigDict(use_enum_values=True)

    brand: str | None = Field(None, min_length=1, max_length=100)
    model: str | None = Field(None, min_length=1, max_length=100)
    year: int | None = Field(None, ge=1886, le=2100)
    price: float | None = Field(None, ge=0)
    mileage: int | None = Field(None, ge=0)
    fuel_type: FuelType | None = None
    description: str | None = None
    images: list[str] | None = Field(None, max_length=20)

    @field_validator("brand", "model")
    @classmethod
    def strip_required_text(cls, v: str | None) -> str:
        if v is None:
            raise ValueError("must not be null")
        v = v.strip()
        if not v:
            raise ValueError("must not be blank")
        return v

    @field_validator("images")
    @classmethod
    def images_not_null(cls, v: list[str] | None) -> list[str]:
        if v is None:
            raise ValueError("must not be null")
        return v

    @field_validator("fuel_type", mode="before")
    @classmethod
    def normalize_fuel_type(cls, v):
        return _normalize_fuel_type(v)


class VehicleResponse(CamelModel):
    id: str
    brand: str
    model: str
    year: int | None = None
    price: float | None = None
    mileage: int | None = None
    fuel_type: str | None = None
    description: str | None = None
    images: list[str] = []
    created_at: datetime
    updated_at: datetime | None = None


class VehicleListResponse(CamelModel):
    vehicles: list[VehicleResponse]
    total: int
    page: int
    limit: int
    total_pages: int
