from app.models.inquiry import Inquiry, InquiryStatus
from app.models.user import User, UserRole
from app.models.vehicle import FuelType, Vehicle

__all__ = [
    "FuelType",
    "Inquiry",
    "InquiryStatus",
    "User",
    "UserRole",
    "Vehicle",
]
