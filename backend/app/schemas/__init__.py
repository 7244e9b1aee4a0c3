from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from app.schemas.inquiry import (
    InquiryCreate,
    InquiryListItem,
    InquiryListResponse,
    InquiryResponse,
    InquiryStats,
    InquiryStatusUpdate,
)
from app.schemas.user import UserResponse
from app.schemas.vehicle import VehicleCreate, VehicleListResponse, VehicleResponse, VehicleUpdate

__all__ = [
    "AuthResponse",
    "LoginRequest",
    "MeResponse",
    "RegisterRequest",
    "InquiryCreate",
    "InquiryListItem",
    "InquiryListResponse",
    "InquiryResponse",
    "InquiryStats",
    "InquiryStatusUpdate",
    "UserResponse",
    "VehicleCreate",
    "VehicleListResponse",
    "VehicleResponse",
    "VehicleUpdate",
]
