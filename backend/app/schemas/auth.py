from pydantic import BaseModel

from app.schemas.user import UserResponse


class RegisterRequest(BaseModel):
    email: str
    password: str
    name: str = ""


class LoginRequest(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str
    token_type: str = "bearer"


class MeResponse(BaseModel):
    user: UserResponse
