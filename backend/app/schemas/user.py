from datetime import datetime

from app.schemas.common import CamelModel


class UserResponse(CamelModel):
    """Public view of a user. Never includes the password hash."""

    id: str
    email: str
    name: str
    role: str
    created_at: datetime | None = None
