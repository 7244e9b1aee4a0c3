from enum import Enum

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from app.db.base import Base, CreatedAtMixin, IDMixin


class UserRole(str, Enum):
    ADMIN = "admin"
    USER = "user"


class User(Base, IDMixin, CreatedAtMixin):
    __tablename__ = "users"

    # Always stored lowercased; uniqueness is therefore case-insensitive
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(255), default="", nullable=False)
    role: Mapped[str] = mapped_column(String(16), default=UserRole.USER.value, nullable=False)

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role})>"
