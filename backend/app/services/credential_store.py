"""User records keyed by id and by lowercased email."""

import asyncio

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app.core.exceptions import ConflictError
from app.db.base import generate_id, utcnow
from app.models.user import User, UserRole


def normalize_email(email: str) -> str:
    return email.strip().lower()


class CredentialStore:
    """
    Holds user records. Email uniqueness is case-insensitive because every
    email is lowercased before it is stored or looked up.
    """

    def __init__(self, session_maker: async_sessionmaker[AsyncSession]):
        self._session_maker = session_maker
        self._lock = asyncio.Lock()

    async def add(
        self,
        email: str,
        password_hash: str,
        name: str = "",
        role: UserRole | str = UserRole.USER,
        user_id: str | None = None,
    ) -> User:
        """
        Persist a new user.

        Raises:
            ConflictError: If a user with this email (any casing) exists
        """
        email = normalize_email(email)
        role = role.value if isinstance(role, UserRole) else role

        async with self._lock:
            async with self._session_maker() as session:
                existing = await session.execute(select(User.id).where(User.email == email))
                if existing.scalar_one_or_none() is not None:
                    raise ConflictError("A user with this email already exists")

                user = User(
                    id=user_id or generate_id(),
                    email=email,
                    password_hash=password_hash,
                    name=name or "",
                    role=role,
                    created_at=utcnow(),
                )
                session.add(user)
                try:
                    await session.commit()
                except IntegrityError as e:
                    await session.rollback()
                    raise ConflictError("A user with this email already exists") from e
                await session.refresh(user)
                return user

    async def find_by_email(self, email: str) -> User | None:
        async with self._session_maker() as session:
            result = await session.execute(select(User).where(User.email == normalize_email(email)))
            return result.scalar_one_or_none()

    async def find_by_id(self, user_id: str) -> User | None:
        async with self._session_maker() as session:
            return await session.get(User, user_id)

    async def list_all(self) -> list[User]:
        async with self._session_maker() as session:
            result = await session.execute(select(User).order_by(User.created_at, User.id))
            return list(result.scalars().all())

    async def clear(self) -> None:
        async with self._lock:
            async with self._session_maker() as session:
                await session.execute(delete(User))
                await session.commit()
