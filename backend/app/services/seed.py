"""
Development user seeding.

Creates the two test accounts. Seeded passwords bypass the registration
password policy, so ``test123`` is accepted here.
"""

from dataclasses import dataclass, field

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import ConflictError
from app.core.logging import LogHelper
from app.core.security import get_password_hash
from app.models.user import UserRole
from app.services.credential_store import CredentialStore

logger = LogHelper(__name__)

SEED_USERS = [
    {
        "email": "admin@test.com",
        "password": "test123",
        "name": "Test Admin",
        "role": UserRole.ADMIN,
    },
    {
        "email": "user@test.com",
        "password": "test123",
        "name": "Test User",
        "role": UserRole.USER,
    },
]


@dataclass
class SeedResult:
    created: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)
    errors: list[dict[str, str]] = field(default_factory=list)


async def seed_users(credentials: CredentialStore, users: list[dict] | None = None) -> SeedResult:
    """Create the seed users. Running it twice creates nothing the second time."""
    result = SeedResult()

    for seed_user in users if users is not None else SEED_USERS:
        email = seed_user["email"].lower()
        role = seed_user.get("role", UserRole.USER)
        role = role.value if isinstance(role, UserRole) else role
        if await credentials.find_by_email(email) is not None:
            result.skipped.append(email)
            logger.info("Seed user already exists", email=email)
            continue

        try:
            password_hash = await run_in_threadpool(get_password_hash, seed_user["password"])
            await credentials.add(
                email=email,
                password_hash=password_hash,
                name=seed_user.get("name", ""),
                role=role,
            )
        except ConflictError:
            result.skipped.append(email)
            continue
        except ValueError as e:
            result.errors.append({"email": email, "error": str(e)})
            logger.error("Failed to create seed user", email=email, error=str(e))
            continue

        result.created.append(email)
        logger.info("Seed user created", email=email, role=role)

    return result
