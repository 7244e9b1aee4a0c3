"""Registration, login and role checks."""

import re
import secrets
from dataclasses import dataclass
from functools import lru_cache

from starlette.concurrency import run_in_threadpool

from app.core.exceptions import AuthError, ConflictError, ForbiddenError, RateLimitError, ValidationError
from app.core.logging import LogHelper
from app.core.security import TokenClaims, create_access_token, get_password_hash, verify_password
from app.models.user import User, UserRole
from app.services.credential_store import CredentialStore, normalize_email
from app.services.rate_limit import LoginGuard

logger = LogHelper(__name__)

EMAIL_REGEX = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")

MIN_PASSWORD_LENGTH = 8


@lru_cache(maxsize=1)
def _dummy_hash() -> str:
    """Hash compared against for unknown emails so both failure paths cost a bcrypt check."""
    return get_password_hash(secrets.token_urlsafe(16))


@dataclass
class AuthResult:
    user: User
    token: str


def validate_email(email: str) -> str:
    """
    Lowercase and check the ``local@domain.tld`` shape.

    Raises:
        ValidationError: If the email is empty or malformed
    """
    email = normalize_email(email or "")
    if not email:
        raise ValidationError("Email and password are required")
    if not EMAIL_REGEX.match(email):
        raise ValidationError("Invalid email format")
    return email


def validate_password(password: str) -> None:
    if not password:
        raise ValidationError("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")


def issue_token(user: User) -> str:
    return create_access_token(user_id=user.id, email=user.email, role=user.role)


def require_role(claims: TokenClaims, role: UserRole = UserRole.ADMIN) -> TokenClaims:
    """
    Raises:
        ForbiddenError: If the token's role is not ``role``
    """
    if claims.role != role.value:
        raise ForbiddenError(f"{role.value.capitalize()} access required")
    return claims


class AuthService:
    def __init__(self, credentials: CredentialStore, login_guard: LoginGuard):
        self.credentials = credentials
        self.login_guard = login_guard

    async def register(self, email: str, password: str, name: str = "") -> AuthResult:
        """
        Create a regular user and sign a token for it.

        Raises:
            ValidationError: If the email is malformed or the password too short
            ConflictError: If the email is already registered (any casing)
        """
        email = validate_email(email)
        validate_password(password)

        if await self.credentials.find_by_email(email) is not None:
            raise ConflictError("A user with this email already exists")

        password_hash = await run_in_threadpool(get_password_hash, password)
        user = await self.credentials.add(
            email=email,
            password_hash=password_hash,
            name=(name or "").strip(),
            role=UserRole.USER,
        )
        logger.info("User registered", user_id=user.id, email=user.email)
        return AuthResult(user=user, token=issue_token(user))

    async def login(self, email: str, password: str) -> AuthResult:
        """
        Verify credentials and sign a token.

        The attempt is reserved with the login guard before the credential
        store is consulted, so while the account is locked, or while enough
        guesses are already being checked, it is rejected outright.

        Raises:
            ValidationError: If email or password is missing
            RateLimitError: If the account is locked
            AuthError: If the email is unknown or the password is wrong
        """
        email = normalize_email(email or "")
        if not email or not password:
            raise ValidationError("Email and password are required")

        try:
            self.login_guard.begin_attempt(email)
        except RateLimitError as e:
            logger.warning("Login rejected while locked", email=email, retry_after=e.retry_after)
            raise

        try:
            user = await self.credentials.find_by_email(email)
            password_hash = user.password_hash if user is not None else _dummy_hash()
            valid = await run_in_threadpool(verify_password, password, password_hash)
        except BaseException:
            self.login_guard.release_attempt(email)
            raise

        if user is None or not valid:
            attempt = self.login_guard.record_failure(email)
            logger.warning(
                "Login failed",
                email=email,
                reason="user_not_found" if user is None else "invalid_credentials",
                failed_attempts=attempt.count,
            )
            if attempt.count >= self.login_guard.max_attempts:
                logger.warning("Account locked after repeated failures", email=email)
            raise AuthError()

        self.login_guard.record_success(email)
        logger.info("User logged in", user_id=user.id, email=user.email)
        return AuthResult(user=user, token=issue_token(user))
