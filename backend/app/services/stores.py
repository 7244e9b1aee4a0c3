"""The store objects one application instance owns."""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from app.core.config import Settings, settings as app_settings
from app.db.session import create_session_maker
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore
from app.services.inquiry_store import InquiryStore
from app.services.listing_store import ListingStore
from app.services.rate_limit import LoginGuard


@dataclass
class Stores:
    session_maker: async_sessionmaker[AsyncSession]
    credentials: CredentialStore
    listings: ListingStore
    inquiries: InquiryStore
    login_guard: LoginGuard
    auth: AuthService


def build_stores(engine: AsyncEngine, settings: Settings = app_settings) -> Stores:
    session_maker = create_session_maker(engine)
    credentials = CredentialStore(session_maker)
    listings = ListingStore(session_maker)
    login_guard = LoginGuard(
        max_attempts=settings.LOGIN_MAX_ATTEMPTS,
        lockout_seconds=settings.LOGIN_LOCKOUT_SECONDS,
    )
    return Stores(
        session_maker=session_maker,
        credentials=credentials,
        listings=listings,
        inquiries=InquiryStore(session_maker, listings),
        login_guard=login_guard,
        auth=AuthService(credentials, login_guard),
    )
