from typing import Annotated

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.exceptions import MissingTokenError
from app.core.security import TokenClaims, decode_access_token
from app.models.user import UserRole
from app.services.auth import AuthService, require_role
from app.services.credential_store import CredentialStore
from app.services.inquiry_store import InquiryStore
from app.services.listing_store import ListingStore
from app.services.stores import Stores

# auto_error=False so a missing header is reported as MISSING_TOKEN (401)
# rather than FastAPI's generic 403
security = HTTPBearer(auto_error=False)


def get_stores(request: Request) -> Stores:
    return request.app.state.stores


def get_credential_store(stores: Annotated[Stores, Depends(get_stores)]) -> CredentialStore:
    return stores.credentials


def get_listing_store(stores: Annotated[Stores, Depends(get_stores)]) -> ListingStore:
    return stores.listings


def get_inquiry_store(stores: Annotated[Stores, Depends(get_stores)]) -> InquiryStore:
    return stores.inquiries


def get_auth_service(stores: Annotated[Stores, Depends(get_stores)]) -> AuthService:
    return stores.auth


async def get_current_claims(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> TokenClaims:
    """
    Verify the bearer token.

    Raises:
        MissingTokenError: If no bearer token was supplied
        InvalidTokenError: If the token is forged, malformed or expired
    """
    if credentials is None or not credentials.credentials:
        raise MissingTokenError()
    return decode_access_token(credentials.credentials)


async def require_admin(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
) -> TokenClaims:
    return require_role(claims, UserRole.ADMIN)
