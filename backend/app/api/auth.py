from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from app.api.deps import get_auth_service, get_credential_store, get_current_claims
from app.core.exceptions import NotFoundError
from app.core.logging import LogHelper
from app.core.security import TokenClaims
from app.schemas.auth import AuthResponse, LoginRequest, MeResponse, RegisterRequest
from app.schemas.user import UserResponse
from app.services.auth import AuthService
from app.services.credential_store import CredentialStore
from app.utils.request import get_client_ip

router = APIRouter(prefix="/auth", tags=["auth"])

logger = LogHelper(__name__)


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    data: RegisterRequest,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    result = await auth.register(data.email, data.password, data.name)
    return AuthResponse(
        message="Registration successful",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post("/login", response_model=AuthResponse)
async def login(
    data: LoginRequest,
    http_request: Request,
    auth: Annotated[AuthService, Depends(get_auth_service)],
):
    logger.debug("Login attempt", email=data.email, ip_address=get_client_ip(http_request))
    result = await auth.login(data.email, data.password)
    return AuthResponse(
        message="Login successful",
        user=UserResponse.model_validate(result.user),
        token=result.token,
    )


@router.post("/logout")
async def logout(claims: Annotated[TokenClaims, Depends(get_current_claims)]):
    # Tokens are stateless; the client discards its copy
    return {"message": "Logout successful"}


@router.get("/me", response_model=MeResponse)
async def me(
    claims: Annotated[TokenClaims, Depends(get_current_claims)],
    credentials: Annotated[CredentialStore, Depends(get_credential_store)],
):
    user = await credentials.find_by_id(claims.user_id)
    if user is None:
        raise NotFoundError("User")
    return MeResponse(user=UserResponse.model_validate(user))
