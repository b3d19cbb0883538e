"""Authentication routes (register, login, Google sign-in)."""

import logging
import secrets
from typing import Optional
from urllib.parse import urlencode

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import RedirectResponse

from api.dependencies import (
    get_account_repo,
    get_identity_provider,
    get_password_hasher,
    get_settings,
    get_token_issuer,
)
from api.models import (
    AccountResponse,
    AuthResponse,
    GoogleTokenRequest,
    LoginRequest,
    ProfileResponse,
    RegisterRequest,
    RegisterResponse,
)
from api.security import get_current_claims
from domain.model.errors import (
    AuthenticationError,
    DuplicateError,
    ExternalIdentityError,
    NotFoundError,
    ValidationError,
)
from domain.model.identity import Claims
from port.account_repository import AccountRepository
from port.identity_provider import IdentityProvider
from port.password_hasher import PasswordHasher
from services import account_service, auth_service
from services.auth_service import AuthResult
from services.token_service import TokenIssuer
from utils.config import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

OAUTH_STATE_COOKIE = "oauth_state"
OAUTH_STATE_MAX_AGE = 600
OAUTH_COOKIE_PATH = "/auth/google"


def _to_response(result: AuthResult) -> AuthResponse:
    return AuthResponse(
        access_token=result.access_token,
        user=ProfileResponse.from_domain(result.user),
    )


# Password routes are sync so bcrypt runs on the threadpool.
@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register(
    request: RegisterRequest,
    repo: AccountRepository = Depends(get_account_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Register a new local account.

    Raises:
        HTTPException: 409 if the email is taken, 400 if the password is too short
    """
    try:
        account = auth_service.register(
            repo, hasher,
            name=request.name,
            email=request.email,
            password=request.password,
            role=request.role,
        )
    except DuplicateError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    logger.info("Account registered", extra={"accountId": account.id})
    return RegisterResponse(
        message="User created successfully",
        user=ProfileResponse.from_domain(account.profile()),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    request: LoginRequest,
    repo: AccountRepository = Depends(get_account_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Exchange email and password for an access token."""
    try:
        result = auth_service.login(repo, hasher, issuer, request.email, request.password)
    except AuthenticationError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return _to_response(result)


@router.post("/google/token", response_model=AuthResponse)
def google_token_login(
    request: GoogleTokenRequest,
    repo: AccountRepository = Depends(get_account_repo),
    provider: IdentityProvider = Depends(get_identity_provider),
    issuer: TokenIssuer = Depends(get_token_issuer),
):
    """Exchange a Google ID token for an access token."""
    try:
        result = auth_service.login_with_external(repo, provider, issuer, request.credential)
    except ExternalIdentityError as e:
        logger.warning("Google sign-in failed", extra={"reason": str(e)})
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Google authentication failed")
    return _to_response(result)


def _frontend_redirect(settings: Settings, params: dict[str, str]) -> RedirectResponse:
    response = RedirectResponse(f"{settings.frontend_url}?{urlencode(params)}", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(OAUTH_STATE_COOKIE, path=OAUTH_COOKIE_PATH)
    return response


@router.get("/google")
def google_login_redirect(
    request: Request,
    provider: IdentityProvider = Depends(get_identity_provider),
):
    """Start the browser sign-in flow by redirecting to Google's consent page.

    The state sent to Google is also kept in a short-lived cookie and checked
    on the callback.
    """
    state = secrets.token_urlsafe(24)
    try:
        url = provider.authorization_url(state)
    except ExternalIdentityError as e:
        logger.error("Google sign-in unavailable", extra={"reason": str(e)})
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Google sign-in is not configured",
        )

    response = RedirectResponse(url, status_code=status.HTTP_302_FOUND)
    response.set_cookie(
        OAUTH_STATE_COOKIE,
        state,
        max_age=OAUTH_STATE_MAX_AGE,
        path=OAUTH_COOKIE_PATH,
        httponly=True,
        samesite="lax",
        secure=request.url.scheme == "https",
    )
    return response


@router.get("/google/callback")
def google_login_callback(
    request: Request,
    code: Optional[str] = None,
    state: Optional[str] = None,
    error: Optional[str] = None,
    repo: AccountRepository = Depends(get_account_repo),
    provider: IdentityProvider = Depends(get_identity_provider),
    issuer: TokenIssuer = Depends(get_token_issuer),
    settings: Settings = Depends(get_settings),
):
    """Finish the browser sign-in flow and hand the token to the frontend.

    Redirects to FRONTEND_URL with ?token=...&user=... on success, or
    ?error=auth_failed on any failure.
    """
    expected_state = request.cookies.get(OAUTH_STATE_COOKIE)
    if error or not code or not state or not expected_state or not secrets.compare_digest(state, expected_state):
        logger.warning("Google callback rejected", extra={"reason": error or "missing code or state mismatch"})
        return _frontend_redirect(settings, {"error": "auth_failed"})

    try:
        result = auth_service.login_with_authorization_code(repo, provider, issuer, code)
    except ExternalIdentityError as e:
        logger.warning("Google sign-in failed", extra={"reason": str(e)})
        return _frontend_redirect(settings, {"error": "auth_failed"})

    return _frontend_redirect(settings, {
        "token": result.access_token,
        "user": ProfileResponse.from_domain(result.user).model_dump_json(),
    })


@router.get("/me", response_model=AccountResponse)
async def get_me(
    claims: Claims = Depends(get_current_claims),
    repo: AccountRepository = Depends(get_account_repo),
):
    """Current account, loaded fresh from storage."""
    try:
        account = account_service.get_account(repo, claims.id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    return AccountResponse.from_domain(account)
