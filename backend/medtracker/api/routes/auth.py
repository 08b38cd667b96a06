"""
Authentication Routes

Endpoints:
- POST /auth/google - Exchange Google id_token for session
- POST /auth/logout - Clear session
- GET /auth/user - Get current user profile
- DELETE /auth/user - Delete the account and all of its study data

Auth Flow:
1. Frontend performs Google OAuth flow and receives an id_token
2. Frontend POSTs id_token to /auth/google
3. Backend verifies id_token with Google's public keys
4. Backend upserts the user (keyed by Google's 'sub' claim), which also
   guarantees the user's stats row
5. Backend returns JWT (in cookie and response body)
"""

from fastapi import APIRouter, HTTPException, Response, status
from google.auth.transport import requests as google_requests
from google.oauth2 import id_token as google_id_token

from medtracker.api.deps import CurrentUser, StorageDep, create_access_token
from medtracker.config import get_settings
from medtracker.schemas.auth import GoogleAuthRequest, TokenResponse
from medtracker.schemas.user import UserRead, UserUpsert

router = APIRouter(prefix="/auth", tags=["auth"])
settings = get_settings()

_GOOGLE_ISSUERS = ("accounts.google.com", "https://accounts.google.com")


def _cookie_kwargs() -> dict:
    return {
        "httponly": True,
        "secure": settings.cookie_cross_domain or settings.environment != "development",
        "samesite": "none" if settings.cookie_cross_domain else "lax",
    }


@router.post("/google", response_model=TokenResponse)
async def google_login(
    request: GoogleAuthRequest,
    response: Response,
    storage: StorageDep,
) -> TokenResponse:
    """
    Exchange Google id_token for a session JWT.

    The id_token is verified cryptographically (signature, expiry, audience).
    Unverified emails are not stored.
    """
    try:
        idinfo = google_id_token.verify_oauth2_token(
            request.id_token,
            google_requests.Request(),
            settings.google_client_id,
        )
        if idinfo.get("iss") not in _GOOGLE_ISSUERS:
            raise ValueError("Invalid issuer")
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid Google id_token: {e}",
        )

    email = idinfo.get("email")
    if email and not idinfo.get("email_verified", False):
        email = None

    claims = UserUpsert(
        id=idinfo["sub"],
        email=email.lower() if email else None,
        first_name=idinfo.get("given_name"),
        last_name=idinfo.get("family_name"),
        profile_image_url=idinfo.get("picture"),
    )
    user = await storage.upsert_user(claims.model_dump())

    access_token = create_access_token(user.id)
    expires_in = settings.jwt_expire_minutes * 60
    response.set_cookie(
        key="access_token",
        value=access_token,
        max_age=expires_in,
        **_cookie_kwargs(),
    )

    return TokenResponse(
        access_token=access_token,
        expires_in=expires_in,
    )


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
async def logout(response: Response) -> None:
    """
    Clear the authentication cookie.

    A JWT stored elsewhere by the client stays valid until expiry.
    """
    response.delete_cookie(key="access_token", **_cookie_kwargs())


@router.get("/user", response_model=UserRead)
async def get_auth_user(current_user: CurrentUser) -> UserRead:
    """Get the current authenticated user's profile."""
    return UserRead.model_validate(current_user)


@router.delete("/user", status_code=status.HTTP_204_NO_CONTENT)
async def delete_auth_user(
    current_user: CurrentUser,
    storage: StorageDep,
    response: Response,
) -> None:
    """Delete the account. Progress, sessions, notes, chat history and stats go with it."""
    await storage.delete_user(current_user.id)
    response.delete_cookie(key="access_token", **_cookie_kwargs())
