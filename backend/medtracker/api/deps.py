"""
FastAPI Dependencies for Authentication, Storage and the AI service.

Key patterns:
1. get_current_user: Extracts and validates JWT, returns User object
2. Storage and AIService are constructed objects handed to routes through
   Depends(), so tests can substitute them via dependency_overrides
3. No global "current user" state - always pass user explicitly

Security model:
- JWT stored in HttpOnly cookie (recommended) or Authorization header
- List queries are scoped by user_id at the SQL level
- Ownership of a row fetched by id is checked here, not in storage
"""

from datetime import datetime, timedelta, timezone
from typing import Annotated

from fastapi import Cookie, Depends, Header, HTTPException, Request, status
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from medtracker.config import get_settings
from medtracker.db.models import Note, User
from medtracker.db.session import get_db
from medtracker.db.storage import Storage
from medtracker.services.ai_service import AIService

settings = get_settings()


# =============================================================================
# JWT UTILITIES
# =============================================================================


def create_access_token(user_id: str) -> str:
    """
    Create a JWT access token for a user.

    Token payload contains only the subject (user id) and expiry.
    """
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.jwt_expire_minutes)
    payload = {
        "sub": user_id,
        "exp": expire,
    }
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> str | None:
    """
    Decode and validate a JWT access token.

    Returns user_id if valid, None if invalid/expired.
    """
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
        )
    except JWTError:
        return None
    user_id = payload.get("sub")
    if not isinstance(user_id, str) or not user_id:
        return None
    return user_id


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================


DbSession = Annotated[AsyncSession, Depends(get_db)]


def get_storage(db: DbSession) -> Storage:
    """Storage bound to the request's database session."""
    return Storage(db)


def get_ai_service(request: Request) -> AIService:
    """The AI service the application was created with."""
    return request.app.state.ai_service


StorageDep = Annotated[Storage, Depends(get_storage)]
AIServiceDep = Annotated[AIService, Depends(get_ai_service)]


# =============================================================================
# AUTHENTICATION DEPENDENCIES
# =============================================================================


async def get_token_from_request(
    authorization: Annotated[str | None, Header()] = None,
    access_token: Annotated[str | None, Cookie()] = None,
) -> str:
    """
    Extract JWT token from request.

    Supports two methods (in order of preference):
    1. HttpOnly cookie named 'access_token'
    2. Authorization header: 'Bearer <token>'
    """
    if access_token:
        return access_token

    if authorization:
        parts = authorization.split()
        if len(parts) == 2 and parts[0].lower() == "bearer":
            return parts[1]

    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    token: Annotated[str, Depends(get_token_from_request)],
    storage: StorageDep,
) -> User:
    """
    Validate JWT and return the current authenticated user.

    Raises 401 if:
    - Token is missing, invalid, or expired
    - User no longer exists in database
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    user_id = decode_access_token(token)
    if user_id is None:
        raise credentials_exception

    user = await storage.get_user(user_id)
    if user is None:
        raise credentials_exception

    return user


CurrentUser = Annotated[User, Depends(get_current_user)]


# =============================================================================
# AUTHORIZATION HELPERS
# =============================================================================


async def get_owned_note_or_404(note_id: str, user: User, storage: Storage) -> Note:
    """
    Fetch a note by id and verify the caller owns it.

    Returns 404 for both missing and foreign notes so note ids of other
    users are not revealed.
    """
    note = await storage.get_note(note_id)
    if note is None or note.user_id != user.id:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Note not found")
    return note
