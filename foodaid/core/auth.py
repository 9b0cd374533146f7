"""Token utilities and session dependencies."""

import typing as t
from datetime import datetime, timedelta, timezone

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from foodaid.core.config import SETTINGS
from foodaid.core.models import UserRole
from foodaid.schemas.auth import Session

SESSION_COOKIE: str = "session_token"

HTTP_BEARER: HTTPBearer = HTTPBearer(auto_error=False)


def create_access_token(
    data: t.Dict[str, t.Any], expires_delta: timedelta | None = None
) -> str:
    """Create a JWT access token.

    Args:
        data (t.Dict[str, t.Any]):
            The claims to encode in the token.
        expires_delta (timedelta | None):
            Optional expiration time for the token.

    Returns:
        str: The encoded JWT token.
    """
    to_encode: t.Dict[str, t.Any] = data.copy()
    expire: datetime
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=SETTINGS.access_token_expire_minutes
        )
    to_encode.update({"exp": expire})
    return str(
        jwt.encode(to_encode, SETTINGS.secret_key, algorithm=SETTINGS.algorithm)
    )


def decode_access_token(token: str) -> t.Dict[str, t.Any] | None:
    """Decode and verify a JWT access token.

    Args:
        token (str): The JWT token.

    Returns:
        t.Dict[str, t.Any] | None:
            The verified claims, or None if the token is invalid or expired.
    """
    try:
        return dict(
            jwt.decode(
                token, SETTINGS.secret_key, algorithms=[SETTINGS.algorithm]
            )
        )
    except JWTError:
        return None


def resolve_role(claims: t.Mapping[str, t.Any]) -> UserRole:
    """Resolve the session role from the token's ``role`` claim.

    Args:
        claims (t.Mapping[str, t.Any]): Verified token claims.

    Returns:
        UserRole: The role, citizen unless the claim names another role.
    """
    try:
        return UserRole(claims.get("role", UserRole.CITIZEN.value))
    except ValueError:
        return UserRole.CITIZEN


def session_from_token(token: str) -> Session | None:
    """Build a session from a JWT token.

    Args:
        token (str): The JWT token.

    Returns:
        Session | None: The session, or None if the token is not valid.
    """
    claims: t.Dict[str, t.Any] | None = decode_access_token(token)
    if claims is None:
        return None

    user_id: str | None = claims.get("sub")
    if not user_id:
        return None

    return Session(
        user_id=user_id,
        role=resolve_role(claims),
        via="anonymous" if claims.get("via") == "anonymous" else "token",
    )


async def get_optional_session(
    request: Request,
    credentials: t.Annotated[
        HTTPAuthorizationCredentials | None, Depends(HTTP_BEARER)
    ],
) -> Session | None:
    """Get the current session from a Bearer header or the session cookie.

    Args:
        request (Request): The incoming request.
        credentials (HTTPAuthorizationCredentials | None):
            The Bearer credentials.

    Returns:
        Session | None: The session, or None if not signed in.
    """
    token: str | None = None
    if credentials is not None:
        token = credentials.credentials
    else:
        token = request.cookies.get(SESSION_COOKIE)

    if token is None:
        return None

    return session_from_token(token)


async def get_current_session(
    session: t.Annotated[Session | None, Depends(get_optional_session)],
) -> Session:
    """Get the current signed-in session.

    Args:
        session (Session | None): The optional session.

    Returns:
        Session: The signed-in session.
    """
    if session is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return session


async def require_manager(
    session: t.Annotated[Session, Depends(get_current_session)],
) -> Session:
    """Ensure the current session has the manager role.

    Args:
        session (Session): The signed-in session.

    Returns:
        Session: The manager session.
    """
    if not session.is_manager:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only managers can perform this action.",
        )
    return session


def get_current_web_session(request: Request) -> Session | None:
    """Get current session from the session cookie.

    Args:
        request (Request): The incoming request.

    Returns:
        Session | None:
            The current session or None if not signed in.
    """
    token: str | None = request.cookies.get(SESSION_COOKIE)
    if token is None:
        return None
    return session_from_token(token)
