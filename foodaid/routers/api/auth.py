"""Identity endpoints."""

import typing as t

from fastapi import APIRouter, Depends, HTTPException, status

from foodaid.core.auth import get_current_session
from foodaid.schemas.auth import Session, SignInResult, TokenSignIn
from foodaid.services import AuthenticationError, IdentityService

ROUTER = APIRouter(prefix="/auth", tags=["Identity"])


@ROUTER.post("/token", response_model=SignInResult)
async def sign_in_with_token(sign_in: TokenSignIn) -> SignInResult:
    """Sign in with a pre-issued token.

    Args:
        sign_in (TokenSignIn): The pre-issued token.

    Returns:
        SignInResult: The token and the session it carries.
    """
    try:
        return IdentityService().sign_in_with_token(sign_in.token)
    except AuthenticationError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc


@ROUTER.post("/anonymous", response_model=SignInResult)
async def sign_in_anonymously() -> SignInResult:
    """Sign in as a new anonymous citizen.

    Returns:
        SignInResult: The issued token and the citizen session.
    """
    return IdentityService().sign_in_anonymously()


@ROUTER.get("/me", response_model=Session)
async def get_current_session_info(
    session: t.Annotated[Session, Depends(get_current_session)],
) -> Session:
    """Get the current session.

    Args:
        session (Session): The signed-in session.

    Returns:
        Session: The session identity and role.
    """
    return session
