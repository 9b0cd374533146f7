"""Pydantic schemas for identity and sessions."""

import typing as t

from pydantic import BaseModel, Field

from foodaid.core.models import UserRole


class Token(BaseModel):
    """JWT token response."""

    access_token: str
    token_type: str = "bearer"


class TokenSignIn(BaseModel):
    """Pre-issued token presented for sign-in."""

    token: str = Field(..., min_length=1)


class Session(BaseModel):
    """Identity of the current session."""

    user_id: str
    role: UserRole
    via: t.Literal["token", "anonymous"] = "token"

    @property
    def is_manager(self) -> bool:
        """Whether the session may mutate inventory and requests."""
        return self.role == UserRole.MANAGER

    @property
    def is_citizen(self) -> bool:
        """Whether the session only sees its own records."""
        return self.role == UserRole.CITIZEN


class SignInResult(BaseModel):
    """Result of a sign-in."""

    token: Token
    session: Session
