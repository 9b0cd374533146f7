"""Identity service - sign-in and token issuing."""

import logging
import secrets
import string
from datetime import timedelta

from foodaid.core.auth import create_access_token, session_from_token
from foodaid.core.models import UserRole
from foodaid.schemas.auth import Session, SignInResult, Token

LOGGER: logging.Logger = logging.getLogger(__name__)

CITIZEN_ID_ALPHABET: str = string.ascii_lowercase + string.digits


class AuthenticationError(Exception):
    """Raised when a session cannot be established."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message)


def generate_citizen_id(length: int = 7) -> str:
    """Generate an identifier for an anonymous citizen.

    Args:
        length (int): Length of the random suffix. Defaults to 7.

    Returns:
        str: An identifier such as ``citizen-k3x9a2b``.
    """
    suffix: str = "".join(
        secrets.choice(CITIZEN_ID_ALPHABET) for _ in range(length)
    )
    return f"citizen-{suffix}"


class IdentityService:
    """Service class for identity operations."""

    @staticmethod
    def issue_token(
        user_id: str,
        role: UserRole,
        expires_delta: timedelta | None = None,
        via: str = "token",
    ) -> Token:
        """Issue a signed token for an identity.

        Args:
            user_id (str): The identifier carried in the ``sub`` claim.
            role (UserRole): The role carried in the ``role`` claim.
            expires_delta (timedelta | None): Optional token lifetime.
            via (str): How the session was established.

        Returns:
            Token: The access token.
        """
        return Token(
            access_token=create_access_token(
                {"sub": user_id, "role": role.value, "via": via},
                expires_delta,
            )
        )

    def sign_in_with_token(self, token: str) -> SignInResult:
        """Sign in with a pre-issued token.

        Args:
            token (str): The pre-issued JWT.

        Returns:
            SignInResult: The token and the session it carries.
        """
        session: Session | None = session_from_token(token)
        if session is None:
            LOGGER.warning("Rejected sign-in with an invalid token")
            raise AuthenticationError("Invalid or expired token")

        LOGGER.info(
            "Signed in %s as %s", session.user_id, session.role.value
        )
        return SignInResult(token=Token(access_token=token), session=session)

    def sign_in_anonymously(self) -> SignInResult:
        """Sign in as a new anonymous citizen.

        Returns:
            SignInResult: The issued token and the new citizen session.
        """
        user_id: str = generate_citizen_id()
        token: Token = self.issue_token(
            user_id, UserRole.CITIZEN, via="anonymous"
        )
        LOGGER.info("Signed in anonymous citizen %s", user_id)
        return SignInResult(
            token=token,
            session=Session(
                user_id=user_id, role=UserRole.CITIZEN, via="anonymous"
            ),
        )
