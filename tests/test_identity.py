"""Tests for sign-in and claims-based roles."""

import re
from datetime import timedelta

import pytest

from foodaid.core.auth import create_access_token, resolve_role
from foodaid.core.models import UserRole
from foodaid.services.identity_service import (
    AuthenticationError,
    IdentityService,
    generate_citizen_id,
)


def test_sign_in_with_manager_token() -> None:
    token = IdentityService.issue_token("ops-lead", UserRole.MANAGER)

    result = IdentityService().sign_in_with_token(token.access_token)

    assert result.session.user_id == "ops-lead"
    assert result.session.role == UserRole.MANAGER
    assert result.session.is_manager
    assert result.session.via == "token"


def test_role_comes_from_claim_not_identifier_prefix() -> None:
    token = IdentityService.issue_token("manager-impostor", UserRole.CITIZEN)

    session = IdentityService().sign_in_with_token(token.access_token).session

    assert session.role == UserRole.CITIZEN
    assert not session.is_manager


def test_token_without_role_claim_is_citizen() -> None:
    token = create_access_token({"sub": "manager-no-claim"})

    session = IdentityService().sign_in_with_token(token).session

    assert session.role == UserRole.CITIZEN


@pytest.mark.parametrize(
    "claims, expected",
    [
        ({"role": "manager"}, UserRole.MANAGER),
        ({"role": "citizen"}, UserRole.CITIZEN),
        ({"role": "superuser"}, UserRole.CITIZEN),
        ({}, UserRole.CITIZEN),
    ],
)
def test_resolve_role(claims: dict, expected: UserRole) -> None:
    assert resolve_role(claims) == expected


def test_invalid_token_is_rejected() -> None:
    with pytest.raises(AuthenticationError):
        IdentityService().sign_in_with_token("not-a-jwt")


def test_expired_token_is_rejected() -> None:
    token = IdentityService.issue_token(
        "ops-lead", UserRole.MANAGER, expires_delta=timedelta(minutes=-5)
    )

    with pytest.raises(AuthenticationError):
        IdentityService().sign_in_with_token(token.access_token)


def test_anonymous_sign_in_issues_citizen_identity() -> None:
    result = IdentityService().sign_in_anonymously()

    assert re.fullmatch(r"citizen-[a-z0-9]{7}", result.session.user_id)
    assert result.session.role == UserRole.CITIZEN
    assert result.session.via == "anonymous"

    again = IdentityService().sign_in_with_token(result.token.access_token)
    assert again.session.user_id == result.session.user_id
    assert again.session.via == "anonymous"


def test_generated_citizen_ids_differ() -> None:
    assert len({generate_citizen_id() for _ in range(20)}) == 20
