"""Tests for the server-rendered pages."""

import typing as t

from httpx import AsyncClient

from foodaid.core.auth import SESSION_COOKIE
from foodaid.core.models import RequestStatus
from tests.conftest import (
    add_inventory,
    add_record,
    add_request,
    read_inventory,
    read_request,
)


def cookie(token: str) -> t.Dict[str, str]:
    return {"Cookie": f"{SESSION_COOKIE}={token}"}


async def test_root_redirects_to_home(client: AsyncClient) -> None:
    response = await client.get("/")

    assert response.status_code == 303
    assert response.headers["location"] == "/web/home"


async def test_home_without_session_goes_to_login(
    client: AsyncClient,
) -> None:
    response = await client.get("/web/home")

    assert response.headers["location"] == "/web/login"


async def test_login_page(client: AsyncClient) -> None:
    response = await client.get("/web/login")

    assert response.status_code == 200
    assert "Continue anonymously" in response.text


async def test_login_with_bad_token(client: AsyncClient) -> None:
    response = await client.post("/web/login", data={"token": "nope"})

    assert response.status_code == 401
    assert "Authentication failed" in response.text


async def test_login_with_manager_token(
    client: AsyncClient, manager_token: str
) -> None:
    response = await client.post("/web/login", data={"token": manager_token})

    assert response.status_code == 303
    assert response.headers["set-cookie"].startswith(f"{SESSION_COOKIE}=")


async def test_anonymous_login_sets_cookie(client: AsyncClient) -> None:
    response = await client.post("/web/login/anonymous")

    assert response.status_code == 303
    assert response.headers["location"] == "/web/home"
    assert response.headers["set-cookie"].startswith(f"{SESSION_COOKIE}=")


async def test_home_routes_by_role(
    client: AsyncClient, manager_token: str, citizen_token: str
) -> None:
    manager = await client.get("/web/home", headers=cookie(manager_token))
    citizen = await client.get("/web/home", headers=cookie(citizen_token))

    assert manager.headers["location"] == "/web/dashboard"
    assert citizen.headers["location"] == "/web/portal"


async def test_citizen_is_sent_away_from_dashboard(
    client: AsyncClient, citizen_token: str
) -> None:
    response = await client.get("/web/dashboard", headers=cookie(citizen_token))

    assert response.status_code == 303
    assert response.headers["location"] == "/web/portal"


async def test_manager_dashboard(
    client: AsyncClient, manager_token: str
) -> None:
    await add_inventory("Dairy (UHT Milk)", 30)
    await add_request("Dairy (UHT Milk)", 5, organization="Shelter A")

    response = await client.get("/web/dashboard", headers=cookie(manager_token))

    assert response.status_code == 200
    assert "Distribution Portal Dashboard" in response.text
    assert "Low Stock" in response.text
    assert "Shelter A" in response.text


async def test_dashboard_restock(
    client: AsyncClient, manager_token: str
) -> None:
    item_id = await add_inventory("Canned Beans", 450)

    response = await client.post(
        f"/web/inventory/{item_id}/restock", headers=cookie(manager_token)
    )

    assert response.headers["location"] == "/web/dashboard"
    assert (await read_inventory(item_id)).quantity == 460


async def test_citizen_cannot_restock_from_web(
    client: AsyncClient, citizen_token: str
) -> None:
    item_id = await add_inventory("Canned Beans", 450)

    await client.post(
        f"/web/inventory/{item_id}/restock", headers=cookie(citizen_token)
    )

    assert (await read_inventory(item_id)).quantity == 450


async def test_dashboard_ship_failure_shows_error(
    client: AsyncClient, manager_token: str
) -> None:
    await add_inventory("Dry Pasta", 5)
    request_id = await add_request(
        "Dry Pasta", 10, status=RequestStatus.APPROVED
    )

    response = await client.post(
        f"/web/requests/{request_id}/status",
        data={"status": "Shipped"},
        headers=cookie(manager_token),
    )

    assert response.status_code == 303
    assert "error=" in response.headers["location"]
    assert (await read_request(request_id)).status == RequestStatus.APPROVED


async def test_portal_shows_own_records(
    client: AsyncClient, citizen_token: str
) -> None:
    await add_record("citizen-alice01", location="Local Center B")
    await add_record("citizen-bob0002", location="Secret Depot")

    response = await client.get("/web/portal", headers=cookie(citizen_token))

    assert response.status_code == 200
    assert "Local Center B" in response.text
    assert "Secret Depot" not in response.text


async def test_portal_requires_sign_in(client: AsyncClient) -> None:
    response = await client.get("/web/portal")

    assert response.headers["location"] == "/web/login"


async def test_request_form_submit(client: AsyncClient) -> None:
    await add_inventory("Rice", 100)

    page = await client.get("/web/request")
    response = await client.post(
        "/web/request",
        data={
            "organization": "Shelter A",
            "item": "Rice",
            "amount": "20",
            "contact_email": "shelter@example.org",
        },
    )

    assert page.status_code == 200
    assert "Rice" in page.text
    assert response.status_code == 200
    assert "Request submitted" in response.text


async def test_request_form_rejects_invalid_input(
    client: AsyncClient,
) -> None:
    response = await client.post(
        "/web/request",
        data={
            "organization": "Shelter A",
            "item": "Rice",
            "amount": "0",
            "contact_email": "shelter@example.org",
        },
    )

    assert response.status_code == 422
    assert "Please fill in every field" in response.text


async def test_request_form_rejects_non_numeric_amount(
    client: AsyncClient,
) -> None:
    response = await client.post(
        "/web/request",
        data={
            "organization": "Shelter A",
            "item": "Rice",
            "amount": "twenty",
            "contact_email": "shelter@example.org",
        },
    )

    assert response.status_code == 422
    assert "Please fill in every field" in response.text
    assert 'value="twenty"' in response.text
