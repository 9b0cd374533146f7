"""Web sign-in routes."""

from fastapi import APIRouter, Form, Request
from fastapi.responses import HTMLResponse, RedirectResponse

from foodaid.core.auth import SESSION_COOKIE, get_current_web_session
from foodaid.core.config import SETTINGS
from foodaid.core.globals import TEMPLATES
from foodaid.schemas.auth import Session, SignInResult
from foodaid.services import AuthenticationError, IdentityService

ROUTER: APIRouter = APIRouter()


def _signed_in_response(result: SignInResult) -> RedirectResponse:
    response: RedirectResponse = RedirectResponse(
        url="/web/home", status_code=303
    )
    response.set_cookie(
        key=SESSION_COOKIE,
        value=result.token.access_token,
        httponly=True,
        max_age=SETTINGS.access_token_expire_minutes * 60,
        samesite="lax",
    )
    return response


@ROUTER.get("/login", response_class=HTMLResponse)
async def login_page(
    request: Request,
    error: str | None = None,
) -> HTMLResponse:
    """Render sign-in page.

    Args:
        request (Request): The incoming request.
        error (str | None): An optional error message to display.

    Returns:
        HTMLResponse: The rendered sign-in page.
    """
    return TEMPLATES.TemplateResponse(
        request,
        "pages/login.html",
        {"error": error, "app_id": SETTINGS.app_id},
    )


@ROUTER.post("/login", response_model=None)
async def login_submit(
    request: Request,
    token: str = Form(...),
) -> RedirectResponse | HTMLResponse:
    """Handle sign-in with a pre-issued token.

    Args:
        request (Request): The incoming request.
        token (str): The submitted token.

    Returns:
        RedirectResponse | HTMLResponse:
            A redirect to the home page on success,
            or the sign-in page with an error on failure.
    """
    try:
        result: SignInResult = IdentityService().sign_in_with_token(
            token.strip()
        )
    except AuthenticationError:
        return TEMPLATES.TemplateResponse(
            request,
            "pages/login.html",
            {
                "error": "Authentication failed. Check your token.",
                "app_id": SETTINGS.app_id,
            },
            status_code=401,
        )

    return _signed_in_response(result)


@ROUTER.post("/login/anonymous")
async def login_anonymous() -> RedirectResponse:
    """Sign in as a new anonymous citizen.

    Returns:
        RedirectResponse: A redirect to the citizen portal.
    """
    return _signed_in_response(IdentityService().sign_in_anonymously())


@ROUTER.get("/home")
async def home(request: Request) -> RedirectResponse:
    """Send the session to the surface of its role.

    Args:
        request (Request): The incoming request.

    Returns:
        RedirectResponse: A redirect to the dashboard, portal or sign-in.
    """
    session: Session | None = get_current_web_session(request)
    if session is None:
        return RedirectResponse(url="/web/login", status_code=303)
    if session.is_manager:
        return RedirectResponse(url="/web/dashboard", status_code=303)
    return RedirectResponse(url="/web/portal", status_code=303)


@ROUTER.get("/logout")
async def logout() -> RedirectResponse:
    """Handle sign-out.

    Returns:
        RedirectResponse: A redirect to the sign-in page.
    """
    response: RedirectResponse = RedirectResponse(
        url="/web/login", status_code=303
    )
    response.delete_cookie(key=SESSION_COOKIE)
    return response


@ROUTER.get("/")
async def web_root() -> RedirectResponse:
    """Redirect root to the role home.

    Returns:
        RedirectResponse: A redirect to the home page.
    """
    return RedirectResponse(url="/web/home", status_code=303)

