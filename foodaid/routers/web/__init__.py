"""Web frontend routes package."""

from fastapi import APIRouter

from foodaid.routers.web import auth, dashboard, portal, request_form

# Create main router
ROUTER: APIRouter = APIRouter(prefix="/web", include_in_schema=False)

# Include all sub-routers
ROUTER.include_router(auth.ROUTER)
ROUTER.include_router(dashboard.ROUTER)
ROUTER.include_router(portal.ROUTER)
ROUTER.include_router(request_form.ROUTER)
