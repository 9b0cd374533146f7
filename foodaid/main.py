"""FastAPI application entry point."""

import logging
import typing as t
from contextlib import asynccontextmanager

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from foodaid.core.config import SETTINGS
from foodaid.core.database import ASYNC_SESSION_MAKER, close_db, init_db
from foodaid.core.globals import OPENAPI_TAGS
from foodaid.routers import api_router, web_router
from foodaid.services.init_service import initialize_database
from foodaid.services.inventory_checker import check_inventory_task

logging.basicConfig(
    level=logging.DEBUG if SETTINGS.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
LOGGER: logging.Logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI) -> t.AsyncGenerator[None, None]:
    """Application lifespan events.

    args:
        _ (FastAPI): The FastAPI application instance.
    """
    LOGGER.info("Starting FoodAid Portal for app %s...", SETTINGS.app_id)
    await init_db()
    LOGGER.info("Document collections initialized")

    async with ASYNC_SESSION_MAKER() as session:
        await initialize_database(session)

    scheduler: AsyncIOScheduler = AsyncIOScheduler()
    scheduler.add_job(
        check_inventory_task,
        trigger=IntervalTrigger(
            hours=SETTINGS.check_inventory_interval_hours
        ),
        id="inventory_check",
        name="Check for low or expiring stock",
        replace_existing=True,
    )
    scheduler.start()
    LOGGER.info(
        "Inventory checker scheduled to run every %d hours",
        SETTINGS.check_inventory_interval_hours,
    )

    await check_inventory_task()

    yield

    LOGGER.info("Shutting down FoodAid Portal...")
    scheduler.shutdown(wait=False)
    await close_db()
    LOGGER.info("Cleanup complete")


APPLICATION: FastAPI = FastAPI(
    title=SETTINGS.app_name,
    description=(
        "FoodAid Portal - Coordinate food-aid inventory, requests "
        "and distributions"
    ),
    version=SETTINGS.app_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    openapi_tags=OPENAPI_TAGS,
)

APPLICATION.add_middleware(
    CORSMiddleware,
    allow_origins=SETTINGS.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

APPLICATION.include_router(api_router)
APPLICATION.include_router(web_router)


@APPLICATION.get("/", include_in_schema=False)
async def root() -> RedirectResponse:
    """Root endpoint - redirect to web interface.

    Returns:
        RedirectResponse: A redirect response to the role home page.
    """
    return RedirectResponse(url="/web/home", status_code=303)


@APPLICATION.get("/health", tags=["Health"])
async def health_check() -> t.Dict[str, str]:
    """Health check endpoint for monitoring.

    Returns:
        t.Dict[str, str]: A dictionary indicating the health status.
    """
    return {"status": "healthy"}
