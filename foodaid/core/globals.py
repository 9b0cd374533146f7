"""Global variables."""

import typing as t
from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES = Jinja2Templates(directory=Path(__file__).parent.parent / "templates")

OPENAPI_TAGS = [
    {
        "name": "Identity",
        "description": "Sign-in with a pre-issued token or anonymously",
    },
    {
        "name": "Inventory",
        "description": "Warehouse stock and restocking",
    },
    {
        "name": "Requests",
        "description": (
            "Public submission and manager approval/shipping of aid requests"
        ),
    },
    {
        "name": "Distribution Records",
        "description": "Distribution history, filtered to the citizen's own",
    },
    {
        "name": "Feeds",
        "description": "Live collection snapshots as Server-Sent Events",
    },
    {
        "name": "Health",
        "description": "Application health check endpoints",
    },
]

# Offered by the public form while the inventory is still empty
DEFAULT_REQUEST_ITEMS: t.Tuple[str, ...] = (
    "Canned Beans",
    "Fresh Produce Mix",
    "Dry Pasta",
    "Dairy (UHT Milk)",
    "Rice",
    "Cereal",
)
