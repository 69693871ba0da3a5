from sqlalchemy import text

from brewstock.core.errors import InventoryError
from brewstock.core.observability import (
    http_exception_handler,
    inventory_exception_handler,
    request_logging_middleware,
    setup_observability,
    unhandled_exception_handler,
    validation_exception_handler,
)
from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from brewstock.core.config import settings
from brewstock.db.session import engine
from brewstock.routers import alerts, analysis, catalog, dashboard, location_types, locations, stock, transactions

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description=(
        "Inventory API for coffee shops.\n\n"
        "Quick test flow:\n"
        "1. Create a location (`POST /locations`) and an item (`POST /items`).\n"
        "2. Set stock with `PUT /stock`.\n"
        "3. Read `/dashboard`, `/alerts` and `/analysis`."
    ),
    swagger_ui_parameters={
        "displayRequestDuration": True,
        "defaultModelsExpandDepth": 1,
    },
    openapi_tags=[
        {"name": "health", "description": "Service status and quick links."},
        {"name": "locations", "description": "Shop locations and item assignments."},
        {"name": "location-types", "description": "Location type registry."},
        {"name": "categories", "description": "Item categories."},
        {"name": "suppliers", "description": "Supplier directory."},
        {"name": "items", "description": "Inventory item catalog and stock thresholds."},
        {"name": "stock", "description": "Stock levels per item and location."},
        {"name": "dashboard", "description": "Stock status overview, location health and category summaries."},
        {"name": "analysis", "description": "Restock and consumption trends with CSV export."},
        {"name": "alerts", "description": "Low-stock alerts with CSV export."},
        {"name": "transactions", "description": "Transaction log with filtering and CSV export."},
    ],
)

setup_observability()
app.middleware("http")(request_logging_middleware)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(InventoryError, inventory_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

cors_origins = settings.cors_origins or ["http://localhost:5173"]
allow_all_origins = "*" in cors_origins
env_value = settings.env.lower().strip()
allow_origin_regex = settings.cors_origin_regex

if (
    not allow_origin_regex
    and env_value in {"dev", "development", "staging", "stage"}
):
    allow_origin_regex = r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$"

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_all_origins else cors_origins,
    allow_origin_regex=allow_origin_regex,
    allow_credentials=not allow_all_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(locations.router)
app.include_router(location_types.router)
app.include_router(catalog.categories_router)
app.include_router(catalog.suppliers_router)
app.include_router(catalog.items_router)
app.include_router(stock.router)
app.include_router(dashboard.router)
app.include_router(analysis.router)
app.include_router(alerts.router)
app.include_router(transactions.router)


@app.get("/", tags=["health"])
def root():
    return {
        "app": settings.app_name,
        "docs": "/docs",
        "redoc": "/redoc",
        "health": "/health",
        "ready": "/ready",
    }


@app.get("/health", tags=["health"])
def health():
    return {"ok": True}


@app.get("/ready", tags=["health"])
def ready():
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        return {"ok": False}
    return {"ok": True}
