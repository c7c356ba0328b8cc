"""API route registration."""

from fastapi import FastAPI

from src.api.routes import (
    analytics,
    auth,
    carousel,
    categories,
    files,
    products,
    suppliers,
    system,
)


def include_api_routes(app: FastAPI) -> None:
    """Attach all API routers to the application."""

    app.include_router(system.router)
    app.include_router(auth.router)
    app.include_router(suppliers.router)
    app.include_router(files.router)
    app.include_router(products.router)
    app.include_router(categories.router)
    app.include_router(carousel.router)
    app.include_router(analytics.router)
