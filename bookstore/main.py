"""
# `bookstore/main.py` - Application entry point

Creates the FastAPI app, configures logging and CORS, and mounts the routers.

**Public routers:** `/auth`, `/products`, `/product`, `/cart`, `/checkout`, `/orders`

**Admin routers (prefix `/admin`):** `/products`, `/orders`, `/dashboard/stats`.
Every admin route is protected with `get_current_admin`.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from bookstore.config import get_settings
from bookstore.routers import admin_dashboard, auth, carts, checkout, orders, products


def configure_logging(level: str, fmt: str) -> None:
    logging.basicConfig(level=level.upper(), format=fmt)


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level, settings.log_format)

    app = FastAPI(
        title=settings.project_name,
        description="Backend API for the book shop: catalog, cart, checkout, orders and admin dashboard.",
        version=settings.project_version,
        debug=settings.debug,
        redirect_slashes=False,
    )

    # Configure CORS (allow front-end domain or all origins as specified)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Public routers
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(products.stock_router)
    app.include_router(carts.router)
    app.include_router(checkout.router)
    app.include_router(orders.router)

    # Admin routers (with prefix /admin)
    app.include_router(products.admin_router, prefix="/admin")
    app.include_router(orders.admin_router, prefix="/admin")
    app.include_router(admin_dashboard.router, prefix="/admin")
    return app


app = create_app()

# Run the app directly with uvicorn (for development)
if __name__ == "__main__":
    import uvicorn
    uvicorn.run("bookstore.main:app", host="0.0.0.0", port=8000, reload=True)
