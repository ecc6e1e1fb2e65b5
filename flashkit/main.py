"""API entrypoint and composition."""

from fastapi import FastAPI

from flashkit.config import get_settings
from flashkit.errors import register_exception_handlers
from flashkit.logging import configure_logging
from flashkit.middleware import install_middlewares
from flashkit.routes import health, home
from flashkit.routes import infra as infra_routes


def create_app(*, force_debug: bool | None = None) -> FastAPI:
    """
    Create and configure a FastAPI application instance.

    force_debug:
        - None: use settings.debug.
        - True: enable debug mode.
        - False: force non-debug mode (for 500.html testing).

    Missing or empty signing secrets fail here, not per request.
    """
    # Clear cached settings to ensure fresh config on app creation (tests with monkeypatch)
    get_settings.cache_clear()
    settings = get_settings()
    configure_logging()

    debug = settings.debug if force_debug is None else bool(force_debug)
    app = FastAPI(title=settings.app_name, debug=debug)

    # Middlewares
    install_middlewares(app, settings)

    # Include routers
    app.include_router(health.router)
    app.include_router(home.router)
    app.include_router(infra_routes.router)

    # Error handlers
    register_exception_handlers(app)

    return app
