import logging

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .db.dal import Database
from .db.migrate import apply_migrations
from .routers import (
    agencies,
    agents,
    countries,
    currencies,
    health,
    itineraries,
    provinces,
    quotations,
    rates,
    service_prices,
)
from .services.rates import rate_store

logger = logging.getLogger("itinerary_ace")


def create_app(settings_override: Settings | None = None) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment (e.g., temp DB). Falls back to cached get_settings().
    """
    settings = settings_override or get_settings()
    if settings.db_path is None:
        settings.init_post_load()
    init_logging(debug=settings.debug)

    try:
        apply_migrations(settings.db_path)  # type: ignore[arg-type]
    except Exception:
        logger.exception("failed to apply migrations on startup")
        raise

    db = Database(settings.db_path)  # type: ignore[arg-type]
    if settings.refresh_rates_on_startup:
        report = rate_store.refresh_rates(db, settings)
        logger.info("startup rate refresh finished with status %s", report.status)
    else:
        rate_store.seed_default_rates(db)

    app = FastAPI(
        title=settings.app_name, debug=settings.debug, version=settings.version
    )
    app.state.settings = settings

    app.middleware("http")(request_context_middleware)

    app.add_exception_handler(StarletteHTTPException, errors.http_error_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(Exception, errors.server_error_handler)

    app.include_router(health.router)
    app.include_router(countries.router)
    app.include_router(provinces.router)
    app.include_router(currencies.router)
    app.include_router(rates.router)
    app.include_router(service_prices.router)
    app.include_router(agencies.router)
    app.include_router(agents.router)
    app.include_router(quotations.router)
    app.include_router(itineraries.router)

    @app.get("/")
    async def root():
        return {"message": "Itinerary Ace API", "version": settings.version}

    return app


app = create_app()
