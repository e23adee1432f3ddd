import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import get_settings, Settings
from .core.logging import init_logging, request_context_middleware
from .core import errors
from .routers import convert, health, status
from .services.currencies import load_supported_currencies
from .services.rates.base import RateProvider
from .services.rates.cache_service import RateBook
from .services.rates.providers import make_rate_provider
from .services.rates.scheduler import RefreshScheduler

logger = logging.getLogger("lira_checker")


def create_app(
    settings_override: Settings | None = None,
    provider_override: RateProvider | None = None,
) -> FastAPI:
    """Application factory.

    settings_override: pass an already constructed Settings instance for tests
    to isolate environment. Falls back to cached get_settings().
    provider_override: rate provider to use instead of the one named by
    settings.exchange_rate_provider (tests inject fakes here).
    """
    settings = settings_override or get_settings()
    # Initialize logging early
    init_logging(debug=settings.debug)

    # Startup data errors are fatal
    supported = load_supported_currencies(settings.supported_currencies_path)
    unknown = [c for c in settings.tracked_currencies if c not in supported]
    if unknown:
        raise ValueError(f"Tracked currencies are not supported: {', '.join(unknown)}")

    provider = provider_override or make_rate_provider(
        settings.exchange_rate_provider, settings
    )
    book = RateBook(settings.tracked_currencies)
    scheduler = RefreshScheduler(
        provider, book, settings.refresh_interval_seconds, supported=supported
    )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run the refresh loop for the lifetime of the server."""
        if settings.enable_scheduler:
            scheduler.start()
        else:
            logger.info("rate refresh disabled by configuration")
        try:
            yield
        finally:
            await scheduler.stop()
            await provider.aclose()

    app = FastAPI(
        title=settings.app_name,
        debug=settings.debug,
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.supported_currencies = supported
    app.state.rate_book = book
    app.state.scheduler = scheduler
    app.state.rate_provider = provider

    # Middleware (request id / structured logging)
    app.middleware("http")(request_context_middleware)

    # Error handlers
    app.add_exception_handler(StarletteHTTPException, errors.not_found_handler)
    app.add_exception_handler(RequestValidationError, errors.validation_error_handler)
    app.add_exception_handler(errors.NoDataYet, errors.no_data_handler)
    app.add_exception_handler(errors.BadRequestError, errors.bad_request_handler)
    app.add_exception_handler(
        errors.InternalFormattingError, errors.formatting_error_handler
    )
    app.add_exception_handler(Exception, errors.server_error_handler)

    # Routers
    app.include_router(health.router)
    app.include_router(status.router)
    app.include_router(convert.router)

    @app.get("/")
    async def root():
        return {"message": settings.app_name, "version": settings.version}

    return app
