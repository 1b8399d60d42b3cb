"""Litestar application for the bot access check API.

Run with ``litestar --app app:app run`` or any ASGI server.
"""

from __future__ import annotations

import logging

from litestar import Litestar, Request, Response
from litestar.config.cors import CORSConfig
from litestar.di import Provide
from litestar.exceptions import HTTPException, ValidationException
from litestar.logging import LoggingConfig
from litestar.middleware.rate_limit import RateLimitConfig
from litestar.status_codes import HTTP_500_INTERNAL_SERVER_ERROR

from config import Settings, get_settings
from controllers.bot_access import CrawlerAccessProber, InvalidUrlError
from controllers.health import HealthController
from controllers.site import SiteController
from controllers.tools import ToolsController, invalid_body_response

logger = logging.getLogger(__name__)


def _http_error(request: Request, exc: HTTPException) -> Response:
    return Response(
        content={"message": exc.detail},
        status_code=exc.status_code,
        headers=exc.headers,
    )


def _validation_error(request: Request, exc: ValidationException) -> Response:
    issues = exc.extra if isinstance(exc.extra, list) else [exc.extra]
    return invalid_body_response([i for i in issues if i])


def _invalid_url(request: Request, exc: InvalidUrlError) -> Response:
    return invalid_body_response([{"loc": ["url"], "msg": str(exc)}])


def _internal_error(request: Request, exc: Exception) -> Response:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return Response(
        content={"message": str(exc) or "Internal Server Error"},
        status_code=HTTP_500_INTERNAL_SERVER_ERROR,
    )


def create_app(
    settings: Settings | None = None,
    prober: CrawlerAccessProber | None = None,
) -> Litestar:
    """Build the application.

    Args:
        settings: Defaults to ``get_settings()``.
        prober: Prober shared by all requests. Built from ``settings`` if
            omitted; tests pass one with a mock transport.
    """
    settings = settings or get_settings()
    prober = prober or CrawlerAccessProber(settings)

    def provide_prober() -> CrawlerAccessProber:
        return prober

    rate_limit = RateLimitConfig(
        rate_limit=("minute", settings.rate_limit_per_minute),
        exclude=["/healthz"],
    )

    return Litestar(
        route_handlers=[SiteController, HealthController, ToolsController],
        dependencies={"prober": Provide(provide_prober, sync_to_thread=False)},
        middleware=[rate_limit.middleware],
        cors_config=CORSConfig(
            allow_origins=settings.cors_origins, allow_credentials=True
        ),
        exception_handlers={
            HTTPException: _http_error,
            ValidationException: _validation_error,
            InvalidUrlError: _invalid_url,
            Exception: _internal_error,
        },
        logging_config=LoggingConfig(
            root={"level": settings.log_level, "handlers": ["queue_listener"]},
            log_exceptions="debug",
        ),
        debug=settings.debug,
    )


app = create_app()
