import asyncio
import logging.config
import os
from contextlib import asynccontextmanager, suppress
from typing import Any

import sentry_sdk
import structlog
import uvicorn
from asgi_correlation_id import CorrelationIdMiddleware
from asgi_correlation_id.context import correlation_id
from fastapi import FastAPI
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration
from structlog.stdlib import LoggerFactory

from dc_registry.config import logging_config
from dc_registry.config.app_config import AppConfig, get_config
from dc_registry.middleware.error_handler import ErrorHandlerMiddleware, register_error_handlers
from dc_registry.routers.data_centers import create_router as create_data_centers_router
from dc_registry.routers.health import router as health
from dc_registry.routers.root import router as root
from dc_registry.services.data_center_service import DataCenterService, create_client
from dc_registry.services.db_monitor import check_database, monitor_database
from dc_registry.services.health_service import HealthState

VERSION = '1.0.0'


def add_correlation(
        logger: logging.Logger, method_name: str, event_dict: dict[str, Any]) \
        -> dict[str, Any]:
    """processor function for structlog that adds correlation ID to log messages """
    if request_id := correlation_id.get():
        event_dict["request_id"] = request_id
    return event_dict


sentry_dsn = os.environ.get('SENTRY_DSN')

if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,

        integrations=[
            StarletteIntegration(
                transaction_style="endpoint",
                failed_request_status_codes=[range(500, 599)],
            ),
            FastApiIntegration(
                transaction_style="endpoint",
                failed_request_status_codes=[range(500, 599)],
            ),
        ]
    )

structlog.configure(
    logger_factory=LoggerFactory(), processors=[
        add_correlation,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M.%S"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=None,
    cache_logger_on_first_use=True
)

logging.config.dictConfig(logging_config.config)
logger = structlog.get_logger()


def create_app(
        config: AppConfig | None = None,
        health_state: HealthState | None = None,
        data_center_service: DataCenterService | None = None,
) -> FastAPI:
    """
    Assembles the registry application.

    When no `data_center_service` is given, one backed by MongoDB is created on startup together with a task
    keeping `health_state` up to date with database connectivity.
    """
    config = config or get_config()
    health_state = health_state or HealthState()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        client = None
        monitor = None
        if app.state.data_center_service is None:
            client = create_client(config.mongo)
            service = DataCenterService(client[config.mongo.database][config.mongo.collection])
            app.state.data_center_service = service
            on_connected = service.ensure_indexes
            if await check_database(client, health_state):
                await service.ensure_indexes()
                on_connected = None
            else:
                logger.warning("Database not reachable on startup, unique centerId index deferred until it is")
            monitor = asyncio.create_task(
                monitor_database(client, health_state, config.db_health_interval, on_connected)
            )

        yield

        if monitor is not None:
            monitor.cancel()
            with suppress(asyncio.CancelledError):
                await monitor
        if client is not None:
            client.close()
            logger.info("Database client closed")

    if not config.auth.enabled:
        logger.warning("Auth is disabled, protected endpoints are open to all callers")

    app = FastAPI(
        title='Data Center Registry API',
        version=VERSION,
        lifespan=lifespan,
        docs_url=config.openapi_path,
        redoc_url=None,
    )
    app.state.config = config
    app.state.health = health_state
    app.state.data_center_service = data_center_service

    register_error_handlers(app)
    # Order matters here: the error handler sits inside the correlation id middleware so error responses
    # carry the request id too
    app.add_middleware(ErrorHandlerMiddleware, sanitize_server_errors=config.sanitize_server_errors)
    app.add_middleware(CorrelationIdMiddleware)

    app.include_router(root)
    app.include_router(health)
    app.include_router(create_data_centers_router(config.auth))

    return app


def main() -> None:
    config = get_config()
    logger.info(f"Starting Data Center Registry on port {config.server_port}")
    uvicorn.run(create_app(config), host='0.0.0.0', port=config.server_port, log_config=None)


if __name__ == '__main__':
    main()
