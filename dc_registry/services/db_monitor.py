import asyncio
from typing import Awaitable, Callable

import structlog
from motor.motor_asyncio import AsyncIOMotorClient

from dc_registry.models.health_status import Status
from dc_registry.services.health_service import HealthState

logger = structlog.get_logger()


async def check_database(client: AsyncIOMotorClient, health: HealthState) -> bool:
    """
    Pings the database and records the outcome in the health state.

    :return: True if the database responded
    """
    try:
        await client.admin.command('ping')
    except Exception as error:
        logger.error(f"Database ping failed: {error.__class__.__name__} {error}")
        health.set(Status.ERROR)
        return False
    health.set(Status.OK)
    return True


async def monitor_database(
        client: AsyncIOMotorClient,
        health: HealthState,
        interval: float,
        on_connected: Callable[[], Awaitable[None]] | None = None,
) -> None:
    """
    Re-checks the database every `interval` seconds until cancelled.

    `on_connected` is awaited after a successful ping until it completes once, e.g. to create indexes that could
    not be created while the database was unreachable at startup.
    """
    while True:
        await asyncio.sleep(interval)
        if await check_database(client, health) and on_connected is not None:
            try:
                await on_connected()
                on_connected = None
            except Exception as error:
                logger.error(f"Database setup after reconnect failed: {error.__class__.__name__} {error}")
