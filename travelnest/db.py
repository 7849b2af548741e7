from functools import lru_cache

from loguru import logger
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.server_api import ServerApi

from travelnest import settings

USERS = "users"
ROOMS = "rooms"
BOOKINGS = "booking"


@lru_cache(maxsize=1)
def get_client() -> AsyncMongoClient:
    return AsyncMongoClient(
        settings.db_url,
        server_api=ServerApi("1", strict=True, deprecation_errors=True),
    )


def get_database() -> AsyncDatabase:
    return get_client()[settings.db_name]


async def ping() -> bool:
    """Round-trip to the deployment. Startup continues even when it fails."""
    try:
        await get_client().admin.command("ping")
    except Exception:
        logger.opt(exception=True).warning(
            "MongoDB ping failed, requests will error until it is reachable"
        )
        return False
    logger.info("Pinged MongoDB deployment at {}", settings.db_name)
    return True


async def close() -> None:
    if get_client.cache_info().currsize:
        await get_client().close()
        get_client.cache_clear()
