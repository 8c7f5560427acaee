"""Storage configuration for FSM."""

import logging

from aiogram.fsm.storage.base import BaseStorage
from aiogram.fsm.storage.memory import MemoryStorage
from aiogram.fsm.storage.redis import RedisStorage
from redis.asyncio import Redis

from image_studio.config import RedisConfig

logger = logging.getLogger(__name__)


def create_storage(config: RedisConfig) -> BaseStorage:
    """Create FSM storage.

    Returns:
        RedisStorage if a Redis host is configured, MemoryStorage otherwise
    """
    if not config.host:
        logger.info("Redis host not configured, using in-memory FSM storage")
        return MemoryStorage()

    redis_client = Redis(
        host=config.host,
        port=config.port,
        db=config.db,
        decode_responses=False,  # aiogram RedisStorage expects bytes
    )

    storage = RedisStorage(redis=redis_client)
    logger.info(f"Redis storage initialized: {config.host}:{config.port}/{config.db}")
    return storage
