"""Main bot file."""

import asyncio
import logging
import sys

from aiogram import Bot, Dispatcher
from dotenv import load_dotenv

from image_studio.bot.handlers import gen, mode, photos, start
from image_studio.bot.middleware import ErrorHandlerMiddleware, LoggingMiddleware
from image_studio.bot.sessions import SessionRegistry
from image_studio.bot.storage import create_storage
from image_studio.config import AppConfig, get_config
from image_studio.services.gemini_client import GeminiClient

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s · %(levelname)s · %(name)s · %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

logger = logging.getLogger(__name__)


def create_dispatcher(config: AppConfig) -> Dispatcher:
    """Build the dispatcher with storage, middleware, routers and sessions."""
    dp = Dispatcher(storage=create_storage(config.redis))

    # Register middleware (order matters!)
    dp.message.middleware(LoggingMiddleware())
    dp.message.middleware(ErrorHandlerMiddleware())
    dp.callback_query.middleware(ErrorHandlerMiddleware())

    # Commands first, free-text prompt handlers last
    dp.include_router(start.router)
    dp.include_router(mode.router)
    dp.include_router(photos.router)
    dp.include_router(gen.router)

    gateway = GeminiClient(config.gemini)
    dp["sessions"] = SessionRegistry(
        gateway=gateway,
        config=config.studio,
        product_shot_prompt=config.gemini.product_shot_prompt,
    )
    return dp


async def main() -> None:
    """Main entry point."""
    try:
        config = get_config()

        log_level = getattr(logging, config.logging.level.upper(), logging.INFO)
        logging.getLogger().setLevel(log_level)

        logger.info("Starting Gemini Image Studio bot...")

        bot = Bot(token=config.telegram.bot_token)
        dp = create_dispatcher(config)

        logger.info("Bot initialized successfully")

        await dp.start_polling(bot, allowed_updates=dp.resolve_used_update_types())

    except KeyboardInterrupt:
        logger.info("Bot stopped by user")
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)
    finally:
        logger.info("Shutting down...")


def run() -> None:
    """Console script entry point."""
    asyncio.run(main())


if __name__ == "__main__":
    run()
