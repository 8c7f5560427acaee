"""Entry point for running bot as module."""

from image_studio.bot.main import main

if __name__ == "__main__":
    import asyncio

    asyncio.run(main())
