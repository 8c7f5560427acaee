"""Middleware for logging and error handling."""

import logging
from typing import Any, Awaitable, Callable

from aiogram import BaseMiddleware
from aiogram.fsm.context import FSMContext
from aiogram.types import Message, TelegramObject

logger = logging.getLogger(__name__)


class LoggingMiddleware(BaseMiddleware):
    """Middleware for logging user actions."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        """Log user action."""
        if isinstance(event, Message):
            user_id = event.from_user.id if event.from_user else None
            username = event.from_user.username if event.from_user else None
            text = event.text or (event.caption or "")

            state: FSMContext | None = data.get("state")
            current_state = "NONE"
            if state:
                current_state = str(await state.get_state() or "NONE")

            logger.info(
                f"[USER {user_id}] (@{username}) [STATE: {current_state}] "
                f"Content: {event.content_type} - {text[:100]}"
            )

        return await handler(event, data)


class ErrorHandlerMiddleware(BaseMiddleware):
    """Middleware that tells the user something went wrong, then re-raises."""

    async def __call__(
        self,
        handler: Callable[[TelegramObject, dict[str, Any]], Awaitable[Any]],
        event: TelegramObject,
        data: dict[str, Any],
    ) -> Any:
        try:
            return await handler(event, data)
        except Exception as e:
            logger.error(f"Error in handler: {e}", exc_info=True)

            if isinstance(event, Message):
                try:
                    await event.answer(
                        "❌ An internal error occurred. "
                        "Please try again or use /start to restart."
                    )
                except Exception as answer_error:
                    logger.error(f"Failed to notify user: {answer_error}")

            # Re-raise to let aiogram handle it
            raise
