"""Handlers for /start, /help, /status and /reset."""

import logging

from aiogram import Router
from aiogram.filters import Command, CommandStart
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from image_studio.bot import texts
from image_studio.bot.keyboards import studio_keyboard
from image_studio.bot.sessions import SessionRegistry
from image_studio.bot.states import StudioStates

logger = logging.getLogger(__name__)

router = Router()


@router.message(CommandStart())
@router.message(Command("help"))
async def cmd_start(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    """Greet the user and show the studio controls."""
    user_id = message.from_user.id if message.from_user else 0
    studio = await sessions.load(user_id, state)

    await message.answer(texts.WELCOME, parse_mode="HTML")
    await message.answer(
        texts.status_text(studio.state),
        reply_markup=studio_keyboard(studio.state),
        parse_mode="HTML",
    )


@router.message(Command("status"))
async def cmd_status(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    """Show the current session state."""
    user_id = message.from_user.id if message.from_user else 0
    studio = await sessions.load(user_id, state)
    await message.answer(
        texts.status_text(studio.state),
        reply_markup=studio_keyboard(studio.state),
        parse_mode="HTML",
    )


@router.message(Command("reset"))
async def cmd_reset(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    """Forget the uploaded image, prompt and result."""
    user_id = message.from_user.id if message.from_user else 0
    studio = sessions.reset(user_id)
    await state.set_state(StudioStates.EDIT)
    logger.info(f"[USER {user_id}] Session reset")

    await message.answer(
        texts.status_text(studio.state),
        reply_markup=studio_keyboard(studio.state),
        parse_mode="HTML",
    )
