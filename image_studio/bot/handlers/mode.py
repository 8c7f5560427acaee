"""Handlers for switching between Magic Editor and Product Shots."""

import logging

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import CallbackQuery, Message

from image_studio.bot import texts
from image_studio.bot.keyboards import MODE_CALLBACK_PREFIX, studio_keyboard
from image_studio.bot.sessions import SessionRegistry
from image_studio.bot.states import MODE_STATES
from image_studio.models import Mode

logger = logging.getLogger(__name__)

router = Router()


async def switch_mode(user_id: int, mode: Mode, state: FSMContext, sessions: SessionRegistry):
    """Apply a mode switch to both the session and the FSM."""
    studio = sessions.get(user_id)
    studio.set_mode(mode)
    await state.set_state(MODE_STATES[mode])
    logger.info(f"[USER {user_id}] Mode switched to {mode.value}")
    return studio.state


@router.message(Command("edit"))
async def cmd_edit(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    user_id = message.from_user.id if message.from_user else 0
    request_state = await switch_mode(user_id, Mode.EDIT, state, sessions)
    await message.answer(
        texts.status_text(request_state),
        reply_markup=studio_keyboard(request_state),
        parse_mode="HTML",
    )


@router.message(Command("product"))
async def cmd_product(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    user_id = message.from_user.id if message.from_user else 0
    request_state = await switch_mode(user_id, Mode.PRODUCT_SHOT, state, sessions)
    await message.answer(
        texts.status_text(request_state),
        reply_markup=studio_keyboard(request_state),
        parse_mode="HTML",
    )


@router.callback_query(F.data.startswith(MODE_CALLBACK_PREFIX))
async def on_mode_button(callback: CallbackQuery, state: FSMContext, sessions: SessionRegistry) -> None:
    """Handle the inline mode toggle."""
    user_id = callback.from_user.id
    raw_mode = (callback.data or "")[len(MODE_CALLBACK_PREFIX) :]
    try:
        mode = Mode(raw_mode)
    except ValueError:
        logger.warning(f"[USER {user_id}] Unknown mode in callback: {raw_mode}")
        await callback.answer()
        return

    request_state = await switch_mode(user_id, mode, state, sessions)
    await callback.answer()

    if isinstance(callback.message, Message):
        try:
            await callback.message.edit_text(
                texts.status_text(request_state),
                reply_markup=studio_keyboard(request_state),
                parse_mode="HTML",
            )
        except TelegramBadRequest as e:
            # Same mode pressed twice: nothing to update
            logger.debug(f"Mode message not edited: {e}")
