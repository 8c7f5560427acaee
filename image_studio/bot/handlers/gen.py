"""Handlers for the editing prompt and /generate."""

import logging

from aiogram import F, Router
from aiogram.filters import Command
from aiogram.fsm.context import FSMContext
from aiogram.types import BufferedInputFile, CallbackQuery, Message

from image_studio.bot import texts
from image_studio.bot.keyboards import GENERATE_CALLBACK, studio_keyboard
from image_studio.bot.sessions import SessionRegistry
from image_studio.errors import GENERIC_UPSTREAM_MESSAGE, DecodeError
from image_studio.models import Mode
from image_studio.services.studio import ImageStudio
from image_studio.utils.file_handler import decode_data_url

logger = logging.getLogger(__name__)

router = Router()


@router.message(Command("generate"))
async def cmd_generate(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    user_id = message.from_user.id if message.from_user else 0
    await process_generation(message, user_id, await sessions.load(user_id, state))


@router.callback_query(F.data == GENERATE_CALLBACK)
async def on_generate_button(
    callback: CallbackQuery, state: FSMContext, sessions: SessionRegistry
) -> None:
    user_id = callback.from_user.id
    await callback.answer()
    if isinstance(callback.message, Message):
        await process_generation(callback.message, user_id, await sessions.load(user_id, state))


@router.message(F.text & ~F.text.startswith("/"))
async def handle_text(message: Message, state: FSMContext, sessions: SessionRegistry) -> None:
    """Take a text message as the editing prompt in Magic Editor mode."""
    user_id = message.from_user.id if message.from_user else 0
    studio = await sessions.load(user_id, state)

    if studio.state.mode is Mode.PRODUCT_SHOT:
        await message.answer(texts.PRODUCT_MODE_TEXT_HINT)
        return

    request_state = studio.set_instruction(message.text.strip())
    logger.info(f"[USER {user_id}] Prompt set: {request_state.instruction[:100]}")

    await message.answer(
        texts.status_text(request_state),
        reply_markup=studio_keyboard(request_state),
        parse_mode="HTML",
    )


async def process_generation(message: Message, user_id: int, studio: ImageStudio) -> None:
    """Submit the session and render its outcome into the chat."""
    if studio.state.busy:
        logger.info(f"[USER {user_id}] Generate pressed while busy")
        await message.answer(texts.ALREADY_BUSY)
        return

    progress = None
    if studio.state.can_submit:
        progress = await message.answer(texts.GENERATING)

    logger.info(f"[USER {user_id}] [MODE: {studio.state.mode.value}] Starting generation")
    request_state = await studio.submit()

    if progress is not None:
        await progress.delete()

    if request_state.result_data_url is not None:
        try:
            media_type, raw = decode_data_url(request_state.result_data_url)
        except DecodeError as e:
            logger.error(f"[USER {user_id}] Undisplayable result: {e.detail}")
            await message.answer(f"❌ {e.user_message}")
            return

        if not raw:
            logger.error(f"[USER {user_id}] Gemini returned an empty image payload")
            await message.answer(f"❌ {GENERIC_UPSTREAM_MESSAGE}")
            return

        extension = media_type.split("/")[-1]
        await message.answer_photo(
            BufferedInputFile(raw, filename=f"generated.{extension}"),
            caption=texts.RESULT_CAPTION,
        )
        logger.info(f"[USER {user_id}] Result sent: {len(raw)} bytes")

    await message.answer(
        texts.status_text(request_state),
        reply_markup=studio_keyboard(request_state),
        parse_mode="HTML",
    )
