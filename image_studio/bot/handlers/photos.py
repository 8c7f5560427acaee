"""Handler for image uploads."""

import logging

from aiogram import Bot, F, Router
from aiogram.fsm.context import FSMContext
from aiogram.types import Message

from image_studio.bot import texts
from image_studio.bot.keyboards import studio_keyboard
from image_studio.bot.sessions import SessionRegistry
from image_studio.utils.file_handler import download_document, download_photo

logger = logging.getLogger(__name__)

router = Router()


@router.message(F.photo | F.document)
async def handle_upload(
    message: Message, bot: Bot, state: FSMContext, sessions: SessionRegistry
) -> None:
    """Take a photo or an image document as the new source image."""
    user_id = message.from_user.id if message.from_user else 0
    logger.info(f"[USER {user_id}] Received upload: {message.content_type}")
    studio = await sessions.load(user_id, state)

    if studio.state.busy:
        await message.answer(texts.ALREADY_BUSY)
        return

    try:
        if message.photo:
            uploaded = await download_photo(bot, message)
        else:
            uploaded = await download_document(bot, message)
    except Exception as e:
        logger.error(f"[USER {user_id}] Error downloading upload: {e}", exc_info=True)
        await message.answer(texts.UPLOAD_FAILED)
        return

    if uploaded is None:
        await message.answer(texts.NOT_AN_IMAGE)
        return

    request_state = studio.upload(uploaded.raw, uploaded.media_type, uploaded.name)
    await message.answer(
        texts.status_text(request_state),
        reply_markup=studio_keyboard(request_state),
        parse_mode="HTML",
    )
