"""Inline keyboards for the studio."""

from aiogram.types import InlineKeyboardButton, InlineKeyboardMarkup

from image_studio.models import Mode, RequestState

MODE_CALLBACK_PREFIX = "mode:"
GENERATE_CALLBACK = "generate"

MODE_LABELS = {
    Mode.EDIT: "🪄 Magic Editor",
    Mode.PRODUCT_SHOT: "👕 Product Shots",
}


def studio_keyboard(state: RequestState) -> InlineKeyboardMarkup:
    """Mode toggle plus a Generate button that only shows when submitting is allowed."""
    mode_row = []
    for mode, label in MODE_LABELS.items():
        text = f"• {label}" if state.mode is mode else label
        mode_row.append(
            InlineKeyboardButton(text=text, callback_data=f"{MODE_CALLBACK_PREFIX}{mode.value}")
        )

    rows = [mode_row]
    if state.can_submit:
        rows.append([InlineKeyboardButton(text="✨ Generate Image", callback_data=GENERATE_CALLBACK)])
    return InlineKeyboardMarkup(inline_keyboard=rows)
