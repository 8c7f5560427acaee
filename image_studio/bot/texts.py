"""User-facing message texts."""

import html

from image_studio.models import Mode, RequestState

WELCOME = (
    "🎨 <b>Gemini Image Studio</b>\n"
    "AI-powered image editing and product photography.\n\n"
    "1️⃣ Pick a mode below.\n"
    "2️⃣ Send an image (PNG, JPG or WEBP up to 10MB). "
    "Send it as a file to skip Telegram compression.\n"
    "3️⃣ In Magic Editor mode, describe the edit in a message.\n"
    "4️⃣ Press <b>Generate Image</b> or send /generate.\n\n"
    "Commands: /edit, /product, /generate, /status, /reset"
)

MODE_DESCRIPTIONS = {
    Mode.EDIT: (
        "🪄 <b>Magic Editor</b>\n"
        "Send your editing prompt as a message, "
        "e.g. <i>Add a retro filter, make it black and white...</i>"
    ),
    Mode.PRODUCT_SHOT: (
        "👕 <b>Product Shots</b>\n"
        "This tool transforms photos of clothing into professional product shots. "
        "It creates a clean, white background and a front-facing view, perfect for e-commerce."
    ),
}

GENERATING = "⏳ AI is thinking..."
ALREADY_BUSY = "⏳ Still generating the previous image, please wait."
RESULT_CAPTION = "✨ Generated"
PRODUCT_MODE_TEXT_HINT = (
    "ℹ️ Product Shots mode uses a fixed prompt. Switch to /edit to use your own instruction."
)
UPLOAD_FAILED = "❌ Failed to read the image file."
NOT_AN_IMAGE = "📸 Please send an image (PNG, JPG or WEBP)."


def status_text(state: RequestState) -> str:
    """Summary of the session, shown under the studio keyboard."""
    lines = [MODE_DESCRIPTIONS[state.mode], ""]

    if state.source_image is not None:
        lines.append(f"🖼 Loaded: <b>{html.escape(state.source_image.name)}</b>")
    else:
        lines.append("🖼 No image uploaded yet.")

    if state.mode is Mode.EDIT:
        prompt = state.instruction.strip()
        lines.append(f"📝 Prompt: <i>{html.escape(prompt)}</i>" if prompt else "📝 No prompt yet.")

    if state.busy:
        lines.append(GENERATING)
    elif state.error_message:
        lines.append(f"❌ {html.escape(state.error_message)}")
    return "\n".join(lines)
