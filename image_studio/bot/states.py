"""FSM states for bot."""

from aiogram.fsm.state import State, StatesGroup

from image_studio.models import Mode


class StudioStates(StatesGroup):
    """Conversation states, one per transformation mode.

    The FSM state is the persisted record of the user's mode; the in-memory
    session follows it.
    """

    EDIT = State()  # Text messages are taken as the editing prompt
    PRODUCT_SHOT = State()  # Fixed prompt, text messages are not needed


MODE_STATES = {
    Mode.EDIT: StudioStates.EDIT,
    Mode.PRODUCT_SHOT: StudioStates.PRODUCT_SHOT,
}


def mode_for_state(state_name: str | None) -> Mode | None:
    """Map a stored FSM state name back to a Mode."""
    for mode, state in MODE_STATES.items():
        if state.state == state_name:
            return mode
    return None
