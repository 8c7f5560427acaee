"""Per-user studio sessions."""

import logging
import time
from typing import Callable

from aiogram.fsm.context import FSMContext

from image_studio.bot.states import MODE_STATES, mode_for_state
from image_studio.config import StudioConfig
from image_studio.services.studio import ImageGateway, ImageStudio

logger = logging.getLogger(__name__)


class SessionRegistry:
    """Keeps one ImageStudio per Telegram user, in process memory.

    Images are never persisted. Sessions idle for longer than
    ``session_ttl_seconds`` are dropped, and the least recently used ones go
    first once ``max_sessions`` is reached. Sessions with a request in flight
    are never evicted.
    """

    def __init__(
        self,
        gateway: ImageGateway,
        config: StudioConfig,
        product_shot_prompt: str,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.gateway = gateway
        self.config = config
        self.product_shot_prompt = product_shot_prompt
        self.clock = clock
        # user_id -> (studio, last access); ordered from least to most recently used
        self._sessions: dict[int, tuple[ImageStudio, float]] = {}

    def get(self, user_id: int) -> ImageStudio:
        now = self.clock()
        entry = self._sessions.pop(user_id, None)
        self._evict(now)

        if entry is None:
            studio = ImageStudio(self.gateway, self.config, self.product_shot_prompt)
            logger.info(f"[USER {user_id}] New studio session")
        else:
            studio = entry[0]
        self._sessions[user_id] = (studio, now)
        return studio

    async def load(self, user_id: int, state: FSMContext) -> ImageStudio:
        """Get the session with its mode taken from the stored FSM state.

        The FSM state may outlive the session (Redis storage across restarts
        or an evicted session), so the stored mode wins.
        """
        studio = self.get(user_id)
        stored_mode = mode_for_state(await state.get_state())
        if stored_mode is None:
            await state.set_state(MODE_STATES[studio.state.mode])
        elif stored_mode is not studio.state.mode:
            logger.info(f"[USER {user_id}] Restoring mode {stored_mode.value} from FSM state")
            studio.set_mode(stored_mode)
        return studio

    def reset(self, user_id: int) -> ImageStudio:
        """Drop the user's session and start a fresh one.

        An in-flight request keeps running against the old session.
        """
        self._sessions.pop(user_id, None)
        return self.get(user_id)

    def _evict(self, now: float) -> None:
        expired = [
            user_id
            for user_id, (studio, last_seen) in self._sessions.items()
            if now - last_seen > self.config.session_ttl_seconds and not studio.state.busy
        ]
        for user_id in expired:
            del self._sessions[user_id]
            logger.info(f"[USER {user_id}] Idle session dropped")

        # Leave room for the session about to be (re)inserted
        for user_id, (studio, _) in list(self._sessions.items()):
            if len(self._sessions) < self.config.max_sessions:
                break
            if studio.state.busy:
                continue
            del self._sessions[user_id]
            logger.info(f"[USER {user_id}] Session evicted, limit {self.config.max_sessions} reached")

    def __len__(self) -> int:
        return len(self._sessions)

    def __contains__(self, user_id: int) -> bool:
        return user_id in self._sessions
