import logging
import uuid
from datetime import datetime, timedelta
from typing import Callable, Dict, List, Optional, Tuple

from .game import GameController

logger = logging.getLogger(__name__)


class SessionStore:
    """
    In-memory map of browser session ids to their game controllers.

    A session expires once it has gone unused for the timeout; every access
    through get() keeps it alive, and create() sweeps out the expired ones.
    """

    def __init__(self, factory: Callable[[], GameController], timeout_minutes: int):
        self.factory = factory
        self.timeout = timedelta(minutes=timeout_minutes)
        self._sessions: Dict[str, List] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    def get(self, session_id: Optional[str]) -> Optional[GameController]:
        if not session_id or session_id not in self._sessions:
            return None
        entry = self._sessions[session_id]
        now = datetime.now()
        if now - entry[1] > self.timeout:
            del self._sessions[session_id]
            logger.info(f"Session expired: {session_id}")
            return None
        entry[1] = now
        return entry[0]

    def create(self) -> Tuple[str, GameController]:
        self.sweep()
        new_id = str(uuid.uuid4())
        game = self.factory()
        self._sessions[new_id] = [game, datetime.now()]
        logger.info(f"New session: {new_id}")
        return new_id, game

    def sweep(self) -> int:
        now = datetime.now()
        expired = [
            key
            for key, (_, last_seen) in self._sessions.items()
            if now - last_seen > self.timeout
        ]
        for key in expired:
            del self._sessions[key]
        if expired:
            logger.info(f"Dropped {len(expired)} expired sessions")
        return len(expired)

    def drop(self, session_id: Optional[str]):
        if session_id in self._sessions:
            del self._sessions[session_id]
