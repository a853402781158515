import random
import string
import threading
from typing import Dict, Optional

from .session import GameSession


class SessionRegistry:
    """Live sessions by id, and the session each connection is playing in.

    One registry per app; it is held by the controller and never shared
    through module globals, so tests can build isolated instances.
    """

    def __init__(self, rng=random):
        self._lock = threading.Lock()
        self._rng = rng
        self._sessions: Dict[str, GameSession] = {}
        self._sid_to_session: Dict[str, str] = {}
        self._display_names: Dict[str, str] = {}

    def new_session_id(self, length: int = 6) -> str:
        """Generate a short session code not currently in use."""
        with self._lock:
            while True:
                code = ''.join(self._rng.choices(string.ascii_uppercase + string.digits, k=length))
                if code not in self._sessions:
                    return code

    def add(self, session: GameSession) -> None:
        with self._lock:
            for sid in session.human_sids:
                bound = self._sid_to_session.get(sid)
                if bound is not None and bound != session.id:
                    raise ValueError(f"connection {sid} is already in session {bound}")
            self._sessions[session.id] = session
            for sid in session.human_sids:
                self._sid_to_session[sid] = session.id

    def get(self, session_id: str) -> Optional[GameSession]:
        with self._lock:
            return self._sessions.get(session_id)

    def session_for(self, sid: str) -> Optional[GameSession]:
        with self._lock:
            session_id = self._sid_to_session.get(sid)
            return self._sessions.get(session_id) if session_id else None

    def release(self, sid: str) -> bool:
        """Unbind ``sid``; drop its session once nobody maps to it.

        Returns True when the session was destroyed.
        """
        with self._lock:
            session_id = self._sid_to_session.pop(sid, None)
            if session_id is None:
                return False
            if session_id in self._sid_to_session.values():
                return False
            return self._sessions.pop(session_id, None) is not None

    def session_count(self) -> int:
        with self._lock:
            return len(self._sessions)

    def set_display_name(self, sid: str, name: str) -> None:
        with self._lock:
            self._display_names[sid] = name

    def display_name(self, sid: str) -> Optional[str]:
        with self._lock:
            return self._display_names.get(sid)

    def forget(self, sid: str) -> None:
        with self._lock:
            self._display_names.pop(sid, None)
