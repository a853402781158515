import logging
import threading
from collections import deque
from typing import Deque, Optional

from app.models import WaitingEntry
from .controller import GameController
from .session import GameSession


class Matchmaker:
    """FIFO queue of players waiting for an opponent with the same board size."""

    def __init__(self, controller: GameController, gateway, logger=None):
        self.controller = controller
        self.gateway = gateway
        self.logger = logger or logging.getLogger(__name__)
        self._lock = threading.Lock()
        self._queue: Deque[WaitingEntry] = deque()

    def find_match(self, sid: str, size: int, display_name: Optional[str] = None) -> Optional[GameSession]:
        """Pair ``sid`` with the oldest live entry of the same size.

        Entries whose connection has gone away are dropped as they are met.
        When nobody is available the requester joins the back of the queue.
        """
        requester = WaitingEntry(sid=sid, size=size, display_name=display_name)
        with self._lock:
            self._remove(sid)
            opponent = self._pop_live_opponent(requester)
            if opponent is not None:
                # The lock is held until both sids are registered, so an
                # opponent's withdraw/disconnect always finds the new session.
                return self.controller.create_multiplayer(size, opponent, requester)
            self._queue.append(requester)
            self.logger.info(f"[queue] sid={sid} size={size} waiting={len(self._queue)}")
        self.gateway.emit(sid, 'waiting_for_opponent', {'size': size})
        return None

    def cancel(self, sid: str) -> bool:
        if not self.withdraw(sid):
            return False
        self.gateway.emit(sid, 'matchmaking_cancelled', {})
        return True

    def withdraw(self, sid: str) -> bool:
        with self._lock:
            return self._remove(sid)

    def waiting_count(self) -> int:
        with self._lock:
            return len(self._queue)

    def _pop_live_opponent(self, requester: WaitingEntry) -> Optional[WaitingEntry]:
        while True:
            match = next(
                (e for e in self._queue if e.size == requester.size and e.sid != requester.sid),
                None,
            )
            if match is None:
                return None
            self._queue.remove(match)
            if self.gateway.is_connected(match.sid):
                return match
            self.logger.info(f"[queue-stale] sid={match.sid} size={match.size} dropped")

    def _remove(self, sid: str) -> bool:
        for entry in list(self._queue):
            if entry.sid == sid:
                self._queue.remove(entry)
                return True
        return False
