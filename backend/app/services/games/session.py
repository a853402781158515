"""State machine for a single game.

``GameSession`` only changes its own fields; scheduling timers, running the
bot and notifying players is the controller's job. Callers hold ``lock``
around every read-modify-write.
"""

import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from app.models import (
    ChatMessage,
    Difficulty,
    Human,
    Mark,
    Outcome,
    OutcomeReason,
    Participant,
    SessionKind,
    SessionStatus,
)
from .board import Board, empty_board, evaluate, is_full

REMATCH_VOTES_NEEDED = 2


@dataclass
class GameSession:
    id: str
    kind: SessionKind
    size: int
    participants: Dict[Mark, Participant]
    display_names: Dict[Mark, str]
    difficulty: Optional[Difficulty] = None
    board: Board = field(default_factory=list)
    current_mark: Mark = Mark.X
    status: SessionStatus = SessionStatus.PLAYING
    outcome: Optional[Outcome] = None
    turn_deadline: Optional[float] = None
    rematch_votes: Set[str] = field(default_factory=set)
    chat_log: List[ChatMessage] = field(default_factory=list)
    # Bumped on every transition that must invalidate pending timers/bot moves
    epoch: int = 0
    # Handle of the armed turn timer, if any
    turn_timer: Optional[object] = field(default=None, repr=False, compare=False)
    lock: threading.RLock = field(default_factory=threading.RLock, repr=False, compare=False)

    def __post_init__(self):
        if not self.board:
            self.board = empty_board(self.size)

    @property
    def is_multiplayer(self) -> bool:
        return self.kind is SessionKind.MULTIPLAYER

    @property
    def is_playing(self) -> bool:
        return self.status is SessionStatus.PLAYING

    @property
    def human_sids(self) -> List[str]:
        return [p.sid for p in self.participants.values() if isinstance(p, Human)]

    def mark_of(self, sid: str) -> Optional[Mark]:
        for mark, participant in self.participants.items():
            if isinstance(participant, Human) and participant.sid == sid:
                return mark
        return None

    def invalidate_pending(self) -> int:
        self.epoch += 1
        return self.epoch

    # ---- transitions ----

    def apply_move(self, sid: str, index: int) -> bool:
        mark = self.mark_of(sid)
        if mark is None:
            return False
        return self.place(mark, index)

    def place(self, mark: Mark, index: int) -> bool:
        """Write ``mark`` at ``index`` if the move is legal.

        Returns False, leaving the session untouched, when the game is over,
        it is not ``mark``'s turn, or the cell is out of range or taken.
        """
        if not self.is_playing or mark is not self.current_mark:
            return False
        if not 0 <= index < len(self.board) or self.board[index] is not None:
            return False

        self.board[index] = mark
        self.invalidate_pending()
        result = evaluate(self.board, self.size)
        if result is not None:
            self.finish(result.mark, OutcomeReason.NORMAL, result.line)
        elif is_full(self.board):
            self.finish(None, OutcomeReason.NORMAL)
        else:
            self.current_mark = self.current_mark.opposite()
        return True

    def finish(self, winner: Optional[Mark], reason: OutcomeReason, line=None) -> None:
        self.status = SessionStatus.FINISHED
        self.outcome = Outcome(winner, reason, tuple(line) if line else None)
        self.turn_deadline = None
        self.invalidate_pending()

    def expire_turn(self, epoch: int) -> bool:
        """Forfeit the player to move, unless the timer was superseded."""
        if not self.is_playing or epoch != self.epoch:
            return False
        self.finish(self.current_mark.opposite(), OutcomeReason.TIMEOUT)
        return True

    def vote_rematch(self, sid: str) -> bool:
        if not self.is_multiplayer or self.is_playing or self.mark_of(sid) is None:
            return False
        self.rematch_votes.add(sid)
        return True

    @property
    def rematch_ready(self) -> bool:
        return len(self.rematch_votes) >= REMATCH_VOTES_NEEDED

    def restart(self) -> None:
        """Fresh board with X to move; players swap marks and names."""
        self.board = empty_board(self.size)
        self.current_mark = Mark.X
        self.status = SessionStatus.PLAYING
        self.outcome = None
        self.rematch_votes.clear()
        self.participants = {
            Mark.X: self.participants[Mark.O],
            Mark.O: self.participants[Mark.X],
        }
        self.display_names = {
            Mark.X: self.display_names[Mark.O],
            Mark.O: self.display_names[Mark.X],
        }
        self.invalidate_pending()

    def add_chat(self, sid: str, text: str, max_length: int, now: Optional[float] = None) -> Optional[ChatMessage]:
        mark = self.mark_of(sid)
        if not self.is_multiplayer or not self.is_playing or mark is None:
            return None
        if now is None:
            now = time.time()
        message = ChatMessage(
            sender=self.display_names[mark],
            text=text[:max_length],
            timestamp=int(now * 1000),
        )
        self.chat_log.append(message)
        return message

    def forfeit(self, sid: str) -> Optional[Mark]:
        """``sid`` walks out of a running multiplayer game; returns the winner."""
        mark = self.mark_of(sid)
        if mark is None or not self.is_multiplayer or not self.is_playing:
            return None
        winner = mark.opposite()
        self.finish(winner, OutcomeReason.OPPONENT_LEFT)
        return winner

    def abandon(self, sid: str) -> None:
        self.rematch_votes.discard(sid)
        self.turn_deadline = None
        self.invalidate_pending()

    # ---- outbound payloads ----

    def board_payload(self):
        return [cell.value if cell is not None else None for cell in self.board]

    def names_payload(self):
        return {mark.value: name for mark, name in self.display_names.items()}

    def start_payload(self, your_mark: Mark):
        return {
            'session_id': self.id,
            'board': self.board_payload(),
            'size': self.size,
            'current_mark': self.current_mark.value,
            'your_mark': your_mark.value,
            'display_names': self.names_payload(),
            'kind': self.kind.value,
        }

    def restart_payload(self, your_mark: Mark):
        return {
            'board': self.board_payload(),
            'current_mark': self.current_mark.value,
            'your_mark': your_mark.value,
            'display_names': self.names_payload(),
        }

    def move_payload(self, last_move_index: int):
        return {
            'board': self.board_payload(),
            'current_mark': self.current_mark.value,
            'last_move_index': last_move_index,
        }

    def game_over_payload(self):
        payload = self.outcome.to_dict()
        payload['board'] = self.board_payload()
        return payload
