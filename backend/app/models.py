from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple, Union


class Mark(str, Enum):
    X = 'X'
    O = 'O'

    def opposite(self) -> 'Mark':
        return Mark.O if self is Mark.X else Mark.X


class Difficulty(str, Enum):
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'


class SessionKind(str, Enum):
    SINGLE_PLAYER = 'single'
    MULTIPLAYER = 'multiplayer'


class SessionStatus(str, Enum):
    PLAYING = 'playing'
    FINISHED = 'finished'


class OutcomeReason(str, Enum):
    NORMAL = 'normal'
    TIMEOUT = 'timeout'
    OPPONENT_LEFT = 'opponent_left'


@dataclass(frozen=True)
class Human:
    """A participant reachable through a Socket.IO connection."""
    sid: str


@dataclass(frozen=True)
class Bot:
    """The built-in computer opponent."""


BOT = Bot()

Participant = Union[Human, Bot]


@dataclass(frozen=True)
class WinResult:
    mark: Mark
    line: Tuple[int, ...]


@dataclass(frozen=True)
class Outcome:
    winner: Optional[Mark]  # None for a draw
    reason: OutcomeReason = OutcomeReason.NORMAL
    winning_line: Optional[Tuple[int, ...]] = None

    @property
    def is_draw(self) -> bool:
        return self.winner is None

    def to_dict(self):
        return {
            'winner': self.winner.value if self.winner is not None else 'draw',
            'reason': self.reason.value,
            'winning_line': list(self.winning_line) if self.winning_line else None,
        }


@dataclass(frozen=True)
class ChatMessage:
    sender: str
    text: str
    timestamp: int  # epoch ms

    def to_dict(self):
        return {
            'sender': self.sender,
            'text': self.text,
            'timestamp': self.timestamp,
        }


@dataclass(frozen=True)
class WaitingEntry:
    sid: str
    size: int
    display_name: Optional[str] = None
