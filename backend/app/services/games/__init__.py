"""Game domain services: board rules, the bot, sessions and matchmaking.

This package contains the game engine that the Socket.IO handlers drive,
keeping transport concerns separated from core game mechanics.
"""

from .controller import GameController
from .matchmaker import Matchmaker
from .registry import SessionRegistry
from .scheduler import BackgroundScheduler

__all__ = ['GameController', 'Matchmaker', 'SessionRegistry', 'BackgroundScheduler']
