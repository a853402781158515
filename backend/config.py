import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    SOCKETIO_NAMESPACE = os.environ.get('SOCKETIO_NAMESPACE', '/ws')
    # Board dimensions a client may ask for
    BOARD_SIZES = tuple(int(s) for s in os.environ.get('BOARD_SIZES', '3,4,5,6').split(','))
    DEFAULT_BOARD_SIZE = int(os.environ.get('DEFAULT_BOARD_SIZE', '3'))
    DEFAULT_DIFFICULTY = os.environ.get('DEFAULT_DIFFICULTY', 'medium')
    # Multiplayer turn window (seconds)
    TURN_DURATION_SEC = int(os.environ.get('TURN_DURATION_SEC', '35'))
    # Bot "thinking time" range (ms)
    BOT_MOVE_DELAY_MIN_MS = int(os.environ.get('BOT_MOVE_DELAY_MIN_MS', '500'))
    BOT_MOVE_DELAY_MAX_MS = int(os.environ.get('BOT_MOVE_DELAY_MAX_MS', '1000'))
    CHAT_MAX_LENGTH = int(os.environ.get('CHAT_MAX_LENGTH', '200'))
    DISPLAY_NAME_MAX_LENGTH = int(os.environ.get('DISPLAY_NAME_MAX_LENGTH', '24'))
