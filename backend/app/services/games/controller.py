import logging
import random
import time

from app.models import BOT, Bot, Difficulty, Human, Mark, SessionKind, WaitingEntry
from .bot import choose_move
from .registry import SessionRegistry
from .session import REMATCH_VOTES_NEEDED, GameSession


class GameController:
    """Session operations that reach outside the session itself.

    Each public method resolves the caller's session, mutates it under the
    session lock and fans the resulting events out through the gateway.
    Requests that do not apply (no session, wrong turn, wrong phase) are
    dropped without an error event.
    """

    def __init__(self, registry: SessionRegistry, gateway, scheduler, config, logger=None, rng=None):
        self.registry = registry
        self.gateway = gateway
        self.scheduler = scheduler
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self.rng = rng or random.Random()

    # ---- connection-level ----

    def set_display_name(self, sid: str, name) -> str:
        max_len = int(self.config.get('DISPLAY_NAME_MAX_LENGTH', 24))
        name = (name if isinstance(name, str) else '').strip()[:max_len]
        if not name:
            name = f"Player{sid[:4]}"
        self.registry.set_display_name(sid, name)
        self.gateway.emit(sid, 'display_name_confirmed', {'name': name})
        return name

    def disconnect(self, sid: str) -> None:
        self.leave(sid)
        self.registry.forget(sid)

    # ---- session creation ----

    def start_single_player(self, sid: str, size: int, difficulty: Difficulty) -> GameSession:
        self.leave(sid)
        session = GameSession(
            id=self.registry.new_session_id(),
            kind=SessionKind.SINGLE_PLAYER,
            size=size,
            difficulty=difficulty,
            participants={Mark.X: Human(sid), Mark.O: BOT},
            display_names={Mark.X: 'You', Mark.O: 'Bot'},
        )
        self.registry.add(session)
        self.logger.info(f"[single] session={session.id} sid={sid} size={size} difficulty={difficulty.value}")
        self.gateway.emit(sid, 'game_started', session.start_payload(Mark.X))
        return session

    def create_multiplayer(self, size: int, first: WaitingEntry, second: WaitingEntry) -> GameSession:
        for entry in (first, second):
            self.leave(entry.sid)
        x_entry, o_entry = (first, second) if self.rng.random() < 0.5 else (second, first)
        session = GameSession(
            id=self.registry.new_session_id(),
            kind=SessionKind.MULTIPLAYER,
            size=size,
            participants={Mark.X: Human(x_entry.sid), Mark.O: Human(o_entry.sid)},
            display_names={
                Mark.X: x_entry.display_name or 'Player 1',
                Mark.O: o_entry.display_name or 'Player 2',
            },
        )
        with session.lock:
            self.registry.add(session)
            self.logger.info(f"[match] session={session.id} size={size} X={x_entry.sid} O={o_entry.sid}")
            for mark, sid in ((Mark.X, x_entry.sid), (Mark.O, o_entry.sid)):
                self.gateway.emit(sid, 'game_started', session.start_payload(mark))
            self.start_turn_timer(session)
        return session

    # ---- in-game intents ----

    def make_move(self, sid: str, cell_index: int) -> None:
        session = self.registry.session_for(sid)
        if session is None:
            return
        with session.lock:
            if not session.apply_move(sid, cell_index):
                self.logger.debug(f"[move-reject] session={session.id} sid={sid} cell={cell_index}")
                return
            self.logger.info(f"[move] session={session.id} sid={sid} cell={cell_index}")
            self._after_move(session, cell_index)

    def vote_rematch(self, sid: str) -> None:
        session = self.registry.session_for(sid)
        if session is None:
            return
        with session.lock:
            if not session.vote_rematch(sid):
                return
            self._broadcast(session, 'rematch_vote_count', {
                'votes': len(session.rematch_votes),
                'needed': REMATCH_VOTES_NEEDED,
            })
            if not session.rematch_ready:
                return
            session.restart()
            self.logger.info(f"[rematch] session={session.id} X={session.participants[Mark.X]} O={session.participants[Mark.O]}")
            for mark, participant in session.participants.items():
                if isinstance(participant, Human):
                    self.gateway.emit(participant.sid, 'game_restarted', session.restart_payload(mark))
            self.start_turn_timer(session)

    def post_chat(self, sid: str, text) -> None:
        if not isinstance(text, str) or not text.strip():
            return
        session = self.registry.session_for(sid)
        if session is None:
            return
        max_len = int(self.config.get('CHAT_MAX_LENGTH', 200))
        with session.lock:
            message = session.add_chat(sid, text, max_len)
            if message is None:
                return
            self._broadcast(session, 'chat_message', message.to_dict())

    def leave(self, sid: str) -> None:
        session = self.registry.session_for(sid)
        if session is None:
            return
        with session.lock:
            winner = session.forfeit(sid)
            session.abandon(sid)
            self._cancel_turn_timer(session)
            if winner is not None:
                self.logger.info(f"[leave] session={session.id} sid={sid} winner={winner.value}")
                for other in session.human_sids:
                    if other != sid:
                        self.gateway.emit(other, 'opponent_left', {'winner': winner.value})
            destroyed = self.registry.release(sid)
            if destroyed:
                self.logger.info(f"[session-end] session={session.id}")

    # ---- timers and the bot ----

    def start_turn_timer(self, session: GameSession) -> None:
        duration = int(self.config.get('TURN_DURATION_SEC', 35))
        self._cancel_turn_timer(session)
        epoch = session.invalidate_pending()
        session.turn_deadline = time.time() + duration
        self.logger.info(f"[timer-set] session={session.id} mark={session.current_mark.value} duration={duration}s deadline={session.turn_deadline}")
        session.turn_timer = self.scheduler.call_later(duration, self._on_turn_timeout, session.id, epoch)
        self._broadcast(session, 'turn_timer_started', {'duration_ms': duration * 1000})

    def _on_turn_timeout(self, session_id: str, epoch: int) -> None:
        session = self.registry.get(session_id)
        if session is None:
            return
        with session.lock:
            self.logger.info(f"[timer-fire] session={session_id} expected_epoch={epoch} actual_epoch={session.epoch}")
            if not session.expire_turn(epoch):
                self.logger.info(f"[timer-abort] session={session_id} superseded or finished")
                return
            session.turn_timer = None
            self._broadcast(session, 'game_over', session.game_over_payload())

    def _cancel_turn_timer(self, session: GameSession) -> None:
        if session.turn_timer is not None:
            session.turn_timer.cancel()
            session.turn_timer = None

    def _schedule_bot_move(self, session: GameSession) -> None:
        low = int(self.config.get('BOT_MOVE_DELAY_MIN_MS', 500))
        high = int(self.config.get('BOT_MOVE_DELAY_MAX_MS', 1000))
        delay = self.rng.uniform(low, high) / 1000.0
        self.scheduler.call_later(delay, self._play_bot_move, session.id, session.epoch)

    def _play_bot_move(self, session_id: str, epoch: int) -> None:
        session = self.registry.get(session_id)
        if session is None:
            return
        with session.lock:
            if not session.is_playing or epoch != session.epoch:
                return
            cell = choose_move(session.board, session.size, session.difficulty, self.rng)
            if cell is None or not session.place(session.current_mark, cell):
                raise RuntimeError(f"bot could not move in session {session_id}")
            self.logger.info(f"[bot-move] session={session_id} cell={cell}")
            self._after_move(session, cell)

    def _after_move(self, session: GameSession, cell_index: int) -> None:
        if not session.is_playing:
            self._cancel_turn_timer(session)
            self._broadcast(session, 'game_over', session.game_over_payload())
            return
        self._broadcast(session, 'move_applied', session.move_payload(cell_index))
        if session.is_multiplayer:
            self.start_turn_timer(session)
        elif isinstance(session.participants[session.current_mark], Bot):
            self._schedule_bot_move(session)

    def _broadcast(self, session: GameSession, event: str, payload=None) -> None:
        for sid in session.human_sids:
            self.gateway.emit(sid, event, payload)
