import logging
import threading
from typing import Callable, List, Optional

from concentration.constants import DEFAULT_DIFFICULTY, DEFAULT_PLAYER_NAME, DIFFICULTY_PAIRS
from .deck import Card, generate_deck
from .timers import TimerHandle

IDLE = 'idle'
RUNNING = 'running'
RESOLVING = 'resolving'
COMPLETED = 'completed'

logger = logging.getLogger(__name__)

MATCH_DELAY_SEC = 0.6
MISMATCH_DELAY_SEC = 0.8
TICK_SEC = 1.0


class UnknownCard(LookupError):
    pass


class UnknownDifficulty(ValueError):
    pass


def star_rating(moves: int, pairs: int) -> int:
    """3 stars up to 1.2 moves per pair, 2 up to 2.0, otherwise 1."""
    if moves == 0:
        return 3
    ratio = moves / pairs
    if ratio <= 1.2:
        return 3
    if ratio <= 2:
        return 2
    return 1


def format_time(seconds: int) -> str:
    return f'{int(seconds) // 60:02d}:{int(seconds) % 60:02d}'


def pairs_for(difficulty: str) -> int:
    try:
        return DIFFICULTY_PAIRS[difficulty]
    except KeyError:
        raise UnknownDifficulty(difficulty) from None


class GameSession:
    """Single-player memory game state machine.

    Mutations go through the session lock; timer callbacks take the same lock.
    ``on_change`` fires after every visible state change and ``on_complete``
    fires once, outside the lock, when the last pair is matched.
    """

    def __init__(self, code: str, scheduler, difficulty: str = DEFAULT_DIFFICULTY,
                 name: str = DEFAULT_PLAYER_NAME,
                 on_change: Optional[Callable[['GameSession'], None]] = None,
                 on_complete: Optional[Callable[['GameSession'], None]] = None,
                 match_delay: float = MATCH_DELAY_SEC,
                 mismatch_delay: float = MISMATCH_DELAY_SEC,
                 deck_factory: Callable[[int], List[Card]] = generate_deck):
        self.code = code
        self.scheduler = scheduler
        self.difficulty = difficulty
        self.pairs = pairs_for(difficulty)
        self.name = name
        self.on_change = on_change
        self.on_complete = on_complete
        self.match_delay = match_delay
        self.mismatch_delay = mismatch_delay
        self.deck_factory = deck_factory
        self.leaderboard = []
        self.last_score = None
        self.generation = 0
        self._lock = threading.RLock()
        self._ticker: Optional[TimerHandle] = None
        self._resolution: Optional[TimerHandle] = None
        self._reset(self.pairs)

    def _reset(self, pairs: int) -> None:
        self.pairs = pairs
        self.deck: List[Card] = self.deck_factory(pairs)
        self.flipped: List[str] = []
        self.moves = 0
        self.matches = 0
        self.seconds = 0
        self.running = False
        self.locked = False
        self.focused_index: Optional[int] = None
        self.last_score = None
        self.generation += 1

    # ---- derived state ----

    @property
    def status(self) -> str:
        if self.completed:
            return COMPLETED
        if self.locked:
            return RESOLVING
        if self.running:
            return RUNNING
        return IDLE

    @property
    def completed(self) -> bool:
        return bool(self.deck) and all(c.matched for c in self.deck)

    @property
    def stars(self) -> int:
        return star_rating(self.moves, self.pairs)

    def _index_of(self, card_id: str) -> int:
        for idx, card in enumerate(self.deck):
            if card.id == card_id:
                return idx
        raise UnknownCard(card_id)

    # ---- timer ----

    def _start_timer(self) -> None:
        if self.running:
            return
        self.running = True
        self._schedule_tick()

    def _stop_timer(self) -> None:
        self.running = False
        if self._ticker is not None:
            self._ticker.cancel()
            self._ticker = None

    def _schedule_tick(self) -> None:
        handle = None

        def _tick():
            with self._lock:
                if handle is not self._ticker or not self.running:
                    return
                self.seconds += 1
                self._schedule_tick()
            self._changed()

        handle = self._ticker = self.scheduler.call_later(TICK_SEC, _tick)

    def toggle_running(self) -> bool:
        """Start/Pause. Returns the new running flag."""
        with self._lock:
            if self.completed:
                return False
            if self.running:
                self._stop_timer()
            else:
                self._start_timer()
            running = self.running
        self._changed()
        return running

    # ---- flips ----

    def flip(self, card_id: str) -> bool:
        """Reveal a card. Returns False when the flip is a no-op."""
        with self._lock:
            idx = self._index_of(card_id)
            card = self.deck[idx]
            if self.locked or card.matched or card_id in self.flipped:
                return False
            self._start_timer()

            if not self.flipped:
                self.flipped = [card_id]
                self.focused_index = idx
            else:
                first = self.deck[self._index_of(self.flipped[0])]
                self.flipped = [first.id, card_id]
                self.locked = True
                self.moves += 1
                if first.pair_id == card.pair_id:
                    self._schedule_resolution(self.match_delay, self._resolve_match, card.pair_id)
                else:
                    self._schedule_resolution(self.mismatch_delay, self._resolve_mismatch)
        self._changed()
        return True

    def _schedule_resolution(self, delay: float, resolver, *args) -> None:
        handle = None

        def _resolve():
            resolver(handle, *args)

        handle = self._resolution = self.scheduler.call_later(delay, _resolve)

    def _resolve_match(self, handle: TimerHandle, pair_id: str) -> None:
        with self._lock:
            # stale after restart or close
            if handle is not self._resolution:
                return
            self._resolution = None
            self.deck = [c.mark_matched() if c.pair_id == pair_id else c for c in self.deck]
            self.flipped = []
            self.matches += 1
            self.locked = False
            finished = self.matches == self.pairs
            logger.debug("[match] game=%s pair=%s matches=%s/%s", self.code, pair_id, self.matches, self.pairs)
            if finished:
                self._stop_timer()
        self._changed()
        if finished and self.on_complete:
            self.on_complete(self)

    def _resolve_mismatch(self, handle: TimerHandle) -> None:
        with self._lock:
            if handle is not self._resolution:
                return
            self._resolution = None
            logger.debug("[mismatch] game=%s cards=%s", self.code, self.flipped)
            self.flipped = []
            self.locked = False
        self._changed()

    # ---- focus ----

    def move_focus(self, step: int) -> Optional[int]:
        """Move keyboard focus by ``step`` cards, wrapping around the deck."""
        with self._lock:
            total = len(self.deck)
            if total == 0:
                return None
            if self.focused_index is None:
                self.focused_index = 0
            else:
                self.focused_index = (self.focused_index + step) % total
            focused = self.focused_index
        self._changed()
        return focused

    def flip_focused(self) -> bool:
        with self._lock:
            if self.focused_index is None:
                return False
            card_id = self.deck[self.focused_index].id
        return self.flip(card_id)

    # ---- settings / lifecycle ----

    def set_name(self, name: str) -> None:
        with self._lock:
            self.name = name
        self._changed()

    def publish_result(self, generation: int, score, leaderboard) -> bool:
        """Attach a recorded score and board unless the game was restarted since."""
        with self._lock:
            if generation != self.generation:
                return False
            self.last_score = score
            self.leaderboard = leaderboard
        return True

    def set_difficulty(self, difficulty: str) -> None:
        pairs = pairs_for(difficulty)
        with self._lock:
            self.difficulty = difficulty
        self.restart(pairs)

    def restart(self, pairs: Optional[int] = None) -> None:
        with self._lock:
            self._cancel_timers()
            self._reset(pairs or self.pairs)
        self._changed()

    def close(self) -> None:
        with self._lock:
            self._cancel_timers()

    def _cancel_timers(self) -> None:
        self._stop_timer()
        if self._resolution is not None:
            self._resolution.cancel()
            self._resolution = None

    def _changed(self) -> None:
        if self.on_change:
            self.on_change(self)

    def to_dict(self):
        with self._lock:
            reveal_all = self.completed
            return {
                'game_code': self.code,
                'difficulty': self.difficulty,
                'name': self.name,
                'pairs': self.pairs,
                'status': self.status,
                'running': self.running,
                'locked': self.locked,
                'moves': self.moves,
                'matches': self.matches,
                'seconds': self.seconds,
                'time': format_time(self.seconds),
                'stars': self.stars,
                'focused_index': self.focused_index,
                'flipped': list(self.flipped),
                'cards': [
                    c.to_dict(reveal=reveal_all or c.matched or c.id in self.flipped)
                    for c in self.deck
                ],
                'leaderboard': [s.to_dict() for s in self.leaderboard],
                'last_score': self.last_score.to_dict() if self.last_score else None,
            }
