"""ReviewSession: walks a queue of cards, grading each and handing it back to the store."""
import enum
import logging
import random
from datetime import datetime
from typing import Callable, Iterable

from studydeck.clock import system_now
from studydeck.errors import SessionStateError
from studydeck.models import LearningItem, ReviewRecord
from studydeck.selection import build_queue, order_items
from studydeck.sm2 import grade, validate_quality
from studydeck.store import CardStore

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    IDLE = "idle"
    IN_PROGRESS = "in_progress"


class ReviewSession:
    def __init__(
        self,
        store: CardStore,
        clock: Callable[[], datetime] = system_now,
        order: str = "shuffle",
        rng: random.Random | None = None,
    ):
        order_items([], order)  # reject unknown orders up front
        self.store = store
        self.clock = clock
        self.order = order
        self.rng = rng
        self.state = SessionState.IDLE
        self.queue: list[LearningItem] = []
        self.position = 0
        self.revealed = False
        self.reviewed = 0

    @property
    def is_active(self) -> bool:
        return self.state is SessionState.IN_PROGRESS

    @property
    def total(self) -> int:
        return len(self.queue)

    @property
    def remaining(self) -> int:
        return len(self.queue) - self.position

    @property
    def current(self) -> LearningItem | None:
        if not self.is_active:
            return None
        return self.queue[self.position]

    def _require_active(self) -> None:
        if not self.is_active:
            raise SessionStateError("No review session in progress")

    def start(self, pool: Iterable[LearningItem] | None = None, group_id: str | None = None) -> bool:
        """Build the queue and begin. Returns False, staying idle, if there is nothing to study."""
        if self.is_active:
            raise SessionStateError("A review session is already in progress")
        if pool is None:
            pool = self.store.list_items(group_id)
        queue = build_queue(pool, group_id, now=self.clock(), order=self.order, rng=self.rng)
        if not queue:
            logger.info("Nothing to review%s", f" in deck {group_id}" if group_id else "")
            return False
        self.queue = queue
        self.position = 0
        self.revealed = False
        self.reviewed = 0
        self.state = SessionState.IN_PROGRESS
        logger.info("Review session started with %d cards", len(queue))
        return True

    def reveal(self) -> bool:
        self._require_active()
        self.revealed = not self.revealed
        return self.revealed

    def answer(self, quality: int) -> LearningItem:
        """Grade the current card, persist it, and move on."""
        self._require_active()
        validate_quality(quality)
        now = self.clock()
        updated = grade(self.current, quality, now)
        self.store.save_item(updated)
        self.store.record_review(ReviewRecord(item_id=updated.id, quality=quality, reviewed_at=now))
        logger.debug(
            "Card %s graded %d: interval=%d reps=%d ease=%.2f",
            updated.id, quality, updated.interval, updated.repetitions, updated.ease_factor,
        )
        self.queue[self.position] = updated
        self.position += 1
        self.reviewed += 1
        self.revealed = False
        if self.position >= len(self.queue):
            logger.info("Review session finished after %d cards", self.reviewed)
            self._reset()
        return updated

    def exit(self) -> None:
        if self.is_active:
            logger.info("Review session exited with %d cards left", self.remaining)
        self._reset()

    def _reset(self) -> None:
        self.state = SessionState.IDLE
        self.queue = []
        self.position = 0
        self.revealed = False
