"""Data classes for cards, decks and the review log."""
import uuid
from dataclasses import dataclass, field
from datetime import datetime

DEFAULT_DECK_ID = "default"
DEFAULT_EASE = 2.5
MIN_EASE = 1.3

AGAIN = 1
HARD = 3
GOOD = 4
EASY = 5
QUALITY_BUTTONS = (("Again", AGAIN), ("Hard", HARD), ("Good", GOOD), ("Easy", EASY))

DECK_COLORS = ["red", "blue", "green", "yellow", "purple", "magenta", "bright_blue", "dark_orange"]


def new_id() -> str:
    return uuid.uuid4().hex


@dataclass(frozen=True)
class LearningItem:
    id: str
    front: str
    back: str
    next_review_at: datetime
    created_at: datetime
    group_id: str = DEFAULT_DECK_ID
    ease_factor: float = DEFAULT_EASE
    interval: int = 0
    repetitions: int = 0


@dataclass
class Deck:
    id: str
    name: str
    color: str = "blue"


@dataclass
class ReviewRecord:
    item_id: str
    quality: int
    reviewed_at: datetime
    id: int | None = field(default=None, compare=False)


def new_item(front: str, back: str, group_id: str, now: datetime) -> LearningItem:
    """A fresh card, due immediately."""
    return LearningItem(
        id=new_id(),
        front=front,
        back=back,
        group_id=group_id,
        next_review_at=now,
        created_at=now,
    )


def new_deck(name: str, color: str) -> Deck:
    return Deck(id=new_id(), name=name, color=color)


def default_deck() -> Deck:
    return Deck(id=DEFAULT_DECK_ID, name="General", color="blue")


def is_due(item: LearningItem, now: datetime) -> bool:
    return item.next_review_at <= now
