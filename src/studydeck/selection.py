"""Choosing which cards go into a review queue, and in what order."""
import random
from datetime import datetime
from typing import Iterable, Sequence

from studydeck.errors import ValidationError
from studydeck.models import LearningItem, is_due

# "shuffle": uniform random permutation (production default)
# "due": earliest next_review_at first, ties by created_at then id
# "insertion": the pool's own order
QUEUE_ORDERS = ("shuffle", "due", "insertion")


def in_group(items: Iterable[LearningItem], group_id: str | None) -> list[LearningItem]:
    if group_id is None:
        return list(items)
    return [item for item in items if item.group_id == group_id]


def due_items(
    items: Iterable[LearningItem],
    group_id: str | None = None,
    *,
    now: datetime,
) -> list[LearningItem]:
    """Cards whose next review is at or before ``now``, in input order."""
    return [item for item in in_group(items, group_id) if is_due(item, now)]


def shuffle(sequence: Sequence, rng: random.Random | None = None) -> list:
    """Return a uniformly shuffled copy of ``sequence``."""
    shuffled = list(sequence)
    (rng or random.Random()).shuffle(shuffled)
    return shuffled


def order_items(
    items: Sequence[LearningItem],
    order: str = "shuffle",
    rng: random.Random | None = None,
) -> list[LearningItem]:
    if order == "shuffle":
        return shuffle(items, rng)
    if order == "due":
        return sorted(items, key=lambda i: (i.next_review_at, i.created_at, i.id))
    if order == "insertion":
        return list(items)
    raise ValidationError(f"Unknown queue order {order!r}; expected one of {', '.join(QUEUE_ORDERS)}")


def build_queue(
    pool: Iterable[LearningItem],
    group_id: str | None = None,
    *,
    now: datetime,
    order: str = "shuffle",
    rng: random.Random | None = None,
) -> list[LearningItem]:
    """Due cards, or every card in the group when nothing is due yet.

    The fallback keeps a session from starting empty while the deck still has
    cards in it.
    """
    candidates = in_group(pool, group_id)
    queue = due_items(candidates, now=now)
    if not queue:
        queue = candidates
    return order_items(queue, order, rng)
