"""SM-2 spaced repetition algorithm."""
import math
from dataclasses import replace
from datetime import datetime, timedelta

from studydeck.errors import InvalidQualityError, MalformedItemError, ValidationError
from studydeck.models import MIN_EASE, LearningItem


def validate_quality(quality) -> int:
    # bool is an int subclass; True/False are not ratings
    if isinstance(quality, bool) or not isinstance(quality, int) or not 0 <= quality <= 5:
        raise InvalidQualityError(quality)
    return quality


def validate_item(item) -> LearningItem:
    if not isinstance(item, LearningItem):
        raise MalformedItemError(f"expected a LearningItem, got {type(item).__name__}")
    ease = item.ease_factor
    if isinstance(ease, bool) or not isinstance(ease, (int, float)) or not math.isfinite(ease) or ease < MIN_EASE:
        raise MalformedItemError(f"card {item.id}: ease_factor must be a finite number >= {MIN_EASE}")
    for name in ("interval", "repetitions"):
        value = getattr(item, name)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise MalformedItemError(f"card {item.id}: {name} must be a non-negative integer")
    return item


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def sm2_update(
    quality: int,
    repetitions: int,
    ease_factor: float,
    interval: int,
) -> dict:
    """Calculate next review parameters using SM-2.

    Args:
        quality: Rating 0-5 (0=complete blackout, 5=perfect)
        repetitions: Number of consecutive correct reviews
        ease_factor: Current ease factor (minimum 1.3)
        interval: Current interval in days

    Returns:
        Dict with updated interval, repetitions, ease_factor.
    """
    validate_quality(quality)

    # Ease moves on every review, failures included
    new_ef = ease_factor + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
    new_ef = max(MIN_EASE, new_ef)

    if quality >= 3:
        if repetitions == 0:
            new_interval = 1
        elif repetitions == 1:
            new_interval = 6
        else:
            new_interval = round_half_up(interval * ease_factor)
        new_repetitions = repetitions + 1
    else:
        new_repetitions = 0
        new_interval = 1

    return {
        "interval": new_interval,
        "repetitions": new_repetitions,
        "ease_factor": new_ef,
    }


def grade(item: LearningItem, quality: int, now: datetime) -> LearningItem:
    """Return ``item`` rescheduled after a review graded ``quality`` at ``now``.

    The input is left untouched. Nothing is read from or written to a store.
    """
    validate_quality(quality)
    validate_item(item)
    if not isinstance(now, datetime) or now.tzinfo is None:
        raise ValidationError("now must be a timezone-aware datetime")

    updated = sm2_update(
        quality=quality,
        repetitions=item.repetitions,
        ease_factor=item.ease_factor,
        interval=item.interval,
    )
    return replace(
        item,
        ease_factor=updated["ease_factor"],
        interval=updated["interval"],
        repetitions=updated["repetitions"],
        next_review_at=now + timedelta(days=updated["interval"]),
    )
