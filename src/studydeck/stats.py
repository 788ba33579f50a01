"""Review statistics for the stats screen."""
from datetime import datetime

from studydeck.models import is_due
from studydeck.store import CardStore


def get_retention_label(rate: float) -> str:
    if rate >= 85:
        return "STRONG"
    elif rate >= 70:
        return "GOOD"
    elif rate >= 50:
        return "SHAKY"
    return "STRUGGLING"


def get_retention_color(rate: float) -> str:
    if rate >= 85:
        return "green"
    elif rate >= 70:
        return "yellow"
    elif rate >= 50:
        return "dark_orange"
    return "red"


def retention_rate(store: CardStore) -> float:
    """Percentage of logged reviews graded as a successful recall."""
    reviews = store.list_reviews()
    if not reviews:
        return 0.0
    passed = sum(1 for r in reviews if r.quality >= 3)
    return round(passed / len(reviews) * 100, 1)


def get_study_stats(store: CardStore, now: datetime) -> dict:
    cards = store.list_items()
    reviews = store.list_reviews()
    return {
        "cards": len(cards),
        "due": sum(1 for c in cards if is_due(c, now)),
        "decks": len(store.list_groups()),
        "reviews": len(reviews),
        "reviewed_today": sum(1 for r in reviews if r.reviewed_at.date() == now.date()),
        "retention": retention_rate(store),
    }
