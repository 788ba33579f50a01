"""Deck and card management on top of a card store."""
import logging
from datetime import datetime

from studydeck.errors import ProtectedDeckError, ValidationError
from studydeck.models import DECK_COLORS, DEFAULT_DECK_ID, Deck, LearningItem, is_due, new_deck, new_item
from studydeck.store import CardStore

logger = logging.getLogger(__name__)


def get_deck(store: CardStore, deck_id: str) -> Deck | None:
    return next((d for d in store.list_groups() if d.id == deck_id), None)


def create_card(
    store: CardStore,
    front: str,
    back: str,
    group_id: str = DEFAULT_DECK_ID,
    *,
    now: datetime,
) -> LearningItem:
    front, back = front.strip(), back.strip()
    if not front or not back:
        raise ValidationError("A card needs both a front and a back")
    if get_deck(store, group_id) is None:
        raise ValidationError(f"Deck {group_id!r} does not exist")
    item = new_item(front, back, group_id, now)
    store.save_item(item)
    logger.info("Added card %s to deck %s", item.id, group_id)
    return item


def delete_card(store: CardStore, item_id: str) -> None:
    store.delete_item(item_id)


def create_deck(store: CardStore, name: str) -> Deck:
    name = name.strip()
    if not name:
        raise ValidationError("Deck name cannot be empty")
    color = DECK_COLORS[len(store.list_groups()) % len(DECK_COLORS)]
    deck = new_deck(name, color)
    store.save_group(deck)
    logger.info("Created deck %s (%s)", deck.name, deck.id)
    return deck


def delete_deck(store: CardStore, deck_id: str) -> None:
    """Delete a deck and every card in it. The default deck stays."""
    if deck_id == DEFAULT_DECK_ID:
        raise ProtectedDeckError("The default deck cannot be deleted")
    store.delete_group(deck_id)
    logger.info("Deleted deck %s", deck_id)


def deck_stats(store: CardStore, deck_id: str, now: datetime) -> dict:
    cards = store.list_items(deck_id)
    return {"total": len(cards), "due": sum(1 for c in cards if is_due(c, now))}


def all_deck_stats(store: CardStore, now: datetime) -> list[dict]:
    results = []
    for deck in store.list_groups():
        stats = deck_stats(store, deck.id, now)
        results.append({"deck_id": deck.id, "name": deck.name, "color": deck.color, **stats})
    return results
