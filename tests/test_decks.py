# tests/test_decks.py
from datetime import timedelta

import pytest

from studydeck.decks import (
    all_deck_stats, create_card, create_deck, deck_stats, delete_card, delete_deck, get_deck,
)
from studydeck.errors import ProtectedDeckError, ValidationError
from studydeck.models import DECK_COLORS, DEFAULT_DECK_ID
from studydeck.sm2 import grade


def test_create_card_strips_and_saves(store, now):
    card = create_card(store, "  What is ATP?  ", " Energy currency\n", now=now)
    assert card.front == "What is ATP?"
    assert card.back == "Energy currency"
    assert card.group_id == DEFAULT_DECK_ID
    assert card.next_review_at == now
    assert store.get_item(card.id) == card


@pytest.mark.parametrize("front,back", [("", "A"), ("Q", "   "), ("  ", "")])
def test_create_card_requires_both_sides(store, now, front, back):
    with pytest.raises(ValidationError):
        create_card(store, front, back, now=now)
    assert store.list_items() == []


def test_create_card_unknown_deck(store, now):
    with pytest.raises(ValidationError):
        create_card(store, "Q", "A", "ghost", now=now)


def test_create_deck_cycles_colors(store):
    decks = [create_deck(store, f"Deck {i}") for i in range(len(DECK_COLORS) + 1)]
    # default deck occupies slot 0
    assert decks[0].color == DECK_COLORS[1]
    assert decks[-1].color == DECK_COLORS[(len(DECK_COLORS) + 1) % len(DECK_COLORS)]


def test_create_deck_rejects_blank_name(store):
    with pytest.raises(ValidationError):
        create_deck(store, "   ")


def test_get_deck(store):
    deck = create_deck(store, "Chemistry")
    assert get_deck(store, deck.id) == deck
    assert get_deck(store, "nope") is None


def test_default_deck_cannot_be_deleted(store):
    with pytest.raises(ProtectedDeckError):
        delete_deck(store, DEFAULT_DECK_ID)
    assert get_deck(store, DEFAULT_DECK_ID) is not None


def test_delete_deck_removes_its_cards(store, now):
    deck = create_deck(store, "History")
    create_card(store, "1066?", "Hastings", deck.id, now=now)
    kept = create_card(store, "Q", "A", now=now)
    delete_deck(store, deck.id)
    assert get_deck(store, deck.id) is None
    assert store.list_items() == [kept]


def test_delete_card(store, now):
    card = create_card(store, "Q", "A", now=now)
    delete_card(store, card.id)
    assert store.list_items() == []


def test_deck_stats(store, now):
    deck = create_deck(store, "Physics")
    first = create_card(store, "F=?", "ma", deck.id, now=now)
    create_card(store, "c=?", "3e8 m/s", deck.id, now=now)
    store.save_item(grade(first, 5, now))
    assert deck_stats(store, deck.id, now) == {"total": 2, "due": 1}
    assert deck_stats(store, deck.id, now + timedelta(days=1)) == {"total": 2, "due": 2}


def test_all_deck_stats_lists_every_deck(store, now):
    deck = create_deck(store, "Physics")
    create_card(store, "Q", "A", deck.id, now=now)
    stats = {s["deck_id"]: s for s in all_deck_stats(store, now)}
    assert stats[DEFAULT_DECK_ID]["total"] == 0
    assert stats[deck.id]["name"] == "Physics"
    assert stats[deck.id]["due"] == 1
