from unittest.mock import patch

import pytest

from studydeck.app import (
    SessionExitRequested, ask_quality, cmd_newdeck, cmd_stats, make_session, run_review_session,
    session_prompt,
)
from studydeck.config import Settings
from studydeck.decks import create_card
from studydeck.session import ReviewSession, SessionState
from studydeck.store import MemoryStore


@pytest.fixture
def mem_store():
    return MemoryStore()


def test_session_prompt_raises_on_q():
    with patch("studydeck.app.Prompt.ask", return_value="q"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_raises_on_menu():
    with patch("studydeck.app.Prompt.ask", return_value="menu"):
        with pytest.raises(SessionExitRequested):
            session_prompt("test prompt")


def test_session_prompt_returns_normal_input():
    with patch("studydeck.app.Prompt.ask", return_value="hello"):
        assert session_prompt("test prompt") == "hello"


@pytest.mark.parametrize("key,quality", [("a", 1), ("h", 3), ("g", 4), ("e", 5), ("1", 1), ("5", 5)])
def test_ask_quality_maps_buttons(key, quality):
    with patch("studydeck.app.Prompt.ask", return_value=key):
        assert ask_quality() == quality


def test_run_review_session_grades_every_card(mem_store, clock, now):
    cards = [create_card(mem_store, f"Q{i}", f"A{i}", now=now) for i in range(2)]
    session = ReviewSession(mem_store, clock=clock, order="insertion")
    # reveal, rate good; reveal, rate again
    with patch("studydeck.app.Prompt.ask", side_effect=["", "g", "", "a"]):
        reviewed = run_review_session(session)
    assert reviewed == 2
    assert session.state is SessionState.IDLE
    assert mem_store.get_item(cards[0].id).repetitions == 1
    assert mem_store.get_item(cards[1].id).repetitions == 0
    assert [r.quality for r in mem_store.list_reviews()] == [4, 1]


def test_run_review_session_exits_on_q(mem_store, clock, now):
    cards = [create_card(mem_store, f"Q{i}", f"A{i}", now=now) for i in range(2)]
    session = ReviewSession(mem_store, clock=clock, order="insertion")
    # Card 1: reveal and rate. Card 2: 'q' on reveal.
    with patch("studydeck.app.Prompt.ask", side_effect=["", "e", "q"]):
        reviewed = run_review_session(session)
    assert reviewed == 1
    assert session.state is SessionState.IDLE
    assert mem_store.get_item(cards[1].id) == cards[1]
    assert len(mem_store.list_reviews()) == 1


def test_run_review_session_nothing_to_study(mem_store, clock):
    session = ReviewSession(mem_store, clock=clock)
    with patch("studydeck.app.Prompt.ask") as ask:
        assert run_review_session(session) == 0
    ask.assert_not_called()


def test_make_session_uses_settings(mem_store):
    session = make_session(mem_store, Settings(queue_order="due", shuffle_seed=5))
    assert session.order == "due"
    assert session.rng is not None


def test_cmd_newdeck(mem_store):
    with patch("studydeck.app.Prompt.ask", return_value="Chemistry"):
        cmd_newdeck(mem_store, Settings())
    assert [d.name for d in mem_store.list_groups()] == ["General", "Chemistry"]


def test_cmd_stats_runs_on_empty_store(mem_store):
    cmd_stats(mem_store, Settings())
