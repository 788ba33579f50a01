"""Card stores: where cards, decks and the review log live between sessions."""
import logging
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, Protocol

from studydeck.db import get_connection, init_db
from studydeck.errors import ItemNotFoundError, StoreError
from studydeck.models import Deck, LearningItem, ReviewRecord, default_deck

logger = logging.getLogger(__name__)


class CardStore(Protocol):
    def list_items(self, group_id: str | None = None) -> list[LearningItem]: ...

    def get_item(self, item_id: str) -> LearningItem: ...

    def save_item(self, item: LearningItem) -> None: ...

    def delete_item(self, item_id: str) -> None: ...

    def list_groups(self) -> list[Deck]: ...

    def save_group(self, deck: Deck) -> None: ...

    def delete_group(self, deck_id: str) -> None: ...

    def record_review(self, record: ReviewRecord) -> None: ...

    def list_reviews(self, item_id: str | None = None) -> list[ReviewRecord]: ...


class MemoryStore:
    """Keeps everything in dicts. Nothing survives the process."""

    def __init__(self):
        deck = default_deck()
        self._groups: dict[str, Deck] = {deck.id: deck}
        self._items: dict[str, LearningItem] = {}
        self._reviews: list[ReviewRecord] = []

    def list_items(self, group_id: str | None = None) -> list[LearningItem]:
        return [i for i in self._items.values() if group_id is None or i.group_id == group_id]

    def get_item(self, item_id: str) -> LearningItem:
        try:
            return self._items[item_id]
        except KeyError:
            raise ItemNotFoundError(item_id) from None

    def save_item(self, item: LearningItem) -> None:
        if item.group_id not in self._groups:
            raise StoreError(f"Deck {item.group_id!r} does not exist")
        self._items[item.id] = item

    def delete_item(self, item_id: str) -> None:
        self._items.pop(item_id, None)
        self._reviews = [r for r in self._reviews if r.item_id != item_id]

    def list_groups(self) -> list[Deck]:
        return list(self._groups.values())

    def save_group(self, deck: Deck) -> None:
        self._groups[deck.id] = deck

    def delete_group(self, deck_id: str) -> None:
        if self._groups.pop(deck_id, None) is None:
            return
        for item in self.list_items(deck_id):
            self.delete_item(item.id)

    def record_review(self, record: ReviewRecord) -> None:
        if record.item_id not in self._items:
            raise StoreError(f"Cannot log a review for unknown card {record.item_id!r}")
        record.id = len(self._reviews) + 1
        self._reviews.append(record)

    def list_reviews(self, item_id: str | None = None) -> list[ReviewRecord]:
        return [r for r in self._reviews if item_id is None or r.item_id == item_id]


def _to_text(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat()


def _from_text(value: str) -> datetime:
    return datetime.fromisoformat(value)


def _row_to_item(row: sqlite3.Row) -> LearningItem:
    return LearningItem(
        id=row["id"],
        front=row["front"],
        back=row["back"],
        group_id=row["deck_id"],
        ease_factor=row["ease_factor"],
        interval=row["interval"],
        repetitions=row["repetitions"],
        next_review_at=_from_text(row["next_review_at"]),
        created_at=_from_text(row["created_at"]),
    )


class SqliteStore:
    """Card store backed by a SQLite file. Opens a connection per call."""

    def __init__(self, db_path: str | Path):
        self.db_path = str(db_path)
        init_db(self.db_path)

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        conn = get_connection(self.db_path)
        try:
            yield conn
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            logger.error("SQLite error on %s: %s", self.db_path, e)
            raise StoreError(str(e)) from e
        finally:
            conn.close()

    def list_items(self, group_id: str | None = None) -> list[LearningItem]:
        with self._connect() as conn:
            if group_id is None:
                rows = conn.execute("SELECT * FROM items ORDER BY position").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM items WHERE deck_id = ? ORDER BY position", (group_id,)
                ).fetchall()
        return [_row_to_item(r) for r in rows]

    def get_item(self, item_id: str) -> LearningItem:
        with self._connect() as conn:
            row = conn.execute("SELECT * FROM items WHERE id = ?", (item_id,)).fetchone()
        if row is None:
            raise ItemNotFoundError(item_id)
        return _row_to_item(row)

    def save_item(self, item: LearningItem) -> None:
        # Last write wins
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO items (id, deck_id, front, back, ease_factor, interval,
                    repetitions, next_review_at, created_at, position)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?,
                    (SELECT COALESCE(MAX(position), 0) + 1 FROM items))
                ON CONFLICT(id) DO UPDATE SET
                    deck_id=excluded.deck_id, front=excluded.front, back=excluded.back,
                    ease_factor=excluded.ease_factor, interval=excluded.interval,
                    repetitions=excluded.repetitions, next_review_at=excluded.next_review_at""",
                (
                    item.id, item.group_id, item.front, item.back, item.ease_factor,
                    item.interval, item.repetitions, _to_text(item.next_review_at),
                    _to_text(item.created_at),
                ),
            )

    def delete_item(self, item_id: str) -> None:
        with self._connect() as conn:
            conn.execute("DELETE FROM items WHERE id = ?", (item_id,))

    def list_groups(self) -> list[Deck]:
        with self._connect() as conn:
            rows = conn.execute("SELECT * FROM decks ORDER BY position, rowid").fetchall()
        return [Deck(id=r["id"], name=r["name"], color=r["color"]) for r in rows]

    def save_group(self, deck: Deck) -> None:
        with self._connect() as conn:
            conn.execute(
                """INSERT INTO decks (id, name, color, position)
                VALUES (?, ?, ?, (SELECT COALESCE(MAX(position), 0) + 1 FROM decks))
                ON CONFLICT(id) DO UPDATE SET name=excluded.name, color=excluded.color""",
                (deck.id, deck.name, deck.color),
            )

    def delete_group(self, deck_id: str) -> None:
        # items and their review_log rows go with the deck (ON DELETE CASCADE)
        with self._connect() as conn:
            conn.execute("DELETE FROM decks WHERE id = ?", (deck_id,))

    def record_review(self, record: ReviewRecord) -> None:
        with self._connect() as conn:
            cursor = conn.execute(
                "INSERT INTO review_log (item_id, quality, reviewed_at) VALUES (?, ?, ?)",
                (record.item_id, record.quality, _to_text(record.reviewed_at)),
            )
            record.id = cursor.lastrowid

    def list_reviews(self, item_id: str | None = None) -> list[ReviewRecord]:
        with self._connect() as conn:
            if item_id is None:
                rows = conn.execute("SELECT * FROM review_log ORDER BY id").fetchall()
            else:
                rows = conn.execute(
                    "SELECT * FROM review_log WHERE item_id = ? ORDER BY id", (item_id,)
                ).fetchall()
        return [
            ReviewRecord(
                item_id=r["item_id"], quality=r["quality"],
                reviewed_at=_from_text(r["reviewed_at"]), id=r["id"],
            )
            for r in rows
        ]
