"""Bulk import of cards from files."""
import csv
import json
import logging
from datetime import datetime
from pathlib import Path

from studydeck.decks import create_card
from studydeck.errors import ValidationError
from studydeck.models import DEFAULT_DECK_ID
from studydeck.store import CardStore

logger = logging.getLogger(__name__)

TEXT_SEPARATOR = "::"


def _side(value) -> str:
    # null in JSON, or an empty YAML value, counts as a missing side
    return "" if value is None else str(value)


def _rows_from_records(data, source: str) -> list[dict]:
    if isinstance(data, dict):
        data = data.get("cards", [])
    if not isinstance(data, list):
        raise ValidationError(f"{source}: expected a list of cards")
    rows = []
    for record in data:
        if not isinstance(record, dict):
            raise ValidationError(f"{source}: each card must be a mapping with front and back")
        rows.append({"front": _side(record.get("front")), "back": _side(record.get("back"))})
    return rows


def read_card_rows(file_path: str) -> list[dict]:
    path = Path(file_path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _rows_from_records(json.loads(path.read_text()), path.name)
    elif suffix in (".yaml", ".yml"):
        import yaml
        return _rows_from_records(yaml.safe_load(path.read_text()) or [], path.name)
    elif suffix == ".csv":
        with path.open(newline="") as f:
            reader = csv.reader(f)
            rows = [r for r in reader if r]
        if rows and [c.strip().lower() for c in rows[0][:2]] == ["front", "back"]:
            rows = rows[1:]
        return [{"front": r[0], "back": r[1] if len(r) > 1 else ""} for r in rows]
    else:
        # Plain text: one "front :: back" per line
        rows = []
        for line in path.read_text().splitlines():
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            front, _, back = line.partition(TEXT_SEPARATOR)
            rows.append({"front": front, "back": back})
        return rows


def import_cards(
    store: CardStore,
    file_path: str,
    group_id: str = DEFAULT_DECK_ID,
    *,
    now: datetime,
) -> dict:
    """Create a card for every usable row in ``file_path``."""
    imported = skipped = 0
    for row in read_card_rows(file_path):
        if not row["front"].strip() or not row["back"].strip():
            logger.warning("Skipping incomplete card in %s: %r", file_path, row)
            skipped += 1
            continue
        create_card(store, row["front"], row["back"], group_id, now=now)
        imported += 1
    logger.info("Imported %d cards from %s (%d skipped)", imported, file_path, skipped)
    return {"filename": Path(file_path).name, "imported": imported, "skipped": skipped}
