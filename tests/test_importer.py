# tests/test_importer.py
import json

import pytest

from studydeck.decks import create_deck
from studydeck.errors import ValidationError
from studydeck.importer import import_cards, read_card_rows


def test_read_txt_file(tmp_path):
    f = tmp_path / "cards.txt"
    f.write_text("# vocab\nhola :: hello\n\nadios :: goodbye\n")
    rows = read_card_rows(str(f))
    assert [r["front"].strip() for r in rows] == ["hola", "adios"]
    assert rows[1]["back"].strip() == "goodbye"


def test_read_json_file(tmp_path):
    f = tmp_path / "cards.json"
    f.write_text(json.dumps([{"front": "H2O", "back": "water"}]))
    assert read_card_rows(str(f)) == [{"front": "H2O", "back": "water"}]


def test_read_json_with_cards_key(tmp_path):
    f = tmp_path / "cards.json"
    f.write_text(json.dumps({"cards": [{"front": "NaCl", "back": "salt"}]}))
    assert read_card_rows(str(f)) == [{"front": "NaCl", "back": "salt"}]


def test_read_json_rejects_wrong_shape(tmp_path):
    f = tmp_path / "cards.json"
    f.write_text(json.dumps(["not a card"]))
    with pytest.raises(ValidationError):
        read_card_rows(str(f))


def test_read_yaml_file(tmp_path):
    f = tmp_path / "cards.yaml"
    f.write_text("- front: mitochondria\n  back: powerhouse of the cell\n")
    assert read_card_rows(str(f)) == [{"front": "mitochondria", "back": "powerhouse of the cell"}]


def test_read_csv_file_with_header(tmp_path):
    f = tmp_path / "cards.csv"
    f.write_text("front,back\n2+2,4\n\"a, b\",c\n")
    assert read_card_rows(str(f)) == [{"front": "2+2", "back": "4"}, {"front": "a, b", "back": "c"}]


def test_import_cards(store, tmp_path, now):
    deck = create_deck(store, "Spanish")
    f = tmp_path / "spanish.txt"
    f.write_text("hola :: hello\ngato ::\nperro :: dog\n")
    result = import_cards(store, str(f), deck.id, now=now)
    assert result == {"filename": "spanish.txt", "imported": 2, "skipped": 1}
    cards = store.list_items(deck.id)
    assert [c.front for c in cards] == ["hola", "perro"]
    assert all(c.next_review_at == now for c in cards)


def test_json_null_side_is_skipped(store, tmp_path, now):
    f = tmp_path / "cards.json"
    f.write_text(json.dumps([{"front": "H2O", "back": None}, {"front": "CO2", "back": "carbon dioxide"}]))
    assert read_card_rows(str(f))[0] == {"front": "H2O", "back": ""}
    result = import_cards(store, str(f), now=now)
    assert result["imported"] == 1
    assert result["skipped"] == 1
    assert [(c.front, c.back) for c in store.list_items()] == [("CO2", "carbon dioxide")]


def test_yaml_empty_side_is_skipped(store, tmp_path, now):
    f = tmp_path / "cards.yml"
    f.write_text("- front: mitochondria\n  back:\n- front: ribosome\n  back: makes proteins\n")
    result = import_cards(store, str(f), now=now)
    assert result == {"filename": "cards.yml", "imported": 1, "skipped": 1}
    assert [c.front for c in store.list_items()] == ["ribosome"]


def test_yaml_numeric_side_is_kept(tmp_path):
    f = tmp_path / "cards.yaml"
    f.write_text("- front: 2 - 2\n  back: 0\n")
    assert read_card_rows(str(f)) == [{"front": "2 - 2", "back": "0"}]
