"""Unit tests for JSON serialisation of events."""

import json

from tabparse.parser import parse
from tabparse.serializer import event_to_dict, to_json


def test_chord_dict() -> None:
    [chord] = parse("Qa1(Fr.:7)")
    assert event_to_dict(chord) == {
        "type": "Chord",
        "code": "Qa1(Fr.:7)",
        "main_courses": [
            {
                "type": "TabNote",
                "pitch": {"type": "Pitch", "code": "a1", "fret": "a", "course": 1},
                "fingering": {"type": "Fingering", "code": "(Fr.:7)"},
                "ornament": None,
                "line": None,
            }
        ],
        "bass_courses": [],
        "duration": {"type": "Duration", "code": "Q", "crotchets": 1.0},
    }


def test_pitch_ruleset_is_not_serialised() -> None:
    events = parse("{<rules><pitch>60</pitch></rules>} a1")
    pitch = event_to_dict(events[1])["main_courses"][0]["pitch"]
    assert "ruleset" not in pitch


def test_ruleset_dict_has_rules_and_tuning() -> None:
    [ruleset] = parse("{<rules><pitch>68</pitch></rules>}")
    data = event_to_dict(ruleset)
    assert data["type"] == "Ruleset"
    assert data["rules"] == {"notation": "French", "pitch": 68}
    assert data["full_tuning"][0] == 68


def test_barline_dict() -> None:
    [barline] = parse(":||")
    data = event_to_dict(barline)
    assert data["type"] == "Barline"
    assert data["bar_num"] == 1
    assert data["l_repeat"] is True
    assert data["double_bar"] is True
    assert data["r_repeat"] is False


def test_to_json_is_compact_array() -> None:
    text = to_json(parse("Q | M(3)"))
    assert text.endswith("\n")
    assert "\n" not in text.rstrip("\n")
    payload = json.loads(text)
    assert [item["type"] for item in payload] == ["Rest", "Barline", "Metre"]
    assert payload[2]["components"] == ["3"]


def test_to_json_pretty() -> None:
    text = to_json(parse("{>}"), pretty=True)
    assert '\n  {\n    "type": "PageBreak"' in text
    assert json.loads(text) == [{"type": "PageBreak", "code": "{>}", "page_num": 1}]


def test_to_json_empty() -> None:
    assert to_json([]) == "[]\n"
