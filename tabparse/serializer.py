"""Serialise parsed events to plain dicts and JSON."""

from __future__ import annotations

import json
from dataclasses import fields, is_dataclass
from typing import Any

from tabparse.models import Duration, Event
from tabparse.rules import Ruleset


def _to_plain(value: Any) -> Any:
    if isinstance(value, Ruleset):
        rules = {f.name: getattr(value.rules, f.name) for f in fields(value.rules)}
        return {
            "type": "Ruleset",
            "code": value.code,
            "rules": {key: item for key, item in rules.items() if item is not None},
            "full_tuning": value.full_tuning,
        }
    if isinstance(value, Duration):
        return {"type": "Duration", "code": value.code, "crotchets": value.crotchets}
    if is_dataclass(value) and not isinstance(value, type):
        data: dict[str, Any] = {"type": type(value).__name__}
        for f in fields(value):
            if f.metadata.get("serialize", True):
                data[f.name] = _to_plain(getattr(value, f.name))
        return data
    if isinstance(value, (list, tuple)):
        return [_to_plain(item) for item in value]
    return value


def event_to_dict(event: Event) -> dict[str, Any]:
    """
    Convert one event to a JSON-ready dict.

    Every record gets a leading ``"type"`` key naming its class. A pitch's
    ruleset is left out; rulesets are written once, as their own events,
    together with the full tuning they resolve to.
    """
    return _to_plain(event)


def to_json(events: list[Event], pretty: bool = False) -> str:
    """Render events as a JSON array followed by a newline."""
    payload = [event_to_dict(event) for event in events]
    if pretty:
        return json.dumps(payload, indent=2, ensure_ascii=False) + "\n"
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False) + "\n"
