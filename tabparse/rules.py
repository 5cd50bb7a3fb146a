"""Rulesets: embedded ``<rules>`` markup and the tunings derived from it."""

from __future__ import annotations

import re
import xml.etree.ElementTree as ET
from dataclasses import dataclass, fields, replace
from typing import Final

from tabparse.constants import (
    DEFAULT_FULL_TUNING,
    DEFAULT_NOTATION,
    DEFAULT_PITCH,
    ITALIAN_NOTATION,
    letter_pitch,
)
from tabparse.exceptions import ParseError
from tabparse.lexer import Token
from tabparse.logger import get_logger

logger = get_logger(__name__)

# ── Interval tables (semitones down from the previous course) ─────────────────

NAMED_TUNINGS: Final[dict[str, list[int]]] = {
    "renaissance": [5, 5, 4, 5, 5],
    "baroque": [3, 5, 4, 3, 5],
    "harpway-sarabande": [5, 3, 4, 5, 5],
    "gaultier": [4, 3, 4, 5, 5],
    "harpway-flat": [5, 4, 3, 5, 5],
    "french-flat": [3, 4, 3, 5, 5],
    "cordes-avallee": [5, 4, 5, 7, 5],
}

NAMED_BASS_TUNINGS: Final[dict[str, list[int]]] = {
    "renaissance_minor8": [2, 3],
    "baroque": [3, 5, 4, 3, 5],
}

#: 0-based index of course 7, the first bass course of the baseline tuning.
BASS_COURSE_INDEX: Final[int] = 6

_INTERVAL = re.compile(r"-?\d+", re.ASCII)
_INT_FIELDS: Final[frozenset[str]] = frozenset({"pitch", "staff_lines"})


@dataclass(frozen=True)
class RuleFields:
    """
    The closed set of rule keys a ruleset can carry.

    Values are as written in the markup (lower-cased), except ``pitch``
    and ``staff_lines`` which are integers. Unset keys are None.
    """

    notation: str = DEFAULT_NOTATION
    pitch: int = DEFAULT_PITCH
    tuning: str | None = None
    tuning_named: str | None = None
    bass_tuning: str | None = None
    bass_tuning_named: str | None = None
    staff_lines: int | None = None


RULE_KEYS: Final[frozenset[str]] = frozenset(f.name for f in fields(RuleFields))


def parse_intervals(listed: str) -> list[int]:
    """Parse a listed tuning such as ``"(-5 -5 -4)"`` into signed integers."""
    return [int(value) for value in _INTERVAL.findall(listed)]


def _apply_named(tuning: list[int], anchor: int, intervals: list[int]) -> list[int]:
    """Set the courses after ``anchor`` from cumulative intervals below it."""
    tuning = list(tuning)
    drop = 0
    for offset, interval in enumerate(intervals, start=1):
        index = anchor + offset
        if index >= len(tuning):
            break
        drop += interval
        tuning[index] = max(0, tuning[anchor] - drop)
    return tuning


def _retune(tuning: list[int], first: int, intervals: list[int]) -> list[int]:
    """
    Walk ``intervals`` writing ``tuning[first + i]`` from the course above it.

    Each course depends on the already retuned one before it.
    """
    tuning = list(tuning)
    for i, interval in enumerate(intervals):
        index = first + i
        if index >= len(tuning):
            break
        tuning[index] = max(0, tuning[index - 1] + interval)
    return tuning


@dataclass(frozen=True)
class Ruleset:
    """
    A block of notation-wide settings, e.g.
    ``{<rules><pitch>67</pitch><tuning_named>renaissance</tuning_named></rules>}``.

    Rulesets are immutable; a new block is merged over the active one by
    :func:`parse_ruleset`.
    """

    code: str = ""
    rules: RuleFields = RuleFields()

    @property
    def full_tuning(self) -> list[int]:
        """
        Absolute pitch of every course, course 1 first.

        Steps, in order:

        1. Shift the Renaissance (G) baseline by ``pitch - 67``, floored at 0.
        2. Main courses: a named tuning replaces courses 2.. with cumulative
           intervals below course 1; otherwise a listed tuning walks the
           intervals from course 1 downwards.
        3. Bass courses: the same, anchored on course 7. A listed bass
           tuning starts writing at course 7 itself, one course earlier than
           the listed main tuning does relative to its anchor.
        """
        rules = self.rules
        shift = DEFAULT_FULL_TUNING[0] - rules.pitch
        tuning = [max(0, value - shift) for value in DEFAULT_FULL_TUNING]

        if rules.tuning_named:
            intervals = NAMED_TUNINGS.get(rules.tuning_named)
            if intervals is not None:
                tuning = _apply_named(tuning, 0, intervals)
            else:
                logger.debug("Unknown named tuning %r ignored", rules.tuning_named)
        elif rules.tuning:
            tuning = _retune(tuning, 1, parse_intervals(rules.tuning))

        if rules.bass_tuning_named:
            intervals = NAMED_BASS_TUNINGS.get(rules.bass_tuning_named)
            if intervals is not None:
                tuning = _apply_named(tuning, BASS_COURSE_INDEX, intervals)
            else:
                logger.debug("Unknown named bass tuning %r ignored", rules.bass_tuning_named)
        elif rules.bass_tuning:
            # TODO: check the one-course offset against the TabCode rules
            # documentation before relying on listed bass tunings.
            tuning = _retune(tuning, BASS_COURSE_INDEX, parse_intervals(rules.bass_tuning))

        return tuning

    @property
    def staff_lines(self) -> int | None:
        return self.rules.staff_lines

    def tab_char(self, fret_char: str) -> int | str:
        """Map a fret letter to a position in Italian notation, else return it."""
        if self.rules.notation == ITALIAN_NOTATION:
            return letter_pitch(fret_char)
        return fret_char


def _read_fields(token: Token) -> dict[str, str | int]:
    markup = token.code.lower().strip()[1:-1].strip()
    try:
        root = ET.fromstring(markup)
    except ET.ParseError as exc:
        raise ParseError(f"Malformed ruleset ({exc})", token) from exc

    values: dict[str, str | int] = {}
    for child in root:
        text = (child.text or "").strip()
        if child.tag not in RULE_KEYS:
            logger.debug("Ignoring unknown rule %r", child.tag)
            continue
        if not text:
            continue
        if child.tag in _INT_FIELDS:
            try:
                values[child.tag] = int(text)
            except ValueError as exc:
                raise ParseError(f"Rule <{child.tag}> must be an integer", token) from exc
        else:
            values[child.tag] = text
    return values


def parse_ruleset(token: Token, parent: Ruleset | None = None) -> Ruleset:
    """
    Build a Ruleset from a RULESET token.

    The markup is read case-insensitively. Fields present in the block
    override the parent's; missing ones are kept from the parent, or from
    the defaults (French notation, pitch 67) when there is no parent.

    Raises:
        ParseError: If the markup is malformed or a numeric rule is not an
                    integer.
    """
    base = parent.rules if parent is not None else RuleFields()
    return Ruleset(code=token.code, rules=replace(base, **_read_fields(token)))
