"""TabCode constants: duration letters, reference tunings and defaults."""

from typing import Final

# ── Reference tunings (MIDI note per course, course 1 first) ──────────────────

FULL_TUNINGS: Final[dict[str, list[int]]] = {
    "Renaissance (G)": [67, 62, 57, 53, 48, 43, 41, 40, 38, 36, 35, 33, 31],
    "Renaissance abzug (G)": [67, 62, 57, 53, 48, 41, 40, 38, 38, 36, 35, 33, 31],
    "Renaissance (A)": [69, 64, 59, 55, 50, 45, 43, 42, 40, 38, 37, 35, 33],
    "Renaissance guitar": [67, 62, 58, 65, 0, 0, 0, 0, 0, 0, 0, 0, 0],
    "Baroque D minor": [65, 62, 57, 53, 50, 45, 43, 41, 40, 38, 36, 34, 33],
    "Baroque D minor 415": [64, 61, 56, 52, 49, 44, 42, 40, 39, 37, 35, 33, 31],
    "Bandora": [57, 52, 48, 43, 38, 36, 31, 26, 24, 23, 21, 19, 17, 16],
}

TICKS_PER_CROTCHET: Final[int] = 128

#: Shortest to longest: semihemidemisemiquaver ... breve.
DURATION_LETTERS: Final[str] = "ZYTSEQHWB"
FERMATA: Final[str] = "F"
RHYTHM_FLAGS: Final[str] = DURATION_LETTERS + FERMATA
TAB_LETTERS: Final[str] = "abcdefghijklmnopqrstuvwxyz"

# ── Defaults ──────────────────────────────────────────────────────────────────

DEFAULT_MAIN_COURSE_COUNT: Final[int] = 6
MAX_MAIN_COURSE_COUNT: Final[int] = 9
DEFAULT_PITCH: Final[int] = 67
DEFAULT_NOTATION: Final[str] = "French"
DEFAULT_FULL_TUNING: Final[list[int]] = FULL_TUNINGS["Renaissance (G)"]
ITALIAN_NOTATION: Final[str] = "italian"


def flag_duration(flag: str) -> float | None:
    """
    Return the length of a rhythm flag in crotchets.

    ``Q`` is one crotchet; each step along DURATION_LETTERS doubles or
    halves it. A trailing dot adds half again. A fermata has no length.

    Args:
        flag: Rhythm flag text, e.g. ``"Q"``, ``"E."`` or ``"F"``.

    Returns:
        Crotchet count, or None for a fermata.
    """
    letter = flag[0]
    if letter == FERMATA:
        return None
    position = DURATION_LETTERS.index(letter)
    crotchets = 2.0 ** (position - DURATION_LETTERS.index("Q"))
    if flag.endswith("."):
        crotchets *= 1.5
    return crotchets


def letter_pitch(fret_char: str) -> int:
    """
    Map a tablature letter to a 0-based fret position.

    The letter alphabet has two reserved gaps: one letter is skipped after
    index 8 and a second after index 20.
    """
    position = TAB_LETTERS.index(fret_char)
    if position > 20:
        position -= 2
    elif position > 8:
        position -= 1
    return position
