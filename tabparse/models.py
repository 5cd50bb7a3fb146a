"""Data models for parsed TabCode events."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Union

from tabparse.constants import FERMATA, TICKS_PER_CROTCHET, flag_duration

if TYPE_CHECKING:
    from tabparse.rules import Ruleset


# ── Tab word parts ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Duration:
    """A rhythm flag, e.g. ``Q`` or ``E.``."""

    code: str

    @property
    def dotted(self) -> bool:
        return self.code.endswith(".")

    @property
    def fermata(self) -> bool:
        return self.code.startswith(FERMATA)

    @property
    def crotchets(self) -> float | None:
        """Length in crotchets, None for a fermata."""
        return flag_duration(self.code)

    @property
    def ticks(self) -> int | None:
        crotchets = self.crotchets
        if crotchets is None:
            return None
        return round(crotchets * TICKS_PER_CROTCHET)


@dataclass(frozen=True)
class MainCourseRef:
    """A course number with no fret, waiting for a line to consume it."""

    code: str
    course: int


@dataclass(frozen=True)
class Pitch:
    """
    A fret/course location.

    Attributes:
        code:    Raw token text, e.g. ``"a1"`` or ``"Xa//"``.
        fret:    Fret letter.
        course:  Course number, 1 = highest.
        ruleset: Ruleset active when the pitch was read. Not compared and
                 not serialised.
    """

    code: str
    fret: str
    course: int
    ruleset: Ruleset | None = field(
        default=None, compare=False, repr=False, metadata={"serialize": False}
    )

    def fret_position(self) -> int | str:
        """Resolve the fret through the ruleset's notation mode."""
        if self.ruleset is None:
            return self.fret
        return self.ruleset.tab_char(self.fret)


@dataclass(frozen=True)
class Fingering:
    code: str


@dataclass(frozen=True)
class Ornament:
    code: str


@dataclass(frozen=True)
class Line:
    """
    A line annotation.

    ``line_type`` is ``"curved"`` for straight/curved lines ``(C…)``,
    ``"ensemble"`` for ``(E…)`` and ``"separee"`` for ``(S…)`` or ``/``.
    A line that follows a course reference such as ``-3`` carries it.
    """

    code: str
    line_type: str
    main_course_ref: MainCourseRef | None = None


@dataclass(frozen=True)
class TabNote:
    """A note on a main (fretted) course."""

    pitch: Pitch
    fingering: Fingering | None = None
    ornament: Ornament | None = None
    line: Line | None = None


@dataclass(frozen=True)
class BassNote:
    """A note on a bass course."""

    pitch: Pitch
    fingering: Fingering | None = None
    ornament: Ornament | None = None
    line: Line | None = None


# ── Events ────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Comment:
    code: str


@dataclass(frozen=True)
class PageBreak:
    code: str
    page_num: int


@dataclass(frozen=True)
class SystemBreak:
    code: str
    sys_num: int


@dataclass(frozen=True)
class Barline:
    """A barline and the markings read from its text."""

    code: str
    bar_num: int
    double_bar: bool = False
    l_repeat: bool = False
    r_repeat: bool = False
    dashed: bool = False
    non_counting: bool = False
    mid_dots: bool = False


@dataclass(frozen=True)
class Metre:
    """A metre sign, e.g. ``M(C/:3)`` → components ``("C/", "3")``, vertical."""

    code: str
    components: tuple[str, ...] = ()
    vertical: bool = False


@dataclass(frozen=True)
class Rest:
    """A rhythm flag with no notes under it."""

    code: str
    duration: Duration


@dataclass(frozen=True)
class Chord:
    """
    Notes sounding together.

    ``duration`` is the tab word's own rhythm flag or, when it has none,
    the flag of the previous tab word. It is None when neither exists.
    """

    code: str
    main_courses: tuple[TabNote, ...] = ()
    bass_courses: tuple[BassNote, ...] = ()
    duration: Duration | None = None


# Ruleset lives in tabparse.rules; it is an Event too.
Event = Union[Comment, PageBreak, SystemBreak, Barline, Metre, Rest, Chord, "Ruleset"]
