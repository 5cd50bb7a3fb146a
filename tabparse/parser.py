"""Parser: assembles lexer tokens into TabCode events."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from typing import Final

from tabparse.config import ParserConfig
from tabparse.exceptions import ParseError
from tabparse.lexer import Lexer, Token, TokenType
from tabparse.logger import get_logger
from tabparse.models import (
    Barline,
    BassNote,
    Chord,
    Comment,
    Duration,
    Event,
    Fingering,
    Line,
    MainCourseRef,
    Metre,
    Ornament,
    PageBreak,
    Pitch,
    Rest,
    SystemBreak,
    TabNote,
)
from tabparse.rules import Ruleset, parse_ruleset

logger = get_logger(__name__)

# ── Barline and metre sub-patterns ────────────────────────────────────────────

BAR_FLAGS: Final[dict[str, re.Pattern[str]]] = {
    "double_bar": re.compile(r"\|{2}"),
    "l_repeat": re.compile(r"^:\|"),
    "r_repeat": re.compile(r"\|:$"),
    "dashed": re.compile(r"^\|="),
    "non_counting": re.compile(r"^\|=?0$"),
    "mid_dots": re.compile(r"^\|:\|$"),
}

METRE_COMPONENTS: Final[re.Pattern[str]] = re.compile(r"[^M(:;)]+")
METRE_VERTICAL: Final[str] = ":"

LINE_TYPES: Final[dict[TokenType, str]] = {
    TokenType.LINE_TYPE_AB: "curved",
    TokenType.LINE_TYPE_C: "ensemble",
    TokenType.LINE_TYPE_D: "separee",
}

#: Tokens that belong to a tab word; anything else closes it.
INLINE_TYPES: Final[frozenset[TokenType]] = frozenset(
    {
        TokenType.RHYTHM_FLAG,
        TokenType.BEAM,
        TokenType.TUPLE,
        TokenType.MAIN_COURSE_REF,
        TokenType.MAIN_PITCH,
        TokenType.BASS_PITCH,
        TokenType.FINGERING,
        TokenType.ORNAMENT,
        *LINE_TYPES,
    }
)


@dataclass
class Context:
    """
    Mutable state of one parse.

    Attributes:
        cur_rhythm:      Rhythm flag of the tab word being read.
        prev_rhythm:     Rhythm flag of the previous tab word, if it had one.
        cur_notes:       Main-course notes of the tab word.
        cur_bass_notes:  Bass-course notes of the tab word.
        last_note:       ``(is_bass, index)`` of the most recent note.
        word_code:       Raw text of the tab word so far.
        main_course_ref: Course reference waiting for a line.
        page_num, sys_num, bar_num: Next numbers to assign.
        ruleset:         Active ruleset, None until the first block.
        comments:        Emit Comment events.
    """

    page_num: int = 1
    sys_num: int = 1
    bar_num: int = 1
    comments: bool = True
    cur_rhythm: Duration | None = None
    prev_rhythm: Duration | None = None
    cur_notes: list[TabNote] = field(default_factory=list)
    cur_bass_notes: list[BassNote] = field(default_factory=list)
    last_note: tuple[bool, int] | None = None
    word_code: str = ""
    main_course_ref: MainCourseRef | None = None
    ruleset: Ruleset | None = None

    @classmethod
    def from_config(cls, config: ParserConfig) -> Context:
        return cls(
            page_num=config.page_num,
            sys_num=config.sys_num,
            bar_num=config.bar_num,
            comments=config.comments,
        )

    def within_chord(self) -> bool:
        return bool(self.cur_notes or self.cur_bass_notes)

    def new_rhythm_context(self) -> bool:
        return self.cur_rhythm is not None


class Parser:
    """
    Context-sensitive TabCode parser.

    Inline tokens (rhythm flag, pitches, course reference, fingering,
    ornament, line, beam, tuple) accumulate into a *tab word*. Any other
    token, or the end of input, flushes the tab word into a Chord, a Rest
    or nothing, and is then turned into its own event.
    """

    def __init__(self, config: ParserConfig | None = None) -> None:
        self.config = config if config is not None else ParserConfig()
        self.lexer = Lexer(self.config.main_course_count)

    # ------------------------------------------------------------------
    # Tab word handlers
    # ------------------------------------------------------------------

    def _rhythm_flag(self, token: Token, context: Context) -> None:
        # A rhythm flag may only open a tab word.
        if context.within_chord() or context.new_rhythm_context():
            raise ParseError("Unexpected rhythm flag", token)
        context.cur_rhythm = Duration(token.code)

    def _main_course_ref(self, token: Token, context: Context) -> None:
        if context.main_course_ref is not None:
            raise ParseError("Unexpected main course reference", token)
        context.main_course_ref = MainCourseRef(token.code, int(token.code[1]))

    def _main_pitch(self, token: Token, context: Context) -> None:
        pitch = Pitch(token.code, token.code[0], int(token.code[1]), context.ruleset)
        context.cur_notes.append(TabNote(pitch))
        context.last_note = (False, len(context.cur_notes) - 1)

    def _bass_pitch(self, token: Token, context: Context) -> None:
        # Xa, Xa/, Xa// ... or X1, X2 ...: fret letter plus bass course index.
        body = token.code[1:]
        if body[:1].isdigit():
            fret, bass_index = "a", int(body)
        elif body:
            fret, bass_index = body[0], 1 + body.count("/")
        else:
            fret, bass_index = "a", 1
        if bass_index < 1:
            raise ParseError("Bass course index must be at least 1", token)
        course = self.config.main_course_count + bass_index
        pitch = Pitch(token.code, fret, course, context.ruleset)
        context.cur_bass_notes.append(BassNote(pitch))
        context.last_note = (True, len(context.cur_bass_notes) - 1)

    def _decorate(self, token: Token, context: Context, what: str, **changes: object) -> None:
        """Replace the most recent note with a decorated copy."""
        if not context.within_chord() or context.last_note is None:
            raise ParseError(f"Unexpected {what}", token)
        is_bass, index = context.last_note
        notes = context.cur_bass_notes if is_bass else context.cur_notes
        notes[index] = replace(notes[index], **changes)  # type: ignore[call-overload]

    def _line(self, token: Token, context: Context) -> None:
        line = Line(token.code, LINE_TYPES[token.type], context.main_course_ref)
        self._decorate(token, context, "line", line=line)
        context.main_course_ref = None

    def _inline(self, token: Token, context: Context) -> None:
        if token.type is TokenType.RHYTHM_FLAG:
            self._rhythm_flag(token, context)
        elif token.type is TokenType.MAIN_COURSE_REF:
            self._main_course_ref(token, context)
        elif token.type is TokenType.MAIN_PITCH:
            self._main_pitch(token, context)
        elif token.type is TokenType.BASS_PITCH:
            self._bass_pitch(token, context)
        elif token.type is TokenType.FINGERING:
            self._decorate(token, context, "fingering", fingering=Fingering(token.code))
        elif token.type is TokenType.ORNAMENT:
            self._decorate(token, context, "ornament", ornament=Ornament(token.code))
        elif token.type in LINE_TYPES:
            self._line(token, context)
        # BEAM and TUPLE are recognised but carry no grouping yet.
        context.word_code += token.code

    def _flush(self, context: Context) -> Chord | Rest | None:
        """Close the current tab word and return its event, if any."""
        event: Chord | Rest | None = None
        if context.within_chord():
            event = Chord(
                code=context.word_code,
                main_courses=tuple(context.cur_notes),
                bass_courses=tuple(context.cur_bass_notes),
                duration=context.cur_rhythm or context.prev_rhythm,
            )
            context.cur_notes = []
            context.cur_bass_notes = []
            context.last_note = None
        elif context.cur_rhythm is not None:
            event = Rest(code=context.word_code, duration=context.cur_rhythm)

        context.prev_rhythm = context.cur_rhythm
        context.cur_rhythm = None
        context.word_code = ""

        if context.main_course_ref is not None:
            raise ParseError(
                f"Unhandled main course reference {context.main_course_ref.code!r}"
            )
        return event

    # ------------------------------------------------------------------
    # Event builders
    # ------------------------------------------------------------------

    def _barline(self, token: Token, context: Context) -> Barline:
        flags = {name: bool(pattern.search(token.code)) for name, pattern in BAR_FLAGS.items()}
        barline = Barline(token.code, context.bar_num, **flags)
        context.bar_num += 1
        return barline

    def _metre(self, token: Token) -> Metre:
        return Metre(
            token.code,
            components=tuple(METRE_COMPONENTS.findall(token.code)),
            vertical=METRE_VERTICAL in token.code,
        )

    def _event(self, token: Token, context: Context) -> Event | None:
        if token.type is TokenType.SPACE:
            return None
        if token.type is TokenType.COMMENT:
            return Comment(token.code) if context.comments else None
        if token.type is TokenType.PAGE:
            page = PageBreak(token.code, context.page_num)
            context.page_num += 1
            return page
        if token.type is TokenType.SYSTEM:
            system = SystemBreak(token.code, context.sys_num)
            context.sys_num += 1
            return system
        if token.type is TokenType.BAR:
            return self._barline(token, context)
        if token.type is TokenType.METRE:
            return self._metre(token)
        if token.type is TokenType.RULESET:
            context.ruleset = parse_ruleset(token, context.ruleset)
            return context.ruleset
        raise ParseError("Unexpected token", token)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def parse(self, text: str) -> list[Event]:
        """
        Parse TabCode text into an ordered list of events.

        Raises:
            ScanError: On a lexical error.
            ParseError: On a grammar error. No partial result is returned.
        """
        context = Context.from_config(self.config)
        events: list[Event] = []

        for token, count in self.lexer.counted_tokens(text):
            if self.config.debug:
                logger.debug("%d %s", count, token)

            if token.type in INLINE_TYPES:
                self._inline(token, context)
                continue

            word = self._flush(context)
            if word is not None:
                events.append(word)

            event = self._event(token, context)
            if event is not None:
                events.append(event)

        word = self._flush(context)
        if word is not None:
            events.append(word)
        return events


def parse(text: str, config: ParserConfig | None = None) -> list[Event]:
    """Parse ``text`` with a fresh :class:`Parser`."""
    return Parser(config).parse(text)
