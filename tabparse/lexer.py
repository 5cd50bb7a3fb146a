"""Lexer: splits TabCode text into an ordered stream of typed tokens."""

from __future__ import annotations

import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from tabparse.constants import DEFAULT_MAIN_COURSE_COUNT, DURATION_LETTERS, RHYTHM_FLAGS
from tabparse.exceptions import ScanError, UnbalancedCommentError


class TokenType(str, Enum):
    """Token kinds, in the order their patterns are tried."""

    SPACE = "SPACE"
    PAGE = "PAGE"
    SYSTEM = "SYSTEM"
    BAR = "BAR"
    METRE = "METRE"
    RHYTHM_FLAG = "RHYTHM_FLAG"
    BEAM = "BEAM"
    TUPLE = "TUPLE"
    MAIN_COURSE_REF = "MAIN_COURSE_REF"
    MAIN_PITCH = "MAIN_PITCH"
    BASS_PITCH = "BASS_PITCH"
    FINGERING = "FINGERING"
    ORNAMENT = "ORNAMENT"
    LINE_TYPE_AB = "LINE_TYPE_AB"
    LINE_TYPE_C = "LINE_TYPE_C"
    LINE_TYPE_D = "LINE_TYPE_D"
    RULESET = "RULESET"
    # Produced by the brace scanner, never by a pattern.
    COMMENT = "COMMENT"


@dataclass(frozen=True)
class Token:
    """
    A slice of the input.

    Attributes:
        type:       Token kind.
        code:       Raw text of the token.
        index:      Start offset in the input.
        last_index: End offset (exclusive).
    """

    type: TokenType
    code: str
    index: int
    last_index: int


def make_rules(
    main_course_count: int = DEFAULT_MAIN_COURSE_COUNT,
) -> list[tuple[TokenType, re.Pattern[str]]]:
    """
    Build the ordered token patterns.

    The first pattern that matches at the current offset wins, whatever
    the length of later matches. Several patterns overlap (a bar and the
    ``:`` fingering shorthand, ``M`` metres and pitches, ``-`` fingering and
    course references), so the order below is part of the grammar.

    Args:
        main_course_count: Highest course digit accepted by MAIN_PITCH and
                           MAIN_COURSE_REF.
    """
    courses = f"1-{main_course_count}"
    return [
        (TokenType.SPACE, re.compile(r"\s+", re.ASCII)),
        (TokenType.PAGE, re.compile(r"\{>\}", re.ASCII)),
        (TokenType.SYSTEM, re.compile(r"\{\^\}", re.ASCII)),
        (TokenType.BAR, re.compile(r":?\|[^\s{}]*", re.ASCII)),
        (TokenType.METRE, re.compile(r"M[^\s{}]*", re.ASCII)),
        (TokenType.RHYTHM_FLAG, re.compile(rf"[{RHYTHM_FLAGS}]\.?", re.ASCII)),
        (TokenType.BEAM, re.compile(r"(?:\[+(?!\d\])|\]+)", re.ASCII)),
        (
            TokenType.TUPLE,
            re.compile(rf"(?:\[?\d\]?\(\d?[{DURATION_LETTERS}]\)|\[\d\]|\d)", re.ASCII),
        ),
        # A 'null pitch': course number without a fret.
        (TokenType.MAIN_COURSE_REF, re.compile(rf"-[{courses}]", re.ASCII)),
        (TokenType.MAIN_PITCH, re.compile(rf"[a-z][{courses}]", re.ASCII)),
        (TokenType.BASS_PITCH, re.compile(r"X(?:[a-z]/*|\d*)", re.ASCII)),
        (
            TokenType.FINGERING,
            re.compile(r"(?:\(F[lr]?(?:[1-4!\-\"]|\.+):[1-8]\)|[.:\-!\"](?![|\d]))", re.ASCII),
        ),
        (
            TokenType.ORNAMENT,
            re.compile(r"(?:\(O[acdefghijkl]\d?(?::\d)?\)|[ux,#<~*])", re.ASCII),
        ),
        (TokenType.LINE_TYPE_AB, re.compile(r"\(C[ud]?(?:-?\d+:-?[1-8]{1,2})?\)", re.ASCII)),
        (TokenType.LINE_TYPE_C, re.compile(r"\(E\d*\)", re.ASCII)),
        (TokenType.LINE_TYPE_D, re.compile(r"(?:\(S[ud]?(?::[lr])?\)|/)", re.ASCII)),
        # Embedded XML; scanned as one token and parsed by tabparse.rules.
        (
            TokenType.RULESET,
            re.compile(r"\{\s*<rules>.*?</rules>\s*\}", re.ASCII | re.IGNORECASE | re.DOTALL),
        ),
    ]


def find_comment_end(text: str, start: int) -> int:
    """
    Return the offset just past the brace that balances ``text[start]``.

    Raises:
        UnbalancedCommentError: If the input ends before the braces balance.
    """
    depth = 0
    for i in range(start, len(text)):
        char = text[i]
        if char == "{":
            depth += 1
        elif char == "}":
            depth -= 1
        if depth == 0:
            return i + 1
    raise UnbalancedCommentError("Unbalanced comment braces", text, start)


class Lexer:
    """
    Priority-ordered pattern matcher over TabCode text.

    Tokens cover the input with no gaps or overlaps, so joining their
    ``code`` in order gives back the original text.
    """

    def __init__(self, main_course_count: int = DEFAULT_MAIN_COURSE_COUNT) -> None:
        self.main_course_count = main_course_count
        self.rules = make_rules(main_course_count)

    def _match(self, text: str, index: int) -> Token | None:
        for token_type, pattern in self.rules:
            match = pattern.match(text, index)
            if match:
                return Token(token_type, match.group(0), index, match.end())
        return None

    def tokens(self, text: str) -> Iterator[Token]:
        """
        Yield tokens lazily from the start of ``text``.

        Raises:
            ScanError: If no pattern matches and the character is not ``{``.
            UnbalancedCommentError: If a comment is never closed.
        """
        for token, _ in self.counted_tokens(text):
            yield token

    def counted_tokens(self, text: str) -> Iterator[tuple[Token, int]]:
        """Yield ``(token, count)`` pairs, count being a 1-based running index."""
        index = 0
        count = 0
        end = len(text)

        while index < end:
            count += 1
            token = self._match(text, index)
            if token is None:
                if text[index] != "{":
                    raise ScanError("Unexpected symbol", text, index)
                last_index = find_comment_end(text, index)
                token = Token(TokenType.COMMENT, text[index:last_index], index, last_index)
            index = token.last_index
            yield token, count


def scan(text: str, main_course_count: int = DEFAULT_MAIN_COURSE_COUNT) -> Iterator[Token]:
    """Tokenise ``text``; see :meth:`Lexer.tokens`."""
    return Lexer(main_course_count).tokens(text)
