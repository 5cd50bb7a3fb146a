"""Exception hierarchy for TabCode scanning and parsing."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from tabparse.lexer import Token


class TabParseError(Exception):
    """Base class for every error raised by tabparse."""


class ConfigError(TabParseError):
    """Invalid parser configuration."""


class ScanError(TabParseError):
    """
    Lexical error: no token pattern matches at an offset.

    Attributes:
        char:     The offending character.
        position: Absolute offset of that character in the input.
    """

    def __init__(self, message: str, text: str, position: int) -> None:
        self.char = text[position] if 0 <= position < len(text) else ""
        self.position = position
        super().__init__(f"{message}: {self.char!r} at position {position}")


class UnbalancedCommentError(ScanError):
    """A comment's opening brace is never closed."""


class ParseError(TabParseError):
    """
    Grammar error raised while assembling tokens into events.

    Attributes:
        token: The offending token, when one is available.
    """

    def __init__(self, message: str, token: Token | None = None) -> None:
        self.token = token
        if token is not None:
            message = f"{message}: {token.code!r} at position {token.index}"
        super().__init__(message)
