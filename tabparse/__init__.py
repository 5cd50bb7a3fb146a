"""tabparse: TabCode lute tablature parser."""

__version__ = "0.1.0"

from tabparse.config import ParserConfig
from tabparse.exceptions import ParseError, ScanError, TabParseError, UnbalancedCommentError
from tabparse.lexer import Lexer, Token, TokenType, scan
from tabparse.parser import Parser, parse
from tabparse.rules import Ruleset, parse_ruleset

__all__ = [
    "Lexer",
    "ParseError",
    "Parser",
    "ParserConfig",
    "Ruleset",
    "ScanError",
    "TabParseError",
    "Token",
    "TokenType",
    "UnbalancedCommentError",
    "__version__",
    "parse",
    "parse_ruleset",
    "scan",
]
