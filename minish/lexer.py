"""Split a command line into shell tokens."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class TokenType(enum.Enum):
    WORD = enum.auto()
    PIPE = enum.auto()
    REDIR_IN = enum.auto()
    REDIR_OUT = enum.auto()
    REDIR_APPEND = enum.auto()
    REDIR_HEREDOC = enum.auto()
    OR = enum.auto()
    AND = enum.auto()
    LPAREN = enum.auto()
    RPAREN = enum.auto()
    ERROR = enum.auto()


class QuoteType(enum.Enum):
    NO_QUOTE = enum.auto()
    SINGLE_QUOTE = enum.auto()
    DOUBLE_QUOTE = enum.auto()


@dataclass
class Token:
    """A lexed token; ``text`` keeps any quote characters it was written with."""

    type: TokenType
    quote: QuoteType
    text: str
    heredoc_content: str | None = None


class LexError(Exception):
    """Raised when a line cannot be tokenised.

    ``silent`` is true for errors the shell does not report (unclosed quotes).
    """

    def __init__(self, message: str, *, silent: bool = False) -> None:
        super().__init__(message)
        self.message = message
        self.silent = silent


_DELIMITERS = frozenset("|<>&();")
_SPACES = frozenset(" \t\n")
_QUOTES = {'"': QuoteType.DOUBLE_QUOTE, "'": QuoteType.SINGLE_QUOTE}

_TWO_CHAR_OPERATORS = {
    ">>": TokenType.REDIR_APPEND,
    "<<": TokenType.REDIR_HEREDOC,
    "||": TokenType.OR,
    "&&": TokenType.AND,
}
_ONE_CHAR_OPERATORS = {
    "|": TokenType.PIPE,
    "<": TokenType.REDIR_IN,
    ">": TokenType.REDIR_OUT,
    "(": TokenType.LPAREN,
    ")": TokenType.RPAREN,
}


def is_space(char: str) -> bool:
    """True for the characters that separate words."""
    return char in _SPACES


def is_delimiter(char: str) -> bool:
    """True for characters that start an operator."""
    return char in _DELIMITERS


def get_operator_type(text: str) -> TokenType:
    """Classify the operator at the start of *text*."""
    two = _TWO_CHAR_OPERATORS.get(text[:2])
    if two is not None:
        return two
    return _ONE_CHAR_OPERATORS.get(text[:1], TokenType.ERROR)


def _read_operator(line: str, pos: int) -> tuple[Token, int]:
    kind = get_operator_type(line[pos:])
    if kind is TokenType.ERROR:
        raise LexError(f"minishell: syntax error near unexpected token `{line[pos]}'")
    length = 2 if kind in _TWO_CHAR_OPERATORS.values() else 1
    return Token(kind, QuoteType.NO_QUOTE, line[pos:pos + length]), pos + length


def _read_quoted(line: str, pos: int) -> tuple[QuoteType, str, int]:
    quote_char = line[pos]
    end = line.find(quote_char, pos + 1)
    if end == -1:
        raise LexError("unclosed quote", silent=True)
    return _QUOTES[quote_char], line[pos:end + 1], end + 1


def _read_word(line: str, pos: int) -> tuple[str, int]:
    end = pos
    while end < len(line):
        char = line[end]
        if is_space(char) or is_delimiter(char) or char in _QUOTES:
            break
        end += 1
    return line[pos:end], end


def _read_segment(line: str, pos: int) -> tuple[QuoteType, str, int]:
    if line[pos] in _QUOTES:
        return _read_quoted(line, pos)
    text, end = _read_word(line, pos)
    return QuoteType.NO_QUOTE, text, end


def lex(line: str) -> list[Token]:
    """Tokenise *line*; raise LexError on a bad operator or an unclosed quote.

    Adjacent word and quoted segments are glued into a single word whose
    quote type is that of its first segment.
    """
    tokens: list[Token] = []
    pos = 0
    length = len(line)
    while True:
        while pos < length and is_space(line[pos]):
            pos += 1
        if pos >= length:
            break
        if is_delimiter(line[pos]):
            token, pos = _read_operator(line, pos)
            tokens.append(token)
            continue
        quote, text, pos = _read_segment(line, pos)
        parts = [text]
        while pos < length and not is_space(line[pos]) and not is_delimiter(line[pos]):
            _, part, pos = _read_segment(line, pos)
            parts.append(part)
        tokens.append(Token(TokenType.WORD, quote, "".join(parts)))
    return tokens