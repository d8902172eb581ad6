"""Variable and wildcard expansion applied to lexed tokens."""

from __future__ import annotations

import os
from collections.abc import Iterable

from minish.lexer import QuoteType, Token, TokenType
from minish.state import ShellState


def _is_ascii_alpha(char: str) -> bool:
    return len(char) == 1 and char.isascii() and char.isalpha()


def _is_name_char(char: str) -> bool:
    return len(char) == 1 and char.isascii() and (char.isalnum() or char == "_")


def is_valid_var_char(char: str) -> bool:
    """True when *char* may follow ``$`` to start an expansion."""
    return _is_ascii_alpha(char) or char in ("_", "?")


def expand(text: str, state: ShellState) -> str:
    """Replace ``$NAME`` and ``$?`` in *text* with their values.

    Unset variables expand to nothing; a ``$`` not followed by a letter,
    underscore or ``?`` is kept as it is.  Quote characters are left alone.
    """
    out: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        following = text[pos + 1:pos + 2]
        if char == "$" and is_valid_var_char(following):
            if following == "?":
                out.append(str(state.exit_status))
                pos += 2
                continue
            end = pos + 1
            while end < length and _is_name_char(text[end]):
                end += 1
            value = state.getenv(text[pos + 1:end])
            if value:
                out.append(value)
            pos = end
            continue
        out.append(char)
        pos += 1
    return "".join(out)


def match_wildcard(name: str, pattern: str) -> bool:
    """True when *name* matches *pattern*, where only ``*`` is special."""
    n_pos = p_pos = 0
    star_p = -1
    star_n = 0
    while n_pos < len(name):
        if p_pos < len(pattern) and pattern[p_pos] == "*":
            star_p = p_pos
            star_n = n_pos
            p_pos += 1
        elif p_pos < len(pattern) and pattern[p_pos] == name[n_pos]:
            n_pos += 1
            p_pos += 1
        elif star_p != -1:
            star_n += 1
            n_pos = star_n
            p_pos = star_p + 1
        else:
            return False
    while p_pos < len(pattern) and pattern[p_pos] == "*":
        p_pos += 1
    return p_pos == len(pattern)


def expand_wildcard(pattern: str) -> list[str]:
    """Names in the current directory matching *pattern*, hidden ones excluded.

    Names come in directory order; an unreadable directory yields no names.
    """
    try:
        with os.scandir(".") as entries:
            return [
                entry.name
                for entry in entries
                if not entry.name.startswith(".") and match_wildcard(entry.name, pattern)
            ]
    except OSError:
        return []


def _expand_one(token: Token, state: ShellState) -> list[Token]:
    if token.quote is QuoteType.SINGLE_QUOTE:
        return [token]
    expanded = expand(token.text, state)
    if token.type is TokenType.REDIR_HEREDOC:
        if token.heredoc_content is not None:
            token.heredoc_content = expand(token.heredoc_content, state)
        return [token]
    token.text = expanded
    if token.quote is not QuoteType.NO_QUOTE or "*" not in expanded:
        return [token]
    matches = expand_wildcard(expanded)
    if not matches:
        return [token]
    token.text = matches[0]
    extra = [Token(TokenType.WORD, QuoteType.NO_QUOTE, name) for name in matches[1:]]
    return [token, *extra]


def expand_tokens(tokens: Iterable[Token], state: ShellState) -> list[Token]:
    """Expand every token and return the resulting token list.

    Single-quoted words are left untouched, here-document bodies are
    expanded, and unquoted words holding ``*`` become one word per match.
    """
    result: list[Token] = []
    for token in tokens:
        result.extend(_expand_one(token, state))
    return result