"""Build a syntax tree from a list of tokens."""

from __future__ import annotations

import enum
from collections.abc import Iterable, Sequence

from minish.lexer import QuoteType, Token, TokenType
from minish.syntax_tree import Command, Node, NodeType, Redirection, RedirType


class ParseError(Exception):
    """A syntax error; ``status`` is the exit status it sets, if any."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


class Priority(enum.Enum):
    """Operator binding strength, loosest first."""

    LOW = enum.auto()
    MEDIUM = enum.auto()


_TARGETS = {
    Priority.LOW: frozenset({TokenType.OR, TokenType.AND}),
    Priority.MEDIUM: frozenset({TokenType.PIPE}),
}

_REDIRECTIONS = {
    TokenType.REDIR_IN: RedirType.IN,
    TokenType.REDIR_OUT: RedirType.OUT,
    TokenType.REDIR_APPEND: RedirType.APPEND,
    TokenType.REDIR_HEREDOC: RedirType.HEREDOC,
}

_NODE_TYPES = {
    TokenType.AND: NodeType.AND,
    TokenType.OR: NodeType.OR,
    TokenType.PIPE: NodeType.PIPE,
}

_PARENS = frozenset({TokenType.LPAREN, TokenType.RPAREN})


def _unexpected(text: str) -> str:
    return f"minishell: syntax error near unexpected token `{text}'"


def remove_quote(text: str) -> str:
    """Strip quote pairs from *text*, keeping what they enclose.

    An unmatched opening quote is dropped and the rest is kept as it is.
    """
    out: list[str] = []
    pos = 0
    length = len(text)
    while pos < length:
        char = text[pos]
        if char in ("'", '"'):
            end = text.find(char, pos + 1)
            if end == -1:
                out.append(text[pos + 1:])
                break
            out.append(text[pos + 1:end])
            pos = end + 1
        else:
            out.append(char)
            pos += 1
    return "".join(out)


def _find_operator(
    tokens: Sequence[Token], start: int, end: int, priority: Priority
) -> tuple[int, TokenType] | None:
    targets = _TARGETS[priority]
    depth = 0
    found: tuple[int, TokenType] | None = None
    for index, token in enumerate(tokens[start:end], start):
        if token.type is TokenType.LPAREN:
            depth += 1
        elif token.type is TokenType.RPAREN:
            depth -= 1
        if depth == 0 and token.type in targets:
            found = (index, token.type)
    return found


def find_operator(
    tokens: Sequence[Token], priority: Priority
) -> tuple[int, TokenType] | None:
    """Position and type of the last top-level operator of *priority*, or None."""
    return _find_operator(tokens, 0, len(tokens), priority)


def _has_wrapping(tokens: Sequence[Token], start: int, end: int) -> bool:
    if start >= end or tokens[start].type is not TokenType.LPAREN:
        return False
    if tokens[end - 1].type is not TokenType.RPAREN:
        return False
    depth = 0
    for token in tokens[start:end - 1]:
        if token.type is TokenType.LPAREN:
            depth += 1
        elif token.type is TokenType.RPAREN:
            depth -= 1
        if depth == 0:
            return False
    return True


def has_wrapping_parentheses(tokens: Sequence[Token]) -> bool:
    """True when one pair of parentheses encloses the whole token list."""
    return _has_wrapping(tokens, 0, len(tokens))


def _validate_redirections(tokens: Sequence[Token], start: int, end: int) -> None:
    for index in range(start, end):
        if tokens[index].type not in _REDIRECTIONS:
            continue
        if index + 1 >= len(tokens):
            raise ParseError(_unexpected("newline"), status=2)
        target = tokens[index + 1]
        if target.type is not TokenType.WORD:
            raise ParseError(
                f"minishell :syntax error near unexpected token `{target.text}'",
                status=2,
            )


def _make_redirection(token: Token, target: Token) -> Redirection:
    kind = _REDIRECTIONS[token.type]
    if kind is RedirType.HEREDOC:
        content = token.heredoc_content if token.heredoc_content is not None else ""
        return Redirection(kind, target.text, content)
    return Redirection(kind, remove_quote(target.text))


def _parse_command(tokens: Sequence[Token], start: int, end: int) -> Command:
    _validate_redirections(tokens, start, end)
    command = Command()
    index = start
    while index < end:
        token = tokens[index]
        if token.type in _PARENS:
            raise ParseError(_unexpected("("))
        if token.type in _REDIRECTIONS:
            command.redirections.append(_make_redirection(token, tokens[index + 1]))
            index += 2
            continue
        if token.type is TokenType.WORD and not (
            token.quote is QuoteType.NO_QUOTE and token.text == ""
        ):
            command.argv.append(remove_quote(token.text))
        index += 1
    return command


def parse_command(tokens: Iterable[Token]) -> Command:
    """Build a simple command from *tokens*: its words and its redirections."""
    token_list = list(tokens)
    return _parse_command(token_list, 0, len(token_list))


def _split(
    tokens: Sequence[Token], start: int, end: int, position: int, kind: TokenType
) -> Node:
    if position == start:
        raise ParseError(_unexpected(tokens[start].text))
    node = Node(_NODE_TYPES[kind])
    node.left = _parse(tokens, start, position)
    node.right = _parse(tokens, position + 1, end)
    return node


def _parse(tokens: Sequence[Token], start: int, end: int) -> Node:
    if start >= end:
        raise ParseError(_unexpected("newline"))
    for priority in Priority:
        found = _find_operator(tokens, start, end, priority)
        if found is not None:
            return _split(tokens, start, end, *found)
    if _has_wrapping(tokens, start, end):
        return _parse(tokens, start + 1, end - 1)
    if tokens[start].type is TokenType.LPAREN:
        raise ParseError("minishell: syntax error near unexpected end of file")
    return Node(NodeType.COMMAND, command=_parse_command(tokens, start, end))


def parse(tokens: Iterable[Token]) -> Node:
    """Parse *tokens* into a tree; raise ParseError on a syntax error.

    ``&&`` and ``||`` bind loosest and group to the left, then ``|``;
    parentheses group.
    """
    token_list = list(tokens)
    return _parse(token_list, 0, len(token_list))