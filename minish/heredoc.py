"""Reading here-document bodies before a line is parsed."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from minish.lexer import Token, TokenType
from minish.parser import ParseError
from minish.state import ShellState

ReadLine = Callable[[str], "str | None"]

_PROMPT = "> "


class HeredocInterrupted(Exception):
    """Reading a here-document was cut short by an interrupt or end of input."""


def read_heredoc(delimiter: str, read_line: ReadLine) -> str:
    """Read lines with ``read_line("> ")`` until one equals *delimiter*.

    Returns the lines read, each ended by a newline.  End of input (None)
    or KeyboardInterrupt raises HeredocInterrupted.
    """
    lines: list[str] = []
    while True:
        try:
            line = read_line(_PROMPT)
        except KeyboardInterrupt as exc:
            raise HeredocInterrupted("interrupted") from exc
        if line is None:
            raise HeredocInterrupted("end of input")
        if line == delimiter:
            return "".join(lines)
        lines.append(line + "\n")


def collect_heredocs(
    tokens: Sequence[Token], read_line: ReadLine, state: ShellState
) -> None:
    """Read the body of every ``<<`` in *tokens* into its ``heredoc_content``.

    Raises ParseError (status 2) when ``<<`` is not followed by a word, and
    HeredocInterrupted, with the status set to 130, when reading stops early.
    """
    for index, token in enumerate(tokens):
        if token.type is not TokenType.REDIR_HEREDOC:
            continue
        target = tokens[index + 1] if index + 1 < len(tokens) else None
        if target is None or target.type is not TokenType.WORD:
            shown = target.text if target is not None else "newline"
            state.exit_status = 2
            raise ParseError(
                f"minishell: syntax error near unexpected token '{shown}'", status=2
            )
        try:
            token.heredoc_content = read_heredoc(target.text, read_line)
        except HeredocInterrupted:
            state.exit_status = 130
            raise
        state.exit_status = 0