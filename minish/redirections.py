"""Opening the files a command's redirections name."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Iterable
from dataclasses import dataclass
from typing import BinaryIO

from minish.syntax_tree import Redirection, RedirType


class RedirectionError(Exception):
    """A redirection could not be applied; ``status`` is the exit status."""

    def __init__(self, message: str, *, status: int = 1) -> None:
        super().__init__(message)
        self.message = message
        self.status = status


@dataclass
class Streams:
    """The standard input and output a command should use; None means inherit."""

    stdin: BinaryIO | None = None
    stdout: BinaryIO | None = None

    def close(self) -> None:
        """Close any opened stream."""
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()
        self.stdin = None
        self.stdout = None

    def __enter__(self) -> Streams:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _open(path: str, flags: int, mode: str) -> BinaryIO:
    try:
        fd = os.open(path, flags, 0o644)
    except OSError as exc:
        raise RedirectionError(f"minishell: {path}: {exc.strerror}") from exc
    return os.fdopen(fd, mode)


def _heredoc_stream(content: str | None) -> BinaryIO:
    if content is None:
        raise RedirectionError("minishell: here-document has no content")
    stream = tempfile.TemporaryFile()
    stream.write(content.encode("utf-8", errors="surrogateescape"))
    stream.flush()
    stream.seek(0)
    return stream


def _open_one(redirection: Redirection) -> tuple[str, BinaryIO] | None:
    kind = redirection.type
    if kind is RedirType.IN:
        return "stdin", _open(redirection.file, os.O_RDONLY, "rb")
    if kind is RedirType.OUT:
        flags = os.O_WRONLY | os.O_TRUNC | os.O_CREAT
        return "stdout", _open(redirection.file, flags, "wb")
    if kind is RedirType.APPEND:
        flags = os.O_WRONLY | os.O_APPEND | os.O_CREAT
        return "stdout", _open(redirection.file, flags, "ab")
    if kind is RedirType.HEREDOC:
        return "stdin", _heredoc_stream(redirection.heredoc_content)
    return None


def apply_redirections(redirections: Iterable[Redirection]) -> Streams:
    """Open every redirection in order; a later one replaces an earlier one.

    Raises RedirectionError, after closing what was opened, on the first
    file that cannot be opened.
    """
    streams = Streams()
    try:
        for redirection in redirections:
            opened = _open_one(redirection)
            if opened is None:
                continue
            slot, stream = opened
            previous = getattr(streams, slot)
            if previous is not None:
                previous.close()
            setattr(streams, slot, stream)
    except BaseException:
        streams.close()
        raise
    return streams