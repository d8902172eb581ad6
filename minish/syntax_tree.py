"""Syntax-tree nodes produced by the parser and run by the executor."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field


class NodeType(enum.Enum):
    COMMAND = enum.auto()
    PIPE = enum.auto()
    AND = enum.auto()
    OR = enum.auto()


class RedirType(enum.Enum):
    NONE = enum.auto()
    IN = enum.auto()
    OUT = enum.auto()
    APPEND = enum.auto()
    HEREDOC = enum.auto()


@dataclass
class Redirection:
    """One redirection; ``heredoc_content`` is set for here-documents."""

    type: RedirType
    file: str
    heredoc_content: str | None = None


@dataclass
class Command:
    """A simple command: its words and its redirections, in order."""

    argv: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)


@dataclass
class Node:
    """A tree node: a command leaf, or an operator with two children."""

    type: NodeType
    command: Command | None = None
    left: Node | None = None
    right: Node | None = None


def count_nodes(node: Node | None) -> int:
    """Number of nodes in the tree rooted at *node*."""
    if node is None:
        return 0
    if node.type is NodeType.COMMAND:
        return 1
    return 1 + count_nodes(node.left) + count_nodes(node.right)