"""Commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from collections.abc import Callable, Sequence
from typing import TextIO

from minish.state import ShellState

_PARENT_BUILTINS = frozenset({"cd", "export", "unset", "exit"})
_SIMPLE_BUILTINS = frozenset({"echo", "pwd", "env"})

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)


class ShellExit(Exception):
    """Raised by ``exit``: the shell should stop with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(f"exit {status}")
        self.status = status


def is_parent_builtin(name: str | None) -> bool:
    """True for builtins that must run in the shell process itself."""
    return name in _PARENT_BUILTINS


def is_simple_builtin(name: str | None) -> bool:
    """True for builtins that only write output."""
    return name in _SIMPLE_BUILTINS


def _is_ascii_alpha(char: str) -> bool:
    return char.isascii() and char.isalpha()


def _is_ascii_alnum(char: str) -> bool:
    return char.isascii() and char.isalnum()


def is_valid_identifier(name: str | None) -> bool:
    """True when *name* is a valid variable name."""
    if not name:
        return False
    first, rest = name[0], name[1:]
    if not (_is_ascii_alpha(first) or first == "_"):
        return False
    return all(_is_ascii_alnum(char) or char == "_" for char in rest)


def is_numeric_exit(text: str | None) -> bool:
    """True when *text* is an optional sign followed only by digits."""
    if not text:
        return False
    body = text[1:] if text[0] in "+-" else text
    return all("0" <= char <= "9" for char in body)


def get_exit_value(text: str) -> int:
    """The exit status *text* asks for, saturated to a long and taken mod 256."""
    stripped = text.lstrip(" \t\n\v\f\r")
    sign = 1
    if stripped[:1] in ("+", "-"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    digits = ""
    for char in stripped:
        if not "0" <= char <= "9":
            break
        digits += char
    value = sign * int(digits) if digits else 0
    value = max(_LONG_MIN, min(_LONG_MAX, value))
    return value % 256


def _not_valid(command: str, arg: str, err: TextIO) -> None:
    print(f"minishell: {command}: `{arg}': not a valid identifier", file=err)


def builtin_echo(argv: Sequence[str], out: TextIO) -> int:
    """Write the arguments separated by spaces; ``-n`` drops the newline."""
    args = list(argv[1:])
    newline = True
    if args and args[0] == "-n":
        newline = False
        args = args[1:]
    try:
        out.write(" ".join(args))
        if newline:
            out.write("\n")
        out.flush()
    except OSError:
        return 1
    return 0


def builtin_pwd(argv: Sequence[str], out: TextIO, err: TextIO) -> int:
    """Print the working directory."""
    try:
        cwd = os.getcwd()
    except OSError as exc:
        print(f"minishell: pwd: {exc.strerror}", file=err)
        return 1
    print(cwd, file=out)
    return 0


def builtin_env(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Print every environment entry that has a value."""
    if len(argv) > 1:
        print("minishell: env: too many arguments", file=err)
        return 1
    for entry in state.env:
        if "=" in entry:
            print(entry, file=out)
    return 0


def _cd_target(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> str | None:
    if len(argv) < 2:
        home = state.getenv("HOME")
        if home is None:
            print("minishell: cd: HOME not set", file=err)
        return home
    if argv[1] == "-":
        oldpwd = state.getenv("OLDPWD")
        if oldpwd is None:
            print("minishell: cd: OLDPWD not set", file=err)
            return None
        print(oldpwd, file=out)
        return oldpwd
    return argv[1]


def builtin_cd(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Change directory and update ``OLDPWD`` and ``PWD``."""
    if len(argv) > 2:
        print("minishell: cd: too many arguments", file=err)
        return 1
    try:
        oldcwd = os.getcwd()
    except OSError as exc:
        print(f"getcwd: {exc.strerror}", file=err)
        return 1
    path = _cd_target(argv, state, out, err)
    if path is None:
        return 1
    try:
        os.chdir(path)
    except OSError as exc:
        print(f"minishell: cd: {path}: {exc.strerror}", file=err)
        return 1
    try:
        newcwd = os.getcwd()
    except OSError as exc:
        print(f"getcwd: {exc.strerror}", file=err)
        return 1
    state.set_var("OLDPWD", oldcwd)
    state.set_var("PWD", newcwd)
    return 0


def _export_line(entry: str) -> str:
    name, eq, value = entry.partition("=")
    if eq:
        return f'declare -x {name}="{value}"'
    return f"declare -x {entry}"


def builtin_export(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Set variables, or list them all sorted when given no arguments."""
    args = argv[1:]
    if not args:
        for entry in sorted(state.env):
            print(_export_line(entry), file=out)
        return 0
    status = 0
    for arg in args:
        name, eq, value = arg.partition("=")
        if eq:
            if not is_valid_identifier(name):
                _not_valid("export", arg, err)
                status = 1
                continue
            state.set_var(name, value)
        elif not is_valid_identifier(arg):
            _not_valid("export", arg, err)
            status = 1
    return status


def builtin_unset(argv: Sequence[str], state: ShellState, err: TextIO) -> int:
    """Remove the named variables."""
    status = 0
    for arg in argv[1:]:
        if not is_valid_identifier(arg):
            _not_valid("unset", arg, err)
            status = 1
        else:
            state.remove_var(arg)
    return status


def builtin_exit(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Raise ShellExit with the requested status.

    Returns 1 without exiting when given more than one numeric argument.
    """
    print("exit", file=out)
    if len(argv) < 2:
        raise ShellExit(state.exit_status)
    if not is_numeric_exit(argv[1]):
        print(f"minishell: exit: {argv[1]}: numeric argument required", file=err)
        raise ShellExit(2)
    if len(argv) > 2:
        print("minishell: exit: too many arguments", file=err)
        return 1
    code = get_exit_value(argv[1])
    state.exit_status = code
    raise ShellExit(code)


def run_simple_builtin(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Run ``echo``, ``pwd`` or ``env``; any other name gives 1."""
    if not argv:
        return 1
    handlers: dict[str, Callable[[], int]] = {
        "echo": lambda: builtin_echo(argv, out),
        "pwd": lambda: builtin_pwd(argv, out, err),
        "env": lambda: builtin_env(argv, state, out, err),
    }
    handler = handlers.get(argv[0])
    return handler() if handler else 1


def run_parent_builtin(
    argv: Sequence[str], state: ShellState, out: TextIO, err: TextIO
) -> int:
    """Run ``cd``, ``export``, ``unset`` or ``exit``; any other name gives -1."""
    if not argv:
        return -1
    handlers: dict[str, Callable[[], int]] = {
        "cd": lambda: builtin_cd(argv, state, out, err),
        "export": lambda: builtin_export(argv, state, out, err),
        "unset": lambda: builtin_unset(argv, state, err),
        "exit": lambda: builtin_exit(argv, state, out, err),
    }
    handler = handlers.get(argv[0])
    return handler() if handler else -1