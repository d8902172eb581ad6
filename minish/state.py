"""Mutable shell state: the exported environment and the last exit status."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field


def copy_envp(envp: Mapping[str, str] | Iterable[str]) -> list[str]:
    """Return a fresh list of ``NAME=value`` entries built from *envp*.

    *envp* may be a mapping such as ``os.environ`` or an iterable of
    ready-made ``NAME=value`` strings.
    """
    if isinstance(envp, Mapping):
        return [f"{name}={value}" for name, value in envp.items()]
    return [str(entry) for entry in envp]


def _entry_matches(entry: str, name: str) -> bool:
    return entry.startswith(name + "=")


@dataclass
class ShellState:
    """Environment entries, kept in insertion order, and the last status."""

    env: list[str] = field(default_factory=list)
    exit_status: int = 0

    def getenv(self, name: str) -> str | None:
        """Return the value of *name*, or None when it is not set."""
        prefix = name + "="
        for entry in self.env:
            if entry.startswith(prefix):
                return entry[len(prefix):]
        return None

    def set_var(self, name: str, value: str) -> None:
        """Replace the first ``name=`` entry in place, or append a new one."""
        new_entry = f"{name}={value}"
        for position, entry in enumerate(self.env):
            if _entry_matches(entry, name):
                self.env[position] = new_entry
                return
        self.env.append(new_entry)

    def remove_var(self, name: str) -> None:
        """Remove the first entry named *name*, with or without a value."""
        for position, entry in enumerate(self.env):
            if entry == name or _entry_matches(entry, name):
                del self.env[position]
                return