#!/usr/bin/env python3
"""
Session state for the vshell terminal.

Holds the in-memory command history and the previous working directory
used by ``cd -``. One instance lives for the whole session and is shared
by the dispatcher and the built-ins that read it.
"""

from typing import Iterator, List, Optional, Tuple
from dataclasses import dataclass, field


class CommandHistory:
    """Ordered, append-only record of accepted command lines."""

    def __init__(self):
        self._entries: List[str] = []

    def record(self, line: str):
        """Append a line. Callers pass non-empty, already trimmed text."""
        self._entries.append(line)

    def all(self) -> Tuple[str, ...]:
        """Return every entry in insertion order."""
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self.all())


@dataclass
class ShellState:
    """Mutable state owned by one terminal session."""
    history: CommandHistory = field(default_factory=CommandHistory)
    previous_dir: Optional[str] = None  # Directory left by the last successful cd
