#!/usr/bin/env python3
"""
Command parser for the vshell terminal.

Translates a command line into a ``Command``: the first whitespace
delimited token is the command name, the remaining tokens are positional
arguments. There is no quoting, globbing or expansion; a path containing
``~`` or ``*`` is passed through untouched.
"""

from typing import List, Optional
from dataclasses import dataclass, field


@dataclass
class Command:
    """
    Represents a single command with its arguments.

    This is the unit of dispatch. The name is matched exactly against the
    built-in registry.
    """
    name: str
    args: List[str] = field(default_factory=list)

    def __str__(self) -> str:
        return ' '.join([self.name] + self.args)


class CommandParser:
    """Parser for vshell command lines."""

    def parse(self, command_line: str) -> Optional[Command]:
        """
        Parse a command line into a Command.

        Returns None for empty or whitespace-only input.
        """
        tokens = command_line.split()
        if not tokens:
            return None

        return Command(name=tokens[0], args=tokens[1:])
