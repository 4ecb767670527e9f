#!/usr/bin/env python3
"""
Built-in commands for the vshell terminal.

Every command is a small class with an ``execute(args)`` method that
returns a ``CommandResult``. Failures are raised as ``ShellError`` (usage
and lookup problems) or ``OSError`` (system calls); the executor turns
them into error results so that a failing built-in never ends the session.

The first line of each class docstring is the one-line description shown
by ``help``. The ``Usage:`` and ``Examples:`` sections are shown by
``help COMMAND``.
"""

import os
import getpass
import logging
from pathlib import Path
from typing import Callable, Dict, List, Optional, TYPE_CHECKING
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo

from .errors import ShellError, UsageError
from .session import ShellState

if TYPE_CHECKING:
    from .terminal import TerminalConfig

logger = logging.getLogger(__name__)

CLEAR_SCREEN = '\033[H\033[2J'
DIRECTORY_MODE = 0o755


@dataclass
class CommandResult:
    """
    Represents the result of a command execution.

    ``text`` is printed to stdout when ``exit_code`` is 0 and to stderr
    otherwise. ``exit_requested`` tells the session loop to stop.
    """
    text: str = ''
    exit_code: int = 0
    end: str = '\n'  # Terminator written after text
    exit_requested: bool = False

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def _reason(error: OSError) -> str:
    """Human readable part of an OSError, without the repr of the path."""
    return error.strerror or str(error)


def extract_docstring_sections(docstring: Optional[str]) -> dict:
    """Extract description, usage and examples from a built-in docstring."""
    sections = {
        'description': '',
        'usage': '',
        'examples': [],
    }
    if not docstring:
        return sections

    lines = docstring.strip().split('\n')
    sections['description'] = lines[0].strip()

    current_section = None
    for line in lines[1:]:
        line = line.strip()
        if line.startswith('Usage:'):
            current_section = 'usage'
        elif line.startswith('Examples:'):
            current_section = 'examples'
        elif line and current_section == 'usage' and not sections['usage']:
            sections['usage'] = line
        elif line and current_section == 'examples':
            sections['examples'].append(line)

    return sections


class Builtin:
    """Base class for built-in commands."""

    name = ''
    synopsis = ''  # Left column of the help catalogue

    def __init__(self, state: ShellState):
        self.state = state

    @property
    def summary(self) -> str:
        return extract_docstring_sections(type(self).__doc__)['description']

    def execute(self, args: List[str]) -> CommandResult:
        raise NotImplementedError


class LsCommand(Builtin):
    """
    List directory contents

    Usage:
        ls

    Entries of the current directory are printed one per line, in the
    order the operating system returns them.
    """
    name = 'ls'
    synopsis = 'ls'

    def execute(self, args: List[str]) -> CommandResult:
        try:
            entries = os.listdir('.')
        except OSError as e:
            raise ShellError(f"ls: {_reason(e)}") from e
        return CommandResult(text='\n'.join(entries))


class CdCommand(Builtin):
    """
    Change directory

    Usage:
        cd [DIR]

    Examples:
        cd                     # Go to the home directory
        cd ~                   # Same as above
        cd -                   # Go back to the previous directory
        cd /tmp                # Go to /tmp
    """
    name = 'cd'
    synopsis = 'cd [dir]'

    def execute(self, args: List[str]) -> CommandResult:
        target = self._resolve_target(args)

        try:
            current = os.getcwd()
        except OSError as e:
            raise ShellError(f"failed to get current directory: {_reason(e)}") from e

        try:
            os.chdir(target)
        except OSError as e:
            raise ShellError(f"failed to change directory to {target}: {_reason(e)}") from e

        # Only a completed change moves the previous-directory record
        self.state.previous_dir = current
        logger.debug("cd: %s -> %s", current, target)
        return CommandResult()

    def _resolve_target(self, args: List[str]) -> str:
        if not args or args[0] == '~':
            return self._home_dir()

        if args[0] == '-':
            if not self.state.previous_dir:
                raise ShellError("no previous directory set")
            return self.state.previous_dir

        return args[0]

    @staticmethod
    def _home_dir() -> str:
        try:
            return str(Path.home())
        except (RuntimeError, KeyError) as e:
            raise ShellError(f"failed to get home directory: {e}") from e


class PwdCommand(Builtin):
    """
    Print working directory

    Usage:
        pwd
    """
    name = 'pwd'
    synopsis = 'pwd'

    def execute(self, args: List[str]) -> CommandResult:
        try:
            return CommandResult(text=os.getcwd())
        except OSError as e:
            raise ShellError(f"pwd: {_reason(e)}") from e


class ClearCommand(Builtin):
    """
    Clean the terminal

    Usage:
        clear
    """
    name = 'clear'
    synopsis = 'clear'

    def execute(self, args: List[str]) -> CommandResult:
        return CommandResult(text=CLEAR_SCREEN, end='')


class DateCommand(Builtin):
    """
    Show date/time (sub: year|month|day|time)

    Usage:
        date [year|month|day|time]

    Examples:
        date                   # Mon Jan 02 15:04:05 IST 2006
        date year              # 2006
        date month             # January
        date day               # 2
        date time              # 15:04:05
    """
    name = 'date'
    synopsis = 'date ...'

    USAGE = "usage: date [year|month|day|time]"

    def __init__(self, state: ShellState,
                 utc_offset: timedelta = timedelta(hours=5, minutes=30),
                 zone_name: str = 'IST',
                 clock: Optional[Callable[[tzinfo], datetime]] = None):
        super().__init__(state)
        self.zone = timezone(utc_offset, zone_name)
        self.clock = clock or datetime.now

    def execute(self, args: List[str]) -> CommandResult:
        now = self.clock(self.zone)

        if not args:
            return CommandResult(text=now.strftime('%a %b %d %H:%M:%S %Z %Y'))

        fields = {
            'year': lambda: str(now.year),
            'month': lambda: now.strftime('%B'),
            'day': lambda: str(now.day),
            'time': lambda: now.strftime('%H:%M:%S'),
        }
        field_value = fields.get(args[0])
        if field_value is None:
            raise UsageError(self.USAGE)
        return CommandResult(text=field_value())


class WhoamiCommand(Builtin):
    """
    Show current user name

    Usage:
        whoami
    """
    name = 'whoami'
    synopsis = 'whoami'

    def execute(self, args: List[str]) -> CommandResult:
        try:
            return CommandResult(text=getpass.getuser())
        except (OSError, KeyError) as e:
            raise ShellError(f"whoami: cannot resolve current user: {e}") from e


class HistoryCommand(Builtin):
    """
    Show command history

    Usage:
        history
    """
    name = 'history'
    synopsis = 'history'

    def execute(self, args: List[str]) -> CommandResult:
        lines = [f"{i:3d} {line}" for i, line in enumerate(self.state.history.all(), 1)]
        return CommandResult(text='\n'.join(lines))


class MkdirCommand(Builtin):
    """
    Create directory

    Usage:
        mkdir DIRECTORY

    Examples:
        mkdir projects         # Create ./projects with mode 755
    """
    name = 'mkdir'
    synopsis = 'mkdir <d>'

    def execute(self, args: List[str]) -> CommandResult:
        if not args:
            raise UsageError("usage: mkdir <directory>")

        path = args[0]
        try:
            os.mkdir(path, DIRECTORY_MODE)
        except OSError as e:
            raise ShellError(f"mkdir {path}: {_reason(e)}") from e

        logger.debug("created directory %s", path)
        return CommandResult(text=f"Directory created: {path}")


class HelpCommand(Builtin):
    """
    Show this help

    Usage:
        help [COMMAND]

    Examples:
        help                   # List all commands
        help cd                # Show usage of cd
    """
    name = 'help'
    synopsis = 'help'

    def __init__(self, state: ShellState, registry: Dict[str, Builtin]):
        super().__init__(state)
        self.registry = registry

    def execute(self, args: List[str]) -> CommandResult:
        if args:
            return self._command_help(args[0])

        help_lines = ["Available commands:"]
        for builtin in self.registry.values():
            help_lines.append(f"  {builtin.synopsis:<9} - {builtin.summary}")
        return CommandResult(text='\n'.join(help_lines))

    def _command_help(self, name: str) -> CommandResult:
        builtin = self.registry.get(name)
        if builtin is None:
            raise UsageError(f"help: no help available for '{name}'")

        sections = extract_docstring_sections(type(builtin).__doc__)
        help_lines = [f"{name} - {sections['description']}"]
        if sections['usage']:
            help_lines.append("")
            help_lines.append("Usage:")
            help_lines.append(f"    {sections['usage']}")
        if sections['examples']:
            help_lines.append("")
            help_lines.append("Examples:")
            for ex in sections['examples']:
                help_lines.append(f"    {ex}")
        return CommandResult(text='\n'.join(help_lines))


class ExitCommand(Builtin):
    """
    Exit the shell

    Usage:
        exit
    """
    name = 'exit'
    synopsis = 'exit'

    def execute(self, args: List[str]) -> CommandResult:
        return CommandResult(text="Exiting the shell", exit_requested=True)


def build_registry(state: ShellState,
                   config: Optional['TerminalConfig'] = None,
                   clock: Optional[Callable[[tzinfo], datetime]] = None) -> Dict[str, Builtin]:
    """
    Build the name -> built-in mapping for one session.

    Insertion order is the order of the ``help`` catalogue.
    """
    registry: Dict[str, Builtin] = {}

    date_kwargs = {'clock': clock}
    if config is not None:
        date_kwargs.update(utc_offset=config.utc_offset, zone_name=config.zone_name)

    for builtin in (
        LsCommand(state),
        CdCommand(state),
        PwdCommand(state),
        ClearCommand(state),
        DateCommand(state, **date_kwargs),
        WhoamiCommand(state),
        HistoryCommand(state),
        MkdirCommand(state),
        HelpCommand(state, registry),
        ExitCommand(state),
    ):
        registry[builtin.name] = builtin

    return registry
