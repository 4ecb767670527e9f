"""
vshell - a small interactive command shell

This package provides a read-eval loop with a fixed set of built-in
commands (ls, cd, pwd, clear, date, whoami, history, mkdir, help, exit),
in-memory session history and readline line editing.
"""

__version__ = "0.1.0"

from .session import (
    CommandHistory,
    ShellState,
)

from .errors import (
    ShellError,
    UsageError,
    UnknownCommandError,
    TerminalInitError,
)

from .command_parser import (
    Command,
    CommandParser,
)

from .builtins import (
    Builtin,
    CommandResult,
    build_registry,
)

from .line_reader import (
    LineReader,
    LineSignal,
    ReadlineLineReader,
)

from .terminal import (
    TerminalSession,
    TerminalConfig,
    CommandExecutor,
    main,
)

__all__ = [
    # Session state
    "CommandHistory",
    "ShellState",

    # Errors
    "ShellError",
    "UsageError",
    "UnknownCommandError",
    "TerminalInitError",

    # Command parser
    "Command",
    "CommandParser",

    # Built-ins
    "Builtin",
    "CommandResult",
    "build_registry",

    # Input
    "LineReader",
    "LineSignal",
    "ReadlineLineReader",

    # Terminal
    "TerminalSession",
    "TerminalConfig",
    "CommandExecutor",
    "main",

    # Version info
    "__version__",
]
