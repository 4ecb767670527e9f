"""Exceptions raised by vshell built-ins and the terminal session."""


class ShellError(Exception):
    """Base class for errors reported to the user by the shell."""


class UsageError(ShellError):
    """A built-in was called with missing or malformed arguments."""


class UnknownCommandError(ShellError):
    """The command name is not in the built-in registry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f'unknown command "{name}" (type "help" for list)')


class TerminalInitError(ShellError):
    """The line reader could not be set up; the session cannot start."""
