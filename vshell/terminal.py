#!/usr/bin/env python3
"""
Terminal session for vshell.

This module drives the read-eval loop: it takes one line from the line
reader, records it in the session history, parses it into a command and
dispatches it to a built-in, then prints the output or the error.

Design Principles:
- The loop owns no command logic; built-ins live in ``vshell.builtins``
- Session state is an explicit object, never module globals
- A failing command never ends the session; only ``exit`` and
  end-of-input do
"""

import os
import sys
import logging
import argparse
from typing import Callable, Dict, List, Optional, TextIO
from dataclasses import dataclass, field
from datetime import datetime, timedelta, tzinfo

from .builtins import Builtin, CommandResult, build_registry
from .command_parser import Command, CommandParser
from .errors import ShellError, TerminalInitError, UnknownCommandError
from .line_reader import LineReader, LineSignal, ReadlineLineReader, readline
from .session import ShellState

logger = logging.getLogger(__name__)


@dataclass
class TerminalConfig:
    """Configuration for a terminal session."""
    prompt: str = 'vshell> '
    history_file: Optional[str] = field(default_factory=lambda: os.path.expanduser('~/.vshell_history'))
    history_file_size: int = 1000
    initial_dir: Optional[str] = None
    utc_offset: timedelta = timedelta(hours=5, minutes=30)  # Zone used by `date`
    zone_name: str = 'IST'
    interrupt_prompt: str = '^C'
    eof_prompt: str = 'exit'
    enable_readline: bool = True


class CommandExecutor:
    """
    Runs parsed commands against the built-in registry.

    Errors raised by a built-in are turned into a failed CommandResult so
    the caller only ever deals with results.
    """

    def __init__(self, registry: Dict[str, Builtin]):
        self.registry = registry

    def execute(self, command: Command) -> CommandResult:
        """Execute a single command and return its result."""
        builtin = self.registry.get(command.name)

        try:
            if builtin is None:
                raise UnknownCommandError(command.name)
            return builtin.execute(command.args)

        except UnknownCommandError as e:
            return CommandResult(text=str(e), exit_code=127)
        except ShellError as e:
            return CommandResult(text=str(e), exit_code=1)
        except (OSError, ValueError) as e:
            return CommandResult(text=f"{command.name}: {e}", exit_code=1)


class TerminalSession:
    """
    Main terminal session manager.

    This class provides the REPL loop and owns the session state, the
    built-in registry and the line reader.
    """

    def __init__(self, config: Optional[TerminalConfig] = None,
                 state: Optional[ShellState] = None,
                 reader: Optional[LineReader] = None,
                 stdout: Optional[TextIO] = None,
                 stderr: Optional[TextIO] = None,
                 clock: Optional[Callable[[tzinfo], datetime]] = None):
        """Initialize terminal session."""
        self.config = config or TerminalConfig()
        self.state = state or ShellState()
        self.parser = CommandParser()
        self.registry = build_registry(self.state, self.config, clock)
        self.executor = CommandExecutor(self.registry)
        self.reader = reader
        self.running = False
        self._stdout = stdout
        self._stderr = stderr

        self._init_environment()

    def _init_environment(self):
        """Move to the configured initial directory."""
        if self.config.initial_dir:
            try:
                os.chdir(self.config.initial_dir)
            except OSError as e:
                raise TerminalInitError(
                    f"cannot use initial directory {self.config.initial_dir}: {e.strerror or e}"
                ) from e

    @property
    def stdout(self) -> TextIO:
        return self._stdout or sys.stdout

    @property
    def stderr(self) -> TextIO:
        return self._stderr or sys.stderr

    def _create_reader(self) -> LineReader:
        """Build the line reader described by the configuration."""
        if self.config.enable_readline and readline is not None:
            return ReadlineLineReader(
                prompt=self.config.prompt,
                history_file=self.config.history_file,
                history_file_size=self.config.history_file_size,
                output=self._stdout,
                interrupt_prompt=self.config.interrupt_prompt,
                eof_prompt=self.config.eof_prompt,
            )

        if self.config.enable_readline:
            logger.debug("readline unavailable, using plain input")
        return LineReader(
            prompt=self.config.prompt,
            output=self._stdout,
            interrupt_prompt=self.config.interrupt_prompt,
            eof_prompt=self.config.eof_prompt,
        )

    def execute_command(self, command_line: str) -> Optional[CommandResult]:
        """
        Execute a command line and return its result.

        Returns None for empty or whitespace-only input, which is not
        recorded in history.
        """
        command_line = command_line.strip()
        if not command_line:
            return None

        self.state.history.record(command_line)

        command = self.parser.parse(command_line)
        logger.debug("dispatching %s with args %r", command.name, command.args)
        return self.executor.execute(command)

    def report(self, result: CommandResult):
        """Print a result to stdout, or to stderr if it failed."""
        if not result.text:
            return
        stream = self.stdout if result.ok else self.stderr
        print(result.text, end=result.end, file=stream)
        stream.flush()

    def run_interactive(self) -> int:
        """
        Run the interactive REPL loop.

        Returns the process exit code. Raises TerminalInitError if the
        line reader cannot be created.
        """
        reader = self.reader or self._create_reader()
        self.reader = reader
        self.running = True

        try:
            while self.running:
                text, signal = reader.next_line()

                if signal is LineSignal.INTERRUPTED:
                    # Ctrl+C discards the line being typed
                    if text:
                        reader.write('\r')
                    continue

                if signal is LineSignal.END_OF_INPUT:
                    print("bye", file=self.stdout)
                    break

                result = self.execute_command(text)
                if result is None:
                    continue

                self.report(result)
                if result.exit_requested:
                    self.running = False
        finally:
            self.running = False
            reader.close()

        return 0

    def run_command(self, command_line: str) -> int:
        """
        Run a single command line non-interactively.

        Returns the command's exit code.
        """
        result = self.execute_command(command_line)
        if result is None:
            return 0
        self.report(result)
        return 0 if result.exit_requested else result.exit_code

    def run_script(self, script_lines: List[str]) -> List[CommandResult]:
        """
        Run a list of command lines and return their results.

        Blank lines are skipped. Stops after ``exit``.
        """
        results = []
        for line in script_lines:
            result = self.execute_command(line)
            if result is None:
                continue
            results.append(result)
            if result.exit_requested:
                break
        return results


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the vshell terminal."""
    parser = argparse.ArgumentParser(description='vshell - a small interactive shell')
    parser.add_argument('-c', '--command', help='Execute command and exit')
    parser.add_argument('-d', '--directory', help='Set initial directory')
    parser.add_argument('--history-file', help='History file location')
    parser.add_argument('--no-history-file', action='store_true',
                        help='Do not load or save the line editor history')
    parser.add_argument('--plain', action='store_true', help='Read input without readline')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(levelname)s %(name)s: %(message)s',
        stream=sys.stderr,
    )

    config = TerminalConfig(initial_dir=args.directory, enable_readline=not args.plain)
    if args.history_file:
        config.history_file = args.history_file
    if args.no_history_file:
        config.history_file = None

    try:
        session = TerminalSession(config=config)
    except TerminalInitError as e:
        print(f"vshell: {e}", file=sys.stderr)
        return 1

    if args.command is not None:
        return session.run_command(args.command)

    try:
        return session.run_interactive()
    except TerminalInitError as e:
        print(f"readline init: {e}", file=sys.stderr)
        return 1


if __name__ == '__main__':
    sys.exit(main())
