#!/usr/bin/env python3
"""
Line input for the vshell terminal.

A line reader hands the session one line per call together with a
``LineSignal``. Ctrl+C and Ctrl+D are not raised to the caller; they are
reported as ``INTERRUPTED`` and ``END_OF_INPUT`` so the session loop can
decide what to do with them.

``ReadlineLineReader`` adds line editing, in-line history recall and a
persisted history file on top of the plain ``input()`` reader.
"""

import os
import sys
import logging
from enum import Enum
from typing import Callable, Optional, TextIO, Tuple

try:
    import readline
except ImportError:  # Platforms built without GNU readline
    readline = None

from .errors import TerminalInitError

logger = logging.getLogger(__name__)


class LineSignal(Enum):
    """Out-of-band condition reported alongside a line."""
    NONE = 'none'
    INTERRUPTED = 'interrupted'
    END_OF_INPUT = 'end-of-input'


class LineReader:
    """Reads lines with ``input()``."""

    def __init__(self, prompt: str = 'vshell> ',
                 input_func: Callable[[str], str] = input,
                 output: Optional[TextIO] = None,
                 interrupt_prompt: str = '',
                 eof_prompt: str = ''):
        self.prompt = prompt
        self.input_func = input_func
        self.output = output
        self.interrupt_prompt = interrupt_prompt
        self.eof_prompt = eof_prompt

    @property
    def stream(self) -> TextIO:
        return self.output or sys.stdout

    def next_line(self) -> Tuple[str, LineSignal]:
        """
        Block until the user submits a line.

        On INTERRUPTED the text is whatever had been typed so far, when
        the reader can tell; on END_OF_INPUT it is always empty.
        """
        try:
            return self.input_func(self.prompt), LineSignal.NONE
        except KeyboardInterrupt:
            pending = self._pending_line()
            if self.interrupt_prompt:
                self.write(self.interrupt_prompt + '\n')
            return pending, LineSignal.INTERRUPTED
        except EOFError:
            if self.eof_prompt:
                self.write(self.eof_prompt + '\n')
            return '', LineSignal.END_OF_INPUT
        except UnicodeDecodeError as e:
            # Undecodable bytes drop the whole line
            print(f"input error: {e.reason}", file=sys.stderr)
            logger.debug("discarded undecodable input: %s", e)
            return '', LineSignal.NONE

    def _pending_line(self) -> str:
        return ''

    def write(self, text: str):
        """Write raw text to the terminal, bypassing the prompt."""
        self.stream.write(text)
        self.stream.flush()

    def close(self):
        """Release the reader. Safe to call more than once."""

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class ReadlineLineReader(LineReader):
    """
    Line reader backed by GNU readline.

    Provides:
    - Emacs-style line editing and Up/Down history recall
    - History persisted to ``history_file`` between sessions
    - Access to the partially typed line when Ctrl+C is pressed

    The persisted file is the line editor's own keystroke history. It is
    independent of the session history shown by the ``history`` built-in.
    """

    def __init__(self, prompt: str = 'vshell> ',
                 history_file: Optional[str] = None,
                 history_file_size: int = 1000,
                 output: Optional[TextIO] = None,
                 interrupt_prompt: str = '^C',
                 eof_prompt: str = 'exit'):
        if readline is None:
            raise TerminalInitError("readline is not available on this platform")

        super().__init__(prompt, input, output, interrupt_prompt, eof_prompt)
        self.history_file = history_file
        self.history_file_size = history_file_size
        self._closed = False

        readline.parse_and_bind('set editing-mode emacs')
        self._load_history()

    def _load_history(self):
        """Load the history file into readline."""
        if hasattr(readline, 'clear_history'):
            readline.clear_history()
        readline.set_history_length(self.history_file_size)

        if not self.history_file:
            return

        try:
            readline.read_history_file(self.history_file)
        except FileNotFoundError:
            logger.debug("no history file at %s yet", self.history_file)
        except OSError as e:
            raise TerminalInitError(
                f"cannot read history file {self.history_file}: {e.strerror or e}"
            ) from e
        else:
            logger.debug("loaded %d history entries from %s",
                         readline.get_current_history_length(), self.history_file)

    def save_history(self):
        """Write readline history back to the history file."""
        if not self.history_file:
            return
        try:
            directory = os.path.dirname(self.history_file)
            if directory:
                os.makedirs(directory, exist_ok=True)
            readline.write_history_file(self.history_file)
        except OSError as e:
            logger.warning("could not save history to %s: %s", self.history_file, e)
        else:
            logger.debug("saved history to %s", self.history_file)

    def _pending_line(self) -> str:
        return readline.get_line_buffer()

    def close(self):
        if self._closed:
            return
        self._closed = True
        self.save_history()
