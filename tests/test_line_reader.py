#!/usr/bin/env python3
"""
Tests for the line readers.

This module tests:
- Signal mapping for Ctrl+C and Ctrl+D
- Interrupt and end-of-input prompts
- History file loading and saving with readline
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io
from unittest.mock import Mock

import pytest

from vshell import line_reader
from vshell.errors import TerminalInitError
from vshell.line_reader import LineReader, LineSignal, ReadlineLineReader

needs_readline = pytest.mark.skipif(line_reader.readline is None,
                                    reason="readline not available")


def raising(exc):
    def func(prompt):
        raise exc
    return func


class TestLineReader:
    """Test the plain input() reader."""

    def test_returns_raw_line(self):
        input_func = Mock(return_value='  ls -a  ')
        reader = LineReader(prompt='test> ', input_func=input_func)

        assert reader.next_line() == ('  ls -a  ', LineSignal.NONE)
        input_func.assert_called_once_with('test> ')

    def test_keyboard_interrupt(self):
        reader = LineReader(input_func=raising(KeyboardInterrupt()), output=io.StringIO())
        assert reader.next_line() == ('', LineSignal.INTERRUPTED)

    def test_eof(self):
        reader = LineReader(input_func=raising(EOFError()), output=io.StringIO())
        assert reader.next_line() == ('', LineSignal.END_OF_INPUT)

    def test_prompts_written(self):
        output = io.StringIO()
        reader = LineReader(input_func=raising(KeyboardInterrupt()), output=output,
                            interrupt_prompt='^C', eof_prompt='exit')
        reader.next_line()
        reader.input_func = raising(EOFError())
        reader.next_line()

        assert output.getvalue() == '^C\nexit\n'

    def test_undecodable_input_is_dropped(self, capsys):
        error = UnicodeDecodeError('utf-8', b'\xff', 0, 1, 'invalid start byte')
        reader = LineReader(input_func=raising(error), output=io.StringIO())

        assert reader.next_line() == ('', LineSignal.NONE)
        assert capsys.readouterr().err == 'input error: invalid start byte\n'

    def test_no_prompts_by_default(self):
        output = io.StringIO()
        reader = LineReader(input_func=raising(EOFError()), output=output)
        reader.next_line()
        assert output.getvalue() == ''

    def test_write(self):
        output = io.StringIO()
        LineReader(output=output).write('\r')
        assert output.getvalue() == '\r'

    def test_context_manager_closes(self):
        reader = LineReader()
        reader.close = Mock()
        with reader as entered:
            assert entered is reader
        reader.close.assert_called_once_with()


@needs_readline
class TestReadlineLineReader:
    """Test the readline-backed reader."""

    def test_missing_history_file_is_fine(self, tmp_path):
        reader = ReadlineLineReader(history_file=str(tmp_path / 'none'))
        assert reader.history_file == str(tmp_path / 'none')

    def test_unreadable_history_file(self, tmp_path, monkeypatch):
        def denied(path):
            raise PermissionError(13, 'Permission denied', path)

        monkeypatch.setattr(line_reader.readline, 'read_history_file', denied)

        with pytest.raises(TerminalInitError, match="Permission denied"):
            ReadlineLineReader(history_file=str(tmp_path / 'hist'))

    def test_close_saves_history(self, tmp_path):
        history_file = tmp_path / 'nested' / 'hist'
        reader = ReadlineLineReader(history_file=str(history_file))
        line_reader.readline.add_history('pwd')

        reader.close()

        assert history_file.exists()

    def test_close_twice_saves_once(self, tmp_path, monkeypatch):
        reader = ReadlineLineReader(history_file=str(tmp_path / 'hist'))
        save = Mock()
        monkeypatch.setattr(reader, 'save_history', save)

        reader.close()
        reader.close()

        save.assert_called_once_with()

    def test_no_history_file(self, tmp_path, monkeypatch):
        write = Mock()
        monkeypatch.setattr(line_reader.readline, 'write_history_file', write)

        ReadlineLineReader(history_file=None).close()

        write.assert_not_called()

    def test_save_failure_is_logged(self, tmp_path, monkeypatch, caplog):
        def denied(path):
            raise PermissionError(13, 'Permission denied', path)

        reader = ReadlineLineReader(history_file=str(tmp_path / 'hist'))
        monkeypatch.setattr(line_reader.readline, 'write_history_file', denied)

        reader.close()

        assert 'could not save history' in caplog.text

    def test_interrupt_returns_pending_text(self, tmp_path, monkeypatch):
        output = io.StringIO()
        reader = ReadlineLineReader(history_file=None, output=output)
        reader.input_func = raising(KeyboardInterrupt())
        monkeypatch.setattr(line_reader.readline, 'get_line_buffer', lambda: 'mkdir ha')

        assert reader.next_line() == ('mkdir ha', LineSignal.INTERRUPTED)
        assert output.getvalue() == '^C\n'

    def test_eof_prints_exit(self):
        output = io.StringIO()
        reader = ReadlineLineReader(history_file=None, output=output)
        reader.input_func = raising(EOFError())

        assert reader.next_line() == ('', LineSignal.END_OF_INPUT)
        assert output.getvalue() == 'exit\n'


class TestWithoutReadline:
    """Test behaviour when the readline module is missing."""

    def test_readline_reader_refuses(self, monkeypatch):
        monkeypatch.setattr(line_reader, 'readline', None)

        with pytest.raises(TerminalInitError, match="readline"):
            ReadlineLineReader()


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
