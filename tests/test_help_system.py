#!/usr/bin/env python3
"""
Test the help system functionality.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import io

import pytest
from vshell.terminal import TerminalSession


class TestHelpSystem:
    """Test the integrated help system."""

    def setup_method(self):
        """Set up test fixtures."""
        self.session = TerminalSession(stdout=io.StringIO(), stderr=io.StringIO())

    def test_general_help(self):
        """Test general help lists every command with a description."""
        output = self.session.execute_command('help').text
        lines = output.split('\n')

        assert lines[0] == 'Available commands:'
        assert '  ls        - List directory contents' in lines
        assert '  cd [dir]  - Change directory' in lines
        assert '  date ...  - Show date/time (sub: year|month|day|time)' in lines
        assert '  mkdir <d> - Create directory' in lines
        assert '  exit      - Exit the shell' in lines
        assert len(lines) == 1 + len(self.session.registry)

    def test_general_help_is_stable(self):
        """The catalogue does not depend on session state."""
        first = self.session.execute_command('help').text
        self.session.execute_command('foobar')
        assert self.session.execute_command('help').text == first

    def test_specific_command_help(self):
        """Test help for specific commands."""
        output = self.session.execute_command('help cd').text
        assert output.startswith('cd - Change directory')
        assert 'Usage:' in output
        assert 'cd [DIR]' in output
        assert 'Examples:' in output
        assert 'cd -' in output

        output = self.session.execute_command('help pwd').text
        assert output == 'pwd - Print working directory\n\nUsage:\n    pwd'

    def test_help_for_unknown_command(self):
        """Test help for a command that does not exist."""
        result = self.session.execute_command('help nonexistent')
        assert result.exit_code == 1
        assert "no help available for 'nonexistent'" in result.text


if __name__ == '__main__':
    pytest.main([__file__, '-v'])
