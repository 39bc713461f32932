"""Console and in-memory I/O for running programs.

The interpreter never touches stdin or stdout directly; it talks to an
`IOHandler`. `ConsoleIO` is what the command line uses, `ScriptedIO` feeds
prepared input lines and records everything the program writes.
"""

import builtins
import sys
from typing import Iterable, List

from .errors import InputExhaustedError


class IOHandler:
    """Interface between a running program and the outside world."""

    def write_output(self, text: str) -> None:
        raise NotImplementedError

    def write_error(self, text: str) -> None:
        raise NotImplementedError

    def read_input(self, prompt: str) -> str:
        """Return one line of input, without its trailing newline."""
        raise NotImplementedError


class ConsoleIO(IOHandler):
    def write_output(self, text: str) -> None:
        sys.stdout.write(text)
        sys.stdout.flush()

    def write_error(self, text: str) -> None:
        sys.stderr.write(text)
        sys.stderr.flush()

    def read_input(self, prompt: str) -> str:
        # The prompt is informational; programs are usually fed from a pipe.
        try:
            return builtins.input()
        except EOFError:
            raise InputExhaustedError() from None


class ScriptedIO(IOHandler):
    def __init__(self, lines: Iterable[str] = ()):
        self.lines: List[str] = list(lines)
        self.output: List[str] = []
        self.errors: List[str] = []
        self.prompts: List[str] = []

    def write_output(self, text: str) -> None:
        self.output.append(text)

    def write_error(self, text: str) -> None:
        self.errors.append(text)

    def read_input(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.lines:
            raise InputExhaustedError()
        return self.lines.pop(0)

    @property
    def text(self) -> str:
        """Everything written to the output sink so far."""
        return "".join(self.output)
