# Bisaya++ language package
# This package provides a lexer, parser and interpreter for Bisaya++.
from .errors import BisayaError, BisayaRuntimeError, LexError, ParseError
from .interpreter import Interpreter, parse_program, run_program
from .io_handler import ConsoleIO, ScriptedIO

__all__ = [
    'run_program',
    'parse_program',
    'Interpreter',
    'ConsoleIO',
    'ScriptedIO',
    'BisayaError',
    'BisayaRuntimeError',
    'LexError',
    'ParseError',
]
