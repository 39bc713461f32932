from typing import List, Optional

from bisaya.diagnostics import Diagnostic


class BisayaError(Exception):
    """Base class for every error the Bisaya++ toolchain raises."""
    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.line = line
        self.column = column

    @property
    def diagnostic(self) -> Diagnostic:
        return Diagnostic(self.line, self.column, self.message)

    def __str__(self) -> str:
        return str(self.diagnostic)


class LexError(BisayaError):
    """Raised by the driver when scanning reported one or more diagnostics."""
    def __init__(self, diagnostics: List[Diagnostic]):
        first = diagnostics[0]
        super().__init__(first.message, first.line, first.column)
        self.diagnostics = list(diagnostics)

    def __str__(self) -> str:
        return "\n".join(str(d) for d in self.diagnostics)


class ParseError(BisayaError):
    """Grammar violation; parsing stops at the first one."""


class BisayaRuntimeError(BisayaError):
    """Error raised while executing a program; execution stops."""


class InputExhaustedError(BisayaRuntimeError):
    """The input handler has no more lines to supply."""
    def __init__(self, message: str = "No input available"):
        super().__init__(message)
