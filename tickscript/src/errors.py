"""
Error taxonomy shared by the lexer, parser and evaluator.

Every error carries a stable ``kind`` string so callers can branch on the
failure class without importing the concrete exception types.
"""

from __future__ import annotations


class DSLError(Exception):
    """Base class for every TickScript failure."""

    kind = "DSLError"
    description = "Script error"

    def __init__(self, message: str | None = None):
        self.message = message
        super().__init__(f"{self.description}: {message}" if message else self.description)


class DSLSyntaxError(DSLError):
    """Raised by the lexer or parser for malformed script text."""

    kind = "SyntaxError"
    description = "Syntax error"

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        if line is not None:
            message = f"{message} (line {line})"
        super().__init__(message)


class UndefinedVariableError(DSLError):
    kind = "UndefinedVariable"
    description = "Undefined variable"

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)


class UndefinedFunctionError(DSLError):
    kind = "UndefinedFunction"
    description = "Undefined function"

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)


class UndefinedSeriesError(DSLError):
    kind = "UndefinedSeries"
    description = "Undefined series"

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)


class InvalidArgumentsError(DSLError):
    kind = "InvalidArguments"
    description = "Invalid function arguments"


class InvalidOperandsError(DSLError):
    kind = "InvalidOperands"
    description = "Invalid operands for operation"


class DivisionByZeroError(DSLError):
    kind = "DivisionByZero"
    description = "Division by zero"


class UnknownOperatorError(DSLError):
    kind = "UnknownOperator"
    description = "Unknown operator"

    def __init__(self, symbol: str):
        self.symbol = symbol
        super().__init__(symbol)


class IndexOutOfBoundsError(DSLError):
    kind = "IndexOutOfBounds"
    description = "Index out of bounds"


class ResourceLimitError(DSLError):
    """Raised when a script or its input exceeds a configured budget."""

    kind = "ResourceLimit"
    description = "Resource limit exceeded"
