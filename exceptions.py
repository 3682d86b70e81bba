"""
Calculator errors for PocketCalc
Raised by the arithmetic helpers and folded into state by the reducer
"""


class CalculatorError(Exception):
    """Base class for recoverable calculation errors."""

    message = "Error"

    def __init__(self, message=None):
        if message is not None:
            self.message = message
        super().__init__(self.message)


class DivisionByZeroError(CalculatorError):
    message = "Cannot divide by zero"


class NegativeSquareRootError(CalculatorError):
    message = "Cannot calculate square root of negative number"


class ResultOutOfRangeError(CalculatorError):
    message = "Result is out of range"
