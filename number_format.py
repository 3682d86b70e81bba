"""
Number Formatter for PocketCalc
Converts floating point results into display strings
"""
import math

import config
from exceptions import ResultOutOfRangeError


def format_number(value):
    """Format a finite number for the display.

    Whole numbers print without a decimal point. Anything else is rounded
    to ``config.DISPLAY_PRECISION`` places so binary noise such as
    ``0.1 + 0.2`` shows as ``0.3``. Output is always plain decimal notation.
    Non-finite values raise ``ResultOutOfRangeError``.
    """
    value = float(value)
    if not math.isfinite(value):
        raise ResultOutOfRangeError()
    if value.is_integer():
        return str(int(value))

    scale = 10 ** config.DISPLAY_PRECISION
    rounded = round(value * scale) / scale
    if rounded == 0:
        return "0"
    if rounded.is_integer():
        return str(int(rounded))

    text = repr(rounded)
    if "e" not in text:
        return text
    # Small magnitudes come back in exponent form
    text = f"{rounded:.{config.DISPLAY_PRECISION}f}"
    return text.rstrip("0").rstrip(".")


def parse_display(text):
    """Parse a display string back into a float."""
    return float(text)
