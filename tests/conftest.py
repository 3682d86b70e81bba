from datetime import datetime

import pytest

import keypad

from calculator import Calculator
from calculator_types import HistoryEntry
from database import Database
from history_manager import HistoryManager


@pytest.fixture
def db(tmp_path):
    return Database(str(tmp_path / "pocketcalc_test.db"))


@pytest.fixture
def history_manager(db):
    return HistoryManager(db)


@pytest.fixture
def calculator():
    calc = Calculator()
    yield calc
    calc.close()


def make_entry(n, expression=None, result=None):
    """History entry with a predictable id and timestamp"""
    return HistoryEntry(
        id=str(1700000000000 + n),
        expression=expression or f"{n} + 0",
        result=float(n if result is None else result),
        timestamp=datetime(2024, 1, 1, 12, 0, n % 60),
    )


def press_all(calc, *buttons):
    """Feed a sequence of keypad buttons into a calculator"""
    for button in buttons:
        keypad.press(calc, button)
    return calc.display
