import logging
import sqlite3
import threading
from unittest.mock import Mock

import pytest

from calculator import Calculator
from history_manager import HistoryManager
from conftest import make_entry, press_all


@pytest.fixture
def store():
    manager = Mock(spec=HistoryManager)
    manager.load.return_value = []
    return manager


@pytest.fixture
def persisted(store):
    calc = Calculator(history_manager=store)
    yield calc
    calc.close()


def test_initial_state(calculator):
    assert calculator.display == "0"
    assert calculator.memory == 0
    assert calculator.history == ()
    assert calculator.has_error is False
    assert calculator.error_message is None


def test_operations_return_display(calculator):
    assert calculator.input_number("2") == "2"
    assert calculator.input_operation("+") == "2"
    assert calculator.input_number("3") == "3"
    assert calculator.input_operation("×") == "5"
    assert calculator.input_number("4") == "4"
    assert calculator.calculate() == "20"


def test_public_functions(calculator):
    calculator.input_number("9")
    assert calculator.square_root() == "3"
    assert calculator.reciprocal() == "0.3333333333"
    calculator.clear()
    calculator.input_number("5")
    calculator.input_number("0")
    assert calculator.percent() == "0.5"
    assert calculator.toggle_sign() == "-0.5"
    assert calculator.backspace() == "-0."
    assert calculator.clear_entry() == "0"


def test_memory_operations(calculator):
    calculator.input_number("1")
    calculator.input_number("0")
    calculator.memory_add()
    calculator.clear()
    calculator.input_number("5")
    calculator.memory_add()
    assert calculator.memory_recall() == "15"
    calculator.memory_subtract()
    assert calculator.memory == 0
    calculator.input_number("8")
    calculator.memory_add()
    calculator.memory_clear()
    assert calculator.memory == 0


def test_error_surfaces_in_state(calculator):
    press_all(calculator, "5", "÷", "0", "=")
    assert calculator.has_error is True
    assert calculator.display == "Error"
    assert calculator.error_message == "Cannot divide by zero"
    calculator.input_number("3")
    assert calculator.has_error is False
    assert calculator.display == "3"


def test_invalid_input_raises(calculator):
    with pytest.raises(ValueError):
        calculator.input_number("42")
    with pytest.raises(ValueError):
        calculator.input_operation("^")


def test_subscribe_and_unsubscribe(calculator):
    seen = []
    unsubscribe = calculator.subscribe(lambda state: seen.append(state.display))
    calculator.input_number("1")
    calculator.input_number("2")
    unsubscribe()
    calculator.input_number("3")
    assert seen == ["1", "12"]


def test_calculate_saves_full_history(persisted, store):
    press_all(persisted, "2", "+", "3", "=")
    persisted.flush(timeout=5)
    store.save.assert_called_once_with(list(persisted.history))
    assert persisted.history[0].expression == "2 + 3"


def test_digit_presses_do_not_save(persisted, store):
    press_all(persisted, "1", "2", "+", "3", "C")
    persisted.flush(timeout=5)
    store.save.assert_not_called()


def test_clear_history_saves_empty_list(persisted, store):
    press_all(persisted, "1", "+", "1", "=")
    persisted.clear_history()
    persisted.flush(timeout=5)
    assert store.save.call_count == 2
    store.save.assert_called_with([])


def test_load_history_hydrates_without_saving(persisted, store):
    entries = [make_entry(3), make_entry(2), make_entry(1)]
    store.load.return_value = entries
    future = persisted.load_history()
    assert future.result(timeout=5) == entries
    assert persisted.history == tuple(entries)
    store.save.assert_not_called()


def test_load_history_without_store(calculator):
    assert calculator.load_history() is None


def test_save_failure_is_logged(store, caplog):
    store.save.side_effect = sqlite3.OperationalError("disk I/O error")
    calc = Calculator(history_manager=store)
    with caplog.at_level(logging.ERROR, logger="calculator"):
        press_all(calc, "6", "×", "7", "=")
        calc.close()
    assert calc.display == "42"
    assert "Failed to save calculator history" in caplog.text


def test_history_round_trip_through_database(history_manager):
    first = Calculator(history_manager=history_manager)
    press_all(first, "1", "2", "+", "3", "=")
    press_all(first, "0", ".", "1", "+", "0", ".", "2", "=")
    first.close()

    second = Calculator(history_manager=history_manager)
    second.load_history().result(timeout=5)
    second.close()

    assert second.history == first.history
    assert [entry.expression for entry in second.history] == ["0.1 + 0.2", "12 + 3"]


def test_last_save_wins(history_manager):
    calc = Calculator(history_manager=history_manager)
    for n in range(1, 8):
        press_all(calc, str(n), "×", "2", "=")
    calc.close()
    assert history_manager.load() == list(calc.history)
    assert len(calc.history) == 7


class GatedHistoryManager(HistoryManager):
    """Holds ``load`` until the test releases it"""

    def __init__(self, db):
        super().__init__(db)
        self.release = threading.Event()

    def load(self):
        self.release.wait(timeout=5)
        return super().load()


def test_calculation_during_hydration_keeps_stored_history(db):
    stored = [make_entry(n) for n in range(5, 0, -1)]
    manager = GatedHistoryManager(db)
    manager.save(stored)

    calc = Calculator(history_manager=manager)
    future = calc.load_history()
    press_all(calc, "1", "+", "1", "=")
    manager.release.set()
    future.result(timeout=5)
    calc.close()

    assert len(calc.history) == 6
    assert calc.history[0].expression == "1 + 1"
    assert list(calc.history[1:]) == stored
    assert manager.load() == list(calc.history)


def test_flush_waits_for_save_queued_by_hydration(db):
    manager = GatedHistoryManager(db)
    manager.save([make_entry(1)])
    calc = Calculator(history_manager=manager)
    calc.load_history()
    press_all(calc, "2", "×", "2", "=")
    manager.release.set()
    calc.flush(timeout=5)
    assert manager.load() == list(calc.history)
    calc.close()
