"""
Transition Function for PocketCalc
Pure (state, action) -> state mapping for every calculator event
"""
import math
import logging

import config
from calculator_types import (
    INITIAL_STATE, HistoryEntry, Operator, trim_history,
    InputDigit, InputOperation, Calculate, Clear, ClearEntry, Backspace,
    ToggleSign, Percent, SquareRoot, Reciprocal, MemoryClear, MemoryRecall,
    MemoryAdd, MemorySubtract, ClearHistory, SetHistory, AddHistory,
    SetError, ClearError,
)
from exceptions import (
    CalculatorError, DivisionByZeroError, NegativeSquareRootError,
    ResultOutOfRangeError,
)
from number_format import format_number, parse_display

logger = logging.getLogger(__name__)


def perform_calculation(left, right, operation):
    """Apply ``operation`` to two operands"""
    if operation is Operator.ADD:
        result = left + right
    elif operation is Operator.SUBTRACT:
        result = left - right
    elif operation is Operator.MULTIPLY:
        result = left * right
    elif operation is Operator.DIVIDE:
        if right == 0:
            raise DivisionByZeroError()
        result = left / right
    elif operation is Operator.MODULO:
        if right == 0:
            raise DivisionByZeroError()
        # Truncated remainder: sign follows the dividend
        result = math.fmod(left, right)
    else:
        raise TypeError(f"Unsupported operation: {operation!r}")
    return _checked(result)


def _checked(value):
    if not math.isfinite(value):
        raise ResultOutOfRangeError()
    return value


def _with_error(state, message):
    return state.evolve(has_error=True, error_message=message,
                        display=config.ERROR_DISPLAY)


def _current_value(state):
    return parse_display(state.display)


def _next_history_id(timestamp, history):
    """Millisecond timestamp id, bumped past the newest entry if needed"""
    new_id = int(timestamp.timestamp() * 1000)
    if history:
        try:
            newest = int(history[0].id)
        except ValueError:
            newest = None
        if newest is not None and new_id <= newest:
            new_id = newest + 1
    return str(new_id)


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------

def _start_number(digit):
    return "0." if digit == "." else digit


def _input_digit(state, action):
    digit = action.digit
    if state.has_error:
        return INITIAL_STATE.evolve(
            display=_start_number(digit),
            memory=state.memory,
            history=state.history,
        )

    if state.waiting_for_operand:
        return state.evolve(display=_start_number(digit), waiting_for_operand=False)

    if digit == ".":
        if "." in state.display:
            return state
        return state.evolve(display=state.display + ".")

    if state.display == "0":
        return state.evolve(display=digit)

    display = state.display + digit
    if not math.isfinite(parse_display(display)):
        return state
    return state.evolve(display=display)


def _input_operation(state, action):
    operation = action.operation

    if state.has_error:
        operand = state.previous_value if state.previous_value is not None else 0.0
        return state.evolve(
            display=format_number(operand),
            previous_value=operand,
            operation=operation,
            waiting_for_operand=True,
            has_error=False,
            error_message=None,
        )

    current = _current_value(state)

    if state.previous_value is None:
        return state.evolve(
            previous_value=current,
            operation=operation,
            waiting_for_operand=True,
        )

    if state.operation is not None and not state.waiting_for_operand:
        try:
            result = perform_calculation(state.previous_value, current, state.operation)
        except CalculatorError as e:
            return _with_error(state, e.message)
        return state.evolve(
            display=format_number(result),
            previous_value=result,
            operation=operation,
            waiting_for_operand=True,
        )

    return state.evolve(operation=operation, waiting_for_operand=True)


def _calculate(state, action):
    if (state.has_error or state.previous_value is None
            or state.operation is None or state.waiting_for_operand):
        return state

    current = _current_value(state)
    try:
        result = perform_calculation(state.previous_value, current, state.operation)
    except CalculatorError as e:
        return _with_error(state, e.message)

    expression = (f"{format_number(state.previous_value)} "
                  f"{state.operation.symbol} {format_number(current)}")
    entry = HistoryEntry(
        id=_next_history_id(action.timestamp, state.history),
        expression=expression,
        result=result,
        timestamp=action.timestamp,
    )
    return state.evolve(
        display=format_number(result),
        previous_value=None,
        operation=None,
        waiting_for_operand=True,
        history=trim_history((entry,) + state.history),
    )


def _clear(state, action):
    return INITIAL_STATE.evolve(memory=state.memory, history=state.history)


def _clear_entry(state, action):
    return state.evolve(display="0", has_error=False, error_message=None)


def _backspace(state, action):
    if state.has_error or state.waiting_for_operand:
        return state
    if len(state.display) == 1:
        return state.evolve(display="0")
    remaining = state.display[:-1]
    if remaining in ("-", "-0"):
        remaining = "0"
    return state.evolve(display=remaining)


def _show_value(state, value, **changes):
    """Display ``value``, or enter the error state if it cannot be shown"""
    try:
        display = format_number(value)
    except CalculatorError as e:
        return _with_error(state, e.message)
    return state.evolve(display=display, **changes)


def _toggle_sign(state, action):
    if state.has_error:
        return state
    return _show_value(state, -_current_value(state))


def _percent(state, action):
    if state.has_error:
        return state
    return _show_value(state, _current_value(state) / 100)


def _square_root(state, action):
    if state.has_error:
        return state
    current = _current_value(state)
    if current < 0:
        return _with_error(state, NegativeSquareRootError.message)
    return _show_value(state, math.sqrt(current), waiting_for_operand=True)


def _reciprocal(state, action):
    if state.has_error:
        return state
    current = _current_value(state)
    try:
        result = perform_calculation(1.0, current, Operator.DIVIDE)
    except CalculatorError as e:
        return _with_error(state, e.message)
    return state.evolve(display=format_number(result), waiting_for_operand=True)


def _memory_clear(state, action):
    if state.has_error:
        return state
    return state.evolve(memory=0.0)


def _memory_recall(state, action):
    if state.has_error:
        return state
    return _show_value(state, state.memory, waiting_for_operand=True)


def _memory_update(sign):
    def handler(state, action):
        if state.has_error:
            return state
        try:
            memory = _checked(state.memory + sign * _current_value(state))
        except CalculatorError as e:
            return _with_error(state, e.message)
        return state.evolve(memory=memory)
    return handler


def _clear_history(state, action):
    return state.evolve(history=())


def _set_history(state, action):
    return state.evolve(history=trim_history(action.entries))


def _add_history(state, action):
    return state.evolve(history=trim_history((action.entry,) + state.history))


def _set_error(state, action):
    return _with_error(state, action.message)


def _clear_error(state, action):
    return state.evolve(has_error=False, error_message=None)


HANDLERS = {
    InputDigit: _input_digit,
    InputOperation: _input_operation,
    Calculate: _calculate,
    Clear: _clear,
    ClearEntry: _clear_entry,
    Backspace: _backspace,
    ToggleSign: _toggle_sign,
    Percent: _percent,
    SquareRoot: _square_root,
    Reciprocal: _reciprocal,
    MemoryClear: _memory_clear,
    MemoryRecall: _memory_recall,
    MemoryAdd: _memory_update(1),
    MemorySubtract: _memory_update(-1),
    ClearHistory: _clear_history,
    SetHistory: _set_history,
    AddHistory: _add_history,
    SetError: _set_error,
    ClearError: _clear_error,
}


def reduce_state(state, action):
    """Return the state that results from applying ``action`` to ``state``"""
    try:
        handler = HANDLERS[type(action)]
    except KeyError:
        raise TypeError(f"Unhandled action: {action!r}") from None
    new_state = handler(state, action)
    logger.debug("%s -> display=%r", type(action).__name__, new_state.display)
    return new_state
