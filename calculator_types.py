"""
State and Action Model for PocketCalc
Immutable values describing calculator state and the events it accepts
"""
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Optional, Tuple

import config

DIGITS = "0123456789."


class Operator(Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    MODULO = "%"

    @property
    def symbol(self):
        return self.value

    @classmethod
    def from_symbol(cls, symbol):
        """Look up an operator by symbol, accepting display glyphs too"""
        if isinstance(symbol, cls):
            return symbol
        symbol = {"×": "*", "÷": "/", "−": "-"}.get(symbol, symbol)
        try:
            return cls(symbol)
        except ValueError:
            raise ValueError(f"Unknown operator: {symbol!r}") from None


@dataclass(frozen=True)
class HistoryEntry:
    id: str
    expression: str
    result: float
    timestamp: datetime

    def to_dict(self):
        return {
            "id": self.id,
            "expression": self.expression,
            "result": self.result,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data):
        """Build an entry from a persisted record"""
        # fromisoformat only learned the "Z" suffix in 3.11
        timestamp = str(data["timestamp"]).replace("Z", "+00:00")
        return cls(
            id=str(data["id"]),
            expression=str(data["expression"]),
            result=float(data["result"]),
            timestamp=datetime.fromisoformat(timestamp),
        )


@dataclass(frozen=True)
class CalculatorState:
    display: str = "0"
    previous_value: Optional[float] = None
    operation: Optional[Operator] = None
    waiting_for_operand: bool = False
    memory: float = 0.0
    history: Tuple[HistoryEntry, ...] = ()
    has_error: bool = False
    error_message: Optional[str] = None

    def evolve(self, **changes):
        return replace(self, **changes)

    def to_dict(self):
        """JSON-ready view of the state"""
        return {
            "display": self.display,
            "previous_value": self.previous_value,
            "operation": self.operation.symbol if self.operation else None,
            "waiting_for_operand": self.waiting_for_operand,
            "memory": self.memory,
            "history": [entry.to_dict() for entry in self.history],
            "has_error": self.has_error,
            "error_message": self.error_message,
        }


INITIAL_STATE = CalculatorState()


def trim_history(entries):
    """Keep the newest ``MAX_HISTORY_ITEMS`` entries"""
    return tuple(entries)[:config.MAX_HISTORY_ITEMS]


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

class Action:
    """Base class for every event the reducer accepts."""


@dataclass(frozen=True)
class InputDigit(Action):
    digit: str

    def __post_init__(self):
        if len(self.digit) != 1 or self.digit not in DIGITS:
            raise ValueError(f"Invalid digit: {self.digit!r}")


@dataclass(frozen=True)
class InputOperation(Action):
    operation: Operator

    def __post_init__(self):
        object.__setattr__(self, "operation", Operator.from_symbol(self.operation))


@dataclass(frozen=True)
class Calculate(Action):
    # Stamped when the key is pressed so the reducer never reads the clock
    timestamp: datetime = field(default_factory=datetime.now)


@dataclass(frozen=True)
class Clear(Action):
    pass


@dataclass(frozen=True)
class ClearEntry(Action):
    pass


@dataclass(frozen=True)
class Backspace(Action):
    pass


@dataclass(frozen=True)
class ToggleSign(Action):
    pass


@dataclass(frozen=True)
class Percent(Action):
    pass


@dataclass(frozen=True)
class SquareRoot(Action):
    pass


@dataclass(frozen=True)
class Reciprocal(Action):
    pass


@dataclass(frozen=True)
class MemoryClear(Action):
    pass


@dataclass(frozen=True)
class MemoryRecall(Action):
    pass


@dataclass(frozen=True)
class MemoryAdd(Action):
    pass


@dataclass(frozen=True)
class MemorySubtract(Action):
    pass


@dataclass(frozen=True)
class ClearHistory(Action):
    pass


@dataclass(frozen=True)
class SetHistory(Action):
    entries: Tuple[HistoryEntry, ...] = ()

    def __post_init__(self):
        object.__setattr__(self, "entries", tuple(self.entries))


@dataclass(frozen=True)
class AddHistory(Action):
    entry: HistoryEntry


@dataclass(frozen=True)
class SetError(Action):
    message: str


@dataclass(frozen=True)
class ClearError(Action):
    pass


ACTION_TYPES = (
    InputDigit, InputOperation, Calculate, Clear, ClearEntry, Backspace,
    ToggleSign, Percent, SquareRoot, Reciprocal, MemoryClear, MemoryRecall,
    MemoryAdd, MemorySubtract, ClearHistory, SetHistory, AddHistory,
    SetError, ClearError,
)
