"""
Calculator Engine for PocketCalc
Public operations used by the view layer, plus history persistence
"""
import logging
import threading
from concurrent.futures import ThreadPoolExecutor

from calculator_types import (
    INITIAL_STATE, trim_history,
    InputDigit, InputOperation, Calculate, Clear, ClearEntry, Backspace,
    ToggleSign, Percent, SquareRoot, Reciprocal, MemoryClear, MemoryRecall,
    MemoryAdd, MemorySubtract, ClearHistory, SetHistory,
)
from reducer import reduce_state

logger = logging.getLogger(__name__)


class Calculator:
    """Owns one calculator state and serializes every change to it.

    Transitions run synchronously under a lock. When a transition changes
    the history, the full list is handed to a single background worker
    which overwrites the stored copy, so rapid saves resolve to the latest
    state.
    """

    def __init__(self, history_manager=None, state=INITIAL_STATE):
        self.history_manager = history_manager
        self._state = state
        self._lock = threading.Lock()
        self._listeners = []
        self._last_future = None
        self._executor = ThreadPoolExecutor(max_workers=1,
                                            thread_name_prefix="calc-history")

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def state(self):
        return self._state

    @property
    def display(self):
        return self._state.display

    @property
    def memory(self):
        return self._state.memory

    @property
    def history(self):
        return self._state.history

    @property
    def has_error(self):
        return self._state.has_error

    @property
    def error_message(self):
        return self._state.error_message

    def subscribe(self, listener):
        """Call ``listener(state)`` after every transition; returns an unsubscribe function"""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)
        return unsubscribe

    # ------------------------------------------------------------------
    # Dispatch and persistence
    # ------------------------------------------------------------------

    def dispatch(self, action):
        """Apply an action and return the new state"""
        with self._lock:
            previous = self._state
            self._state = reduce_state(previous, action)
            new_state = self._state
            if (new_state.history != previous.history
                    and not isinstance(action, SetHistory)):
                self._schedule_save(new_state.history)
            listeners = list(self._listeners)

        self._notify(listeners, new_state)
        return new_state

    @staticmethod
    def _notify(listeners, state):
        for listener in listeners:
            listener(state)

    def _schedule_save(self, entries):
        # Callers hold self._lock so saves queue in transition order
        if self.history_manager is None:
            return
        future = self._executor.submit(self.history_manager.save, list(entries))
        future.add_done_callback(self._log_save_failure)
        self._last_future = future

    @staticmethod
    def _log_save_failure(future):
        error = future.exception()
        if error is not None:
            logger.error("Failed to save calculator history: %s", error)

    def load_history(self):
        """Load stored history in the background and hydrate the state"""
        if self.history_manager is None:
            return None
        with self._lock:
            future = self._executor.submit(self._hydrate)
            self._last_future = future
        return future

    def _hydrate(self):
        loaded = trim_history(self.history_manager.load())
        with self._lock:
            # Entries calculated while loading go in front of the stored ones
            loaded_ids = {entry.id for entry in loaded}
            pending = tuple(entry for entry in self._state.history
                            if entry.id not in loaded_ids)
            self._state = reduce_state(self._state, SetHistory(pending + loaded))
            new_state = self._state
            if new_state.history != loaded:
                self._schedule_save(new_state.history)
            listeners = list(self._listeners)

        self._notify(listeners, new_state)
        logger.info("Calculator history hydrated with %d entries", len(new_state.history))
        return list(new_state.history)

    def flush(self, timeout=None):
        """Wait until queued history work has finished"""
        while True:
            with self._lock:
                future = self._last_future
            if future is None:
                return
            future.exception(timeout=timeout)
            # Hydration may have queued a save while we waited
            with self._lock:
                if future is self._last_future:
                    return

    def close(self):
        """Finish pending saves and stop the background worker"""
        self._executor.shutdown(wait=True)

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def input_number(self, digit):
        """Add a digit or decimal point to the display"""
        return self.dispatch(InputDigit(str(digit))).display

    def input_operation(self, operation):
        """Enter an operator, applying any pending one first"""
        return self.dispatch(InputOperation(operation)).display

    def calculate(self):
        return self.dispatch(Calculate()).display

    def clear(self):
        return self.dispatch(Clear()).display

    def clear_entry(self):
        return self.dispatch(ClearEntry()).display

    def backspace(self):
        return self.dispatch(Backspace()).display

    def toggle_sign(self):
        return self.dispatch(ToggleSign()).display

    def percent(self):
        return self.dispatch(Percent()).display

    def square_root(self):
        return self.dispatch(SquareRoot()).display

    def reciprocal(self):
        return self.dispatch(Reciprocal()).display

    def memory_clear(self):
        """Clear memory (MC)"""
        return self.dispatch(MemoryClear()).display

    def memory_recall(self):
        """Recall memory value (MR)"""
        return self.dispatch(MemoryRecall()).display

    def memory_add(self):
        """Add display value to memory (M+)"""
        return self.dispatch(MemoryAdd()).display

    def memory_subtract(self):
        """Subtract display value from memory (M-)"""
        return self.dispatch(MemorySubtract()).display

    def clear_history(self):
        return self.dispatch(ClearHistory()).display
