"""
History Manager for PocketCalc
Loads and saves calculation history as a JSON array in the key-value store
"""
import json
import sqlite3
import logging

import config
from calculator_types import HistoryEntry

logger = logging.getLogger(__name__)


class HistoryManager:
    def __init__(self, db, storage_key=config.HISTORY_STORAGE_KEY):
        self.db = db
        self.storage_key = storage_key

    def load(self):
        """Load persisted history, newest first.

        Unreadable or corrupt data is logged and treated as an empty history
        so a bad record never blocks the calculator from starting.
        """
        try:
            raw = self.db.get_item(self.storage_key)
        except sqlite3.Error:
            logger.exception("Failed to load calculator history")
            return []

        if not raw:
            return []

        try:
            records = json.loads(raw)
            entries = [HistoryEntry.from_dict(record) for record in records]
        except (ValueError, TypeError, KeyError):
            logger.exception("Discarding corrupt calculator history")
            return []

        logger.info("Loaded %d history entries", len(entries))
        return entries[:config.MAX_HISTORY_ITEMS]

    def save(self, entries):
        """Overwrite the stored history with ``entries``"""
        payload = json.dumps([entry.to_dict() for entry in entries])
        self.db.set_item(self.storage_key, payload)
        logger.debug("Saved %d history entries", len(entries))

    def clear(self):
        """Remove stored history"""
        self.db.remove_item(self.storage_key)
