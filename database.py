"""
Database Manager for PocketCalc
Handles the SQLite key-value store that backs persisted history
"""
import sqlite3
import logging
from datetime import datetime
import config

logger = logging.getLogger(__name__)


class Database:
    def __init__(self, db_path=config.DB_PATH):
        self.db_path = db_path
        self.init_database()

    def get_connection(self):
        """Create and return a database connection"""
        return sqlite3.connect(self.db_path)

    def init_database(self):
        """Initialize database tables"""
        conn = self.get_connection()
        cursor = conn.cursor()

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS key_value_store (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        ''')

        conn.commit()
        conn.close()
        logger.debug("Database ready at %s", self.db_path)

    def get_item(self, key):
        """Return the stored value for ``key``, or None"""
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute('SELECT value FROM key_value_store WHERE key = ?', (key,))
        row = cursor.fetchone()
        conn.close()
        return row[0] if row else None

    def set_item(self, key, value):
        """Insert or overwrite the value stored under ``key``"""
        updated_at = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute('''
            INSERT INTO key_value_store (key, value, updated_at)
            VALUES (?, ?, ?)
            ON CONFLICT(key) DO UPDATE SET
                value = excluded.value,
                updated_at = excluded.updated_at
        ''', (key, value, updated_at))
        conn.commit()
        conn.close()

    def remove_item(self, key):
        """Delete ``key`` from the store"""
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute('DELETE FROM key_value_store WHERE key = ?', (key,))
        conn.commit()
        conn.close()
