"""
PocketCalc Configuration Settings
"""
import os
import logging

# Application Settings
APP_NAME = "PocketCalc"
VERSION = "1.0.0"

# Database Settings
DB_PATH = os.environ.get(
    "POCKETCALC_DB_PATH",
    os.path.join(os.path.dirname(__file__), "pocketcalc.db"),
)

# History Settings
HISTORY_STORAGE_KEY = "pocketcalc:history"
MAX_HISTORY_ITEMS = 50

# Display Settings
DISPLAY_PRECISION = 10       # decimal places kept when formatting results
ERROR_DISPLAY = "Error"

# Web API settings
WEB_HOST = os.environ.get("POCKETCALC_HOST", "127.0.0.1")
WEB_PORT = int(os.environ.get("POCKETCALC_PORT", "8888"))

# Logging
LOG_LEVEL = os.environ.get("POCKETCALC_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level=None):
    """Configure root logging for the application."""
    logging.basicConfig(level=level or LOG_LEVEL, format=LOG_FORMAT)
