"""
PocketCalc
Main application entry point: starts the calculator web API
"""
import atexit

import config
from api import create_app
from calculator import Calculator
from database import Database
from history_manager import HistoryManager


def build_calculator(db_path=config.DB_PATH):
    """Create a calculator wired to persistent history and start hydration"""
    db = Database(db_path)
    calculator = Calculator(HistoryManager(db))
    calculator.load_history()
    return calculator


def main():
    config.configure_logging()
    calculator = build_calculator()
    atexit.register(calculator.close)

    app = create_app(calculator)

    print("\n" + "="*60)
    print(f"{config.APP_NAME} {config.VERSION}")
    print("="*60)
    print(f"Server starting on http://{config.WEB_HOST}:{config.WEB_PORT}")
    print(f"History database: {config.DB_PATH}")
    print("="*60 + "\n")

    app.run(host=config.WEB_HOST, port=config.WEB_PORT, debug=False)


if __name__ == "__main__":
    main()
