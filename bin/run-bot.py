"""Run the Cities Telegram bot.

Usage: python bin/run-bot.py

Reads CITIES_* environment variables (CITIES_BOT_TOKEN is required).
"""

import sys
from pathlib import Path

# Add backend to path for imports
sys.path.insert(0, str(Path(__file__).resolve().parent.parent / "backend"))

from cities.server.app import main

if __name__ == "__main__":
    main()
