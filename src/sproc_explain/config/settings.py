"""Environment-based settings.

Loads settings from environment variables using python-dotenv.
"""
from __future__ import annotations
import os

from dotenv import load_dotenv

load_dotenv()


class Settings:
    """Run settings loaded from environment variables."""

    def __init__(self) -> None:
        # Database
        self.database_url = os.getenv("DATABASE_URL", "mysql://root@localhost:3306/fxa")

        # Procedure sources
        self.source_root = os.getenv("SOURCE_ROOT", ".")
        self.caller_file = os.getenv("CALLER_FILE", "")
        self.ignore_file = os.getenv("IGNORE_FILE", ".explain-ignore")
        self.source_patterns = [
            pattern.strip()
            for pattern in os.getenv("SOURCE_PATTERNS", "*.sql").split(",")
            if pattern.strip()
        ]

        # Fixtures
        self.record_count = int(os.getenv("RECORD_COUNT", "100"))

        # Logging
        self.log_level = os.getenv("LOG_LEVEL", "WARNING")

        # Guard against seeding a production database
        self.environment = os.getenv("NODE_ENV", "")
