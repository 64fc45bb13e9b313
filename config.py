"""
Configuration for the TravelEase API.

Values come from environment variables, optionally loaded from a ``.env``
file in the working directory. There are no command line flags.
"""
import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv


@dataclass
class Settings:
    """Application settings."""

    port: int = 5000
    mongodb_uri: str = "mongodb://localhost:27017"
    db_name: str = "travleaseDB"
    log_level: str = "INFO"
    log_file: Optional[str] = None

    @classmethod
    def from_env(cls) -> "Settings":
        load_dotenv()
        return cls(
            port=int(os.getenv("PORT", "5000")),
            mongodb_uri=os.getenv("MONGODB_URI", "mongodb://localhost:27017"),
            db_name=os.getenv("DB_NAME", "travleaseDB"),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE") or None,
        )
