"""Configuration module for Campus Events.

This module provides centralized configuration management, including directory
paths, database settings, logging and rating bounds. All configuration values
can be overridden via environment variables.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# --- Directory Configuration ---

# Root directory of the project
ROOT_DIR = Path(__file__).parent.parent.resolve()

# Data directory name
DATA_DIR_NAME = "data"
DATA_DIR = ROOT_DIR / DATA_DIR_NAME

# --- Database Configuration ---

DATABASE_URL: str = os.getenv(
    "CAMPUS_EVENTS_DATABASE_URL", f"sqlite:///{DATA_DIR}/campus_events.db"
)

# Echo SQL statements (set to "true" to log every query)
SQL_ECHO: bool = os.getenv("CAMPUS_EVENTS_SQL_ECHO", "false").lower() == "true"

# --- Logging Configuration ---

LOG_LEVEL: str = os.getenv("CAMPUS_EVENTS_LOG_LEVEL", "INFO").upper()
LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# --- Rating Configuration ---

# Inclusive bounds for a single rating value
RATING_MIN: int = 1
RATING_MAX: int = 5
