"""Environment-driven settings for the marketplace service.

Values are read once at import time. Tests override them by setting
environment variables before the application modules are imported.
"""

import os
import re


def _env_bool(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///marketplace.db")
# Reads can be routed to a replica; both default to DATABASE_URL.
WRITE_DATABASE_URL = os.getenv("WRITE_DATABASE_URL", DATABASE_URL)
READ_DATABASE_URL = os.getenv("READ_DATABASE_URL", WRITE_DATABASE_URL)

# Mapping API
GOOGLE_MAPS_API_KEY = os.getenv("GOOGLE_MAPS_API_KEY", "")
GEOCODE_URL = os.getenv("GEOCODE_URL", "https://maps.googleapis.com/maps/api/geocode/json")
GEOCODE_TIMEOUT_SECONDS = float(os.getenv("GEOCODE_TIMEOUT_SECONDS", "10"))

# Collection layout: flat names for single-tenant deployments, otherwise
# every table is namespaced by APP_ID.
USE_SIMPLE_COLLECTION_PATH = _env_bool("USE_SIMPLE_COLLECTION_PATH", False)
APP_ID = os.getenv("APP_ID", "default-app-id")

# Marketplace rules
DEFAULT_SEARCH_RADIUS_KM = float(os.getenv("DEFAULT_SEARCH_RADIUS_KM", "10"))
MIN_SEARCH_RADIUS_KM = 1
MAX_SEARCH_RADIUS_KM = 20
CLAIM_MAX_RETRIES = int(os.getenv("CLAIM_MAX_RETRIES", "3"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_DIR = os.getenv("LOG_DIR", os.path.join(os.path.dirname(__file__), "..", "logs"))
LOG_MAX_BYTES = int(os.getenv("LOG_MAX_BYTES", str(5 * 1024 * 1024)))
LOG_BACKUP_COUNT = int(os.getenv("LOG_BACKUP_COUNT", "3"))


def collection_name(base: str) -> str:
    """Return the table name for a logical collection.

    >>> collection_name("listings")  # with USE_SIMPLE_COLLECTION_PATH=true
    'listings'
    """
    if USE_SIMPLE_COLLECTION_PATH:
        return base
    prefix = re.sub(r"[^0-9a-zA-Z]+", "_", APP_ID).strip("_").lower()
    return f"{prefix}_{base}"
