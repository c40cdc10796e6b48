"""
Runtime configuration, read from environment variables.

Loaded into Flask with app.config.from_object(Config); the CLI reads the
same attributes directly.
"""
import logging
import os

from database.db_manager import DATABASE_FILE


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_FILE = DATABASE_FILE
    TIME_STEP = int(os.getenv("AUTHNOTIFY_TIME_STEP", "30"))
    HASH_PROVIDER = os.getenv("AUTHNOTIFY_HASH_PROVIDER", "hmac")
    LOG_LEVEL = os.getenv("AUTHNOTIFY_LOG_LEVEL", "INFO")
    SECRET_KEY = os.getenv("AUTHNOTIFY_SECRET_KEY", "authnotify-dev-key")
    HOST = os.getenv("AUTHNOTIFY_HOST", "127.0.0.1")
    PORT = int(os.getenv("AUTHNOTIFY_PORT", "5000"))
    DEBUG = _env_bool("AUTHNOTIFY_DEBUG", False)
    # Start the notification thread on app creation when settings say enabled
    NOTIFY_AUTOSTART = _env_bool("AUTHNOTIFY_NOTIFY_AUTOSTART", True)


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level="INFO"):
    """Install a root handler once; `level` is a name ("DEBUG") or a number."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
