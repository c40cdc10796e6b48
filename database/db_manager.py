import logging
import os
import sqlite3

from core import Account, OTPError, Settings, clean_secret, generate, now
from . import setup_database

logger = logging.getLogger(__name__)

DATABASE_FILE = os.getenv("AUTHNOTIFY_DB", "database/authnotify.db")

_BOOL_SETTINGS = ("enabled", "dark_mode")


def _path(db_path):
    return db_path or DATABASE_FILE


def init_db(db_path: str = None) -> str:
    """Create the database file and tables if missing; returns the path used."""
    path = _path(db_path)
    setup_database.setup_database(path)
    return path


def get_db_connection(db_path: str = None):
    """Open a connection to the account database"""
    conn = sqlite3.connect(_path(db_path))
    conn.row_factory = sqlite3.Row  # rows behave like dicts
    return conn


def _row_to_account(row) -> Account:
    return Account(name=row["name"], secret=row["secret"], id=row["id"])


# --- Accounts --------------------------------------------------------------
def add_account(name: str, secret: str, db_path: str = None, provider=None) -> tuple[bool, int | str]:
    """
    Store a new account after checking that its secret produces a code.

    Returns (True, account_id) or (False, error message).
    """
    name = (name or "").strip()
    secret = clean_secret(secret or "")
    if not name or not secret:
        return (False, "Account name and secret key are required")

    try:
        generate(secret, now(), provider=provider)
    except OTPError as e:
        logger.info("Rejected secret for account '%s': %s", name, e.reason)
        return (False, f"Invalid secret key: {e.reason}")

    conn = get_db_connection(db_path)
    try:
        cursor = conn.execute(
            "INSERT INTO accounts (name, secret) VALUES (?, ?)",
            (name, secret),
        )
        conn.commit()
        logger.info("Account '%s' added (id=%s)", name, cursor.lastrowid)
        return (True, cursor.lastrowid)
    finally:
        conn.close()


def list_accounts(db_path: str = None) -> list[Account]:
    """All accounts in insertion order"""
    conn = get_db_connection(db_path)
    try:
        rows = conn.execute("SELECT id, name, secret FROM accounts ORDER BY id").fetchall()
    finally:
        conn.close()
    return [_row_to_account(r) for r in rows]


def get_account(account_id: int, db_path: str = None) -> Account | None:
    conn = get_db_connection(db_path)
    try:
        row = conn.execute(
            "SELECT id, name, secret FROM accounts WHERE id = ?", (account_id,)
        ).fetchone()
    finally:
        conn.close()
    return _row_to_account(row) if row else None


def rename_account(account_id: int, new_name: str, db_path: str = None) -> bool:
    """
    Rename an account. Empty or unchanged names keep the old record and
    return False.
    """
    account = get_account(account_id, db_path)
    if account is None:
        raise KeyError(account_id)

    new_name = (new_name or "").strip()
    if not new_name or new_name == account.name:
        return False

    conn = get_db_connection(db_path)
    try:
        conn.execute("UPDATE accounts SET name = ? WHERE id = ?", (new_name, account_id))
        conn.commit()
    finally:
        conn.close()
    logger.info("Account %s renamed '%s' -> '%s'", account_id, account.name, new_name)
    return True


def delete_account(account_id: int, db_path: str = None) -> bool:
    """Delete an account; False if the id does not exist"""
    conn = get_db_connection(db_path)
    try:
        cursor = conn.execute("DELETE FROM accounts WHERE id = ?", (account_id,))
        conn.commit()
        deleted = cursor.rowcount > 0
    finally:
        conn.close()
    if deleted:
        logger.info("Account %s deleted", account_id)
    return deleted


# --- Settings --------------------------------------------------------------
def get_settings(db_path: str = None) -> Settings:
    conn = get_db_connection(db_path)
    try:
        rows = conn.execute("SELECT key, value FROM settings").fetchall()
    finally:
        conn.close()

    raw = {r["key"]: r["value"] for r in rows}
    defaults = Settings()
    return Settings(
        enabled=raw.get("enabled", "0") == "1",
        dark_mode=raw.get("dark_mode", "0") == "1",
        interval=int(raw.get("interval", defaults.interval)),
    )


def update_settings(db_path: str = None, **values) -> Settings:
    """
    Update any of enabled / dark_mode / interval.

    Raises:
        ValueError: unknown key, enabled/dark_mode not a bool, or interval
                    not a positive int
    """
    rows = []
    for key, value in values.items():
        if key in _BOOL_SETTINGS:
            if not isinstance(value, bool):
                raise ValueError(f"{key} must be true or false")
            rows.append((key, "1" if value else "0"))
        elif key == "interval":
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ValueError("interval must be a positive number of seconds")
            rows.append((key, str(value)))
        else:
            raise ValueError(f"Unknown setting: {key}")

    conn = get_db_connection(db_path)
    try:
        conn.executemany(
            "INSERT INTO settings (key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            rows,
        )
        conn.commit()
    finally:
        conn.close()
    return get_settings(db_path)


def toggle_dark_mode(db_path: str = None) -> bool:
    """Flip the theme flag and return the new value"""
    dark = not get_settings(db_path).dark_mode
    update_settings(db_path, dark_mode=dark)
    return dark
