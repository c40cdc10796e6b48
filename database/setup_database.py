import sqlite3
import os

# Written once on first setup; later runs never overwrite user choices.
DEFAULT_SETTINGS = {
    "enabled": "0",
    "dark_mode": "0",
    "interval": "30",
}


def setup_database(path: str):
    """Create the accounts/settings tables and seed default settings."""

    # Make sure the parent directory exists
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    conn = sqlite3.connect(path)
    cursor = conn.cursor()

    # Accounts: display name + Base32 secret, listed in insertion order
    cursor.execute('''
    CREATE TABLE IF NOT EXISTS accounts (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        name TEXT NOT NULL,
        secret TEXT NOT NULL,
        created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
    ''')

    cursor.execute('''
    CREATE TABLE IF NOT EXISTS settings (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL
    )
    ''')

    cursor.executemany(
        "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
        DEFAULT_SETTINGS.items(),
    )

    conn.commit()
    conn.close()


if __name__ == "__main__":
    from database.db_manager import DATABASE_FILE

    setup_database(DATABASE_FILE)
    print(f"Database setup completed: {DATABASE_FILE}")
