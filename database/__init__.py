"""SQLite storage for accounts and settings."""
