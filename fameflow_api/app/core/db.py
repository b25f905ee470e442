"""
SQLite storage component and migration system.

``Database`` owns the path of the SQLite file and hands out short-lived
connections.  One instance is created per application in
``create_app``, initialised when the application starts and handed to
services through the ``get_db`` dependency; nothing in the package
opens the database through module-level state.

Connections run in autocommit mode (``isolation_level=None``).  Plain
statements are atomic on their own; multi-statement work goes through
``transaction()``, which issues ``BEGIN IMMEDIATE`` so the write lock is
taken before anything is read.  Two requests touching the same wallet
therefore never interleave their read-compare-write steps.

Migrations are stored in the ``migrations`` table and applied in order.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

from fastapi import Request

logger = logging.getLogger(__name__)

# Project root (the directory containing the ``fameflow_api`` package).
BASE_DIR = Path(__file__).resolve().parent.parent.parent.parent


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS admins (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            email TEXT UNIQUE NOT NULL,
            password TEXT NOT NULL,
            role TEXT NOT NULL DEFAULT 'Admin',
            two_factor_enabled INTEGER NOT NULL DEFAULT 0,
            last_login TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- balance is kept in minor units (1/100 of the currency) and is the
        -- only place spendable funds are recorded.
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            username TEXT UNIQUE NOT NULL,
            email TEXT UNIQUE NOT NULL,
            password TEXT,
            country TEXT,
            balance INTEGER NOT NULL DEFAULT 0 CHECK (balance >= 0),
            status TEXT NOT NULL DEFAULT 'Active' CHECK (status IN ('Active', 'Suspended')),
            device_info TEXT,
            last_login TIMESTAMP,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        -- id is generated by the order processor, not by SQLite.  price is
        -- in minor units; amount is the quantity (or the deposit value in
        -- whole currency units for deposits).
        CREATE TABLE IF NOT EXISTS orders (
            id TEXT PRIMARY KEY,
            user_id INTEGER,
            type TEXT NOT NULL CHECK (type IN ('followers', 'views', 'likes', 'deposit')),
            amount INTEGER,
            price INTEGER NOT NULL CHECK (price >= 0),
            status TEXT NOT NULL DEFAULT 'completed',
            target TEXT,
            provider_order_id TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            FOREIGN KEY(user_id) REFERENCES users(id)
        );

        CREATE TABLE IF NOT EXISTS subscription_plans (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            price INTEGER NOT NULL,
            duration TEXT NOT NULL,
            features TEXT,
            status TEXT NOT NULL DEFAULT 'Active'
        );

        CREATE TABLE IF NOT EXISTS user_subscriptions (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id INTEGER,
            plan_id INTEGER,
            status TEXT NOT NULL DEFAULT 'Active',
            start_date TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
            expiry_date TIMESTAMP,
            auto_renew INTEGER NOT NULL DEFAULT 1,
            FOREIGN KEY(user_id) REFERENCES users(id),
            FOREIGN KEY(plan_id) REFERENCES subscription_plans(id)
        );

        CREATE TABLE IF NOT EXISTS api_keys (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            key_value TEXT NOT NULL,
            provider TEXT NOT NULL,
            status TEXT NOT NULL DEFAULT 'Enabled',
            usage_limit INTEGER NOT NULL DEFAULT -1,
            current_usage INTEGER NOT NULL DEFAULT 0,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );

        CREATE TABLE IF NOT EXISTS app_settings (
            key TEXT PRIMARY KEY,
            value TEXT
        );

        CREATE TABLE IF NOT EXISTS activity_logs (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            actor_type TEXT,
            actor_id INTEGER,
            action TEXT NOT NULL,
            details TEXT,
            ip_address TEXT,
            created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
        );
        """,
    ),
    # Migration 2: Default runtime settings and lookup indices
    (
        2,
        """
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('maintenance_mode', 'false');
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('app_version', '1.0.0');
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('announcement', 'Welcome to the new FameFlow Admin Panel!');
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('feature_followers', 'true');
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('feature_views', 'true');
        INSERT OR IGNORE INTO app_settings (key, value) VALUES ('feature_likes', 'true');

        CREATE INDEX IF NOT EXISTS idx_orders_user_id ON orders(user_id);
        CREATE INDEX IF NOT EXISTS idx_orders_created_at ON orders(created_at);
        CREATE INDEX IF NOT EXISTS idx_user_subscriptions_status ON user_subscriptions(status);
        CREATE INDEX IF NOT EXISTS idx_activity_logs_created_at ON activity_logs(created_at);
        """,
    ),
]


class Database:
    """Owner of the SQLite file used by every service."""

    def __init__(self, url: str, timeout: float = 30.0):
        self.path = self._resolve_path(url)
        self.timeout = timeout

    @staticmethod
    def _resolve_path(url: str) -> str:
        """Return ``url`` if absolute, otherwise resolve it against the project root."""
        if os.path.isabs(url):
            return url
        return str((BASE_DIR / url).resolve())

    def connect(self) -> sqlite3.Connection:
        """Open a new connection.

        Rows are returned as ``sqlite3.Row`` so columns can be accessed by
        name.  Foreign keys are enforced per connection; SQLite leaves them
        off by default.
        """
        conn = sqlite3.connect(self.path, timeout=self.timeout, isolation_level=None)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor in autocommit mode and close the connection on exit."""
        conn = self.connect()
        try:
            yield conn.cursor()
        finally:
            conn.close()

    @contextmanager
    def transaction(self, conn: Optional[sqlite3.Connection] = None) -> Iterator[sqlite3.Connection]:
        """Run a block inside one ``BEGIN IMMEDIATE`` transaction.

        If ``conn`` is given it is assumed to be inside a transaction
        already and is yielded unchanged; the outer owner commits or rolls
        back.  Otherwise a connection is opened, the write lock taken, and
        the block committed on success or rolled back on any exception.
        """
        if conn is not None:
            yield conn
            return
        conn = self.connect()
        try:
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield conn
            except BaseException:
                conn.execute("ROLLBACK")
                raise
            conn.execute("COMMIT")
        finally:
            conn.close()

    def init(self) -> None:
        """Create the database file if needed and apply pending migrations."""
        Path(self.path).parent.mkdir(parents=True, exist_ok=True)
        with self.cursor() as cursor:
            cursor.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
            row = cursor.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    cursor.executescript(sql)
                    cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
                    logger.info("Applied migration %s to %s", version, self.path)
                    current_version = version


def get_db(request: Request) -> Database:
    """FastAPI dependency returning the application's ``Database``."""
    return request.app.state.db
