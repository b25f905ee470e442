"""
Business logic for storefront users as managed from the back-office.

There is no public sign-up: accounts are listed, created and suspended
by administrators.  Balances are never changed here; that is the
``WalletService``'s job.
"""

import logging
import sqlite3
from typing import List, Optional

from ..core.db import Database
from ..core.errors import InvalidInput, NotFound
from ..core.security import hash_password
from ..schemas.user import UserCreate, UserRead, UserStatus
from .pricing_service import from_minor_units

logger = logging.getLogger(__name__)

USER_COLUMNS = "id, username, email, country, balance, status, last_login, created_at"


class UserService:
    """Service for listing and administering users."""

    def __init__(self, db: Database):
        self.db = db

    def create_user(self, data: UserCreate) -> UserRead:
        """Create a user with a zero balance.

        The password, if given, is stored as a salted hash.  A handle or
        email that is already taken raises ``InvalidInput``.
        """
        hashed = hash_password(data.password) if data.password else None
        try:
            with self.db.cursor() as cursor:
                cursor.execute(
                    "INSERT INTO users (username, email, password, country) VALUES (?, ?, ?, ?)",
                    (data.username.strip(), data.email.strip().lower(), hashed, data.country),
                )
                user_id = cursor.lastrowid
        except sqlite3.IntegrityError as e:
            raise InvalidInput("Username or email is already registered") from e
        logger.info("Created user %s (%s)", user_id, data.username)
        return self.get_user(user_id)

    def list_users(self) -> List[UserRead]:
        """Return all users, most recently created first."""
        with self.db.cursor() as cursor:
            rows = cursor.execute(f"SELECT {USER_COLUMNS} FROM users ORDER BY created_at DESC, id DESC").fetchall()
        return [self._to_read(row) for row in rows]

    def get_user(self, user_id: int) -> UserRead:
        user = self.find_user(user_id)
        if user is None:
            raise NotFound(f"User {user_id} not found")
        return user

    def find_user(self, user_id: int) -> Optional[UserRead]:
        with self.db.cursor() as cursor:
            row = cursor.execute(f"SELECT {USER_COLUMNS} FROM users WHERE id = ?", (user_id,)).fetchone()
        return self._to_read(row) if row else None

    def set_status(self, user_id: int, status: UserStatus) -> UserRead:
        """Activate or suspend a user.  Raises ``NotFound`` for unknown ids."""
        status = UserStatus(status)
        with self.db.cursor() as cursor:
            cursor.execute(
                "UPDATE users SET status = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
                (status.value, user_id),
            )
            if cursor.rowcount == 0:
                raise NotFound(f"User {user_id} not found")
        logger.info("User %s status set to %s", user_id, status.value)
        return self.get_user(user_id)

    @staticmethod
    def _to_read(row: sqlite3.Row) -> UserRead:
        return UserRead(
            id=row["id"],
            username=row["username"],
            email=row["email"],
            country=row["country"],
            balance=float(from_minor_units(row["balance"])),
            status=row["status"],
            last_login=row["last_login"],
            created_at=row["created_at"],
        )
