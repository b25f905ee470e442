"""
Administrator accounts and login.

Passwords are stored as salted PBKDF2 hashes (see ``core.security``).
A successful login returns the administrator record; no session or
token is created.  On first start ``ensure_default_admin`` creates the
owner account from the configured credentials.
"""

import logging
from typing import Optional

from ..core.db import Database
from ..core.security import hash_password, verify_password
from ..schemas.admin import AdminRead

logger = logging.getLogger(__name__)


class AdminService:
    def __init__(self, db: Database):
        self.db = db

    def ensure_default_admin(self, email: str, password: str) -> bool:
        """Create the owner account if no administrator exists yet.

        Returns ``True`` when an account was created.
        """
        with self.db.cursor() as cursor:
            if cursor.execute("SELECT id FROM admins LIMIT 1").fetchone():
                return False
            cursor.execute(
                "INSERT INTO admins (email, password, role) VALUES (?, ?, ?)",
                (email.strip().lower(), hash_password(password), "Owner"),
            )
        logger.info("Created default administrator %s", email)
        return True

    def authenticate(self, email: str, password: str) -> Optional[AdminRead]:
        """Return the administrator if ``password`` matches, otherwise ``None``."""
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, email, password, role FROM admins WHERE email = ?",
                (email.strip().lower(),),
            ).fetchone()
            if not row or not verify_password(password, row["password"]):
                logger.warning("Failed administrator login for %s", email)
                return None
            cursor.execute("UPDATE admins SET last_login = CURRENT_TIMESTAMP WHERE id = ?", (row["id"],))
        logger.info("Administrator %s logged in", row["email"])
        return AdminRead(id=row["id"], email=row["email"], role=row["role"])

    def set_password(self, email: str, password: str) -> bool:
        """Replace an administrator's password.  Returns ``False`` if the email is unknown."""
        with self.db.cursor() as cursor:
            cursor.execute(
                "UPDATE admins SET password = ? WHERE email = ?",
                (hash_password(password), email.strip().lower()),
            )
            return cursor.rowcount > 0
