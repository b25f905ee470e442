"""
Wallet ledger: the spendable balance of each user.

``users.balance`` is the only record of a user's funds.  It changes in
two ways: deposits credit it and purchases debit it.  Both run as a
single read-compare-write inside a ``BEGIN IMMEDIATE`` transaction, so
the write lock is held from the moment the balance is read until the
new value is committed.  Two concurrent debits of the same wallet are
therefore serialized: the second one sees the first one's result and
fails with ``InsufficientFunds`` instead of overdrawing.

Guest checkouts have no user id.  For them ``credit`` and ``debit``
return ``None`` without touching the store.

Callers that must commit the ledger change together with other writes
(the order processor) pass their open transaction connection as
``conn``; the ledger then joins that transaction instead of opening its
own.
"""

import logging
import sqlite3
from decimal import Decimal
from typing import Optional

from ..core.db import Database
from ..core.errors import AccountSuspended, InsufficientFunds, InvalidInput, NotFound
from ..schemas.user import UserStatus
from .pricing_service import MAX_MINOR_UNITS, from_minor_units, to_minor_units

logger = logging.getLogger(__name__)


class WalletService:
    """Credit and debit user balances."""

    def __init__(self, db: Database):
        self.db = db

    def get_balance(self, user_id: int) -> Decimal:
        with self.db.cursor() as cursor:
            row = cursor.execute("SELECT balance FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFound(f"User {user_id} not found")
        return from_minor_units(row["balance"])

    def credit(
        self,
        user_id: Optional[int],
        amount: Decimal,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[Decimal]:
        """Add ``amount`` to the user's balance and return the new balance.

        Deposits never fail for lack of funds.  ``amount`` must be
        positive, otherwise ``InvalidInput`` is raised.
        """
        minor = self._positive_minor_units(amount)
        if user_id is None:
            return None
        with self.db.transaction(conn) as tx:
            balance = self._locked_balance(tx, user_id)
            new_balance = balance + minor
            if new_balance > MAX_MINOR_UNITS:
                raise InvalidInput("Balance would exceed the maximum allowed")
            self._write_balance(tx, user_id, new_balance)
        logger.info("Credited %s to user %s", from_minor_units(minor), user_id)
        return from_minor_units(new_balance)

    def debit(
        self,
        user_id: Optional[int],
        amount: Decimal,
        conn: Optional[sqlite3.Connection] = None,
    ) -> Optional[Decimal]:
        """Subtract ``amount`` from the user's balance and return the new balance.

        Raises ``InsufficientFunds`` without changing anything when the
        balance is smaller than ``amount``.
        """
        minor = self._positive_minor_units(amount)
        if user_id is None:
            return None
        with self.db.transaction(conn) as tx:
            balance = self._locked_balance(tx, user_id)
            if balance < minor:
                logger.info(
                    "Debit of %s refused for user %s: balance %s",
                    from_minor_units(minor), user_id, from_minor_units(balance),
                )
                raise InsufficientFunds("Insufficient balance, please deposit first")
            new_balance = balance - minor
            self._write_balance(tx, user_id, new_balance)
        logger.info("Debited %s from user %s", from_minor_units(minor), user_id)
        return from_minor_units(new_balance)

    @staticmethod
    def _positive_minor_units(amount: Decimal) -> int:
        minor = to_minor_units(amount)
        if minor <= 0:
            raise InvalidInput("Amount must be positive")
        return minor

    @staticmethod
    def _locked_balance(conn: sqlite3.Connection, user_id: int) -> int:
        """Read the balance of an active user inside the caller's write transaction."""
        row = conn.execute("SELECT balance, status FROM users WHERE id = ?", (user_id,)).fetchone()
        if not row:
            raise NotFound(f"User {user_id} not found")
        if row["status"] != UserStatus.ACTIVE.value:
            raise AccountSuspended(f"User {user_id} is suspended")
        return row["balance"]

    @staticmethod
    def _write_balance(conn: sqlite3.Connection, user_id: int, balance: int) -> None:
        conn.execute(
            "UPDATE users SET balance = ?, updated_at = CURRENT_TIMESTAMP WHERE id = ?",
            (balance, user_id),
        )
