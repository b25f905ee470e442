"""
Order processor: purchases and deposits.

An order goes ``requested → validated → (ledger applied, persisted) →
completed`` or ``requested → rejected``; no partial state is ever
visible.  Validation (input, maintenance mode, feature flags) happens
before anything is written.  The ledger step and the insert of the
order row then run in one ``BEGIN IMMEDIATE`` transaction, so either
both commit or neither does:

* purchase: debit the user's wallet by the price, insert the order;
* deposit: credit the wallet by the amount, insert an order of type
  ``deposit`` with ``price == amount``.

Guest requests (no user id) skip the ledger and only insert the row.

Order ids are generated here (``ORD-``/``DEP-`` followed by 16 hex
characters from a UUID4).  If an id collides with an existing row the
transaction is rolled back and retried with a fresh id, up to
``id_attempts`` times.  There is no idempotency key: submitting the same
request twice places two orders.
"""

import logging
import sqlite3
import uuid
from decimal import Decimal
from typing import Callable, List, Optional, Tuple

from ..core.db import Database
from ..core.errors import DuplicateId, InvalidInput, NotFound, ServiceUnavailable, StorageFailure
from ..schemas.catalog import ServiceType
from ..schemas.order import DepositCreate, OrderCreate, OrderRead, OrderReceipt, OrderStatus, OrderType
from .activity_service import ActivityService
from .pricing_service import MAX_MINOR_UNITS, PricingService, from_minor_units, to_minor_units
from .settings_service import SettingsService
from .wallet_service import WalletService

logger = logging.getLogger(__name__)

ORDER_PREFIX = "ORD"
DEPOSIT_PREFIX = "DEP"

LedgerStep = Callable[..., Optional[Decimal]]


def generate_order_id(prefix: str) -> str:
    """Return an id such as ``ORD-3F2A9C0D11B24E7A``."""
    return f"{prefix}-{uuid.uuid4().hex[:16].upper()}"


class OrderService:
    """Validates, charges and persists orders."""

    def __init__(
        self,
        db: Database,
        wallet: Optional[WalletService] = None,
        settings_service: Optional[SettingsService] = None,
        activity: Optional[ActivityService] = None,
        id_factory: Callable[[str], str] = generate_order_id,
        id_attempts: int = 3,
    ):
        self.db = db
        self.wallet = wallet or WalletService(db)
        self.settings_service = settings_service or SettingsService(db)
        self.activity = activity or ActivityService(db)
        self.id_factory = id_factory
        self.id_attempts = max(1, id_attempts)

    def place_order(self, data: OrderCreate, ip_address: Optional[str] = None) -> OrderReceipt:
        """Charge the user's wallet (if any) and record a purchase order.

        Raises ``InvalidInput``, ``ServiceUnavailable``, ``NotFound``,
        ``AccountSuspended`` or ``InsufficientFunds`` with nothing written.
        """
        service = ServiceType(data.type)
        quantity, price = self.resolve_quantity(service, data.amount, data.budget)
        target = data.resolved_target
        if not target:
            raise InvalidInput("A target username or post link is required")
        self._ensure_available(service)

        order_id = self._commit(
            ORDER_PREFIX,
            user_id=data.user_id,
            order_type=OrderType(service.value),
            amount=quantity,
            price=price,
            target=target,
            ledger_step=self.wallet.debit,
        )
        logger.info("Order %s placed: %s %s for %s (user %s)", order_id, quantity, service.value, price, data.user_id)
        self.activity.record(
            actor_type="User" if data.user_id is not None else "Guest",
            actor_id=data.user_id,
            action="order.create",
            details={"order_id": order_id, "type": service.value, "amount": quantity, "price": str(price)},
            ip_address=ip_address,
        )
        return OrderReceipt(
            order_id=order_id,
            message="Order placed successfully",
            amount=quantity,
            price=float(price),
        )

    def deposit(self, data: DepositCreate, ip_address: Optional[str] = None) -> OrderReceipt:
        """Credit the user's wallet (if any) and record a deposit order.

        Deposits are whole currency units; the order row carries the same
        value as ``amount`` and ``price``.
        """
        minor = to_minor_units(data.amount)
        if minor <= 0:
            raise InvalidInput("Deposit amount must be positive")
        if minor % 100:
            raise InvalidInput("Deposit amount must be a whole number")
        if self.settings_service.get_app_settings().maintenance_mode:
            raise ServiceUnavailable("The store is under maintenance, please try again later")
        amount = from_minor_units(minor)

        order_id = self._commit(
            DEPOSIT_PREFIX,
            user_id=data.user_id,
            order_type=OrderType.DEPOSIT,
            amount=int(amount),
            price=amount,
            target=None,
            ledger_step=self.wallet.credit,
        )
        logger.info("Deposit %s recorded: %s (user %s)", order_id, amount, data.user_id)
        self.activity.record(
            actor_type="User" if data.user_id is not None else "Guest",
            actor_id=data.user_id,
            action="deposit.create",
            details={"order_id": order_id, "amount": str(amount)},
            ip_address=ip_address,
        )
        return OrderReceipt(
            order_id=order_id,
            message="Deposit recorded successfully",
            amount=int(amount),
            price=float(amount),
        )

    def list_orders(self, user_id: Optional[int] = None) -> List[OrderRead]:
        """Return orders newest first, optionally only those of ``user_id``."""
        query = "SELECT id, user_id, type, amount, price, status, target, created_at FROM orders"
        params: Tuple = ()
        if user_id is not None:
            query += " WHERE user_id = ?"
            params = (user_id,)
        query += " ORDER BY created_at DESC, rowid DESC"
        with self.db.cursor() as cursor:
            rows = cursor.execute(query, params).fetchall()
        return [self._to_read(row) for row in rows]

    def get_order(self, order_id: str) -> OrderRead:
        with self.db.cursor() as cursor:
            row = cursor.execute(
                "SELECT id, user_id, type, amount, price, status, target, created_at FROM orders WHERE id = ?",
                (order_id,),
            ).fetchone()
        if not row:
            raise NotFound(f"Order {order_id} not found")
        return self._to_read(row)

    @staticmethod
    def resolve_quantity(
        service: ServiceType,
        amount: Optional[int],
        budget: Optional[Decimal],
    ) -> Tuple[int, Decimal]:
        """Turn a quantity or a budget into ``(quantity, price)``."""
        if amount is not None and budget is not None:
            raise InvalidInput("Provide either an amount or a budget, not both")
        if amount is not None:
            if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
                raise InvalidInput("Amount must be a positive whole number")
            if amount > MAX_MINOR_UNITS:
                raise InvalidInput("Amount is too large")
            quantity = amount
        elif budget is not None:
            if to_minor_units(budget) <= 0:
                raise InvalidInput("Budget must be positive")
            quantity = PricingService.quantity_for_budget(service, budget)
            if quantity < 1:
                raise InvalidInput("Budget is too small to buy a single unit")
        else:
            raise InvalidInput("An amount or a budget is required")
        price = PricingService.price_for_quantity(service, quantity)
        # Rejects prices too large to store
        to_minor_units(price)
        return quantity, price

    def _ensure_available(self, service: ServiceType) -> None:
        app_settings = self.settings_service.get_app_settings()
        if app_settings.maintenance_mode:
            raise ServiceUnavailable("The store is under maintenance, please try again later")
        if not app_settings.is_service_enabled(service.value):
            raise ServiceUnavailable(f"Ordering {service.value} is currently disabled")

    def _commit(
        self,
        prefix: str,
        user_id: Optional[int],
        order_type: OrderType,
        amount: int,
        price: Decimal,
        target: Optional[str],
        ledger_step: LedgerStep,
    ) -> str:
        """Apply the ledger step and insert the order row in one transaction.

        Returns the id of the stored order.  A collision on the generated
        id rolls everything back and retries with a new id.
        """
        for attempt in range(1, self.id_attempts + 1):
            order_id = self.id_factory(prefix)
            try:
                with self.db.transaction() as tx:
                    ledger_step(user_id, price, conn=tx)
                    self._insert(tx, order_id, user_id, order_type, amount, price, target)
                return order_id
            except DuplicateId:
                logger.warning("Order id %s already taken (attempt %s/%s)", order_id, attempt, self.id_attempts)
        raise DuplicateId(f"Could not allocate a unique order id after {self.id_attempts} attempts")

    @staticmethod
    def _insert(
        conn: sqlite3.Connection,
        order_id: str,
        user_id: Optional[int],
        order_type: OrderType,
        amount: int,
        price: Decimal,
        target: Optional[str],
    ) -> None:
        try:
            conn.execute(
                """
                INSERT INTO orders (id, user_id, type, amount, price, status, target)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    order_id,
                    user_id,
                    order_type.value,
                    amount,
                    to_minor_units(price),
                    OrderStatus.COMPLETED.value,
                    target,
                ),
            )
        except sqlite3.IntegrityError as e:
            if "orders.id" in str(e):
                raise DuplicateId(f"Order id {order_id} already exists") from e
            raise StorageFailure(f"Order could not be stored: {e}") from e

    @staticmethod
    def _to_read(row: sqlite3.Row) -> OrderRead:
        return OrderRead(
            id=row["id"],
            user_id=row["user_id"],
            type=row["type"],
            amount=row["amount"],
            price=float(from_minor_units(row["price"])),
            status=row["status"],
            target=row["target"],
            created_at=row["created_at"],
        )
