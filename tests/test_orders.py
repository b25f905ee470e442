"""
Tests for the order processor: purchases, deposits and order ids
"""

import re
import threading
from decimal import Decimal

import pytest

from fameflow_api.app.core.errors import (
    AccountSuspended,
    DuplicateId,
    InsufficientFunds,
    InvalidInput,
    NotFound,
    ServiceUnavailable,
)
from fameflow_api.app.schemas.order import DepositCreate, OrderCreate
from fameflow_api.app.schemas.user import UserStatus
from fameflow_api.app.services.activity_service import ActivityService
from fameflow_api.app.services.order_service import OrderService, generate_order_id
from fameflow_api.app.services.settings_service import SettingsService
from fameflow_api.app.services.user_service import UserService
from fameflow_api.app.services.wallet_service import WalletService


def count_orders(db) -> int:
    with db.cursor() as cursor:
        return cursor.execute("SELECT COUNT(*) FROM orders").fetchone()[0]


def fixed_ids(*ids):
    """Id factory handing out ``ids`` in order."""
    remaining = iter(ids)
    return lambda prefix: next(remaining)


def test_generate_order_id():
    order_id = generate_order_id("ORD")

    assert re.fullmatch(r"ORD-[0-9A-F]{16}", order_id)
    assert generate_order_id("DEP").startswith("DEP-")
    assert generate_order_id("ORD") != order_id


def test_place_order_debits_wallet(db, make_user):
    user_id = make_user(balance=1000)
    service = OrderService(db)

    receipt = service.place_order(
        OrderCreate(type="followers", amount=500, username="janedoe", user_id=user_id),
        ip_address="127.0.0.1",
    )

    assert receipt.success is True
    assert receipt.order_id.startswith("ORD-")
    assert receipt.message == "Order placed successfully"
    assert receipt.amount == 500
    assert receipt.price == 375.0
    assert WalletService(db).get_balance(user_id) == Decimal("625.00")

    order = service.get_order(receipt.order_id)
    assert order.type == "followers"
    assert order.status == "completed"
    assert order.price == 375.0
    assert order.target == "janedoe"
    assert order.user_id == user_id


def test_place_order_insufficient_funds_writes_nothing(db, make_user):
    user_id = make_user(balance=50)
    service = OrderService(db)

    with pytest.raises(InsufficientFunds):
        service.place_order(OrderCreate(type="views", amount=10000, link="https://instagram.com/p/x", user_id=user_id))

    assert count_orders(db) == 0
    assert WalletService(db).get_balance(user_id) == Decimal("50.00")
    assert ActivityService(db).list_logs(action="order.create") == []


def test_place_order_with_budget(db, make_user):
    user_id = make_user(balance=100)

    receipt = OrderService(db).place_order(
        OrderCreate(type="followers", budget=Decimal("100"), target="janedoe", user_id=user_id)
    )

    assert receipt.amount == 133
    assert receipt.price == 99.75
    assert WalletService(db).get_balance(user_id) == Decimal("0.25")


def test_guest_order_skips_ledger(db):
    receipt = OrderService(db).place_order(OrderCreate(type="likes", amount=100, link="https://instagram.com/p/x"))

    order = OrderService(db).get_order(receipt.order_id)
    assert order.user_id is None
    assert order.price == 40.0
    logs = ActivityService(db).list_logs(action="order.create")
    assert logs[0]["actor_type"] == "Guest"


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "followers", "amount": 10, "budget": Decimal("5"), "target": "x"},
        {"type": "followers", "target": "x"},
        {"type": "followers", "amount": 0, "target": "x"},
        {"type": "followers", "amount": -3, "target": "x"},
        {"type": "followers", "budget": Decimal("0.50"), "target": "x"},
        {"type": "followers", "budget": Decimal("-1"), "target": "x"},
        {"type": "followers", "amount": 10, "target": "   "},
        {"type": "followers", "amount": 10},
    ],
)
def test_invalid_orders_are_rejected(db, make_user, payload):
    user_id = make_user(balance=100)

    with pytest.raises(InvalidInput):
        OrderService(db).place_order(OrderCreate(user_id=user_id, **payload))

    assert count_orders(db) == 0
    assert WalletService(db).get_balance(user_id) == Decimal("100.00")


def test_order_for_unknown_user(db):
    with pytest.raises(NotFound):
        OrderService(db).place_order(OrderCreate(type="likes", amount=1, target="x", user_id=42))
    assert count_orders(db) == 0


def test_order_for_suspended_user(db, make_user):
    user_id = make_user(balance=100)
    UserService(db).set_status(user_id, UserStatus.SUSPENDED)

    with pytest.raises(AccountSuspended):
        OrderService(db).place_order(OrderCreate(type="likes", amount=1, target="x", user_id=user_id))
    assert count_orders(db) == 0


def test_maintenance_mode_blocks_orders_and_deposits(db, make_user):
    user_id = make_user(balance=100)
    SettingsService(db).update_setting("maintenance_mode", True)
    service = OrderService(db)

    with pytest.raises(ServiceUnavailable):
        service.place_order(OrderCreate(type="likes", amount=1, target="x", user_id=user_id))
    with pytest.raises(ServiceUnavailable):
        service.deposit(DepositCreate(amount=Decimal("10"), user_id=user_id))

    assert count_orders(db) == 0
    assert WalletService(db).get_balance(user_id) == Decimal("100.00")


def test_disabled_service_blocks_only_that_service(db, make_user):
    user_id = make_user(balance=100)
    SettingsService(db).update_setting("feature_views", False)
    service = OrderService(db)

    with pytest.raises(ServiceUnavailable) as exc_info:
        service.place_order(OrderCreate(type="views", amount=10, target="x", user_id=user_id))
    assert exc_info.value.status_code == 503

    service.place_order(OrderCreate(type="likes", amount=10, target="x", user_id=user_id))
    assert count_orders(db) == 1


def test_deposit_credits_wallet(db, make_user):
    user_id = make_user()
    service = OrderService(db)

    receipt = service.deposit(DepositCreate(amount=Decimal("250"), user_id=user_id))

    assert receipt.order_id.startswith("DEP-")
    assert receipt.message == "Deposit recorded successfully"
    assert WalletService(db).get_balance(user_id) == Decimal("250.00")
    order = service.get_order(receipt.order_id)
    assert order.type == "deposit"
    assert order.amount == 250
    assert order.price == 250.0
    assert order.status == "completed"


@pytest.mark.parametrize("amount", [Decimal("0"), Decimal("-10"), Decimal("12.50")])
def test_invalid_deposits_are_rejected(db, make_user, amount):
    user_id = make_user()

    with pytest.raises(InvalidInput):
        OrderService(db).deposit(DepositCreate(amount=amount, user_id=user_id))
    assert count_orders(db) == 0


def test_order_after_deposit(db, make_user):
    user_id = make_user()
    service = OrderService(db)

    service.deposit(DepositCreate(amount=Decimal("500"), user_id=user_id))
    service.place_order(OrderCreate(type="followers", amount=500, target="janedoe", user_id=user_id))

    assert WalletService(db).get_balance(user_id) == Decimal("125.00")


def test_duplicate_order_id_is_retried(db, make_user):
    user_id = make_user(balance=100)
    first = OrderService(db, id_factory=fixed_ids("ORD-AAAAAAAAAAAAAAAA"))
    first.place_order(OrderCreate(type="likes", amount=10, target="x", user_id=user_id))

    service = OrderService(db, id_factory=fixed_ids("ORD-AAAAAAAAAAAAAAAA", "ORD-BBBBBBBBBBBBBBBB"))
    receipt = service.place_order(OrderCreate(type="likes", amount=10, target="x", user_id=user_id))

    assert receipt.order_id == "ORD-BBBBBBBBBBBBBBBB"
    assert count_orders(db) == 2
    # The rolled back attempt must not have charged the wallet
    assert WalletService(db).get_balance(user_id) == Decimal("92.00")


def test_duplicate_order_id_gives_up(db, make_user):
    user_id = make_user(balance=100)
    OrderService(db, id_factory=fixed_ids("ORD-AAAAAAAAAAAAAAAA")).place_order(
        OrderCreate(type="likes", amount=10, target="x", user_id=user_id)
    )
    service = OrderService(db, id_factory=lambda prefix: "ORD-AAAAAAAAAAAAAAAA", id_attempts=3)

    with pytest.raises(DuplicateId) as exc_info:
        service.place_order(OrderCreate(type="likes", amount=10, target="x", user_id=user_id))

    assert exc_info.value.code == "DUPLICATE_ID"
    assert exc_info.value.status_code == 500
    assert count_orders(db) == 1
    assert WalletService(db).get_balance(user_id) == Decimal("96.00")


def test_replayed_request_places_two_orders(db, make_user):
    user_id = make_user(balance=100)
    service = OrderService(db)
    request = OrderCreate(type="likes", amount=10, target="x", user_id=user_id)

    first = service.place_order(request)
    second = service.place_order(request)

    assert first.order_id != second.order_id
    assert count_orders(db) == 2
    assert WalletService(db).get_balance(user_id) == Decimal("92.00")


def test_list_orders_newest_first_and_filtered(db, make_user):
    alice = make_user("alice", balance=100)
    bob = make_user("bob", balance=100)
    service = OrderService(db)

    a1 = service.place_order(OrderCreate(type="likes", amount=1, target="a", user_id=alice)).order_id
    b1 = service.place_order(OrderCreate(type="likes", amount=2, target="b", user_id=bob)).order_id
    a2 = service.place_order(OrderCreate(type="likes", amount=3, target="a", user_id=alice)).order_id

    assert [order.id for order in service.list_orders()] == [a2, b1, a1]
    assert [order.id for order in service.list_orders(alice)] == [a2, a1]
    assert service.list_orders(999) == []


def test_get_unknown_order(db):
    with pytest.raises(NotFound):
        OrderService(db).get_order("ORD-0000000000000000")


def test_concurrent_orders_cannot_overdraw(db, make_user):
    user_id = make_user(balance=300)
    barrier = threading.Barrier(2)
    refused = []

    def buy():
        barrier.wait()
        try:
            OrderService(db).place_order(OrderCreate(type="followers", amount=300, target="x", user_id=user_id))
        except InsufficientFunds:
            refused.append(1)

    threads = [threading.Thread(target=buy) for _ in range(2)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(refused) == 1
    assert count_orders(db) == 1
    assert WalletService(db).get_balance(user_id) == Decimal("75.00")


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "followers", "amount": 2**62},
        {"type": "views", "amount": 2**63},
        {"type": "likes", "budget": Decimal("1e40")},
    ],
)
def test_orders_too_large_to_store_are_rejected(db, payload):
    with pytest.raises(InvalidInput):
        OrderService(db).place_order(OrderCreate(target="x", **payload))
    assert count_orders(db) == 0


def test_deposit_too_large_to_store_is_rejected(db, make_user):
    user_id = make_user()

    with pytest.raises(InvalidInput):
        OrderService(db).deposit(DepositCreate(amount=Decimal(10**17), user_id=user_id))

    assert count_orders(db) == 0
    assert WalletService(db).get_balance(user_id) == Decimal("0.00")
