"""
Unit tests for the pricing engine, money helpers and catalog
"""

from decimal import Decimal

import pytest

from fameflow_api.app.core.errors import InvalidInput
from fameflow_api.app.schemas.catalog import ServiceType
from fameflow_api.app.services.catalog_service import DEPOSIT_PRESETS, CatalogService
from fameflow_api.app.services.pricing_service import (
    MAX_MINOR_UNITS,
    PricingService,
    from_minor_units,
    to_minor_units,
)


def test_rates():
    assert PricingService.rate(ServiceType.FOLLOWERS) == Decimal("0.75")
    assert PricingService.rate(ServiceType.VIEWS) == Decimal("0.10")
    assert PricingService.rate(ServiceType.LIKES) == Decimal("0.40")


def test_price_for_quantity():
    assert PricingService.price_for_quantity(ServiceType.FOLLOWERS, 500) == Decimal("375.00")
    assert PricingService.price_for_quantity(ServiceType.VIEWS, 10000) == Decimal("1000.00")
    assert PricingService.price_for_quantity(ServiceType.LIKES, 3) == Decimal("1.20")
    assert PricingService.price_for_quantity("views", 1) == Decimal("0.10")


def test_quantity_for_budget_floors():
    assert PricingService.quantity_for_budget(ServiceType.FOLLOWERS, Decimal("100")) == 133
    assert PricingService.quantity_for_budget(ServiceType.FOLLOWERS, Decimal("0.74")) == 0
    assert PricingService.quantity_for_budget(ServiceType.VIEWS, Decimal("1000")) == 10000
    assert PricingService.quantity_for_budget(ServiceType.LIKES, Decimal("0.79")) == 1


@pytest.mark.parametrize("service", list(ServiceType))
@pytest.mark.parametrize("quantity", [1, 3, 7, 99, 133, 500, 10001])
def test_inverse_path_never_overcharges(service, quantity):
    """Test that pricing a quantity and converting the price back is consistent"""
    price = PricingService.price_for_quantity(service, quantity)
    assert price == quantity * PricingService.rate(service)

    back = PricingService.quantity_for_budget(service, price)
    assert PricingService.price_for_quantity(service, back) <= price
    assert back == quantity


@pytest.mark.parametrize("service", list(ServiceType))
def test_budget_quantity_fits_in_budget(service):
    for budget in (Decimal("1"), Decimal("9.99"), Decimal("123.45"), Decimal("5000")):
        quantity = PricingService.quantity_for_budget(service, budget)
        assert PricingService.price_for_quantity(service, quantity) <= budget
        assert PricingService.price_for_quantity(service, quantity + 1) > budget


def test_minor_units():
    assert to_minor_units(Decimal("375.00")) == 37500
    assert to_minor_units(Decimal("0.1")) == 10
    assert to_minor_units(250) == 25000
    assert to_minor_units(0.1) == 10
    assert from_minor_units(37500) == Decimal("375.00")
    assert from_minor_units(5) == Decimal("0.05")


@pytest.mark.parametrize("bad", [Decimal("0.001"), "abc", None, Decimal("NaN"), True])
def test_minor_units_rejects_bad_amounts(bad):
    with pytest.raises(InvalidInput):
        to_minor_units(bad)


def test_catalog_lists_all_services():
    catalog = CatalogService.list_catalog()

    assert set(catalog.packages) == set(ServiceType)
    assert all(len(tiers) == 4 for tiers in catalog.packages.values())
    assert catalog.rates[ServiceType.FOLLOWERS] == 0.75
    assert catalog.deposit_presets == DEPOSIT_PRESETS
    popular = [tier.id for tiers in catalog.packages.values() for tier in tiers if tier.popular]
    assert sorted(popular) == ["f2", "l2", "v3"]


def test_get_tier():
    tier = CatalogService.get_tier("v4")
    assert tier is not None
    assert tier.count == 10000
    assert tier.price == 699
    assert CatalogService.get_tier("x9") is None


def test_minor_units_cap():
    largest = Decimal(MAX_MINOR_UNITS) / 100

    assert to_minor_units(largest) == MAX_MINOR_UNITS
    with pytest.raises(InvalidInput):
        to_minor_units(largest + Decimal("0.01"))
    with pytest.raises(InvalidInput):
        to_minor_units(10**17)
