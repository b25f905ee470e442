"""
Static catalog of packages offered in the storefront.

Tier prices are list prices for display.  What a customer is actually
charged comes from ``PricingService``, which applies the same per-unit
rate to tiers and custom quantities alike.
"""

from typing import Dict, List, Optional

from ..schemas.catalog import CatalogRead, ServiceType, Tier
from .pricing_service import PricingService

PACKAGES: Dict[ServiceType, List[Tier]] = {
    ServiceType.FOLLOWERS: [
        Tier(id="f1", count=100, price=79),
        Tier(id="f2", count=500, price=299, popular=True),
        Tier(id="f3", count=1000, price=549),
        Tier(id="f4", count=5000, price=2499),
    ],
    ServiceType.VIEWS: [
        Tier(id="v1", count=500, price=49),
        Tier(id="v2", count=1000, price=89),
        Tier(id="v3", count=5000, price=399, popular=True),
        Tier(id="v4", count=10000, price=699),
    ],
    ServiceType.LIKES: [
        Tier(id="l1", count=100, price=49),
        Tier(id="l2", count=500, price=199, popular=True),
        Tier(id="l3", count=1000, price=349),
        Tier(id="l4", count=2500, price=799),
    ],
}

# Quick top-up buttons shown in the wallet dialog.
DEPOSIT_PRESETS: List[int] = [10, 25, 50, 100, 250, 500]


class CatalogService:
    """Read-only access to the package list."""

    @classmethod
    def list_catalog(cls) -> CatalogRead:
        return CatalogRead(
            packages={service: list(tiers) for service, tiers in PACKAGES.items()},
            rates={service: float(rate) for service, rate in PricingService.rates().items()},
            deposit_presets=list(DEPOSIT_PRESETS),
        )

    @classmethod
    def get_tier(cls, tier_id: str) -> Optional[Tier]:
        """Find a tier by its id (``f1`` .. ``l4``) across all services."""
        for tiers in PACKAGES.values():
            for tier in tiers:
                if tier.id == tier_id:
                    return tier
        return None
