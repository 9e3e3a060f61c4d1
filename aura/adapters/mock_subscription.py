"""Mock subscription adapter — implements SubscriptionPort.

Stands in for the store-billing SDK: serves a fixed pair of offerings and
flips the local entitlement on purchase. Nothing leaves the process.
"""

from __future__ import annotations

import copy
import logging

logger = logging.getLogger(__name__)

_OFFERINGS = {
    "current": {
        "availablePackages": [
            {
                "identifier": "$rc_monthly",
                "packageType": "MONTHLY",
                "product": {
                    "identifier": "pro_monthly",
                    "title": "Pro Monthly",
                    "description": "Unlock all features",
                    "price": 9.99,
                    "priceString": "$9.99",
                    "currencyCode": "USD",
                },
            },
            {
                "identifier": "$rc_annual",
                "packageType": "ANNUAL",
                "product": {
                    "identifier": "pro_annual",
                    "title": "Pro Annual",
                    "description": "Unlock all features (Save 20%)",
                    "price": 99.99,
                    "priceString": "$99.99",
                    "currencyCode": "USD",
                },
            },
        ]
    }
}


class MockSubscriptionService:
    """In-process implementation of SubscriptionPort."""

    def __init__(self, premium: bool | None = None) -> None:
        if premium is None:
            from aura.config import settings
            premium = settings.PREMIUM_ENABLED
        self._premium = premium

    async def is_premium(self) -> bool:
        logger.debug("Checking premium status: %s", self._premium)
        return self._premium

    async def purchase_package(self, package_id: str) -> bool:
        """Unlock premium if the package (or its product id) is offered."""
        packages = _OFFERINGS["current"]["availablePackages"]
        known = any(
            package_id in (p["identifier"], p["product"]["identifier"])
            for p in packages
        )
        if not known:
            logger.warning("Purchase rejected: unknown package '%s'", package_id)
            return False
        self._premium = True
        logger.info("Purchased package '%s', premium unlocked", package_id)
        return True

    async def restore_purchases(self) -> bool:
        logger.info("Restoring purchases: premium=%s", self._premium)
        return self._premium

    async def get_offerings(self) -> dict:
        return copy.deepcopy(_OFFERINGS)
