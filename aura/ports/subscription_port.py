"""Subscription port — abstract interface for the free/pro entitlement gate."""

from __future__ import annotations

from typing import Protocol


class SubscriptionPort(Protocol):
    """Abstract subscription service consulted before premium features."""

    async def is_premium(self) -> bool: ...

    async def purchase_package(self, package_id: str) -> bool: ...

    async def restore_purchases(self) -> bool: ...

    async def get_offerings(self) -> dict: ...
