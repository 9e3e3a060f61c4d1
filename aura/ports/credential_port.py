"""Credential port — how account passwords are stored and checked.

The auth store never compares passwords itself; it delegates to a policy
so the stored form can change without touching call sites.
"""

from __future__ import annotations

from typing import Protocol


class CredentialPolicy(Protocol):
    """Encode a password for storage and verify a candidate against it."""

    def encode(self, password: str) -> str: ...

    def verify(self, password: str, stored: str) -> bool: ...
