"""Credential policies — implement CredentialPolicy.

PlaintextCredentials keeps the password as-is, matching how the prototype
app stored accounts on the device. HashedCredentials is the drop-in
replacement: bcrypt hashes through passlib's CryptContext.
"""

from __future__ import annotations

import hmac
import logging

from passlib.context import CryptContext

logger = logging.getLogger(__name__)


class PlaintextCredentials:
    """Stores passwords verbatim. Prototype only."""

    def encode(self, password: str) -> str:
        return password

    def verify(self, password: str, stored: str) -> bool:
        return hmac.compare_digest(password.encode(), stored.encode())


class HashedCredentials:
    """Stores passwords as bcrypt hashes (`$2b$<rounds>$...`)."""

    def __init__(self, rounds: int = 12) -> None:
        self._context = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds,
        )

    def encode(self, password: str) -> str:
        return self._context.hash(password)

    def verify(self, password: str, stored: str) -> bool:
        try:
            return self._context.verify(password, stored)
        except ValueError:
            # Not a bcrypt hash, e.g. a record written by PlaintextCredentials
            logger.warning("Stored password is not in a recognized hash format")
            return False
