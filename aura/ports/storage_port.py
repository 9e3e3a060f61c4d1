"""Storage port — abstract interface for the device-local key-value store.

Record stores depend on this protocol, never on a specific backend.
Values are opaque strings; callers JSON-encode their own payloads.
"""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Asynchronous string-keyed store used by every record store."""

    async def get(self, key: str) -> str | None: ...

    async def set(self, key: str, value: str) -> None: ...

    async def remove(self, key: str) -> None: ...

    async def keys(self, prefix: str = "") -> list[str]: ...
