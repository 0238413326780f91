"""
Storage abstraction layer.

Two small key-value interfaces:
- CacheStorage → server-side translation cache (in-memory, Redis later)
- PreferenceStore → durable client state such as the last applied language
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class CacheStorage(ABC):
    """
    Fast key-value cache for frequently accessed data.

    Local Implementation: In-memory dict
    """

    @abstractmethod
    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        """Set a value with optional TTL in seconds."""
        pass

    @abstractmethod
    async def get(self, key: str) -> Any | None:
        """Get a value."""
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete a key."""
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists."""
        pass


class PreferenceStore(ABC):
    """
    Durable string preferences, the equivalent of a browser's localStorage.

    Local Implementations: in-memory dict, JSON file on disk
    """

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Read a preference, None when unset."""
        pass

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Write a preference."""
        pass
