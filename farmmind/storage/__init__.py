"""
Storage abstractions.

- CacheStorage → server translation cache
- PreferenceStore → durable client preferences (last applied language)
"""

from farmmind.storage.base import CacheStorage, PreferenceStore
from farmmind.storage.local import (
    InMemoryCacheStorage,
    InMemoryPreferenceStore,
    JsonFilePreferenceStore,
)

__all__ = [
    "CacheStorage",
    "PreferenceStore",
    "InMemoryCacheStorage",
    "InMemoryPreferenceStore",
    "JsonFilePreferenceStore",
]
