"""
Per-language translation cache and request batching.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence, TypeVar

from farmmind.page.client import TranslationClient
from farmmind.page.extractor import TranslatableItem

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 30
SOURCE_LANGUAGE = "en"


def chunked(values: Sequence[T], size: int) -> list[list[T]]:
    """Split into consecutive lists of at most ``size`` values."""
    return [list(values[i:i + size]) for i in range(0, len(values), size)]


class TranslationCache:
    """
    Language code → {trimmed source text → translation}.

    Grows for the whole session; nothing is ever evicted. Languages are
    isolated from one another.
    """

    def __init__(self):
        self._languages: dict[str, dict[str, str]] = {}

    def for_language(self, code: str) -> dict[str, str]:
        if code not in self._languages:
            self._languages[code] = {}
        return self._languages[code]

    def missing(self, code: str, keys: Iterable[str]) -> list[str]:
        cache = self.for_language(code)
        return [key for key in keys if key not in cache]

    def lookup(self, code: str, key: str) -> str:
        """Cached translation, or the key itself when nothing usable is cached."""
        return self.for_language(code).get(key) or key


class TranslationBatcher:
    """
    Resolves translations for a set of items with as few requests as possible.

    Keys are deduplicated, cache hits skipped, and the misses sent in
    batches of ``batch_size``, one request at a time. A failed batch raises
    TranslationError; batches that already succeeded stay cached.
    """

    def __init__(
        self,
        client: TranslationClient,
        cache: TranslationCache | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        source_lang: str = SOURCE_LANGUAGE,
    ):
        if batch_size < 1:
            raise ValueError("batch_size must be positive")
        self.client = client
        self.cache = cache or TranslationCache()
        self.batch_size = batch_size
        self.source_lang = source_lang
        self.requests_sent = 0

    async def resolve(self, items: Iterable[TranslatableItem], target: str) -> dict[str, str]:
        unique = list(dict.fromkeys(item.key for item in items))
        missing = self.cache.missing(target, unique)
        cache = self.cache.for_language(target)

        if missing:
            logger.debug(
                f"{len(unique)} unique strings for '{target}', {len(missing)} not cached"
            )

        for batch in chunked(missing, self.batch_size):
            self.requests_sent += 1
            translations = await self.client.translate(batch, self.source_lang, target)
            for source, translated in zip(batch, translations):
                cache[source] = translated

        return cache
