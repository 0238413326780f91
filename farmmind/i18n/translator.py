"""
LLM-powered translator with caching.

Backs POST /api/translate. Uses DSPy signatures on the configured LM and
caches translations by content hash.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Callable

import dspy

from farmmind.i18n.languages import get_language_name, normalize_language_code
from farmmind.services.ai.client import configure_lm as _configure_lm
from farmmind.storage.base import CacheStorage
from farmmind.storage.local import InMemoryCacheStorage

logger = logging.getLogger(__name__)


class TranslationServiceError(Exception):
    """The LM could not produce a translation."""


# =============================================================================
# DSPy Signatures for Translation
# =============================================================================


class TranslateText(dspy.Signature):
    """Translate a short user interface string, keeping meaning and tone."""

    text: str = dspy.InputField(desc="Text to translate")
    source_language: str = dspy.InputField(desc="Source language name (e.g., 'English')")
    target_language: str = dspy.InputField(desc="Target language name (e.g., 'Hindi')")

    translated_text: str = dspy.OutputField(desc="Translated text only, no commentary")


class TranslateBatch(dspy.Signature):
    """Translate a list of web page strings. Return exactly one translation per input, in order."""

    texts: list[str] = dspy.InputField(desc="List of texts to translate")
    source_language: str = dspy.InputField(desc="Source language name")
    target_language: str = dspy.InputField(desc="Target language name")

    translated_texts: list[str] = dspy.OutputField(desc="List of translated texts in same order")


# =============================================================================
# Translation Cache
# =============================================================================


class TranslationCache:
    """Hash-keyed translation cache on top of a CacheStorage."""

    TTL = 60 * 60 * 24 * 30  # 30 days

    def __init__(self, storage: CacheStorage | None = None):
        self._storage = storage or InMemoryCacheStorage()

    def _make_key(self, text: str, source: str, target: str) -> str:
        """Create cache key from content hash."""
        content = f"{source}:{target}:{text}"
        return "trans:" + hashlib.sha256(content.encode()).hexdigest()[:16]

    async def get(self, text: str, source: str, target: str) -> str | None:
        return await self._storage.get(self._make_key(text, source, target))

    async def set(self, text: str, source: str, target: str, translation: str) -> None:
        await self._storage.set(self._make_key(text, source, target), translation, ttl=self.TTL)


# =============================================================================
# Translator Service
# =============================================================================


class Translator:
    """
    Main translation service.

    Usage:
        translator = Translator()
        hi_texts = await translator.translate_batch(["Welcome", "Search crops"], target="hi")
    """

    def __init__(
        self,
        storage: CacheStorage | None = None,
        default_source: str = "en",
        configure_lm: Callable[[], None] = _configure_lm,
    ):
        self.cache = TranslationCache(storage)
        self.default_source = default_source
        self._configure_lm = configure_lm
        self._lm_ready = False

        # DSPy modules (lazy initialized)
        self._translate_module: dspy.Predict | None = None
        self._batch_module: dspy.Predict | None = None

    @property
    def translate_module(self) -> dspy.Predict:
        if self._translate_module is None:
            self._translate_module = dspy.Predict(TranslateText)
        return self._translate_module

    @property
    def batch_module(self) -> dspy.Predict:
        if self._batch_module is None:
            self._batch_module = dspy.Predict(TranslateBatch)
        return self._batch_module

    def _ensure_lm(self) -> None:
        if not self._lm_ready:
            self._configure_lm()
            self._lm_ready = True

    async def translate(self, text: str, target: str, source: str | None = None) -> str:
        """Translate one string. Raises TranslationServiceError on LM failure."""
        if not text or not text.strip():
            return text

        target = normalize_language_code(target)
        source = normalize_language_code(source) if source else self.default_source
        if source == target:
            return text

        cached = await self.cache.get(text, source, target)
        if cached:
            return cached

        try:
            self._ensure_lm()
            result = self.translate_module(
                text=text,
                source_language=get_language_name(source),
                target_language=get_language_name(target),
            )
            translation = str(result.translated_text).strip()
        except Exception as e:
            logger.error(f"Translation to '{target}' failed: {e}")
            raise TranslationServiceError(str(e) or "Translation failed") from e

        await self.cache.set(text, source, target, translation)
        return translation

    async def translate_batch(
        self,
        texts: list[str],
        target: str,
        source: str | None = None,
    ) -> list[str]:
        """
        Translate many strings; the result matches ``texts`` in length and order.

        Uses the batch signature for uncached strings and falls back to
        one-by-one translation when the LM returns the wrong number.
        """
        if not texts:
            return []

        target = normalize_language_code(target)
        source = normalize_language_code(source) if source else self.default_source
        if source == target:
            return list(texts)

        results: list[str | None] = [None] * len(texts)
        uncached_indices: list[int] = []
        uncached_texts: list[str] = []

        for i, text in enumerate(texts):
            if not text or not text.strip():
                results[i] = text
                continue
            cached = await self.cache.get(text, source, target)
            if cached:
                results[i] = cached
            else:
                uncached_indices.append(i)
                uncached_texts.append(text)

        if uncached_texts:
            try:
                self._ensure_lm()
                result = self.batch_module(
                    texts=uncached_texts,
                    source_language=get_language_name(source),
                    target_language=get_language_name(target),
                )
                translations = [str(t) for t in (result.translated_texts or [])]
            except Exception as e:
                logger.error(f"Batch translation to '{target}' failed: {e}")
                raise TranslationServiceError(str(e) or "Translation failed") from e

            if len(translations) != len(uncached_texts):
                logger.warning(
                    f"LM returned {len(translations)} of {len(uncached_texts)} "
                    f"translations, retrying one by one"
                )
                translations = [
                    await self.translate(t, target, source) for t in uncached_texts
                ]

            for i, (orig_idx, translation) in enumerate(zip(uncached_indices, translations)):
                translation = translation.strip()
                results[orig_idx] = translation
                await self.cache.set(uncached_texts[i], source, target, translation)

        return [r if r is not None else texts[i] for i, r in enumerate(results)]

