"""
HTTP client for the translation service.

Two endpoints:
    GET  <languages_url>  → {"languages": [{"code", "name"}]} or a bare list
    POST <translate_url>  {texts, source_lang, target_lang} → {"translations": [...]}
"""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class TranslationError(Exception):
    """A translation batch failed: network error, non-2xx or malformed body."""

    def __init__(self, message: str = "Translation failed"):
        super().__init__(message)
        self.message = message


class TranslationClient:
    """
    Async client for the translate and language-list endpoints.

    Usage:
        client = TranslationClient(
            "http://localhost:3000/api/translate",
            "http://localhost:3000/api/translate/languages",
        )
        texts = await client.translate(["Welcome"], "en", "hi")
        await client.aclose()
    """

    def __init__(
        self,
        translate_url: str,
        languages_url: str,
        http: httpx.AsyncClient | None = None,
    ):
        self.translate_url = translate_url
        self.languages_url = languages_url
        self._owns_http = http is None
        self.http = http or httpx.AsyncClient(timeout=None)

    @classmethod
    def from_settings(cls, settings, http: httpx.AsyncClient | None = None) -> "TranslationClient":
        return cls(settings.translate_api_url, settings.translate_languages_url, http=http)

    async def fetch_languages(self) -> list[Any]:
        """Raw language entries. Raises on any network or status failure."""
        response = await self.http.get(self.languages_url)
        response.raise_for_status()
        data = response.json()
        if isinstance(data, dict) and isinstance(data.get("languages"), list):
            return data["languages"]
        if isinstance(data, list):
            return data
        return []

    async def translate(self, texts: list[str], source_lang: str, target_lang: str) -> list[str]:
        """Translate one batch. The result has the same length and order as ``texts``."""
        try:
            response = await self.http.post(
                self.translate_url,
                json={"texts": texts, "source_lang": source_lang, "target_lang": target_lang},
            )
        except httpx.HTTPError as e:
            logger.debug(f"Request to {self.translate_url} failed: {e!r}")
            raise TranslationError(str(e) or "Translation failed") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if not response.is_success:
            raise TranslationError(data.get("error") or "Translation failed")

        translations = data.get("translations")
        if not isinstance(translations, list):
            raise TranslationError("Invalid translation response")
        if len(translations) != len(texts):
            raise TranslationError(
                f"Expected {len(texts)} translations, got {len(translations)}"
            )
        # Unusable entries become "", which displays the source text
        return [t if isinstance(t, str) else "" for t in translations]

    async def aclose(self) -> None:
        if self._owns_http:
            await self.http.aclose()
