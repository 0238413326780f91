"""
Supported language list for the page translator.

Starts from a built-in list and refreshes from the language-list endpoint.
The default language is always present and always first when the remote
list omits it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from farmmind.page.client import TranslationClient

logger = logging.getLogger(__name__)


DEFAULT_LANGUAGE = "en"


@dataclass(frozen=True)
class LanguageDescriptor:
    code: str
    label: str
    short: str


DEFAULT_LANGUAGES: tuple[LanguageDescriptor, ...] = (
    LanguageDescriptor(code="en", label="English", short="EN"),
    LanguageDescriptor(code="hi", label="Hindi", short="HI"),
)


def normalize_languages(raw: Any) -> list[LanguageDescriptor]:
    """
    Turn remote entries into descriptors.

    Entries need a ``code`` and a ``name`` (or ``label``); anything else is
    dropped. The default language is inserted first if missing, but only
    when at least one valid entry was found.
    """
    mapped = []
    for item in raw or []:
        if not isinstance(item, dict):
            continue
        code = item.get("code")
        label = item.get("name") or item.get("label")
        if not code or not label:
            continue
        mapped.append(LanguageDescriptor(code=str(code), label=str(label), short=str(code).upper()))

    if mapped and not any(lang.code == DEFAULT_LANGUAGE for lang in mapped):
        mapped.insert(0, DEFAULT_LANGUAGES[0])
    return mapped


class LanguageRegistry:
    """Ordered list of languages the page can be shown in."""

    def __init__(self, languages: list[LanguageDescriptor] | None = None):
        self.languages: list[LanguageDescriptor] = list(languages or DEFAULT_LANGUAGES)

    def get(self, code: str | None) -> LanguageDescriptor:
        """Descriptor for ``code``; unknown codes fall back to the first entry."""
        for lang in self.languages:
            if lang.code == code:
                return lang
        return self.languages[0]

    def has(self, code: str | None) -> bool:
        return any(lang.code == code for lang in self.languages)

    @property
    def codes(self) -> list[str]:
        return [lang.code for lang in self.languages]

    async def refresh(self, client: TranslationClient) -> bool:
        """
        Reload from the language-list endpoint.

        Returns True when the list was replaced. On any failure, or when the
        response holds no usable entries, the current list is kept.
        """
        try:
            raw = await client.fetch_languages()
        except Exception as e:
            logger.debug(f"Language list unavailable, keeping defaults: {e}")
            return False

        normalized = normalize_languages(raw)
        if not normalized:
            logger.debug("Language list empty or malformed, keeping defaults")
            return False

        self.languages = normalized
        return True
