"""
Internationalization - LLM-powered translation for the FarmMind API.

Design:
1. Translate UI strings sent by the page translator in batches
2. Cache translations by content hash
3. Lazy - the LM is configured on first use

Usage:
    from farmmind.i18n import Translator

    texts_hi = await Translator().translate_batch(["Welcome"], target="hi")
"""

from farmmind.i18n.translator import (
    Translator,
    TranslationServiceError,
)
from farmmind.i18n.languages import (
    Language,
    LANGUAGE_NAMES,
    SUPPORTED_LANGUAGES,
    get_language_name,
    normalize_language_code,
    language_list,
)

__all__ = [
    "Translator",
    "TranslationServiceError",
    "Language",
    "LANGUAGE_NAMES",
    "SUPPORTED_LANGUAGES",
    "get_language_name",
    "normalize_language_code",
    "language_list",
]
