"""
Live page translation.

Usage:
    from farmmind.page import LiveDocument, PageTranslator, TranslationClient
    from farmmind.storage import InMemoryPreferenceStore

    doc = LiveDocument(html)
    client = TranslationClient(translate_url, languages_url)
    translator = PageTranslator(doc, client, InMemoryPreferenceStore())

    await translator.apply_language("hi")
    await translator.restore_original()
"""

from farmmind.page.document import (
    LiveDocument,
    MutationRecord,
    DomEvent,
    CHILD_LIST,
    CHARACTER_DATA,
    ATTRIBUTES,
)
from farmmind.page.originals import NodeMap, OriginalValueStore
from farmmind.page.extractor import (
    TranslatableItem,
    TextItem,
    AttributeItem,
    collect_items,
    should_skip_text,
)
from farmmind.page.client import TranslationClient, TranslationError
from farmmind.page.batcher import TranslationCache, TranslationBatcher, chunked
from farmmind.page.registry import (
    DEFAULT_LANGUAGE,
    DEFAULT_LANGUAGES,
    LanguageDescriptor,
    LanguageRegistry,
    normalize_languages,
)
from farmmind.page.engine import EngineState, PageTranslator
from farmmind.page.watcher import MutationWatcher
from farmmind.page.widget import TranslateWidget

__all__ = [
    # Document
    "LiveDocument",
    "MutationRecord",
    "DomEvent",
    "CHILD_LIST",
    "CHARACTER_DATA",
    "ATTRIBUTES",
    # Extraction
    "NodeMap",
    "OriginalValueStore",
    "TranslatableItem",
    "TextItem",
    "AttributeItem",
    "collect_items",
    "should_skip_text",
    # Network + cache
    "TranslationClient",
    "TranslationError",
    "TranslationCache",
    "TranslationBatcher",
    "chunked",
    # Languages
    "DEFAULT_LANGUAGE",
    "DEFAULT_LANGUAGES",
    "LanguageDescriptor",
    "LanguageRegistry",
    "normalize_languages",
    # Engine
    "EngineState",
    "PageTranslator",
    "MutationWatcher",
    "TranslateWidget",
]
