"""
Apply/restore engine.

The page is either Original (default language) or Translated(code).
Translating extracts the items, resolves their translations through the
batcher and writes them in place; restoring writes back the captured
originals. At most one apply runs at a time; anything that tries to start
while one is in flight is ignored.

Usage:
    translator = PageTranslator(document, client, preferences)
    await translator.start()              # widget, registry, saved language
    await translator.apply_language("hi")
    await translator.restore_original()
    translator.stop()
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

from farmmind.page.batcher import DEFAULT_BATCH_SIZE, TranslationBatcher, TranslationCache
from farmmind.page.client import TranslationClient, TranslationError
from farmmind.page.document import LiveDocument
from farmmind.page.extractor import TranslatableItem, collect_items
from farmmind.page.originals import OriginalValueStore
from farmmind.page.registry import DEFAULT_LANGUAGE, LanguageRegistry
from farmmind.page.watcher import DEFAULT_DEBOUNCE_SECONDS, MutationWatcher
from farmmind.page.widget import TranslateWidget
from farmmind.storage.base import PreferenceStore

logger = logging.getLogger(__name__)


STORAGE_KEY = "fm_translate_lang"


@dataclass
class EngineState:
    """Mutable state of one page translator."""

    current: str = DEFAULT_LANGUAGE
    translating: bool = False
    mutation_timer: asyncio.TimerHandle | None = None


class PageTranslator:
    """
    Live translation of one document.

    All state lives on the instance, so several documents can be translated
    side by side without sharing anything but the HTTP client.
    """

    def __init__(
        self,
        document: LiveDocument,
        client: TranslationClient,
        preferences: PreferenceStore,
        *,
        registry: LanguageRegistry | None = None,
        batch_size: int = DEFAULT_BATCH_SIZE,
        debounce: float = DEFAULT_DEBOUNCE_SECONDS,
        storage_key: str = STORAGE_KEY,
    ):
        self.document = document
        self.client = client
        self.preferences = preferences
        self.registry = registry or LanguageRegistry()
        self.storage_key = storage_key

        self.state = EngineState()
        self.cache = TranslationCache()
        self.originals = OriginalValueStore()
        self.batcher = TranslationBatcher(client, self.cache, batch_size=batch_size)
        self.watcher = MutationWatcher(self, delay=debounce)
        self.widget: TranslateWidget | None = None

    @classmethod
    def from_settings(
        cls,
        document: LiveDocument,
        client: TranslationClient,
        preferences: PreferenceStore,
        settings,
    ) -> "PageTranslator":
        return cls(
            document,
            client,
            preferences,
            batch_size=settings.translate_batch_size,
            debounce=settings.translate_debounce_seconds,
            storage_key=settings.translate_storage_key,
        )

    @property
    def current_language(self) -> str:
        return self.state.current

    @property
    def is_translating(self) -> bool:
        return self.state.translating

    @property
    def is_translated(self) -> bool:
        return self.state.current != DEFAULT_LANGUAGE

    def collect_items(self) -> list[TranslatableItem]:
        return collect_items(self.document, self.originals)

    # =========================================================================
    # Lifecycle
    # =========================================================================

    async def start(self) -> None:
        """Build the control, load languages, re-apply the saved language."""
        saved = await self.preferences.get(self.storage_key)

        self.widget = TranslateWidget(self)
        self.widget.build()
        self.widget.bind_language_switches()

        await self.registry.refresh(self.client)
        if saved and self.registry.has(saved):
            self.state.current = saved

        self.widget.render_options()
        self._update_indicators()
        self.document.lang = self.state.current

        if self.is_translated:
            await self.apply_language(self.state.current, silent=True)

        self.watcher.start()

    def stop(self) -> None:
        self.watcher.stop()

    # =========================================================================
    # Transitions
    # =========================================================================

    async def apply_language(self, code: str, *, silent: bool = False) -> None:
        """
        Show the page in ``code``.

        The default language restores the original. Re-applying the current
        language translates only what changed since (everything else is a
        cache hit). Errors end up in the status line, never raised; batches
        fetched before a failure stay cached and the page is left untouched.
        """
        lang = self.registry.get(code)
        if lang.code == DEFAULT_LANGUAGE:
            await self.restore_original()
            return
        if self.state.translating:
            logger.debug(f"Ignoring apply of '{lang.code}': translation in flight")
            return

        self._set_busy(True)
        try:
            if not silent:
                self._set_status("Translating...")

            items = self.collect_items()
            await self.batcher.resolve(items, lang.code)

            for item in items:
                item.apply(self.cache.lookup(lang.code, item.key))

            self.state.current = lang.code
            await self.preferences.set(self.storage_key, lang.code)
            self.document.lang = lang.code
            self._update_indicators()

            logger.info(f"Applied '{lang.code}' to {len(items)} items")
            if not silent:
                self._set_status("Translated.", "success")

        except TranslationError as e:
            logger.warning(f"Translation to '{lang.code}' failed: {e.message}")
            if not silent:
                self._set_status(e.message or "Translation failed", "error")
        except Exception as e:
            logger.exception(f"Unexpected error applying '{lang.code}'")
            if not silent:
                self._set_status(str(e) or "Translation failed", "error")
        finally:
            self._set_busy(False)

    async def restore_original(self) -> None:
        """Write every original value back and forget the chosen language."""
        if self.state.translating:
            logger.debug("Ignoring restore: translation in flight")
            return

        items = self.collect_items()
        for item in items:
            item.restore()

        self.state.current = DEFAULT_LANGUAGE
        await self.preferences.set(self.storage_key, DEFAULT_LANGUAGE)
        self.document.lang = DEFAULT_LANGUAGE
        self._update_indicators()

        label = self.registry.get(DEFAULT_LANGUAGE).label
        self._set_status(f"{label} restored.", "success")

    # =========================================================================
    # UI hooks
    # =========================================================================

    def _set_busy(self, busy: bool) -> None:
        self.state.translating = busy
        if self.widget is not None:
            self.widget.set_busy(busy)

    def _set_status(self, text: str, kind: str = "") -> None:
        if self.widget is not None:
            self.widget.set_status(text, kind)

    def _update_indicators(self) -> None:
        if self.widget is not None:
            self.widget.update_indicators(self.registry.get(self.state.current).short)
