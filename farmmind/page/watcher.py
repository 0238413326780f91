"""
Re-apply the active language after the page changes.

Only structural changes (nodes added or removed under the body) are
watched. The engine's own writes are text and attribute changes, so
translating never re-triggers the watcher. Changes inside opted-out
regions (the translate widget itself) are ignored. The observer callback only
(re)starts a debounce timer; the re-apply itself runs later as a task.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from farmmind.page.document import MutationRecord, Observation
from farmmind.page.extractor import in_opted_out_region
from farmmind.page.registry import DEFAULT_LANGUAGE

if TYPE_CHECKING:
    from farmmind.page.engine import PageTranslator

logger = logging.getLogger(__name__)


DEFAULT_DEBOUNCE_SECONDS = 0.35


class MutationWatcher:
    """Debounced, silent re-apply of the current language."""

    def __init__(self, translator: "PageTranslator", delay: float = DEFAULT_DEBOUNCE_SECONDS):
        self.translator = translator
        self.delay = delay
        self._observation: Observation | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._tasks: set[asyncio.Task] = set()

    @property
    def active(self) -> bool:
        return self._observation is not None

    @property
    def pending(self) -> bool:
        """A timer or a re-apply task is outstanding."""
        return self.translator.state.mutation_timer is not None or bool(self._tasks)

    def start(self) -> None:
        """Begin observing. Must be called from within the running event loop."""
        if self._observation is not None:
            return
        self._loop = asyncio.get_running_loop()
        document = self.translator.document
        self._observation = document.observe(
            self._on_mutations, document.body, child_list=True, subtree=True
        )

    def stop(self) -> None:
        if self._observation is not None:
            self._observation.disconnect()
            self._observation = None
        self._cancel_timer()
        for task in list(self._tasks):
            task.cancel()

    def _on_mutations(self, records: list[MutationRecord]) -> None:
        # Status line, picker and lang-switch labels live in opted-out regions
        if all(in_opted_out_region(record.target) for record in records):
            return
        self.schedule()

    def _cancel_timer(self) -> None:
        state = self.translator.state
        if state.mutation_timer is not None:
            state.mutation_timer.cancel()
            state.mutation_timer = None

    def _wanted(self) -> bool:
        # During a first apply the language is still the default; the timer
        # waits for it and the result decides in _fire
        return self.translator.is_translated or self.translator.is_translating

    def schedule(self) -> None:
        """(Re)start the debounce timer."""
        if not self._wanted() or self._loop is None:
            return
        self._cancel_timer()
        self.translator.state.mutation_timer = self._loop.call_later(self.delay, self._fire)

    def _fire(self) -> None:
        self.translator.state.mutation_timer = None
        if self.translator.is_translating:
            # Busy: try again later instead of dropping the change
            self.schedule()
            return

        code = self.translator.current_language
        if code == DEFAULT_LANGUAGE:
            return

        logger.debug(f"Page changed, re-applying '{code}'")
        task = self._loop.create_task(self.translator.apply_language(code, silent=True))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def wait_idle(self, timeout: float = 5.0) -> None:
        """Wait until no timer or re-apply task is outstanding."""
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while self.pending:
            if loop.time() > deadline:
                raise asyncio.TimeoutError("mutation watcher did not settle")
            if self._tasks:
                await asyncio.gather(*list(self._tasks), return_exceptions=True)
            else:
                await asyncio.sleep(self.delay / 2 or 0.01)
