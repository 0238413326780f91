"""
Floating translate control.

A toggle button and a panel with a language picker, Apply and reset
buttons and a status line. The whole widget is marked data-no-translate.
Any element with the ``lang-switch`` class also opens and closes the panel
and shows the short label of the current language.
"""

from __future__ import annotations

import html
from typing import TYPE_CHECKING

from bs4 import Tag

from farmmind.page.document import DomEvent, closest, has_class
from farmmind.page.registry import DEFAULT_LANGUAGE

if TYPE_CHECKING:
    from farmmind.page.engine import PageTranslator


WIDGET_ID = "fmTranslateWidget"
SELECT_ID = "fmTranslateSelect"
LANG_SWITCH_CLASS = "lang-switch"

WIDGET_MARKUP = f"""
<div id="{WIDGET_ID}" class="fm-translate" data-no-translate="true">
    <button class="fm-translate-fab" type="button">Translate</button>
    <div class="fm-translate-panel" role="dialog" aria-label="Translate page">
        <label class="fm-translate-label" for="{SELECT_ID}">Language</label>
        <select id="{SELECT_ID}" class="fm-translate-select"></select>
        <div class="fm-translate-actions">
            <button class="fm-translate-btn apply" type="button">Apply</button>
            <button class="fm-translate-btn reset" type="button">English</button>
        </div>
        <div class="fm-translate-status" aria-live="polite"></div>
    </div>
</div>
"""


class TranslateWidget:
    """The page's translate control, wired to a PageTranslator."""

    def __init__(self, translator: "PageTranslator"):
        self.translator = translator
        self.document = translator.document
        self.root: Tag | None = None
        self.panel: Tag | None = None
        self.fab: Tag | None = None
        self.select: Tag | None = None
        self.apply_button: Tag | None = None
        self.reset_button: Tag | None = None
        self.status: Tag | None = None

    # -------------------------------------------------------------------------
    # Construction
    # -------------------------------------------------------------------------

    def build(self) -> None:
        doc = self.document
        existing = doc.get_element_by_id(WIDGET_ID)
        if existing is None:
            doc.append(doc.body, WIDGET_MARKUP.strip())
        self.root = doc.get_element_by_id(WIDGET_ID)

        self.panel = doc.select_one(".fm-translate-panel", self.root)
        self.fab = doc.select_one(".fm-translate-fab", self.root)
        self.select = doc.select_one(f"#{SELECT_ID}", self.root)
        self.apply_button = doc.select_one(".fm-translate-btn.apply", self.root)
        self.reset_button = doc.select_one(".fm-translate-btn.reset", self.root)
        self.status = doc.select_one(".fm-translate-status", self.root)

        if existing is not None:
            return

        doc.add_event_listener("click", lambda event: self.toggle(), self.fab)
        doc.add_event_listener("click", self._on_apply, self.apply_button)
        doc.add_event_listener("click", self._on_reset, self.reset_button)
        doc.add_event_listener("click", self._on_document_click)
        doc.add_event_listener("keydown", self._on_keydown)

    def bind_language_switches(self) -> None:
        for button in self.document.select(f".{LANG_SWITCH_CLASS}"):
            self._mark_switch(button)
            self.document.add_event_listener("click", self._on_switch_click, button)

    def _mark_switch(self, button: Tag) -> None:
        if button.get("data-no-translate") != "true":
            self.document.set_attribute(button, "data-no-translate", "true")
        if button.get("type") != "button":
            self.document.set_attribute(button, "type", "button")

    def render_options(self) -> None:
        registry = self.translator.registry
        if not registry.has(self.translator.state.current):
            self.translator.state.current = DEFAULT_LANGUAGE

        options = "".join(
            f'<option value="{html.escape(lang.code)}">{html.escape(lang.label)}</option>'
            for lang in registry.languages
        )
        self.document.replace_children(self.select, options)
        self.choose(self.translator.state.current)

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def is_open(self) -> bool:
        return self.root is not None and has_class(self.root, "open")

    @property
    def selected_code(self) -> str:
        """Value of the selected option, the first option when none is marked."""
        options = self.select.find_all("option") if self.select is not None else []
        for option in options:
            if option.has_attr("selected"):
                return option.get("value") or DEFAULT_LANGUAGE
        if options:
            return options[0].get("value") or DEFAULT_LANGUAGE
        return DEFAULT_LANGUAGE

    def choose(self, code: str) -> None:
        """Mark the option for ``code`` as selected."""
        for option in self.select.find_all("option"):
            if option.get("value") == code:
                self.document.set_attribute(option, "selected", "selected")
            else:
                self.document.remove_attribute(option, "selected")

    def toggle(self, force: bool | None = None) -> None:
        if self.root is not None:
            self.document.toggle_class(self.root, "open", force)

    def set_status(self, text: str, kind: str = "") -> None:
        if self.status is None:
            return
        self.document.set_text_content(self.status, text or "")
        classes = ["fm-translate-status"] + ([kind] if kind else [])
        self.document.set_attribute(self.status, "class", classes)

    def set_busy(self, busy: bool) -> None:
        for control in (self.apply_button, self.reset_button, self.select):
            if control is None:
                continue
            if busy:
                self.document.set_attribute(control, "disabled", "disabled")
            else:
                self.document.remove_attribute(control, "disabled")
        if self.panel is not None:
            self.document.toggle_class(self.panel, "busy", busy)

    def update_indicators(self, short: str) -> None:
        """Show ``short`` on every lang-switch; unchanged labels are left alone."""
        for button in self.document.select(f".{LANG_SWITCH_CLASS}"):
            self._mark_switch(button)
            if button.get_text() != short:
                self.document.set_text_content(button, short)

    # -------------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------------

    async def _on_apply(self, event: DomEvent) -> None:
        code = self.selected_code or DEFAULT_LANGUAGE
        if code == DEFAULT_LANGUAGE:
            await self.translator.restore_original()
        else:
            await self.translator.apply_language(code)

    async def _on_reset(self, event: DomEvent) -> None:
        await self.translator.restore_original()

    def _on_switch_click(self, event: DomEvent) -> None:
        event.prevent_default()
        self.toggle()

    def _on_document_click(self, event: DomEvent) -> None:
        target = event.target
        if self.root is not None and self.document.contains(self.root, target):
            return
        if closest(target, lambda el: has_class(el, LANG_SWITCH_CLASS)) is not None:
            return
        self.toggle(False)

    def _on_keydown(self, event: DomEvent) -> None:
        if event.key == "Escape":
            self.toggle(False)
