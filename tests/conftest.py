"""
Shared fixtures.

The translation API is replaced by FakeTranslationServer behind an httpx
MockTransport, so the page translator runs its real HTTP client code.
"""

import json

import httpx
import pytest

from farmmind.page import LiveDocument, PageTranslator, TranslationClient
from farmmind.storage import InMemoryPreferenceStore


TRANSLATE_URL = "http://farmmind.test/api/translate"
LANGUAGES_URL = "http://farmmind.test/api/translate/languages"

HINDI = {
    "Welcome": "स्वागत है",
    "Search crops": "फसलें खोजें",
    "Hello world": "नमस्ते दुनिया",
    "Soil moisture": "मिट्टी की नमी",
    "Crop calendar": "फसल कैलेंडर",
}


class FakeTranslationServer:
    """Answers /api/translate and /api/translate/languages like the real API."""

    def __init__(self, dictionary=None, languages=None):
        self.dictionary = dict(dictionary or {})
        self.languages = languages
        self.requests: list[dict] = []
        self.fail_from: int | None = None
        self.error_status = 500
        self.error_body: dict = {"error": "Model offline"}
        self.gate = None  # asyncio.Event that holds translate requests

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/languages"):
            if self.languages is None:
                return httpx.Response(404, json={"error": "not found"})
            return httpx.Response(200, json=self.languages)

        body = json.loads(request.content)
        self.requests.append(body)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_from is not None and len(self.requests) > self.fail_from:
            return httpx.Response(self.error_status, json=self.error_body)

        target = body["target_lang"]
        translations = [
            self.dictionary.get(text, f"[{target}] {text}") for text in body["texts"]
        ]
        return httpx.Response(200, json={"translations": translations})

    @property
    def sent_texts(self) -> list[str]:
        return [text for body in self.requests for text in body["texts"]]

    def client(self) -> TranslationClient:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        return TranslationClient(TRANSLATE_URL, LANGUAGES_URL, http=http)


@pytest.fixture
def server():
    return FakeTranslationServer(
        dictionary=HINDI,
        languages={"languages": [
            {"code": "en", "name": "English"},
            {"code": "hi", "name": "Hindi"},
            {"code": "ta", "name": "Tamil"},
        ]},
    )


@pytest.fixture
def preferences():
    return InMemoryPreferenceStore()


@pytest.fixture
def make_translator(server, preferences):
    """Factory: markup → PageTranslator wired to the fake server."""

    def _make(markup: str, **kwargs) -> PageTranslator:
        kwargs.setdefault("debounce", 0.02)
        return PageTranslator(LiveDocument(markup), server.client(), preferences, **kwargs)

    return _make
