"""
Tests for the translation API endpoints.
"""

import pytest
from fastapi.testclient import TestClient

from farmmind.api.app import app, get_translator
from farmmind.config import Settings, get_settings
from farmmind.i18n import TranslationServiceError


class FakeTranslator:
    """Stands in for the LM-backed Translator."""

    def __init__(self, error: Exception | None = None):
        self.error = error
        self.calls: list[tuple[list[str], str, str]] = []

    async def translate_batch(self, texts, target, source=None):
        self.calls.append((texts, target, source))
        if self.error is not None:
            raise self.error
        return [f"{target}:{t}" if t else t for t in texts]


@pytest.fixture
def translator():
    return FakeTranslator()


@pytest.fixture
def client(translator):
    app.dependency_overrides[get_translator] = lambda: translator
    app.dependency_overrides[get_settings] = lambda: Settings(
        translate_max_texts=3, translate_max_chars=10
    )
    yield TestClient(app)
    app.dependency_overrides.clear()


# =============================================================================
# POST /api/translate
# =============================================================================


class TestTranslate:
    def test_translates_in_order(self, client, translator):
        response = client.post("/api/translate", json={
            "texts": ["Welcome", "Search crops"],
            "source_lang": "en",
            "target_lang": "ta",
        })

        assert response.status_code == 200
        assert response.json() == {"translations": ["ta:Welcome", "ta:Search crops"]}
        assert translator.calls == [(["Welcome", "Search crops"], "ta", "en")]

    def test_language_defaults(self, client, translator):
        client.post("/api/translate", json={"texts": ["Rain"]})
        assert translator.calls[0][1:] == ("hi", "en")

    @pytest.mark.parametrize("body", [{}, {"texts": "Rain"}, {"texts": {"a": 1}}, {"texts": None}])
    def test_texts_must_be_list(self, client, body):
        response = client.post("/api/translate", json=body)

        assert response.status_code == 400
        assert response.json() == {"error": "texts must be an array"}

    def test_too_many_texts(self, client, translator):
        response = client.post("/api/translate", json={"texts": ["a", "b", "c", "d"]})

        assert response.status_code == 400
        assert response.json() == {"error": "Too many texts. Max 3."}
        assert translator.calls == []

    def test_inputs_normalized(self, client, translator):
        response = client.post("/api/translate", json={"texts": ["Irrigation schedule", 42, None]})

        assert response.status_code == 200
        # cut to translate_max_chars, non-strings blanked
        assert translator.calls[0][0] == ["Irrigation", "", ""]
        assert response.json()["translations"] == ["hi:Irrigation", "", ""]

    def test_empty_list(self, client):
        response = client.post("/api/translate", json={"texts": []})
        assert response.json() == {"translations": []}

    def test_model_failure(self, client, translator):
        translator.error = TranslationServiceError("Model offline")

        response = client.post("/api/translate", json={"texts": ["Rain"]})

        assert response.status_code == 500
        assert response.json() == {"error": "Model offline"}


# =============================================================================
# GET endpoints
# =============================================================================


class TestLanguagesAndHealth:
    def test_languages(self, client):
        response = client.get("/api/translate/languages")

        languages = response.json()["languages"]
        assert languages[0] == {"code": "en", "name": "English"}
        assert {"code": "ur", "name": "Urdu"} in languages
        assert len(languages) == 10

    def test_health(self, client):
        assert client.get("/health").json() == {"status": "ok"}


# =============================================================================
# Error tracking
# =============================================================================


class TestSentry:
    def test_quiet_transactions_dropped(self):
        from farmmind.integrations.sentry import _filter_transactions

        assert _filter_transactions({"transaction": "/health"}, {}) is None
        assert _filter_transactions({"transaction": "/api/translate/languages"}, {}) is None
        assert _filter_transactions({"transaction": "/api/translate"}, {}) is not None

    def test_failure_only_logged_without_dsn(self, caplog):
        from farmmind.integrations.sentry import report_translation_failure

        with caplog.at_level("ERROR"):
            assert report_translation_failure(RuntimeError("Model offline"), "hi", 3) is None
        assert "Translation to 'hi' failed for 3 texts" in caplog.text
