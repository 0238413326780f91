"""
Tests for the translation client, cache and batcher.
"""

import httpx
import pytest

from farmmind.page.batcher import TranslationBatcher, TranslationCache, chunked
from farmmind.page.client import TranslationClient, TranslationError

from tests.conftest import LANGUAGES_URL, TRANSLATE_URL, FakeTranslationServer


class Key:
    """Minimal item: the batcher only looks at ``key``."""

    def __init__(self, key):
        self.key = key


def items(*texts):
    return [Key(t) for t in texts]


def client_for(handler) -> TranslationClient:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return TranslationClient(TRANSLATE_URL, LANGUAGES_URL, http=http)


# =============================================================================
# chunked
# =============================================================================


class TestChunked:
    def test_sizes(self):
        assert [len(c) for c in chunked(list(range(45)), 30)] == [30, 15]

    def test_exact_multiple_and_empty(self):
        assert [len(c) for c in chunked(list(range(60)), 30)] == [30, 30]
        assert chunked([], 30) == []


# =============================================================================
# TranslationCache
# =============================================================================


class TestTranslationCache:
    def test_languages_are_isolated(self):
        cache = TranslationCache()
        cache.for_language("hi")["Rain"] = "बारिश"

        assert cache.missing("hi", ["Rain", "Wind"]) == ["Wind"]
        assert cache.missing("ta", ["Rain"]) == ["Rain"]

    def test_lookup_falls_back_to_key(self):
        cache = TranslationCache()
        cache.for_language("hi")["Empty"] = ""

        assert cache.lookup("hi", "Missing") == "Missing"
        assert cache.lookup("hi", "Empty") == "Empty"


# =============================================================================
# TranslationBatcher
# =============================================================================


class TestTranslationBatcher:
    @pytest.mark.asyncio
    async def test_45_strings_make_two_batches(self):
        server = FakeTranslationServer()
        batcher = TranslationBatcher(server.client())

        texts = [f"Field note {i}" for i in range(45)]
        cache = await batcher.resolve(items(*texts), "hi")

        assert [len(body["texts"]) for body in server.requests] == [30, 15]
        assert batcher.requests_sent == 2
        assert cache["Field note 44"] == "[hi] Field note 44"

    @pytest.mark.asyncio
    async def test_request_shape(self):
        server = FakeTranslationServer()
        await TranslationBatcher(server.client()).resolve(items("Rain"), "ta")

        assert server.requests == [{"texts": ["Rain"], "source_lang": "en", "target_lang": "ta"}]

    @pytest.mark.asyncio
    async def test_deduplicates_and_skips_cached(self):
        server = FakeTranslationServer()
        batcher = TranslationBatcher(server.client())

        await batcher.resolve(items("Rain", "Wind", "Rain"), "hi")
        assert server.sent_texts == ["Rain", "Wind"]

        await batcher.resolve(items("Rain", "Wind", "Hail"), "hi")
        assert server.sent_texts == ["Rain", "Wind", "Hail"]

        await batcher.resolve(items("Rain", "Wind", "Hail"), "hi")
        assert len(server.requests) == 2

    @pytest.mark.asyncio
    async def test_failed_batch_keeps_earlier_batches(self):
        server = FakeTranslationServer()
        server.fail_from = 1
        batcher = TranslationBatcher(server.client(), batch_size=2)

        with pytest.raises(TranslationError) as exc:
            await batcher.resolve(items("A1", "A2", "B1", "B2", "C1"), "hi")

        assert exc.value.message == "Model offline"
        assert len(server.requests) == 2  # third batch never sent
        assert batcher.cache.missing("hi", ["A1", "A2", "B1", "B2", "C1"]) == ["B1", "B2", "C1"]

        server.fail_from = None
        await batcher.resolve(items("A1", "A2", "B1", "B2", "C1"), "hi")
        assert server.requests[-2]["texts"] == ["B1", "B2"]
        assert server.requests[-1]["texts"] == ["C1"]

    def test_rejects_bad_batch_size(self):
        with pytest.raises(ValueError):
            TranslationBatcher(FakeTranslationServer().client(), batch_size=0)


# =============================================================================
# TranslationClient
# =============================================================================


class TestTranslationClient:
    @pytest.mark.asyncio
    async def test_error_message_from_server(self):
        client = client_for(lambda r: httpx.Response(400, json={"error": "Too many texts. Max 60."}))

        with pytest.raises(TranslationError, match="Too many texts"):
            await client.translate(["Rain"], "en", "hi")

    @pytest.mark.asyncio
    async def test_generic_message_without_error_field(self):
        client = client_for(lambda r: httpx.Response(502, text="<html>Bad gateway</html>"))

        with pytest.raises(TranslationError, match="Translation failed"):
            await client.translate(["Rain"], "en", "hi")

    @pytest.mark.asyncio
    async def test_malformed_body(self):
        client = client_for(lambda r: httpx.Response(200, json={"result": ["x"]}))

        with pytest.raises(TranslationError, match="Invalid translation response"):
            await client.translate(["Rain"], "en", "hi")

    @pytest.mark.asyncio
    async def test_length_mismatch(self):
        client = client_for(lambda r: httpx.Response(200, json={"translations": ["a", "b"]}))

        with pytest.raises(TranslationError, match="Expected 1 translations, got 2"):
            await client.translate(["Rain"], "en", "hi")

    @pytest.mark.asyncio
    async def test_non_string_entries_become_empty(self):
        client = client_for(lambda r: httpx.Response(200, json={"translations": [None, 3, "बारिश"]}))

        result = await client.translate(["Rain", "Wind", "Hail"], "en", "hi")

        assert result == ["", "", "बारिश"]

    @pytest.mark.asyncio
    async def test_network_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(TranslationError, match="connection refused"):
            await client_for(handler).translate(["Rain"], "en", "hi")

    @pytest.mark.asyncio
    async def test_language_shapes(self):
        wrapped = client_for(lambda r: httpx.Response(200, json={"languages": [{"code": "hi", "name": "Hindi"}]}))
        bare = client_for(lambda r: httpx.Response(200, json=[{"code": "ta", "label": "Tamil"}]))
        other = client_for(lambda r: httpx.Response(200, json={"items": []}))

        assert await wrapped.fetch_languages() == [{"code": "hi", "name": "Hindi"}]
        assert await bare.fetch_languages() == [{"code": "ta", "label": "Tamil"}]
        assert await other.fetch_languages() == []
