"""
Tests for the ``farmmind translate`` command.
"""

import pytest

import farmmind.main as cli
from farmmind.config import Settings
from farmmind.page import LiveDocument


PAGE = """<html lang="en"><body>
<h1>Welcome</h1>
<input placeholder="Search crops">
</body></html>"""


@pytest.fixture
def page(tmp_path, server, monkeypatch):
    path = tmp_path / "index.html"
    path.write_text(PAGE, encoding="utf-8")

    settings = Settings(translate_state_path=str(tmp_path / "state.json"))
    monkeypatch.setattr(cli, "get_settings", lambda: settings)
    monkeypatch.setattr(cli, "TranslationClient", lambda *args, **kwargs: server.client())
    return path


class TestTranslateFile:
    @pytest.mark.asyncio
    async def test_writes_translated_page(self, page, tmp_path):
        out = tmp_path / "index.hi.html"

        assert await cli.translate_file(str(page), "hi", str(out)) == 0

        html = out.read_text(encoding="utf-8")
        assert "स्वागत है" in html
        assert 'placeholder="फसलें खोजें"' in html
        assert 'lang="hi"' in html
        assert (tmp_path / "state.json").exists()

    @pytest.mark.asyncio
    async def test_restore_round_trip(self, page, tmp_path):
        out = tmp_path / "roundtrip.html"

        assert await cli.translate_file(str(page), "ta", str(out), restore=True) == 0
        assert out.read_text(encoding="utf-8") == LiveDocument(PAGE).serialize()

    @pytest.mark.asyncio
    async def test_unsupported_language(self, page):
        assert await cli.translate_file(str(page), "xx") == 1

    @pytest.mark.asyncio
    async def test_api_failure(self, page, server):
        server.fail_from = 0
        assert await cli.translate_file(str(page), "hi") == 1
