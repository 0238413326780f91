"""
Tests for re-translating content added after a language was applied.
"""

import asyncio

import pytest


PAGE = """<html><body>
<h1>Welcome</h1>
<section id="feed"></section>
</body></html>"""


async def wait_for_requests(server, count: int) -> None:
    while len(server.requests) < count:
        await asyncio.sleep(0.001)


class TestMutationWatcher:
    @pytest.mark.asyncio
    async def test_new_content_translated(self, make_translator, server):
        t = make_translator(PAGE)
        await t.start()
        await t.apply_language("hi")

        feed = t.document.get_element_by_id("feed")
        t.document.append(feed, "<p>Soil moisture</p>")
        assert t.watcher.pending

        await t.watcher.wait_idle()

        assert feed.p.get_text() == "मिट्टी की नमी"
        assert server.requests[-1]["texts"] == ["Soil moisture"]
        t.stop()

    @pytest.mark.asyncio
    async def test_nothing_scheduled_in_default_language(self, make_translator, server):
        t = make_translator(PAGE)
        await t.start()

        t.document.append(t.document.get_element_by_id("feed"), "<p>Crop calendar</p>")

        assert not t.watcher.pending
        assert server.requests == []
        t.stop()

    @pytest.mark.asyncio
    async def test_own_writes_do_not_trigger(self, make_translator, server):
        t = make_translator(PAGE.replace("<h1>", '<button class="lang-switch">Lang</button><h1>'))
        await t.start()

        await t.apply_language("hi")
        assert not t.watcher.pending

        await t.restore_original()
        await t.apply_language("hi")
        assert not t.watcher.pending
        assert len(server.requests) == 1
        t.stop()

    @pytest.mark.asyncio
    async def test_bursts_are_debounced(self, make_translator, server):
        t = make_translator(PAGE)
        await t.start()
        await t.apply_language("hi")

        feed = t.document.get_element_by_id("feed")
        for text in ("Rain", "Wind", "Hail"):
            t.document.append(feed, f"<p>{text}</p>")
        await t.watcher.wait_idle()

        assert len(server.requests) == 2
        assert server.requests[1]["texts"] == ["Rain", "Wind", "Hail"]
        t.stop()

    @pytest.mark.asyncio
    async def test_changes_during_apply_are_rescheduled(self, make_translator, server):
        t = make_translator(PAGE)
        await t.start()
        await t.apply_language("hi")
        feed = t.document.get_element_by_id("feed")

        server.gate = asyncio.Event()
        t.document.append(feed, "<p>Rain</p>")
        await wait_for_requests(server, 2)
        assert t.is_translating

        t.document.append(feed, "<p>Wind</p>")
        await asyncio.sleep(0.1)
        assert len(server.requests) == 2
        assert t.watcher.pending

        server.gate.set()
        await t.watcher.wait_idle()

        assert [body["texts"] for body in server.requests[1:]] == [["Rain"], ["Wind"]]
        assert [p.get_text() for p in feed.find_all("p")] == ["[hi] Rain", "[hi] Wind"]
        t.stop()

    @pytest.mark.asyncio
    async def test_stop_disconnects(self, make_translator, server):
        t = make_translator(PAGE)
        await t.start()
        await t.apply_language("hi")
        t.stop()

        t.document.append(t.document.get_element_by_id("feed"), "<p>Rain</p>")

        assert not t.watcher.active
        assert not t.watcher.pending
