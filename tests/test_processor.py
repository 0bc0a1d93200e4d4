from __future__ import annotations

import logging

import pytest

from pynojs import directives
from pynojs.config import EngineConfig
from pynojs.host.soup import SoupHost
from pynojs.processor import DirectiveProcessor
from pynojs.state.store import StateStore


def test_from_markup_registers_templates() -> None:
    processor = DirectiveProcessor.from_markup('<template id="a"><p>A</p></template><template id="b">B</template>')

    assert processor.templates.ids() == ["a", "b"]
    assert processor.transport is None
    assert isinstance(processor.store, StateStore)


def test_template_contents_are_not_processed() -> None:
    store = StateStore({"flag": True})
    processor = DirectiveProcessor.from_markup(
        '<template id="t"><div id="inner" [if]="flag">x</div></template>', store=store
    )

    processor.process_all()

    assert processor.host.select("#inner").get("style") is None


def test_render_template_replaces_content_and_shows() -> None:
    processor = DirectiveProcessor(SoupHost('<div id="x" style="display: none">old</div>'))
    processor.templates.register("greet", "<b>{result.name}</b>")
    target = processor.host.select("#x")

    assert processor.render_template("greet", {"name": "Ana"}, target) is True
    assert processor.host.get_outer_html(target) == '<div id="x" style="display: block"><b>Ana</b></div>'
    assert processor.render_template("missing", {}, target) is False


def test_missing_render_target_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    processor = DirectiveProcessor.from_markup(
        '<div id="src" [template]="#t" [target]="#nowhere">keep</div><template id="t">new</template>'
    )

    with caplog.at_level(logging.WARNING, logger="pynojs.processor"):
        processor.process_all()

    assert "#nowhere" in caplog.text
    assert processor.host.get_text(processor.host.select("#src")) == "keep"


def test_failing_scanner_does_not_abort_the_pass(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken(_processor, _root) -> None:
        raise RuntimeError("scanner exploded")

    monkeypatch.setitem(directives.SCANNERS, "conditionals", broken)
    processor = DirectiveProcessor.from_markup(
        '<div id="x" [template]="#t"></div><template id="t">ok</template>'
    )

    processor.process_all()

    assert processor.host.get_text(processor.host.select("#x")) == "ok"


def test_process_all_limited_to_root() -> None:
    store = StateStore({"items": [1, 2]})
    processor = DirectiveProcessor.from_markup(
        '<div id="a"><p [foreach]="n" [from]="items">{n}</p></div>'
        '<div id="b"><p [foreach]="n" [from]="items">{n}</p></div>',
        store=store,
    )

    processor.process_all(processor.host.select("#a"))

    assert len(processor.host.query_tag(processor.host.select("#a"), "p")) == 3
    assert len(processor.host.query_tag(processor.host.select("#b"), "p")) == 1


@pytest.mark.asyncio
async def test_load_remote_templates_then_render(transport) -> None:
    transport.bodies["/tpl/user.html"] = "<span>{result.name}</span>"
    store = StateStore()
    processor = DirectiveProcessor.from_markup(
        '<template id="user" [src]="/tpl/user.html"></template><div id="x" [template]="#user"></div>',
        store=store,
        transport=transport,
    )

    assert await processor.load_remote_templates() == 1
    processor.process_all()

    # The template directive binds an empty result, so the placeholder stays.
    assert processor.host.get_inner_html(processor.host.select("#x")) == "<span>{result.name}</span>"


@pytest.mark.asyncio
async def test_network_directives_without_transport_are_skipped() -> None:
    processor = DirectiveProcessor.from_markup('<template id="r" [src]="/r.html"></template>')

    assert await processor.load_remote_templates() == 0
    assert await processor.load_translations("/es.json", "es") is False


@pytest.mark.asyncio
async def test_failed_continuation_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    processor = DirectiveProcessor.from_markup("<p></p>")

    async def explode() -> None:
        raise RuntimeError("late failure")

    with caplog.at_level(logging.WARNING, logger="pynojs.processor"):
        processor.spawn(explode())
        await processor.wait_pending()

    assert processor.pending == 0
    assert "late failure" in caplog.text


def test_namespace_feeds_switch_values() -> None:
    processor = DirectiveProcessor.from_markup(
        '<div [switch]="site.mode"><p id="a" [case]="beta">B</p><p id="b" [default]>D</p></div>',
        config=EngineConfig(namespace={"site": {"mode": "beta"}}),
    )

    processor.process_all()

    assert processor.host.get_style(processor.host.select("#a"))["display"] == "block"
    assert processor.host.get_style(processor.host.select("#b"))["display"] == "none"
