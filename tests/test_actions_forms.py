from __future__ import annotations

import pytest

from pynojs.directives.actions import perform_call
from pynojs.processor import DirectiveProcessor

CALL_PAGE = """
<button id="go" [call]="/api/user" [success]="#user" [error]="#failed" [target]="#out">Load</button>
<div id="out"></div>
<template id="user"><p class="name">{result.name}</p></template>
<template id="failed"><p class="error">{error.status} {error.url}</p></template>
"""

FORM_PAGE = """
<form id="signup" [endpoint]="/signup" [success]="signup" [error]="signupError">
  <input name="email" value="{email}" [validate]="email" [error]="#emailError">
  <input name="password" value="Secret1!">
  <input name="newsletter" type="checkbox" value="yes">
</form>
<template id="emailError"><span class="field-error">{error.error}</span></template>
"""


def _form(make_processor, email: str) -> DirectiveProcessor:
    processor = make_processor(FORM_PAGE.replace("{email}", email))
    processor.process_all()
    return processor


@pytest.mark.asyncio
async def test_call_renders_success_template(make_processor, transport) -> None:
    transport.bodies["/api/user"] = {"name": "Ana"}
    processor = make_processor(CALL_PAGE)
    processor.process_all()

    event = processor.host.dispatch(processor.host.select("#go"), "click")
    await processor.wait_pending()

    assert event.default_prevented is True
    assert processor.host.get_inner_html(processor.host.select("#out")) == '<p class="name">Ana</p>'
    assert transport.calls == [("/api/user", "GET", None)]


@pytest.mark.asyncio
async def test_call_renders_error_template(make_processor, transport) -> None:
    transport.failures["/api/user"] = 503
    processor = make_processor(CALL_PAGE)
    processor.process_all()

    processor.host.dispatch(processor.host.select("#go"), "click")
    await processor.wait_pending()

    assert processor.host.get_text(processor.host.select("#out .error")) == "503 /api/user"


@pytest.mark.asyncio
async def test_each_click_issues_its_own_request(make_processor, transport) -> None:
    transport.bodies["/api/user"] = {"name": "Ana"}
    processor = make_processor(CALL_PAGE)
    processor.process_all()
    processor.process_all()

    button = processor.host.select("#go")
    processor.host.dispatch(button, "click")
    processor.host.dispatch(button, "click")
    await processor.wait_pending()

    assert len(transport.calls) == 2


def test_removed_nodes_are_forgotten_on_next_pass(make_processor) -> None:
    processor = make_processor(CALL_PAGE)
    processor.process_all()
    assert processor.wired == 1

    processor.host.remove(processor.host.select("#go"))
    processor.process_all()

    assert processor.wired == 0


@pytest.mark.asyncio
async def test_call_method_attribute(make_processor, transport) -> None:
    transport.bodies["/api/items/1"] = "deleted"
    processor = make_processor(
        '<button id="rm" [call]="/api/items/1" [method]="DELETE" [success]="#done"></button>'
        '<template id="done"><em>{result}</em></template>'
    )
    processor.process_all()

    processor.host.dispatch(processor.host.select("#rm"), "click")
    await processor.wait_pending()

    assert transport.calls[0][1] == "DELETE"
    # A text payload binds as a scalar, so the bare placeholder renders it.
    assert processor.host.get_text(processor.host.select("#rm")) == "deleted"


@pytest.mark.asyncio
async def test_call_without_error_template_drops_failure(make_processor, transport) -> None:
    processor = make_processor('<button id="b" [call]="/nope"></button>')

    assert await perform_call(processor, processor.host.select("#b"), "/nope") is False
    assert processor.host.get_inner_html(processor.host.select("#b")) == ""


def test_click_without_running_loop_is_skipped(make_processor, transport) -> None:
    processor = make_processor(CALL_PAGE)
    processor.process_all()

    processor.host.dispatch(processor.host.select("#go"), "click")

    assert processor.pending == 0
    assert transport.calls == []


@pytest.mark.asyncio
async def test_invalid_form_blocks_submission_and_reports_inline(make_processor, transport, store) -> None:
    processor = _form(make_processor, "not-an-email")
    form = processor.host.select("#signup")

    event = processor.host.dispatch(form, "submit")
    processor.host.dispatch(form, "submit")
    await processor.wait_pending()

    assert event.default_prevented is True
    errors = processor.host.query_tag(form, "span")
    assert [processor.host.get_text(node) for node in errors] == ["Invalid email"]
    assert transport.calls == []
    assert store.has_state("signup") is False


@pytest.mark.asyncio
async def test_valid_form_posts_fields_and_stores_response(make_processor, transport, store) -> None:
    transport.bodies["/signup"] = {"ok": True}
    processor = _form(make_processor, "user@example.com")

    event = processor.host.dispatch(processor.host.select("#signup"), "submit")
    await processor.wait_pending()

    assert event.default_prevented is True
    assert transport.calls == [("/signup", "post", {"email": "user@example.com", "password": "Secret1!"})]
    assert store.get_state("signup") == {"ok": True}


@pytest.mark.asyncio
async def test_failed_submission_goes_to_error_state(make_processor, transport, store) -> None:
    transport.failures["/signup"] = 422
    processor = _form(make_processor, "user@example.com")

    processor.host.dispatch(processor.host.select("#signup"), "submit")
    await processor.wait_pending()

    assert store.get_state("signupError") == {"message": "HTTP 422 from /signup", "status": 422, "url": "/signup"}
    assert store.has_state("signup") is False


def test_form_without_endpoint_allows_default_submission(make_processor) -> None:
    processor = make_processor('<form id="f"><input name="zip" value="12345" [validate]="postalCode"></form>')
    processor.process_all()

    event = processor.host.dispatch(processor.host.select("#f"), "submit")

    assert event.default_prevented is False


def test_validation_error_into_target(make_processor) -> None:
    processor = make_processor(
        '<form id="f"><input name="zip" value="12" [validate]="postalCode" [error]="#zipError" [target]="#zipOut">'
        '</form><div id="zipOut"></div>'
        '<template id="zipError"><b>{error.error}</b></template>'
    )
    processor.process_all()

    processor.host.dispatch(processor.host.select("#f"), "submit")

    assert processor.host.get_inner_html(processor.host.select("#zipOut")) == "<b>Invalid postalCode</b>"
