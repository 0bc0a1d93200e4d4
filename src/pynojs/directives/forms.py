"""Form validation and submission.

On ``submit`` every field carrying ``[validate]`` is checked. Invalid
fields render their ``[error]`` template (into ``[target]`` when given,
otherwise right after the field) and the submission is prevented. A valid
form with an ``[endpoint]`` is submitted through the transport; the parsed
response is stored under the form's ``[success]`` state key and failures
under its ``[error]`` state key.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pynojs._constants import (
    DEFAULT_ERROR_VARIABLE_NAME,
    DEFAULT_FORM_METHOD,
    ENDPOINT,
    ERROR,
    FORMAT,
    METHOD,
    SUCCESS,
    TARGET,
    VALIDATE,
    marker,
)
from pynojs._redact import redact_for_log
from pynojs.directives.actions import error_payload
from pynojs.directives.validation import validate
from pynojs.exceptions import NoJsTransportError
from pynojs.host.base import DomEvent, Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


class FormController:
    """Submit handling for one form."""

    def __init__(self, processor: DirectiveProcessor, form: Node) -> None:
        self.processor = processor
        self.form = form
        # Error output inserted after fields, removed on the next submit.
        self._inline_errors: list[Node] = []

    def _clear_inline_errors(self) -> None:
        for node in self._inline_errors:
            self.processor.host.remove(node)
        self._inline_errors.clear()

    def _report(self, field: Node, kind: str) -> None:
        host = self.processor.host
        error_id = host.get_attribute(field, marker(ERROR))
        if not error_id:
            return
        result = {"error": f"Invalid {kind}"}
        if host.has_attribute(field, marker(TARGET)):
            self.processor.render_into(error_id, result, field, default_variable=DEFAULT_ERROR_VARIABLE_NAME)
            return
        rendered = self.processor.templates.render(error_id, result, default_variable=DEFAULT_ERROR_VARIABLE_NAME)
        if rendered is None:
            return
        anchor = field
        for part in host.parse(rendered):
            host.insert_after(part, anchor)
            self._inline_errors.append(part)
            anchor = part

    def validate_fields(self) -> bool:
        """Validate every marked field; report failures. Returns overall validity."""
        host = self.processor.host
        self._clear_inline_errors()
        valid = True
        for field in host.query(self.form, marker(VALIDATE)):
            kind = host.get_attribute(field, marker(VALIDATE)) or ""
            fmt = host.get_attribute(field, marker(FORMAT))
            if not validate(kind, host.get_value(field), fmt):
                _logger.debug("Field %s failed %s validation", host.get_attribute(field, "name"), kind)
                valid = False
                self._report(field, kind)
        return valid

    def on_submit(self, event: DomEvent) -> None:
        if not self.validate_fields():
            event.prevent_default()
            return
        endpoint = self.processor.host.get_attribute(self.form, marker(ENDPOINT))
        if endpoint:
            event.prevent_default()
            self.processor.spawn(self.submit(endpoint))

    async def submit(self, endpoint: str) -> bool:
        """Send the form fields to *endpoint* and record the outcome in state."""
        host = self.processor.host
        store = self.processor.store
        method = host.get_attribute(self.form, marker(METHOD)) or DEFAULT_FORM_METHOD
        success_key = host.get_attribute(self.form, marker(SUCCESS))
        error_key = host.get_attribute(self.form, marker(ERROR))
        fields = host.form_fields(self.form)

        transport = self.processor.transport
        if transport is None:
            _logger.warning("No transport configured; form submission to %s skipped", endpoint)
            return False

        _logger.debug("Submitting form to %s: %s", endpoint, redact_for_log(fields))
        try:
            response = await transport.request(endpoint, method=method, data=fields)
        except NoJsTransportError as exc:
            if error_key:
                store.set_state(error_key, error_payload(exc))
            else:
                _logger.debug("Form submission to %s failed with no [error] key: %s", endpoint, exc)
            return False
        if success_key:
            store.set_state(success_key, response.payload())
        return True


def scan_forms(processor: DirectiveProcessor, root: Node | None) -> None:
    for form in processor.host.query_tag(root, "form"):
        controller = FormController(processor, form)
        processor.wire_once(form, "submit", controller.on_submit)
