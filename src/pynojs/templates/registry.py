"""Named template registry."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup
from pydantic import BaseModel, ConfigDict, field_validator

from pynojs._constants import DEFAULT_VARIABLE_NAME, SET, SRC, marker
from pynojs.exceptions import NoJsTransportError, TemplateError, TemplateNotFoundError
from pynojs.templates.substitution import substitute

if TYPE_CHECKING:
    from pynojs._transport import Transport
    from pynojs.host.base import HostTree

_logger = logging.getLogger(__name__)


def normalize_template_id(template_id: str) -> str:
    """Strip whitespace and a leading ``#`` selector marker."""
    return template_id.strip().removeprefix("#")


class Template(BaseModel):
    """A named markup fragment with one bound variable name."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    content: str
    variable_name: str = DEFAULT_VARIABLE_NAME
    source: str | None = None

    @field_validator("id")
    @classmethod
    def _normalize_id(cls, value: str) -> str:
        template_id = normalize_template_id(value)
        if not template_id:
            raise ValueError("template id must be non-empty")
        return template_id

    @field_validator("variable_name", mode="before")
    @classmethod
    def _default_variable(cls, value: Any) -> Any:
        if value is None or (isinstance(value, str) and not value.strip()):
            return DEFAULT_VARIABLE_NAME
        return value.strip() if isinstance(value, str) else value


class TemplateRegistry:
    """In-memory ``id -> Template`` map.

    Registration is idempotent on id: the last registration wins. Remote
    loads go through :meth:`register` as well, so a remote load racing an
    initial document scan always leaves a valid entry behind.
    """

    def __init__(self, *, autoescape: bool = True) -> None:
        self._templates: dict[str, Template] = {}
        self._autoescape = autoescape

    def __contains__(self, template_id: object) -> bool:
        return isinstance(template_id, str) and normalize_template_id(template_id) in self._templates

    def __len__(self) -> int:
        return len(self._templates)

    def __iter__(self) -> Iterator[Template]:
        return iter(list(self._templates.values()))

    def ids(self) -> list[str]:
        return list(self._templates)

    def register(
        self,
        template_id: str,
        content: str,
        variable_name: str | None = None,
        *,
        source: str | None = None,
    ) -> Template:
        """Register (or replace) a template."""
        try:
            template = Template(id=template_id, content=content, variable_name=variable_name, source=source)
        except ValueError as exc:
            raise TemplateError(f"Invalid template {template_id!r}: {exc}") from exc
        self._templates[template.id] = template
        _logger.debug("Registered template %s (variable=%s)", template.id, template.variable_name)
        return template

    def get(self, template_id: str | None) -> Template | None:
        """Return the template, or ``None`` when it is not registered."""
        if not template_id:
            return None
        return self._templates.get(normalize_template_id(template_id))

    def require(self, template_id: str) -> Template:
        template = self.get(template_id)
        if template is None:
            raise TemplateNotFoundError(f"Template {template_id!r} is not registered")
        return template

    def render(
        self,
        template_id: str | None,
        result: Any,
        *,
        default_variable: str | None = None,
    ) -> str | None:
        """Render *template_id* with *result* bound under its variable name.

        ``default_variable`` replaces ``"result"`` for templates that did not
        declare their own variable name (error templates bind ``error``).
        Returns ``None`` when the template is unknown.
        """
        try:
            template = self.require(template_id or "")
        except TemplateNotFoundError:
            _logger.warning("Template %r is not registered; nothing rendered", template_id)
            return None
        variable = template.variable_name
        if default_variable and variable == DEFAULT_VARIABLE_NAME:
            variable = default_variable
        return substitute(template.content, {variable: result}, autoescape=self._autoescape)

    def collect(self, host: HostTree, root: Any = None) -> list[str]:
        """Register every ``<template id=...>`` element under *root*.

        Returns the ids of templates that declare a remote ``[src]``.
        """
        remote: list[str] = []
        for node in host.query_tag(root, "template"):
            template_id = host.get_attribute(node, "id")
            if not template_id:
                continue
            source = host.get_attribute(node, marker(SRC))
            self.register(
                template_id,
                host.get_inner_html(node),
                host.get_attribute(node, marker(SET)),
                source=source,
            )
            if source:
                remote.append(template_id)
        return remote

    def merge_markup(self, markup: str, *, parser: str = "html.parser") -> list[str]:
        """Register every ``<template>`` found in *markup*; return their ids."""
        soup = BeautifulSoup(markup, parser)
        registered: list[str] = []
        for node in soup.find_all("template"):
            template_id = node.get("id")
            if not template_id:
                continue
            self.register(str(template_id), node.decode_contents(), _attr_text(node.get(marker(SET))))
            registered.append(normalize_template_id(str(template_id)))
        return registered

    async def load_remote(
        self,
        transport: Transport,
        template_id: str,
        url: str,
        *,
        parser: str = "html.parser",
    ) -> bool:
        """Fetch *url*, use its body as the content of *template_id* and
        merge nested templates.

        Failures are logged and leave the registry untouched.
        """
        try:
            response = await transport.request(url)
        except NoJsTransportError as exc:
            _logger.warning("Could not load template %s from %s: %s", template_id, url, exc)
            return False

        soup = BeautifulSoup(response.text, parser)
        body = soup.body if soup.body is not None else soup
        existing = self.get(template_id)
        self.register(
            template_id,
            body.decode_contents(),
            existing.variable_name if existing else None,
            source=url,
        )
        nested = self.merge_markup(response.text, parser=parser)
        _logger.debug("Loaded template %s from %s (%d nested)", template_id, url, len(nested))
        return True


def _attr_text(value: Any) -> str | None:
    if value is None:
        return None
    if isinstance(value, list):
        return " ".join(value)
    return str(value)
