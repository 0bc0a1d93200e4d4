"""Translation directives.

``[translate.<lang>]`` elements are translated into the configured
language. Generic ``[translate]`` elements use the language of the
closest ancestor-or-self carrying ``[lang]`` (or a plain HTML ``lang``
attribute). ``[translations]`` elements load a JSON table for their
``[lang]`` and re-apply translations once it arrives.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pynojs._constants import LANG, TRANSLATE, TRANSLATIONS, marker
from pynojs.directives.translations import normalize_language
from pynojs.host.base import Node

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

_logger = logging.getLogger(__name__)


def _inherited_language(processor: DirectiveProcessor, node: Node) -> str | None:
    host = processor.host
    holder = host.closest(node, marker(LANG))
    if holder is not None:
        return host.get_attribute(holder, marker(LANG))
    holder = host.closest(node, LANG)
    if holder is not None:
        return host.get_attribute(holder, LANG)
    return None


def _apply(processor: DirectiveProcessor, node: Node, lang: str | None, key: str | None) -> None:
    if not lang or not key:
        return
    text = processor.get_translation(lang, key)
    if text is None:
        _logger.debug("No %s translation for %r", lang, key)
        return
    processor.host.set_text(node, text)


def scan_translations(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    lang = normalize_language(processor.config.language)

    specific = marker(f"{TRANSLATE}.{lang}")
    for node in host.query(root, specific):
        _apply(processor, node, lang, host.get_attribute(node, specific))

    for node in host.query(root, marker(TRANSLATE)):
        _apply(processor, node, _inherited_language(processor, node), host.get_attribute(node, marker(TRANSLATE)))


def scan_translation_files(processor: DirectiveProcessor, root: Node | None) -> None:
    host = processor.host
    for node in host.query(root, marker(TRANSLATIONS)):
        url = host.get_attribute(node, marker(TRANSLATIONS))
        lang = host.get_attribute(node, marker(LANG)) or host.get_attribute(node, LANG)
        if url and lang:
            processor.spawn(processor.load_translations(url, lang, root=root))
