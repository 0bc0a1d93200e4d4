"""Translation tables keyed by language.

Language tags are case-insensitive (``pt-BR`` and ``pt-br`` name the same
table), matching how HTML attribute names are normalized.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import TYPE_CHECKING, Any

from pynojs.exceptions import NoJsTransportError

if TYPE_CHECKING:
    from pynojs._transport import Transport

_logger = logging.getLogger(__name__)


def normalize_language(lang: str) -> str:
    return lang.strip().lower()


class TranslationCatalog:
    def __init__(self) -> None:
        self._tables: dict[str, dict[str, str]] = {}

    def __contains__(self, lang: object) -> bool:
        return isinstance(lang, str) and normalize_language(lang) in self._tables

    def set_translations(self, lang: str, table: Mapping[str, Any]) -> None:
        """Replace the table for *lang*."""
        self._tables[normalize_language(lang)] = {str(key): str(value) for key, value in table.items()}

    def get_translation(self, lang: str | None, key: str) -> str | None:
        if not lang:
            return None
        return self._tables.get(normalize_language(lang), {}).get(key)

    async def load(self, transport: Transport, url: str, lang: str) -> bool:
        """Fetch a JSON table from *url* and install it for *lang*.

        Failures are logged; the existing table is left as is.
        """
        try:
            response = await transport.request(url)
            table = response.json()
        except NoJsTransportError as exc:
            _logger.warning("Error loading translations for %s from %s: %s", lang, url, exc)
            return False
        if not isinstance(table, dict):
            _logger.warning("Translations from %s are not a JSON object; ignored", url)
            return False
        self.set_translations(lang, table)
        _logger.debug("Loaded %d translations for %s from %s", len(table), lang, url)
        return True
