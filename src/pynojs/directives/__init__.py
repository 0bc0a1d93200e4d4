"""Directive scanners.

Each scanner handles one directive family and has the signature
``scanner(processor, root) -> None``. ``SCANNERS`` maps the names used in
``EngineConfig.pipeline`` to their implementation.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from pynojs.directives.actions import scan_calls, scan_custom_directives, scan_event_handlers
from pynojs.directives.bindings import scan_bindings
from pynojs.directives.conditionals import scan_conditionals
from pynojs.directives.forms import scan_forms
from pynojs.directives.i18n import scan_translation_files, scan_translations
from pynojs.directives.loops import scan_loops
from pynojs.directives.presentation import scan_animations, scan_classes, scan_styles
from pynojs.directives.switches import scan_switches
from pynojs.directives.templating import scan_templates

if TYPE_CHECKING:
    from pynojs.processor import DirectiveProcessor

Scanner = Callable[["DirectiveProcessor", Any], None]

SCANNERS: dict[str, Scanner] = {
    "conditionals": scan_conditionals,
    "loops": scan_loops,
    "templates": scan_templates,
    "classes": scan_classes,
    "styles": scan_styles,
    "switches": scan_switches,
    "calls": scan_calls,
    "events": scan_event_handlers,
    "custom": scan_custom_directives,
    "animations": scan_animations,
    "forms": scan_forms,
    "translations": scan_translations,
    "translation_files": scan_translation_files,
    "bindings": scan_bindings,
}

__all__ = ["SCANNERS", "Scanner"]
