"""Template registry and placeholder substitution."""

from pynojs.templates.registry import Template, TemplateRegistry, normalize_template_id
from pynojs.templates.substitution import format_value, substitute

__all__ = ["Template", "TemplateRegistry", "format_value", "normalize_template_id", "substitute"]
