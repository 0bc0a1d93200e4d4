"""Internal constants shared across the library."""

USER_AGENT = "pynojs/1"

# ------------------------------------------------------------------
# Pipeline
# ------------------------------------------------------------------

#: Scanner names in the order ``DirectiveProcessor.process_all`` runs them.
#: Later scanners see content inserted or hidden by earlier ones.
DEFAULT_PIPELINE: tuple[str, ...] = (
    "conditionals",
    "loops",
    "templates",
    "classes",
    "styles",
    "switches",
    "calls",
    "events",
    "custom",
    "animations",
    "forms",
    "translations",
    "translation_files",
    "bindings",
)

# ------------------------------------------------------------------
# Directive markers
# ------------------------------------------------------------------

IF = "if"
THEN = "then"
ELSE = "else"
ELSEIF = "elseif"
FOREACH = "foreach"
FROM = "from"
INDEX = "index"
TEMPLATE = "template"
CLASS = "class"
STYLES = "styles"
SWITCH = "switch"
CASE = "case"
DEFAULT = "default"
CALL = "call"
SUCCESS = "success"
ERROR = "error"
ENDPOINT = "endpoint"
METHOD = "method"
TARGET = "target"
BIND = "bind"
VALIDATE = "validate"
FORMAT = "format"
TRANSLATE = "translate"
TRANSLATIONS = "translations"
LANG = "lang"
ANIMATE = "animate"
DURATION = "duration"
TIMING = "timing"
SET = "set"
SRC = "src"

LOOP_MARKERS: tuple[str, ...] = (FOREACH, FROM, ELSE, INDEX)

#: Events wired by the event-handler scanner.
HANDLER_EVENTS: tuple[str, ...] = ("click", "change", "keyup", "mouseover", "mouseout", "focus", "blur")


def marker(name: str) -> str:
    """Return the attribute name used in markup for directive *name*."""
    return f"[{name}]"


# ------------------------------------------------------------------
# Rendering defaults
# ------------------------------------------------------------------

DEFAULT_VARIABLE_NAME = "result"
DEFAULT_ERROR_VARIABLE_NAME = "error"
DISPLAY_SHOWN = "block"
DISPLAY_HIDDEN = "none"
DEFAULT_ANIMATION_DURATION = "1s"
DEFAULT_ANIMATION_TIMING = "ease"
DEFAULT_FORM_METHOD = "post"
