"""pynojs - declarative HTML directives driven by an observable state store."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("pynojs")
except PackageNotFoundError:
    __version__ = "0+local"
from pynojs._transport import HttpTransport, Transport, TransportResponse
from pynojs.config import EngineConfig
from pynojs.directives.validation import ValidationKind, validate
from pynojs.exceptions import (
    DirectiveError,
    DirectiveParseError,
    ExpressionError,
    ExpressionSyntaxError,
    NoJsConfigError,
    NoJsError,
    NoJsTransportError,
    TemplateError,
    TemplateNotFoundError,
)
from pynojs.expressions import ExpressionEvaluator
from pynojs.host import DomEvent, HostTree, SoupHost
from pynojs.processor import DirectiveProcessor
from pynojs.state import StateStore, Subscription
from pynojs.templates import Template, TemplateRegistry

__all__ = [
    "__version__",
    "DirectiveError",
    "DirectiveParseError",
    "DirectiveProcessor",
    "DomEvent",
    "EngineConfig",
    "ExpressionError",
    "ExpressionEvaluator",
    "ExpressionSyntaxError",
    "HostTree",
    "HttpTransport",
    "NoJsConfigError",
    "NoJsError",
    "NoJsTransportError",
    "SoupHost",
    "StateStore",
    "Subscription",
    "Template",
    "TemplateError",
    "TemplateNotFoundError",
    "TemplateRegistry",
    "Transport",
    "TransportResponse",
    "ValidationKind",
    "validate",
]
