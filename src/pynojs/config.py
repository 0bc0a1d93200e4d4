"""Engine configuration for pynojs."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Mapping
from typing import Any

from pynojs._constants import DEFAULT_PIPELINE
from pynojs.exceptions import NoJsConfigError


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_pipeline(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(",") if part.strip())


@dataclasses.dataclass(frozen=True)
class EngineConfig:
    """Engine configuration.

    Parameters
    ----------
    language : str
        Active language used by ``[translate.<lang>]`` directives
        (e.g. ``"en"`` or ``"pt-br"``).
    base_url : str
        Prefix joined to relative URLs before they reach the transport.
        Empty means URLs are used as written.
    request_timeout : float
        Total timeout in seconds for each network request.
    autoescape : bool
        HTML-escape values substituted into templates.
    parser : str
        BeautifulSoup tree builder used by :class:`SoupHost`.
    pipeline : tuple[str, ...]
        Scanner names in execution order. Defaults to the full pipeline.
    namespace : Mapping[str, Any]
        Explicit fallback names for expressions that are not present in
        the state store. Empty by default; nothing ambient is consulted.
    """

    language: str = "en"
    base_url: str = ""
    request_timeout: float = 10.0
    autoescape: bool = True
    parser: str = "html.parser"
    pipeline: tuple[str, ...] = DEFAULT_PIPELINE
    namespace: Mapping[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        unknown = [name for name in self.pipeline if name not in DEFAULT_PIPELINE]
        if unknown:
            raise NoJsConfigError(f"Unknown scanner(s) in pipeline: {', '.join(unknown)}")
        if self.request_timeout <= 0:
            raise NoJsConfigError(f"request_timeout must be positive, got {self.request_timeout}")

    def resolve_url(self, url: str) -> str:
        """Join *url* onto ``base_url`` unless it is already absolute."""
        if not self.base_url or "://" in url:
            return url
        return f"{self.base_url.rstrip('/')}/{url.lstrip('/')}"

    @classmethod
    def from_env(cls, **overrides: Any) -> EngineConfig:
        """Create configuration from environment variables.

        Reads optional ``NOJS_*`` variables. Explicit keyword arguments
        override environment values.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        EngineConfig
            Populated configuration.
        """
        env = os.environ

        _ENV_CONFIG_MAP = {
            "NOJS_LANGUAGE": "language",
            "NOJS_BASE_URL": "base_url",
            "NOJS_PARSER": "parser",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        timeout_env = env.get("NOJS_REQUEST_TIMEOUT")
        if timeout_env is not None and "request_timeout" not in overrides:
            try:
                config_kwargs["request_timeout"] = float(timeout_env)
            except ValueError as exc:
                raise NoJsConfigError(f"NOJS_REQUEST_TIMEOUT is not a number: {timeout_env!r}") from exc

        if "autoescape" not in overrides:
            config_kwargs["autoescape"] = _env_bool(env.get("NOJS_AUTOESCAPE"), True)

        pipeline_env = env.get("NOJS_PIPELINE")
        if pipeline_env is not None and "pipeline" not in overrides:
            config_kwargs["pipeline"] = _env_pipeline(pipeline_env)

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
