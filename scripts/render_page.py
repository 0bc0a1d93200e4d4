#!/usr/bin/env python3
"""Render an HTML page through the pynojs directive pipeline.

Loads the page, seeds the state store from a JSON file, runs every
scanner once and prints the resulting markup. Remote templates,
translation files and other network continuations are awaited before
output when ``--fetch`` is given.

Usage
-----
::

    python scripts/render_page.py page.html --state state.json
    python scripts/render_page.py page.html --state state.json --fetch --base-url https://example.com

Options::

    --state FILE         JSON object used as the initial state
    --lang LANG          Active language for [translate.<lang>]
    --fetch              Load remote templates and await network directives
    --base-url URL       Prefix for relative URLs
    --output FILE        Write output to FILE instead of stdout
    --dump-state FILE    Write the final state store contents as JSON
    --verbose, -v        Enable debug logging

Environment variables ``NOJS_*`` are honoured through
``EngineConfig.from_env``; command-line options take precedence.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pynojs import DirectiveProcessor, EngineConfig, HttpTransport, StateStore  # noqa: E402


def _load_state(path: str | None) -> dict[str, Any]:
    if not path:
        return {}
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise SystemExit(f"State file {path} must contain a JSON object")
    return data


async def render(markup: str, config: EngineConfig, store: StateStore, *, fetch: bool) -> str:
    if not fetch:
        processor = DirectiveProcessor.from_markup(markup, config=config, store=store)
        processor.process_all()
        return processor.host.markup()

    async with HttpTransport(config) as transport:
        processor = DirectiveProcessor.from_markup(markup, config=config, store=store, transport=transport)
        await processor.load_remote_templates()
        processor.process_all()
        await processor.wait_pending()
        processor.close()
        return processor.host.markup()


async def main() -> None:
    parser = argparse.ArgumentParser(
        description="Render an HTML page with pynojs directives applied.",
    )
    parser.add_argument("page", help="HTML file to render")
    parser.add_argument("--state", help="JSON file with the initial state")
    parser.add_argument("--lang", help="Active language for [translate.<lang>]")
    parser.add_argument("--fetch", action="store_true", help="Load remote templates and await network directives")
    parser.add_argument("--base-url", help="Prefix for relative URLs")
    parser.add_argument("--output", "-o", help="Write output to FILE instead of stdout")
    parser.add_argument("--dump-state", metavar="FILE", help="Write the final state store contents as JSON")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING)

    overrides: dict[str, Any] = {}
    if args.lang:
        overrides["language"] = args.lang
    if args.base_url:
        overrides["base_url"] = args.base_url
    config = EngineConfig.from_env(**overrides)

    markup = Path(args.page).read_text(encoding="utf-8")
    store = StateStore(_load_state(args.state))
    output = await render(markup, config, store, fetch=args.fetch)

    if args.dump_state:
        Path(args.dump_state).write_text(json.dumps(store.snapshot(), indent=2, default=str), encoding="utf-8")

    if args.output:
        Path(args.output).write_text(output, encoding="utf-8")
        print(f"Rendered page written to {args.output}", file=sys.stderr)
    else:
        print(output)


if __name__ == "__main__":
    asyncio.run(main())
