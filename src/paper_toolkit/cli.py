"""
Command line entry point.

    paper-toolkit render paper.json -o paper.pdf [--trace trace.json]
    paper-toolkit serve [--host 0.0.0.0] [--port 3000]
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path
from typing import Optional, Sequence

from paper_toolkit import __version__
from paper_toolkit.builder import ConfigError, RenderingError, generate_pdf, get_config, load_config
from paper_toolkit.builder.config import PAGE_SIZES, with_overrides
from paper_toolkit.builder.output import RecordingSink, ReportLabSink
from paper_toolkit.core.schemas import ValidationError, parse_paper

logger = logging.getLogger("paper_toolkit")

DEFAULT_PORT = 3000


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="paper-toolkit",
        description="Generate two-column question paper PDFs from JSON",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    parser.add_argument("--config", type=Path, help="JSON layout configuration file")

    sub = parser.add_subparsers(dest="command", required=True)

    render = sub.add_parser("render", help="Render a paper JSON file to PDF")
    render.add_argument("input", type=Path, help="Paper JSON file")
    render.add_argument("-o", "--output", type=Path, help="Output PDF (default: input name with .pdf)")
    render.add_argument("--page-size", choices=sorted(PAGE_SIZES), help="Override the page size")
    render.add_argument("--trace", type=Path, help="Write the recorded drawing commands as JSON")

    serve = sub.add_parser("serve", help="Run the HTTP server")
    serve.add_argument("--host", default="0.0.0.0")
    serve.add_argument("--port", type=int, default=None, help="Port (default: $PORT or 3000)")

    return parser


def _render(args: argparse.Namespace) -> int:
    config = load_config(args.config) if args.config else get_config()
    if args.page_size:
        config = with_overrides(config, page_size=args.page_size)

    try:
        data = json.loads(args.input.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Cannot read {args.input}: {e}")
        return 1

    try:
        paper = parse_paper(data)
    except ValidationError as e:
        logger.error(f"{e} ({'; '.join(e.errors)})")
        return 1

    sink = RecordingSink(ReportLabSink(config)) if args.trace else None
    try:
        result = generate_pdf(paper, config, sink=sink)
    except RenderingError as e:
        logger.error(str(e))
        return 1

    output = args.output or args.input.with_suffix(".pdf")
    output.write_bytes(result.pdf)
    logger.info(f"Wrote {output} ({result.page_count} pages, {len(result.warnings)} warnings)")

    if args.trace:
        trace = {
            "sections": result.sections,
            "questions": [q.to_dict() for q in paper.questions],
            "warnings": [w.to_dict() for w in result.warnings],
            "operations": [op.to_dict() for op in sink.operations],
        }
        args.trace.write_text(json.dumps(trace, indent=2), encoding="utf-8")
        logger.info(f"Wrote trace {args.trace} ({len(sink.operations)} operations)")

    return 0


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from paper_toolkit.api import create_app

    config = load_config(args.config) if args.config else get_config()
    port = args.port if args.port is not None else int(os.environ.get("PORT", DEFAULT_PORT))
    logger.info(f"Server running on port {port}")
    uvicorn.run(create_app(config), host=args.host, port=port)
    return 0


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s | %(levelname)s | %(message)s",
    )

    try:
        if args.command == "render":
            return _render(args)
        return _serve(args)
    except ConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        return 2


if __name__ == "__main__":
    sys.exit(main())
