"""Command line interface for the feed filter."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from .pipeline import handle_request


def _configure_logging(level: str | None) -> None:
    if level is None:
        return
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")
    logging.basicConfig(level=numeric_level, format="%(asctime)s [%(levelname)s] %(name)s: %(message)s")


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Filter RSS/Atom feeds by keyword or regex")
    subparsers = parser.add_subparsers(dest="command", required=True)

    filter_parser = subparsers.add_parser("filter", help="Filter a feed once and print the RSS")
    filter_parser.add_argument("--feed-url", required=True, help="URL of the RSS or Atom feed")
    filter_parser.add_argument(
        "--type", choices=("keyword", "regex"), default="keyword", help="Match mode"
    )
    filter_parser.add_argument("--pattern", required=True, help="Keyword or regular expression")
    filter_parser.add_argument("--output", help="Output file path; prints to stdout if omitted")
    filter_parser.add_argument("--log-level", default="WARNING", help="Log level, e.g. INFO, DEBUG")

    serve_parser = subparsers.add_parser("serve", help="Run the Flask HTTP endpoint")
    serve_parser.add_argument(
        "--host", default="127.0.0.1", help="Host for the development server"
    )
    serve_parser.add_argument("--port", type=int, default=5000, help="Port for the server")
    serve_parser.add_argument("--log-level", default="INFO", help="Log level, e.g. INFO, DEBUG")

    args = parser.parse_args(argv)

    if args.command == "filter":
        _configure_logging(args.log_level)
        result = handle_request(
            {"feedUrl": args.feed_url, "type": args.type, "pattern": args.pattern}
        )
        if result.status_code != 200:
            print(f"Error ({result.status_code}): {result.body}", file=sys.stderr)
            return 1
        if args.output:
            path = Path(args.output)
            path.write_text(result.body, encoding="utf-8")
            print(f"RSS feed written to {path}")
        else:
            sys.stdout.write(result.body + "\n")
        return 0

    if args.command == "serve":
        _configure_logging(args.log_level)
        from .web import create_app

        app = create_app()
        app.run(host=args.host, port=args.port, debug=True)
        return 0

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
