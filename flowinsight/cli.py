"""
Command-line inspection of the classifiers and the decoding engine.

Usage:
    flowinsight app api.github.com --user-agent "curl/8.4.0"
    flowinsight type https://example.com/app.js --header "Accept: */*"
    echo SGVsbG8= | flowinsight decode - --content-type application/json --all
    flowinsight --rules rules.yaml app chat.internal.example

Every subcommand prints JSON to stdout.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys

from flowinsight.app_classifier import classify_app
from flowinsight.app_icons import get_app_icon
from flowinsight.decoding.engine import DecodingEngine
from flowinsight.registry import RuleRegistry
from flowinsight.request_type import classify_request_type
from flowinsight.request_type import get_request_type_info

logger = logging.getLogger(__name__)


def parse_header(value: str) -> tuple[str, str]:
    """argparse type for "Name: value" header arguments."""
    name, sep, header_value = value.partition(":")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Invalid header {value!r}, expected 'Name: value'")
    return name.strip(), header_value.strip()


def cmd_app(args: argparse.Namespace, registry: RuleRegistry) -> dict:
    app = classify_app(
        args.domain,
        user_agent=args.user_agent,
        headers=dict(args.header) if args.header else None,
        registry=registry,
    )
    result = app.to_dict()
    result["color"] = get_app_icon(app.name, app.category).color
    return result


def cmd_type(args: argparse.Namespace, registry: RuleRegistry) -> dict:
    request_type = classify_request_type(
        args.url,
        content_type=args.content_type,
        headers=dict(args.header) if args.header else None,
    )
    return get_request_type_info(request_type).to_dict()


def cmd_decode(args: argparse.Namespace, registry: RuleRegistry) -> dict:
    if args.text is None or args.text == "-":
        content = sys.stdin.read()
    else:
        content = args.text

    engine = DecodingEngine()
    results = engine.try_multiple_decodings(content, args.content_type)
    output = {
        "best": engine.best_of(results, content).to_dict(),
        "likely_encoded": engine.is_likely_encoded(content),
    }
    if args.all:
        output["results"] = [r.to_dict() for r in results]
    return output


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="flowinsight",
        description="Identify apps, resource types and body encodings of HTTP flows",
    )
    parser.add_argument("--rules", help="YAML or JSON app rule bundle to load first")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    app_parser = subparsers.add_parser("app", help="Identify the app behind a domain")
    app_parser.add_argument("domain")
    app_parser.add_argument("--user-agent", help="Request User-Agent")
    app_parser.add_argument(
        "--header", action="append", type=parse_header, default=[], help="Request header 'Name: value'"
    )
    app_parser.set_defaults(func=cmd_app)

    type_parser = subparsers.add_parser("type", help="Classify the resource type of a URL")
    type_parser.add_argument("url")
    type_parser.add_argument("--content-type", help="Declared Content-Type")
    type_parser.add_argument(
        "--header", action="append", type=parse_header, default=[], help="Request header 'Name: value'"
    )
    type_parser.set_defaults(func=cmd_type)

    decode_parser = subparsers.add_parser("decode", help="Try to decode body text")
    decode_parser.add_argument("text", nargs="?", help="Text to decode, '-' or omitted reads stdin")
    decode_parser.add_argument("--content-type", help="Declared Content-Type")
    decode_parser.add_argument("--all", action="store_true", help="Include every attempted decoding")
    decode_parser.set_defaults(func=cmd_decode)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="[%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )

    registry = RuleRegistry()
    if args.rules:
        try:
            registry.load_file(args.rules)
        except ValueError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    output = args.func(args, registry)
    print(json.dumps(output, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
