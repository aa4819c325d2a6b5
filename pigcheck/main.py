"""Command line for validating and inspecting PIG packages.

Usage:
    python -m pigcheck.main validate package.json [--check uniqueIds ...] [--lang de]
    python -m pigcheck.main report package.jsonld
    python -m pigcheck.main render package.json -o output/package.html
    python -m pigcheck.main --list-checks

`validate` exits with 0 when the package is valid, 1 on a constraint
violation and 2 when the document cannot be imported.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from pigcheck import messages
from pigcheck.constraints import CHECKS, check_constraints_for_package
from pigcheck.graph import build_package_graph, hierarchy_report
from pigcheck.models import CheckId
from pigcheck.parser import PackageImportError, load_package
from pigcheck.settings import settings
from pigcheck.visualizer import generate_visualization

EXIT_OK = 0
EXIT_VIOLATION = 1
EXIT_IMPORT_FAILED = 2


def _load(path: str):
    try:
        return load_package(path)
    except FileNotFoundError:
        print(f"Error: File not found: {path}", file=sys.stderr)
    except PackageImportError as e:
        print(f"[{e.status}] {e.rsp.status_text}", file=sys.stderr)
    return None


def cmd_validate(args: argparse.Namespace) -> int:
    package = _load(args.path)
    if package is None:
        return EXIT_IMPORT_FAILED

    rsp = check_constraints_for_package(package, args.check)
    print(f"[{rsp.status}] {rsp.status_text}")
    return EXIT_OK if rsp.ok else EXIT_VIOLATION


def cmd_report(args: argparse.Namespace) -> int:
    package = _load(args.path)
    if package is None:
        return EXIT_IMPORT_FAILED
    print(hierarchy_report(package))
    return EXIT_OK


def cmd_render(args: argparse.Namespace) -> int:
    package = _load(args.path)
    if package is None:
        return EXIT_IMPORT_FAILED

    g = build_package_graph(package)
    print(f"Graph has {g.number_of_nodes()} nodes and {g.number_of_edges()} edges")
    generate_visualization(g, output_path=args.output)
    print(f"Open {args.output} in your browser to explore the package")
    return EXIT_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PIG package constraint validator")
    parser.add_argument("--list-checks", action="store_true", help="Print the check identifiers in run order")
    parser.add_argument("--lang", type=str, default=None, help="Message language (en, de, fr, es)")

    sub = parser.add_subparsers(dest="command")

    p_validate = sub.add_parser("validate", help="Validate a package document")
    p_validate.add_argument("path", type=str, help="Path to a package (.json or .jsonld)")
    p_validate.add_argument(
        "--check",
        action="append",
        choices=[c.value for c in CheckId],
        help="Run only this check (repeatable; default: all checks)",
    )
    p_validate.set_defaults(func=cmd_validate)

    p_report = sub.add_parser("report", help="Print item counts, class hierarchy and cycles")
    p_report.add_argument("path", type=str)
    p_report.set_defaults(func=cmd_report)

    p_render = sub.add_parser("render", help="Write an interactive HTML view of the package")
    p_render.add_argument("path", type=str)
    p_render.add_argument("-o", "--output", type=Path, default=Path("output") / "package.html")
    p_render.set_defaults(func=cmd_render)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.log_level)
    messages.set_language(args.lang or settings.message_language)

    if args.list_checks:
        for check_id, _ in CHECKS:
            print(check_id.value)
        return EXIT_OK

    if not args.command:
        parser.print_help()
        return EXIT_IMPORT_FAILED

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
