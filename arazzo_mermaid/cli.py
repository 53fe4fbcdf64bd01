"""
Command line converter from Arazzo workflows to Mermaid flowcharts.

Reads a YAML or JSON Arazzo document (file or stdin) and prints or saves the diagram.
"""

from __future__ import annotations

import argparse
import sys
from importlib.metadata import PackageNotFoundError, version
from typing import TextIO

from arazzo_mermaid import settings
from arazzo_mermaid.actions.diagram_generation import (
    NODE_NAMING_POLICIES,
    build_flowchart_mermaid,
    resolve_node_naming,
    write_mermaid_artifact,
)
from arazzo_mermaid.actions.live_editor import open_in_live_editor
from arazzo_mermaid.engine.document_loader import ArazzoLoadError, DocumentLoader
from arazzo_mermaid.logging_config import setup_logger


def _package_version() -> str:
    try:
        return version("arazzo-mermaid")
    except PackageNotFoundError:
        return "unknown"


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="arazzo-mermaid",
        description="Convert Arazzo workflows into Mermaid diagrams.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=None,
        help="Arazzo workflows file to convert (YAML or JSON). Omit or use '-' to read stdin.",
    )
    parser.add_argument(
        "-o",
        "--output",
        metavar="FILE",
        default=None,
        help="Save to specified file instead of printing.",
    )
    parser.add_argument(
        "--node-naming",
        choices=NODE_NAMING_POLICIES,
        default=None,
        help=f"Prefix step nodes with their workflow id or not (default: {settings.NODE_NAMING}).",
    )
    parser.add_argument(
        "--open",
        action="store_true",
        help="Also open the diagram in the mermaid.live editor.",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        default=None,
        help=f"Logging level for diagnostics on stderr (default: {settings.LOG_LEVEL}).",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_package_version()}")
    return parser


def run(reader: TextIO, *, source: str = "<stdin>", node_naming: str | None = None) -> str:
    """
    Load a document from an open text stream and render it.

    Raises:
        ArazzoLoadError: If the document cannot be parsed
    """
    document = DocumentLoader().load_stream(reader, source=source)
    return build_flowchart_mermaid(document, node_naming=node_naming)


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)

    try:
        node_naming = resolve_node_naming(args.node_naming)
        logger = setup_logger(level=args.log_level)
    except (ValueError, OSError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    try:
        if args.file in (None, "-"):
            mermaid = run(sys.stdin, node_naming=node_naming)
        else:
            document = DocumentLoader().load_path(args.file)
            mermaid = build_flowchart_mermaid(document, node_naming=node_naming)
    except ArazzoLoadError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.output:
        try:
            write_mermaid_artifact(args.output, mermaid)
        except OSError as e:
            print(f"ERROR: Cannot write {args.output}: {e}", file=sys.stderr)
            return 1
        logger.info("Diagram written to %s", args.output)
    else:
        sys.stdout.write(mermaid)

    if args.open:
        url = open_in_live_editor(mermaid)
        print(url, file=sys.stderr)

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
