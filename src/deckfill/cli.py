"""Command-line interface for DeckFill."""

import argparse
import logging
import sys
from pathlib import Path

import uvicorn

from .config import settings


def main(argv=None):
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="DeckFill - Fill presentation templates with spreadsheet data"
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Logging level (default: from LOG_LEVEL)"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Generate command
    generate_parser = subparsers.add_parser(
        "generate", help="Fill a template with values from a workbook"
    )
    generate_parser.add_argument("template", type=Path, help="Path to the .pptx template")
    generate_parser.add_argument("workbook", type=Path, help="Path to the .xlsx/.xls workbook")
    generate_parser.add_argument(
        "--slide-type",
        "-t",
        default=settings.default_mapping_set,
        help=f"Mapping set id (default: {settings.default_mapping_set})",
    )
    generate_parser.add_argument(
        "--output",
        "-o",
        type=Path,
        default=None,
        help=f"Output path (default: {settings.output_filename})",
    )

    # Mapping sets command
    subparsers.add_parser("mapping-sets", help="List the registered mapping sets")

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=args.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "generate":
        sys.exit(run_generate(args.template, args.workbook, args.slide_type, args.output))
    elif args.command == "mapping-sets":
        run_list_mapping_sets()
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "deckfill.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def run_generate(template: Path, workbook: Path, slide_type: str, output: Path = None) -> int:
    """Generate a deck from files on disk. Returns the process exit code."""
    from .engine import DeckGenerator

    for path in (template, workbook):
        if not path.is_file():
            print(f"File not found: {path}", file=sys.stderr)
            return 1

    output = output or Path(settings.output_filename)
    result = DeckGenerator().generate(
        mapping_set_id=slide_type,
        template=template.read_bytes(),
        workbook=workbook.read_bytes(),
        template_filename=template.name,
        workbook_filename=workbook.name,
        output_filename=output.name,
    )

    if not result.success:
        print(result.error, file=sys.stderr)
        return 1

    output.write_bytes(result.content)
    print(f"Wrote {output} using mapping set '{result.mapping_set_id}'")
    print(f"  Slides filled: {', '.join(map(str, result.pages_rewritten)) or 'none'}")
    if result.pages_skipped:
        print(f"  Not in template: {', '.join(map(str, result.pages_skipped))}")
    return 0


def run_list_mapping_sets():
    """Print the registered mapping sets."""
    from .mapping import list_mapping_sets

    for info in list_mapping_sets():
        marker = "*" if info.id == settings.default_mapping_set else " "
        print(f"{marker} {info.id:<12} {info.label} ({info.page_count} slides, {info.token_count} tokens)")


if __name__ == "__main__":
    main()
