"""CLI entrypoint for docbinder."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import load_config
from .discovery import SourceDiscoverer
from .errors import DocBinderError, ExportError
from .export import ChromiumExporter
from .logging import configure_logging
from .pipeline import Pipeline


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docbinder",
        description="Convert Markdown files or directories to PDF.",
    )
    parser.add_argument(
        "-i",
        "--input",
        required=True,
        type=Path,
        help="Input Markdown file or directory path.",
    )
    parser.add_argument(
        "-o",
        "--output",
        required=True,
        type=Path,
        help="Output PDF file path (overwritten if it exists).",
    )
    parser.add_argument(
        "--dark-mode",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable the dark mode theme (overrides the config file).",
    )
    parser.add_argument(
        "--title",
        default=None,
        help="Document title for directories (defaults to 'Documentation').",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .docbinder.yml file (defaults to the one next to the input).",
    )
    parser.add_argument(
        "--html-output",
        type=Path,
        default=None,
        help="Also write the intermediate HTML document to this path.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Seconds to wait for the browser to print the PDF.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write debug-level log records to this file.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docbinder."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    except DocBinderError as exc:
        parser.exit(1, f"docbinder: {exc}\n")

    try:
        if args.config is not None:
            config = load_config(args.config, explicit=True)
        else:
            config = load_config(args.input)
    except DocBinderError as exc:
        parser.exit(1, f"docbinder: invalid configuration: {exc}\n")

    exporter = ChromiumExporter(
        executable=config.export.executable,
        timeout=args.timeout if args.timeout is not None else config.export.timeout,
    )
    pipeline = Pipeline(
        discoverer=SourceDiscoverer(exclude_paths=config.exclude_paths),
        exporter=exporter,
        templates_dir=config.templates_dir,
    )

    try:
        output = pipeline.run(
            args.input,
            args.output,
            dark_mode=config.dark_mode if args.dark_mode is None else args.dark_mode,
            title=args.title or config.title,
            html_output=args.html_output,
        )
    except ExportError as exc:
        parser.exit(1, f"docbinder: export failed: {exc}\nRun with --verbose for more details.\n")
    except DocBinderError as exc:
        parser.exit(1, f"docbinder: {exc}\n")
    print(f"PDF created at {_relativize(output)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.resolve().relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
