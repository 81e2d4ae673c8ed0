"""CLI entrypoints for docmaster commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import REPORT_FORMATS, ConfigError
from .logging import configure_logging
from .orchestrator import Orchestrator
from .scaffold import (
    DEFAULT_TEMPLATE_SET,
    REFRESH_SCOPES,
    ProjectExistsError,
    ProjectNotFoundError,
    TemplateSetError,
    TemplateSetNotFoundError,
)


def _add_verbosity_options(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    default: object = argparse.SUPPRESS if suppress_default else False
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=default,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=default,
        help="Only log warnings and errors.",
    )


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError("must be zero or positive")
    return number


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docmaster",
        description="Discover documentation gaps and scaffold project documentation.",
    )
    _add_verbosity_options(parser)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Path to a .docmaster.yml file (defaults to the scanned or current directory).",
    )
    parser.add_argument(
        "--projects-root",
        type=Path,
        default=None,
        help="Directory holding scaffolded projects and INDEX.md.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    discover_parser = subparsers.add_parser(
        "discover",
        help="Scan a tree and write a documentation discovery report.",
    )
    _add_verbosity_options(discover_parser, suppress_default=True)
    discover_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the tree to scan (defaults to current directory).",
    )
    discover_parser.add_argument(
        "--sample-cap",
        type=_non_negative_int,
        default=None,
        help="Maximum number of source files sampled for comment coverage.",
    )
    discover_parser.add_argument(
        "--freshness-days",
        type=_positive_int,
        default=None,
        help="Age in days after which a document is reported as outdated.",
    )
    discover_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory receiving the report (defaults to the scanned tree).",
    )
    discover_parser.add_argument(
        "--format",
        dest="report_format",
        choices=REPORT_FORMATS,
        default=None,
        help="Report format.",
    )

    init_parser = subparsers.add_parser(
        "init",
        help="Create the baseline documentation set for a new project.",
    )
    _add_verbosity_options(init_parser, suppress_default=True)
    init_parser.add_argument("name", help="Project name.")
    init_parser.add_argument(
        "--template",
        default=None,
        help=f"Template set to instantiate (default: {DEFAULT_TEMPLATE_SET}).",
    )

    update_parser = subparsers.add_parser(
        "update",
        help="Re-validate a project's documentation and refresh stale stamps.",
    )
    _add_verbosity_options(update_parser, suppress_default=True)
    update_parser.add_argument("name", help="Project name.")
    update_parser.add_argument(
        "--scope",
        choices=REFRESH_SCOPES,
        default="all",
        help="Documents to refresh.",
    )

    status_parser = subparsers.add_parser(
        "status",
        help="Show whether a project's documentation is fresh or stale.",
    )
    _add_verbosity_options(status_parser, suppress_default=True)
    status_parser.add_argument("name", help="Project name.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for docmaster commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    orchestrator = Orchestrator(config_path=args.config, projects_root=args.projects_root)

    if args.command == "discover":
        try:
            outcome = orchestrator.run_discover(
                args.path,
                sample_cap=args.sample_cap,
                freshness_days=args.freshness_days,
                output_dir=args.output_dir,
                fmt=args.report_format,
            )
        except (FileNotFoundError, NotADirectoryError, PermissionError) as exc:
            parser.exit(1, f"{exc}\n")
        except (ConfigError, ValueError) as exc:
            parser.exit(1, f"docmaster discover failed: {exc}\n")
        for line in outcome.summary:
            print(line)
        print(f"Report written to {_relativize(outcome.path)}")
    elif args.command == "init":
        try:
            manifest = orchestrator.run_init(args.name, args.template)
        except ProjectExistsError as exc:
            parser.exit(1, f"{exc}\n")
        except (TemplateSetNotFoundError, TemplateSetError, ConfigError, ValueError) as exc:
            parser.exit(1, f"docmaster init failed: {exc}\n")
        except OSError as exc:
            parser.exit(1, f"docmaster init failed: {exc}\nRun with --verbose for more details.\n")
        print(f"Documentation initialized at {_relativize(manifest.path)}")
        for path in manifest.created_files:
            print(f"  {path}")
        print(f"Index entry: {manifest.index_entry}")
    elif args.command == "update":
        try:
            summary = orchestrator.run_update(args.name, args.scope)
        except ProjectNotFoundError as exc:
            parser.exit(1, f"{exc}\n")
        except (TemplateSetNotFoundError, TemplateSetError, ConfigError, ValueError) as exc:
            parser.exit(1, f"docmaster update failed: {exc}\n")
        print(
            f"Checked {len(summary.checked_files)} document(s): "
            f"{len(summary.missing)} missing, {len(summary.outdated)} outdated, "
            f"{len(summary.broken_links)} broken link(s)"
        )
        if summary.report_path is not None:
            print(f"Update report written to {_relativize(summary.report_path)}")
        if summary.script_path is not None:
            print(f"Review and run {_relativize(summary.script_path)} to apply proposed edits")
    elif args.command == "status":
        try:
            state = orchestrator.project_status(args.name)
        except (ConfigError, ValueError) as exc:
            parser.exit(1, f"docmaster status failed: {exc}\n")
        print(f"{args.name}: {state.value.replace('_', ' ')}")
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
