"""gradestyle/cli.py — command-line entry point.

Usage examples
--------------
    # Score a submission against a rubric and a checkstyle report
    gradestyle score submission/ --config rubric.json \\
        --checkstyle submission/target/checkstyle-result.xml

    # Same, merging a PMD/CPD report converted to JSON, as a table
    gradestyle score submission/ --config rubric.json \\
        --violations pmd.json --format table -j 4

    # Print the normalised size of some categories
    gradestyle normalise submission/ ClassNames "Javadoc Formatting"

    # List categories and the detector rules reporting under them
    gradestyle categories

Exit codes
----------
    0   Success.
    1   Configuration or violation report error.
    2   Analysis or infrastructure failure (missing file, unparsable source).

``python -m gradestyle`` runs the same CLI.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
import textwrap
from pathlib import Path
from typing import List, Optional, Sequence, TextIO

from . import __version__
from .categories import CATEGORY_PROFILES, Category
from .config import ScoringOptions, load_config
from .errors import AnalysisError, ConfigurationError, GradeStyleError
from .normalisation import Normaliser
from .repo import Repo
from .scoring import CategoryScorer, ValidationResult, generate_report
from .taxonomy import kinds_of
from .violations import Violations, load_checkstyle_xml, load_violations_json

_log = logging.getLogger("gradestyle")

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _configure_logging(verbosity: int) -> None:
    """Set up the ``gradestyle`` logger: 0 → WARNING, 1 → INFO, 2+ → DEBUG."""
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("gradestyle")
    root.setLevel(level)
    # main() may run repeatedly in one process with sys.stderr swapped
    for old in [h for h in root.handlers if getattr(h, "_gradestyle", False)]:
        root.removeHandler(old)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    handler._gradestyle = True
    root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, exiting on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _open_output(dest: Optional[str]) -> TextIO:
    """*dest* ``None`` or ``"-"`` → stdout; otherwise open the path for writing."""
    if dest is None or dest == "-":
        return sys.stdout
    p = Path(dest).expanduser().resolve()
    p.parent.mkdir(parents=True, exist_ok=True)
    return open(p, "w", encoding="utf-8")


def _write(dest: Optional[str], text: str) -> None:
    out = _open_output(dest)
    try:
        out.write(text)
        if not text.endswith("\n"):
            out.write("\n")
    finally:
        if out is not sys.stdout:
            out.close()


def _parse_categories(names: Sequence[str]) -> List[Category]:
    if not names:
        return list(Category)
    categories = []
    for name in names:
        category = Category.lookup(name)
        if category is None:
            raise ConfigurationError(f"unknown category {name!r}")
        categories.append(category)
    return categories


def _exit_code(exc: GradeStyleError) -> int:
    return EXIT_INFRA if isinstance(exc, AnalysisError) else EXIT_ERROR


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_score(args: argparse.Namespace) -> int:
    """Score a repository against a rubric."""
    try:
        configs = load_config(_resolve_path(args.config, "configuration"))
        violations = Violations()
        for raw in args.violations or []:
            violations = violations + load_violations_json(_resolve_path(raw, "violation report"))
        for raw in args.checkstyle or []:
            violations = violations + load_checkstyle_xml(_resolve_path(raw, "checkstyle report"))
        if not (args.violations or args.checkstyle):
            _log.warning("no violation reports given; every count is 0")

        options = ScoringOptions(jobs=args.jobs) if args.jobs is not None else ScoringOptions.from_env()
        problems = options.validate()
        if problems:
            raise ConfigurationError("; ".join(problems))

        repo = Repo(_resolve_path(args.repo, "repository"))
        scorer = CategoryScorer(ValidationResult(repo, violations), configs, options=options)
        details = scorer.score_details()
    except GradeStyleError as exc:
        _log.error("%s", exc)
        return _exit_code(exc)

    if args.format == "json":
        text = json.dumps(
            {d.category.value: d.score for d in details} if not args.details
            else [d.to_dict() for d in details],
            indent=2,
        )
    else:
        color = (
            not args.no_color
            and "NO_COLOR" not in os.environ
            and args.output in (None, "-")
            and sys.stdout.isatty()
        )
        text = generate_report(details, color=color)
    _write(args.output, text)
    return EXIT_OK


def cmd_normalise(args: argparse.Namespace) -> int:
    """Print normalised category sizes."""
    try:
        categories = _parse_categories(args.categories)
        options = ScoringOptions(jobs=args.jobs) if args.jobs is not None else ScoringOptions.from_env()
        normaliser = Normaliser(Repo(_resolve_path(args.repo, "repository")), jobs=options.jobs)
        sizes = {c: normaliser.normalise(c) for c in categories}
    except GradeStyleError as exc:
        _log.error("%s", exc)
        return _exit_code(exc)

    if args.format == "json":
        text = json.dumps({c.value: n for c, n in sizes.items()}, indent=2)
    else:
        text = "\n".join(f"{c.display_name:28s} {n:8d}" for c, n in sizes.items())
    _write(args.output, text)
    return EXIT_OK


def cmd_categories(args: argparse.Namespace) -> int:
    """List categories, their counting rules and violation kinds."""
    if args.format == "json":
        data = [
            {
                "category": c.value,
                "display_name": c.display_name,
                "rules": sorted(k.value for k in kinds_of(c)),
            }
            for c in Category
        ]
        _write(args.output, json.dumps(data, indent=2))
        return EXIT_OK

    lines = []
    for c in Category:
        lines.append(f"{c.value:24s} {c.display_name:28s} {CATEGORY_PROFILES[c].rule!r}")
        for rule in sorted(k.value for k in kinds_of(c)):
            lines.append(f"    {rule}")
    _write(args.output, "\n".join(lines))
    return EXIT_OK


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the CLI argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="gradestyle",
        description="Score a Java repository against a style rubric.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              gradestyle score repo/ --config rubric.json --checkstyle report.xml
              gradestyle normalise repo/ MethodNames
              gradestyle categories --format json
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    def _add_output_args(p: argparse.ArgumentParser, formats: Sequence[str]) -> None:
        p.add_argument(
            "-o", "--output",
            default=None,
            metavar="FILE",
            help='Output file ("-" or omit for stdout).',
        )
        p.add_argument(
            "-f", "--format",
            choices=list(formats),
            default=formats[0],
            help=f"Output format (default: {formats[0]}).",
        )

    def _add_jobs_arg(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "-j", "--jobs",
            type=int,
            default=None,
            metavar="N",
            help="Parallel source parsing workers (default: $GRADESTYLE_JOBS or 1).",
        )

    # --- score -----------------------------------------------------------
    p_score = subparsers.add_parser(
        "score",
        help="Score a repository against a rubric.",
    )
    p_score.add_argument("repo", metavar="REPO", help="Repository directory.")
    p_score.add_argument(
        "-c", "--config",
        required=True,
        metavar="FILE",
        help="Rubric JSON file.",
    )
    p_score.add_argument(
        "--violations",
        action="append",
        metavar="FILE",
        help="Violation report in JSON (repeatable).",
    )
    p_score.add_argument(
        "--checkstyle",
        action="append",
        metavar="FILE",
        help="Checkstyle XML report (repeatable).",
    )
    p_score.add_argument(
        "--details",
        action="store_true",
        help="With --format json, emit count/size/value per category.",
    )
    p_score.add_argument(
        "--no-color",
        action="store_true",
        help="Never colour the table output.",
    )
    _add_output_args(p_score, ["json", "table"])
    _add_jobs_arg(p_score)
    p_score.set_defaults(func=cmd_score)

    # --- normalise -------------------------------------------------------
    p_norm = subparsers.add_parser(
        "normalise",
        aliases=["normalize"],
        help="Print normalised category sizes.",
    )
    p_norm.add_argument("repo", metavar="REPO", help="Repository directory.")
    p_norm.add_argument(
        "categories",
        nargs="*",
        metavar="CATEGORY",
        help="Categories to size (default: all).",
    )
    _add_output_args(p_norm, ["table", "json"])
    _add_jobs_arg(p_norm)
    p_norm.set_defaults(func=cmd_normalise)

    # --- categories ------------------------------------------------------
    p_cat = subparsers.add_parser(
        "categories",
        help="List categories and their violation kinds.",
    )
    _add_output_args(p_cat, ["table", "json"])
    p_cat.set_defaults(func=cmd_categories)

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the gradestyle CLI and return its exit code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA
    except Exception as exc:
        _log.error("Unhandled exception: %s", exc, exc_info=True)
        return EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
