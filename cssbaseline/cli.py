"""cssbaseline FILE... [options]

Exit status is 0 when nothing was reported, 1 when any feature was reported
and 2 for bad options or unreadable input.
"""

from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Any, TextIO

from conterm.pretty import Markup

from cssbaseline import __version__
from cssbaseline.compat import CompatibilityDatabase
from cssbaseline.config import Configuration
from cssbaseline.css import Lexer, Parse, ParseError
from cssbaseline.diagnostics import Diagnostic
from cssbaseline.errors import ConfigurationError, DatabaseError
from cssbaseline.walker import Analyzer

logger = logging.getLogger(__name__)

EXIT_CLEAN = 0
EXIT_REPORTED = 1
EXIT_USAGE = 2


def threshold(value: str) -> str | int:
    if value.isdigit():
        return int(value)
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cssbaseline",
        description="Report CSS features that are not Baseline available.",
    )
    parser.add_argument("files", nargs="+", metavar="FILE", help="Stylesheets to check.")
    parser.add_argument(
        "--available",
        type=threshold,
        metavar="LEVEL|YEAR",
        help="'widely' (default), 'newly' or the year features must have been available by.",
    )
    parser.add_argument("--allow-property", dest="allow_properties", action="append", default=[], metavar="NAME")
    parser.add_argument("--allow-at-rule", dest="allow_at_rules", action="append", default=[], metavar="NAME")
    parser.add_argument("--allow-selector", dest="allow_selectors", action="append", default=[], metavar="NAME")
    parser.add_argument("--config", metavar="JSON_FILE", help="Options as a JSON object.")
    parser.add_argument("--database", metavar="JSON_FILE", help="Compatibility data to use instead of the bundled snapshot.")
    parser.add_argument("--tolerant", action="store_true", help="Skip malformed syntax instead of failing.")
    parser.add_argument("--format", choices=("text", "json"), default="text")
    parser.add_argument("--no-color", dest="color", action="store_false", default=None)
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def options(args: argparse.Namespace) -> dict[str, Any]:
    """Merge a config file with the options given on the command line."""
    result: dict[str, Any] = {}
    if args.config is not None:
        with open(args.config, "r", encoding="utf-8") as file:
            loaded = json.load(file)
        if not isinstance(loaded, dict):
            raise ConfigurationError(f"{args.config}: options must be a JSON object")
        result.update(loaded)
    if args.available is not None:
        result["available"] = args.available
    for key, values in (
        ("allowProperties", args.allow_properties),
        ("allowAtRules", args.allow_at_rules),
        ("allowSelectors", args.allow_selectors),
    ):
        if len(values) > 0:
            existing = result.get(key, [])
            result[key] = [*existing, *values] if isinstance(existing, list) else existing
    return result


def report_text(path: str, diagnostics: list[Diagnostic], out: TextIO, color: bool):
    if len(diagnostics) == 0:
        return
    out.write(f"{path}\n")
    for diagnostic in diagnostics:
        location = f"{diagnostic.range.line}:{diagnostic.range.column}"
        if color:
            out.write(
                f"  {Markup.parse(f'[243]{location:<8}', mar=False)}{Markup.parse('[yellow]warning', mar=False)}  "
                f"{diagnostic.message}  {Markup.parse(f'[243]{diagnostic.message_id}', mar=False)}\n"
            )
        else:
            out.write(f"  {location:<8}warning  {diagnostic.message}  {diagnostic.message_id}\n")
    out.write("\n")


def report_json(results: dict[str, list[Diagnostic]], out: TextIO):
    json.dump(
        [
            {"filePath": path, "messages": [diagnostic.to_dict() for diagnostic in diagnostics]}
            for path, diagnostics in results.items()
        ],
        out,
        indent=2,
    )
    out.write("\n")


def main(argv: list[str] | None = None, out: TextIO | None = None) -> int:
    out = out or sys.stdout
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = Configuration.from_options(options(args))
        database = (
            CompatibilityDatabase.from_path(args.database)
            if args.database is not None
            else CompatibilityDatabase.default()
        )
    except (ConfigurationError, DatabaseError, OSError, json.JSONDecodeError) as error:
        logger.error("%s", error)
        return EXIT_USAGE

    analyzer = Analyzer(config, database)
    results: dict[str, list[Diagnostic]] = {}
    for path in args.files:
        try:
            stylesheet = Parse.parse_stylesheet(Lexer.get_css(path), path, tolerant=args.tolerant)
        except (OSError, UnicodeDecodeError, LookupError, ParseError) as error:
            logger.error("%s: %s", path, error)
            return EXIT_USAGE
        results[path] = analyzer.analyze(stylesheet)

    if args.format == "json":
        report_json(results, out)
    else:
        color = args.color if args.color is not None else out.isatty()
        for path, diagnostics in results.items():
            report_text(path, diagnostics, out, color)
        total = sum(len(diagnostics) for diagnostics in results.values())
        if total > 0:
            out.write(f"{total} problem{'s' if total != 1 else ''}\n")

    return EXIT_REPORTED if any(results.values()) else EXIT_CLEAN
