"""Report CSS features that are not Baseline available.

>>> from cssbaseline import lint
>>> [d.message for d in lint("a { accent-color: red }")]
["Property 'accent-color' is not a widely available baseline feature."]
"""

from __future__ import annotations
from typing import Any, Mapping, Union
from typing_extensions import TypeAliasType

from cssbaseline.compat import CompatibilityDatabase, CompatibilityRecord, Status
from cssbaseline.config import Configuration
from cssbaseline.css import Parse, ParseError, Stylesheet
from cssbaseline.diagnostics import Diagnostic, Range
from cssbaseline.errors import ConfigurationError, DatabaseError
from cssbaseline.features import Feature, FeatureKind
from cssbaseline.walker import Analyzer

__version__ = "0.1.0"

__all__ = [
    "Analyzer",
    "CompatibilityDatabase",
    "CompatibilityRecord",
    "Configuration",
    "ConfigurationError",
    "DatabaseError",
    "Diagnostic",
    "Feature",
    "FeatureKind",
    "ParseError",
    "Range",
    "Status",
    "Stylesheet",
    "analyze",
    "lint",
    "parse_stylesheet",
]

Options = TypeAliasType("Options", Union[Configuration, Mapping[str, Any], None])


def _configuration(config: Options) -> Configuration:
    if isinstance(config, Configuration):
        return config
    return Configuration.from_options(config)


def parse_stylesheet(source: str, url: str | None = None, *, tolerant: bool = False) -> Stylesheet:
    return Parse.parse_stylesheet(source, url, tolerant=tolerant)


def analyze(stylesheet: Stylesheet, config: Options = None, database: CompatibilityDatabase | None = None) -> list[Diagnostic]:
    """Diagnostics for every feature of an already parsed stylesheet below the threshold."""
    return Analyzer(_configuration(config), database).analyze(stylesheet)


def lint(
    source: str,
    config: Options = None,
    *,
    database: CompatibilityDatabase | None = None,
    tolerant: bool = False,
) -> list[Diagnostic]:
    """Parse and analyze a stylesheet.

    The configuration is validated before anything is parsed, so a bad
    option raises `ConfigurationError` even for an empty stylesheet.
    """
    analyzer = Analyzer(_configuration(config), database)
    return analyzer.analyze(parse_stylesheet(source, tolerant=tolerant))
