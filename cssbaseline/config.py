"""Analyzer options.

Options arrive in the camelCase shape used by stylesheet linters
(`available`, `allowProperties`, `allowAtRules`, `allowSelectors`) and are
validated once, before any stylesheet is walked.
"""

from __future__ import annotations
import logging
from typing import Any, Literal, Mapping, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError
from pydantic.alias_generators import to_camel
from typing_extensions import TypeAliasType

from cssbaseline.errors import ConfigurationError

__all__ = ["Configuration", "Level", "Threshold"]

logger = logging.getLogger(__name__)

Level = TypeAliasType("Level", Literal["widely", "newly"])
Threshold = TypeAliasType("Threshold", Union[Level, StrictInt])


class Configuration(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )

    available: Threshold = "widely"
    allow_properties: frozenset[StrictStr] = Field(default_factory=frozenset)
    allow_at_rules: frozenset[StrictStr] = Field(default_factory=frozenset)
    allow_selectors: frozenset[StrictStr] = Field(default_factory=frozenset)

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> Configuration:
        """Validate user options, raising `ConfigurationError` on a bad shape."""
        if options is None:
            return cls()
        if not isinstance(options, Mapping):
            raise ConfigurationError(f"Options must be a mapping, not {type(options).__name__}")
        try:
            config = cls.model_validate(dict(options))
        except ValidationError as error:
            raise ConfigurationError(str(error)) from error
        logger.debug("configuration: %r", config)
        return config
