"""Conversion settings.

A single immutable ``MarkupConfig`` is handed to every pipeline stage.
"""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from api_markup.errors import ConfigError


class MarkupLanguage(str, Enum):
    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"

    @property
    def extension(self) -> str:
        return ".adoc" if self is MarkupLanguage.ASCIIDOC else ".md"


class GroupBy(str, Enum):
    AS_IS = "as_is"
    TAGS = "tags"


class Ordering(str, Enum):
    AS_IS = "as_is"
    NATURAL = "natural"


class Language(str, Enum):
    EN = "en"
    DE = "de"
    ES = "es"
    FR = "fr"
    RU = "ru"


class LineSeparator(str, Enum):
    UNIX = "unix"
    WINDOWS = "windows"
    MAC = "mac"

    @property
    def chars(self) -> str:
        return {"unix": "\n", "windows": "\r\n", "mac": "\r"}[self.value]


class MarkupConfig(BaseModel):
    """Every option recognized by the converter."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    markup_language: MarkupLanguage = MarkupLanguage.ASCIIDOC
    group_by: GroupBy = GroupBy.AS_IS
    operation_ordering: Ordering = Ordering.AS_IS
    tag_ordering: Ordering = Ordering.AS_IS
    definition_ordering: Ordering = Ordering.AS_IS
    inline_schema_depth_level: int = Field(default=0, ge=0)
    separated_definitions: bool = False
    separated_operations: bool = False
    output_language: Language = Language.EN
    generated_examples: bool = False
    definition_descriptions_path: Path | None = None
    line_separator: LineSeparator = LineSeparator.UNIX

    @property
    def extension(self) -> str:
        """File extension of the configured markup language."""
        return self.markup_language.extension

    @classmethod
    def from_mapping(cls, data: dict) -> "MarkupConfig":
        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigError(str(e)) from e

    @classmethod
    def from_file(cls, file_path: Path) -> "MarkupConfig":
        """Load settings from a YAML mapping of field name to value."""
        try:
            data = yaml.safe_load(file_path.read_text(encoding="utf-8"))
        except (OSError, yaml.YAMLError) as e:
            raise ConfigError(f"Cannot read config: {e}", entity=str(file_path)) from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigError("Config file must contain a mapping", entity=str(file_path))
        return cls.from_mapping(data)

    def merged(self, **overrides) -> "MarkupConfig":
        """Return a copy with the non-None ``overrides`` applied."""
        values = self.model_dump()
        values.update({k: v for k, v in overrides.items() if v is not None})
        return MarkupConfig.from_mapping(values)
