"""Conversion pipeline: parse -> resolve -> group -> build sections -> assemble."""

import logging
from pathlib import Path

from api_markup.builder.definitions import build_definitions, load_descriptions
from api_markup.builder.labels import Labels
from api_markup.builder.overview import build_overview
from api_markup.builder.paths import build_paths
from api_markup.builder.security import build_security
from api_markup.config import MarkupConfig
from api_markup.document import DocumentTree, assemble
from api_markup.extension.registry import Dispatcher, ExtensionRegistry
from api_markup.model.grouping import group
from api_markup.model.resolver import resolve
from api_markup.parser.base import Spec
from api_markup.parser.swagger import parse_spec

logger = logging.getLogger(__name__)


def convert(spec: Spec, config: MarkupConfig | None = None, registry: ExtensionRegistry | None = None) -> DocumentTree:
    """Run the whole pipeline on a parsed spec."""
    config = config or MarkupConfig()

    model = resolve(spec, config)
    groups = group(model.operations, config, spec.tags)
    labels = Labels(config.output_language.value)
    dispatch = Dispatcher(registry, model, config)
    descriptions = load_descriptions(config.definition_descriptions_path, model.definitions, config.extension)

    sections = [
        build_overview(model, groups, config, labels, dispatch),
        build_paths(model, groups, config, labels, dispatch),
        build_definitions(model, groups, config, labels, dispatch, descriptions=descriptions),
        build_security(model, groups, config, labels, dispatch),
    ]
    tree = assemble(sections, config)
    logger.info("Converted %d operations and %d definitions into %d documents",
                len(model.operations), len(model.definitions), len(tree))
    return tree


class Converter:
    """Convenience wrapper holding the input, the config and the extensions."""

    def __init__(self, spec: Spec, config: MarkupConfig | None = None, registry: ExtensionRegistry | None = None):
        self.spec = spec
        self.config = config or MarkupConfig()
        self.registry = registry or ExtensionRegistry()

    @classmethod
    def from_path(cls, file_path: Path, **kwargs) -> "Converter":
        return cls(parse_spec(Path(file_path)), **kwargs)

    @classmethod
    def from_string(cls, text: str | bytes, **kwargs) -> "Converter":
        return cls(parse_spec(text), **kwargs)

    def build(self) -> DocumentTree:
        return convert(self.spec, self.config, self.registry)
