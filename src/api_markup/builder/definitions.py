"""Definitions section: one entry per resolved definition."""

import logging
from pathlib import Path

from api_markup.builder.blocks import Block, CodeBlock, Heading, Include, Paragraph, Raw, Table
from api_markup.builder.examples import definition_example, format_example
from api_markup.builder.labels import Labels
from api_markup.builder.markup import anchor, bold
from api_markup.builder.section import (
    DEFINITIONS_DIR,
    Links,
    SectionOutput,
    definition_file,
    entity_path,
    property_tables,
    schema_label,
    value_text,
)
from api_markup.config import MarkupConfig, Ordering
from api_markup.extension.registry import AFTER, BEFORE, BEGIN, END, Dispatcher
from api_markup.model.grouping import GroupTree
from api_markup.model.schema import Definition, ResolvedModel

logger = logging.getLogger(__name__)

SECTION = "definitions"

DEFINITION_LEVEL = 2

DESCRIPTION_FILE = "description"


def load_descriptions(directory: Path | None, names, extension: str) -> dict[str, str]:
    """Read ``<directory>/<Name>/description<ext>`` for every definition that has one."""
    if directory is None:
        return {}
    descriptions = {}
    for name in names:
        path = directory / name / f"{DESCRIPTION_FILE}{extension}"
        if path.is_file():
            descriptions[name] = path.read_text(encoding="utf-8").strip()
            logger.debug("Using external description for %s", name)
    return descriptions


def build_definitions(
    model: ResolvedModel,
    groups: GroupTree,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
    descriptions: dict[str, str] | None = None,
) -> SectionOutput:
    language = config.markup_language
    descriptions = descriptions or {}
    blocks: list[Block] = []
    entities: dict[str, list[Block]] = {}

    blocks.extend(dispatch(SECTION, BEFORE, level=1))
    blocks.append(Heading(level=1, text=labels.get("definitions"), key="definitions",
                          anchor=anchor("definitions", language)))
    blocks.extend(dispatch(SECTION, BEGIN, level=2))

    names = list(model.definitions)
    if config.definition_ordering is Ordering.NATURAL:
        names.sort()

    for name in names:
        definition = model.definitions[name]
        blocks.extend(dispatch(SECTION, BEFORE, name, DEFINITION_LEVEL, definition=definition))
        def_blocks = _definition(definition, model, config, labels, dispatch, descriptions.get(name))
        if config.separated_definitions:
            entities[entity_path(DEFINITIONS_DIR, name)] = def_blocks
            blocks.append(Include(target=definition_file(name, config), title=name))
        else:
            blocks.extend(def_blocks)
        blocks.extend(dispatch(SECTION, AFTER, name, DEFINITION_LEVEL, definition=definition))

    blocks.extend(dispatch(SECTION, END, level=2))
    blocks.extend(dispatch(SECTION, AFTER, level=1))
    return SectionOutput(name=SECTION, blocks=blocks, entities=entities)


def _definition(
    definition: Definition,
    model: ResolvedModel,
    config: MarkupConfig,
    labels: Labels,
    dispatch: Dispatcher,
    external_description: str | None,
) -> list[Block]:
    language = config.markup_language
    links = Links(config, definition_file(definition.name, config))
    level = DEFINITION_LEVEL
    sub = level + 1

    blocks: list[Block] = [Heading(level=level, text=definition.name, anchor=anchor(definition.name, language))]
    blocks.extend(dispatch(SECTION, BEGIN, definition.name, sub, definition=definition))

    if external_description:
        blocks.append(Raw(text=external_description))
    elif definition.description:
        blocks.append(Paragraph(text=definition.description))

    if definition.properties:
        blocks.extend(property_tables(definition.properties, links, labels, sub))
    elif definition.items is not None:
        blocks.append(Paragraph(text=f"{bold(labels.get('type'), language)} : < {schema_label(definition.items, links)} > array"))
    elif definition.values is not None:
        blocks.append(Paragraph(text=f"{bold(labels.get('type'), language)} : < string, {schema_label(definition.values, links)} > map"))
    else:
        blocks.append(Paragraph(text=f"{bold(labels.get('type'), language)} : {definition.type}"))

    if definition.xml:
        blocks.append(Heading(level=sub, text=labels.get("xml"), key="xml"))
        keys = ("name", "namespace", "prefix", "attribute", "wrapped")
        blocks.append(Table(
            headers=[labels.get(k) for k in keys],
            rows=[[value_text(definition.xml.get(k)) for k in keys]],
            key="xml",
        ))

    example = definition_example(definition, model, config.generated_examples)
    if example is not None:
        blocks.append(Heading(level=sub, text=labels.get("example"), key="example"))
        blocks.append(CodeBlock(text=format_example(example), language="json"))

    blocks.extend(dispatch(SECTION, END, definition.name, sub, definition=definition))
    return blocks
