"""Pieces shared by the section builders."""

import json
import posixpath
from typing import Any

from pydantic import BaseModel, ConfigDict

from api_markup.builder.blocks import Block, Heading, Table
from api_markup.builder.labels import Labels
from api_markup.builder.markup import anchor, bold, cross_reference, monospace
from api_markup.config import MarkupConfig, MarkupLanguage
from api_markup.model.resolver import file_stem
from api_markup.model.schema import Property

DEFINITIONS_DIR = "definitions"
OPERATIONS_DIR = "operations"

_CONSTRAINT_LABELS = {
    "minimum": "minimum",
    "maximum": "maximum",
    "minLength": "min_length",
    "maxLength": "max_length",
    "pattern": "pattern",
}


class SectionOutput(BaseModel):
    """Blocks of one section, plus one block list per separated entity.

    ``entities`` maps the entity file path (relative to the output root,
    without extension) to its blocks.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    blocks: list[Block]
    entities: dict[str, list[Block]] = {}


def section_file(name: str, config: MarkupConfig) -> str:
    return f"{name}{config.extension}"


def entity_path(directory: str, name: str) -> str:
    """Path of a separated entity file, relative to the output root, without extension."""
    return f"{directory}/{file_stem(name)}"


def definition_file(name: str, config: MarkupConfig) -> str:
    if config.separated_definitions:
        return f"{entity_path(DEFINITIONS_DIR, name)}{config.extension}"
    return section_file("definitions", config)


def operation_file(name: str, config: MarkupConfig) -> str:
    if config.separated_operations:
        return f"{entity_path(OPERATIONS_DIR, name)}{config.extension}"
    return section_file("paths", config)


class Links:
    """Cross references as seen from one output file."""

    def __init__(self, config: MarkupConfig, current_file: str):
        self.config = config
        self.language = config.markup_language
        self.current_file = current_file

    def to(self, name: str, text: str, target_file: str) -> str:
        # AsciiDoc resolves anchors across included documents; Markdown needs the file.
        if self.language is MarkupLanguage.ASCIIDOC or target_file == self.current_file:
            return cross_reference(name, text, self.language)
        start = posixpath.dirname(self.current_file) or "."
        return cross_reference(name, text, self.language, posixpath.relpath(target_file, start))

    def definition(self, name: str) -> str:
        return self.to(name, name, definition_file(name, self.config))

    def inline(self, inline_name: str) -> str:
        return cross_reference(inline_name, "object", self.language)


def schema_label(prop: Property, links: Links) -> str:
    """Text of the Schema column for ``prop``."""
    if prop.kind == "ref":
        return links.definition(prop.ref)
    if prop.kind == "array":
        inner = schema_label(prop.items, links) if prop.items else "object"
        return f"< {inner} > array"
    if prop.kind == "map":
        inner = schema_label(prop.values, links) if prop.values else "object"
        return f"< string, {inner} > map"
    if prop.kind == "object":
        return links.inline(prop.inline_name)
    if prop.enum:
        return "enum (" + ", ".join(str(v) for v in prop.enum) + ")"
    if prop.format:
        return f"{prop.type} ({prop.format})"
    return prop.type


def value_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def description_text(prop: Property, labels: Labels, language: MarkupLanguage) -> str:
    """Description cell: the description followed by the property's constraints."""
    parts = [prop.description] if prop.description else []
    if prop.read_only:
        parts.append(bold(labels.get("read_only"), language))
    for key, value in prop.constraints.items():
        label = labels.get(_CONSTRAINT_LABELS[key]) if key in _CONSTRAINT_LABELS else key
        parts.append(f"{bold(label, language)} : {monospace(value_text(value), language)}")
    return "\n".join(parts)


def inline_objects(props: list[Property]) -> list[Property]:
    """Inline object schemas directly under ``props`` (through arrays and maps)."""
    found = []
    for prop in props:
        node = prop
        while node is not None and node.kind in ("array", "map"):
            node = node.items if node.kind == "array" else node.values
        if node is not None and node.kind == "object":
            found.append(node)
    return found


def property_tables(
    props: list[Property],
    links: Links,
    labels: Labels,
    level: int,
    with_examples: bool = True,
) -> list[Block]:
    """Property table for ``props``, then one table per inline object they contain."""
    language = links.language
    show_example = with_examples and any(p.example is not None for p in props)
    headers = [labels.get(k) for k in ("name", "description", "required", "schema", "default")]
    if show_example:
        headers.append(labels.get("example"))

    rows = []
    for prop in props:
        row = [
            bold(prop.name, language) if prop.required else prop.name,
            description_text(prop, labels, language),
            labels.get("required") if prop.required else labels.get("optional"),
            schema_label(prop, links),
            value_text(prop.default),
        ]
        if show_example:
            row.append(value_text(prop.example))
        rows.append(row)

    blocks: list[Block] = [Table(headers=headers, rows=rows, key="properties")]
    for obj in inline_objects(props):
        blocks.append(Heading(level=level, text=obj.inline_name, anchor=anchor(obj.inline_name, language)))
        blocks.extend(property_tables(obj.properties, links, labels, level + 1, with_examples))
    return blocks
