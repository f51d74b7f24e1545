import dataclasses
import logging
from pathlib import Path

import pytest

from api_markup.builder.blocks import CodeBlock, Heading, Paragraph, Raw
from api_markup.config import MarkupConfig
from api_markup.errors import ExtensionError
from api_markup.extension.dynamic import DynamicContentExtension
from api_markup.extension.registry import Dispatcher, ExtensionContext, ExtensionRegistry, position
from api_markup.extension.restdocs import SpringRestDocsExtension
from api_markup.extension.schema import SchemaExtension
from api_markup.model.resolver import resolve
from api_markup.parser.swagger import parse_spec

FIXTURES = Path(__file__).parent / "fixtures"

CONFIG = MarkupConfig()
MODEL = resolve(parse_spec(FIXTURES / "petstore.yaml"), CONFIG)


def _context(position_id: str, level: int = 3, operation=None, definition=None) -> ExtensionContext:
    section, point, *rest = position_id.split(":")
    return ExtensionContext(
        position=position_id,
        section=section,
        point=point,
        model=MODEL,
        config=CONFIG,
        level=level,
        entity=rest[0] if rest else "",
        operation=operation,
        definition=definition,
    )


def _text(text):
    return lambda context: [Paragraph(text=text)]


def _failing(context):
    raise ExtensionError("backing content missing")


def _missing_snippet(context):
    return (FIXTURES / "snippets" / "snippet.adoc").read_text(encoding="utf-8")


class TestPosition:
    def test_entity_position(self):
        assert position("definitions", "after", "Pet") == "definitions:after:Pet"

    def test_section_position(self):
        assert position("paths", "before") == "paths:before"

    def test_unknown_section(self):
        with pytest.raises(ValueError):
            position("appendix", "before")


class TestDispatch:
    def test_registration_order_is_dispatch_order(self):
        registry = ExtensionRegistry()
        registry.register("definitions:after:Pet", _text("A"))
        registry.register("definitions:after:Pet", _text("B"))
        blocks = registry.dispatch(_context("definitions:after:Pet"))
        assert [b.text for b in blocks] == ["A", "B"]

    def test_only_matching_positions(self):
        registry = ExtensionRegistry()
        registry.register("definitions:after:Pet", _text("pet"))
        registry.register("definitions:after:Tag", _text("tag"))
        blocks = registry.dispatch(_context("definitions:after:Tag"))
        assert [b.text for b in blocks] == ["tag"]

    def test_patterns(self):
        registry = ExtensionRegistry().register("definitions:end:*", _text("any"))
        assert registry.dispatch(_context("definitions:end:Order"))
        assert registry.dispatch(_context("definitions:end")) == []
        assert registry.dispatch(_context("paths:end:addPet")) == []

    def test_string_result_wrapped_as_raw(self):
        registry = ExtensionRegistry().register("paths:before", lambda context: "== Intro")
        assert registry.dispatch(_context("paths:before")) == [Raw(text="== Intro")]

    def test_none_result_is_empty(self):
        registry = ExtensionRegistry().register("paths:before", lambda context: None)
        assert registry.dispatch(_context("paths:before")) == []

    def test_required_extension_failure_aborts(self):
        registry = ExtensionRegistry().register("definitions:end:Pet", _failing, name="snippets")
        with pytest.raises(ExtensionError) as exc:
            registry.dispatch(_context("definitions:end:Pet"))
        assert exc.value.position == "definitions:end:Pet"
        assert exc.value.entity == "snippets"

    def test_optional_extension_failure_degrades(self, caplog):
        registry = ExtensionRegistry()
        registry.register("definitions:end:Pet", _failing, optional=True)
        registry.register("definitions:end:Pet", _text("still here"))
        with caplog.at_level(logging.WARNING):
            blocks = registry.dispatch(_context("definitions:end:Pet"))
        assert [b.text for b in blocks] == ["still here"]
        assert "skipped" in caplog.text

    def test_unexpected_error_wrapped_with_position(self):
        registry = ExtensionRegistry().register("definitions:end:*", _missing_snippet, name="snippets")
        with pytest.raises(ExtensionError) as exc:
            registry.dispatch(_context("definitions:end:Pet"))
        assert exc.value.position == "definitions:end:Pet"
        assert exc.value.entity == "snippets"
        assert "FileNotFoundError" in exc.value.message
        assert isinstance(exc.value.__cause__, FileNotFoundError)

    def test_optional_extension_unexpected_error_degrades(self, caplog):
        registry = ExtensionRegistry()
        registry.register("definitions:end:*", _missing_snippet, optional=True)
        registry.register("definitions:end:*", _text("still here"))
        with caplog.at_level(logging.WARNING):
            blocks = registry.dispatch(_context("definitions:end:Pet"))
        assert [b.text for b in blocks] == ["still here"]
        assert "snippet.adoc" in caplog.text

    def test_context_is_read_only(self):
        context = _context("paths:before")
        with pytest.raises(dataclasses.FrozenInstanceError):
            context.entity = "other"


class TestDispatcher:
    def test_empty_registry(self):
        dispatch = Dispatcher(None, MODEL, CONFIG)
        assert dispatch("definitions", "after", "Pet") == []

    def test_builds_context(self):
        seen = []
        registry = ExtensionRegistry().register("paths:end:addPet", lambda context: seen.append(context))
        dispatch = Dispatcher(registry, MODEL, CONFIG)
        dispatch("paths", "end", "addPet", 4, operation=MODEL.operation("addPet"))
        assert seen[0].position == "paths:end:addPet"
        assert seen[0].level == 4
        assert seen[0].operation.name == "addPet"


class TestDynamicContentExtension:
    def test_entity_files_spliced(self):
        ext = DynamicContentExtension(FIXTURES / "extensions", "definitions")
        blocks = ext(_context("definitions:end:Pet"))
        assert blocks == [Raw(text="Pet extension")]

    def test_missing_folder_is_empty(self):
        ext = DynamicContentExtension(FIXTURES / "extensions", "definitions")
        assert ext(_context("definitions:end:Order")) == []

    def test_registered_through_add(self):
        registry = ExtensionRegistry().add(DynamicContentExtension(FIXTURES / "extensions", "paths"))
        blocks = registry.dispatch(_context("paths:parameters-before:updatePet"))
        assert blocks == [Raw(text="Pet update request extension")]


class TestSchemaExtension:
    def test_xml_schema_block(self):
        ext = SchemaExtension(FIXTURES / "schemas")
        blocks = ext(_context("definitions:end:Pet", level=3))
        assert blocks[0] == Heading(level=3, text="XML Schema")
        assert isinstance(blocks[1], CodeBlock)
        assert blocks[1].language == "xml"
        assert "xs:schema" in blocks[1].text

    def test_missing_schema_degrades_when_optional(self):
        registry = ExtensionRegistry().add(SchemaExtension(FIXTURES / "schemas"))
        assert registry.dispatch(_context("definitions:end:Order")) == []

    def test_missing_schema_aborts_when_required(self):
        registry = ExtensionRegistry().add(SchemaExtension(FIXTURES / "schemas"), optional=False)
        with pytest.raises(ExtensionError, match="No schema file"):
            registry.dispatch(_context("definitions:end:Order"))


class TestSpringRestDocsExtension:
    def test_snippets_included(self):
        ext = SpringRestDocsExtension(FIXTURES / "restdocs")
        blocks = ext(_context("paths:end:addPet", level=4, operation=MODEL.operation("addPet")))
        assert [b.text for b in blocks if isinstance(b, Heading)] == [
            "Example Curl request", "Example HTTP request", "Example HTTP response",
        ]
        assert "curl http://localhost/pets" in blocks[1].text

    def test_missing_snippet_aborts(self):
        registry = ExtensionRegistry().add(SpringRestDocsExtension(FIXTURES / "restdocs"))
        context = _context("paths:end:updatePet", operation=MODEL.operation("updatePet"))
        with pytest.raises(ExtensionError, match="Missing snippet") as exc:
            registry.dispatch(context)
        assert exc.value.entity == "updatePet"
