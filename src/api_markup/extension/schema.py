"""Schema extension: appends XML and JSON schema files to definitions."""

from pathlib import Path

from api_markup.builder.blocks import Block, CodeBlock, Heading
from api_markup.errors import ExtensionError
from api_markup.extension.registry import ExtensionContext

SCHEMA_FILES = (
    ("schema.xsd", "XML Schema", "xml"),
    ("schema.json", "JSON Schema", "json"),
)


class SchemaExtension:
    """Reads ``<directory>/<Definition>/schema.xsd`` and ``schema.json``."""

    name = "schema"
    positions = ("definitions:end:*",)
    optional = True

    def __init__(self, directory: Path):
        self.directory = Path(directory)

    def __call__(self, context: ExtensionContext) -> list[Block]:
        folder = self.directory / context.entity
        blocks: list[Block] = []
        for filename, title, language in SCHEMA_FILES:
            path = folder / filename
            if path.is_file():
                blocks.append(Heading(level=context.level, text=title))
                blocks.append(CodeBlock(text=path.read_text(encoding="utf-8").rstrip(), language=language))
        if not blocks:
            raise ExtensionError(f"No schema file in {folder}", entity=context.entity)
        return blocks
