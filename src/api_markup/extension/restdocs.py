"""Spring REST Docs extension: appends generated request/response snippets to operations.

Snippets are read from ``<directory>/<operationId>/<snippet><ext>``.
"""

from pathlib import Path

from api_markup.builder.blocks import Block, Heading, Raw
from api_markup.errors import ExtensionError
from api_markup.extension.registry import ExtensionContext

DEFAULT_SNIPPETS = (
    ("curl-request", "Example Curl request"),
    ("http-request", "Example HTTP request"),
    ("http-response", "Example HTTP response"),
)


class SpringRestDocsExtension:
    name = "spring-rest-docs"
    positions = ("paths:end:*",)
    optional = False

    def __init__(self, directory: Path, snippets=DEFAULT_SNIPPETS):
        self.directory = Path(directory)
        self.snippets = tuple(snippets)

    def __call__(self, context: ExtensionContext) -> list[Block]:
        op = context.operation
        folder = self.directory / (op.operation_id or op.name)
        blocks: list[Block] = []
        for snippet, title in self.snippets:
            path = folder / f"{snippet}{context.config.extension}"
            if not path.is_file():
                raise ExtensionError(f"Missing snippet {path}", entity=op.name)
            blocks.append(Heading(level=context.level, text=title))
            blocks.append(Raw(text=path.read_text(encoding="utf-8").rstrip()))
        return blocks
