"""Markup writer: renders blocks as AsciiDoc or Markdown text.

Block level formatting lives in ``render``; the small inline helpers
(``bold``, ``monospace``, ``cross_reference``) are used by the builders while
they assemble cell and paragraph text.
"""

import re

from api_markup.builder.blocks import Block, BulletList, CodeBlock, Heading, Include, Paragraph, Raw, Table
from api_markup.config import MarkupConfig, MarkupLanguage


def anchor(name: str, language: MarkupLanguage) -> str:
    """Anchor id for ``name``: ``_pet_category`` (AsciiDoc) or ``pet-category`` (Markdown)."""
    if language is MarkupLanguage.ASCIIDOC:
        return "_" + re.sub(r"[^a-z0-9]+", "_", name.lower()).strip("_")
    return re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")


def bold(text: str, language: MarkupLanguage) -> str:
    return f"*{text}*" if language is MarkupLanguage.ASCIIDOC else f"**{text}**"


def monospace(text: str, language: MarkupLanguage) -> str:
    return f"`{text}`"


def cross_reference(name: str, text: str, language: MarkupLanguage, document: str = "") -> str:
    """Link to the anchor of ``name``, in ``document`` when it lives in another file."""
    target = anchor(name, language)
    if language is MarkupLanguage.ASCIIDOC:
        return f"<<{document}#{target},{text}>>" if document else f"<<{target},{text}>>"
    return f"[{text}]({document}#{target})"


def render(blocks: list[Block], config: MarkupConfig) -> str:
    """Render ``blocks`` into one document using the configured line separator."""
    language = config.markup_language
    lines: list[str] = []
    for block in blocks:
        lines.extend(_render_block(block, language))
        lines.append("")
    return config.line_separator.chars.join(lines)


def _render_block(block: Block, language: MarkupLanguage) -> list[str]:
    adoc = language is MarkupLanguage.ASCIIDOC

    if isinstance(block, Heading):
        marker = ("=" if adoc else "#") * min(block.level + 1, 6)
        lines = []
        if block.anchor:
            lines.append(f"[[{block.anchor}]]" if adoc else f'<a name="{block.anchor}"></a>')
        lines.append(f"{marker} {block.text}")
        return lines

    if isinstance(block, Paragraph):
        return block.text.splitlines() or [""]

    if isinstance(block, Table):
        return _render_table(block, adoc)

    if isinstance(block, CodeBlock):
        body = block.text.splitlines()
        if adoc:
            head = [f"[source,{block.language}]"] if block.language else []
            return head + ["----"] + body + ["----"]
        return [f"```{block.language}"] + body + ["```"]

    if isinstance(block, BulletList):
        return [f"* {item}" for item in block.items]

    if isinstance(block, Raw):
        return block.text.splitlines()

    if isinstance(block, Include):
        if adoc:
            return [f"include::{block.target}[]"]
        return [f"[{block.title or block.target}]({block.target})"]

    raise TypeError(f"Unknown block type: {type(block).__name__}")


def _render_table(table: Table, adoc: bool) -> list[str]:
    if adoc:
        lines = ['[options="header"]', "|==="]
        lines.append("|" + "|".join(_adoc_cell(h) for h in table.headers))
        for row in table.rows:
            lines.extend(("|" + "|".join(_adoc_cell(c) for c in row)).splitlines())
        lines.append("|===")
        return lines

    lines = ["|" + "|".join(_md_cell(h) for h in table.headers) + "|"]
    lines.append("|" + "|".join("---" for _ in table.headers) + "|")
    for row in table.rows:
        lines.append("|" + "|".join(_md_cell(c) for c in row) + "|")
    return lines


def _adoc_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", " +\n")


def _md_cell(text: str) -> str:
    return text.replace("|", "\\|").replace("\n", "<br>")
