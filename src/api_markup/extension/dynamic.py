"""Dynamic content extension: splices markup files found on disk.

For an entity position such as ``definitions:end:Pet`` the files
``<directory>/Pet/end-*<ext>`` are included, in name order; for a section
position such as ``paths:before`` the files ``<directory>/before-*<ext>``.
"""

from pathlib import Path

from api_markup.builder.blocks import Raw
from api_markup.extension.registry import ExtensionContext


class DynamicContentExtension:
    optional = True

    def __init__(self, directory: Path, section: str):
        self.directory = Path(directory)
        self.section = section
        self.name = f"dynamic-{section}"
        self.positions = (f"{section}:*",)

    def __call__(self, context: ExtensionContext) -> list[Raw]:
        folder = self.directory / context.entity if context.entity else self.directory
        if not folder.is_dir():
            return []
        files = sorted(folder.glob(f"{context.point}-*{context.config.extension}"))
        return [Raw(text=f.read_text(encoding="utf-8").rstrip()) for f in files if f.is_file()]
