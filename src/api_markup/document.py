"""Document assembler: turns section blocks into the final document tree."""

import logging
from pathlib import Path

from api_markup.builder.markup import render
from api_markup.builder.section import SectionOutput, section_file
from api_markup.config import MarkupConfig
from api_markup.errors import OutputError

logger = logging.getLogger(__name__)

SECTION_ORDER = ("overview", "paths", "definitions", "security")


class DocumentTree:
    """Ordered mapping of relative file path to rendered markup."""

    def __init__(self, files: dict[str, str], line_separator: str = "\n"):
        self._files = dict(files)
        self.line_separator = line_separator

    @property
    def files(self) -> dict[str, str]:
        return dict(self._files)

    def __getitem__(self, path: str) -> str:
        return self._files[path]

    def __contains__(self, path: str) -> bool:
        return path in self._files

    def __iter__(self):
        return iter(self._files)

    def __len__(self) -> int:
        return len(self._files)

    def __eq__(self, other) -> bool:
        if not isinstance(other, DocumentTree):
            return NotImplemented
        return list(self._files.items()) == list(other._files.items())

    def __repr__(self) -> str:
        return f"DocumentTree({list(self._files)})"

    def in_folder(self, folder: str) -> list[str]:
        """Paths of the entries directly inside ``folder``."""
        prefix = folder.rstrip("/") + "/"
        return [p for p in self._files if p.startswith(prefix) and "/" not in p[len(prefix):]]

    def as_string(self) -> str:
        """Every document concatenated in tree order."""
        return self.line_separator.join(self._files.values())

    def into_folder(self, output_dir: Path) -> list[Path]:
        """Write one file per entry under ``output_dir``.

        On failure the files and folders created by this call are removed
        again before the error is raised; files that existed before are
        left overwritten.
        """
        created: list[Path] = []
        written: list[Path] = []
        try:
            _make_dirs(output_dir, created)
            for rel_path, content in self._files.items():
                target = output_dir.joinpath(*rel_path.split("/"))
                _make_dirs(target.parent, created)
                existed = target.exists()
                target.write_bytes(content.encode("utf-8"))
                if not existed:
                    created.append(target)
                written.append(target)
                logger.debug("Wrote %s", target)
        except BaseException as e:
            _rollback(created)
            if isinstance(e, OSError):
                raise OutputError(f"Cannot write documents: {e}", entity=str(output_dir)) from e
            raise
        return written


def _make_dirs(path: Path, created: list[Path]) -> None:
    missing = []
    while not path.exists():
        missing.append(path)
        path = path.parent
    for directory in reversed(missing):
        directory.mkdir()
        created.append(directory)


def _rollback(created: list[Path]) -> None:
    for path in reversed(created):
        try:
            if path.is_dir():
                path.rmdir()
            else:
                path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning("Could not remove %s during rollback: %s", path, e)


def assemble(sections: list[SectionOutput], config: MarkupConfig) -> DocumentTree:
    """Lay the sections out as files: the four section documents, then separated entities."""
    by_name = {s.name: s for s in sections}
    missing = [name for name in SECTION_ORDER if name not in by_name]
    if missing:
        raise ValueError(f"Missing sections: {', '.join(missing)}")

    files: dict[str, str] = {}
    for name in SECTION_ORDER:
        files[section_file(name, config)] = render(by_name[name].blocks, config)
    for name in SECTION_ORDER:
        for entity_path, blocks in by_name[name].entities.items():
            files[f"{entity_path}{config.extension}"] = render(blocks, config)

    logger.debug("Assembled %d documents", len(files))
    return DocumentTree(files, config.line_separator.chars)
