"""Extension registry: splices third-party content into the section builders.

Builders expose named positions such as ``definitions:end:Pet`` or
``paths:parameters-before:addPet``. An extension is any callable taking an
ExtensionContext and returning blocks (a plain string is wrapped as raw
markup). Extensions are registered against position ids or ``fnmatch``
patterns and run in registration order.
"""

import logging
from dataclasses import dataclass
from fnmatch import fnmatchcase
from typing import Callable

from api_markup.builder.blocks import Block, Raw
from api_markup.config import MarkupConfig
from api_markup.errors import ExtensionError
from api_markup.model.schema import Definition, ResolvedModel, ResolvedOperation

logger = logging.getLogger(__name__)

SECTIONS = ("overview", "paths", "definitions", "security")

BEFORE = "before"
BEGIN = "begin"
END = "end"
AFTER = "after"
PARAMETERS_BEFORE = "parameters-before"
PARAMETERS_AFTER = "parameters-after"
RESPONSES_BEFORE = "responses-before"
RESPONSES_AFTER = "responses-after"


def position(section: str, point: str, entity: str = "") -> str:
    """Position id: ``<section>:<point>`` or ``<section>:<point>:<entity>``."""
    if section not in SECTIONS:
        raise ValueError(f"Unknown section '{section}'")
    return f"{section}:{point}:{entity}" if entity else f"{section}:{point}"


@dataclass(frozen=True)
class ExtensionContext:
    """Read-only data handed to an extension."""

    position: str
    section: str
    point: str
    model: ResolvedModel
    config: MarkupConfig
    level: int = 1  # heading level the extension content should start at
    entity: str = ""
    operation: ResolvedOperation | None = None
    definition: Definition | None = None


Extension = Callable[[ExtensionContext], "list[Block] | str | None"]


@dataclass(frozen=True)
class Registration:
    patterns: tuple[str, ...]
    handler: Extension
    optional: bool
    name: str

    def matches(self, position_id: str) -> bool:
        return any(fnmatchcase(position_id, p) for p in self.patterns)


class ExtensionRegistry:
    """Ordered collection of extensions, and the single dispatch point."""

    def __init__(self):
        self._registrations: list[Registration] = []

    def register(
        self,
        positions: str | list[str] | tuple[str, ...],
        handler: Extension,
        optional: bool = False,
        name: str | None = None,
    ) -> "ExtensionRegistry":
        """Register ``handler`` for ``positions``; returns the registry for chaining."""
        if isinstance(positions, str):
            positions = (positions,)
        self._registrations.append(
            Registration(
                patterns=tuple(positions),
                handler=handler,
                optional=optional,
                name=name or getattr(handler, "name", None) or type(handler).__name__,
            )
        )
        return self

    def add(self, extension, optional: bool | None = None) -> "ExtensionRegistry":
        """Register an extension object that declares its own ``positions``.

        ``optional`` defaults to the extension's ``optional`` attribute.
        """
        if optional is None:
            optional = getattr(extension, "optional", False)
        return self.register(extension.positions, extension, optional=optional)

    def __len__(self) -> int:
        return len(self._registrations)

    def dispatch(self, context: ExtensionContext) -> list[Block]:
        """Run every extension registered for ``context.position``, in registration order."""
        blocks: list[Block] = []
        for reg in self._registrations:
            if not reg.matches(context.position):
                continue
            try:
                produced = reg.handler(context)
            except ExtensionError as e:
                if reg.optional:
                    logger.warning("Optional extension %s skipped at %s: %s", reg.name, context.position, e)
                    continue
                raise ExtensionError(e.message, entity=e.entity or reg.name, position=context.position) from e
            except Exception as e:
                if reg.optional:
                    logger.warning("Optional extension %s skipped at %s: %s", reg.name, context.position, e)
                    continue
                raise ExtensionError(f"{type(e).__name__}: {e}", entity=reg.name, position=context.position) from e
            blocks.extend(_as_blocks(produced))
        return blocks


class Dispatcher:
    """Binds a registry to one build so builders only pass what varies per position."""

    def __init__(self, registry: ExtensionRegistry | None, model: ResolvedModel, config: MarkupConfig):
        self.registry = registry or ExtensionRegistry()
        self.model = model
        self.config = config

    def __call__(
        self,
        section: str,
        point: str,
        entity: str = "",
        level: int = 1,
        operation: ResolvedOperation | None = None,
        definition: Definition | None = None,
    ) -> list[Block]:
        if not len(self.registry):
            return []
        context = ExtensionContext(
            position=position(section, point, entity),
            section=section,
            point=point,
            model=self.model,
            config=self.config,
            level=level,
            entity=entity,
            operation=operation,
            definition=definition,
        )
        return self.registry.dispatch(context)


def _as_blocks(produced) -> list[Block]:
    if not produced:
        return []
    if isinstance(produced, str):
        return [Raw(text=produced)]
    return list(produced)
