"""Grouping strategies: bucket operations for the paths section."""

import logging

from pydantic import BaseModel, ConfigDict

from api_markup.config import GroupBy, MarkupConfig, Ordering
from api_markup.errors import GroupingError
from api_markup.model.schema import ResolvedOperation
from api_markup.parser.base import Tag

logger = logging.getLogger(__name__)


class Group(BaseModel):
    """A named bucket of operations.

    Under AS_IS grouping ``path`` is the URL prefix the node stands for and
    ``children`` holds the deeper path segments; tag groups are flat.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    path: str = ""
    description: str = ""
    operations: list[ResolvedOperation] = []
    children: list["Group"] = []


class GroupTree(BaseModel):
    model_config = ConfigDict(frozen=True)

    strategy: GroupBy
    groups: list[Group]

    def walk(self):
        """Yield every group, depth first, in document order."""
        stack = list(reversed(self.groups))
        while stack:
            group = stack.pop()
            yield group
            stack.extend(reversed(group.children))

    def leaves(self) -> list[Group]:
        """Groups that hold operations."""
        return [g for g in self.walk() if g.operations]

    def operations(self) -> list[ResolvedOperation]:
        return [op for g in self.leaves() for op in g.operations]


def group(operations: list[ResolvedOperation], config: MarkupConfig, tags: list[Tag] | None = None) -> GroupTree:
    """Bucket ``operations`` with the configured strategy."""
    if config.group_by is GroupBy.TAGS:
        groups = _group_by_tags(operations, tags or [], config)
    else:
        groups = _group_as_is(operations, config)
    tree = GroupTree(strategy=config.group_by, groups=groups)
    logger.debug("Grouped %d operations into %d groups", len(operations), len(tree.leaves()))
    return tree


def _order(operations: list[ResolvedOperation], ordering: Ordering) -> list[ResolvedOperation]:
    if ordering is Ordering.NATURAL:
        return sorted(operations, key=lambda op: (op.path, op.method))
    return sorted(operations, key=lambda op: op.index)


def _group_by_tags(operations: list[ResolvedOperation], tags: list[Tag], config: MarkupConfig) -> list[Group]:
    buckets: dict[str, list[ResolvedOperation]] = {t.name: [] for t in tags}
    for op in operations:
        if not op.tags:
            raise GroupingError(f"Can't group by tags: operation '{op.name}' has no tags", entity=op.name)
        buckets.setdefault(op.tags[0], []).append(op)

    descriptions = {t.name: t.description for t in tags}
    names = [name for name, ops in buckets.items() if ops]
    if config.tag_ordering is Ordering.NATURAL:
        names.sort()

    return [
        Group(
            name=name,
            description=descriptions.get(name, ""),
            operations=_order(buckets[name], config.operation_ordering),
        )
        for name in names
    ]


class _Node:
    """Mutable path-segment node used while building the AS_IS tree."""

    def __init__(self, name: str, path: str):
        self.name = name
        self.path = path
        self.operations: list[ResolvedOperation] = []
        self.children: dict[str, "_Node"] = {}

    def freeze(self, config: MarkupConfig) -> Group:
        children = list(self.children.values())
        if config.operation_ordering is Ordering.NATURAL:
            children.sort(key=lambda n: n.name)
        return Group(
            name=self.name,
            path=self.path,
            operations=_order(self.operations, config.operation_ordering),
            children=[c.freeze(config) for c in children],
        )


def _group_as_is(operations: list[ResolvedOperation], config: MarkupConfig) -> list[Group]:
    root = _Node("", "")
    for op in sorted(operations, key=lambda o: o.index):
        node = root
        segments = [s for s in op.path.split("/") if s]
        if not segments:
            node = root.children.setdefault("/", _Node("/", "/"))
        for segment in segments:
            path = f"{node.path.rstrip('/')}/{segment}"
            node = node.children.setdefault(segment, _Node(segment, path))
        node.operations.append(op)
    return root.freeze(config).children
