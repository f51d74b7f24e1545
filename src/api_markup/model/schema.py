"""Resolved in-memory model.

Definitions live in one flat table keyed by name; every cross reference
(property to definition, operation to definition) is a name into that table,
so recursive schemas need no special handling.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict

from api_markup.parser.base import Spec

PropertyKind = Literal["primitive", "ref", "array", "map", "object"]


class Property(BaseModel):
    """A resolved schema node."""

    model_config = ConfigDict(frozen=True)

    name: str = ""
    kind: PropertyKind = "primitive"
    type: str = "string"
    format: str = ""
    description: str = ""
    required: bool = False
    read_only: bool = False
    default: Any = None
    example: Any = None
    enum: list[Any] = []
    constraints: dict = {}  # minimum, maxLength, pattern, ...
    ref: str | None = None  # definition name, for kind == "ref"
    items: "Property | None" = None  # kind == "array"
    values: "Property | None" = None  # kind == "map"
    properties: list["Property"] = []  # kind == "object", left inline
    inline_name: str = ""  # name chain of an inline object


class Definition(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    type: str = "object"
    title: str = ""
    description: str = ""
    properties: list[Property] = []
    items: Property | None = None  # array-typed definitions
    values: Property | None = None  # map-typed definitions
    xml: dict = {}
    example: Any = None
    synthesized: bool = False
    parent: str = ""


class ResolvedParam(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    location: str
    required: bool
    description: str = ""
    schema_: Property
    default: Any = None


class ResolvedResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    description: str = ""
    schema_: Property | None = None
    headers: list[Property] = []
    examples: dict[str, Any] = {}


class ResolvedOperation(BaseModel):
    model_config = ConfigDict(frozen=True)

    method: str
    path: str
    name: str  # unique canonical name, used for anchors and file names
    operation_id: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    consumes: list[str] = []
    produces: list[str] = []
    parameters: list[ResolvedParam] = []
    responses: list[ResolvedResponse] = []
    security: list[dict[str, list[str]]] = []
    deprecated: bool = False
    index: int = 0

    @property
    def key(self) -> tuple[str, str]:
        return self.path, self.method

    @property
    def title(self) -> str:
        return self.summary or f"{self.method} {self.path}"


class ResolvedModel(BaseModel):
    model_config = ConfigDict(frozen=True)

    spec: Spec
    definitions: dict[str, Definition]
    operations: list[ResolvedOperation]

    def definition(self, name: str) -> Definition:
        return self.definitions[name]

    def operation(self, name: str) -> ResolvedOperation:
        for op in self.operations:
            if op.name == name:
                return op
        raise KeyError(name)
