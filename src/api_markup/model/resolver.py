"""Model resolver: turns a parsed Spec into a ResolvedModel.

Every schema reachable from a definition or an operation is walked once.
Anonymous object schemas nested no deeper than the configured inline schema
depth are promoted to synthesized definitions named after their parent chain
(``Pet.category``, ``addPet.body``, ``findPets.response.200``); deeper ones
stay inline and are rendered in place. All references are checked here, so
later stages can look definitions up by name without failing.
"""

import logging
import re

from pydantic import ValidationError

from api_markup.config import MarkupConfig
from api_markup.errors import ResolutionError
from api_markup.model.schema import (
    Definition,
    Property,
    ResolvedModel,
    ResolvedOperation,
    ResolvedParam,
    ResolvedResponse,
)
from api_markup.parser.base import ApiOperation, Spec

logger = logging.getLogger(__name__)

DEFINITIONS_PREFIX = "#/definitions/"

CONSTRAINT_KEYS = (
    "minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum",
    "minLength", "maxLength", "pattern", "minItems", "maxItems", "uniqueItems",
    "collectionFormat",
)


def resolve(spec: Spec, config: MarkupConfig) -> ResolvedModel:
    """Resolve every definition and operation of ``spec``."""
    return _Resolver(spec, config.inline_schema_depth_level).run()


def default_operation_name(method: str, path: str) -> str:
    """Name used for operations without an operationId: ``get_pets_petId``."""
    slug = re.sub(r"[^A-Za-z0-9]+", "_", path).strip("_") or "root"
    return f"{method.lower()}_{slug}"


def file_stem(name: str) -> str:
    """File name (without extension) of a separated operation or definition."""
    return re.sub(r"[\\/]", "_", name)


class _Resolver:
    def __init__(self, spec: Spec, depth_limit: int):
        self.spec = spec
        self.depth_limit = depth_limit
        self.sources = spec.definitions
        self.resolved: dict[str, Definition] = {}
        self.synthesized: dict[str, Definition | None] = {}

    def run(self) -> ResolvedModel:
        for name, raw in self.sources.items():
            try:
                self.resolved[name] = self._definition(name, raw, depth=0)
            except ValidationError as e:
                raise ResolutionError(f"Invalid schema: {e}", entity=name) from e

        operations = self._operations()

        definitions = dict(self.resolved)
        definitions.update(self.synthesized)
        _check_stems(definitions, "definition")
        _check_stems([op.name for op in operations], "operation")
        logger.debug(
            "Resolved %d definitions (%d synthesized) and %d operations",
            len(definitions), len(self.synthesized), len(operations),
        )
        return ResolvedModel(spec=self.spec, definitions=definitions, operations=operations)

    # -- definitions ----------------------------------------------------------

    def _definition(self, name: str, raw: dict, depth: int, parent: str = "") -> Definition:
        schema = self._flatten_all_of(raw, name, frozenset({name}))
        required = set(schema.get("required") or [])
        properties = [
            self._property(prop_name, prop_schema, f"{name}.{prop_name}", depth + 1, name, prop_name in required)
            for prop_name, prop_schema in (schema.get("properties") or {}).items()
        ]

        items = values = None
        schema_type = schema.get("type") or "object"
        if schema_type == "array":
            items = self._property("", schema.get("items") or {}, f"{name}.items", depth + 1, name)
        elif isinstance(schema.get("additionalProperties"), dict) and not properties:
            values = self._property("", schema["additionalProperties"], f"{name}.values", depth + 1, name)

        return Definition(
            name=name,
            type=schema_type,
            title=_text(schema.get("title")),
            description=_text(schema.get("description")),
            properties=properties,
            items=items,
            values=values,
            xml=schema.get("xml") or {},
            example=schema.get("example"),
            synthesized=bool(parent),
            parent=parent,
        )

    def _flatten_all_of(self, schema: dict, entity: str, seen: frozenset = frozenset()) -> dict:
        """Merge an ``allOf`` composition into a single object schema."""
        if "allOf" not in schema:
            return schema

        properties: dict = {}
        required: list = []
        for part in schema["allOf"]:
            if "$ref" in part:
                target = self._ref_name(part["$ref"], entity)
                if target in seen:
                    continue
                part = self._flatten_all_of(self.sources[target], entity, seen | {target})
            else:
                part = self._flatten_all_of(part, entity, seen)
            properties.update(part.get("properties") or {})
            required.extend(part.get("required") or [])

        properties.update(schema.get("properties") or {})
        required.extend(schema.get("required") or [])

        merged = {k: v for k, v in schema.items() if k != "allOf"}
        merged["type"] = "object"
        merged["properties"] = properties
        merged["required"] = required
        return merged

    # -- schemas ----------------------------------------------------------------

    def _property(
        self,
        name: str,
        schema: dict,
        chain: str,
        depth: int,
        owner: str,
        required: bool = False,
    ) -> Property:
        """Resolve one schema node.

        ``depth`` is the nesting level an anonymous object at this node would
        have below its nearest named ancestor; array items and map values
        share the depth of their container.
        """
        common = {
            "name": name,
            "description": _text(schema.get("description")),
            "required": required,
            "read_only": bool(schema.get("readOnly", False)),
            "default": schema.get("default"),
            "example": schema.get("example"),
        }

        if "$ref" in schema:
            target = self._ref_name(schema["$ref"], chain)
            return Property(kind="ref", type=target, ref=target, **common)

        if "allOf" in schema:
            schema = self._flatten_all_of(schema, chain)

        schema_type = schema.get("type") or ("object" if "properties" in schema else "")

        if schema_type == "array" or "items" in schema:
            items = self._property("", schema.get("items") or {}, chain, depth, owner)
            return Property(kind="array", type="array", items=items,
                            constraints=_constraints(schema), **common)

        if schema.get("properties"):
            if depth <= self.depth_limit:
                target = self._synthesize(chain, schema, depth, owner)
                return Property(kind="ref", type=target, ref=target, **common)
            child_required = set(schema.get("required") or [])
            children = [
                self._property(k, v, f"{chain}.{k}", depth + 1, owner, k in child_required)
                for k, v in schema["properties"].items()
            ]
            return Property(kind="object", type="object", properties=children, inline_name=chain, **common)

        if isinstance(schema.get("additionalProperties"), dict):
            values = self._property("", schema["additionalProperties"], chain, depth, owner)
            return Property(kind="map", type="object", values=values, **common)

        return Property(
            kind="primitive",
            type=schema_type or "object",
            format=_text(schema.get("format")),
            enum=schema.get("enum") or [],
            constraints=_constraints(schema),
            **common,
        )

    def _synthesize(self, name: str, schema: dict, depth: int, owner: str) -> str:
        if name in self.sources or name in self.synthesized:
            raise ResolutionError(
                "Synthesized name for inline schema collides with an existing definition",
                entity=name,
            )
        self.synthesized[name] = None  # reserve the slot so the parent precedes its children
        self.synthesized[name] = self._definition(name, schema, depth, parent=owner)
        logger.debug("Promoted inline schema %s (depth %d)", name, depth)
        return name

    def _ref_name(self, ref: str, entity: str) -> str:
        if ref.startswith(DEFINITIONS_PREFIX):
            name = ref[len(DEFINITIONS_PREFIX):].replace("~1", "/").replace("~0", "~")
        elif "/" not in ref and "#" not in ref:
            name = ref
        else:
            raise ResolutionError(f"Unsupported reference '{ref}', only local definitions can be resolved", entity=entity)
        if name not in self.sources:
            raise ResolutionError(f"Unresolved reference '{ref}'", entity=entity)
        return name

    # -- operations -------------------------------------------------------------

    def _operations(self) -> list[ResolvedOperation]:
        result = []
        names: set[str] = set()
        for index, op in enumerate(self.spec.operations):
            name = op.operation_id or default_operation_name(op.method, op.path)
            if name in names:
                raise ResolutionError("Duplicate operation name", entity=name)
            names.add(name)
            try:
                result.append(self._operation(op, name, index))
            except ValidationError as e:
                raise ResolutionError(f"Invalid schema: {e}", entity=name) from e
        return result

    def _operation(self, op: ApiOperation, name: str, index: int) -> ResolvedOperation:
        params = [
            ResolvedParam(
                name=p.name,
                location=p.location,
                required=p.required,
                description=p.description,
                schema_=self._property(p.name, p.schema_, f"{name}.{p.name}", 1, name, p.required),
                default=p.default,
            )
            for p in op.parameters
        ]

        responses = []
        for resp in op.responses:
            chain = f"{name}.response.{resp.status}"
            responses.append(
                ResolvedResponse(
                    status=resp.status,
                    description=resp.description,
                    schema_=self._property("", resp.schema_, chain, 1, name) if resp.schema_ else None,
                    headers=[
                        self._property(h, hs, f"{chain}.{h}", 1, name)
                        for h, hs in resp.headers.items()
                    ],
                    examples=resp.examples,
                )
            )

        security = op.security if op.security is not None else self.spec.security
        for requirement in security:
            for scheme in requirement:
                if scheme not in self.spec.security_definitions:
                    raise ResolutionError(f"Unknown security scheme '{scheme}'", entity=name)

        return ResolvedOperation(
            method=op.method,
            path=op.path,
            name=name,
            operation_id=op.operation_id,
            summary=op.summary,
            description=op.description,
            tags=op.tags,
            consumes=op.consumes or self.spec.consumes,
            produces=op.produces or self.spec.produces,
            parameters=params,
            responses=responses,
            security=security,
            deprecated=op.deprecated,
            index=index,
        )


def _constraints(schema: dict) -> dict:
    return {k: schema[k] for k in CONSTRAINT_KEYS if k in schema}


def _text(value) -> str:
    return "" if value is None else str(value)


def _check_stems(names, kind: str) -> None:
    """Separated files are named by stem, so two names must not share one."""
    seen: dict[str, str] = {}
    for name in names:
        stem = file_stem(name)
        if stem in seen:
            raise ResolutionError(
                f"{kind.capitalize()} file name '{stem}' is shared with '{seen[stem]}'",
                entity=name,
            )
        seen[stem] = name
