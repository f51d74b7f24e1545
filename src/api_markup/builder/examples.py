"""Example payloads for request bodies and responses.

Explicit ``example`` values win; otherwise, when generated examples are
enabled, a value is synthesized from the schema. Recursive definitions stop at
the first repetition with an empty object.
"""

import json
from typing import Any

from api_markup.model.schema import Definition, Property, ResolvedModel

_FORMAT_SAMPLES = {
    "date": "1970-01-01",
    "date-time": "1970-01-01T00:00:00Z",
    "uuid": "00000000-0000-0000-0000-000000000000",
    "email": "user@example.com",
    "uri": "http://example.com",
    "byte": "Ynl0ZXM=",
    "password": "********",
}

_TYPE_SAMPLES = {
    "string": "string",
    "integer": 0,
    "number": 0.0,
    "boolean": True,
    "file": "file",
    "object": {},
}


def example_for(prop: Property, model: ResolvedModel, generate: bool) -> Any:
    """Example value for ``prop``, or None when there is none to show."""
    if prop.example is not None:
        return prop.example
    if prop.kind == "ref":
        definition = model.definitions[prop.ref]
        if definition.example is not None:
            return definition.example
    if not generate:
        return None
    return _generate(prop, model, frozenset())


def format_example(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2, ensure_ascii=False)


def _generate(prop: Property, model: ResolvedModel, seen: frozenset) -> Any:
    if prop.example is not None:
        return prop.example
    if prop.kind == "ref":
        if prop.ref in seen:
            return {}
        return _generate_definition(model.definitions[prop.ref], model, seen | {prop.ref})
    if prop.kind == "array":
        return [_generate(prop.items, model, seen)] if prop.items else []
    if prop.kind == "map":
        return {"string": _generate(prop.values, model, seen)} if prop.values else {}
    if prop.kind == "object":
        return {p.name: _generate(p, model, seen) for p in prop.properties}
    if prop.default is not None:
        return prop.default
    if prop.enum:
        return prop.enum[0]
    if prop.format in _FORMAT_SAMPLES:
        return _FORMAT_SAMPLES[prop.format]
    return _TYPE_SAMPLES.get(prop.type, "string")


def _generate_definition(definition: Definition, model: ResolvedModel, seen: frozenset) -> Any:
    if definition.example is not None:
        return definition.example
    if definition.items is not None:
        return [_generate(definition.items, model, seen)]
    if definition.values is not None:
        return {"string": _generate(definition.values, model, seen)}
    return {p.name: _generate(p, model, seen) for p in definition.properties}


def definition_example(definition: Definition, model: ResolvedModel, generate: bool) -> Any:
    """Example value for a whole definition, or None when there is none to show."""
    if definition.example is not None:
        return definition.example
    if not generate:
        return None
    return _generate_definition(definition, model, frozenset({definition.name}))
