"""Swagger 2.0 document parser.

Parses a Swagger 2.0 document (JSON or YAML, from a file or from text) into a
Spec model.
"""

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from api_markup.errors import ParseError
from .base import ApiOperation, Contact, Info, License, Param, Response, SecurityScheme, Spec, Tag

logger = logging.getLogger(__name__)

HTTP_METHODS = ("GET", "PUT", "POST", "DELETE", "OPTIONS", "HEAD", "PATCH")

_TYPE_KEYS = (
    "type", "format", "items", "enum", "collectionFormat",
    "minimum", "maximum", "exclusiveMinimum", "exclusiveMaximum",
    "minLength", "maxLength", "pattern", "minItems", "maxItems", "uniqueItems",
)


def parse_spec(source: Path | str | bytes) -> Spec:
    """Parse a Swagger document from a path, or from JSON/YAML text or bytes."""
    if isinstance(source, Path):
        try:
            text = source.read_text(encoding="utf-8")
        except OSError as e:
            raise ParseError(f"Cannot read file: {e}", entity=str(source)) from e
        except UnicodeDecodeError as e:
            raise ParseError(f"File is not valid UTF-8: {e}", entity=str(source)) from e
    elif isinstance(source, bytes):
        try:
            text = source.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ParseError(f"Document is not valid UTF-8: {e}") from e
    else:
        text = source

    try:
        doc = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid JSON/YAML: {e}") from e

    if not isinstance(doc, dict):
        raise ParseError("Document root must be a mapping")
    return parse_document(doc)


def parse_document(doc: dict) -> Spec:
    """Build a Spec from an already loaded mapping."""
    version = str(doc.get("swagger", ""))
    if not version.startswith("2"):
        if "openapi" in doc:
            raise ParseError(f"Unsupported OpenAPI version {doc['openapi']}, only Swagger 2.0 is supported")
        raise ParseError("Missing 'swagger: \"2.0\"' version field")

    definitions = _mapping(doc, "definitions")
    for name, schema in definitions.items():
        if not isinstance(schema, dict):
            raise ParseError("Definition must be a mapping", entity=str(name))

    info = _parse_info(_mapping(doc, "info"))
    operations = _parse_paths(doc)
    security_definitions = _parse_security_definitions(_mapping(doc, "securityDefinitions"))
    try:
        spec = Spec(
            swagger=version,
            info=info,
            host=_text(doc.get("host")),
            base_path=_text(doc.get("basePath")),
            schemes=doc.get("schemes") or [],
            consumes=doc.get("consumes") or [],
            produces=doc.get("produces") or [],
            tags=[Tag(name=_text(t.get("name")), description=_text(t.get("description")))
                  for t in doc.get("tags") or []],
            operations=operations,
            definitions={str(k): v for k, v in definitions.items()},
            security_definitions=security_definitions,
            security=doc.get("security") or [],
        )
    except (ValidationError, AttributeError) as e:
        raise ParseError(f"Invalid document structure: {e}") from e
    logger.debug("Parsed %d operations and %d definitions", len(spec.operations), len(spec.definitions))
    return spec


def _mapping(doc: dict, key: str) -> dict:
    value = doc.get(key) or {}
    if not isinstance(value, dict):
        raise ParseError(f"'{key}' must be a mapping")
    return value


def _text(value) -> str:
    """A free-text field; YAML leaves ``summary:`` with no value as null."""
    if value is None:
        return ""
    if isinstance(value, (dict, list)):
        raise ParseError(f"Expected text, got {type(value).__name__}")
    return str(value)


def _parse_info(info: dict) -> Info:
    contact = info.get("contact")
    license_ = info.get("license")
    try:
        return Info(
            title=_text(info.get("title")),
            description=_text(info.get("description")),
            version=_text(info.get("version")),
            terms_of_service=_text(info.get("termsOfService")),
            contact=Contact(**{k: _text(contact.get(k)) for k in ("name", "url", "email")}) if contact else None,
            license=License(name=_text(license_.get("name")), url=_text(license_.get("url"))) if license_ else None,
        )
    except ParseError as e:
        raise ParseError(e.message, entity="info") from e
    except (ValidationError, AttributeError) as e:
        raise ParseError(f"Invalid info object: {e}", entity="info") from e


def _parse_paths(doc: dict) -> list[ApiOperation]:
    shared_params = _mapping(doc, "parameters")
    shared_responses = _mapping(doc, "responses")
    operations = []

    for path, methods in _mapping(doc, "paths").items():
        if not isinstance(methods, dict):
            raise ParseError("Path item must be a mapping", entity=str(path))
        path_params = [_deref(p, shared_params, "parameters") for p in methods.get("parameters", [])]

        for method, operation in methods.items():
            if method.upper() not in HTTP_METHODS:
                continue
            entity = f"{method.upper()} {path}"
            if not isinstance(operation, dict):
                raise ParseError("Operation must be a mapping", entity=entity)

            own_params = [_deref(p, shared_params, "parameters") for p in operation.get("parameters", [])]
            responses = {
                str(code): _deref(resp, shared_responses, "responses")
                for code, resp in (operation.get("responses") or {}).items()
            }

            try:
                operations.append(
                    ApiOperation(
                        method=method.upper(),
                        path=str(path),
                        operation_id=_text(operation.get("operationId")),
                        summary=_text(operation.get("summary")),
                        description=_text(operation.get("description")),
                        tags=[_text(t) for t in operation.get("tags") or []],
                        consumes=operation.get("consumes") or [],
                        produces=operation.get("produces") or [],
                        parameters=_parse_parameters(_merge_params(path_params, own_params), entity),
                        responses=_parse_responses(responses),
                        security=operation.get("security"),
                        deprecated=bool(operation.get("deprecated", False)),
                    )
                )
            except ParseError as e:
                raise ParseError(e.message, entity=e.entity or entity) from e
            except (ValidationError, AttributeError) as e:
                raise ParseError(f"Invalid operation: {e}", entity=entity) from e

    return operations


def _deref(item: dict, shared: dict, section: str) -> dict:
    """Inline a ``#/parameters/x`` or ``#/responses/x`` reference."""
    ref = item.get("$ref") if isinstance(item, dict) else None
    if not ref:
        return item
    prefix = f"#/{section}/"
    name = ref[len(prefix):] if ref.startswith(prefix) else None
    if name is None or name not in shared:
        raise ParseError(f"Unknown {section[:-1]} reference '{ref}'")
    return shared[name]


def _merge_params(path_params: list[dict], own_params: list[dict]) -> list[dict]:
    """Path-level parameters, overridden by operation parameters with the same (name, in)."""
    own_keys = {(p.get("name"), p.get("in")) for p in own_params}
    inherited = [p for p in path_params if (p.get("name"), p.get("in")) not in own_keys]
    return inherited + own_params


def _parse_parameters(params: list[dict], entity: str) -> list[Param]:
    result = []
    for p in params:
        if "name" not in p or "in" not in p:
            raise ParseError("Parameter needs 'name' and 'in'", entity=entity)
        if p["in"] == "body":
            schema = p.get("schema") or {}
        else:
            schema = {k: p[k] for k in _TYPE_KEYS if k in p}
        result.append(
            Param(
                name=p["name"],
                location=p["in"],
                required=p.get("required", p["in"] == "path"),
                description=_text(p.get("description")),
                schema_=schema,
                default=p.get("default"),
            )
        )
    return result


def _parse_responses(responses: dict) -> list[Response]:
    result = []
    for status_code, resp in responses.items():
        result.append(
            Response(
                status=status_code,
                description=_text(resp.get("description")),
                schema_=resp.get("schema"),
                headers=resp.get("headers") or {},
                examples=resp.get("examples") or {},
            )
        )
    return result


def _parse_security_definitions(definitions: dict) -> dict[str, SecurityScheme]:
    result = {}
    for name, sd in definitions.items():
        if not isinstance(sd, dict) or "type" not in sd:
            raise ParseError("Security definition needs a 'type'", entity=str(name))
        try:
            result[str(name)] = SecurityScheme(
                name=str(name),
                type=_text(sd["type"]),
                description=_text(sd.get("description")),
                param_name=_text(sd.get("name")),
                location=_text(sd.get("in")),
                flow=_text(sd.get("flow")),
                authorization_url=_text(sd.get("authorizationUrl")),
                token_url=_text(sd.get("tokenUrl")),
                scopes=sd.get("scopes") or {},
            )
        except ParseError as e:
            raise ParseError(e.message, entity=str(name)) from e
        except ValidationError as e:
            raise ParseError(f"Invalid security definition: {e}", entity=str(name)) from e
    return result
