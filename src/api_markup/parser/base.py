"""Data models for a parsed Swagger 2.0 document.

The parser converts its input into these models. Schemas are kept as the raw
JSON-Schema mappings found in the document; turning them into resolved
definitions is the resolver's job.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict


class Contact(BaseModel):
    name: str = ""
    url: str = ""
    email: str = ""


class License(BaseModel):
    name: str = ""
    url: str = ""


class Info(BaseModel):
    """The ``info`` object of the document."""

    title: str = ""
    description: str = ""
    version: str = ""
    terms_of_service: str = ""
    contact: Contact | None = None
    license: License | None = None


class Tag(BaseModel):
    name: str
    description: str = ""


class Param(BaseModel):
    """A single operation parameter (query, path, header, formData or body)."""

    model_config = ConfigDict(frozen=True)

    name: str
    location: str  # query / path / header / formData / body
    required: bool
    description: str = ""
    schema_: dict = {}  # body schema, or the type/format/items of other params
    default: Any = None


class Response(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str
    description: str = ""
    schema_: dict | None = None
    headers: dict[str, dict] = {}
    examples: dict[str, Any] = {}


class ApiOperation(BaseModel):
    """A single operation: one HTTP method on one path."""

    model_config = ConfigDict(frozen=True)

    method: str  # GET / POST / PUT / DELETE / PATCH / HEAD / OPTIONS
    path: str  # /pets/{petId}
    operation_id: str = ""
    summary: str = ""
    description: str = ""
    tags: list[str] = []
    consumes: list[str] = []
    produces: list[str] = []
    parameters: list[Param] = []
    responses: list[Response] = []
    security: list[dict[str, list[str]]] | None = None  # None inherits the global requirements
    deprecated: bool = False


class SecurityScheme(BaseModel):
    """An entry of ``securityDefinitions``."""

    name: str
    type: str  # basic / apiKey / oauth2
    description: str = ""
    param_name: str = ""
    location: str = ""
    flow: str = ""
    authorization_url: str = ""
    token_url: str = ""
    scopes: dict[str, str] = {}


class Spec(BaseModel):
    """The whole parsed document."""

    swagger: str = "2.0"
    info: Info = Info()
    host: str = ""
    base_path: str = ""
    schemes: list[str] = []
    consumes: list[str] = []
    produces: list[str] = []
    tags: list[Tag] = []
    operations: list[ApiOperation] = []
    definitions: dict[str, dict] = {}
    security_definitions: dict[str, SecurityScheme] = {}
    security: list[dict[str, list[str]]] = []
