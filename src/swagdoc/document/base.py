"""Swagger 2.0 document models.

Endpoints, parameters and responses are built by the option helpers in
``swagdoc.document.endpoint`` and aggregated by ``swagdoc.document.api.API``.
"""

import enum
from typing import Any, Callable, ClassVar

from pydantic import BaseModel, Field, model_serializer

from swagdoc.errors import InvalidMethodError
from swagdoc.schema.base import Property, Schema, SwaggerModel
from swagdoc.schema.types import ParameterType
from swagdoc.util import camel


class Method(str, enum.Enum):
    """HTTP methods that have a slot in ``Endpoints``, in walk order."""

    DELETE = "DELETE"
    HEAD = "HEAD"
    GET = "GET"
    OPTIONS = "OPTIONS"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def parse(cls, value: str) -> "Method":
        try:
            return cls(value.upper())
        except ValueError:
            raise InvalidMethodError(f"invalid method, {value}") from None

    @property
    def slot(self) -> str:
        return self.value.lower()


class ParameterLocation(str, enum.Enum):
    PATH = "path"
    QUERY = "query"
    FORM_DATA = "formData"
    BODY = "body"


class Contact(SwaggerModel):
    email: str = ""


class License(SwaggerModel):
    name: str = ""
    url: str = ""


class Info(SwaggerModel):
    keep_empty: ClassVar[frozenset[str]] = frozenset({"license"})

    description: str = ""
    version: str = ""
    terms_of_service: str = Field(default="", alias="termsOfService")
    title: str = ""
    contact: Contact | None = None
    license: License = Field(default_factory=License)


class TagDocs(SwaggerModel):
    description: str = ""
    url: str = ""


class Tag(SwaggerModel):
    name: str
    description: str = ""
    docs: TagDocs | None = Field(default=None, alias="externalDocs")


class SecurityScheme(SwaggerModel):
    keep_empty: ClassVar[frozenset[str]] = frozenset({"type"})

    type: str = ""
    description: str = ""
    name: str = ""
    in_: str = Field(default="", alias="in")
    flow: str = ""
    authorization_url: str = Field(default="", alias="authorizationUrl")
    token_url: str = Field(default="", alias="tokenUrl")
    scopes: dict[str, str] = Field(default_factory=dict)


class SecurityRequirement(BaseModel):
    """Security requirements of an endpoint or of the whole document.

    Serializes to ``[]`` when security is disabled, ``null`` when nothing was
    required, and otherwise to a list of ``{scheme: [scopes]}`` mappings.
    """

    requirements: list[dict[str, list[str]]] = Field(default_factory=list)
    disable_security: bool = False

    def add(self, scheme: str, *scopes: str) -> None:
        self.requirements.append({scheme: list(scopes)})

    @model_serializer(mode="plain")
    def serialize_requirement(self) -> list[dict[str, list[str]]] | None:
        if self.disable_security:
            return []
        if not self.requirements:
            return None
        return [dict(r) for r in self.requirements]


class Header(SwaggerModel):
    type: str = ""
    format: str = ""
    description: str = ""


class Parameter(SwaggerModel):
    in_: ParameterLocation = Field(alias="in")
    name: str = ""
    description: str = ""
    required: bool = False
    schema_: Schema | None = Field(default=None, alias="schema")
    type: ParameterType | None = None
    format: str = ""
    default: str = ""


class Response(SwaggerModel):
    keep_empty: ClassVar[frozenset[str]] = frozenset({"description"})

    description: str = ""
    schema_: Schema | None = Field(default=None, alias="schema")
    headers: dict[str, Header] = Field(default_factory=dict)


class Endpoint(SwaggerModel):
    """One HTTP operation."""

    method: str = Field(default="", exclude=True)
    path: str = Field(default="", exclude=True)
    handler: Any = Field(default=None, exclude=True)
    tags: list[str] = Field(default_factory=list)
    summary: str = ""
    description: str = ""
    operation_id: str = Field(default="", alias="operationId")
    produces: list[str] = Field(default_factory=list)
    consumes: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)
    security: SecurityRequirement | None = None
    deprecated: bool = False

    def build_operation_id(self) -> None:
        """Derive the operation id from method and path, e.g. PUT /test/{id} -> putTestId."""
        self.operation_id = self.method.lower() + camel(self.path)

    def schemas(self) -> list[Schema]:
        """Body parameter and response schemas, in declaration order."""
        found = [p.schema_ for p in self.parameters if p.schema_ is not None]
        found.extend(r.schema_ for r in self.responses.values() if r.schema_ is not None)
        return found


class Endpoints(SwaggerModel):
    """All endpoints registered under one path, at most one per method."""

    delete: Endpoint | None = None
    head: Endpoint | None = None
    get: Endpoint | None = None
    options: Endpoint | None = None
    post: Endpoint | None = None
    put: Endpoint | None = None
    patch: Endpoint | None = None
    trace: Endpoint | None = None
    connect: Endpoint | None = None

    def assign(self, endpoint: Endpoint) -> None:
        """Put the endpoint in its method slot, replacing any previous one."""
        method = Method.parse(endpoint.method)
        setattr(self, method.slot, endpoint)

    def lookup(self, method: str) -> Endpoint | None:
        try:
            return getattr(self, Method.parse(method).slot)
        except InvalidMethodError:
            return None

    def walk(self, fn: Callable[[Endpoint], None]) -> None:
        for method in Method:
            endpoint = getattr(self, method.slot)
            if endpoint is not None:
                fn(endpoint)


__all__ = [
    "Contact",
    "Endpoint",
    "Endpoints",
    "Header",
    "Info",
    "License",
    "Method",
    "Parameter",
    "ParameterLocation",
    "Property",
    "Response",
    "Schema",
    "SecurityRequirement",
    "SecurityScheme",
    "Tag",
    "TagDocs",
]
