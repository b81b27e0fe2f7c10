"""Endpoint builder.

    post = endpoint.new(
        "post", "/pet",
        endpoint.summary("Add a new pet to the store"),
        endpoint.body(Pet, "Pet object that needs to be added to the store", True),
        endpoint.response(200, "Successfully added pet", endpoint.schema(Pet)),
        endpoint.security("petstore_auth", "read:pets", "write:pets"),
    )
"""

from http import HTTPStatus
from typing import Any, Callable

from swagdoc.document.base import Endpoint, Header, Parameter, Response, SecurityRequirement
from swagdoc.schema.reflect import make_schema
from swagdoc.schema.types import ParameterType

Option = Callable[[Endpoint], None]
ResponseOption = Callable[[Response], None]


def new(method: str, path: str, *options: Option) -> Endpoint:
    e = Endpoint(
        method=method.upper(),
        path=path,
        produces=["application/json"],
        consumes=["application/json"],
    )
    e.build_operation_id()
    for opt in options:
        opt(e)
    return e


def handler(fn: Any) -> Option:
    def apply(e: Endpoint) -> None:
        e.handler = fn
    return apply


def summary(v: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.summary = v
    return apply


def description(v: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.description = v
    return apply


def operation_id(v: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.operation_id = v
    return apply


def produces(*v: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.produces = list(v)
    return apply


def consumes(*v: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.consumes = list(v)
    return apply


def _parameter(p: Parameter) -> Option:
    def apply(e: Endpoint) -> None:
        e.parameters.append(p)
    return apply


def path(name: str, typ: ParameterType | str, description: str, required: bool) -> Option:
    return path_default(name, typ, description, "", required)


def path_string(name: str, description: str) -> Option:
    return path_default(name, ParameterType.STRING, description, "", True)


def path_default(name: str, typ: ParameterType | str, description: str, default: str, required: bool) -> Option:
    return _parameter(Parameter(
        in_="path",
        name=name,
        type=typ,
        description=description,
        required=required,
        default=default,
    ))


def query(name: str, typ: ParameterType | str, description: str, required: bool) -> Option:
    return query_default(name, typ, description, "", required)


def query_string(name: str, description: str) -> Option:
    return query_default(name, ParameterType.STRING, description, "", False)


def query_default(name: str, typ: ParameterType | str, description: str, default: str, required: bool) -> Option:
    return _parameter(Parameter(
        in_="query",
        name=name,
        type=typ,
        description=description,
        required=required,
        default=default,
    ))


def form_data(name: str, typ: ParameterType | str, description: str, required: bool) -> Option:
    """Add a form field; the endpoint then also consumes multipart/form-data."""
    add = _parameter(Parameter(
        in_="formData",
        name=name,
        type=typ,
        description=description,
        required=required,
    ))

    def apply(e: Endpoint) -> None:
        add(e)
        e.consumes = sorted(set(e.consumes) | {"multipart/form-data"})
    return apply


def body(prototype: Any, description: str, required: bool) -> Option:
    """Add the request body; ``prototype`` is a type or a sample value."""
    return _parameter(Parameter(
        in_="body",
        name="body",
        description=description,
        schema_=make_schema(prototype),
        required=required,
    ))


def tags(*names: str) -> Option:
    def apply(e: Endpoint) -> None:
        e.tags.extend(names)
    return apply


def security(scheme: str, *scopes: str) -> Option:
    def apply(e: Endpoint) -> None:
        if e.security is None:
            e.security = SecurityRequirement()
        e.security.add(scheme, *scopes)
    return apply


def no_security() -> Option:
    """Explicitly disable security, overriding the document default."""
    def apply(e: Endpoint) -> None:
        e.security = SecurityRequirement(disable_security=True)
    return apply


def deprecated() -> Option:
    def apply(e: Endpoint) -> None:
        e.deprecated = True
    return apply


def schema(prototype: Any) -> ResponseOption:
    def apply(r: Response) -> None:
        r.schema_ = make_schema(prototype)
    return apply


def header(name: str, typ: str, format: str, description: str) -> ResponseOption:
    def apply(r: Response) -> None:
        r.headers[name] = Header(type=typ, format=format, description=description)
    return apply


def response(code: int, description: str, *options: ResponseOption) -> Option:
    def apply(e: Endpoint) -> None:
        r = Response(description=description)
        for opt in options:
            opt(r)
        e.responses[str(int(code))] = r
    return apply


def response_success(*options: ResponseOption) -> Option:
    return response(HTTPStatus.OK, "success", *options)
