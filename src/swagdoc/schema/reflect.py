"""Reflection engine: turns Python types into Swagger definitions.

``inspect_type`` classifies a single value position, ``define_object`` builds
the definition of one type and ``define`` computes the closure of every
definition reachable from a prototype.
"""

import logging
from collections import deque
from typing import Any

from swagdoc.errors import UnsupportedTypeError
from swagdoc.schema.base import Object, Property, Schema
from swagdoc.schema.types import FieldTag, Kind, TypeInfo, describe_prototype
from swagdoc.util import make_name, make_ref

logger = logging.getLogger(__name__)

PRIMITIVE_FORMATS: dict[Kind, tuple[str, str]] = {
    Kind.INT8: ("integer", "int32"),
    Kind.INT16: ("integer", "int32"),
    Kind.INT32: ("integer", "int32"),
    Kind.UINT8: ("integer", "int32"),
    Kind.UINT16: ("integer", "int32"),
    Kind.UINT32: ("integer", "int32"),
    Kind.INT: ("integer", "int64"),
    Kind.INT64: ("integer", "int64"),
    Kind.UINT64: ("integer", "int64"),
    Kind.FLOAT64: ("number", "double"),
    Kind.FLOAT32: ("number", "float"),
    Kind.BOOL: ("boolean", ""),
    Kind.STRING: ("string", ""),
    Kind.BYTES: ("string", "byte"),
}


def inspect_type(info: TypeInfo, tag: FieldTag | None = None) -> Property:
    """Classify one field, element or map value into a Property."""
    if tag is not None and tag.stringified:
        return Property(type="string")
    return _classify(info.deref())


def _classify(info: TypeInfo) -> Property:
    if info.kind in PRIMITIVE_FORMATS:
        schema_type, fmt = PRIMITIVE_FORMATS[info.kind]
        return Property(type=schema_type, format=fmt, enum=info.choices)

    if info.kind is Kind.NAMED:
        return Property(type=info.schema_type)

    if info.kind is Kind.STRUCT:
        return Property(ref=make_ref(make_name(info)), target=info)

    if info.is_sequence:
        items = _classify(info.elem.deref())
        return Property(type="array", items=items, target=items.target)

    if info.kind is Kind.MAP:
        value = _map_value(info.elem)
        return Property(
            type="object",
            additional_properties=value,
            target=value.target if value is not None else None,
        )

    return Property()


def _map_value(info: TypeInfo) -> Property | None:
    info = info.deref()
    if info.kind is Kind.INTERFACE:
        return None
    if info.is_byte_sequence:
        return Property(type="string")
    return _classify(info)


def build_properties(info: TypeInfo, _embedding: frozenset = frozenset()) -> tuple[dict[str, Property], list[str]]:
    """Walk the exported fields of a struct in declaration order.

    Embedded fields are flattened into the result; their required markers are
    not carried over.
    """
    properties: dict[str, Property] = {}
    required: list[str] = []

    for f in info.fields:
        if f.name.startswith("_"):
            continue

        if f.tag.embedded:
            embedded = f.info.deref()
            if embedded.kind is not Kind.STRUCT:
                raise UnsupportedTypeError(f"embedded field {f.name!r} is not a struct")
            if embedded in _embedding or embedded is info:
                raise UnsupportedTypeError(f"embedded field {f.name!r} forms a cycle")
            nested, _ = build_properties(embedded, _embedding | {info})
            properties.update(nested)
            continue

        name = f.tag.serialized_name(f.name)
        if name == "-":
            continue

        p = inspect_type(f.info, f.tag)

        if f.tag.required and name not in required:
            required.append(name)
        if f.tag.example is not None:
            p.example = f.tag.example
        if f.tag.description:
            p.description = f.tag.description
        # "desc" takes precedence over "description".
        if f.tag.desc:
            p.description = f.tag.desc
        if f.tag.enum:
            p.enum = f.tag.enum_values()

        properties[name] = p

    return properties, required


def define_object(prototype: Any, description: str = "") -> Object:
    """Build the definition for a prototype value or type."""
    info = describe_prototype(prototype).deref()

    is_array = info.is_sequence
    if is_array:
        info = info.elem.deref()

    if info.kind is not Kind.STRUCT:
        if info.is_sequence or info.kind in (Kind.MAP, Kind.INTERFACE):
            raise UnsupportedTypeError(
                f"cannot register a definition for {info.kind.value} prototype {prototype!r}; wrap it in a struct"
            )
        p = inspect_type(info)
        return Object(
            name=info.name or info.kind.value,
            is_array=is_array,
            source=info,
            type=p.type,
            format=p.format,
        )

    properties, required = build_properties(info)
    return Object(
        name=make_name(info),
        is_array=is_array,
        source=info,
        type="object",
        description=description,
        required=required,
        properties=properties,
    )


def define(prototype: Any) -> dict[str, Object]:
    """Return every definition reachable from ``prototype``, keyed by name."""
    root = define_object(prototype)
    definitions = {root.name: root}
    pending = deque([root])

    while pending:
        current = pending.popleft()
        for p in current.properties.values():
            if p.target is None:
                continue
            name = make_name(p.target)
            if name in definitions:
                continue
            child = define_object(p.target, p.description)
            logger.debug("discovered definition %s via %s", child.name, current.name)
            definitions[child.name] = child
            pending.append(child)

    return definitions


def make_schema(prototype: Any) -> Schema:
    """Build a body/response schema referencing the prototype's definition."""
    obj = define_object(prototype)
    if not obj.is_array:
        return Schema(ref=make_ref(obj.name), prototype=prototype)
    if obj.source.kind is Kind.STRUCT:
        items = Property(ref=make_ref(obj.name))
    else:
        # primitive elements are inlined rather than referenced
        items = inspect_type(obj.source)
    return Schema(type="array", items=items, prototype=prototype)
