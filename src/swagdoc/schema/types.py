"""Type descriptors used by the schema reflection engine.

Python annotations are normalised into ``TypeInfo`` descriptors, a closed
variant over primitive, optional, struct, sequence, map, named and interface
kinds. The inspector in ``swagdoc.schema.reflect`` only ever looks at these
descriptors, never at raw annotations.
"""

import collections
import collections.abc
import dataclasses
import enum
import types
import typing
from dataclasses import dataclass, field
from typing import Annotated, Any, Callable, Iterable, Literal, NewType, Union, get_args, get_origin, get_type_hints

from pydantic import BaseModel

from swagdoc.errors import UnsupportedTypeError


class Kind(str, enum.Enum):
    BOOL = "bool"
    INT = "int"
    INT8 = "int8"
    INT16 = "int16"
    INT32 = "int32"
    INT64 = "int64"
    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    STRING = "string"
    BYTES = "bytes"
    NAMED = "named"
    INTERFACE = "interface"
    OPTIONAL = "ptr"
    STRUCT = "struct"
    SLICE = "slice"
    ARRAY = "array"
    MAP = "map"


class ParameterType(str, enum.Enum):
    """Primitive types allowed for non-body parameters."""

    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    STRING = "string"
    ARRAY = "array"
    FILE = "file"


Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
UInt8 = NewType("UInt8", int)
UInt16 = NewType("UInt16", int)
UInt32 = NewType("UInt32", int)
UInt64 = NewType("UInt64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)

PRIMITIVES: dict[Any, Kind] = {
    bool: Kind.BOOL,
    int: Kind.INT,
    float: Kind.FLOAT64,
    str: Kind.STRING,
    bytes: Kind.BYTES,
    bytearray: Kind.BYTES,
    Int8: Kind.INT8,
    Int16: Kind.INT16,
    Int32: Kind.INT32,
    Int64: Kind.INT64,
    UInt8: Kind.UINT8,
    UInt16: Kind.UINT16,
    UInt32: Kind.UINT32,
    UInt64: Kind.UINT64,
    Float32: Kind.FLOAT32,
    Float64: Kind.FLOAT64,
}

# Looked up by fully-qualified name, bypassing structural inspection.
NAMED_TYPES: dict[str, str] = {
    "datetime.datetime": "string",
    "datetime.date": "string",
    "datetime.timedelta": "integer",
    "decimal.Decimal": "number",
    "uuid.UUID": "string",
}

_SEQUENCE_ORIGINS = (
    list,
    set,
    frozenset,
    collections.deque,
    collections.abc.Sequence,
    collections.abc.MutableSequence,
    collections.abc.Set,
    collections.abc.MutableSet,
    collections.abc.Collection,
    collections.abc.Iterable,
)

_MAP_ORIGINS = (
    dict,
    collections.OrderedDict,
    collections.defaultdict,
    collections.abc.Mapping,
    collections.abc.MutableMapping,
)


@dataclass(frozen=True)
class FieldTag:
    """Serialization and documentation annotations for one struct field.

    Attach it with ``Annotated[T, FieldTag(...)]`` or pass the same keys as a
    dataclass ``field(metadata={...})`` mapping.
    """

    json: str = ""  # "name,omitempty", ",string", "-"
    required: bool = False
    example: Any = None
    description: str = ""
    desc: str = ""
    enum: str | tuple[str, ...] = ""
    embedded: bool = False

    @classmethod
    def from_mapping(cls, data: typing.Mapping[str, Any]) -> "FieldTag":
        known = {f.name for f in dataclasses.fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        if isinstance(values.get("enum"), list):
            values["enum"] = tuple(values["enum"])
        return cls(**values)

    @property
    def options(self) -> list[str]:
        return [part.strip() for part in self.json.split(",")[1:]]

    @property
    def stringified(self) -> bool:
        return "string" in self.options

    def serialized_name(self, field_name: str) -> str:
        name = self.json.strip()
        if not name or name.startswith(","):
            return field_name
        return name.split(",")[0]

    def enum_values(self) -> list[str]:
        if isinstance(self.enum, str):
            return self.enum.split(",") if self.enum else []
        return list(self.enum)


@dataclass
class FieldInfo:
    name: str
    info: "TypeInfo"
    tag: FieldTag = field(default_factory=FieldTag)


@dataclass(eq=False)
class TypeInfo:
    """Descriptor of one annotation. Hashes by identity."""

    kind: Kind
    name: str = ""
    module: str = ""
    elem: "TypeInfo | None" = None
    schema_type: str = ""
    choices: list[Any] | None = None
    source: Any = field(default=None, repr=False)
    loader: Callable[[], Iterable[FieldInfo]] | None = field(default=None, repr=False)
    _fields: list[FieldInfo] | None = field(default=None, init=False, repr=False)

    @property
    def fields(self) -> list[FieldInfo]:
        # Resolved lazily so that self-referencing structs can be described.
        if self._fields is None:
            self._fields = list(self.loader()) if self.loader else []
        return self._fields

    def deref(self) -> "TypeInfo":
        if self.kind is Kind.OPTIONAL and self.elem is not None:
            return self.elem
        return self

    @property
    def is_sequence(self) -> bool:
        return self.kind in (Kind.SLICE, Kind.ARRAY)

    @property
    def is_byte_sequence(self) -> bool:
        if self.kind is Kind.BYTES:
            return True
        return self.is_sequence and self.elem is not None and self.elem.kind is Kind.UINT8


INTERFACE = TypeInfo(Kind.INTERFACE, "interface")

_structs: dict[type, TypeInfo] = {}


def struct(**fields: Any) -> TypeInfo:
    """Describe an anonymous struct inline.

    >>> struct(id=str, name=Annotated[str, FieldTag(required=True)])
    """
    items = [FieldInfo(name, describe(annotation), _annotated_tag(annotation) or FieldTag())
             for name, annotation in fields.items()]
    return TypeInfo(Kind.STRUCT, loader=lambda: items)


def is_struct_class(tp: Any) -> bool:
    if not isinstance(tp, type):
        return False
    return dataclasses.is_dataclass(tp) or issubclass(tp, BaseModel)


def describe(tp: Any) -> TypeInfo:
    """Normalise a type annotation into a ``TypeInfo``."""
    if isinstance(tp, TypeInfo):
        return tp
    if tp is Any or tp is object:
        return INTERFACE

    origin = get_origin(tp)
    args = get_args(tp)

    if origin is Annotated:
        return describe(args[0])

    if origin is Union or origin is types.UnionType:
        non_none = [a for a in args if a is not type(None)]
        if len(non_none) != 1:
            raise UnsupportedTypeError(f"union types are not supported: {tp!r}")
        return TypeInfo(Kind.OPTIONAL, "ptr", elem=describe(non_none[0]), source=tp)

    if origin is Literal:
        return _choices(tp, list(args))

    if origin is tuple:
        return _tuple(tp, args)

    if origin in _SEQUENCE_ORIGINS:
        elem = describe(args[0]) if args else INTERFACE
        return TypeInfo(Kind.SLICE, "slice", elem=elem, source=tp)

    if origin in _MAP_ORIGINS:
        elem = describe(args[1]) if len(args) > 1 else INTERFACE
        return TypeInfo(Kind.MAP, "map", elem=elem, source=tp)

    if isinstance(tp, collections.abc.Hashable) and tp in PRIMITIVES:
        kind = PRIMITIVES[tp]
        return TypeInfo(kind, kind.value, source=tp)

    if isinstance(tp, type):
        qualified = f"{tp.__module__}.{tp.__qualname__}"
        if qualified in NAMED_TYPES:
            return TypeInfo(Kind.NAMED, qualified, schema_type=NAMED_TYPES[qualified], source=tp)
        if issubclass(tp, enum.Enum):
            return _choices(tp, [member.value for member in tp])
        if is_struct_class(tp):
            return _struct(tp)
        if tp is tuple:
            return TypeInfo(Kind.ARRAY, "array", elem=INTERFACE, source=tp)
        if issubclass(tp, (list, set, frozenset)):
            return TypeInfo(Kind.SLICE, "slice", elem=INTERFACE, source=tp)
        if issubclass(tp, dict):
            return TypeInfo(Kind.MAP, "map", elem=INTERFACE, source=tp)

    raise UnsupportedTypeError(f"cannot describe type {tp!r}")


def describe_prototype(prototype: Any) -> TypeInfo:
    """Describe a prototype given either as a type or as a live value."""
    if isinstance(prototype, TypeInfo):
        return prototype
    if isinstance(prototype, (list, tuple, set, frozenset)):
        if not prototype:
            raise UnsupportedTypeError(
                f"cannot infer the element type of an empty {type(prototype).__name__}; pass list[T] instead"
            )
        kind = Kind.ARRAY if isinstance(prototype, tuple) else Kind.SLICE
        return TypeInfo(kind, kind.value, elem=describe_prototype(next(iter(prototype))), source=prototype)
    if isinstance(prototype, dict):
        return describe(dict)
    if _is_type_like(prototype):
        return describe(prototype)
    return describe(type(prototype))


def _is_type_like(value: Any) -> bool:
    return (
        isinstance(value, (type, NewType))
        or get_origin(value) is not None
        or value is Any
    )


def _tuple(tp: Any, args: tuple) -> TypeInfo:
    if not args:
        return TypeInfo(Kind.ARRAY, "array", elem=INTERFACE, source=tp)
    if len(args) == 2 and args[1] is Ellipsis:
        return TypeInfo(Kind.ARRAY, "array", elem=describe(args[0]), source=tp)
    if all(a == args[0] for a in args):
        return TypeInfo(Kind.ARRAY, "array", elem=describe(args[0]), source=tp)
    raise UnsupportedTypeError(f"heterogeneous tuples are not supported: {tp!r}")


def _choices(tp: Any, values: list[Any]) -> TypeInfo:
    if not values:
        raise UnsupportedTypeError(f"cannot describe an empty enumeration: {tp!r}")
    kind = PRIMITIVES.get(type(values[0]), Kind.STRING)
    return TypeInfo(kind, kind.value, choices=values, source=tp)


def _struct(cls: type) -> TypeInfo:
    info = _structs.get(cls)
    if info is None:
        loader = _pydantic_fields if issubclass(cls, BaseModel) else _dataclass_fields
        info = TypeInfo(
            Kind.STRUCT,
            cls.__name__,
            module=cls.__module__,
            source=cls,
            loader=lambda: loader(cls),
        )
        _structs[cls] = info
    return info


def _annotated_tag(annotation: Any) -> FieldTag | None:
    if get_origin(annotation) is not Annotated:
        return None
    tags = [m for m in get_args(annotation)[1:] if isinstance(m, FieldTag)]
    return tags[-1] if tags else None


def _dataclass_fields(cls: type) -> Iterable[FieldInfo]:
    hints = get_type_hints(cls, include_extras=True)
    for f in dataclasses.fields(cls):
        annotation = hints.get(f.name, f.type)
        tag = _annotated_tag(annotation) or FieldTag.from_mapping(f.metadata)
        yield FieldInfo(f.name, describe(annotation), tag)


def _pydantic_fields(cls: type[BaseModel]) -> Iterable[FieldInfo]:
    for name, info in cls.model_fields.items():
        tags = [m for m in info.metadata if isinstance(m, FieldTag)]
        tag = tags[-1] if tags else FieldTag()
        if info.exclude:
            tag = dataclasses.replace(tag, json="-")
        elif not tag.json and info.alias:
            tag = dataclasses.replace(tag, json=info.alias)
        if not tag.description and not tag.desc and info.description:
            tag = dataclasses.replace(tag, description=info.description)
        if tag.example is None and info.examples:
            tag = dataclasses.replace(tag, example=info.examples[0])
        yield FieldInfo(name, describe(info.annotation), tag)
