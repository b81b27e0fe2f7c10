"""Build Swagger 2.0 documents from Python types and endpoint descriptors."""

from swagdoc.document.api import API, new
from swagdoc.document.base import Endpoint, Endpoints, Method, SecurityRequirement, Tag
from swagdoc.schema.reflect import define, define_object, make_schema
from swagdoc.schema.types import (
    FieldTag,
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    ParameterType,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    struct,
)
from swagdoc.util import colon_path

__all__ = [
    "API",
    "Endpoint",
    "Endpoints",
    "FieldTag",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Method",
    "ParameterType",
    "SecurityRequirement",
    "Tag",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "colon_path",
    "define",
    "define_object",
    "make_schema",
    "new",
    "struct",
]
