"""Schema models shared by definitions, parameters and responses.

Every document entity derives from ``SwaggerModel`` so that empty values are
left out of the serialized document.
"""

from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer


def _is_empty(value: Any, annotation: Any) -> bool:
    # Untyped values such as examples are only empty when unset.
    if value is None:
        return True
    if annotation is Any:
        return False
    return value is False or (isinstance(value, (str, list, dict)) and not value)


class SwaggerModel(BaseModel):
    """Base model that omits empty fields, except those named in ``keep_empty``."""

    model_config = ConfigDict(populate_by_name=True, arbitrary_types_allowed=True)

    keep_empty: ClassVar[frozenset[str]] = frozenset()

    @model_serializer(mode="wrap")
    def serialize_non_empty(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data = handler(self)
        for name, info in type(self).model_fields.items():
            if name in self.keep_empty or not _is_empty(getattr(self, name), info.annotation):
                continue
            data.pop(info.alias or name, None)
            data.pop(name, None)
        return data


class Property(SwaggerModel):
    """Shape of one struct field, sequence element or map value."""

    type: str | None = None
    description: str = ""
    enum: list[Any] | None = None
    format: str = ""
    ref: str = Field(default="", alias="$ref")
    example: Any = None
    items: "Property | None" = None
    additional_properties: "Property | None" = Field(default=None, alias="additionalProperties")
    # Struct descriptor this property leads to, directly or through items.
    target: Any = Field(default=None, exclude=True)


class Object(SwaggerModel):
    """A named definition."""

    keep_empty: ClassVar[frozenset[str]] = frozenset({"type"})

    name: str = Field(default="", exclude=True)
    is_array: bool = Field(default=False, exclude=True)
    source: Any = Field(default=None, exclude=True)
    type: str | None = ""
    description: str = ""
    format: str = ""
    required: list[str] = Field(default_factory=list)
    properties: dict[str, Property] = Field(default_factory=dict)


class Schema(SwaggerModel):
    """Body or response schema pointing into the definitions map."""

    type: str = ""
    items: Property | None = None
    ref: str = Field(default="", alias="$ref")
    prototype: Any = Field(default=None, exclude=True)
