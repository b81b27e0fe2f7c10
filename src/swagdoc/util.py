"""Naming helpers shared by the schema and document modules."""

import re

from swagdoc.schema.types import TypeInfo

REF_PREFIX = "#/definitions/"

_PATH_PARAM = re.compile(r"\{([^}]+)}")
_NON_ALPHANUMERIC = re.compile(r"[^0-9a-zA-Z]")


def colon_path(path: str) -> str:
    """Convert a swagger path to a colon path, e.g. /api/{id} -> /api/:id."""
    return _PATH_PARAM.sub(lambda m: ":" + m.group(1), path)


def camel(path: str) -> str:
    """Join the alphanumeric part of each path segment, title-casing the first letter."""
    results = []
    for segment in path.split("/"):
        v = _NON_ALPHANUMERIC.sub("", segment)
        if not v:
            continue
        results.append(v[0].upper() + v[1:])
    return "".join(results)


def make_ref(name: str) -> str:
    return f"{REF_PREFIX}{name}"


def make_name(info: TypeInfo) -> str:
    """Derive the definition name of a struct descriptor.

    Named structs become ``<module>.<Class>`` using the last module component.
    Anonymous structs get an identifier built from the descriptor identity, so
    the same descriptor always yields the same name within a process.
    """
    if info.name:
        namespace = info.module.rsplit(".", 1)[-1]
        full = f"{namespace}.{info.name}" if namespace else info.name
    else:
        full = f"anon{id(info)}"
    return full.replace("-", "_")
