"""Validates a serialized Swagger document for structural consistency."""

from typing import Any, Iterator

from swagdoc.util import REF_PREFIX


def _iter_refs(node: Any, location: str) -> Iterator[tuple[str, str]]:
    if isinstance(node, dict):
        for key, value in node.items():
            if key == "$ref" and isinstance(value, str):
                yield location, value
            else:
                yield from _iter_refs(value, f"{location}/{key}")
    elif isinstance(node, list):
        for i, value in enumerate(node):
            yield from _iter_refs(value, f"{location}/{i}")


def validate_references(doc: dict) -> dict[str, str]:
    """Check that every $ref resolves to an entry in definitions.

    Returns dict of {location: error_message} for dangling references.
    """
    definitions = doc.get("definitions", {})
    errors = {}
    for location, ref in _iter_refs(doc, "#"):
        if not ref.startswith(REF_PREFIX):
            errors[location] = f"unsupported reference: {ref}"
        elif ref[len(REF_PREFIX):] not in definitions:
            errors[location] = f"unresolved reference: {ref}"
    return errors


def validate_operation_ids(doc: dict) -> dict[str, str]:
    """Check that operation ids are unique across the document.

    Returns dict of {location: error_message} for duplicated ids.
    """
    seen: dict[str, str] = {}
    errors = {}
    for path, methods in doc.get("paths", {}).items():
        for method, operation in methods.items():
            operation_id = operation.get("operationId")
            if not operation_id:
                continue
            location = f"#/paths/{path}/{method}"
            if operation_id in seen:
                errors[location] = f"duplicate operationId {operation_id!r}, first used at {seen[operation_id]}"
            else:
                seen[operation_id] = location
    return errors


def validate_document(doc: dict) -> dict[str, str]:
    """Run all validations on a serialized document.

    Returns dict of {location: error_message} for all problems found.
    """
    errors = {}
    errors.update(validate_references(doc))
    errors.update(validate_operation_ids(doc))
    return errors
