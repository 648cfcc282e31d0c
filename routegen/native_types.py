"""Resolve OpenAPI schema nodes into target-neutral native types.

Handles:
- $ref -> Named (the final path segment of the reference)
- primitive types, with int32 / float formats
- arrays, whose items may be one schema or a list of schemas
- inline objects and untyped schemas -> Anonymous
- optionality (required=False wraps in Option)

Rendering produces Python type text. Anonymous types are named
{OwnerInClassCase}AnonArg{n}; the counter is threaded through every
render call explicitly, so rendering is a pure function.
"""

from __future__ import annotations

import copy
import enum
from dataclasses import dataclass
from typing import Any

from .errors import (
    AmbiguousSchemaType,
    InvalidReference,
    MalformedNode,
    MissingArrayItems,
    UnsupportedType,
)
from .naming import anonymous_type_name, class_name


class Scalar(enum.Enum):
    INT32 = "int32"
    INT64 = "int64"
    FLOAT32 = "float32"
    FLOAT64 = "float64"
    BOOL = "bool"
    STRING = "string"


@dataclass(frozen=True)
class Named:
    name: str


@dataclass(frozen=True)
class Array:
    items: tuple[NativeType, ...]


@dataclass(frozen=True)
class Option:
    inner: NativeType


@dataclass(frozen=True)
class Anonymous:
    schema: dict[str, Any]


NativeType = Scalar | Named | Array | Option | Anonymous

_SCALAR_TEXT: dict[Scalar, str] = {
    Scalar.INT32: "int",
    Scalar.INT64: "int",
    Scalar.FLOAT32: "float",
    Scalar.FLOAT64: "float",
    Scalar.BOOL: "bool",
    Scalar.STRING: "str",
}


def ref_name(ref: str) -> str:
    """Return the final path segment of a $ref string."""
    if not isinstance(ref, str):
        raise InvalidReference(repr(ref))
    _, sep, name = ref.rpartition("/")
    if not sep:
        raise InvalidReference(ref)
    return name


def _schema_types(schema: dict[str, Any]) -> list[str]:
    declared = schema.get("type")
    if declared is None:
        return []
    if isinstance(declared, str):
        return [declared]
    if not isinstance(declared, list):
        raise UnsupportedType(repr(declared))
    return [str(kind) for kind in declared]


def _schema_items(schema: dict[str, Any]) -> list[dict[str, Any]]:
    items = schema.get("items")
    if not items:
        return []
    if isinstance(items, dict):
        return [items]
    if not isinstance(items, list):
        raise MalformedNode("array items", items)
    return items


def resolve(schema: dict[str, Any], required: bool) -> NativeType:
    """Resolve a schema node to a NativeType.

    Raises a SchemaError subclass when the node cannot be represented,
    MalformedNode when it is not a mapping at all.
    """
    if not isinstance(schema, dict):
        raise MalformedNode("schema", schema)
    if "$ref" in schema:
        out: NativeType = Named(ref_name(schema["$ref"]))
    else:
        types = _schema_types(schema)
        if not types:
            # assume it is an object
            out = Anonymous(copy.deepcopy(schema))
        elif len(types) > 1:
            raise AmbiguousSchemaType(types)
        else:
            out = _resolve_single(types[0], schema, required)

    if not required:
        return Option(out)
    return out


def _resolve_single(kind: str, schema: dict[str, Any], required: bool) -> NativeType:
    fmt = schema.get("format")
    if kind == "object":
        return Anonymous(copy.deepcopy(schema))
    if kind == "boolean":
        return Scalar.BOOL
    if kind == "integer":
        return Scalar.INT32 if fmt == "int32" else Scalar.INT64
    if kind == "number":
        return Scalar.FLOAT32 if fmt == "float" else Scalar.FLOAT64
    if kind == "string":
        return Scalar.STRING
    if kind == "array":
        items = _schema_items(schema)
        if not items:
            raise MissingArrayItems()
        return Array(tuple(resolve(item, required) for item in items))
    # "null" is not a legal standalone type in OpenAPI 3.0
    raise UnsupportedType(kind)


def render(type_: NativeType, anon_count: int, owner: str) -> tuple[str, int]:
    """Render a NativeType as Python type text.

    Returns the text and the next anonymous-type counter value.
    """
    if isinstance(type_, Scalar):
        return _SCALAR_TEXT[type_], anon_count
    if isinstance(type_, Named):
        return class_name(type_.name), anon_count
    if isinstance(type_, Option):
        inner, anon_count = render(type_.inner, anon_count, owner)
        return f"Optional[{inner}]", anon_count
    if isinstance(type_, Array):
        rendered = []
        for item in type_.items:
            text, anon_count = render(item, anon_count, owner)
            rendered.append(text)
        if len(rendered) == 1:
            return f"list[{rendered[0]}]", anon_count
        return f"list[Union[{', '.join(rendered)}]]", anon_count
    if isinstance(type_, Anonymous):
        return anonymous_type_name(owner, anon_count), anon_count + 1
    raise TypeError(f"Not a native type: {type_!r}")


def anonymous_types(
    type_: NativeType, anon_count: int, owner: str,
) -> tuple[list[tuple[str, dict[str, Any]]], int]:
    """List the (name, schema) pairs that render() assigns for type_.

    Walks the type in the same order as render(), so the names match.
    """
    if isinstance(type_, (Scalar, Named)):
        return [], anon_count
    if isinstance(type_, Option):
        return anonymous_types(type_.inner, anon_count, owner)
    if isinstance(type_, Array):
        found: list[tuple[str, dict[str, Any]]] = []
        for item in type_.items:
            more, anon_count = anonymous_types(item, anon_count, owner)
            found.extend(more)
        return found, anon_count
    if isinstance(type_, Anonymous):
        return [(anonymous_type_name(owner, anon_count), type_.schema)], anon_count + 1
    raise TypeError(f"Not a native type: {type_!r}")


def is_optional(type_: NativeType) -> bool:
    return isinstance(type_, Option)
