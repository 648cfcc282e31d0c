"""Turn component and anonymous schemas into model and alias definitions.

Object schemas (anything resolving to Anonymous) become pydantic
models; everything else becomes a module-level type alias. Inline
object properties are named {OwnerInClassCase}AnonArg{n} with a counter
per model, the same rule entrypoints use for inline arguments.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Iterable

from .diagnostics import Diagnostics
from .errors import InvalidReference, MalformedNode, RoutegenError
from .loader import ComponentRegistry
from .native_types import Anonymous, anonymous_types, is_optional, render, resolve
from .naming import class_name, docstring_line, to_identifier


@dataclass
class TypeDefinitions:
    models: list[dict[str, Any]] = field(default_factory=list)
    aliases: list[dict[str, Any]] = field(default_factory=list)

    def names(self) -> set[str]:
        return {m["name"] for m in self.models} | {a["name"] for a in self.aliases}


def _section(schema: dict[str, Any], key: str, kind: type) -> Any:
    value = schema.get(key) or kind()
    if not isinstance(value, kind):
        raise MalformedNode(key, value)
    return value


def _object_shape(
    schema: dict[str, Any],
    registry: ComponentRegistry,
    seen: set[int] | None = None,
) -> tuple[dict[str, Any], set[str]]:
    """Collect properties and required names, merging allOf parts."""
    if not isinstance(schema, dict):
        raise MalformedNode("object schema", schema)
    seen = seen if seen is not None else set()
    if id(schema) in seen:
        raise InvalidReference("allOf cycle")
    seen.add(id(schema))

    properties: dict[str, Any] = {}
    required: set[str] = set()
    for part in _section(schema, "allOf", list):
        sub_props, sub_required = _object_shape(registry.schema(part), registry, seen)
        properties.update(sub_props)
        required |= sub_required
    properties.update({str(k): v for k, v in _section(schema, "properties", dict).items()})
    required |= {str(name) for name in _section(schema, "required", list)}
    seen.discard(id(schema))
    return properties, required


def _description(schema: dict[str, Any]) -> str | None:
    text = schema.get("description") or schema.get("title")
    if not text:
        return None
    return docstring_line(str(text))


class _Builder:
    def __init__(self, registry: ComponentRegistry, diagnostics: Diagnostics) -> None:
        self.registry = registry
        self.diagnostics = diagnostics
        self.defs = TypeDefinitions()
        self._defined: set[str] = set()

    def define(self, name: str, schema: dict[str, Any]) -> None:
        """Define a component schema as a model or an alias."""
        if name in self._defined:
            return
        try:
            native = resolve(schema, True)
        except RoutegenError as e:
            self.diagnostics.error("type_skipped", e, path=name)
            return

        if isinstance(native, Anonymous):
            self.define_model(name, schema)
            return

        self._defined.add(name)
        text, _ = render(native, 1, name)
        nested, _ = anonymous_types(native, 1, name)
        self.defs.aliases.append({"name": name, "type": text})
        for nested_name, nested_schema in nested:
            self.define_model(nested_name, nested_schema)

    def define_model(self, name: str, schema: dict[str, Any]) -> None:
        """Define an object schema as a model with one field per property."""
        if name in self._defined:
            return
        try:
            properties, required = _object_shape(schema, self.registry)
        except RoutegenError as e:
            self.diagnostics.error("type_skipped", e, path=name)
            return
        self._defined.add(name)

        anon_count = 1
        fields = []
        nested: list[tuple[str, dict[str, Any]]] = []
        for prop, prop_schema in properties.items():
            try:
                native = resolve(prop_schema or {}, prop in required)
            except RoutegenError as e:
                self.diagnostics.error("field_skipped", e, path=f"{name}.{prop}")
                continue
            found, _ = anonymous_types(native, anon_count, name)
            text, anon_count = render(native, anon_count, name)
            nested.extend(found)

            ident = to_identifier(prop)
            fields.append({
                "name": ident,
                "alias": prop if ident != prop else None,
                "type": text,
                "required": not is_optional(native),
            })

        self.defs.models.append({
            "name": name,
            "doc": _description(schema),
            "fields": fields,
            "open": not properties or bool(schema.get("additionalProperties")),
        })
        for nested_name, nested_schema in nested:
            self.define_model(nested_name, nested_schema)


def _order_aliases(aliases: list[dict[str, Any]]) -> list[dict[str, Any]]:
    """Place every alias after the aliases its type text refers to."""
    by_name = {a["name"]: a for a in aliases}
    ordered: list[dict[str, Any]] = []
    visiting: set[str] = set()
    done: set[str] = set()

    def visit(alias: dict[str, Any]) -> None:
        name = alias["name"]
        if name in done or name in visiting:
            return
        visiting.add(name)
        for word in re.findall(r"[A-Za-z_][A-Za-z0-9_]*", alias["type"]):
            if word in by_name and word != name:
                visit(by_name[word])
        visiting.discard(name)
        done.add(name)
        ordered.append(alias)

    for alias in aliases:
        visit(alias)
    return ordered


def build_type_definitions(
    registry: ComponentRegistry,
    anonymous: Iterable[tuple[str, dict[str, Any]]] = (),
    diagnostics: Diagnostics | None = None,
) -> TypeDefinitions:
    """Build definitions for every component schema and anonymous type."""
    builder = _Builder(registry, diagnostics if diagnostics is not None else Diagnostics())
    for name, schema in registry.schemas.items():
        builder.define(class_name(str(name)), schema or {})
    for name, schema in anonymous:
        builder.define_model(name, schema)
    builder.defs.aliases = _order_aliases(builder.defs.aliases)
    return builder.defs
