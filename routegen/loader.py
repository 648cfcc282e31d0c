"""Load an OpenAPI document and expose its component registry.

Reads YAML or JSON from a local path or an http(s) URL.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

import httpx
import yaml

from .errors import InvalidReference, MalformedNode, SpecLoadError
from .native_types import ref_name


def _read_source(source: str | Path) -> str:
    text = str(source)
    if text.startswith(("http://", "https://")):
        try:
            response = httpx.get(text, follow_redirects=True, timeout=30.0)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise SpecLoadError(f"Could not fetch spec from {text}: {e}") from e
        return response.text
    try:
        return Path(source).read_text(encoding="utf-8")
    except OSError as e:
        raise SpecLoadError(f"Could not read spec {source}: {e}") from e


def parse_spec(text: str) -> dict[str, Any]:
    """Parse and sanity-check an OpenAPI 3 document (YAML is a JSON superset)."""
    try:
        spec = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SpecLoadError(f"Spec is not valid YAML or JSON: {e}") from e

    if not isinstance(spec, dict):
        raise SpecLoadError("Spec document must be a mapping")
    version = str(spec.get("openapi", ""))
    if not version.startswith("3."):
        raise SpecLoadError(f"Unsupported OpenAPI version {version or 'missing'!r}, expected 3.x")
    if not isinstance(spec.get("paths"), dict):
        raise SpecLoadError("Spec has no paths mapping")
    return spec


def load_spec(source: str | Path) -> dict[str, Any]:
    """Load the OpenAPI spec from disk or over HTTP."""
    return parse_spec(_read_source(source))


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths") or {}


def get_info(spec: dict[str, Any]) -> dict[str, Any]:
    info = spec.get("info")
    return info if isinstance(info, dict) else {}


def _frozen(section: Any) -> Mapping[str, Any]:
    return MappingProxyType(dict(section) if isinstance(section, dict) else {})


@dataclass(frozen=True)
class ComponentRegistry:
    """Read-only view of the spec's reusable components."""

    schemas: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))
    parameters: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))
    responses: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))
    request_bodies: Mapping[str, Any] = field(default_factory=lambda: _frozen(None))

    @classmethod
    def from_spec(cls, spec: dict[str, Any]) -> ComponentRegistry:
        components = spec.get("components")
        if not isinstance(components, dict):
            components = {}
        return cls(
            schemas=_frozen(components.get("schemas")),
            parameters=_frozen(components.get("parameters")),
            responses=_frozen(components.get("responses")),
            request_bodies=_frozen(components.get("requestBodies")),
        )

    def resolve(self, node: dict[str, Any], table: Mapping[str, Any]) -> dict[str, Any]:
        """Follow $ref indirections of node through table.

        Raises InvalidReference for dangling or cyclic references.
        """
        if not isinstance(node, dict):
            raise MalformedNode("component or $ref", node)
        seen: set[str] = set()
        while "$ref" in node:
            ref = node["$ref"]
            name = ref_name(ref)
            if ref in seen:
                raise InvalidReference(ref)
            seen.add(ref)
            target = table.get(name)
            if not isinstance(target, dict):
                raise InvalidReference(ref)
            node = target
        return node

    def parameter(self, node: dict[str, Any]) -> dict[str, Any]:
        return self.resolve(node, self.parameters)

    def response(self, node: dict[str, Any]) -> dict[str, Any]:
        return self.resolve(node, self.responses)

    def request_body(self, node: dict[str, Any]) -> dict[str, Any]:
        return self.resolve(node, self.request_bodies)

    def schema(self, node: dict[str, Any]) -> dict[str, Any]:
        return self.resolve(node, self.schemas)
