"""Build Jinja2 template context from parsed OpenAPI spec.

Projects each Entrypoint into a flat dict of template arguments,
appends the built-in introspection entrypoint, and assembles the full
context dict for the routes, stubs, models and main templates.
"""

from __future__ import annotations

from typing import Any

from .config import GeneratorConfig
from .diagnostics import Diagnostics
from .entrypoint import Arg, Entrypoint, introspection_entrypoint
from .extract import extract_entrypoints
from .loader import ComponentRegistry, get_info
from .native_types import anonymous_types, is_optional, render
from .naming import docstring_line, function_name, to_identifier
from .type_defs import build_type_definitions

UNIT_TYPE = "None"

# FastAPI parameter markers by location
_MARKERS: dict[str, str] = {
    "path": "Path",
    "query": "Query",
    "header": "Header",
    "cookie": "Cookie",
    "body": "Body",
}


def _doc_lines(entrypoint: Entrypoint) -> list[str]:
    """Summary and description, one line each, skipping absent ones."""
    return [docstring_line(t) for t in (entrypoint.summary, entrypoint.description) if t]


def _arg_marker(arg: Arg) -> str:
    marker = _MARKERS[arg.location]
    if arg.location in ("path", "body") or arg.identifier == arg.name:
        return f"{marker}()"
    return f"{marker}(alias={arg.name!r})"


def build_template_args(
    entrypoint: Entrypoint,
    diagnostics: Diagnostics | None = None,
    *,
    function: str | None = None,
) -> dict[str, Any]:
    """Project an Entrypoint into the arguments the templates consume."""
    if diagnostics is None:
        diagnostics = Diagnostics()
    owner = entrypoint.operation_id if function is None else function
    function = function or function_name(entrypoint.operation_id)

    anon_count = 1
    anonymous: list[tuple[str, dict[str, Any]]] = []
    args = []
    for arg in entrypoint.args:
        found, _ = anonymous_types(arg.type_, anon_count, owner)
        rendered, anon_count = render(arg.type_, anon_count, owner)
        anonymous.extend(found)
        required = not is_optional(arg.type_)
        args.append({
            "name": arg.identifier,
            "wire_name": arg.name,
            "type": rendered,
            "location": arg.location,
            "required": required,
            # path parameters can never be defaulted
            "has_default": not required and arg.location != "path",
            "marker": _arg_marker(arg),
        })

    # just takes the first response type in the 200 range
    success = entrypoint.success_response()
    result_type = UNIT_TYPE
    content_type = None
    status_code = None
    if success is None:
        diagnostics.warning(
            "no_success_response",
            "No 2xx response declared, result type is None",
            path=entrypoint.route.render(),
            method=str(entrypoint.method),
        )
    else:
        status_code = success.status_code
        content_type = success.content_type
        if success.return_type is not None:
            found, _ = anonymous_types(success.return_type, anon_count, owner)
            result_type, anon_count = render(success.return_type, anon_count, owner)
            anonymous.extend(found)

    return {
        "method": entrypoint.method.value,
        "http_method": entrypoint.method.name,
        "route": entrypoint.route.render(rename=to_identifier),
        "spec_route": entrypoint.route.render(),
        "function": function,
        "operation_id": entrypoint.operation_id,
        "args": args,
        "result_type": result_type,
        "status_code": status_code,
        "content_type": content_type,
        "doc": _doc_lines(entrypoint),
        "anonymous": anonymous,
        "builtin": entrypoint.builtin,
    }


def _unique_function_names(
    entrypoints: list[Entrypoint], diagnostics: Diagnostics,
) -> list[str | None]:
    """Return an override per entrypoint whose function name collides.

    The first owner of a name keeps it; later ones get a method suffix,
    then a numeric one. None means no override is needed.
    """
    taken: set[str] = set()
    overrides: list[str | None] = []
    for entrypoint in entrypoints:
        base = function_name(entrypoint.operation_id)
        name = base
        if name in taken:
            name = f"{base}_{entrypoint.method.value}"
            n = 2
            while name in taken:
                name = f"{base}_{n}"
                n += 1
            diagnostics.warning(
                "duplicate_function_name",
                f"{base} already generated, using {name}",
                path=entrypoint.route.render(),
                method=str(entrypoint.method),
            )
        taken.add(name)
        overrides.append(None if name == base else name)
    return overrides


def build_context(
    spec: dict[str, Any],
    config: GeneratorConfig | None = None,
    diagnostics: Diagnostics | None = None,
) -> dict[str, Any]:
    """Build the full template context from the OpenAPI spec."""
    config = config or GeneratorConfig()
    if diagnostics is None:
        diagnostics = Diagnostics()

    entrypoints = extract_entrypoints(spec, diagnostics, sort_paths=config.sort_paths)
    entrypoints.append(introspection_entrypoint(config.introspection_path))

    overrides = _unique_function_names(entrypoints, diagnostics)
    projected = [
        build_template_args(entrypoint, diagnostics, function=override)
        for entrypoint, override in zip(entrypoints, overrides)
    ]

    anonymous = [pair for entry in projected for pair in entry["anonymous"]]
    types = build_type_definitions(
        ComponentRegistry.from_spec(spec), anonymous, diagnostics,
    )

    info = get_info(spec)
    return {
        "entrypoints": projected,
        "routes": [entry["function"] for entry in projected],
        "models": types.models,
        "aliases": types.aliases,
        "title": docstring_line(str(info.get("title") or "Generated API")),
        "version": docstring_line(str(info.get("version") or "0.1.0")),
        "entrypoint_count": len(projected),
        "diagnostics": diagnostics,
        "spec": spec,
    }
