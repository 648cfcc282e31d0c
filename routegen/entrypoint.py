"""Build one Entrypoint per OpenAPI operation.

An entrypoint bundles the parsed route, the HTTP method, the resolved
arguments and responses, and the operationId used for naming. Argument,
route and operationId problems fail the whole operation; a broken
response is reported and left out.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from .diagnostics import Diagnostics
from .errors import (
    DuplicateArgument,
    EmptyContentMap,
    MalformedNode,
    MissingOperationId,
    MissingSchema,
    RoutegenError,
    UnsupportedLocation,
)
from .loader import ComponentRegistry
from .native_types import NativeType, Scalar, resolve
from .naming import to_identifier
from .routes import Route, parse_route, validate_path_args

LOCATIONS = ("path", "query", "header", "cookie", "body")
JSON_MEDIA_TYPE = "application/json"


class Method(enum.Enum):
    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Arg:
    name: str
    type_: NativeType
    location: str

    @property
    def identifier(self) -> str:
        """The argument name normalized for generated Python code."""
        return to_identifier(self.name)


@dataclass(frozen=True)
class Response:
    status_code: str
    return_type: NativeType | None = None
    content_type: str | None = None


@dataclass(frozen=True)
class Entrypoint:
    route: Route
    method: Method
    args: tuple[Arg, ...]
    responses: tuple[Response, ...]
    operation_id: str
    summary: str | None = None
    description: str | None = None
    builtin: bool = field(default=False, compare=False)

    def success_response(self) -> Response | None:
        """The first declared response in the 2xx range."""
        for response in self.responses:
            if response.status_code.startswith("2"):
                return response
        return None


def _pick_media(content: dict[str, Any], what: str) -> tuple[str, dict[str, Any]]:
    """Choose application/json when declared, else the first media type."""
    if not content:
        raise EmptyContentMap(what)
    if not isinstance(content, dict):
        raise MalformedNode(f"content of {what}", content)
    content_type = JSON_MEDIA_TYPE if JSON_MEDIA_TYPE in content else next(iter(content))
    media = content[content_type] or {}
    if not isinstance(media, dict):
        raise MalformedNode(f"{content_type} media of {what}", media)
    return str(content_type), media


def _node_list(node: Any, what: str) -> list[Any]:
    if node is None:
        return []
    if not isinstance(node, list):
        raise MalformedNode(what, node)
    return node


def _text(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def build_arg(parameter: dict[str, Any]) -> Arg:
    """Turn a resolved parameter object into an Arg."""
    name = _text(parameter.get("name"))
    if not name:
        raise MissingSchema("unnamed parameter")
    location = parameter.get("in", "query")
    if location not in LOCATIONS[:-1]:
        raise UnsupportedLocation(name, location)

    schema = parameter.get("schema")
    if schema is None and parameter.get("content"):
        _, media = _pick_media(parameter["content"], f"parameter {name!r}")
        schema = media.get("schema")
    if schema is None:
        raise MissingSchema(f"parameter {name!r}")

    required = bool(parameter.get("required", False))
    return Arg(name, resolve(schema, required), location)


def build_args(operation: dict[str, Any], registry: ComponentRegistry) -> list[Arg]:
    """Resolve every declared parameter; the first failure propagates."""
    args = [
        build_arg(registry.parameter(parameter))
        for parameter in _node_list(operation.get("parameters"), "parameters")
    ]

    if "requestBody" in operation:
        body = registry.request_body(operation["requestBody"] or {})
        _, media = _pick_media(body.get("content") or {}, "request body")
        schema = media.get("schema")
        if schema is None:
            raise MissingSchema("request body")
        args.append(Arg("body", resolve(schema, bool(body.get("required", False))), "body"))

    return args


def _parameter_key(parameter: dict[str, Any]) -> tuple[str, str]:
    return str(parameter.get("name")), str(parameter.get("in", "query"))


def inherit_path_parameters(
    operation: dict[str, Any],
    path_item: dict[str, Any],
    registry: ComponentRegistry,
) -> dict[str, Any]:
    """Merge path-item level parameters into an operation.

    Operation parameters win over path-item parameters with the same
    name and location. The operation dict itself is not modified.
    """
    if not isinstance(operation, dict):
        raise MalformedNode("operation", operation)
    shared = _node_list(path_item.get("parameters"), "path item parameters")
    if not shared:
        return operation

    own = [registry.parameter(p) for p in _node_list(operation.get("parameters"), "parameters")]
    declared = {_parameter_key(p) for p in own}
    inherited = [
        p for p in (registry.parameter(p) for p in shared)
        if _parameter_key(p) not in declared
    ]
    return {**operation, "parameters": inherited + own}


def build_response(status_code: str, response_obj: dict[str, Any]) -> Response:
    """Model one response; a response without content has no body."""
    if "content" not in response_obj or response_obj["content"] is None:
        return Response(status_code)
    content_type, media = _pick_media(response_obj["content"], f"response {status_code}")
    schema = media.get("schema")
    if schema is None:
        raise MissingSchema(f"response {status_code}")
    # For responses, the default required state is true
    return Response(status_code, resolve(schema, True), content_type)


def build_responses(
    operation: dict[str, Any],
    registry: ComponentRegistry,
    diagnostics: Diagnostics,
    *,
    path: str | None = None,
    method: str | None = None,
) -> list[Response]:
    """Model each response, reporting and dropping the ones that fail."""
    declared = operation.get("responses") or {}
    if not isinstance(declared, dict):
        raise MalformedNode("responses", declared)
    responses = []
    for code, response_obj in declared.items():
        status_code = str(code)
        try:
            resolved = registry.response(response_obj or {})
            responses.append(build_response(status_code, resolved))
        except RoutegenError as e:
            diagnostics.error(
                "response_skipped", e, path=path, method=method, status_code=status_code,
            )
    return responses


def check_unique_identifiers(args: list[Arg]) -> None:
    """Reject arguments whose Python identifiers collide, e.g. petId and pet_id."""
    seen: dict[str, list[str]] = {}
    for arg in args:
        seen.setdefault(arg.identifier, []).append(arg.name)
    for identifier, names in seen.items():
        if len(names) > 1:
            raise DuplicateArgument(identifier, names)


def build_entrypoint(
    route: str,
    method: Method,
    operation: dict[str, Any],
    registry: ComponentRegistry,
    diagnostics: Diagnostics | None = None,
) -> Entrypoint:
    """Build the Entrypoint for one operation.

    Raises a RoutegenError when the operation cannot be generated.
    Response failures are reported to diagnostics instead.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    if not isinstance(operation, dict):
        raise MalformedNode("operation", operation)

    args = build_args(operation, registry)
    responses = build_responses(
        operation, registry, diagnostics, path=route, method=str(method),
    )

    parsed = parse_route(route)
    validate_path_args(parsed, (arg.name for arg in args if arg.location == "path"))
    check_unique_identifiers(args)

    operation_id = operation.get("operationId")
    # YAML reads a bare 123 as an int
    if isinstance(operation_id, int) and not isinstance(operation_id, bool):
        operation_id = str(operation_id)
    if not isinstance(operation_id, str) or not operation_id:
        raise MissingOperationId()

    return Entrypoint(
        route=parsed,
        method=method,
        args=tuple(args),
        responses=tuple(responses),
        operation_id=operation_id,
        summary=_text(operation.get("summary")),
        description=_text(operation.get("description")),
    )


def introspection_entrypoint(path: str = "/swagger") -> Entrypoint:
    """The built-in endpoint that serves the spec document itself."""
    return Entrypoint(
        route=parse_route(path),
        method=Method.GET,
        args=(),
        responses=(Response("200", Scalar.STRING, JSON_MEDIA_TYPE),),
        operation_id="getSwagger",
        summary="Serve the OpenAPI document this service was generated from.",
        builtin=True,
    )
