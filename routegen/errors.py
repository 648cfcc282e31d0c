"""Exceptions raised while loading, resolving and rendering a spec.

Schema, route, operation and malformed-node errors are recoverable: the extraction
driver records them and skips the offending operation or response.
SpecLoadError and RenderError abort the run.
"""

from __future__ import annotations


class RoutegenError(Exception):
    """Base class for every error raised by routegen."""


class SpecLoadError(RoutegenError):
    """The spec document could not be read or is not an OpenAPI 3 document."""


class RenderError(RoutegenError):
    """A template failed to load or render."""


class MalformedNode(RoutegenError):
    """A node of the document has the wrong shape, e.g. a string where a mapping belongs."""

    def __init__(self, what: str, node: object) -> None:
        super().__init__(f"Expected a mapping for {what}, got {type(node).__name__}")
        self.what = what


# Schema resolution

class SchemaError(RoutegenError):
    """A schema node could not be turned into a NativeType."""


class InvalidReference(SchemaError):
    def __init__(self, ref: str) -> None:
        super().__init__(f"Reference {ref!r} is not a valid path")
        self.ref = ref


class UnsupportedType(SchemaError):
    def __init__(self, type_name: str) -> None:
        super().__init__(f"Schema type {type_name!r} is not supported")
        self.type_name = type_name


class AmbiguousSchemaType(SchemaError):
    def __init__(self, types: list[str]) -> None:
        super().__init__(f"Schema declares {len(types)} types {types}, expected one")
        self.types = types


class MissingArrayItems(SchemaError):
    def __init__(self) -> None:
        super().__init__("Items missing for array schema")


class MissingSchema(SchemaError):
    def __init__(self, what: str) -> None:
        super().__init__(f"No schema found for {what}")
        self.what = what


# Routes

class RouteError(RoutegenError):
    """A route template is malformed or disagrees with its parameters."""


class MalformedRouteSegment(RouteError):
    def __init__(self, segment: str) -> None:
        super().__init__(f"Invalid route segment: {segment!r}")
        self.segment = segment


class PathArgumentMismatch(RouteError):
    def __init__(self, route_params: set[str], path_args: set[str]) -> None:
        super().__init__(
            f"Route parameters {sorted(route_params)} do not match "
            f"path arguments {sorted(path_args)}"
        )
        self.route_params = route_params
        self.path_args = path_args


# Operations

class OperationError(RoutegenError):
    """An operation or one of its responses is malformed."""


class EmptyContentMap(OperationError):
    def __init__(self, what: str) -> None:
        super().__init__(f"Content map empty for {what}")
        self.what = what


class MissingOperationId(OperationError):
    def __init__(self) -> None:
        super().__init__("No operationId found")


class UnsupportedLocation(OperationError):
    def __init__(self, name: str, location: str) -> None:
        super().__init__(f"Parameter {name!r} has unsupported location {location!r}")
        self.name = name
        self.location = location


class DuplicateArgument(OperationError):
    def __init__(self, identifier: str, names: list[str]) -> None:
        super().__init__(f"Parameters {names} all map to the argument {identifier!r}")
        self.identifier = identifier
        self.names = names
