"""Parse OpenAPI path templates into literal and parameter segments.

  /pets/{petId}/photos -> ["", "pets", {petId}, "photos"]

A segment is either entirely literal or a single well-formed {name}
placeholder; partial placeholders such as x{id} or {id}x are rejected.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Callable, Iterable

from .errors import MalformedRouteSegment, PathArgumentMismatch

_PLACEHOLDER = re.compile(r"^\{(.+)\}$")


def _has_brace(text: str) -> bool:
    return "{" in text or "}" in text


@dataclass(frozen=True)
class Segment:
    text: str
    is_parameter: bool = False


@dataclass(frozen=True)
class Route:
    segments: tuple[Segment, ...]

    def parameters(self) -> list[str]:
        """Parameter names in path order."""
        return [s.text for s in self.segments if s.is_parameter]

    def parameter_names(self) -> set[str]:
        return set(self.parameters())

    def render(
        self,
        syntax: str = "{{{name}}}",
        rename: Callable[[str], str] | None = None,
    ) -> str:
        """Reassemble the route, formatting parameters with syntax.

        syntax is a str.format pattern with a single ``name`` field,
        e.g. "<{name}>" or the default "{{{name}}}" for OpenAPI style.
        """
        parts = []
        for segment in self.segments:
            if segment.is_parameter:
                name = rename(segment.text) if rename else segment.text
                parts.append(syntax.format(name=name))
            else:
                parts.append(segment.text)
        return "/".join(parts)

    def __str__(self) -> str:
        return self.render()


def parse_route(route: str) -> Route:
    """Split a path template on '/' and classify each segment."""
    segments = []
    for section in route.split("/"):
        match = _PLACEHOLDER.match(section)
        if match:
            name = match.group(1)
            if _has_brace(name):
                raise MalformedRouteSegment(section)
            segments.append(Segment(name, is_parameter=True))
        elif _has_brace(section):
            raise MalformedRouteSegment(section)
        else:
            segments.append(Segment(section))
    return Route(tuple(segments))


def validate_path_args(route: Route, path_arg_names: Iterable[str]) -> None:
    """Require route parameters to be exactly the path-located arguments."""
    route_params = route.parameter_names()
    path_args = set(path_arg_names)
    if route_params != path_args:
        raise PathArgumentMismatch(route_params, path_args)
