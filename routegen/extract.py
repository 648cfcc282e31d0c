"""Walk every path x method of a spec and build its entrypoints.

One malformed operation never blocks the rest: its error is recorded
in the diagnostics collector and the operation is skipped.
"""

from __future__ import annotations

from typing import Any

import structlog

from .diagnostics import Diagnostics
from .entrypoint import Entrypoint, Method, build_entrypoint, inherit_path_parameters
from .errors import MalformedNode, RoutegenError
from .loader import ComponentRegistry, get_paths

log = structlog.get_logger(__name__)


def extract_entrypoints(
    spec: dict[str, Any],
    diagnostics: Diagnostics | None = None,
    *,
    sort_paths: bool = True,
) -> list[Entrypoint]:
    """Build an Entrypoint for every supported operation in spec.

    Paths are visited sorted by path string (document order when
    sort_paths is false); methods in GET, POST, PUT, PATCH, DELETE order.
    """
    if diagnostics is None:
        diagnostics = Diagnostics()
    registry = ComponentRegistry.from_spec(spec)

    paths = get_paths(spec).items()
    if sort_paths:
        paths = sorted(paths)

    out: list[Entrypoint] = []
    for path, path_item in paths:
        if not isinstance(path_item, dict):
            diagnostics.error("path_skipped", MalformedNode("path item", path_item), path=path)
            continue
        for method in Method:
            operation = path_item.get(method.value)
            if operation is None:
                continue
            try:
                operation = inherit_path_parameters(operation, path_item, registry)
                entrypoint = build_entrypoint(path, method, operation, registry, diagnostics)
            except RoutegenError as e:
                diagnostics.error("operation_skipped", e, path=path, method=str(method))
                continue
            out.append(entrypoint)

    log.debug("entrypoints_extracted", count=len(out), problems=len(diagnostics))
    return out
