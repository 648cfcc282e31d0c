"""Render templates and write generated output.

Takes the context from context_builder and produces a Python package
with routes.py, stubs.py, models.py, main.py, __init__.py and a JSON
copy of the spec served by the introspection endpoint.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2
import structlog

from .config import TEMPLATE_DIR
from .errors import RenderError

log = structlog.get_logger(__name__)

# template name -> output file name
ARTIFACTS: dict[str, str] = {
    "routes.py.j2": "routes.py",
    "stubs.py.j2": "stubs.py",
    "models.py.j2": "models.py",
    "main.py.j2": "main.py",
    "__init__.py.j2": "__init__.py",
}
SPEC_COPY = "openapi.json"


def make_environment(template_dir: Path | None = None) -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(template_dir or TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
        autoescape=False,
    )
    env.filters["pyrepr"] = repr
    return env


def render_artifacts(
    context: dict[str, Any], template_dir: Path | None = None,
) -> dict[str, str]:
    """Render every template; any template failure aborts the whole run."""
    env = make_environment(template_dir)
    rendered: dict[str, str] = {}
    for template_name, file_name in ARTIFACTS.items():
        try:
            template = env.get_template(template_name)
            rendered[file_name] = template.render(**context)
        except jinja2.TemplateError as e:
            raise RenderError(f"Failed to render {template_name}: {e}") from e
    rendered[SPEC_COPY] = json.dumps(context["spec"], indent=2, default=str) + "\n"
    return rendered


def generate(
    context: dict[str, Any],
    output_dir: Path,
    template_dir: Path | None = None,
) -> list[Path]:
    """Render all artifacts and write them to output_dir."""
    rendered = render_artifacts(context, template_dir)

    output_dir.mkdir(parents=True, exist_ok=True)
    written = []
    for file_name, text in rendered.items():
        output_path = output_dir / file_name
        output_path.write_text(text, encoding="utf-8")
        log.debug("artifact_written", path=str(output_path), size=len(text))
        written.append(output_path)

    log.info(
        "generation_complete",
        output_dir=str(output_dir),
        entrypoints=context["entrypoint_count"],
        models=len(context["models"]),
    )
    return written
