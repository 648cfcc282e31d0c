"""Entry point: python -m routegen SPEC

Reads an OpenAPI document, generates a FastAPI service package.
"""

from __future__ import annotations

import sys
from pathlib import Path

import click
import structlog

from .codegen import generate
from .config import GeneratorConfig
from .context_builder import build_context
from .diagnostics import Diagnostics
from .errors import RenderError, SpecLoadError
from .loader import load_spec
from .log import configure_logging


@click.command(context_settings={"max_content_width": 100})
@click.argument("spec_source")
@click.option(
    "-o", "--output", "output_dir",
    type=click.Path(file_okay=False, path_type=Path),
    help="Directory for the generated package [default: generated]",
)
@click.option(
    "--template-dir",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Directory with replacement Jinja2 templates.",
)
@click.option("--introspection-path", help="Route that serves the spec [default: /swagger]")
@click.option("--keep-order", is_flag=True, help="Keep document path order instead of sorting.")
@click.option("--strict", is_flag=True, help="Exit non-zero if any operation was skipped.")
@click.option("-v", "--verbose", is_flag=True, help="Log debug output.")
def main(
    spec_source: str,
    output_dir: Path | None,
    template_dir: Path | None,
    introspection_path: str | None,
    *,
    keep_order: bool,
    strict: bool,
    verbose: bool,
) -> None:
    """Generate a FastAPI service scaffold from an OpenAPI 3 document.

    SPEC_SOURCE is a YAML or JSON file path, or an http(s) URL.
    """
    config = GeneratorConfig().merge(
        output_dir=output_dir,
        template_dir=template_dir,
        introspection_path=introspection_path,
        sort_paths=False if keep_order else None,
        log_level="DEBUG" if verbose else None,
    )
    configure_logging(config.log_level)
    log = structlog.get_logger(__name__)

    diagnostics = Diagnostics()
    try:
        spec = load_spec(spec_source)
        context = build_context(spec, config, diagnostics)
        generate(context, config.output_dir, config.template_dir)
    except (SpecLoadError, RenderError) as e:
        log.error("generation_failed", reason=str(e))
        raise click.ClickException(str(e)) from e

    click.echo(
        f"Generated {config.output_dir} ({context['entrypoint_count']} routes, "
        f"{len(diagnostics.errors)} errors, {len(diagnostics.warnings)} warnings)"
    )
    if strict and diagnostics.errors:
        sys.exit(1)


if __name__ == "__main__":
    main()
