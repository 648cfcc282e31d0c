"""Generator configuration.

Defaults come from ROUTEGEN_* environment variables; the CLI overrides
them with explicit options.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

TEMPLATE_DIR = Path(__file__).parent / "templates"
OUTPUT_DIR = Path("generated")
INTROSPECTION_PATH = "/swagger"


def _env_path(name: str, default: Path) -> Path:
    value = os.environ.get(name)
    return Path(value) if value else default


@dataclass(frozen=True)
class GeneratorConfig:
    output_dir: Path = field(
        default_factory=lambda: _env_path("ROUTEGEN_OUTPUT_DIR", OUTPUT_DIR)
    )
    template_dir: Path = field(
        default_factory=lambda: _env_path("ROUTEGEN_TEMPLATE_DIR", TEMPLATE_DIR)
    )
    introspection_path: str = field(
        default_factory=lambda: os.environ.get("ROUTEGEN_INTROSPECTION_PATH", INTROSPECTION_PATH)
    )
    sort_paths: bool = True
    log_level: str = field(
        default_factory=lambda: os.environ.get("ROUTEGEN_LOG_LEVEL", "INFO")
    )

    def merge(self, **overrides: Any) -> GeneratorConfig:
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
