"""Tests for the diagnostics collector and configuration."""

from pathlib import Path

from routegen.config import TEMPLATE_DIR, GeneratorConfig
from routegen.diagnostics import ERROR, WARNING, Diagnostics
from routegen.errors import MissingOperationId


class TestDiagnostics:
    def test_collects_errors_and_warnings(self):
        diagnostics = Diagnostics()
        diagnostics.error("operation_skipped", MissingOperationId(), path="/a", method="POST")
        diagnostics.warning("no_success_response", "no 2xx", path="/b", method="GET")
        assert len(diagnostics) == 2
        assert [d.severity for d in diagnostics] == [ERROR, WARNING]
        assert diagnostics.errors[0].message == "No operationId found"
        assert isinstance(diagnostics.errors[0].error, MissingOperationId)
        assert diagnostics.warnings[0].event == "no_success_response"

    def test_str(self):
        diagnostics = Diagnostics()
        diagnostics.error("response_skipped", ValueError("boom"), path="/a", method="GET", status_code="500")
        assert str(diagnostics.errors[0]) == "GET /a [500]: boom"

    def test_str_without_location(self):
        diagnostics = Diagnostics()
        diagnostics.warning("note", "plain")
        assert str(diagnostics.warnings[0]) == "plain"


class TestGeneratorConfig:
    def test_defaults(self, monkeypatch):
        for name in ("ROUTEGEN_OUTPUT_DIR", "ROUTEGEN_TEMPLATE_DIR",
                     "ROUTEGEN_INTROSPECTION_PATH", "ROUTEGEN_LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)
        config = GeneratorConfig()
        assert config.output_dir == Path("generated")
        assert config.template_dir == TEMPLATE_DIR
        assert config.introspection_path == "/swagger"
        assert config.sort_paths is True
        assert config.log_level == "INFO"

    def test_env(self, monkeypatch):
        monkeypatch.setenv("ROUTEGEN_INTROSPECTION_PATH", "/openapi")
        monkeypatch.setenv("ROUTEGEN_LOG_LEVEL", "DEBUG")
        config = GeneratorConfig()
        assert config.introspection_path == "/openapi"
        assert config.log_level == "DEBUG"

    def test_merge_skips_none(self):
        config = GeneratorConfig().merge(output_dir=Path("out"), introspection_path=None)
        assert config.output_dir == Path("out")
        assert config.introspection_path == GeneratorConfig().introspection_path

    def test_templates_shipped(self):
        for name in ("routes.py.j2", "stubs.py.j2", "models.py.j2", "main.py.j2", "__init__.py.j2"):
            assert (TEMPLATE_DIR / name).is_file()
