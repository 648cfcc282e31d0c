"""Tests for the extraction driver."""

from conftest import make_spec

from routegen.entrypoint import Method
from routegen.errors import (
    DuplicateArgument,
    MalformedNode,
    MissingOperationId,
    PathArgumentMismatch,
    UnsupportedType,
)
from routegen.extract import extract_entrypoints
from routegen.native_types import Named, Option, Scalar


def _get(operation_id=None, **kwargs):
    op = {"responses": {"200": {"description": "OK"}}}
    if operation_id:
        op["operationId"] = operation_id
    op.update(kwargs)
    return op


class TestExtractPetstore:
    """Extraction over the petstore fixture."""

    def test_three_operations(self, petstore, diagnostics):
        entrypoints = extract_entrypoints(petstore, diagnostics)
        assert len(entrypoints) == 3
        assert len(diagnostics) == 0

    def test_order(self, petstore):
        entrypoints = extract_entrypoints(petstore)
        assert [(str(e.method), e.route.render()) for e in entrypoints] == [
            ("GET", "/pets"),
            ("POST", "/pets"),
            ("GET", "/pets/{petId}"),
        ]

    def test_contents(self, petstore):
        by_id = {e.operation_id: e for e in extract_entrypoints(petstore)}
        list_pets = by_id["listPets"]
        assert [(a.name, a.type_, a.location) for a in list_pets.args] == [
            ("limit", Option(Scalar.INT32), "query"),
        ]
        assert list_pets.success_response().return_type == Named("Pets")
        assert {r.status_code for r in list_pets.responses} == {"200", "default"}

        show = by_id["showPetById"]
        assert show.route.parameter_names() == {"petId"}
        assert show.success_response().return_type == Named("Pet")

        create = by_id["createPets"]
        assert create.success_response().return_type is None


class TestExtractFailures:
    """One malformed operation never blocks the rest."""

    def test_missing_operation_id_dropped(self, diagnostics):
        spec = make_spec({
            "/a": {"get": _get("getA"), "post": _get()},
            "/b": {"get": _get("getB")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["getA", "getB"]
        assert len(diagnostics.errors) == 1
        problem = diagnostics.errors[0]
        assert problem.event == "operation_skipped"
        assert isinstance(problem.error, MissingOperationId)
        assert (problem.method, problem.path) == ("POST", "/a")

    def test_path_mismatch_dropped(self, diagnostics):
        spec = make_spec({
            "/pets/{petId}": {"get": _get("showPet")},
            "/pets": {"get": _get("listPets")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["listPets"]
        assert isinstance(diagnostics.errors[0].error, PathArgumentMismatch)

    def test_parameter_failure_dropped(self, diagnostics):
        spec = make_spec({
            "/a": {"get": _get("getA", parameters=[{"name": "x", "in": "query", "schema": {"type": "null"}}])},
            "/b": {"get": _get("getB")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["getB"]
        assert isinstance(diagnostics.errors[0].error, UnsupportedType)

    def test_response_failure_keeps_operation(self, diagnostics):
        spec = make_spec({
            "/a": {"get": _get("getA", responses={
                "200": {"description": "OK"},
                "500": {"description": "Err", "content": {}},
            })},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert len(entrypoints) == 1
        assert [r.status_code for r in entrypoints[0].responses] == ["200"]
        assert diagnostics.errors[0].event == "response_skipped"

    def test_operation_not_a_mapping_dropped(self, diagnostics):
        spec = make_spec({
            "/a": {"get": "oops"},
            "/b": {"get": _get("getB")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["getB"]
        problem = diagnostics.errors[0]
        assert problem.event == "operation_skipped"
        assert isinstance(problem.error, MalformedNode)
        assert (problem.method, problem.path) == ("GET", "/a")

    def test_path_item_not_a_mapping_dropped(self, diagnostics):
        spec = make_spec({"/a": ["get"], "/b": {"get": _get("getB")}})
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["getB"]
        assert diagnostics.errors[0].event == "path_skipped"

    def test_malformed_parts_dropped(self, diagnostics):
        spec = make_spec({
            "/a": {"get": _get("getA", parameters="limit")},
            "/b": {"get": _get("getB", responses=["200"])},
            "/c": {"get": _get("getC", parameters=[{"name": "q", "in": "query", "schema": "string"}])},
            "/d": {"get": _get("getD")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["getD"]
        assert len(diagnostics.errors) == 3
        assert all(isinstance(d.error, MalformedNode) for d in diagnostics.errors)

    def test_numeric_operation_id_kept(self, diagnostics):
        spec = make_spec({"/a": {"get": _get(operationId=123)}})
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["123"]
        assert len(diagnostics) == 0

    def test_colliding_argument_names_dropped(self, diagnostics):
        spec = make_spec({
            "/pets/{petId}": {"get": _get("showPet", parameters=[
                {"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}},
                {"name": "pet_id", "in": "query", "schema": {"type": "string"}},
            ])},
            "/pets": {"get": _get("listPets")},
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["listPets"]
        problem = diagnostics.errors[0]
        assert problem.event == "operation_skipped"
        assert isinstance(problem.error, DuplicateArgument)
        assert problem.error.identifier == "pet_id"

    def test_works_without_collector(self):
        spec = make_spec({"/a": {"get": _get()}})
        assert extract_entrypoints(spec) == []


class TestExtractOrdering:
    """Paths sorted by string, methods in fixed order."""

    _SPEC = make_spec({
        "/zebras": {"get": _get("listZebras")},
        "/apes": {
            "delete": _get("deleteApes"),
            "patch": _get("patchApes"),
            "get": _get("listApes"),
            "put": _get("putApes"),
            "post": _get("createApes"),
            "options": _get("optionsApes"),
            "summary": "Apes",
        },
    })

    def test_sorted(self):
        ids = [e.operation_id for e in extract_entrypoints(self._SPEC)]
        assert ids == ["listApes", "createApes", "putApes", "patchApes", "deleteApes", "listZebras"]

    def test_document_order(self):
        ids = [e.operation_id for e in extract_entrypoints(self._SPEC, sort_paths=False)]
        assert ids[0] == "listZebras"
        assert ids[1:] == ["listApes", "createApes", "putApes", "patchApes", "deleteApes"]

    def test_methods(self):
        methods = [e.method for e in extract_entrypoints(self._SPEC)][:5]
        assert methods == list(Method)

    def test_stable_across_runs(self):
        first = extract_entrypoints(self._SPEC)
        second = extract_entrypoints(self._SPEC)
        assert first == second


class TestPathLevelParameters:
    def test_inherited(self, diagnostics):
        spec = make_spec({
            "/pets/{petId}": {
                "parameters": [{"name": "petId", "in": "path", "required": True, "schema": {"type": "string"}}],
                "get": _get("showPet"),
                "delete": _get("deletePet"),
            },
        })
        entrypoints = extract_entrypoints(spec, diagnostics)
        assert [e.operation_id for e in entrypoints] == ["showPet", "deletePet"]
        assert len(diagnostics) == 0
