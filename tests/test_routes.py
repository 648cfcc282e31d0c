"""Tests for the routes module."""

import pytest

from routegen.errors import MalformedRouteSegment, PathArgumentMismatch
from routegen.naming import to_identifier
from routegen.routes import Segment, parse_route, validate_path_args


class TestParseRoute:
    """Test path template parsing."""

    def test_segments(self):
        route = parse_route("/pets/{petId}/name/{petName}")
        assert route.segments == (
            Segment(""),
            Segment("pets"),
            Segment("petId", is_parameter=True),
            Segment("name"),
            Segment("petName", is_parameter=True),
        )

    def test_parameter_names(self):
        route = parse_route("/pets/{petId}/photos/{photoId}")
        assert route.parameters() == ["petId", "photoId"]
        assert route.parameter_names() == {"petId", "photoId"}

    def test_literal_only(self):
        assert parse_route("/pets").parameter_names() == set()

    @pytest.mark.parametrize("route", [
        "/pets/x{bogus}",
        "/pets/{bogus}x",
        "/pets/{}",
        "/pets/{a{b}",
        "/pets/{open",
        "/pets/close}",
    ])
    def test_malformed_segments(self, route):
        with pytest.raises(MalformedRouteSegment):
            parse_route(route)

    def test_malformed_reports_segment(self):
        with pytest.raises(MalformedRouteSegment) as exc:
            parse_route("/pets/{petId}/x{bogus}")
        assert exc.value.segment == "x{bogus}"


class TestRender:
    """Test route re-rendering."""

    @pytest.mark.parametrize("route", [
        "/",
        "/pets",
        "/pets/{petId}",
        "/users/{username}/browse/{id}/",
    ])
    def test_round_trip(self, route):
        assert parse_route(route).render() == route

    def test_angle_bracket_syntax(self):
        route = parse_route("/pets/{petId}/name/{petName}")
        assert route.render("<{name}>") == "/pets/<petId>/name/<petName>"

    def test_rename(self):
        route = parse_route("/pets/{petId}")
        assert route.render(rename=to_identifier) == "/pets/{pet_id}"

    def test_str(self):
        assert str(parse_route("/pets/{petId}")) == "/pets/{petId}"


class TestValidatePathArgs:
    """Route parameters must be exactly the path-located arguments."""

    def test_equal_sets_in_any_order(self):
        route = parse_route("/a/{x}/b/{y}")
        validate_path_args(route, ["y", "x"])

    def test_missing_argument(self):
        route = parse_route("/a/{x}/b/{y}")
        with pytest.raises(PathArgumentMismatch) as exc:
            validate_path_args(route, ["x"])
        assert exc.value.route_params == {"x", "y"}
        assert exc.value.path_args == {"x"}

    def test_extra_argument(self):
        route = parse_route("/a/{x}")
        with pytest.raises(PathArgumentMismatch):
            validate_path_args(route, ["x", "z"])

    def test_no_parameters(self):
        validate_path_args(parse_route("/pets"), [])
