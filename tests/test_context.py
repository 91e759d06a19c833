"""Tests for wren.context — routing context and the current request."""

import pytest

from wren.context import RouteContext, get_context, get_request, request_var
from wren.http.request import Request
from wren.routing.route import Route, RouteSpec
from wren.state import AppState


def _request() -> Request:
    return Request(method="GET", path="/", raw_path="/")


class TestRouteContext:
    def test_create_copies_params(self) -> None:
        params = {"id": "1"}
        route = Route.from_spec(RouteSpec("/:id", [lambda w, r: None]))
        ctx = RouteContext.create(params, route, AppState())
        params["id"] = "2"
        assert ctx.params["id"] == "1"

    def test_unrouted_request_has_no_context(self) -> None:
        request = _request()
        assert get_context(request) is None
        assert request.params == {}

    def test_with_context_returns_copy(self) -> None:
        request = _request()
        route = Route.from_spec(RouteSpec("/", [lambda w, r: None]))
        routed = request.with_context(RouteContext.create({}, route, AppState()))
        assert routed is not request
        assert request.context is None
        assert get_context(routed).route is route


class TestGetRequest:
    def test_outside_request(self) -> None:
        with pytest.raises(LookupError):
            get_request()

    def test_inside_request(self) -> None:
        request = _request()
        token = request_var.set(request)
        try:
            assert get_request() is request
        finally:
            request_var.reset(token)
