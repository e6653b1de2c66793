"""Tests for the endpoint registry."""

import pytest

from rhttp.http.messages import HttpMethod
from rhttp.registry import Endpoint, EndpointRegistry, RegistryBuilder


def ok(req, res):
    return res.send("ok")


def other(req, res):
    return res.send("other")


class TestRegistryBuilder:
    """Test RegistryBuilder functionality."""

    def test_register_appends(self):
        builder = RegistryBuilder()

        endpoint = builder.register("GET", "/items", ok)

        assert endpoint == Endpoint(HttpMethod.GET, "/items", ok)
        assert len(builder) == 1

    def test_register_unknown_method(self):
        builder = RegistryBuilder()
        with pytest.raises(ValueError):
            builder.register("FETCH", "/items", ok)

    @pytest.mark.parametrize("method", list(HttpMethod))
    def test_verb_helpers(self, method):
        builder = RegistryBuilder()

        helper = getattr(builder, method.value.lower())
        assert helper("/x", ok) is ok

        [endpoint] = builder.build()
        assert endpoint.method is method
        assert endpoint.path == "/x"
        assert endpoint.handler is ok

    def test_verb_helper_as_decorator(self):
        builder = RegistryBuilder()

        @builder.post("/items")
        def create(req, res):
            return res.status(201).send("")

        [endpoint] = builder.build()
        assert endpoint.method is HttpMethod.POST
        assert endpoint.handler is create

    def test_build_is_a_snapshot(self):
        builder = RegistryBuilder()
        builder.get("/a", ok)
        registry = builder.build()

        builder.get("/b", ok)

        assert len(registry) == 1
        assert len(builder.build()) == 2


class TestEndpointRegistry:
    """Test lookups."""

    def test_find_exact_match(self):
        builder = RegistryBuilder()
        builder.get("/items", ok)
        builder.post("/items", other)
        registry = builder.build()

        assert registry.find("GET", "/items").handler is ok
        assert registry.find(HttpMethod.POST, "/items").handler is other

    def test_first_registration_wins(self):
        builder = RegistryBuilder()
        builder.get("/dup", ok)
        builder.get("/dup", other)

        assert builder.build().find("GET", "/dup").handler is ok

    @pytest.mark.parametrize(
        "method, path",
        [
            ("GET", "/items/"),
            ("GET", "/item"),
            ("GET", "/items/1"),
            ("GET", "/ITEMS"),
            ("PUT", "/items"),
            ("GET", ""),
        ],
    )
    def test_no_partial_matching(self, method, path):
        builder = RegistryBuilder()
        builder.get("/items", ok)

        assert builder.build().find(method, path) is None

    def test_iteration_keeps_registration_order(self):
        builder = RegistryBuilder()
        builder.get("/a", ok)
        builder.delete("/b", ok)
        builder.get("/a", other)

        assert [(e.method, e.path) for e in builder.build()] == [
            (HttpMethod.GET, "/a"),
            (HttpMethod.DELETE, "/b"),
            (HttpMethod.GET, "/a"),
        ]

    def test_empty_registry(self):
        registry = EndpointRegistry()
        assert len(registry) == 0
        assert registry.find("GET", "/") is None
        assert repr(registry) == "EndpointRegistry([])"
