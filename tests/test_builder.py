"""Tests for routekit.routing.builder — verbs, groups, and scope restoration."""

import pytest

from routekit.config import RouterConfig
from routekit.errors import (
    InvalidArgumentError,
    MalformedReferenceError,
    MemberNotFoundError,
    ResolutionError,
)
from routekit.loader import Loader
from routekit.routing.builder import RouteBuilder
from routekit.routing.route import Route, Verb
from routekit.routing.stack import ConfigFragment, ConfigStack


class UserController:
    def list(self, request):
        return "users"

    @staticmethod
    def store(request):
        return "stored"


class Throttle:
    @staticmethod
    def handle(request, next):
        return next(request)


def _outer(request, next):
    return next(request)


def _inner(request, next):
    return next(request)


def _route_mw(request, next):
    return next(request)


def _handler(request):
    return "ok"


def _builder(config: RouterConfig | None = None) -> RouteBuilder:
    config = config or RouterConfig()
    loader = Loader()
    loader.provide(config.controller_namespace("UserController"), UserController)
    loader.provide(config.middleware_namespace("Throttle"), Throttle)
    return RouteBuilder(loader.resolve, config)


class TestVerbs:
    @pytest.mark.parametrize(
        ("method", "verb"),
        [
            ("get", Verb.GET),
            ("head", Verb.HEAD),
            ("post", Verb.POST),
            ("put", Verb.PUT),
            ("patch", Verb.PATCH),
            ("delete", Verb.DELETE),
            ("all", Verb.ALL),
        ],
    )
    def test_verb_tags(self, method: str, verb: Verb) -> None:
        router = _builder()
        route = getattr(router, method)("/ping", _handler)
        assert route.verb is verb
        assert router.map() == [route]

    def test_callable_handler(self) -> None:
        route = _builder().get("/", _handler)
        assert route.handler is _handler
        assert route.path == "/"
        assert route.middlewares == ()
        assert route.alias == ""

    def test_string_handler(self) -> None:
        route = _builder().get("/users", "UserController.list")
        assert route.handler.__func__ is UserController.list
        assert route.handler(None) == "users"

    def test_async_handler(self) -> None:
        async def handler(request):
            return "ok"

        assert _builder().post("/async", handler).handler is handler

    def test_config_then_handler(self) -> None:
        route = _builder().post(
            "/users",
            {"middleware": ["Throttle", _route_mw], "alias": "users.store"},
            "UserController.store",
        )
        assert route.middlewares == (Throttle.handle, _route_mw)
        assert route.alias == "users.store"
        assert route.handler is UserController.store

    def test_config_fragment_object(self) -> None:
        route = _builder().get("/", ConfigFragment(alias="home"), _handler)
        assert route.alias == "home"

    def test_config_without_handler(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _builder().get("/", {"alias": "home"})

    def test_invalid_second_argument(self) -> None:
        with pytest.raises(InvalidArgumentError, match="int"):
            _builder().get("/", 42)

    def test_malformed_reference(self) -> None:
        with pytest.raises(MalformedReferenceError):
            _builder().get("/", "UserController")

    def test_missing_member(self) -> None:
        with pytest.raises(MemberNotFoundError):
            _builder().get("/", "UserController.destroy")

    def test_unknown_controller(self) -> None:
        with pytest.raises(ResolutionError):
            _builder().get("/", "_routekit_nope_Controller.index")

    def test_failed_registration_adds_nothing(self) -> None:
        router = _builder()
        with pytest.raises(MemberNotFoundError):
            router.get("/", "UserController.destroy")
        assert len(router.routes) == 0

    def test_config_not_persisted(self) -> None:
        router = _builder()
        router.get("/a", {"alias": "a", "middleware": _route_mw}, _handler)
        route = router.get("/b", _handler)
        assert route.alias == ""
        assert route.middlewares == ()
        assert len(router.stack) == 0

    def test_add_by_verb_name(self) -> None:
        route = _builder().add("put", "/", _handler)
        assert route.verb is Verb.PUT

    def test_add_unknown_verb(self) -> None:
        with pytest.raises(InvalidArgumentError, match="options"):
            _builder().add("options", "/", _handler)

    def test_custom_separator(self) -> None:
        router = _builder(RouterConfig(reference_separator="@"))
        route = router.get("/users", "UserController@list")
        assert route.handler(None) == "users"


class TestPaths:
    def test_repeated_separators_collapse(self) -> None:
        assert _builder().get("//a///b//", _handler).path == "/a/b/"

    def test_builder_prefix(self) -> None:
        router = RouteBuilder(Loader().resolve, prefix="/v1")
        assert router.get("/users", _handler).path == "/v1/users"

    def test_group_prefix_joined_then_collapsed(self) -> None:
        router = _builder()
        captured: list[Route] = []
        router.group("/api/", lambda r: captured.append(r.get("/users", _handler)))
        assert captured[0].path == "/api/users"


class TestGroup:
    def test_end_to_end(self) -> None:
        router = _builder()
        router.group("/api", lambda r: r.get("/users", "UserController.list"))

        routes = router.map()
        assert len(routes) == 1
        assert routes[0].verb is Verb.GET
        assert routes[0].path == "/api/users"
        assert routes[0].handler(None) == "users"

    def test_composer_receives_builder(self) -> None:
        router = _builder()
        seen: list[RouteBuilder] = []
        router.group("/x", seen.append)
        assert seen == [router]

    def test_nested_prefix_and_middleware_order(self) -> None:
        router = _builder()

        def inner(r: RouteBuilder) -> None:
            r.get("/c", {"middleware": _route_mw}, _handler)

        def outer(r: RouteBuilder) -> None:
            r.group("/b", {"middleware": _inner}, inner)

        router.group("/a", {"middleware": [_outer, "Throttle"]}, outer)

        route = router.map()[0]
        assert route.path == "/a/b/c"
        assert route.middlewares == (_outer, Throttle.handle, _inner, _route_mw)

    def test_alias_accumulates(self) -> None:
        router = _builder()

        def inner(r: RouteBuilder) -> None:
            r.get("/", {"alias": "index"}, _handler)

        router.group("/admin", {"alias": "admin."}, lambda r: r.group("/users", {"alias": "users."}, inner))
        assert router.map()[0].alias == "admin.users.index"

    def test_alias_without_trailing_fragment(self) -> None:
        router = _builder()

        def inner(r: RouteBuilder) -> None:
            r.get("/", _handler)

        router.group("/a", {"alias": "a"}, lambda r: r.group("/b", {"alias": "b"}, inner))
        assert router.map()[0].alias == "ab"

    def test_alias_cleared_by_trailing_fragment_without_alias(self) -> None:
        router = _builder()

        def inner(r: RouteBuilder) -> None:
            r.get("/", {"middleware": _route_mw}, _handler)

        router.group("/a", {"alias": "a"}, lambda r: r.group("/b", {"alias": "b"}, inner))
        assert router.map()[0].alias == ""

    def test_two_argument_group_clears_alias(self) -> None:
        # The composer-only form pushes a fragment without an alias.
        router = _builder()

        def inner(r: RouteBuilder) -> None:
            r.get("/", _handler)

        router.group("/a", {"alias": "a."}, lambda r: r.group("/b", inner))
        assert router.map()[0].alias == ""

    def test_registration_order(self) -> None:
        router = _builder()

        def body(r: RouteBuilder) -> None:
            r.get("/one", _handler)
            r.post("/two", _handler)

        router.get("/zero", _handler)
        router.group("/g", body)
        router.get("/three", _handler)
        assert [r.path for r in router.map()] == ["/zero", "/g/one", "/g/two", "/three"]

    def test_invalid_shape(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _builder().group("/x", "not a config")

    def test_config_without_composer(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _builder().group("/x", {"alias": "x"})

    def test_two_composers(self) -> None:
        with pytest.raises(InvalidArgumentError):
            _builder().group("/x", lambda r: None, lambda r: None)


class TestScopeRestoration:
    def test_restored_after_success(self) -> None:
        router = _builder()
        router.group("/api", {"alias": "api."}, lambda r: r.group("/v1", {"middleware": _outer}, lambda rr: None))
        assert router.prefix == ""
        assert router.stack == ConfigStack()

    def test_restored_inside_nested_scope(self) -> None:
        router = _builder()
        observed: list[tuple[str, int]] = []

        def inner(r: RouteBuilder) -> None:
            observed.append((r.prefix, len(r.stack)))

        def outer(r: RouteBuilder) -> None:
            observed.append((r.prefix, len(r.stack)))
            r.group("/v1", inner)
            observed.append((r.prefix, len(r.stack)))

        router.group("/api", outer)
        assert observed == [("/api", 1), ("/api/v1", 2), ("/api", 1)]

    def test_restored_after_error(self) -> None:
        router = _builder()
        router.group("/keep", {"alias": "keep."}, lambda r: None)
        before = (router.prefix, router.stack, router.effective_config())

        def failing(r: RouteBuilder) -> None:
            r.group("/inner", {"alias": "inner."}, lambda rr: rr.get("/", "UserController.missing"))

        with pytest.raises(MemberNotFoundError):
            router.group("/api", {"middleware": _outer, "alias": "api."}, failing)

        assert (router.prefix, router.stack, router.effective_config()) == before

    def test_builder_usable_after_caught_error(self) -> None:
        router = _builder()

        def body(r: RouteBuilder) -> None:
            try:
                r.group("/bad", {"alias": "bad."}, lambda rr: rr.get("/", 42))
            except InvalidArgumentError:
                pass
            r.get("/good", {"alias": "good"}, _handler)

        router.group("/api", {"alias": "api."}, body)
        route = router.map()[0]
        assert route.path == "/api/good"
        assert route.alias == "api.good"

    def test_invalid_shape_changes_nothing(self) -> None:
        router = _builder()
        with pytest.raises(InvalidArgumentError):
            router.group("/x", 1)
        assert router.prefix == ""
        assert len(router.stack) == 0


class TestEffectiveConfig:
    def test_with_extra_fragment(self) -> None:
        router = _builder()
        seen = []
        router.group(
            "/a",
            {"alias": "a.", "middleware": _outer},
            lambda r: seen.append(r.effective_config({"alias": "x"})),
        )
        assert seen[0].alias == "a.x"
        assert seen[0].middlewares == (_outer,)
