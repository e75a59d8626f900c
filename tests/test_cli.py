"""Tests for routekit.cli — entry point, builder resolution, and route listing."""

import sys
import types

import pytest

from routekit.cli import main
from routekit.cli._routes import format_table, load_builder
from routekit.errors import InvalidArgumentError, ResolutionError
from routekit.loader import Loader
from routekit.routing.builder import RouteBuilder


def index(request):
    return "home"


def _make_router() -> RouteBuilder:
    router = RouteBuilder(Loader().resolve)
    router.get("/", {"alias": "home"}, index)
    router.group("/api", lambda r: r.post("/users", index))
    return router


@pytest.fixture
def _fake_routes_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module holding RouteBuilders on sys.modules."""
    mod = types.ModuleType("_fake_routekit_routes")
    mod.router = _make_router()  # type: ignore[attr-defined]
    mod.empty = RouteBuilder(Loader().resolve)  # type: ignore[attr-defined]
    mod.make_router = _make_router  # type: ignore[attr-defined]
    mod.not_a_router = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_routekit_routes", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_routes_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "--help"])
        assert exc_info.value.code == 0

    def test_routes_missing_builder(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2

    def test_no_command_exits_zero(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "routes" in capsys.readouterr().out


@pytest.mark.usefixtures("_fake_routes_module")
class TestLoadBuilder:
    def test_default_attribute(self) -> None:
        assert isinstance(load_builder("_fake_routekit_routes"), RouteBuilder)

    def test_factory(self) -> None:
        builder = load_builder("_fake_routekit_routes:make_router")
        assert len(builder.routes) == 2

    def test_not_a_builder(self) -> None:
        with pytest.raises(InvalidArgumentError, match="not a routekit.RouteBuilder"):
            load_builder("_fake_routekit_routes:not_a_router")

    def test_missing_attribute(self) -> None:
        with pytest.raises(ResolutionError):
            load_builder("_fake_routekit_routes:missing")

    def test_provided_builder(self) -> None:
        router = _make_router()
        loader = Loader({"routes:router": router})
        assert load_builder("routes", loader) is router

    def test_missing_module(self) -> None:
        with pytest.raises(ResolutionError):
            load_builder("_routekit_nonexistent_module:router")


@pytest.mark.usefixtures("_fake_routes_module")
class TestRoutesCommand:
    def test_lists_routes(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_routekit_routes:router"])
        lines = capsys.readouterr().out.splitlines()

        assert lines[0].split() == ["VERB", "PATH", "HANDLER", "ALIAS"]
        assert lines[2].split() == ["GET", "/", "index", "home"]
        assert lines[3].split() == ["POST", "/api/users", "index"]

    def test_empty(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_routekit_routes:empty"])
        assert "No routes registered." in capsys.readouterr().out

    def test_resolution_error_exits_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_routekit_routes:missing"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


class TestFormatTable:
    def test_columns_aligned(self) -> None:
        lines = format_table(_make_router().map())
        assert lines[2].index("/") == lines[0].index("PATH")
        assert lines[3].index("/api") == lines[0].index("PATH")
