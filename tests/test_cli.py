"""Tests for wren.cli — argument parsing, app resolution, and ``wren routes``."""

import sys
import types

import pytest

from wren.app import App
from wren.cli import main
from wren.cli._resolve import resolve_app


async def _index(writer, request) -> None: ...


async def _show(writer, request) -> None: ...


@pytest.fixture
def _fake_app_module(monkeypatch: pytest.MonkeyPatch) -> None:
    """Register a fake module with wren Apps on sys.modules."""
    app = App()
    app.add_route("/", _index, name="home")
    app.add_route("/users/:id", _show, name="user", trailing_slash=True)
    app.add_route("/users/:id", _show, method="POST", fall_through=True)
    app.add_route("/", _index, name="home")

    mod = types.ModuleType("_fake_wren_app")
    mod.app = app  # type: ignore[attr-defined]
    mod.empty = App()  # type: ignore[attr-defined]
    mod.broken = App(routes=[])  # type: ignore[attr-defined]
    mod.broken.add_route("/", _index, method="BREW")
    mod.create_app = lambda: App()  # type: ignore[attr-defined]
    mod.not_an_app = "just a string"  # type: ignore[attr-defined]
    monkeypatch.setitem(sys.modules, "_fake_wren_app", mod)


class TestCLIHelp:
    def test_help_exits_zero(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["--help"])
        assert exc_info.value.code == 0

    def test_no_command_prints_help(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main([])
        assert exc_info.value.code == 0
        assert "usage: wren" in capsys.readouterr().out

    def test_run_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["run"])
        assert exc_info.value.code == 2

    def test_routes_missing_app(self) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes"])
        assert exc_info.value.code == 2


@pytest.mark.usefixtures("_fake_app_module")
class TestResolveApp:
    def test_explicit_attribute(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:app"), App)

    def test_default_attribute(self) -> None:
        assert resolve_app("_fake_wren_app") is sys.modules["_fake_wren_app"].app

    def test_factory(self) -> None:
        assert isinstance(resolve_app("_fake_wren_app:create_app"), App)

    def test_missing_module(self) -> None:
        with pytest.raises(ModuleNotFoundError):
            resolve_app("nonexistent_module_xyz:app")

    def test_missing_attribute(self) -> None:
        with pytest.raises(AttributeError):
            resolve_app("_fake_wren_app:does_not_exist")

    def test_wrong_type(self) -> None:
        with pytest.raises(TypeError, match=r"not a wren\.App instance"):
            resolve_app("_fake_wren_app:not_an_app")


@pytest.mark.usefixtures("_fake_app_module")
class TestRoutesCommand:
    def test_lists_routes_in_order(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_app:app"])
        out = capsys.readouterr().out.splitlines()
        assert out[0].split() == ["METHOD", "PATTERN", "NAME", "HANDLERS"]
        rows = [line.split() for line in out[2:]]
        assert [row[0] for row in rows] == ["GET", "GET", "POST", "GET"]
        assert rows[1][:4] == ["GET", "/users/:id", "[/]", "user"]
        assert "(fall-through)" in out[4]
        assert "_show" in out[4]

    def test_reports_diagnostics(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_app:app"])
        err = capsys.readouterr().err
        assert "warning: Duplicate route name 'home'" in err
        assert "warning: Duplicate URI pattern" in err

    def test_empty_app(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["routes", "_fake_wren_app:empty"])
        assert "No routes registered." in capsys.readouterr().out

    def test_invalid_routes_exit_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_wren_app:broken"])
        assert exc_info.value.code == 1
        assert "Unsupported HTTP request method 'BREW'" in capsys.readouterr().err

    def test_unresolvable_app_exit_one(self, capsys: pytest.CaptureFixture[str]) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["routes", "_fake_wren_app:not_an_app"])
        assert exc_info.value.code == 1
        assert "Error:" in capsys.readouterr().err


@pytest.mark.usefixtures("_fake_app_module")
class TestRunCommand:
    def test_passes_overrides(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []

        def fake_run_server(app, host, port, *, app_path=None) -> None:
            calls.append((app, host, port, app_path))

        monkeypatch.setattr("wren.server.runner.run_server", fake_run_server)
        main(["run", "_fake_wren_app:app", "--host", "0.0.0.0", "--port", "9001"])
        [(app, host, port, app_path)] = calls
        assert app is sys.modules["_fake_wren_app"].app
        assert (host, port, app_path) == ("0.0.0.0", 9001, "_fake_wren_app:app")

    def test_defaults_from_config(self, monkeypatch: pytest.MonkeyPatch) -> None:
        calls = []
        monkeypatch.setattr(
            "wren.server.runner.run_server",
            lambda app, host, port, *, app_path=None: calls.append((host, port)),
        )
        main(["run", "_fake_wren_app:app"])
        assert calls == [("127.0.0.1", 8080)]
