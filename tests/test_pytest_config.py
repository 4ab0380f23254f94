from pathlib import Path
import tomllib


def _pyproject() -> dict:
    path = Path(__file__).resolve().parents[1] / "pyproject.toml"
    return tomllib.loads(path.read_text(encoding="utf-8"))


def test_pytest_asyncio_loop_scope_is_configured() -> None:
    pytest_options = _pyproject().get("tool", {}).get("pytest", {}).get("ini_options", {})
    assert pytest_options.get("asyncio_default_fixture_loop_scope") == "function"


def test_cli_script_points_at_typer_app() -> None:
    scripts = _pyproject()["project"]["scripts"]
    assert scripts["shark"] == "shark.entrypoints.cli:app"
