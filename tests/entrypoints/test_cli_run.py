import json

from typer.testing import CliRunner

from shark.entrypoints.cli import app


def _manifest(tmp_path, body: str) -> str:
    path = tmp_path / "shark.toml"
    path.write_text(body)
    return str(path)


def test_cli_run_succeeds_quietly(tmp_path):
    config = _manifest(tmp_path, '[plugin.checks.ok]\ncommand = "echo hidden"\n')
    result = CliRunner().invoke(app, ["run", "--config-path", config])
    assert result.exit_code == 0
    assert "hidden" not in result.output


def test_cli_run_relays_output_of_failed_commands(tmp_path):
    config = _manifest(
        tmp_path,
        "[plugin.checks.ok]\n"
        'command = "true"\n'
        "[plugin.checks.bad]\n"
        "command = [\"sh\", \"-c\", \"echo captured; exit 3\"]\n",
    )
    result = CliRunner().invoke(app, ["run", "--config-path", config, "--timeout", "5"])
    assert result.exit_code == 1
    assert "captured" in result.output
    assert "checks.bad" in result.output
    assert "checks.ok" not in result.output


def test_cli_run_malformed_manifest_exits_2(tmp_path):
    config = _manifest(tmp_path, "[plugin.checks.empty]\ncommand = []\n")
    result = CliRunner().invoke(app, ["run", "--config-path", config])
    assert result.exit_code == 2
    assert "checks.empty" in result.output


def test_cli_run_missing_config(tmp_path):
    result = CliRunner().invoke(app, ["run", "--config-path", str(tmp_path / "none.toml")])
    assert result.exit_code == 2


def test_cli_run_reads_config_path_from_env(tmp_path):
    config = _manifest(tmp_path, '[plugin.checks.bad]\ncommand = "exit 1"\n')
    result = CliRunner().invoke(app, ["run"], env={"SHARK_CONFIG_PATH": config})
    assert result.exit_code == 1


def test_cli_run_json_output(tmp_path):
    config = _manifest(tmp_path, '[plugin.checks.ok]\ncommand = "printf hello"\n')
    result = CliRunner().invoke(app, ["run", "--config-path", config, "--json"])
    assert result.exit_code == 0
    payload = json.loads(result.stdout)
    assert payload["command"] == "run"
    assert payload["exit_code"] == 0
    assert payload["entries"][0]["name"] == "ok"
    assert payload["entries"][0]["stdout"] == "hello"


def test_cli_run_reports_each_failure_once(tmp_path):
    config = _manifest(
        tmp_path,
        '[plugin.checks.bad]\ncommand = "exit 1"\n[plugin.checks.worse]\ncommand = "exit 2"\n',
    )
    result = CliRunner().invoke(app, ["run", "--config-path", config])
    assert result.exit_code == 1
    assert result.output.count("checks.bad") == 1
    assert result.output.count("checks.worse") == 1


def test_cli_run_reports_malformed_entry_once(tmp_path):
    config = _manifest(tmp_path, "[plugin.checks.empty]\ncommand = []\n")
    result = CliRunner().invoke(app, ["run", "--config-path", config])
    assert result.exit_code == 2
    assert result.output.count("checks.empty") == 1


def test_cli_run_non_utf8_manifest_exits_2(tmp_path):
    path = tmp_path / "shark.toml"
    path.write_bytes(b'[plugin.checks.bad]\ncommand = "\xff"\n')
    result = CliRunner().invoke(app, ["run", "--config-path", str(path)])
    assert result.exit_code == 2
