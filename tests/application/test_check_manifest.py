from shark.application.check_manifest import check_manifest
from shark.domain.batch import PluginEntry
from shark.domain.command import ShellCommand


def test_check_reports_every_bad_entry():
    report = check_manifest(
        [
            PluginEntry("checks", "ok", "uptime"),
            PluginEntry("checks", "empty", []),
            PluginEntry("metrics", "idle", None),
            PluginEntry("checks", "number", 7),
        ]
    )
    assert report.runnable == [("checks.ok", ShellCommand("uptime"))]
    assert report.skipped == ["metrics.idle"]
    assert [str(e).split(":")[0] for e in report.errors] == ["checks.empty", "checks.number"]
    assert report.exit_code == 2


def test_check_clean_manifest():
    assert check_manifest([PluginEntry("checks", "ok", ["true"])]).exit_code == 0
