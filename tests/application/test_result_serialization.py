from shark.application.result_serialization import serialize_batch_result
from shark.domain.batch import BatchEntry, BatchResult, command_error
from shark.domain.command import ShellCommand
from shark.domain.errors import ConfigError
from shark.domain.outcome import ExecutionOutcome, FailureKind


def test_result_serializes_with_schema_version():
    spec = ShellCommand("exit 1")
    outcome = ExecutionOutcome(
        FailureKind.NON_ZERO_EXIT, stdout=b"\xffout", stderr=b"err", exit_code=1
    )
    result = BatchResult(
        entries=[
            BatchEntry(
                group="checks",
                name="bad",
                spec=spec,
                outcome=outcome,
                error=command_error("checks", "bad", spec, outcome),
            )
        ]
    )
    data = serialize_batch_result(result, command="run", args=["shark.toml"])
    assert data["result_schema_version"] == 1
    assert data["exit_code"] == 1
    entry = data["entries"][0]
    assert entry["failure_kind"] == "non_zero_exit"
    assert entry["stdout"] == "\ufffdout"
    assert entry["command"] == "sh -c exit 1"
    assert data["errors"][0]["type"] == "NonZeroExit"


def test_config_error_is_listed_first():
    result = BatchResult(config_error=ConfigError("checks.x: bad", hint="use a list"))
    data = serialize_batch_result(result, command="run", args=[])
    assert data["errors"] == [
        {"type": "ConfigError", "message": "checks.x: bad", "hint": "use a list", "details": None}
    ]
    assert data["exit_code"] == 2
