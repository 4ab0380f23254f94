from __future__ import annotations

from datetime import datetime, timezone

from shark.domain.batch import BatchEntry, BatchResult
from shark.domain.errors import SharkError
from shark.domain.json_types import JsonDict, as_json_dict


def _text(data: bytes) -> str:
    return data.decode("utf-8", errors="replace")


def serialize_error(error: SharkError) -> JsonDict:
    return as_json_dict(
        {
            "type": type(error).__name__,
            "message": str(error),
            "hint": error.hint,
            "details": error.details,
        }
    )


def serialize_entry(entry: BatchEntry) -> JsonDict:
    outcome = entry.outcome
    return as_json_dict(
        {
            "group": entry.group,
            "name": entry.name,
            "command": entry.spec.display,
            "failure_kind": outcome.failure_kind.value,
            "exit_code": outcome.exit_code,
            "signal": outcome.signal,
            "duration": round(outcome.duration, 3),
            "stdout": _text(outcome.stdout),
            "stderr": _text(outcome.stderr),
            "error": str(entry.error) if entry.error is not None else None,
        }
    )


def serialize_batch_result(result: BatchResult, command: str, args: list[str]) -> JsonDict:
    errors: list[SharkError] = []
    if result.config_error is not None:
        errors.append(result.config_error)
    errors.extend(result.failures)
    return as_json_dict(
        {
            "result_schema_version": 1,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "command": command,
            "args": args,
            "exit_code": result.exit_code,
            "entries": [serialize_entry(e) for e in result.entries],
            "errors": [serialize_error(e) for e in errors],
        }
    )
