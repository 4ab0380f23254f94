from __future__ import annotations

from dataclasses import dataclass, field, replace

from shark.domain.command import CommandSpec
from shark.domain.errors import (
    BatchError,
    CommandError,
    ConfigError,
    NonZeroExit,
    ProcessStartFailed,
    Signaled,
    TimedOut,
)
from shark.domain.outcome import ExecutionOutcome, FailureKind

EXIT_OK = 0
EXIT_COMMAND_FAILED = 1
EXIT_CONFIG_ERROR = 2

_ERROR_TYPES: dict[FailureKind, type[CommandError]] = {
    FailureKind.PROCESS_START_FAILURE: ProcessStartFailed,
    FailureKind.NON_ZERO_EXIT: NonZeroExit,
    FailureKind.SIGNALED: Signaled,
    FailureKind.TIMED_OUT: TimedOut,
}


@dataclass(frozen=True)
class PluginEntry:
    group: str
    name: str
    raw: object = None

    @property
    def qualified_name(self) -> str:
        return f"{self.group}.{self.name}" if self.group else self.name


@dataclass(frozen=True)
class BatchEntry:
    group: str
    name: str
    spec: CommandSpec
    outcome: ExecutionOutcome
    error: CommandError | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.group}.{self.name}" if self.group else self.name


def attribute_error(error: ConfigError, entry: PluginEntry) -> ConfigError:
    details = dict(error.details or {})
    details.update({"group": entry.group, "name": entry.name})
    return replace(
        error,
        message=f"{entry.qualified_name}: {error.message}",
        details=details,
        cause=error,
    )


def command_error(
    group: str, name: str, spec: CommandSpec, outcome: ExecutionOutcome
) -> CommandError | None:
    if outcome.exited_cleanly:
        return None
    error_type = _ERROR_TYPES[outcome.failure_kind]
    label = f"{group}.{name}" if group else name
    return error_type(
        f"{label}: exec: {spec.display}; {outcome.reason}",
        details={"kind": outcome.failure_kind.value, "exit_code": outcome.exit_code},
        group=group,
        name=name,
        spec=spec,
        outcome=outcome,
    )


def _new_entries() -> list[BatchEntry]:
    return []


@dataclass
class BatchResult:
    entries: list[BatchEntry] = field(default_factory=_new_entries)
    config_error: ConfigError | None = None

    @property
    def failures(self) -> list[CommandError]:
        return [e.error for e in self.entries if e.error is not None]

    @property
    def error(self) -> ConfigError | BatchError | None:
        if self.config_error is not None:
            return self.config_error
        failures = self.failures
        if not failures:
            return None
        return BatchError(f"{len(failures)} command(s) failed", errors=failures)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        if self.config_error is not None:
            return EXIT_CONFIG_ERROR
        if self.failures:
            return EXIT_COMMAND_FAILED
        return EXIT_OK

