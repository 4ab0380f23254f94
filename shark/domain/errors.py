from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from shark.domain.json_types import JsonDict

if TYPE_CHECKING:
    from shark.domain.command import CommandSpec
    from shark.domain.outcome import ExecutionOutcome


@dataclass
class SharkError(Exception):
    message: str
    details: JsonDict | None = None
    hint: str | None = None
    cause: Exception | None = None

    def __str__(self) -> str:
        return self.message


class ConfigError(SharkError):
    pass


@dataclass
class CommandError(SharkError):
    group: str = ""
    name: str = ""
    spec: CommandSpec | None = None
    outcome: ExecutionOutcome | None = None

    @property
    def qualified_name(self) -> str:
        return f"{self.group}.{self.name}" if self.group else self.name


class ProcessStartFailed(CommandError):
    pass


class NonZeroExit(CommandError):
    pass


class Signaled(CommandError):
    pass


class TimedOut(CommandError):
    pass


def _new_errors() -> list[CommandError]:
    return []


@dataclass
class BatchError(SharkError):
    errors: list[CommandError] = field(default_factory=_new_errors)

    def __str__(self) -> str:
        return "\n".join(str(e) for e in self.errors) or self.message
