from typing import Protocol

from shark.domain.command import CommandSpec
from shark.domain.outcome import ExecutionOutcome


class CommandRunnerPort(Protocol):
    async def execute(self, spec: CommandSpec, timeout: float) -> ExecutionOutcome: ...
