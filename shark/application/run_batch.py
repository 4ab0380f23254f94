from __future__ import annotations

import logging
from typing import Iterable

from shark.domain.batch import (
    BatchEntry,
    BatchResult,
    PluginEntry,
    attribute_error,
    command_error,
)
from shark.domain.command import to_command_spec
from shark.domain.errors import ConfigError
from shark.ports.command_runner import CommandRunnerPort


class BatchDriver:
    """Run plugin commands one after another and collect their failures.

    A malformed command value aborts the batch at that entry. Failing
    commands are recorded and the loop moves on to the next entry.
    """

    def __init__(
        self, runner: CommandRunnerPort, logger: logging.Logger | None = None
    ) -> None:
        self.runner = runner
        self.log = logger or logging.getLogger(__name__)

    async def run_all(
        self, entries: Iterable[PluginEntry], timeout: float
    ) -> BatchResult:
        result = BatchResult()
        if timeout <= 0:
            result.config_error = ConfigError(f"timeout must be positive: {timeout}")
            return result

        for entry in entries:
            try:
                spec = to_command_spec(entry.raw)
            except ConfigError as e:
                result.config_error = attribute_error(e, entry)
                self.log.debug("aborting batch: %s", result.config_error)
                return result
            if spec is None:
                self.log.debug("%s: no command, skipping", entry.qualified_name)
                continue

            self.log.debug("%s: running %s", entry.qualified_name, spec.display)
            outcome = await self.runner.execute(spec, timeout)
            error = command_error(entry.group, entry.name, spec, outcome)
            if error is None:
                self.log.debug("%s: ok in %.2fs", entry.qualified_name, outcome.duration)
            else:
                self.log.info("%s", error)
            result.entries.append(
                BatchEntry(
                    group=entry.group,
                    name=entry.name,
                    spec=spec,
                    outcome=outcome,
                    error=error,
                )
            )
        return result
