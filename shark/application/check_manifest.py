from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from shark.domain.batch import EXIT_CONFIG_ERROR, EXIT_OK, PluginEntry, attribute_error
from shark.domain.command import CommandSpec, to_command_spec
from shark.domain.errors import ConfigError


def _new_specs() -> list[tuple[str, CommandSpec]]:
    return []


def _new_names() -> list[str]:
    return []


def _new_errors() -> list[ConfigError]:
    return []


@dataclass
class ManifestReport:
    runnable: list[tuple[str, CommandSpec]] = field(default_factory=_new_specs)
    skipped: list[str] = field(default_factory=_new_names)
    errors: list[ConfigError] = field(default_factory=_new_errors)

    @property
    def exit_code(self) -> int:
        return EXIT_CONFIG_ERROR if self.errors else EXIT_OK


def check_manifest(entries: Iterable[PluginEntry]) -> ManifestReport:
    """Normalize every entry without running anything, reporting all bad ones."""
    report = ManifestReport()
    for entry in entries:
        try:
            spec = to_command_spec(entry.raw)
        except ConfigError as e:
            report.errors.append(attribute_error(e, entry))
            continue
        if spec is None:
            report.skipped.append(entry.qualified_name)
        else:
            report.runnable.append((entry.qualified_name, spec))
    return report
