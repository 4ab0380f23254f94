from __future__ import annotations

import glob
from pathlib import Path
import tomllib

from shark.domain.batch import PluginEntry
from shark.domain.errors import ConfigError


def _plugin_entries(path: Path, data: dict[str, object]) -> list[PluginEntry]:
    raw_plugins = data.get("plugin")
    if raw_plugins is None:
        return []
    if not isinstance(raw_plugins, dict):
        raise ConfigError(f"{path}: [plugin] must be a table", details={"path": str(path)})
    entries: list[PluginEntry] = []
    for group, plugins in raw_plugins.items():
        if not isinstance(plugins, dict):
            raise ConfigError(
                f"{path}: [plugin.{group}] must be a table",
                details={"path": str(path), "group": str(group)},
            )
        for name, conf in plugins.items():
            if not isinstance(conf, dict):
                raise ConfigError(
                    f"{path}: [plugin.{group}.{name}] must be a table",
                    details={"path": str(path), "group": str(group), "name": str(name)},
                )
            entries.append(PluginEntry(group=str(group), name=str(name), raw=conf.get("command")))
    return entries


class TomlManifestLoader:
    """Expand a config path glob and decode each match's ``[plugin]`` tables."""

    def load(self, config_path: str) -> list[PluginEntry]:
        if not config_path:
            raise ConfigError("must provide config path", hint="pass --config-path")
        matches = sorted(glob.glob(config_path))
        if not matches:
            raise ConfigError(
                f"no config files match {config_path}",
                details={"config_path": config_path},
            )
        entries: list[PluginEntry] = []
        for match in matches:
            path = Path(match)
            try:
                data = tomllib.loads(path.read_text(encoding="utf-8"))
            except (OSError, UnicodeDecodeError, tomllib.TOMLDecodeError) as e:
                raise ConfigError(
                    f"{path}: {e}", details={"path": str(path)}, cause=e
                ) from e
            entries.extend(_plugin_entries(path, data))
        return entries
