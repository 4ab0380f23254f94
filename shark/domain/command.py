from __future__ import annotations

from dataclasses import dataclass
import shlex
from typing import TypeAlias

from shark.domain.errors import ConfigError

SHELL = "sh"


def _reject_nul(text: str) -> None:
    if "\x00" in text:
        raise ConfigError(
            "command must not contain NUL bytes", details={"value": repr(text)}
        )


@dataclass(frozen=True)
class ShellCommand:
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.text, str):
            raise ConfigError(f"command must be a string, got {type(self.text).__name__}")
        _reject_nul(self.text)

    @property
    def argv(self) -> list[str]:
        return [SHELL, "-c", self.text]

    @property
    def display(self) -> str:
        return f"{SHELL} -c {self.text}"


@dataclass(frozen=True)
class ArgvCommand:
    parts: tuple[str, ...]

    def __post_init__(self) -> None:
        # Accept any sequence, store a tuple so the value stays immutable.
        object.__setattr__(self, "parts", tuple(self.parts))
        if not self.parts:
            raise ConfigError("command argv must not be empty")
        for part in self.parts:
            if not isinstance(part, str):
                raise ConfigError(
                    f"command argv entries must be strings, got {type(part).__name__}",
                    details={"value": repr(part)},
                )
            _reject_nul(part)

    @property
    def argv(self) -> list[str]:
        return list(self.parts)

    @property
    def display(self) -> str:
        return shlex.join(self.parts)


CommandSpec: TypeAlias = ShellCommand | ArgvCommand


def to_command_spec(raw: object) -> CommandSpec | None:
    """Normalize a decoded manifest ``command`` value.

    Returns ``None`` for an absent command. Anything that is neither a
    string nor a non-empty list of strings raises :class:`ConfigError`.
    """
    if raw is None:
        return None
    if isinstance(raw, str):
        return ShellCommand(raw)
    if isinstance(raw, (list, tuple)):
        return ArgvCommand(tuple(raw))
    raise ConfigError(
        f"command must be a string or a list of strings, got {type(raw).__name__}",
        hint='use command = "..." or command = ["prog", "arg"]',
    )
