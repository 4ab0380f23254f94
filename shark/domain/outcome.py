from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
import signal as _signal


class FailureKind(str, Enum):
    NONE = "none"
    PROCESS_START_FAILURE = "process_start_failure"
    NON_ZERO_EXIT = "non_zero_exit"
    SIGNALED = "signaled"
    TIMED_OUT = "timed_out"


def signal_name(signum: int | None) -> str:
    if signum is None:
        return "unknown"
    try:
        return _signal.Signals(signum).name
    except ValueError:
        return str(signum)


@dataclass(frozen=True)
class ExecutionOutcome:
    failure_kind: FailureKind
    stdout: bytes = b""
    stderr: bytes = b""
    exit_code: int | None = None
    signal: int | None = None
    duration: float = 0.0
    start_error: str | None = None

    @property
    def exited_cleanly(self) -> bool:
        return self.failure_kind == FailureKind.NONE

    @property
    def reason(self) -> str:
        kind = self.failure_kind
        if kind == FailureKind.NONE:
            return "exit status 0"
        if kind == FailureKind.PROCESS_START_FAILURE:
            return f"failed to start: {self.start_error}"
        if kind == FailureKind.NON_ZERO_EXIT:
            return f"exit status {self.exit_code}"
        if kind == FailureKind.SIGNALED:
            return f"terminated by {signal_name(self.signal)}"
        return f"timed out after {self.duration:.1f}s"
