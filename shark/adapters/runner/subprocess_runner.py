"""Run a single command spec as a child process under a time budget."""

from __future__ import annotations

import asyncio
import logging
import os
import signal
import time

from shark.domain.command import CommandSpec
from shark.domain.errors import ConfigError
from shark.domain.outcome import ExecutionOutcome, FailureKind

DEFAULT_GRACE_PERIOD = 10.0

# Upper bound on reaping and draining a SIGKILLed process group.
_REAP_TIMEOUT = 1.0
# Time granted to pipe readers after leftover group members are killed.
_DRAIN_TIMEOUT = 0.5
_CHUNK_SIZE = 64 * 1024


async def _drain(stream: asyncio.StreamReader | None, sink: bytearray) -> None:
    if stream is None:
        return
    while True:
        chunk = await stream.read(_CHUNK_SIZE)
        if not chunk:
            return
        sink.extend(chunk)


def _has_exited(proc: asyncio.subprocess.Process) -> bool:
    """True once the child has exited, even if it has not been reaped yet."""
    if proc.returncode is not None:
        return True
    try:
        status = os.waitid(os.P_PID, proc.pid, os.WEXITED | os.WNOHANG | os.WNOWAIT)
    except ChildProcessError:
        # Already reaped by the event loop's child watcher.
        return True
    return status is not None


class SubprocessCommandRunner:
    """Execute commands with SIGTERM at the soft timeout and SIGKILL at the hard bound.

    Each child runs in its own session so signals reach every process it
    spawned. Output goes into private buffers and is only handed back through
    the returned :class:`ExecutionOutcome`.
    """

    def __init__(
        self,
        grace_period: float = DEFAULT_GRACE_PERIOD,
        logger: logging.Logger | None = None,
    ) -> None:
        if grace_period < 0:
            raise ConfigError(f"grace period must not be negative: {grace_period}")
        self.grace_period = grace_period
        self.log = logger or logging.getLogger(__name__)

    async def execute(self, spec: CommandSpec, timeout: float) -> ExecutionOutcome:
        if timeout <= 0:
            raise ConfigError(f"timeout must be positive: {timeout}")

        argv = spec.argv
        started = time.monotonic()
        self.log.debug("exec: %s (timeout=%ss)", spec.display, timeout)
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                start_new_session=True,
            )
        except (OSError, ValueError) as e:
            self.log.debug("exec: %s failed to start: %s", spec.display, e)
            return ExecutionOutcome(
                failure_kind=FailureKind.PROCESS_START_FAILURE,
                duration=time.monotonic() - started,
                start_error=str(e),
            )

        loop = asyncio.get_running_loop()
        hard_deadline = loop.time() + timeout + self.grace_period
        stdout = bytearray()
        stderr = bytearray()
        readers = [
            asyncio.create_task(_drain(proc.stdout, stdout)),
            asyncio.create_task(_drain(proc.stderr, stderr)),
        ]
        waiter = asyncio.create_task(proc.wait())
        terminated = False
        try:
            done, _ = await asyncio.wait({waiter}, timeout=timeout)
            if not done:
                terminated = self._signal(proc, signal.SIGTERM)
                remaining = max(hard_deadline - loop.time(), 0.0)
                done, _ = await asyncio.wait({waiter}, timeout=remaining)
            if not done:
                terminated = self._signal(proc, signal.SIGKILL) or terminated
                # One budget for reaping and draining after the hard bound.
                await asyncio.wait({waiter, *readers}, timeout=_REAP_TIMEOUT)
            else:
                remaining = max(hard_deadline - loop.time(), 0.0)
                _, pending = await asyncio.wait(readers, timeout=remaining)
                if pending:
                    # Something left in the process group still holds the pipes.
                    self._kill_group(proc.pid)
                    await asyncio.wait(pending, timeout=_DRAIN_TIMEOUT)
        finally:
            if proc.returncode is None:
                self._kill_group(proc.pid)
            for task in (*readers, waiter):
                if not task.done():
                    task.cancel()
            await asyncio.gather(*readers, waiter, return_exceptions=True)

        return self._outcome(
            proc.returncode,
            terminated,
            bytes(stdout),
            bytes(stderr),
            time.monotonic() - started,
        )

    def _signal(self, proc: asyncio.subprocess.Process, sig: signal.Signals) -> bool:
        """Signal the child's process group; False if it is already gone."""
        if _has_exited(proc):
            return False
        self.log.info("sending %s to pid %d", sig.name, proc.pid)
        try:
            os.killpg(proc.pid, sig)
        except (ProcessLookupError, PermissionError) as e:
            self.log.debug("signal %s to pid %d not delivered: %s", sig.name, proc.pid, e)
            return False
        return True

    def _kill_group(self, pgid: int) -> None:
        self.log.info("killing leftover processes in group %d", pgid)
        try:
            os.killpg(pgid, signal.SIGKILL)
        except (ProcessLookupError, PermissionError):
            pass

    @staticmethod
    def _outcome(
        returncode: int | None,
        terminated: bool,
        stdout: bytes,
        stderr: bytes,
        duration: float,
    ) -> ExecutionOutcome:
        signum = -returncode if returncode is not None and returncode < 0 else None
        if terminated:
            kind = FailureKind.TIMED_OUT
        elif returncode == 0:
            kind = FailureKind.NONE
        elif signum is not None:
            kind = FailureKind.SIGNALED
        else:
            kind = FailureKind.NON_ZERO_EXIT
        return ExecutionOutcome(
            failure_kind=kind,
            stdout=stdout,
            stderr=stderr,
            exit_code=returncode,
            signal=signum,
            duration=duration,
        )
