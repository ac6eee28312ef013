import logging
import time
import weakref
from collections.abc import Sequence
from pathlib import Path
from typing import Any, Self

from syft_proc import killer
from syft_proc.config import ProcConfig
from syft_proc.launcher import launch
from syft_proc.models import ProcessRecord, ProcessStatus, RedirectKind
from syft_proc.output_stream import OutputStream
from syft_proc.runners import ProcessRunner, get_runner

logger = logging.getLogger(__name__)


def _close_streams(streams: dict[str, OutputStream | None]) -> None:
    for stream in streams.values():
        if stream is not None:
            stream.close()


class ProcessHandle:
    """
    An external process started in the background, detached from the caller.

    The process is identified by a spawn token embedded in its command line,
    and every liveness question is answered by looking it up again. The pid is
    never cached as truth: the process may exit at any moment, silently.

    Usage:
        p = ProcessHandle("sleep", ["2"])
        p.is_alive()
        p.kill()
        p.restart()

    Output redirection for `stdout` and `stderr`:
        False / None   discard
        True           capture into a temporary file
        str / Path     write to that file

    Exit status: `get_exit_status()` only reports a code after `wait()` has
    returned. If the process finished but nobody waited, the code stays
    unknown. An exited process leaves no process-table entry to ask.
    """

    def __init__(
        self,
        command: str,
        args: Sequence[str] = (),
        stdout: bool | str | Path | None = False,
        stderr: bool | str | Path | None = False,
        *,
        runner_type: str | None = None,
        config: ProcConfig | None = None,
    ):
        self.config = config or ProcConfig()
        # Validates command, args and redirection before anything is spawned
        self.record = ProcessRecord(
            command=command,
            args=args,
            stdout=stdout,
            stderr=stderr,
            runner_type=runner_type or self.config.runner_type,
        )
        self._runner: ProcessRunner = get_runner(
            self.record.runner_type, shell=self.config.shell
        )
        self._streams: dict[str, OutputStream | None] = {}
        self._exit_status: int | None = None
        self._waited = False
        self._kill_requested = False
        self._finalizer = weakref.finalize(self, _close_streams, self._streams)

        self._start()

    def _start(self) -> None:
        result = launch(
            command=self.record.command,
            args=self.record.args,
            stdout=self.record.stdout,
            stderr=self.record.stderr,
            runner=self._runner,
            config=self.config,
        )
        self.record.token = result.token
        self.record.script_path = result.script_path
        self.record.status_path = result.status_path
        self.record.stdout_path = result.stdout_path
        self.record.stderr_path = result.stderr_path

        self._streams["stdout"] = self._make_stream(result.stdout_path, "stdout")
        self._streams["stderr"] = self._make_stream(result.stderr_path, "stderr")

        # pid of the newborn, None if not visible yet or finished already
        self.is_alive()

    def _make_stream(self, path: Path | None, stream_type: str) -> OutputStream | None:
        if path is None:
            return None
        # Weak, so open streams do not keep the handle (and its finalizer) alive
        is_alive_ref = weakref.WeakMethod(self.is_alive)

        def is_alive() -> bool:
            method = is_alive_ref()
            return method() if method is not None else False

        return OutputStream(path, is_alive=is_alive, stream_type=stream_type)

    @property
    def token(self) -> str | None:
        return self.record.token

    @property
    def command(self) -> str:
        return self.record.command

    @property
    def args(self) -> list[str]:
        return list(self.record.args)

    @property
    def pid(self) -> int | None:
        """Current pid, looked up again on every access"""
        self.is_alive()
        return self.record.pid

    @property
    def status(self) -> ProcessStatus:
        return self.record.status

    @property
    def stdout_path(self) -> Path | None:
        return self.record.stdout_path

    @property
    def stderr_path(self) -> Path | None:
        return self.record.stderr_path

    def is_alive(self) -> bool:
        """Check if the process is alive, by resolving its token again"""
        pid = self._runner.resolve_pid(self.record.token)
        self.record.pid = pid
        if pid is not None:
            self.record.status = ProcessStatus.RUNNING
        elif self._kill_requested:
            self.record.status = ProcessStatus.KILLED
        else:
            self.record.status = ProcessStatus.EXITED
        return pid is not None

    def wait(self, timeout: float | None = None) -> None:
        """
        Block until the process is no longer alive.

        Returns right away if the process is not found. With a `timeout`,
        raises TimeoutError when the process is still alive after it.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while self.is_alive():
            if deadline is not None and time.monotonic() >= deadline:
                raise TimeoutError(
                    f"Process {self.record.pid} still alive after {timeout}s"
                )
            time.sleep(self.config.poll_interval)

        if not self._waited:
            self._waited = True
            self._exit_status = self._runner.exit_status(self.record.status_path)

    def get_exit_status(self) -> int | None:
        """
        Exit code of the process, known only after `wait()` returned.

        None while the process runs, when it finished without anyone calling
        `wait()`, and when it was terminated before it could record its code.
        """
        if not self._waited:
            return None
        return self._exit_status

    def kill(self, grace: float | None = None) -> Self:
        """
        Kill the process and all of its descendants.

        Descendants get SIGTERM, then SIGKILL after `grace` seconds, then the
        same for the process itself. Killing a process that is gone is a no-op.
        """
        grace = self.config.kill_grace if grace is None else grace
        if self.is_alive():
            self._kill_requested = True
            killer.kill_tree(self.record.pid, grace=grace)
        self.is_alive()
        return self

    def restart(self) -> Self:
        """Kill the process if it is still alive, then start it again with a new token"""
        if self.is_alive():
            self.kill()
        logger.debug(f"Restarting {self.record.command!r} (old token {self.token})")

        self._release()
        self.record.reset_incarnation()
        self._exit_status = None
        self._waited = False
        self._kill_requested = False
        self._start()
        return self

    # Output

    @property
    def stdout(self) -> OutputStream | None:
        """Connection to the standard output, None if it is discarded"""
        return self._streams.get("stdout")

    @property
    def stderr(self) -> OutputStream | None:
        """Connection to the standard error, None if it is discarded"""
        return self._streams.get("stderr")

    def read_output_lines(self) -> list[str]:
        return self.stdout.read_lines() if self.stdout else []

    def read_error_lines(self) -> list[str]:
        return self.stderr.read_lines() if self.stderr else []

    def can_read_output(self) -> bool:
        return self.stdout.can_read() if self.stdout else False

    def can_read_error(self) -> bool:
        return self.stderr.can_read() if self.stderr else False

    def is_eof_output(self) -> bool:
        return self.stdout.is_eof() if self.stdout else True

    def is_eof_error(self) -> bool:
        return self.stderr.is_eof() if self.stderr else True

    # Resources

    def _release(self) -> None:
        """Close output connections and remove this incarnation's temporary files"""
        _close_streams(self._streams)
        self._streams.clear()

        leftovers = [self.record.script_path, self.record.status_path]
        if self.record.stdout.kind == RedirectKind.AUTO_CAPTURE:
            leftovers.append(self.record.stdout_path)
        if self.record.stderr.kind == RedirectKind.AUTO_CAPTURE:
            leftovers.append(self.record.stderr_path)
        for path in leftovers:
            if path is not None:
                path.unlink(missing_ok=True)

    def close(self) -> None:
        """
        Release output connections and temporary files.

        Does not stop the process. Auto-captured output is deleted, explicit
        output files are kept.
        """
        self._release()
        self._finalizer.detach()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def info(self) -> dict:
        """Return process information as a dictionary"""
        self.is_alive()
        record = self.record
        return {
            "command": record.command,
            "args": list(record.args),
            "status": record.status.value,
            "pid": record.pid,
            "token": record.token,
            "runner_type": record.runner_type,
            "created_at": record.created_at.isoformat(),
            "stdout": str(record.stdout_path) if record.stdout_path else None,
            "stderr": str(record.stderr_path) if record.stderr_path else None,
        }

    def __repr__(self) -> str:
        """Console representation"""
        info = self.info()
        lines = [f"ProcessHandle: {info['command']}"]

        for key, value in info.items():
            if key == "command":
                continue
            display_value = value if value else "-"
            lines.append(f"  {key}: {display_value}")

        return "\n".join(lines)
