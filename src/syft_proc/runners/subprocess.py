import logging
import subprocess
from pathlib import Path

from syft_proc.constants import DEFAULT_SHELL
from syft_proc.runners.base import ProcessRunner

logger = logging.getLogger(__name__)


class SubprocessRunner(ProcessRunner):
    """
    Starts the script as a direct child and keeps the native handle.

    Liveness and exit codes come from the handle. The script still carries the
    spawn token, so descendants can be located the same way as for detached
    processes.
    """

    def __init__(self, shell: str = DEFAULT_SHELL):
        super().__init__(shell=shell)
        self._process: subprocess.Popen | None = None

    def start(
        self,
        script_path: Path,
        stdout_path: Path | None = None,
        stderr_path: Path | None = None,
    ) -> None:
        stdout_stream = stderr_stream = subprocess.DEVNULL
        try:
            if stdout_path:
                stdout_stream = open(stdout_path, "w")
            if stderr_path:
                stderr_stream = open(stderr_path, "w")
            self._process = subprocess.Popen(
                [str(script_path)],
                stdin=subprocess.DEVNULL,
                stdout=stdout_stream,
                stderr=stderr_stream,
                start_new_session=True,  # Detach from parent
            )
        except OSError as e:
            logger.warning(f"Failed to spawn {script_path}: {e}")
            self._process = None
        finally:
            for stream in (stdout_stream, stderr_stream):
                if stream is not subprocess.DEVNULL:
                    stream.close()

    def resolve_pid(self, token: str) -> int | None:
        if self._process is None:
            return None
        # poll() also reaps the child once it has exited
        if self._process.poll() is None:
            return self._process.pid
        return None

    def exit_status(self, status_path: Path | None) -> int | None:
        if self._process is None:
            return None
        return self._process.poll()
