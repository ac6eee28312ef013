import logging
import os
import shlex
import subprocess
from pathlib import Path

from syft_proc import resolver
from syft_proc.runners.base import ProcessRunner

logger = logging.getLogger(__name__)


class DetachedRunner(ProcessRunner):
    """
    Starts the script as a background job of a throwaway shell.

    The shell exits right away, so the script is re-parented and never becomes
    our child. All observation goes through the process table.
    """

    def start(
        self,
        script_path: Path,
        stdout_path: Path | None = None,
        stderr_path: Path | None = None,
    ) -> None:
        stdout_target = shlex.quote(str(stdout_path)) if stdout_path else os.devnull
        stderr_target = shlex.quote(str(stderr_path)) if stderr_path else os.devnull
        cmd = (
            f"{shlex.quote(str(script_path))} "
            f"< {os.devnull} > {stdout_target} 2> {stderr_target} &"
        )
        try:
            subprocess.run(
                cmd,
                shell=True,
                executable=self.shell,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,  # Detach from parent
                check=False,
            )
        except OSError as e:
            logger.warning(f"Failed to spawn {script_path}: {e}")

    def resolve_pid(self, token: str) -> int | None:
        return resolver.resolve(token, include_descendants=False)

    def exit_status(self, status_path: Path | None) -> int | None:
        if status_path is None or not status_path.exists():
            return None
        try:
            return int(status_path.read_text().strip())
        except ValueError:
            # Script was terminated while recording its status
            return None
