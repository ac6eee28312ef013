from abc import ABC, abstractmethod
from pathlib import Path

from syft_proc.constants import DEFAULT_SHELL


class ProcessRunner(ABC):
    def __init__(self, shell: str = DEFAULT_SHELL):
        self.shell = shell

    @abstractmethod
    def start(
        self,
        script_path: Path,
        stdout_path: Path | None = None,
        stderr_path: Path | None = None,
    ) -> None:
        """Start the launch script without waiting for it. Never raises on spawn failure."""
        pass

    @abstractmethod
    def resolve_pid(self, token: str) -> int | None:
        """Pid of the launched process if it is currently alive"""
        pass

    @abstractmethod
    def exit_status(self, status_path: Path | None) -> int | None:
        """Exit code of the finished process, if it can be known"""
        pass
