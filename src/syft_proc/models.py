from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Self

from pydantic import BaseModel, Field, field_validator

from syft_proc.utils import _utcnow, is_path_like, validate_args, validate_command


class ProcessStatus(str, Enum):
    CREATED = "created"
    RUNNING = "running"
    EXITED = "exited"
    KILLED = "killed"


class RedirectKind(str, Enum):
    DISCARD = "discard"
    AUTO_CAPTURE = "auto_capture"
    EXPLICIT_PATH = "explicit_path"


class RedirectTarget(BaseModel):
    """Where one output stream of the process goes"""

    kind: RedirectKind
    path: Path | None = None

    @classmethod
    def from_value(cls: type[Self], value: Any) -> Self:
        """
        False/None -> discard, True -> auto-captured temporary file,
        str or PathLike -> explicit file path.
        """
        if isinstance(value, cls):
            return value
        if value is None or value is False:
            return cls(kind=RedirectKind.DISCARD)
        if value is True:
            return cls(kind=RedirectKind.AUTO_CAPTURE)
        if is_path_like(value):
            if not str(value):
                raise ValueError("Redirection path cannot be empty")
            return cls(kind=RedirectKind.EXPLICIT_PATH, path=Path(value).expanduser())
        raise ValueError(
            f"Invalid redirection target {value!r}: expected a bool, None or a path"
        )

    @property
    def is_discard(self) -> bool:
        return self.kind == RedirectKind.DISCARD


class ProcessRecord(BaseModel):
    """
    Lifecycle state of one handle.

    `pid` is the last resolved value only; liveness is never decided from it.
    Token, pid and paths are replaced on every restart.
    """

    command: str
    args: list[str] = Field(default_factory=list)
    stdout: RedirectTarget
    stderr: RedirectTarget
    runner_type: str = "detached"
    created_at: datetime = Field(default_factory=_utcnow)

    token: str | None = None
    pid: int | None = None
    status: ProcessStatus = ProcessStatus.CREATED
    script_path: Path | None = None
    status_path: Path | None = None
    stdout_path: Path | None = None
    stderr_path: Path | None = None

    @field_validator("command", mode="before")
    @classmethod
    def _validate_command(cls: type[Self], v: Any) -> str:
        return validate_command(v)

    @field_validator("args", mode="before")
    @classmethod
    def _validate_args(cls: type[Self], v: Any) -> list[str]:
        return validate_args(v)

    @field_validator("stdout", "stderr", mode="before")
    @classmethod
    def _validate_redirect(cls: type[Self], v: Any) -> RedirectTarget:
        return RedirectTarget.from_value(v)

    def reset_incarnation(self) -> None:
        self.created_at = _utcnow()
        self.token = None
        self.pid = None
        self.status = ProcessStatus.CREATED
        self.script_path = None
        self.status_path = None
        self.stdout_path = None
        self.stderr_path = None
