from collections.abc import Sequence
from pathlib import Path

from syft_proc.config import ProcConfig  # noqa: F401
from syft_proc.constants import DEFAULT_BASE_DIR  # noqa: F401
from syft_proc.handle import ProcessHandle  # noqa: F401
from syft_proc.models import ProcessStatus  # noqa: F401
from syft_proc.output_stream import OutputStream  # noqa: F401
from syft_proc.resolver import find_all, resolve  # noqa: F401


def run(
    command: str,
    args: Sequence[str] = (),
    stdout: bool | str | Path | None = False,
    stderr: bool | str | Path | None = False,
    runner_type: str | None = None,
    config: ProcConfig | None = None,
) -> ProcessHandle:
    return ProcessHandle(
        command,
        args,
        stdout=stdout,
        stderr=stderr,
        runner_type=runner_type,
        config=config,
    )
