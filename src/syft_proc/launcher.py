"""
Start a command detached from the caller, marked with a fresh spawn token.

The command runs inside a small shell script whose file name is the token, so
the token shows up verbatim in the interpreter's command line. The token is
also exported to the environment, which every descendant inherits.

Script layout:
    #!/bin/sh
    rm -f -- "$0"                   # the script removes itself once started
    SYFT_PROC_TOKEN=...; export ...
    <command> <quoted args>
    status=$?
    echo "$status" > <token>.status
    exit "$status"
"""

import logging
import shlex
from dataclasses import dataclass
from pathlib import Path

from syft_proc.config import ProcConfig
from syft_proc.constants import TOKEN_ENV_VAR
from syft_proc.models import RedirectKind, RedirectTarget
from syft_proc.runners import ProcessRunner
from syft_proc.utils import generate_token

logger = logging.getLogger(__name__)


@dataclass
class LaunchResult:
    token: str
    script_path: Path
    status_path: Path
    stdout_path: Path | None
    stderr_path: Path | None


def build_script(
    command: str,
    args: list[str],
    token: str,
    status_path: Path,
    shell: str,
) -> str:
    """Script text running `command args`. The command is passed to the shell verbatim."""
    invocation = " ".join([command, *(shlex.quote(arg) for arg in args)])
    lines = [
        f"#!{shell}",
        'rm -f -- "$0"',
        f"{TOKEN_ENV_VAR}={shlex.quote(token)}",
        f"export {TOKEN_ENV_VAR}",
        invocation,
        "status=$?",
        f'echo "$status" > {shlex.quote(str(status_path))}',
        'exit "$status"',
    ]
    return "\n".join(lines) + "\n"


def write_script(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    path.chmod(0o700)
    return path


def resolve_output_path(
    target: RedirectTarget, base_dir: Path, token: str, stream: str
) -> Path | None:
    """File backing one output stream, or None when the stream is discarded"""
    if target.kind == RedirectKind.DISCARD:
        return None
    if target.kind == RedirectKind.AUTO_CAPTURE:
        return base_dir / f"{token}.{stream}"
    return target.path


def launch(
    command: str,
    args: list[str],
    stdout: RedirectTarget,
    stderr: RedirectTarget,
    runner: ProcessRunner,
    config: ProcConfig,
) -> LaunchResult:
    """
    Start `command args` through `runner` and return immediately.

    A failed spawn is not reported here. It shows up later as a token that
    never resolves.
    """
    base_dir = config.ensure_base_dir()
    token = generate_token()
    script_path = base_dir / f"{token}.sh"
    status_path = base_dir / f"{token}.status"
    stdout_path = resolve_output_path(stdout, base_dir, token, "stdout")
    stderr_path = resolve_output_path(stderr, base_dir, token, "stderr")

    script = build_script(command, args, token, status_path, config.shell)
    try:
        for path in (stdout_path, stderr_path):
            if path is not None:
                path.parent.mkdir(parents=True, exist_ok=True)
        write_script(script_path, script)
    except OSError as e:
        logger.warning(f"Failed to prepare launch of {command!r}: {e}")
    else:
        runner.start(script_path, stdout_path=stdout_path, stderr_path=stderr_path)
        logger.debug(f"Launched {command!r} with token {token}")

    return LaunchResult(
        token=token,
        script_path=script_path,
        status_path=status_path,
        stdout_path=stdout_path,
        stderr_path=stderr_path,
    )
