"""
Locate a launched process in the process table by its spawn token.

There is no persistent handle to a detached process, so every call scans the
table again. "Not found" is ambiguous: the process may not be visible yet or
may already be gone. Callers must not read more into it.
"""

import logging

import psutil

from syft_proc.constants import TOKEN_ENV_VAR

logger = logging.getLogger(__name__)

_ATTRS = ["pid", "ppid", "cmdline", "status"]


def _cmdline_matches(cmdline: list[str] | None, token: str) -> bool:
    if not cmdline:
        return False
    return any(token in part for part in cmdline)


def _environ_matches(proc: psutil.Process, token: str) -> bool:
    try:
        return proc.environ().get(TOKEN_ENV_VAR) == token
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return False


def _scan(
    token: str, include_descendants: bool
) -> tuple[dict[int, psutil.Process], dict[int, psutil.Process]]:
    """Return (processes marked on the command line, processes marked via environment)"""
    marked: dict[int, psutil.Process] = {}
    inherited: dict[int, psutil.Process] = {}
    for proc in psutil.process_iter(_ATTRS):
        # Zombies have exited already, they only wait to be reaped
        if proc.info["status"] == psutil.STATUS_ZOMBIE:
            continue
        if _cmdline_matches(proc.info["cmdline"], token):
            marked[proc.pid] = proc
        elif include_descendants and _environ_matches(proc, token):
            inherited[proc.pid] = proc
    return marked, inherited


def resolve(token: str, include_descendants: bool = False) -> int | None:
    """
    Find the pid of the process launched with `token`.

    Args:
        token: spawn token embedded in the launch command line
        include_descendants: also match processes that inherited the token
            through their environment. The directly launched process is
            still preferred when it is present.

    Returns:
        A pid, or None when nothing matches.
    """
    marked, inherited = _scan(token, include_descendants)

    # The launched process is the topmost one carrying the token
    direct = sorted(
        pid for pid, proc in marked.items() if proc.info["ppid"] not in marked
    )
    if direct:
        return direct[0]

    if include_descendants:
        others = sorted([*marked, *inherited])
        if others:
            return others[0]

    logger.debug(f"No process found for token {token}")
    return None


def find_all(token: str) -> list[int]:
    """All live pids carrying `token`, on the command line or in the environment"""
    marked, inherited = _scan(token, include_descendants=True)
    return sorted([*marked, *inherited])


def descendants(pid: int) -> list[psutil.Process]:
    """Process-table descendants of `pid`, empty if the process is gone"""
    try:
        return psutil.Process(pid).children(recursive=True)
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return []
