"""
Escalating termination of a process and everything it started.

Processes started through an intermediate shell get re-parented, so signaling
the main pid alone leaves its descendants running. Descendants are signaled
first, then the main process:

    1. SIGTERM to all descendants
    2. wait `grace`
    3. SIGKILL to the same descendants
    4. SIGTERM to the main process
    5. wait `grace`
    6. SIGKILL to the main process

Every delivery tolerates a target that is already gone.
"""

import logging
import signal
import time

import psutil

from syft_proc import resolver

logger = logging.getLogger(__name__)


def _send(proc: psutil.Process, sig: signal.Signals) -> bool:
    """Deliver one signal, returns False if the process could not be signaled"""
    try:
        proc.send_signal(sig)
        return True
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess) as e:
        logger.debug(f"Could not send {sig.name} to {proc.pid}: {e}")
        return False


def signal_all(procs: list[psutil.Process], sig: signal.Signals) -> int:
    """Send `sig` to every process in `procs`, returns how many were signaled"""
    return sum(_send(proc, sig) for proc in procs)


def kill_tree(pid: int, grace: float) -> None:
    """Terminate `pid` and its process-table descendants, TERM first, then KILL"""
    try:
        main = psutil.Process(pid)
    except (psutil.NoSuchProcess, psutil.AccessDenied):
        logger.debug(f"Process {pid} is already gone")
        return

    children = resolver.descendants(pid)
    logger.debug(f"Killing {pid} and {len(children)} descendant(s)")

    if children:
        signal_all(children, signal.SIGTERM)
        time.sleep(grace)
        signal_all(children, signal.SIGKILL)

    _send(main, signal.SIGTERM)
    time.sleep(grace)
    _send(main, signal.SIGKILL)
