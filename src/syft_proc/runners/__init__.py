from syft_proc.constants import DEFAULT_SHELL
from syft_proc.runners.base import ProcessRunner
from syft_proc.runners.detached import DetachedRunner
from syft_proc.runners.subprocess import SubprocessRunner


def get_runner(name: str, shell: str = DEFAULT_SHELL) -> ProcessRunner:
    """Factory to get runner by name"""
    runners = {
        "detached": DetachedRunner,
        "subprocess": SubprocessRunner,
    }

    runner_cls = runners.get(name)
    if runner_cls is None:
        raise ValueError(f"Unknown runner: {name}. Available: {list(runners.keys())}")

    return runner_cls(shell=shell)


__all__ = ["DetachedRunner", "ProcessRunner", "SubprocessRunner", "get_runner"]
