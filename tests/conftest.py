import pytest
from syft_proc import ProcConfig, ProcessHandle


@pytest.fixture
def proc_config(tmp_path):
    """ProcConfig with temporary base directory for testing."""
    return ProcConfig(base_dir=tmp_path / "syft-proc-test")


@pytest.fixture
def spawn(proc_config):
    """Factory for ProcessHandles that are killed and closed after the test."""
    handles: list[ProcessHandle] = []

    def _spawn(command, args=(), **kwargs) -> ProcessHandle:
        kwargs.setdefault("config", proc_config)
        handle = ProcessHandle(command, args, **kwargs)
        handles.append(handle)
        return handle

    yield _spawn

    for handle in handles:
        handle.kill(grace=0)
        handle.close()
