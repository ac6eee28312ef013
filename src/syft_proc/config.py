from pathlib import Path

import pydantic_settings

from syft_proc.constants import (
    DEFAULT_BASE_DIR,
    DEFAULT_KILL_GRACE,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_SHELL,
)


class ProcConfig(pydantic_settings.BaseSettings):
    model_config = pydantic_settings.SettingsConfigDict(env_prefix="SYFT_PROC_")

    # launch scripts, status files and auto-captured output live here
    base_dir: Path = DEFAULT_BASE_DIR
    poll_interval: float = DEFAULT_POLL_INTERVAL
    kill_grace: float = DEFAULT_KILL_GRACE
    runner_type: str = "detached"
    shell: str = DEFAULT_SHELL

    def ensure_base_dir(self) -> Path:
        self.base_dir.mkdir(parents=True, exist_ok=True)
        return self.base_dir
