import tempfile
from pathlib import Path

DEFAULT_BASE_DIR = Path(tempfile.gettempdir()) / "syft_proc"
DEFAULT_SHELL = "/bin/sh"
DEFAULT_KILL_GRACE = 0.1
DEFAULT_POLL_INTERVAL = 0.1

TOKEN_PREFIX = "syftproc-"
TOKEN_ENV_VAR = "SYFT_PROC_TOKEN"
