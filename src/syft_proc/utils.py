import os
import uuid
from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

from syft_proc.constants import TOKEN_PREFIX


def _utcnow() -> datetime:
    return datetime.now(tz=timezone.utc)


def generate_token() -> str:
    """Unique, unpredictable marker for one launch"""
    return f"{TOKEN_PREFIX}{uuid.uuid4().hex}"


def validate_command(command: Any) -> str:
    if not isinstance(command, str):
        raise ValueError("Command must be a string")
    if not command.strip():
        raise ValueError("Command cannot be empty")
    return command


def validate_args(args: Any) -> list[str]:
    if args is None:
        return []
    # a bare string is a sequence too, but never a valid argument list
    if isinstance(args, (str, bytes)) or not isinstance(args, Sequence):
        raise ValueError("Args must be a sequence of strings")
    if not all(isinstance(arg, str) for arg in args):
        raise ValueError("Args must be a sequence of strings")
    return list(args)


def is_path_like(value: Any) -> bool:
    return isinstance(value, (str, os.PathLike))
