from pathlib import Path

import pytest
from syft_proc.models import (
    ProcessRecord,
    ProcessStatus,
    RedirectKind,
    RedirectTarget,
)


@pytest.mark.parametrize(
    "value, kind",
    [
        (False, RedirectKind.DISCARD),
        (None, RedirectKind.DISCARD),
        (True, RedirectKind.AUTO_CAPTURE),
        ("out.log", RedirectKind.EXPLICIT_PATH),
        (Path("/tmp/out.log"), RedirectKind.EXPLICIT_PATH),
    ],
)
def test_redirect_target_from_value(value, kind) -> None:
    target = RedirectTarget.from_value(value)
    assert target.kind == kind
    if kind == RedirectKind.EXPLICIT_PATH:
        assert target.path == Path(value)
    else:
        assert target.path is None


@pytest.mark.parametrize("value", [1, 0.5, ["out.log"], ""])
def test_redirect_target_rejects_unknown_forms(value) -> None:
    with pytest.raises(ValueError):
        RedirectTarget.from_value(value)


def test_record_accepts_valid_arguments() -> None:
    record = ProcessRecord(command="sleep", args=("1",), stdout=True, stderr="err.log")

    assert record.args == ["1"]
    assert record.stdout.kind == RedirectKind.AUTO_CAPTURE
    assert record.stderr.kind == RedirectKind.EXPLICIT_PATH
    assert record.status == ProcessStatus.CREATED
    assert record.pid is None


@pytest.mark.parametrize(
    "command, args, match",
    [
        (["sleep"], [], "Command must be a string"),
        (42, [], "Command must be a string"),
        ("   ", [], "Command cannot be empty"),
        ("sleep", "1", "Args must be a sequence of strings"),
        ("sleep", [1], "Args must be a sequence of strings"),
    ],
)
def test_record_rejects_invalid_arguments(command, args, match) -> None:
    with pytest.raises(ValueError, match=match):
        ProcessRecord(command=command, args=args, stdout=False, stderr=False)


def test_record_rejects_invalid_redirection() -> None:
    with pytest.raises(ValueError, match="Invalid redirection target"):
        ProcessRecord(command="sleep", args=[], stdout=3, stderr=False)


def test_reset_incarnation_clears_runtime_state() -> None:
    record = ProcessRecord(command="sleep", stdout=True, stderr=False)
    record.token = "syftproc-abc"
    record.pid = 1234
    record.status = ProcessStatus.KILLED
    record.stdout_path = Path("/tmp/x.stdout")

    record.reset_incarnation()

    assert record.token is None
    assert record.pid is None
    assert record.status == ProcessStatus.CREATED
    assert record.stdout_path is None
    # configuration survives
    assert record.command == "sleep"
    assert record.stdout.kind == RedirectKind.AUTO_CAPTURE
