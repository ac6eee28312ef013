from syft_proc.output_stream import OutputStream


class Liveness:
    """Stand-in for a process that is alive until told otherwise"""

    def __init__(self):
        self.alive = True

    def __call__(self) -> bool:
        return self.alive


def test_complete_lines_are_returned_once(tmp_path) -> None:
    path = tmp_path / "out.log"
    path.write_text("foo\nbar\n")
    stream = OutputStream(path, is_alive=Liveness())

    assert stream.can_read()
    assert stream.read_lines() == ["foo", "bar"]
    assert stream.read_lines() == []
    assert not stream.can_read()


def test_partial_line_held_until_completed(tmp_path) -> None:
    path = tmp_path / "out.log"
    path.write_text("foo\nba")
    stream = OutputStream(path, is_alive=Liveness())

    assert stream.read_lines() == ["foo"]
    assert not stream.can_read()

    with open(path, "a") as f:
        f.write("r\n")
    assert stream.can_read()
    assert stream.read_lines() == ["bar"]


def test_partial_line_flushed_when_process_is_gone(tmp_path) -> None:
    path = tmp_path / "out.log"
    path.write_text("foo\nbar")
    liveness = Liveness()
    stream = OutputStream(path, is_alive=liveness)

    assert stream.read_lines() == ["foo"]
    assert not stream.is_eof()

    liveness.alive = False
    assert stream.can_read()
    assert not stream.is_eof()
    assert stream.read_lines() == ["bar"]
    assert stream.is_eof()


def test_eof_needs_dead_process_and_drained_data(tmp_path) -> None:
    path = tmp_path / "out.log"
    path.write_text("")
    liveness = Liveness()
    stream = OutputStream(path, is_alive=liveness)

    # nothing to read, but more may still arrive
    assert not stream.is_eof()

    path.write_text("late\n")
    liveness.alive = False
    assert not stream.is_eof()
    assert stream.read_lines() == ["late"]
    assert stream.is_eof()


def test_file_is_opened_lazily(tmp_path) -> None:
    path = tmp_path / "not-yet.log"
    stream = OutputStream(path, is_alive=Liveness())

    assert stream.read_lines() == []
    assert not stream.is_open

    path.write_text("hello\r\n")
    assert stream.read_lines() == ["hello"]
    assert stream.is_open


def test_discarded_stream(tmp_path) -> None:
    stream = OutputStream(None, is_alive=Liveness())

    assert stream.read_lines() == []
    assert not stream.can_read()
    assert stream.is_eof()


def test_close(tmp_path) -> None:
    path = tmp_path / "out.log"
    path.write_text("foo\n")
    stream = OutputStream(path, is_alive=Liveness(), stream_type="stderr")
    stream.read_lines()
    assert stream.is_open

    stream.close()
    assert not stream.is_open
    assert "stderr" in repr(stream)
    assert stream.read_lines() == []
