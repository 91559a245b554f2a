import os
import stat
import time

import pytest

from diagnostics import (
    FilenameGenerator,
    InitializationFailure,
    RetentionDeleteFailure,
    RollingDiagnosticFileWriter,
    RotationFailure,
    RotationPolicy,
)


def _writer(folder, clock, max_lines=3, keep=2, prefix="agent"):
    names = FilenameGenerator(folder, prefix, clock=clock, pid=4242)
    return RollingDiagnosticFileWriter(
        "info", folder, prefix, RotationPolicy(max_lines, keep), filenames=names
    )


def _logs(folder, prefix="agent"):
    return sorted(p for p in folder.iterdir() if p.name.startswith(prefix))


def _age(path, seconds):
    ts = time.time() - seconds
    os.utime(path, (ts, ts))


def test_writes_below_threshold_stay_in_one_file(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock, max_lines=10, keep=3)
    for i in range(5):
        w.write(f"m{i}\n")
    w.end()

    files = _logs(tmp_path)
    assert len(files) == 1
    assert files[0].read_text() == "".join(f"m{i}\n" for i in range(5))


def test_rotation_keeps_only_newest_files(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock, max_lines=3, keep=2)
    created = []
    for i in range(10):
        w.write(f"m{i}\n")
        if w.active_path not in created:
            created.append(w.active_path)
    w.end()

    # 10 writes at 3 per file -> 4 files -> 3 rotations
    assert len(created) == 4
    files = _logs(tmp_path)
    assert files == sorted(created[-2:])
    assert created[-1].read_text() == "m9\n"
    assert created[-2].read_text() == "m6\nm7\nm8\n"


def test_queue_never_exceeds_files_to_keep(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock, max_lines=1, keep=3)
    for i in range(8):
        w.write(f"{i}")
        assert len(w.queue) <= 3
        assert w.queue[-1] == w.active_path
    w.end()
    assert len(_logs(tmp_path)) == 3


def test_counts_write_calls_not_embedded_newlines(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock, max_lines=2, keep=5)
    w.write("a\nb\nc\n")
    w.write("d\ne\n")
    first = w.active_path
    assert w.line_count == 2

    w.write("f\n")
    assert w.active_path != first
    w.end()

    assert first.read_text() == "a\nb\nc\nd\ne\n"


def test_message_written_verbatim_without_newline(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock, max_lines=10)
    w.write("a")
    w.write_error("b")
    w.end()

    assert _logs(tmp_path)[0].read_text() == "ab"


def test_resumes_partially_filled_newest_file(tmp_path, step_clock):
    existing = tmp_path / "agent_1_old_.log"
    existing.write_text("a\nb")

    w = _writer(tmp_path, step_clock, max_lines=5, keep=3)
    assert w.active_path == existing
    assert w.line_count == 2

    for i in range(3):
        w.write(f"\nc{i}")
    assert _logs(tmp_path) == [existing]

    w.write("next\n")
    w.end()

    files = _logs(tmp_path)
    assert len(files) == 2
    assert existing.read_text() == "a\nb\nc0\nc1\nc2"


def test_full_newest_file_starts_new_file_on_next_write(tmp_path, step_clock):
    existing = tmp_path / "agent_1_old_.log"
    existing.write_text("1\n2\n3\n4\n5\n")

    w = _writer(tmp_path, step_clock, max_lines=5, keep=3)
    assert w.active_path is None
    assert w.queue == (existing,)

    w.write("fresh\n")
    w.end()

    files = _logs(tmp_path)
    assert existing in files
    assert len(files) == 2
    assert existing.read_text() == "1\n2\n3\n4\n5\n"


def test_bootstrap_orders_by_mtime_and_retention_applies_on_create(tmp_path, step_clock):
    old = tmp_path / "agent_a_.log"
    mid = tmp_path / "agent_b_.log"
    new = tmp_path / "agent_c_.log"
    for p, age in ((new, 300), (old, 900), (mid, 600)):
        p.write_text("x\n" * 10)
        _age(p, age)

    other = tmp_path / "unrelated.log"
    other.write_text("keep me")

    w = _writer(tmp_path, step_clock, max_lines=5, keep=2)
    assert w.queue == (old, mid, new)
    assert old.exists()  # construction never deletes

    w.write("x")
    w.end()

    assert not old.exists()
    assert not mid.exists()
    assert new.exists()
    assert other.exists()
    assert len(_logs(tmp_path)) == 2


def test_bootstrap_ignores_directories_with_prefix(tmp_path, step_clock):
    (tmp_path / "agent_dir").mkdir()
    w = _writer(tmp_path, step_clock)
    assert w.queue == ()
    w.end()


def test_end_is_idempotent(tmp_path, step_clock):
    w = _writer(tmp_path, step_clock)
    w.end()
    w.write("a")
    w.end()
    w.end()
    assert w.active_path is None


def test_context_manager_closes(tmp_path, step_clock):
    with _writer(tmp_path, step_clock) as w:
        w.write("a")
        assert w.active_path is not None
    assert w.active_path is None


def test_creates_missing_folder_with_mode_775(tmp_path, step_clock):
    folder = tmp_path / "a" / "b"
    w = _writer(folder, step_clock)
    w.end()

    assert folder.is_dir()
    assert stat.S_IMODE(folder.stat().st_mode) == 0o775


def test_initialization_failure_when_folder_is_a_file(tmp_path, step_clock):
    blocker = tmp_path / "blocker"
    blocker.write_text("")

    with pytest.raises(InitializationFailure):
        _writer(blocker, step_clock)


def test_first_open_failure_is_initialization_failure(tmp_path, step_clock):
    folder = tmp_path / "logs"
    w = _writer(folder, step_clock)
    folder.rmdir()

    with pytest.raises(InitializationFailure) as exc:
        w.write("a")
    assert isinstance(exc.value.__cause__, OSError)


def test_rotation_failure_propagates_from_write(tmp_path, step_clock):
    folder = tmp_path / "logs"
    w = _writer(folder, step_clock, max_lines=1)
    w.write("a")
    w.active_path.unlink()
    folder.rmdir()

    with pytest.raises(RotationFailure) as exc:
        w.write("b")
    assert isinstance(exc.value.__cause__, OSError)


def test_retention_delete_failure_propagates_from_write(tmp_path, step_clock):
    existing = tmp_path / "agent_1_old_.log"
    existing.write_text("x\n" * 10)

    w = _writer(tmp_path, step_clock, max_lines=5, keep=1)
    # Swap the queued file for a non-empty directory so unlink fails.
    existing.unlink()
    existing.mkdir()
    (existing / "inner").write_text("")

    with pytest.raises(RetentionDeleteFailure) as exc:
        w.write("a")
    assert isinstance(exc.value.__cause__, OSError)
    w.end()


def test_queued_file_removed_externally_counts_as_deleted(tmp_path, step_clock):
    existing = tmp_path / "agent_1_old_.log"
    existing.write_text("x\n" * 10)

    w = _writer(tmp_path, step_clock, max_lines=5, keep=1)
    existing.unlink()

    w.write("a")
    w.end()

    assert w.queue == (_logs(tmp_path)[0],)
    assert len(_logs(tmp_path)) == 1


def test_invalid_policy_rejected():
    with pytest.raises(ValueError):
        RotationPolicy(0, 1)
    with pytest.raises(ValueError):
        RotationPolicy(1, 0)
