import os
import re
from datetime import datetime, timedelta, timezone

from diagnostics import FilenameGenerator, RollingDiagnosticFileWriter, RotationPolicy


def test_filename_format(tmp_path, frozen_clock):
    gen = FilenameGenerator(tmp_path, "agent", clock=frozen_clock, pid=4242)
    path = gen()

    assert path.parent == tmp_path
    assert path.name == "agent_4242_2024-01-02T03_04_05Z_.log"
    assert ":" not in path.name


def test_default_pid_and_clock(tmp_path):
    path = FilenameGenerator(tmp_path, "worker")()

    assert re.fullmatch(
        rf"worker_{os.getpid()}_\d{{4}}-\d{{2}}-\d{{2}}T\d{{2}}_\d{{2}}_\d{{2}}Z_\.log",
        path.name,
    )


def test_non_utc_clock_is_normalized(tmp_path):
    plus_two = timezone(timedelta(hours=2))
    gen = FilenameGenerator(
        tmp_path, "agent", clock=lambda: datetime(2024, 1, 2, 5, 4, 5, tzinfo=plus_two), pid=1
    )
    assert gen().name == "agent_1_2024-01-02T03_04_05Z_.log"


def test_names_in_different_seconds_never_collide(tmp_path, step_clock):
    gen = FilenameGenerator(tmp_path, "agent", clock=step_clock, pid=4242)
    names = {gen() for _ in range(50)}
    assert len(names) == 50


def test_names_within_same_second_collide(tmp_path):
    base = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)
    ticks = iter([base, base + timedelta(milliseconds=900)])
    gen = FilenameGenerator(tmp_path, "agent", clock=lambda: next(ticks), pid=4242)

    assert gen() == gen()


def test_same_second_rotation_appends_into_first_file(tmp_path, frozen_clock):
    gen = FilenameGenerator(tmp_path, "agent", clock=frozen_clock, pid=4242)
    w = RollingDiagnosticFileWriter(
        "info", tmp_path, "agent", RotationPolicy(2, 5), filenames=gen
    )
    for i in range(5):
        w.write(f"m{i}\n")
    w.end()

    files = list(tmp_path.iterdir())
    assert len(files) == 1
    assert files[0].read_text() == "m0\nm1\nm2\nm3\nm4\n"
    assert len(w.queue) == 1
