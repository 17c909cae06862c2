import json
import tempfile
from pathlib import Path

import pytest

from metrics.hash import RunHash, frame_hash, hash_frames_file
from metrics.logger import FrameLogger, encode_frame, read_frames
from metrics.schema import SCHEMA_VERSION, FrameData


def test_logger_writes_canonical_lines():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d, "nested", "frames.jsonl")
        with FrameLogger(path) as logger:
            logger.write_frame(FrameData(frame=0, captures=1, hunter_pos=(12.0, 36.1234567891)))
            line = logger.write_frame({"frame": 1, "b": 2, "a": 1})
            assert logger.frames_written == 2
        lines = path.read_text().splitlines()
        records = list(read_frames(path))
    first = json.loads(lines[0])
    assert first["schema_version"] == SCHEMA_VERSION
    assert first["captures"] == 1
    assert first["hunter_pos"] == [12.0, 36.123457]
    assert lines[1] == line == '{"a":1,"b":2,"frame":1}'
    assert [r["frame"] for r in records] == [0, 1]


def test_logger_rejects_unknown_records():
    with tempfile.TemporaryDirectory() as d:
        logger = FrameLogger(Path(d, "frames.jsonl"))
        with pytest.raises(TypeError):
            logger.write_frame(42)
        logger.close()


def test_logger_refuses_non_finite_values():
    with tempfile.TemporaryDirectory() as d:
        path = Path(d, "frames.jsonl")
        with FrameLogger(path) as logger:
            logger.write_frame(FrameData(frame=0))
            with pytest.raises(ValueError):
                logger.write_frame(FrameData(frame=1, elapsed=float("nan")))
            assert logger.frames_written == 1
        assert len(path.read_text().splitlines()) == 1
    with pytest.raises(ValueError):
        encode_frame({"frame": 0, "delta": float("inf")})


def test_logger_requires_increasing_frames():
    with tempfile.TemporaryDirectory() as d:
        with FrameLogger(Path(d, "frames.jsonl")) as logger:
            logger.write_frame({"frame": 3})
            with pytest.raises(ValueError):
                logger.write_frame({"frame": 3})
            logger.write_frame({"frame": 4})
            assert logger.last_frame == 4


def test_run_hash_depends_on_frame_order():
    a, b = {"frame": 0, "captures": 1}, {"frame": 1, "captures": 0}
    forward, backward = RunHash(), RunHash()
    forward.update(a)
    forward.update(b)
    backward.update(b)
    backward.update(a)
    assert forward.frames == 2
    assert forward.hexdigest() != backward.hexdigest()
    assert forward.update_line(encode_frame(a)) == frame_hash(a)


def test_run_hash_can_be_recomputed_from_the_log():
    rh = RunHash()
    with tempfile.TemporaryDirectory() as d:
        path = Path(d, "frames.jsonl")
        with FrameLogger(path) as logger:
            for i in range(5):
                frame = FrameData(frame=i, elapsed=i / 60.0)
                logger.write_frame(frame)
                rh.update(frame)
        assert hash_frames_file(path) == rh.hexdigest()
