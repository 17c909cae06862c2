"""Frame log: one canonical JSON object per line, in frame order."""

from __future__ import annotations

import json
from dataclasses import asdict, is_dataclass
from pathlib import Path
from typing import IO, Any, Dict, Iterator, Mapping, Union

from .schema import FrameData

FrameLike = Union[FrameData, Mapping[str, Any]]

# Positions and timers are rounded so traces compare equal across platforms.
FLOAT_DIGITS = 6


def _plain(value: Any) -> Any:
    if isinstance(value, float):
        return round(value, FLOAT_DIGITS)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {str(k): _plain(v) for k, v in value.items()}
    return value


def frame_record(frame: FrameLike) -> Dict[str, Any]:
    """Flatten a frame into JSON-ready primitives."""
    if isinstance(frame, FrameData):
        payload = frame.to_ordered_dict()
    elif is_dataclass(frame) and not isinstance(frame, type):
        payload = asdict(frame)
    elif isinstance(frame, Mapping):
        payload = dict(frame)
    else:
        raise TypeError(f"Unsupported frame type: {type(frame)!r}")
    return _plain(payload)


def _dumps(record: Mapping[str, Any]) -> str:
    # allow_nan=False turns a NaN/inf leak into a ValueError at the writer.
    return json.dumps(record, sort_keys=True, separators=(",", ":"), allow_nan=False)


def encode_frame(frame: FrameLike) -> str:
    return _dumps(frame_record(frame))


def read_frames(path: str | Path) -> Iterator[Dict[str, Any]]:
    with Path(path).open("r", encoding="utf-8") as fh:
        for line in fh:
            if line.strip():
                yield json.loads(line)


class FrameLogger:
    """Writes ``frames.jsonl``; frame indices must strictly increase."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.frames_written = 0
        self.last_frame: int | None = None
        self._fh: IO[str] | None = None

    def __enter__(self) -> "FrameLogger":
        self.open()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def open(self) -> None:
        if self._fh is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._fh = self.path.open("w", encoding="utf-8")

    def close(self) -> None:
        if self._fh:
            self._fh.close()
            self._fh = None

    def write_frame(self, frame: FrameLike) -> str:
        """Append one frame and return the encoded line (without newline)."""
        record = frame_record(frame)
        index = record.get("frame")
        if isinstance(index, int) and self.last_frame is not None and index <= self.last_frame:
            raise ValueError(f"Frame {index} logged after frame {self.last_frame}")
        line = _dumps(record)
        if self._fh is None:
            self.open()
        assert self._fh is not None
        self._fh.write(line + "\n")
        self._fh.flush()
        if isinstance(index, int):
            self.last_frame = index
        self.frames_written += 1
        return line


__all__ = ["FLOAT_DIGITS", "FrameLike", "FrameLogger", "encode_frame", "frame_record", "read_frames"]
