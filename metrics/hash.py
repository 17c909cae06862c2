"""Run fingerprints: a SHA-256 chain over encoded frame lines."""

from __future__ import annotations

import hashlib
from pathlib import Path

from .logger import FrameLike, encode_frame


def _sha256(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def frame_hash(frame: FrameLike) -> str:
    return _sha256(encode_frame(frame))


class RunHash:
    """Chains per-frame digests, so dropping or swapping frames changes the result."""

    def __init__(self) -> None:
        self.frames = 0
        self._chain = _sha256("")

    def update(self, frame: FrameLike) -> str:
        return self.update_line(encode_frame(frame))

    def update_line(self, line: str) -> str:
        """Feed an already encoded frame line, as written to ``frames.jsonl``."""
        digest = _sha256(line)
        self._chain = _sha256(self._chain + digest)
        self.frames += 1
        return digest

    def hexdigest(self) -> str:
        return self._chain


def hash_frames_file(path: str | Path) -> str:
    """Recompute the run hash of a written frame log."""
    rh = RunHash()
    with Path(path).open("r", encoding="utf-8") as fh:
        for line in fh:
            line = line.rstrip("\n")
            if line:
                rh.update_line(line)
    return rh.hexdigest()


__all__ = ["RunHash", "frame_hash", "hash_frames_file"]
