from __future__ import annotations

import argparse
import json
from pathlib import Path

from core.config import SimulationConfig
from core.engine import Engine
from metrics.hash import RunHash
from metrics.logger import FrameLogger
from metrics.schema import SCHEMA_VERSION


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Headless maze simulation runner")
    parser.add_argument("--seed", type=int, default=None, help="Overrides the seed from --config")
    parser.add_argument("--frames", type=int, default=3600)
    parser.add_argument("--frame-dt", type=float, default=1.0 / 60.0, help="Seconds per frame")
    parser.add_argument("--out", type=str, required=False)
    parser.add_argument("--config", type=str, help="Path to JSON simulation config")
    return parser.parse_args()


def run(seed: int, frames: int, outdir: Path, config: dict | None = None, *, frame_dt: float = 1.0 / 60.0) -> dict:
    cfg = dict(config or {})
    cfg["seed"] = seed
    engine = Engine(SimulationConfig.from_mapping(cfg))

    outdir.mkdir(parents=True, exist_ok=True)
    frame_path = outdir / "frames.jsonl"
    summary_path = outdir / "summary.json"

    rh = RunHash()
    respawns = 0
    events_delivered = 0
    with FrameLogger(frame_path) as logger:
        for _ in range(frames):
            frame = engine.update(frame_dt)
            # Nothing renders headless; drain so events are not retained.
            events_delivered += len(engine.drain_events())
            respawns += frame.respawns
            rh.update_line(logger.write_frame(frame))

    summary = {
        "seed": seed,
        "frames": frames,
        "frame_dt": frame_dt,
        "elapsed": engine.elapsed,
        "rows": engine.maze.rows,
        "cols": engine.maze.cols,
        "open_cells": len(engine.maze.open_cells),
        "prey_count": len(engine.prey),
        "captures": engine.captures_total,
        "events_delivered": events_delivered,
        "respawns": respawns,
        "schema_version": SCHEMA_VERSION,
        "run_hash": rh.hexdigest(),
        "config": engine.config.to_dict(),
    }
    summary_path.write_text(json.dumps(summary, sort_keys=True, separators=(",", ":")))
    return summary


def main() -> None:
    args = parse_args()
    config = json.loads(Path(args.config).read_text()) if args.config else {}
    seed = args.seed if args.seed is not None else int(config.get("seed", SimulationConfig.seed))
    outdir = Path(args.out) if args.out else Path(f"runs/maze_{seed}")
    summary = run(seed, args.frames, outdir, config, frame_dt=args.frame_dt)
    print(f"Wrote {args.frames} frames to {outdir} (captures={summary['captures']}, run_hash={summary['run_hash']})")


if __name__ == "__main__":
    main()
