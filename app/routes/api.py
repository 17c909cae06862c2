from __future__ import annotations

import math
from threading import Lock
from typing import Any, Dict, List, Mapping

from flask import jsonify, request

from app.routes import bp
from core.config import ConfigError, SimulationConfig
from core.engine import Engine, Snapshot
from metrics.schema import FrameData

# Cap on frames advanced by a single /step request.
MAX_STEP_FRAMES = 600
HISTORY_LIMIT = 600


class EngineState:
    """Wrapper to hold the engine and frame history for API responses."""

    def __init__(self, config: SimulationConfig) -> None:
        self.config = config
        self.engine = Engine(config)
        self.engine.start()
        self.history: List[FrameData] = []
        self.lock = Lock()

    def step(self, frames: int, delta: float) -> Dict[str, Any]:
        with self.lock:
            if self.engine.running:
                self.history.extend(self.engine.run(frames, frame_dt=delta))
                del self.history[:-HISTORY_LIMIT]
            return serialize_snapshot(self.engine.snapshot(), running=self.engine.running)


state: EngineState | None = None


def init_state(config: Mapping[str, Any] | None = None) -> None:
    global state
    state = EngineState(SimulationConfig.from_mapping(config))


def serialize_snapshot(snap: Snapshot, *, running: bool) -> Dict[str, Any]:
    hunter = snap.hunter
    return {
        "running": running,
        "frame": snap.frame,
        "elapsed": snap.elapsed,
        "tile_size": snap.tile_size,
        "viewport": [snap.width, snap.height],
        "hunter": {
            "pos": list(hunter.position),
            "angle": hunter.angle,
            "highlight": hunter.highlight,
            "munch_burst": hunter.munch_burst,
            "mouth_timer": hunter.mouth_timer,
            "eye_pulse": hunter.eye_pulse,
            "trail": [list(seg) for seg in hunter.trail],
        },
        "prey": [{"pos": list(p.position), "eaten": p.eaten, "float_phase": p.float_phase} for p in snap.prey],
        "sparks": [
            {"pos": [s.x, s.y], "radius": s.radius, "life": s.life, "rotation": s.rotation} for s in snap.sparks
        ],
        "particles": [
            {"pos": [p.x, p.y], "size": p.size, "hue": p.hue, "alpha": p.alpha} for p in snap.particles
        ],
        "events": [[e.x, e.y] for e in snap.events],
    }


def _payload() -> Dict[str, Any]:
    return request.get_json(silent=True) or {}


def _bad_request(message: str) -> Any:
    return jsonify({"error": message}), 400


@bp.route("/", methods=["GET"])
def index() -> Any:
    assert state is not None, "Engine state not initialized"
    return jsonify({"status": "ok", "seed": state.engine.seed, "running": state.engine.running})


@bp.route("/maze", methods=["GET"])
def maze() -> Any:
    assert state is not None, "Engine state not initialized"
    m = state.engine.maze
    return jsonify({"rows": m.rows, "cols": m.cols, "grid": m.to_list()})


@bp.route("/snapshot", methods=["GET"])
def snapshot() -> Any:
    assert state is not None, "Engine state not initialized"
    with state.lock:
        return jsonify(serialize_snapshot(state.engine.snapshot(), running=state.engine.running))


@bp.route("/step", methods=["POST"])
def step() -> Any:
    assert state is not None, "Engine state not initialized"
    req = _payload()
    try:
        frames = int(req.get("frames", 1))
        delta = float(req.get("delta", 1.0 / 60.0))
    except (TypeError, ValueError):
        return _bad_request("frames must be an integer and delta a number")
    if not math.isfinite(delta):
        return _bad_request(f"delta must be finite, got {delta}")
    frames = max(1, min(frames, MAX_STEP_FRAMES))
    return jsonify(state.step(frames, delta))


@bp.route("/resize", methods=["POST"])
def resize() -> Any:
    assert state is not None, "Engine state not initialized"
    req = _payload()
    try:
        with state.lock:
            tile_size = state.engine.resize(float(req["width"]), float(req["height"]))
    except KeyError:
        return _bad_request("width and height are required")
    except (TypeError, ValueError) as exc:
        # ConfigError is a ValueError.
        return _bad_request(str(exc))
    return jsonify({"status": "resized", "tile_size": tile_size})


@bp.route("/start", methods=["POST"])
def start() -> Any:
    assert state is not None, "Engine state not initialized"
    with state.lock:
        started = state.engine.start()
    return jsonify({"status": "started" if started else "already_running"})


@bp.route("/stop", methods=["POST"])
def stop() -> Any:
    assert state is not None, "Engine state not initialized"
    with state.lock:
        state.engine.stop()
    return jsonify({"status": "stopped"})


@bp.route("/reset", methods=["POST"])
def reset() -> Any:
    assert state is not None, "Engine state not initialized"
    req = _payload()
    cfg = state.config.to_dict()
    try:
        cfg["seed"] = int(req.get("seed", cfg["seed"]))
        init_state(cfg)
    except (TypeError, ValueError, ConfigError) as exc:
        return _bad_request(str(exc))
    return jsonify({"status": "reset", "seed": cfg["seed"]})


@bp.route("/history", methods=["GET"])
def history() -> Any:
    assert state is not None, "Engine state not initialized"
    with state.lock:
        return jsonify([f.to_ordered_dict() for f in state.history])
