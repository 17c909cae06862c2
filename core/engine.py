"""Deterministic frame engine that runs the update pipeline."""

from __future__ import annotations

import math
from collections import deque
from dataclasses import dataclass, field, replace
from typing import Callable, Deque, Dict, List, Optional, Set, Tuple

from core.config import ConfigError, SimulationConfig
from core.effects import Particle, ParticleField, Spark, spawn_sparks
from core.hunter import CaptureEvent, Hunter
from core.maze import Maze, generate_maze
from core.pipeline import PIPELINE_ORDER, Pipeline
from core.prey import Prey
from core.rng import RNG, RNGStream
from metrics.schema import FrameData

# Undelivered capture events beyond this are dropped oldest-first.
MAX_PENDING_EVENTS = 256


@dataclass
class FrameContext:
    """Mutable frame state passed through the pipeline."""

    frame: int
    delta: float = 0.0
    captures: List[CaptureEvent] = field(default_factory=list)
    occupied: Set[int] = field(default_factory=set)
    respawns: int = 0
    frame_data: FrameData | None = None


@dataclass(frozen=True)
class HunterView:
    position: Tuple[float, float]
    angle: float
    highlight: float
    munch_burst: float
    mouth_timer: float
    eye_pulse: float
    trail: Tuple[Tuple[float, float, float], ...]


@dataclass(frozen=True)
class PreyView:
    position: Tuple[float, float]
    eaten: bool
    float_phase: float


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of one frame for a renderer."""

    frame: int
    elapsed: float
    tile_size: float
    width: float
    height: float
    maze: Maze
    hunter: HunterView
    prey: Tuple[PreyView, ...]
    sparks: Tuple[Spark, ...]
    particles: Tuple[Particle, ...]
    events: Tuple[CaptureEvent, ...]


class Engine:
    """Owns the maze and entities; advances them one frame at a time."""

    def __init__(self, config: SimulationConfig | None = None, *, seed: int | None = None) -> None:
        config = config or SimulationConfig()
        if seed is not None:
            config = replace(config, seed=seed)
        config.validate()
        self.config = config
        self.seed = config.seed
        self.rng = RNG(seed=config.seed)
        self.streams: Dict[str, RNGStream] = {
            "maze": self.rng.stream("maze"),
            "hunter": self.rng.stream("hunter"),
            "prey": self.rng.stream("prey"),
            "effects": self.rng.stream("effects"),
        }
        self.maze = generate_maze(config.rows, config.cols, self.streams["maze"], loop_density=config.loop_density)
        self.tile_size = config.tile_size
        self.width = config.width
        self.height = config.height
        self.hunter = Hunter(
            self.maze,
            self.streams["hunter"],
            speed=config.hunter_speed,
            tile_size=self.tile_size,
            capture_radius_factor=config.capture_radius_factor,
            trail_length=config.trail_length,
        )
        seeded: Set[int] = set()
        self.prey: List[Prey] = [
            Prey(
                self.maze,
                self.streams["prey"],
                seeded,
                speed=config.prey_speed,
                tile_size=self.tile_size,
                respawn_min=config.respawn_min,
                respawn_max=config.respawn_max,
                spawn_attempts=config.spawn_attempts,
            )
            for _ in range(config.prey_count)
        ]
        self.particles = ParticleField(config.particle_count, self.streams["effects"], self.width, self.height)
        self.sparks: List[Spark] = []
        self.elapsed = 0.0
        self.frame = -1
        self.captures_total = 0
        self.occupied: Set[int] = set(seeded)
        self.running = False
        self.last_time = 0.0
        self._events: Deque[CaptureEvent] = deque(maxlen=MAX_PENDING_EVENTS)
        self.pipeline = Pipeline(
            handlers={
                "clock": self._clock_step,
                "hunter": self._hunter_step,
                "occupancy": self._occupancy_step,
                "prey": self._prey_step,
                "effects": self._effects_step,
                "log": self._log_step,
            },
            order=PIPELINE_ORDER,
        )

    # -- pipeline steps -------------------------------------------------

    def _clock_step(self, ctx: FrameContext) -> None:
        self.elapsed += ctx.delta

    def _hunter_step(self, ctx: FrameContext) -> None:
        self.hunter.update(ctx.delta, self.prey, self.elapsed, ctx.captures.append)
        self.captures_total += len(ctx.captures)
        self._events.extend(ctx.captures)

    def _occupancy_step(self, ctx: FrameContext) -> None:
        ctx.occupied = {p.key for p in self.prey if not p.eaten}
        self.occupied = ctx.occupied

    def _prey_step(self, ctx: FrameContext) -> None:
        for prey in self.prey:
            if prey.update(ctx.delta, self.elapsed, ctx.occupied):
                ctx.respawns += 1

    def _effects_step(self, ctx: FrameContext) -> None:
        for event in ctx.captures:
            self.sparks.extend(spawn_sparks(event, self.tile_size, self.config.spark_burst, self.streams["effects"]))
        self.particles.update(ctx.delta)
        for spark in self.sparks:
            spark.update(ctx.delta)
        self.sparks = [s for s in self.sparks if s.is_alive()]

    def _log_step(self, ctx: FrameContext) -> None:
        hunter = self.hunter
        eaten = sum(1 for p in self.prey if p.eaten)
        ctx.frame_data = FrameData(
            frame=ctx.frame,
            elapsed=self.elapsed,
            delta=ctx.delta,
            hunter_cell=(hunter.current.row, hunter.current.col),
            hunter_target=(hunter.target.row, hunter.target.col),
            hunter_pos=hunter.position,
            hunter_direction=hunter.direction.name,
            hunter_progress=hunter.progress,
            prey_active=len(self.prey) - eaten,
            prey_eaten=eaten,
            captures=len(ctx.captures),
            captures_total=self.captures_total,
            respawns=ctx.respawns,
            occupied_cells=len(ctx.occupied),
            sparks=len(self.sparks),
        )

    # -- host surface ---------------------------------------------------

    def update(self, delta: float) -> FrameData:
        """Run one frame; ``delta`` is clamped to ``[0, max_delta]``.

        A non-finite delta raises ConfigError before any state changes.
        """
        delta = float(delta)
        if not math.isfinite(delta):
            raise ConfigError(f"Frame delta must be finite, got {delta}")
        delta = min(max(delta, 0.0), self.config.max_delta)
        self.frame += 1
        ctx = FrameContext(frame=self.frame, delta=delta)
        self.pipeline.run(ctx)
        if ctx.frame_data is None:
            raise RuntimeError("Pipeline failed to produce FrameData")
        return ctx.frame_data

    def start(self, now: float = 0.0) -> bool:
        """Begin accepting frames; returns False if already running."""
        if self.running:
            return False
        self.running = True
        self.last_time = now
        return True

    def stop(self) -> None:
        self.running = False

    def tick(self, now: float) -> Optional[FrameData]:
        """Advance using the time since the previous tick; no-op when stopped."""
        if not self.running:
            return None
        frame = self.update(now - self.last_time)
        self.last_time = now
        return frame

    def run_loop(
        self,
        next_frame_time: Callable[[], float],
        on_frame: Optional[Callable[[FrameData], None]] = None,
        *,
        max_frames: Optional[int] = None,
    ) -> int:
        """Drive frames until stopped. ``next_frame_time`` blocks until the next frame is due."""
        frames = 0
        while self.running:
            if max_frames is not None and frames >= max_frames:
                break
            frame = self.tick(next_frame_time())
            if frame is None:
                break
            frames += 1
            if on_frame is not None:
                on_frame(frame)
        return frames

    def run(self, frames: int, *, frame_dt: float = 1.0 / 60.0) -> List[FrameData]:
        """Execute N fixed-size frames and return the FrameData stream."""
        return [self.update(frame_dt) for _ in range(frames)]

    def resize(self, width: float, height: float) -> float:
        """Rescale tiles to the viewport; maze topology and cells are untouched."""
        if not (math.isfinite(width) and math.isfinite(height)) or width <= 0 or height <= 0:
            raise ConfigError(f"Viewport must be positive, got {width}x{height}")
        self.width = float(width)
        self.height = float(height)
        self.tile_size = min(self.width / self.maze.cols, self.height / self.maze.rows)
        self.hunter.set_tile_size(self.tile_size)
        for prey in self.prey:
            prey.set_tile_size(self.tile_size)
        self.particles.set_bounds(self.width, self.height)
        self.sparks = []
        return self.tile_size

    def drain_events(self) -> List[CaptureEvent]:
        """Hand over pending capture events; each is delivered once."""
        events = list(self._events)
        self._events.clear()
        return events

    def snapshot(self) -> Snapshot:
        hunter = self.hunter
        return Snapshot(
            frame=self.frame,
            elapsed=self.elapsed,
            tile_size=self.tile_size,
            width=self.width,
            height=self.height,
            maze=self.maze,
            hunter=HunterView(
                position=hunter.position,
                angle=hunter.direction.angle,
                highlight=hunter.highlight,
                munch_burst=hunter.munch_burst,
                mouth_timer=hunter.mouth_timer,
                eye_pulse=hunter.eye_pulse,
                trail=tuple((s.x, s.y, s.life) for s in hunter.trail),
            ),
            prey=tuple(PreyView(position=p.position, eaten=p.eaten, float_phase=p.float_phase) for p in self.prey),
            sparks=tuple(replace(s) for s in self.sparks),
            particles=tuple(replace(p) for p in self.particles.particles),
            events=tuple(self.drain_events()),
        )


__all__ = ["Engine", "FrameContext", "HunterView", "PreyView", "Snapshot"]
