from pathlib import Path
from typing import Dict

import pandas as pd

from metrics.logger import read_frames


def load_frames(run_dir: Path) -> pd.DataFrame:
    """Loads frames.jsonl from a runner output directory into a DataFrame."""
    frame_path = Path(run_dir) / "frames.jsonl"
    if not frame_path.exists():
        return pd.DataFrame()
    return pd.DataFrame(list(read_frames(frame_path)))


def calculate_capture_stats(frames_df: pd.DataFrame) -> Dict[str, float]:
    """Calculates capture totals and rates over the run."""
    if frames_df.empty or "captures" not in frames_df.columns:
        return {}

    duration = float(frames_df["elapsed"].iloc[-1])
    total = int(frames_df["captures"].sum())
    capture_frames = frames_df[frames_df["captures"] > 0]
    return {
        "captures": total,
        "capture_frames": len(capture_frames),
        "max_per_frame": int(frames_df["captures"].max()),
        "duration_s": duration,
        "captures_per_min": (total / duration) * 60.0 if duration > 0 else 0.0,
        "respawns": int(frames_df["respawns"].sum()),
    }


def calculate_prey_stats(frames_df: pd.DataFrame) -> Dict[str, float]:
    """Calculates how many prey were on the board over the run."""
    if frames_df.empty or "prey_active" not in frames_df.columns:
        return {}

    return {
        "mean_active": frames_df["prey_active"].mean(),
        "min_active": frames_df["prey_active"].min(),
        "max_active": frames_df["prey_active"].max(),
        "mean_occupied_cells": frames_df["occupied_cells"].mean(),
    }


def captures_per_second(frames_df: pd.DataFrame) -> pd.Series:
    """Bins captures into whole seconds of simulation time."""
    if frames_df.empty or "captures" not in frames_df.columns:
        return pd.Series(dtype=float)

    seconds = frames_df["elapsed"].astype(float).floordiv(1.0).astype(int)
    return frames_df.groupby(seconds)["captures"].sum()
