import argparse
import json
from pathlib import Path

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402

from analysis.metrics import (  # noqa: E402
    calculate_capture_stats,
    calculate_prey_stats,
    captures_per_second,
    load_frames,
)


def generate_report(run_dir: Path, report_dir: Path) -> Path:
    """
    Generates a markdown report with plots from a runner output directory.
    """
    report_dir.mkdir(parents=True, exist_ok=True)

    frames_df = load_frames(run_dir)
    summary_path = run_dir / "summary.json"
    summary = json.loads(summary_path.read_text()) if summary_path.exists() else {}

    report_parts = ["# Simulation Report\n"]

    # --- Metadata ---
    report_parts.append("## Run Metadata\n")
    metadata = {
        "Run Directory": f"`{run_dir}`",
        "Seed": summary.get("seed", ""),
        "Maze": f"{summary.get('rows', '?')}x{summary.get('cols', '?')}",
        "Open Cells": summary.get("open_cells", ""),
        "Frames": len(frames_df),
        "Run Hash": summary.get("run_hash", ""),
    }
    report_parts.append(pd.DataFrame([metadata]).to_markdown(index=False))
    report_parts.append("\n")

    # --- Captures ---
    report_parts.append("## Captures\n")
    capture_stats = calculate_capture_stats(frames_df)
    if capture_stats:
        report_parts.append(pd.DataFrame([capture_stats]).to_markdown(index=False))

        plt.figure()
        plt.plot(frames_df["elapsed"], frames_df["captures_total"])
        plt.title("Cumulative Captures")
        plt.xlabel("Elapsed (s)")
        plt.ylabel("Captures")
        plt.savefig(report_dir / "captures.png")
        plt.close()
        report_parts.append("\n![Cumulative Captures](captures.png)\n")

        per_second = captures_per_second(frames_df)
        if not per_second.empty:
            report_parts.append("### Captures per Second\n")
            report_parts.append(per_second.describe().to_frame("captures").to_markdown())
            report_parts.append("\n")
    else:
        report_parts.append("No capture data found.\n")

    # --- Prey ---
    report_parts.append("## Active Prey\n")
    prey_stats = calculate_prey_stats(frames_df)
    if prey_stats:
        report_parts.append(pd.DataFrame([prey_stats]).to_markdown(index=False))

        plt.figure()
        plt.plot(frames_df["elapsed"], frames_df["prey_active"])
        plt.title("Active Prey Over Time")
        plt.xlabel("Elapsed (s)")
        plt.ylabel("Active prey")
        plt.savefig(report_dir / "prey_active.png")
        plt.close()
        report_parts.append("\n![Active Prey](prey_active.png)\n")
    else:
        report_parts.append("No prey data found.\n")

    report_path = report_dir / "report.md"
    report_path.write_text("\n".join(report_parts))
    print(f"Report saved to {report_path}")
    return report_path


def main():
    parser = argparse.ArgumentParser(description="Generate a report from a runner output directory.")
    parser.add_argument("--run-dir", type=Path, required=True, help="Directory with frames.jsonl and summary.json.")
    parser.add_argument("--report-dir", type=Path, default=Path("analysis/report"), help="Directory to save the report and plots.")
    args = parser.parse_args()

    generate_report(args.run_dir, args.report_dir)


if __name__ == "__main__":
    main()
