"""Step order for one simulation frame."""

from __future__ import annotations

from typing import Any, Callable, List, Mapping, Sequence, Tuple

# Captures must land before occupancy is rebuilt, and occupancy before any respawn.
PIPELINE_ORDER: Tuple[str, ...] = (
    "clock",
    "hunter",
    "occupancy",
    "prey",
    "effects",
    "log",
)

Step = Callable[[Any], None]


class Pipeline:
    """Runs frame steps in order; every listed step needs exactly one handler."""

    def __init__(self, handlers: Mapping[str, Step], order: Sequence[str] = PIPELINE_ORDER) -> None:
        order = tuple(order)
        missing = [name for name in order if name not in handlers]
        unexpected = sorted(set(handlers) - set(order))
        if missing or unexpected or len(set(order)) != len(order):
            raise ValueError(
                f"Pipeline handlers do not match step order (missing={missing}, unexpected={unexpected})"
            )
        self.order = order
        self._steps: List[Tuple[str, Step]] = [(name, handlers[name]) for name in order]

    def run(self, context: Any) -> None:
        for _, handler in self._steps:
            handler(context)


__all__ = ["PIPELINE_ORDER", "Pipeline", "Step"]
