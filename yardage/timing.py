"""Lightweight timing utilities driven by explicit ticks."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class Stopwatch:
    """Accumulates elapsed milliseconds when explicitly advanced."""

    elapsed_ms: float = 0.0

    def tick(self, dt_ms: float) -> float:
        if dt_ms < 0:
            raise ValueError("dt_ms must be non-negative")
        self.elapsed_ms += dt_ms
        return self.elapsed_ms

    def reset(self) -> None:
        self.elapsed_ms = 0.0
