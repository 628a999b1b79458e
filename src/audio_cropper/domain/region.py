from __future__ import annotations

import math
from dataclasses import dataclass

REGION_COLOR = "rgba(0, 123, 255, 0.48)"

# Tracks longer than this get a margin trimmed from both ends by default.
LONG_TRACK_THRESHOLD = 40.0
DEFAULT_MARGIN = 20.0

# Handles closer than this (in seconds) are considered to have crossed.
COLLISION_TOLERANCE = 0.25


@dataclass
class Region:
    """
    Draggable time range drawn over the waveform.
    Regions are owned by the rendering engine; the editor only ever keeps one.
    """
    start: float
    end: float
    color: str = REGION_COLOR
    title: str = ""

    @property
    def duration(self) -> float:
        return self.end - self.start


def default_region_bounds(duration: float) -> tuple[float, float]:
    """
    Return the region selected right after a track finished loading.

    Long tracks keep a fixed margin on each side, short tracks are
    selected as a whole.
    """
    if not math.isfinite(duration) or duration <= 0:
        raise ValueError(f"Invalid track duration: {duration}")

    if duration > LONG_TRACK_THRESHOLD:
        return DEFAULT_MARGIN, duration - DEFAULT_MARGIN
    return 0.0, float(duration)


def regions_collide(start: float, end: float, tolerance: float = COLLISION_TOLERANCE) -> bool:
    """True when the two handles were dragged onto or past each other."""
    return abs(start - end) <= tolerance


def format_region_title(seconds: float) -> str:
    """Format a duration the way the region hover label shows it (m:ss)."""
    total = max(0, int(round(seconds)))
    minutes, secs = divmod(total, 60)
    return f"{minutes}:{secs:02d}"
