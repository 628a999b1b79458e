from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from audio_cropper.domain.region import default_region_bounds, regions_collide


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of the session the UI renders from."""
    is_playing: bool
    cut_start: float
    cut_end: float
    was_region_changed: bool
    is_loading: bool


@dataclass
class CropSession:
    """
    Mutable state of one loaded track.

    The engine handle doubles as the loading flag: while it is None the
    track is still being decoded and every transport intent is ignored.
    Bounds stay NaN until the engine reports readiness.
    """
    is_playing: bool = False
    cut_start: float = math.nan
    cut_end: float = math.nan
    original_cut_start: float = math.nan
    original_cut_end: float = math.nan
    was_region_changed: bool = False
    engine: Any = None

    @property
    def is_loading(self) -> bool:
        return self.engine is None

    def ready(self, duration: float, engine: Any) -> tuple[float, float]:
        """Apply the default region and publish the engine handle."""
        start, end = default_region_bounds(duration)
        self.cut_start = start
        self.cut_end = end
        self.original_cut_start = start
        self.original_cut_end = end
        self.engine = engine
        return start, end

    def region_updated(self, start: float, end: float) -> bool:
        """
        Check an in-progress drag. Returns True when the handles collided
        and the region has to be recreated at the committed bounds.
        Bounds are only committed once the drag ends.
        """
        return regions_collide(start, end)

    def region_committed(self, start: float, end: float) -> float:
        """
        Commit the edges that moved and return the playback anchor.

        The end edge is checked first and the start edge second, so when
        both moved in one gesture playback resumes from the start edge.
        An anchor of 0 counts as "nothing moved", which also covers a start
        edge dragged exactly to 0.
        """
        anchor = 0.0

        if end != self.cut_end:
            anchor = end
            self.cut_end = end

        if start != self.cut_start:
            anchor = start
            self.cut_start = start

        self.is_playing = True
        self.was_region_changed = anchor != 0
        return anchor

    def cancelled(self) -> None:
        self.cut_start = self.original_cut_start
        self.cut_end = self.original_cut_end
        self.is_playing = False
        self.was_region_changed = False

    def released(self) -> None:
        self.engine = None
        self.is_playing = False

    def reset(self) -> None:
        """Forget everything about the current track, original bounds included."""
        self.is_playing = False
        self.cut_start = math.nan
        self.cut_end = math.nan
        self.original_cut_start = math.nan
        self.original_cut_end = math.nan
        self.was_region_changed = False
        self.engine = None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            is_playing=self.is_playing,
            cut_start=self.cut_start,
            cut_end=self.cut_end,
            was_region_changed=self.was_region_changed,
            is_loading=self.is_loading,
        )
