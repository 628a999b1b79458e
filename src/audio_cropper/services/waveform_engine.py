from __future__ import annotations

import io
import logging
import time
import wave
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np

from audio_cropper.domain.region import REGION_COLOR, Region, format_region_title
from audio_cropper.services.wave_config import (
    DEFAULT_CURSOR_CONFIG,
    DEFAULT_WAVE_CONFIG,
    CursorConfig,
    WaveConfig,
)

logger = logging.getLogger(__name__)

READY = "ready"
REGION_CREATED = "region-created"
REGION_UPDATED = "region-updated"
REGION_UPDATE_END = "region-update-end"
EVENTS = (READY, REGION_CREATED, REGION_UPDATED, REGION_UPDATE_END)

CURSOR_PLUGIN = "cursor"
REGIONS_PLUGIN = "regions"


class EngineError(Exception):
    """Base class for waveform engine failures."""


class AudioDecodeError(EngineError, ValueError):
    """The audio bytes could not be decoded."""


class EngineDestroyedError(EngineError, RuntimeError):
    """The engine was used after destroy()."""


@dataclass
class RegionEvent:
    region: Region
    start: float
    end: float


def decode_wav_bytes(audio_bytes: bytes) -> tuple[np.ndarray, int]:
    """Decode PCM WAV bytes into a mono float32 signal in [-1, 1]."""
    try:
        with wave.open(io.BytesIO(audio_bytes), "rb") as wav_file:
            channels = wav_file.getnchannels()
            sample_width = wav_file.getsampwidth()
            sample_rate = wav_file.getframerate()
            frame_count = wav_file.getnframes()
            frames = wav_file.readframes(frame_count)
    except (wave.Error, EOFError) as exc:
        raise AudioDecodeError(f"Not a readable WAV stream: {exc}") from exc

    if sample_rate <= 0:
        raise AudioDecodeError(f"Invalid sample rate: {sample_rate}")
    if channels <= 0:
        raise AudioDecodeError(f"Invalid channel count: {channels}")

    frame_size = sample_width * channels
    if len(frames) % frame_size:
        raise AudioDecodeError(
            f"Truncated WAV data: {len(frames)} bytes is not a multiple of the {frame_size}-byte frame"
        )
    if not frames:
        raise AudioDecodeError("WAV stream holds no audio frames")

    if sample_width == 1:
        data = np.frombuffer(frames, dtype=np.uint8).astype(np.float32)
        data = (data - 128.0) / 128.0
    elif sample_width == 2:
        data = np.frombuffer(frames, dtype=np.int16).astype(np.float32) / 32768.0
    elif sample_width == 3:
        raw = np.frombuffer(frames, dtype=np.uint8).reshape(-1, 3)
        ints = (
            raw[:, 0].astype(np.int32)
            | (raw[:, 1].astype(np.int32) << 8)
            | (raw[:, 2].astype(np.int32) << 16)
        )
        sign_bit = 1 << 23
        ints = (ints ^ sign_bit) - sign_bit
        data = ints.astype(np.float32) / float(1 << 23)
    elif sample_width == 4:
        data = np.frombuffer(frames, dtype=np.int32).astype(np.float32) / 2147483648.0
    else:
        raise AudioDecodeError(f"Unsupported WAV sample width: {sample_width} bytes")

    if channels > 1:
        data = data.reshape(-1, channels).mean(axis=1)

    return np.clip(data, -1.0, 1.0).astype(np.float32), sample_rate


class WaveformEngine:
    """
    Loads a track, draws it on a surface and plays it back.

    Holds any number of regions and reports their life cycle through
    named events ("ready", "region-created", "region-updated",
    "region-update-end"). The surface is optional: without one the engine
    still decodes, keeps regions and plays, which is what headless callers
    and tests rely on.
    """

    def __init__(
        self,
        surface: Any = None,
        config: WaveConfig | None = None,
        cursor_config: CursorConfig | None = None,
        plugins: tuple[str, ...] = (CURSOR_PLUGIN, REGIONS_PLUGIN),
        output: Any = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if output is None:
            from audio_cropper.services.audio_output import AudioOutput
            output = AudioOutput()

        self.config = config or DEFAULT_WAVE_CONFIG
        self.cursor_config = cursor_config or DEFAULT_CURSOR_CONFIG
        self.plugins = tuple(plugins)
        self._surface = surface
        self._output = output
        self._clock = clock
        self._handlers: dict[str, list[Callable]] = {name: [] for name in EVENTS}
        self._regions: list[Region] = []
        self._data = np.array([], dtype=np.float32)
        self._sample_rate = 0
        self._position = 0.0
        self._playing = False
        self._play_started_at = 0.0
        self._play_end = 0.0
        self._destroyed = False

        if self._surface is not None:
            self._attach_surface()

    @classmethod
    def create(cls, surface: Any = None, **options) -> WaveformEngine:
        return cls(surface=surface, **options)

    # ===== Events =====

    def on(self, event: str, callback: Callable) -> None:
        self._check_alive()
        if event not in self._handlers:
            raise EngineError(f"Unknown engine event: {event}")
        self._handlers[event].append(callback)

    def once(self, event: str, callback: Callable) -> None:
        def handler(*args):
            self.un(event, handler)
            callback(*args)

        self.on(event, handler)

    def un(self, event: str, callback: Callable) -> None:
        handlers = self._handlers.get(event, [])
        if callback in handlers:
            handlers.remove(callback)

    def _fire(self, event: str, *args) -> None:
        for handler in list(self._handlers[event]):
            handler(*args)

    # ===== Loading =====

    def load(self, audio_bytes: bytes) -> None:
        self._check_alive()
        data, sample_rate = decode_wav_bytes(audio_bytes)
        self._output.stop()
        self._data = data
        self._sample_rate = sample_rate
        self._position = 0.0
        self._playing = False
        self._regions = []
        logger.info("Decoded %d samples at %d Hz", len(data), sample_rate)

        if self._surface is not None:
            self._surface.set_audio_data(self._data)
            self._redraw_regions()
            self._redraw_progress()

        self._fire(READY)

    def get_duration(self) -> float:
        if self._sample_rate == 0:
            return 0.0
        return len(self._data) / self._sample_rate

    # ===== Regions =====

    @property
    def regions(self) -> list[Region]:
        return list(self._regions)

    def add_region(self, start: float, end: float, color: str = REGION_COLOR) -> Region:
        self._check_alive()
        if REGIONS_PLUGIN not in self.plugins:
            raise EngineError("The regions plugin is not enabled")

        region = Region(
            start=float(start),
            end=float(end),
            color=color,
            title=format_region_title(end - start),
        )
        self._regions.append(region)
        self._redraw_regions()
        self._fire(REGION_CREATED, RegionEvent(region, region.start, region.end))
        return region

    def clear_regions(self) -> None:
        self._check_alive()
        self._regions = []
        self._redraw_regions()

    def update_region_drag(self, start: float, end: float) -> None:
        """Move the active region while one of its handles is dragged."""
        region = self._active_region()
        if region is None:
            return
        self._move_region(region, start, end)
        self._fire(REGION_UPDATED, RegionEvent(region, region.start, region.end))

    def finish_region_drag(self, start: float, end: float) -> None:
        """Report the final bounds of a drag once the handle is released."""
        region = self._active_region()
        if region is None:
            return
        self._move_region(region, start, end)
        self._fire(REGION_UPDATE_END, RegionEvent(region, region.start, region.end))

    def _active_region(self) -> Region | None:
        self._check_alive()
        if not self._regions:
            return None
        return self._regions[-1]

    def _move_region(self, region: Region, start: float, end: float) -> None:
        duration = self.get_duration()
        region.start = float(np.clip(start, 0.0, duration))
        region.end = float(np.clip(end, 0.0, duration))
        region.title = format_region_title(region.duration)
        self._redraw_regions()

    # ===== Transport =====

    def is_playing(self) -> bool:
        self._settle()
        return self._playing

    def get_current_time(self) -> float:
        self._settle()
        if not self._playing:
            return self._position
        elapsed = self._clock() - self._play_started_at
        return min(self._position + elapsed, self._play_end)

    def play(self, start: float | None = None, end: float | None = None) -> None:
        self._check_alive()
        duration = self.get_duration()
        if duration <= 0:
            return

        if start is None:
            start = self.get_current_time()
            if start >= duration:
                start = 0.0
        start = float(np.clip(start, 0.0, duration))
        end = duration if end is None else float(np.clip(end, start, duration))

        first = int(start * self._sample_rate)
        last = int(end * self._sample_rate)
        self._output.stop()
        self._output.play(self._data[first:last], self._sample_rate)

        self._position = start
        self._play_end = end
        self._play_started_at = self._clock()
        self._playing = True
        self._redraw_progress()

    def pause(self) -> None:
        self._check_alive()
        self._position = self.get_current_time()
        self._playing = False
        self._output.stop()
        self._redraw_progress()

    def stop(self) -> None:
        self._check_alive()
        self._output.stop()
        self._playing = False
        self._position = 0.0
        self._redraw_progress()

    def skip(self, offset: float) -> None:
        self._check_alive()
        target = float(np.clip(self.get_current_time() + offset, 0.0, self.get_duration()))
        if self._playing:
            self.play(target)
        else:
            self._position = target
            self._redraw_progress()

    def skip_forward(self) -> None:
        self.skip(self.config.skip_length)

    def skip_backward(self) -> None:
        self.skip(-self.config.skip_length)

    def _settle(self) -> None:
        if not self._playing:
            return
        if self._position + (self._clock() - self._play_started_at) >= self._play_end:
            self._position = self._play_end
            self._playing = False

    # ===== Surface =====

    def update_progress(self) -> None:
        """Push the current playhead to the surface; called from a UI timer."""
        if self._destroyed:
            return
        self._redraw_progress()

    def _attach_surface(self) -> None:
        self._surface.set_wave_config(self.config)
        if CURSOR_PLUGIN in self.plugins:
            self._surface.set_cursor_config(self.cursor_config)
        if REGIONS_PLUGIN in self.plugins:
            self._surface.regionDragged.connect(self._on_surface_region_dragged)
            self._surface.regionReleased.connect(self._on_surface_region_released)

    def _detach_surface(self) -> None:
        if REGIONS_PLUGIN in self.plugins:
            self._surface.regionDragged.disconnect(self._on_surface_region_dragged)
            self._surface.regionReleased.disconnect(self._on_surface_region_released)
        self._surface.clear()

    def _on_surface_region_dragged(self, start_ratio: float, end_ratio: float) -> None:
        bounds = self._bounds_from_ratios(start_ratio, end_ratio)
        if bounds is not None:
            self.update_region_drag(*bounds)

    def _on_surface_region_released(self, start_ratio: float, end_ratio: float) -> None:
        bounds = self._bounds_from_ratios(start_ratio, end_ratio)
        if bounds is not None:
            self.finish_region_drag(*bounds)

    def _bounds_from_ratios(self, start_ratio: float, end_ratio: float) -> tuple[float, float] | None:
        """
        Convert surface ratios back to seconds. An edge whose ratio is the one
        the surface was given keeps its exact seconds value, since
        ratio * duration does not always give the original float back.
        """
        region = self._active_region()
        if region is None:
            return None
        duration = self.get_duration()
        if duration <= 0:
            return None

        start = region.start if start_ratio == region.start / duration else start_ratio * duration
        end = region.end if end_ratio == region.end / duration else end_ratio * duration
        return start, end

    def _redraw_regions(self) -> None:
        if self._surface is None:
            return
        # The surface keeps the Region objects so title edits show up on hover.
        self._surface.set_regions(list(self._regions), self.get_duration())

    def _redraw_progress(self) -> None:
        if self._surface is None:
            return
        duration = self.get_duration()
        if duration <= 0:
            self._surface.set_playhead_position(None)
            return
        self._surface.set_playhead_position(self.get_current_time() / duration)

    # ===== Teardown =====

    def destroy(self) -> None:
        if self._destroyed:
            return
        self._output.stop()
        self._playing = False
        if self._surface is not None:
            self._detach_surface()
            self._surface = None
        for handlers in self._handlers.values():
            handlers.clear()
        self._regions = []
        self._data = np.array([], dtype=np.float32)
        self._destroyed = True
        logger.debug("Waveform engine destroyed")

    def _check_alive(self) -> None:
        if self._destroyed:
            raise EngineDestroyedError("The waveform engine was destroyed")
