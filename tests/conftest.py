import io
import wave
from collections import defaultdict

import numpy as np
import pytest

from audio_cropper.domain.region import Region
from audio_cropper.services.crop_controller import CropController
from audio_cropper.services.waveform_engine import (
    READY,
    REGION_CREATED,
    REGION_UPDATE_END,
    REGION_UPDATED,
    RegionEvent,
)


class FakeEngine:
    """In-memory stand-in for the waveform engine that records every call."""

    def __init__(self, duration: float = 60.0, **options):
        self.duration = duration
        self.options = options
        self.skip_length = 5.0
        self.calls: list[tuple] = []
        self.handlers = defaultdict(list)
        self.regions: list[Region] = []
        self.current_time = 0.0
        self.playing = False
        self.destroyed = False

    # ===== Events =====

    def on(self, event, callback):
        self.handlers[event].append(callback)

    def once(self, event, callback):
        def handler(*args):
            self.un(event, handler)
            callback(*args)

        self.on(event, handler)

    def un(self, event, callback):
        if callback in self.handlers[event]:
            self.handlers[event].remove(callback)

    def fire(self, event, *args):
        for handler in list(self.handlers[event]):
            handler(*args)

    # ===== Contract =====

    def load(self, audio_bytes):
        self.calls.append(("load", audio_bytes))
        self.fire(READY)

    def get_duration(self):
        return self.duration

    def get_current_time(self):
        return self.current_time

    def add_region(self, start, end, color):
        region = Region(start=start, end=end, color=color, title="0:20")
        self.regions.append(region)
        self.calls.append(("add_region", start, end))
        self.fire(REGION_CREATED, RegionEvent(region, start, end))
        return region

    def clear_regions(self):
        self.regions = []
        self.calls.append(("clear_regions",))

    def play(self, start=None, end=None):
        self.calls.append(("play", start, end))
        if start is not None:
            self.current_time = start
        self.playing = True

    def pause(self):
        self.calls.append(("pause",))
        self.playing = False

    def stop(self):
        self.calls.append(("stop",))
        self.playing = False
        self.current_time = 0.0

    def skip(self, offset):
        self.calls.append(("skip", offset))
        self._move(offset)

    def skip_forward(self):
        self.calls.append(("skip_forward",))
        self._move(self.skip_length)

    def skip_backward(self):
        self.calls.append(("skip_backward",))
        self._move(-self.skip_length)

    def update_progress(self):
        self.calls.append(("update_progress",))

    def destroy(self):
        self.calls.append(("destroy",))
        self.destroyed = True

    def _move(self, offset):
        self.current_time = min(max(self.current_time + offset, 0.0), self.duration)

    # ===== Simulated user drags =====

    def drag(self, start, end):
        region = self.regions[-1]
        region.start, region.end = start, end
        region.title = "0:05"
        self.fire(REGION_UPDATED, RegionEvent(region, start, end))

    def release(self, start, end):
        region = self.regions[-1]
        region.start, region.end = start, end
        self.fire(REGION_UPDATE_END, RegionEvent(region, start, end))

    def calls_named(self, name):
        return [call for call in self.calls if call[0] == name]


class FakeEngineFactory:
    def __init__(self, duration: float = 60.0):
        self.duration = duration
        self.engines: list[FakeEngine] = []

    def __call__(self, surface=None, **options):
        engine = FakeEngine(self.duration, surface=surface, **options)
        self.engines.append(engine)
        return engine

    @property
    def last(self) -> FakeEngine:
        return self.engines[-1]


class RecordingOutput:
    """Audio output that remembers what it was asked to play."""

    def __init__(self):
        self.played: list[tuple[np.ndarray, int]] = []
        self.stops = 0

    def play(self, data, sample_rate):
        self.played.append((np.asarray(data), sample_rate))

    def stop(self):
        self.stops += 1


class FakeClock:
    def __init__(self, now: float = 100.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeSignal:
    def __init__(self):
        self.slots = []

    def connect(self, slot):
        self.slots.append(slot)

    def disconnect(self, slot):
        self.slots.remove(slot)

    def emit(self, *args):
        for slot in list(self.slots):
            slot(*args)


class FakeSurface:
    """Drawing surface without Qt: keeps what it was told to draw, emits drags as ratios."""

    def __init__(self):
        self.regionDragged = FakeSignal()
        self.regionReleased = FakeSignal()
        self.audio = None
        self.regions = []
        self.duration = 0.0
        self.playhead = None
        self.wave_config = None
        self.cursor_config = None
        self.cleared = False

    def set_wave_config(self, config):
        self.wave_config = config

    def set_cursor_config(self, config):
        self.cursor_config = config

    def set_audio_data(self, data):
        self.audio = data

    def set_regions(self, regions, duration):
        self.regions = regions
        self.duration = duration

    def set_playhead_position(self, position):
        self.playhead = position

    def clear(self):
        self.cleared = True

    def ratios(self, region):
        return region.start / self.duration, region.end / self.duration

    def drag(self, start_ratio, end_ratio):
        self.regionDragged.emit(start_ratio, end_ratio)

    def release(self, start_ratio, end_ratio):
        self.regionReleased.emit(start_ratio, end_ratio)


def make_wav_bytes(
    duration_seconds: float,
    sample_rate: int = 1000,
    channels: int = 1,
    sample_width: int = 2,
) -> bytes:
    frames = int(duration_seconds * sample_rate)
    signal = 0.5 * np.sin(np.linspace(0, 2 * np.pi * 5, frames, dtype=np.float32))
    samples = np.repeat(signal[:, None], channels, axis=1).flatten()
    if sample_width == 1:
        pcm = ((samples * 127.0) + 128.0).astype(np.uint8).tobytes()
    else:
        pcm = (samples * 32767.0).astype(np.int16).tobytes()

    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wav_file:
        wav_file.setnchannels(channels)
        wav_file.setsampwidth(sample_width)
        wav_file.setframerate(sample_rate)
        wav_file.writeframes(pcm)
    return buffer.getvalue()


@pytest.fixture
def engine_factory():
    return FakeEngineFactory()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def controller(engine_factory, notices):
    return CropController(engine_factory=engine_factory, notify=notices.append)


@pytest.fixture
def loaded_controller(controller):
    controller.load(b"track")
    return controller


@pytest.fixture
def wav_bytes():
    return make_wav_bytes


@pytest.fixture
def output():
    return RecordingOutput()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def surface():
    return FakeSurface()
