import logging
from typing import Any, Callable

from audio_cropper.domain.crop_session import CropSession
from audio_cropper.domain.region import REGION_COLOR, default_region_bounds
from audio_cropper.services.wave_config import DEFAULT_CURSOR_CONFIG, DEFAULT_WAVE_CONFIG
from audio_cropper.services.waveform_engine import (
    CURSOR_PLUGIN,
    READY,
    REGIONS_PLUGIN,
    WaveformEngine,
)

logger = logging.getLogger(__name__)


class LoadTrack:
    """
    Use case for bringing a track from raw bytes to "ready with one region".

    The engine handle is only published on the session once the engine
    reports readiness; until then the session stays in its loading state.
    """

    def __init__(
        self,
        session: CropSession,
        event_handlers: dict[str, Callable] | None = None,
        engine_factory: Callable[..., Any] = WaveformEngine.create,
        on_ready: Callable[[], None] | None = None,
    ):
        self.session = session
        self.event_handlers = event_handlers or {}
        self.engine_factory = engine_factory
        self.on_ready = on_ready

    def execute(self, audio_bytes: bytes, surface: Any = None):
        engine = self.engine_factory(
            surface=surface,
            config=DEFAULT_WAVE_CONFIG,
            cursor_config=DEFAULT_CURSOR_CONFIG,
            plugins=(CURSOR_PLUGIN, REGIONS_PLUGIN),
        )
        engine.once(READY, lambda: self._handle_ready(engine))

        try:
            engine.load(audio_bytes)
        except Exception:
            engine.destroy()
            raise
        return engine

    def _handle_ready(self, engine) -> None:
        for event, handler in self.event_handlers.items():
            engine.on(event, handler)

        duration = engine.get_duration()
        start, end = default_region_bounds(duration)
        engine.add_region(start=start, end=end, color=REGION_COLOR)
        self.session.ready(duration, engine)
        logger.info("Track ready: %.2fs, region [%.2f, %.2f]", duration, start, end)

        if self.on_ready is not None:
            self.on_ready()
