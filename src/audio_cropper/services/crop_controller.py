from __future__ import annotations

import logging
from typing import Any, Callable

from audio_cropper.domain.crop_session import CropSession, SessionSnapshot
from audio_cropper.services.waveform_engine import (
    REGION_CREATED,
    REGION_UPDATE_END,
    REGION_UPDATED,
    WaveformEngine,
)
from audio_cropper.use_cases.cancel_crop import CancelCrop
from audio_cropper.use_cases.cut_region import CutRegion
from audio_cropper.use_cases.jump_playback import JumpPlayback
from audio_cropper.use_cases.load_track import LoadTrack
from audio_cropper.use_cases.reconcile_region import ReconcileRegion
from audio_cropper.use_cases.release_track import ReleaseTrack
from audio_cropper.use_cases.skip_playback import SkipPlayback
from audio_cropper.use_cases.toggle_playback import TogglePlayback

logger = logging.getLogger(__name__)


def _log_notice(message: str) -> None:
    logger.warning(message)


class CropController:
    """
    Region editor and transport for a single track.

    Owns the session state and the engine handle. UI intents and engine
    events both end in a snapshot being pushed to subscribers, which is
    all the UI needs to redraw. Use as a context manager to guarantee the
    engine is released:

        with CropController(notify=show_message) as controller:
            controller.load(audio_bytes, surface=waveform)
            ...
    """

    def __init__(
        self,
        engine_factory: Callable[..., Any] = WaveformEngine.create,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self.session = CropSession()
        self._subscribers: list[Callable[[SessionSnapshot], None]] = []

        self._reconcile = ReconcileRegion(self.session)
        self._load_track = LoadTrack(
            self.session,
            event_handlers={
                REGION_CREATED: self._on_region_created,
                REGION_UPDATED: self._on_region_updated,
                REGION_UPDATE_END: self._on_region_update_end,
            },
            engine_factory=engine_factory,
            on_ready=self._publish,
        )
        self._release_track = ReleaseTrack(self.session)
        self._toggle_playback = TogglePlayback(self.session)
        self._skip_playback = SkipPlayback(self.session)
        self._jump_playback = JumpPlayback(self.session)
        self._cancel_crop = CancelCrop(self.session)
        self._cut_region = CutRegion(self.session, notify or _log_notice)

    def __enter__(self) -> CropController:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # ===== Subscriptions =====

    def subscribe(self, callback: Callable[[SessionSnapshot], None]) -> None:
        self._subscribers.append(callback)

    def unsubscribe(self, callback: Callable[[SessionSnapshot], None]) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def snapshot(self) -> SessionSnapshot:
        return self.session.snapshot()

    def _publish(self) -> None:
        snapshot = self.session.snapshot()
        for callback in list(self._subscribers):
            callback(snapshot)

    # ===== Engine life cycle =====

    @property
    def engine(self):
        return self.session.engine

    def load(self, audio_bytes: bytes, surface: Any = None):
        """Replace the current track; the previous engine is released first."""
        self._release_track.execute()
        self.session.reset()
        self._publish()
        return self._load_track.execute(audio_bytes, surface)

    def release(self) -> None:
        if self._release_track.execute():
            self._publish()

    def refresh_progress(self) -> None:
        engine = self.session.engine
        if engine is None:
            return
        engine.update_progress()

    # ===== Engine events =====

    def _on_region_created(self, event) -> None:
        self._reconcile.on_region_created(event)

    def _on_region_updated(self, event) -> None:
        if self._reconcile.on_region_updated(event):
            self._publish()

    def _on_region_update_end(self, event) -> None:
        self._reconcile.on_region_update_end(event)
        self._publish()

    # ===== UI intents =====

    def _run(self, name: str, use_case, *args) -> None:
        if use_case.execute(*args):
            self._publish()
        else:
            logger.debug("%s ignored", name)

    def toggle_play(self) -> None:
        self._run("toggle_play", self._toggle_playback)

    def skip(self, forward: bool = True) -> None:
        self._run("skip", self._skip_playback, forward)

    def jump(self, to_end: bool = True) -> None:
        self._run("jump", self._jump_playback, to_end)

    def cancel(self) -> None:
        self._run("cancel", self._cancel_crop)

    def cut(self) -> None:
        self._cut_region.execute()
