import logging

from audio_cropper.domain.crop_session import CropSession
from audio_cropper.domain.region import REGION_COLOR

logger = logging.getLogger(__name__)


def recreate_region(engine, start: float, end: float):
    """Replace whatever regions the engine holds with a single one."""
    engine.clear_regions()
    return engine.add_region(start=start, end=end, color=REGION_COLOR)


class ReconcileRegion:
    """
    Keeps exactly one well-formed region while the user drags its handles.

    Drags are previewed by the engine as they happen and only committed to
    the session on release. A drag that brings both handles together is
    thrown away and the region is redrawn at the last committed bounds.
    """

    def __init__(self, session: CropSession):
        self.session = session

    def on_region_created(self, event) -> None:
        # Hide the duration label the engine puts on every region.
        event.region.title = ""

    def on_region_updated(self, event) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        event.region.title = ""

        if not self.session.region_updated(event.start, event.end):
            return False

        logger.debug(
            "Region handles collided at [%.3f, %.3f], restoring [%.3f, %.3f]",
            event.start,
            event.end,
            self.session.cut_start,
            self.session.cut_end,
        )
        region = recreate_region(engine, self.session.cut_start, self.session.cut_end)
        if self.session.is_playing:
            engine.play(region.start, region.end)
        return True

    def on_region_update_end(self, event) -> float | None:
        engine = self.session.engine
        if engine is None:
            return None

        event.region.title = ""

        anchor = self.session.region_committed(event.start, event.end)
        engine.play(anchor)
        return anchor
