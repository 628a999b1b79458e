import logging

from audio_cropper.domain.crop_session import CropSession

logger = logging.getLogger(__name__)


class ReleaseTrack:
    """Use case for tearing down the engine of the current track."""

    def __init__(self, session: CropSession):
        self.session = session

    def execute(self) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        engine.destroy()
        self.session.released()
        logger.info("Track released")
        return True
