from typing import Callable

from audio_cropper.domain.crop_session import CropSession

NOT_IMPLEMENTED_NOTICE = "Not yet implemented :("


class CutRegion:
    """
    Use case for cutting the track down to the selected region.
    Trimming is not available yet; the caller is told so instead.
    """

    def __init__(self, session: CropSession, notify: Callable[[str], None]):
        self.session = session
        self.notify = notify

    def execute(self) -> bool:
        self.notify(NOT_IMPLEMENTED_NOTICE)
        return False
