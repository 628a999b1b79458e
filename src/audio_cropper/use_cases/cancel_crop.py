from audio_cropper.domain.crop_session import CropSession
from audio_cropper.use_cases.reconcile_region import recreate_region


class CancelCrop:
    """Use case for restoring the region selected when the track loaded."""

    def __init__(self, session: CropSession):
        self.session = session

    def execute(self) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        recreate_region(engine, self.session.original_cut_start, self.session.original_cut_end)
        engine.stop()
        self.session.cancelled()
        return True
