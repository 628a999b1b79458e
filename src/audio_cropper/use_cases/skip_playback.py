from audio_cropper.domain.crop_session import CropSession


class SkipPlayback:
    """Use case for moving the playhead by the engine's skip length."""

    def __init__(self, session: CropSession):
        self.session = session

    def execute(self, forward: bool = True) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        if forward:
            engine.skip_forward()
        else:
            engine.skip_backward()
        return True
