from audio_cropper.domain.crop_session import CropSession


class TogglePlayback:
    """Use case for the play/pause button."""

    def __init__(self, session: CropSession):
        self.session = session

    def execute(self) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        if self.session.is_playing:
            engine.pause()
        else:
            engine.play()

        self.session.is_playing = not self.session.is_playing
        return True
