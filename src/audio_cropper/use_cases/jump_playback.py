from audio_cropper.domain.crop_session import CropSession

# Matches the engine's default skip length; the jump lands one skip before
# the end and then performs that skip.
JUMP_END_LEAD = 5.0


class JumpPlayback:
    """Use case for the jump-to-start and jump-to-end buttons."""

    def __init__(self, session: CropSession):
        self.session = session

    def execute(self, to_end: bool = True) -> bool:
        engine = self.session.engine
        if engine is None:
            return False

        if to_end:
            duration = engine.get_duration()
            current = engine.get_current_time()
            engine.skip(duration - current - JUMP_END_LEAD)
            engine.pause()
            engine.skip_forward()
            self.session.is_playing = False
        else:
            engine.stop()
            # Stopping rewinds; only keep playing if we already were.
            if self.session.is_playing:
                engine.play()
        return True
