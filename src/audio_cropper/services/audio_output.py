import sounddevice as sd
import numpy as np


class AudioOutput:
    """Plays mono float32 buffers on the default output device."""

    def __init__(self):
        self._is_active = False

    def play(self, data: np.ndarray, sample_rate: int):
        if len(data) == 0:
            return
        sd.play(np.asarray(data, dtype="float32"), samplerate=sample_rate)
        self._is_active = True

    def stop(self):
        if not self._is_active:
            return
        sd.stop()
        self._is_active = False
