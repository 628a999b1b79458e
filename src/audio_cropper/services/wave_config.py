from dataclasses import dataclass


@dataclass(frozen=True)
class WaveConfig:
    """Drawing and transport options handed to the waveform engine."""
    # Draws the waveform in bar mode when > 0.
    bar_width: int = 2
    # Spacing between bars, in pixels.
    bar_gap: int = 2
    # Width of the playhead line; 0 hides it.
    cursor_width: int = 0
    # Waveform color after the playhead.
    wave_color: str = "#525353"
    # Waveform color behind the playhead. Same as wave_color disables it.
    progress_color: str = "#232526"
    # Seconds moved by skip_forward() / skip_backward().
    skip_length: float = 5.0


@dataclass(frozen=True)
class CursorConfig:
    """Hover cursor drawn over the waveform by the cursor plugin."""
    color: str = "#232526"
    width: int = 1
    opacity: float = 0.6
    show_time: bool = True


DEFAULT_WAVE_CONFIG = WaveConfig()
DEFAULT_CURSOR_CONFIG = CursorConfig()
