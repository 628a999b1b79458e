from __future__ import annotations

import re
import numpy as np
from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QColor, QPainter, QPen
from PySide6.QtWidgets import QWidget

from audio_cropper.services.wave_config import DEFAULT_WAVE_CONFIG, CursorConfig, WaveConfig

HANDLE_GRAB_PIXELS = 6

_RGBA_PATTERN = re.compile(
    r"rgba?\(\s*(\d+)\s*,\s*(\d+)\s*,\s*(\d+)\s*(?:,\s*([0-9.]+)\s*)?\)"
)


class WaveformWidget(QWidget):
    """
    Waveform surface for the waveform engine.

    Draws the signal in bar mode, the regions handed over by the engine and
    the playhead. Dragging a region handle (or the region body) is reported
    as normalized [0, 1] bounds; the engine turns them into seconds.
    """
    regionDragged = Signal(float, float)
    regionReleased = Signal(float, float)

    def __init__(self, parent: QWidget | None = None) -> None:
        super().__init__(parent)
        self._audio_data = np.array([], dtype=np.float32)
        self._duration = 0.0
        self._regions: list = []
        self._playhead_position: float | None = None
        self._wave_config = DEFAULT_WAVE_CONFIG
        self._cursor_config: CursorConfig | None = None
        self._hover_x: float | None = None
        self._drag_region = None
        self._drag_edge: str | None = None
        self._drag_origin = 0.0
        self._drag_bounds = (0.0, 0.0)
        self.setMouseTracking(True)
        self.setMinimumHeight(160)

    # ===== Engine-facing API =====

    def set_wave_config(self, config: WaveConfig) -> None:
        self._wave_config = config
        self.update()

    def set_cursor_config(self, config: CursorConfig | None) -> None:
        self._cursor_config = config
        self.update()

    def set_audio_data(self, data: np.ndarray | None) -> None:
        """Set waveform data and trigger repaint."""
        if data is None:
            self._audio_data = np.array([], dtype=np.float32)
        else:
            self._audio_data = self._normalize_to_mono(np.asarray(data, dtype=np.float32))
        self.update()

    def set_regions(self, regions: list, duration: float) -> None:
        self._regions = list(regions)
        self._duration = max(0.0, float(duration))
        if self._drag_region is not None and not any(r is self._drag_region for r in self._regions):
            # The dragged region was replaced; the rest of this gesture is ignored.
            self._end_drag()
        self.update()

    def set_playhead_position(self, position: float | None) -> None:
        """Set playhead location as normalized [0,1], or None to hide it."""
        if position is None:
            self._playhead_position = None
        else:
            self._playhead_position = float(np.clip(position, 0.0, 1.0))
        self.update()

    def clear(self) -> None:
        self._audio_data = np.array([], dtype=np.float32)
        self._regions = []
        self._duration = 0.0
        self._playhead_position = None
        self._end_drag()
        self.update()

    # ===== Geometry helpers =====

    def _position_to_normalized(self, x: float) -> float:
        width = max(1, self.rect().width() - 1)
        return float(np.clip(x / width, 0.0, 1.0))

    def _region_ratios(self, region) -> tuple[float, float]:
        if self._duration <= 0:
            return 0.0, 0.0
        return region.start / self._duration, region.end / self._duration

    @staticmethod
    def _normalize_to_mono(data: np.ndarray) -> np.ndarray:
        if data.ndim == 1:
            return data
        if data.ndim == 2:
            return data.mean(axis=1)
        return data.flatten()

    @staticmethod
    def build_peaks(data: np.ndarray, bins: int) -> np.ndarray:
        """Compress full signal into peak magnitudes for each horizontal bin."""
        if bins <= 0:
            return np.array([], dtype=np.float32)
        if data.size == 0:
            return np.zeros(bins, dtype=np.float32)

        clipped = np.clip(data.astype(np.float32), -1.0, 1.0)
        chunk_size = max(1, int(np.ceil(len(clipped) / bins)))

        peaks: list[float] = []
        for start in range(0, len(clipped), chunk_size):
            chunk = clipped[start : start + chunk_size]
            peaks.append(float(np.max(np.abs(chunk))))

        if len(peaks) < bins:
            peaks.extend([0.0] * (bins - len(peaks)))

        return np.asarray(peaks[:bins], dtype=np.float32)

    @staticmethod
    def bar_count(width: int, bar_width: int, bar_gap: int) -> int:
        """Number of bars that fit in the widget; line mode uses one per pixel."""
        if width <= 0:
            return 0
        if bar_width <= 0:
            return width
        return max(1, (width + bar_gap) // (bar_width + bar_gap))

    @staticmethod
    def parse_css_color(text: str) -> tuple[int, int, int, int]:
        """Parse '#rrggbb' or 'rgba(r, g, b, a)' into an RGBA tuple."""
        match = _RGBA_PATTERN.fullmatch(text.strip())
        if match:
            red, green, blue = (int(match.group(i)) for i in range(1, 4))
            alpha = match.group(4)
            alpha_value = 255 if alpha is None else int(round(float(alpha) * 255))
            return red, green, blue, int(np.clip(alpha_value, 0, 255))
        color = QColor(text)
        if not color.isValid():
            raise ValueError(f"Unsupported color: {text}")
        return color.red(), color.green(), color.blue(), color.alpha()

    @staticmethod
    def hit_test(
        x: float,
        start_x: float,
        end_x: float,
        grab_pixels: float = HANDLE_GRAB_PIXELS,
    ) -> str | None:
        """Tell which part of a region lies under x: 'start', 'end', 'body' or None."""
        if abs(x - start_x) < grab_pixels:
            return "start"
        if abs(x - end_x) < grab_pixels:
            return "end"
        if start_x < x < end_x:
            return "body"
        return None

    @staticmethod
    def drag_bounds(
        edge: str,
        bounds: tuple[float, float],
        origin: float,
        position: float,
    ) -> tuple[float, float]:
        """
        Bounds of a region after dragging `edge` from origin to position.
        A handle never passes the other one; it stops on top of it.
        """
        start, end = bounds
        if edge == "start":
            return min(position, end), end
        if edge == "end":
            return start, max(position, start)
        width = end - start
        new_start = float(np.clip(start + (position - origin), 0.0, 1.0 - width))
        return new_start, new_start + width

    # ===== Painting =====

    def paintEvent(self, event) -> None:  # noqa: N802 (Qt API)
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, False)

        rect = self.rect()
        painter.fillRect(rect, QColor("#F4F4F4"))

        width = max(1, rect.width())
        height = rect.height()
        mid_y = height / 2

        if self._audio_data.size == 0:
            return

        config = self._wave_config
        bars = self.bar_count(width, config.bar_width, config.bar_gap)
        peaks = self.build_peaks(self._audio_data, bars)
        step = width / max(1, bars)
        progress_x = None
        if self._playhead_position is not None:
            progress_x = self._playhead_position * (width - 1)

        max_amplitude = (height / 2) - 6
        wave_color = QColor(config.wave_color)
        progress_color = QColor(config.progress_color)
        for index, value in enumerate(peaks):
            x = int(index * step)
            half_line = max(1.0, max_amplitude * float(value))
            color = progress_color if progress_x is not None and x <= progress_x else wave_color
            bar_width = max(1, config.bar_width)
            painter.fillRect(x, int(mid_y - half_line), bar_width, int(2 * half_line), color)

        for region in self._regions:
            start, end = self._region_ratios(region)
            x1 = int(start * (width - 1))
            x2 = int(end * (width - 1))
            painter.fillRect(x1, 0, max(1, x2 - x1), height, QColor(*self.parse_css_color(region.color)))
            handle_pen = QPen(QColor("#007BFF"))
            handle_pen.setWidth(2)
            painter.setPen(handle_pen)
            painter.drawLine(x1, 0, x1, height)
            painter.drawLine(x2, 0, x2, height)

        if progress_x is not None and config.cursor_width > 0:
            playhead_pen = QPen(progress_color)
            playhead_pen.setWidth(config.cursor_width)
            painter.setPen(playhead_pen)
            painter.drawLine(int(progress_x), 0, int(progress_x), height)

        cursor = self._cursor_config
        if cursor is not None and self._hover_x is not None:
            cursor_color = QColor(cursor.color)
            cursor_color.setAlphaF(cursor.opacity)
            cursor_pen = QPen(cursor_color)
            cursor_pen.setWidth(cursor.width)
            painter.setPen(cursor_pen)
            hover_x = int(self._hover_x)
            painter.drawLine(hover_x, 0, hover_x, height)
            if cursor.show_time and self._duration > 0:
                seconds = self._position_to_normalized(self._hover_x) * self._duration
                minutes, secs = divmod(int(seconds), 60)
                painter.drawText(hover_x + 4, 14, f"{minutes}:{secs:02d}")

    # ===== Mouse =====

    def mousePressEvent(self, event) -> None:  # noqa: N802 (Qt API)
        if event.button() != Qt.LeftButton or not self._regions:
            return
        width = max(1, self.rect().width() - 1)
        x = event.position().x()
        region = self._regions[-1]
        start, end = self._region_ratios(region)
        edge = self.hit_test(x, start * width, end * width)
        if edge is None:
            return
        self._drag_region = region
        self._drag_edge = edge
        self._drag_origin = self._position_to_normalized(x)
        self._drag_bounds = (start, end)
        self.setCursor(Qt.SizeHorCursor if edge != "body" else Qt.ClosedHandCursor)

    def mouseMoveEvent(self, event) -> None:  # noqa: N802 (Qt API)
        x = event.position().x()
        self._hover_x = x
        if self._drag_edge is None:
            self._update_hover_tooltip(x)
            self.update()
            return
        position = self._position_to_normalized(x)
        start, end = self.drag_bounds(self._drag_edge, self._drag_bounds, self._drag_origin, position)
        self.regionDragged.emit(start, end)
        self.update()

    def mouseReleaseEvent(self, event) -> None:  # noqa: N802 (Qt API)
        if event.button() != Qt.LeftButton or self._drag_edge is None:
            return
        position = self._position_to_normalized(event.position().x())
        start, end = self.drag_bounds(self._drag_edge, self._drag_bounds, self._drag_origin, position)
        self._end_drag()
        self.regionReleased.emit(start, end)

    def leaveEvent(self, event) -> None:  # noqa: N802 (Qt API)
        self._hover_x = None
        self.update()

    def _update_hover_tooltip(self, x: float) -> None:
        width = max(1, self.rect().width() - 1)
        title = ""
        for region in self._regions:
            start, end = self._region_ratios(region)
            if start * width <= x <= end * width:
                title = region.title
        self.setToolTip(title)

    def _end_drag(self) -> None:
        self._drag_region = None
        self._drag_edge = None
        self.unsetCursor()
