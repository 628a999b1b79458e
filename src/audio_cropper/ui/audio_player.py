from PySide6.QtCore import Qt, QTimer
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from audio_cropper.domain.crop_session import SessionSnapshot
from audio_cropper.services.crop_controller import CropController
from audio_cropper.ui.waveform_widget import WaveformWidget

LOADING_TEXT = "Generating audio wave.."


class AudioPlayerWidget(QWidget):
    """Waveform with a crop region and the transport buttons underneath."""

    def __init__(self, parent: QWidget | None = None, controller: CropController | None = None):
        super().__init__(parent)
        self.controller = controller or CropController(notify=self.show_notice)
        self.controller.subscribe(self.render_snapshot)

        self.progress_timer = QTimer(self)
        self.progress_timer.setInterval(33)
        self.progress_timer.timeout.connect(self.controller.refresh_progress)

        root_layout = QVBoxLayout()
        root_layout.setContentsMargins(0, 0, 0, 0)
        root_layout.setSpacing(10)
        self.setLayout(root_layout)

        # ===== Loading overlay =====
        self.loading_label = QLabel(LOADING_TEXT)
        self.loading_label.setObjectName("loadingLabel")
        self.loading_label.setAlignment(Qt.AlignCenter)
        root_layout.addWidget(self.loading_label)

        # ===== Waveform row =====
        self.waveform_row = QWidget()
        self.waveform_row.setObjectName("waveformRow")
        waveform_layout = QVBoxLayout()
        waveform_layout.setContentsMargins(0, 0, 0, 0)
        self.waveform_row.setLayout(waveform_layout)
        self.waveform = WaveformWidget()
        waveform_layout.addWidget(self.waveform)

        # ===== Playback buttons =====
        buttons_layout = QHBoxLayout()
        buttons_layout.setSpacing(6)
        buttons_layout.addStretch(1)

        self.cut_button = self._make_button("✂", "Cut the song to selected region", self.controller.cut)
        self.start_button = self._make_button("⏮", "Jump to start", lambda: self.controller.jump(False))
        self.rewind_button = self._make_button("◀", "Rewind 5 seconds", lambda: self.controller.skip(False))
        self.play_button = self._make_button("▶", "Play", self.controller.toggle_play)
        self.forward_button = self._make_button("▶▶", "Fast forward 5 seconds", lambda: self.controller.skip(True))
        self.end_button = self._make_button("⏭", "Jump to end", lambda: self.controller.jump(True))
        self.cancel_button = self._make_button("⊘", "Cancel", self.controller.cancel)

        for button in (
            self.cut_button,
            self.start_button,
            self.rewind_button,
            self.play_button,
            self.forward_button,
            self.end_button,
            self.cancel_button,
        ):
            buttons_layout.addWidget(button)
        buttons_layout.addStretch(1)
        waveform_layout.addLayout(buttons_layout)

        root_layout.addWidget(self.waveform_row)
        self.render_snapshot(self.controller.snapshot())

    def _make_button(self, text: str, tooltip: str, handler) -> QPushButton:
        button = QPushButton(text)
        button.setObjectName("transportButton")
        button.setToolTip(tooltip)
        button.clicked.connect(handler)
        return button

    def load_audio(self, audio_bytes: bytes):
        """Hand a new track to the player; raises AudioDecodeError on bad input."""
        self.progress_timer.stop()
        self.controller.load(audio_bytes, surface=self.waveform)
        self.progress_timer.start()

    def release(self):
        self.progress_timer.stop()
        self.controller.release()

    def show_notice(self, message: str):
        QMessageBox.information(self, "Cut", message)

    def render_snapshot(self, snapshot: SessionSnapshot):
        self.loading_label.setVisible(snapshot.is_loading)
        self.waveform_row.setVisible(not snapshot.is_loading)

        self.play_button.setText("⏸" if snapshot.is_playing else "▶")
        self.play_button.setToolTip("Pause" if snapshot.is_playing else "Play")

        changed = snapshot.was_region_changed
        self.cut_button.setEnabled(changed)
        self.cancel_button.setEnabled(changed)
        self._set_state_property(self.cut_button, "success" if changed else "disabled")
        self._set_state_property(self.cancel_button, "error" if changed else "disabled")

    def _set_state_property(self, widget: QWidget, state: str):
        widget.setProperty("state", state)
        widget.style().unpolish(widget)
        widget.style().polish(widget)
        widget.update()

    def closeEvent(self, event):  # noqa: N802 (Qt API)
        self.release()
        super().closeEvent(event)
