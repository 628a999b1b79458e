import logging
import os
import sys
from pathlib import Path
from PySide6.QtWidgets import (
    QApplication,
    QFileDialog,
    QLabel,
    QMainWindow,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)
from PySide6.QtGui import QAction, QKeySequence

from audio_cropper.services.waveform_engine import AudioDecodeError
from audio_cropper.ui.audio_player import AudioPlayerWidget
from audio_cropper.ui.styles import DARK_STYLE

logger = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self):
        super().__init__()
        self.current_file: Path | None = None

        self.setWindowTitle("Audio Cropper")
        self.setMinimumSize(720, 320)
        self.resize(960, 360)
        self.setStyleSheet(DARK_STYLE)

        # ===== Central Widget =====
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        root_layout = QVBoxLayout()
        root_layout.setContentsMargins(10, 10, 10, 10)
        root_layout.setSpacing(10)
        central_widget.setLayout(root_layout)

        self.title_label = QLabel("Open a WAV file to start")
        self.title_label.setObjectName("titleLabel")
        root_layout.addWidget(self.title_label)

        self.player = AudioPlayerWidget()
        root_layout.addWidget(self.player, 1)

        # ===== Menu =====
        file_menu = self.menuBar().addMenu("File")
        open_action = QAction("Open...", self)
        open_action.setShortcut(QKeySequence.Open)
        open_action.triggered.connect(self.handle_open_file)
        file_menu.addAction(open_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut(QKeySequence.Quit)
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def handle_open_file(self):
        file_path, _ = QFileDialog.getOpenFileName(self, "Open Track", "", "WAV Files (*.wav)")
        if not file_path:
            return
        self.open_file(Path(file_path))

    def open_file(self, path: Path):
        try:
            audio_bytes = path.read_bytes()
            self.player.load_audio(audio_bytes)
        except (OSError, AudioDecodeError) as exc:
            logger.warning("Failed to load %s: %s", path, exc)
            QMessageBox.warning(self, "Open Track", f"Failed to load {path}:\n{exc}")
            return

        self.current_file = path
        self.title_label.setText(path.name)

    def closeEvent(self, event):  # noqa: N802 (Qt API)
        self.player.release()
        super().closeEvent(event)


def main():
    logging.basicConfig(
        level=os.environ.get("AUDIO_CROPPER_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app = QApplication(sys.argv)
    window = MainWindow()
    window.show()
    if len(sys.argv) > 1:
        window.open_file(Path(sys.argv[1]))
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
