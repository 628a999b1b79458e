DARK_STYLE = """
QMainWindow {
    background-color: #07090E;
}

QWidget {
    background-color: #07090E;
    color: #ECF2FF;
    font-family: "Segoe UI", "Trebuchet MS", "Verdana";
    font-size: 14px;
}

QMenuBar {
    background-color: #0D1424;
    border-bottom: 1px solid #243754;
}

QMenuBar::item:selected,
QMenu::item:selected {
    background-color: #2B4E86;
}

QPushButton {
    background: qlineargradient(
        x1: 0, y1: 0, x2: 0, y2: 1,
        stop: 0 #1B2333,
        stop: 1 #0E1422
    );
    border: 1px solid #2E3E5E;
    border-radius: 11px;
    padding: 10px 18px;
    font-weight: 600;
    color: #E9F1FF;
}

QPushButton:hover {
    border: 1px solid #4A79D9;
    background: qlineargradient(
        x1: 0, y1: 0, x2: 0, y2: 1,
        stop: 0 #263A5E,
        stop: 1 #17253D
    );
}

QPushButton:pressed {
    background: #1A2842;
    border: 1px solid #5A8AED;
}

QPushButton:disabled,
QPushButton#transportButton[state="disabled"] {
    background: #0D121D;
    color: #5B6780;
    border: 1px solid #1C2538;
}

QPushButton#transportButton {
    min-height: 34px;
    min-width: 46px;
    max-width: 46px;
    padding: 4px 0;
    font-size: 18px;
    font-weight: 700;
    border-radius: 9px;
    color: #EAF2FF;
}

QPushButton#transportButton[state="success"] {
    color: #7CF0A4;
    border: 1px solid #2F8F57;
}

QPushButton#transportButton[state="error"] {
    color: #FFD9D9;
    border: 1px solid #B84965;
}

QLabel#titleLabel {
    font-size: 20px;
    font-weight: 700;
    color: #FFFFFF;
}

QLabel#loadingLabel {
    font-size: 15px;
    color: #90A3C8;
    padding: 40px 0;
}

QWidget#waveformRow {
    background-color: #0B111F;
    border: 1px solid #243754;
    border-radius: 12px;
}
"""
