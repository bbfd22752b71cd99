"""
Dark theme for the Slot Timeline editor
"""
from PyQt6.QtWidgets import QApplication
from PyQt6.QtGui import QColor, QPalette


class ModernDarkTheme:
    """Dark studio theme, flat design"""

    # Color Palette
    BG_DARK = "#121218"        # Main Background
    BG_PANEL = "#1b1b24"       # Palette / side panels
    BG_LIGHTER = "#3a334a"     # Borders / Hover

    ACCENT = "#7c4bd9"         # Dialogue purple
    ACCENT_HOVER = "#9466e8"
    SAVE = "#059669"
    DANGER = "#ef4444"

    TEXT_MAIN = "#EEEEEE"
    TEXT_DIM = "#9A96A8"

    # Stylesheet
    STYLESHEET = """
        QMainWindow, QDialog {
            background-color: #121218;
        }
        QWidget {
            background-color: #121218;
            color: #EEEEEE;
            font-family: "Segoe UI", "Roboto", sans-serif;
            font-size: 13px;
        }

        QPushButton {
            background-color: #3a334a;
            border: 1px solid #3a334a;
            border-radius: 6px;
            padding: 5px 10px;
            color: #EEEEEE;
            min-height: 22px;
        }
        QPushButton:hover {
            background-color: #4a405c;
            border: 1px solid #4a405c;
        }
        QPushButton:disabled {
            background-color: #1b1b24;
            color: #555555;
            border: 1px solid #1b1b24;
        }
        QPushButton[class="primary"] {
            background-color: #7c4bd9;
            border: 1px solid #7c4bd9;
            color: white;
        }
        QPushButton[class="save"] {
            background-color: #059669;
            border: 1px solid #059669;
            color: white;
        }
        QPushButton[class="chip"] {
            border-radius: 11px;
            padding: 2px 8px;
            font-size: 11px;
        }

        QLineEdit, QPlainTextEdit {
            background-color: #1b1b24;
            border: 1px solid #3a334a;
            border-radius: 4px;
            padding: 4px;
            color: #EEEEEE;
        }
        QLineEdit:focus, QPlainTextEdit:focus {
            border: 1px solid #7c4bd9;
        }

        QLabel[class="section"] {
            color: #9A96A8;
            font-size: 11px;
        }

        QStatusBar {
            background-color: #1b1b24;
            color: #9A96A8;
        }
    """

    @staticmethod
    def apply(app: QApplication):
        """Apply theme to application"""
        app.setStyle("Fusion")

        palette = QPalette()
        palette.setColor(QPalette.ColorRole.Window, QColor(ModernDarkTheme.BG_DARK))
        palette.setColor(QPalette.ColorRole.WindowText, QColor(ModernDarkTheme.TEXT_MAIN))
        palette.setColor(QPalette.ColorRole.Base, QColor(ModernDarkTheme.BG_PANEL))
        palette.setColor(QPalette.ColorRole.Text, QColor(ModernDarkTheme.TEXT_MAIN))
        palette.setColor(QPalette.ColorRole.Button, QColor(ModernDarkTheme.BG_LIGHTER))
        palette.setColor(QPalette.ColorRole.ButtonText, QColor(ModernDarkTheme.TEXT_MAIN))
        palette.setColor(QPalette.ColorRole.Highlight, QColor(ModernDarkTheme.ACCENT))
        palette.setColor(QPalette.ColorRole.HighlightedText, QColor("#FFFFFF"))
        app.setPalette(palette)

        app.setStyleSheet(ModernDarkTheme.STYLESHEET)
