"""
Palette Widget - Draggable participant and category chips
"""
import json
from typing import Optional

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QLabel, QPushButton, QGridLayout
from PyQt6.QtCore import Qt, QMimeData, QPoint
from PyQt6.QtGui import QDrag, QMouseEvent

from core.palette import Palette
from models.palette import DropPayload, PaletteEntry

SLOT_MIME = "application/x-slot"


def payload_to_mime(payload: DropPayload) -> QMimeData:
    mime = QMimeData()
    mime.setData(SLOT_MIME, json.dumps(payload.to_dict()).encode("utf-8"))
    return mime


def payload_from_mime(mime: QMimeData) -> Optional[DropPayload]:
    """Decode a palette payload; None if the drag did not come from the palette."""
    if mime is None or not mime.hasFormat(SLOT_MIME):
        return None
    try:
        data = json.loads(bytes(mime.data(SLOT_MIME)).decode("utf-8"))
    except ValueError:
        return None
    if not isinstance(data, dict):
        return None
    payload = DropPayload.from_dict(data)
    return None if payload.is_empty else payload


class PaletteChip(QPushButton):
    """A chip that starts a drag carrying its palette entry"""

    def __init__(self, entry: PaletteEntry, parent=None):
        super().__init__(entry.title, parent)
        self.entry = entry
        self.setProperty("class", "chip")
        self.setToolTip("Drag onto the timeline")
        self.setCursor(Qt.CursorShape.OpenHandCursor)
        if entry.color:
            self.setStyleSheet(f"background-color: {entry.color}33; border-color: {entry.color};")
        self._press_pos: Optional[QPoint] = None

    def mousePressEvent(self, event: QMouseEvent):
        if event.button() == Qt.MouseButton.LeftButton:
            self._press_pos = event.position().toPoint()
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event: QMouseEvent):
        if self._press_pos is None or not (event.buttons() & Qt.MouseButton.LeftButton):
            return
        if (event.position().toPoint() - self._press_pos).manhattanLength() < 4:
            return
        drag = QDrag(self)
        drag.setMimeData(payload_to_mime(self.entry.payload()))
        self._press_pos = None
        self.setDown(False)
        drag.exec(Qt.DropAction.CopyAction)


class PaletteWidget(QWidget):
    """Side panel listing the palette chips"""

    def __init__(self, palette: Palette, parent=None):
        super().__init__(parent)
        self.setFixedWidth(190)
        self._layout = QVBoxLayout(self)
        self._layout.setContentsMargins(8, 8, 8, 8)
        self._layout.setSpacing(6)
        self.set_palette(palette)

    def set_palette(self, palette: Palette):
        """Rebuild chips for *palette*"""
        while self._layout.count():
            item = self._layout.takeAt(0)
            if item.widget() is not None:
                item.widget().deleteLater()

        self.chips: list[PaletteChip] = []
        for title, entries in (("Cast", palette.participant_entries()),
                               ("Category", palette.category_entries())):
            label = QLabel(title)
            label.setProperty("class", "section")
            self._layout.addWidget(label)

            grid_host = QWidget()
            grid = QGridLayout(grid_host)
            grid.setContentsMargins(0, 0, 0, 0)
            grid.setSpacing(4)
            for i, entry in enumerate(entries):
                chip = PaletteChip(entry)
                self.chips.append(chip)
                grid.addWidget(chip, i // 2, i % 2)
            self._layout.addWidget(grid_host)

        self._layout.addStretch()
