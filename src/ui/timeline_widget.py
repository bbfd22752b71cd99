"""
Timeline Widget - Paints an EditorSession and feeds it pointer, key and drop events
"""
from typing import Optional

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QLabel
from PyQt6.QtCore import Qt, QRectF, pyqtSignal
from PyQt6.QtGui import (
    QPainter, QColor, QPen, QBrush, QFont,
    QMouseEvent, QKeyEvent, QPaintEvent, QPainterPath, QCursor,
    QDragEnterEvent, QDragMoveEvent, QDropEvent, QResizeEvent
)

from core.gesture import EDGE_LEFT, EDGE_RIGHT, KEY_DELETE, KEY_LEFT, KEY_RIGHT
from core.session import EditorSession
from core.timebase import format_timecode
from models.timeline import Slot
from runtime_config import get_config
from .palette_widget import payload_from_mime

_KEY_MAP = {
    Qt.Key.Key_Left: KEY_LEFT,
    Qt.Key.Key_Right: KEY_RIGHT,
    Qt.Key.Key_Delete: KEY_DELETE,
    Qt.Key.Key_Backspace: KEY_DELETE,
}


class TimelineCanvas(QWidget):
    """Canvas widget drawing the slot band, ghost lanes and playhead"""

    slot_selected = pyqtSignal(str)    # Emits slot id ("" when cleared)
    slots_changed = pyqtSignal()       # Any edit to the slot set
    seek_requested = pyqtSignal(float) # Emits clamped time in seconds

    # Layout (pixels)
    GHOST_TOP = 8
    GHOST_HEIGHT = 18
    BAND_TOP = 40
    FOOTER_HEIGHT = 24
    MINOR_EVERY = 1   # seconds
    MAJOR_EVERY = 5

    def __init__(self, session: EditorSession, parent=None):
        super().__init__(parent)
        self.session = session
        self.setMinimumHeight(150)
        self.setMouseTracking(True)
        self.setAcceptDrops(True)
        self.setFocusPolicy(Qt.FocusPolicy.StrongFocus)

        # Participant whose lane is edited; others are drawn as ghosts
        self.ghost_exclude: Optional[str] = None
        self.show_ghosts = True

        # Colors
        self.bg_color = QColor(18, 18, 24, 224)
        self.minor_color = QColor(255, 255, 255, 20)
        self.major_color = QColor(255, 255, 255, 60)
        self.text_color = QColor(255, 255, 255, 216)
        self.playhead_color = QColor("#FFFFFF")
        self.active_color = QColor("#FFD166")

    # -- Geometry ----------------------------------------------------------

    @property
    def band_height(self) -> int:
        return max(20, self.height() - self.BAND_TOP - self.FOOTER_HEIGHT - 8)

    def slot_rect(self, slot: Slot) -> QRectF:
        tb = self.session.timebase
        left = tb.to_pixel(slot.start)
        width = max(2.0, tb.to_pixel(slot.end) - left)
        return QRectF(left, self.BAND_TOP, width, self.band_height)

    def resizeEvent(self, event: QResizeEvent):
        self.session.resize(self.width())
        super().resizeEvent(event)

    def refresh(self):
        """Re-read geometry after the media duration changed"""
        self.session.resize(self.width())
        self.update()

    def set_playhead(self, time: float):
        """Playback time update from the media player"""
        # Repaint even when the active set is unchanged; the playhead moved
        self.session.on_time_update(time)
        self.update()

    # -- Painting ----------------------------------------------------------

    def paintEvent(self, event: QPaintEvent):
        """Paint the timeline"""
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        painter.fillRect(self.rect(), self.bg_color)

        self._draw_grid(painter)
        if self.show_ghosts:
            self._draw_ghosts(painter)

        gestures = self.session.gestures
        for slot in gestures.visible_slots():
            self._draw_slot(painter, slot)

        if gestures.preview is not None:
            self._draw_preview(painter)

        self._draw_playhead(painter)
        painter.end()

    def _draw_grid(self, painter: QPainter):
        """Draw second lines and the time label footer"""
        tb = self.session.timebase
        duration = tb.duration
        painter.fillRect(0, self.height() - self.FOOTER_HEIGHT, self.width(), self.FOOTER_HEIGHT,
                         QColor(255, 255, 255, 15))
        if duration <= 0:
            return

        painter.setFont(QFont("Arial", 8))
        t = 0
        while t <= duration:
            x = int(tb.to_pixel(t))
            major = t % self.MAJOR_EVERY == 0
            painter.setPen(QPen(self.major_color if major else self.minor_color))
            painter.drawLine(x, 0, x, self.height())
            if major:
                painter.setPen(QPen(self.text_color))
                painter.drawText(x + 4, self.height() - 8, format_timecode(t))
            t += self.MINOR_EVERY

    def _draw_ghosts(self, painter: QPainter):
        tb = self.session.timebase
        painter.setFont(QFont("Arial", 7))
        for lane in self.session.ghost_lanes(exclude=self.ghost_exclude):
            color = QColor(lane.color)
            fill = QColor(color)
            fill.setAlpha(51)
            border = QColor(color)
            border.setAlpha(153)
            for start, end in lane.spans:
                left = tb.to_pixel(start)
                rect = QRectF(left, self.GHOST_TOP, max(2.0, tb.to_pixel(end) - left), self.GHOST_HEIGHT)
                painter.setBrush(QBrush(fill))
                painter.setPen(QPen(border, 1, Qt.PenStyle.DashLine))
                painter.drawRoundedRect(rect, 6, 6)

    def _draw_slot(self, painter: QPainter, slot: Slot):
        """Draw one slot with its label, participants and time range"""
        rect = self.slot_rect(slot)
        gestures = self.session.gestures
        color = QColor(slot.display_color)
        selected = slot.id == gestures.selected_id
        provisional = gestures.provisional is slot
        active = self.session.playback.is_active(slot.id)

        fill = QColor(color)
        fill.setAlpha(90 if provisional else 150)
        painter.setBrush(QBrush(fill))
        if selected:
            painter.setPen(QPen(QColor(255, 255, 255, 216), 2))
        elif active:
            painter.setPen(QPen(self.active_color, 2))
        else:
            painter.setPen(QPen(QColor(255, 255, 255, 31), 1,
                                Qt.PenStyle.DashLine if provisional else Qt.PenStyle.SolidLine))
        painter.drawRoundedRect(rect, 8, 8)

        # Resize handles
        handle = float(get_config().edge_handle_px)
        painter.setPen(Qt.PenStyle.NoPen)
        painter.setBrush(QBrush(QColor(255, 255, 255, 20)))
        painter.drawRect(QRectF(rect.left(), rect.top(), min(handle, rect.width() / 2), rect.height()))
        painter.drawRect(QRectF(rect.right() - min(handle, rect.width() / 2), rect.top(),
                                min(handle, rect.width() / 2), rect.height()))

        if rect.width() > 30:
            painter.setPen(QPen(Qt.GlobalColor.white))
            painter.setFont(QFont("Arial", 8, QFont.Weight.Bold))
            title = slot.label or slot.category.value
            text_rect = rect.adjusted(8, 4, -8, 0)
            painter.drawText(text_rect, Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop,
                             self._elide(title, rect.width()))
            painter.setFont(QFont("Arial", 7))
            painter.drawText(text_rect.adjusted(0, 16, 0, 0),
                             Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop,
                             self._elide(", ".join(slot.participants), rect.width()))
            painter.drawText(text_rect.adjusted(0, 30, 0, 0),
                             Qt.AlignmentFlag.AlignLeft | Qt.AlignmentFlag.AlignTop,
                             self._elide(f"{format_timecode(slot.start)} - {format_timecode(slot.end)}",
                                         rect.width()))

    @staticmethod
    def _elide(text: str, width: float) -> str:
        max_chars = int(width / 6)
        if max_chars > 3 and len(text) > max_chars:
            return text[:max_chars - 2] + ".."
        return text

    def _draw_preview(self, painter: QPainter):
        preview = self.session.gestures.preview
        category = preview.payload.category
        color = QColor(category.color if category is not None else "#bfb8d6")
        rect = QRectF(preview.left, self.BAND_TOP - 4, max(6.0, preview.width), self.band_height + 8)
        painter.setBrush(Qt.BrushStyle.NoBrush)
        painter.setPen(QPen(color, 2, Qt.PenStyle.DashLine))
        painter.drawRoundedRect(rect, 6, 6)

    def _draw_playhead(self, painter: QPainter):
        """Draw the playhead (current time indicator)"""
        x = self.session.timebase.to_pixel(self.session.playback.current_time)
        painter.setPen(QPen(self.playhead_color, 1))
        painter.drawLine(int(x), 0, int(x), self.height())

        handle_path = QPainterPath()
        handle_path.moveTo(x - 5, 0)
        handle_path.lineTo(x + 5, 0)
        handle_path.lineTo(x, 8)
        handle_path.closeSubpath()
        painter.setBrush(QBrush(self.playhead_color))
        painter.setPen(Qt.PenStyle.NoPen)
        painter.drawPath(handle_path)

    # -- Pointer -----------------------------------------------------------

    def mousePressEvent(self, event: QMouseEvent):
        """Handle mouse press"""
        if event.button() != Qt.MouseButton.LeftButton:
            return
        self.setFocus()
        if self.session.gestures.press(event.position().x()):
            self.slot_selected.emit(self.session.gestures.selected_id or "")
            self.update()

    def mouseMoveEvent(self, event: QMouseEvent):
        """Handle mouse move"""
        gestures = self.session.gestures
        x = event.position().x()
        if gestures.move(x):
            self.update()
            return

        # Update cursor based on edge proximity
        slot, part = gestures.hit(x) if self.BAND_TOP <= event.position().y() else (None, "blank")
        if slot is not None and part in (EDGE_LEFT, EDGE_RIGHT):
            self.setCursor(QCursor(Qt.CursorShape.SizeHorCursor))
        elif slot is not None:
            self.setCursor(QCursor(Qt.CursorShape.SizeAllCursor))
        else:
            self.setCursor(QCursor(Qt.CursorShape.ArrowCursor))

    def mouseReleaseEvent(self, event: QMouseEvent):
        """Handle mouse release"""
        gestures = self.session.gestures
        if gestures.is_idle:
            return
        revision = self.session.model.revision
        gestures.release(event.position().x())
        self.slot_selected.emit(gestures.selected_id or "")
        if self.session.model.revision != revision:
            self.slots_changed.emit()
        self.update()

    def mouseDoubleClickEvent(self, event: QMouseEvent):
        """Double click jumps the video to that moment"""
        t = self.session.seek_to_x(event.position().x())
        self.seek_requested.emit(t)
        self.update()

    def keyPressEvent(self, event: QKeyEvent):
        key = _KEY_MAP.get(event.key())
        if key is None:
            super().keyPressEvent(event)
            return
        modifier = bool(event.modifiers() & Qt.KeyboardModifier.ShiftModifier)
        if self.session.gestures.key_press(key, modifier=modifier):
            self.slot_selected.emit("" if key == KEY_DELETE else self.session.gestures.selected_id or "")
            self.slots_changed.emit()
            self.update()

    # -- Palette drops -----------------------------------------------------

    def dragEnterEvent(self, event: QDragEnterEvent):
        payload = payload_from_mime(event.mimeData())
        if payload is None:
            event.ignore()
            return
        self.session.gestures.drag_over(event.position().x(), payload)
        event.acceptProposedAction()
        self.update()

    def dragMoveEvent(self, event: QDragMoveEvent):
        payload = payload_from_mime(event.mimeData())
        if payload is None:
            event.ignore()
            return
        self.session.gestures.drag_over(event.position().x(), payload)
        event.acceptProposedAction()
        self.update()

    def dragLeaveEvent(self, event):
        self.session.gestures.drag_leave()
        self.update()

    def dropEvent(self, event: QDropEvent):
        payload = payload_from_mime(event.mimeData())
        if payload is None:
            self.session.gestures.drag_leave()
            event.ignore()
            return
        slot = self.session.gestures.drop(event.position().x(), payload)
        event.acceptProposedAction()
        if slot is not None:
            self.slots_changed.emit()
        self.update()


class TimelineWidget(QWidget):
    """Timeline editor widget with a time readout"""

    def __init__(self, session: EditorSession, parent=None):
        super().__init__(parent)
        self.session = session
        self._setup_ui()

    def _setup_ui(self):
        """Setup the UI"""
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        header = QHBoxLayout()
        self.time_label = QLabel("0:00.000 / 0:00.000")
        self.time_label.setProperty("class", "section")
        header.addWidget(self.time_label)
        header.addStretch()
        layout.addLayout(header)

        self.canvas = TimelineCanvas(self.session)
        layout.addWidget(self.canvas, 1)

    def set_playhead(self, time: float):
        """Set playhead position from the media player"""
        self.canvas.set_playhead(time)
        self._update_time_label()

    def refresh(self):
        self.canvas.refresh()
        self._update_time_label()

    def _update_time_label(self):
        playback = self.session.playback
        self.time_label.setText(
            f"{format_timecode(playback.current_time)} / {format_timecode(self.session.timebase.duration)}"
        )
