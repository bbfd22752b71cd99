"""
Main Window - Video, slot timeline, palette and inspector
"""
import logging
from pathlib import Path
from typing import Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QPushButton,
    QFileDialog, QSplitter, QMessageBox, QInputDialog, QCheckBox
)
from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QKeySequence

from core.bulk_codec import BulkFormatError
from core.session import EditorSession
from models.timeline import Slot
from persistence.timeline_store import PersistenceError, TimelineStore
from runtime_config import get_config
from .inspector_widget import SlotInspector
from .palette_widget import PaletteWidget
from .preview_widget import PreviewWidget
from .threads import SaveTimelineThread
from .timeline_widget import TimelineWidget

logger = logging.getLogger(__name__)


class SlotEditorWindow(QMainWindow):
    """Main application window"""

    def __init__(self, video_id: str = "", store: Optional[TimelineStore] = None):
        super().__init__()
        self.setWindowTitle("Slot Timeline")
        self.setMinimumSize(1100, 720)

        self.store = store or TimelineStore(get_config().store_path)
        self.preview_widget = PreviewWidget()
        self.session = EditorSession(video_id=video_id, player=self.preview_widget.player)
        self._save_thread: Optional[SaveTimelineThread] = None

        self._setup_ui()
        self._setup_menu_bar()
        self._connect_signals()
        self._load_saved()

    # -- Layout -------------------------------------------------------------

    def _setup_menu_bar(self):
        """Setup the menu bar with File and Edit menus"""
        menu_bar = self.menuBar()

        file_menu = menu_bar.addMenu("&File")
        open_action = QAction("&Open Video...", self)
        open_action.setShortcut(QKeySequence.StandardKey.Open)
        open_action.triggered.connect(self._open_video)
        file_menu.addAction(open_action)

        save_action = QAction("&Save", self)
        save_action.setShortcut(QKeySequence.StandardKey.Save)
        save_action.triggered.connect(self._save)
        file_menu.addAction(save_action)

        file_menu.addSeparator()
        import_action = QAction("&Import JSON/CSV...", self)
        import_action.triggered.connect(self._import_bulk)
        file_menu.addAction(import_action)
        export_action = QAction("&Export JSON...", self)
        export_action.triggered.connect(self._export_bulk)
        file_menu.addAction(export_action)

        edit_menu = menu_bar.addMenu("&Edit")
        dup_action = QAction("&Duplicate", self)
        dup_action.setShortcut(QKeySequence("Ctrl+D"))
        dup_action.triggered.connect(self._duplicate)
        edit_menu.addAction(dup_action)

    def _setup_ui(self):
        """Setup the main UI layout"""
        central_widget = QWidget()
        self.setCentralWidget(central_widget)
        main_layout = QVBoxLayout(central_widget)

        main_layout.addLayout(self._create_toolbar())

        splitter = QSplitter(Qt.Orientation.Vertical)
        top = QSplitter(Qt.Orientation.Horizontal)
        top.addWidget(self.preview_widget)
        top.addWidget(self._create_inspector())
        top.setSizes([760, 300])
        splitter.addWidget(top)

        bottom = QWidget()
        bottom_layout = QHBoxLayout(bottom)
        bottom_layout.setContentsMargins(0, 0, 0, 0)
        self.palette_widget = PaletteWidget(self.session.palette)
        bottom_layout.addWidget(self.palette_widget)
        self.timeline_widget = TimelineWidget(self.session)
        bottom_layout.addWidget(self.timeline_widget, 1)
        splitter.addWidget(bottom)
        splitter.setSizes([460, 240])
        main_layout.addWidget(splitter, 1)

        self.statusBar().showMessage("Ready")

    def _create_toolbar(self) -> QHBoxLayout:
        """Create the top toolbar"""
        layout = QHBoxLayout()

        self.btn_add = QPushButton(f"+ {get_config().quick_add_seconds:g}s")
        self.btn_add.setProperty("class", "primary")
        self.btn_add.setToolTip("Add a dialogue slot at the playhead")
        self.btn_add.clicked.connect(self._add_at_current)
        layout.addWidget(self.btn_add)

        self.btn_duplicate = QPushButton("Duplicate")
        self.btn_duplicate.clicked.connect(self._duplicate)
        layout.addWidget(self.btn_duplicate)

        self.btn_delete = QPushButton("Delete")
        self.btn_delete.clicked.connect(self._delete)
        layout.addWidget(self.btn_delete)

        self.chk_ghosts = QCheckBox("Ghost lanes")
        self.chk_ghosts.setChecked(True)
        self.chk_ghosts.toggled.connect(self._toggle_ghosts)
        layout.addWidget(self.chk_ghosts)

        layout.addStretch()

        self.btn_import = QPushButton("Import")
        self.btn_import.clicked.connect(self._import_bulk)
        layout.addWidget(self.btn_import)

        self.btn_export = QPushButton("Export")
        self.btn_export.clicked.connect(self._export_bulk)
        layout.addWidget(self.btn_export)

        self.btn_save = QPushButton("Save")
        self.btn_save.setProperty("class", "save")
        self.btn_save.clicked.connect(self._save)
        layout.addWidget(self.btn_save)

        return layout

    def _create_inspector(self) -> QWidget:
        """Fields of the selected slot"""
        self.inspector = SlotInspector()
        return self.inspector

    def _connect_signals(self):
        canvas = self.timeline_widget.canvas
        canvas.slot_selected.connect(self._on_slot_selected)
        canvas.slots_changed.connect(self._on_slots_changed)
        self.inspector.edited.connect(self._on_inspector_edited)
        canvas.seek_requested.connect(lambda t: self.timeline_widget.set_playhead(t))
        self.preview_widget.position_changed.connect(self.timeline_widget.set_playhead)
        self.preview_widget.duration_changed.connect(self._on_duration_changed)

    # -- Loading ------------------------------------------------------------

    def open_video(self, path: str, video_id: Optional[str] = None):
        """Load a video and the timeline stored for it"""
        self.session.video_id = video_id or Path(path).stem
        self.preview_widget.set_source(path)
        self._load_saved()

    def _open_video(self):
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Video", "", "Video Files (*.mp4 *.mov *.mkv *.webm);;All Files (*)"
        )
        if path:
            self.open_video(path)

    def _load_saved(self):
        if not self.session.video_id:
            return
        try:
            document = self.store.load(self.session.video_id)
        except PersistenceError as e:
            self.statusBar().showMessage(f"Could not load timeline: {e}")
            return
        if document is None:
            self.statusBar().showMessage(f"New timeline for {self.session.video_id}")
            return
        self.session.load_document(document)
        self.palette_widget.set_palette(self.session.palette)
        self._on_slot_selected("")
        self.timeline_widget.refresh()
        self.statusBar().showMessage(f"Loaded {len(self.session.slots)} slot(s)")

    def _on_duration_changed(self, duration: float):
        self.session.set_duration(duration)
        self.inspector.set_duration(duration)
        self._on_slot_selected(self.session.gestures.selected_id or "")
        self.timeline_widget.refresh()

    # -- Editing commands ---------------------------------------------------

    def _add_at_current(self):
        slot = self.session.add_at_current()
        if slot is None:
            self.statusBar().showMessage("No room for a new slot here")
            return
        self._after_edit(slot.id)

    def _duplicate(self):
        slot = self.session.duplicate_selected()
        if slot is None:
            self.statusBar().showMessage("Select a slot to duplicate")
            return
        self._after_edit(slot.id)

    def _delete(self):
        if self.session.delete_selected():
            self._after_edit("")

    def _toggle_ghosts(self, checked: bool):
        self.timeline_widget.canvas.show_ghosts = checked
        self.timeline_widget.canvas.update()

    def _after_edit(self, selected_id: str):
        self._on_slot_selected(selected_id)
        self._on_slots_changed()
        self.timeline_widget.canvas.update()

    def _on_slots_changed(self):
        self.statusBar().showMessage(f"{len(self.session.slots)} slot(s), unsaved changes")

    # -- Inspector ----------------------------------------------------------

    def _on_slot_selected(self, slot_id: str):
        slot: Optional[Slot] = self.session.model.get(slot_id) if slot_id else None
        self.inspector.show_slot(slot)
        self.timeline_widget.canvas.ghost_exclude = slot.participants[0] if slot and slot.participants else None

    def _on_inspector_edited(self, patch: dict):
        slot = self.session.update_selected(**patch)
        if slot is not None:
            self._after_edit(slot.id)

    # -- Bulk import / export -----------------------------------------------

    def _import_bulk(self):
        text, ok = QInputDialog.getMultiLineText(
            self, "Import", "Paste JSON or CSV (start,end,label,cast,kind):"
        )
        if not ok or not text.strip():
            return
        try:
            preview = self.session.preview_import(text)
        except BulkFormatError as e:
            QMessageBox.warning(self, "Import", e.message)
            return
        answer = QMessageBox.question(
            self, "Import",
            f"Replace {len(self.session.slots)} slot(s) with {len(preview)} imported slot(s)?"
        )
        if answer != QMessageBox.StandardButton.Yes:
            return
        if self.session.import_text(text):
            self._after_edit("")
            self.statusBar().showMessage(f"Imported {len(self.session.slots)} slot(s)")
        else:
            QMessageBox.warning(self, "Import", self.session.import_error or "Import is not possible right now.")

    def _export_bulk(self):
        default_name = f"{self.session.video_id or 'timeline'}.json"
        path, _ = QFileDialog.getSaveFileName(self, "Export", default_name, "JSON Files (*.json)")
        if not path:
            return
        try:
            with open(path, "w", encoding="utf-8") as f:
                f.write(self.session.export_text())
        except OSError as e:
            QMessageBox.critical(self, "Export", f"Export failed: {e}")
            return
        self.statusBar().showMessage(f"Exported to {path}")

    # -- Saving -------------------------------------------------------------

    def _save(self):
        if not self.session.video_id:
            QMessageBox.warning(self, "Save", "Open a video before saving.")
            return
        if self._save_thread is not None and self._save_thread.isRunning():
            self.statusBar().showMessage("Save already in progress")
            return
        ticket = self.session.begin_save()
        self.btn_save.setEnabled(False)
        self.statusBar().showMessage(self.session.status_message)
        self._save_thread = SaveTimelineThread(self.store, ticket)
        self._save_thread.finished.connect(self._on_save_finished)
        self._save_thread.start()

    def _on_save_finished(self, success: bool, message: str, result):
        ticket, document = result
        applied = self.session.finish_save(ticket, document, None if success else message)
        self.btn_save.setEnabled(True)
        if applied:
            self._on_slot_selected(self.session.gestures.selected_id or "")
            self.timeline_widget.canvas.update()
        self.statusBar().showMessage(self.session.status_message)
