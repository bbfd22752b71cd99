"""
Inspector Widget - Editable fields of the selected slot
"""
from typing import Optional

from PyQt6.QtWidgets import QGroupBox, QFormLayout, QLineEdit, QComboBox, QDoubleSpinBox
from PyQt6.QtCore import pyqtSignal

from config import KIND_NAMES, SNAP_STEP
from models.timeline import Slot


class SlotInspector(QGroupBox):
    """Shows one slot and emits the fields the user changed"""

    edited = pyqtSignal(dict)  # Patch for EditorSession.update_selected

    def __init__(self, parent=None):
        super().__init__("Selected slot", parent)
        self._updating = False
        form = QFormLayout(self)

        self.edit_label = QLineEdit()
        self.edit_label.editingFinished.connect(self._on_text_edited)
        form.addRow("Label", self.edit_label)

        self.edit_participants = QLineEdit()
        self.edit_participants.setPlaceholderText("Comma separated")
        self.edit_participants.editingFinished.connect(self._on_text_edited)
        form.addRow("Cast", self.edit_participants)

        self.combo_category = QComboBox()
        self.combo_category.addItems(KIND_NAMES)
        self.combo_category.currentTextChanged.connect(self._on_category_changed)
        form.addRow("Kind", self.combo_category)

        self.spin_start = self._make_time_spin()
        self.spin_start.editingFinished.connect(lambda: self._on_time_edited("start", self.spin_start))
        form.addRow("Start (s)", self.spin_start)

        self.spin_end = self._make_time_spin()
        self.spin_end.editingFinished.connect(lambda: self._on_time_edited("end", self.spin_end))
        form.addRow("End (s)", self.spin_end)

        self.setEnabled(False)

    @staticmethod
    def _make_time_spin() -> QDoubleSpinBox:
        spin = QDoubleSpinBox()
        spin.setDecimals(2)
        spin.setSingleStep(SNAP_STEP)
        spin.setRange(0.0, 24 * 3600.0)
        return spin

    def set_duration(self, duration: float):
        """Limit the time fields to the media length (0 = unknown)"""
        upper = duration if duration > 0 else 24 * 3600.0
        self.spin_start.setMaximum(upper)
        self.spin_end.setMaximum(upper)

    def show_slot(self, slot: Optional[Slot]):
        """Fill the fields from *slot*, or clear them when None"""
        self._updating = True
        try:
            self.setEnabled(slot is not None)
            if slot is None:
                self.edit_label.clear()
                self.edit_participants.clear()
                self.spin_start.setValue(0.0)
                self.spin_end.setValue(0.0)
                return
            self.edit_label.setText(slot.label)
            self.edit_participants.setText(", ".join(slot.participants))
            self.combo_category.setCurrentText(slot.category.value)
            self.spin_start.setValue(slot.start)
            self.spin_end.setValue(slot.end)
        finally:
            self._updating = False

    def _on_text_edited(self):
        if self._updating or not self.isEnabled():
            return
        participants = [p.strip() for p in self.edit_participants.text().split(",") if p.strip()]
        self.edited.emit({"label": self.edit_label.text(), "participants": participants})

    def _on_category_changed(self, name: str):
        if self._updating or not self.isEnabled():
            return
        self.edited.emit({"category": name})

    def _on_time_edited(self, field: str, spin: QDoubleSpinBox):
        if self._updating or not self.isEnabled():
            return
        self.edited.emit({field: spin.value()})
