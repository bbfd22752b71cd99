"""
Preview Widget - Video playback for the slot editor

Wraps QMediaPlayer and exposes it to the editor core in seconds.
"""
from typing import Optional

from PyQt6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QSlider, QStyle, QLabel
from PyQt6.QtCore import Qt, QUrl, pyqtSignal
from PyQt6.QtMultimedia import QMediaPlayer, QAudioOutput
from PyQt6.QtMultimediaWidgets import QVideoWidget

from core.timebase import format_timecode


class QtMediaPlayer:
    """Seconds-based view of a QMediaPlayer (which counts milliseconds)"""

    def __init__(self, player: QMediaPlayer):
        self._player = player

    @property
    def current_time(self) -> float:
        return self._player.position() / 1000.0

    @property
    def duration(self) -> float:
        return max(0, self._player.duration()) / 1000.0

    def seek(self, t: float):
        self._player.setPosition(int(round(t * 1000)))


class PreviewWidget(QWidget):
    """Video surface with play/pause and a position slider"""

    position_changed = pyqtSignal(float)  # seconds
    duration_changed = pyqtSignal(float)  # seconds

    def __init__(self, parent=None):
        super().__init__(parent)
        self.media_player = QMediaPlayer(self)
        self.audio_output = QAudioOutput(self)
        self.media_player.setAudioOutput(self.audio_output)
        self.player = QtMediaPlayer(self.media_player)
        self._seeking = False
        self._setup_ui()

        self.media_player.positionChanged.connect(self._on_position_changed)
        self.media_player.durationChanged.connect(self._on_duration_changed)
        self.media_player.playbackStateChanged.connect(self._on_state_changed)

    def _setup_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.setSpacing(4)

        self.video_widget = QVideoWidget()
        self.video_widget.setMinimumHeight(240)
        self.media_player.setVideoOutput(self.video_widget)
        layout.addWidget(self.video_widget, 1)

        controls = QHBoxLayout()
        self.play_btn = QPushButton()
        self.play_btn.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_MediaPlay))
        self.play_btn.setEnabled(False)
        self.play_btn.clicked.connect(self.toggle_playback)
        controls.addWidget(self.play_btn)

        self.position_slider = QSlider(Qt.Orientation.Horizontal)
        self.position_slider.setRange(0, 0)
        self.position_slider.sliderPressed.connect(self._on_seek_start)
        self.position_slider.sliderReleased.connect(self._on_seek_end)
        controls.addWidget(self.position_slider, 1)

        self.time_label = QLabel("0:00.000")
        controls.addWidget(self.time_label)
        layout.addLayout(controls)

    def set_source(self, path: Optional[str]):
        """Load a local video file (or a URL)"""
        if not path:
            return
        url = QUrl(path) if "://" in path else QUrl.fromLocalFile(path)
        self.media_player.setSource(url)
        self.play_btn.setEnabled(True)

    def toggle_playback(self):
        if self.media_player.playbackState() == QMediaPlayer.PlaybackState.PlayingState:
            self.media_player.pause()
        else:
            self.media_player.play()

    def _on_position_changed(self, position: int):
        if not self._seeking:
            self.position_slider.setValue(position)
        self.time_label.setText(format_timecode(position / 1000.0))
        self.position_changed.emit(position / 1000.0)

    def _on_duration_changed(self, duration: int):
        self.position_slider.setRange(0, max(0, duration))
        self.duration_changed.emit(max(0, duration) / 1000.0)

    def _on_state_changed(self, state):
        icon = (QStyle.StandardPixmap.SP_MediaPause
                if state == QMediaPlayer.PlaybackState.PlayingState
                else QStyle.StandardPixmap.SP_MediaPlay)
        self.play_btn.setIcon(self.style().standardIcon(icon))

    def _on_seek_start(self):
        self._seeking = True

    def _on_seek_end(self):
        self._seeking = False
        self.media_player.setPosition(self.position_slider.value())
