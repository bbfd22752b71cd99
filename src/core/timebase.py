"""
TimeBase - Pixel/second mapping and snap math for the slot track.

Every slot boundary written by the editor passes through snap() and
clamp(); raw pointer coordinates are only intermediate values.
"""
import math
from dataclasses import dataclass

from config import SNAP_STEP, MIN_LEN, TIME_EPSILON

# Decimal places kept after snapping, so 0.05 multiples stay exact in JSON
_SNAP_DIGITS = 6


def clamp(value: float, lo: float, hi: float) -> float:
    """Clamp *value* into [lo, hi]. When lo > hi, lo wins."""
    return max(lo, min(hi, value))


def snap(t: float, step: float = SNAP_STEP) -> float:
    """Round *t* to the nearest multiple of *step*."""
    if step <= 0:
        return t
    return round(round(t / step) * step, _SNAP_DIGITS)


def snap_floor(t: float, step: float = SNAP_STEP) -> float:
    return round(math.floor(t / step + TIME_EPSILON) * step, _SNAP_DIGITS)


def snap_ceil(t: float, step: float = SNAP_STEP) -> float:
    return round(math.ceil(t / step - TIME_EPSILON) * step, _SNAP_DIGITS)


def format_timecode(seconds: float) -> str:
    """Format seconds as ``m:ss.mmm``."""
    if seconds is None or not math.isfinite(seconds):
        return "0:00.000"
    seconds = max(0.0, seconds)
    total = int(seconds)
    ms = int(round((seconds - total) * 1000))
    if ms >= 1000:
        total += 1
        ms -= 1000
    return f"{total // 60}:{total % 60:02d}.{ms:03d}"


@dataclass
class TimeBase:
    """Track geometry: maps between pixels and seconds.

    Attributes:
        pixel_width: Width of the track in pixels.
        duration: Media duration in seconds (0 until metadata loads).
        snap_step: Snap granularity in seconds.
    """
    pixel_width: float = 0.0
    duration: float = 0.0
    snap_step: float = SNAP_STEP

    @property
    def ready(self) -> bool:
        """True once the media duration is known."""
        return self.duration > 0

    @property
    def pixels_per_second(self) -> float:
        return self.pixel_width / self.duration if self.duration > 0 else 0.0

    @property
    def upper_bound(self) -> float:
        """Latest legal boundary. Unbounded while the duration is unknown."""
        return self.duration if self.duration > 0 else math.inf

    def resize(self, pixel_width: float):
        """Container was resized."""
        self.pixel_width = max(0.0, float(pixel_width))

    def set_duration(self, duration: float):
        """Media duration became known (or changed)."""
        if duration is None or not math.isfinite(duration):
            duration = 0.0
        self.duration = max(0.0, float(duration))

    def to_pixel(self, t: float) -> float:
        """Convert time (seconds) to x position"""
        return t * self.pixels_per_second

    def to_seconds(self, x: float) -> float:
        """Convert x position to time (seconds)"""
        # max(1, ...) guards the zero scale before the duration is known
        return x / max(1.0, self.pixels_per_second)

    def clamp_x(self, x: float) -> float:
        """Clamp a pointer x into the track."""
        return clamp(x, 0.0, self.pixel_width)

    def snap(self, t: float) -> float:
        return snap(t, self.snap_step)

    def snap_clamp(self, t: float, lo: float, hi: float) -> float:
        """Snap *t* to the grid while keeping it inside [lo, hi].

        When rounding to the nearest grid point would leave the range
        (hi or lo off-grid), the nearest grid point inside the range is
        used instead. A range narrower than one step falls back to the
        plain clamp so bounds always hold.
        """
        if hi < lo:
            hi = lo
        value = self.snap(clamp(t, lo, hi))
        if value > hi + TIME_EPSILON:
            value = snap_floor(hi, self.snap_step)
        if value < lo - TIME_EPSILON:
            value = snap_ceil(lo, self.snap_step)
        if value > hi + TIME_EPSILON or value < lo - TIME_EPSILON:
            value = round(clamp(t, lo, hi), _SNAP_DIGITS)
        return value

    def min_len_ok(self, start: float, end: float) -> bool:
        """True when [start, end] is at least MIN_LEN long."""
        return end - start >= MIN_LEN - TIME_EPSILON
