# SafeImage — Shimmer Animation

"""
Timer-driven shimmer sweep for the loading placeholder.

The value runs from -1.0 to 2.0 over one period with an ease-in-out curve,
then repeats. gradient_stops() turns it into the three stops of a diagonal
base/highlight/base gradient.
"""

from typing import Optional, Tuple

from PySide6.QtCore import QEasingCurve, QElapsedTimer, QObject, QTimer, Signal

from safe_image.utils import config


class ShimmerAnimation(QObject):
    """
    Repeating shimmer value driven by a QTimer.

    Signals:
        tick(float): Emitted with the current value on every frame
    """

    tick = Signal(float)

    BEGIN = -1.0
    END = 2.0

    def __init__(
        self,
        duration_ms: Optional[int] = None,
        interval_ms: Optional[int] = None,
        parent: Optional[QObject] = None,
    ) -> None:
        super().__init__(parent)
        if duration_ms is None:
            duration_ms = config.get("shimmer_duration_ms", 1500)
        if interval_ms is None:
            interval_ms = config.get("shimmer_interval_ms", 16)
        if duration_ms <= 0:
            raise ValueError("shimmer duration must be > 0")

        self._duration_ms = int(duration_ms)
        self._curve = QEasingCurve(QEasingCurve.InOutQuad)
        self._clock = QElapsedTimer()
        self._value = self.BEGIN

        self._timer = QTimer(self)
        self._timer.setInterval(max(1, int(interval_ms)))
        self._timer.timeout.connect(self._advance)

    # ========================================================================
    # Properties
    # ========================================================================

    @property
    def value(self) -> float:
        return self._value

    @property
    def duration_ms(self) -> int:
        return self._duration_ms

    @property
    def is_running(self) -> bool:
        return self._timer.isActive()

    # ========================================================================
    # Control
    # ========================================================================

    def start(self) -> None:
        """Start (or keep) repeating."""
        if self.is_running:
            return
        self._clock.start()
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def value_at(self, elapsed_ms: int) -> float:
        """Shimmer value after elapsed_ms, wrapping every period."""
        progress = (elapsed_ms % self._duration_ms) / self._duration_ms
        eased = self._curve.valueForProgress(progress)
        return self.BEGIN + (self.END - self.BEGIN) * eased

    def gradient_stops(self) -> Tuple[float, float, float]:
        """Three gradient stops clamped to [0, 1]."""
        v = self._value
        return (
            max(0.0, min(1.0, v - 1.0)),
            max(0.0, min(1.0, v)),
            max(0.0, min(1.0, v + 1.0)),
        )

    # ========================================================================
    # Internal
    # ========================================================================

    def _advance(self) -> None:
        """Timer callback."""
        self._value = self.value_at(self._clock.elapsed())
        self.tick.emit(self._value)
