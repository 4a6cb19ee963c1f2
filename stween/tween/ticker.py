"""
Qt frame driver for a TweenRegistry.

TweenTicker calls registry.advance(dt) from a precise QTimer, measuring the
real time between timeouts. It is optional: any loop that calls advance()
with a delta works the same way.
"""
import time
from typing import Optional

from PySide6.QtCore import QObject, QTimer, Qt, Signal

from stween.constants.timing import (
    DEFAULT_TARGET_FPS,
    MAX_FRAME_DELTA,
    MAX_TARGET_FPS,
    MIN_TARGET_FPS,
)
from stween.logging.logger import get_logger, is_perf_metrics_enabled
from stween.tween.registry import TweenRegistry

logger = get_logger(__name__)


class TweenTicker(QObject):
    """
    Drives a TweenRegistry from the Qt event loop.

    The timer starts on start() and, with auto_stop, stops itself once the
    registry has no tweens left.
    """

    ticked = Signal(float)  # delta_time handed to advance()
    idle = Signal()         # registry drained and the timer stopped

    def __init__(self, registry: TweenRegistry, fps: int = DEFAULT_TARGET_FPS,
                 max_frame_delta: float = MAX_FRAME_DELTA, auto_stop: bool = True):
        """
        Initialize the ticker.

        Args:
            registry: Registry to advance
            fps: Target ticks per second
            max_frame_delta: Deltas above this many seconds are clamped
            auto_stop: Stop the timer when the registry becomes empty
        """
        super().__init__()

        self.registry = registry
        self.fps = self._clamp_fps(fps)
        self.frame_time = 1.0 / self.fps
        self.max_frame_delta = max_frame_delta
        self.auto_stop = auto_stop

        self._last_tick_time: Optional[float] = None

        # Profiling state for the `[PERF] [TWEEN]` summary logged on stop.
        self._profile_start_ts: Optional[float] = None
        self._profile_last_ts: Optional[float] = None
        self._profile_frame_count: int = 0
        self._profile_min_dt: float = 0.0
        self._profile_max_dt: float = 0.0

        self._timer = QTimer(self)
        self._timer.setTimerType(Qt.TimerType.PreciseTimer)
        self._timer.setInterval(int(self.frame_time * 1000))
        self._timer.timeout.connect(self._on_timeout)

        logger.debug("TweenTicker initialized (fps=%d)", self.fps)

    @staticmethod
    def _clamp_fps(fps: int) -> int:
        return max(MIN_TARGET_FPS, min(MAX_TARGET_FPS, int(fps)))

    def is_active(self) -> bool:
        return self._timer.isActive()

    def interval_ms(self) -> int:
        return self._timer.interval()

    def set_target_fps(self, fps: int) -> None:
        """Update target FPS and reconfigure the timer interval."""
        new_fps = self._clamp_fps(fps)
        if new_fps == self.fps:
            return
        self.fps = new_fps
        self.frame_time = 1.0 / self.fps
        was_active = self._timer.isActive()
        if was_active:
            self._timer.stop()
        self._timer.setInterval(int(self.frame_time * 1000))
        if was_active:
            self._last_tick_time = time.perf_counter()
            self._timer.start()
        logger.info("TweenTicker target FPS set to %d", self.fps)

    def start(self) -> None:
        """Start ticking."""
        if self._timer.isActive():
            return
        now = time.perf_counter()
        self._last_tick_time = now
        self._profile_start_ts = now
        self._profile_last_ts = None
        self._profile_frame_count = 0
        self._profile_min_dt = 0.0
        self._profile_max_dt = 0.0
        self._timer.start()
        logger.debug("TweenTicker started")

    def stop(self) -> None:
        """Stop ticking. Pending tweens stay in the registry."""
        if not self._timer.isActive():
            return
        self._timer.stop()
        self._log_profile_summary()
        logger.debug("TweenTicker stopped")

    def tick(self, delta_time: float) -> int:
        """
        Advance the registry once by an explicit delta.

        Args:
            delta_time: Seconds to advance; clamped to max_frame_delta

        Returns:
            Number of tweens completed on this tick
        """
        if delta_time > self.max_frame_delta:
            if is_perf_metrics_enabled():
                logger.info(
                    "[PERF] [TWEEN] Large frame dt=%.2fms clamped to %.0fms (target=%.2fms, tweens=%d)",
                    delta_time * 1000.0,
                    self.max_frame_delta * 1000.0,
                    self.frame_time * 1000.0,
                    len(self.registry),
                )
            delta_time = self.max_frame_delta

        completed = self.registry.advance(delta_time)
        self.ticked.emit(delta_time)

        if self.auto_stop and len(self.registry) == 0 and self._timer.isActive():
            self.stop()
            self.idle.emit()
        return completed

    def _on_timeout(self) -> None:
        now = time.perf_counter()
        if self._last_tick_time is None:
            self._last_tick_time = now
            return
        delta_time = now - self._last_tick_time
        self._last_tick_time = now

        if delta_time > 0.0:
            if self._profile_min_dt == 0.0 or delta_time < self._profile_min_dt:
                self._profile_min_dt = delta_time
            if delta_time > self._profile_max_dt:
                self._profile_max_dt = delta_time
        self._profile_last_ts = now
        self._profile_frame_count += 1

        self.tick(delta_time)

    def _log_profile_summary(self) -> None:
        """Emit a concise `[PERF] [TWEEN]` summary for the last active run."""
        try:
            if not is_perf_metrics_enabled():
                return
            if (
                self._profile_start_ts is None
                or self._profile_last_ts is None
                or self._profile_frame_count <= 0
            ):
                return
            elapsed = max(0.0, self._profile_last_ts - self._profile_start_ts)
            if elapsed <= 0.0:
                return
            logger.info(
                "[PERF] [TWEEN] TweenTicker metrics: duration=%.1fms, "
                "frames=%d, avg_fps=%.1f, dt_min=%.2fms, dt_max=%.2fms, "
                "tweens=%d, fps_target=%d",
                elapsed * 1000.0,
                self._profile_frame_count,
                self._profile_frame_count / elapsed,
                self._profile_min_dt * 1000.0,
                self._profile_max_dt * 1000.0,
                len(self.registry),
                self.fps,
            )
        finally:
            self._profile_start_ts = None
            self._profile_last_ts = None
            self._profile_frame_count = 0
            self._profile_min_dt = 0.0
            self._profile_max_dt = 0.0
