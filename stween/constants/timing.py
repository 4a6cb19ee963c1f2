"""Timing constants for tween evaluation and the frame driver.

Durations and deltas are in seconds unless the name says otherwise.
"""

# =============================================================================
# Frame Driver
# =============================================================================

DEFAULT_TARGET_FPS = 60
"""Tick rate used by TweenTicker when none is given."""

MIN_TARGET_FPS = 10
"""Lowest tick rate accepted by TweenTicker.set_target_fps()."""

MAX_TARGET_FPS = 240
"""Highest tick rate accepted by TweenTicker.set_target_fps()."""

MAX_FRAME_DELTA = 0.5
"""Largest wall-clock delta handed to advance() by the frame driver.

Longer stalls (system sleep, debugger pauses) are clamped so tweens do not
jump straight to their end values.
"""

# =============================================================================
# Evaluation
# =============================================================================

COMPLETION_REL_TOL = 1e-9
"""Relative slack when comparing accumulated elapsed time with a duration.

Float sums of frame deltas drift (ten 0.1s deltas sum to 0.9999999999999999),
so a tween whose deltas add up to its duration still completes on that tick.
"""

COMPLETION_ABS_TOL = 1e-12
"""Absolute slack for the same comparison, for durations near zero."""

# =============================================================================
# Diagnostics
# =============================================================================

SLOW_CALLBACK_WARN_MS = 30.0
"""Step/finish callbacks slower than this are reported as PERF warnings."""

SLOW_ADVANCE_WARN_MS = 50.0
"""A whole advance() pass slower than this is reported as a PERF warning."""
