"""
Easing functions for tweens.

Each curve maps a normalized position t to an interpolation factor. Curves
are not clamped: positions outside [0, 1] extrapolate, and the Back curves
overshoot even inside it.

Based on standard easing equations:
- Robert Penner's Easing Functions
- https://easings.net/
"""
from typing import Any, Callable, Union

from stween.logging.logger import get_logger
from stween.tween.types import EasingCurve

logger = get_logger(__name__)

BACK_OVERSHOOT = 1.70158
BACK_IN_OUT_OVERSHOOT = BACK_OVERSHOOT * 1.525


# Linear (no easing)
def linear(t: float) -> float:
    """Linear interpolation - no easing."""
    return t


# Quadratic easing
def quad_in(t: float) -> float:
    """Quadratic ease-in - accelerating from zero velocity."""
    return t * t


def quad_out(t: float) -> float:
    """Quadratic ease-out - decelerating to zero velocity."""
    return t * (2 - t)


def quad_in_out(t: float) -> float:
    """Quadratic ease-in-out - accelerating until halfway, then decelerating."""
    if t < 0.5:
        return 2 * t * t
    return -1 + (4 - 2 * t) * t


# Cubic easing
def cubic_in(t: float) -> float:
    """Cubic ease-in - accelerating from zero velocity."""
    return t * t * t


def cubic_out(t: float) -> float:
    """Cubic ease-out - decelerating to zero velocity."""
    t -= 1
    return t * t * t + 1


def cubic_in_out(t: float) -> float:
    """Cubic ease-in-out - accelerating until halfway, then decelerating."""
    if t < 0.5:
        return 4 * t * t * t
    t -= 1
    return 1 + 4 * t * t * t


# Quintic easing
def quint_in(t: float) -> float:
    """Quintic ease-in - accelerating from zero velocity."""
    return t * t * t * t * t


def quint_out(t: float) -> float:
    """Quintic ease-out - decelerating to zero velocity."""
    t -= 1
    return 1 + t * t * t * t * t


def quint_in_out(t: float) -> float:
    """Quintic ease-in-out - accelerating until halfway, then decelerating."""
    if t < 0.5:
        return 16 * t * t * t * t * t
    t -= 1
    return 1 + 16 * t * t * t * t * t


# Back easing
def back_in(t: float) -> float:
    """Back ease-in - backing up slightly before accelerating."""
    c = BACK_OVERSHOOT
    return t * t * ((c + 1) * t - c)


def back_out(t: float) -> float:
    """Back ease-out - overshooting slightly before settling."""
    c = BACK_OVERSHOOT
    t -= 1
    return t * t * ((c + 1) * t + c) + 1


def back_in_out(t: float) -> float:
    """Back ease-in-out - backing up, then overshooting."""
    c = BACK_IN_OUT_OVERSHOOT

    if t < 0.5:
        return (2 * t) * (2 * t) * ((c + 1) * 2 * t - c) / 2

    t = t * 2 - 2
    return (t * t * ((c + 1) * t + c) + 2) / 2


# Easing function lookup table
EASING_FUNCTIONS: dict[EasingCurve, Callable[[float], float]] = {
    EasingCurve.LINEAR: linear,

    EasingCurve.QUAD_IN: quad_in,
    EasingCurve.QUAD_OUT: quad_out,
    EasingCurve.QUAD_IN_OUT: quad_in_out,

    EasingCurve.CUBIC_IN: cubic_in,
    EasingCurve.CUBIC_OUT: cubic_out,
    EasingCurve.CUBIC_IN_OUT: cubic_in_out,

    EasingCurve.QUINT_IN: quint_in,
    EasingCurve.QUINT_OUT: quint_out,
    EasingCurve.QUINT_IN_OUT: quint_in_out,

    EasingCurve.BACK_IN: back_in,
    EasingCurve.BACK_OUT: back_out,
    EasingCurve.BACK_IN_OUT: back_in_out,
}


def resolve_curve(curve: Union[EasingCurve, str, None]) -> EasingCurve:
    """
    Normalise an easing selection to an EasingCurve member.

    Args:
        curve: EasingCurve member or its string value (e.g. "cubic_in")

    Returns:
        The matching curve, or EasingCurve.LINEAR for anything unknown
    """
    if isinstance(curve, EasingCurve):
        return curve
    if isinstance(curve, str):
        try:
            return EasingCurve(curve.strip().lower())
        except ValueError:
            pass
    logger.warning("[TWEEN] Unknown easing curve %r, falling back to linear", curve)
    return EasingCurve.LINEAR


def get_easing_function(curve: EasingCurve) -> Callable[[float], float]:
    """
    Get the easing function for a given curve.

    Args:
        curve: Easing curve enum

    Returns:
        Easing function mapping position to an interpolation factor.
        Curves outside the table map to linear.
    """
    return EASING_FUNCTIONS.get(curve, linear)


def interpolate(curve: EasingCurve, position: float, start: Any, end: Any) -> Any:
    """
    Evaluate a curve at a normalized position over [start, end].

    Integer endpoints give integer results, truncated toward zero.

    Args:
        curve: Easing curve to apply
        position: Normalized position, not clamped
        start: Value at position 0.0
        end: Value at position 1.0

    Returns:
        (end - start) * f(position) + start
    """
    factor = get_easing_function(curve)(position)
    value = (end - start) * factor + start
    if type(start) is int and type(end) is int:
        return int(value)
    return value
