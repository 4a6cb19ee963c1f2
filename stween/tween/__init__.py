"""Tween registry, records and easing."""

from .types import (
    EasingCurve,
    WriteMode,
    Interpolatable,
    TweenTarget,
    TweenRecord,
)
from .easing import interpolate, get_easing_function, resolve_curve, EASING_FUNCTIONS
from .refs import ValueRef, AttributeRef, ItemRef
from .registry import TweenBuilder, TweenRegistry

__all__ = [
    # Types
    'EasingCurve',
    'WriteMode',
    'Interpolatable',
    'TweenTarget',
    'TweenRecord',

    # Easing
    'interpolate',
    'get_easing_function',
    'resolve_curve',
    'EASING_FUNCTIONS',

    # Targets
    'ValueRef',
    'AttributeRef',
    'ItemRef',

    # Registry
    'TweenBuilder',
    'TweenRegistry',
]
