"""STween - per-frame value tweening with chaining.

The Qt frame driver lives in ``stween.tween.ticker`` and is imported
separately so the registry can be used without a Qt event loop.
"""

from stween.tween import (
    EasingCurve,
    WriteMode,
    TweenRecord,
    TweenBuilder,
    TweenRegistry,
    ValueRef,
    AttributeRef,
    ItemRef,
)
from stween.settings import TweenSettings

__version__ = "1.0.0"

__all__ = [
    'EasingCurve',
    'WriteMode',
    'TweenRecord',
    'TweenBuilder',
    'TweenRegistry',
    'ValueRef',
    'AttributeRef',
    'ItemRef',
    'TweenSettings',
]
