"""
Tween types, enums, and dataclasses.

Defines the record stored by TweenRegistry and the protocols a value type
and an output target must satisfy.
"""
from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional, Protocol, TypeVar, runtime_checkable


class EasingCurve(Enum):
    """
    Easing curve types for tweens.

    The set is closed; unknown selections fall back to LINEAR.
    """
    # Basic
    LINEAR = "linear"

    # Quadratic
    QUAD_IN = "quad_in"
    QUAD_OUT = "quad_out"
    QUAD_IN_OUT = "quad_in_out"

    # Cubic
    CUBIC_IN = "cubic_in"
    CUBIC_OUT = "cubic_out"
    CUBIC_IN_OUT = "cubic_in_out"

    # Quintic
    QUINT_IN = "quint_in"
    QUINT_OUT = "quint_out"
    QUINT_IN_OUT = "quint_in_out"

    # Back
    BACK_IN = "back_in"
    BACK_OUT = "back_out"
    BACK_IN_OUT = "back_in_out"


class WriteMode(Enum):
    """How a computed value leaves the registry."""
    BY_REFERENCE = "by_reference"   # Written into a caller-owned target
    BY_CALLBACK = "by_callback"     # Only delivered to on_step


@runtime_checkable
class Interpolatable(Protocol):
    """Arithmetic a value type needs for the built-in easing set.

    Values must behave like a vector space over floats: difference of two
    values, scaling by a float, and adding a scaled difference back.
    Plain ints are accepted; a tween between two ints writes ints.
    """

    def __add__(self, other: Any) -> Any: ...

    def __sub__(self, other: Any) -> Any: ...

    def __mul__(self, factor: float) -> Any: ...

    def __truediv__(self, factor: float) -> Any: ...


@runtime_checkable
class TweenTarget(Protocol):
    """Caller-owned storage a by-reference tween writes into."""

    def get(self) -> Any: ...

    def set(self, value: Any) -> None: ...


T = TypeVar("T")

# Type aliases for callbacks
StepCallback = Callable[[Any], None]    # receives the freshly computed value
FinishCallback = Callable[[], None]


def values_equal(a: Any, b: Any) -> bool:
    """Compare two tween values, tolerating element-wise ``==`` (numpy arrays)."""
    if a is b:
        return True
    result = a == b
    try:
        return bool(result)
    except ValueError:
        return bool(result.all())


@dataclass(eq=False)
class TweenRecord:
    """One in-flight or pending tween.

    Data only. The registry is the sole mutator of ``active`` and ``elapsed``.
    """
    tween_id: int = -1
    active: bool = True
    write_mode: WriteMode = WriteMode.BY_CALLBACK
    target: Optional[TweenTarget] = None
    start_value: Any = None
    end_value: Any = None
    duration: float = 0.0
    elapsed: float = 0.0
    reversed: bool = False
    easing: EasingCurve = EasingCurve.LINEAR
    on_step: Optional[StepCallback] = None
    on_finish: Optional[FinishCallback] = None
    chained: List["TweenRecord"] = field(default_factory=list)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TweenRecord):
            return NotImplemented
        return (
            self.tween_id == other.tween_id
            and self.target is other.target
            and values_equal(self.start_value, other.start_value)
            and self.elapsed == other.elapsed
            and self.reversed == other.reversed
            and self.easing == other.easing
        )

    __hash__ = None  # mutable record

    @property
    def by_reference(self) -> bool:
        return self.write_mode is WriteMode.BY_REFERENCE

    @property
    def boundary_value(self) -> Any:
        """Exact value the tween settles on when it completes."""
        return self.start_value if self.reversed else self.end_value

    def snapshot(self) -> "TweenRecord":
        """
        Return an independent copy of this record.

        Values are shallow-copied and the chain list is copied recursively, so
        later changes to either record never show up in the other. The target
        and callbacks are shared, they belong to the caller.
        """
        return TweenRecord(
            tween_id=self.tween_id,
            active=self.active,
            write_mode=self.write_mode,
            target=self.target,
            start_value=copy.copy(self.start_value),
            end_value=copy.copy(self.end_value),
            duration=self.duration,
            elapsed=self.elapsed,
            reversed=self.reversed,
            easing=self.easing,
            on_step=self.on_step,
            on_finish=self.on_finish,
            chained=[record.snapshot() for record in self.chained],
        )
