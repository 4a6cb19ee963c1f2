"""
Tween registry and per-frame update loop.

TweenRegistry owns every in-flight tween. Callers create tweens through the
fluent builder, then call advance(dt) once per frame. Each pass evaluates the
active records, writes values out, fires callbacks, and finally compacts
finished records and activates chained follow-ups.

Records created from inside a step/finish callback are queued and appended
after the pass, so a pass never sees the collection change under it.
"""
from __future__ import annotations

import copy
import math
import time
from typing import Any, Callable, Iterable, Iterator, List, Optional, Union

from stween.constants.timing import (
    COMPLETION_ABS_TOL,
    COMPLETION_REL_TOL,
    SLOW_ADVANCE_WARN_MS,
    SLOW_CALLBACK_WARN_MS,
)
from stween.logging.logger import get_logger, is_perf_metrics_enabled, is_verbose_logging
from stween.settings.tween_settings import TweenSettings, get_default_settings
from stween.tween.easing import interpolate, resolve_curve
from stween.tween.types import (
    EasingCurve,
    FinishCallback,
    Interpolatable,
    StepCallback,
    TweenRecord,
    TweenTarget,
    WriteMode,
)

logger = get_logger(__name__)

ChainSource = Union["TweenRegistry", Iterable[TweenRecord]]


def _require_interpolatable(value: Any, what: str) -> None:
    if not isinstance(value, Interpolatable):
        raise TypeError(
            f"{what} must support +, -, * and / by float, got {type(value).__name__}"
        )


def _require_callable(callback: Optional[Callable], what: str) -> None:
    if callback is not None and not callable(callback):
        raise ValueError(f"{what} must be callable")


class TweenBuilder:
    """
    Fluent handle bound to one record.

    Returned by TweenRegistry.begin_from()/begin_from_value(). Every method
    configures this builder's own record and returns the builder, so
    interleaving builders never configures the wrong tween.
    """

    __slots__ = ("_registry", "_record")

    def __init__(self, registry: "TweenRegistry", record: TweenRecord):
        self._registry = registry
        self._record = record

    @property
    def registry(self) -> "TweenRegistry":
        return self._registry

    @property
    def record(self) -> TweenRecord:
        return self._record

    @property
    def tween_id(self) -> int:
        return self._record.tween_id

    def to(self, value: Any) -> "TweenBuilder":
        """Set the end value (snapshotted)."""
        _require_interpolatable(value, "End value")
        self._record.end_value = copy.copy(value)
        return self

    def time(self, seconds: float) -> "TweenBuilder":
        """
        Set the duration in seconds.

        Zero is accepted and completes the tween on its first advance.

        Raises:
            ValueError: If seconds is negative
        """
        seconds = float(seconds)
        if seconds < 0.0:
            raise ValueError(f"Tween duration must be non-negative, got {seconds}")
        self._record.duration = seconds
        return self

    def on_finish(self, callback: Optional[FinishCallback]) -> "TweenBuilder":
        """Set the callback fired once when the tween completes."""
        _require_callable(callback, "on_finish callback")
        self._record.on_finish = callback
        return self

    def on_step(self, callback: Optional[StepCallback]) -> "TweenBuilder":
        """Set the callback receiving every computed value."""
        _require_callable(callback, "on_step callback")
        self._record.on_step = callback
        return self

    def reversed(self, is_reversed: bool = True) -> "TweenBuilder":
        """Run from the end value back to the start value."""
        self._record.reversed = bool(is_reversed)
        return self

    def easing(self, curve: Union[EasingCurve, str]) -> "TweenBuilder":
        """Select the easing curve. Unknown selections fall back to linear."""
        self._record.easing = resolve_curve(curve)
        return self

    def chain(self, source: ChainSource) -> "TweenBuilder":
        """
        Activate tweens after this one completes.

        Takes a snapshot of every record currently held by ``source`` (a
        registry, or any iterable of records). Later changes to the source do
        not affect the captured chain. Replaces any previous chain.
        """
        if isinstance(source, TweenRegistry):
            chained = source.export_all()
        else:
            chained = [record.snapshot() for record in source]
        self._record.chained = chained
        return self

    def __repr__(self) -> str:
        return f"TweenBuilder(tween_id={self._record.tween_id})"


class TweenRegistry:
    """
    Owns tween records and evaluates them once per advance().

    Not thread-safe. advance() must not be called from its own callbacks.
    """

    def __init__(self, settings: Optional[TweenSettings] = None):
        """
        Initialize the registry.

        Args:
            settings: Evaluation policy. Defaults to the process-wide
                settings read from STWEEN_* environment variables.
        """
        self._settings = settings if settings is not None else get_default_settings()
        self._default_easing = resolve_curve(self._settings.default_easing)

        self._records: List[TweenRecord] = []
        self._positions: dict[int, int] = {}    # tween_id -> index in _records
        self._pending: List[TweenRecord] = []   # created during advance()
        self._next_id = 0
        self._current: Optional[TweenBuilder] = None
        self._advancing = False

    @property
    def settings(self) -> TweenSettings:
        return self._settings

    @property
    def last_tween_id(self) -> Optional[int]:
        """Id of the most recently created tween, None before the first one."""
        if self._current is None:
            return None
        return self._current.tween_id

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def begin_from(self, target: TweenTarget) -> TweenBuilder:
        """
        Start a tween that writes into ``target`` every advance.

        The target's current value is snapshotted as the start value.

        Args:
            target: ValueRef, AttributeRef, ItemRef or any get()/set() object

        Returns:
            Builder bound to the new record
        """
        if not isinstance(target, TweenTarget):
            raise TypeError(
                f"begin_from() needs a target with get()/set(), got {type(target).__name__}; "
                "use begin_from_value() for by-callback tweens"
            )
        start = target.get()
        _require_interpolatable(start, "Start value")
        return self._begin(WriteMode.BY_REFERENCE, target, start)

    def begin_from_value(self, value: Any) -> TweenBuilder:
        """
        Start a tween that only reports values through on_step.

        Args:
            value: Start value (snapshotted)

        Returns:
            Builder bound to the new record
        """
        _require_interpolatable(value, "Start value")
        return self._begin(WriteMode.BY_CALLBACK, None, value)

    def _begin(self, write_mode: WriteMode, target: Optional[TweenTarget],
               start: Any) -> TweenBuilder:
        record = TweenRecord(
            tween_id=self._issue_id(),
            active=True,
            write_mode=write_mode,
            target=target,
            start_value=copy.copy(start),
            end_value=copy.copy(start),
            duration=0.0,
            elapsed=0.0,
            easing=self._default_easing,
            chained=[],
        )
        self._insert(record)
        self._current = TweenBuilder(self, record)
        logger.debug("[TWEEN] Created tween %d (%s)", record.tween_id, write_mode.value)
        return self._current

    # ------------------------------------------------------------------
    # "Current record" configuration
    # ------------------------------------------------------------------

    def _require_current(self) -> TweenBuilder:
        if self._current is None:
            raise RuntimeError("No tween to configure; call begin_from() or begin_from_value() first")
        if not self.is_running(self._current.tween_id):
            raise RuntimeError(
                f"Tween {self._current.tween_id} has finished or was cancelled; "
                "begin a new tween before configuring"
            )
        return self._current

    def to(self, value: Any) -> "TweenRegistry":
        self._require_current().to(value)
        return self

    def time(self, seconds: float) -> "TweenRegistry":
        self._require_current().time(seconds)
        return self

    def on_finish(self, callback: Optional[FinishCallback]) -> "TweenRegistry":
        self._require_current().on_finish(callback)
        return self

    def on_step(self, callback: Optional[StepCallback]) -> "TweenRegistry":
        self._require_current().on_step(callback)
        return self

    def reversed(self, is_reversed: bool = True) -> "TweenRegistry":
        self._require_current().reversed(is_reversed)
        return self

    def easing(self, curve: Union[EasingCurve, str]) -> "TweenRegistry":
        self._require_current().easing(curve)
        return self

    def chain(self, source: ChainSource) -> "TweenRegistry":
        self._require_current().chain(source)
        return self

    # ------------------------------------------------------------------
    # Bulk transfer
    # ------------------------------------------------------------------

    def export_all(self) -> List[TweenRecord]:
        """Return independent copies of every held record, including unfinished ones."""
        return [record.snapshot() for record in self._records + self._pending]

    def import_one(self, record: TweenRecord) -> int:
        """
        Add a copy of ``record`` as a new active tween.

        Returns:
            The freshly issued tween id
        """
        fresh = record.snapshot()
        fresh.active = True
        fresh.tween_id = self._issue_id()
        self._insert(fresh)
        logger.debug("[TWEEN] Imported tween %d", fresh.tween_id)
        return fresh.tween_id

    def import_all(self, records: Iterable[TweenRecord]) -> List[int]:
        """Add copies of ``records`` as new active tweens, in order."""
        return [self.import_one(record) for record in records]

    def reset(self) -> None:
        """Drop every tween and restart id sequencing."""
        if self._advancing:
            raise RuntimeError("reset() cannot be called while advance() is running")
        count = len(self._records) + len(self._pending)
        self._records.clear()
        self._positions.clear()
        self._pending.clear()
        self._current = None
        self._next_id = 0
        logger.debug("[TWEEN] Registry reset (%d tweens dropped)", count)

    # ------------------------------------------------------------------
    # Queries and cancellation
    # ------------------------------------------------------------------

    def get(self, tween_id: int) -> Optional[TweenRecord]:
        """Return the live record for ``tween_id``, or None once it is gone."""
        index = self._positions.get(tween_id)
        if index is not None:
            return self._records[index]
        for record in self._pending:
            if record.tween_id == tween_id:
                return record
        return None

    def is_running(self, tween_id: int) -> bool:
        record = self.get(tween_id)
        return record is not None and record.active

    def get_progress(self, tween_id: int) -> Optional[float]:
        """Get linear progress (0.0 to 1.0) of a tween, None if unknown."""
        record = self.get(tween_id)
        if record is None:
            return None
        if record.duration <= 0:
            return 1.0 if record.elapsed > 0 else 0.0
        return max(0.0, min(1.0, record.elapsed / record.duration))

    def get_active_count(self) -> int:
        return sum(1 for record in self._records if record.active) + len(self._pending)

    def cancel(self, tween_id: int) -> bool:
        """
        Stop a tween without completing it.

        on_finish is not called and chained tweens are not activated.

        Returns:
            True if a running tween was cancelled
        """
        for index, record in enumerate(self._pending):
            if record.tween_id == tween_id:
                del self._pending[index]
                logger.debug("[TWEEN] Cancelled pending tween %d", tween_id)
                return True

        index = self._positions.get(tween_id)
        if index is None or not self._records[index].active:
            return False

        self._records[index].active = False
        if not self._advancing:
            self._swap_remove(index)
        logger.debug("[TWEEN] Cancelled tween %d", tween_id)
        return True

    def cancel_all(self) -> None:
        """Cancel every tween. Unlike reset(), ids keep counting up."""
        for tween_id in [record.tween_id for record in self._records + self._pending]:
            self.cancel(tween_id)

    def __len__(self) -> int:
        return len(self._records) + len(self._pending)

    def __contains__(self, tween_id: object) -> bool:
        return isinstance(tween_id, int) and self.get(tween_id) is not None

    def __iter__(self) -> Iterator[TweenRecord]:
        return iter(self._records + self._pending)

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def advance(self, delta_time: float) -> int:
        """
        Advance every active tween by ``delta_time`` seconds.

        Args:
            delta_time: Seconds since the previous advance, non-negative

        Returns:
            Number of tweens that completed during this pass

        Raises:
            ValueError: If delta_time is negative
            RuntimeError: If called from inside a tween callback
        """
        delta_time = float(delta_time)
        if delta_time < 0.0:
            raise ValueError(f"delta_time must be non-negative, got {delta_time}")
        if self._advancing:
            raise RuntimeError("advance() is not reentrant")

        self._advancing = True
        chained: List[TweenRecord] = []
        completed = 0
        pass_start = time.perf_counter()
        try:
            # Appends during the pass go to _pending, so the length is fixed.
            for index in range(len(self._records)):
                record = self._records[index]
                if record.active and self._step(record, delta_time, chained):
                    completed += 1
        finally:
            self._advancing = False
            self._compact()
            self._flush_pending()
            self._activate_chained(chained)

        if is_perf_metrics_enabled():
            pass_ms = (time.perf_counter() - pass_start) * 1000.0
            if pass_ms > SLOW_ADVANCE_WARN_MS:
                logger.warning("[PERF] [TWEEN] Slow advance: %.2fms (tweens=%d, completed=%d)",
                               pass_ms, len(self._records), completed)
        if is_verbose_logging():
            logger.debug("[TWEEN] advance(%.4f): %d completed, %d remaining",
                         delta_time, completed, len(self._records))
        return completed

    def _step(self, record: TweenRecord, delta_time: float,
              chained: List[TweenRecord]) -> bool:
        """Evaluate one record. Returns True when it completed on this pass."""
        sample_first = self._settings.sample_before_increment
        if not sample_first:
            record.elapsed += delta_time
        sample_elapsed = record.elapsed

        if record.reversed:
            start, end = record.end_value, record.start_value
        else:
            start, end = record.start_value, record.end_value

        finished = self._reached_end(sample_elapsed, record.duration)
        if finished:
            record.active = False

        try:
            if finished and not sample_first:
                value = copy.copy(record.boundary_value)
            else:
                value = interpolate(record.easing, self._position(record, sample_elapsed), start, end)
            self._emit(record, value)

            if finished and sample_first:
                # Sample-first ordering delivers the raw sample, then the snapped boundary.
                self._emit(record, copy.copy(record.boundary_value))
        finally:
            # A raising target or on_step still finishes the tween and queues its chain.
            if finished:
                self._complete(record, sample_elapsed, chained)
            if sample_first:
                record.elapsed += delta_time
        return finished

    @staticmethod
    def _reached_end(elapsed: float, duration: float) -> bool:
        return elapsed >= duration or math.isclose(
            elapsed, duration, rel_tol=COMPLETION_REL_TOL, abs_tol=COMPLETION_ABS_TOL)

    def _complete(self, record: TweenRecord, elapsed: float,
                  chained: List[TweenRecord]) -> None:
        logger.debug("[TWEEN] Tween %d completed (elapsed=%.4f, duration=%.4f, chained=%d)",
                     record.tween_id, elapsed, record.duration, len(record.chained))
        if record.write_mode is WriteMode.BY_CALLBACK and record.on_step is None:
            logger.debug("[TWEEN] Tween %d had no on_step; its values were not delivered",
                         record.tween_id)
        chained.extend(follow_up.snapshot() for follow_up in record.chained)
        if record.on_finish is not None:
            self._call(record.on_finish, record.tween_id, "finish")

    def _emit(self, record: TweenRecord, value: Any) -> None:
        if record.write_mode is WriteMode.BY_REFERENCE and record.target is not None:
            record.target.set(value)
        if record.on_step is not None:
            self._call(record.on_step, record.tween_id, "step", value)

    def _position(self, record: TweenRecord, elapsed: float) -> float:
        # Zero-length tweens sit at their end; they complete on the same pass.
        if record.duration <= 0.0:
            return 1.0
        position = elapsed / record.duration
        if self._settings.clamp_position:
            position = max(0.0, min(1.0, position))
        return position

    def _call(self, callback: Callable, tween_id: int, kind: str, *args: Any) -> None:
        if not is_perf_metrics_enabled():
            callback(*args)
            return
        call_start = time.perf_counter()
        callback(*args)
        call_ms = (time.perf_counter() - call_start) * 1000.0
        if call_ms > SLOW_CALLBACK_WARN_MS:
            logger.warning("[PERF] [TWEEN] Slow %s callback: %.2fms (tween=%d)",
                           kind, call_ms, tween_id)

    # ------------------------------------------------------------------
    # Storage
    # ------------------------------------------------------------------

    def _issue_id(self) -> int:
        tween_id = self._next_id
        self._next_id += 1
        return tween_id

    def _insert(self, record: TweenRecord) -> None:
        if self._advancing:
            self._pending.append(record)
        else:
            self._append(record)

    def _append(self, record: TweenRecord) -> None:
        self._positions[record.tween_id] = len(self._records)
        self._records.append(record)

    def _swap_remove(self, index: int) -> None:
        """Remove the record at ``index`` by moving the last record into its slot."""
        record = self._records[index]
        last = self._records.pop()
        del self._positions[record.tween_id]
        if last is not record:
            self._records[index] = last
            self._positions[last.tween_id] = index

    def _compact(self) -> None:
        index = 0
        while index < len(self._records):
            if self._records[index].active:
                index += 1
            else:
                # The swapped-in record lands on this index; check it next.
                self._swap_remove(index)

    def _flush_pending(self) -> None:
        pending, self._pending = self._pending, []
        for record in pending:
            if record.active:
                self._append(record)

    def _activate_chained(self, chained: List[TweenRecord]) -> None:
        for record in chained:
            record.active = True
            record.tween_id = self._issue_id()
            self._append(record)
            logger.debug("[TWEEN] Activated chained tween %d", record.tween_id)
