"""Tests for chained tweens and record import/export."""
import pytest

from stween.settings import TweenSettings
from stween.tween import EasingCurve, TweenRecord, TweenRegistry, ValueRef


@pytest.fixture
def follow_up():
    """A second registry holding one tween, used as a chain template."""
    return TweenRegistry(TweenSettings())


def test_chained_tween_activates_after_completion(registry, follow_up, recorder):
    a = ValueRef(0.0)
    b = ValueRef(100.0)
    follow_up.begin_from(b).to(200.0).time(1.0).on_finish(recorder.finish)

    first = registry.begin_from(a).to(1.0).time(0.5).chain(follow_up)

    registry.advance(0.25)
    assert len(registry) == 1

    registry.advance(0.25)
    assert a.value == 1.0
    assert first.tween_id not in registry

    # The chained copy joins after the pass with a fresh id, not yet advanced
    exported = registry.export_all()
    assert len(exported) == 1
    chained_id = exported[0].tween_id
    assert chained_id != first.tween_id
    assert chained_id == registry.last_tween_id + 1
    assert b.value == 100.0

    registry.advance(0.5)
    assert b.value == 150.0
    registry.advance(0.5)
    assert b.value == 200.0
    assert recorder.finishes == 1
    assert len(registry) == 0


def test_chain_ids_are_distinct_from_existing_tweens(registry, follow_up):
    for _ in range(3):
        follow_up.begin_from_value(0.0).to(1.0).time(1.0)

    registry.begin_from_value(0.0).to(1.0).time(0.5).chain(follow_up)
    other = registry.begin_from_value(0.0).to(1.0).time(10.0)

    registry.advance(0.5)

    ids = [record.tween_id for record in registry]
    assert len(ids) == 4
    assert len(set(ids)) == 4
    assert other.tween_id in ids
    assert sorted(ids) == [1, 2, 3, 4]


def test_chain_is_a_snapshot(registry, follow_up, recorder):
    """Later changes to the source registry don't reach an already captured chain."""
    template = follow_up.begin_from_value(0.0).to(10.0).time(1.0).on_step(recorder.step)
    registry.begin_from_value(0.0).to(1.0).time(0.5).chain(follow_up)

    template.to(99.0)
    follow_up.begin_from_value(5.0).to(6.0).time(1.0)
    follow_up.reset()

    registry.advance(0.5)
    assert len(registry) == 1
    registry.advance(1.0)
    assert recorder.steps == [10.0]


def test_chain_runs_once_per_completion(registry, follow_up, recorder):
    follow_up.begin_from_value(0.0).to(1.0).time(1.0).on_finish(recorder.finish)
    registry.begin_from_value(0.0).to(1.0).time(1.0).chain(follow_up)
    registry.begin_from_value(0.0).to(1.0).time(1.0).chain(follow_up)

    registry.advance(1.0)
    assert len(registry) == 2
    registry.advance(1.0)
    assert recorder.finishes == 2
    assert len(registry) == 0


def test_nested_chains(registry, recorder):
    third = TweenRegistry(TweenSettings())
    third.begin_from_value(0.0).to(3.0).time(1.0).on_step(recorder.step)

    second = TweenRegistry(TweenSettings())
    second.begin_from_value(0.0).to(2.0).time(1.0).on_step(recorder.step).chain(third)

    registry.begin_from_value(0.0).to(1.0).time(1.0).on_step(recorder.step).chain(second)

    for _ in range(3):
        registry.advance(1.0)

    assert recorder.steps == [1.0, 2.0, 3.0]
    assert len(registry) == 0


def test_loop_by_chaining_reversed_copy(registry):
    """Yo-yo: forward tween chains its reversed twin."""
    x = ValueRef(0.0)
    back = TweenRegistry(TweenSettings())
    back.begin_from(x).to(8.0).time(1.0).reversed(True)

    registry.begin_from(x).to(8.0).time(1.0).easing(EasingCurve.QUAD_IN_OUT).chain(back)

    registry.advance(1.0)
    assert x.value == 8.0
    registry.advance(0.5)
    assert x.value == 4.0
    registry.advance(0.5)
    assert x.value == 0.0


def test_chain_accepts_record_iterables(registry, recorder):
    template = TweenRecord(start_value=1.0, end_value=3.0, duration=1.0, on_step=recorder.step)
    registry.begin_from_value(0.0).to(1.0).time(0.5).chain([template])

    template.end_value = 50.0
    registry.advance(0.5)
    registry.advance(0.5)
    assert recorder.steps == [2.0]


def test_export_returns_independent_copies(registry):
    builder = registry.begin_from_value(0.0).to(1.0).time(2.0)
    exported = registry.export_all()

    assert exported[0] == builder.record
    assert exported[0] is not builder.record

    registry.advance(1.0)
    assert exported[0].elapsed == 0.0
    assert exported[0] != builder.record


def test_import_assigns_fresh_ids(registry, follow_up):
    follow_up.begin_from_value(0.0).to(1.0).time(1.0)
    follow_up.begin_from_value(5.0).to(6.0).time(1.0)
    registry.begin_from_value(0.0).to(1.0).time(1.0)

    new_ids = registry.import_all(follow_up.export_all())
    assert new_ids == [1, 2]
    assert len(registry) == 3
    assert all(registry.is_running(tween_id) for tween_id in new_ids)

    # Advancing the importer leaves the source untouched
    registry.advance(0.5)
    assert [record.elapsed for record in follow_up] == [0.0, 0.0]


def test_import_one_reactivates_a_finished_record(registry, recorder):
    record = TweenRecord(active=False, start_value=0.0, end_value=4.0, duration=1.0,
                         on_step=recorder.step)
    tween_id = registry.import_one(record)

    assert registry.is_running(tween_id)
    assert record.active is False
    registry.advance(0.25)
    assert recorder.steps == [1.0]


def test_record_equality():
    target = ValueRef(0.0)
    record = TweenRecord(tween_id=3, target=target, start_value=1.0, end_value=2.0,
                         duration=1.0, easing=EasingCurve.CUBIC_IN)

    assert record == record.snapshot()
    assert record != TweenRecord(tween_id=4, target=target, start_value=1.0)

    # End value and duration are not part of the identity
    other = record.snapshot()
    other.end_value = 99.0
    other.duration = 5.0
    assert record == other

    # Target compares by identity
    other = record.snapshot()
    other.target = ValueRef(0.0)
    assert record != other

    other = record.snapshot()
    other.reversed = True
    assert record != other


def test_record_equality_with_array_values():
    np = pytest.importorskip("numpy")
    record = TweenRecord(start_value=np.array([1.0, 2.0]))
    assert record == record.snapshot()
    assert record != TweenRecord(start_value=np.array([1.0, 3.0]))


def test_snapshot_copies_nested_chain():
    inner = TweenRecord(start_value=0.0, end_value=1.0)
    outer = TweenRecord(start_value=0.0, chained=[inner])

    copy = outer.snapshot()
    copy.chained[0].end_value = 7.0
    assert inner.end_value == 1.0
    assert copy.chained[0] is not inner
