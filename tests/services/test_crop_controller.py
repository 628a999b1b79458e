import logging

import pytest

from audio_cropper.services.crop_controller import CropController
from audio_cropper.use_cases.cut_region import NOT_IMPLEMENTED_NOTICE


def test_snapshot_is_loading_before_ready(controller):
    snapshot = controller.snapshot()

    assert snapshot.is_loading
    assert not snapshot.is_playing


def test_ready_publishes_default_region(loaded_controller, engine_factory):
    snapshot = loaded_controller.snapshot()
    engine = engine_factory.last

    assert not snapshot.is_loading
    assert (snapshot.cut_start, snapshot.cut_end) == (20.0, 40.0)
    assert len(engine.regions) == 1
    assert engine.regions[0].title == ""


@pytest.mark.parametrize("duration, expected", [(60.0, (20.0, 40.0)), (40.0, (0.0, 40.0)), (7.5, (0.0, 7.5))])
def test_initial_region_follows_duration(engine_factory, controller, duration, expected):
    engine_factory.duration = duration

    controller.load(b"track")

    assert (controller.session.cut_start, controller.session.cut_end) == expected
    assert (controller.session.original_cut_start, controller.session.original_cut_end) == expected


def test_drag_end_handle_scenario(loaded_controller, engine_factory):
    engine = engine_factory.last

    engine.drag(20.0, 25.0)
    engine.release(20.0, 25.0)

    snapshot = loaded_controller.snapshot()
    assert snapshot.cut_end == 25.0
    assert snapshot.cut_start == 20.0
    assert snapshot.is_playing
    assert snapshot.was_region_changed
    assert engine.calls_named("play")[-1] == ("play", 25.0, None)


def test_collision_scenario_keeps_committed_region(loaded_controller, engine_factory):
    engine = engine_factory.last
    engine.release(20.0, 25.0)
    engine.calls.clear()

    engine.drag(30.1, 30.2)

    snapshot = loaded_controller.snapshot()
    assert (snapshot.cut_start, snapshot.cut_end) == (20.0, 25.0)
    assert [(r.start, r.end) for r in engine.regions] == [(20.0, 25.0)]
    assert engine.calls == [
        ("clear_regions",),
        ("add_region", 20.0, 25.0),
        ("play", 20.0, 25.0),
    ]
    # The recreated region has its label hidden too.
    assert engine.regions[0].title == ""


def test_collision_before_any_commit_restores_initial_region(loaded_controller, engine_factory):
    engine = engine_factory.last

    engine.drag(30.1, 30.2)

    assert [(r.start, r.end) for r in engine.regions] == [(20.0, 40.0)]
    assert engine.calls_named("play") == []
    assert not loaded_controller.snapshot().is_playing


def test_cancel_is_idempotent(loaded_controller, engine_factory):
    engine = engine_factory.last
    engine.release(22.0, 30.0)

    loaded_controller.cancel()
    once = loaded_controller.snapshot()
    loaded_controller.cancel()
    twice = loaded_controller.snapshot()

    assert once == twice
    assert (twice.cut_start, twice.cut_end) == (20.0, 40.0)
    assert not twice.is_playing
    assert not twice.was_region_changed
    assert len(engine.regions) == 1


def test_jump_to_end_scenario(loaded_controller, engine_factory):
    engine = engine_factory.last
    loaded_controller.toggle_play()
    engine.current_time = 10.0
    engine.calls.clear()

    loaded_controller.jump(True)

    assert engine.calls == [("skip", 45.0), ("pause",), ("skip_forward",)]
    assert not loaded_controller.snapshot().is_playing


def test_cut_leaves_state_unchanged_and_notifies(loaded_controller, notices):
    before = loaded_controller.snapshot()

    loaded_controller.cut()

    assert loaded_controller.snapshot() == before
    assert notices == [NOT_IMPLEMENTED_NOTICE]


def test_cut_without_notifier_logs_warning(engine_factory, caplog):
    controller = CropController(engine_factory=engine_factory)

    with caplog.at_level(logging.WARNING):
        controller.cut()

    assert NOT_IMPLEMENTED_NOTICE in caplog.text


def test_intents_before_ready_do_not_touch_anything(controller):
    published = []
    controller.subscribe(published.append)

    controller.toggle_play()
    controller.skip(True)
    controller.jump(False)
    controller.cancel()
    controller.refresh_progress()

    assert published == []
    assert controller.snapshot().is_loading


def test_subscribers_get_snapshots(controller, engine_factory):
    published = []
    controller.subscribe(published.append)

    controller.load(b"track")
    controller.toggle_play()
    engine_factory.last.drag(25.0, 35.0)

    assert [s.is_loading for s in published] == [True, False, False]
    assert published[-1].is_playing

    controller.unsubscribe(published.append)
    controller.toggle_play()
    assert len(published) == 3


def test_reloading_publishes_a_single_loading_snapshot(loaded_controller, engine_factory):
    published = []
    loaded_controller.subscribe(published.append)

    loaded_controller.load(b"other")

    assert [s.is_loading for s in published] == [True, False]


def test_loading_a_new_track_releases_the_previous_engine(loaded_controller, engine_factory):
    first = engine_factory.last
    first.release(20.0, 25.0)
    engine_factory.duration = 30.0

    loaded_controller.load(b"other")

    second = engine_factory.last
    assert first.destroyed
    assert second is not first
    snapshot = loaded_controller.snapshot()
    assert (snapshot.cut_start, snapshot.cut_end) == (0.0, 30.0)
    assert not snapshot.was_region_changed
    assert not snapshot.is_playing


def test_context_manager_releases_engine(engine_factory):
    with CropController(engine_factory=engine_factory) as controller:
        controller.load(b"track")

    assert engine_factory.last.destroyed
    assert controller.snapshot().is_loading

    controller.release()
    assert engine_factory.last.calls_named("destroy") == [("destroy",)]


def test_refresh_progress_reaches_engine(loaded_controller, engine_factory):
    loaded_controller.refresh_progress()

    assert engine_factory.last.calls[-1] == ("update_progress",)
