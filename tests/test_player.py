"""Player transitions: track binding, seeking and end-of-track handling."""

from __future__ import annotations

import random

from myvoice.player import (
    PlayerState,
    PlayerStatus,
    next_track,
    on_ended,
    on_loaded_metadata,
    on_time_update,
    open_track,
    pause,
    prev_track,
    seek,
    set_tracks,
    toggle_play,
    toggle_repeat,
    toggle_shuffle,
)


def _loaded(*ids: str) -> PlayerState:
    return set_tracks(PlayerState(), ids)


def test_open_binds_source_once():
    state = open_track(_loaded("a", "b"), "b")
    assert state.active_id == "b"
    assert state.current_index == 1
    assert state.status is PlayerStatus.PLAYING
    assert state.source_generation == 1

    state = on_time_update(on_loaded_metadata(state, 200.0), 42.0)
    again = open_track(state, "b")
    assert again is state
    assert again.position == 42.0


def test_seek_requires_known_duration():
    state = open_track(_loaded("a"), "a")
    assert seek(state, 30.0) == state

    state = on_loaded_metadata(state, 120.0)
    state = seek(state, 500.0)
    assert state.position == 120.0
    assert state.status is PlayerStatus.PLAYING

    paused = seek(pause(state), 10.0)
    assert paused.status is PlayerStatus.PAUSED
    assert paused.position == 10.0


def test_toggle_play_round_trip():
    state = open_track(_loaded("a"), "a")
    state = toggle_play(state)
    assert state.status is PlayerStatus.PAUSED
    assert toggle_play(state).status is PlayerStatus.PLAYING


def test_repeat_restarts_current_track():
    state = toggle_repeat(on_time_update(open_track(_loaded("a", "b"), "a"), 99.0))
    ended = on_ended(state)
    assert ended.active_id == "a"
    assert ended.position == 0.0
    assert ended.status is PlayerStatus.PLAYING
    assert ended.source_generation == state.source_generation


def test_sequential_advance_wraps():
    state = open_track(_loaded("a", "b", "c"), "c")
    state = on_ended(state)
    assert state.active_id == "a"
    assert prev_track(state).active_id == "c"


def test_shuffle_never_repeats_current_track():
    rng = random.Random(1234)
    state = toggle_shuffle(open_track(_loaded("a", "b", "c", "d"), "b"))
    for _ in range(50):
        following = next_track(state, rng)
        assert following.active_id != state.active_id
        state = following


def test_shuffle_with_single_track_stays():
    state = toggle_shuffle(open_track(_loaded("solo"), "solo"))
    assert next_track(state, random.Random(0)).active_id == "solo"


def test_set_tracks_drops_removed_active_track():
    state = open_track(_loaded("a", "b"), "b")
    state = set_tracks(state, ["a"])
    assert state.active_id is None
    assert state.status is PlayerStatus.IDLE


def test_seek_commands_are_distinguishable_from_time_updates():
    state = on_loaded_metadata(open_track(_loaded("a", "b"), "a"), 180.0)

    ticked = on_time_update(state, 12.0)
    assert ticked.seek_generation == state.seek_generation

    scrubbed = seek(ticked, 60.0)
    assert scrubbed.seek_generation == ticked.seek_generation + 1

    looped = on_ended(toggle_repeat(on_time_update(scrubbed, 180.0)))
    assert looped.position == 0.0
    assert looped.seek_generation == scrubbed.seek_generation + 1
