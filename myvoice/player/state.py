"""Audio player state machine.

The player is modelled as an immutable ``PlayerState`` value. Every user
action or audio element event is a function taking the current state and
returning the next one; nothing is kept in module globals. A UI binds
``source_generation``: whenever it changes, the audio source must be
(re)loaded from ``active_id``. It also binds ``seek_generation``: whenever
that changes, the audio element must jump to ``position``. Plain
``on_time_update`` events never touch it.

    Idle -> Loaded -> Playing <-> Paused
                         |
                       Ended -> (repeat) Playing
                             -> (advance) Playing on the next track
"""

from __future__ import annotations

import random
from dataclasses import dataclass, replace
from enum import Enum
from typing import Optional, Sequence


class PlayerStatus(str, Enum):
    IDLE = "idle"
    LOADED = "loaded"
    PLAYING = "playing"
    PAUSED = "paused"
    ENDED = "ended"


@dataclass(frozen=True)
class PlayerState:
    tracks: tuple[str, ...] = ()
    current_index: int = 0
    active_id: Optional[str] = None
    status: PlayerStatus = PlayerStatus.IDLE
    position: float = 0.0
    duration: Optional[float] = None
    shuffle: bool = False
    repeat: bool = False
    source_generation: int = 0
    seek_generation: int = 0

    @property
    def is_playing(self) -> bool:
        return self.status is PlayerStatus.PLAYING

    @property
    def progress(self) -> float:
        """Fraction of the track played, clamped to ``[0, 1]``."""

        if not self.duration or self.duration <= 0:
            return 0.0
        return max(0.0, min(1.0, self.position / self.duration))


def set_tracks(state: PlayerState, track_ids: Sequence[str]) -> PlayerState:
    """Replace the playlist, keeping the active track's index if it survives."""

    tracks = tuple(str(track_id) for track_id in track_ids)
    if state.active_id in tracks:
        return replace(state, tracks=tracks, current_index=tracks.index(state.active_id))
    if state.active_id is None:
        return replace(state, tracks=tracks, current_index=0)
    return replace(
        state,
        tracks=tracks,
        current_index=0,
        active_id=None,
        status=PlayerStatus.IDLE,
        position=0.0,
        duration=None,
    )


def _bind(state: PlayerState, index: int, autoplay: bool) -> PlayerState:
    return replace(
        state,
        current_index=index,
        active_id=state.tracks[index],
        status=PlayerStatus.PLAYING if autoplay else PlayerStatus.LOADED,
        position=0.0,
        duration=None,
        source_generation=state.source_generation + 1,
    )


def open_track(state: PlayerState, track_id: str, *, autoplay: bool = True) -> PlayerState:
    """Select a track; reopening the loaded one leaves playback untouched."""

    track_id = str(track_id)
    if track_id not in state.tracks:
        return state
    if state.active_id == track_id:
        return state
    return _bind(state, state.tracks.index(track_id), autoplay)


def _seek_to(state: PlayerState, position: float) -> PlayerState:
    return replace(state, position=position, seek_generation=state.seek_generation + 1)


def play(state: PlayerState) -> PlayerState:
    if state.active_id is None:
        return state
    if state.status is PlayerStatus.ENDED:
        return _seek_to(replace(state, status=PlayerStatus.PLAYING), 0.0)
    return replace(state, status=PlayerStatus.PLAYING)


def pause(state: PlayerState) -> PlayerState:
    if state.status is not PlayerStatus.PLAYING:
        return state
    return replace(state, status=PlayerStatus.PAUSED)


def toggle_play(state: PlayerState) -> PlayerState:
    return pause(state) if state.is_playing else play(state)


def seek(state: PlayerState, position: float) -> PlayerState:
    """Scrub to ``position`` seconds; ignored until the duration is known."""

    if state.duration is None or state.duration <= 0:
        return state
    return _seek_to(state, max(0.0, min(float(position), state.duration)))


def seek_fraction(state: PlayerState, fraction: float) -> PlayerState:
    if state.duration is None:
        return state
    return seek(state, state.duration * max(0.0, min(1.0, fraction)))


def on_loaded_metadata(state: PlayerState, duration: float) -> PlayerState:
    return replace(state, duration=float(duration) if duration and duration > 0 else None)


def on_time_update(state: PlayerState, position: float) -> PlayerState:
    return replace(state, position=max(0.0, float(position)))


def random_index_excluding(exclude: int, length: int, rng: random.Random) -> int:
    """Uniform index in ``[0, length)`` other than ``exclude``."""

    if length <= 1:
        return 0
    candidate = rng.randrange(length - 1)
    return candidate + 1 if candidate >= exclude else candidate


def next_track(state: PlayerState, rng: random.Random | None = None) -> PlayerState:
    if not state.tracks:
        return state
    if state.shuffle:
        index = random_index_excluding(state.current_index, len(state.tracks), rng or random.Random())
    else:
        index = (state.current_index + 1) % len(state.tracks)
    return _bind(state, index, autoplay=True)


def prev_track(state: PlayerState) -> PlayerState:
    if not state.tracks:
        return state
    index = (state.current_index - 1) % len(state.tracks)
    return _bind(state, index, autoplay=True)


def on_ended(state: PlayerState, rng: random.Random | None = None) -> PlayerState:
    """Loop the track when repeat is on, otherwise advance."""

    if state.active_id is None:
        return state
    if state.repeat:
        return _seek_to(replace(state, status=PlayerStatus.PLAYING), 0.0)
    return next_track(replace(state, status=PlayerStatus.ENDED), rng)


def toggle_shuffle(state: PlayerState) -> PlayerState:
    return replace(state, shuffle=not state.shuffle)


def toggle_repeat(state: PlayerState) -> PlayerState:
    return replace(state, repeat=not state.repeat)


__all__ = [
    "PlayerState",
    "PlayerStatus",
    "next_track",
    "on_ended",
    "on_loaded_metadata",
    "on_time_update",
    "open_track",
    "pause",
    "play",
    "prev_track",
    "random_index_excluding",
    "seek",
    "seek_fraction",
    "set_tracks",
    "toggle_play",
    "toggle_repeat",
    "toggle_shuffle",
]
