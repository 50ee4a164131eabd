"""Playback state machine for the demo player."""

from .state import (
    PlayerState,
    PlayerStatus,
    next_track,
    on_ended,
    on_loaded_metadata,
    on_time_update,
    open_track,
    pause,
    play,
    prev_track,
    seek,
    seek_fraction,
    set_tracks,
    toggle_play,
    toggle_repeat,
    toggle_shuffle,
)

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
    "seek",
    "seek_fraction",
    "set_tracks",
    "toggle_play",
    "toggle_repeat",
    "toggle_shuffle",
]
