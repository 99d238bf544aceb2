# sourcetree/selective_recording.py
"""
Selective recording: each item can be shown on the stream, on the recording,
or on both. Clicking the indicator cycles Both -> RecordingOnly ->
StreamOnly -> Both.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from sourcetree.contracts import SessionState

logger = logging.getLogger(__name__)


class RecordingState(Enum):
    BOTH = "both"
    STREAM_ONLY = "stream_only"
    RECORDING_ONLY = "recording_only"


@dataclass(frozen=True)
class RecordingIndicator:
    icon: str
    tooltip: str


_NEXT_STATE = {
    RecordingState.BOTH: RecordingState.RECORDING_ONLY,
    RecordingState.STREAM_ONLY: RecordingState.BOTH,
    RecordingState.RECORDING_ONLY: RecordingState.STREAM_ONLY,
}

_INDICATORS = {
    RecordingState.BOTH: RecordingIndicator("icon-smart-record", "Visible on both Stream and Recording"),
    RecordingState.STREAM_ONLY: RecordingIndicator("icon-broadcast", "Only visible on Stream"),
    RecordingState.RECORDING_ONLY: RecordingIndicator("icon-studio", "Only visible on Recording"),
}


def state_from_flags(stream_visible: bool, recording_visible: bool) -> RecordingState:
    if stream_visible and recording_visible:
        return RecordingState.BOTH
    if stream_visible:
        return RecordingState.STREAM_ONLY
    # hidden on both channels cycles like RecordingOnly
    return RecordingState.RECORDING_ONLY


def flags_for_state(state: RecordingState) -> Tuple[bool, bool]:
    """(stream_visible, recording_visible) for a state."""
    if state is RecordingState.BOTH:
        return True, True
    if state is RecordingState.STREAM_ONLY:
        return True, False
    return False, True


def next_state(state: RecordingState) -> RecordingState:
    return _NEXT_STATE[state]


def cycle_flags(stream_visible: bool, recording_visible: bool) -> Tuple[bool, bool]:
    return flags_for_state(next_state(state_from_flags(stream_visible, recording_visible)))


def indicator_for(state: RecordingState) -> RecordingIndicator:
    return _INDICATORS[state]


def selective_recording_locked(session: SessionState) -> bool:
    """The mode cannot change while broadcasting or buffering replays."""
    return session.is_replay_buffer_active or not session.is_idle


def toggle_global_selective_recording(session: SessionState) -> bool:
    """Flip the session-wide flag. Returns False when the toggle is blocked."""
    if selective_recording_locked(session):
        logger.debug("Selective recording toggle blocked: session is active")
        return False
    session.set_selective_recording(not session.selective_recording)
    return True
