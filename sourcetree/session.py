# sourcetree/session.py
"""
Reference streaming session state: idle/streaming, replay buffer, and the
global selective-recording flag.
"""
from __future__ import annotations
from typing import Callable, List


class StreamingSession:

    def __init__(self, selective_recording: bool = False):
        self._selective_recording = selective_recording
        self._streaming = False
        self._recording = False
        self._replay_buffer_active = False
        self._listeners: List[Callable[[], None]] = []

    @property
    def is_idle(self) -> bool:
        return not (self._streaming or self._recording)

    @property
    def is_replay_buffer_active(self) -> bool:
        return self._replay_buffer_active

    @property
    def selective_recording(self) -> bool:
        return self._selective_recording

    def set_selective_recording(self, value: bool) -> None:
        self._selective_recording = bool(value)
        self._notify()

    def set_streaming(self, active: bool) -> None:
        self._streaming = bool(active)
        self._notify()

    def set_recording(self, active: bool) -> None:
        self._recording = bool(active)
        self._notify()

    def set_replay_buffer_active(self, active: bool) -> None:
        self._replay_buffer_active = bool(active)
        self._notify()

    def subscribe(self, listener: Callable[[], None]) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()
