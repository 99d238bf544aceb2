from __future__ import annotations

import unittest

from sourcetree import contracts
from sourcetree.selective_recording import (
    RecordingState,
    cycle_flags,
    indicator_for,
    selective_recording_locked,
    state_from_flags,
    toggle_global_selective_recording,
)
from sourcetree.session import StreamingSession

from scene_fixtures import Harness


class CycleTests(unittest.TestCase):
    def test_three_step_cycle_returns_to_both(self) -> None:
        flags = (True, True)
        seen = []
        for _ in range(3):
            flags = cycle_flags(*flags)
            seen.append(state_from_flags(*flags))
        self.assertEqual(
            seen,
            [RecordingState.RECORDING_ONLY, RecordingState.STREAM_ONLY, RecordingState.BOTH],
        )

    def test_hidden_everywhere_cycles_like_recording_only(self) -> None:
        self.assertIs(state_from_flags(False, False), RecordingState.RECORDING_ONLY)
        self.assertEqual(cycle_flags(False, False), (True, False))

    def test_indicators(self) -> None:
        self.assertEqual(indicator_for(RecordingState.BOTH).icon, "icon-smart-record")
        self.assertEqual(indicator_for(RecordingState.STREAM_ONLY).icon, "icon-broadcast")
        self.assertEqual(indicator_for(RecordingState.RECORDING_ONLY).icon, "icon-studio")
        self.assertEqual(indicator_for(RecordingState.STREAM_ONLY).tooltip, "Only visible on Stream")


class GlobalToggleTests(unittest.TestCase):
    def test_toggle_when_idle(self) -> None:
        session = StreamingSession()
        self.assertTrue(toggle_global_selective_recording(session))
        self.assertTrue(session.selective_recording)
        self.assertTrue(toggle_global_selective_recording(session))
        self.assertFalse(session.selective_recording)

    def test_blocked_while_streaming(self) -> None:
        session = StreamingSession()
        session.set_streaming(True)
        self.assertTrue(selective_recording_locked(session))
        self.assertFalse(toggle_global_selective_recording(session))
        self.assertFalse(session.selective_recording)

    def test_blocked_while_replay_buffer_runs(self) -> None:
        session = StreamingSession(selective_recording=True)
        session.set_replay_buffer_active(True)
        self.assertFalse(toggle_global_selective_recording(session))
        self.assertTrue(session.selective_recording)

    def test_unblocked_after_recording_stops(self) -> None:
        session = StreamingSession()
        session.set_recording(True)
        self.assertFalse(toggle_global_selective_recording(session))
        session.set_recording(False)
        self.assertTrue(toggle_global_selective_recording(session))


class NodeCycleTests(unittest.TestCase):
    def test_folder_cycle_is_one_batched_command(self) -> None:
        h = Harness()
        h.item("X").locked = False
        h.controller.cycle_selective_recording("A")
        self.assertEqual(
            h.bus.last(contracts.SET_SELECTIVE_RECORDING),
            (contracts.SET_SELECTIVE_RECORDING, (["X", "Y"], False, True)),
        )
        self.assertFalse(h.item("X").stream_visible)
        self.assertTrue(h.item("Y").recording_visible)
        self.assertFalse(h.controller.view_for("A").is_stream_visible)

    def test_mixed_folder_follows_aggregate(self) -> None:
        h = Harness()
        h.item("X").locked = False
        h.item("X").recording_visible = False
        # aggregate is (stream=True, recording=False): StreamOnly -> Both
        h.controller.cycle_selective_recording("A")
        self.assertTrue(h.item("X").stream_visible and h.item("X").recording_visible)
        self.assertTrue(h.item("Y").stream_visible and h.item("Y").recording_visible)

    def test_locked_item_does_not_cycle(self) -> None:
        h = Harness()
        h.controller.cycle_selective_recording("X")
        self.assertIsNone(h.bus.last(contracts.SET_SELECTIVE_RECORDING))
        self.assertTrue(h.item("X").stream_visible)

    def test_controller_global_toggle(self) -> None:
        h = Harness()
        self.assertTrue(h.controller.toggle_selective_recording())
        self.assertTrue(h.controller.selective_recording_enabled)
        h.session.set_streaming(True)
        self.assertTrue(h.controller.selective_recording_locked)
        self.assertFalse(h.controller.toggle_selective_recording())
        self.assertTrue(h.controller.selective_recording_enabled)


if __name__ == "__main__":
    unittest.main()
