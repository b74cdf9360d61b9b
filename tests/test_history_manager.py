"""
Tests for the linear undo/redo history.

Tests cover:
- Edit, undo and redo transitions
- Redo invalidation on new edits
- Jumping to timeline entries
- Timeline labels and positions
"""

import unittest

from PF_Libs.HistoryLib.history_manager import (
    POSITION_CURRENT,
    POSITION_FUTURE,
    POSITION_PAST,
    HistoryManager,
)
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings


def settings(**values):
    return EditorSettings(**values)


class TestHistoryTransitions(unittest.TestCase):
    """Test edit/undo/redo."""

    def setUp(self):
        self.history = HistoryManager()

    def test_initial_state(self):
        self.assertEqual(self.history.current, EditorSettings())
        self.assertFalse(self.history.can_undo)
        self.assertFalse(self.history.can_redo)
        self.assertEqual(len(self.history), 1)

    def test_undo_on_empty_history_is_noop(self):
        self.assertFalse(self.history.undo())
        self.assertFalse(self.history.redo())
        self.assertEqual(self.history.current, EditorSettings())

    def test_edit_undo_redo(self):
        self.history.edit(settings(brightness=10))
        self.history.edit(settings(brightness=20))

        self.assertTrue(self.history.undo())
        self.assertEqual(self.history.current.brightness, 10.0)
        self.assertTrue(self.history.can_redo)

        self.assertTrue(self.history.redo())
        self.assertEqual(self.history.current.brightness, 20.0)
        self.assertFalse(self.history.can_redo)

    def test_two_edit_scenario(self):
        self.history.edit(settings(brightness=10))
        self.history.edit(settings(brightness=10, contrast=20))

        self.history.undo()
        self.assertEqual(self.history.current, settings(brightness=10))

        self.history.undo()
        self.assertEqual(self.history.current, EditorSettings())

        self.history.redo()
        self.assertEqual(self.history.current, settings(brightness=10))

    def test_undo_redo_round_trip(self):
        states = [settings(contrast=value) for value in (5, 10, 15)]
        for state in states:
            self.history.edit(state)

        for _ in states:
            self.history.undo()
        self.assertEqual(self.history.current, EditorSettings())

        for _ in states:
            self.history.redo()
        self.assertEqual(self.history.current, states[-1])

    def test_new_edit_clears_redo(self):
        self.history.edit(settings(brightness=10))
        self.history.edit(settings(brightness=20))
        self.history.undo()

        self.history.edit(settings(saturation=-50))

        self.assertFalse(self.history.can_redo)
        self.assertFalse(self.history.redo())
        self.assertEqual(self.history.current.saturation, -50.0)
        self.assertEqual(len(self.history), 3)

    def test_reset(self):
        self.history.edit(settings(hue=10))
        self.history.reset(settings(hue=50))

        self.assertEqual(self.history.current.hue, 50.0)
        self.assertEqual(len(self.history), 1)


class TestJumpTo(unittest.TestCase):
    """Test jumping to timeline entries."""

    def setUp(self):
        self.history = HistoryManager()
        for value in (10, 20, 30):
            self.history.edit(settings(brightness=value))

    def test_jump_is_an_edit(self):
        self.assertTrue(self.history.jump_to(1))

        self.assertEqual(self.history.current.brightness, 10.0)
        self.assertEqual(self.history.undo_stack[-1].brightness, 30.0)
        self.assertFalse(self.history.can_redo)

    def test_jump_then_undo_returns(self):
        self.history.jump_to(0)
        self.history.undo()

        self.assertEqual(self.history.current.brightness, 30.0)

    def test_jump_into_redo_entries(self):
        self.history.undo()
        self.history.undo()

        self.assertTrue(self.history.jump_to(3))
        self.assertEqual(self.history.current.brightness, 30.0)
        self.assertFalse(self.history.can_redo)

    def test_jump_to_current_is_noop(self):
        size = len(self.history)
        self.assertFalse(self.history.jump_to(3))
        self.assertEqual(len(self.history), size)

    def test_jump_out_of_range(self):
        self.assertFalse(self.history.jump_to(-1))
        self.assertFalse(self.history.jump_to(10))
        self.assertEqual(self.history.current.brightness, 30.0)


class TestTimeline(unittest.TestCase):
    """Test timeline descriptions."""

    def test_labels_and_positions(self):
        history = HistoryManager()
        history.edit(settings(brightness=10))
        history.edit(settings(brightness=10, contrast=5, hue=20))
        history.edit(settings(brightness=10, contrast=5, hue=20, tint=3))
        history.undo()

        timeline = history.timeline()

        self.assertEqual([entry.label for entry in timeline], [
            "Original",
            "Adjusted brightness",
            "Current",
            "Adjusted tint",
        ])
        self.assertEqual([entry.position for entry in timeline], [
            POSITION_PAST,
            POSITION_PAST,
            POSITION_CURRENT,
            POSITION_FUTURE,
        ])
        self.assertEqual([entry.index for entry in timeline], [0, 1, 2, 3])

    def test_multiple_and_unchanged_labels(self):
        history = HistoryManager()
        history.edit(settings(contrast=5, hue=20))
        history.edit(settings(contrast=5, hue=20))
        history.edit(settings(vignette=10))

        labels = [entry.label for entry in history.timeline()]

        self.assertEqual(labels, ["Original", "Multiple adjustments", "Step 2", "Current"])


if __name__ == "__main__":
    unittest.main()
