"""
History Manager for Undo/Redo

Keeps a strictly linear history of adjustment settings:
- undo stack: past states, most recent last
- live value: the current settings (in neither stack)
- redo stack: undone states, most recently undone last

Any new edit (including a jump to an arbitrary point) pushes the live value
onto the undo stack and discards the redo stack. Settings are immutable
values, so the stacks hold snapshots rather than references to live state.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from PF_Libs.constants import (
    HISTORY_LABEL_CURRENT,
    HISTORY_LABEL_MULTIPLE,
    HISTORY_LABEL_ORIGINAL,
)
from PF_Libs.ImageEditingLib.adjustment_settings import EditorSettings

logger = logging.getLogger(__name__)

POSITION_PAST = "past"
POSITION_CURRENT = "current"
POSITION_FUTURE = "future"


@dataclass(frozen=True)
class HistoryEntry:
    """One row of the history timeline."""
    index: int
    settings: EditorSettings
    label: str
    position: str


class HistoryManager:
    """Undo/redo state machine over EditorSettings snapshots."""

    def __init__(self, initial: Optional[EditorSettings] = None):
        self.current: EditorSettings = initial if initial is not None else EditorSettings()
        self.undo_stack: List[EditorSettings] = []
        self.redo_stack: List[EditorSettings] = []

    def __len__(self) -> int:
        return len(self.undo_stack) + 1 + len(self.redo_stack)

    @property
    def can_undo(self) -> bool:
        return bool(self.undo_stack)

    @property
    def can_redo(self) -> bool:
        return bool(self.redo_stack)

    def reset(self, initial: Optional[EditorSettings] = None) -> None:
        """Forget all history (used when a new image is loaded)."""
        self.current = initial if initial is not None else EditorSettings()
        self.undo_stack.clear()
        self.redo_stack.clear()

    def edit(self, new_settings: EditorSettings) -> None:
        """Make new_settings live; the old live value becomes undoable."""
        self.undo_stack.append(self.current)
        self.redo_stack.clear()  # history is linear: a new edit drops the future
        self.current = new_settings

    def undo(self) -> bool:
        if not self.undo_stack:
            return False
        previous = self.undo_stack.pop()
        self.redo_stack.append(self.current)
        self.current = previous
        return True

    def redo(self) -> bool:
        if not self.redo_stack:
            return False
        following = self.redo_stack.pop()
        self.undo_stack.append(self.current)
        self.current = following
        return True

    def states(self) -> List[EditorSettings]:
        """Timeline order: undo stack, live value, then redo stack newest-undone last."""
        return [*self.undo_stack, self.current, *reversed(self.redo_stack)]

    def jump_to(self, index: int) -> bool:
        """
        Make the timeline entry at index live.

        Treated as an edit: the live value is pushed onto the undo stack and
        the redo stack is cleared. Jumping to the live entry does nothing.
        """
        states = self.states()
        if not 0 <= index < len(states):
            logger.warning(f"jump_to: history index {index} out of range (0-{len(states) - 1})")
            return False
        if index == len(self.undo_stack):
            return False

        self.edit(states[index])
        return True

    def timeline(self) -> List[HistoryEntry]:
        """Describe every history state for display."""
        states = self.states()
        current_index = len(self.undo_stack)
        entries = []
        for index, settings in enumerate(states):
            if index < current_index:
                position = POSITION_PAST
            elif index == current_index:
                position = POSITION_CURRENT
            else:
                position = POSITION_FUTURE
            label = self._label(states, index, current_index)
            entries.append(HistoryEntry(index=index, settings=settings, label=label, position=position))
        return entries

    @staticmethod
    def _label(states: List[EditorSettings], index: int, current_index: int) -> str:
        if index == 0:
            return HISTORY_LABEL_ORIGINAL
        if index == current_index:
            return HISTORY_LABEL_CURRENT

        changes = states[index].changed_fields(states[index - 1])
        if len(changes) == 1:
            return f"Adjusted {changes[0]}"
        if len(changes) > 1:
            return HISTORY_LABEL_MULTIPLE
        return f"Step {index}"
