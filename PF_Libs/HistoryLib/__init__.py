"""
HistoryLib - Undo/redo history for adjustment settings.
"""

from PF_Libs.HistoryLib.history_manager import HistoryEntry, HistoryManager

__all__ = ["HistoryEntry", "HistoryManager"]
