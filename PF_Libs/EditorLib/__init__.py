"""
EditorLib - Editor document state and controller.
"""

from PF_Libs.EditorLib.editor_document import EditorController, EditorDocument

__all__ = ["EditorController", "EditorDocument"]
