"""
PF_Libs - PixelForge Library Modules

This package contains core functionality for the PixelForge image editor,
organized into specialized sub-packages:

- ImageEditingLib: Pixel buffer helpers, adjustment settings and filters
- PipelineLib: Render stage registry and the non-destructive compositor
- LayersLib: Layer stack and multi-layer blending
- HistoryLib: Linear undo/redo over adjustment settings
- ProjStoreLib: Project persistence in key-value stores
- EditorLib: Editor document state and the controller that drives it
"""

__version__ = "0.1.0"
