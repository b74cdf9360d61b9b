"""
LayersLib - Layer stack management and compositing.
"""

from PF_Libs.LayersLib.layer_stack import Layer, LayerStack, LayerCompositor

__all__ = ["Layer", "LayerStack", "LayerCompositor"]
