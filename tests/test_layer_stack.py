"""
Tests for the layer stack and multi-layer compositor.

Tests cover:
- Layer configuration and clamping
- Stack structure operations (add, duplicate, delete, reorder)
- Property updates and unknown ids
- Serialization
- Compositing with opacity, visibility and blend modes
"""

import unittest

from PIL import Image

from PF_Libs.constants import INITIAL_LAYER_ID, INITIAL_LAYER_NAME
from PF_Libs.LayersLib.layer_stack import (
    Layer,
    LayerCompositor,
    LayerStack,
    clamp_opacity,
)


class TestLayer(unittest.TestCase):
    """Test Layer configuration."""

    def test_defaults(self):
        layer = Layer(layer_id="layer-a", name="A")

        self.assertTrue(layer.visible)
        self.assertEqual(layer.opacity, 100.0)
        self.assertEqual(layer.blend_mode, "normal")
        self.assertFalse(layer.locked)

    def test_opacity_clamped(self):
        self.assertEqual(Layer(layer_id="a", name="A", opacity=150).opacity, 100.0)
        self.assertEqual(Layer(layer_id="a", name="A", opacity=-5).opacity, 0.0)
        self.assertEqual(clamp_opacity("half"), 100.0)

    def test_unknown_blend_mode_falls_back(self):
        layer = Layer(layer_id="a", name="A", blend_mode="dissolve")
        self.assertEqual(layer.blend_mode, "normal")

    def test_to_dict_excludes_image(self):
        layer = Layer(layer_id="a", name="A", image=Image.new("RGBA", (2, 2)))
        data = layer.to_dict()

        self.assertNotIn("image", data)
        self.assertEqual(data["layer_id"], "a")

    def test_from_dict_round_trip(self):
        layer = Layer(layer_id="a", name="A", visible=False, opacity=40, blend_mode="screen", locked=True)
        self.assertEqual(Layer.from_dict(layer.to_dict()), layer)

    def test_from_dict_fills_missing_fields(self):
        layer = Layer.from_dict({"opacity": 20, "extra": True})

        self.assertTrue(layer.layer_id.startswith("layer-"))
        self.assertEqual(layer.opacity, 20.0)


class TestLayerStack(unittest.TestCase):
    """Test LayerStack structure operations."""

    def setUp(self):
        self.stack = LayerStack()
        self.background = self.stack.reset()

    def test_reset_creates_background(self):
        self.assertEqual(len(self.stack), 1)
        self.assertEqual(self.background.layer_id, INITIAL_LAYER_ID)
        self.assertEqual(self.background.name, INITIAL_LAYER_NAME)
        self.assertEqual(self.stack.active_id, INITIAL_LAYER_ID)

    def test_add_layer_on_top_and_active(self):
        added = self.stack.add_layer()

        self.assertEqual(self.stack.layers[-1], added)
        self.assertEqual(added.name, "Layer 2")
        self.assertEqual(self.stack.active_layer, added)

    def test_layer_ids_unique(self):
        ids = {self.stack.add_layer().layer_id for _ in range(20)}
        self.assertEqual(len(ids), 20)

    def test_duplicate_inserted_above_source(self):
        top = self.stack.add_layer("Top")
        self.stack.set_opacity(self.background.layer_id, 30)

        copy = self.stack.duplicate_layer(self.background.layer_id)

        self.assertEqual([layer.name for layer in self.stack.layers], ["Background", "Background Copy", "Top"])
        self.assertNotEqual(copy.layer_id, self.background.layer_id)
        self.assertEqual(copy.opacity, 30.0)
        self.assertEqual(self.stack.active_id, top.layer_id)

    def test_duplicate_unknown_returns_none(self):
        self.assertIsNone(self.stack.duplicate_layer("missing"))
        self.assertEqual(len(self.stack), 1)

    def test_delete_only_layer_is_noop(self):
        self.assertFalse(self.stack.delete_layer(self.background.layer_id))
        self.assertEqual(len(self.stack), 1)

    def test_delete_active_activates_bottom(self):
        added = self.stack.add_layer()

        self.assertTrue(self.stack.delete_layer(added.layer_id))
        self.assertEqual(self.stack.active_id, self.background.layer_id)

    def test_delete_inactive_keeps_active(self):
        middle = self.stack.add_layer("Middle")
        top = self.stack.add_layer("Top")

        self.assertTrue(self.stack.delete_layer(middle.layer_id))
        self.assertEqual(self.stack.active_id, top.layer_id)

    def test_delete_unknown_returns_false(self):
        self.stack.add_layer()
        self.assertFalse(self.stack.delete_layer("missing"))
        self.assertEqual(len(self.stack), 2)

    def test_reorder_moves_to_target_position(self):
        a = self.stack.add_layer("A")
        b = self.stack.add_layer("B")

        self.assertTrue(self.stack.reorder(b.layer_id, self.background.layer_id))
        self.assertEqual([layer.name for layer in self.stack.layers], ["B", "Background", "A"])

        self.assertTrue(self.stack.reorder(b.layer_id, a.layer_id))
        self.assertEqual([layer.name for layer in self.stack.layers], ["Background", "A", "B"])

    def test_reorder_same_or_unknown_is_noop(self):
        a = self.stack.add_layer("A")

        self.assertFalse(self.stack.reorder(a.layer_id, a.layer_id))
        self.assertFalse(self.stack.reorder(a.layer_id, "missing"))
        self.assertEqual([layer.name for layer in self.stack.layers], ["Background", "A"])

    def test_property_updates(self):
        layer_id = self.background.layer_id

        self.assertTrue(self.stack.set_visible(layer_id, False))
        self.assertTrue(self.stack.set_opacity(layer_id, 250))
        self.assertTrue(self.stack.set_blend_mode(layer_id, "multiply"))
        self.assertTrue(self.stack.set_locked(layer_id, True))
        self.assertTrue(self.stack.rename(layer_id, "  Base  "))

        layer = self.stack.get(layer_id)
        self.assertFalse(layer.visible)
        self.assertEqual(layer.opacity, 100.0)
        self.assertEqual(layer.blend_mode, "multiply")
        self.assertTrue(layer.locked)
        self.assertEqual(layer.name, "Base")

    def test_locked_layer_still_editable(self):
        self.stack.set_locked(self.background.layer_id, True)
        self.assertTrue(self.stack.set_opacity(self.background.layer_id, 50))

    def test_invalid_updates_rejected(self):
        self.assertFalse(self.stack.set_blend_mode(self.background.layer_id, "dissolve"))
        self.assertFalse(self.stack.rename(self.background.layer_id, "   "))
        self.assertFalse(self.stack.set_visible("missing", True))
        self.assertFalse(self.stack.set_active("missing"))
        self.assertEqual(self.background.blend_mode, "normal")

    def test_list_round_trip(self):
        self.stack.add_layer("Top")
        self.stack.set_blend_mode(self.stack.layers[1].layer_id, "overlay")

        restored = LayerStack.from_list(self.stack.to_list())

        self.assertEqual(restored.layers, self.stack.layers)
        self.assertEqual(restored.active_id, self.background.layer_id)

    def test_from_list_skips_malformed(self):
        restored = LayerStack.from_list([{"layer_id": "a", "name": "A"}, "junk", 3])
        self.assertEqual(len(restored), 1)


class TestLayerCompositor(unittest.TestCase):
    """Test LayerCompositor."""

    def setUp(self):
        self.base = Image.new("RGBA", (4, 4), (200, 100, 50, 255))

    def test_single_background_is_identity(self):
        stack = LayerStack()
        stack.reset()

        result = LayerCompositor.composite_layers(self.base, stack.layers)

        self.assertEqual(list(result.getdata()), list(self.base.getdata()))

    def test_hidden_layer_contributes_nothing(self):
        overlay = Layer(layer_id="o", name="O", visible=False, image=Image.new("RGBA", (4, 4), (0, 0, 255, 255)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.getpixel((0, 0)), (200, 100, 50, 255))

    def test_normal_layer_with_opacity(self):
        overlay = Layer(layer_id="o", name="O", opacity=50, image=Image.new("RGBA", (4, 4), (0, 0, 250, 255)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.getpixel((0, 0)), (100, 50, 150, 255))

    def test_zero_opacity_is_identity(self):
        overlay = Layer(layer_id="o", name="O", opacity=0, image=Image.new("RGBA", (4, 4), (0, 0, 250, 255)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.getpixel((0, 0)), (200, 100, 50, 255))

    def test_transparent_layer_pixels_ignored(self):
        overlay = Layer(layer_id="o", name="O", image=Image.new("RGBA", (4, 4), (0, 0, 0, 0)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.getpixel((0, 0)), (200, 100, 50, 255))

    def test_multiply_layer(self):
        overlay = Layer(layer_id="o", name="O", blend_mode="multiply", image=Image.new("RGBA", (4, 4), (255, 0, 255, 255)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.getpixel((0, 0)), (200, 0, 50, 255))

    def test_layer_without_pixels_stands_for_base(self):
        layers = [
            Layer(layer_id="a", name="A"),
            Layer(layer_id="b", name="B", blend_mode="screen"),
        ]
        result = LayerCompositor.composite_layers(self.base, layers)

        r, g, b, a = result.getpixel((0, 0))
        self.assertGreater(r, 200)
        self.assertGreater(g, 100)
        self.assertEqual(a, 255)

    def test_bottom_layer_blend_mode_has_nothing_to_blend(self):
        grey = Image.new("RGBA", (4, 4), (128, 128, 128, 255))
        for mode in ("multiply", "screen", "color-burn"):
            background = Layer(layer_id="a", name="Background", blend_mode=mode)
            result = LayerCompositor.composite_layers(grey, [background])

            self.assertEqual(result.getpixel((0, 0)), (128, 128, 128, 255))

    def test_bottom_layer_visibility_matches_hidden(self):
        shown = Layer(layer_id="a", name="Background", blend_mode="multiply", opacity=40)
        hidden = Layer(layer_id="a", name="Background", blend_mode="multiply", visible=False)

        self.assertEqual(
            list(LayerCompositor.composite_layers(self.base, [shown]).getdata()),
            list(LayerCompositor.composite_layers(self.base, [hidden]).getdata()),
        )

    def test_layer_resized_to_base(self):
        overlay = Layer(layer_id="o", name="O", image=Image.new("RGBA", (2, 2), (0, 255, 0, 255)))
        result = LayerCompositor.composite_layers(self.base, [overlay])

        self.assertEqual(result.size, (4, 4))
        self.assertEqual(result.getpixel((3, 3)), (0, 255, 0, 255))

    def test_non_image_raises(self):
        with self.assertRaises(TypeError):
            LayerCompositor.composite_layers("not an image", [])


if __name__ == "__main__":
    unittest.main()
