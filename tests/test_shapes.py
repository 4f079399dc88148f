# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Shape layers: creation, moving and resizing"""

# Imports:

import unittest

from minipaint.document import Document
from minipaint.layer import ImageLayer
from minipaint.layer import ShapeLayer
from minipaint.shapetool import ShapeMode


# Test cases:

class Creation (unittest.TestCase):

    def setUp(self):
        self.doc = Document()
        self.mode = ShapeMode(self.doc)

    def tearDown(self):
        self.doc.cleanup()

    def test_click_creates_rectangle(self):
        self.doc.tools.tool = "rect"
        self.doc.tools.color = "#0000ff"
        self.doc.view.scale = 2.0
        layer = self.mode.button_press_cb(100, 60)
        self.assertIsInstance(layer, ShapeLayer)
        self.assertEqual(layer.shape_type, "rect")
        self.assertEqual((layer.x, layer.y), (50.0, 30.0))
        self.assertEqual((layer.width, layer.height), (100.0, 100.0))
        self.assertEqual(layer.stroke, "#0000ff")
        self.assertEqual(layer.stroke_width, 6.0)
        self.assertIsNone(layer.fill)
        self.assertEqual(self.doc.layer_stack.current_id, layer.id)
        self.assertEqual(self.doc.history.undo_label, "Add Rectangle")

    def test_default_geometry(self):
        ellipse = self.doc.create_shape("ellipse", (0, 0))
        self.assertEqual((ellipse.radius_x, ellipse.radius_y), (50.0, 50.0))
        line = self.doc.create_shape("line", (0, 0))
        self.assertEqual(line.points, (0.0, 0.0, 100.0, 0.0))

    def test_configured_default_size(self):
        doc = Document({"shape.default_size": 40})
        try:
            rect = doc.create_shape("rect", (0, 0))
            self.assertEqual((rect.width, rect.height), (40.0, 40.0))
        finally:
            doc.cleanup()

    def test_unknown_shape_type(self):
        self.assertIsNone(self.doc.create_shape("star", (0, 0)))
        self.assertEqual(len(self.doc.layer_stack), 1)
        self.assertEqual(len(self.doc.history), 1)

    def test_freehand_tool_does_not_create_shapes(self):
        self.doc.tools.tool = "brush"
        self.assertIsNone(self.mode.button_press_cb(10, 10))
        self.assertEqual(len(self.doc.layer_stack), 1)

    def test_rendered_outline(self):
        self.doc.create_shape("rect", (10, 10))
        pixels = self.doc.render()
        # Left edge is outlined, the inside shows the background
        self.assertEqual(pixels[60, 10].tolist(), [0, 0, 0, 255])
        self.assertEqual(pixels[60, 60].tolist(), [255, 255, 255, 255])


class Transforms (unittest.TestCase):

    def setUp(self):
        self.doc = Document()

    def tearDown(self):
        self.doc.cleanup()

    def test_move(self):
        rect = self.doc.create_shape("rect", (10, 10))
        self.assertTrue(self.doc.move_layer(rect.id, (30, 45)))
        self.assertEqual((rect.x, rect.y), (30.0, 45.0))
        self.assertFalse(self.doc.move_layer(rect.id, (30, 45)))
        self.assertTrue(self.doc.undo())
        self.assertEqual((rect.x, rect.y), (10.0, 10.0))

    def test_raster_layers_do_not_move(self):
        base_id = self.doc.layer_stack[0].id
        self.assertFalse(self.doc.move_layer(base_id, (30, 45)))
        self.assertFalse(self.doc.resize_layer(base_id, 2, 2))
        self.assertEqual(len(self.doc.history), 1)

    def test_resize_rect(self):
        rect = self.doc.create_shape("rect", (0, 0))
        self.assertTrue(self.doc.resize_layer(rect.id, 2.0, 0.5))
        self.assertEqual((rect.width, rect.height), (200.0, 50.0))

    def test_resize_has_minimum(self):
        rect = self.doc.create_shape("rect", (0, 0))
        self.assertTrue(self.doc.resize_layer(rect.id, 0.001, 0.001))
        self.assertEqual((rect.width, rect.height), (5.0, 5.0))
        self.assertTrue(self.doc.undo())
        self.assertEqual((rect.width, rect.height), (100.0, 100.0))

    def test_resize_ellipse_has_minimum(self):
        ellipse = self.doc.create_shape("ellipse", (50, 50))
        self.doc.resize_layer(ellipse.id, 0.01, 3.0)
        self.assertEqual((ellipse.radius_x, ellipse.radius_y), (5.0, 150.0))

    def test_resize_line(self):
        line = self.doc.create_shape("line", (0, 0))
        self.doc.resize_layer(line.id, 0.01, 3.0)
        # The flat vertical axis is left as it is
        self.assertEqual(line.points, (0.0, 0.0, 5.0, 0.0))

    def test_transient_scale_is_folded_in(self):
        rect = self.doc.create_shape("rect", (0, 0))
        rect.set_transient_scale(2.0, 1.0)
        self.assertEqual(rect.get_base_bbox().w, 206)
        self.doc.resize_layer(rect.id, 1.0, 1.0)
        self.assertEqual((rect.width, rect.height), (200.0, 100.0))
        self.assertEqual((rect.scale_x, rect.scale_y), (1.0, 1.0))

    def test_merge_shape_into_raster(self):
        rect = self.doc.create_shape("rect", (10, 10))
        self.assertTrue(self.doc.merge_down(rect.id))
        merged = self.doc.layer_stack[0]
        self.assertIsInstance(merged, ImageLayer)
        self.assertTrue(merged.is_base)
        # Outline is 6px wide, centred on the edges
        self.assertEqual((merged.x, merged.y), (7.0, 7.0))
        self.assertEqual(merged.pixels.shape, (106, 106, 4))
        self.assertEqual(merged.pixels[53, 3].tolist(), [0, 0, 0, 255])
        self.assertEqual(merged.pixels[53, 53, 3], 0)
