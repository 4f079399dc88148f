# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Blend modes and flattening of the layer stack"""

# Imports:

import unittest

import numpy as np

from minipaint import compositeops
from minipaint import pixbuf
from minipaint.document import Document
from minipaint.layer import ImageLayer
from minipaint.stroke import Stroke

from . import samples


# Helpers:

def _composite_pixel(backdrop, source, mode, opacity=1.0):
    """Composites one non-premultiplied RGBA8 pixel over another"""
    dst = compositeops.buffer_from_rgba8(
        np.array([[backdrop]], dtype=np.uint8))
    src = compositeops.buffer_from_rgba8(
        np.array([[source]], dtype=np.uint8))
    compositeops.composite(dst, src, mode, opacity)
    return compositeops.buffer_to_rgba8(dst)[0, 0].tolist()


# Test cases:

class BlendModes (unittest.TestCase):

    GREY = (128, 128, 128, 255)
    RED = (255, 0, 0, 255)

    def test_normal(self):
        self.assertEqual(
            _composite_pixel(self.GREY, self.RED, "normal"),
            [255, 0, 0, 255],
        )

    def test_normal_half_opacity(self):
        self.assertEqual(
            _composite_pixel((0, 0, 0, 255), (255, 255, 255, 255),
                             "normal", 0.5),
            [128, 128, 128, 255],
        )

    def test_multiply(self):
        self.assertEqual(
            _composite_pixel(self.GREY, self.RED, "multiply"),
            [128, 0, 0, 255],
        )

    def test_screen(self):
        self.assertEqual(
            _composite_pixel(self.GREY, self.RED, "screen"),
            [255, 128, 128, 255],
        )

    def test_overlay(self):
        # Dark backdrop multiplies, light backdrop screens
        self.assertEqual(
            _composite_pixel((64, 192, 0, 255), (128, 128, 255, 255),
                             "overlay"),
            [64, 192, 0, 255],
        )

    def test_transparent_source_changes_nothing(self):
        for mode in ("normal", "multiply", "screen", "overlay"):
            self.assertEqual(
                _composite_pixel(self.GREY, (255, 0, 0, 0), mode),
                list(self.GREY),
            )

    def test_source_over_transparent_backdrop(self):
        for mode in ("normal", "multiply", "screen", "overlay"):
            self.assertEqual(
                _composite_pixel((0, 0, 0, 0), self.RED, mode),
                list(self.RED),
            )


class Flattening (unittest.TestCase):

    def setUp(self):
        self.doc = Document({"canvas.width": 40, "canvas.height": 30})
        self.stack = self.doc.layer_stack

    def tearDown(self):
        self.doc.cleanup()

    def _add_image(self, rgba, x=0, y=0, w=10, h=10, **props):
        layer = ImageLayer(pixels=samples.solid_pixels(w, h, rgba),
                           x=x, y=y, **props)
        self.stack.add_layer(layer)
        return layer

    def test_empty_document_is_background(self):
        pixels = self.doc.render()
        self.assertEqual(pixels.shape, (30, 40, 4))
        self.assertTrue((pixels == 255).all())

    def test_transparent_background(self):
        pixels = self.doc.render(background=None)
        self.assertTrue((pixels[..., 3] == 0).all())

    def test_upper_layers_cover_lower(self):
        self._add_image((255, 0, 0, 255))
        self._add_image((0, 0, 255, 255), x=5)
        pixels = self.doc.render()
        self.assertEqual(pixels[5, 2].tolist(), [255, 0, 0, 255])
        self.assertEqual(pixels[5, 7].tolist(), [0, 0, 255, 255])
        self.assertEqual(pixels[5, 20].tolist(), [255, 255, 255, 255])

    def test_hidden_layers_are_skipped(self):
        layer = self._add_image((255, 0, 0, 255))
        self.doc.set_visibility(layer.id, False)
        self.assertEqual(self.doc.render()[5, 5].tolist(),
                         [255, 255, 255, 255])

    def test_layer_opacity_and_mode(self):
        layer = self._add_image((0, 0, 0, 255))
        self.doc.set_opacity(layer.id, 0.5)
        self.assertEqual(self.doc.render()[5, 5].tolist(),
                         [128, 128, 128, 255])
        self.doc.set_opacity(layer.id, 1.0)
        self.doc.set_blend_mode(layer.id, "screen")
        self.assertEqual(self.doc.render()[5, 5].tolist(),
                         [255, 255, 255, 255])

    def test_eraser_only_affects_own_layer(self):
        base = self.stack[0]
        base.add_stroke(Stroke(points=(5, 15, 35, 15), color="#000000",
                               size=8))
        upper = self.doc.add_layer()
        upper.add_stroke(Stroke(points=(5, 15, 35, 15), color="#ff0000",
                                size=8))
        self.assertEqual(self.doc.render()[15, 20].tolist(),
                         [255, 0, 0, 255])
        upper.add_stroke(Stroke(points=(5, 15, 35, 15), size=8,
                                mode="erase"))
        self.assertEqual(self.doc.render()[15, 20].tolist(),
                         [0, 0, 0, 255])

    def test_strokes_draw_over_image_content(self):
        layer = self._add_image((0, 0, 255, 255), w=40, h=30)
        layer.add_stroke(Stroke(points=(0, 15, 40, 15), color="#00ff00",
                                size=4))
        pixels = self.doc.render()
        self.assertEqual(pixels[15, 20].tolist(), [0, 255, 0, 255])
        self.assertEqual(pixels[2, 20].tolist(), [0, 0, 255, 255])

    def test_resized_image_is_resampled(self):
        layer = self._add_image((255, 0, 0, 255), w=4, h=4)
        self.doc.resize_layer(layer.id, 5, 5)
        pixels = self.doc.render()
        self.assertEqual(pixels[18, 18].tolist(), [255, 0, 0, 255])
        self.assertEqual(pixels[22, 22].tolist(), [255, 255, 255, 255])

    def test_export_png(self):
        self._add_image((255, 0, 0, 255))
        history_len = len(self.doc.history)
        data = self.doc.export_png()
        self.assertTrue(data.startswith(b"\x89PNG"))
        decoded = pixbuf.load_from_bytes(data)
        self.assertTrue(np.array_equal(decoded, self.doc.render()))
        self.assertEqual(len(self.doc.history), history_len)
