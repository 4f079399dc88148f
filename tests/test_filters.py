# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Image filters, directly and as background document edits"""

# Imports:

import unittest

import numpy as np

from minipaint import filters
from minipaint.document import Document
from minipaint.layer import ImageLayer

from . import samples


# Test cases:

class FilterFunctions (unittest.TestCase):

    def setUp(self):
        self.pixels = np.array([
            [[100, 150, 200, 77], [0, 0, 0, 255]],
            [[255, 255, 255, 0], [12, 34, 56, 128]],
        ], dtype=np.uint8)

    def test_grayscale(self):
        out = filters.apply_filter(self.pixels, "grayscale")
        self.assertEqual(out[0, 0].tolist(), [143, 143, 143, 77])
        self.assertTrue((out[..., 0] == out[..., 1]).all())
        self.assertTrue((out[..., 1] == out[..., 2]).all())

    def test_sepia(self):
        out = filters.apply_filter(self.pixels, "sepia")
        self.assertEqual(out[1, 0].tolist(), [255, 255, 239, 0])
        self.assertEqual(out[0, 1].tolist(), [0, 0, 0, 255])

    def test_invert_twice_is_identity(self):
        once = filters.apply_filter(self.pixels, "invert")
        self.assertEqual(once[0, 0].tolist(), [155, 105, 55, 77])
        twice = filters.apply_filter(once, "invert")
        self.assertTrue(np.array_equal(twice, self.pixels))

    def test_alpha_untouched(self):
        for kind in filters.FILTERS:
            out = filters.apply_filter(self.pixels, kind)
            self.assertTrue(np.array_equal(out[..., 3], self.pixels[..., 3]))

    def test_input_unchanged(self):
        before = self.pixels.copy()
        filters.apply_filter(self.pixels, "sepia")
        self.assertTrue(np.array_equal(before, self.pixels))

    def test_unknown_filter(self):
        with self.assertRaises(KeyError):
            filters.apply_filter(self.pixels, "blur")

    def test_bad_shape(self):
        with self.assertRaises(ValueError):
            filters.apply_filter(np.zeros((2, 2, 3), dtype=np.uint8),
                                 "invert")


class DocumentFilters (unittest.TestCase):

    def setUp(self):
        self.doc = Document()
        pixels = samples.solid_pixels(4, 3, (100, 150, 200, 255))
        self.image = ImageLayer(pixels=pixels, name="Photo")
        self.doc.layer_stack.add_layer(self.image)
        self.history_len = len(self.doc.history)

    def tearDown(self):
        self.doc.cleanup()

    def test_filter_replaces_pixels(self):
        future = self.doc.apply_filter(self.image.id, "grayscale")
        self.assertIsNotNone(future)
        self.assertTrue(self.doc.finish_pending())
        self.assertEqual(self.image.pixels[0, 0].tolist(),
                         [143, 143, 143, 255])
        self.assertEqual(len(self.doc.history), self.history_len + 1)
        self.assertEqual(self.doc.history.undo_label, "Grayscale")

    def test_filter_is_undoable(self):
        original = self.image.pixels
        self.doc.apply_filter(self.image.id, "invert")
        self.doc.finish_pending()
        self.assertFalse(np.array_equal(self.image.pixels, original))
        self.doc.undo()
        self.assertTrue(np.array_equal(self.image.pixels, original))

    def test_result_waits_for_main_loop(self):
        future = self.doc.apply_filter(self.image.id, "invert")
        future.result(timeout=10)
        # Computed, but not applied yet
        self.assertEqual(self.image.pixels[0, 0].tolist(),
                         [100, 150, 200, 255])
        self.assertTrue(self.doc.process_pending())
        self.assertEqual(self.image.pixels[0, 0].tolist(),
                         [155, 105, 55, 255])
        self.assertFalse(self.doc.process_pending())

    def test_raster_layers_are_not_filtered(self):
        base_id = self.doc.layer_stack[0].id
        self.assertIsNone(self.doc.apply_filter(base_id, "grayscale"))
        self.doc.finish_pending()
        self.assertEqual(len(self.doc.history), self.history_len)

    def test_unknown_filter_is_ignored(self):
        self.assertIsNone(self.doc.apply_filter(self.image.id, "blur"))
        self.assertIsNone(self.doc.apply_filter("no-such-layer", "invert"))
        self.assertEqual(len(self.doc.history), self.history_len)

    def test_result_for_deleted_layer_is_dropped(self):
        self.doc.apply_filter(self.image.id, "sepia")
        self.assertTrue(self.doc.delete_layer(self.image.id))
        self.doc.finish_pending()
        self.assertNotIn(self.image.id, self.doc.layer_stack)
        self.assertEqual(len(self.doc.history), self.history_len + 1)

    def test_result_for_merged_layer_is_dropped(self):
        raster = self.doc.add_layer(name="Below")
        self.doc.reorder_layer(raster.id, "down")
        self.doc.apply_filter(self.image.id, "invert")
        # Merging down into the raster layer keeps the raster layer's id
        self.doc.merge_down(self.image.id)
        history_len = len(self.doc.history)
        self.doc.finish_pending()
        self.assertNotIn(self.image.id, self.doc.layer_stack)
        self.assertEqual(len(self.doc.history), history_len)

    def test_last_writer_wins(self):
        self.doc.apply_filter(self.image.id, "invert")
        self.doc.finish_pending()
        self.doc.apply_filter(self.image.id, "grayscale")
        self.doc.finish_pending()
        # grayscale of (155, 105, 55)
        self.assertEqual(self.image.pixels[0, 0].tolist(),
                         [112, 112, 112, 255])
