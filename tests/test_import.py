# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Background image decoding, import, and document teardown"""

# Imports:

import io
import unittest

from minipaint import pixbuf
from minipaint.document import Document
from minipaint.errors import DecodeFailure
from minipaint.idletask import Processor

from . import samples


# Test cases:

class Decoding (unittest.TestCase):

    def test_load_png(self):
        data = samples.solid_png(3, 2, (1, 2, 3, 4))
        pixels = pixbuf.load_from_bytes(data)
        self.assertEqual(pixels.shape, (2, 3, 4))
        self.assertEqual(pixels[1, 2].tolist(), [1, 2, 3, 4])

    def test_load_garbage(self):
        with self.assertRaises(DecodeFailure):
            pixbuf.load_from_bytes(samples.GARBAGE_DATA)
        with self.assertRaises(DecodeFailure):
            pixbuf.load_from_bytes(b"")

    def test_load_from_stream(self):
        data = samples.solid_png(5, 5, (9, 9, 9, 255))
        progress = []
        pixels = pixbuf.load_from_stream(io.BytesIO(data),
                                         lambda: progress.append(1))
        self.assertEqual(pixels.shape, (5, 5, 4))
        self.assertTrue(progress)


class Import (unittest.TestCase):

    def setUp(self):
        self.doc = Document()

    def tearDown(self):
        self.doc.cleanup()

    def test_import_adds_image_layer(self):
        data = samples.solid_png(20, 10, (0, 255, 0, 255))
        future = self.doc.import_image(data, name="green.png")
        self.assertIsNotNone(future)
        self.assertTrue(self.doc.finish_pending())
        stack = self.doc.layer_stack
        self.assertEqual(len(stack), 2)
        layer = stack[1]
        self.assertEqual(layer.kind, "image")
        self.assertEqual(layer.name, "green.png")
        self.assertEqual((layer.x, layer.y), (50.0, 50.0))
        self.assertEqual((layer.width, layer.height), (20.0, 10.0))
        self.assertEqual(stack.current_id, layer.id)
        self.assertEqual(len(self.doc.history), 2)
        self.assertEqual(self.doc.history.undo_label, "Import Image")
        self.assertEqual(self.doc.render()[55, 55].tolist(),
                         [0, 255, 0, 255])

    def test_import_waits_for_main_loop(self):
        data = samples.solid_png(2, 2, (0, 0, 0, 255))
        future = self.doc.import_image(data)
        future.result(timeout=10)
        self.assertEqual(len(self.doc.layer_stack), 1)
        self.doc.process_pending()
        self.assertEqual(len(self.doc.layer_stack), 2)

    def test_import_offset_from_config(self):
        doc = Document({"image.import_offset": (0, 5)})
        try:
            doc.import_image(samples.solid_png(2, 2, (0, 0, 0, 255)))
            doc.finish_pending()
            layer = doc.layer_stack[1]
            self.assertEqual((layer.x, layer.y), (0.0, 5.0))
        finally:
            doc.cleanup()

    def test_decode_failure_changes_nothing(self):
        before = self.doc.layer_stack.save_snapshot()
        with self.assertLogs("minipaint.document", level="WARNING"):
            self.doc.import_image(samples.GARBAGE_DATA, name="junk.png")
            self.doc.finish_pending()
        self.assertEqual(len(self.doc.layer_stack), 1)
        self.assertEqual(len(self.doc.history), 1)
        self.assertEqual(self.doc.layer_stack.save_snapshot(), before)

    def test_import_is_undoable(self):
        self.doc.import_image(samples.solid_png(2, 2, (0, 0, 0, 255)))
        self.doc.finish_pending()
        self.assertTrue(self.doc.undo())
        self.assertEqual(len(self.doc.layer_stack), 1)

    def test_imports_stack_in_completion_order(self):
        names = ["a.png", "b.png", "c.png"]
        for name in names:
            self.doc.import_image(samples.solid_png(2, 2, (0, 0, 0, 255)),
                                  name=name)
            self.doc.finish_pending()
        self.assertEqual([l.name for l in self.doc.layer_stack][1:], names)


class Teardown (unittest.TestCase):

    def test_completion_after_cleanup_is_discarded(self):
        doc = Document()
        future = doc.import_image(samples.solid_png(2, 2, (0, 0, 0, 255)))
        doc.cleanup()
        future.result(timeout=10)
        self.assertFalse(doc.process_pending())
        self.assertEqual(len(doc.layer_stack), 1)
        self.assertEqual(len(doc.history), 1)
        self.assertTrue(doc.closed)

    def test_no_work_after_cleanup(self):
        doc = Document()
        doc.cleanup()
        self.assertIsNone(doc.import_image(samples.GARBAGE_DATA))
        self.assertFalse(doc.add_layer())
        self.assertEqual(len(doc.layer_stack), 1)
        # Cleaning up twice is harmless
        doc.cleanup()


class TaskQueue (unittest.TestCase):

    def test_tasks_run_in_order(self):
        p = Processor()
        seen = []
        for i in range(3):
            p.add_work(seen.append, i)
        self.assertTrue(p.process())
        self.assertEqual(seen, [0])
        p.finish_all()
        self.assertEqual(seen, [0, 1, 2])
        self.assertFalse(p.has_work())

    def test_stopped_queue_drops_work(self):
        p = Processor()
        seen = []
        p.add_work(seen.append, 1)
        p.stop()
        self.assertTrue(p.stopped)
        p.add_work(seen.append, 2)
        self.assertFalse(p.has_work())
        p.finish_all()
        self.assertEqual(seen, [])
