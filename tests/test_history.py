# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Undo history, standalone and through the document"""

# Imports:

import unittest

from minipaint.document import Document
from minipaint.history import History


# Test cases:

class Standalone (unittest.TestCase):
    """The history with plain values standing in for snapshots"""

    def test_initial(self):
        h = History("s0", label="start")
        self.assertEqual(len(h), 1)
        self.assertEqual(h.current, "s0")
        self.assertIsNone(h.undo())
        self.assertIsNone(h.redo())
        self.assertIsNone(h.undo_label)

    def test_undo_then_redo(self):
        h = History("s0")
        h.push("s1", "one")
        h.push("s2", "two")
        self.assertEqual(h.undo_label, "two")
        self.assertEqual(h.undo(), "s1")
        self.assertEqual(h.redo_label, "two")
        self.assertEqual(h.undo(), "s0")
        self.assertIsNone(h.undo())
        self.assertEqual(h.redo(), "s1")
        self.assertEqual(h.redo(), "s2")
        self.assertIsNone(h.redo())

    def test_push_truncates_redo(self):
        h = History("s0")
        h.push("s1")
        h.push("s2")
        h.undo()
        h.undo()
        h.push("s3")
        self.assertEqual(len(h), 2)
        self.assertEqual(h.current, "s3")
        self.assertFalse(h.can_redo)
        self.assertEqual(h.undo(), "s0")

    def test_max_size(self):
        h = History("s0", max_size=3)
        for i in range(1, 6):
            h.push("s%d" % i)
        self.assertEqual(len(h), 3)
        self.assertEqual(h.current, "s5")
        self.assertEqual(h.undo(), "s4")
        self.assertEqual(h.undo(), "s3")
        self.assertIsNone(h.undo())

    def test_bad_max_size(self):
        with self.assertRaises(ValueError):
            History("s0", max_size=0)

    def test_clear(self):
        h = History("s0")
        h.push("s1")
        h.clear("t0")
        self.assertEqual(len(h), 1)
        self.assertEqual(h.current, "t0")

    def test_stack_updated_event(self):
        h = History("s0")
        calls = []
        h.stack_updated += lambda history: calls.append(history.index)
        h.push("s1")
        h.undo()
        h.redo()
        self.assertEqual(calls, [1, 0, 1])


class DocumentHistory (unittest.TestCase):

    def setUp(self):
        self.doc = Document()
        self.stack = self.doc.layer_stack

    def tearDown(self):
        self.doc.cleanup()

    def test_undo_restores_previous_state(self):
        s0 = self.stack.save_snapshot()
        layer = self.doc.add_layer(name="A")
        self.doc.set_opacity(layer.id, 0.5)
        s2 = self.stack.save_snapshot()
        self.assertTrue(self.doc.undo())
        self.assertTrue(self.doc.undo())
        self.assertEqual(self.stack.save_snapshot(), s0)
        self.assertFalse(self.doc.undo())
        self.assertTrue(self.doc.redo())
        self.assertTrue(self.doc.redo())
        self.assertEqual(self.stack.save_snapshot(), s2)
        self.assertFalse(self.doc.redo())

    def test_undo_each_edit_in_turn(self):
        snapshots = [self.stack.save_snapshot()]
        a = self.doc.add_layer(name="A")
        snapshots.append(self.stack.save_snapshot())
        b = self.doc.add_layer(name="B")
        snapshots.append(self.stack.save_snapshot())
        self.doc.reorder_layer(b.id, "down")
        snapshots.append(self.stack.save_snapshot())
        self.doc.set_blend_mode(a.id, "screen")
        snapshots.append(self.stack.save_snapshot())
        self.doc.merge_up(self.stack[0].id)
        snapshots.append(self.stack.save_snapshot())
        self.assertEqual(len(self.doc.history), len(snapshots))
        for expected in reversed(snapshots[:-1]):
            self.assertTrue(self.doc.undo())
            self.assertEqual(self.stack.save_snapshot(), expected)

    def test_edit_after_undo_discards_redo(self):
        self.doc.add_layer(name="A")
        self.doc.undo()
        self.doc.add_layer(name="B")
        self.assertFalse(self.doc.history.can_redo)
        self.assertEqual([l.name for l in self.stack], ["Background", "B"])

    def test_configured_limit(self):
        doc = Document({"history.max_size": 2})
        try:
            for i in range(4):
                doc.add_layer()
            self.assertEqual(len(doc.history), 2)
            self.assertTrue(doc.undo())
            self.assertFalse(doc.undo())
            self.assertEqual(len(doc.layer_stack), 4)
        finally:
            doc.cleanup()

    def test_current_layer_restored(self):
        a = self.doc.add_layer(name="A")
        self.doc.add_layer(name="B")
        self.doc.undo()
        self.assertEqual(self.stack.current_id, a.id)
