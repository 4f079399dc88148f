# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Freehand drawing modes"""

## Imports

import logging

from . import command
from .stroke import Stroke

logger = logging.getLogger(__name__)


## Class defs


class FreehandMode (object):
    """Interactive mode recording freehand strokes

    Pointer positions arrive in display coordinates, and are converted
    to canvas coordinates with the document's view transformation. A
    stroke is attached to the active layer as soon as it starts, so it
    is drawn while it is being recorded, but it only reaches the undo
    history when the pointer is released or leaves the canvas. Any
    request by the document to flush pending changes also commits it.

    Presses are ignored unless the current tool is a freehand tool
    (brush or eraser).

    """

    ## Class constants

    IDLE = "idle"
    DRAWING = "drawing"

    ## Initialization

    def __init__(self, doc):
        super(FreehandMode, self).__init__()
        self.doc = doc
        self.state = self.IDLE
        self._stroke = None
        self._layer_id = None

    def __repr__(self):
        return "<FreehandMode %s>" % (self.state,)

    @property
    def stroke(self):
        """The stroke being recorded, or None"""
        return self._stroke

    ## Pointer events

    def button_press_cb(self, x, y):
        """Starts a stroke on the active layer

        :param float x: Display X coordinate
        :param float y: Display Y coordinate
        :returns: whether a stroke was started
        """
        doc = self.doc
        if not doc.tools.is_freehand_tool():
            return False
        # Commit whatever was in progress before
        doc.sync_pending_changes(flush=True)
        target = doc.layer_stack.current
        if target is None:
            logger.info("No active layer to paint on")
            return False
        mx, my = doc.view.display_to_model(x, y)
        stroke = Stroke.new_recording(mx, my, **doc.tools.get_stroke_style())
        target.add_stroke(stroke)
        self._stroke = stroke
        self._layer_id = target.id
        self.state = self.DRAWING
        doc.sync_pending_changes += self._sync_pending_changes_cb
        logger.debug("Started %r on %r", stroke, target)
        return True

    def motion_notify_cb(self, x, y):
        """Extends the stroke being drawn, if there is one"""
        if self.state != self.DRAWING:
            return False
        target = self.doc.layer_stack.get_layer(self._layer_id)
        if target is None:
            logger.warning("Layer being painted has gone away")
            self._reset()
            return False
        mx, my = self.doc.view.display_to_model(x, y)
        self._stroke.record_point(mx, my)
        target.stroke_changed()
        return True

    def button_release_cb(self, *args):
        """Commits the stroke being drawn"""
        return self._commit()

    def leave_notify_cb(self, *args):
        """Commits the stroke being drawn when the pointer leaves"""
        return self._commit()

    ## Committing strokes

    def _sync_pending_changes_cb(self, doc, flush=True, **kwargs):
        if flush:
            self._commit()

    def _reset(self):
        if self.state == self.DRAWING:
            self.doc.sync_pending_changes -= self._sync_pending_changes_cb
        self.state = self.IDLE
        self._stroke = None
        self._layer_id = None

    def _commit(self):
        if self.state != self.DRAWING:
            return False
        cmd = command.Brushwork(self.doc, self._layer_id, self._stroke)
        self._reset()
        return self.doc.do(cmd)
