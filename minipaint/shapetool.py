# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Single-click mode for placing shapes"""

import logging

logger = logging.getLogger(__name__)


class ShapeMode (object):
    """Creates a shape layer of the current tool's type on click"""

    def __init__(self, doc):
        super(ShapeMode, self).__init__()
        self.doc = doc

    def button_press_cb(self, x, y):
        """Adds a shape layer at a display position

        :returns: the new layer, or None
        """
        tools = self.doc.tools
        if not tools.is_shape_tool():
            return None
        origin = self.doc.view.display_to_model(x, y)
        logger.debug("New %s at %r", tools.tool, origin)
        return self.doc.create_shape(tools.tool, origin)

    def button_release_cb(self, *args):
        pass

    def motion_notify_cb(self, *args):
        pass
