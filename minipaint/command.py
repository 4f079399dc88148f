# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

## Imports

import weakref
from gettext import gettext as _
from logging import getLogger

from . import filters
from . import draw
from . import layer
from .errors import UnsupportedOperation

logger = getLogger(__name__)


## Command interface


class Command (object):
    """A committed change to the document model

    Commands represent alterations made by the user to a document which
    they might wish to undo. They are constructed as a complete
    description of the work to be done, and perform all the actual work
    in their `redo()` method. Undo is handled by the document's snapshot
    history, so commands need no inverse.

    A command whose `redo()` returns False made no change, and isn't
    recorded in the history. Commands which cannot be performed raise
    `RefusedOperation` or `UnsupportedOperation` before changing
    anything.
    """

    ## Defaults for object properties

    display_name = _("Unknown Command")

    ## Method defs

    def __init__(self, doc, **kwargs):
        """Constructor

        :param minipaint.document.Document doc: the model to be changed
        :param **kwargs: Initial description of the work to be done
        """
        super(Command, self).__init__()
        #: The document model to alter (proxy, to permit clean gc)
        self.doc = weakref.proxy(doc)

    def __repr__(self):
        return "<%s>" % (self.display_name,)

    @property
    def layers(self):
        return self.doc.layer_stack

    def redo(self):
        """Callback used to perform the work

        :returns: False if nothing was changed
        """
        raise NotImplementedError


## Layer structure


class AddLayer (Command):
    """Adds a new layer on top of the stack, and selects it"""

    display_name = _("Add Layer")

    def __init__(self, doc, kind="raster", **props):
        super(AddLayer, self).__init__(doc)
        self.kind = kind
        self.props = props
        self.layer = None

    def redo(self):
        props = dict(self.props)
        if props.get("name") is None:
            #TRANSLATORS: Default name for added layers: "Layer 2" etc.
            props["name"] = _("Layer %d") % (len(self.layers) + 1,)
        self.layer = layer.new_layer(self.kind, **props)
        self.layers.add_layer(self.layer)


class RemoveLayer (Command):
    """Removes a layer"""

    display_name = _("Delete Layer")

    def __init__(self, doc, layer_id, **kwds):
        super(RemoveLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id

    def redo(self):
        removed = self.layers.remove_layer(self.layer_id)
        return removed is not None


class ReorderLayer (Command):
    """Moves a layer one step up or down the stack"""

    display_name = _("Move Layer in Stack")

    def __init__(self, doc, layer_id, direction, **kwds):
        super(ReorderLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.direction = direction

    def redo(self):
        return self.layers.bubble_layer(self.layer_id, self.direction)


class MergeLayerUp (Command):
    """Merges a layer with the one above it"""

    display_name = _("Merge Up")

    def __init__(self, doc, layer_id, **kwds):
        super(MergeLayerUp, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.merged_layer = None

    def redo(self):
        self.merged_layer = self.layers.merge_up(self.layer_id)


class MergeLayerDown (Command):
    """Merges a layer with the one below it"""

    display_name = _("Merge Down")

    def __init__(self, doc, layer_id, **kwds):
        super(MergeLayerDown, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.merged_layer = None

    def redo(self):
        self.merged_layer = self.layers.merge_down(self.layer_id)


## Layer properties


class SetLayerVisibility (Command):
    """Sets the visibility status of a layer"""

    def __init__(self, doc, layer_id, visible, **kwds):
        super(SetLayerVisibility, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.visible = bool(visible)

    @property
    def display_name(self):
        if self.visible:
            return _("Make Layer Visible")
        else:
            return _("Make Layer Invisible")

    def redo(self):
        return self.layers.set_visible(self.layer_id, self.visible)


class SetLayerOpacity (Command):
    """Sets the opacity of a layer"""

    display_name = _("Change Layer Opacity")

    def __init__(self, doc, layer_id, opacity, **kwds):
        super(SetLayerOpacity, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.opacity = opacity

    def redo(self):
        return self.layers.set_opacity(self.layer_id, self.opacity)


class SetLayerMode (Command):
    """Sets the blend mode of a layer"""

    display_name = _("Change Layer Mode")

    def __init__(self, doc, layer_id, mode, **kwds):
        super(SetLayerMode, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.mode = mode

    def redo(self):
        return self.layers.set_mode(self.layer_id, self.mode)


class RenameLayer (Command):
    """Renames a layer"""

    display_name = _("Rename Layer")

    def __init__(self, doc, layer_id, name, **kwds):
        super(RenameLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.name = name

    def redo(self):
        return self.layers.set_name(self.layer_id, self.name)


## Painting


class Brushwork (Command):
    """One freehand stroke on a layer

    The stroke is captured by the freehand mode while the pointer is
    down, and attached to its layer as it is recorded. Committing the
    Brushwork freezes it.
    """

    def __init__(self, doc, layer_id, stroke, **kwds):
        super(Brushwork, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.stroke = stroke

    @property
    def display_name(self):
        if self.stroke.is_eraser:
            return _("Erasing")
        return _("Painting")

    def redo(self):
        target = self.layers.get_layer(self.layer_id)
        if target is None or self.stroke not in target.strokes:
            logger.warning("Layer for %r went away while painting",
                           self.stroke)
            return False
        self.stroke.stop_recording()
        target.stroke_changed()


## Shapes and images


class AddShape (Command):
    """Adds a new shape layer, with a default size"""

    def __init__(self, doc, shape_type, origin, **style):
        super(AddShape, self).__init__(doc)
        self.shape_type = shape_type
        self.origin = origin
        self.style = style
        self.layer = None

    @property
    def display_name(self):
        return {
            draw.RECT_SHAPE: _("Add Rectangle"),
            draw.ELLIPSE_SHAPE: _("Add Ellipse"),
            draw.LINE_SHAPE: _("Add Line"),
        }.get(self.shape_type, _("Add Shape"))

    def redo(self):
        if self.shape_type not in draw.SHAPE_TYPES:
            raise UnsupportedOperation("Unknown shape type %r"
                                       % (self.shape_type,))
        x, y = self.origin
        self.layer = layer.ShapeLayer(
            shape_type=self.shape_type, x=x, y=y, **self.style
        )
        self.layers.add_layer(self.layer)


class MoveLayer (Command):
    """Translates a layer's base content to a new position"""

    display_name = _("Move Layer")

    def __init__(self, doc, layer_id, pos, **kwds):
        super(MoveLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.pos = pos

    def redo(self):
        target = self.layers.require_layer(self.layer_id)
        return target.move_to(*self.pos)


class ResizeLayer (Command):
    """Rescales a shape or image layer, with a minimum size"""

    display_name = _("Resize Layer")

    def __init__(self, doc, layer_id, scale_x, scale_y, **kwds):
        super(ResizeLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.scale_x = scale_x
        self.scale_y = scale_y

    def redo(self):
        target = self.layers.require_layer(self.layer_id)
        return target.resize(self.scale_x, self.scale_y)


class LoadLayer (Command):
    """Adds a new image layer from decoded pixels"""

    display_name = _("Import Image")

    def __init__(self, doc, pixels, name=None, x=0, y=0, **kwds):
        super(LoadLayer, self).__init__(doc, **kwds)
        self.pixels = pixels
        self.name = name
        self.pos = (x, y)
        self.layer = None

    def redo(self):
        x, y = self.pos
        self.layer = layer.ImageLayer(
            pixels=self.pixels, name=self.name, x=x, y=y,
        )
        self.layers.add_layer(self.layer)


class FilterLayer (Command):
    """Writes a filtered pixel buffer back to an image layer"""

    def __init__(self, doc, layer_id, kind, pixels, **kwds):
        super(FilterLayer, self).__init__(doc, **kwds)
        self.layer_id = layer_id
        self.kind = kind
        self.pixels = pixels

    @property
    def display_name(self):
        return filters.get_filter_label(self.kind)

    def redo(self):
        target = self.layers.require_layer(self.layer_id)
        if target.KIND != layer.ImageLayer.KIND:
            raise UnsupportedOperation(
                "Filters only apply to image layers, not %s layers"
                % (target.KIND,),
            )
        target.set_pixels(self.pixels)
