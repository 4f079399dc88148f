# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Core layer classes etc."""


## Imports

import logging
import weakref
from gettext import gettext as _

from minipaint import helpers
from minipaint import modes
from minipaint import compositeops
from minipaint import draw
from minipaint.errors import UnsupportedOperation

logger = logging.getLogger(__name__)


## Base class defs


class LayerBase (object):
    """Base class defining the layer API

    Layers are minimally aware of the stack they reside in, in that they
    contain a reference to the root of their tree for signalling
    purposes. Updates to layer properties and content are announced via
    the RootLayerStack object holding the layer.

    Every layer may carry freehand strokes, drawn over its base content.
    Stroke points are in canvas coordinates, so moving a layer leaves
    its strokes where they are.

    """

    ## Class constants

    #: Forms the default name
    DEFAULT_NAME = _("Layer")

    #: Layer kind tag, one of "raster", "image", "shape"
    KIND = None

    #: A string for the layer type.
    TYPE_DESCRIPTION = None

    ## Construction

    def __init__(self, name=None, visible=True, opacity=1.0,
                 mode=modes.DEFAULT_MODE, x=0, y=0, is_base=False,
                 strokes=(), id=None, **kwargs):
        """Construct a new layer

        :param name: The name for the new layer.
        :param **kwargs: Ignored.

        All layer subclasses must permit construction without
        parameters.
        """
        super(LayerBase, self).__init__()
        self.id = id or helpers.new_id()
        self._name = name if name is not None else self.DEFAULT_NAME
        self._visible = bool(visible)
        self._opacity = helpers.clamp(float(opacity), 0.0, 1.0)
        self._mode = modes.normalize_mode(mode)
        self.x = float(x)
        self.y = float(y)
        self.is_base = bool(is_base)
        #: Freehand strokes, in painting order. The last one may still
        #: be recording.
        self.strokes = list(strokes)
        self._root_ref = None
        self._revision = 0
        self._sshot = None
        self._sshot_revision = None

    ## Properties

    @property
    def kind(self):
        return self.KIND

    @property
    def root(self):
        """The RootLayerStack this layer belongs to, or None"""
        if self._root_ref is None:
            return None
        return self._root_ref()

    @root.setter
    def root(self, newroot):
        if newroot is None:
            self._root_ref = None
        else:
            self._root_ref = weakref.ref(newroot)

    @property
    def opacity(self):
        """Opacity multiplier for the layer.

        Values must permit conversion to a `float`, and are clamped to
        [0, 1]. NaN is ignored. Changing this property issues
        ``layer_properties_changed`` via the root layer stack if the
        layer is in one.

        """
        return self._opacity

    @opacity.setter
    def opacity(self, opacity):
        opacity = float(opacity)
        if opacity != opacity:
            logger.info("Ignoring NaN opacity for %r", self)
            return
        opacity = helpers.clamp(opacity, 0.0, 1.0)
        if opacity == self._opacity:
            return
        self._opacity = opacity
        self._properties_changed(["opacity"])

    @property
    def name(self):
        """The layer's name, for display purposes. Need not be unique."""
        return self._name

    @name.setter
    def name(self, name):
        name = str(name)
        if name == self._name:
            return
        self._name = name
        self._properties_changed(["name"])

    @property
    def visible(self):
        return self._visible

    @visible.setter
    def visible(self, visible):
        visible = bool(visible)
        if visible == self._visible:
            return
        self._visible = visible
        self._properties_changed(["visible"])

    @property
    def mode(self):
        """How this layer combines with its backdrop.

        Unrecognized values are stored as the default mode.

        """
        return self._mode

    @mode.setter
    def mode(self, mode):
        mode = modes.normalize_mode(mode)
        if mode == self._mode:
            return
        self._mode = mode
        self._properties_changed(["mode"])

    ## Notifications

    def _content_changed(self):
        """Notifies the root's content observers"""
        self._revision += 1
        root = self.root
        if root is not None:
            root.layer_content_changed(self)

    def _properties_changed(self, properties):
        """Notifies the root's layer properties observers"""
        self._revision += 1
        root = self.root
        if root is not None:
            root.layer_properties_changed(self, set(properties))

    ## Strokes

    def add_stroke(self, stroke):
        """Appends a stroke, recording or finished, to the layer"""
        self.strokes.append(stroke)
        self._content_changed()

    def get_recording_stroke(self):
        """The open stroke at the tail of the strokes list, or None"""
        if self.strokes and not self.strokes[-1].finished:
            return self.strokes[-1]
        return None

    def stroke_changed(self):
        """Call after extending or finishing a recording stroke"""
        self._content_changed()

    def get_finished_strokes(self):
        return [s for s in self.strokes if s.finished]

    def get_strokes_bbox(self):
        """Bounding box of the layer's strokes, including brush width"""
        bbox = helpers.Rect()
        for stroke in self.strokes:
            pairs = stroke.get_point_pairs()
            if not pairs:
                continue
            r = stroke.size / 2.0
            xs = [p[0] for p in pairs]
            ys = [p[1] for p in pairs]
            bbox.expand_to_include_rect(helpers.Rect.new_from_bounds(
                min(xs) - r, min(ys) - r, max(xs) + r, max(ys) + r,
            ))
        return bbox

    ## Info methods

    def get_base_bbox(self):
        """Bounding box of the layer's base content (not its strokes)"""
        return helpers.Rect()

    def get_bbox(self):
        """Content bounding box, base content and strokes together"""
        bbox = self.get_base_bbox()
        bbox.expand_to_include_rect(self.get_strokes_bbox())
        return bbox

    ## Geometry

    def move_to(self, x, y):
        """Moves the layer's base content to a new position"""
        raise UnsupportedOperation(
            "%s layers cannot be moved" % (self.KIND,),
        )

    def resize(self, scale_x, scale_y):
        """Rescales the layer's base content"""
        raise UnsupportedOperation(
            "%s layers cannot be resized" % (self.KIND,),
        )

    ## Rendering

    def render_base(self, buf, dx=0, dy=0):
        """Draws the base content into a float buffer

        :param numpy.ndarray buf: premultiplied float RGBA buffer
        :param float dx: X offset of the buffer's origin in the canvas
        :param float dy: Y offset of the buffer's origin in the canvas

        The base implementation draws nothing.

        """
        pass

    def render(self, width, height, smoothing=False):
        """Renders the layer's own content, isolated from other layers

        Base content goes down first, then the strokes in painting
        order. Eraser strokes only remove what this layer holds.
        The layer's opacity and mode are not applied.

        :returns: premultiplied float32 RGBA, shape (height, width, 4)

        """
        buf = compositeops.new_buffer(width, height)
        self.render_base(buf)
        draw.render_strokes(buf, self.strokes, smoothing=smoothing)
        return buf

    ## Snapshot

    def save_snapshot(self):
        """Snapshots the state of the layer, for undo purposes

        The returned data should be considered opaque, useful only as a
        memento to be restored with load_snapshot(). An unchanged layer
        returns the same snapshot object each time.

        """
        if self._sshot is None or self._sshot_revision != self._revision:
            self._sshot = self._new_snapshot()
            self._sshot_revision = self._revision
        return self._sshot

    def _new_snapshot(self):
        return LayerBaseSnapshot(self)

    def load_snapshot(self, sshot):
        """Restores the layer from snapshot data"""
        sshot.restore_to_layer(self)
        self._sshot = sshot
        self._sshot_revision = self._revision

    ## Standard stuff

    def __repr__(self):
        """Simplified repr() of a layer"""
        return "<%s %s %r>" % (self.__class__.__name__, self.id[:8],
                               self.name)


class LayerBaseSnapshot (object):
    """Base snapshot implementation

    Snapshots are stored in the history, and used to implement undo and
    redo. They are independent, immutable copies of the layer data,
    though they share immutable parts such as finished strokes and
    pixel arrays. Two snapshots compare equal if they hold equal data.

    """

    def __init__(self, layer):
        super(LayerBaseSnapshot, self).__init__()
        self.kind = layer.KIND
        self.id = layer.id
        self.name = layer.name
        self.mode = layer.mode
        self.opacity = layer.opacity
        self.visible = layer.visible
        self.x = layer.x
        self.y = layer.y
        self.is_base = layer.is_base
        self.strokes = tuple(layer.get_finished_strokes())

    def restore_to_layer(self, layer):
        layer.id = self.id
        layer.name = self.name
        layer.mode = self.mode
        layer.opacity = self.opacity
        layer.visible = self.visible
        layer.x = self.x
        layer.y = self.y
        layer.is_base = self.is_base
        layer.strokes = list(self.strokes)
        layer._content_changed()

    def _data(self):
        return dict(self.__dict__)

    def __eq__(self, other):
        if not isinstance(other, LayerBaseSnapshot):
            return NotImplemented
        if type(self) is not type(other):
            return False
        return self._data() == other._data()

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None
