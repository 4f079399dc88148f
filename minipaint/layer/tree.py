# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Whole-stack-level layer classes and functions"""


## Imports

import logging
from gettext import gettext as _

from minipaint import compositeops
from minipaint import helpers
from minipaint import modes
from minipaint.errors import RefusedOperation
from minipaint.observable import event
from . import data


logger = logging.getLogger(__name__)


## Constants

UPSTACK = 1
DOWNSTACK = -1

#: Largest merged image, in pixels
MAX_MERGE_PIXELS = 4096 * 4096

_DIRECTIONS = {
    UPSTACK: UPSTACK,
    DOWNSTACK: DOWNSTACK,
    "up": UPSTACK,
    "down": DOWNSTACK,
}


## Class defs


class RootLayerStack (object):
    """Document root layer stack

    Layer records are held in a table addressed by their stable ids,
    and their z-order in a separate ordered sequence of ids. Index 0 of
    the sequence is the bottommost layer. Reordering and merging work
    on the sequence without touching per-layer data.

    The stack is never empty: it is populated with a protected base
    layer when constructed. Exactly one layer is current at any time;
    new strokes and shapes go onto it.

    Operations which would break the stack's invariants raise
    `RefusedOperation`, leaving everything as it was.

    >>> root = RootLayerStack()
    >>> len(root)
    1
    >>> root.current.name, root.current.is_base
    ('Background', True)
    >>> ink = root.add_layer(data.RasterLayer(name="Ink"))
    >>> [l.name for l in root]
    ['Background', 'Ink']
    >>> root.current is ink
    True

    """

    ## Class constants

    #TRANSLATORS: Name of the initial layer of a new document
    BASE_LAYER_NAME = _("Background")

    ## Initialization

    def __init__(self, doc=None):
        """Construct, as part of a model

        :param doc: The model document. May be None for testing.
        :type doc: minipaint.document.Document
        """
        super(RootLayerStack, self).__init__()
        self.doc = doc
        self._layers = {}
        self._order = []
        self._current_id = None
        self.ensure_populated()

    def ensure_populated(self):
        """Adds the protected base layer if the stack is empty"""
        if self._order:
            return
        base = data.RasterLayer(name=self.BASE_LAYER_NAME, is_base=True)
        self._insert(0, base)
        self.current_id = base.id

    ## Basic access

    def __len__(self):
        return len(self._order)

    def __iter__(self):
        """Iterates over the layers, bottom first"""
        return iter([self._layers[i] for i in self._order])

    def __getitem__(self, index):
        return self._layers[self._order[index]]

    def __contains__(self, layer_id):
        return layer_id in self._layers

    @property
    def order(self):
        """The layer ids, bottom first"""
        return tuple(self._order)

    def get_layer(self, layer_id):
        """Layer for an id, or None"""
        return self._layers.get(layer_id)

    def index_of(self, layer_id):
        """Stack position of a layer id, or None"""
        try:
            return self._order.index(layer_id)
        except ValueError:
            return None

    def require_layer(self, layer_id):
        layer = self._layers.get(layer_id)
        if layer is None:
            raise RefusedOperation("No layer with id %r" % (layer_id,))
        return layer

    ## Current layer

    @property
    def current_id(self):
        """Id of the current (active) layer

        Setting an id which isn't in the stack is ignored.

        """
        return self._current_id

    @current_id.setter
    def current_id(self, layer_id):
        if layer_id not in self._layers:
            logger.info("Ignoring selection of unknown layer %r", layer_id)
            return
        if layer_id == self._current_id:
            return
        self._current_id = layer_id
        self.current_layer_changed(layer_id)

    @property
    def current(self):
        """The current (active) layer"""
        return self._layers[self._current_id]

    def _ensure_valid_current(self, fallback_index=0):
        if self._current_id not in self._layers:
            self.current_id = self._order[fallback_index]

    ## Structure manipulation

    def _insert(self, index, layer):
        self._layers[layer.id] = layer
        self._order.insert(index, layer.id)
        layer.root = self
        self.layer_inserted(layer.id, index)

    def _pop(self, index):
        layer_id = self._order.pop(index)
        layer = self._layers.pop(layer_id)
        layer.root = None
        self.layer_deleted(layer_id, index)
        return layer

    def add_layer(self, layer):
        """Appends a layer to the top of the stack, and selects it"""
        if layer.id in self._layers:
            raise ValueError("Layer %r is already in the stack" % (layer,))
        if layer.is_base:
            layer.is_base = False
        self._insert(len(self._order), layer)
        self.current_id = layer.id
        logger.debug("Added %r", layer)
        return layer

    def remove_layer(self, layer_id):
        """Removes a layer from the stack

        :param layer_id: Id of the layer to remove
        :returns: the removed layer, or None if there was no such layer
        :raises RefusedOperation: for the base layer, or the last layer

        If the current layer is removed, the topmost remaining layer
        becomes current.

        >>> root = RootLayerStack()
        >>> root.remove_layer(root.current_id)
        Traceback (most recent call last):
        ...
        minipaint.errors.RefusedOperation: Cannot delete the only layer
        >>> root.remove_layer("no-such-id") is None
        True

        """
        index = self.index_of(layer_id)
        if index is None:
            logger.debug("Remove: no layer %r", layer_id)
            return None
        if len(self._order) <= 1:
            raise RefusedOperation("Cannot delete the only layer")
        layer = self._layers[layer_id]
        if layer.is_base:
            raise RefusedOperation("Cannot delete the base layer")
        self._pop(index)
        self._ensure_valid_current(fallback_index=-1)
        logger.debug("Removed %r", layer)
        return layer

    def bubble_layer(self, layer_id, direction):
        """Moves a layer one place up or down the stack

        :param layer_id: Id of the layer to move
        :param direction: +1 or "up" to move towards the top, -1 or
            "down" to move towards the bottom
        :returns: True if the stack structure was modified
        :rtype: bool

        Moving a layer past either end of the stack is a no-op.

        >>> root = RootLayerStack()
        >>> a = root.add_layer(data.RasterLayer(name="A"))
        >>> root.bubble_layer(a.id, "up")
        False
        >>> root.bubble_layer(a.id, -1)
        True
        >>> [l.name for l in root]
        ['A', 'Background']

        """
        try:
            step = _DIRECTIONS[direction]
        except (KeyError, TypeError):
            raise ValueError("Unknown direction %r" % (direction,))
        index = self.index_of(layer_id)
        if index is None:
            return False
        new_index = index + step
        if not (0 <= new_index < len(self._order)):
            return False
        layer = self._pop(index)
        self._insert(new_index, layer)
        logger.debug("Moved %r to index %d", layer, new_index)
        return True

    ## Merging

    def get_merge_target(self, layer_id, upstack):
        """Id of the neighbour a layer would merge with, or None"""
        index = self.index_of(layer_id)
        if index is None:
            return None
        target_index = index + (UPSTACK if upstack else DOWNSTACK)
        if not (0 <= target_index < len(self._order)):
            return None
        return self._order[target_index]

    def get_merge_bbox(self, lower, upper):
        """Area a merged image layer covers, or None if there's nothing

        The union of the two layers' base content, clipped to the
        document canvas when there is a document.

        :raises RefusedOperation: if the area is too large to allocate

        """
        bbox = lower.get_base_bbox()
        bbox.expand_to_include_rect(upper.get_base_bbox())
        if bbox.empty():
            return None
        if self.doc is not None:
            width, height = self.doc.canvas_size
            bbox = bbox.intersection(helpers.Rect(0, 0, width, height))
            if bbox is None:
                return None
        if bbox.w * bbox.h > MAX_MERGE_PIXELS:
            raise RefusedOperation(
                "Merged layer would be too large (%dx%d)" % (bbox.w, bbox.h),
            )
        return bbox

    def layer_new_merge(self, lower, upper):
        """Creates a new layer combining two layers

        :param lower: The lower of the two layers
        :param upper: The upper of the two layers
        :returns: New merged layer, which takes over the lower's id
        :raises RefusedOperation: if the merged image would be too large

        The lower layer's strokes come first. If either layer has base
        content (an image or a shape), both base contents are rendered
        into a single image, lower first, and the merged layer is an
        image layer. The upper content keeps its opacity. Base content
        outside the canvas is dropped. Nothing is inserted or removed
        from the stack.

        >>> root = RootLayerStack()
        >>> a = data.ShapeLayer(x=0, y=0)
        >>> b = data.ShapeLayer(x=10**7, y=10**7)
        >>> root.layer_new_merge(a, b)
        Traceback (most recent call last):
        ...
        minipaint.errors.RefusedOperation: Merged layer would be too large ...

        """
        strokes = lower.get_finished_strokes() + upper.get_finished_strokes()
        props = dict(
            id=lower.id,
            name=lower.name,
            visible=lower.visible,
            opacity=lower.opacity,
            mode=lower.mode,
            is_base=(lower.is_base or upper.is_base),
            strokes=strokes,
        )
        raster_kind = data.RasterLayer.KIND
        if lower.KIND == raster_kind and upper.KIND == raster_kind:
            return data.RasterLayer(**props)
        bbox = self.get_merge_bbox(lower, upper)
        if bbox is None:
            return data.RasterLayer(**props)
        buf = compositeops.new_buffer(bbox.w, bbox.h)
        lower.render_base(buf, bbox.x, bbox.y)
        upper_buf = compositeops.new_buffer(bbox.w, bbox.h)
        upper.render_base(upper_buf, bbox.x, bbox.y)
        compositeops.composite(buf, upper_buf, opacity=upper.opacity)
        return data.ImageLayer(
            pixels=compositeops.buffer_to_rgba8(buf),
            x=bbox.x, y=bbox.y,
            **props
        )
        raster_kind = data.RasterLayer.KIND
        if lower.KIND == raster_kind and upper.KIND == raster_kind:
            return data.RasterLayer(**props)
        bbox = lower.get_base_bbox()
        bbox.expand_to_include_rect(upper.get_base_bbox())
        if bbox.empty():
            return data.RasterLayer(**props)
        buf = compositeops.new_buffer(bbox.w, bbox.h)
        for layer in (lower, upper):
            layer.render_base(buf, bbox.x, bbox.y)
        return data.ImageLayer(
            pixels=compositeops.buffer_to_rgba8(buf),
            x=bbox.x, y=bbox.y,
            **props
        )

    def _merge(self, layer_id, upstack):
        self.require_layer(layer_id)
        target_id = self.get_merge_target(layer_id, upstack)
        if target_id is None:
            raise RefusedOperation(
                "No layer %s %r to merge with"
                % ("above" if upstack else "below", layer_id),
            )
        if upstack:
            lower_id, upper_id = layer_id, target_id
        else:
            lower_id, upper_id = target_id, layer_id
        lower = self._layers[lower_id]
        upper = self._layers[upper_id]
        merged = self.layer_new_merge(lower, upper)
        index = self.index_of(lower_id)
        self._pop(index + 1)
        self._pop(index)
        self._insert(index, merged)
        self._current_id = None
        self.current_id = merged.id
        logger.debug("Merged %r and %r into %r", lower, upper, merged)
        return merged

    def merge_up(self, layer_id):
        """Merges a layer with the one above it

        :raises RefusedOperation: if there's no layer above

        >>> root = RootLayerStack()
        >>> ink = root.add_layer(data.RasterLayer(name="Ink"))
        >>> merged = root.merge_up(root[0].id)
        >>> len(root), merged.name, merged.is_base
        (1, 'Background', True)

        """
        return self._merge(layer_id, True)

    def merge_down(self, layer_id):
        """Merges a layer with the one below it

        :raises RefusedOperation: if there's no layer below

        """
        return self._merge(layer_id, False)

    ## Layer properties

    def set_visible(self, layer_id, visible):
        layer = self.require_layer(layer_id)
        if layer.visible == bool(visible):
            return False
        layer.visible = visible
        return True

    def set_opacity(self, layer_id, opacity):
        """Sets a layer's opacity, clamped to [0, 1]"""
        layer = self.require_layer(layer_id)
        old = layer.opacity
        layer.opacity = opacity
        return layer.opacity != old

    def set_mode(self, layer_id, mode):
        """Sets a layer's blend mode. Unknown modes are ignored."""
        layer = self.require_layer(layer_id)
        if not modes.is_valid_mode(mode):
            logger.info("Ignoring unknown blend mode %r", mode)
            return False
        if layer.mode == mode:
            return False
        layer.mode = mode
        return True

    def set_name(self, layer_id, name):
        layer = self.require_layer(layer_id)
        if layer.name == name:
            return False
        layer.name = name
        return True

    ## Rendering

    def render(self, width, height, background=None, smoothing=False):
        """Flattens the visible layers into one image

        :param int width: Output width
        :param int height: Output height
        :param background: Colour drawn under the bottom layer, or None
            for a transparent backdrop
        :param bool smoothing: Draw strokes as smoothed curves
        :returns: non-premultiplied uint8 RGBA, shape (height, width, 4)

        Layers are drawn bottom to top, each rendered in isolation then
        composited onto what's below using its mode and opacity.

        """
        dst = compositeops.new_buffer(width, height)
        if background is not None:
            compositeops.fill_buffer(dst, helpers.parse_color(background))
        for layer in self:
            if not layer.visible:
                continue
            src = layer.render(width, height, smoothing=smoothing)
            compositeops.composite(dst, src, layer.mode, layer.opacity)
        return compositeops.buffer_to_rgba8(dst)

    ## Notification mechanisms

    @event
    def layer_content_changed(self, layer):
        """Event: notifies that a layer's content has changed"""

    @event
    def layer_properties_changed(self, layer, changed):
        """Event: notifies that a layer's properties have changed"""

    @event
    def layer_deleted(self, layer_id, index):
        """Event: notifies that a layer has been removed"""

    @event
    def layer_inserted(self, layer_id, index):
        """Event: notifies that a layer has been added"""

    @event
    def current_layer_changed(self, layer_id):
        """Event: notifies that the layer selection has been updated"""

    ## Snapshots

    def save_snapshot(self):
        """Snapshots the state of the stack, for undo purposes"""
        return RootLayerStackSnapshot(self)

    def load_snapshot(self, sshot):
        """Restores the stack from snapshot data"""
        sshot.restore_to_layer(self)


class RootLayerStackSnapshot (object):
    """Snapshot of a root layer stack's state

    Holds the ordered layer snapshots and the current layer id. Layers
    which have not changed between two stack snapshots share the same
    layer snapshot object.

    """

    def __init__(self, root):
        super(RootLayerStackSnapshot, self).__init__()
        self.layer_sshots = tuple(l.save_snapshot() for l in root)
        self.current_id = root.current_id

    @property
    def order(self):
        return tuple(s.id for s in self.layer_sshots)

    def restore_to_layer(self, root):
        """Restores a stack, announcing each structural change

        Layers still in the snapshot are kept and moved into place.
        Others are removed, and missing ones rebuilt from their
        snapshots. Every move fires ``layer_deleted`` then
        ``layer_inserted``.

        """
        wanted = dict((s.id, s) for s in self.layer_sshots)
        for index in reversed(range(len(root._order))):
            layer = root._layers[root._order[index]]
            sshot = wanted.get(layer.id)
            if sshot is None or layer.KIND != sshot.kind:
                root._pop(index)
        for index, sshot in enumerate(self.layer_sshots):
            layer = root._layers.get(sshot.id)
            if layer is None:
                root._insert(index, data.layer_from_snapshot(sshot))
                continue
            old_index = root._order.index(sshot.id)
            if old_index != index:
                root._pop(old_index)
                root._insert(index, layer)
            if layer.save_snapshot() is not sshot:
                layer.load_snapshot(sshot)
        root._current_id = None
        if self.current_id in root._layers:
            root.current_id = self.current_id
        else:
            root.current_id = root._order[0]

    def __eq__(self, other):
        if not isinstance(other, RootLayerStackSnapshot):
            return NotImplemented
        return (self.current_id == other.current_id
                and self.layer_sshots == other.layer_sshots)

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None
