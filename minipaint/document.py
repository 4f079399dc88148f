# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""The editing session's document model"""

## Imports

import logging
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import wait

from . import command
from . import config as userconfig
from . import filters
from . import idletask
from . import pixbuf
from .errors import DecodeFailure
from .errors import RefusedOperation
from .errors import UnsupportedOperation
from .history import History
from .layer import RootLayerStack
from .layer import ImageLayer
from .observable import event
from .tools import ToolSettings
from .viewtransform import CanvasTransformation

logger = logging.getLogger(__name__)


## Constants

#: Marker for "use the configured background" in render() & export_png()
CONFIGURED_BACKGROUND = object()

#: Number of threads decoding images and running filters
WORKER_THREADS = 2


## Class defs


class Document (object):
    """In-memory representation of everything being worked on

    This is the "model" in the Model-View-Controller design for the
    canvas. It owns the layer stack and its undo history, the tool
    settings and the view transformation, and it is the only thing
    which mutates the layer stack: the layers panel and the input modes
    submit their edits through its methods. Each committed edit pushes
    exactly one history snapshot. Edits which are refused or which
    don't apply are logged and ignored.

    Image decoding and filters run in worker threads. Their results
    are posted back as completion tasks, and applied to the layer stack
    only when the host calls `process_pending()`, against the stack as
    it is at that time.

    The model can be used without any GUI attached (see ``tests/``).

    >>> doc = Document()
    >>> layer = doc.add_layer()
    >>> layer.name, len(doc.layer_stack), len(doc.history)
    ('Layer 2', 2, 2)
    >>> doc.undo()
    True
    >>> len(doc.layer_stack)
    1
    >>> doc.cleanup()

    """

    ## Initialization and cleanup

    def __init__(self, config=None):
        """Initialize

        :param dict config: Settings overriding the defaults in
            `minipaint.config.default_configuration()`
        """
        object.__init__(self)
        self.config = userconfig.merged_configuration(config)
        self._layers = RootLayerStack(self)
        self.tools = ToolSettings.new_from_config(self.config)
        self.view = CanvasTransformation()
        self.history = History(
            self._layers.save_snapshot(),
            max_size=self.config["history.max_size"],
        )
        self._processor = idletask.Processor()
        self._executor = None
        self._futures = set()
        self._closed = False

    def __repr__(self):
        return ("<Document nlayers=%d history=%r>" %
                (len(self._layers), self.history))

    def cleanup(self):
        """Tears the document down

        Work still running in worker threads is left to finish, but its
        results are discarded.

        """
        if self._closed:
            return
        self._closed = True
        self._processor.stop()
        if self._executor is not None:
            self._executor.shutdown(wait=False)
            self._executor = None
        logger.debug("Cleaned up %r", self)

    @property
    def closed(self):
        return self._closed

    ## Layer stack access

    @property
    def layer_stack(self):
        return self._layers

    @property
    def canvas_size(self):
        return (int(self.config["canvas.width"]),
                int(self.config["canvas.height"]))

    ## Command processing

    @event
    def sync_pending_changes(self, flush=True, **kwargs):
        """Requests the sync of pending changes to the model

        :param bool flush: if true, pending work must be committed

        This `minipaint.observable.event` is called when pending
        updates should be written into the document completely.
        Attached observers, such as the freehand mode with a stroke in
        progress, are expected to react by committing their work with
        `do()`.
        """

    def do(self, cmd):
        """Performs a command, recording its result in the history

        :param minipaint.command.Command cmd: the edit to perform
        :returns: whether the command changed anything
        :rtype: bool
        """
        self.sync_pending_changes(flush=True)
        if self._closed:
            logger.debug("Document closed: ignoring %r", cmd)
            return False
        try:
            result = cmd.redo()
        except (RefusedOperation, UnsupportedOperation) as e:
            logger.info("%s: %s", cmd.display_name, e)
            return False
        if result is False:
            logger.debug("%r made no changes", cmd)
            return False
        self.history.push(self._layers.save_snapshot(), cmd.display_name)
        return True

    def undo(self):
        """Restores the state before the last edit

        :returns: False if there was nothing to undo
        """
        self.sync_pending_changes(flush=True)
        sshot = self.history.undo()
        if sshot is None:
            return False
        self._layers.load_snapshot(sshot)
        return True

    def redo(self):
        """Restores the state after the last undone edit

        :returns: False if there was nothing to redo
        """
        self.sync_pending_changes(flush=True)
        sshot = self.history.redo()
        if sshot is None:
            return False
        self._layers.load_snapshot(sshot)
        return True

    ## Layers panel interface

    def add_layer(self, kind="raster", **props):
        """Adds a new layer on top, and selects it

        :returns: the new layer, or None
        """
        cmd = command.AddLayer(self, kind, **props)
        if self.do(cmd):
            return cmd.layer
        return None

    def delete_layer(self, layer_id):
        return self.do(command.RemoveLayer(self, layer_id))

    def reorder_layer(self, layer_id, direction):
        """Moves a layer up (+1, "up") or down (-1, "down") one place"""
        return self.do(command.ReorderLayer(self, layer_id, direction))

    def merge_up(self, layer_id):
        return self.do(command.MergeLayerUp(self, layer_id))

    def merge_down(self, layer_id):
        return self.do(command.MergeLayerDown(self, layer_id))

    def toggle_visibility(self, layer_id):
        layer = self._layers.get_layer(layer_id)
        if layer is None:
            logger.info("Toggle visibility: no layer %r", layer_id)
            return False
        return self.set_visibility(layer_id, not layer.visible)

    def set_visibility(self, layer_id, visible):
        return self.do(command.SetLayerVisibility(self, layer_id, visible))

    def set_opacity(self, layer_id, opacity):
        """Sets a layer's opacity. Values are clamped to [0, 1]."""
        return self.do(command.SetLayerOpacity(self, layer_id, opacity))

    def set_blend_mode(self, layer_id, mode):
        """Sets a layer's blend mode. Unknown modes are ignored."""
        return self.do(command.SetLayerMode(self, layer_id, mode))

    def rename_layer(self, layer_id, name):
        return self.do(command.RenameLayer(self, layer_id, name))

    def set_active_layer(self, layer_id):
        """Selects the layer new strokes and shapes go to

        Selection isn't an edit, so nothing is added to the history.
        """
        self.sync_pending_changes(flush=True)
        self._layers.current_id = layer_id
        return self._layers.current_id == layer_id

    ## Shape editor interface

    def create_shape(self, shape_type, origin):
        """Adds a new shape layer with a default size

        :param str shape_type: "rect", "ellipse" or "line"
        :param tuple origin: Canvas position: the top left corner of a
            rectangle, the centre of an ellipse, or the start of a line
        :returns: the new layer, or None

        The outline colour and width come from the tool settings.
        """
        size = float(self.config["shape.default_size"])
        cmd = command.AddShape(
            self, shape_type, origin,
            width=size, height=size,
            radius_x=size / 2.0, radius_y=size / 2.0,
            points=(0, 0, size, 0),
            stroke=self.tools.color,
            stroke_width=self.tools.size,
            fill=None,
        )
        if self.do(cmd):
            return cmd.layer
        return None

    def move_layer(self, layer_id, pos):
        return self.do(command.MoveLayer(self, layer_id, pos))

    def resize_layer(self, layer_id, scale_x, scale_y):
        return self.do(command.ResizeLayer(self, layer_id, scale_x, scale_y))

    ## View

    def zoom_view(self, x, y, direction):
        """Zooms the view in (+1) or out (-1) about a display point"""
        self.view.zoom_at(x, y, direction,
                          step=float(self.config["view.zoom_step"]))

    ## Background work

    def _get_executor(self):
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=WORKER_THREADS,
                thread_name_prefix="minipaint-worker",
            )
        return self._executor

    def _run_in_worker(self, func, args, done_cb, *cb_args):
        """Runs func(*args) in a worker thread

        The worker posts ``done_cb(result, error, *cb_args)`` to the
        main-loop task queue when it finishes.
        """
        processor = self._processor

        def _work():
            result = None
            error = None
            try:
                result = func(*args)
            except Exception as e:
                error = e
            processor.add_work(done_cb, result, error, *cb_args)

        future = self._get_executor().submit(_work)
        self._futures.add(future)
        future.add_done_callback(self._futures.discard)
        return future

    def import_image(self, data, name=None):
        """Starts importing an image as a new layer

        :param bytes data: Encoded image data
        :param str name: Name for the new layer
        :returns: a future for the decode, or None

        The layer is added when the decode has finished and
        `process_pending()` is called. If the data can't be decoded,
        nothing is added.
        """
        if self._closed:
            logger.debug("Document closed: not importing %r", name)
            return None
        logger.debug("Decoding %r (%d bytes)", name, len(data))
        return self._run_in_worker(
            pixbuf.load_from_bytes, (data,),
            self._import_done_cb, name,
        )

    def _import_done_cb(self, pixels, error, name):
        if self._closed:
            logger.debug("Discarding decoded image %r: document closed",
                         name)
            return False
        if isinstance(error, DecodeFailure):
            logger.warning("Cannot import %r: %s", name, error)
            return False
        elif error is not None:
            logger.error("Unexpected error importing %r: %r", name, error)
            return False
        x, y = self.config["image.import_offset"]
        self.do(command.LoadLayer(self, pixels, name=name, x=x, y=y))
        return False

    def apply_filter(self, layer_id, kind):
        """Starts a destructive filter on an image layer

        :param layer_id: Id of an image layer
        :param str kind: One of the names in `minipaint.filters.FILTERS`
        :returns: a future for the filter computation, or None

        The filter runs on the layer's pixels as they are now. Its
        result replaces the layer's pixels when `process_pending()` is
        called, unless the layer has gone or changed kind meanwhile.
        """
        if self._closed:
            return None
        target = self._layers.get_layer(layer_id)
        if target is None:
            logger.info("Filter: no layer %r", layer_id)
            return None
        if not isinstance(target, ImageLayer):
            logger.info("Filters do not apply to %s layers", target.KIND)
            return None
        if kind not in filters.FILTERS:
            logger.info("Unknown filter %r", kind)
            return None
        return self._run_in_worker(
            filters.apply_filter, (target.pixels, kind),
            self._filter_done_cb, layer_id, kind,
        )

    def _filter_done_cb(self, pixels, error, layer_id, kind):
        if self._closed:
            logger.debug("Discarding %r result: document closed", kind)
            return False
        if error is not None:
            logger.error("Unexpected error in filter %r: %r", kind, error)
            return False
        self.do(command.FilterLayer(self, layer_id, kind, pixels))
        return False

    def process_pending(self):
        """Applies the results of finished background work

        Call this regularly from the host's main loop.

        :returns: whether there was anything to process
        """
        if not self._processor.has_work():
            return False
        self._processor.finish_all()
        return True

    def finish_pending(self, timeout=None):
        """Waits for all background work, then applies its results"""
        futures = list(self._futures)
        if futures:
            wait(futures, timeout=timeout)
        return self.process_pending()

    ## Rendering and export

    def render(self, background=CONFIGURED_BACKGROUND):
        """Flattens the layer stack at the canvas size

        :param background: Backdrop colour; None for transparency.
            Defaults to the configured canvas background.
        :returns: uint8 RGBA array
        """
        if background is CONFIGURED_BACKGROUND:
            background = self.config["canvas.background"]
        width, height = self.canvas_size
        return self._layers.render(
            width, height,
            background=background,
            smoothing=bool(self.config["stroke.smoothing"]),
        )

    def export_png(self, background=CONFIGURED_BACKGROUND):
        """Flattens the layer stack into PNG data

        This changes nothing in the document.

        :rtype: bytes
        """
        return pixbuf.save_png(self.render(background=background))
