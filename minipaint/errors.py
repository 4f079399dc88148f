# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Error classes which may be raised by gui-independent code

None of these are fatal. They are raised deep inside the layer stack or
the filter code, and caught at the document boundary, where they turn
into logged no-ops. Callers of the document's public API never see them.

"""


class EditingError (Exception):
    """Base class: an editing request could not be carried out

    The stringification should be a short human-readable reason, which
    ends up in the logs when the request is dropped.

    """


class RefusedOperation (EditingError):
    """The request would break a structural invariant of the layer stack

    Examples: deleting the last layer, deleting the base layer, merging
    a layer that has no neighbour in the requested direction.

    """


class UnsupportedOperation (EditingError):
    """The request does not apply to this kind of layer

    Examples: running a pixel filter on a raster or shape layer,
    resizing a raster layer.

    """


class DecodeFailure (EditingError):
    """Image data could not be decoded into a pixel buffer

    The pending import or filter is abandoned, and the layer stack
    stays as it was.

    """
