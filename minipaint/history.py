# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.

"""Linear snapshot history for undo and redo"""

## Imports

from logging import getLogger

from .observable import event

logger = getLogger(__name__)


## Class defs


class History (object):
    """Undo/redo history of layer stack snapshots

    The history is a list of (snapshot, label) entries and a pointer to
    the entry matching the current state. It is never empty, and the
    pointer is always in range.

    >>> h = History("s0")
    >>> len(h), h.index
    (1, 0)
    >>> h.push("s1", "Add Layer")
    >>> h.push("s2", "Delete Layer")
    >>> h.undo()
    's1'
    >>> h.redo_label
    'Delete Layer'
    >>> h.push("s3", "Set Opacity")
    >>> len(h), h.index, h.can_redo
    (3, 2, False)
    >>> h.redo() is None
    True

    """

    def __init__(self, initial_snapshot, label=None, max_size=None):
        """Initialize with the snapshot of the initial state

        :param initial_snapshot: Snapshot of the starting state
        :param label: Label for the initial entry
        :param max_size: Maximum number of entries kept, or None for
            unlimited history

        """
        super(History, self).__init__()
        if max_size is not None and int(max_size) < 1:
            raise ValueError("max_size must be at least 1")
        self.max_size = None if max_size is None else int(max_size)
        self._entries = [(initial_snapshot, label)]
        self._index = 0

    def __repr__(self):
        return ("<History len=%d index=%d>" %
                (len(self._entries), self._index))

    def __len__(self):
        return len(self._entries)

    @property
    def index(self):
        """Position of the entry matching the current state"""
        return self._index

    @property
    def current(self):
        """The snapshot at the pointer"""
        return self._entries[self._index][0]

    def clear(self, snapshot, label=None):
        """Discards everything, restarting from a snapshot"""
        self._entries = [(snapshot, label)]
        self._index = 0
        self.stack_updated()

    def push(self, snapshot, label=None):
        """Records a new state after a committed edit

        Every entry after the pointer is discarded first, so an edit
        after an undo truncates the redo history.

        """
        del self._entries[self._index + 1:]
        self._entries.append((snapshot, label))
        self._index = len(self._entries) - 1
        self.reduce_history()
        logger.debug("Pushed %r: %r", label, self)
        self.stack_updated()

    def reduce_history(self):
        """Trims the oldest entries if there's a size limit"""
        if self.max_size is None:
            return
        excess = len(self._entries) - self.max_size
        if excess > 0:
            del self._entries[:excess]
            self._index = max(0, self._index - excess)

    def undo(self):
        """Moves the pointer back one entry

        :returns: the snapshot to restore, or None at the start

        """
        if not self.can_undo:
            return None
        self._index -= 1
        self.stack_updated()
        return self.current

    def redo(self):
        """Moves the pointer forward one entry

        :returns: the snapshot to restore, or None at the end

        """
        if not self.can_redo:
            return None
        self._index += 1
        self.stack_updated()
        return self.current

    @property
    def can_undo(self):
        return self._index > 0

    @property
    def can_redo(self):
        return self._index < len(self._entries) - 1

    @property
    def undo_label(self):
        """Label of the edit undo() would revert, or None"""
        if not self.can_undo:
            return None
        return self._entries[self._index][1]

    @property
    def redo_label(self):
        """Label of the edit redo() would reapply, or None"""
        if not self.can_redo:
            return None
        return self._entries[self._index + 1][1]

    @event
    def stack_updated(self):
        """Event: the history was updated"""
        pass
