# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Main-loop task queue, fed from worker threads."""

import collections
import logging
import threading

logger = logging.getLogger(__name__)


class Processor (object):
    """Queue of tasks for processing in the main (editing) thread

    Worker threads post completion tasks here with add_work(). They run
    only when the host loop calls process() or finish_all(), so every
    mutation of the document still happens in a single thread.

    >>> p = Processor()
    >>> seen = []
    >>> p.add_work(seen.append, 1)
    >>> p.has_work()
    True
    >>> p.finish_all()
    >>> seen
    [1]

    A task that returns a true value stays queued and is called again:

    >>> counts = [3]
    >>> def countdown():
    ...     counts[0] -= 1
    ...     return counts[0] > 0
    >>> p.add_work(countdown)
    >>> p.process()
    True
    >>> p.finish_all()
    >>> counts
    [0]

    """

    def __init__(self):
        object.__init__(self)
        self._queue = collections.deque()
        self._lock = threading.Lock()
        self._stopped = False

    def has_work(self):
        with self._lock:
            return len(self._queue) > 0

    def add_work(self, func, *args, **kwargs):
        """Adds work

        :param func: a task callable.
        :param *args: passed to func
        :param **kwargs: passed to func

        Safe to call from any thread. Each callable will be called with
        the given parameters until it returns false, at which point it's
        discarded. Work added after stop() is dropped.

        """
        with self._lock:
            if self._stopped:
                logger.debug("Processor stopped: dropping %r", func)
                return
            self._queue.append((func, args, kwargs))

    def process(self):
        """Runs the task at the head of the queue once

        :returns: whether more work remains queued
        :rtype: bool

        """
        with self._lock:
            if not self._queue:
                return False
            func, args, kwargs = self._queue[0]
        func_done = not bool(func(*args, **kwargs))
        with self._lock:
            if func_done and self._queue and self._queue[0][0] is func:
                self._queue.popleft()
            return bool(self._queue)

    def finish_all(self):
        """Complete processing: finishes all queued tasks."""
        while self.process():
            pass

    def stop(self):
        """Immediately stop processing and clear the queue."""
        with self._lock:
            self._stopped = True
            self._queue.clear()

    @property
    def stopped(self):
        return self._stopped
