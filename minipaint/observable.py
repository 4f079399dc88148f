# This file is part of MiniPaint.
# Copyright (C) 2025 by the MiniPaint Development Team.
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 2 of the License, or
# (at your option) any later version.


"""Observable method calls and C#-like syntactic sugar for events."""

import weakref
import logging

logger = logging.getLogger(__name__)


class observable (object):  # noqa: N801
    """Decorator for methods which notify their observers after being called.

    Decorated methods can be subscribed to with "+=" and any callable
    taking the same arguments, plus the observed instance first:

    >>> class Canvas (object):
    ...     @observable
    ...     def scribble(self, n):
    ...         return n * 2
    >>> canvas = Canvas()
    >>> seen = []
    >>> canvas.scribble += lambda c, n: seen.append(n)
    >>> canvas.scribble(21)
    42
    >>> seen
    [21]

    The method body runs first, then each observer in turn. Observer
    return values are ignored.

    Bound methods are held by weak reference, so an observer object can
    be garbage collected while still subscribed. Dead observers are
    removed the next time the observed method is called.

    >>> class Panel (object):
    ...     def scribbled(self, canvas, n):
    ...         seen.append("panel saw %d" % (n,))
    >>> panel = Panel()
    >>> canvas.scribble += panel.scribbled
    >>> panel.scribbled in canvas.scribble
    True
    >>> _ = canvas.scribble(1)
    >>> seen
    [21, 1, 'panel saw 1']
    >>> del panel
    >>> _ = canvas.scribble(2)
    >>> seen[-1]
    2
    >>> canvas.scribble -= seen.append
    Traceback (most recent call last):
    ...
    ValueError: list.remove(x): x not in list

    """

    def __init__(self, func):
        """Initialize as a descriptor supporting the decorator protocol"""
        super(observable, self).__init__()
        self.func = func
        self.__doc__ = func.__doc__
        self.__name__ = func.__name__

    def __get__(self, instance, owner):
        """Returns the per-instance wrapper callable

        The wrapper is cached privately within `instance` so that
        observers stay associated with the method for its lifetime.
        A copied instance gets fresh wrappers on first access, carrying
        over the original's observers.

        """
        if instance is None:
            return self
        try:
            wrappers_dict = instance.__wrappers
        except AttributeError:
            wrappers_dict = dict()
            instance.__wrappers = wrappers_dict
        wrapper = wrappers_dict.get(self.func)
        if wrapper is None:
            wrapper = _MethodWithObservers(instance, self.func)
            wrappers_dict[self.func] = wrapper
        elif wrapper.instance_weakref() is not instance:
            # Change of identity, e.g. after copy().
            old_wrapper = wrapper
            wrapper = _MethodWithObservers(instance, self.func)
            wrapper.observers = old_wrapper.observers[:]
            wrappers_dict = dict(wrappers_dict)
            wrappers_dict[self.func] = wrapper
            instance.__wrappers = wrappers_dict
        return wrapper

    def __set__(self, obj, value):
        """Ignored (only defined to create a data descriptor)"""
        pass


class _MethodWithObservers (object):
    """Callable wrapper: calls the decorated method, then its observers"""

    def __init__(self, instance, func):
        super(_MethodWithObservers, self).__init__()
        self.observers = []
        self.func = func
        self.instance_weakref = weakref.ref(instance)
        #: True while __call__() is off notifying the observers.
        self.calling_observers = False
        self.__name__ = func.__name__
        self.__doc__ = func.__doc__

    def __call__(self, *args, **kwargs):
        observed = self.instance_weakref()
        result = self.func(observed, *args, **kwargs)
        if self.calling_observers:
            logger.debug("Recursive call to %r detected and skipped", self)
            return result
        self.calling_observers = True
        try:
            for observer in self.observers[:]:
                try:
                    observer(observed, *args, **kwargs)
                except _BoundObserverMethod._ReferenceError:
                    logger.debug("Removing %r", observer)
                    self.observers.remove(observer)
                except Exception:
                    logger.error("Failed to call observer %r", observer)
                    raise
        finally:
            del observed
            self.calling_observers = False
        return result

    def __iadd__(self, observer):
        """Registers an observer with the method to be invoked after it"""
        self.observers.append(_wrap_observer(observer))
        return self

    def __isub__(self, observer):
        """Deregisters an observer"""
        self.observers.remove(_wrap_observer(observer))
        return self

    def __iter__(self):
        return iter(self.observers)

    def __contains__(self, observer):
        return _wrap_observer(observer) in self.observers

    def __repr__(self):
        return "<_MethodWithObservers %s>" % (self.__name__,)


class event (observable):  # noqa: N801
    """Alias for observable methods with no predefined function body.

    >>> class Stack (object):
    ...     @event
    ...     def layer_inserted(self, layer_id):
    ...        '''Event: a layer was added'''
    >>> stack = Stack()
    >>> ids = []
    >>> stack.layer_inserted += lambda s, i: ids.append(i)
    >>> stack.layer_inserted("a1")
    >>> ids
    ['a1']

    """

    def __init__(self, func=None):
        if func is None:
            def func(*a, **kw):
                pass
            func.__name__ = "<event>"
        super(event, self).__init__(func)


def _wrap_observer(observer):
    """Factory function for the observers in a _MethodWithObservers."""
    if _is_bound_method(observer):
        return _BoundObserverMethod(observer)
    return observer


def _is_bound_method(func):
    return (
        hasattr(func, "__self__") and hasattr(func, "__func__")
        and func.__self__ is not None
    )


class _BoundObserverMethod (object):
    """Weakly-referencing wrapper for observers which are bound methods"""

    class _ReferenceError (ReferenceError):
        """Raised when calling if the observing object is now dead."""

    def __init__(self, method):
        super(_BoundObserverMethod, self).__init__()
        self._observer_ref = weakref.ref(method.__self__)
        self._observer_func = method.__func__

    def __repr__(self):
        dead = self._observer_ref() is None
        return "<_BoundObserverMethod %s%s>" % (
            self._observer_func.__name__,
            " (dead)" if dead else "",
        )

    def __call__(self, observed, *args, **kwargs):
        observer = self._observer_ref()
        if observer is None:
            raise self._ReferenceError
        self._observer_func(observer, observed, *args, **kwargs)

    def __eq__(self, other):
        if isinstance(other, _BoundObserverMethod):
            return (self._observer_func == other._observer_func and
                    self._observer_ref() is other._observer_ref())
        return False

    def __hash__(self):
        return hash(self._observer_func)
