
import contextlib
import itertools
import logging
from butcher.errors import BorrowExpiredError
from butcher.runtime.ownership import to_owned

logger = logging.getLogger(__name__)

"""
Copy on write values.

A Cow is either Owned (the holder owns the value outright) or Borrowed (the
holder refers to a value owned by someone else, for as long as a scope stays
open).  Borrowed values are never copied until an owned value is asked for.
"""

class Scope(object):
    """
    The duration for which a borrow is valid.  Borrowed values bound to a
    closed scope refuse to hand out their referent.
    """
    _counter = itertools.count(1)

    def __init__(self, name = None):
        self.name = name or "scope-%d" % next(Scope._counter)
        self._open = True

    @property
    def is_open(self):
        return self._open

    def close(self):
        self._open = False

    def check(self):
        if not self._open:
            raise BorrowExpiredError(self)

    def __repr__(self):
        return "<Scope %s (%s)>" % (self.name, "open" if self._open else "closed")

class StaticScope(Scope):
    """ A scope that is never closed. """
    def close(self):
        pass

STATIC = StaticScope("static")

class Cow(object):
    __slots__ = ()
    is_owned = False
    is_borrowed = False

    def get(self):
        """ The value this cow stands for, owned or not. """
        raise NotImplementedError()

    def into_owned(self):
        """ Returns an owned value, copying the referent if it is borrowed. """
        raise NotImplementedError()

    def owned(self):
        """ Returns an Owned cow holding the same value. """
        raise NotImplementedError()

    def __eq__(self, other):
        if isinstance(other, Cow):
            return self.get() == other.get()
        return NotImplemented

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

class Owned(Cow):
    is_owned = True
    __slots__ = ("_value",)

    def __init__(self, value):
        self._value = value

    @property
    def value(self):
        return self._value

    def get(self):
        return self._value

    def into_owned(self):
        return self._value

    def owned(self):
        return self

    def __repr__(self):
        return "Owned(%r)" % (self._value,)

class Borrowed(Cow):
    is_borrowed = True
    __slots__ = ("_referent", "scope")

    def __init__(self, referent, scope = None):
        self._referent = referent
        self.scope = scope or STATIC

    @property
    def referent(self):
        self.scope.check()
        return self._referent

    def get(self):
        return self.referent

    def into_owned(self):
        return to_owned(self.referent)

    def owned(self):
        return Owned(self.into_owned())

    def __repr__(self):
        if not self.scope.is_open:
            return "Borrowed(<expired>)"
        return "Borrowed(%r)" % (self._referent,)

@contextlib.contextmanager
def borrow(value, name = None):
    """
    Lends value for the duration of a with block:

        with borrow(client) as cow:
            view = Client.butcher(cow)
            ...

    Everything derived from cow (views included) stops being usable once the
    block is left.
    """
    scope = Scope(name)
    logger.debug("Opening %r", scope)
    try:
        yield Borrowed(value, scope)
    finally:
        scope.close()
        logger.debug("Closed %r", scope)
