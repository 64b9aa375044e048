
import copy
import logging
from butcher.errors import UnsatisfiedCapabilityError

logger = logging.getLogger(__name__)

"""
Ownership relations used by the runtime.

    clone           -   duplicates a value.
    to_owned        -   produces the owned form of a (borrowed) value.
    deref           -   the value a value borrows through to, without copying.
    into_target     -   converts an owned value into the owned form of its deref target.
    is_flattenable  -   whether that owned form is the value itself, in which case
                        borrowing through and converting back loses nothing.

to_owned and deref are dispatch tables keyed by type.  Lookups walk the
type's MRO so registering a base class covers its subclasses.
"""

TO_OWNED = {}
DEREFS = {}

def lookup(table, value):
    for cls in type(value).__mro__:
        if cls in table:
            return table[cls]
    return None

def clone(value):
    return copy.deepcopy(value)

def register_to_owned(cls, func):
    """ Registers how the owned form of instances of cls is obtained. """
    TO_OWNED[cls] = func

def register_deref(cls, deref_func, into_target_func = None):
    """
    Registers that instances of cls borrow through to deref_func(value).
    into_target_func converts an owned instance into the owned form of the
    target and defaults to the identity (ie the instance already is that
    owned form, as with bytes and memoryview).
    """
    DEREFS[cls] = (deref_func, into_target_func)

def to_owned(value):
    func = lookup(TO_OWNED, value)
    if func is None:
        return clone(value)
    return func(value)

def deref(value):
    entry = lookup(DEREFS, value)
    if entry is not None:
        return entry[0](value)
    if callable(getattr(value, "deref", None)):
        return value.deref()
    raise UnsatisfiedCapabilityError(value, "Deref")

def into_target(value):
    entry = lookup(DEREFS, value)
    if entry is not None:
        return value if entry[1] is None else entry[1](value)
    if callable(getattr(value, "into_target", None)):
        return value.into_target()
    if callable(getattr(value, "deref", None)):
        return value
    raise UnsatisfiedCapabilityError(value, "Deref")

def is_flattenable(value):
    entry = lookup(DEREFS, value)
    if entry is not None:
        return entry[1] is None
    return callable(getattr(value, "deref", None)) and not callable(getattr(value, "into_target", None))

class Box(object):
    """
    A single slot indirection.  Mostly seen around self referencing fields.
    """
    __slots__ = ("value",)

    def __init__(self, value):
        self.value = value

    def deref(self):
        return self.value

    def __eq__(self, other):
        if type(other) is not Box:
            return NotImplemented
        return self.value == other.value

    def __ne__(self, other):
        result = self.__eq__(other)
        if result is NotImplemented:
            return result
        return not result

    __hash__ = None

    def __repr__(self):
        return "Box(%r)" % (self.value,)

def owned_from_view(view):
    """ A memoryview's owned form is a new instance of what it views. """
    if isinstance(view.obj, (bytes, bytearray)):
        return type(view.obj)(view)
    return view.tobytes()

register_to_owned(memoryview, owned_from_view)
register_deref(bytes, memoryview)
register_deref(bytearray, memoryview)
register_deref(str, lambda value: value)
register_deref(Box, lambda box: box.value, lambda box: box.value)
