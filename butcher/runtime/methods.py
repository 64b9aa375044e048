
from butcher.errors import UnsatisfiedCapabilityError
from butcher.runtime.cow import Owned, Borrowed
from butcher.runtime.core import is_butcherable
from butcher.runtime import ownership
from butcher.runtime.as_deref import as_deref

"""
Different ways to butcher a field.

Each butchering method defines how the view field is produced out of the
source field (from_owned when the input is owned, from_borrowed when it is
borrowed for a scope) and how the source field is produced back out of the
view field (to_owned).  Generated code calls these directly, the method of
every field being fixed when the code is generated.
"""

class ButcheringMethod(object):
    @staticmethod
    def from_owned(value):
        raise NotImplementedError()

    @staticmethod
    def from_borrowed(value, scope = None):
        raise NotImplementedError()

    @staticmethod
    def to_owned(output):
        raise NotImplementedError()

class Regular(ButcheringMethod):
    """
    Wraps a field into a Cow.  Borrowed fields are not copied.
    """
    @staticmethod
    def from_owned(value):
        return Owned(value)

    @staticmethod
    def from_borrowed(value, scope = None):
        return Borrowed(value, scope)

    @staticmethod
    def to_owned(output):
        return output.into_owned()

class Copy(ButcheringMethod):
    """
    Does not produce any Cow at all, the data is moved when owned and
    cloned when borrowed.  Best suited for small values.
    """
    @staticmethod
    def from_owned(value):
        return value

    @staticmethod
    def from_borrowed(value, scope = None):
        return ownership.clone(value)

    @staticmethod
    def to_owned(output):
        return output

class Flatten(ButcheringMethod):
    """
    Borrows through a field to its deref target, eg bytes into a memoryview,
    so that users never deal with a Cow of the container itself.

    Only values whose target's owned form is the value itself can be
    flattened, others (a Box) would not come back out of to_owned.
    """
    @staticmethod
    def from_owned(value):
        return as_deref(Owned(ensure_flattenable(value)))

    @staticmethod
    def from_borrowed(value, scope = None):
        return as_deref(Borrowed(ensure_flattenable(value), scope))

    @staticmethod
    def to_owned(output):
        return output.into_owned()

class Unbox(ButcheringMethod):
    """
    Gets the data out of a Box, as often found around recursive fields.
    """
    @staticmethod
    def from_owned(value):
        return Owned(unbox(value))

    @staticmethod
    def from_borrowed(value, scope = None):
        return Borrowed(unbox(value), scope)

    @staticmethod
    def to_owned(output):
        return ownership.Box(output.into_owned())

class Rebutcher(ButcheringMethod):
    """
    Butchers the field again, with the field type's own butcher.
    """
    @staticmethod
    def from_owned(value):
        return ensure_butcherable(value).butcher(Owned(value))

    @staticmethod
    def from_borrowed(value, scope = None):
        return ensure_butcherable(value).butcher(Borrowed(value, scope))

    @staticmethod
    def to_owned(output):
        if not callable(getattr(output, "unbutcher", None)):
            raise UnsatisfiedCapabilityError(output, "Unbutcher")
        return output.unbutcher()

def unbox(value):
    if type(value) is not ownership.Box:
        raise UnsatisfiedCapabilityError(value, "Box")
    return value.value

def ensure_flattenable(value):
    if not ownership.is_flattenable(value):
        raise UnsatisfiedCapabilityError(value, "Flatten")
    return value

def ensure_butcherable(value):
    if not is_butcherable(value):
        raise UnsatisfiedCapabilityError(value, "Butcher")
    return type(value)
