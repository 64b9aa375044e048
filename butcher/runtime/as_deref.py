
from butcher.runtime.cow import Owned, Borrowed
from butcher.runtime import ownership

def as_deref(this):
    """
    Turns a Cow of T into a Cow of the value T borrows through to, eg a Cow
    of bytes into a Cow of memoryview.

    Owned values are converted into the owned form of their target, borrowed
    ones are borrowed through directly, in the same scope.
    """
    if this.is_owned:
        return Owned(ownership.into_target(this.into_owned()))
    return Borrowed(ownership.deref(this.referent), this.scope)
