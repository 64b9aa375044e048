
from butcher.runtime.cow import Owned
from butcher.runtime.ownership import to_owned

def unnest(this):
    """
    Collapses a Cow of a Cow into a single Cow.  The result is always owned:

        Owned(Owned(x))         ->  the inner cow itself
        Owned(Borrowed(x))      ->  Owned(to_owned(x))
        Borrowed(Owned(x))      ->  Owned(to_owned(x))
        Borrowed(Borrowed(x))   ->  Owned(to_owned(x))

    Only the innermost value is ever copied, never the inner cow.  Registered
    owned forms apply, so a borrowed memoryview comes out as bytes.
    """
    inner = this.get()
    if this.is_owned and inner.is_owned:
        return inner
    return Owned(to_owned(inner.get()))
