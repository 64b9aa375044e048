
from butcher.runtime.cow import Owned, Borrowed

class CowIter(object):
    """
    Iterates over a Cow of a collection, yielding a Cow per element.

    When the collection is owned the elements are handed out as owned values
    one at a time, otherwise each element is borrowed in the scope of the
    collection.  The iterator is single pass and cannot be restarted.
    """
    def __init__(self, elements, scope = None):
        self._elements = elements
        self._scope = scope

    @classmethod
    def from_cow(cls, cow):
        if cow.is_owned:
            return cls(iter(cow.into_owned()))
        return cls(iter(cow.referent), cow.scope)

    @property
    def is_owned(self):
        return self._scope is None

    def __iter__(self):
        return self

    def __next__(self):
        element = next(self._elements)
        if self._scope is None:
            return Owned(element)
        self._scope.check()
        return Borrowed(element, self._scope)

def cow_iter(cow):
    return CowIter.from_cow(cow)
