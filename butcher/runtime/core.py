
from butcher.errors import UnsatisfiedCapabilityError

class Butcher(object):
    """
    Capability of types that can be destructured out of a Cow.

    butcher(this) takes an Owned or Borrowed instance and returns the view,
    unbutcher(view) rebuilds an owned instance out of a view.
    """
    @classmethod
    def butcher(cls, this):
        raise NotImplementedError()

    @classmethod
    def unbutcher(cls, view):
        raise NotImplementedError()

class View(object):
    """ Base of generated view types. """
    SOURCE = None

    def unbutcher(self):
        if self.SOURCE is None:
            raise UnsatisfiedCapabilityError(self, "Butcher")
        return self.SOURCE.unbutcher(self)

class Sum(object):
    """ Tagged unions, source and view alike. """
    VARIANTS = ()
    DISCRIMINANT = None

    @property
    def discriminant(self):
        return self.DISCRIMINANT

def is_butcherable(value):
    cls = value if isinstance(value, type) else type(value)
    return callable(getattr(cls, "butcher", None)) and callable(getattr(cls, "unbutcher", None))

def variant_of(base, name):
    """
    Registers the decorated class as the variant called name of the union base:

        @variant_of(WebEvent, "KeyPress")
        @dataclass
        class _WebEvent_KeyPress(WebEvent):
            ...

    after which it is reachable as WebEvent.KeyPress.
    """
    def decorator(cls):
        cls.DISCRIMINANT = name
        cls.__name__ = name
        cls.__qualname__ = "%s.%s" % (base.__qualname__, name)
        setattr(base, name, cls)
        return cls
    return decorator
