
import pytest
from butcher import errors
from butcher.runtime import Owned, Borrowed, Scope, STATIC, borrow, Box
from butcher.runtime import CowIter, cow_iter, unnest, as_deref, methods
from butcher.runtime import ownership

class CloneCounter(object):
    """ Counts how many times instances get cloned. """
    clones = 0

    def __init__(self, value):
        self.value = value

    def __deepcopy__(self, memo):
        CloneCounter.clones += 1
        return CloneCounter(self.value)

    def __eq__(self, other):
        return type(other) is CloneCounter and other.value == self.value

@pytest.fixture
def counter():
    CloneCounter.clones = 0
    return CloneCounter

########################################################################
##          Cows
########################################################################

def test_owned():
    cow = Owned([1, 2])
    assert cow.is_owned and not cow.is_borrowed
    assert cow.get() == [1, 2]
    assert cow.owned() is cow
    assert repr(Owned(4)) == "Owned(4)"

def test_borrowed_into_owned_copies(counter):
    value = counter(1)
    cow = Borrowed(value)
    assert cow.is_borrowed and not cow.is_owned
    assert cow.scope is STATIC
    assert cow.get() is value
    assert counter.clones == 0
    owned = cow.into_owned()
    assert owned == value and owned is not value
    assert counter.clones == 1
    assert cow.owned().is_owned
    assert repr(Borrowed(4)) == "Borrowed(4)"

def test_cow_equality():
    assert Owned(4) == Borrowed(4)
    assert Owned(4) != Owned(5)
    assert Owned(4) != 4

def test_borrow_scope():
    value = [1, 2, 3]
    with borrow(value) as cow:
        assert cow.is_borrowed
        assert cow.get() is value
        assert cow.scope.is_open
        derived = Borrowed(value[0], cow.scope)
    assert not cow.scope.is_open
    with pytest.raises(errors.BorrowExpiredError):
        cow.get()
    with pytest.raises(errors.BorrowExpiredError):
        derived.into_owned()
    assert repr(derived) == "Borrowed(<expired>)"

def test_static_scope_never_closes():
    STATIC.close()
    assert STATIC.is_open
    scope = Scope("mine")
    scope.close()
    with pytest.raises(errors.BorrowExpiredError):
        scope.check()

########################################################################
##          Ownership relations
########################################################################

def test_memoryview_to_owned():
    data = b"hello"
    assert ownership.to_owned(memoryview(data)) == b"hello"
    assert type(ownership.to_owned(memoryview(bytearray(b"ab")))) is bytearray

def test_deref_relations():
    data = b"hello"
    view = ownership.deref(data)
    assert type(view) is memoryview and view.obj is data
    assert ownership.into_target(data) is data
    box = Box([1])
    assert ownership.deref(box) is box.value
    assert ownership.into_target(box) is box.value
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        ownership.deref(42)

def test_registered_relations_cover_subclasses():
    class Name(str):
        pass

    ownership.register_to_owned(Name, lambda n: Name(n.upper()))
    try:
        assert ownership.to_owned(type("Sub", (Name,), {})("bob")) == "BOB"
    finally:
        del ownership.TO_OWNED[Name]

def test_box_equality():
    assert Box(1) == Box(1)
    assert Box(1) != Box(2)
    assert repr(Box(1)) == "Box(1)"

########################################################################
##          Sequence views, unnesting and deref collapsing
########################################################################

def test_cow_iter_owned():
    items = list(CowIter.from_cow(Owned([4, 1, 3, 5])))
    assert items == [Owned(4), Owned(1), Owned(3), Owned(5)]
    assert all(item.is_owned for item in items)

def test_cow_iter_borrowed():
    values = [4, 1, 3, 5]
    with borrow(values) as cow:
        items = list(cow_iter(cow))
        assert items == [Borrowed(4), Borrowed(1), Borrowed(3), Borrowed(5)]
        assert all(item.is_borrowed and item.scope is cow.scope for item in items)

def test_cow_iter_single_pass():
    it = cow_iter(Owned([1]))
    assert next(it) == Owned(1)
    with pytest.raises(StopIteration):
        next(it)
    assert list(it) == []

def test_cow_iter_borrowed_elements_not_copied():
    values = [[1], [2]]
    items = list(cow_iter(Borrowed(values)))
    assert items[0].get() is values[0]
    assert items[1].get() is values[1]

def test_unnest():
    for nested in (Owned(Owned(42)), Owned(Borrowed(42)), Borrowed(Owned(42)), Borrowed(Borrowed(42))):
        out = unnest(nested)
        assert out.is_owned
        assert out == Owned(42)

def test_unnest_owned_owned_keeps_inner():
    inner = Owned([1])
    assert unnest(Owned(inner)) is inner

def test_unnest_clones_innermost_only(counter):
    value = counter(1)
    for nested in (Owned(Borrowed(value)), Borrowed(Owned(value)), Borrowed(Borrowed(value))):
        counter.clones = 0
        out = unnest(nested)
        assert out.get() == value and out.get() is not value
        assert counter.clones == 1

def test_as_deref():
    data = b"abc"
    owned = as_deref(Owned(data))
    assert owned.is_owned and owned.get() == b"abc"

    borrowed = as_deref(Borrowed(data))
    assert borrowed.is_borrowed
    assert type(borrowed.get()) is memoryview and borrowed.get().obj is data
    assert borrowed.into_owned() == b"abc"

def test_as_deref_keeps_scope():
    with borrow(Box([1, 2])) as cow:
        out = as_deref(cow)
        assert out.get() == [1, 2]
        assert out.scope is cow.scope
    with pytest.raises(errors.BorrowExpiredError):
        out.get()

########################################################################
##          Butchering methods
########################################################################

def test_regular(counter):
    value = counter(1)
    assert methods.Regular.from_owned(value) == Owned(value)
    borrowed = methods.Regular.from_borrowed(value, STATIC)
    assert borrowed.is_borrowed and borrowed.get() is value
    assert counter.clones == 0
    assert methods.Regular.to_owned(borrowed) == value

def test_copy(counter):
    value = counter(1)
    assert methods.Copy.from_owned(value) is value
    copied = methods.Copy.from_borrowed(value, STATIC)
    assert copied == value and copied is not value
    assert counter.clones == 1
    assert methods.Copy.to_owned(copied) is copied

def test_flatten():
    data = bytearray(b"xyz")
    owned = methods.Flatten.from_owned(data)
    assert owned.is_owned and owned.get() is data
    borrowed = methods.Flatten.from_borrowed(data, STATIC)
    assert borrowed.get().obj is data
    assert methods.Flatten.to_owned(borrowed) == data
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Flatten.from_borrowed(42, STATIC)

def test_unbox():
    box = Box([1])
    assert methods.Unbox.from_owned(box) == Owned([1])
    borrowed = methods.Unbox.from_borrowed(box, STATIC)
    assert borrowed.get() is box.value
    assert methods.Unbox.to_owned(borrowed) == box
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Unbox.from_owned([1])

def test_rebutcher_requires_butcher():
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Rebutcher.from_owned(42)
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Rebutcher.to_owned(42)

def test_unnest_uses_owned_forms():
    nested = (Owned(Borrowed(memoryview(b"xy"))), Borrowed(Owned(memoryview(b"xy"))),
              Borrowed(Borrowed(memoryview(b"xy"))))
    for cow in nested:
        out = unnest(cow)
        assert out.is_owned
        assert type(out.get()) is bytes and out.get() == b"xy"

def test_flatten_str():
    owned = methods.Flatten.from_owned("abc")
    assert owned.is_owned and owned.get() == "abc"
    assert methods.Flatten.to_owned(owned) == "abc"

    value = "abc"
    borrowed = methods.Flatten.from_borrowed(value, STATIC)
    assert borrowed.is_borrowed and borrowed.get() is value
    assert methods.Flatten.to_owned(borrowed) == "abc"

def test_flatten_requires_lossless_target():
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Flatten.from_owned(Box([1]))
    with pytest.raises(errors.UnsatisfiedCapabilityError):
        methods.Flatten.from_borrowed(Box([1]), STATIC)

def test_is_flattenable():
    class Handle(object):
        def deref(self):
            return 1

    assert ownership.is_flattenable(b"a")
    assert ownership.is_flattenable(bytearray(b"a"))
    assert ownership.is_flattenable("a")
    assert ownership.is_flattenable(Handle())
    assert not ownership.is_flattenable(Box(1))
    assert not ownership.is_flattenable(42)
