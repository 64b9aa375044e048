
import typing
from butcher import errors
from butcher.typing import exprs

"""
The closed set of butchering strategies as seen at generation time.

Each descriptor knows which runtime method the generated code must call,
how the type of a field is transformed into the type of the view field and
which capabilities the field type is required to have.
"""

REGULAR = "regular"
COPY = "copy"
FLATTEN = "flatten"
UNBOX = "unbox"
REBUTCHER = "rebutcher"

STRATEGY_TAGS = (REGULAR, COPY, FLATTEN, UNBOX, REBUTCHER)
DEFAULT_STRATEGY = REGULAR

class StrategyDescriptor(object):
    def __init__(self, tag : str, method : str, transform, requirements, docs : str = ""):
        """
        Params:

            tag             -   Strategy name as written in annotations.
            method          -   Name of the class in butcher.runtime.methods implementing it.
            transform       -   f(field_type, lifetime) -> type of the view field.
            requirements    -   f(field_type, lifetime) -> [(subject, [capability])].
        """
        self.tag = tag
        self.method = method
        self._transform = transform
        self._requirements = requirements
        self.docs = docs

    def view_type(self, field_type : exprs.TypeExpr, lifetime : str) -> exprs.TypeExpr:
        return self._transform(field_type, exprs.Lifetime(lifetime))

    def requirements(self, field_type : exprs.TypeExpr, lifetime : str):
        return self._requirements(field_type, exprs.Lifetime(lifetime))

    def bounds(self, field_type : exprs.TypeExpr, lifetime : str) -> typing.List[str]:
        """ The requirements rendered as "Subject: Cap + Cap" clauses. """
        return ["%s: %s" % (subject.render(), exprs.render_bounds(caps))
                for subject, caps in self.requirements(field_type, lifetime)]

    def __repr__(self):
        return "<StrategyDescriptor %s -> %s>" % (self.tag, self.method)

########################################################################
##          Type transforms and requirements
########################################################################

CLONE = exprs.make_path("Clone")
DEREF = exprs.make_path("Deref")
TO_OWNED = exprs.make_path("ToOwned")

def cow_of(lifetime, ty):
    return exprs.make_path("Cow", lifetime, ty)

def deref_target(ty):
    return exprs.make_qualified(ty, DEREF, "Target")

def boxed_type(ty):
    """ Returns T if ty is Box<T>, otherwise None. """
    if type(ty) is not exprs.Path or ty.qself is not None:
        return None
    last = ty.last
    if last.ident != "Box" or type(last.arguments) is not exprs.AngleArgs:
        return None
    if len(last.arguments.args) != 1 or not isinstance(last.arguments.args[0], exprs.TypeExpr):
        return None
    inner = last.arguments.args[0]
    if type(inner) in (exprs.Lifetime, exprs.ConstArg):
        return None
    return inner

def unboxed_type(ty):
    inner = boxed_type(ty)
    return inner if inner is not None else deref_target(ty)

def butcher_trait(lifetime):
    return exprs.make_path("Butcher", lifetime)

DESCRIPTORS = {
    REGULAR: StrategyDescriptor(REGULAR, "Regular",
                lambda ty, lt: cow_of(lt, ty),
                lambda ty, lt: [(ty, [CLONE])],
                "Wraps the field in a Cow without copying it."),
    COPY: StrategyDescriptor(COPY, "Copy",
                lambda ty, lt: ty,
                lambda ty, lt: [(ty, [CLONE])],
                "Moves the field when owned, clones it when borrowed."),
    FLATTEN: StrategyDescriptor(FLATTEN, "Flatten",
                lambda ty, lt: cow_of(lt, deref_target(ty)),
                lambda ty, lt: [(ty, [DEREF, exprs.make_path("Borrow", deref_target(ty))]),
                                (deref_target(ty), [TO_OWNED])],
                "Borrows through the field to its deref target."),
    UNBOX: StrategyDescriptor(UNBOX, "Unbox",
                lambda ty, lt: cow_of(lt, unboxed_type(ty)),
                lambda ty, lt: [(unboxed_type(ty), [CLONE])],
                "Gets rid of the Box around the field."),
    REBUTCHER: StrategyDescriptor(REBUTCHER, "Rebutcher",
                lambda ty, lt: exprs.make_qualified(ty, butcher_trait(lt), "Output"),
                lambda ty, lt: [(ty, [butcher_trait(lt), CLONE])],
                "Butchers the field again with its own generated view."),
}

def resolve_strategy(tag : str, declaration : str = None, field : str = None) -> StrategyDescriptor:
    """ Returns the descriptor for a strategy tag. """
    if tag not in DESCRIPTORS:
        raise errors.UnknownStrategyError(tag, declaration, field)
    return DESCRIPTORS[tag]
