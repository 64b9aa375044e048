
import typing

"""
Type expressions as they appear in field declarations.

These form a closed set of node classes.  Nodes are never mutated once
built; transformations (such as self reference rewriting) produce new trees.
"""

SELF = "Self"

class TypeExpr(object):
    """ Base of all type expression nodes. """
    def children(self) -> typing.List["TypeExpr"]:
        """ Type expressions directly contained in this one. """
        return []

    def _key(self):
        return ()

    def render(self) -> str:
        raise NotImplementedError()

    def __eq__(self, other):
        return type(other) is type(self) and self._key() == other._key()

    def __ne__(self, other):
        return not self.__eq__(other)

    def __hash__(self):
        return hash((type(self).__name__, self._key()))

    def __str__(self):
        return self.render()

    def __repr__(self):
        return "<%s: %s>" % (self.__class__.__name__, self.render())

########################################################################
##          Leaves
########################################################################

class Lifetime(TypeExpr):
    """ A borrow duration, eg 'a """
    def __init__(self, name : str):
        assert name.startswith("'"), "Borrow durations start with a quote"
        self.name = name

    def _key(self): return (self.name,)

    def render(self): return self.name

class ConstArg(TypeExpr):
    """ A const valued generic argument or array length, eg 4 or N """
    def __init__(self, value : str):
        self.value = value

    def _key(self): return (self.value,)

    def render(self): return self.value

class Infer(TypeExpr):
    def render(self): return "_"

class Never(TypeExpr):
    def render(self): return "!"

class Verbatim(TypeExpr):
    """ Tokens we do not look into, eg macro invocations in type position. """
    def __init__(self, text : str):
        self.text = text

    def _key(self): return (self.text,)

    def render(self): return self.text

########################################################################
##          Paths and generic arguments
########################################################################

class Binding(object):
    """ An associated type binding inside generic arguments, eg Item = T """
    def __init__(self, name : str, value : TypeExpr):
        self.name = name
        self.value = value

    def __eq__(self, other):
        return type(other) is Binding and (self.name, self.value) == (other.name, other.value)

    def __hash__(self):
        return hash((self.name, self.value))

    def render(self):
        return "%s = %s" % (self.name, self.value.render())

class Constraint(object):
    """ An associated type constraint inside generic arguments, eg Item: Clone + Debug """
    def __init__(self, name : str, bounds : typing.List[TypeExpr]):
        self.name = name
        self.bounds = list(bounds)

    def __eq__(self, other):
        return type(other) is Constraint and (self.name, self.bounds) == (other.name, other.bounds)

    def __hash__(self):
        return hash((self.name, tuple(self.bounds)))

    def render(self):
        return "%s: %s" % (self.name, render_bounds(self.bounds))

class AngleArgs(object):
    """ Angle bracketed arguments of a path segment:  <'a, T, 4, Item = U> """
    def __init__(self, args):
        self.args = list(args)

    def types(self):
        out = []
        for arg in self.args:
            if type(arg) is Binding:
                out.append(arg.value)
            elif type(arg) is Constraint:
                out.extend(arg.bounds)
            else:
                out.append(arg)
        return out

    def __eq__(self, other):
        return type(other) is AngleArgs and self.args == other.args

    def __hash__(self):
        return hash(tuple(self.args))

    def render(self):
        return "<" + ", ".join(arg.render() for arg in self.args) + ">"

class ParenArgs(object):
    """ Parenthesized arguments of a path segment as in Fn(A, B) -> C """
    def __init__(self, inputs, output = None):
        self.inputs = list(inputs)
        self.output = output

    def types(self):
        return self.inputs + ([self.output] if self.output is not None else [])

    def __eq__(self, other):
        return type(other) is ParenArgs and (self.inputs, self.output) == (other.inputs, other.output)

    def __hash__(self):
        return hash((tuple(self.inputs), self.output))

    def render(self):
        out = "(" + ", ".join(i.render() for i in self.inputs) + ")"
        if self.output is not None:
            out += " -> " + self.output.render()
        return out

class PathSegment(object):
    def __init__(self, ident : str, arguments = None):
        self.ident = ident
        self.arguments = arguments

    def __eq__(self, other):
        return type(other) is PathSegment and (self.ident, self.arguments) == (other.ident, other.arguments)

    def __hash__(self):
        return hash((self.ident, self.arguments))

    def render(self):
        if self.arguments is None:
            return self.ident
        return self.ident + self.arguments.render()

class QSelf(object):
    """
    The qualified self part of a path like <T as Deref>::Target.  position is
    the number of leading path segments that make up the trait.
    """
    def __init__(self, ty : TypeExpr, position : int = 0):
        self.ty = ty
        self.position = position

    def __eq__(self, other):
        return type(other) is QSelf and (self.ty, self.position) == (other.ty, other.position)

    def __hash__(self):
        return hash((self.ty, self.position))

class Path(TypeExpr):
    def __init__(self, segments : typing.List[PathSegment], qself : QSelf = None):
        assert segments, "Paths need atleast one segment"
        self.segments = list(segments)
        self.qself = qself

    def children(self):
        out = [self.qself.ty] if self.qself else []
        for seg in self.segments:
            if seg.arguments is not None:
                out.extend(seg.arguments.types())
        return out

    def _key(self):
        return (tuple(self.segments), self.qself)

    @property
    def last(self) -> PathSegment:
        return self.segments[-1]

    def is_ident(self, name : str) -> bool:
        return self.qself is None and len(self.segments) == 1 and \
                self.segments[0].ident == name and self.segments[0].arguments is None

    def render(self):
        segs = [seg.render() for seg in self.segments]
        if self.qself is None:
            return "::".join(segs)
        pos = self.qself.position
        head = "<" + self.qself.ty.render()
        if pos > 0:
            head += " as " + "::".join(segs[:pos])
        head += ">"
        return "::".join([head] + segs[pos:])

########################################################################
##          Compound forms
########################################################################

class Array(TypeExpr):
    def __init__(self, elem : TypeExpr, length : str):
        self.elem = elem
        self.length = length

    def children(self): return [self.elem]
    def _key(self): return (self.elem, self.length)
    def render(self): return "[%s; %s]" % (self.elem.render(), self.length)

class Slice(TypeExpr):
    def __init__(self, elem : TypeExpr):
        self.elem = elem

    def children(self): return [self.elem]
    def _key(self): return (self.elem,)
    def render(self): return "[%s]" % self.elem.render()

class Tuple(TypeExpr):
    def __init__(self, elems : typing.List[TypeExpr]):
        self.elems = list(elems)

    def children(self): return list(self.elems)
    def _key(self): return tuple(self.elems)

    def render(self):
        if len(self.elems) == 1:
            return "(%s,)" % self.elems[0].render()
        return "(" + ", ".join(e.render() for e in self.elems) + ")"

class Group(TypeExpr):
    """ A parenthesized type, eg (dyn Fn() + 'a) """
    def __init__(self, elem : TypeExpr):
        self.elem = elem

    def children(self): return [self.elem]
    def _key(self): return (self.elem,)
    def render(self): return "(%s)" % self.elem.render()

class Function(TypeExpr):
    """ A bare function type:  fn(A, B) -> C """
    def __init__(self, inputs : typing.List[TypeExpr], output : TypeExpr = None):
        self.inputs = list(inputs)
        self.output = output

    def children(self):
        return self.inputs + ([self.output] if self.output is not None else [])

    def _key(self): return (tuple(self.inputs), self.output)

    def render(self):
        out = "fn(" + ", ".join(i.render() for i in self.inputs) + ")"
        if self.output is not None:
            out += " -> " + self.output.render()
        return out

class Reference(TypeExpr):
    def __init__(self, elem : TypeExpr, lifetime : Lifetime = None, mutable : bool = False):
        self.elem = elem
        self.lifetime = lifetime
        self.mutable = mutable

    def children(self): return [self.elem]
    def _key(self): return (self.elem, self.lifetime, self.mutable)

    def render(self):
        out = "&"
        if self.lifetime is not None:
            out += self.lifetime.render() + " "
        if self.mutable:
            out += "mut "
        return out + self.elem.render()

class Pointer(TypeExpr):
    def __init__(self, elem : TypeExpr, mutable : bool = False):
        self.elem = elem
        self.mutable = mutable

    def children(self): return [self.elem]
    def _key(self): return (self.elem, self.mutable)

    def render(self):
        return ("*mut " if self.mutable else "*const ") + self.elem.render()

class ImplTrait(TypeExpr):
    def __init__(self, bounds : typing.List[TypeExpr]):
        self.bounds = list(bounds)

    def children(self): return list(self.bounds)
    def _key(self): return tuple(self.bounds)
    def render(self): return "impl " + render_bounds(self.bounds)

class TraitObject(TypeExpr):
    def __init__(self, bounds : typing.List[TypeExpr]):
        self.bounds = list(bounds)

    def children(self): return list(self.bounds)
    def _key(self): return tuple(self.bounds)
    def render(self): return "dyn " + render_bounds(self.bounds)

########################################################################
##          Helpers
########################################################################

def render_bounds(bounds):
    return " + ".join(b.render() for b in bounds)

def make_path(ident : str, *args) -> Path:
    """ Creates a single segment path, with angle bracketed arguments if any are given. """
    arguments = AngleArgs(args) if args else None
    return Path([PathSegment(ident, arguments)])

def make_qualified(ty : TypeExpr, trait : Path, *rest : str) -> Path:
    """ Creates <ty as trait>::rest """
    segments = list(trait.segments) + [PathSegment(r) for r in rest]
    return Path(segments, QSelf(ty, len(trait.segments)))

def walk(expr : TypeExpr):
    """ Yields expr and every type expression nested inside it (depth first). """
    stack = [expr]
    while stack:
        curr = stack.pop()
        yield curr
        stack.extend(reversed(curr.children()))

def mentions_any(expr : TypeExpr, names) -> bool:
    """ Tells if any of the given (single segment) names is referred to inside expr. """
    names = set(names)
    for node in walk(expr):
        if type(node) is Path and node.qself is None and node.segments[0].ident in names:
            return True
        if type(node) is Lifetime and node.name in names:
            return True
        if type(node) is Reference and node.lifetime is not None and node.lifetime.name in names:
            return True
    return False
