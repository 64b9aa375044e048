
import logging
from butcher.errors import UnsupportedTypeShapeError
from butcher.typing import exprs

logger = logging.getLogger(__name__)

"""
Rewrites the "Self" marker inside field types with a concrete signature.

Recursive types refer to themselves as Self.  Before strategies can be
resolved (and bounds emitted) every such reference is replaced by the
instantiated signature of the declaration, eg Option<Box<Self>> inside
List<T> becomes Option<Box<List<T>>>.
"""

def replace_self(type_expr, replacement):
    """
    Returns a copy of type_expr where every Self is replaced by replacement.
    Raises UnsupportedTypeShapeError if a form we cannot look into is found.
    """
    rewriter = REWRITERS.get(type(type_expr))
    if rewriter is None:
        raise UnsupportedTypeShapeError("%s (%s)" % (type(type_expr).__name__, type_expr.render()))
    return rewriter(type_expr, replacement)

def replace_in_declaration(decl, replacement):
    """
    Rewrites every field of a declaration.  Returns a dict of field -> rewritten type,
    keyed by the Field object itself.  Errors are attributed to the offending field.
    """
    out = {}
    for field in decl.all_fields:
        try:
            out[field] = replace_self(field.type_expr, replacement)
        except UnsupportedTypeShapeError as exc:
            raise exc.attribute(declaration = decl.name, field = field.label)
        logger.debug("Rewrote %s.%s: %s -> %s", decl.name, field.label, field.type_expr, out[field])
    return out

########################################################################
##          One rewriter per type expression form
########################################################################

def replace_in_leaf(leaf, rep):
    return leaf

def replace_in_array(array, rep):
    return exprs.Array(replace_self(array.elem, rep), array.length)

def replace_in_slice(slice_, rep):
    return exprs.Slice(replace_self(slice_.elem, rep))

def replace_in_tuple(tup, rep):
    return exprs.Tuple([replace_self(e, rep) for e in tup.elems])

def replace_in_group(group, rep):
    return exprs.Group(replace_self(group.elem, rep))

def replace_in_function(func, rep):
    output = None if func.output is None else replace_self(func.output, rep)
    return exprs.Function([replace_self(i, rep) for i in func.inputs], output)

def replace_in_reference(ref, rep):
    return exprs.Reference(replace_self(ref.elem, rep), ref.lifetime, ref.mutable)

def replace_in_pointer(ptr, rep):
    return exprs.Pointer(replace_self(ptr.elem, rep), ptr.mutable)

def replace_in_impl_trait(impl, rep):
    return exprs.ImplTrait([replace_self(b, rep) for b in impl.bounds])

def replace_in_trait_object(obj, rep):
    return exprs.TraitObject([replace_self(b, rep) for b in obj.bounds])

def replace_in_path(path, rep):
    if path.is_ident(exprs.SELF):
        return rep
    qself = path.qself
    if qself is not None:
        qself = exprs.QSelf(replace_self(qself.ty, rep), qself.position)
    segments = [exprs.PathSegment(seg.ident, replace_in_arguments(seg.arguments, rep)) for seg in path.segments]
    return exprs.Path(segments, qself)

def replace_in_arguments(arguments, rep):
    if arguments is None:
        return None
    if type(arguments) is exprs.ParenArgs:
        output = None if arguments.output is None else replace_self(arguments.output, rep)
        return exprs.ParenArgs([replace_self(i, rep) for i in arguments.inputs], output)
    return exprs.AngleArgs([replace_in_generic_argument(arg, rep) for arg in arguments.args])

def replace_in_generic_argument(arg, rep):
    if type(arg) is exprs.Binding:
        return exprs.Binding(arg.name, replace_self(arg.value, rep))
    elif type(arg) is exprs.Constraint:
        return exprs.Constraint(arg.name, [replace_self(b, rep) for b in arg.bounds])
    return replace_self(arg, rep)

REWRITERS = {
    exprs.Array: replace_in_array,
    exprs.Function: replace_in_function,
    exprs.Group: replace_in_group,
    exprs.ImplTrait: replace_in_impl_trait,
    exprs.Path: replace_in_path,
    exprs.Pointer: replace_in_pointer,
    exprs.Reference: replace_in_reference,
    exprs.Slice: replace_in_slice,
    exprs.TraitObject: replace_in_trait_object,
    exprs.Tuple: replace_in_tuple,

    # Nothing inside these can refer to Self
    exprs.Infer: replace_in_leaf,
    exprs.Never: replace_in_leaf,
    exprs.Lifetime: replace_in_leaf,
    exprs.ConstArg: replace_in_leaf,
}
