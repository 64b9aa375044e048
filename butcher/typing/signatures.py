
import typing
from butcher.typing import exprs
from butcher.typing.decls import TypeDeclaration, TypeParam

def create_type_signature(decl : TypeDeclaration) -> exprs.Path:
    """
    Builds the fully applied signature of a declaration, ie for

        record Foo<'a, T: Clone, const N: usize> { ... }

    this returns the path Foo<'a, T>.  Const parameters are dropped, bounds
    are dropped, everything else is kept in declaration order.
    """
    return create_type_signature_from_raws(decl.name, decl.params)

def create_type_signature_from_raws(name : str, params : typing.List[TypeParam]) -> exprs.Path:
    args = arguments_from_params(params)
    # A declaration with only const params still applies as Foo<> would,
    # but there is nothing to write so leave the brackets out.
    arguments = exprs.AngleArgs(args) if args else None
    return exprs.Path([exprs.PathSegment(name, arguments)])

def arguments_from_params(params : typing.List[TypeParam]) -> typing.List[exprs.TypeExpr]:
    out = []
    for param in params:
        arg = generic_param(param)
        if arg is not None:
            out.append(arg)
    return out

def generic_param(param : TypeParam) -> typing.Optional[exprs.TypeExpr]:
    """
    Returns the argument that refers back to the given parameter or None if
    the parameter is not carried into the signature.
    """
    if param.is_type:
        return exprs.make_path(param.name)
    elif param.is_lifetime:
        return exprs.Lifetime(param.name)
    return None
