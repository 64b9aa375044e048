
import keyword
import logging
from butcher import errors
from butcher.dsl.lexer import TokenType
from butcher.dsl.parser.rules.annotations import parse_annotations
from butcher.dsl.parser.rules.types import parse_type_expr, parse_bounds
from butcher.generator.strategies import STRATEGY_TAGS, DEFAULT_STRATEGY
from butcher.typing import decls

logger = logging.getLogger(__name__)

########################################################################
##          Record and Union declaration parsing rules
########################################################################

def parse_record_or_union(parser):
    """
    Parses a record or a union declaration:

        declaration :=  "record" name generics ? record_body
                    |   "union" name generics ? "{" variant * "}"
    """
    category = parser.ensure_token(TokenType.IDENTIFIER)
    assert category in ("record", "union")
    docs = parser.last_docstring()
    name = ensure_public(parser.ensure_token(TokenType.IDENTIFIER), category)
    params = parse_generics(parser)

    logger.debug("Parsing new %s: '%s'", category, name)
    if category == "record":
        body = decls.RecordBody(parse_record_body(parser, name))
    else:
        body = decls.SumBody(parse_union_body(parser, name))

    decl = decls.TypeDeclaration(name, params, body, namespace = parser.namespace, docs = docs)
    return parser.add_declaration(decl)

def parse_generics(parser):
    """
    Parses the generic parameters of a declaration:

        generics := "<" ( param ( "," param ) * "," ? ) ? ">"

        param :=    LIFETIME ( ":" LIFETIME ( "+" LIFETIME ) * ) ?
                |   "const" IDENT ":" type_expr
                |   IDENT ( ":" bounds ) ?
    """
    params = []
    if not parser.next_token_is(TokenType.LESS_THAN):
        return params

    while not parser.next_token_is(TokenType.GREATER_THAN):
        if parser.peeked_token_is(TokenType.LIFETIME):
            name = parser.ensure_token(TokenType.LIFETIME)
            bounds = parse_bounds(parser) if parser.next_token_is(TokenType.COLON) else []
            params.append(decls.TypeParam(name, decls.TypeParam.LIFETIME, bounds))
        elif parser.next_token_is(TokenType.IDENTIFIER, "const"):
            name = parser.ensure_token(TokenType.IDENTIFIER)
            parser.ensure_token(TokenType.COLON)
            params.append(decls.TypeParam(name, decls.TypeParam.CONST, const_type = parse_type_expr(parser)))
        else:
            name = ensure_public(parser.ensure_token(TokenType.IDENTIFIER), "type parameter")
            bounds = parse_bounds(parser) if parser.next_token_is(TokenType.COLON) else []
            params.append(decls.TypeParam(name, decls.TypeParam.TYPE, bounds))

        if not parser.next_token_is(TokenType.COMMA):
            parser.ensure_token(TokenType.GREATER_THAN)
            break

    names = [p.name for p in params]
    for index, name in enumerate(names):
        if name in names[:index]:
            raise errors.ButcherException("Duplicate generic parameter '%s'" % name)
    return params

def parse_record_body(parser, decl_name):
    """
    Parses the body of a record (or of a union variant):

        record_body :=  "{" named_field * "}"
                    |   "(" tuple_field ( "," tuple_field ) * "," ? ")"
                    |   <nothing>
    """
    if parser.next_token_is(TokenType.OPEN_BRACE):
        fields = []
        while not parser.next_token_is(TokenType.CLOSE_BRACE):
            fields.append(parse_field_declaration(parser, decl_name, len(fields)))
            parser.next_token_if(TokenType.COMMA, consume = True)
        ensure_unique([f.name for f in fields], "field", decl_name)
        return decls.FieldList(fields, decls.FieldList.NAMED)
    elif parser.next_token_is(TokenType.OPEN_PAREN):
        fields = []
        while not parser.next_token_is(TokenType.CLOSE_PAREN):
            fields.append(parse_tuple_field(parser, decl_name, len(fields)))
            if not parser.next_token_is(TokenType.COMMA):
                parser.ensure_token(TokenType.CLOSE_PAREN)
                break
        return decls.FieldList(fields, decls.FieldList.TUPLE)
    return decls.FieldList([], decls.FieldList.UNIT)

def parse_union_body(parser, decl_name):
    """
    Parses the variants of a union:

        union_body := "{" ( variant "," ? ) * "}"

        variant := IDENT record_body
    """
    variants = []
    parser.ensure_token(TokenType.OPEN_BRACE)
    while not parser.next_token_is(TokenType.CLOSE_BRACE):
        parser.peeked_token_is(TokenType.IDENTIFIER)
        docs = parser.last_docstring()
        name = ensure_public(parser.ensure_token(TokenType.IDENTIFIER), "variant", member = True)
        fields = parse_record_body(parser, "%s.%s" % (decl_name, name))
        variants.append(decls.Variant(name, fields, docs))
        parser.next_token_if(TokenType.COMMA, consume = True)
    ensure_unique([v.name for v in variants], "variant", decl_name)
    return variants

def parse_field_declaration(parser, decl_name, index):
    """
        named_field := annotations IDENT ":" type_expr
    """
    field_name = None
    if parser.peeked_token_is(TokenType.AT):
        field_name = parser.lookahead_field_name()
    docs = parser.last_docstring()
    annotation = parse_annotations(parser, decl_name, field_name)
    docs = parser.last_docstring() or docs
    field_name = ensure_public(parser.ensure_token(TokenType.IDENTIFIER), "field", member = True)
    parser.ensure_token(TokenType.COLON)
    field_type = parse_type_expr(parser)
    return make_field(field_name, index, field_type, annotation, docs, decl_name)

def parse_tuple_field(parser, decl_name, index):
    """
        tuple_field := annotations type_expr
    """
    parser.peeked_token_is(TokenType.AT)
    docs = parser.last_docstring()
    annotation = parse_annotations(parser, decl_name, str(index))
    field_type = parse_type_expr(parser)
    return make_field(None, index, field_type, annotation, docs, decl_name)

def make_field(name, index, field_type, annotation, docs, decl_name):
    strategy = DEFAULT_STRATEGY
    bounds = []
    if annotation is not None:
        if annotation.strategy is not None:
            strategy = annotation.strategy
        bounds = annotation.bounds
    field = decls.Field(name, index, field_type, strategy, bounds, docs)
    if strategy not in STRATEGY_TAGS:
        raise errors.UnknownStrategyError(strategy, decl_name, field.label)
    return field

def ensure_unique(names, kind, decl_name):
    for index, name in enumerate(names):
        if name in names[:index]:
            raise errors.ButcherException("Duplicate %s '%s' in '%s'" % (kind, name, decl_name))

# Members every generated class defines, fields and variants cannot use them.
RESERVED_MEMBERS = ("SIGNATURE", "BOUNDS", "VARIANTS", "SOURCE", "DISCRIMINANT",
                    "butcher", "unbutcher", "discriminant")

def ensure_public(name, kind, member = False):
    # Generated modules keep their own names (runtime imports, TypeVars,
    # variant classes) behind a leading underscore.
    if name.startswith("_"):
        raise errors.ButcherException("Invalid %s name '%s', names starting with '_' are reserved" % (kind, name))
    if keyword.iskeyword(name):
        raise errors.ButcherException("Invalid %s name '%s', it is a python keyword" % (kind, name))
    if member and name in RESERVED_MEMBERS:
        raise errors.ButcherException("Invalid %s name '%s', it is used by the generated classes" % (kind, name))
    return name
