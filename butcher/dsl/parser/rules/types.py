
import logging
from butcher.dsl.lexer import TokenType
from butcher.dsl.errors import UnexpectedTokenException, SourceException
from butcher.typing import exprs

logger = logging.getLogger(__name__)

########################################################################
##          Type expression parsing rules
########################################################################

def parse_type_expr(parser):
    """
    Parses a type expression:

        type_expr :=    "(" ")"                             # unit tuple
                    |   "(" type_expr ")"                   # group
                    |   "(" type_expr "," ( type_expr "," ? ) * ")"
                    |   "[" type_expr "]"                   # slice
                    |   "[" type_expr ";" const_value "]"   # array
                    |   "&" LIFETIME ? "mut" ? type_expr
                    |   "*" ( "const" | "mut" ) type_expr
                    |   "!"
                    |   "_"
                    |   "fn" "(" type_list ")" ( "->" type_expr ) ?
                    |   "impl" bounds
                    |   "dyn" bounds
                    |   path ( "!" token_group ) ?
    """
    if parser.next_token_is(TokenType.OPEN_PAREN):
        return parse_tuple_or_group(parser)
    elif parser.next_token_is(TokenType.OPEN_SQUARE):
        elem = parse_type_expr(parser)
        if parser.next_token_is(TokenType.SEMI_COLON):
            length = parse_const_value(parser)
            parser.ensure_token(TokenType.CLOSE_SQUARE)
            return exprs.Array(elem, length)
        parser.ensure_token(TokenType.CLOSE_SQUARE)
        return exprs.Slice(elem)
    elif parser.next_token_is(TokenType.AMPERSAND):
        lifetime = None
        if parser.peeked_token_is(TokenType.LIFETIME):
            lifetime = exprs.Lifetime(parser.ensure_token(TokenType.LIFETIME))
        mutable = parser.next_token_is(TokenType.IDENTIFIER, "mut")
        return exprs.Reference(parse_type_expr(parser), lifetime, mutable)
    elif parser.next_token_is(TokenType.STAR):
        if parser.next_token_is(TokenType.IDENTIFIER, "mut"):
            mutable = True
        else:
            parser.ensure_token(TokenType.IDENTIFIER, "const")
            mutable = False
        return exprs.Pointer(parse_type_expr(parser), mutable)
    elif parser.next_token_is(TokenType.BANG):
        return exprs.Never()
    elif parser.next_token_is(TokenType.IDENTIFIER, "_"):
        return exprs.Infer()
    elif parser.next_token_is(TokenType.IDENTIFIER, "fn"):
        parser.ensure_token(TokenType.OPEN_PAREN)
        inputs = parse_type_list(parser, TokenType.CLOSE_PAREN)
        output = None
        if parser.next_token_is(TokenType.ARROW):
            output = parse_type_expr(parser)
        return exprs.Function(inputs, output)
    elif parser.next_token_is(TokenType.IDENTIFIER, "impl"):
        return exprs.ImplTrait(parse_bounds(parser))
    elif parser.next_token_is(TokenType.IDENTIFIER, "dyn"):
        return exprs.TraitObject(parse_bounds(parser))
    elif parser.peeked_token_is(TokenType.IDENTIFIER) or parser.peeked_token_is(TokenType.LESS_THAN):
        path = parse_path(parser)
        if parser.peeked_token_is(TokenType.BANG):
            return parse_macro(parser, path)
        return path
    raise UnexpectedTokenException(parser.peek_token(), "type")

def parse_tuple_or_group(parser):
    """ Called after the opening paren has been consumed. """
    if parser.next_token_is(TokenType.CLOSE_PAREN):
        return exprs.Tuple([])
    first = parse_type_expr(parser)
    if parser.next_token_is(TokenType.CLOSE_PAREN):
        return exprs.Group(first)
    parser.ensure_token(TokenType.COMMA)
    elems = [first] + parse_type_list(parser, TokenType.CLOSE_PAREN)
    return exprs.Tuple(elems)

def parse_type_list(parser, close_token):
    """
    Parses a comma separated list of types (a trailing comma is allowed) upto
    and including the close token.
    """
    out = []
    while not parser.next_token_is(close_token):
        out.append(parse_type_expr(parser))
        if not parser.next_token_is(TokenType.COMMA):
            parser.ensure_token(close_token)
            break
    return out

def parse_const_value(parser):
    """
        const_value := NUMBER | IDENT
    """
    if parser.peeked_token_is(TokenType.NUMBER):
        return parser.ensure_token(TokenType.NUMBER)
    elif parser.peeked_token_is(TokenType.IDENTIFIER):
        return parser.ensure_token(TokenType.IDENTIFIER)
    raise UnexpectedTokenException(parser.peek_token(), TokenType.NUMBER.value, TokenType.IDENTIFIER.value)

def parse_path(parser):
    """
    Parses a (possibly qualified) path:

        path := ( "<" type_expr ( "as" path ) ? ">" "::" ) ? segment ( "::" segment ) *
        segment := IDENT ( "::" ? generic_args | paren_args ) ?
    """
    qself = None
    trait_segments = []
    if parser.next_token_is(TokenType.LESS_THAN):
        qself_type = parse_type_expr(parser)
        if parser.next_token_is(TokenType.IDENTIFIER, "as"):
            trait_segments = parse_path(parser).segments
        parser.ensure_token(TokenType.GREATER_THAN)
        parser.ensure_token(TokenType.DOUBLE_COLON)
        qself = exprs.QSelf(qself_type, len(trait_segments))

    segments = trait_segments + [parse_path_segment(parser)]
    while parser.next_token_is(TokenType.DOUBLE_COLON):
        segments.append(parse_path_segment(parser))
    return exprs.Path(segments, qself)

def parse_path_segment(parser):
    ident = parser.ensure_token(TokenType.IDENTIFIER)
    arguments = None
    if parser.peeked_token_is(TokenType.LESS_THAN):
        arguments = parse_generic_args(parser)
    elif parser.peeked_token_is(TokenType.DOUBLE_COLON):
        # Turbofish - Foo::<T>
        colons = parser.next_token()
        if parser.peeked_token_is(TokenType.LESS_THAN):
            arguments = parse_generic_args(parser)
        else:
            parser.unget_token(colons)
    elif parser.next_token_is(TokenType.OPEN_PAREN):
        inputs = parse_type_list(parser, TokenType.CLOSE_PAREN)
        output = None
        if parser.next_token_is(TokenType.ARROW):
            output = parse_type_expr(parser)
        arguments = exprs.ParenArgs(inputs, output)
    return exprs.PathSegment(ident, arguments)

def parse_generic_args(parser):
    """
        generic_args := "<" ( generic_arg ( "," generic_arg ) * "," ? ) ? ">"
        generic_arg :=      LIFETIME
                        |   NUMBER
                        |   IDENT "=" type_expr
                        |   IDENT ":" bounds
                        |   type_expr
    """
    parser.ensure_token(TokenType.LESS_THAN)
    args = []
    while not parser.next_token_is(TokenType.GREATER_THAN):
        args.append(parse_generic_arg(parser))
        if not parser.next_token_is(TokenType.COMMA):
            parser.ensure_token(TokenType.GREATER_THAN)
            break
    return exprs.AngleArgs(args)

def parse_generic_arg(parser):
    if parser.peeked_token_is(TokenType.LIFETIME):
        return exprs.Lifetime(parser.ensure_token(TokenType.LIFETIME))
    elif parser.peeked_token_is(TokenType.NUMBER):
        return exprs.ConstArg(parser.ensure_token(TokenType.NUMBER))
    elif parser.peeked_token_is(TokenType.IDENTIFIER):
        name_tok = parser.next_token()
        if parser.next_token_is(TokenType.EQUALS):
            return exprs.Binding(name_tok.value, parse_type_expr(parser))
        elif parser.next_token_is(TokenType.COLON):
            return exprs.Constraint(name_tok.value, parse_bounds(parser))
        parser.unget_token(name_tok)
    return parse_type_expr(parser)

def parse_bounds(parser):
    """
        bounds := bound ( "+" bound ) *
        bound := LIFETIME | path | "(" path ")"
    """
    bounds = [parse_bound(parser)]
    while parser.next_token_is(TokenType.PLUS):
        bounds.append(parse_bound(parser))
    return bounds

def parse_bound(parser):
    if parser.peeked_token_is(TokenType.LIFETIME):
        return exprs.Lifetime(parser.ensure_token(TokenType.LIFETIME))
    elif parser.next_token_is(TokenType.OPEN_PAREN):
        out = exprs.Group(parse_path(parser))
        parser.ensure_token(TokenType.CLOSE_PAREN)
        return out
    return parse_path(parser)

CLOSERS = {
    TokenType.OPEN_PAREN: TokenType.CLOSE_PAREN,
    TokenType.OPEN_SQUARE: TokenType.CLOSE_SQUARE,
    TokenType.OPEN_BRACE: TokenType.CLOSE_BRACE,
}

def parse_macro(parser, path):
    """
    A macro in type position, eg my_type!(u8).  The tokens inside are kept
    verbatim as we have no idea what they mean.

        macro := path "!" ( "(" tokens ")" | "[" tokens "]" | "{" tokens "}" )
    """
    parser.ensure_token(TokenType.BANG)
    open_tok = parser.next_token()
    if open_tok.tok_type not in CLOSERS:
        raise UnexpectedTokenException(open_tok, "(", "[", "{")
    stack = [CLOSERS[open_tok.tok_type]]
    values = [open_tok.value]
    while stack:
        tok = parser.next_token()
        if tok.tok_type == TokenType.EOS:
            raise SourceException(open_tok.line, open_tok.col, "Unterminated macro invocation '%s!'" % path.render())
        if tok.tok_type in CLOSERS:
            stack.append(CLOSERS[tok.tok_type])
        elif tok.tok_type == stack[-1]:
            stack.pop()
        values.append(tok.value)
    return exprs.Verbatim("%s!%s" % (path.render(), join_tokens(values)))

def join_tokens(values):
    out = ""
    for value in values:
        if out and out[-1] not in "([{" and value not in ")]},":
            out += " "
        out += value
    return out
