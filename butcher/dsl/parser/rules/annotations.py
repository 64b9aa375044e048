
from butcher.dsl.lexer import TokenType
from butcher.dsl.errors import SourceException
from butcher.dsl.parser.rules.types import parse_type_expr, parse_bounds
from butcher.errors import AnnotationSyntaxError
from butcher.typing import exprs

ANNOTATION_NAME = "butcher"

########################################################################
##          Annotation Parsing Rules
########################################################################

class FieldAnnotation(object):
    """
    What a @butcher(...) annotation says about a field:  the strategy tag
    (None if not given) and the bound clauses to add verbatim.
    """
    def __init__(self, strategy = None, bounds = None, line = 0, col = 0):
        self.strategy = strategy
        self.bounds = list(bounds or [])
        self.line = line
        self.col = col

    def __repr__(self):
        return "<FieldAnnotation(%s), Bounds: %s>" % (self.strategy, ", ".join(self.bounds))

def parse_annotations(parser, declaration = None, field = None):
    """
    Parse the list of annotations preceding a field:

        annotations := annotation *

    At most one @butcher annotation is allowed per field.
    """
    out = None
    while parser.peeked_token_is(TokenType.AT):
        token = parser.peek_token()
        annotation = parse_annotation(parser, declaration, field)
        if out is not None:
            raise AnnotationSyntaxError("Duplicate @%s annotation" % ANNOTATION_NAME,
                                        declaration, field, token.line, token.col)
        out = annotation
    return out

def parse_annotation(parser, declaration = None, field = None):
    """
    Parse an annotation:

        annotation := "@" "butcher" ( "(" ( item ( "," item ) * "," ? ) ? ")" ) ?

        item := strategy_name | bound

        bound := type_expr ":" bounds

    The strategy name, when present, must be the first item.
    """
    at = parser.next_token()
    def fail(msg, token = None):
        token = token or at
        raise AnnotationSyntaxError(msg, declaration, field, token.line, token.col)

    if not parser.peeked_token_is(TokenType.IDENTIFIER):
        fail("Annotation name expected after '@'", parser.peek_token())
    name = parser.ensure_token(TokenType.IDENTIFIER)
    if name != ANNOTATION_NAME:
        fail("Unknown annotation '@%s', expected '@%s'" % (name, ANNOTATION_NAME))

    out = FieldAnnotation(line = at.line, col = at.col)
    if not parser.next_token_is(TokenType.OPEN_PAREN):
        return out

    first = True
    while not parser.next_token_is(TokenType.CLOSE_PAREN):
        token = parser.peek_token()
        if token.tok_type == TokenType.EOS:
            fail("Unterminated annotation, expected ')'", token)
        try:
            if parser.peeked_token_is(TokenType.LIFETIME):
                lhs = exprs.Lifetime(parser.ensure_token(TokenType.LIFETIME))
            else:
                lhs = parse_type_expr(parser)
        except SourceException:
            fail("Strategy or bound clause expected", token)

        if parser.next_token_is(TokenType.COLON):
            try:
                capabilities = parse_bounds(parser)
            except SourceException:
                fail("Capability expected after '%s:'" % lhs.render(), parser.peek_token())
            out.bounds.append("%s: %s" % (lhs.render(), exprs.render_bounds(capabilities)))
        elif type(lhs) is exprs.Path and lhs.qself is None and len(lhs.segments) == 1 and lhs.segments[0].arguments is None:
            if not first:
                fail("Strategy '%s' must be the first item of the annotation" % lhs.render(), token)
            out.strategy = lhs.segments[0].ident
        else:
            fail("Expected ':' after '%s' in bound clause" % lhs.render(), parser.peek_token())

        first = False
        if not parser.next_token_is(TokenType.COMMA):
            if not parser.next_token_is(TokenType.CLOSE_PAREN):
                fail("Expected ',' or ')' in annotation", parser.peek_token())
            break
    return out
