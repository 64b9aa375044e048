
import logging
from butcher import errors
from butcher.context import ButcherContext
from butcher.dsl import lexer
from butcher.dsl.errors import SourceException, UnexpectedTokenException
from butcher.dsl.lexer import TokenType
from butcher.dsl.tokstream import TokenStream

logger = logging.getLogger(__name__)

class Parser(TokenStream):
    """
    Parses a butcher compilation unit and extracts all the records and unions declared in it.
    """
    def __init__(self, lexer_or_stream, context = None):
        """
        Creates a parser.

        Params:

            lexer_or_stream -   The lexer or the input stream from which declarations will be parsed.
            context         -   The butcher context into which all declarations will be registered.
        """
        if type(lexer_or_stream) is not lexer.Lexer:
            lexer_or_stream = lexer.Lexer(lexer_or_stream)
        super(Parser, self).__init__(lexer_or_stream)
        self.butcher_context = context or ButcherContext()
        self.namespace = None
        self.declarations = []
        self._entity_parsers = {}
        self.use_default_parsers()

    def use_default_parsers(self):
        from butcher.dsl.parser.rules.declarations import parse_record_or_union
        self.register_entity_parser("record", parse_record_or_union)
        self.register_entity_parser("union", parse_record_or_union)

    def get_entity_parser(self, entity_class):
        return self._entity_parsers.get(entity_class, None)

    def register_entity_parser(self, keyword, parser):
        self._entity_parsers[keyword] = parser

    def add_declaration(self, decl):
        self.butcher_context.add_declaration(decl)
        self.declarations.append(decl)
        return decl

    def last_docstring(self, reset = True):
        out = self._last_docstring
        if reset:
            self._last_docstring = ""
        return out

    def ensure_fqn(self, delim_token = None):
        """
        Expects and parses a fully qualified name defined as:

            IDENT ( <delim> IDENT ) *
        """
        delim_token = delim_token or TokenType.DOT
        fqn = self.ensure_token(TokenType.IDENTIFIER)
        while self.next_token_is(delim_token):
            fqn += "." + self.ensure_token(TokenType.IDENTIFIER)
        return fqn

    def lookahead_field_name(self):
        """
        Returns the name of the field whose annotations start at the current
        token without consuming anything, or None if it cannot be found.
        """
        seen = []
        name = None
        depth = 0
        while True:
            tok = self.next_token()
            seen.append(tok)
            if tok.tok_type == TokenType.EOS:
                break
            elif tok.tok_type == TokenType.OPEN_PAREN:
                depth += 1
            elif tok.tok_type == TokenType.CLOSE_PAREN:
                depth -= 1
            elif depth == 0 and tok.tok_type == TokenType.IDENTIFIER and len(seen) > 1 and seen[-2].tok_type != TokenType.AT:
                name = tok.value
                break
        for tok in reversed(seen):
            self.unget_token(tok)
        return name

    def parse(self):
        """
        Parses the whole input and returns the declarations found in it.
        """
        try:
            parse_compilation_unit(self)
        except (SourceException, errors.GenerationError):
            raise
        except errors.ButcherException as exc:
            # Change its message to reflect the line and col
            raise SourceException(self.line, self.column, exc.message)
        return self.declarations

########################################################################
##          Production rules
########################################################################

def parse_compilation_unit(parser):
    """
    Parses a butcher compilation unit.

    compilation_unit :=
        NAMESPACE_DECL ?

        TYPE_DECL *
    """
    parse_namespace(parser)
    while parse_declaration(parser): pass

def parse_namespace(parser):
    """
    Parse the namespace for the current document.

        namespace_decl := "namespace" IDENT ( "." IDENT ) *
    """
    if parser.next_token_is(TokenType.IDENTIFIER, tok_value = "namespace"):
        parser.namespace = parser.ensure_fqn()
    parser.consume_tokens(TokenType.SEMI_COLON)

def parse_declaration(parser):
    """
    Parse the declarations for the current document:

        declaration := ( "record" | "union" ) ...
    """
    parser.consume_tokens(TokenType.SEMI_COLON)
    if parser.peeked_token_is(TokenType.EOS):
        return False

    keyword = parser.peek_token()
    entity_parser = None
    if keyword.tok_type == TokenType.IDENTIFIER:
        entity_parser = parser.get_entity_parser(keyword.value)
    if entity_parser is None:
        raise UnexpectedTokenException(keyword, *sorted(parser._entity_parsers.keys()))
    entity_parser(parser)
    parser.consume_tokens(TokenType.SEMI_COLON)
    return True
