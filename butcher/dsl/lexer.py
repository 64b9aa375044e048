import io
import logging
from enum import Enum
from butcher.dsl.errors import SourceException

logger = logging.getLogger(__name__)

class TokenType(Enum):
    EOS                 = "<EOS>"

    IDENTIFIER          = "<IDENT>"
    LIFETIME            = "<LIFETIME>"
    NUMBER              = "<NUM>"
    COMMENT             = "<COMMENT>"

    # Special chars/operators etc
    ARROW               = "->"
    DOUBLE_COLON        = "::"
    EQUALS              = "="
    COLON               = ":"
    SEMI_COLON          = ";"
    DOT                 = "."
    AT                  = "@"
    COMMA               = ","
    PLUS                = "+"
    AMPERSAND           = "&"
    STAR                = "*"
    BANG                = "!"
    LESS_THAN           = "<"
    GREATER_THAN        = ">"
    OPEN_PAREN          = "("
    CLOSE_PAREN         = ")"
    OPEN_SQUARE         = "["
    CLOSE_SQUARE        = "]"
    OPEN_BRACE          = "{"
    CLOSE_BRACE         = "}"

# Symbols in the order they must be tried, longest first.
SYMBOLS = [ TokenType.ARROW, TokenType.DOUBLE_COLON, TokenType.EQUALS, TokenType.COLON,
            TokenType.SEMI_COLON, TokenType.DOT, TokenType.AT, TokenType.COMMA,
            TokenType.PLUS, TokenType.AMPERSAND, TokenType.STAR, TokenType.BANG,
            TokenType.LESS_THAN, TokenType.GREATER_THAN,
            TokenType.OPEN_PAREN, TokenType.CLOSE_PAREN,
            TokenType.OPEN_SQUARE, TokenType.CLOSE_SQUARE,
            TokenType.OPEN_BRACE, TokenType.CLOSE_BRACE ]


class Token(object):
    def __init__(self, tok_type, position, length = None, value = None, line = 0, col = 0):
        self._position = position
        self._line = line
        self._col = col
        self.tok_type = tok_type
        if value is None:
            value = tok_type.value
        if length is None:
            length = len(value)
        self._length = length
        self.value = value

    @property
    def line(self):
        return self._line

    @property
    def col(self):
        return self._col

    @property
    def position(self):
        return self._position

    @property
    def length(self):
        return self._length

    @property
    def endpos(self):
        return self.position + self.length

    def __repr__(self):
        if self.value:
            return "<[%d-%d], Line: %d, Col: %d, %s - %s>" % (self.position, self.endpos, self.line, self.col, self.tok_type, self.value)
        else:
            return "<[%d-%d], Line: %d, Col: %d, %s>" % (self.position, self.endpos, self.line, self.col, self.tok_type)

class Lexer(object):
    """
    Tokenizes an input stream containing butcher declarations and returns the tokens.
    """
    def __init__(self, instream):
        if isinstance(instream, str):
            instream = io.StringIO(instream)
        self.instream = instream
        self.next_pos = 0
        self.next_line = 1
        self.next_col  = 1
        self.buffer = ""
        self.end_reached = False
        self.comments_enabled = True

    def _ensure_buffer(self, size = 1):
        buff_len = len(self.buffer)
        if buff_len < size:
            if self.end_reached:
                return False
            num_bytes = size - buff_len
            readchars = self.instream.read(max(num_bytes, 64))
            self.buffer += readchars
            self.end_reached = len(readchars) < max(num_bytes, 64)
        return len(self.buffer) >= size

    def _read_buffer(self, size):
        """
        Reads upto size characters from the buffer.  If the buffer has less than size bytes
        in it, only those are returned.  It is upto the caller to call _ensure_buffer to
        ensure there is enough data in the buffer.
        """
        out, self.buffer = self.buffer[:size], self.buffer[size:]
        return out

    def matches_symbol(self, symbol, peek = False):
        l = len(symbol)
        if not self._ensure_buffer(l):
            # Not enough data so it cant match
            return False
        if not self.buffer.startswith(symbol):
            return False
        if not peek:
            # consume it
            self.get_chars(l)
        return True

    def matches_func(self, func, peek = True):
        ch,_,_,_ = self.get_chars(peek = True)
        if not ch or not func(ch):
            return None
        if not peek:
            # matches so pop
            return self.get_chars()
        return True

    def get_chars(self, nchars = 1, peek = False):
        curr_col = self.next_col
        curr_pos = self.next_pos
        curr_line = self.next_line
        self._ensure_buffer(nchars)
        if peek:
            out = self.buffer[:nchars]
        else:
            out = self._read_buffer(nchars)
            for ch in out:
                self.next_pos += 1
                self.next_col += 1
                if ch == "\n":
                    self.next_line += 1
                    self.next_col = 1
        return (out, curr_pos, curr_line, curr_col)

    def read_till(self, delim_str, include, allow_eof = False):
        """
        Reads and returns everything until the delimiter string is countered.  If include is true then the delimiter string is also included in the output.
        If allow_eof is true then reaching the end of the input also ends the read.
        """
        line, col = self.next_line, self.next_col
        out = ""
        while self.has_more:
            if not self.matches_symbol(delim_str):
                ch,_,_,_ = self.get_chars()
                out += ch
            else:
                if include:
                    out += delim_str
                return out
        if allow_eof:
            return out
        raise SourceException(line, col, "EOF Reached.  Expected '%s'" % delim_str)

    def read_while(self, func):
        out = ""
        while self.matches_func(func):
            nextch,_,_,_ = self.get_chars()
            out += nextch
        return out

    @property
    def has_more(self):
        self._ensure_buffer()
        return bool(self.buffer) or not self.end_reached

    def __iter__(self):
        return self

    def __next__(self):
        while self.has_more:
            curr_pos, curr_line, curr_col = self.next_pos, self.next_line, self.next_col
            def make_token(toktype, value = None, length = None):
                return Token(toktype, curr_pos, value = value, line = curr_line, col = curr_col, length = length)

            if self.comments_enabled:
                if self.matches_symbol("//"):
                    # SINGLE LINE COMMENT, read till end of line
                    value = "//" + self.read_till("\n", include = False, allow_eof = True)
                    return make_token(TokenType.COMMENT, value)
                elif self.matches_symbol("/*"):
                    # MULTI LINE COMMENT - read till the next "*/"
                    value = "/*" + self.read_till("*/", include = True)
                    return make_token(TokenType.COMMENT, value)

            for symbol in SYMBOLS:
                if self.matches_symbol(symbol.value):
                    return make_token(symbol)

            if self.matches_symbol("'"):
                value = self.read_while(lambda x: x == "_" or x.isalnum())
                if not value:
                    raise SourceException(curr_line, curr_col, "Borrow duration name expected after \"'\"")
                return make_token(TokenType.LIFETIME, "'" + value)
            elif self.matches_func(str.isdigit):
                value = self.read_while(lambda x: x == "_" or x.isalnum())
                return make_token(TokenType.NUMBER, value)
            elif self.matches_func(lambda x: x == "_" or x.isalpha()):
                value = self.read_while(lambda x: x == "_" or x.isalnum())
                return make_token(TokenType.IDENTIFIER, value)
            elif self.matches_func(str.isspace, peek = False):
                # do nothing
                pass
            else:
                raise SourceException(curr_line, curr_col, "Invalid character encountered: '%s'" % self.get_chars(peek = True)[0])
        raise StopIteration
