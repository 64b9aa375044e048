
import pytest
from butcher import errors
from butcher.context import ButcherContext
from butcher.dsl.errors import SourceException, UnexpectedTokenException
from butcher.dsl.lexer import Lexer, TokenType
from butcher.dsl.parser import Parser
from butcher.dsl.parser.rules.annotations import parse_annotation
from butcher.dsl.parser.rules.types import parse_type_expr
from butcher.typing import exprs
from butcher.typing.decls import FieldList, TypeParam

def new_parser(content, context = None):
    if context is None:
        context = ButcherContext()
    return Parser(content, context)

def parse(content):
    return new_parser(content).parse()

def parse_type(content):
    return parse_type_expr(new_parser(content))

def test_lexer_tokens():
    tokens = list(Lexer("record Foo<'a> { x : &'a [u8; 4] } // done"))
    types = [t.tok_type for t in tokens]
    assert types == [TokenType.IDENTIFIER, TokenType.IDENTIFIER, TokenType.LESS_THAN, TokenType.LIFETIME,
                     TokenType.GREATER_THAN, TokenType.OPEN_BRACE, TokenType.IDENTIFIER, TokenType.COLON,
                     TokenType.AMPERSAND, TokenType.LIFETIME, TokenType.OPEN_SQUARE, TokenType.IDENTIFIER,
                     TokenType.SEMI_COLON, TokenType.NUMBER, TokenType.CLOSE_SQUARE, TokenType.CLOSE_BRACE,
                     TokenType.COMMENT]
    assert tokens[3].value == "'a"
    assert tokens[-1].value == "// done"

def test_lexer_positions():
    tokens = list(Lexer("a\n  b"))
    assert (tokens[0].line, tokens[0].col) == (1, 1)
    assert (tokens[1].line, tokens[1].col) == (2, 3)

def test_lexer_invalid_character():
    with pytest.raises(SourceException):
        list(Lexer("record $"))

def test_parse_named_record():
    content = """
    namespace shapes

    /** A singly linked list of numbers */
    record NumberList<T> {
        @butcher(copy)
        val : T
        @butcher(unbox, T: Clone)
        next : Option<Box<Self>>
    }
    """
    decls = parse(content)
    assert len(decls) == 1
    decl = decls[0]
    assert decl.name == "NumberList"
    assert decl.fqn == "shapes.NumberList"
    assert decl.docs == "A singly linked list of numbers"
    assert decl.is_record
    assert [p.name for p in decl.params] == ["T"]
    fields = decl.body.fields
    assert fields.style == FieldList.NAMED
    assert [f.name for f in fields] == ["val", "next"]
    assert fields[0].strategy == "copy"
    assert fields[0].bounds == []
    assert fields[1].strategy == "unbox"
    assert fields[1].bounds == ["T: Clone"]
    assert fields[1].type_expr.render() == "Option<Box<Self>>"

def test_parse_default_strategy():
    decl = parse("record A { x : i32, @butcher() y : String }")[0]
    assert [f.strategy for f in decl.all_fields] == ["regular", "regular"]

def test_parse_field_docs():
    decl = parse("record A { /** The x */ x : i32 }")[0]
    assert decl.all_fields[0].docs == "The x"

def test_parse_tuple_and_unit_records():
    decls = parse("record Pair<'a, A, B, const N: usize>(A, @butcher(copy) B); record Marker")
    pair, marker = decls
    assert pair.body.fields.style == FieldList.TUPLE
    assert [f.attr_name for f in pair.all_fields] == ["_0", "_1"]
    assert [f.strategy for f in pair.all_fields] == ["regular", "copy"]
    assert [p.kind for p in pair.params] == [TypeParam.LIFETIME, TypeParam.TYPE, TypeParam.TYPE, TypeParam.CONST]
    assert pair.params[3].const_type.render() == "usize"
    assert marker.body.fields.style == FieldList.UNIT
    assert marker.all_fields == []

def test_parse_union():
    content = """
    union WebEvent {
        PageLoad
        KeyPress(char)
        Paste(String)
        Click { x : i64, y : i64 }
    }
    """
    decl = parse(content)[0]
    assert decl.is_sum
    variants = decl.body.variants
    assert [v.name for v in variants] == ["PageLoad", "KeyPress", "Paste", "Click"]
    assert [v.fields.style for v in variants] == ["unit", "tuple", "tuple", "named"]
    assert [f.label for f in variants[3].fields] == ["x", "y"]

def test_parse_generic_params():
    decl = parse("record G<'a: 'b, 'b, T: Clone + Send, const N: usize> { x : &'a T }")[0]
    assert [p.name for p in decl.params] == ["'a", "'b", "T", "N"]
    assert [b.render() for b in decl.params[0].bounds] == ["'b"]
    assert [b.render() for b in decl.params[2].bounds] == ["Clone", "Send"]

@pytest.mark.parametrize("source", [
    "[T; N]",
    "[u8; 4]",
    "fn(A, B) -> C",
    "fn()",
    "(T)",
    "impl A + B",
    "dyn A + 'a",
    "a::b::C<T, Item = U, K: Bound>",
    "Fn(A) -> B",
    "<X as Trait>::Name",
    "<X>::Name",
    "*const T",
    "*mut T",
    "&T",
    "&'a mut T",
    "[T]",
    "(A, B)",
    "(A,)",
    "()",
    "_",
    "!",
    "Cow<'a, str>",
])
def test_parse_type_forms(source):
    assert parse_type(source).render() == source

def test_parse_type_shapes():
    assert type(parse_type("[T; 4]")) is exprs.Array
    assert type(parse_type("[T]")) is exprs.Slice
    assert type(parse_type("(T)")) is exprs.Group
    assert type(parse_type("(T, U)")) is exprs.Tuple
    assert type(parse_type("fn(T)")) is exprs.Function
    assert type(parse_type("&T")) is exprs.Reference
    assert type(parse_type("*const T")) is exprs.Pointer
    assert type(parse_type("impl T")) is exprs.ImplTrait
    assert type(parse_type("dyn T")) is exprs.TraitObject
    assert type(parse_type("_")) is exprs.Infer
    assert type(parse_type("!")) is exprs.Never
    assert type(parse_type("my_type!(u8, [1, 2])")) is exprs.Verbatim

def test_parse_qualified_path():
    path = parse_type("<Vec<T> as Deref>::Target")
    assert path.qself.ty.render() == "Vec<T>"
    assert path.qself.position == 1
    assert [s.ident for s in path.segments] == ["Deref", "Target"]

def test_parse_macro_type():
    assert parse_type("my_type!(u8, [1, 2])").render() == "my_type!(u8, [1, 2])"

def test_parse_annotation_strategy_and_bounds():
    annotation = parse_annotation(new_parser("@butcher(flatten, T: Deref + Clone, 'a: 'b)"))
    assert annotation.strategy == "flatten"
    assert annotation.bounds == ["T: Deref + Clone", "'a: 'b"]

def test_parse_annotation_bounds_only():
    annotation = parse_annotation(new_parser("@butcher(<T as Deref>::Target: ToOwned)"))
    assert annotation.strategy is None
    assert annotation.bounds == ["<T as Deref>::Target: ToOwned"]

def test_parse_annotation_strategy_not_first():
    with pytest.raises(errors.AnnotationSyntaxError):
        parse_annotation(new_parser("@butcher(T: Clone, copy)"))

def test_malformed_annotation_is_attributed():
    content = """
    record Foo {
        a : i32
        @butcher(copy T)
        b : i32
    }
    """
    with pytest.raises(errors.AnnotationSyntaxError) as excinfo:
        parse(content)
    exc = excinfo.value
    assert exc.declaration == "Foo"
    assert exc.field == "b"
    assert exc.line == 4
    assert "Foo.b" in exc.message

def test_duplicate_annotation():
    with pytest.raises(errors.AnnotationSyntaxError):
        parse("record Foo { @butcher(copy) @butcher(copy) a : i32 }")

def test_unknown_annotation():
    with pytest.raises(errors.AnnotationSyntaxError):
        parse("record Foo { @serde(copy) a : i32 }")

def test_unknown_strategy():
    with pytest.raises(errors.UnknownStrategyError) as excinfo:
        parse("record Foo { a : i32, @butcher(steal) b : i32 }")
    assert excinfo.value.strategy == "steal"
    assert excinfo.value.field == "b"
    assert "Foo.b" in excinfo.value.message

def test_unknown_strategy_tuple_field():
    with pytest.raises(errors.UnknownStrategyError) as excinfo:
        parse("record Foo(i32, @butcher(steal) i32)")
    assert excinfo.value.field == "1"

def test_duplicate_names():
    with pytest.raises(SourceException):
        parse("record Foo { a : i32, a : u32 }")
    with pytest.raises(SourceException):
        parse("union Foo { A, A }")
    with pytest.raises(SourceException):
        parse("record Foo; record Foo")

def test_unexpected_token():
    with pytest.raises(UnexpectedTokenException):
        parse("struct Foo { }")
    with pytest.raises(UnexpectedTokenException):
        parse("record Foo { a i32 }")

def test_declarations_registered_in_context():
    context = ButcherContext()
    new_parser("record A; union B { X }", context).parse()
    assert [d.name for d in context.all_declarations] == ["A", "B"]
    assert context.get_declaration("B").is_sum
    with pytest.raises(errors.NotFoundException):
        context.get_declaration("C")

def test_parse_turbofish():
    path = parse_type("Vec::<T>")
    assert path.render() == "Vec<T>"
    assert path.last.arguments.types() == [exprs.make_path("T")]

@pytest.mark.parametrize("content", [
    "record _Hidden",
    "record Foo<_T> { a : _T }",
    "union Foo { _A }",
    "record class",
    "record Foo { class : i32 }",
    "record Foo { butcher : i32 }",
    "union Foo { VARIANTS }",
    "union Foo { Bar { SOURCE : i32 } }",
])
def test_reserved_names(content):
    with pytest.raises(SourceException):
        parse(content)
