
import pytest
from butcher import errors
from butcher.context import ButcherContext
from butcher.dsl.parser import Parser
from butcher.dsl.parser.rules.types import parse_type_expr
from butcher.typing import exprs
from butcher.typing.decls import TypeParam
from butcher.typing.rewriter import replace_self, replace_in_declaration
from butcher.typing.signatures import create_type_signature, create_type_signature_from_raws, generic_param

def parse_decl(content):
    return Parser(content, ButcherContext()).parse()[0]

def parse_type(content):
    return parse_type_expr(Parser(content, ButcherContext()))

def test_signature_without_params():
    decl = parse_decl("record Foo { a : i32 }")
    assert create_type_signature(decl).render() == "Foo"

def test_signature_keeps_lifetimes_and_types_in_order():
    decl = parse_decl("record Foo<'a, T: Clone, 'b, U> { a : &'a T, b : &'b U }")
    assert create_type_signature(decl).render() == "Foo<'a, T, 'b, U>"

def test_signature_drops_const_params():
    decl = parse_decl("record Foo<T, const N: usize> { a : [T; N] }")
    assert create_type_signature(decl).render() == "Foo<T>"

def test_signature_only_const_params():
    decl = parse_decl("record Foo<const N: usize> { a : [u8; N] }")
    assert create_type_signature(decl).render() == "Foo"

def test_generic_param():
    assert generic_param(TypeParam("T")) == exprs.make_path("T")
    assert generic_param(TypeParam("'a", TypeParam.LIFETIME)) == exprs.Lifetime("'a")
    assert generic_param(TypeParam("N", TypeParam.CONST, const_type = exprs.make_path("usize"))) is None

def test_signature_from_raws():
    params = [TypeParam("K", bounds = [exprs.make_path("Hash")]), TypeParam("V")]
    assert create_type_signature_from_raws("Map", params).render() == "Map<K, V>"

SIGNATURE = exprs.make_path("List", exprs.make_path("T"))

@pytest.mark.parametrize("source, expected", [
    ("Self", "List<T>"),
    ("Option<Box<Self>>", "Option<Box<List<T>>>"),
    ("[Self; 4]", "[List<T>; 4]"),
    ("[Self]", "[List<T>]"),
    ("(Self, i32)", "(List<T>, i32)"),
    ("(Self)", "(List<T>)"),
    ("fn(Self) -> Self", "fn(List<T>) -> List<T>"),
    ("impl Into<Self> + Send", "impl Into<List<T>> + Send"),
    ("dyn AsRef<Self>", "dyn AsRef<List<T>>"),
    ("Iterator<Item = Self>", "Iterator<Item = List<T>>"),
    ("Wrapper<K: From<Self>>", "Wrapper<K: From<List<T>>>"),
    ("Box<dyn Fn(Self) -> Self>", "Box<dyn Fn(List<T>) -> List<T>>"),
    ("<Self as Deref>::Target", "<List<T> as Deref>::Target"),
    ("*const Self", "*const List<T>"),
    ("*mut Self", "*mut List<T>"),
    ("&'a mut Self", "&'a mut List<T>"),
    ("Cow<'a, [Self; N]>", "Cow<'a, [List<T>; N]>"),
    ("_", "_"),
    ("!", "!"),
    ("()", "()"),
    ("i32", "i32"),
])
def test_replace_self(source, expected):
    assert replace_self(parse_type(source), SIGNATURE).render() == expected

def test_replace_self_does_not_mutate():
    original = parse_type("Option<Box<Self>>")
    rewritten = replace_self(original, SIGNATURE)
    assert original.render() == "Option<Box<Self>>"
    assert rewritten is not original

def test_replace_self_only_whole_idents():
    assert replace_self(parse_type("Self::Item"), SIGNATURE).render() == "Self::Item"
    assert replace_self(parse_type("SelfRef"), SIGNATURE).render() == "SelfRef"

def test_replace_self_fails_on_verbatim():
    with pytest.raises(errors.UnsupportedTypeShapeError):
        replace_self(parse_type("Vec<my_type!(Self)>"), SIGNATURE)

def test_replace_in_declaration():
    decl = parse_decl("record List<T> { val : T, next : Option<Box<Self>> }")
    rewritten = replace_in_declaration(decl, create_type_signature(decl))
    assert [rewritten[f].render() for f in decl.all_fields] == ["T", "Option<Box<List<T>>>"]

def test_replace_in_declaration_attributes_errors():
    decl = parse_decl("union Tree { Leaf(i32), Node { kids : my_vec!(Self) } }")
    with pytest.raises(errors.UnsupportedTypeShapeError) as excinfo:
        replace_in_declaration(decl, create_type_signature(decl))
    assert excinfo.value.declaration == "Tree"
    assert excinfo.value.field == "kids"
    assert "Tree.kids" in excinfo.value.message

def test_mentions_any():
    ty = parse_type("Option<Box<List<T>>>")
    assert exprs.mentions_any(ty, ["T"])
    assert not exprs.mentions_any(ty, ["U"])
    assert exprs.mentions_any(parse_type("&'a str"), ["'a"])
    assert exprs.mentions_any(parse_type("Cow<'a, str>"), ["'a"])
    assert not exprs.mentions_any(parse_type("<X as T>::Y"), ["T"])
