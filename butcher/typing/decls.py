
import typing
from butcher.typing.exprs import TypeExpr

########################################################################
##          Declarations of records and unions
########################################################################

class TypeParam(object):
    """
    A generic parameter of a declaration.  kind is one of "type", "lifetime"
    (a borrow duration) or "const".
    """
    TYPE = "type"
    LIFETIME = "lifetime"
    CONST = "const"

    def __init__(self, name : str, kind : str = "type", bounds = None, const_type : TypeExpr = None):
        assert kind in (TypeParam.TYPE, TypeParam.LIFETIME, TypeParam.CONST), "Invalid param kind: %s" % kind
        self.name = name
        self.kind = kind
        self.bounds = list(bounds or [])
        self.const_type = const_type

    @property
    def is_type(self): return self.kind == TypeParam.TYPE

    @property
    def is_lifetime(self): return self.kind == TypeParam.LIFETIME

    @property
    def is_const(self): return self.kind == TypeParam.CONST

    def __repr__(self):
        return "<TypeParam(%s) %s>" % (self.kind, self.name)

class Field(object):
    """
    A field in a record or in a variant.  Fields of tuple styled records
    have no names, just an index.
    """
    def __init__(self, name : typing.Optional[str], index : int, type_expr : TypeExpr,
                 strategy : str = "regular", bounds : typing.List[str] = None, docs : str = ""):
        self.name = name
        self.index = index
        self.type_expr = type_expr
        self.strategy = strategy
        self.bounds = list(bounds or [])
        self.docs = docs or ""

    @property
    def attr_name(self) -> str:
        """ Name of the attribute holding this field in generated classes. """
        if self.name is None:
            return "_%d" % self.index
        return self.name

    @property
    def label(self) -> str:
        """ How the field is referred to in messages. """
        return self.name if self.name is not None else str(self.index)

    def __repr__(self):
        return "<Field %s: %s (%s)>" % (self.label, self.type_expr.render(), self.strategy)

class FieldList(object):
    """ An ordered list of fields in one of the record styles. """
    NAMED = "named"
    TUPLE = "tuple"
    UNIT = "unit"

    def __init__(self, fields : typing.List[Field] = None, style : str = "unit"):
        self.fields = list(fields or [])
        self.style = style

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

    def __getitem__(self, index):
        return self.fields[index]

class Variant(object):
    def __init__(self, name : str, fields : FieldList = None, docs : str = ""):
        self.name = name
        self.fields = fields or FieldList()
        self.docs = docs or ""

    def __repr__(self):
        return "<Variant %s (%d fields)>" % (self.name, len(self.fields))

class RecordBody(object):
    is_record = True
    is_sum = False

    def __init__(self, fields : FieldList):
        self.fields = fields

    @property
    def all_fields(self):
        return list(self.fields)

class SumBody(object):
    is_record = False
    is_sum = True

    def __init__(self, variants : typing.List[Variant]):
        self.variants = list(variants)

    @property
    def all_fields(self):
        return [f for v in self.variants for f in v.fields]

class TypeDeclaration(object):
    """
    A record or union declaration as read from a compilation unit.

    Declarations are created once by the parser and not mutated afterwards.
    """
    def __init__(self, name : str, params : typing.List[TypeParam], body, namespace : str = None, docs : str = ""):
        self.name = name
        self.params = list(params)
        self.body = body
        self.namespace = namespace
        self.docs = docs or ""

    @property
    def fqn(self) -> str:
        if self.namespace:
            return ".".join([self.namespace, self.name])
        return self.name

    @property
    def is_record(self) -> bool:
        return self.body.is_record

    @property
    def is_sum(self) -> bool:
        return self.body.is_sum

    @property
    def type_params(self) -> typing.List[TypeParam]:
        return [p for p in self.params if p.is_type]

    @property
    def lifetime_params(self) -> typing.List[TypeParam]:
        return [p for p in self.params if p.is_lifetime]

    @property
    def all_fields(self) -> typing.List[Field]:
        return self.body.all_fields

    def __repr__(self):
        kind = "record" if self.is_record else "union"
        return "<TypeDeclaration(%s) %s>" % (kind, self.fqn)
