
import typing
from butcher.typing import exprs
from butcher.typing.decls import TypeDeclaration, Field, FieldList, Variant
from butcher.generator.strategies import StrategyDescriptor

def doc_lines(docs : str) -> typing.List[str]:
    """ Lines of a docstring made safe to be placed within triple quotes. """
    if not docs:
        return []
    docs = docs.replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    return docs.splitlines()

class FieldViewModel(object):
    """
    A field of a declaration along with everything resolved for it: its type
    with Self substituted, its strategy and the type of the matching view field.
    """
    def __init__(self, field : Field, field_type : exprs.TypeExpr, strategy : StrategyDescriptor,
                 view_type : exprs.TypeExpr, bounds : typing.List[str]):
        self.field = field
        self.field_type = field_type
        self.strategy = strategy
        self.view_type = view_type
        self.bounds = bounds

    @property
    def attr_name(self):
        return self.field.attr_name

    @property
    def label(self):
        return self.field.label

    @property
    def method(self):
        return self.strategy.method

    @property
    def docs(self):
        return self.field.docs

    @property
    def source_type_str(self):
        return self.field_type.render()

    @property
    def view_type_str(self):
        return self.view_type.render()

    def __repr__(self):
        return "<FieldViewModel %s: %s -> %s (%s)>" % (self.label, self.source_type_str,
                                                       self.view_type_str, self.strategy.tag)

class FieldListViewModel(object):
    def __init__(self, field_list : FieldList, fields : typing.List[FieldViewModel]):
        self.style = field_list.style
        self.fields = fields

    def __iter__(self):
        return iter(self.fields)

    def __len__(self):
        return len(self.fields)

class VariantViewModel(object):
    def __init__(self, declvm, variant : Variant, fields : FieldListViewModel):
        self.declvm = declvm
        self.variant = variant
        self.name = variant.name
        self.docs = variant.docs
        self.fields = fields

    @property
    def doc_lines(self):
        return doc_lines(self.docs)

    @property
    def class_name(self):
        """ Module level name of the generated variant class. """
        return "_%s_%s" % (self.declvm.name, self.name)

    @property
    def view_class_name(self):
        return "_%s_%s" % (self.declvm.view_name, self.name)

class DeclarationViewModel(object):
    """
    Everything the templates need to render a declaration, its view type and
    the butcher/unbutcher pair between them.
    """
    def __init__(self, declaration : TypeDeclaration, signature : exprs.Path, view_name : str, lifetime : str):
        self.declaration = declaration
        self.signature = signature
        self.view_name = view_name
        self.lifetime = lifetime
        self.fields = None
        self.variants = []
        self.bounds = []

    @property
    def name(self):
        return self.declaration.name

    @property
    def docs(self):
        return self.declaration.docs

    @property
    def doc_lines(self):
        return doc_lines(self.docs)

    @property
    def is_record(self):
        return self.declaration.is_record

    @property
    def is_sum(self):
        return self.declaration.is_sum

    @property
    def signature_str(self):
        return self.signature.render()

    @property
    def type_vars(self):
        """
        Module level TypeVar names of the type parameters.  These are private to
        the declaration so that a parameter never shadows another declaration.
        """
        return ["_%s__%s" % (self.name, p.name) for p in self.declaration.type_params]

    @property
    def public_names(self):
        return [self.name, self.view_name]

    @property
    def all_fields(self):
        if self.is_record:
            return list(self.fields)
        return [f for v in self.variants for f in v.fields]

    def __repr__(self):
        return "<DeclarationViewModel %s -> %s>" % (self.signature_str, self.view_name)

class ModuleViewModel(object):
    def __init__(self, namespace : str, declarations : typing.List[DeclarationViewModel], version : str):
        self.namespace = namespace
        self.declarations = declarations
        self.version = version

    @property
    def type_vars(self):
        return [name for declvm in self.declarations for name in declvm.type_vars]

    @property
    def public_names(self):
        return [name for declvm in self.declarations for name in declvm.public_names]
