
import logging
import typing
from butcher import errors
from butcher.typing import exprs
from butcher.typing.decls import TypeDeclaration, FieldList
from butcher.typing.signatures import create_type_signature
from butcher.typing.rewriter import replace_in_declaration
from butcher.generator.strategies import resolve_strategy
from butcher.generator.models import FieldViewModel, FieldListViewModel, VariantViewModel
from butcher.generator.models import DeclarationViewModel, ModuleViewModel

logger = logging.getLogger(__name__)

class ViewSynthesizer(object):
    """
    Generates the view types and the butcher/unbutcher functions for a set
    of declarations.

    Generation happens in two passes.  First every declaration is resolved
    (signature, Self substitution, strategies and bounds) into a view model,
    only then is anything rendered.  Any error while resolving aborts the
    whole unit so no partial output is ever produced.
    """
    def __init__(self, context, template_name = "module"):
        self.context = context
        self.template_name = template_name

    def resolve(self, declaration : TypeDeclaration) -> DeclarationViewModel:
        signature = create_type_signature(declaration)
        declvm = DeclarationViewModel(declaration, signature,
                                      self.context.view_name(declaration.name),
                                      self.context.cow_lifetime)
        rewritten = replace_in_declaration(declaration, signature)
        param_names = [p.name for p in declaration.type_params + declaration.lifetime_params]

        def resolve_fields(field_list : FieldList):
            out = []
            for field in field_list:
                out.append(self.resolve_field(declaration, field, rewritten[field], param_names))
            return FieldListViewModel(field_list, out)

        if declaration.is_record:
            declvm.fields = resolve_fields(declaration.body.fields)
        else:
            for variant in declaration.body.variants:
                declvm.variants.append(VariantViewModel(declvm, variant, resolve_fields(variant.fields)))

        for fieldvm in declvm.all_fields:
            for bound in fieldvm.bounds:
                if bound not in declvm.bounds:
                    declvm.bounds.append(bound)
        logger.debug("Resolved %s, bounds: %s", declvm.signature_str, declvm.bounds)
        return declvm

    def resolve_field(self, declaration, field, field_type, param_names) -> FieldViewModel:
        strategy = resolve_strategy(field.strategy, declaration.name, field.label)
        lifetime = self.context.cow_lifetime
        try:
            view_type = strategy.view_type(field_type, lifetime)
            bounds = []
            # Bounds on concrete types hold or not regardless of us, only
            # those that depend on the declaration's parameters are emitted.
            if exprs.mentions_any(field_type, param_names):
                bounds = strategy.bounds(field_type, lifetime)
        except errors.GenerationError as exc:
            raise exc.attribute(declaration = declaration.name, field = field.label)
        for bound in field.bounds:
            if bound not in bounds:
                bounds.append(bound)
        fieldvm = FieldViewModel(field, field_type, strategy, view_type, bounds)
        logger.debug("%s.%s: %r", declaration.name, field.label, fieldvm)
        return fieldvm

    def resolve_all(self, declarations : typing.List[TypeDeclaration]) -> typing.List[DeclarationViewModel]:
        declvms = [self.resolve(decl) for decl in declarations]
        seen = set()
        for declvm in declvms:
            for name in declvm.public_names:
                if name in seen:
                    raise errors.GenerationError("Generated name '%s' is already taken" % name,
                                                 declaration = declvm.name)
                seen.add(name)
        return declvms

    def render(self, declvms : typing.List[DeclarationViewModel], namespace : str = None) -> str:
        from butcher import __version__
        modulevm = ModuleViewModel(namespace, declvms, __version__)
        templ = self.context.load_template(self.template_name)
        return templ.render(module = modulevm, context = self.context)

    def generate(self, declarations : typing.List[TypeDeclaration], namespace : str = None) -> str:
        declvms = self.resolve_all(declarations)
        logger.debug("Rendering %d declarations", len(declvms))
        return self.render(declvms, namespace)
