
import logging
from butcher import errors

logger = logging.getLogger(__name__)

DEFAULT_VIEW_PREFIX = "Butchered"
DEFAULT_COW_LIFETIME = "'cow"

class ButcherContext(object):
    """
    Holds the configuration of a generation run along with every declaration
    that has been read so far.

    Params:

        view_prefix     -   Marker prefixed to a source type's name to name its view type.
        cow_lifetime    -   Borrow duration used in generated view types and bounds.
        template_dirs   -   Directories searched for templates before the packaged ones.
    """
    def __init__(self, view_prefix = None, cow_lifetime = None, template_dirs = None, template_extension = ".tpl"):
        self.view_prefix = view_prefix or DEFAULT_VIEW_PREFIX
        self.cow_lifetime = cow_lifetime or DEFAULT_COW_LIFETIME
        if not self.cow_lifetime.startswith("'"):
            self.cow_lifetime = "'" + self.cow_lifetime
        self.template_dirs = list(template_dirs or [])
        self.template_extension = template_extension
        self.declarations = {}
        self._template_loader = None

    @property
    def template_loader(self):
        if self._template_loader is None:
            from butcher.templates import loader as tplloader
            self._template_loader = tplloader.TemplateLoader(self.template_dirs, self.template_extension)
        return self._template_loader

    def load_template(self, template_name):
        return self.template_loader.load_from_file(template_name)

    def view_name(self, name):
        return self.view_prefix + name

    def add_declaration(self, decl):
        if decl.name in self.declarations:
            raise errors.ButcherException("Declaration '%s' already exists" % decl.name)
        logger.debug("Registering declaration: '%s'", decl.fqn)
        self.declarations[decl.name] = decl
        return decl

    def get_declaration(self, name, nothrow = False):
        decl = self.declarations.get(name)
        if decl is None and not nothrow:
            raise errors.NotFoundException("declaration", name)
        return decl

    @property
    def all_declarations(self):
        """ Declarations in the order they were read. """
        return list(self.declarations.values())

    def reset(self):
        self.declarations = {}
