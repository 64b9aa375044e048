
import os
import pkgutil
from os.path import getmtime
from jinja2 import BaseLoader, TemplateNotFound, StrictUndefined
from jinja2 import Environment

class TemplateLoader(BaseLoader):
    """
    Responsible for loading templates given a name.  User template dirs are
    searched first, then the templates packaged with butcher.
    """
    def __init__(self, template_dirs = None, default_extension = ".tpl", parent_loader = None):
        self.template_dirs = template_dirs or []
        self.template_extension = default_extension or ""
        self.parent_loader = parent_loader

    def get_source(self, environment, template_name):
        final_path = template_name
        if not template_name.startswith("/"):
            for tdir in self.template_dirs:
                full_path = os.path.join(tdir, template_name)
                if os.path.isfile(full_path):
                    final_path = full_path
                    break
                else:
                    full_path = os.path.join(tdir, template_name + self.template_extension)
                    if os.path.isfile(full_path):
                        final_path = full_path
                        break
            else:
                # See if parent can return it
                if self.parent_loader:
                    return self.parent_loader.get_source(environment, template_name)
                else:
                    try:
                        data = pkgutil.get_data("butcher", "data/templates/" + template_name + self.template_extension)
                    except OSError:
                        raise TemplateNotFound(template_name)
                    source = data.decode("utf-8")
                    return source, None, lambda: True

        mtime = getmtime(final_path)
        with open(final_path, encoding = "utf-8") as f:
            source = f.read()
        return source, final_path, lambda: mtime == getmtime(final_path)

    def get_env(self, extensions = None):
        default_extensions = [ "jinja2.ext.do" ]
        if extensions:
            extensions = list(extensions) + default_extensions
        else:
            extensions = default_extensions
        kwargs = dict(trim_blocks = True,
                      lstrip_blocks = True,
                      keep_trailing_newline = True,
                      undefined = StrictUndefined,
                      extensions = extensions)
        env = Environment(**kwargs)
        env.loader = self
        initialise_env(env)
        return env

    def load_from_file(self, name, extensions = None):
        env = self.get_env(extensions)
        return env.get_template(name)

    def load_from_string(self, template_string, extensions = None):
        env = self.get_env(extensions)
        return env.from_string(template_string)

def initialise_env(env):
    """ Globals visible to every template, imported ones included. """
    env.globals["repr"] = repr
    return env
