
import logging
import sys
import types
import butcher

logger = logging.getLogger(__name__)

def load_module(text, name, context = None):
    """
    Generates the source for the declarations in text and executes it as a
    new module registered under name.
    """
    source = butcher.generate_source(text, context)
    return load_source(source, name)

def load_source(source, name):
    module = types.ModuleType(name)
    module.__file__ = "<butcher:%s>" % name
    # dataclasses looks the module up while processing string annotations
    sys.modules[name] = module
    try:
        exec(compile(source, module.__file__, "exec"), module.__dict__)
    except Exception:
        del sys.modules[name]
        raise
    logger.debug("Loaded generated module '%s'", name)
    return module
