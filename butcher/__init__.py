
VERSION = (0, 1, 0)

def get_version(version = None):
    version = version or VERSION
    return ".".join(map(str, list(version)))

__version__ = get_version(VERSION)

def parse_declarations(text, context = None):
    """
    Parses the records and unions declared in text and returns them in the
    order they were declared.
    """
    from butcher.dsl.parser import Parser
    return Parser(text, context).parse()

def generate_source(text, context = None):
    """
    Returns the python source of the classes, views and butcher/unbutcher
    functions for every declaration in text.
    """
    from butcher.dsl.parser import Parser
    from butcher.generator.synthesizer import ViewSynthesizer
    parser = Parser(text, context)
    declarations = parser.parse()
    return ViewSynthesizer(parser.butcher_context).generate(declarations, parser.namespace)

def load_module(text, name, context = None):
    """ Generates the source for text and loads it as the module called name. """
    from butcher import loader
    return loader.load_module(text, name, context)
