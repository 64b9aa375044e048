
import argparse
import logging
import sys
import butcher
from butcher import errors
from butcher.context import ButcherContext, DEFAULT_VIEW_PREFIX
from butcher.dsl.parser import Parser
from butcher.generator.synthesizer import ViewSynthesizer

logger = logging.getLogger(__name__)

def create_parser():
    parser = argparse.ArgumentParser(prog = "butcher",
                                     description = "Generates butchered views of records and unions")
    parser.add_argument("--version", action = "version", version = "%(prog)s " + butcher.__version__)
    common = argparse.ArgumentParser(add_help = False)
    common.add_argument("-v", "--verbose", action = "store_true", help = "Log every step of the generation")

    sub = parser.add_subparsers(dest = "command", help = "Command to run")

    p = sub.add_parser("gen", parents = [common], help = "Generate the python source for the declarations in a file")
    p.add_argument("input", help = "File with the declarations")
    p.add_argument("-o", "--output", help = "File to write the source to (stdout if not given)")
    p.add_argument("--prefix", help = "Prefix of view type names (default: %s)" % DEFAULT_VIEW_PREFIX)
    p.add_argument("--template-dir", dest = "template_dirs", action = "append", default = [],
                   help = "Directory searched for templates before the packaged ones")

    p = sub.add_parser("check", parents = [common], help = "Parse and resolve the declarations in a file without generating anything")
    p.add_argument("input", help = "File with the declarations")
    return parser

def read_input(path):
    with open(path, encoding = "utf-8") as infile:
        return infile.read()

def cmd_gen(args):
    context = ButcherContext(view_prefix = args.prefix, template_dirs = args.template_dirs)
    parser = Parser(read_input(args.input), context)
    declarations = parser.parse()
    source = ViewSynthesizer(context).generate(declarations, parser.namespace)
    if args.output:
        with open(args.output, "w", encoding = "utf-8") as outfile:
            outfile.write(source)
        logger.info("Wrote %d declarations to %s", len(declarations), args.output)
    else:
        sys.stdout.write(source)

def cmd_check(args):
    context = ButcherContext()
    parser = Parser(read_input(args.input), context)
    declvms = ViewSynthesizer(context).resolve_all(parser.parse())
    for declvm in declvms:
        print("%s -> %s" % (declvm.signature_str, declvm.view_name))
        for bound in declvm.bounds:
            print("    %s" % bound)

COMMANDS = {
    "gen": cmd_gen,
    "check": cmd_check,
}

def main(argv = None):
    parser = create_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level = logging.DEBUG if getattr(args, "verbose", False) else logging.INFO,
                        format = "%(levelname)s %(name)s: %(message)s")
    if not args.command:
        parser.print_help()
        return 1

    try:
        COMMANDS[args.command](args)
    except errors.ButcherException as exc:
        sys.stderr.write("%s\n" % exc.message)
        return 1
    except OSError as exc:
        sys.stderr.write("%s\n" % exc)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())
