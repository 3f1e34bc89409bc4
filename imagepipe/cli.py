"""
Command line handling shared by imagepipe-reader, imagepipe-viewer and imagepipe-writer.

Exit codes (sysexits) are the same for all three programs:
   0 EX_OK       success
  64 EX_USAGE    bad flags or size specification
  65 EX_DATAERR  unsupported or corrupt image, malformed record, unknown output format
  70 EX_SOFTWARE internal error
  74 EX_IOERR    cannot read a source or write an output file

Diagnostics go to stderr. stdout carries only Frame Records.
"""

import os
import sys
import argparse
import logging
from os.path import dirname,join

from . import __version__
from .constants import C
from .errors import ImagePipeError,InvalidSize
from .image_utils import parse_size

logger = logging.getLogger(__name__)

LICENSE_FILE = join(dirname(__file__), 'UNLICENSE')
LOG_FORMAT = '%(levelname)s: %(message)s'

class ArgumentParser(argparse.ArgumentParser):
    """argparse, but usage errors exit with EX_USAGE"""
    def error(self, message):
        self.print_usage(sys.stderr)
        self.exit(C.EX_USAGE, f"{self.prog}: error: {message}\n")


class LicenseAction(argparse.Action):
    def __init__(self, option_strings, dest=argparse.SUPPRESS, default=argparse.SUPPRESS, help=None): # pylint: disable=redefined-builtin
        super().__init__(option_strings=option_strings, dest=dest, default=default, nargs=0, help=help)

    def __call__(self, parser, namespace, values, option_string=None):
        with open(LICENSE_FILE, "r") as f:
            sys.stdout.write(f.read())
        parser.exit(C.EX_OK)


def size_type(spec):
    """argparse type for --size"""
    try:
        return parse_size(spec)
    except InvalidSize as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def make_parser(prog, description):
    """Return a parser with the flags every program has."""
    parser = ArgumentParser(prog=prog, description=description,
                            formatter_class=argparse.ArgumentDefaultsHelpFormatter)
    parser.add_argument("-v", "--verbose", action='count', default=0,
                        help="Increase verbosity: -v warnings, -vv warnings with errors, -vvv debug")
    parser.add_argument("--debug", action='store_true', help="Enable debugging output")
    parser.add_argument("--license", action=LicenseAction, help="Show the license and exit")
    parser.add_argument("-V", "--version", action='version', version=f"%(prog)s {__version__}")
    return parser


def add_union_argument(parser):
    parser.add_argument("-U", "--union", action='store_true',
                        help="Copy stdin to stdout (pass-through / tee)")


def configure_logging(verbose=0, debug=False):
    if debug or verbose>=3:
        level = logging.DEBUG
    elif verbose>=1:
        level = logging.INFO
    else:
        level = logging.ERROR
    logging.basicConfig(stream=sys.stderr, format=LOG_FORMAT, level=level, force=True)


def report_error(err, verbose=0, debug=False):
    """Always log the error. With -vv or --debug, log the chain of causes."""
    logger.error("%s",err)
    if debug or verbose>=2:
        cause = err.__cause__ or err.__context__
        while cause is not None:
            logger.error("  Caused by: %s",cause)
            cause = cause.__cause__ or cause.__context__


def run_program(func, args):
    """Run func(args, stdin, stdout) with the binary standard streams and return the exit code."""
    configure_logging(args.verbose, args.debug)
    try:
        return func(args, sys.stdin.buffer, sys.stdout.buffer)
    except ImagePipeError as e:
        report_error(e, args.verbose, args.debug)
        return e.exit_code
    except BrokenPipeError:
        # Downstream stopped reading. Point stdout at devnull so the interpreter can exit quietly.
        devnull = os.open(os.devnull, os.O_WRONLY)
        os.dup2(devnull, sys.stdout.fileno())
        logger.info("stdout closed")
        return C.EX_OK
    except Exception as e:  # pylint: disable=broad-except
        report_error(e, args.verbose, args.debug)
        return C.EX_SOFTWARE
