#!/usr/bin/env python3
"""
imagepipe-reader: read one image from a file, URL or stdin and write it to stdout as a Frame Record.

To read many files, run the reader once per file and concatenate the output:

    for f in *.jpg ; do imagepipe-reader $f ; done | imagepipe-writer out.png
"""

import sys
import logging

from .cli import make_parser,run_program,size_type
from .pipeline import SingleThreadedPipeline
from .source import FrameFromSource
from .stage import ResizeFrames,EmitFrameRecords

logger = logging.getLogger(__name__)

def get_parser():
    parser = make_parser("imagepipe-reader",
                         "Read an image and write it to stdout as a JSON-LD Frame Record")
    parser.add_argument("url", nargs='?', help="Input image path or URL. If not specified, reads from stdin")
    parser.add_argument("-s", "--size", type=size_type, metavar="WxH",
                        help="Resize to WxH (e.g. 1920x1080). By default, keep the native size")
    return parser

def run_reader(args, stdin, stdout):
    logger.info("starting reader url=%s size=%s",args.url,args.size)
    with SingleThreadedPipeline(verbose=args.verbose, debug=args.debug) as p:
        p.addLinearPipeline([ ResizeFrames(args.size),
                              EmitFrameRecords(stdout) ])
        p.process( FrameFromSource(args.url, stdin=stdin) )
    logger.info("finished reader")
    return p.exit_code

def main(argv=None):
    args = get_parser().parse_args(argv)
    return run_program(run_reader, args)

if __name__=="__main__":
    sys.exit(main())
