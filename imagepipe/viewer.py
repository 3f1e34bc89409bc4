#!/usr/bin/env python3
"""
imagepipe-viewer: show every Frame Record read from stdin in a window.
Each frame replaces the one before. Press escape or close the window to stop.
"""

import sys
import logging

from .cli import make_parser,add_union_argument,run_program
from .pipeline import SingleThreadedPipeline
from .source import TeeLines,FrameRecordStream
from .stage import ShowFrames,Cancelled

logger = logging.getLogger(__name__)

def get_parser():
    parser = make_parser("imagepipe-viewer",
                         "Show JSON-LD Frame Records from stdin in a window")
    add_union_argument(parser)
    return parser

def run_viewer(args, stdin, stdout):
    logger.info("starting viewer union=%s",args.union)
    with SingleThreadedPipeline(verbose=args.verbose, debug=args.debug, nonstop=True) as p:
        p.addLinearPipeline([ ShowFrames() ])
        lines   = TeeLines(stdin, stdout if args.union else None)
        records = FrameRecordStream(lines, on_error=p.record_error)
        try:
            p.process_stream(records)
        except Cancelled:
            logger.info("viewer cancelled")
        finally:
            records.close()
            lines.close()
    logger.info("viewer exiting: %s frames shown",p.count)
    return p.exit_code

def main(argv=None):
    args = get_parser().parse_args(argv)
    return run_program(run_viewer, args)

if __name__=="__main__":
    sys.exit(main())
