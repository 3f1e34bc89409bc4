#!/usr/bin/env python3
"""
imagepipe-writer: save every Frame Record read from stdin to one or more image files.
The format of each file comes from its extension (.png, .jpg, .bmp, ...).
"""

import sys
import logging

from .cli import make_parser,add_union_argument,run_program
from .pipeline import SingleThreadedPipeline
from .source import TeeLines,FrameRecordStream
from .stage import SaveFramesToFiles

logger = logging.getLogger(__name__)

def get_parser():
    parser = make_parser("imagepipe-writer",
                         "Write JSON-LD Frame Records from stdin to image files")
    add_union_argument(parser)
    parser.add_argument("files", nargs='+', metavar="FILES",
                        help="Output files. Each incoming image is saved to all of them")
    return parser

def run_writer(args, stdin, stdout):
    logger.info("starting writer files=%s union=%s",args.files,args.union)
    with SingleThreadedPipeline(verbose=args.verbose, debug=args.debug, nonstop=True) as p:
        saver = SaveFramesToFiles(args.files)
        p.addLinearPipeline([ saver ])
        lines   = TeeLines(stdin, stdout if args.union else None)
        records = FrameRecordStream(lines, on_error=p.record_error)
        try:
            p.process_stream(records)
        finally:
            records.close()
            lines.close()
    logger.info("writer exiting: %s frames, %s files written, %s errors",
                p.count, saver.write_counter, len(p.errors))
    return p.exit_code

def main(argv=None):
    args = get_parser().parse_args(argv)
    return run_program(run_writer, args)

if __name__=="__main__":
    sys.exit(main())
