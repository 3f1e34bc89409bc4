"""
This module provides the following functions:

FrameFromSource(url, stdin) - A single Frame from a file, URL or stdin.
TeeLines(instream, out) - A generator of the lines of instream that copies each line to out once consumed.
FrameRecordStream(lines, on_error) - A generator of Frames parsed from Frame Records, skipping bad lines.

"""

import logging

from .frame import Frame,decode_record
from .errors import MalformedRecord
from .storage import load_bytes,load_stdin

logger = logging.getLogger(__name__)

def FrameFromSource(url=None, stdin=None):
    """Read and decode one image. If url is None, read stdin until end of file."""
    if url is None:
        (data, urn) = load_stdin(stdin)
    else:
        (data, urn) = load_bytes(url)
    logger.info("read %s bytes from %s",len(data),urn)
    return Frame.fromBytes(data, urn=urn)

def TeeLines(instream, out=None):
    """Generator for the lines of a binary stream, each including its newline.
    The last line is returned even if it has no newline.
    If out is provided, each line is written to out verbatim after the consumer is done with it.
    """
    for line in instream:
        try:
            yield line
        finally:
            if out is not None:
                out.write(line)
                out.flush()

def FrameRecordStream(lines, on_error=None):
    """Generator for Frames parsed from lines, one Frame Record per line.
    Blank lines are ignored. Lines that are not Frame Records are reported to on_error(msg, err)
    and skipped.
    """
    for (lineno, line) in enumerate(lines, start=1):
        if not line.strip():
            logger.debug("line %s: blank",lineno)
            continue
        try:
            f = decode_record(line)
        except MalformedRecord as e:
            if on_error is None:
                raise
            on_error(f"line {lineno}: failed to parse Image JSON-LD", e)
            continue
        logger.debug("line %s: %s",lineno,f)
        yield f
