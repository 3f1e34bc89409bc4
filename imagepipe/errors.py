"""
Errors raised by imagepipe. Each carries the sysexits code used when it ends the process.
"""

from .constants import C

class ImagePipeError(RuntimeError):
    """Base class for all imagepipe errors"""
    exit_code = C.EX_SOFTWARE
    recoverable = True   # a non-stop pipeline may continue with the next frame

class UsageError(ImagePipeError):
    """Bad command line arguments"""
    exit_code = C.EX_USAGE

class InvalidSize(UsageError):
    """Size specification is not WxH with two positive integers"""

class SourceFetchError(ImagePipeError):
    """Cannot read the bytes of a file, URL or stdin"""
    exit_code = C.EX_IOERR

class DecodeError(ImagePipeError):
    """Bytes are not an image in a supported format, or are corrupt"""
    exit_code = C.EX_DATAERR

class MalformedRecord(ImagePipeError):
    """A line is not a valid Frame Record"""
    exit_code = C.EX_DATAERR

class UnsupportedFormat(ImagePipeError):
    """Output extension is not a format we can write"""
    exit_code = C.EX_DATAERR

class EncodeError(ImagePipeError):
    """The encoder failed on a frame"""
    exit_code = C.EX_DATAERR

class ResizeError(ImagePipeError):
    """The resampler failed, e.g. the target is too large to allocate"""

class WriteError(ImagePipeError):
    """Cannot write an output file"""
    exit_code = C.EX_IOERR

class DisplayError(ImagePipeError):
    """The window system is not available"""
    recoverable = False
