"""
Image byte-level helpers. Everything that touches cv2's codecs is here:

sniff_mime_type(data) - identify the format from the magic number
img_decode(data)      - bytes in any supported format -> RGB(A) numpy array
img_encode(img, ext)  - RGB(A) numpy array -> bytes in the format named by ext
parse_size(spec)      - "WxH" -> (w, h)
img_resize(img, w, h) - deterministic resample to exactly w x h

Arrays are always uint8 with shape (height, width, channels), channels 3 or 4,
in RGB order. cv2 works in BGR order, so we convert at this boundary.
"""

import re
import logging

import cv2
import numpy as np

from .constants import C
from .errors import DecodeError,EncodeError,InvalidSize,ResizeError,UnsupportedFormat

logger = logging.getLogger(__name__)

MAGIC_NUMBERS = [ (b'\x89PNG\r\n\x1a\n', 'image/png'),
                  (b'\xff\xd8\xff',      'image/jpeg'),
                  (b'BM',                'image/bmp'),
                  (b'GIF87a',            'image/gif'),
                  (b'GIF89a',            'image/gif'),
                  (b'II*\x00',           'image/tiff'),
                  (b'MM\x00*',           'image/tiff') ]

SIZE_RE = re.compile(r'^\s*(\d+)\s*[x×]\s*(\d+)\s*$')

def sniff_mime_type(data):
    """Return the mime type of image bytes by looking at the magic number, or None"""
    for (magic, mime_type) in MAGIC_NUMBERS:
        if data.startswith(magic):
            return mime_type
    if data[0:4]==b'RIFF' and data[8:12]==b'WEBP':
        return 'image/webp'
    return None

def img_decode(data):
    """Decode image bytes. The format comes from the bytes, never from a file name.
    :return: a read-only RGB or RGBA array
    """
    if not data:
        raise DecodeError("no image data")
    try:
        img = cv2.imdecode(np.frombuffer(data, np.uint8), cv2.IMREAD_UNCHANGED)
    except cv2.error as e:  # pylint: disable=catching-non-exception
        raise DecodeError(f"corrupt image data: {e}") from e
    if img is None:
        raise DecodeError(f"unsupported or corrupt image format ({len(data)} bytes)")

    if img.dtype == np.uint16:
        img = (img >> 8).astype(np.uint8)
    elif img.dtype != np.uint8:
        raise DecodeError(f"unsupported sample type {img.dtype}")

    if len(img.shape)==2:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    elif img.shape[2]==1:
        img = cv2.cvtColor(img, cv2.COLOR_GRAY2RGB)
    elif img.shape[2]==2:
        gray  = cv2.cvtColor(img[:,:,0], cv2.COLOR_GRAY2RGB)
        img   = np.dstack( (gray, img[:,:,1]) )
    elif img.shape[2]==3:
        img = cv2.cvtColor(img, cv2.COLOR_BGR2RGB)
    elif img.shape[2]==4:
        img = cv2.cvtColor(img, cv2.COLOR_BGRA2RGBA)
    else:
        raise DecodeError(f"unsupported channel count {img.shape[2]}")

    img = np.ascontiguousarray(img)
    img.flags.writeable = False
    logger.debug("decoded %s bytes to %s",len(data),img.shape)
    return img

def img_encode(img, ext, jpeg_quality=C.DEFAULT_JPEG_QUALITY):
    """Encode an RGB(A) array in the format named by the file extension ext (e.g. '.png').
    :return: the encoded bytes
    """
    try:
        cv_ext = C.OUTPUT_EXTENSIONS[ext.lower()]
    except KeyError:
        raise UnsupportedFormat(f"unsupported output format '{ext}'") from None

    if img.shape[2]==4 and cv_ext in C.NO_ALPHA_EXTENSIONS:
        bgr = cv2.cvtColor(img, cv2.COLOR_RGBA2BGR)
    elif img.shape[2]==4:
        bgr = cv2.cvtColor(img, cv2.COLOR_RGBA2BGRA)
    else:
        bgr = cv2.cvtColor(img, cv2.COLOR_RGB2BGR)

    params = []
    if cv_ext=='.jpg':
        params = [cv2.IMWRITE_JPEG_QUALITY, jpeg_quality]
    try:
        (ok, buf) = cv2.imencode(cv_ext, bgr, params)
    except cv2.error as e:  # pylint: disable=catching-non-exception
        raise EncodeError(f"cannot encode {img.shape} as {cv_ext}: {e}") from e
    if not ok:
        raise EncodeError(f"cannot encode {img.shape} as {cv_ext}")
    return buf.tobytes()

def parse_size(spec):
    """Parse 'WxH' into (w, h). Both must be positive integers."""
    m = SIZE_RE.match(spec) if isinstance(spec,str) else None
    if m is None:
        raise InvalidSize(f"invalid size '{spec}'. Use WxH (e.g. 1920x1080)")
    (w, h) = (int(m.group(1)), int(m.group(2)))
    if w<=0 or h<=0:
        raise InvalidSize(f"invalid size '{spec}'. Width and height must be positive")
    return (w, h)

def img_resize(img, w, h):
    """Return a new array resampled to w x h. The input is not modified.
    Lanczos resampling; the same input always gives the same output."""
    if w<=0 or h<=0:
        raise InvalidSize(f"invalid size {w}x{h}")
    channels = img.shape[2]
    try:
        resized = cv2.resize(img, (w, h), interpolation=cv2.INTER_LANCZOS4)
    except (cv2.error, OverflowError) as e:  # pylint: disable=catching-non-exception
        raise ResizeError(f"cannot resize {img.shape} to {w}x{h}: {e}") from e
    resized = np.ascontiguousarray(resized.reshape(h, w, channels))
    resized.flags.writeable = False
    return resized
