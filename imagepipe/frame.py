"""This module provides the following:

Frame - Holds a single decoded image as a read-only numpy array
        (height, width, channels) of RGB or RGBA bytes, plus the
        provenance of the image.

encode_record(frame) - Frame -> one line of JSON-LD, newline terminated.
decode_record(line)  - one line of JSON-LD -> Frame, or MalformedRecord.

The record carries the pixels as base64 so that it always fits on one line.
"""
import os
import copy
import json
import base64
import binascii
import logging

import cv2
import numpy as np

from .constants import C
from .errors import MalformedRecord
from .image_utils import img_decode,img_encode,img_resize,sniff_mime_type
from .storage import save_bytes

logger = logging.getLogger(__name__)

P_URN = 'urn'
P_RESIZE = 'resize'
VALID_CHANNELS = (3,4)

class Frame:
    """Abstraction to hold an image frame.
    Frames are immutable; operations return a new Frame."""
    jpeg_quality = C.DEFAULT_JPEG_QUALITY
    def __init__(self, *, img, urn=None, mime_type=None, history=None):
        """
        :param img: uint8 array of shape (h, w, 3) or (h, w, 4)
        :param urn: where the image was read from
        :param mime_type: format of the original bytes
        """
        if not isinstance(img, np.ndarray) or img.dtype != np.uint8 or len(img.shape)!=3:
            raise ValueError(f"img must be a (h, w, channels) uint8 array, not {getattr(img,'shape',img)}")
        if img.shape[2] not in VALID_CHANNELS:
            raise ValueError(f"img must have 3 or 4 channels, not {img.shape[2]}")
        if img.shape[0]<=0 or img.shape[1]<=0:
            raise ValueError(f"img must not be empty: {img.shape}")
        if img.flags.writeable or not img.flags.c_contiguous:
            img = np.array(img, order='C')
        img.flags.writeable = False
        self._img = img
        self.urn = urn
        self.mime_type = mime_type
        if history is not None:
            self.history = history
        else:
            self.history = [[P_URN,urn]]

    @classmethod
    def fromBytes(cls, data, urn=None):
        """Decode image bytes in any supported format. The format is sniffed from the bytes."""
        return cls(img=img_decode(data), urn=urn, mime_type=sniff_mime_type(data))

    def __eq__(self, b):
        return (isinstance(b, Frame)
                and self.shape == b.shape
                and self.data == b.data
                and self.urn == b.urn
                and self.mime_type == b.mime_type
                and self.history == b.history)

    def __repr__(self):
        return f"<Frame urn={self.urn} shape={self.shape} history={self.history}>"

    @property
    def img(self):
        """return the image as a read-only array"""
        return self._img

    @property
    def shape(self):
        """Returns shape. note: shape[0] = height, shape[1]=width, shape[2]==channels"""
        return tuple(self._img.shape)

    @property
    def width(self):
        return self._img.shape[1]

    @property
    def height(self):
        return self._img.shape[0]

    @property
    def channels(self):
        return self._img.shape[2]

    @property
    def data(self):
        """The raw pixel bytes, row-major, top to bottom."""
        return self._img.tobytes()

    @property
    def json(self):
        """JSON-LD representation of the frame, on one line (without newline)."""
        d = {'@type': C.RECORD_TYPE}
        if self.urn is not None:
            d['@id'] = self.urn
        d['width'] = self.width
        d['height'] = self.height
        d['channels'] = self.channels
        d['data'] = base64.b64encode(self.data).decode('ascii')
        if self.urn is not None:
            d['source'] = self.urn
        if self.mime_type is not None:
            d['format'] = self.mime_type
        d['history'] = self.history
        return json.dumps(d, separators=(',',':'), default=str)

    @classmethod
    def fromJSON(cls, line):
        """Parse a Frame Record. Raises MalformedRecord."""
        if isinstance(line, bytes):
            try:
                line = line.decode('utf-8')
            except UnicodeDecodeError as e:
                raise MalformedRecord(f"record is not UTF-8: {e}") from e
        try:
            d = json.loads(line)
        except ValueError as e:
            raise MalformedRecord(f"record is not valid JSON: {e}") from e
        if not isinstance(d, dict):
            raise MalformedRecord("record is not a JSON object")
        if d.get('@type', C.RECORD_TYPE) != C.RECORD_TYPE:
            raise MalformedRecord(f"record @type is {d['@type']!r}, not {C.RECORD_TYPE!r}")

        width    = required_int(d, 'width')
        height   = required_int(d, 'height')
        # a record without channels is RGB, the convention of producers that do not send the field
        channels = required_int(d, 'channels') if 'channels' in d else 3
        if width<=0 or height<=0:
            raise MalformedRecord(f"record size {width}x{height} is not positive")
        if channels not in VALID_CHANNELS:
            raise MalformedRecord(f"record channels {channels} is not 3 or 4")
        if 'data' not in d:
            raise MalformedRecord("record has no data")

        data = pixel_bytes(d['data'])
        expected = width * height * channels
        if len(data) != expected:
            raise MalformedRecord(f"byte length {len(data)} does not match "
                                  f"width*height*channels ({width}*{height}*{channels}={expected})")

        urn = d.get('source', d.get('@id'))
        history = d.get('history')
        if not isinstance(history, list):
            history = [[P_URN,urn]]
        img = np.frombuffer(data, np.uint8).reshape(height, width, channels)
        return cls(img=img, urn=urn, mime_type=d.get('format'), history=history)

    def resize(self, w, h):
        """Return a new Frame resampled to w x h. Resizing to the current size returns self."""
        if (w, h) == (self.width, self.height):
            return self
        history = copy.copy(self.history)
        history.append([P_RESIZE, [w, h]])
        return Frame(img=img_resize(self._img, w, h),
                     urn=self.urn,
                     mime_type=self.mime_type,
                     history=history)

    def encode(self, ext):
        """Return the frame encoded in the format named by ext"""
        return img_encode(self._img, ext, jpeg_quality=self.jpeg_quality)

    def save(self, path):
        """Write the image to a file. The format comes from the extension of path."""
        logger.debug("save path=%s self=%s",path,self)
        save_bytes(path, self.encode(os.path.splitext(path)[1]))

    def show(self, title=None, wait=1, create=True):
        """Show the frame in a window sized to the frame, waiting up to wait ms for the keyboard.
        :return: the key pressed, or -1
        """
        if title is None:
            title = C.WINDOW_NAME
        if create:
            cv2.namedWindow(title, cv2.WINDOW_NORMAL)
        if self.channels==4:
            bgr = cv2.cvtColor(self._img, cv2.COLOR_RGBA2BGR)
        else:
            bgr = cv2.cvtColor(self._img, cv2.COLOR_RGB2BGR)
        cv2.resizeWindow(title, self.width, self.height)
        cv2.setWindowTitle(title, f"{self.urn or C.WINDOW_NAME} ({self.width}x{self.height})")
        cv2.imshow(title, bgr)
        key = cv2.waitKey(wait)
        return key & 0xff if key>=0 else key

    @staticmethod
    def window_visible(title):
        """Return True while the window is on screen; False once the user has closed it"""
        return cv2.getWindowProperty(title, cv2.WND_PROP_VISIBLE) >= 1

    @staticmethod
    def close_window(title):
        """Destroy the window opened by show()"""
        cv2.destroyWindow(title)


def required_int(d, key):
    if key not in d:
        raise MalformedRecord(f"record has no {key}")
    v = d[key]
    if isinstance(v, bool) or not isinstance(v, int):
        raise MalformedRecord(f"record {key} is {type(v).__name__}, not an integer")
    return v

def pixel_bytes(v):
    """The record data is base64. A list of byte values is also accepted."""
    if isinstance(v, str):
        try:
            return base64.b64decode(v, validate=True)
        except (binascii.Error, ValueError) as e:
            raise MalformedRecord(f"record data is not base64: {e}") from e
    if isinstance(v, list):
        if not all(isinstance(b, int) and not isinstance(b, bool) and 0<=b<=255 for b in v):
            raise MalformedRecord("record data list must contain bytes 0..255")
        return bytes(v)
    raise MalformedRecord(f"record data is {type(v).__name__}, not a string")

def encode_record(frame):
    """Return the Frame Record for frame, terminated by a newline."""
    return frame.json + "\n"

def decode_record(line):
    """Return the Frame for one line of input."""
    return Frame.fromJSON(line)
