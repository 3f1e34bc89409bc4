"""
Test images, generated so that no test data needs to be checked in.
"""

import cv2
import numpy as np

def gradient(w, h, channels=3):
    """Return a (h, w, channels) uint8 array with a different value in every pixel and channel"""
    y, x = np.mgrid[0:h, 0:w]
    planes = [(x*7 + y*13) % 256,
              (x*3 + y*5 + 64) % 256,
              (x*11 + y*2 + 128) % 256,
              (x + y*17 + 32) % 256]
    return np.dstack(planes[:channels]).astype(np.uint8)

def encoded(w, h, ext='.png', channels=3):
    """Return the bytes of a gradient image encoded with cv2. ext chooses the format."""
    img = gradient(w, h, channels)
    code = cv2.COLOR_RGBA2BGRA if channels==4 else cv2.COLOR_RGB2BGR
    (ok, buf) = cv2.imencode(ext, cv2.cvtColor(img, code))
    assert ok
    return buf.tobytes()

def write_image(path, w, h, ext=None, channels=3):
    """Write a gradient image to path and return path"""
    if ext is None:
        ext = '.' + str(path).rsplit('.',1)[1]
    with open(path,"wb") as f:
        f.write(encoded(w, h, ext, channels))
    return path
