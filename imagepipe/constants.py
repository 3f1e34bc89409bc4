"""Constants"""

# pylint: disable=too-few-public-methods
class C:
    """Constants"""
    # sysexits(3)
    EX_OK       = 0
    EX_USAGE    = 64
    EX_DATAERR  = 65
    EX_SOFTWARE = 70
    EX_IOERR    = 74

    RECORD_TYPE = 'Image'
    STDIN_URN   = '[stdin]'
    WINDOW_NAME = 'imagepipe'
    ESCAPE_KEY  = 27

    DEFAULT_JPEG_QUALITY = 90
    DEFAULT_GET_TIMEOUT  = 30

    # output extension -> extension given to cv2.imencode()
    OUTPUT_EXTENSIONS = {'.png':'.png',
                         '.jpg':'.jpg',
                         '.jpeg':'.jpg',
                         '.jpe':'.jpg',
                         '.bmp':'.bmp',
                         '.tif':'.tiff',
                         '.tiff':'.tiff',
                         '.webp':'.webp'}
    NO_ALPHA_EXTENSIONS = set(['.jpg'])
