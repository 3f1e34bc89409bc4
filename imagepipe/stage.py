"""
Stage implementation and the stages used by the imagepipe programs.
"""

import time
import math
import logging
from abc import ABC

import cv2

from .constants import C
from .errors import DisplayError,EncodeError,UnsupportedFormat,WriteError
from .frame import Frame,encode_record

logger = logging.getLogger(__name__)

class Cancelled(Exception):
    """The user asked to stop (escape key or closed window)"""

def validate_stage(stage):
    if not hasattr(stage,'count'):
        raise RuntimeError(str(stage) + "did not call super().__init__()")


class Stage(ABC):
    """Abstract base class for processing DAG"""

    def __init__(self):
        self.next_stages = []
        self.sum_t   = 0
        self.sum_t2  = 0
        self.count   = 0
        self.pipeline = None    # my pipeline

    def process(self, f:Frame):
        """Called to process. Default behavior is to copy frame to output."""
        self.output(f)

    def _run_frame(self,f):
        """called at the start of processing of this stage.
        Processes and then passes the frame to the output stages."""
        t0 = time.time()
        try:
            self.process(f)
        finally:
            t = time.time() - t0
            self.sum_t  += t
            self.sum_t2 += (t*t)
            self.count  += 1

    def output(self,f):
        """output(f) queues f for output when the current stage is done.
        If f is modified, it needs to be copied.
        """
        for s in self.next_stages:
            self.pipeline.queue_output_stage_frame_pair( (s,f) )

    def pipeline_shutdown(self):
        """Called when pipeline is being shut down."""

    @property
    def t_mean(self):
        return self.sum_t / self.count if self.count>0 else float("nan")

    @property
    def t2_mean(self):
        return self.sum_t2 / self.count if self.count>0 else float("nan")

    @property
    def t_variance(self):
        return self.t2_mean - self.t_mean * self.t_mean

    @property
    def t_stddev(self):
        return math.sqrt(max(self.t_variance,0)) if self.count>0 else float("nan")


class ResizeFrames(Stage):
    """Resize every frame to size=(w,h). With no size, frames pass through unchanged."""
    def __init__(self, size=None):
        super().__init__()
        self.size = size

    def process(self, f:Frame):
        if self.size is not None:
            (w, h) = self.size
            logger.debug("resizing %sx%s to %sx%s",f.width,f.height,w,h)
            f = f.resize(w, h)
        self.output(f)


class EmitFrameRecords(Stage):
    """Write each frame as a Frame Record to a binary stream. This is a sink for the reader."""
    def __init__(self, out):
        super().__init__()
        self.out = out

    def process(self, f:Frame):
        self.out.write(encode_record(f).encode('utf-8'))
        self.out.flush()
        logger.info("emitted %sx%sx%s frame from %s",f.width,f.height,f.channels,f.urn)
        self.output(f)


class SaveFramesToFiles(Stage):
    def __init__(self, paths):
        """Save every frame to every one of paths. The format of each comes from its extension.
        A failure for one path is reported to the pipeline and does not stop the others.
        """
        super().__init__()
        self.paths = list(paths)
        self.write_counter = 0
        self.error_counter = 0

    def process(self, f:Frame):
        for path in self.paths:
            try:
                f.save(path)
            except (UnsupportedFormat, EncodeError, WriteError) as e:
                self.error_counter += 1
                self.pipeline.record_error(f"failed to save image to '{path}'", e)
                continue
            self.write_counter += 1
            logger.info("wrote %sx%s frame to %s",f.width,f.height,path)
        # and copy the frame to the output (we are not a sink!)
        self.output(f)


class ShowFrames(Stage):
    """Show every frame coming through in one window, replacing the previous frame, then copy to output.
    Raises Cancelled if the user presses escape or closes the window."""
    wait = 1
    def __init__(self, title=C.WINDOW_NAME, wait=None):
        super().__init__()
        self.title = title
        self.window_open = False
        if wait is not None:
            self.wait=wait

    def process(self, f:Frame):
        try:
            key = f.show(title=self.title, wait=self.wait, create=not self.window_open)
            self.window_open = True
            visible = f.window_visible(self.title)
        except cv2.error as e:  # pylint: disable=catching-non-exception
            raise DisplayError(f"cannot display image: {e}") from e
        if key==C.ESCAPE_KEY or not visible:
            raise Cancelled(self.title)
        self.output(f)

    def pipeline_shutdown(self):
        if self.window_open:
            self.window_open = False
            try:
                Frame.close_window(self.title)
            except cv2.error as e:  # pylint: disable=catching-non-exception
                logger.debug("window %s already closed: %s",self.title,e)


def Connect(prev_:Stage, next_:Stage):
    """Make the output of stage prev_ go to next_"""
    validate_stage(prev_)
    validate_stage(next_)
    prev_.next_stages.append(next_)
