"""
Pipeline
"""

import collections
from abc import ABC,abstractmethod
import logging

from .constants import C
from .errors import ImagePipeError
from .stage import Connect,validate_stage


logger = logging.getLogger(__name__)

class Pipeline(ABC):
    """Base pipeline class"""
    def __init__(self, verbose=0, debug=False, nonstop=False):
        """
        :param verbose: verbosity level (number of -v flags)
        :param nonstop: - If True, a frame that fails is reported and the next frame is processed
        """
        self.queued_output_stage_frame_pairs = collections.deque()
        self.head = None
        self.stages = []
        self.count  = 0
        self.running = False
        self.verbose = verbose
        self.debug   = debug
        self.nonstop = nonstop
        self.errors  = []

    def queue_output_stage_frame_pair(self, pair):
        self.queued_output_stage_frame_pairs.append(pair)

    def addLinearPipeline(self, stages:list):
        for stage in stages:
            validate_stage(stage)
            stage.pipeline = self
        self.head = stages[0]
        self.stages.extend(stages)   # collect all stages for printing stats
        for i in range(len(stages)-1):
            Connect( stages[i], stages[i+1] )

    def record_error(self, msg, err):
        """Report an error that does not stop the pipeline. The first one decides the exit code."""
        self.errors.append(err)
        if self.debug or self.verbose>=2:
            logger.warning("%s: %s",msg,err)
        else:
            logger.warning("%s",msg)

    @property
    def exit_code(self):
        return self.errors[0].exit_code if self.errors else C.EX_OK

    def process(self, f):
        """Run a frame through the pipeline."""
        if not self.running:
            raise RuntimeError("pipeline not running")
        self.count += 1
        logger.debug("== process %s",f)
        self.queue_output_stage_frame_pair( (self.head, f))
        self.run_queue()

    def process_stream(self, fstream):
        for f in fstream:
            self.process(f)

    @abstractmethod
    def run_queue(self):
        """Run until the queue is empty"""

    def log_stats(self):
        for stage in self.stages:
            name = stage.__class__.__name__
            logger.debug("%s: calls: %s  mean: %.2gs  stddev: %.2g",
                         name, stage.count, stage.t_mean, stage.t_stddev)

    def __enter__(self):
        self.running = True
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        for stage in self.stages:
            stage.pipeline_shutdown()
        self.log_stats()
        self.running = False
        return False


class SingleThreadedPipeline(Pipeline):
    """Runs the pipeline in the caller's thread. Logs stats on exit"""
    def run_queue(self):
        while True:
            try:
                (s,f) = self.queued_output_stage_frame_pairs.popleft()
            except IndexError:
                break
            logger.debug("<%s> processing %s",s.__class__.__name__,f)
            try:
                s._run_frame(f) # pylint: disable=protected-access
            except ImagePipeError as e:
                if not (self.nonstop and e.recoverable):
                    self.queued_output_stage_frame_pairs.clear()
                    raise
                self.record_error(f"{s.__class__.__name__} failed on {f.urn}", e)
                continue
