import logging
import time


logger = logging.getLogger(__name__)


class Profiler:
    """count the iterations of a loop and log how many happened per second"""
    def __init__(self, name, clock=time.monotonic, period=1.0):
        self.name = name
        self.clock = clock
        self.period = period
        self.ticks_count = 0
        self.rate = 0.0
        self._start = None

    def tick(self):
        now = self.clock()
        if self._start is None:
            self._start = now
        self.ticks_count += 1
        elapsed = now - self._start
        if elapsed >= self.period:
            self.rate = self.ticks_count / elapsed
            logger.debug("%s = %d TPS", self.name, self.rate)
            self.ticks_count = 0
            self._start = now
