import enum
import logging
import threading
import time

from chip8.config import SPEED, THROTTLE_SLEEP, TIMER_HZ
from chip8.cpu import StepResult
from chip8.profiler import Profiler


logger = logging.getLogger(__name__)


class State(enum.Enum):
    IDLE = 0
    RUNNING = 1
    STOPPING = 2
    STOPPED = 3


class Scheduler:
    """
    drive the interpreter: step it as fast as allowed, tick the timers at a fixed rate
    and stop cleanly either on request or on the first fault

    the stop event is shared with the input and display loops, it's set whenever
    the scheduler stops so that every other activity winds down too
    """
    def __init__(self, cpu, timers, speed=SPEED, timer_hz=TIMER_HZ, stop_event=None,
                 on_stop=None, max_cycles=None, clock=time.monotonic, sleep=time.sleep):
        if speed < 1:
            raise ValueError("speed must be at least 1")
        self.cpu = cpu
        self.timers = timers
        self.speed = speed
        self.timer_period = 1.0 / timer_hz
        self.stop_event = stop_event if stop_event is not None else threading.Event()
        self.on_stop = on_stop
        self.max_cycles = max_cycles
        self.clock = clock
        self.sleep = sleep
        self.cycles = 0         # executed instructions, key waits excluded
        self.timer_ticks = 0
        self.error = None
        self.thread = None
        self.profiler = Profiler("CPU", clock=clock)
        self._state = State.IDLE
        self._lock = threading.Lock()

    @property
    def state(self):
        with self._lock:
            return self._state

    def _set_state(self, state):
        with self._lock:
            self._state = state
        logger.debug("Scheduler is now %s", state.name)

    def start(self):
        """run the loop in its own thread"""
        self._enter_running()
        self.thread = threading.Thread(target=self._loop, name="cpu", daemon=True)
        self.thread.start()
        return self.thread

    def run(self):
        """run the loop in the calling thread, re-raise the fault that stopped it, if any"""
        self._enter_running()
        self._loop()
        if self.error is not None:
            raise self.error

    def stop(self):
        """ask the loop to stop, it will do so at the top of its next iteration"""
        with self._lock:
            if self._state is State.RUNNING:
                self._state = State.STOPPING
            elif self._state is State.IDLE:
                self._state = State.STOPPED
        self.stop_event.set()

    def join(self, timeout=None):
        """wait for the loop thread to end, re-raise the fault that stopped it, if any"""
        if self.thread is not None:
            self.thread.join(timeout)
        if self.error is not None:
            raise self.error

    def _enter_running(self):
        with self._lock:
            if self._state is not State.IDLE:
                raise RuntimeError(f"The scheduler can't be started from state {self._state.name}")
            self._state = State.RUNNING

    def _loop(self):
        iterations = 0
        elapsed = 0.0
        last = self.clock()
        try:
            while not self.stop_event.is_set():
                # timers run on real time, not on the number of executed instructions
                now = self.clock()
                elapsed += now - last
                last = now
                while elapsed >= self.timer_period:
                    self.timers.tick()
                    self.timer_ticks += 1
                    elapsed -= self.timer_period

                if self.cpu.step() is StepResult.EXECUTED:
                    self.cycles += 1
                    self.profiler.tick()
                    if self.max_cycles is not None and self.cycles >= self.max_cycles:
                        break

                # sleep a bit so the CPU doesn't burn
                iterations += 1
                if iterations % self.speed == 0:
                    self.sleep(THROTTLE_SLEEP)
        except Exception as e:
            self.error = e
            logger.error("The interpreter stopped on a fault: %s\n%s", e, self.cpu)
        finally:
            self._set_state(State.STOPPED)
            self.stop_event.set()
            if self.on_stop:
                self.on_stop(self.error)
