import logging
import threading
from pathlib import Path

from chip8.config import SPEED, TIMER_HZ
from chip8.cpu import Chip8
from chip8.keypad import Keypad
from chip8.memory import Memory, Stack
from chip8.scheduler import Scheduler
from chip8.screen import Screen
from chip8.timers import Timers


logger = logging.getLogger(__name__)


class Emulator:
    """
    builds the machine and wires it together, the one object handed to the front end

    the front end only touches the screen (read), the keypad (write), the beep
    request and the stop event, everything else belongs to the interpreter thread
    """
    def __init__(self, speed=SPEED, timer_hz=TIMER_HZ, rng=None, max_cycles=None):
        self.stop_event = threading.Event()
        self.beep_requested = threading.Event()
        self.mem = Memory()
        self.stack = Stack()
        self.timers = Timers(on_beep=self.beep_requested.set)
        self.screen = Screen()
        self.keypad = Keypad()
        self.cpu = Chip8(self.mem, self.stack, self.timers, self.screen, self.keypad, rng=rng)
        self.scheduler = Scheduler(
            self.cpu, self.timers,
            speed=speed, timer_hz=timer_hz,
            stop_event=self.stop_event, max_cycles=max_cycles,
        )

    def load_rom(self, rom):
        self.mem.load_rom(rom)

    def load_rom_file(self, path):
        """load ROM file from user specified path, RomTooLarge and OSError are left to the caller"""
        rom = Path(path).read_bytes()
        self.mem.load_rom(rom)
        logger.info("The ROM at path %s has been loaded successfully (%d bytes)", path, len(rom))

    def start(self):
        return self.scheduler.start()

    def stop(self):
        self.scheduler.stop()

    @property
    def running(self):
        return not self.stop_event.is_set()

    def join(self, timeout=None):
        self.scheduler.join(timeout)

    def __str__(self):
        return str(self.cpu)
