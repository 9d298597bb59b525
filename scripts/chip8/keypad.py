import enum
import threading

from chip8.config import KEYS_COUNT


class KeyState(enum.Enum):
    RELEASED = 0
    PRESSED = 1
    CONSUMED = 2    # still held down, but already accepted by a wait for key instruction


class Keypad:
    """
    the 16 keys of the hex keypad, shared between the input thread and the interpreter
    every transition happens under the lock, a release always wins over a consume
    """
    def __init__(self):
        self.keys = [KeyState.RELEASED] * KEYS_COUNT
        self._lock = threading.Lock()

    def __getitem__(self, key):
        return self.is_down(key)

    def __setitem__(self, key, value):
        if value:
            self.set_pressed(key)
        else:
            self.set_released(key)

    def set_pressed(self, key):
        # auto repeat must not turn a consumed key into a fresh press
        with self._lock:
            if self.keys[key] is KeyState.RELEASED:
                self.keys[key] = KeyState.PRESSED

    def set_released(self, key):
        with self._lock:
            self.keys[key] = KeyState.RELEASED

    def query(self, key):
        with self._lock:
            return self.keys[key]

    def is_down(self, key):
        """True while the key is held, whether it has been consumed or not"""
        return self.query(key) is not KeyState.RELEASED

    def consume(self, key):
        """move a pressed key to consumed, return True if the key is consumed afterwards"""
        with self._lock:
            if self.keys[key] is KeyState.PRESSED:
                self.keys[key] = KeyState.CONSUMED
            return self.keys[key] is KeyState.CONSUMED

    def untouched(self):
        with self._lock:
            return all(k is not KeyState.PRESSED for k in self.keys)

    def first_pressed(self):
        """consume and return the lowest key in the pressed state, None if there's none"""
        with self._lock:
            for key, state in enumerate(self.keys):
                if state is KeyState.PRESSED:
                    self.keys[key] = KeyState.CONSUMED
                    return key
        return None

    def __str__(self):
        return "".join(f"{k:X}" if s is not KeyState.RELEASED else "." for k, s in enumerate(self.keys))
