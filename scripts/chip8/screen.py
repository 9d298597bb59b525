import threading

from chip8.config import SCREEN_HEIGHT, SCREEN_WIDTH


class Screen:
    """
    the 64x32 monochrome frame buffer, one int (0 or 1) per pixel
    the interpreter is its only writer, readers must go through snapshot()
    sprites that cross the right or the bottom edge wrap around to the other side
    """
    def __init__(self, w=SCREEN_WIDTH, h=SCREEN_HEIGHT):
        self.w, self.h = w, h
        self.buffer = [0] * h * w
        self.version = 0        # bumped on every change so readers can skip unchanged frames
        self._lock = threading.Lock()

    def read_pixel(self, x, y):
        """return 1 if pixel is ON, return 0 if pixel is OFF"""
        return self.buffer[(y % self.h) * self.w + (x % self.w)]

    def draw_sprite(self, x, y, sprite):
        """
        XOR every row of the sprite onto the buffer with its top left corner at (x, y)
        return True if any pixel has been turned from ON to OFF
        """
        collision = False
        with self._lock:
            for i, sprite_byte in enumerate(sprite):
                row = ((y + i) % self.h) * self.w
                for j in range(8):
                    if sprite_byte & (0x80 >> j):
                        pos = row + (x + j) % self.w
                        # the only case when a pixel gets erased is when it was ON and is turned ON again
                        if self.buffer[pos]:
                            collision = True
                        self.buffer[pos] ^= 1
            self.version += 1
        return collision

    def clear(self):
        with self._lock:
            self.buffer = [0] * self.h * self.w
            self.version += 1

    def snapshot(self):
        """return (version, copy of the buffer), never a view on the live buffer"""
        with self._lock:
            return self.version, list(self.buffer)

    def dump(self):
        """text rendering of the buffer, one line per row"""
        _, pixels = self.snapshot()
        return "\n".join(
            "".join("x" if p else " " for p in pixels[row * self.w:(row + 1) * self.w])
            for row in range(self.h)
        )
