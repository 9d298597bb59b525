import array
import logging
import queue
import threading

import os
os.environ["PYGAME_HIDE_SUPPORT_PROMPT"] = "no welcome message"   # this env var disable pygame's welcome message when imported
import pygame
from pygame.locals import (
    K_1, K_2, K_3, K_4,
    K_q, K_w, K_e, K_r,
    K_a, K_s, K_d, K_f,
    K_z, K_x, K_c, K_v,
    K_ESCAPE, KEYDOWN, KEYUP, QUIT,
)

from chip8.config import (
    BEEP_DURATION, BEEP_FREQUENCY, BLUE, DISPLAY_FPS,
    INPUT_POLL_INTERVAL, LIGHT_BLUE, SCALE,
)
from chip8.profiler import Profiler


logger = logging.getLogger(__name__)

# the 4x4 block on the left of a QWERTY keyboard mirrors the COSMAC VIP keypad
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
KEY_MAPPINGS = {
    K_1: 0x1, K_2: 0x2, K_3: 0x3, K_4: 0xC,
    K_q: 0x4, K_w: 0x5, K_e: 0x6, K_r: 0xD,
    K_a: 0x7, K_s: 0x8, K_d: 0x9, K_f: 0xE,
    K_z: 0xA, K_x: 0x0, K_c: 0xB, K_v: 0xF,
}


# ******************** OUTPUT SECTION
class Display:
    """draws frame buffer snapshots on a pygame window"""
    def __init__(self, w, h, s=SCALE, bg_color=BLUE, fg_color=LIGHT_BLUE, title="CHIP-8"):
        self.w, self.h, self.scale = w, h, s
        self.background = pygame.Color(*bg_color)
        self.foreground = pygame.Color(*fg_color)
        self.surface = pygame.display.set_mode((w * self.scale, h * self.scale))
        pygame.display.set_caption(title)
        self.surface.fill(self.background)
        self.version = None

    def draw(self, version, pixels):
        """repaint the whole window, unless this version has already been drawn"""
        if version == self.version:
            return False
        self.surface.fill(self.background)
        for pos, pixel in enumerate(pixels):
            if pixel:
                x, y = pos % self.w, pos // self.w
                pygame.draw.rect(
                    self.surface,
                    self.foreground,
                    (x * self.scale, y * self.scale, self.scale, self.scale),
                )
        pygame.display.flip()
        self.version = version
        return True


class Beeper:
    """plays a short square wave, degrades to a log line when there's no audio device"""
    def __init__(self, frequency=BEEP_FREQUENCY, duration=BEEP_DURATION):
        self.sound = None
        try:
            pygame.mixer.init(frequency=22050, size=-16, channels=1)
        except pygame.error as e:
            logger.warning("No audio device, beeps will only be logged: %s", e)
            return
        sample_rate, _, channels = pygame.mixer.get_init()
        period = max(int(sample_rate / frequency), 2)
        samples = array.array("h")
        for i in range(int(sample_rate * duration)):
            value = 8000 if (i % period) < period // 2 else -8000
            samples.extend([value] * channels)
        self.sound = pygame.mixer.Sound(buffer=samples.tobytes())

    def beep(self):
        if self.sound is None:
            logger.info("Beep!")
        else:
            self.sound.play()


# ******************** INPUT SECTION
class InputProducer:
    """
    turns the pygame key events forwarded by the main loop into keypad transitions
    Escape or closing the window asks the whole emulator to stop
    """
    def __init__(self, keypad, stop_event, on_quit, events=None, poll_interval=INPUT_POLL_INTERVAL):
        self.keypad = keypad
        self.stop_event = stop_event
        self.on_quit = on_quit
        self.events = events if events is not None else queue.Queue()
        self.poll_interval = poll_interval
        self.profiler = Profiler("IO")
        self.thread = None

    def start(self):
        self.thread = threading.Thread(target=self.loop, name="input", daemon=True)
        self.thread.start()
        return self.thread

    def join(self, timeout=None):
        if self.thread is not None:
            self.thread.join(timeout)

    def handle(self, event):
        if event.type == QUIT:
            self.on_quit()
        elif event.type == KEYDOWN:
            if event.key == K_ESCAPE:
                self.on_quit()
            elif event.key in KEY_MAPPINGS:
                self.keypad.set_pressed(KEY_MAPPINGS[event.key])
        elif event.type == KEYUP and event.key in KEY_MAPPINGS:
            self.keypad.set_released(KEY_MAPPINGS[event.key])

    def loop(self):
        while not self.stop_event.is_set():
            self.profiler.tick()
            try:
                event = self.events.get(timeout=self.poll_interval)
            except queue.Empty:
                continue
            self.handle(event)


# ******************** MAIN LOOP
def run(emulator, title="CHIP-8", scale=SCALE, fps=DISPLAY_FPS):
    """
    show the emulator in a window until it stops, then re-raise the fault that stopped it, if any
    the display loop runs in the calling thread because pygame wants its events pumped there
    """
    pygame.init()
    try:
        clock = pygame.time.Clock()
        display = Display(emulator.screen.w, emulator.screen.h, s=scale, title=title)
        beeper = Beeper()
        producer = InputProducer(emulator.keypad, emulator.stop_event, on_quit=emulator.stop)
        profiler = Profiler("Screen")

        producer.start()
        emulator.start()
        try:
            while emulator.running:
                clock.tick(fps)
                profiler.tick()
                for event in pygame.event.get():
                    producer.events.put(event)
                if emulator.beep_requested.is_set():
                    emulator.beep_requested.clear()
                    beeper.beep()
                display.draw(*emulator.screen.snapshot())
        finally:
            # shutdown joins all three activities before the state is released
            emulator.stop()
            producer.join()
            emulator.join()
    finally:
        pygame.quit()
