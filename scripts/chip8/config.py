# CHIP-8 INFO
# https://chip-8.github.io/extensions/#chip-8
# https://chip-8.github.io/links/
#
# COMPATIBILITY QUIRKS TABLE
# https://games.gulrak.net/cadmium/chip8-opcode-table.html#quirk6

import logging
import os
import sys


# ******************** MACHINE SECTION
C8_FONTS = [0xF0, 0x90, 0x90, 0x90, 0xF0,  # 0
            0x20, 0x60, 0x20, 0x20, 0x70,  # 1
            0xF0, 0x10, 0xF0, 0x80, 0xF0,  # 2
            0xF0, 0x10, 0xF0, 0x10, 0xF0,  # 3
            0x90, 0x90, 0xF0, 0x10, 0x10,  # 4
            0xF0, 0x80, 0xF0, 0x10, 0xF0,  # 5
            0xF0, 0x80, 0xF0, 0x90, 0xF0,  # 6
            0xF0, 0x10, 0x20, 0x40, 0x40,  # 7
            0xF0, 0x90, 0xF0, 0x90, 0xF0,  # 8
            0xF0, 0x90, 0xF0, 0x10, 0xF0,  # 9
            0xF0, 0x90, 0xF0, 0x90, 0x90,  # A
            0xE0, 0x90, 0xE0, 0x90, 0xE0,  # B
            0xF0, 0x80, 0x80, 0x80, 0xF0,  # C
            0xE0, 0x90, 0x90, 0x90, 0xE0,  # D
            0xF0, 0x80, 0xF0, 0x80, 0xF0,  # E
            0xF0, 0x80, 0xF0, 0x80, 0x80]  # F

FONT_START_ADDRESS = 0x000
FONT_GLYPH_SIZE = 5
MEMORY_SIZE = 0x1000
ROM_START_ADDRESS = 0x200
MAX_ROM_SIZE = MEMORY_SIZE - ROM_START_ADDRESS
REGISTERS_COUNT = 16
STACK_SIZE = 16
KEYS_COUNT = 16
INSTRUCTION_SIZE = 2

SCREEN_HEIGHT = 32
SCREEN_WIDTH = 64


# ******************** CADENCE SECTION
TIMER_HZ = 60
SPEED = 5                   # cycles executed between two throttle sleeps
THROTTLE_SLEEP = 0.001      # seconds
INPUT_POLL_INTERVAL = 0.001
DISPLAY_FPS = 60


# ******************** FRONT END SECTION
SCALE = 15
BLUE = (80, 69, 155)
LIGHT_BLUE = (136, 126, 203)
BEEP_FREQUENCY = 440
BEEP_DURATION = 0.12        # seconds


# ******************** DEBUG SECTION
DEBUG = True if int(os.getenv('DEBUG', 0)) >= 1 else False
LOG_FORMAT = "[%(levelname)s] %(threadName)s: %(message)s"


def setup_logging(debug=None):
    """configure the root logger, at DEBUG level when tracing is enabled"""
    global DEBUG
    if debug is not None:
        DEBUG = debug
    logging.basicConfig(
        level=logging.DEBUG if DEBUG else logging.INFO,
        format=LOG_FORMAT,
        stream=sys.stdout,
        force=True,
    )
