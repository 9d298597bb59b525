"""a CHIP-8 interpreter: interpreter thread, input thread and pygame display"""
from chip8.cpu import Chip8, StepResult
from chip8.emulator import Emulator
from chip8.errors import (
    Chip8Error, Chip8Fault, MemoryFault, RomTooLarge,
    StackOverflow, StackUnderflow, UnsupportedInstruction,
)
from chip8.keypad import Keypad, KeyState
from chip8.memory import Memory, Stack
from chip8.scheduler import Scheduler, State
from chip8.screen import Screen
from chip8.timers import Timers

__version__ = "0.1.0"
