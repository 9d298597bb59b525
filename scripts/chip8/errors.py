class Chip8Error(Exception):
    """base class of every error raised by the emulator"""


class RomTooLarge(Chip8Error):
    """the ROM does not fit in the program space, nothing has been written to memory"""
    def __init__(self, size, limit):
        self.size = size
        self.limit = limit
        super().__init__(f"The ROM is too big: {size} bytes (max: {limit} bytes)")


# ********** FATAL FAULTS, THEY HALT THE INTERPRETER
class Chip8Fault(Chip8Error):
    pass


class UnsupportedInstruction(Chip8Fault):
    def __init__(self, opcode, address=None):
        self.opcode = opcode
        self.address = address
        where = f" at 0x{address:04x}" if address is not None else ""
        super().__init__(f"Unsupported instruction 0x{opcode:04x}{where}")


class StackOverflow(Chip8Fault):
    pass


class StackUnderflow(Chip8Fault):
    pass


class MemoryFault(Chip8Fault):
    def __init__(self, address, reason="out of bounds"):
        self.address = address
        super().__init__(f"Memory access at 0x{address:04x}: {reason}")
