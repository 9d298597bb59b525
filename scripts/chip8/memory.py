import logging

from chip8.config import (
    C8_FONTS, FONT_START_ADDRESS, MAX_ROM_SIZE, MEMORY_SIZE,
    REGISTERS_COUNT, ROM_START_ADDRESS, STACK_SIZE,
)
from chip8.errors import MemoryFault, RomTooLarge, StackOverflow, StackUnderflow


logger = logging.getLogger(__name__)

FONT_END_ADDRESS = FONT_START_ADDRESS + len(C8_FONTS)


# ********** WRAPS A LIST TO REPRESENT A STACK WITH A LIMITED SIZE OF 16 ADDRESSES
class Stack:
    def __init__(self):
        self.addr_list = []

    @property
    def size(self):
        return len(self.addr_list)

    def append(self, address):
        if self.size >= STACK_SIZE:
            raise StackOverflow(f"The CHIP-8 stack can contain at most {STACK_SIZE} addresses. Limit exceeded")
        self.addr_list.append(address & 0xFFFF)

    def pop(self):
        if self.size == 0:
            raise StackUnderflow("Return with an empty CHIP-8 stack")
        return self.addr_list.pop()

    push = append

    def __len__(self):
        return self.size

    def __str__(self):
        return "[" + ", ".join(f"0x{a:04x}" for a in self.addr_list) + "]"


# ********** THE 16 VARIABLE REGISTERS, EVERY WRITE IS KEPT TO THE LOWEST 8 BITS
class Registers:
    def __init__(self):
        self.inner = [0] * REGISTERS_COUNT

    def __getitem__(self, index):
        return self.inner[index]

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            values = [v & 0xFF for v in value]
            if len(range(*key.indices(REGISTERS_COUNT))) != len(values):
                raise ValueError("Register block assignment must keep 16 registers")
            self.inner[key] = values
        else:
            self.inner[key] = value & 0xFF

    def __len__(self):
        return REGISTERS_COUNT

    def __iter__(self):
        return iter(self.inner)

    def __eq__(self, other):
        return list(self) == list(other)

    def __repr__(self):
        return f"Registers({self.inner})"


# ********** WRAPS A BYTEARRAY TO REPRESENT THE MAIN MEMORY WITH A LIMITED SIZE OF 4KB
class Memory:
    """
    the 4KB address space together with the registers that address it:
    the 16 variable registers, the index register I and the program counter
    """
    def __init__(self):
        self.inner = bytearray(MEMORY_SIZE)
        self.inner[FONT_START_ADDRESS:FONT_END_ADDRESS] = bytes(C8_FONTS)
        self.v_regs = Registers()
        self._idx = 0
        self._pc = ROM_START_ADDRESS

    # the index register and the program counter are both 16 bit wide
    @property
    def idx(self):
        return self._idx

    @idx.setter
    def idx(self, value):
        self._idx = value & 0xFFFF

    @property
    def pc(self):
        return self._pc

    @pc.setter
    def pc(self, value):
        self._pc = value & 0xFFFF

    @staticmethod
    def _check(address, length=1):
        if address < 0 or address + length > MEMORY_SIZE:
            raise MemoryFault(address)

    def read8(self, address):
        self._check(address)
        return self.inner[address]

    def write8(self, address, value):
        self._check(address)
        if address < FONT_END_ADDRESS:
            raise MemoryFault(address, "the font area is read-only")
        self.inner[address] = value & 0xFF

    def read_opcode(self, address):
        """return the big-endian 16 bit word stored at address and address+1"""
        self._check(address, 2)
        return self.inner[address] << 8 | self.inner[address + 1]

    def read_block(self, address, length):
        self._check(address, length)
        return bytes(self.inner[address:address + length])

    def write_block(self, address, values):
        values = bytes(v & 0xFF for v in values)
        self._check(address, len(values))
        if values and address < FONT_END_ADDRESS:
            raise MemoryFault(address, "the font area is read-only")
        self.inner[address:address + len(values)] = values

    def __getitem__(self, index):
        if isinstance(index, slice):
            start = 0 if index.start is None else index.start
            stop = MEMORY_SIZE if index.stop is None else index.stop
            return self.read_block(start, max(stop - start, 0))
        return self.read8(index)

    def __setitem__(self, key, value):
        if isinstance(key, slice):
            self.write_block(0 if key.start is None else key.start, value)
        else:
            self.write8(key, value)

    def load_rom(self, rom):
        """copy the ROM bytes at the start of the program space, raise RomTooLarge if they don't fit"""
        if len(rom) > MAX_ROM_SIZE:
            raise RomTooLarge(len(rom), MAX_ROM_SIZE)
        self.inner[ROM_START_ADDRESS:ROM_START_ADDRESS + len(rom)] = rom
        logger.debug("Loaded %d bytes of ROM at 0x%04x", len(rom), ROM_START_ADDRESS)
