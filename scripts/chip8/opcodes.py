"""
opcode decoding

every CHIP-8 instruction is 16 bit long, the fields used by the instruction set are
    nnn or addr - the lowest 12 bits of the instruction
    n or nibble - the lowest 4 bits of the instruction
    x           - the lower 4 bits of the high byte of the instruction
    y           - the upper 4 bits of the low byte of the instruction
    kk or byte  - the lowest 8 bits of the instruction (called nn here)
"""
from collections import namedtuple

from chip8.errors import UnsupportedInstruction


Instruction = namedtuple("Instruction", ["name", "opcode", "x", "y", "n", "nn", "nnn"])


# ******************** FIELD EXTRACTION
def family(opcode):
    return (opcode & 0xF000) >> 12

def x_of(opcode):
    return (opcode & 0x0F00) >> 8

def y_of(opcode):
    return (opcode & 0x00F0) >> 4

def n_of(opcode):
    return opcode & 0x000F

def nn_of(opcode):
    return opcode & 0x00FF

def nnn_of(opcode):
    return opcode & 0x0FFF


# ******************** INSTRUCTION SET
# pattern: (name, assembly template)
INSTRUCTION_SET = {
    0x00E0: ("CLS",       "CLS"),
    0x00EE: ("RET",       "RET"),
    0x1000: ("JP",        "JP 0x{nnn:03x}"),
    0x2000: ("CALL",      "CALL 0x{nnn:03x}"),
    0x3000: ("SE_BYTE",   "SE V{x:X}, {nn}"),
    0x4000: ("SNE_BYTE",  "SNE V{x:X}, {nn}"),
    0x5000: ("SE_REG",    "SE V{x:X}, V{y:X}"),
    0x6000: ("LD_BYTE",   "LD V{x:X}, {nn}"),
    0x7000: ("ADD_BYTE",  "ADD V{x:X}, {nn}"),
    0x8000: ("LD_REG",    "LD V{x:X}, V{y:X}"),
    0x8001: ("OR",        "OR V{x:X}, V{y:X}"),
    0x8002: ("AND",       "AND V{x:X}, V{y:X}"),
    0x8003: ("XOR",       "XOR V{x:X}, V{y:X}"),
    0x8004: ("ADD_REG",   "ADD V{x:X}, V{y:X}"),
    0x8005: ("SUB",       "SUB V{x:X}, V{y:X}"),
    0x8006: ("SHR",       "SHR V{x:X}"),
    0x8007: ("SUBN",      "SUBN V{x:X}, V{y:X}"),
    0x800E: ("SHL",       "SHL V{x:X}"),
    0x9000: ("SNE_REG",   "SNE V{x:X}, V{y:X}"),
    0xA000: ("LD_I",      "LD I, 0x{nnn:03x}"),
    0xB000: ("JP_V0",     "JP V0, 0x{nnn:03x}"),
    0xC000: ("RND",       "RND V{x:X}, 0x{nn:02x}"),
    0xD000: ("DRW",       "DRW V{x:X}, V{y:X}, {n}"),
    0xE09E: ("SKP",       "SKP V{x:X}"),
    0xE0A1: ("SKNP",      "SKNP V{x:X}"),
    0xF007: ("LD_VX_DT",  "LD V{x:X}, DT"),
    0xF00A: ("LD_VX_K",   "LD V{x:X}, K"),
    0xF015: ("LD_DT_VX",  "LD DT, V{x:X}"),
    0xF018: ("LD_ST_VX",  "LD ST, V{x:X}"),
    0xF01E: ("ADD_I_VX",  "ADD I, V{x:X}"),
    0xF029: ("LD_F_VX",   "LD F, V{x:X}"),
    0xF033: ("LD_B_VX",   "LD B, V{x:X}"),
    0xF055: ("LD_MEM_VX", "LD [I], V{x:X}"),
    0xF065: ("LD_VX_MEM", "LD V{x:X}, [I]"),
}

# WATCH OUT: masks order is important!!!
# as the lookup stops as soon as it finds a match
MASKS = [
    (0xFFFF, [0x00E0, 0x00EE]),
    (0xF0FF, [0xE09E, 0xE0A1, 0xF007, 0xF00A, 0xF015, 0xF018, 0xF01E, 0xF029, 0xF033, 0xF055, 0xF065]),
    (0xF00F, [0x5000, 0x8000, 0x8001, 0x8002, 0x8003, 0x8004, 0x8005, 0x8006, 0x8007, 0x800E, 0x9000]),
    (0xF000, [0x1000, 0x2000, 0x3000, 0x4000, 0x6000, 0x7000, 0xA000, 0xB000, 0xC000, 0xD000]),
]

NAMES = {name for name, _ in INSTRUCTION_SET.values()}
TEMPLATES = {name: template for name, template in INSTRUCTION_SET.values()}


def match(opcode):
    """return the instruction set pattern matched by the opcode, None when there's none"""
    for mask, patterns in MASKS:
        if (opcode & mask) in patterns:
            return opcode & mask
    return None


def decode(opcode, address=None):
    """decode a raw 16 bit opcode, raise UnsupportedInstruction if it's not part of the instruction set"""
    pattern = match(opcode)
    if pattern is None:
        # this includes 0nnn, the call to a machine code routine of the original interpreter
        raise UnsupportedInstruction(opcode, address)
    name, _ = INSTRUCTION_SET[pattern]
    return Instruction(
        name, opcode,
        x_of(opcode), y_of(opcode), n_of(opcode), nn_of(opcode), nnn_of(opcode),
    )


def disassemble(opcode):
    """return the assembly text of an opcode, or a data directive if it can't be decoded"""
    try:
        instruction = decode(opcode)
    except UnsupportedInstruction:
        return f"DW 0x{opcode:04x}"
    return TEMPLATES[instruction.name].format(**instruction._asdict())
