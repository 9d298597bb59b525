import enum
import logging
import random
from functools import wraps

from chip8 import config
from chip8.config import FONT_GLYPH_SIZE, FONT_START_ADDRESS, INSTRUCTION_SIZE
from chip8.keypad import Keypad
from chip8.memory import Memory, Stack
from chip8.opcodes import NAMES, TEMPLATES, decode
from chip8.screen import Screen
from chip8.timers import Timers


logger = logging.getLogger(__name__)


class StepResult(enum.Enum):
    EXECUTED = 0
    WAITING = 1     # LD Vx, K found no key, the same instruction will be fetched again


# ******************** UTILITIES SECTION
def asm(fn):
    """decorator to log the ASM of the instruction being executed"""
    @wraps(fn)
    def wrapper_fn(self, ins):
        mem_addr = self.pc - INSTRUCTION_SIZE      # pc has already moved past the instruction
        result = fn(self, ins)
        if config.DEBUG:
            text = TEMPLATES[ins.name].format(**ins._asdict())
            logger.debug("mem_addr: 0x%04x    opcode: 0x%04x    instruction: %s", mem_addr, ins.opcode, text)
        return result
    return wrapper_fn


# ******************** CPU SECTION
class Chip8:
    """
    the instruction interpreter

    every component is handed over by the caller so that the same screen and keypad
    can be shared with the display and the input threads
    """
    def __init__(self, mem=None, stack=None, timers=None, screen=None, keypad=None, rng=None):
        self.mem = mem if mem is not None else Memory()
        self.stack = stack if stack is not None else Stack()
        self.timers = timers if timers is not None else Timers()
        self.screen = screen if screen is not None else Screen()
        self.keypad = keypad if keypad is not None else Keypad()
        self.rng = rng if rng is not None else random.Random()
        self.opcode = 0
        self.instructions = {
            "CLS": self._clear_screen,
            "RET": self._return,
            "JP": self._jump,
            "CALL": self._call_addr,
            "SE_BYTE": self._skip_if_eq,
            "SNE_BYTE": self._skip_if_not_eq,
            "SE_REG": self._skip_if_eq_regs,
            "LD_BYTE": self._set_vx,
            "ADD_BYTE": self._add_to_vx,
            "LD_REG": self._set_vx_to_vy,
            "OR": self._set_vx_or_vy,
            "AND": self._set_vx_and_vy,
            "XOR": self._set_vx_xor_vy,
            "ADD_REG": self._add_vx_vy,
            "SUB": self._sub_vx_vy,
            "SHR": self._shr,
            "SUBN": self._subn_vx_vy,
            "SHL": self._shl,
            "SNE_REG": self._skip_if_not_eq_regs,
            "LD_I": self._set_idx,
            "JP_V0": self._jump_plus,
            "RND": self._random_byte_and,
            "DRW": self._to_screen,
            "SKP": self._skip_if_pressed,
            "SKNP": self._skip_if_not_pressed,
            "LD_VX_DT": self._set_vx_dt,
            "LD_VX_K": self._wait_keypress,
            "LD_DT_VX": self._set_dt_vx,
            "LD_ST_VX": self._set_st,
            "ADD_I_VX": self._add_to_idx,
            "LD_F_VX": self._select_char,
            "LD_B_VX": self._bcd_repr,
            "LD_MEM_VX": self._store_vregs,
            "LD_VX_MEM": self._load_vregs,
        }
        assert set(self.instructions) == NAMES, "every decoded instruction needs a handler"

    # the registers live in memory, these are shortcuts
    @property
    def v_regs(self):
        return self.mem.v_regs

    @property
    def pc(self):
        return self.mem.pc

    @pc.setter
    def pc(self, value):
        self.mem.pc = value

    @property
    def idx(self):
        return self.mem.idx

    @idx.setter
    def idx(self, value):
        self.mem.idx = value

    def __str__(self):
        lines = []
        for row in range(4):
            lines.append(" | ".join(f"V{r:X}:{self.v_regs[r]:02X}" for r in range(row * 4, row * 4 + 4)))
        lines.append(f"PC:0x{self.pc:04X} | SP:{self.stack.size} | IDX:0x{self.idx:04X}")
        lines.append(f"{self.timers} | OPCODE:0x{self.opcode:04X}")
        lines.append(f"STACK:{self.stack}")
        lines.append(f"KEYPAD:{self.keypad}")
        return "\n".join(lines)

    def step(self):
        """fetch, decode and execute one instruction"""
        address = self.pc
        # fetch (each instruction is two bytes long)
        self.opcode = self.mem.read_opcode(address)
        self._goto_next_instruction()
        # decode + execute
        ins = decode(self.opcode, address)
        result = self.instructions[ins.name](ins)
        return result if result is not None else StepResult.EXECUTED

    def _goto_next_instruction(self):
        self.pc += INSTRUCTION_SIZE

    # ********** FLOW CONTROL
    @asm
    def _clear_screen(self, ins):
        self.screen.clear()

    @asm
    def _return(self, ins):
        """return from a subroutine"""
        self.pc = self.stack.pop()

    @asm
    def _jump(self, ins):
        self.pc = ins.nnn

    @asm
    def _call_addr(self, ins):
        self.stack.append(self.pc)
        self.pc = ins.nnn

    @asm
    def _jump_plus(self, ins):
        self.pc = ins.nnn + self.v_regs[0x0]

    @asm
    def _skip_if_eq(self, ins):
        if self.v_regs[ins.x] == ins.nn:
            self._goto_next_instruction()

    @asm
    def _skip_if_not_eq(self, ins):
        if self.v_regs[ins.x] != ins.nn:
            self._goto_next_instruction()

    @asm
    def _skip_if_eq_regs(self, ins):
        if self.v_regs[ins.x] == self.v_regs[ins.y]:
            self._goto_next_instruction()

    @asm
    def _skip_if_not_eq_regs(self, ins):
        if self.v_regs[ins.x] != self.v_regs[ins.y]:
            self._goto_next_instruction()

    # ********** REGISTERS
    @asm
    def _set_vx(self, ins):
        """set the value of one of the 16 variable registers, Vx"""
        self.v_regs[ins.x] = ins.nn

    @asm
    def _add_to_vx(self, ins):
        """add to the value already present in Vx, the carry flag is left untouched"""
        self.v_regs[ins.x] = self.v_regs[ins.x] + ins.nn

    @asm
    def _set_vx_to_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.y]

    @asm
    def _set_vx_or_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.x] | self.v_regs[ins.y]

    @asm
    def _set_vx_and_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.x] & self.v_regs[ins.y]

    @asm
    def _set_vx_xor_vy(self, ins):
        self.v_regs[ins.x] = self.v_regs[ins.x] ^ self.v_regs[ins.y]

    # flags are computed from the operands before any register is written,
    # then VF is written before Vx: with x == 0xF the result wins over the flag
    @asm
    def _add_vx_vy(self, ins):
        """set the value of Vx to Vx + Vy, VF = carry"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[0xF] = 1 if vx + vy > 0xFF else 0
        self.v_regs[ins.x] = vx + vy

    @asm
    def _sub_vx_vy(self, ins):
        """set the value of Vx to Vx - Vy, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[0xF] = 1 if vx >= vy else 0
        self.v_regs[ins.x] = vx - vy

    @asm
    def _subn_vx_vy(self, ins):
        """set the value of Vx to Vy - Vx, VF = NOT borrow"""
        vx, vy = self.v_regs[ins.x], self.v_regs[ins.y]
        self.v_regs[0xF] = 1 if vy >= vx else 0
        self.v_regs[ins.x] = vy - vx

    @asm
    def _shr(self, ins):
        """set Vx equal to Vx SHR 1, VF = the bit shifted out"""
        vx = self.v_regs[ins.x]
        self.v_regs[0xF] = vx & 0x1
        self.v_regs[ins.x] = vx >> 1

    @asm
    def _shl(self, ins):
        """set Vx equal to Vx SHL 1, VF = the bit shifted out"""
        vx = self.v_regs[ins.x]
        self.v_regs[0xF] = vx >> 7
        self.v_regs[ins.x] = vx << 1

    @asm
    def _random_byte_and(self, ins):
        self.v_regs[ins.x] = self.rng.randint(0, 255) & ins.nn

    # ********** INDEX REGISTER AND MEMORY
    @asm
    def _set_idx(self, ins):
        self.idx = ins.nnn

    @asm
    def _add_to_idx(self, ins):
        self.idx += self.v_regs[ins.x]

    @asm
    def _select_char(self, ins):
        """set I to location of sprite for digit Vx"""
        digit = self.v_regs[ins.x]
        self.idx = FONT_START_ADDRESS + digit * FONT_GLYPH_SIZE     # each character font is made of 5 bytes

    @asm
    def _bcd_repr(self, ins):
        """the hundreds digit of Vx in memory at I, the tens digit at I+1, the ones digit at I+2"""
        vx = self.v_regs[ins.x]
        self.mem.write_block(self.idx, [vx // 100, (vx // 10) % 10, vx % 10])

    @asm
    def _store_vregs(self, ins):
        """store registers V0 through Vx (included) in memory starting at location I"""
        self.mem.write_block(self.idx, self.v_regs[:ins.x + 1])
        self.idx += ins.x + 1       # compatibility quirk 6

    @asm
    def _load_vregs(self, ins):
        """read registers V0 through Vx (included) from memory starting at location I"""
        self.v_regs[:ins.x + 1] = self.mem.read_block(self.idx, ins.x + 1)
        self.idx += ins.x + 1       # compatibility quirk 6

    # ********** DISPLAY
    @asm
    def _to_screen(self, ins):
        """display n-byte sprite starting at memory location I at (Vx, Vy), set VF = collision"""
        x, y = self.v_regs[ins.x], self.v_regs[ins.y]
        sprite = self.mem.read_block(self.idx, ins.n)
        self.v_regs[0xF] = 1 if self.screen.draw_sprite(x, y, sprite) else 0

    # ********** TIMERS
    @asm
    def _set_vx_dt(self, ins):
        self.v_regs[ins.x] = self.timers.dt

    @asm
    def _set_dt_vx(self, ins):
        self.timers.dt = self.v_regs[ins.x]

    @asm
    def _set_st(self, ins):
        self.timers.st = self.v_regs[ins.x]

    # ********** KEYPAD
    @asm
    def _skip_if_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is down"""
        if self.keypad.is_down(self.v_regs[ins.x] & 0xF):
            self._goto_next_instruction()

    @asm
    def _skip_if_not_pressed(self, ins):
        """skip the following instruction if the key corresponding to the hex value stored in Vx is NOT down"""
        if not self.keypad.is_down(self.v_regs[ins.x] & 0xF):
            self._goto_next_instruction()

    def _wait_keypress(self, ins):
        """wait for a key press and store its value in Vx"""
        key = self.keypad.first_pressed()
        if key is None:
            self.pc -= INSTRUCTION_SIZE     # stay on the same instruction until a key is pressed
            return StepResult.WAITING
        self.v_regs[ins.x] = key
        if config.DEBUG:
            logger.debug("mem_addr: 0x%04x    opcode: 0x%04x    instruction: LD V%X, K (key %X)",
                         self.pc - INSTRUCTION_SIZE, ins.opcode, ins.x, key)
        return StepResult.EXECUTED
