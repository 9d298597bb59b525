import random
import unittest

from chip8.cpu import Chip8, StepResult
from chip8.errors import MemoryFault, StackOverflow, StackUnderflow, UnsupportedInstruction
from chip8.keypad import KeyState


def program(*opcodes):
    return b"".join(op.to_bytes(2, "big") for op in opcodes)


class Chip8TestCase(unittest.TestCase):
    def setUp(self):
        self.chip = Chip8(rng=random.Random(1234))

    def run_ops(self, *opcodes, regs=None, idx=None):
        self.chip.mem.load_rom(program(*opcodes))
        for r, value in (regs or {}).items():
            self.chip.v_regs[r] = value
        if idx is not None:
            self.chip.idx = idx
        results = [self.chip.step() for _ in opcodes]
        return results[-1]


class TestFlowControl(Chip8TestCase):
    def test_jump(self):
        self.run_ops(0x1ABC)
        self.assertEqual(self.chip.pc, 0xABC)

    def test_call_and_return(self):
        self.chip.mem.load_rom(program(0x2300))
        self.chip.mem.write_block(0x300, program(0x00EE))
        self.chip.step()
        self.assertEqual(self.chip.pc, 0x300)
        self.assertEqual(self.chip.stack.addr_list, [0x202])
        self.chip.step()
        self.assertEqual(self.chip.pc, 0x202)
        self.assertEqual(self.chip.stack.size, 0)

    def test_return_on_empty_stack(self):
        with self.assertRaises(StackUnderflow):
            self.run_ops(0x00EE)

    def test_call_overflow(self):
        # a subroutine calling itself forever
        self.chip.mem.load_rom(program(0x2200))
        for _ in range(16):
            self.chip.step()
        with self.assertRaises(StackOverflow):
            self.chip.step()

    def test_jump_plus_v0(self):
        self.run_ops(0xB300, regs={0: 0x12})
        self.assertEqual(self.chip.pc, 0x312)

    def test_skips(self):
        cases = [
            # opcode, registers, expected pc
            (0x3A12, {0xA: 0x12}, 0x204),
            (0x3A12, {0xA: 0x13}, 0x202),
            (0x4A12, {0xA: 0x13}, 0x204),
            (0x4A12, {0xA: 0x12}, 0x202),
            (0x5AB0, {0xA: 7, 0xB: 7}, 0x204),
            (0x5AB0, {0xA: 7, 0xB: 8}, 0x202),
            (0x9AB0, {0xA: 7, 0xB: 8}, 0x204),
            (0x9AB0, {0xA: 7, 0xB: 7}, 0x202),
        ]
        for opcode, regs, pc in cases:
            with self.subTest(opcode=hex(opcode), regs=regs):
                self.chip = Chip8()
                self.run_ops(opcode, regs=regs)
                self.assertEqual(self.chip.pc, pc)

    def test_unsupported_instruction(self):
        for opcode in [0x0123, 0x8AB9, 0xE000, 0xF0FF]:
            with self.subTest(opcode=hex(opcode)):
                self.chip = Chip8()
                with self.assertRaises(UnsupportedInstruction):
                    self.run_ops(opcode)

    def test_fetch_beyond_memory(self):
        self.chip.pc = 0xFFF
        with self.assertRaises(MemoryFault):
            self.chip.step()


class TestArithmetic(Chip8TestCase):
    def test_table(self):
        cases = [
            # opcode, initial registers, expected registers
            (0x6A42, {}, {0xA: 0x42}),
            (0x7AFF, {0xA: 0x02, 0xF: 0x07}, {0xA: 0x01, 0xF: 0x07}),
            (0x8AB0, {0xA: 1, 0xB: 2}, {0xA: 2, 0xB: 2}),
            (0x8AB1, {0xA: 0x0F, 0xB: 0xF0, 0xF: 5}, {0xA: 0xFF, 0xF: 5}),
            (0x8AB2, {0xA: 0x3C, 0xB: 0x0F}, {0xA: 0x0C}),
            (0x8AB3, {0xA: 0x3C, 0xB: 0x0F}, {0xA: 0x33}),
            (0x8AB4, {0xA: 0xFF, 0xB: 0x01}, {0xA: 0x00, 0xF: 1}),
            (0x8AB4, {0xA: 0x10, 0xB: 0x20}, {0xA: 0x30, 0xF: 0}),
            (0x8AB5, {0xA: 0x01, 0xB: 0x02}, {0xA: 0xFF, 0xF: 0}),
            (0x8AB5, {0xA: 0x05, 0xB: 0x05}, {0xA: 0x00, 0xF: 1}),
            (0x8AB6, {0xA: 0x05}, {0xA: 0x02, 0xF: 1}),
            (0x8AB6, {0xA: 0x04}, {0xA: 0x02, 0xF: 0}),
            (0x8AB7, {0xA: 0x02, 0xB: 0x01}, {0xA: 0xFF, 0xF: 0}),
            (0x8AB7, {0xA: 0x03, 0xB: 0x03}, {0xA: 0x00, 0xF: 1}),
            (0x8ABE, {0xA: 0x81}, {0xA: 0x02, 0xF: 1}),
            (0x8ABE, {0xA: 0x41}, {0xA: 0x82, 0xF: 0}),
        ]
        for opcode, regs, expected in cases:
            with self.subTest(opcode=hex(opcode), regs=regs):
                self.chip = Chip8()
                self.run_ops(opcode, regs=regs)
                for r, value in expected.items():
                    self.assertEqual(self.chip.v_regs[r], value, f"V{r:X}")
                self.assertEqual(self.chip.pc, 0x202)

    def test_flag_uses_operands_before_write(self):
        # VF is both the flag and the second operand
        self.run_ops(0x8AF4, regs={0xA: 0xFF, 0xF: 0x02})
        self.assertEqual(self.chip.v_regs[0xA], 0x01)
        self.assertEqual(self.chip.v_regs[0xF], 1)

    def test_result_wins_when_vx_is_vf(self):
        self.run_ops(0x8FE4, regs={0xF: 0xFF, 0xE: 0x03})
        self.assertEqual(self.chip.v_regs[0xF], 0x02)

    def test_random_is_masked(self):
        for _ in range(20):
            self.chip = Chip8(rng=random.Random(7))
            self.run_ops(0xC30F)
            self.assertEqual(self.chip.v_regs[3] & 0xF0, 0)

    def test_random_uses_rng(self):
        expected = random.Random(99).randint(0, 255) & 0xFF
        self.chip = Chip8(rng=random.Random(99))
        self.run_ops(0xC3FF)
        self.assertEqual(self.chip.v_regs[3], expected)


class TestIndexAndMemory(Chip8TestCase):
    def test_set_idx(self):
        self.run_ops(0xA123)
        self.assertEqual(self.chip.idx, 0x123)

    def test_add_to_idx(self):
        self.run_ops(0xF31E, regs={3: 0x10}, idx=0x300)
        self.assertEqual(self.chip.idx, 0x310)
        self.assertEqual(self.chip.v_regs[0xF], 0)

    def test_font_glyph(self):
        self.run_ops(0xF229, regs={2: 0xA})
        self.assertEqual(self.chip.idx, 50)
        self.assertEqual(self.chip.mem[self.chip.idx], 0xF0)

    def test_bcd(self):
        self.run_ops(0xF533, regs={5: 156}, idx=0x300)
        self.assertEqual(list(self.chip.mem[0x300:0x303]), [1, 5, 6])
        self.assertEqual(self.chip.idx, 0x300)

    def test_bcd_small_value(self):
        self.run_ops(0xF533, regs={5: 7}, idx=0x300)
        self.assertEqual(list(self.chip.mem[0x300:0x303]), [0, 0, 7])

    def test_store_registers(self):
        self.run_ops(0xF255, regs={0: 1, 1: 2, 2: 3, 3: 4}, idx=0x300)
        self.assertEqual(list(self.chip.mem[0x300:0x304]), [1, 2, 3, 0])
        self.assertEqual(self.chip.idx, 0x303)

    def test_load_registers(self):
        self.chip.mem.write_block(0x300, [9, 8, 7, 6])
        self.run_ops(0xF265, idx=0x300)
        self.assertEqual(self.chip.v_regs[:4], [9, 8, 7, 0])
        self.assertEqual(self.chip.idx, 0x303)

    def test_store_beyond_memory(self):
        with self.assertRaises(MemoryFault):
            self.run_ops(0xFF55, idx=0xFFA)


class TestDisplay(Chip8TestCase):
    def test_clear(self):
        self.chip.screen.draw_sprite(0, 0, [0xFF])
        self.run_ops(0x00E0)
        _, pixels = self.chip.screen.snapshot()
        self.assertEqual(sum(pixels), 0)

    def test_draw_twice_collides(self):
        self.chip.mem.write_block(0x300, [0xF0, 0x90])
        self.chip.mem.load_rom(program(0xD122, 0xD122))
        self.chip.v_regs[1], self.chip.v_regs[2], self.chip.idx = 8, 4, 0x300
        self.chip.step()
        self.assertEqual(self.chip.v_regs[0xF], 0)
        self.assertEqual(self.chip.screen.read_pixel(8, 4), 1)
        self.chip.step()
        self.assertEqual(self.chip.v_regs[0xF], 1)
        _, pixels = self.chip.screen.snapshot()
        self.assertEqual(sum(pixels), 0)

    def test_draw_font_glyph(self):
        self.run_ops(0xD015, regs={0: 0, 1: 0}, idx=0)
        self.assertEqual([self.chip.screen.read_pixel(x, 0) for x in range(8)], [1, 1, 1, 1, 0, 0, 0, 0])


class TestTimers(Chip8TestCase):
    def test_timers(self):
        self.run_ops(0xF115, 0xF218, regs={1: 30, 2: 40})
        self.assertEqual(self.chip.timers.dt, 30)
        self.assertEqual(self.chip.timers.st, 40)

    def test_read_delay(self):
        self.chip.timers.dt = 17
        self.run_ops(0xF307)
        self.assertEqual(self.chip.v_regs[3], 17)


class TestKeys(Chip8TestCase):
    def test_skip_if_pressed(self):
        self.chip.keypad.set_pressed(0xB)
        self.run_ops(0xE19E, regs={1: 0xB})
        self.assertEqual(self.chip.pc, 0x204)

    def test_skip_if_pressed_not_down(self):
        self.run_ops(0xE19E, regs={1: 0xB})
        self.assertEqual(self.chip.pc, 0x202)

    def test_skip_if_not_pressed(self):
        self.run_ops(0xE1A1, regs={1: 0xB})
        self.assertEqual(self.chip.pc, 0x204)

    def test_consumed_key_is_still_down(self):
        self.chip.keypad.set_pressed(0xB)
        self.chip.keypad.consume(0xB)
        self.run_ops(0xE1A1, regs={1: 0xB})
        self.assertEqual(self.chip.pc, 0x202)

    def test_wait_retries_without_key(self):
        self.chip.mem.load_rom(program(0xF30A))
        for _ in range(3):
            self.assertIs(self.chip.step(), StepResult.WAITING)
            self.assertEqual(self.chip.pc, 0x200)

    def test_one_press_satisfies_one_wait(self):
        self.chip.mem.load_rom(program(0xF30A, 0xF40A))
        self.chip.keypad.set_pressed(0x7)
        self.assertIs(self.chip.step(), StepResult.EXECUTED)
        self.assertEqual(self.chip.v_regs[3], 0x7)
        self.assertIs(self.chip.keypad.query(0x7), KeyState.CONSUMED)
        # the key is still held, the second wait must not see it
        self.assertIs(self.chip.step(), StepResult.WAITING)
        self.assertEqual(self.chip.pc, 0x202)
        self.chip.keypad.set_released(0x7)
        self.chip.keypad.set_pressed(0x7)
        self.assertIs(self.chip.step(), StepResult.EXECUTED)
        self.assertEqual(self.chip.v_regs[4], 0x7)
        self.assertEqual(self.chip.pc, 0x204)


class TestDebug(Chip8TestCase):
    def test_state_dump(self):
        self.run_ops(0x6A42)
        dump = str(self.chip)
        self.assertIn("VA:42", dump)
        self.assertIn("PC:0x0202", dump)
        self.assertIn("OPCODE:0x6A42", dump)


if __name__ == "__main__":
    unittest.main()
