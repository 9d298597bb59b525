import unittest

from chip8.timers import Timers


class TestTimers(unittest.TestCase):
    def test_delay_counts_down_to_zero(self):
        timers = Timers()
        timers.dt = 60
        for _ in range(60):
            timers.tick()
        self.assertEqual(timers.dt, 0)
        timers.tick()
        self.assertEqual(timers.dt, 0)

    def test_single_beep_when_sound_reaches_zero(self):
        beeps = []
        timers = Timers(on_beep=lambda: beeps.append(True))
        timers.st = 3
        for _ in range(10):
            timers.tick()
        self.assertEqual(timers.st, 0)
        self.assertEqual(len(beeps), 1)

    def test_no_beep_when_sound_is_idle(self):
        beeps = []
        timers = Timers(on_beep=lambda: beeps.append(True))
        timers.tick()
        self.assertEqual(beeps, [])

    def test_values_are_8_bits(self):
        timers = Timers()
        timers.dt = 0x1FF
        self.assertEqual(timers.dt, 0xFF)


if __name__ == "__main__":
    unittest.main()
