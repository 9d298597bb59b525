import logging


logger = logging.getLogger(__name__)


class Timers:
    """
    the delay timer (dt) and the sound timer (st), both 8 bit wide
    they are meant to be ticked at 60Hz, whatever the speed of the interpreter is
    """
    def __init__(self, on_beep=None):
        self._dt = 0
        self._st = 0
        self.on_beep = on_beep

    @property
    def dt(self):
        return self._dt

    @dt.setter
    def dt(self, value):
        self._dt = value & 0xFF

    @property
    def st(self):
        return self._st

    @st.setter
    def st(self, value):
        self._st = value & 0xFF

    def tick(self):
        """count both timers down by one without going below zero, beep when the sound timer reaches zero"""
        if self._dt > 0:
            self._dt -= 1
        if self._st > 0:
            self._st -= 1
            if self._st == 0:
                logger.debug("Beep!")
                if self.on_beep:
                    self.on_beep()

    def __str__(self):
        return f"DT:{self._dt:03d} | ST:{self._st:03d}"
