import argparse
import sys
from pathlib import Path

from chip8 import config, frontend
from chip8.emulator import Emulator
from chip8.errors import Chip8Fault, RomTooLarge


def get_args(argv=None):
    parser = argparse.ArgumentParser(prog="chip8", description="CHIP-8 interpreter")
    parser.add_argument("-f", "--file", required=True, help="input rom file")
    parser.add_argument("-s", "--speed", type=int, default=config.SPEED,
                        help="instructions executed between two short sleeps (default: %(default)s)")
    parser.add_argument("--hz", type=int, default=config.TIMER_HZ,
                        help="delay and sound timers rate (default: %(default)s)")
    parser.add_argument("--scale", type=int, default=config.SCALE,
                        help="size of a CHIP-8 pixel on screen (default: %(default)s)")
    parser.add_argument("--debug", action="store_true", help="log every executed instruction")
    args = parser.parse_args(argv)
    if args.speed < 1 or args.hz < 1 or args.scale < 1:
        parser.error("--speed, --hz and --scale must be positive")
    return args


def main(argv=None):
    args = get_args(argv)
    config.setup_logging(args.debug or config.DEBUG)

    chip = Emulator(speed=args.speed, timer_hz=args.hz)
    # the ROM is read and checked before anything is started
    try:
        chip.load_rom_file(args.file)
    except (OSError, RomTooLarge) as e:
        sys.exit(f"The ROM at path {args.file} cannot be loaded: {e}")

    try:
        frontend.run(chip, title=Path(args.file).name, scale=args.scale)
    except Chip8Fault as e:
        sys.exit(f"********** THE EMULATOR CRASHED WITH THE FOLLOWING STATE\n{e}\n{chip}")
    return 0


if __name__ == "__main__":
    main()
