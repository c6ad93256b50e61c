"""
Command line driver: run one program file on a fresh machine.
"""

import argparse
import sys
import time

from .config import MachineConfig, configure_logging
from .machine import Machine


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="jscesk", description="Run a JavaScript subset program on a CESK machine.")
    parser.add_argument("file", type=str, help="Path to the program file.")
    parser.add_argument("-d", "--debug", action="store_true", help="Trace every step.")
    parser.add_argument("--inverted-truthiness", action="store_true",
                        help="Treat zero, NaN and the empty string as true.")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    config = MachineConfig.from_env()
    if args.debug:
        config.debug = True
        config.dump_statements = True
    if args.inverted_truthiness:
        config.inverted_truthiness = True
    configure_logging(config.debug)

    with open(args.file, encoding="utf-8") as f:
        source = f.read()

    start = time.perf_counter()
    Machine(config).run(source)
    elapsed = (time.perf_counter() - start) * 1000.0
    print(f"runcesk {args.file}: {elapsed:.3f}ms", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
