#!/usr/bin/env python3
"""
vyrun — assemble and run a vyantra program

Usage:
    python vyrun.py [input.asm] [--format txt|json] [--trace] [--listing]
                    [--max-steps N] [-v|-vv] [-q] [--log-file run.log]

With no input file the built-in demo program runs:
    PSH 5; PSH 6; POP; PSH 21; ADD; POP; HLT

Exit codes:
    0  halted normally
    1  machine fault (overflow, underflow, address, divide by zero, ...)
    2  input error (missing file, bad source, empty program)
    3  --max-steps ceiling reached before HLT

Examples:
    python vyrun.py countdown.asm --trace
    python vyrun.py countdown.asm --format json > result.json
    python vyrun.py loop.asm --max-steps 500 -vv --log-file logs/loop.log
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from vyantra import __version__
from vyantra.assembler import Assembler, AssemblerError
from vyantra.config import DEFAULT_MAX_STEPS
from vyantra.errors import MachineFault, MalformedProgram
from vyantra.log_setup import setup_logging
from vyantra.machine import Machine, MachineStatus

EXIT_OK = 0
EXIT_FAULT = 1
EXIT_INPUT = 2
EXIT_STEP_LIMIT = 3

DEMO_SOURCE = """\
; demo: push two values, drop one, add, drop the sum
        PSH 5
        PSH 6
        POP
        PSH 21
        ADD
        POP
        HLT
"""

log = logging.getLogger("vyantra.vyrun")


def _step_count(text: str) -> int:
    """argparse type for --max-steps: a whole number, 0 or more."""
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not a whole number: {text!r}")
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be 0 or more, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="vyrun",
        description="Assemble and run a vyantra stack machine program",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("input", nargs="?",
                        help="Assembly source file (default: built-in demo)")
    parser.add_argument("--format", choices=["txt", "json"], default="txt",
                        help="Final state report format (default: txt)")
    parser.add_argument("--trace", action="store_true",
                        help="Print one line per executed instruction")
    parser.add_argument("--listing", action="store_true",
                        help="Print the assembled listing and exit")
    parser.add_argument("--max-steps", type=_step_count,
                        default=DEFAULT_MAX_STEPS,
                        help=f"Stop after N steps, 0 = no limit "
                             f"(default: {DEFAULT_MAX_STEPS})")
    parser.add_argument("--verbose", "-v", action="count", default=0,
                        help="Increase log verbosity (-v, -vv)")
    parser.add_argument("--quiet", "-q", action="store_true",
                        help="Only log errors")
    parser.add_argument("--log-file", type=str,
                        help="Also write the log (all levels) to this file")
    parser.add_argument("--version", action="version",
                        version=f"vyrun {__version__}")
    return parser


def _console_level(args) -> int:
    if args.quiet:
        return logging.ERROR
    if args.verbose == 0:
        return logging.WARNING
    if args.verbose == 1:
        return logging.INFO
    return logging.DEBUG


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    console_level = _console_level(args)
    setup_logging(
        "vyantra",
        level=logging.DEBUG if args.log_file else console_level,
        console_level=console_level,
        log_file=args.log_file,
    )

    # Read input
    if args.input:
        try:
            source = Path(args.input).read_text(encoding="utf-8")
        except FileNotFoundError:
            print(f"Error: File not found: {args.input}", file=sys.stderr)
            return EXIT_INPUT
        except OSError as e:
            print(f"Error reading {args.input}: {e}", file=sys.stderr)
            return EXIT_INPUT
    else:
        source = DEMO_SOURCE

    # Assemble
    asm = Assembler()
    try:
        program = asm.assemble(source)
    except AssemblerError as e:
        print(f"Assembly error: {e}", file=sys.stderr)
        return EXIT_INPUT

    if args.listing:
        print(asm.get_listing())
        return EXIT_OK

    try:
        machine = Machine(program, trace=args.trace)
    except MalformedProgram as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_INPUT

    log.info("Running %s (%d instructions)", args.input or "demo", len(program))

    # Run, with the host-side step ceiling
    code = EXIT_OK
    try:
        while machine.step() is MachineStatus.RUNNING:
            if args.max_steps and machine.steps >= args.max_steps:
                log.warning("Step ceiling reached after %d steps (ip=%d)",
                            machine.steps, machine.ip)
                code = EXIT_STEP_LIMIT
                break
    except MachineFault:
        # already logged by the machine, reported below
        code = EXIT_FAULT

    if args.trace:
        for line in machine.trace_output:
            print(line)

    state = machine.snapshot()
    if args.format == "json":
        print(json.dumps(state.to_dict(), indent=2))
    else:
        print(state.display())
    return code


if __name__ == "__main__":
    sys.exit(main())
