"""
vyantra — a small stack-based virtual machine
=============================================
A toy instruction set for experimenting with ISA design: ten instructions,
six registers, a 1024-entry stack and relative jumps.

Architecture:
    ┌──────────┐    ┌───────────┐    ┌─────────────────────────────────┐
    │ .asm     │───>│ Assembler │───>│ Machine                         │
    │ source   │    │ (program) │    │  fetch → execute → ip update    │
    └──────────┘    └───────────┘    │  ├─ Stack         (mem/stack)   │
                                     │  ├─ RegisterFile  (cpu/regs)    │
                                     │  ├─ Paths         (cpu/addressing)
                                     │  └─ ALU           (cpu/alu)     │
                                     └─────────────────────────────────┘

    - isa.py:        frozen instruction dataclasses, str() gives asm text
    - machine.py:    execution loop, fault handling, state snapshots
    - assembler.py:  two-pass text assembler and listing
    - errors.py:     fatal fault taxonomy
"""

__version__ = "0.2.0"

from .cpu.regs import Reg, RegisterFile
from .cpu.addressing import RegPath, StackPath
from .mem.stack import Stack
from .isa import (
    Instruction, Push, Pop, Add, Sub, Mul, Div, Set, Copy, Jump, Halt,
)
from .errors import (
    MachineFault, StackOverflow, StackUnderflow, AddressError,
    DivideByZero, IllegalInstruction, MalformedProgram,
)
from .machine import Machine, MachineState, MachineStatus
from .assembler import Assembler, AssemblerError, assemble, disassemble


def run_source(source: str, *, trace: bool = False) -> MachineState:
    """Assemble source text and run it to HLT.

    Full pipeline: Assembler -> Machine -> final MachineState.
    Raises AssemblerError for bad source and MachineFault for a fatal run.
    """
    program = assemble(source)
    return Machine(program, trace=trace).run()
