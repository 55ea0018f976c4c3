"""
vyantra — Instruction Set

Ten instructions, each an immutable value:

  Mnemonic  Operands      Effect
  --------  ------------  ---------------------------------------------
  PSH       n             push n
  POP                     pop and discard the top
  ADD                     pop b, pop a, push a + b
  SUB                     pop b, pop a, push a - b
  MUL                     pop b, pop a, push a * b
  DIV                     pop b, pop a, push a / b (toward zero)
  SET       r, n          register r = n
  CPY       dst, src      dst = src  (paths: A..F or [offset])
  JMP       k             continue at (address of this JMP) + k
  HLT                     stop

str(instruction) gives the assembler text, so a program can be listed
and re-assembled.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import ClassVar, Dict, Tuple, Type

from .cpu.regs import Reg
from .cpu.addressing import Path, RegPath, StackPath


# ──────────────────────────────────────────────
# Base instruction
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Instruction:
    """Base class for all instructions."""
    mnemonic: ClassVar[str] = '???'

    def operands(self) -> tuple:
        return ()

    def immediates(self) -> Tuple[int, ...]:
        """Integer operands that must fit in a machine word."""
        return ()

    def __str__(self) -> str:
        ops = self.operands()
        if not ops:
            return self.mnemonic
        return f"{self.mnemonic} {', '.join(str(op) for op in ops)}"


# ──────────────────────────────────────────────
# Stack instructions
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Push(Instruction):
    """Push an integer onto the stack."""
    mnemonic: ClassVar[str] = 'PSH'
    value: int = 0

    def operands(self) -> tuple:
        return (self.value,)

    def immediates(self) -> Tuple[int, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Pop(Instruction):
    """Pop the stack, discarding the value."""
    mnemonic: ClassVar[str] = 'POP'


# ──────────────────────────────────────────────
# Arithmetic: pop b, pop a, push a op b
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Add(Instruction):
    mnemonic: ClassVar[str] = 'ADD'


@dataclass(frozen=True)
class Sub(Instruction):
    mnemonic: ClassVar[str] = 'SUB'


@dataclass(frozen=True)
class Mul(Instruction):
    mnemonic: ClassVar[str] = 'MUL'


@dataclass(frozen=True)
class Div(Instruction):
    mnemonic: ClassVar[str] = 'DIV'


# ──────────────────────────────────────────────
# Data movement
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Set(Instruction):
    """Load an immediate into a register."""
    mnemonic: ClassVar[str] = 'SET'
    reg: Reg = Reg.A
    value: int = 0

    def operands(self) -> tuple:
        return (self.reg, self.value)

    def immediates(self) -> Tuple[int, ...]:
        return (self.value,)


@dataclass(frozen=True)
class Copy(Instruction):
    """Copy the value at src into dst."""
    mnemonic: ClassVar[str] = 'CPY'
    dst: Path = RegPath(Reg.A)
    src: Path = StackPath(0)

    def operands(self) -> tuple:
        return (self.dst, self.src)

    def immediates(self) -> Tuple[int, ...]:
        return tuple(p.offset for p in (self.dst, self.src)
                     if isinstance(p, StackPath))


# ──────────────────────────────────────────────
# Control flow
# ──────────────────────────────────────────────

@dataclass(frozen=True)
class Jump(Instruction):
    """Relative jump, offset measured from this instruction's address.

    JMP 1 is the same as falling through, JMP -1 goes back one
    instruction. JMP 0 also falls through rather than looping on itself.
    """
    mnemonic: ClassVar[str] = 'JMP'
    offset: int = 0

    def operands(self) -> tuple:
        return (self.offset,)

    def immediates(self) -> Tuple[int, ...]:
        return (self.offset,)


@dataclass(frozen=True)
class Halt(Instruction):
    """Stop the machine. The only graceful way out of run()."""
    mnemonic: ClassVar[str] = 'HLT'


# Mnemonic -> instruction class, used by the assembler
MNEMONICS: Dict[str, Type[Instruction]] = {
    cls.mnemonic: cls
    for cls in (Push, Pop, Add, Sub, Mul, Div, Set, Copy, Jump, Halt)
}
