"""
vyantra — Operand Addressing (Paths)

A Path names where a CPY reads from or writes to:

  RegPath(Reg.A)    register A                  asm:  A
  StackPath(0)      top of stack                asm:  [0]
  StackPath(2)      two entries below the top   asm:  [2]

Paths are plain values. They are resolved against the register file and
the stack only when the instruction executes, so the same CPY can reach
a different physical slot each time it runs as the stack grows and
shrinks.
"""

from dataclasses import dataclass
from typing import Union

from .regs import Reg


@dataclass(frozen=True)
class RegPath:
    reg: Reg

    def __str__(self) -> str:
        return str(self.reg)


@dataclass(frozen=True)
class StackPath:
    offset: int

    def __str__(self) -> str:
        return f"[{self.offset}]"


Path = Union[RegPath, StackPath]


def read(path: Path, regs, stack) -> int:
    """Fetch the value a path currently names."""
    if isinstance(path, RegPath):
        return regs.get(path.reg)
    elif isinstance(path, StackPath):
        return stack.get_at(path.offset)
    else:
        raise TypeError(f"Unknown path type: {path!r}")


def write(path: Path, value: int, regs, stack):
    """Store a value into the slot a path currently names."""
    if isinstance(path, RegPath):
        regs.set(path.reg, value)
    elif isinstance(path, StackPath):
        stack.set_at(path.offset, value)
    else:
        raise TypeError(f"Unknown path type: {path!r}")


def parse_path(text: str) -> Path:
    """Parse ``A``..``F`` or ``[n]`` into a Path. ValueError on bad syntax."""
    text = text.strip()
    if text.startswith('[') and text.endswith(']'):
        inner = text[1:-1].strip()
        try:
            return StackPath(int(inner))
        except ValueError:
            raise ValueError(f"Bad stack offset: '{text}'") from None
    return RegPath(Reg.parse(text))
