"""
vyantra — Register File

Register model:
  A..F — six general purpose 32-bit signed registers, all zero at reset

The register set is closed. Each register is a slot on RegisterFile
(__slots__), so a lookup can never miss and there is no "unknown
register" error path.
"""

from enum import Enum
from typing import Dict


class Reg(Enum):
    """Six general purpose registers."""
    A = 'A'
    B = 'B'
    C = 'C'
    D = 'D'
    E = 'E'
    F = 'F'

    def __str__(self) -> str:
        return self.value

    @classmethod
    def parse(cls, name: str) -> 'Reg':
        """Look up a register by name, case-insensitive. ValueError if unknown."""
        try:
            return cls(name.strip().upper())
        except ValueError:
            raise ValueError(f"Unknown register: '{name}'") from None


class RegisterFile:
    """Fixed A..F register file."""

    __slots__ = ('A', 'B', 'C', 'D', 'E', 'F')

    def __init__(self):
        self.reset()

    def get(self, reg: Reg) -> int:
        return getattr(self, reg.value)

    def set(self, reg: Reg, value: int):
        setattr(self, reg.value, value)

    def as_dict(self) -> Dict[str, int]:
        """Register values keyed by name, in A..F order."""
        return {reg.value: self.get(reg) for reg in Reg}

    # --- Display ---

    def display(self) -> str:
        """One-line register dump, e.g. ``A=12 B=144 C=0 D=0 E=0 F=0``."""
        return ' '.join(f"{name}={value}" for name, value in self.as_dict().items())

    def reset(self):
        """Zero every register."""
        self.A = 0
        self.B = 0
        self.C = 0
        self.D = 0
        self.E = 0
        self.F = 0
