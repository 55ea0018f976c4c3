"""
vyantra — Fault Taxonomy

Every fault is fatal: it is raised where it is detected (stack, ALU,
machine), the machine attaches the faulting address and mnemonic, and
the exception propagates to whoever called run()/step().

    MachineFault
      ├── StackOverflow        push onto a full stack
      ├── StackUnderflow       pop or read from an empty stack
      ├── AddressError         stack offset resolves outside the stack
      ├── DivideByZero         DIV with a zero divisor
      ├── IllegalInstruction   fetch past the end / jump before the start
      └── MalformedProgram     rejected at construction, never runs
"""

from typing import Optional


class MachineFault(Exception):
    """Base class for fatal machine conditions."""

    reason = 'FAULT'

    def __init__(self, message: str, address: Optional[int] = None,
                 mnemonic: Optional[str] = None):
        self.message = message
        self.address = address
        self.mnemonic = mnemonic
        super().__init__(message)

    def attach(self, address: int, mnemonic: Optional[str]):
        """Record where the fault happened, unless already recorded."""
        if self.address is None:
            self.address = address
        if self.mnemonic is None:
            self.mnemonic = mnemonic
        return self

    def __str__(self) -> str:
        where = ""
        if self.address is not None:
            where = f" at {self.address:04d}"
            if self.mnemonic:
                where += f" ({self.mnemonic})"
        return f"{self.reason}{where}: {self.message}"


class StackOverflow(MachineFault):
    reason = 'STACK_OVERFLOW'


class StackUnderflow(MachineFault):
    reason = 'STACK_UNDERFLOW'


class AddressError(MachineFault):
    reason = 'ADDRESS_ERROR'


class DivideByZero(MachineFault):
    reason = 'DIVIDE_BY_ZERO'


class IllegalInstruction(MachineFault):
    reason = 'ILLEGAL_INSTRUCTION'


class MalformedProgram(MachineFault):
    reason = 'MALFORMED_PROGRAM'
