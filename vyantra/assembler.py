"""
vyantra Two-Pass Assembler.

Turns mnemonic source into a program (a tuple of Instruction values)
and back into a listing.

Source format, one instruction per line:

    ; countdown from 3
            SET  A, 3
    loop:   PSH  1          ; comments run to end of line
            HLT

  PSH n         POP   ADD   SUB   MUL   DIV   HLT
  SET r, n      r is A..F
  CPY dst, src  paths: A..F (register) or [n] (stack slot, 0 = top)
  JMP k         k is a signed offset or a label

Numbers: 123, -7, $FF, 0xFF, %1010.

How the two passes work:
  Pass 1: every line that holds a mnemonic gets the next address; labels
          take the address of the next instruction.
  Pass 2: build the instructions. A label operand of JMP becomes the
          relative offset (label address - JMP address).

Errors are collected per line and raised together as one AssemblerError.
"""

from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple, Union
import re

from .cpu.addressing import parse_path
from .cpu.regs import Reg
from .isa import Instruction, MNEMONICS, Push, Set, Copy, Jump

__all__ = ['Assembler', 'AssemblerError', 'assemble', 'assemble_file', 'disassemble']


class AssemblerError(Exception):
    """Raised on assembly errors."""
    def __init__(self, message: str, line_num: int = 0, line_text: str = ""):
        self.line_num = line_num
        self.line_text = line_text
        super().__init__(f"Line {line_num}: {message}" if line_num else message)


_LABEL_RE = re.compile(r'^[A-Za-z_.][A-Za-z0-9_.]*$')

# Operand count per mnemonic
_ARITY = {
    'PSH': 1, 'POP': 0, 'ADD': 0, 'SUB': 0, 'MUL': 0, 'DIV': 0,
    'SET': 2, 'CPY': 2, 'JMP': 1, 'HLT': 0,
}


# ──────────────────────────────────────────────
# Line Parser
# ──────────────────────────────────────────────

@dataclass
class AsmLine:
    """Parsed assembly source line."""
    label: Optional[str] = None
    mnemonic: Optional[str] = None
    operands: Tuple[str, ...] = ()
    comment: Optional[str] = None
    line_num: int = 0
    raw: str = ""


def _parse_line(line: str, line_num: int) -> AsmLine:
    """Parse one line into label, mnemonic, operands, comment."""
    result = AsmLine(line_num=line_num, raw=line)

    text = line
    semi_pos = text.find(';')
    if semi_pos >= 0:
        result.comment = text[semi_pos + 1:].strip()
        text = text[:semi_pos]

    text = text.strip()
    if not text:
        return result

    # Label: "name:" at the start, optionally followed by an instruction
    head, sep, rest = text.partition(':')
    if sep:
        label = head.strip()
        if not _LABEL_RE.match(label):
            raise AssemblerError(f"Bad label: '{label}'", line_num, line)
        result.label = label
        text = rest.strip()
        if not text:
            return result

    parts = text.split(None, 1)
    result.mnemonic = parts[0].upper()
    if len(parts) > 1:
        result.operands = tuple(op.strip() for op in parts[1].split(','))
    return result


# ──────────────────────────────────────────────
# Operand Analysis
# ──────────────────────────────────────────────

def _parse_value(text: str, line_num: int) -> int:
    """Parse a signed number.
    Supports: $FF (hex), 0xFF, %1010 (binary), 123 (decimal), each with optional '-'
    """
    text = text.strip()
    sign = 1
    if text.startswith('-'):
        sign = -1
        text = text[1:].strip()
    elif text.startswith('+'):
        text = text[1:].strip()

    try:
        if text.startswith('$'):
            return sign * int(text[1:], 16)
        if text.startswith('0x') or text.startswith('0X'):
            return sign * int(text, 16)
        if text.startswith('%'):
            return sign * int(text[1:], 2)
        if text.isdigit():
            return sign * int(text)
    except ValueError:
        pass
    raise AssemblerError(f"Bad number: '{text}'", line_num)


class Assembler:
    """Two-pass assembler.

    Usage:
        asm = Assembler()
        program = asm.assemble(source_text)
        print(asm.get_listing())
    """

    def __init__(self):
        self.symbols: Dict[str, int] = {}       # label -> instruction address
        self.program: Tuple[Instruction, ...] = ()
        self.errors: List[str] = []
        self._lines: List[AsmLine] = []
        self._addresses: Dict[int, int] = {}    # line number -> instruction address

    def assemble(self, source: str) -> Tuple[Instruction, ...]:
        """Assemble source text into a program tuple.

        An empty source gives an empty tuple; Machine rejects that as
        MalformedProgram, the assembler does not.
        """
        self.symbols = {}
        self.errors = []
        self._lines = []
        self._addresses = {}

        for i, line in enumerate(source.split('\n'), 1):
            try:
                self._lines.append(_parse_line(line, i))
            except AssemblerError as e:
                self.errors.append(str(e))

        self._pass1()
        if self.errors:
            raise AssemblerError("Pass 1 errors:\n" + "\n".join(self.errors))

        self.program = tuple(self._pass2())
        if self.errors:
            raise AssemblerError("Pass 2 errors:\n" + "\n".join(self.errors))

        return self.program

    def _pass1(self):
        """Pass 1: assign addresses and register labels."""
        addr = 0
        for line in self._lines:
            if line.label:
                if line.label in self.symbols:
                    self.errors.append(
                        f"Line {line.line_num}: Duplicate label '{line.label}'")
                else:
                    self.symbols[line.label] = addr
            if line.mnemonic:
                self._addresses[line.line_num] = addr
                addr += 1

    def _pass2(self) -> List[Instruction]:
        """Pass 2: build instructions with every label known."""
        program = []
        for line in self._lines:
            if not line.mnemonic:
                continue
            try:
                program.append(self._build(line))
            except AssemblerError as e:
                self.errors.append(str(e))
            except ValueError as e:
                self.errors.append(f"Line {line.line_num}: {e}")
        return program

    def _build(self, line: AsmLine) -> Instruction:
        mnem = line.mnemonic
        ops = line.operands
        n = line.line_num

        cls = MNEMONICS.get(mnem)
        if cls is None:
            raise AssemblerError(f"Unknown mnemonic: '{mnem}'", n)
        if len(ops) != _ARITY[mnem] or any(not op for op in ops):
            raise AssemblerError(
                f"{mnem} takes {_ARITY[mnem]} operand(s), got '{', '.join(ops)}'", n)

        if cls is Push:
            return Push(_parse_value(ops[0], n))
        if cls is Set:
            return Set(Reg.parse(ops[0]), _parse_value(ops[1], n))
        if cls is Copy:
            return Copy(parse_path(ops[0]), parse_path(ops[1]))
        if cls is Jump:
            target = ops[0]
            if target in self.symbols:
                return Jump(self.symbols[target] - self._addresses[n])
            if _LABEL_RE.match(target):
                raise AssemblerError(f"Undefined label: '{target}'", n)
            return Jump(_parse_value(target, n))
        return cls()

    def get_listing(self) -> str:
        """Listing of the last assembled program."""
        return disassemble(self.program, self.symbols)


def assemble(source: str) -> Tuple[Instruction, ...]:
    """Assemble source text, return the program."""
    return Assembler().assemble(source)


def assemble_file(path: Union[str, Path]) -> Tuple[Instruction, ...]:
    """Read and assemble a source file (UTF-8)."""
    return assemble(Path(path).read_text(encoding='utf-8'))


def disassemble(program: Sequence[Instruction],
                symbols: Optional[Dict[str, int]] = None) -> str:
    """Render a program as an address-prefixed listing.

    JMP lines are annotated with their absolute target, labels are shown
    where a symbol table is given.
    """
    labels: Dict[int, List[str]] = {}
    for name, addr in (symbols or {}).items():
        labels.setdefault(addr, []).append(name)

    lines = []
    for addr, inst in enumerate(program):
        for name in labels.get(addr, []):
            lines.append(f"{name}:")
        text = f"{addr:04d}    {str(inst):<20}"
        if isinstance(inst, Jump):
            target = addr + inst.offset if inst.offset else addr + 1
            text += f"; -> {target:04d}"
        lines.append(text.rstrip())
    return '\n'.join(lines)
