"""
vyantra — Machine / Execution Loop

Integrates:
  - Stack          (mem/stack.py)
  - Register file  (cpu/regs.py)
  - Path resolver  (cpu/addressing.py)
  - ALU            (cpu/alu.py)

Execution model, one step():
  1. Fetch the instruction at ip (IllegalInstruction past the end)
  2. ip += 1, so ip always names the *next* instruction while executing
  3. Execute via the dispatch table
  4. Count the step, append to the trace

Lifecycle:
  READY ──step()──> RUNNING ──HLT──> HALTED
                       └────fault──> FAULTED

HALTED and FAULTED are final. The machine is single-shot: a fault is
never retried and a stopped machine cannot be resumed.

run() has no step ceiling. A program that loops forever (say a JMP -1
after a JMP 1) keeps run() busy forever. Hosts that need a bound drive
step() themselves and stop when they have seen enough steps, which is
what vyrun --max-steps does.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .cpu import alu, addressing
from .cpu.addressing import RegPath, StackPath
from .cpu.regs import Reg, RegisterFile
from .errors import (
    MachineFault, DivideByZero, IllegalInstruction, MalformedProgram,
)
from .isa import (
    Instruction, Push, Pop, Add, Sub, Mul, Div, Set, Copy, Jump, Halt,
)
from .mem.stack import Stack

log = logging.getLogger(__name__)


class MachineStatus(Enum):
    READY = 'READY'
    RUNNING = 'RUNNING'
    HALTED = 'HALTED'
    FAULTED = 'FAULTED'


@dataclass(frozen=True)
class MachineState:
    """Point-in-time copy of everything the machine holds."""
    program: Tuple[Instruction, ...]
    ip: int
    stack: Tuple[int, ...]
    registers: Dict[str, int]
    status: MachineStatus
    steps: int
    fault: Optional[str] = None

    def display(self) -> str:
        """Multi-line state report, the same fields the halt report logs."""
        regs = ' '.join(f"{name}={value}" for name, value in self.registers.items())
        lines = [
            f"program:   [{', '.join(str(inst) for inst in self.program)}]",
            f"ip:        {self.ip}",
            f"stack:     [{', '.join(str(v) for v in self.stack)}]",
            f"registers: {regs}",
            f"status:    {self.status.value} after {self.steps} steps",
        ]
        if self.fault:
            lines.append(f"fault:     {self.fault}")
        return '\n'.join(lines)

    def to_dict(self) -> dict:
        """JSON-serializable form."""
        return {
            'program': [str(inst) for inst in self.program],
            'ip': self.ip,
            'stack': list(self.stack),
            'registers': dict(self.registers),
            'status': self.status.value,
            'steps': self.steps,
            'fault': self.fault,
        }


class Machine:
    """Stack machine with six registers and a 1024-entry stack.

    Usage:
        m = Machine([Push(5), Push(6), Add(), Pop(), Halt()])
        state = m.run()
        print(state.display())
    """

    def __init__(self, program: Sequence[Instruction], *, trace: bool = False):
        self.program: Tuple[Instruction, ...] = self._check_program(program)
        self.ip: int = 0
        self.stack = Stack()
        self.regs = RegisterFile()
        self.status = MachineStatus.READY
        self.steps: int = 0
        self.fault: Optional[MachineFault] = None

        # Trace output
        self._trace = trace
        self.trace_output: List[str] = []

        # Instruction dispatch table (built in _build_dispatch)
        self._dispatch = self._build_dispatch()

    # ══════════════════════════════════════════════
    # Loading
    # ══════════════════════════════════════════════

    @staticmethod
    def _check_program(program) -> Tuple[Instruction, ...]:
        """Reject a program that could never run correctly.

        Runs before any execution, so a malformed program never starts.
        """
        if program is None:
            raise MalformedProgram("program is missing")
        program = tuple(program)
        if not program:
            raise MalformedProgram("program is empty")

        for addr, inst in enumerate(program):
            if not isinstance(inst, Instruction):
                raise MalformedProgram(f"not an instruction: {inst!r}", address=addr)
            for value in inst.immediates():
                if not alu.is_word(value):
                    raise MalformedProgram(
                        f"operand {value!r} is not a 32-bit word",
                        address=addr, mnemonic=inst.mnemonic)
            if isinstance(inst, Set) and not isinstance(inst.reg, Reg):
                raise MalformedProgram(f"not a register: {inst.reg!r}",
                                       address=addr, mnemonic=inst.mnemonic)
            if isinstance(inst, Copy):
                for path in (inst.dst, inst.src):
                    if not isinstance(path, (RegPath, StackPath)):
                        raise MalformedProgram(f"not a path: {path!r}",
                                               address=addr, mnemonic=inst.mnemonic)
                    if isinstance(path, RegPath) and not isinstance(path.reg, Reg):
                        raise MalformedProgram(f"not a register: {path.reg!r}",
                                               address=addr, mnemonic=inst.mnemonic)
        return program

    # ══════════════════════════════════════════════
    # Execution
    # ══════════════════════════════════════════════

    def step(self) -> MachineStatus:
        """Execute one instruction and return the resulting status.

        Raises the MachineFault on any fatal condition, after marking
        the machine FAULTED. Raises RuntimeError if the machine has
        already halted or faulted.
        """
        if self.status in (MachineStatus.HALTED, MachineStatus.FAULTED):
            raise RuntimeError(
                f"machine is {self.status.value} and cannot be resumed")
        self.status = MachineStatus.RUNNING

        addr = self.ip
        inst = None
        try:
            inst = self._fetch()
            self._execute(inst, addr)
        except MachineFault as fault:
            fault.attach(addr, inst.mnemonic if inst is not None else None)
            self.status = MachineStatus.FAULTED
            self.fault = fault
            if self._trace:
                shown = str(inst) if inst is not None else '-'
                self.trace_output.append(f"{addr:04d}: {shown:<16} {fault.reason}")
            log.error("%s", fault)
            raise

        self.steps += 1
        if self._trace or log.isEnabledFor(logging.DEBUG):
            line = f"{addr:04d}: {str(inst):<16} {self.stack.display()}"
            if self._trace:
                self.trace_output.append(line)
            log.debug(line)
        if self.status is MachineStatus.HALTED:
            log.info("halting...\n%s", self.snapshot().display())
        return self.status

    def run(self) -> MachineState:
        """Run until HLT and return the final state.

        No step ceiling: a program that never reaches HLT and never
        faults keeps this call busy forever.
        """
        while self.step() is MachineStatus.RUNNING:
            pass
        return self.snapshot()

    def snapshot(self) -> MachineState:
        return MachineState(
            program=self.program,
            ip=self.ip,
            stack=self.stack.snapshot(),
            registers=self.regs.as_dict(),
            status=self.status,
            steps=self.steps,
            fault=str(self.fault) if self.fault is not None else None,
        )

    def _fetch(self) -> Instruction:
        """Fetch the instruction at ip, advance ip."""
        if self.ip >= len(self.program):
            raise IllegalInstruction(
                f"abrupt halt: no instruction at {self.ip} "
                f"(program has {len(self.program)}, missing HLT?)")
        inst = self.program[self.ip]
        self.ip += 1
        return inst

    def _execute(self, inst: Instruction, addr: int):
        handler = self._dispatch.get(type(inst))
        if handler is None:
            raise IllegalInstruction(f"no handler for {inst!r}")
        handler(inst, addr)

    # ══════════════════════════════════════════════
    # Instruction handlers
    # ══════════════════════════════════════════════
    # Handler signature: handler(inst, addr), addr is the address the
    # instruction was fetched from (ip is already addr + 1).

    def _build_dispatch(self) -> dict:
        return {
            Push: self._op_psh,
            Pop:  self._op_pop,
            Add:  self._op_arith,
            Sub:  self._op_arith,
            Mul:  self._op_arith,
            Div:  self._op_arith,
            Set:  self._op_set,
            Copy: self._op_cpy,
            Jump: self._op_jmp,
            Halt: self._op_hlt,
        }

    def _op_psh(self, inst: Push, addr: int):
        self.stack.push(inst.value)

    def _op_pop(self, inst: Pop, addr: int):
        value = self.stack.pop()
        log.debug("pop: %d", value)

    def _op_arith(self, inst: Instruction, addr: int):
        """pop b, pop a, push a op b."""
        op = alu.BINARY_OPS[inst.mnemonic]
        b = self.stack.pop()
        if op is alu.div and b == 0:
            raise DivideByZero(f"divisor is zero (sp={self.stack.sp})")
        a = self.stack.pop()
        result = op(a, b)
        log.debug("%s: %d %d -> %d", inst.mnemonic.lower(), a, b, result)
        self.stack.push(result)

    def _op_set(self, inst: Set, addr: int):
        self.regs.set(inst.reg, inst.value)

    def _op_cpy(self, inst: Copy, addr: int):
        value = addressing.read(inst.src, self.regs, self.stack)
        addressing.write(inst.dst, value, self.regs, self.stack)

    def _op_jmp(self, inst: Jump, addr: int):
        # JMP 0 falls through: ip already points at addr + 1
        if inst.offset == 0:
            return
        target = addr + inst.offset
        if target < 0:
            raise IllegalInstruction(
                f"jump target {target} is before the start of the program")
        self.ip = target

    def _op_hlt(self, inst: Halt, addr: int):
        self.status = MachineStatus.HALTED
