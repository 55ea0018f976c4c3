"""
vyantra — Bounded Operand Stack

Layout (capacity 1024 words):
  index 0          bottom of the stack (first value pushed)
  index sp         top of the stack, sp == len - 1
  sp == -1         empty

Pointer-relative addressing, measured from the top:
  offset  0        the top entry (physical index sp)
  offset  n > 0    n entries below the top (physical index sp - n)
  offset -n < 0    n entries above the top (physical index sp + n), which
                   is never a live slot, so it always raises AddressError

The stack pointer is derived from the length of the backing list, so the
two can never disagree.
"""

from typing import List, Tuple

from ..config import STACK_CAPACITY, EMPTY_SP
from ..errors import StackOverflow, StackUnderflow, AddressError


class Stack:
    """Bounded LIFO of signed words with sp-relative indexed access."""

    def __init__(self, capacity: int = STACK_CAPACITY):
        self.capacity = capacity
        self._data: List[int] = []

    @property
    def sp(self) -> int:
        """Index of the top entry, -1 when empty."""
        return len(self._data) - 1 if self._data else EMPTY_SP

    def __len__(self) -> int:
        return len(self._data)

    @property
    def is_empty(self) -> bool:
        return not self._data

    # --- Core push/pop ---

    def push(self, value: int):
        if len(self._data) >= self.capacity:
            raise StackOverflow(
                f"push {value} onto full stack (capacity {self.capacity})")
        self._data.append(value)

    def pop(self) -> int:
        if not self._data:
            raise StackUnderflow("pop from empty stack")
        return self._data.pop()

    # --- Pointer-relative access ---

    def _resolve(self, offset: int) -> int:
        """Turn a top-relative offset into a physical index."""
        if not self._data:
            raise StackUnderflow(f"stack offset [{offset}] on empty stack")
        sp = self.sp
        if offset >= 0:
            index = sp - offset
        else:
            index = sp + abs(offset)
        if not 0 <= index < len(self._data):
            raise AddressError(
                f"stack offset [{offset}] resolves to index {index}, "
                f"valid range is 0..{sp}")
        return index

    def get_at(self, offset: int) -> int:
        return self._data[self._resolve(offset)]

    def set_at(self, offset: int, value: int):
        self._data[self._resolve(offset)] = value

    # --- Inspection ---

    def snapshot(self) -> Tuple[int, ...]:
        """Stack contents, bottom first."""
        return tuple(self._data)

    def display(self) -> str:
        return f"sp={self.sp} [{', '.join(str(v) for v in self._data)}]"

    def reset(self):
        """Drop every entry; sp returns to -1."""
        self._data.clear()
