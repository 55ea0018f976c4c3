"""
vyantra — ALU Operations

All operands and results are 32-bit signed words. Results wrap in
two's complement, the same way a hardware ALU drops the carry out of
the top bit:

  add/sub/mul:  result = wrap(a op b)
  div:          quotient truncated toward zero, wrap(INT_MIN / -1) == INT_MIN

Binary operations take (a, b) in mathematical order. The machine pops b
first and a second, so ``PSH 10; PSH 3; SUB`` computes 10 - 3.
"""

from ..config import WORD_BITS, WORD_MASK, WORD_MIN, WORD_MAX
from ..errors import DivideByZero


def wrap32(value: int) -> int:
    """Reduce an arbitrary int to a signed 32-bit word."""
    value &= WORD_MASK
    if value & (1 << (WORD_BITS - 1)):
        value -= 1 << WORD_BITS
    return value


def is_word(value) -> bool:
    """True if value is an int (not bool) that fits in a signed word."""
    return (isinstance(value, int) and not isinstance(value, bool)
            and WORD_MIN <= value <= WORD_MAX)


def add(a: int, b: int) -> int:
    return wrap32(a + b)


def sub(a: int, b: int) -> int:
    return wrap32(a - b)


def mul(a: int, b: int) -> int:
    return wrap32(a * b)


def div(a: int, b: int) -> int:
    """Signed division truncating toward zero.

    Python's // floors, so the magnitude is divided and the sign applied
    afterwards: div(-7, 2) == -3, not -4.
    """
    if b == 0:
        raise DivideByZero(f"divide {a} by zero")
    quotient = abs(a) // abs(b)
    if (a < 0) != (b < 0):
        quotient = -quotient
    return wrap32(quotient)


# Mnemonic -> operation, used by the machine's binary-op handler
BINARY_OPS = {
    'ADD': add,
    'SUB': sub,
    'MUL': mul,
    'DIV': div,
}
