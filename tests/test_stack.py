"""
vyantra — Stack Tests

Bounded LIFO behavior, stack pointer bookkeeping, and top-relative
offset addressing.
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from vyantra.mem.stack import Stack
from vyantra.config import STACK_CAPACITY, EMPTY_SP
from vyantra.errors import StackOverflow, StackUnderflow, AddressError


class TestPushPop:

    def test_empty_stack_pointer(self):
        s = Stack()
        assert s.sp == -1
        assert len(s) == 0
        assert s.is_empty

    def test_push_advances_sp(self):
        s = Stack()
        s.push(7)
        assert s.sp == 0
        s.push(8)
        assert s.sp == 1
        assert s.snapshot() == (7, 8)

    def test_lifo_order(self):
        """push 1..5 then pop five times → 5..1"""
        s = Stack()
        for v in range(1, 6):
            s.push(v)
        assert [s.pop() for _ in range(5)] == [5, 4, 3, 2, 1]
        assert s.sp == -1

    def test_interleaved_push_pop(self):
        s = Stack()
        s.push(1)
        s.push(2)
        assert s.pop() == 2
        s.push(3)
        s.push(4)
        assert s.pop() == 4
        assert s.snapshot() == (1, 3)
        assert s.sp == len(s) - 1

    def test_capacity_is_1024(self):
        assert STACK_CAPACITY == 1024
        s = Stack()
        for v in range(1024):
            s.push(v)
        assert s.sp == 1023
        with pytest.raises(StackOverflow):
            s.push(1024)
        # failed push leaves the stack untouched
        assert len(s) == 1024
        assert s.get_at(0) == 1023

    def test_pop_empty_underflows(self):
        s = Stack()
        with pytest.raises(StackUnderflow):
            s.pop()
        assert s.sp == -1

    def test_pop_after_drain_underflows(self):
        s = Stack()
        s.push(1)
        s.pop()
        with pytest.raises(StackUnderflow):
            s.pop()

    def test_reset(self):
        s = Stack()
        s.push(1)
        s.push(2)
        s.reset()
        assert s.sp == EMPTY_SP == -1
        assert s.is_empty
        assert s.snapshot() == ()
        s.push(3)
        assert s.sp == 0


class TestOffsetAddressing:

    def _stack(self, *values):
        s = Stack()
        for v in values:
            s.push(v)
        return s

    def test_offset_zero_is_top(self):
        s = self._stack(10, 20, 30)
        assert s.get_at(0) == 30

    def test_positive_offset_goes_deeper(self):
        s = self._stack(10, 20, 30)
        assert s.get_at(1) == 20
        assert s.get_at(2) == 10

    def test_offset_past_bottom(self):
        s = self._stack(10, 20, 30)
        with pytest.raises(AddressError):
            s.get_at(3)

    def test_negative_offset_is_above_top(self):
        s = self._stack(10, 20, 30)
        with pytest.raises(AddressError):
            s.get_at(-1)
        with pytest.raises(AddressError):
            s.set_at(-2, 99)

    def test_get_on_empty_stack(self):
        s = Stack()
        with pytest.raises(StackUnderflow):
            s.get_at(0)

    def test_set_on_empty_stack(self):
        s = Stack()
        with pytest.raises(StackUnderflow):
            s.set_at(0, 1)

    def test_set_at_overwrites_in_place(self):
        s = self._stack(10, 20, 30)
        s.set_at(1, 99)
        assert s.snapshot() == (10, 99, 30)
        assert s.sp == 2

    def test_set_at_out_of_range_changes_nothing(self):
        s = self._stack(10, 20)
        with pytest.raises(AddressError):
            s.set_at(5, 1)
        assert s.snapshot() == (10, 20)

    def test_offsets_follow_the_top(self):
        """[0] names a different slot once the stack grows"""
        s = self._stack(1)
        assert s.get_at(0) == 1
        s.push(2)
        assert s.get_at(0) == 2
        assert s.get_at(1) == 1

    def test_display(self):
        s = self._stack(4, 5)
        assert s.display() == "sp=1 [4, 5]"
