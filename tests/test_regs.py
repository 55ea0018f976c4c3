"""
vyantra — Register File Tests
"""

import sys
import os
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import pytest
from vyantra.cpu.regs import Reg, RegisterFile


class TestRegisterFile:

    def test_six_registers(self):
        assert [r.value for r in Reg] == ['A', 'B', 'C', 'D', 'E', 'F']

    def test_all_zero_at_reset(self):
        regs = RegisterFile()
        assert regs.as_dict() == {'A': 0, 'B': 0, 'C': 0, 'D': 0, 'E': 0, 'F': 0}

    def test_set_then_get(self):
        regs = RegisterFile()
        regs.set(Reg.C, -42)
        assert regs.get(Reg.C) == -42
        assert regs.C == -42

    def test_set_does_not_touch_others(self):
        regs = RegisterFile()
        regs.set(Reg.B, 144)
        assert regs.as_dict() == {'A': 0, 'B': 144, 'C': 0, 'D': 0, 'E': 0, 'F': 0}

    def test_key_set_is_closed(self):
        regs = RegisterFile()
        with pytest.raises(AttributeError):
            regs.G = 1

    def test_reset(self):
        regs = RegisterFile()
        regs.set(Reg.F, 9)
        regs.reset()
        assert regs.get(Reg.F) == 0

    def test_display(self):
        regs = RegisterFile()
        regs.set(Reg.A, 12)
        assert regs.display() == "A=12 B=0 C=0 D=0 E=0 F=0"


class TestRegParse:

    def test_case_insensitive(self):
        assert Reg.parse('a') is Reg.A
        assert Reg.parse(' F ') is Reg.F

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unknown register"):
            Reg.parse('G')
