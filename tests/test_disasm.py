# tests/test_disasm.py
"""
Tests for program listings.
"""

import re

from intcode import Constant, Variable, decode_instruction
from intcode.disasm import disassemble, format_instruction, format_listing, format_operand
from intcode.instructions import ParameterMode
from tests.conftest import QUINE

ANSI = re.compile(r"\x1b\[[0-9;]*m")


class TestDisassemble:

    def test_code_then_data(self):
        lines = list(disassemble([1, 9, 10, 3, 2, 3, 11, 0, 99, 30, 40, 50]))
        assert [line.address for line in lines] == [0, 4, 8, 9, 10, 11]
        assert [line.instruction.mnemonic for line in lines[:3]] == ["ADD", "MUL", "HALT"]
        assert lines[0].operands == (9, 10, 3)
        assert all(line.is_data for line in lines[3:])
        assert lines[3].raw == 30

    def test_range(self):
        lines = list(disassemble(QUINE, start=2, end=4))
        assert len(lines) == 1
        assert lines[0].instruction.mnemonic == "OUTPUT"

    def test_truncated_instruction_reads_zero(self):
        lines = list(disassemble([1, 5]))
        assert lines[0].operands == (5, 0, 0)

    def test_symbolic_cells(self):
        lines = list(disassemble([Constant(104), Variable("x"), Constant(99)]))
        assert lines[0].instruction.mnemonic == "OUTPUT"
        assert lines[1].instruction.mnemonic == "HALT"

    def test_unresolved_opcode_is_data(self):
        lines = list(disassemble([Variable("x"), Constant(99)]))
        assert lines[0].is_data
        assert not lines[1].is_data


class TestFormatting:

    def test_operand_sigils(self):
        assert format_operand(ParameterMode.POSITION, 4) == "[4]"
        assert format_operand(ParameterMode.IMMEDIATE, -4) == "#-4"
        assert format_operand(ParameterMode.RELATIVE, -1) == "rb[-1]"

    def test_instruction(self):
        text = format_instruction(decode_instruction(1002, 4), (24, 2, 25))
        assert text.split() == ["4", "MUL", "[24],", "#2,", "[25]"]

    def test_halt_has_no_operands(self):
        assert format_instruction(decode_instruction(99, 22), ()).split() == ["22", "HALT"]

    def test_listing(self):
        listing = format_listing(list(disassemble(QUINE)))
        rows = listing.splitlines()
        assert rows[0].split() == ["0", "ADJUST_BASE", "#1"]
        assert rows[1].split() == ["2", "OUTPUT", "rb[-1]"]
        assert rows[-1].split() == ["15", "HALT"]

    def test_data_rows(self):
        listing = format_listing(list(disassemble([99, 1234])))
        assert listing.splitlines()[1].split() == ["1", "DATA", "1234"]

    def test_colour_only_adds_escapes(self):
        lines = list(disassemble([1, 9, 10, 3, 99, 30]))
        plain = format_listing(lines)
        coloured = format_listing(lines, color=True)
        assert ANSI.sub("", coloured) == plain
