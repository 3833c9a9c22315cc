"""
intcode/instructions.py
═══════════════════════

Instruction set and decoder.

An instruction cell ``raw`` encodes the opcode in its two low decimal
digits and one parameter-mode digit per operand above them, the hundreds
digit belonging to the first operand:

        raw = 1 0 0 2
              │ │ └┴── opcode 02 (MUL)
              │ └───── operand 1: mode 0 (position)
              └─────── operand 2: mode 1 (immediate)
                       operand 3: mode 0 (leading zero omitted)

  code  mnemonic       operands      effect
  ────  ─────────────  ────────────  ───────────────────────────────
   1    ADD            a, b, dest    dest ← a + b
   2    MUL            a, b, dest    dest ← a × b
   3    INPUT          dest          await input into dest
   4    OUTPUT         a             emit a
   5    JUMP_IF_TRUE   a, target     if a ≠ 0: pc ← target
   6    JUMP_IF_FALSE  a, target     if a = 0: pc ← target
   7    LESS_THAN      a, b, dest    dest ← 1 if a < b else 0
   8    EQUALS         a, b, dest    dest ← 1 if a = b else 0
   9    ADJUST_BASE    a             relative_base += a
  99    HALT                         terminate

Destination operands must use position or relative mode.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from intcode.errors import DecodeError, DecodeFault


class Opcode(enum.IntEnum):
    ADD = 1
    MUL = 2
    INPUT = 3
    OUTPUT = 4
    JUMP_IF_TRUE = 5
    JUMP_IF_FALSE = 6
    LESS_THAN = 7
    EQUALS = 8
    ADJUST_BASE = 9
    HALT = 99


class ParameterMode(enum.IntEnum):
    POSITION = 0
    IMMEDIATE = 1
    RELATIVE = 2


ARITY: Dict[Opcode, int] = {
    Opcode.ADD: 3,
    Opcode.MUL: 3,
    Opcode.INPUT: 1,
    Opcode.OUTPUT: 1,
    Opcode.JUMP_IF_TRUE: 2,
    Opcode.JUMP_IF_FALSE: 2,
    Opcode.LESS_THAN: 3,
    Opcode.EQUALS: 3,
    Opcode.ADJUST_BASE: 1,
    Opcode.HALT: 0,
}

# Index of the operand each opcode writes to
DESTINATION: Dict[Opcode, int] = {
    Opcode.ADD: 2,
    Opcode.MUL: 2,
    Opcode.INPUT: 0,
    Opcode.LESS_THAN: 2,
    Opcode.EQUALS: 2,
}


@dataclass(frozen=True, slots=True)
class Instruction:
    """A decoded instruction (operand values are not part of it).

    Attributes
    ----------
    address : int
        Where the instruction cell lives.
    raw : int
        The undecoded cell value.
    opcode : Opcode
    modes : tuple[ParameterMode, ...]
        One mode per operand.
    """

    address: int
    raw: int
    opcode: Opcode
    modes: Tuple[ParameterMode, ...]

    @property
    def arity(self) -> int:
        return len(self.modes)

    @property
    def width(self) -> int:
        """Number of cells the instruction occupies."""
        return 1 + len(self.modes)

    @property
    def destination(self) -> Optional[int]:
        """Index of the written operand, or ``None``."""
        return DESTINATION.get(self.opcode)

    @property
    def mnemonic(self) -> str:
        return self.opcode.name


def decode_instruction(raw: int, address: int) -> Instruction:
    """Decode the instruction cell ``raw`` found at ``address``.

    Raises
    ------
    DecodeError
        Unknown opcode, a mode digit outside ``{0, 1, 2}``, or immediate
        mode on a destination operand.  Digits above the last operand's
        mode digit are ignored.
    """
    if raw < 0:
        raise DecodeError(DecodeFault.BAD_OPCODE, raw, address)
    try:
        opcode = Opcode(raw % 100)
    except ValueError:
        raise DecodeError(DecodeFault.BAD_OPCODE, raw, address) from None

    digits = raw // 100
    modes = []
    for index in range(ARITY[opcode]):
        digit = digits % 10
        digits //= 10
        if digit > ParameterMode.RELATIVE:
            raise DecodeError(DecodeFault.BAD_MODE, raw, address)
        mode = ParameterMode(digit)
        if mode is ParameterMode.IMMEDIATE and DESTINATION.get(opcode) == index:
            raise DecodeError(DecodeFault.IMMEDIATE_DESTINATION, raw, address)
        modes.append(mode)
    return Instruction(address, raw, opcode, tuple(modes))
