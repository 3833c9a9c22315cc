"""
intcode/disasm.py
═════════════════

Human-readable listings of program images.

``disassemble`` walks an image linearly from ``start``, decoding each cell
as an instruction and skipping over its operands.  Cells that do not
decode (data, or code reached only through self-modification) are
emitted as ``DATA`` lines one cell at a time.  No execution happens, so a
listing is only a best guess at where the code is.

Operand notation:

    [n]      position mode   (the cell at address n)
    #n       immediate mode  (the literal n)
    rb[n]    relative mode   (the cell at relative_base + n)

``format_listing(..., color=True)`` colours the output with ``termcolor``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterator, List, Optional, Sequence, Tuple

from termcolor import colored

from intcode.errors import DecodeError
from intcode.instructions import Instruction, Opcode, ParameterMode, decode_instruction


@dataclass(frozen=True, slots=True)
class ListingLine:
    """One line of a listing: an instruction or a single data cell."""

    address: int
    raw: Any
    instruction: Optional[Instruction] = None
    operands: Tuple[Any, ...] = ()

    @property
    def is_data(self) -> bool:
        return self.instruction is None


def format_operand(mode: ParameterMode, value: Any) -> str:
    if mode is ParameterMode.POSITION:
        return f"[{value}]"
    if mode is ParameterMode.IMMEDIATE:
        return f"#{value}"
    return f"rb[{value}]"


def format_instruction(
    instruction: Instruction,
    operands: Sequence[Any],
    color: bool = False,
) -> str:
    """Render ``instruction`` with its raw operand cells."""
    mnemonic = f"{instruction.mnemonic:<13}"
    ops = ", ".join(
        format_operand(mode, value) for mode, value in zip(instruction.modes, operands)
    )
    address = f"{instruction.address:>6}"
    if color:
        address = colored(address, "blue")
        tint = "red" if instruction.opcode is Opcode.HALT else "cyan"
        mnemonic = colored(mnemonic, tint, attrs=["bold"])
    return f"{address}  {mnemonic} {ops}".rstrip()


def _literal(cell: Any) -> Optional[int]:
    if isinstance(cell, int) and not isinstance(cell, bool):
        return cell
    if getattr(cell, "is_literal", False):
        return cell.literal_value
    return None


def disassemble(
    image: Sequence[Any],
    start: int = 0,
    end: Optional[int] = None,
) -> Iterator[ListingLine]:
    """Yield a :class:`ListingLine` per decoded instruction or data cell.

    Parameters
    ----------
    image : sequence
        Cell values: integers, or literal expressions.
    start, end : int
        Half-open address range to list (``end`` defaults to the image
        length).  An instruction starting before ``end`` is listed whole;
        operand cells past the image read as 0.
    """
    stop = len(image) if end is None else min(end, len(image))
    address = start
    while address < stop:
        raw = image[address]
        value = _literal(raw)
        instruction = None
        if value is not None:
            try:
                instruction = decode_instruction(value, address)
            except DecodeError:
                instruction = None
        if instruction is None:
            yield ListingLine(address, raw)
            address += 1
            continue
        operands = tuple(
            image[a] if a < len(image) else 0
            for a in range(address + 1, address + instruction.width)
        )
        yield ListingLine(address, raw, instruction, operands)
        address += instruction.width


def format_listing(lines: Sequence[ListingLine], color: bool = False) -> str:
    """Join listing lines into a printable block of text."""
    out: List[str] = []
    for line in lines:
        if line.instruction is not None:
            out.append(format_instruction(line.instruction, line.operands, color))
            continue
        address = f"{line.address:>6}"
        data = f"{'DATA':<13} {line.raw}"
        if color:
            address = colored(address, "blue")
            data = colored(data, "yellow")
        out.append(f"{address}  {data}")
    return "\n".join(out)
