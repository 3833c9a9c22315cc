"""
intcode/machine.py
══════════════════

The decode/execute core.

A :class:`Machine` owns a two-tier :class:`~intcode.memory.Memory`, a
program counter and a relative-base register, and runs over one
:class:`~intcode.numeric.NumericDomain` for its whole lifetime.  It never
blocks: I/O is cooperative, and each I/O instruction suspends by
*returning* to the caller.

Stepping contract
─────────────────

  one_step() returns        caller must
  ────────────────────────  ───────────────────────────────────────────
  STEPPED                   call again
  Output(value)             consume ``value``, then call again
  AwaitingInput(address)    ``set_cell(address, v)``, then call again
  TERMINATED                stop (further steps terminate again)

``execute_until_input`` hides the ``STEPPED`` results;
``execute_to_end`` also feeds inputs from an iterable and collects
outputs.  Several cooperating machines (e.g. a feedback pipeline) are
scheduled by the caller, round-robin over these suspension points.

Failure semantics
─────────────────

Every operand, destination address included, is resolved before anything
is written, so a step that raises (see :mod:`intcode.errors`) leaves the
machine exactly as it was.

Usage example
─────────────
::

    from intcode import Machine, INT64

    m = Machine([3, 0, 4, 0, 99], INT64)
    assert m.execute_to_end([42]) == [42]
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Generic, Iterable, List, Optional, TypeVar

from intcode.disasm import format_instruction
from intcode.errors import (
    AddressFault,
    AddressingError,
    DecodeError,
    DecodeFault,
    InputStarvationError,
    StepLimitExceeded,
)
from intcode.instructions import Instruction, Opcode, ParameterMode, decode_instruction
from intcode.memory import DEFAULT_MAX_ADDRESS, Memory
from intcode.numeric import INT64, OFFSET_MAX, OFFSET_MIN, NumericDomain

_log = logging.getLogger(__name__)

V = TypeVar("V")


# ═══════════════════════════════════════════════════════════════════════════
# 1. STEP OUTCOMES
# ═══════════════════════════════════════════════════════════════════════════


class StepResult:
    """Base class of the four step outcomes."""

    __slots__ = ()


@dataclass(frozen=True, slots=True)
class Stepped(StepResult):
    """An instruction without I/O effect ran."""


@dataclass(frozen=True, slots=True)
class Output(StepResult):
    """The machine emitted ``value``."""

    value: Any


@dataclass(frozen=True, slots=True)
class AwaitingInput(StepResult):
    """The machine needs a value written to ``address`` before continuing."""

    address: int


@dataclass(frozen=True, slots=True)
class Terminated(StepResult):
    """The halt instruction was reached."""


STEPPED = Stepped()
TERMINATED = Terminated()


# ═══════════════════════════════════════════════════════════════════════════
# 2. MACHINE
# ═══════════════════════════════════════════════════════════════════════════


class Machine(Generic[V]):
    """Interpreter for one program image over one numeric domain.

    Parameters
    ----------
    image : iterable
        Initial memory.  Each cell is passed through ``domain.lift``, so
        plain integers work for every domain.
    domain : NumericDomain
        Value domain; ``INT64`` by default.
    max_address : int
        Highest addressable cell; larger addresses raise
        ``AddressingError(TOO_FAR)``.
    trace : bool
        Log every decoded instruction at DEBUG level.
    """

    def __init__(
        self,
        image: Iterable[Any],
        domain: NumericDomain[V] = INT64,
        *,
        max_address: int = DEFAULT_MAX_ADDRESS,
        trace: bool = False,
    ) -> None:
        self.domain = domain
        self.trace = trace
        self._image: List[V] = [domain.lift(cell) for cell in image]
        self.memory: Memory[V] = Memory(self._image, domain.zero(), max_address)
        self.pc = 0
        self.relative_base = 0
        self.steps = 0

    # ---- Cell access ---------------------------------------------------------

    def get_cell(self, address: int) -> V:
        return self.memory.read(address)

    def set_cell(self, address: int, value: Any) -> None:
        """Write ``value`` (lifted into the domain) at ``address``."""
        self.memory.write(address, self.domain.lift(value))

    def dump_memory(self) -> List[V]:
        """The dense tier: the program image as it stands now."""
        return self.memory.dump()

    def reset(self, image: Optional[Iterable[Any]] = None) -> None:
        """Restart from ``image`` (or the constructor's image).

        Clears the program counter, relative base, step count and every
        sparse cell.
        """
        if image is not None:
            self._image = [self.domain.lift(cell) for cell in image]
        self.memory.reset(self._image)
        self.pc = 0
        self.relative_base = 0
        self.steps = 0
        _log.debug("machine reset (%d cells, %s)", len(self._image), self.domain.name)

    # ---- Operand resolution --------------------------------------------------

    def _address_of(self, instr: Instruction, index: int, operand: V) -> int:
        mode = instr.modes[index]
        if mode is ParameterMode.RELATIVE:
            offset = self.domain.to_offset(operand)
            if offset is None:
                raise self._offset_error(operand, instr.address)
            address = self.relative_base + offset
        else:
            address = self._to_address(operand, instr.address)
        return self.memory.check(address, instr.address)

    def _value_of(self, instr: Instruction, index: int, operand: V) -> V:
        if instr.modes[index] is ParameterMode.IMMEDIATE:
            return operand
        return self.memory.read(self._address_of(instr, index, operand))

    def _to_address(self, value: V, pc: int) -> int:
        address = self.domain.to_address(value)
        if address is not None:
            return address
        k = self.domain.to_int(value)
        if k is None:
            raise AddressingError(AddressFault.UNRESOLVED, value, pc)
        raise AddressingError(AddressFault.NEGATIVE, k, pc)

    def _offset_error(self, value: V, pc: int) -> AddressingError:
        if self.domain.to_int(value) is None:
            return AddressingError(AddressFault.UNRESOLVED, value, pc)
        return AddressingError(AddressFault.OVERFLOW, value, pc)

    # ---- Execution -----------------------------------------------------------

    def decode(self, address: Optional[int] = None) -> Instruction:
        """Decode the instruction at ``address`` (default: the program counter)."""
        if address is None:
            address = self.pc
        cell = self.memory.read(address)
        raw = self.domain.to_int(cell)
        if raw is None:
            raise DecodeError(DecodeFault.UNRESOLVED, cell, address)
        return decode_instruction(raw, address)

    def one_step(self) -> StepResult:
        """Execute the instruction at the program counter."""
        pc = self.pc
        instr = self.decode(pc)
        op = instr.opcode
        operands = [self.memory.read(pc + 1 + i) for i in range(instr.arity)]
        if self.trace:
            _log.debug("%s", format_instruction(instr, operands))

        if op is Opcode.HALT:
            _log.debug("terminated at %d after %d steps", pc, self.steps)
            return TERMINATED

        domain = self.domain
        result: StepResult = STEPPED
        next_pc = pc + instr.width

        if op in (Opcode.ADD, Opcode.MUL, Opcode.LESS_THAN, Opcode.EQUALS):
            a = self._value_of(instr, 0, operands[0])
            b = self._value_of(instr, 1, operands[1])
            dest = self._address_of(instr, 2, operands[2])
            if op is Opcode.ADD:
                value = domain.add(a, b)
            elif op is Opcode.MUL:
                value = domain.mul(a, b)
            elif op is Opcode.LESS_THAN:
                value = domain.if_less_then_else(a, b, domain.one(), domain.zero())
            else:
                value = domain.if_equal_then_else(a, b, domain.one(), domain.zero())
            self.memory.write(dest, value)

        elif op is Opcode.INPUT:
            result = AwaitingInput(self._address_of(instr, 0, operands[0]))

        elif op is Opcode.OUTPUT:
            result = Output(self._value_of(instr, 0, operands[0]))

        elif op in (Opcode.JUMP_IF_TRUE, Opcode.JUMP_IF_FALSE):
            test = self._value_of(instr, 0, operands[0])
            target = self._value_of(instr, 1, operands[1])
            if domain.is_zero(test) == (op is Opcode.JUMP_IF_FALSE):
                next_pc = self.memory.check(self._to_address(target, pc), pc)

        elif op is Opcode.ADJUST_BASE:
            amount = self._value_of(instr, 0, operands[0])
            offset = domain.to_offset(amount)
            if offset is None:
                raise self._offset_error(amount, pc)
            base = self.relative_base + offset
            if not OFFSET_MIN <= base <= OFFSET_MAX:
                raise AddressingError(AddressFault.OVERFLOW, base, pc)
            self.relative_base = base

        self.pc = next_pc
        self.steps += 1
        return result

    def execute_until_input(self, *, max_steps: Optional[int] = None) -> StepResult:
        """Step until the first ``Output``, ``AwaitingInput`` or ``TERMINATED``.

        Raises
        ------
        StepLimitExceeded
            If ``max_steps`` instructions run without an I/O outcome.
        """
        limit = None if max_steps is None else self.steps + max_steps
        while True:
            if limit is not None and self.steps >= limit:
                raise StepLimitExceeded(max_steps)
            result = self.one_step()
            if result is not STEPPED:
                return result

    def execute_to_end(
        self,
        inputs: Iterable[Any] = (),
        *,
        max_steps: Optional[int] = None,
    ) -> List[V]:
        """Run to termination, feeding ``inputs`` and collecting outputs.

        Parameters
        ----------
        inputs : iterable
            Values supplied, in order, at each ``AwaitingInput``.
        max_steps : int, optional
            Budget for the whole run.

        Returns
        -------
        list
            Every output value, in emission order.

        Raises
        ------
        InputStarvationError
            The program asked for more input than ``inputs`` holds.
        """
        feed = iter(inputs)
        outputs: List[V] = []
        start = self.steps
        while True:
            budget = None if max_steps is None else max_steps - (self.steps - start)
            if budget is not None and budget <= 0:
                raise StepLimitExceeded(max_steps)
            result = self.execute_until_input(max_steps=budget)
            if isinstance(result, Output):
                outputs.append(result.value)
            elif isinstance(result, AwaitingInput):
                try:
                    value = next(feed)
                except StopIteration:
                    _log.info("input exhausted at pc=%d (cell %d)", self.pc, result.address)
                    raise InputStarvationError(result.address) from None
                self.set_cell(result.address, value)
            else:
                return outputs

    def __repr__(self) -> str:
        return (
            f"Machine(pc={self.pc}, relative_base={self.relative_base}, "
            f"domain={self.domain.name}, memory={self.memory!r})"
        )
