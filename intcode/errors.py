"""
intcode/errors.py
═════════════════

Error taxonomy for the machine and the symbolic evaluator.

Hierarchy
─────────

    IntcodeError
    ├── MachineError                 a run cannot continue
    │   ├── DecodeError              bad opcode / mode digit / destination
    │   ├── AddressingError          address or offset failed to resolve
    │   ├── InputStarvationError     input source exhausted
    │   ├── StepLimitExceeded        optional step budget used up
    │   └── ArithmeticOverflowError  fixed-width domain overflowed
    ├── EvaluationError              symbolic evaluation failed
    │   └── UnboundVariableError     a free variable has no binding
    └── ExpressionSyntaxError        textual expression form is malformed

Every error is raised *before* the machine state is mutated, so a failed
step can be inspected (``pc``, memory) exactly as it was.  Nothing in the
package retries; callers treat these as fatal to the run.
"""

from __future__ import annotations

import enum
from typing import Any, Optional


class DecodeFault(enum.Enum):
    """Why an instruction cell could not be decoded."""

    BAD_OPCODE = "unrecognised opcode"
    BAD_MODE = "parameter mode digit outside {0, 1, 2}"
    IMMEDIATE_DESTINATION = "immediate mode used for a destination operand"
    UNRESOLVED = "instruction cell has no concrete value"


class AddressFault(enum.Enum):
    """Why an address or relative-base offset failed to resolve."""

    NEGATIVE = "negative"
    TOO_FAR = "too far"
    OVERFLOW = "overflow"
    UNRESOLVED = "unresolved"


class IntcodeError(Exception):
    """Base exception for every error raised by this package."""
    pass


class MachineError(IntcodeError):
    """A machine run hit a condition it cannot execute past."""
    pass


class DecodeError(MachineError):
    """Raised when the cell at the program counter is not a valid instruction.

    Parameters
    ----------
    fault : DecodeFault
        Category of the failure.
    value : Any
        The raw instruction cell (or the offending opcode / digit).
    address : int
        Address at which the instruction was found.
    """

    def __init__(self, fault: DecodeFault, value: Any, address: int) -> None:
        self.fault = fault
        self.value = value
        self.address = address
        super().__init__(f"instruction {value} at position {address}: {fault.value}")


class AddressingError(MachineError):
    """Raised when an operand cannot be turned into a usable address.

    ``fault`` distinguishes negative addresses, addresses beyond the
    configured maximum, relative-base overflow, and symbolic values with
    no concrete address.
    """

    def __init__(
        self,
        fault: AddressFault,
        value: Any,
        pc: Optional[int] = None,
    ) -> None:
        self.fault = fault
        self.value = value
        self.pc = pc
        where = f" (instruction at {pc})" if pc is not None else ""
        super().__init__(f"{fault.value} address {value}{where}")


class InputStarvationError(MachineError):
    """The machine asked for input but the caller's source was exhausted."""

    def __init__(self, address: int) -> None:
        self.address = address
        super().__init__(f"no input available for cell {address}")


class StepLimitExceeded(MachineError):
    """The run used up its ``max_steps`` budget without terminating."""

    def __init__(self, steps: int) -> None:
        self.steps = steps
        super().__init__(f"step limit of {steps} exceeded")


class ArithmeticOverflowError(MachineError):
    """A fixed-width concrete domain produced a value outside its range."""

    def __init__(self, value: int, bits: int) -> None:
        self.value = value
        self.bits = bits
        super().__init__(f"value {value} does not fit in a signed {bits}-bit cell")


class EvaluationError(IntcodeError):
    """Symbolic evaluation could not produce a concrete number."""
    pass


class UnboundVariableError(EvaluationError):
    """Evaluation reached a variable for which no binding was supplied."""

    def __init__(self, variable: str) -> None:
        self.variable = variable
        super().__init__(f"variable {variable!r} is unbound")


class ExpressionSyntaxError(IntcodeError):
    """Raised when the S-expression form of an expression is malformed."""

    def __init__(self, message: str, text: str = "") -> None:
        self.text = text
        if text:
            message = f"{message}\n  {text}"
        super().__init__(message)
