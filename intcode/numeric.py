"""
intcode/numeric.py
══════════════════

The numeric abstraction a machine cell value must satisfy.

The machine never touches cell values directly: every addition,
comparison and address conversion goes through a :class:`NumericDomain`
strategy object fixed at construction time.  Swapping the strategy is all
it takes to run the same interpreter over a different value domain:

    ┌──────────────────────────┐
    │  NumericDomain[V]  (ABC) │
    │   ├── IntegerDomain      │  signed ints, optionally fixed-width
    │   │     INT32 / INT64 / BIGINT
    │   └── SymbolicDomain     │  expression trees (intcode.expr)
    │         SYMBOLIC         │
    └──────────────────────────┘

Required operations
───────────────────

  zero(), one()                  identity elements
  lift(raw)                      int (or a V) → V
  to_int(v)                      the concrete integer, or None
  to_address(v)                  non-negative address, or None
  to_offset(v)                   signed 32-bit offset, or None
  add(a, b), mul(a, b)           total arithmetic
  is_zero(v), less_than(a, b),
  equal(a, b)                    concrete decisions (jumps)
  if_less_then_else(...)         LESS_THAN result
  if_equal_then_else(...)        EQUALS result

For the symbolic domain the three concrete decisions evaluate the value
with no bindings and raise :class:`~intcode.errors.UnboundVariableError`
when a free variable is reached.  Programs whose control flow depends on
their inputs therefore cannot be run symbolically; only their data flow
can.
"""

from __future__ import annotations

import abc
from typing import Any, Generic, Optional, TypeVar

from intcode.errors import ArithmeticOverflowError
from intcode.expr import (
    ONE,
    ZERO,
    Constant,
    Expr,
    IfEqual,
    IfLess,
    Product,
    Variable,
)

V = TypeVar("V")

# Range of a relative-base offset (and of the relative base itself).
OFFSET_MIN = -(1 << 31)
OFFSET_MAX = (1 << 31) - 1


class NumericDomain(abc.ABC, Generic[V]):
    """Strategy object describing one cell-value domain."""

    name: str = "abstract"

    @abc.abstractmethod
    def zero(self) -> V:
        ...

    @abc.abstractmethod
    def one(self) -> V:
        ...

    @abc.abstractmethod
    def lift(self, raw: Any) -> V:
        """Convert an ``int`` (or a value already in the domain) to ``V``."""
        ...

    @abc.abstractmethod
    def to_int(self, value: V) -> Optional[int]:
        """The concrete integer ``value`` stands for, if it has one."""
        ...

    def to_address(self, value: V) -> Optional[int]:
        """``value`` as a memory address; ``None`` if negative or unresolved."""
        k = self.to_int(value)
        if k is None or k < 0:
            return None
        return k

    def to_offset(self, value: V) -> Optional[int]:
        """``value`` as a relative-base offset; ``None`` outside 32 bits."""
        k = self.to_int(value)
        if k is None or not OFFSET_MIN <= k <= OFFSET_MAX:
            return None
        return k

    @abc.abstractmethod
    def add(self, a: V, b: V) -> V:
        ...

    @abc.abstractmethod
    def mul(self, a: V, b: V) -> V:
        ...

    @abc.abstractmethod
    def is_zero(self, value: V) -> bool:
        ...

    @abc.abstractmethod
    def less_than(self, a: V, b: V) -> bool:
        ...

    @abc.abstractmethod
    def equal(self, a: V, b: V) -> bool:
        ...

    def if_less_then_else(self, a: V, b: V, then: V, otherwise: V) -> V:
        return then if self.less_than(a, b) else otherwise

    def if_equal_then_else(self, a: V, b: V, then: V, otherwise: V) -> V:
        return then if self.equal(a, b) else otherwise

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"


# ═══════════════════════════════════════════════════════════════════════════
# CONCRETE INTEGERS
# ═══════════════════════════════════════════════════════════════════════════


class IntegerDomain(NumericDomain[int]):
    """Signed integers, checked against a fixed width.

    Parameters
    ----------
    bits : int or None
        Width of a cell including the sign bit.  ``None`` means
        unbounded Python integers.  Any result outside the range raises
        :class:`~intcode.errors.ArithmeticOverflowError` instead of
        wrapping.
    """

    def __init__(self, bits: Optional[int] = 64) -> None:
        self.bits = bits
        if bits is None:
            self.name = "bigint"
            self.min_value: Optional[int] = None
            self.max_value: Optional[int] = None
        else:
            self.name = f"int{bits}"
            self.min_value = -(1 << (bits - 1))
            self.max_value = (1 << (bits - 1)) - 1

    def _check(self, value: int) -> int:
        if self.bits is not None and not self.min_value <= value <= self.max_value:
            raise ArithmeticOverflowError(value, self.bits)
        return value

    def zero(self) -> int:
        return 0

    def one(self) -> int:
        return 1

    def lift(self, raw: Any) -> int:
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"{self.name} cells hold integers, got {raw!r}")
        return self._check(raw)

    def to_int(self, value: int) -> Optional[int]:
        return value

    def add(self, a: int, b: int) -> int:
        return self._check(a + b)

    def mul(self, a: int, b: int) -> int:
        return self._check(a * b)

    def is_zero(self, value: int) -> bool:
        return value == 0

    def less_than(self, a: int, b: int) -> bool:
        return a < b

    def equal(self, a: int, b: int) -> bool:
        return a == b


INT32 = IntegerDomain(32)
INT64 = IntegerDomain(64)
BIGINT = IntegerDomain(None)


# ═══════════════════════════════════════════════════════════════════════════
# SYMBOLIC EXPRESSIONS
# ═══════════════════════════════════════════════════════════════════════════


def _is_negated_variable(e: Expr, name: str) -> bool:
    return (isinstance(e, Product)
            and e.left.is_literal and e.left.literal_value == -1
            and isinstance(e.right, Variable) and e.right.name == name)


class SymbolicDomain(NumericDomain[Expr]):
    """Cells hold :class:`~intcode.expr.Expr` trees.

    Arithmetic builds new nodes; ``LESS_THAN`` and ``EQUALS`` build
    ``IfLess`` / ``IfEqual`` nodes unless both operands are literals.
    Address conversion evaluates the tree with no bindings and fails
    (returns ``None``) if it mentions a variable.
    """

    name = "symbolic"

    def zero(self) -> Expr:
        return ZERO

    def one(self) -> Expr:
        return ONE

    def lift(self, raw: Any) -> Expr:
        if isinstance(raw, Expr):
            return raw
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise TypeError(f"symbolic cells hold expressions or integers, got {raw!r}")
        return Constant(raw)

    def to_int(self, value: Expr) -> Optional[int]:
        return value.try_evaluate()

    def add(self, a: Expr, b: Expr) -> Expr:
        return a + b

    def mul(self, a: Expr, b: Expr) -> Expr:
        return a * b

    def is_zero(self, value: Expr) -> bool:
        return value.evaluate() == 0

    def less_than(self, a: Expr, b: Expr) -> bool:
        return a.evaluate() < b.evaluate()

    def equal(self, a: Expr, b: Expr) -> bool:
        return a.evaluate() == b.evaluate()

    def if_less_then_else(self, a: Expr, b: Expr, then: Expr, otherwise: Expr) -> Expr:
        if a.is_literal and b.is_literal:
            return then if a.literal_value < b.literal_value else otherwise
        # 0 < If[0 < x, x, -1 * x] is the absolute-value test, i.e. x != 0.
        if (a.is_literal and a.literal_value == 0 and isinstance(b, IfLess)
                and b.lhs.is_literal and b.lhs.literal_value == 0
                and isinstance(b.rhs, Variable) and b.then == b.rhs
                and _is_negated_variable(b.otherwise, b.rhs.name)):
            return IfEqual(b.rhs, ZERO, otherwise, then)
        return IfLess(a, b, then, otherwise)

    def if_equal_then_else(self, a: Expr, b: Expr, then: Expr, otherwise: Expr) -> Expr:
        if a.is_literal and b.is_literal:
            return then if a.literal_value == b.literal_value else otherwise
        return IfEqual(a, b, then, otherwise)


SYMBOLIC = SymbolicDomain()
