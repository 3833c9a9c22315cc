"""
intcode/expr.py
═══════════════

Symbolic expression trees for running the machine "abstractly".

A machine run over the symbolic domain stores :class:`Expr` values in its
cells instead of integers.  Inputs become free :class:`Variable` nodes and
every ``ADD`` / ``MUL`` / ``LESS_THAN`` / ``EQUALS`` instruction builds a
new tree, so the value a program outputs is a closed expression over its
inputs.

Node family
───────────

  Node                          Meaning
  ────────────────────────────  ─────────────────────────────────────────
  Constant(k)                   the integer k
  Zero / One                    0 and 1 (kept apart from Constant(0) and
                                Constant(1) to shortcut rewrite rules)
  Sum(a, b)                     a + b
  Product(a, b)                 a × b
  IfEqual(a, b, then, other)    then if a = b else other
  IfLess(a, b, then, other)     then if a < b else other
  Variable(name)                a free input

The family is closed: ``ExprKind`` enumerates it and code that walks a
tree dispatches on ``isinstance`` over exactly these classes.  Nodes are
frozen; ``+`` and ``*`` (and :func:`intcode.simplify.simplify`) always
return new trees, and subtrees may be shared between trees because
nothing is ever mutated in place.

Python ``==`` on nodes is *syntactic* (``Zero() != Constant(0)``).  The
weaker :meth:`Expr.strict_equal` is the comparator the simplifier uses to
match path conditions.  The ordering operators (``<`` and friends)
evaluate both sides with no bindings and raise
:class:`~intcode.errors.UnboundVariableError` on a free variable.
"""

from __future__ import annotations

import abc
import enum
from dataclasses import dataclass
from typing import (
    Callable,
    FrozenSet,
    Mapping,
    Optional,
    Set,
    Tuple,
    Union,
)

from intcode.errors import UnboundVariableError

# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

Lookup = Callable[[str], Optional[int]]
Bindings = Union[Mapping[str, int], Lookup, None]


def _as_lookup(bindings: Bindings) -> Lookup:
    if bindings is None:
        return lambda name: None
    if isinstance(bindings, Mapping):
        return bindings.get
    return bindings


class ExprKind(enum.Enum):
    """Kinds of expression node."""

    CONSTANT = "const"
    ZERO = "zero"
    ONE = "one"
    SUM = "sum"
    PRODUCT = "product"
    IF_EQUAL = "if_eq"
    IF_LESS = "if_lt"
    VARIABLE = "var"


# ═══════════════════════════════════════════════════════════════════════════
# 1. BASE CLASS
# ═══════════════════════════════════════════════════════════════════════════


class Expr(abc.ABC):
    """Abstract base class for expression nodes."""

    __slots__ = ()

    @property
    @abc.abstractmethod
    def kind(self) -> ExprKind:
        ...

    @property
    def children(self) -> Tuple[Expr, ...]:
        """Direct sub-expressions, in field order."""
        return ()

    @property
    def is_literal(self) -> bool:
        """True for ``Constant``, ``Zero`` and ``One``."""
        return False

    @property
    def literal_value(self) -> Optional[int]:
        """The integer a literal stands for, ``None`` for other nodes."""
        return None

    # ---- Evaluation ------------------------------------------------------

    def evaluate(self, bindings: Bindings = None) -> int:
        """Evaluate to an integer.

        Parameters
        ----------
        bindings : mapping or callable, optional
            Either a ``{name: value}`` mapping or a partial lookup
            function returning ``None`` for unbound names.

        Raises
        ------
        UnboundVariableError
            The first time a ``Variable`` without a binding is reached.
            Only the taken branch of a conditional is evaluated, so an
            unbound variable in the other branch is not an error.
        """
        return self._eval(_as_lookup(bindings))

    @abc.abstractmethod
    def _eval(self, lookup: Lookup) -> int:
        ...

    def try_evaluate(self, bindings: Bindings = None) -> Optional[int]:
        """Like :meth:`evaluate` but returns ``None`` on an unbound variable."""
        try:
            return self.evaluate(bindings)
        except UnboundVariableError:
            return None

    # ---- Structural queries ---------------------------------------------

    def strict_equal(self, other: Expr) -> bool:
        """Syntactic comparison used for path-condition lookup.

        ``Zero`` matches ``Constant(0)`` and ``One`` matches
        ``Constant(1)``; otherwise both trees must have the same shape.
        ``a + b`` does not match ``b + a``.
        """
        if self is other:
            return True
        if self.is_literal or other.is_literal:
            return (self.is_literal and other.is_literal
                    and self.literal_value == other.literal_value)
        if type(self) is not type(other):
            return False
        return all(a.strict_equal(b) for a, b in zip(self.children, other.children))

    @property
    def free_variables(self) -> FrozenSet[str]:
        """Names of every variable in the tree."""
        result: Set[str] = set()
        self._collect_free_vars(result)
        return frozenset(result)

    def _collect_free_vars(self, result: Set[str]) -> None:
        for child in self.children:
            child._collect_free_vars(result)

    def size(self) -> int:
        """Number of nodes in the tree (shared subtrees counted per use)."""
        return 1 + sum(child.size() for child in self.children)

    def depth(self) -> int:
        return 1 + max((child.depth() for child in self.children), default=0)

    def substitute(self, mapping: Mapping[str, Union[Expr, int]]) -> Expr:
        """Replace variables by expressions (or integers).

        Unmapped variables are left in place.  The result is not
        simplified.
        """
        return self._substitute({k: _coerce(v) for k, v in mapping.items()})

    @abc.abstractmethod
    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        ...

    # ---- Arithmetic ------------------------------------------------------

    def __add__(self, other: Union[Expr, int]) -> Expr:
        rhs = _coerce(other)
        if rhs is NotImplemented:
            return NotImplemented
        return _add(self, rhs)

    def __radd__(self, other: int) -> Expr:
        lhs = _coerce(other)
        if lhs is NotImplemented:
            return NotImplemented
        return _add(lhs, self)

    def __mul__(self, other: Union[Expr, int]) -> Expr:
        rhs = _coerce(other)
        if rhs is NotImplemented:
            return NotImplemented
        return _mul(self, rhs)

    def __rmul__(self, other: int) -> Expr:
        lhs = _coerce(other)
        if lhs is NotImplemented:
            return NotImplemented
        return _mul(lhs, self)

    # ---- Ordering (forces evaluation) -----------------------------------

    def __lt__(self, other: Union[Expr, int]) -> bool:
        return self.evaluate() < _coerce(other).evaluate()

    def __le__(self, other: Union[Expr, int]) -> bool:
        return self.evaluate() <= _coerce(other).evaluate()

    def __gt__(self, other: Union[Expr, int]) -> bool:
        return self.evaluate() > _coerce(other).evaluate()

    def __ge__(self, other: Union[Expr, int]) -> bool:
        return self.evaluate() >= _coerce(other).evaluate()

    # ---- Rendering -------------------------------------------------------

    def __str__(self) -> str:
        return self._to_string()

    @abc.abstractmethod
    def _to_string(self) -> str:
        ...


def _coerce(value: Union[Expr, int]) -> Expr:
    if isinstance(value, Expr):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return Constant(value)
    return NotImplemented


# ═══════════════════════════════════════════════════════════════════════════
# 2. LEAVES
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Constant(Expr):
    """An integer literal."""

    value: int

    @property
    def kind(self) -> ExprKind:
        return ExprKind.CONSTANT

    @property
    def is_literal(self) -> bool:
        return True

    @property
    def literal_value(self) -> Optional[int]:
        return self.value

    def _eval(self, lookup: Lookup) -> int:
        return self.value

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return self

    def _to_string(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class Zero(Expr):
    """The additive identity."""

    @property
    def kind(self) -> ExprKind:
        return ExprKind.ZERO

    @property
    def is_literal(self) -> bool:
        return True

    @property
    def literal_value(self) -> Optional[int]:
        return 0

    def _eval(self, lookup: Lookup) -> int:
        return 0

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return self

    def _to_string(self) -> str:
        return "0"


@dataclass(frozen=True, slots=True)
class One(Expr):
    """The multiplicative identity."""

    @property
    def kind(self) -> ExprKind:
        return ExprKind.ONE

    @property
    def is_literal(self) -> bool:
        return True

    @property
    def literal_value(self) -> Optional[int]:
        return 1

    def _eval(self, lookup: Lookup) -> int:
        return 1

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return self

    def _to_string(self) -> str:
        return "1"


ZERO = Zero()
ONE = One()


@dataclass(frozen=True, slots=True)
class Variable(Expr):
    """A free input, resolved only at evaluation time."""

    name: str

    @property
    def kind(self) -> ExprKind:
        return ExprKind.VARIABLE

    def _eval(self, lookup: Lookup) -> int:
        value = lookup(self.name)
        if value is None:
            raise UnboundVariableError(self.name)
        return value

    def strict_equal(self, other: Expr) -> bool:
        return isinstance(other, Variable) and other.name == self.name

    def _collect_free_vars(self, result: Set[str]) -> None:
        result.add(self.name)

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return mapping.get(self.name, self)

    def _to_string(self) -> str:
        return self.name


# ═══════════════════════════════════════════════════════════════════════════
# 3. COMPOUND NODES
# ═══════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Sum(Expr):
    left: Expr
    right: Expr

    @property
    def kind(self) -> ExprKind:
        return ExprKind.SUM

    @property
    def children(self) -> Tuple[Expr, ...]:
        return (self.left, self.right)

    def _eval(self, lookup: Lookup) -> int:
        return self.left._eval(lookup) + self.right._eval(lookup)

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return Sum(self.left._substitute(mapping), self.right._substitute(mapping))

    def _to_string(self) -> str:
        return f"({self.left} + {self.right})"


@dataclass(frozen=True, slots=True)
class Product(Expr):
    left: Expr
    right: Expr

    @property
    def kind(self) -> ExprKind:
        return ExprKind.PRODUCT

    @property
    def children(self) -> Tuple[Expr, ...]:
        return (self.left, self.right)

    def _eval(self, lookup: Lookup) -> int:
        return self.left._eval(lookup) * self.right._eval(lookup)

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return Product(self.left._substitute(mapping), self.right._substitute(mapping))

    def _to_string(self) -> str:
        return f"({self.left} * {self.right})"


@dataclass(frozen=True, slots=True)
class IfEqual(Expr):
    """``then`` when ``lhs = rhs``, otherwise ``otherwise``."""

    lhs: Expr
    rhs: Expr
    then: Expr
    otherwise: Expr

    @property
    def kind(self) -> ExprKind:
        return ExprKind.IF_EQUAL

    @property
    def children(self) -> Tuple[Expr, ...]:
        return (self.lhs, self.rhs, self.then, self.otherwise)

    def _eval(self, lookup: Lookup) -> int:
        if self.lhs._eval(lookup) == self.rhs._eval(lookup):
            return self.then._eval(lookup)
        return self.otherwise._eval(lookup)

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return IfEqual(*(c._substitute(mapping) for c in self.children))

    def _to_string(self) -> str:
        return f"If[{self.lhs} == {self.rhs}, {self.then}, {self.otherwise}]"


@dataclass(frozen=True, slots=True)
class IfLess(Expr):
    """``then`` when ``lhs < rhs``, otherwise ``otherwise``."""

    lhs: Expr
    rhs: Expr
    then: Expr
    otherwise: Expr

    @property
    def kind(self) -> ExprKind:
        return ExprKind.IF_LESS

    @property
    def children(self) -> Tuple[Expr, ...]:
        return (self.lhs, self.rhs, self.then, self.otherwise)

    def _eval(self, lookup: Lookup) -> int:
        if self.lhs._eval(lookup) < self.rhs._eval(lookup):
            return self.then._eval(lookup)
        return self.otherwise._eval(lookup)

    def _substitute(self, mapping: Mapping[str, Expr]) -> Expr:
        return IfLess(*(c._substitute(mapping) for c in self.children))

    def _to_string(self) -> str:
        return f"If[{self.lhs} < {self.rhs}, {self.then}, {self.otherwise}]"


Conditional = (IfEqual, IfLess)


# ═══════════════════════════════════════════════════════════════════════════
# 4. SMART CONSTRUCTORS FOR + AND ×
# ═══════════════════════════════════════════════════════════════════════════
#
#  These run on every ADD / MUL the machine executes, so they only apply
#  cheap local identities.  The heavy rewriting (and everything that needs
#  path conditions) lives in intcode.simplify.


def _is_zero(e: Expr) -> bool:
    return e.is_literal and e.literal_value == 0


def _is_one(e: Expr) -> bool:
    return e.is_literal and e.literal_value == 1


def _add(a: Expr, b: Expr) -> Expr:
    if _is_zero(a):
        return b
    if _is_zero(b):
        return a
    if a.is_literal and b.is_literal:
        return Constant(a.literal_value + b.literal_value)
    if isinstance(a, Sum):
        return _add(a.left, _add(a.right, b))
    if isinstance(a, IfLess) and b.is_literal:
        a, b = b, a
    if a.is_literal and isinstance(b, IfLess):
        return IfLess(b.lhs, b.rhs, _add(b.then, a), _add(b.otherwise, a))
    if a.is_literal and isinstance(b, Sum):
        if b.left.is_literal:
            return _add(Constant(a.literal_value + b.left.literal_value), b.right)
        return Sum(a, b)
    if (isinstance(a, IfLess) and isinstance(b, IfLess)
            and a.lhs.strict_equal(b.lhs) and a.rhs.strict_equal(b.rhs)):
        return IfLess(a.lhs, a.rhs, _add(a.then, b.then), _add(a.otherwise, b.otherwise))
    if (isinstance(b, Product) and b.right.is_literal
            and b.right.literal_value == -1 and a.strict_equal(b.left)):
        return ZERO
    return Sum(a, b)


def _mul(a: Expr, b: Expr) -> Expr:
    if _is_zero(a) or _is_zero(b):
        return ZERO
    if _is_one(a):
        return b
    if _is_one(b):
        return a
    if a.is_literal and b.is_literal:
        return Constant(a.literal_value * b.literal_value)
    if isinstance(a, Sum) and b.is_literal:
        a, b = b, a
    if a.is_literal and isinstance(b, Sum):
        return _add(_mul(a, b.left), _mul(a, b.right))
    if a.is_literal and isinstance(b, Product):
        if b.left.is_literal:
            return _mul(Constant(a.literal_value * b.left.literal_value), b.right)
        return Product(a, b)
    if isinstance(a, IfLess) and b.is_literal:
        a, b = b, a
    if a.is_literal and isinstance(b, IfLess):
        return IfLess(b.lhs, b.rhs, _mul(b.then, a), _mul(b.otherwise, a))
    if isinstance(a, Product):
        return _mul(a.left, _mul(a.right, b))
    if isinstance(a, IfLess) and isinstance(b, Variable):
        return IfLess(a.lhs, a.rhs, _mul(a.then, b), _mul(a.otherwise, b))
    return Product(a, b)


# ---------------------------------------------------------------------------
# Convenience constructors
# ---------------------------------------------------------------------------


def const(value: int, canonical: bool = False) -> Expr:
    """An integer literal; ``canonical=True`` gives ``ZERO`` / ``ONE`` for 0 and 1."""
    if canonical and value == 0:
        return ZERO
    if canonical and value == 1:
        return ONE
    return Constant(value)


def var(name: str) -> Variable:
    """A free variable."""
    return Variable(name)
