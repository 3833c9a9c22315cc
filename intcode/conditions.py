"""
intcode/conditions.py
═════════════════════

Path conditions and the persistent list that carries them through a
simplification.

While :func:`intcode.simplify.simplify` walks a conditional it simplifies
each branch under the fact implied by taking that branch.  Those facts are
collected in a :class:`ConditionList`: an immutable singly linked list that
grows only by prepending.  Both branches of a conditional prepend onto
the *same* list, so they share its tail and neither can see the other's
fact.

    ConditionList.EMPTY
          ▲
          │ prepend(x < y)
      [x < y] ◄──────────── prepend(x = 3) ─── [x = 3]
          ▲
          └───────────────── prepend(x ≠ 3) ─── [x ≠ 3]

Ownership is ordinary Python reference counting: a node stays alive while
any list still reaches it.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator, Optional

from intcode.expr import Bindings, Expr


class ConditionKind(enum.Enum):
    """Relation asserted between the two operands of a condition."""

    LESS_THAN = "<"
    EQUAL = "=="
    NOT_EQUAL = "!="
    NOT_LESS = ">="


_NEGATION = {
    ConditionKind.LESS_THAN: ConditionKind.NOT_LESS,
    ConditionKind.NOT_LESS: ConditionKind.LESS_THAN,
    ConditionKind.EQUAL: ConditionKind.NOT_EQUAL,
    ConditionKind.NOT_EQUAL: ConditionKind.EQUAL,
}


@dataclass(frozen=True, slots=True)
class Condition:
    """A fact ``lhs <kind> rhs`` assumed true on the current branch."""

    kind: ConditionKind
    lhs: Expr
    rhs: Expr

    @classmethod
    def less_than(cls, lhs: Expr, rhs: Expr) -> Condition:
        return cls(ConditionKind.LESS_THAN, lhs, rhs)

    @classmethod
    def not_less(cls, lhs: Expr, rhs: Expr) -> Condition:
        return cls(ConditionKind.NOT_LESS, lhs, rhs)

    @classmethod
    def equal(cls, lhs: Expr, rhs: Expr) -> Condition:
        return cls(ConditionKind.EQUAL, lhs, rhs)

    @classmethod
    def not_equal(cls, lhs: Expr, rhs: Expr) -> Condition:
        return cls(ConditionKind.NOT_EQUAL, lhs, rhs)

    def negated(self) -> Condition:
        """The condition holding exactly when this one does not."""
        return Condition(_NEGATION[self.kind], self.lhs, self.rhs)

    def matches(self, lhs: Expr, rhs: Expr) -> bool:
        """Are ``lhs`` and ``rhs`` strictly equal to this condition's operands?"""
        return self.lhs.strict_equal(lhs) and self.rhs.strict_equal(rhs)

    def holds(self, bindings: Bindings = None) -> bool:
        """Evaluate the condition; raises on an unbound variable."""
        a = self.lhs.evaluate(bindings)
        b = self.rhs.evaluate(bindings)
        if self.kind is ConditionKind.LESS_THAN:
            return a < b
        if self.kind is ConditionKind.NOT_LESS:
            return a >= b
        if self.kind is ConditionKind.EQUAL:
            return a == b
        return a != b

    def __str__(self) -> str:
        return f"{self.lhs} {self.kind.value} {self.rhs}"


# ---------------------------------------------------------------------------
# Persistent list
# ---------------------------------------------------------------------------


class _Node:
    __slots__ = ("elem", "next")

    def __init__(self, elem: Condition, next: Optional[_Node]) -> None:
        self.elem = elem
        self.next = next


class ConditionList:
    """Immutable stack of conditions with O(1) share-on-prepend.

    Iteration yields conditions from the most recently prepended to the
    oldest, and every call to :meth:`iter` (or ``iter(lst)``) starts from
    the head again.
    """

    __slots__ = ("_head", "_len")

    EMPTY: ConditionList

    def __init__(self) -> None:
        self._head: Optional[_Node] = None
        self._len = 0

    @classmethod
    def of(cls, *conditions: Condition) -> ConditionList:
        """Build a list whose newest element is ``conditions[0]``."""
        result = cls.EMPTY
        for cond in reversed(conditions):
            result = result.prepend(cond)
        return result

    def prepend(self, condition: Condition) -> ConditionList:
        """Return a new list with ``condition`` in front of this one."""
        result = ConditionList()
        result._head = _Node(condition, self._head)
        result._len = self._len + 1
        return result

    def iter(self) -> Iterator[Condition]:
        node = self._head
        while node is not None:
            yield node.elem
            node = node.next

    def __iter__(self) -> Iterator[Condition]:
        return self.iter()

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._head is not None

    def holds(self, bindings: Bindings = None) -> bool:
        """Do all conditions hold under ``bindings``?"""
        return all(cond.holds(bindings) for cond in self)

    def __repr__(self) -> str:
        if self._head is None:
            return "ConditionList()"
        return "ConditionList(" + " ∧ ".join(str(c) for c in self) + ")"


ConditionList.EMPTY = ConditionList()
EMPTY = ConditionList.EMPTY
