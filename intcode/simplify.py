"""
intcode/simplify.py
═══════════════════

Algebraic simplification of symbolic machine outputs under path conditions.

``simplify(expr, conditions)`` returns an expression that evaluates to the
same value as ``expr`` for every binding under which all of ``conditions``
hold, but is (usually) much smaller.

Rules
─────

Leaves
    ``Constant``, ``Zero``, ``One`` and ``Variable`` are returned as-is.

``Sum`` (after simplifying both sides)
    1. ``0 + x → x``, ``x + 0 → x``
    2. constant folding
    3. constants float left: ``x + k → k + x``
    4. ``k + (a + b) → (k + a) + b``, re-associate ``(a + b) + c → a + (b + c)``
    5. ``If[c, a, b] + k → If[c, a + k, b + k]``

``Product`` (after simplifying both sides)
    1. ``0 · x → 0``, ``1 · x → x``
    2. constant folding, constants float left
    3. ``k · (a + b) → k·a + k·b``, ``k · (a · b) → (k · a) · b``
    4. ``If[c, a, b] · x → If[c, a · x, b · x]``

``IfEqual`` / ``IfLess``
    Simplify the compared operands, then resolve the branch statically if
    the operands are literals, are the same tree, or match a condition
    already on the list.  Otherwise simplify the two branches under the
    list extended with the fact each branch implies and rebuild.  A
    rebuilt conditional whose branches are identical collapses.

Pushing conditionals outward through ``+`` and ``·`` is what turns a
program's control flow into a flat decision tree over its inputs.  Each
rebuilt conditional doubles the work below it, so the worst case is
exponential in the number of unresolved conditionals; callers simplify once
and evaluate the result many times.

Condition lookup uses :meth:`Expr.strict_equal`.  Facts that are symmetric
(``=``, ``≠``, and ``<`` read backwards as "not less") are also matched with
the operands swapped.
"""

from __future__ import annotations

import logging
from typing import Callable, Tuple, Type, Union

from intcode.conditions import EMPTY, Condition, ConditionKind, ConditionList
from intcode.expr import (
    ZERO,
    Constant,
    Expr,
    IfEqual,
    IfLess,
    One,
    Product,
    Sum,
    Variable,
    Zero,
)

_log = logging.getLogger(__name__)

IfNode = Union[IfEqual, IfLess]
_Combine = Callable[[Expr, ConditionList], Expr]


def simplify(expr: Expr, conditions: ConditionList = EMPTY) -> Expr:
    """Simplify ``expr`` assuming every condition in ``conditions`` holds.

    Parameters
    ----------
    expr : Expr
        Expression to reduce.
    conditions : ConditionList
        Facts known to hold; the empty list by default.

    Returns
    -------
    Expr
        A new expression, equivalent to ``expr`` under ``conditions``.
    """
    result = _simplify(expr, conditions)
    if _log.isEnabledFor(logging.DEBUG):
        _log.debug(
            "simplified %d nodes to %d under %d conditions",
            expr.size(), result.size(), len(conditions),
        )
    return result


def _simplify(expr: Expr, conds: ConditionList) -> Expr:
    if isinstance(expr, (Constant, Zero, One, Variable)):
        return expr
    if isinstance(expr, Sum):
        return _sum(_simplify(expr.left, conds), _simplify(expr.right, conds), conds)
    if isinstance(expr, Product):
        return _product(_simplify(expr.left, conds), _simplify(expr.right, conds), conds)
    if isinstance(expr, IfEqual):
        return _if_equal(expr, conds)
    if isinstance(expr, IfLess):
        return _if_less(expr, conds)
    raise TypeError(f"not an expression node: {expr!r}")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _is_zero(e: Expr) -> bool:
    return e.is_literal and e.literal_value == 0


def _is_one(e: Expr) -> bool:
    return e.is_literal and e.literal_value == 1


def _branch_facts(node: IfNode) -> Tuple[Condition, Condition]:
    """Conditions implied by taking the ``then`` / ``otherwise`` branch."""
    if isinstance(node, IfEqual):
        return (Condition.equal(node.lhs, node.rhs),
                Condition.not_equal(node.lhs, node.rhs))
    return (Condition.less_than(node.lhs, node.rhs),
            Condition.not_less(node.lhs, node.rhs))


def _rebuild(cls: Type[IfNode], lhs: Expr, rhs: Expr, then: Expr, otherwise: Expr) -> Expr:
    if then.strict_equal(otherwise):
        return then
    return cls(lhs, rhs, then, otherwise)


def _push(node: IfNode, combine: _Combine, conds: ConditionList) -> Expr:
    """Apply ``combine`` inside both branches of an already-simplified conditional."""
    on_then, on_otherwise = _branch_facts(node)
    return _rebuild(
        type(node),
        node.lhs,
        node.rhs,
        combine(node.then, conds.prepend(on_then)),
        combine(node.otherwise, conds.prepend(on_otherwise)),
    )


# ---------------------------------------------------------------------------
# Arithmetic nodes
# ---------------------------------------------------------------------------
#
#  _sum and _product take children that are already simplified under
#  ``conds``; they never re-simplify them.


def _sum(l: Expr, r: Expr, conds: ConditionList) -> Expr:
    if _is_zero(l):
        return r
    if _is_zero(r):
        return l
    if l.is_literal and r.is_literal:
        return Constant(l.literal_value + r.literal_value)
    if l.is_literal and isinstance(r, Variable):
        return Sum(l, r)
    if isinstance(l, Variable) and not isinstance(r, Variable):
        return Sum(r, l)
    if l.is_literal and isinstance(r, Sum):
        return Sum(_sum(l, r.left, conds), r.right)
    if l.is_literal and isinstance(r, Product):
        return Sum(l, r)
    if isinstance(l, Sum):
        return Sum(l.left, _sum(l.right, r, conds))
    if isinstance(l, (IfEqual, IfLess)) and r.is_literal:
        return _push(l, lambda branch, c: _sum(branch, r, c), conds)
    if l.is_literal and isinstance(r, (IfEqual, IfLess)):
        return _push(r, lambda branch, c: _sum(branch, l, c), conds)
    return Sum(l, r)


def _product(l: Expr, r: Expr, conds: ConditionList) -> Expr:
    if _is_zero(l) or _is_zero(r):
        return ZERO
    if _is_one(l):
        return r
    if _is_one(r):
        return l
    if l.is_literal and r.is_literal:
        return Constant(l.literal_value * r.literal_value)
    if l.is_literal and isinstance(r, Variable):
        return Product(l, r)
    if r.is_literal:
        return _product(r, l, conds)
    if l.is_literal and isinstance(r, Sum):
        return _sum(_product(l, r.left, conds), _product(l, r.right, conds), conds)
    if isinstance(l, Variable) and isinstance(r, Variable):
        return Product(l, r)
    if l.is_literal and isinstance(r, Product):
        return Product(_product(l, r.left, conds), r.right)
    if isinstance(l, (IfEqual, IfLess)):
        return _push(l, lambda branch, c: _product(branch, r, c), conds)
    if isinstance(r, (IfEqual, IfLess)):
        return _push(r, lambda branch, c: _product(branch, l, c), conds)
    return Product(l, r)


# ---------------------------------------------------------------------------
# Conditional nodes
# ---------------------------------------------------------------------------


def _if_equal(node: IfEqual, conds: ConditionList) -> Expr:
    a = _simplify(node.lhs, conds)
    b = _simplify(node.rhs, conds)

    if a.is_literal and b.is_literal:
        taken = node.then if a.literal_value == b.literal_value else node.otherwise
        return _simplify(taken, conds)
    if a.strict_equal(b):
        return _simplify(node.then, conds)

    for cond in conds:
        if not (cond.matches(a, b) or cond.matches(b, a)):
            continue
        if cond.kind is ConditionKind.EQUAL:
            return _simplify(node.then, conds)
        if cond.kind in (ConditionKind.NOT_EQUAL, ConditionKind.LESS_THAN):
            return _simplify(node.otherwise, conds)

    then = _simplify(node.then, conds.prepend(Condition.equal(a, b)))
    otherwise = _simplify(node.otherwise, conds.prepend(Condition.not_equal(a, b)))
    return _rebuild(IfEqual, a, b, then, otherwise)


def _if_less(node: IfLess, conds: ConditionList) -> Expr:
    a = _simplify(node.lhs, conds)
    b = _simplify(node.rhs, conds)

    if a.is_literal and b.is_literal:
        taken = node.then if a.literal_value < b.literal_value else node.otherwise
        return _simplify(taken, conds)
    if a.strict_equal(b):
        return _simplify(node.otherwise, conds)

    for cond in conds:
        if cond.matches(a, b):
            if cond.kind is ConditionKind.LESS_THAN:
                return _simplify(node.then, conds)
            if cond.kind in (ConditionKind.NOT_LESS, ConditionKind.EQUAL):
                return _simplify(node.otherwise, conds)
        elif cond.matches(b, a):
            if cond.kind in (ConditionKind.LESS_THAN, ConditionKind.EQUAL):
                return _simplify(node.otherwise, conds)

    then = _simplify(node.then, conds.prepend(Condition.less_than(a, b)))
    otherwise = _simplify(node.otherwise, conds.prepend(Condition.not_less(a, b)))
    return _rebuild(IfLess, a, b, then, otherwise)
