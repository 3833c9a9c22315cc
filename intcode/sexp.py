"""
intcode/sexp.py
═══════════════

S-expression text form for expressions and condition lists.

Used for test fixtures, log output and saving closed forms.  Parsing and
printing go through the ``sexpdata`` library; this module only maps
between its nested lists / symbols and :mod:`intcode.expr` nodes.

Grammar
───────
::

    expr  ::= INT                       Constant
            | zero | one                Zero / One
            | NAME                      Variable (identifier-like names)
            | (var NAME-OR-STRING)      Variable (any name)
            | (+ expr expr)             Sum
            | (* expr expr)             Product
            | (if= expr expr expr expr) IfEqual
            | (if< expr expr expr expr) IfLess

    conds ::= ( cond* )                 newest condition first
    cond  ::= (< expr expr) | (>= expr expr) | (== expr expr) | (!= expr expr)

``dumps`` writes a variable bare only when it reads back unambiguously;
anything else is written as ``(var "name")``.
"""

from __future__ import annotations

import re
from typing import Any, Callable, Dict, List

import sexpdata
from sexpdata import Symbol

from intcode.conditions import Condition, ConditionKind, ConditionList
from intcode.errors import ExpressionSyntaxError
from intcode.expr import (
    ONE,
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

Sexp = Any  # Union[list, Symbol, str, int]

_RESERVED = frozenset({"zero", "one", "var", "+", "*", "if=", "if<"})
_IDENT = re.compile(r"[A-Za-z_][A-Za-z0-9_]*\Z")

_BINARY: Dict[str, Callable[[Expr, Expr], Expr]] = {
    "+": Sum,
    "*": Product,
}
_TERNARY: Dict[str, type] = {
    "if=": IfEqual,
    "if<": IfLess,
}


def _bare_name(name: str) -> bool:
    if name in _RESERVED or not _IDENT.match(name):
        return False
    # sexpdata reads "nan", "inf", "infinity" as floats
    try:
        float(name)
    except ValueError:
        return True
    return False


# ═══════════════════════════════════════════════════════════════════════════
# WRITING
# ═══════════════════════════════════════════════════════════════════════════


def to_sexp(expr: Expr) -> Sexp:
    """``expr`` as nested lists of ``Symbol`` / ``int`` / ``str``."""
    if isinstance(expr, Zero):
        return Symbol("zero")
    if isinstance(expr, One):
        return Symbol("one")
    if isinstance(expr, Constant):
        return expr.value
    if isinstance(expr, Variable):
        if _bare_name(expr.name):
            return Symbol(expr.name)
        return [Symbol("var"), expr.name]
    if isinstance(expr, Sum):
        return [Symbol("+"), to_sexp(expr.left), to_sexp(expr.right)]
    if isinstance(expr, Product):
        return [Symbol("*"), to_sexp(expr.left), to_sexp(expr.right)]
    if isinstance(expr, IfEqual):
        return [Symbol("if=")] + [to_sexp(c) for c in expr.children]
    if isinstance(expr, IfLess):
        return [Symbol("if<")] + [to_sexp(c) for c in expr.children]
    raise TypeError(f"not an expression node: {expr!r}")


def dumps(expr: Expr) -> str:
    """Render ``expr`` as S-expression text."""
    return sexpdata.dumps(to_sexp(expr))


def dumps_conditions(conditions: ConditionList) -> str:
    """Render a condition list, newest condition first."""
    forms = [
        [Symbol(cond.kind.value), to_sexp(cond.lhs), to_sexp(cond.rhs)]
        for cond in conditions
    ]
    return sexpdata.dumps(forms)


# ═══════════════════════════════════════════════════════════════════════════
# READING
# ═══════════════════════════════════════════════════════════════════════════


def _read(text: str) -> Sexp:
    # keep "nil" and "t" as plain symbols
    try:
        return sexpdata.loads(text, nil=None, true=None, false=None)
    except Exception as exc:
        raise ExpressionSyntaxError(f"S-expression syntax error: {exc}", text) from exc


def _head(form: List[Sexp]) -> str:
    if not form or not isinstance(form[0], Symbol):
        raise ExpressionSyntaxError(f"expected an operator symbol in {form!r}")
    return form[0].value()


def _arity(form: List[Sexp], tag: str, n: int) -> None:
    if len(form) != n + 1:
        raise ExpressionSyntaxError(
            f"({tag} ...) takes {n} operands, got {len(form) - 1}"
        )


def from_sexp(form: Sexp) -> Expr:
    """Build an expression from parsed S-expression data."""
    if isinstance(form, Symbol):
        name = form.value()
        if name == "zero":
            return ZERO
        if name == "one":
            return ONE
        if name in _RESERVED:
            raise ExpressionSyntaxError(f"operator {name!r} used as a value")
        return Variable(name)
    if isinstance(form, bool) or isinstance(form, float):
        raise ExpressionSyntaxError(f"expected an integer, got {form!r}")
    if isinstance(form, int):
        return Constant(form)
    if not isinstance(form, list):
        raise ExpressionSyntaxError(f"unexpected atom {form!r}")

    tag = _head(form)
    if tag == "var":
        _arity(form, tag, 1)
        name = form[1]
        if isinstance(name, Symbol):
            return Variable(name.value())
        if isinstance(name, str):
            return Variable(name)
        raise ExpressionSyntaxError(f"(var ...) needs a name, got {name!r}")
    if tag in _BINARY:
        _arity(form, tag, 2)
        return _BINARY[tag](from_sexp(form[1]), from_sexp(form[2]))
    if tag in _TERNARY:
        _arity(form, tag, 4)
        return _TERNARY[tag](*(from_sexp(f) for f in form[1:]))
    raise ExpressionSyntaxError(f"unknown operator {tag!r}")


def loads(text: str) -> Expr:
    """Parse one expression.

    Nodes are built directly, not through ``+`` / ``*``, so the tree read
    back is the tree that was written.

    Raises
    ------
    ExpressionSyntaxError
        Unbalanced parentheses, unknown operators, wrong operand counts or
        non-integer atoms.
    """
    form = _read(text)
    try:
        return from_sexp(form)
    except ExpressionSyntaxError as exc:
        raise ExpressionSyntaxError(str(exc), text) from None


_CONDITION_KINDS = {kind.value: kind for kind in ConditionKind}


def loads_conditions(text: str) -> ConditionList:
    """Parse a condition list written by :func:`dumps_conditions`."""
    forms = _read(text)
    if not isinstance(forms, list):
        raise ExpressionSyntaxError("expected a list of conditions", text)
    conditions = []
    try:
        for form in forms:
            if not isinstance(form, list):
                raise ExpressionSyntaxError(f"expected a condition, got {form!r}")
            tag = _head(form)
            kind = _CONDITION_KINDS.get(tag)
            if kind is None:
                raise ExpressionSyntaxError(f"unknown relation {tag!r}")
            _arity(form, tag, 2)
            conditions.append(Condition(kind, from_sexp(form[1]), from_sexp(form[2])))
    except ExpressionSyntaxError as exc:
        raise ExpressionSyntaxError(str(exc), text) from None
    return ConditionList.of(*conditions)
