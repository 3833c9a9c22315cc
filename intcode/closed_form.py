"""
intcode/closed_form.py
══════════════════════

Run a program symbolically and reduce its output to a closed form.

A program whose control flow does not depend on its inputs can be
executed over :data:`~intcode.numeric.SYMBOLIC`: every input becomes a
free :class:`~intcode.expr.Variable`, and each output is an expression
over those variables.  After :func:`~intcode.simplify.simplify` that
expression can be evaluated for many inputs far faster than re-running
the machine.

Example
───────
::

    from intcode.closed_form import closed_form

    f = closed_form(program, ["x", "y"])
    hits = sum(f(x=x, y=y) for x in range(50) for y in range(50))
"""

from __future__ import annotations

import logging
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Sequence

from intcode.conditions import EMPTY, ConditionList
from intcode.errors import InputStarvationError
from intcode.expr import Expr, Variable
from intcode.machine import AwaitingInput, Machine, Output
from intcode.numeric import SYMBOLIC
from intcode.simplify import simplify

_log = logging.getLogger(__name__)


def symbolic_outputs(
    image: Iterable[Any],
    variables: Sequence[str],
    *,
    max_steps: Optional[int] = None,
) -> List[Expr]:
    """Run ``image`` over the symbolic domain and return every output.

    The n-th input request is answered with ``Variable(variables[n])``.

    Raises
    ------
    InputStarvationError
        The program asked for more inputs than ``variables`` names.
    UnboundVariableError
        A jump or address depended on an input.
    """
    machine: Machine[Expr] = Machine(image, SYMBOLIC)
    feed = iter(variables)
    outputs: List[Expr] = []
    while True:
        result = machine.execute_until_input(max_steps=max_steps)
        if isinstance(result, Output):
            outputs.append(result.value)
        elif isinstance(result, AwaitingInput):
            name = next(feed, None)
            if name is None:
                raise InputStarvationError(result.address)
            machine.set_cell(result.address, Variable(name))
        else:
            break
    _log.debug("symbolic run: %d steps, %d outputs", machine.steps, len(outputs))
    return outputs


class ClosedForm:
    """A simplified output expression, callable with keyword bindings::

        f = ClosedForm(expr)
        f(x=3, y=4)
    """

    __slots__ = ("expr", "_variables")

    def __init__(self, expr: Expr) -> None:
        self.expr = expr
        self._variables = expr.free_variables

    @property
    def variables(self) -> FrozenSet[str]:
        return self._variables

    def evaluate(self, bindings: Mapping[str, int]) -> int:
        return self.expr.evaluate(bindings)

    def __call__(self, **bindings: int) -> int:
        return self.expr.evaluate(bindings)

    def __str__(self) -> str:
        return str(self.expr)

    def __repr__(self) -> str:
        return f"ClosedForm({self.expr})"


def closed_form(
    image: Iterable[Any],
    variables: Sequence[str],
    conditions: ConditionList = EMPTY,
    *,
    max_steps: Optional[int] = None,
) -> ClosedForm:
    """The single output of ``image``, simplified under ``conditions``.

    Parameters
    ----------
    image : iterable of int
        Program image.
    variables : sequence of str
        Names given to the inputs, in the order the program reads them.
    conditions : ConditionList
        Facts the caller guarantees about the inputs (e.g. ``0 < x``).

    Raises
    ------
    ValueError
        The program emitted no output, or more than one.
    """
    outputs = symbolic_outputs(image, variables, max_steps=max_steps)
    if len(outputs) != 1:
        raise ValueError(f"expected exactly one output, got {len(outputs)}")
    return ClosedForm(simplify(outputs[0], conditions))
