# tests/test_closed_form.py
"""
Tests for the symbolic driver: symbolic run, closed form, and agreement
with concrete execution.
"""

import pytest

from intcode import (
    ZERO,
    ClosedForm,
    Condition,
    ConditionList,
    InputStarvationError,
    Sum,
    UnboundVariableError,
    Variable,
    closed_form,
    symbolic_outputs,
)
from tests.conftest import (
    BOUNDARY,
    COMPARE_TO_EIGHT,
    boundary_reference,
    find_upper_boundary,
    run,
)

POSITIVE = ConditionList.of(
    Condition.less_than(ZERO, Variable("y")),
    Condition.less_than(ZERO, Variable("x")),
)


class TestSymbolicOutputs:

    def test_sum_of_inputs(self):
        image = [3, 0, 3, 1, 1, 0, 1, 2, 4, 2, 99]
        assert symbolic_outputs(image, ["x", "y"]) == [Sum(Variable("x"), Variable("y"))]

    def test_runs_out_of_names(self):
        with pytest.raises(InputStarvationError):
            symbolic_outputs([3, 0, 3, 1, 99], ["x"])

    def test_input_dependent_jump(self):
        with pytest.raises(UnboundVariableError):
            symbolic_outputs(COMPARE_TO_EIGHT, ["x"])

    def test_no_inputs(self):
        assert [e.evaluate() for e in symbolic_outputs([104, 5, 104, 6, 99], [])] == [5, 6]


class TestClosedForm:

    def test_requires_single_output(self):
        with pytest.raises(ValueError):
            closed_form([104, 1, 104, 2, 99], [])
        with pytest.raises(ValueError):
            closed_form([99], [])

    def test_wrapper(self):
        f = closed_form(BOUNDARY, ["x", "y"])
        assert isinstance(f, ClosedForm)
        assert f.variables == frozenset({"x", "y"})
        assert f(x=9, y=3) == 1
        assert f.evaluate({"x": 8, "y": 3}) == 0
        assert "x" in str(f)

    def test_agrees_with_concrete_execution(self):
        f = closed_form(BOUNDARY, ["x", "y"])
        for x in range(-3, 25):
            for y in range(-3, 12):
                assert f(x=x, y=y) == run(BOUNDARY, [x, y])[0] == boundary_reference(x, y)

    def test_agrees_under_conditions(self):
        f = closed_form(BOUNDARY, ["x", "y"], POSITIVE)
        for x in range(1, 25):
            for y in range(1, 12):
                assert f(x=x, y=y) == run(BOUNDARY, [x, y])[0]

    def test_simplified_form_is_not_larger(self):
        raw = symbolic_outputs(BOUNDARY, ["x", "y"])[0]
        f = closed_form(BOUNDARY, ["x", "y"], POSITIVE)
        assert f.expr.size() <= raw.size()


class TestBoundarySearch:

    def test_boundary_on_closed_form_matches_direct_execution(self):
        f = closed_form(BOUNDARY, ["x", "y"], POSITIVE)

        def by_closed_form(y):
            return f(x=40, y=y) == 1

        def by_execution(y):
            return run(BOUNDARY, [40, y]) == [1]

        # 40 >= 2*y + 3 holds up to y = 18
        assert find_upper_boundary(0, by_closed_form) == 19
        assert find_upper_boundary(0, by_execution) == 19

    @pytest.mark.parametrize("x", [5, 17, 100, 1001])
    def test_boundary_tracks_reference(self, x):
        f = closed_form(BOUNDARY, ["x", "y"])
        found = find_upper_boundary(0, lambda y: f(x=x, y=y) == 1)
        assert found == (x - 3) // 2 + 1

    def test_boundary_with_nothing_true(self):
        assert find_upper_boundary(0, lambda n: False) == 1
