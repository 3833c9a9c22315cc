# tests/test_conditions.py
"""
Tests for path conditions and the persistent condition list.
"""

import pytest

from intcode import (
    EMPTY,
    ZERO,
    Condition,
    ConditionKind,
    ConditionList,
    Constant,
    UnboundVariableError,
    Variable,
)

x, y = Variable("x"), Variable("y")


class TestCondition:

    def test_constructors(self):
        assert Condition.less_than(x, y).kind is ConditionKind.LESS_THAN
        assert Condition.not_less(x, y).kind is ConditionKind.NOT_LESS
        assert Condition.equal(x, y).kind is ConditionKind.EQUAL
        assert Condition.not_equal(x, y).kind is ConditionKind.NOT_EQUAL

    def test_negation_round_trips(self):
        for cond in (Condition.less_than(x, y), Condition.equal(x, y)):
            assert cond.negated() != cond
            assert cond.negated().negated() == cond

    @pytest.mark.parametrize("kind,a,b,expected", [
        (ConditionKind.LESS_THAN, 1, 2, True),
        (ConditionKind.LESS_THAN, 2, 2, False),
        (ConditionKind.NOT_LESS, 2, 2, True),
        (ConditionKind.EQUAL, 3, 3, True),
        (ConditionKind.NOT_EQUAL, 3, 3, False),
    ])
    def test_holds(self, kind, a, b, expected):
        assert Condition(kind, x, y).holds({"x": a, "y": b}) is expected

    def test_holds_needs_bindings(self):
        with pytest.raises(UnboundVariableError):
            Condition.less_than(x, y).holds({"x": 1})

    def test_matches_uses_strict_equality(self):
        cond = Condition.less_than(ZERO, y)
        assert cond.matches(Constant(0), y)
        assert not cond.matches(y, ZERO)

    def test_str(self):
        assert str(Condition.not_equal(x, Constant(3))) == "x != 3"


class TestConditionList:

    def test_empty(self):
        assert len(EMPTY) == 0
        assert not EMPTY
        assert list(EMPTY) == []
        assert ConditionList.EMPTY is EMPTY
        assert repr(EMPTY) == "ConditionList()"

    def test_prepend_shares_tail(self):
        c1 = Condition.less_than(ZERO, x)
        c2 = Condition.equal(y, Constant(3))
        c3 = Condition.not_equal(y, Constant(3))

        base = EMPTY.prepend(c1)
        left = base.prepend(c2)
        right = base.prepend(c3)

        assert list(base) == [c1]
        assert list(left) == [c2, c1]
        assert list(right) == [c3, c1]
        assert len(left) == 2
        assert left._head.next is right._head.next

    def test_of_puts_first_argument_newest(self):
        c1 = Condition.less_than(ZERO, x)
        c2 = Condition.less_than(ZERO, y)
        assert list(ConditionList.of(c2, c1)) == [c2, c1]
        assert ConditionList.of() is EMPTY

    def test_iteration_restarts(self):
        lst = ConditionList.of(Condition.equal(x, y), Condition.less_than(x, y))
        assert list(lst.iter()) == list(lst.iter())
        assert len(list(lst)) == 2

    def test_holds_all(self):
        lst = ConditionList.of(Condition.less_than(ZERO, x), Condition.less_than(x, y))
        assert lst.holds({"x": 1, "y": 2})
        assert not lst.holds({"x": 1, "y": 1})
        assert EMPTY.holds()
