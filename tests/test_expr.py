# tests/test_expr.py
"""
Tests for symbolic expression nodes and their smart constructors.
"""

import pytest

from intcode import (
    ONE,
    ZERO,
    Constant,
    ExprKind,
    IfEqual,
    IfLess,
    Product,
    Sum,
    UnboundVariableError,
    Variable,
    const,
    var,
)

x, y, z = Variable("x"), Variable("y"), Variable("z")


class TestEvaluate:

    def test_literals(self):
        assert Constant(-4).evaluate() == -4
        assert ZERO.evaluate() == 0
        assert ONE.evaluate() == 1

    def test_mapping_bindings(self):
        e = Sum(Product(Constant(2), x), y)
        assert e.evaluate({"x": 3, "y": 4}) == 10

    def test_callable_bindings(self):
        e = Product(x, y)
        assert e.evaluate(lambda name: {"x": 6}.get(name, 1)) == 6

    def test_unbound_variable(self):
        with pytest.raises(UnboundVariableError) as exc_info:
            Sum(x, y).evaluate({"x": 1})
        assert exc_info.value.variable == "y"

    def test_untaken_branch_not_evaluated(self):
        e = IfLess(Constant(1), Constant(2), Constant(7), z)
        assert e.evaluate() == 7
        assert IfEqual(Constant(1), Constant(2), z, Constant(8)).evaluate() == 8

    def test_try_evaluate(self):
        assert x.try_evaluate() is None
        assert x.try_evaluate({"x": 2}) == 2

    def test_ordering_forces_evaluation(self):
        assert Constant(3) < Constant(4)
        assert Constant(4) >= 4
        with pytest.raises(UnboundVariableError):
            _ = x < 3


class TestStructure:

    def test_syntactic_equality(self):
        assert ZERO != Constant(0)
        assert Sum(x, y) == Sum(Variable("x"), Variable("y"))
        assert len({Sum(x, y), Sum(x, y), Sum(y, x)}) == 2

    def test_strict_equal(self):
        assert ZERO.strict_equal(Constant(0))
        assert Constant(1).strict_equal(ONE)
        assert not ONE.strict_equal(ZERO)
        assert Sum(x, ZERO).strict_equal(Sum(x, Constant(0)))
        assert not Sum(x, y).strict_equal(Sum(y, x))
        assert not x.strict_equal(Constant(0))

    def test_kinds(self):
        assert Constant(5).kind is ExprKind.CONSTANT
        assert x.kind is ExprKind.VARIABLE
        assert IfLess(x, y, x, y).kind is ExprKind.IF_LESS

    def test_free_variables(self):
        e = IfLess(x, Constant(2), Sum(y, ONE), ZERO)
        assert e.free_variables == frozenset({"x", "y"})
        assert Constant(3).free_variables == frozenset()

    def test_size_and_depth(self):
        e = Sum(x, Product(y, z))
        assert e.size() == 5
        assert e.depth() == 3
        assert x.depth() == 1

    def test_substitute(self):
        e = Sum(x, Product(y, x))
        replaced = e.substitute({"x": 2})
        assert replaced == Sum(Constant(2), Product(y, Constant(2)))
        assert e.substitute({"q": 1}) == e

    def test_str(self):
        e = IfLess(x, Constant(5), Sum(ONE, y), ZERO)
        assert str(e) == "If[x < 5, (1 + y), 0]"
        assert str(IfEqual(x, y, ONE, ZERO)) == "If[x == y, 1, 0]"
        assert str(Product(Constant(-1), x)) == "(-1 * x)"

    def test_helpers(self):
        assert const(3) == Constant(3)
        assert const(0) == Constant(0)
        assert const(0, canonical=True) is ZERO
        assert const(1, canonical=True) is ONE
        assert var("q") == Variable("q")


class TestSmartConstructors:

    def test_identities(self):
        assert x + 0 == x
        assert 0 + x == x
        assert x * 1 == x
        assert x * 0 == ZERO
        assert ZERO * x == ZERO

    def test_constant_folding(self):
        assert Constant(2) + Constant(3) == Constant(5)
        assert Constant(2) * Constant(3) == Constant(6)
        assert ONE + ONE == Constant(2)

    def test_int_operands(self):
        assert 3 + x == Sum(Constant(3), x)
        assert x * 2 == Product(x, Constant(2))

    def test_non_numbers_rejected(self):
        with pytest.raises(TypeError):
            _ = x + 1.5
        with pytest.raises(TypeError):
            _ = "a" * x

    def test_reassociation(self):
        assert (x + y) + z == Sum(x, Sum(y, z))

    def test_literal_merges_into_sum(self):
        assert Constant(2) + Sum(Constant(3), x) == Sum(Constant(5), x)

    def test_cancellation(self):
        assert x + x * -1 == ZERO

    def test_literal_through_if_less(self):
        cond = IfLess(x, y, ONE, ZERO)
        assert cond + 5 == IfLess(x, y, Constant(6), Constant(5))
        assert 2 * cond == IfLess(x, y, Constant(2), ZERO)

    def test_merge_if_less_with_same_test(self):
        a = IfLess(x, y, Constant(2), Constant(3))
        b = IfLess(x, y, Constant(10), Constant(20))
        assert a + b == IfLess(x, y, Constant(12), Constant(23))

    def test_distribute_literal_over_sum(self):
        e = Constant(3) * Sum(x, y)
        assert e == Sum(Product(Constant(3), x), Product(Constant(3), y))

    def test_literal_folds_into_product(self):
        assert Constant(3) * Product(Constant(2), x) == Product(Constant(6), x)

    @pytest.mark.parametrize("bindings", [
        {"x": 0, "y": 0, "z": 0},
        {"x": 3, "y": -2, "z": 7},
        {"x": -5, "y": 11, "z": 2},
    ])
    def test_constructors_preserve_value(self, bindings):
        cond = IfLess(x, y, Constant(4), z)
        e = (cond + 3) * 2 + (x + y) * (z + 1) + cond * x
        vx, vy, vz = bindings["x"], bindings["y"], bindings["z"]
        c = 4 if vx < vy else vz
        assert e.evaluate(bindings) == (c + 3) * 2 + (vx + vy) * (vz + 1) + c * vx
