"""Tests for the formula evaluator."""

import pytest

from form_builder.engine.formula import (
    BinaryOp,
    Identifier,
    Literal,
    UnaryOp,
    evaluate,
    parse,
    referenced_identifiers,
)
from form_builder.exceptions import EvaluationError


class TestParse:
    """Tests for formula parsing."""

    def test_precedence(self):
        """Test multiplication binds tighter than addition."""
        assert parse("1 + 2 * x") == BinaryOp(
            "+", Literal(1.0), BinaryOp("*", Literal(2.0), Identifier("x"))
        )

    def test_left_associativity(self):
        """Test same-precedence operators group to the left."""
        assert parse("a - b - c") == BinaryOp(
            "-", BinaryOp("-", Identifier("a"), Identifier("b")), Identifier("c")
        )

    def test_unary_minus(self):
        """Test unary minus."""
        assert parse("-a") == UnaryOp("-", Identifier("a"))

    def test_referenced_identifiers(self):
        """Test listing identifiers in order of appearance."""
        assert referenced_identifiers("price * qty + price / rate_2") == [
            "price",
            "qty",
            "rate_2",
        ]


class TestEvaluate:
    """Tests for formula evaluation."""

    def test_example_formula(self):
        """Test a formula with parentheses and variables."""
        assert evaluate("2 * (a + b) - c", {"a": 3, "b": 4, "c": 1}) == 13

    @pytest.mark.parametrize(
        "formula, expected",
        [
            ("1 + 2 * 3", 7),
            ("(1 + 2) * 3", 9),
            ("10 - 4 - 3", 3),
            ("12 / 3 / 2", 2),
            ("2 ^ 10", 1024),
            ("2 ^ 3 ^ 2", 64),
            ("-2 ^ 2", -4),
            ("2 ^ -1", 0.5),
            ("--3", 3),
            ("-(1 + 2)", -3),
            ("+4", 4),
            ("3 * -2", -6),
            ("1.5 + .5", 2),
            ("1e3 + 2E-1", 1000.2),
            ("2024 - 30", 1994),
        ],
    )
    def test_arithmetic(self, formula, expected):
        """Test operators, precedence and associativity."""
        assert evaluate(formula, {}) == pytest.approx(expected)

    def test_whitespace_is_ignored(self):
        """Test formulas may be written without spaces."""
        assert evaluate("2*(a+b)-c", {"a": 3, "b": 4, "c": 1}) == 13

    def test_unbound_identifier(self):
        """Test unbound identifiers fail."""
        with pytest.raises(EvaluationError, match="Unbound identifier 'b'"):
            evaluate("a + b", {"a": 1})

    def test_division_by_zero(self):
        """Test division by zero fails."""
        with pytest.raises(EvaluationError, match="Division by zero"):
            evaluate("a / (b - 2)", {"a": 1, "b": 2})

    @pytest.mark.parametrize(
        "formula",
        ["", "   ", "1 +", "(1 + 2", "1 + 2)", "a b", "1 $ 2", "* 3", "()", "1..2", "2 ^"],
    )
    def test_malformed(self, formula):
        """Test malformed formulas fail."""
        with pytest.raises(EvaluationError):
            evaluate(formula, {"a": 1, "b": 2})

    @pytest.mark.parametrize("formula", ["10 ^ 400", "0 ^ -1", "(-8) ^ (1 / 3)", "1e308 * 10"])
    def test_non_finite_results(self, formula):
        """Test results that are not finite real numbers fail."""
        with pytest.raises(EvaluationError):
            evaluate(formula, {})

    def test_error_position(self):
        """Test syntax errors report where they happened."""
        with pytest.raises(EvaluationError) as excinfo:
            evaluate("1 + # 2", {})
        assert excinfo.value.position == 4

    def test_does_not_run_python(self):
        """Test Python expressions are not evaluated."""
        with pytest.raises(EvaluationError):
            evaluate("__import__('os')", {})

    @pytest.mark.parametrize(
        "formula",
        ["(" * 5000 + "1" + ")" * 5000, "-" * 5000 + "1", "2 ^ " + "-" * 5000 + "1"],
    )
    def test_deep_nesting(self, formula):
        """Test deeply nested formulas fail cleanly."""
        with pytest.raises(EvaluationError, match="nested too deeply"):
            evaluate(formula, {})

    def test_long_operator_chain(self):
        """Test very long operator chains fail cleanly instead of overflowing the stack."""
        with pytest.raises(EvaluationError, match="nested too deeply"):
            evaluate(" + ".join(["1"] * 20000), {})

    def test_moderate_nesting(self):
        """Test reasonable nesting still evaluates."""
        assert evaluate("(" * 50 + "a" + ")" * 50, {"a": 3}) == 3.0
        assert evaluate("-" * 50 + "1", {}) == 1.0
