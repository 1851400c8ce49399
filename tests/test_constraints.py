"""Tests for constraint parsing and evaluation."""

import pytest

from lock_audit.core.constraints import (
    Constraint,
    ConstraintSet,
    normalize_range,
    parse_constraint,
    parse_range,
)


class TestParseConstraint:
    """Test single comparison parsing."""

    @pytest.mark.parametrize("expression, operator, version", [
        (">=1.2.3", ">=", "1.2.3"),
        (">= 1.2.3", ">=", "1.2.3"),
        ("<=1.0", "<=", "1.0"),
        (">2", ">", "2"),
        ("<0.5.0", "<", "0.5.0"),
        ("=1.2.3", "=", "1.2.3"),
        ("1.2.3", "=", "1.2.3"),
        ("v1.2.3", "=", "1.2.3"),
        (">=v2.0.0", ">=", "2.0.0"),
        ("  <= 4.1.0  ", "<=", "4.1.0"),
    ])
    def test_parse_comparison(self, expression, operator, version):
        """Test operator and version extraction."""
        constraint = parse_constraint(expression)
        assert constraint == Constraint(operator=operator, version=version)

    def test_longest_operator_wins(self):
        """Test that <= is not read as < followed by =1.0."""
        assert parse_constraint("<=1.0").operator == "<="

    @pytest.mark.parametrize("expression", ["", "   ", "*", " * "])
    def test_any(self, expression):
        """Test empty and wildcard expressions match anything."""
        assert parse_constraint(expression).is_any

    @pytest.mark.parametrize("expression", [">=", "<", "= ", "v", ">= v"])
    def test_missing_version_fails(self, expression):
        """Test that an operator without a version does not parse."""
        assert parse_constraint(expression) is None


class TestConstraint:
    """Test Constraint evaluation and validation."""

    def test_operators(self):
        """Test each operator against the comparator."""
        assert Constraint("=", "1.2.3").is_satisfied_by("1.2.3")
        assert not Constraint("=", "1.2.3").is_satisfied_by("1.2.4")
        assert Constraint(">", "1.0").is_satisfied_by("1.0.1")
        assert not Constraint(">", "1.0").is_satisfied_by("1.0.0")
        assert Constraint(">=", "1.0").is_satisfied_by("1.0.0")
        assert Constraint("<", "2.0.0").is_satisfied_by("1.99.0")
        assert not Constraint("<", "2.0.0").is_satisfied_by("2.0")
        assert Constraint("<=", "2.0.0").is_satisfied_by("2.0")

    def test_any_matches_everything(self):
        """Test the any constraint accepts arbitrary strings."""
        assert Constraint.any().is_satisfied_by("not-a-version")

    def test_empty_version_never_satisfies(self):
        """Test an empty installed version matches no comparison."""
        assert not Constraint("<", "9").is_satisfied_by("")

    def test_invalid_operator(self):
        """Test unsupported operators are rejected."""
        with pytest.raises(ValueError, match="Unsupported operator"):
            Constraint("!=", "1.0.0")

    def test_missing_version(self):
        """Test a comparison requires a version."""
        with pytest.raises(ValueError):
            Constraint(">=", "")

    def test_str(self):
        """Test string rendering."""
        assert str(Constraint(">=", "1.0.0")) == ">=1.0.0"
        assert str(Constraint.any()) == "*"


class TestParseRange:
    """Test compound range parsing."""

    def test_or_semantics(self):
        """Test a version matching any side satisfies the range."""
        constraints = parse_range(">=1.0.0 || <0.5.0")

        assert len(constraints) == 2
        assert constraints.is_satisfied_by("1.2.0")
        assert constraints.is_satisfied_by("0.4.9")
        assert not constraints.is_satisfied_by("0.7.0")

    @pytest.mark.parametrize("raw", [None, "", "   ", "*"])
    def test_empty_range_matches_all(self, raw):
        """Test empty and wildcard ranges degrade to match-all."""
        constraints = parse_range(raw)
        assert constraints.is_any
        assert constraints.is_satisfied_by("0.0.1")
        assert constraints.is_satisfied_by("99.0.0-anything")

    def test_failed_sides_are_dropped(self):
        """Test that unparseable sides do not poison the range."""
        constraints = parse_range(">= || 1.0.0")

        assert list(constraints) == [Constraint("=", "1.0.0")]
        assert not constraints.is_satisfied_by("2.0.0")

    def test_all_sides_failed_matches_all(self):
        """Test a range with no valid side degrades to match-all."""
        constraints = parse_range(">= || <")
        assert constraints.is_any
        assert constraints.is_satisfied_by("3.1.4")

    def test_str(self):
        """Test ranges render with the OR separator."""
        assert str(parse_range(">=1.0.0||<0.5.0")) == ">=1.0.0 || <0.5.0"

    def test_constraint_set_cannot_be_empty(self):
        """Test the never-empty invariant."""
        with pytest.raises(ValueError):
            ConstraintSet(constraints=())


class TestNormalizeRange:
    """Test declared range normalization."""

    @pytest.mark.parametrize("raw, expected", [
        ("= 1.2.3", "1.2.3"),
        ("=1.2.3", "1.2.3"),
        ("1.2.3", "1.2.3"),
        (">= 1.0 || < 2", ">=1.0 || <2"),
        ("= 1.0.1 || = 1.0.2", "1.0.1 || =1.0.2"),
        ("^ 1.2", "^1.2"),
        ("~  3.0", "~3.0"),
        ("  <=1.3.0  ", "<=1.3.0"),
        ("", "*"),
        (None, "*"),
        ("=", "*"),
    ])
    def test_normalize(self, raw, expected):
        """Test operator whitespace and leading = handling."""
        assert normalize_range(raw) == expected

    def test_bare_equals_matches_plain_version(self):
        """Test =1.2.3 behaves like 1.2.3 once normalized."""
        with_equals = parse_range(normalize_range("=1.2.3"))
        without = parse_range(normalize_range("1.2.3"))

        for version in ("1.2.3", "1.2.4", "1.2"):
            assert with_equals.is_satisfied_by(version) == without.is_satisfied_by(version)
