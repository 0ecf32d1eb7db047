"""Tests for perch.rules — composable value rules."""

from perch.rules import (
    at_least,
    at_most,
    email,
    matches,
    max_length,
    min_length,
    one_of,
    run_rules,
    satisfies,
    url,
)

# ---------------------------------------------------------------------------
# Individual rule tests
# ---------------------------------------------------------------------------


class TestMaxLength:
    def test_within_limit(self) -> None:
        assert max_length(5)("hello") is None

    def test_exceeds_limit(self) -> None:
        assert max_length(5)("123456") == "must be at most 5 long"

    def test_collections(self) -> None:
        assert max_length(2)([1, 2]) is None
        assert max_length(2)([1, 2, 3]) is not None


class TestMinLength:
    def test_at_minimum(self) -> None:
        assert min_length(3)("abc") is None

    def test_below_minimum(self) -> None:
        assert min_length(3)("ab") == "must be at least 3 long"


class TestRange:
    def test_at_least(self) -> None:
        assert at_least(1)(1) is None
        assert at_least(1)(0) == "must be at least 1"

    def test_at_most(self) -> None:
        assert at_most(10)(10) is None
        assert at_most(10)(11) == "must be at most 10"


class TestEmail:
    def test_valid(self) -> None:
        assert email("user@example.com") is None
        assert email("first.last@sub.domain.org") is None

    def test_invalid(self) -> None:
        assert email("userexample.com") is not None
        assert email("user@") is not None
        assert email(42) is not None


class TestUrl:
    def test_valid(self) -> None:
        assert url("https://example.com") is None
        assert url("http://example.com/path?q=1") is None

    def test_invalid(self) -> None:
        assert url("example.com") is not None
        assert url("ftp://example.com") is not None


class TestMatches:
    def test_valid_pattern(self) -> None:
        assert matches(r"^\d{3}$")("123") is None

    def test_invalid_pattern(self) -> None:
        assert matches(r"^\d{3}$")("12") is not None

    def test_custom_message(self) -> None:
        assert matches(r"^\d+$", message="numbers only")("abc") == "numbers only"


class TestOneOf:
    def test_valid_choice(self) -> None:
        assert one_of("red", "green", "blue")("red") is None

    def test_invalid_choice(self) -> None:
        assert one_of("red", "green")("purple") == "must be one of: green, red"

    def test_typed_choices(self) -> None:
        assert one_of(10, 20, 50)(20) is None


class TestSatisfies:
    def test_predicate(self) -> None:
        even = satisfies(lambda n: n % 2 == 0, "must be even")
        assert even(4) is None
        assert even(3) == "must be even"


# ---------------------------------------------------------------------------
# run_rules
# ---------------------------------------------------------------------------


class TestRunRules:
    def test_collects_every_failure(self) -> None:
        errors = run_rules("ab", [min_length(3), matches(r"^\d+$", "digits only")])
        assert errors == ["must be at least 3 long", "digits only"]

    def test_none_skips_rules(self) -> None:
        assert run_rules(None, [min_length(3)]) == []

    def test_no_rules(self) -> None:
        assert run_rules("anything", ()) == []
