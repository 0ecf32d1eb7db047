"""Built-in value rules for ``param(..., rules=[...])``.

Rules run after a value has been coerced, so they see typed values —
an ``int`` for an integer param, a ``list`` for a sequence. Each rule
is a callable with the signature::

    def rule(value: Any) -> str | None:
        '''Return an error message, or None if valid.'''

Parameterized rules are factory functions that return a rule::

    def max_length(n: int) -> Rule:
        def check(value: Any) -> str | None:
            if len(value) > n:
                return f"must be at most {n} long"
            return None
        return check

Rules never see ``None``: optional fields that resolved to ``None`` skip
their rules entirely. Custom rules follow the same protocol.
"""

import re
from collections.abc import Callable, Collection
from typing import Any

# Type alias for a rule function
type Rule = Callable[[Any], str | None]


def run_rules(value: Any, rules: Collection[Rule]) -> list[str]:
    """Run every rule against *value*, returning all failure messages."""
    if value is None:
        return []
    errors: list[str] = []
    for rule in rules:
        error = rule(value)
        if error is not None:
            errors.append(error)
    return errors


# ---------------------------------------------------------------------------
# Length
# ---------------------------------------------------------------------------


def max_length(n: int) -> Rule:
    """Value (string or collection) must have at most *n* items."""

    def check(value: Any) -> str | None:
        if len(value) > n:
            return f"must be at most {n} long"
        return None

    return check


def min_length(n: int) -> Rule:
    """Value (string or collection) must have at least *n* items."""

    def check(value: Any) -> str | None:
        if len(value) < n:
            return f"must be at least {n} long"
        return None

    return check


# ---------------------------------------------------------------------------
# Range
# ---------------------------------------------------------------------------


def at_least(bound: Any) -> Rule:
    """Value must be greater than or equal to *bound*."""

    def check(value: Any) -> str | None:
        if value < bound:
            return f"must be at least {bound}"
        return None

    return check


def at_most(bound: Any) -> Rule:
    """Value must be less than or equal to *bound*."""

    def check(value: Any) -> str | None:
        if value > bound:
            return f"must be at most {bound}"
        return None

    return check


# ---------------------------------------------------------------------------
# Format
# ---------------------------------------------------------------------------

# Basic email pattern: structure only, not deliverability
_EMAIL_RE = re.compile(r"^[a-zA-Z0-9._%+\-]+@[a-zA-Z0-9.\-]+\.[a-zA-Z]{2,}$")


def email(value: Any) -> str | None:
    """Value must be a valid email address (basic format check)."""
    if not isinstance(value, str) or not _EMAIL_RE.match(value):
        return "must be a valid email address"
    return None


# Basic URL pattern: http(s) scheme plus a host
_URL_RE = re.compile(r"^https?://[^\s/$.?#].\S*$", re.IGNORECASE)


def url(value: Any) -> str | None:
    """Value must be a valid URL (http/https)."""
    if not isinstance(value, str) or not _URL_RE.match(value):
        return "must be a valid URL"
    return None


def matches(pattern: str, message: str | None = None) -> Rule:
    """Value must match the given regex pattern."""
    compiled = re.compile(pattern)

    def check(value: Any) -> str | None:
        if not isinstance(value, str) or not compiled.match(value):
            return message or f"must match pattern: {pattern}"
        return None

    return check


# ---------------------------------------------------------------------------
# Choice
# ---------------------------------------------------------------------------


def one_of(*choices: Any) -> Rule:
    """Value must be one of the given choices."""
    allowed = frozenset(choices)

    def check(value: Any) -> str | None:
        if value not in allowed:
            options = ", ".join(sorted(str(c) for c in allowed))
            return f"must be one of: {options}"
        return None

    return check


def satisfies(predicate: Callable[[Any], bool], message: str) -> Rule:
    """Value must make *predicate* return true."""

    def check(value: Any) -> str | None:
        return None if predicate(value) else message

    return check
