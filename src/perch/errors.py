"""Perch exception hierarchy.

Two disjoint kinds of failure:

- Bad *data* never raises. Coercion and presence failures are recorded
  in the result's error map and validation carries on.
- Bad *schemas* always raise ``ConfigurationError`` and abort the run,
  since the declaration itself is wrong rather than the input.

``ValidationError`` is only raised by the ``*_or_raise`` entry points,
which turn an invalid result into an exception carrying the same errors.
"""


class PerchError(Exception):
    """Base for all perch-specific errors."""


class ConfigurationError(PerchError):
    """Raised when a schema or registry is declared incorrectly.

    Unknown types, recursing into a scalar type, an untyped field with no
    transform, an unregistered validator name, or a collection operator
    used in the wrong kind of context.
    """


class ValidationError(PerchError):
    """Raised when parameters are invalid after coercion and validation.

    Attributes:
        errors: Dict mapping dotted paths to lists of error messages.
    """

    def __init__(self, errors: dict[str, list[str]]) -> None:
        self.errors = errors
        paths = ", ".join(errors)
        super().__init__(f"parameter validation failed, [{paths}] invalid.")
