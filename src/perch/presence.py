"""Presence checks for required fields.

A required field is satisfied by any value that isn't *blank*, unless the
declaration relaxes the check with ``allow_nil`` or ``allow_blank``.
"""

from collections.abc import Sized
from typing import Any

from perch.types import FieldOptions, ParamType

REQUIRED_MESSAGE = "is required"


def is_blank(value: Any) -> bool:
    """True if *value* is ``None``, ``False``, or empty.

    ``""``, ``[]`` and ``{}`` are blank; ``" "`` and ``0`` are not.
    """
    if isinstance(value, Sized):
        return len(value) == 0
    return value is None or value is False


def ensure(
    value: Any,
    options: FieldOptions,
    param_type: ParamType | None = None,
) -> str | None:
    """Return an error message if *value* doesn't satisfy a required field.

    ``allow_nil`` is checked first, since ``None`` is also blank. A boolean
    field's ``False`` is a real answer, not a missing one.
    """
    if options.allow_nil and value is None:
        return None
    if value is False and param_type is ParamType.BOOLEAN:
        return None
    if not options.allow_blank and is_blank(value):
        return REQUIRED_MESSAGE
    return None
