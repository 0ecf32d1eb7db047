"""Type coercion rulebook.

``coerce()`` turns a raw value (usually a string from a query string or
form body) into the declared ``ParamType``.  It never raises for bad
data — failures come back as a ``Coercion`` carrying an error message::

    coerce("42", ParamType.INTEGER)        # Coercion(value=42)
    coerce("0xff", ParamType.INTEGER)      # Coercion(value=255)
    coerce("nope", ParamType.BOOLEAN)      # Coercion(error="is not a valid boolean")

Only an unknown type raises, with ``ConfigurationError``.

Rules, in order:

1. ``None`` passes through untouched. Presence is ``perch.presence``'s job.
2. A value that is already of the target type is returned as-is.
3. Otherwise the converter registered for the type in ``CONVERTERS`` runs.
"""

from __future__ import annotations

import datetime
import math
import re
import sys
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any

from perch.errors import ConfigurationError
from perch.types import FieldOptions, ParamType, resolve_type

type Converter = Callable[[Any, FieldOptions], Any]


@dataclass(frozen=True, slots=True)
class Coercion:
    """The outcome of coercing one value.

    Truthy on success, so you can write::

        outcome = coerce(raw, ParamType.INTEGER)
        if not outcome:
            errors.append(outcome.error)
    """

    value: Any = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def __bool__(self) -> bool:
        return self.ok


def coerce(
    value: Any,
    param_type: ParamType | type | str,
    options: FieldOptions | None = None,
) -> Coercion:
    """Coerce *value* into *param_type*.

    Args:
        value: The raw value — a string, an already-decoded primitive,
            a mapping, or a sequence.
        param_type: The target type, as anything ``resolve_type()`` accepts.
        options: Field options; ``base``, ``sep``, ``esep`` and ``fsep``
            are consulted here.

    Returns:
        A ``Coercion`` with the typed value, or with an error message.

    Raises:
        ConfigurationError: If *param_type* isn't a known type.
    """
    if value is None:
        return Coercion(None)

    param_type = resolve_type(param_type)
    if _is_native(value, param_type):
        return Coercion(value)

    converter = CONVERTERS.get(param_type)
    if converter is None:
        msg = f"unknown type {param_type!r}"
        raise ConfigurationError(msg)

    try:
        return Coercion(converter(value, options or FieldOptions()))
    except ValueError as exc:
        return Coercion(error=str(exc))


def _is_native(value: Any, param_type: ParamType) -> bool:
    """True if *value* already satisfies *param_type* without conversion."""
    match param_type:
        case ParamType.STRING:
            return isinstance(value, str)
        case ParamType.INTEGER:
            # bool is an int subclass, but True is not a valid integer param
            return isinstance(value, int) and not isinstance(value, bool)
        case ParamType.FLOAT:
            return isinstance(value, float)
        case ParamType.BOOLEAN:
            return isinstance(value, bool)
        case ParamType.DATE:
            return isinstance(value, datetime.date) and not isinstance(value, datetime.datetime)
        case ParamType.TIME:
            return isinstance(value, datetime.time)
        case ParamType.DATETIME:
            return isinstance(value, datetime.datetime)
        case ParamType.MAPPING:
            return isinstance(value, Mapping)
        case ParamType.SEQUENCE:
            return _is_sequence(value)
        case ParamType.RAW:
            return True
        case _:
            # symbols are always re-interned
            return False


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray))


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def _to_string(value: Any, options: FieldOptions) -> str:
    if isinstance(value, (bytes, bytearray)):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            raise ValueError("is not valid UTF-8 text") from None
    if isinstance(value, Mapping) or _is_sequence(value):
        raise ValueError("is not a string")
    return str(value)


def _to_symbol(value: Any, options: FieldOptions) -> str:
    if not isinstance(value, str):
        raise ValueError("is not a valid symbol")
    return sys.intern(value)


# Ruby/C-style octal literal: a leading zero followed by octal digits
_OCTAL_RE = re.compile(r"^[+-]?0[0-7]+$")


def _to_integer(value: Any, options: FieldOptions) -> int:
    if isinstance(value, float):
        if value.is_integer():
            return int(value)
        raise ValueError("is not a whole number")
    if not isinstance(value, str):
        raise ValueError("is not a valid integer")

    text = value.strip()
    base = options.base
    if not base:
        base = 8 if _OCTAL_RE.match(text) else 0

    try:
        return int(text, base)
    except ValueError:
        if options.base:
            raise ValueError(f"is not a valid base-{options.base} integer") from None
        raise ValueError("is not a valid integer") from None


def _to_float(value: Any, options: FieldOptions) -> float:
    if isinstance(value, int) and not isinstance(value, bool):
        return float(value)
    if not isinstance(value, str):
        raise ValueError("is not a valid number")
    try:
        result = float(value)
    except ValueError:
        raise ValueError("is not a valid number") from None
    if not math.isfinite(result):
        raise ValueError("is not a finite number")
    return result


_FALSE_STRINGS = frozenset({"0", "f", "false", "n", "no"})
_TRUE_STRINGS = frozenset({"1", "t", "true", "y", "yes"})


def _to_boolean(value: Any, options: FieldOptions) -> bool:
    if isinstance(value, str):
        lowered = value.lower()
        if lowered in _FALSE_STRINGS:
            return False
        if lowered in _TRUE_STRINGS:
            return True
    raise ValueError("is not a valid boolean")


# ---------------------------------------------------------------------------
# Temporal
# ---------------------------------------------------------------------------

# (parser, human name) for each temporal type; parsers take ISO 8601 strings
TEMPORAL_PARSERS: dict[ParamType, tuple[Callable[[str], Any], str]] = {
    ParamType.DATE: (datetime.date.fromisoformat, "date"),
    ParamType.TIME: (datetime.time.fromisoformat, "time"),
    ParamType.DATETIME: (datetime.datetime.fromisoformat, "date and time"),
}


def _temporal(param_type: ParamType) -> Converter:
    parse, name = TEMPORAL_PARSERS[param_type]

    def convert(value: Any, options: FieldOptions) -> Any:
        if param_type is ParamType.DATE and isinstance(value, datetime.datetime):
            return value.date()
        if not isinstance(value, str):
            raise ValueError(f"is not a valid {name}")
        try:
            return parse(value.strip())
        except ValueError:
            raise ValueError(f"is not a valid {name}") from None

    return convert


# ---------------------------------------------------------------------------
# Structures
# ---------------------------------------------------------------------------


def _split(text: str, sep: str) -> list[str]:
    """Split like Ruby's ``String#split``: no trailing empty parts.

    A single space splits on runs of whitespace.
    """
    if sep == " ":
        return text.split()
    parts = text.split(sep)
    while parts and parts[-1] == "":
        parts.pop()
    return parts


def _to_sequence(value: Any, options: FieldOptions) -> list[str]:
    if isinstance(value, str) and options.sep is not None:
        return _split(value, options.sep)
    raise ValueError("is not a list")


def _to_mapping(value: Any, options: FieldOptions) -> dict[str, str]:
    if isinstance(value, str) and options.esep is not None and options.fsep is not None:
        pairs: dict[str, str] = {}
        for entry in _split(value, options.esep):
            key, found, item = entry.partition(options.fsep)
            if not found:
                raise ValueError(f"has an entry without {options.fsep!r}: {entry!r}")
            pairs[key] = item
        return pairs
    raise ValueError("is not a mapping")


def _to_raw(value: Any, options: FieldOptions) -> Any:
    return value


CONVERTERS: dict[ParamType, Converter] = {
    ParamType.STRING: _to_string,
    ParamType.INTEGER: _to_integer,
    ParamType.FLOAT: _to_float,
    ParamType.BOOLEAN: _to_boolean,
    ParamType.SYMBOL: _to_symbol,
    ParamType.DATE: _temporal(ParamType.DATE),
    ParamType.TIME: _temporal(ParamType.TIME),
    ParamType.DATETIME: _temporal(ParamType.DATETIME),
    ParamType.MAPPING: _to_mapping,
    ParamType.SEQUENCE: _to_sequence,
    ParamType.RAW: _to_raw,
}
