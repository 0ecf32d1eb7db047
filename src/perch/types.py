"""Parameter types and per-field options.

``ParamType`` is the closed set of types a field can be coerced into.
Declarations may name a type three ways, all resolved by ``resolve_type()``::

    ctx.param("page", ParamType.INTEGER)
    ctx.param("page", int)
    ctx.param("page", "int")
"""

from __future__ import annotations

import datetime
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

from perch.errors import ConfigurationError

if TYPE_CHECKING:
    from perch.rules import Rule


class ParamType(Enum):
    """Every type the coercion rulebook knows how to produce."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    SYMBOL = "symbol"
    DATE = "date"
    TIME = "time"
    DATETIME = "datetime"
    MAPPING = "mapping"
    SEQUENCE = "sequence"
    RAW = "raw"

    @property
    def is_temporal(self) -> bool:
        return self in TEMPORAL_TYPES

    @property
    def is_structural(self) -> bool:
        """True for types a schema block can recurse into."""
        return self in (ParamType.MAPPING, ParamType.SEQUENCE)


TEMPORAL_TYPES: frozenset[ParamType] = frozenset(
    {ParamType.DATE, ParamType.TIME, ParamType.DATETIME}
)

# Python types accepted in place of a ParamType.
# datetime must precede date: datetime is a date subclass, but lookups are exact.
PYTHON_TYPES: dict[type, ParamType] = {
    str: ParamType.STRING,
    int: ParamType.INTEGER,
    float: ParamType.FLOAT,
    bool: ParamType.BOOLEAN,
    datetime.datetime: ParamType.DATETIME,
    datetime.date: ParamType.DATE,
    datetime.time: ParamType.TIME,
    dict: ParamType.MAPPING,
    list: ParamType.SEQUENCE,
    tuple: ParamType.SEQUENCE,
    object: ParamType.RAW,
}

# String aliases accepted in place of a ParamType (case-insensitive).
ALIASES: dict[str, ParamType] = {
    **{t.value: t for t in ParamType},
    "str": ParamType.STRING,
    "int": ParamType.INTEGER,
    "bool": ParamType.BOOLEAN,
    "atom": ParamType.SYMBOL,
    "hash": ParamType.MAPPING,
    "dict": ParamType.MAPPING,
    "array": ParamType.SEQUENCE,
    "list": ParamType.SEQUENCE,
    "any": ParamType.RAW,
}


def resolve_type(spec: ParamType | type | str) -> ParamType:
    """Map a type declaration onto ``ParamType``.

    Raises ``ConfigurationError`` if *spec* names no known type.
    """
    if isinstance(spec, ParamType):
        return spec
    if isinstance(spec, str):
        resolved = ALIASES.get(spec.lower())
    elif isinstance(spec, type):
        resolved = PYTHON_TYPES.get(spec)
    else:
        resolved = None
    if resolved is None:
        msg = f"unknown type {spec!r}"
        raise ConfigurationError(msg)
    return resolved


@dataclass(frozen=True, slots=True)
class FieldOptions:
    """Options for a single ``param()`` or ``every()`` declaration.

    Attributes:
        required: The value must be present (see ``perch.presence``).
        default: Substituted when the key is absent from the input.
        allow_nil: A required field given ``None`` still counts as present.
        allow_blank: A required field given a blank value counts as present.
        base: Radix for integer parsing. ``None`` detects it from the prefix.
        sep: Split a scalar string into a sequence on this separator.
        esep: Split a scalar string into entries on this separator...
        fsep: ...then split each entry once into key and value on this one.
        rules: Checks run against the coerced value, in order.
    """

    required: bool = False
    default: Any = None
    allow_nil: bool = False
    allow_blank: bool = False
    base: int | None = None
    sep: str | None = None
    esep: str | None = None
    fsep: str | None = None
    rules: Sequence[Rule] = ()

    def __post_init__(self) -> None:
        if self.base is not None and self.base != 0 and not 2 <= self.base <= 36:
            msg = f"integer base must be between 2 and 36, got {self.base}"
            raise ConfigurationError(msg)
        object.__setattr__(self, "rules", tuple(self.rules))
