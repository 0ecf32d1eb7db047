"""Validator registry — compiled table of named schemas.

``ValidatorDef`` is the frozen definition, ``ValidatorRegistry`` the
compiled lookup table that ``Params`` builds when it freezes.

Thread safety:
    - ValidatorDef is a frozen dataclass (immutable)
    - ValidatorRegistry._validators is built once in ``__init__``, never mutated
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any

from perch._internal.types import Schema
from perch.errors import ConfigurationError


@dataclass(frozen=True, slots=True)
class ValidatorDef:
    """A named, reusable schema.

    ``options`` are ``ValidationConfig`` overrides applied whenever the
    validator runs; call-time overrides take precedence.
    """

    name: str
    schema: Schema
    options: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", MappingProxyType(dict(self.options)))


class ValidatorRegistry:
    """Immutable name → ``ValidatorDef`` table."""

    __slots__ = ("_validators",)

    def __init__(self, validators: Iterable[ValidatorDef] = ()) -> None:
        table: dict[str, ValidatorDef] = {}
        for validator in validators:
            if validator.name in table:
                msg = f"Duplicate validator name: {validator.name!r}"
                raise ConfigurationError(msg)
            table[validator.name] = validator
        self._validators = table

    def get(self, name: str) -> ValidatorDef | None:
        """Look up a validator by name. Returns ``None`` if not found."""
        return self._validators.get(name)

    def resolve(self, name: str) -> ValidatorDef:
        """Look up a validator by name.

        Raises ``ConfigurationError`` if the name is not registered.
        """
        validator = self._validators.get(name)
        if validator is None:
            msg = f"no validator is registered under {name!r}"
            raise ConfigurationError(msg)
        return validator

    def names(self) -> list[str]:
        return sorted(self._validators)

    def __iter__(self) -> Iterator[ValidatorDef]:
        return iter(self._validators.values())

    def __len__(self) -> int:
        return len(self._validators)

    def __contains__(self, name: object) -> bool:
        return name in self._validators
