"""Validation configuration.

ValidationConfig is a frozen dataclass — immutable after creation, shared
freely between runs, overridden per call with ``with_overrides()``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from typing import Any


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Settings for one validation run. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = ValidationConfig(path_separator="/", element_required=False)
    """

    # Separator between segments of an error path ("hash.number")
    path_separator: str = "."

    # Default ``required`` for mapping fields declared with ``param()``
    field_required: bool = False

    # Default ``required`` for sequence elements declared with ``every()``
    element_required: bool = True

    # Debug-log the invalid paths of every failed run
    log_failures: bool = True

    def with_overrides(self, **overrides: Any) -> ValidationConfig:
        """Return a copy with *overrides* applied.

        Raises ``TypeError`` for names that aren't config fields.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = sorted(set(overrides) - known)
        if unknown:
            msg = f"Unknown validation option(s): {', '.join(unknown)}"
            raise TypeError(msg)
        return replace(self, **overrides)
