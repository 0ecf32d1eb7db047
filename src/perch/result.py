"""Validation results — coerced data and errors in one value.

A result *is* the coerced data (a ``dict`` or a ``list``, mirroring the
context that produced it) and also carries the error map::

    result = validate(params, schema)
    if result.is_invalid:
        return Template("form.html", errors=result.errors)
    page = result["page"]   # already an int

``errors`` maps dotted paths to lists of messages::

    {"title": ["is required"],
     "tags.2": ["is not a valid integer"]}

A key that failed never holds a value: it is absent from the data.
"""

from typing import Any


class Result:
    """Mixin giving a container an error map and validity predicates."""

    __slots__ = ()

    errors: dict[str, list[str]]

    @property
    def is_valid(self) -> bool:
        """True if validation passed with no errors."""
        return not self.errors

    @property
    def is_invalid(self) -> bool:
        """True if any field failed."""
        return not self.is_valid

    def add_error(self, path: str, message: str) -> None:
        """Append *message* to the messages recorded at *path*."""
        self.errors.setdefault(path, []).append(message)

    def merge_errors(self, errors: dict[str, list[str]]) -> None:
        """Fold another error map (from a nested context) into this one."""
        for path, messages in errors.items():
            self.errors.setdefault(path, []).extend(messages)


class MappingResult(Result, dict[str, Any]):
    """Result of validating a mapping. Compares equal to a plain ``dict``."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self.errors: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return f"MappingResult({dict.__repr__(self)}, errors={self.errors!r})"

    def unwrap(self) -> dict[str, Any]:
        """The coerced data as a plain ``dict``, without the error map."""
        return dict(self)


class SequenceResult(Result, list[Any]):
    """Result of validating a sequence. Compares equal to a plain ``list``.

    Lists can't have holes: ``store()`` pads with ``None`` when an earlier
    index failed, so every stored element keeps its input position.
    """

    def __init__(self, *args: Any) -> None:
        super().__init__(*args)
        self.errors: dict[str, list[str]] = {}

    def __repr__(self) -> str:
        return f"SequenceResult({list.__repr__(self)}, errors={self.errors!r})"

    def store(self, index: int, value: Any) -> None:
        """Place *value* at *index*, padding any gap with ``None``."""
        if index < len(self):
            self[index] = value
            return
        self.extend([None] * (index - len(self)))
        self.append(value)

    def unwrap(self) -> list[Any]:
        """The coerced data as a plain ``list``, without the error map."""
        return list(self)
