"""MultiValueMapping protocol — what the connector expects of query/form objects.

A structural protocol so any framework's query-string or form container
works without coupling to a concrete type.
"""

from collections.abc import Iterator
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MultiValueMapping(Protocol):
    """A read-only string mapping where keys can have multiple values.

    ``__getitem__`` returns the first value for a key.
    ``get_list`` returns all values for a key.
    """

    def __getitem__(self, key: str) -> Any: ...
    def __contains__(self, key: object) -> bool: ...
    def __iter__(self) -> Iterator[str]: ...
    def __len__(self) -> int: ...
    def get_list(self, key: str) -> list[Any]: ...


def flatten(mapping: Any) -> dict[str, Any]:
    """Copy *mapping* into a plain ``dict``.

    Multi-valued keys become lists; single values stay scalars::

        flatten(request.query)   # ?tag=a&tag=b&q=x -> {"tag": ["a", "b"], "q": "x"}
    """
    if isinstance(mapping, MultiValueMapping):
        flat: dict[str, Any] = {}
        for key in mapping:
            values = mapping.get_list(key)
            flat[key] = values[0] if len(values) == 1 else values
        return flat
    return dict(mapping)
