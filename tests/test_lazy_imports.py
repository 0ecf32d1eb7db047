"""Tests for perch.__init__ — lazy import registry covers all public names."""


import pytest

import perch


@pytest.mark.parametrize("name", perch.__all__)
def test_all_names_resolve(name: str) -> None:
    """Every name in __all__ must resolve via __getattr__ without error."""
    obj = getattr(perch, name)
    assert obj is not None, f"perch.{name} resolved to None"


def test_all_names_in_lazy_registry() -> None:
    missing = set(perch.__all__) - set(perch._LAZY)
    assert not missing, f"Names in __all__ but not in _LAZY: {sorted(missing)}"


def test_lazy_registry_no_extras() -> None:
    extras = set(perch._LAZY) - set(perch.__all__)
    assert not extras, f"Names in _LAZY but not in __all__: {sorted(extras)}"


def test_unknown_name_raises_attribute_error() -> None:
    with pytest.raises(AttributeError, match="no attribute"):
        perch.__getattr__("ThisDoesNotExist")
