"""Tests for perch.registry — ValidatorDef and ValidatorRegistry."""

import pytest

from perch.errors import ConfigurationError
from perch.registry import ValidatorDef, ValidatorRegistry


def demo(p) -> None:
    p.param("num", int)


def other(p) -> None:
    p.param("q", required=True)


class TestValidatorDef:
    def test_frozen(self) -> None:
        definition = ValidatorDef("demo", demo)
        with pytest.raises(AttributeError):
            definition.name = "renamed"  # type: ignore[misc]

    def test_default_options(self) -> None:
        assert ValidatorDef("demo", demo).options == {}

    def test_options_are_read_only(self) -> None:
        source = {"element_required": False}
        definition = ValidatorDef("demo", demo, source)

        with pytest.raises(TypeError):
            definition.options["field_required"] = True  # type: ignore[index]
        source["field_required"] = True
        assert dict(definition.options) == {"element_required": False}


class TestValidatorRegistry:
    def test_lookup(self) -> None:
        registry = ValidatorRegistry([ValidatorDef("demo", demo)])

        assert registry.get("demo").schema is demo
        assert registry.resolve("demo").schema is demo
        assert registry.get("missing") is None

    def test_resolve_unknown(self) -> None:
        registry = ValidatorRegistry()
        with pytest.raises(ConfigurationError, match="no validator is registered under 'nope'"):
            registry.resolve("nope")

    def test_duplicate_names(self) -> None:
        with pytest.raises(ConfigurationError, match="Duplicate"):
            ValidatorRegistry([ValidatorDef("demo", demo), ValidatorDef("demo", other)])

    def test_container_protocol(self) -> None:
        registry = ValidatorRegistry([ValidatorDef("other", other), ValidatorDef("demo", demo)])

        assert len(registry) == 2
        assert "demo" in registry
        assert "nope" not in registry
        assert registry.names() == ["demo", "other"]
        assert [d.name for d in registry] == ["other", "demo"]
