"""Perch — declarative coercion and validation for request parameters.

Turns loosely-typed, nested key/value data (decoded query strings, form
bodies, JSON) into typed, validated structures, collecting every failure
instead of stopping at the first.

Basic usage::

    from perch import validate

    def search(p):
        p.param("q", required=True)
        p.param("page", int, default="1")
        p.param("tags", list, lambda t: t.every("symbol"), sep=",")

    result = validate({"q": "perch", "tags": "a,b"}, search)
    result.is_valid        # True
    result["page"]         # 1
    result["tags"]         # ["a", "b"]

Raising on invalid input::

    from perch import ValidationError, validate_or_raise

    try:
        data = validate_or_raise(params, search)
    except ValidationError as exc:
        exc.errors         # {"q": ["is required"]}
"""

__version__ = "0.1.0"
__all__ = [
    "Coercion",
    "ConfigurationError",
    "Context",
    "FieldOptions",
    "MappingContext",
    "MappingResult",
    "ParamType",
    "Params",
    "PerchError",
    "Result",
    "SequenceContext",
    "SequenceResult",
    "ValidationConfig",
    "ValidationError",
    "ValidatorDef",
    "ValidatorRegistry",
    "coerce",
    "request_params",
    "validate",
    "validate_or_raise",
    "validate_request",
    "validate_request_or_raise",
]

# public name -> defining module
_LAZY: dict[str, str] = {
    "Coercion": "perch.coercion",
    "coerce": "perch.coercion",
    "ValidationConfig": "perch.config",
    "Context": "perch.context",
    "MappingContext": "perch.context",
    "SequenceContext": "perch.context",
    "ConfigurationError": "perch.errors",
    "PerchError": "perch.errors",
    "ValidationError": "perch.errors",
    "Params": "perch.facade",
    "validate": "perch.facade",
    "validate_or_raise": "perch.facade",
    "ValidatorDef": "perch.registry",
    "ValidatorRegistry": "perch.registry",
    "MappingResult": "perch.result",
    "Result": "perch.result",
    "SequenceResult": "perch.result",
    "FieldOptions": "perch.types",
    "ParamType": "perch.types",
    "request_params": "perch.connector",
    "validate_request": "perch.connector",
    "validate_request_or_raise": "perch.connector",
}


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import perch`` fast while providing a clean top-level API.
    """
    module_name = _LAZY.get(name)
    if module_name is None:
        msg = f"module 'perch' has no attribute {name!r}"
        raise AttributeError(msg)

    import importlib

    return getattr(importlib.import_module(module_name), name)
