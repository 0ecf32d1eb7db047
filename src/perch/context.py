"""Validation contexts — the declaration DSL.

A context is bound to one level of input (a mapping or a sequence) and
exposes the declarations a schema block makes against it. Schema blocks
are plain functions that receive the active context::

    def document(p: MappingContext) -> None:
        p.param("id", int, required=True)
        p.param("title", required=True)
        p.param("tags", list, lambda t: t.every("symbol"), sep=" ")
        p.param("content", dict, content, required=True)
        p.splat("other")

    def content(p: MappingContext) -> None:
        p.param("header")
        p.param("body", required=True)

Every declaration runs the same pipeline, in order:

1. fetch the value (absent keys take ``default``)
2. if ``required``, check presence (see ``perch.presence``)
3. coerce it (``perch.coercion``), then either recurse into a child
   context (mapping/sequence types with a schema block) or hand the raw
   value to a transform (untyped declarations with a block)
4. if a transform produced the value and ``required``, check presence again
5. run ``rules``

A failure at any step records a message at the field's dotted path and
leaves the field out of the result. Bad schemas raise
``ConfigurationError`` instead and abort the whole run.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any

from perch._internal.invoke import call_transform
from perch._internal.types import Schema, Transform
from perch.coercion import coerce
from perch.config import ValidationConfig
from perch.errors import ConfigurationError
from perch.presence import ensure
from perch.result import MappingResult, Result, SequenceResult
from perch.rules import run_rules
from perch.types import FieldOptions, ParamType, resolve_type


class Context:
    """One level of input being validated, plus the result it produces.

    Attributes:
        params: The raw mapping or sequence bound to this context. Never mutated.
        path: Dotted path of this level from the root, ``None`` at the root.
        config: Settings shared by every context in the run.
        result: The coerced data and error map built so far.
    """

    __slots__ = ("config", "params", "path", "result")

    result: Result

    def __init__(
        self,
        params: Any,
        *,
        path: str | None = None,
        config: ValidationConfig | None = None,
    ) -> None:
        self.params = params
        self.path = path
        self.config: ValidationConfig = config or ValidationConfig()

    def exec(self, schema: Schema) -> Result:
        """Run *schema* against this context and return the result."""
        schema(self)
        return self.result

    # -- DSL (overridden per context kind) --

    def param(self, key: Any, param_type: Any = None, block: Any = None, **options: Any) -> Any:
        msg = f"param() is only available in mapping contexts (at {self._where()})"
        raise ConfigurationError(msg)

    def splat(self, key: Any) -> Any:
        msg = f"splat() is only available in mapping contexts (at {self._where()})"
        raise ConfigurationError(msg)

    def every(self, param_type: Any = None, block: Any = None, **options: Any) -> Any:
        msg = f"every() is only available in sequence contexts (at {self._where()})"
        raise ConfigurationError(msg)

    # -- Pipeline --

    def _path_for(self, key: str) -> str:
        segments = (self.path, key)
        return self.config.path_separator.join(s for s in segments if s is not None)

    def _where(self) -> str:
        return self.path if self.path is not None else "root"

    def _record(self, key: str, messages: list[str]) -> None:
        path = self._path_for(key)
        for message in messages:
            self.result.add_error(path, message)

    def _resolve(
        self,
        key: str,
        value: Any,
        param_type: ParamType,
        block: Schema | Transform | None,
        options: FieldOptions,
    ) -> tuple[Any, list[str]]:
        """Run one value through the pipeline.

        Returns ``(value, [])`` on success, ``(None, messages)`` on failure.
        """
        if options.required and (error := ensure(value, options, param_type)):
            return None, [error]

        if param_type is ParamType.RAW:
            try:
                value = call_transform(block, value, key, options)
            except ValueError as exc:
                return None, [str(exc) or "is invalid"]
            if options.required and (error := ensure(value, options)):
                return None, [error]
        else:
            outcome = coerce(value, param_type, options)
            if not outcome:
                return None, [outcome.error]
            value = outcome.value
            if block is not None and value is not None:
                value = self._recurse(key, value, param_type, block)

        errors = run_rules(value, options.rules)
        if errors:
            return None, errors
        return value, []

    def _recurse(self, key: str, value: Any, param_type: ParamType, schema: Schema) -> Any:
        """Validate *value* in a child context and fold its errors into ours."""
        child_cls = MappingContext if param_type is ParamType.MAPPING else SequenceContext
        child = child_cls(value, path=self._path_for(key), config=self.config)
        child.exec(schema)
        self.result.merge_errors(child.result.errors)
        return child.result.unwrap()


class MappingContext(Context):
    """The DSL for validating a mapping (including the top-level params)."""

    __slots__ = ("_consumed",)

    result: MappingResult

    def __init__(
        self,
        params: Mapping[str, Any],
        *,
        path: str | None = None,
        config: ValidationConfig | None = None,
    ) -> None:
        super().__init__(params, path=path, config=config)
        self.result = MappingResult()
        self._consumed: set[str] = set()

    def param(
        self,
        key: Any,
        param_type: ParamType | type | str | None = None,
        block: Schema | Transform | None = None,
        **options: Any,
    ) -> Any:
        """Coerce and validate the value under *key*.

        Stores the coerced value in the result and returns it, or records
        an error at the field's path and returns ``None``.

        Args:
            key: Key in the input mapping (converted with ``str()``).
            param_type: The type to coerce into. Defaults to a string, or
                to a raw transform when *block* is given without a type.
            block: For mapping/sequence types, a schema block run against
                a child context. For untyped params, a transform called as
                ``block(value, key, options)``; raise ``ValueError`` to reject.
            **options: ``FieldOptions`` fields — ``required``, ``default``,
                ``allow_nil``, ``allow_blank``, ``base``, ``sep``, ``esep``,
                ``fsep``, ``rules``.

        Raises:
            ConfigurationError: For an unknown type, a block paired with a
                scalar type, or a raw type without a block.
        """
        key = str(key)
        resolved = _declared_type(param_type, block)
        opts = _field_options(options, self.config.field_required)
        self._consumed.add(key)

        value = self.params[key] if key in self.params else opts.default
        value, errors = self._resolve(key, value, resolved, block, opts)
        if errors:
            self._record(key, errors)
            return None

        self.result[key] = value
        return value

    def splat(self, key: Any) -> dict[str, Any]:
        """Collect every input key not yet declared with ``param()``.

        Values are stored verbatim, uncoerced, under *key*. Only keys
        declared *before* this call are excluded, so it belongs last.
        """
        key = str(key)
        rest = {k: v for k, v in self.params.items() if k not in self._consumed}
        self.result[key] = rest
        return rest


class SequenceContext(Context):
    """The DSL for validating a sequence."""

    __slots__ = ()

    result: SequenceResult

    def __init__(
        self,
        params: Sequence[Any],
        *,
        path: str | None = None,
        config: ValidationConfig | None = None,
    ) -> None:
        super().__init__(params, path=path, config=config)
        self.result = SequenceResult()

    def every(
        self,
        param_type: ParamType | type | str | None = None,
        block: Schema | Transform | None = None,
        **options: Any,
    ) -> SequenceResult:
        """Coerce and validate every element, like ``param()`` per index.

        Elements are required unless ``required=False`` is given (or the
        run's ``element_required`` config says otherwise). The index is
        the element's path segment: ``tags.3``. One bad element never
        stops the others.
        """
        resolved = _declared_type(param_type, block)
        opts = _field_options(options, self.config.element_required)

        for index, raw in enumerate(self.params):
            key = str(index)
            value, errors = self._resolve(key, raw, resolved, block, opts)
            if errors:
                self._record(key, errors)
                continue
            self.result.store(index, value)
        return self.result


def context_for(
    params: Any,
    *,
    path: str | None = None,
    config: ValidationConfig | None = None,
) -> MappingContext | SequenceContext:
    """Create the right kind of context for *params*.

    Raises ``ConfigurationError`` if *params* is neither a mapping nor a
    sequence.
    """
    if isinstance(params, Mapping):
        return MappingContext(params, path=path, config=config)
    if isinstance(params, Sequence) and not isinstance(params, (str, bytes, bytearray)):
        return SequenceContext(params, path=path, config=config)
    msg = f"cannot validate {type(params).__name__}: expected a mapping or a sequence"
    raise ConfigurationError(msg)


def _declared_type(
    param_type: ParamType | type | str | None,
    block: Schema | Transform | None,
) -> ParamType:
    """Resolve a declaration's type, rejecting impossible combinations."""
    if param_type is None:
        return ParamType.STRING if block is None else ParamType.RAW

    resolved = resolve_type(param_type)
    if resolved is ParamType.RAW and block is None:
        msg = "an untyped param needs a transform block"
        raise ConfigurationError(msg)
    if block is not None and not (resolved.is_structural or resolved is ParamType.RAW):
        msg = f"cannot recurse into {resolved.value}"
        raise ConfigurationError(msg)
    return resolved


def _field_options(options: dict[str, Any], default_required: bool) -> FieldOptions:
    options.setdefault("required", default_required)
    try:
        return FieldOptions(**options)
    except TypeError as exc:
        msg = f"invalid field options: {exc}"
        raise ConfigurationError(msg) from None
