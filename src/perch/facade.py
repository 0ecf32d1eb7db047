"""Entry points — run a schema and return, or raise.

Anonymous schemas::

    from perch import validate, validate_or_raise

    def search(p):
        p.param("q", required=True)
        p.param("page", int, default="1")

    result = validate(request_params, search)
    if result.is_invalid:
        ...                              # result.errors
    data = validate_or_raise(request_params, search)   # plain dict or ValidationError

Named schemas live on a ``Params`` object, registered at import time and
frozen on first use::

    params = Params()

    @params.validator("search")
    def search(p):
        p.param("q", required=True)

    params.validate(request_params, "search")
"""

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from perch._internal.types import Schema
from perch.config import ValidationConfig
from perch.context import context_for
from perch.errors import ConfigurationError, ValidationError
from perch.registry import ValidatorDef, ValidatorRegistry
from perch.result import MappingResult, SequenceResult

logger = logging.getLogger("perch.validation")


def validate(
    data: Any,
    schema: Schema,
    *,
    config: ValidationConfig | None = None,
    **overrides: Any,
) -> MappingResult | SequenceResult:
    """Validate *data* against *schema*, returning the result either way.

    Args:
        data: A mapping (or sequence) of already-decoded parameters.
        schema: A function declaring fields on the context it receives.
        config: Settings for the run. Defaults to ``ValidationConfig()``.
        **overrides: ``ValidationConfig`` fields to override for this run.

    Returns:
        The coerced data, carrying ``.errors`` and ``.is_valid``.

    Raises:
        ConfigurationError: If the schema itself is malformed, or an
            override names no ``ValidationConfig`` field.
    """
    cfg = _configure(config or ValidationConfig(), overrides)
    result = context_for(data, config=cfg).exec(schema)
    if result.is_invalid and cfg.log_failures:
        logger.debug("parameter validation failed: [%s] invalid", ", ".join(result.errors))
    return result


def _configure(config: ValidationConfig, overrides: dict[str, Any]) -> ValidationConfig:
    try:
        return config.with_overrides(**overrides)
    except TypeError as exc:
        raise ConfigurationError(str(exc)) from None


def validate_or_raise(
    data: Any,
    schema: Schema,
    *,
    config: ValidationConfig | None = None,
    **overrides: Any,
) -> dict[str, Any] | list[Any]:
    """Validate *data* against *schema*, raising if anything failed.

    Returns:
        The coerced data as a plain ``dict`` (or ``list``).

    Raises:
        ValidationError: With the full error map, if any field failed.
        ConfigurationError: If the schema itself is malformed.
    """
    result = validate(data, schema, config=config, **overrides)
    if result.is_invalid:
        raise ValidationError(result.errors)
    return result.unwrap()


@dataclass(slots=True)
class _PendingValidator:
    """A validator waiting to be compiled."""

    name: str
    schema: Schema
    options: dict[str, Any]


class Params:
    """A set of named validators, plus the entry points that run them.

    Mutable during setup (``@params.validator`` at import time).
    Frozen on the first ``validate`` call or ``registry`` access; the
    compiled ``ValidatorRegistry`` never changes afterwards.

    Thread safety:
        The freeze transition uses a Lock + double-check so exactly one
        thread compiles the registry. After that, runs share nothing
        but the frozen registry and config.
    """

    __slots__ = ("_freeze_lock", "_frozen", "_pending", "_registry", "config")

    def __init__(self, config: ValidationConfig | None = None) -> None:
        self.config: ValidationConfig = config or ValidationConfig()
        self._pending: list[_PendingValidator] = []
        self._registry: ValidatorRegistry | None = None
        self._frozen: bool = False
        self._freeze_lock: threading.Lock = threading.Lock()

    # -- Setup --

    def validator(self, name: str, **options: Any) -> Callable[[Schema], Schema]:
        """Register a schema under *name* via decorator.

        *options* are ``ValidationConfig`` overrides applied whenever this
        validator runs::

            @params.validator("tags", element_required=False)
            def tags(p):
                p.every("symbol")
        """

        def decorator(schema: Schema) -> Schema:
            self.register(name, schema, **options)
            return schema

        return decorator

    def register(self, name: str, schema: Schema, **options: Any) -> None:
        """Register *schema* under *name*. See ``validator()``."""
        self._check_not_frozen()
        try:
            self.config.with_overrides(**options)
        except TypeError as exc:
            msg = f"Validator {name!r}: {exc}"
            raise ConfigurationError(msg) from None
        self._pending.append(_PendingValidator(name, schema, dict(options)))

    @property
    def registry(self) -> ValidatorRegistry:
        """The compiled registry. Freezes this object."""
        return self._ensure_frozen()

    # -- Running --

    def validate(
        self,
        data: Any,
        schema: str | Schema,
        **overrides: Any,
    ) -> MappingResult | SequenceResult:
        """Validate *data* against a named validator or an anonymous schema.

        Raises:
            ConfigurationError: If *schema* names no registered validator.
        """
        schema, config = self._prepare(schema, overrides)
        return validate(data, schema, config=config)

    def validate_or_raise(
        self,
        data: Any,
        schema: str | Schema,
        **overrides: Any,
    ) -> dict[str, Any] | list[Any]:
        """Like ``validate()``, but raise ``ValidationError`` when invalid."""
        schema, config = self._prepare(schema, overrides)
        return validate_or_raise(data, schema, config=config)

    # -- Internal --

    def _prepare(
        self,
        schema: str | Schema,
        overrides: dict[str, Any],
    ) -> tuple[Schema, ValidationConfig]:
        if isinstance(schema, str):
            definition = self.registry.resolve(schema)
            merged = {**definition.options, **overrides}
            return definition.schema, _configure(self.config, merged)
        return schema, _configure(self.config, overrides)

    def _check_not_frozen(self) -> None:
        if self._frozen:
            msg = "Cannot register validators after the first validation run."
            raise ConfigurationError(msg)

    def _ensure_frozen(self) -> ValidatorRegistry:
        registry = self._registry
        if registry is not None:
            return registry
        with self._freeze_lock:
            if self._registry is None:
                self._registry = ValidatorRegistry(
                    ValidatorDef(p.name, p.schema, p.options) for p in self._pending
                )
                self._frozen = True
            return self._registry
