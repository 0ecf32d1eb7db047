"""Shared type aliases used across perch modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Schema block: receives the active context and declares fields on it
Schema: TypeAlias = Callable[[Any], Any]

# Transform block: receives (value, key, options) and returns the new value
Transform: TypeAlias = Callable[..., Any]
