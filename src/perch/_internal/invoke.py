"""Invoke helpers — call user-provided callables uniformly.

Transforms may accept one to three positional arguments, and request
accessors may be ``def`` or ``async def``. Any code calling such a
callable goes through here so the introspection lives in one place.
"""

import inspect
from collections.abc import Callable
from typing import Any


def call_transform(transform: Callable[..., Any], *args: Any) -> Any:
    """Call *transform* with as many leading *args* as it accepts.

    Transforms are called as ``(value, key, options)``, but a
    ``lambda v: v.upper()`` is a perfectly good transform too::

        call_transform(str.upper, "abc", "key", options)   # "ABC"
    """
    try:
        sig = inspect.signature(transform)
    except (TypeError, ValueError):
        # builtins without a signature get the value alone
        return transform(args[0])

    params = list(sig.parameters.values())
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return transform(*args)

    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return transform(*args[: max(len(positional), 1)])


async def invoke(func: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *func* and await the result if it's awaitable.

    Works with both sync and async callables::

        form = await invoke(request.form)
    """
    result = func(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result
