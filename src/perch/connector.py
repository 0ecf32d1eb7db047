"""Request glue — validate the parameters of an incoming request.

Works with any request object shaped like a typical ASGI framework's:

- ``request.query`` — a mapping (or ``MultiValueMapping``) of query params
- ``request.method`` and ``request.content_type``
- ``request.form()`` / ``request.json()`` — sync or async body accessors

Resolution rules (by HTTP method):

- **GET / HEAD / OPTIONS**: query string only
- **POST / PUT / PATCH / DELETE**: query string, overlaid with the form
  body or JSON body (chosen by Content-Type)

Decoding the wire format is the request's job; this module only collects
the decoded values into one plain ``dict``.

Usage::

    async def create_post(request):
        data = await validate_request_or_raise(request, post_schema)
"""

import logging
from typing import Any

from perch._internal.invoke import invoke
from perch._internal.multimap import flatten
from perch._internal.types import Schema
from perch.errors import ConfigurationError
from perch.facade import Params, validate, validate_or_raise
from perch.result import MappingResult, SequenceResult

logger = logging.getLogger("perch.connector")

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})
_FORM_TYPES = frozenset({"application/x-www-form-urlencoded", "multipart/form-data"})


async def request_params(request: Any) -> dict[str, Any]:
    """Collect *request*'s query and body parameters into a plain ``dict``.

    Body values win over query values with the same key. Uploaded files
    (``form.files``) are included as-is.
    """
    params = flatten(getattr(request, "query", None) or {})

    method = (getattr(request, "method", "GET") or "GET").upper()
    if method not in _BODY_METHODS:
        return params

    content_type = (getattr(request, "content_type", None) or "").lower()
    media_type = content_type.split(";")[0].strip()

    if media_type == "application/json" or media_type.endswith("+json"):
        body = await invoke(request.json)
        if isinstance(body, dict):
            params.update(body)
        else:
            logger.debug("ignoring non-object JSON body (%s)", type(body).__name__)
    elif media_type in _FORM_TYPES:
        form = await invoke(request.form)
        params.update(flatten(form))
        params.update(getattr(form, "files", None) or {})

    return params


async def validate_request(
    request: Any,
    schema: str | Schema,
    *,
    params: Params | None = None,
    **overrides: Any,
) -> MappingResult | SequenceResult:
    """Validate *request*'s parameters, returning the result either way.

    Args:
        request: The incoming request.
        schema: A schema function, or a validator name registered on *params*.
        params: The ``Params`` holding named validators. Required when
            *schema* is a name.
        **overrides: ``ValidationConfig`` fields to override for this run.
    """
    data = await request_params(request)
    if params is not None:
        return params.validate(data, schema, **overrides)
    if isinstance(schema, str):
        msg = f"validator name {schema!r} given without a Params registry"
        raise ConfigurationError(msg)
    return validate(data, schema, **overrides)


async def validate_request_or_raise(
    request: Any,
    schema: str | Schema,
    *,
    params: Params | None = None,
    **overrides: Any,
) -> dict[str, Any] | list[Any]:
    """Like ``validate_request()``, but raise ``ValidationError`` when invalid."""
    data = await request_params(request)
    if params is not None:
        return params.validate_or_raise(data, schema, **overrides)
    if isinstance(schema, str):
        msg = f"validator name {schema!r} given without a Params registry"
        raise ConfigurationError(msg)
    return validate_or_raise(data, schema, **overrides)
